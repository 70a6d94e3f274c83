# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.tasks",
#   "purpose": "Create Tasks, transition their status with results or errors, and answer Task lookups",
#   "sections": [
#     {"id": "taskinfo", "name": "TaskInfo", "anchor": "class-taskinfo", "kind": "class"},
#     {"id": "create-task", "name": "create_task", "anchor": "function-create-task", "kind": "function"},
#     {"id": "update-task-status", "name": "update_task_status", "anchor": "function-update-task-status", "kind": "function"},
#     {"id": "get-task-info-from-remote-data-object", "name": "get_task_info_from_remote_data_object", "anchor": "function-get-task-info-from-remote-data-object", "kind": "function"},
#     {"id": "container-lookups", "name": "Container Lookups", "anchor": "CNT", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Task lifecycle.

A Task is one ordered step of a Job: ``scheduled -> busy -> success|failed``.
Its ``task:index`` is supplied by the caller and stored as an integer without
any uniqueness or contiguity check; ordering is the job-controller's concern.

Containers are written together with the fact that references them: the
input container in the same INSERT as the Task, the results container in the
same update as the ``success`` transition. An error link is likewise only
written with the ``failed`` transition.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional

from rdflib import Literal, URIRef
from rdflib.term import Identifier

from .constants import (
    ADMS,
    BASES,
    DCT,
    MU,
    RDF,
    SPARQL_PREFIXES,
    TASK,
    TASK_STATUSES,
    Status,
)
from .containers import EMPTY_CONTENTS, ContainerContents, ContainerRole, build_container
from .lifecycle import is_status, require_status, status_update_query
from .store import GraphStore
from .terms import (
    FactListBuilder,
    UriLike,
    as_uri,
    integer,
    mint_uri,
    now,
    render_triples,
    sparql_term,
    string,
)

__all__ = [
    "TaskInfo",
    "create_task",
    "get_input_files_from_task",
    "get_remote_data_objects_from_task",
    "get_results_files_from_task",
    "get_task_info_from_remote_data_object",
    "update_task_status",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaskInfo:
    """The download Task responsible for a remote data object."""

    task: URIRef
    job: URIRef
    status: URIRef
    submission_graph: URIRef
    file: Optional[URIRef] = None
    error_message: Optional[str] = None

    @classmethod
    def from_binding(cls, row: Mapping[str, Identifier]) -> "TaskInfo":
        message = row.get("errorMsg")
        file = row.get("file")
        return cls(
            task=URIRef(row["task"]),
            job=URIRef(row["job"]),
            status=URIRef(row["status"]),
            submission_graph=URIRef(row["submissionGraph"]),
            file=URIRef(file) if file is not None else None,
            error_message=str(message) if isinstance(message, Literal) else None,
        )


async def create_task(
    store: GraphStore,
    operation: UriLike,
    creator: UriLike,
    status: UriLike,
    index: int,
    job: UriLike,
    inputs: ContainerContents,
    cogs_operation: UriLike,
    graph: UriLike,
) -> URIRef:
    """Create a Task, and its input container when there are inputs.

    Args:
        store: Graph store to write to.
        operation: Task operation used by a job-controller to place the step.
        creator: Service creating the Task.
        status: Initial status, usually ``scheduled`` or ``busy``.
        index: Position among the Job's Tasks. Not validated.
        job: Parent Job.
        inputs: Files and remote data objects for the input container. Pass
            an empty :class:`ContainerContents` for a Task without inputs.
        cogs_operation: Task operation from the Cogs ontology.
        graph: Named graph receiving the Task.

    Returns:
        IRI of the new Task.

    Raises:
        ValueError: If ``status`` is not a Task status. Nothing is written.
        StoreWriteError: If the store rejects the insert. Nothing is written.
    """
    status = require_status(status, TASK_STATUSES)
    task, task_uuid = mint_uri(BASES["task"])
    timestamp = now()
    builder = FactListBuilder()
    builder.add(task, RDF.type, TASK.Task)
    builder.add(task, MU.uuid, string(task_uuid))
    builder.add(task, ADMS.status, as_uri(status))
    builder.add(task, DCT.created, timestamp)
    builder.add(task, DCT.modified, timestamp)
    builder.add(task, TASK.cogsOperation, as_uri(cogs_operation))
    builder.add(task, TASK.operation, as_uri(operation))
    builder.add(task, DCT.creator, as_uri(creator))
    builder.add(task, TASK["index"], integer(index))
    builder.add(task, DCT.isPartOf, as_uri(job))

    container = build_container(inputs, ContainerRole.INPUT, creator)
    builder.extend(container.linked_to(task))

    await store.update(
        f"""
    {SPARQL_PREFIXES}
    INSERT DATA {{
      GRAPH {sparql_term(as_uri(graph))} {{
{render_triples(builder.build())}
      }}
    }}"""
    )
    logger.info(
        "Created task",
        extra={"stage": "tasks", "entity": task, "status": as_uri(status)},
    )
    return task


async def update_task_status(
    store: GraphStore,
    task: UriLike,
    status: UriLike,
    creator: UriLike,
    results: ContainerContents = EMPTY_CONTENTS,
    error: Optional[UriLike] = None,
) -> None:
    """Move ``task`` to ``status``, attaching results or an error.

    On ``success`` with non-empty ``results`` a results container is built and
    linked; on ``failed`` with an ``error`` the error is linked. Both are part
    of the same update as the status change. A Task without a current status
    is left untouched and no exception is raised.

    Raises:
        ValueError: If ``status`` is not a Task status. Nothing is written.
        StoreWriteError: If the store rejects the update.
    """
    task_uri = as_uri(task)
    status = require_status(status, TASK_STATUSES)
    extra = FactListBuilder()
    if error is not None and is_status(status, Status.FAILED):
        extra.add(task_uri, TASK.error, as_uri(error))
    if is_status(status, Status.SUCCESS):
        container = build_container(results, ContainerRole.RESULTS, creator)
        extra.extend(container.linked_to(task_uri))

    await store.update(status_update_query(task_uri, status, extra.build()))
    logger.info(
        "Updated task status",
        extra={"stage": "tasks", "entity": task_uri, "status": as_uri(status)},
    )


async def get_task_info_from_remote_data_object(
    store: GraphStore, remote_data_object: UriLike
) -> Optional[TaskInfo]:
    """Find the download Task that fetches ``remote_data_object``.

    The chain followed is activity ``nie:hasPart`` remote data object, Job
    ``prov:generatedBy`` activity, Task ``dct:isPartOf`` Job with the download
    operation. The first link is made by the download service and is not part
    of this package's own model; when it is missing the result is ``None``.
    """
    rdo = sparql_term(as_uri(remote_data_object))
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?task ?job ?status ?submissionGraph ?file ?errorMsg WHERE {{
      ?melding nie:hasPart {rdo} .
      GRAPH ?submissionGraph {{
        ?job prov:generatedBy ?melding .
        ?task
          dct:isPartOf ?job ;
          task:operation tasko:download ;
          adms:status ?status .
      }}
      OPTIONAL {{ ?file nie:dataSource {rdo} . }}
      OPTIONAL {{ {rdo} ext:cacheError ?errorMsg . }}
    }}
    LIMIT 1"""
    )
    if not rows:
        return None
    return TaskInfo.from_binding(rows[0])


# --- Container Lookups -----------------------------------------------------


async def _container_members(
    store: GraphStore, task: UriLike, role: ContainerRole, path: str, variable: str
) -> List[URIRef]:
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT DISTINCT ?{variable} WHERE {{
      {sparql_term(as_uri(task))}
        task:{role.value} ?container .
      ?container
        {path} ?{variable} .
    }}"""
    )
    return [row[variable] for row in rows if isinstance(row.get(variable), URIRef)]


async def get_input_files_from_task(store: GraphStore, task: UriLike) -> List[URIRef]:
    """Return the Files in the Task's input container (empty if none)."""
    return await _container_members(store, task, ContainerRole.INPUT, "task:hasFile", "file")


async def get_results_files_from_task(store: GraphStore, task: UriLike) -> List[URIRef]:
    """Return the Files in the Task's results container(s)."""
    return await _container_members(store, task, ContainerRole.RESULTS, "task:hasFile", "file")


async def get_remote_data_objects_from_task(
    store: GraphStore,
    task: UriLike,
    role: ContainerRole = ContainerRole.INPUT,
) -> List[URIRef]:
    """Return the remote data objects in the Task's harvesting collection."""
    return await _container_members(
        store, task, role, "task:hasHarvestingCollection/dct:hasPart", "remoteDataObject"
    )
