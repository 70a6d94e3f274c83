# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.jobs",
#   "purpose": "Create Jobs, transition their status, and report status by originating activity",
#   "sections": [
#     {"id": "create-job", "name": "create_job", "anchor": "function-create-job", "kind": "function"},
#     {"id": "update-job-status", "name": "update_job_status", "anchor": "function-update-job-status", "kind": "function"},
#     {"id": "get-job-status-from-activity", "name": "get_job_status_from_activity", "anchor": "function-get-job-status-from-activity", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Job lifecycle.

A Job is one run of the submission pipeline. It starts ``busy`` and is moved
to ``success`` or ``failed`` by :func:`update_job_status`; nothing prevents a
later transition from replacing a terminal status.
"""

from __future__ import annotations

import logging
from typing import Optional

from rdflib import Graph, URIRef

from .constants import (
    ADMS,
    BASES,
    COGS,
    DCT,
    JOB_STATUSES,
    MU,
    PROV,
    RDF,
    SPARQL_PREFIXES,
    TASK,
    Status,
)
from .lifecycle import is_status, require_status, status_update_query
from .store import GraphStore
from .terms import (
    FactListBuilder,
    UriLike,
    as_uri,
    mint_uri,
    now,
    render_triples,
    sparql_term,
    string,
)

__all__ = ["create_job", "get_job_status_from_activity", "update_job_status"]

logger = logging.getLogger(__name__)


async def create_job(
    store: GraphStore,
    operation: UriLike,
    activity: UriLike,
    creator: UriLike,
    cogs_operation: UriLike,
    graph: UriLike,
) -> URIRef:
    """Create a ``busy`` Job and store it in ``graph``.

    Args:
        store: Graph store to write to.
        operation: Job operation distinguishing this kind of Job.
        activity: Resource (submission, notification, ...) that triggered it.
        creator: Service creating the Job.
        cogs_operation: Job operation from the Cogs ontology.
        graph: Named graph receiving the Job.

    Returns:
        IRI of the new Job.

    Raises:
        StoreWriteError: If the store rejects the insert.
    """
    job, job_uuid = mint_uri(BASES["job"])
    timestamp = now()
    builder = FactListBuilder()
    builder.add(job, RDF.type, COGS.Job)
    builder.add(job, MU.uuid, string(job_uuid))
    builder.add(job, DCT.creator, as_uri(creator))
    builder.add(job, ADMS.status, Status.BUSY.uri)
    builder.add(job, DCT.created, timestamp)
    builder.add(job, DCT.modified, timestamp)
    builder.add(job, TASK.operation, as_uri(operation))
    builder.add(job, TASK.cogsOperation, as_uri(cogs_operation))
    builder.add(job, PROV.generatedBy, as_uri(activity))

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
        "Created job",
        extra={"stage": "jobs", "entity": job, "graph": as_uri(graph)},
    )
    return job


async def update_job_status(
    store: GraphStore,
    job: UriLike,
    status: UriLike,
    error: Optional[UriLike] = None,
) -> None:
    """Move ``job`` to ``status``, linking ``error`` when the Job failed.

    The error link is only written when ``status`` is ``failed``, and then in
    the same operation as the status change. A Job without a current status is
    left untouched and no exception is raised.

    Jobs move between ``busy``, ``success`` and ``failed``; ``scheduled`` is
    a Task-only state.

    Raises:
        ValueError: If ``status`` is not a Job status. Nothing is written.
        StoreWriteError: If the store rejects the update.
    """
    job_uri = as_uri(job)
    status = require_status(status, JOB_STATUSES)
    extra = FactListBuilder()
    if error is not None and is_status(status, Status.FAILED):
        extra.add(job_uri, TASK.error, as_uri(error))
    await store.update(status_update_query(job_uri, status, extra.build()))
    logger.info(
        "Updated job status",
        extra={"stage": "jobs", "entity": job_uri, "status": as_uri(status)},
    )


async def get_job_status_from_activity(store: GraphStore, activity: UriLike) -> Graph:
    """Describe the Jobs generated by ``activity``.

    Returns a small graph holding, for each such Job, its type, status and
    ``prov:generatedBy`` link, its error and the error's message when present,
    and the activity's type. The graph is empty when no Job references the
    activity.

    Raises:
        StoreReadError: If the query fails.
    """
    activity_term = sparql_term(as_uri(activity))
    return await store.construct(
        f"""
    {SPARQL_PREFIXES}
    CONSTRUCT {{
      ?job
        rdf:type cogs:Job ;
        adms:status ?jobStatus ;
        prov:generatedBy {activity_term} ;
        task:error ?error .
      ?error
        rdf:type oslc:Error ;
        oslc:message ?message .
      {activity_term}
        rdf:type ?activityType .
    }}
    WHERE {{
      ?job
        rdf:type cogs:Job ;
        adms:status ?jobStatus ;
        prov:generatedBy {activity_term} .
      OPTIONAL {{
        ?job task:error ?error .
        ?error
          rdf:type oslc:Error ;
          oslc:message ?message .
      }}
      OPTIONAL {{
        {activity_term} rdf:type ?activityType .
      }}
    }}"""
    )
