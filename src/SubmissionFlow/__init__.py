"""Data-access tools for the automatic submission flow.

Jobs, Tasks, Files and Errors of the submission-processing pipeline are kept
as RDF in a triplestore. The modules in this package create those records,
apply status transitions as single conditional SPARQL updates, answer the
lookups the pipeline services need, and filter delta-notifier messages.

Typical use::

    from SubmissionFlow import SparqlStore, Status, create_job, update_job_status

    async with SparqlStore() as store:
        job = await create_job(store, operation, submission, creator, cogs_operation, graph)
        await update_job_status(store, job, Status.SUCCESS)
"""

from __future__ import annotations

from .constants import CogsOperation, Operation, Service, Status
from .containers import ContainerContents, ContainerFragment, ContainerRole, build_container
from .deltas import (
    Delta,
    DeltaTriple,
    filter_by_predicate_object,
    filter_by_predicates,
    filter_triples_by_predicates,
    parse_delta_message,
)
from .error_records import create_error
from .errors import (
    ConfigurationError,
    StoreError,
    StoreReadError,
    StoreWriteError,
    SubmissionFlowError,
)
from .files import FileRecord, create_file, remove_file, update_file
from .flow import FlowFiles, FlowJobs, FlowTasks
from .jobs import create_job, get_job_status_from_activity, update_job_status
from .memory_store import MemoryGraphStore
from .settings import StoreSettings, get_settings
from .store import GraphStore, SparqlStore
from .tasks import (
    TaskInfo,
    create_task,
    get_input_files_from_task,
    get_task_info_from_remote_data_object,
    update_task_status,
)

__version__ = "1.0.0"

__all__ = [
    "CogsOperation",
    "ConfigurationError",
    "ContainerContents",
    "ContainerFragment",
    "ContainerRole",
    "Delta",
    "DeltaTriple",
    "FileRecord",
    "FlowFiles",
    "FlowJobs",
    "FlowTasks",
    "GraphStore",
    "MemoryGraphStore",
    "Operation",
    "Service",
    "SparqlStore",
    "Status",
    "StoreError",
    "StoreReadError",
    "StoreSettings",
    "StoreWriteError",
    "SubmissionFlowError",
    "TaskInfo",
    "build_container",
    "create_error",
    "create_file",
    "create_job",
    "create_task",
    "filter_by_predicate_object",
    "filter_by_predicates",
    "filter_triples_by_predicates",
    "get_input_files_from_task",
    "get_job_status_from_activity",
    "get_settings",
    "get_task_info_from_remote_data_object",
    "parse_delta_message",
    "remove_file",
    "update_file",
    "update_job_status",
    "update_task_status",
    "__version__",
]
