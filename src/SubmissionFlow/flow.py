# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.flow",
#   "purpose": "Automatic-submission-flow adapters over the generic entity managers",
#   "sections": [
#     {"id": "flowjobs", "name": "FlowJobs", "anchor": "class-flowjobs", "kind": "class"},
#     {"id": "flowtasks", "name": "FlowTasks", "anchor": "class-flowtasks", "kind": "class"},
#     {"id": "flowfiles", "name": "FlowFiles", "anchor": "class-flowfiles", "kind": "class"}
#   ]
# }
# === /NAVMAP ===

"""Adapters binding the entity managers to the automatic submission flow.

Each adapter holds a store and exposes the subset of manager operations the
flow's services use, with the flow-specific parameters fixed: automatic
submission Jobs always carry the same operation pair, and File contents are
kept as Turtle under ``<share>/submissions/``. :class:`FlowFiles` is the only
place in the package that reads or writes file bytes.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Union

from rdflib import Graph, URIRef

from . import files as file_manager
from . import jobs as job_manager
from . import tasks as task_manager
from .constants import CogsOperation, Operation
from .containers import EMPTY_CONTENTS, ContainerContents
from .files import FileRecord
from .settings import StoreSettings, get_settings
from .store import GraphStore
from .tasks import TaskInfo
from .terms import UriLike

__all__ = ["FlowFiles", "FlowJobs", "FlowTasks"]

logger = logging.getLogger(__name__)

Content = Union[str, bytes]

SUBMISSIONS_SUBDIRECTORY = "submissions/"
SUBMISSION_EXTENSION = "ttl"


class FlowJobs:
    """Jobs of the automatic submission flow."""

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    async def create(self, activity: UriLike, creator: UriLike, graph: UriLike) -> URIRef:
        """Create a ``busy`` automatic-submission-flow Job for ``activity``."""
        return await job_manager.create_job(
            self.store,
            Operation.AUTOMATIC_SUBMISSION_FLOW,
            activity,
            creator,
            CogsOperation.TRANSFORMATION,
            graph,
        )

    async def update_status(
        self, job: UriLike, status: UriLike, error: Optional[UriLike] = None
    ) -> None:
        await job_manager.update_job_status(self.store, job, status, error)

    async def get_status_from_activity(self, activity: UriLike) -> Graph:
        return await job_manager.get_job_status_from_activity(self.store, activity)


class FlowTasks:
    """Tasks of the automatic submission flow."""

    def __init__(self, store: GraphStore) -> None:
        self.store = store

    async def create(
        self,
        operation: UriLike,
        creator: UriLike,
        status: UriLike,
        index: int,
        job: UriLike,
        inputs: ContainerContents,
        cogs_operation: UriLike,
        graph: UriLike,
    ) -> URIRef:
        return await task_manager.create_task(
            self.store, operation, creator, status, index, job, inputs, cogs_operation, graph
        )

    async def update_status(
        self,
        task: UriLike,
        status: UriLike,
        creator: UriLike,
        results: ContainerContents = EMPTY_CONTENTS,
        error: Optional[UriLike] = None,
    ) -> None:
        await task_manager.update_task_status(self.store, task, status, creator, results, error)

    async def get_task_info_from_remote_data_object(
        self, remote_data_object: UriLike
    ) -> Optional[TaskInfo]:
        return await task_manager.get_task_info_from_remote_data_object(
            self.store, remote_data_object
        )

    async def get_input_files_from_task(self, task: UriLike) -> List[URIRef]:
        return await task_manager.get_input_files_from_task(self.store, task)


class FlowFiles:
    """Submission files: triplestore records plus their bytes on the share.

    Loaders return ``None`` and updates/removals do nothing when the logical
    or physical counterpart cannot be found in the store.
    """

    def __init__(self, store: GraphStore, settings: Optional[StoreSettings] = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    @property
    def submissions_prefix(self) -> str:
        return f"{self.settings.share_directory}{SUBMISSIONS_SUBDIRECTORY}"

    def _path(self, physical_file: UriLike) -> Path:
        return Path(file_manager.physical_file_to_path(physical_file, self.settings))

    async def create(
        self,
        path_prefix: str,
        extension: str,
        size: int,
        creator: UriLike,
        graph: UriLike,
    ) -> FileRecord:
        """Create the File records only; see :func:`SubmissionFlow.files.create_file`."""
        return await file_manager.create_file(
            self.store, path_prefix, extension, size, creator, graph, settings=self.settings
        )

    async def create_from_content(
        self, content: Content, creator: UriLike, graph: UriLike
    ) -> FileRecord:
        """Create a Turtle File pair and write ``content`` to its physical path.

        The records are written first; if writing the bytes then fails, the
        records remain and the error propagates.
        """
        data = _as_bytes(content)
        record = await file_manager.create_file(
            self.store,
            self.submissions_prefix,
            SUBMISSION_EXTENSION,
            len(data),
            creator,
            graph,
            settings=self.settings,
        )
        await _write_bytes(Path(record.physical_file_path), data)
        return record

    async def load_from_physical_file(self, physical_file: UriLike) -> str:
        path = self._path(physical_file)
        return await asyncio.to_thread(path.read_text, encoding="utf-8")

    async def load_from_logical_file(self, logical_file: UriLike) -> Optional[str]:
        physical_file = await file_manager.get_physical_file(self.store, logical_file)
        if physical_file is None:
            logger.warning(
                "No physical file for logical file",
                extra={"stage": "files", "entity": logical_file},
            )
            return None
        return await self.load_from_physical_file(physical_file)

    async def update_content_for_physical_file(
        self, physical_file: UriLike, content: Content
    ) -> None:
        """Overwrite the bytes of ``physical_file`` and refresh size/modified."""
        logical_file = await file_manager.get_logical_file(self.store, physical_file)
        if logical_file is None:
            return
        data = _as_bytes(content)
        await _write_bytes(self._path(physical_file), data)
        await file_manager.update_file(self.store, logical_file, len(data))

    async def update_content_for_logical_file(
        self, logical_file: UriLike, content: Content
    ) -> None:
        physical_file = await file_manager.get_physical_file(self.store, logical_file)
        if physical_file is None:
            return
        data = _as_bytes(content)
        await _write_bytes(self._path(physical_file), data)
        await file_manager.update_file(self.store, logical_file, len(data))

    async def remove_from_physical_file(self, physical_file: UriLike) -> None:
        """Delete the bytes of ``physical_file`` and the File pair's records."""
        logical_file = await file_manager.get_logical_file(self.store, physical_file)
        if logical_file is None:
            return
        await asyncio.to_thread(self._path(physical_file).unlink, missing_ok=True)
        await file_manager.remove_file(self.store, logical_file)

    async def remove_from_logical_file(self, logical_file: UriLike) -> None:
        physical_file = await file_manager.get_physical_file(self.store, logical_file)
        if physical_file is None:
            return
        await asyncio.to_thread(self._path(physical_file).unlink, missing_ok=True)
        await file_manager.remove_file(self.store, logical_file)


def _as_bytes(content: Content) -> bytes:
    return content.encode("utf-8") if isinstance(content, str) else bytes(content)


async def _write_bytes(path: Path, data: bytes) -> None:
    def _write() -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    await asyncio.to_thread(_write)
