"""Tests for the automatic-submission-flow adapters."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from rdflib import Literal, URIRef
from rdflib.namespace import XSD

from SubmissionFlow.constants import ADMS, NFO, TASK, CogsOperation, Operation, Status
from SubmissionFlow.containers import ContainerContents
from SubmissionFlow.flow import FlowFiles, FlowJobs, FlowTasks
from SubmissionFlow.settings import StoreSettings

GRAPH = URIRef("http://mu.semte.ch/graphs/organizations/test/LoketLB-toezichtGebruiker")
CREATOR = URIRef("http://lblod.data.gift/services/import-submission-service")
MELDING = URIRef("http://data.lblod.info/id/submissions/melding-1")
TURTLE = '<http://example.org/a> <http://example.org/p> "waarde" .\n'


@pytest.fixture
def flow_files(store, share_settings):
    return FlowFiles(store, share_settings)


class TestFlowJobs:
    def test_jobs_carry_flow_operations(self, store):
        jobs = FlowJobs(store)
        job = asyncio.run(jobs.create(MELDING, CREATOR, GRAPH))

        assert store.count(job, TASK.operation, Operation.AUTOMATIC_SUBMISSION_FLOW.uri) == 1
        assert store.count(job, TASK.cogsOperation, CogsOperation.TRANSFORMATION.uri) == 1

        asyncio.run(jobs.update_status(job, Status.SUCCESS))
        graph = asyncio.run(jobs.get_status_from_activity(MELDING))
        assert (job, ADMS.status, Status.SUCCESS.uri) in graph


class TestFlowTasks:
    def test_create_and_read_inputs(self, store):
        jobs = FlowJobs(store)
        tasks = FlowTasks(store)
        job = asyncio.run(jobs.create(MELDING, CREATOR, GRAPH))
        file = URIRef("http://data.lblod.info/id/automatic-submission-job/file-a")

        task = asyncio.run(
            tasks.create(
                Operation.IMPORT,
                CREATOR,
                Status.BUSY,
                2,
                job,
                ContainerContents.of(files=[file]),
                CogsOperation.TRANSFORMATION,
                GRAPH,
            )
        )
        asyncio.run(tasks.update_status(task, Status.SUCCESS, CREATOR))

        assert asyncio.run(tasks.get_input_files_from_task(task)) == [file]
        assert store.count(task, ADMS.status, Status.SUCCESS.uri) == 1
        assert asyncio.run(tasks.get_task_info_from_remote_data_object(file)) is None


class TestFlowFiles:
    def test_create_from_content_writes_bytes(self, flow_files, share_settings):
        record = asyncio.run(flow_files.create_from_content(TURTLE, CREATOR, GRAPH))

        path = Path(record.physical_file_path)
        assert path.parent == Path(share_settings.share_directory) / "submissions"
        assert path.suffix == ".ttl"
        assert path.read_text(encoding="utf-8") == TURTLE
        size = Literal(len(TURTLE.encode("utf-8")), datatype=XSD.integer)
        assert flow_files.store.count(record.logical_file, NFO.fileSize, size) == 1

    def test_share_directory_with_space(self, store, tmp_path):
        share = tmp_path / "my share"
        share.mkdir()
        files = FlowFiles(store, StoreSettings(share_directory=f"{share}/"))

        record = asyncio.run(files.create_from_content(TURTLE, CREATOR, GRAPH))

        assert "%20" not in str(record.physical_file)
        assert asyncio.run(files.load_from_logical_file(record.logical_file)) == TURTLE

    def test_load_by_either_file(self, flow_files):
        record = asyncio.run(flow_files.create_from_content(TURTLE, CREATOR, GRAPH))

        assert asyncio.run(flow_files.load_from_physical_file(record.physical_file)) == TURTLE
        assert asyncio.run(flow_files.load_from_logical_file(record.logical_file)) == TURTLE

    def test_load_unknown_logical_file_returns_none(self, flow_files):
        unknown = URIRef("http://data.lblod.info/id/automatic-submission-job/none")
        assert asyncio.run(flow_files.load_from_logical_file(unknown)) is None

    def test_update_content_refreshes_size(self, flow_files):
        record = asyncio.run(flow_files.create_from_content(TURTLE, CREATOR, GRAPH))
        new_content = TURTLE * 3

        asyncio.run(flow_files.update_content_for_logical_file(record.logical_file, new_content))

        assert Path(record.physical_file_path).read_text(encoding="utf-8") == new_content
        store = flow_files.store
        sizes = [o for _, _, o, _ in store.quads(record.physical_file, NFO.fileSize, None)]
        assert sizes == [Literal(len(new_content), datatype=XSD.integer)]

    def test_update_content_by_physical_file(self, flow_files):
        record = asyncio.run(flow_files.create_from_content(TURTLE, CREATOR, GRAPH))

        asyncio.run(flow_files.update_content_for_physical_file(record.physical_file, b"x"))

        assert Path(record.physical_file_path).read_bytes() == b"x"
        store = flow_files.store
        sizes = [o for _, _, o, _ in store.quads(record.logical_file, NFO.fileSize, None)]
        assert sizes == [Literal(1, datatype=XSD.integer)]

    def test_remove_deletes_bytes_and_records(self, flow_files):
        record = asyncio.run(flow_files.create_from_content(TURTLE, CREATOR, GRAPH))

        asyncio.run(flow_files.remove_from_logical_file(record.logical_file))

        assert not Path(record.physical_file_path).exists()
        assert flow_files.store.count(record.logical_file, None, None) == 0
        assert flow_files.store.count(record.physical_file, None, None) == 0

    def test_remove_by_physical_file_tolerates_missing_bytes(self, flow_files):
        record = asyncio.run(flow_files.create_from_content(TURTLE, CREATOR, GRAPH))
        Path(record.physical_file_path).unlink()

        asyncio.run(flow_files.remove_from_physical_file(record.physical_file))

        assert flow_files.store.count(record.logical_file, None, None) == 0

    def test_update_of_unknown_file_does_nothing(self, flow_files, share_settings):
        unknown = URIRef("share://submissions/missing.ttl")
        asyncio.run(flow_files.update_content_for_physical_file(unknown, TURTLE))
        assert not (Path(share_settings.share_directory) / "submissions" / "missing.ttl").exists()
