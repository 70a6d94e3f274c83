"""Tests for Submission and Submission Document lookups."""

from __future__ import annotations

import asyncio

import pytest
from rdflib import Literal, URIRef

from SubmissionFlow.constants import CogsOperation, Operation, Status, SubmissionStatus
from SubmissionFlow.containers import ContainerContents
from SubmissionFlow.jobs import create_job
from SubmissionFlow.submissions import (
    get_submission_document_from_task,
    get_submission_document_info_by_id,
    get_submission_info,
    get_submission_info_from_remote_data_object,
    get_submission_info_from_submission_document_id,
    get_submission_info_from_task,
)
from SubmissionFlow.tasks import create_task

GRAPH = URIRef("http://mu.semte.ch/graphs/organizations/test/LoketLB-toezichtGebruiker")
CREATOR = URIRef("http://lblod.data.gift/services/automatic-submission-service")
SUBMISSION = URIRef("http://data.lblod.info/id/submissions/melding-1")
DOCUMENT = URIRef("http://data.lblod.info/id/submission-documents/doc-1")
RDO = URIRef("http://data.lblod.info/id/remote-data-objects/1")
PHYSICAL = URIRef("share://downloads/1.html")
URL = "https://example.org/besluiten/1.html"


@pytest.fixture
def submission_store(store):
    asyncio.run(
        store.update(
            f"""
            PREFIX nie: <http://www.semanticdesktop.org/ontologies/2007/01/19/nie#>
            PREFIX prov: <http://www.w3.org/ns/prov#>
            PREFIX dct: <http://purl.org/dc/terms/>
            PREFIX adms: <http://www.w3.org/ns/adms#>
            PREFIX mu: <http://mu.semte.ch/vocabularies/core/>
            INSERT DATA {{
              GRAPH <{GRAPH}> {{
                <{SUBMISSION}>
                  nie:hasPart <{RDO}> ;
                  prov:atLocation "{URL}" ;
                  dct:subject <{DOCUMENT}> ;
                  adms:status <{SubmissionStatus.CONCEPT.value}> .
                <{DOCUMENT}> mu:uuid "doc-1" .
                <{PHYSICAL}> nie:dataSource <{RDO}> .
              }}
            }}"""
        )
    )
    return store


def _job_and_task(store):
    job = asyncio.run(
        create_job(
            store,
            Operation.AUTOMATIC_SUBMISSION_FLOW,
            SUBMISSION,
            CREATOR,
            CogsOperation.TRANSFORMATION,
            GRAPH,
        )
    )
    task = asyncio.run(
        create_task(
            store,
            Operation.DOWNLOAD,
            CREATOR,
            Status.BUSY,
            0,
            job,
            ContainerContents.of(remote_data_objects=[RDO]),
            CogsOperation.WEB_SERVICE_LOOKUP,
            GRAPH,
        )
    )
    return job, task


def test_submission_info(submission_store):
    info = asyncio.run(get_submission_info(submission_store, SUBMISSION))

    assert info is not None
    assert info.submission == SUBMISSION
    assert info.graph == GRAPH
    assert info.submitted_document == DOCUMENT
    assert info.status == SubmissionStatus.CONCEPT.uri
    assert info.document_url == URL
    assert info.remote_data_object == RDO
    assert info.physical_file == PHYSICAL


def test_submission_info_for_unknown_submission(submission_store):
    unknown = URIRef("http://data.lblod.info/id/submissions/unknown")
    assert asyncio.run(get_submission_info(submission_store, unknown)) is None


def test_submission_info_from_remote_data_object(submission_store):
    infos = asyncio.run(get_submission_info_from_remote_data_object(submission_store, RDO))

    assert len(infos) == 1
    assert infos[0].submission == SUBMISSION
    assert infos[0].remote_data_object == RDO
    assert infos[0].physical_file == PHYSICAL


def test_submission_info_from_task(submission_store):
    _, task = _job_and_task(submission_store)

    info = asyncio.run(get_submission_info_from_task(submission_store, task))

    assert info is not None
    assert info.submission == SUBMISSION
    assert info.document_url == URL


def test_submission_document_from_task(submission_store):
    _, task = _job_and_task(submission_store)
    assert asyncio.run(get_submission_document_from_task(submission_store, task)) == DOCUMENT


def test_submission_info_from_document_id(submission_store):
    info = asyncio.run(get_submission_info_from_submission_document_id(submission_store, "doc-1"))

    assert info is not None
    assert info.submission == SUBMISSION
    assert info.submitted_document == DOCUMENT
    assert info.status == SubmissionStatus.CONCEPT.uri


def test_submission_document_info_by_id(submission_store):
    info = asyncio.run(get_submission_document_info_by_id(submission_store, "doc-1"))

    assert info is not None
    assert info.submission_document == DOCUMENT
    assert info.status == SubmissionStatus.CONCEPT.uri
    assert asyncio.run(get_submission_document_info_by_id(submission_store, "other")) is None


def test_document_url_is_plain_string(submission_store):
    info = asyncio.run(get_submission_info(submission_store, SUBMISSION))
    assert not isinstance(info.document_url, Literal)
