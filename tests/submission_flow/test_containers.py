"""Tests for input/results container construction."""

from __future__ import annotations

from rdflib import URIRef

from SubmissionFlow.constants import DCT, HRVST, NFO, RDF, TASK
from SubmissionFlow.containers import (
    ContainerContents,
    ContainerRole,
    build_container,
)

CREATOR = URIRef("http://lblod.data.gift/services/automatic-submission-service")
OWNER = URIRef("http://data.lblod.info/id/automatic-submission-job/task-1")
FILE_A = URIRef("http://data.lblod.info/id/automatic-submission-job/file-a")
RDO_1 = URIRef("http://data.lblod.info/id/remote-data-objects/1")
RDO_2 = URIRef("http://data.lblod.info/id/remote-data-objects/2")


def test_empty_contents_produce_no_facts():
    fragment = build_container(ContainerContents(), ContainerRole.INPUT, CREATOR)

    assert fragment.is_empty
    assert fragment.triples == ()
    assert fragment.linked_to(OWNER) == ()


def test_files_only_container_has_no_harvesting_collection():
    contents = ContainerContents.of(files=[FILE_A])
    fragment = build_container(contents, ContainerRole.RESULTS, CREATOR)

    assert fragment.harvesting_collection is None
    assert (fragment.container, RDF.type, NFO.DataContainer) in fragment.triples
    assert (fragment.container, TASK.hasFile, FILE_A) in fragment.triples
    assert not any(p == TASK.hasHarvestingCollection for _, p, _ in fragment.triples)


def test_remote_data_objects_go_into_a_harvesting_collection():
    contents = ContainerContents.of(remote_data_objects=[RDO_1, RDO_2])
    fragment = build_container(contents, ContainerRole.INPUT, CREATOR)
    collection = fragment.harvesting_collection

    assert collection is not None
    assert (fragment.container, TASK.hasHarvestingCollection, collection) in fragment.triples
    assert (collection, RDF.type, HRVST.HarvestingCollection) in fragment.triples
    assert (collection, DCT.creator, CREATOR) in fragment.triples
    parts = {o for s, p, o in fragment.triples if s == collection and p == DCT.hasPart}
    assert parts == {RDO_1, RDO_2}
    assert not any(p == TASK.hasFile for _, p, _ in fragment.triples)


def test_linked_to_prepends_role_specific_link():
    contents = ContainerContents.of(files=[FILE_A])
    input_fragment = build_container(contents, ContainerRole.INPUT, CREATOR)
    results_fragment = build_container(contents, ContainerRole.RESULTS, CREATOR)

    assert input_fragment.linked_to(OWNER)[0] == (
        OWNER,
        TASK.inputContainer,
        input_fragment.container,
    )
    assert results_fragment.linked_to(OWNER)[0] == (
        OWNER,
        TASK.resultsContainer,
        results_fragment.container,
    )


def test_each_container_gets_a_fresh_identifier():
    contents = ContainerContents.of(files=[FILE_A])
    first = build_container(contents, ContainerRole.INPUT, CREATOR)
    second = build_container(contents, ContainerRole.INPUT, CREATOR)
    assert first.container != second.container
