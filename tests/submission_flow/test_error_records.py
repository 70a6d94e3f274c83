"""Tests for write-once Error records."""

from __future__ import annotations

import asyncio

from rdflib import Literal, URIRef

from SubmissionFlow.constants import DCT, GRAPHS, MU, OSLC, RDF
from SubmissionFlow.error_records import create_error

CREATOR = URIRef("http://lblod.data.gift/services/automatic-submission-service")


def test_error_is_stored_in_error_graph(store):
    error = asyncio.run(create_error(store, CREATOR, "Download failed"))

    assert str(error).startswith("http://data.lblod.info/errors/")
    graphs = {g for *_, g in store.quads(error, None, None)}
    assert graphs == {GRAPHS["error"]}
    assert store.count(error, RDF.type, OSLC.Error) == 1
    assert store.count(error, OSLC.message, Literal("Download failed")) == 1
    assert store.count(error, DCT.subject, Literal("Automatic Submission Service")) == 1
    assert store.count(error, DCT.creator, CREATOR) == 1


def test_uuid_matches_identifier_suffix(store):
    error = asyncio.run(create_error(store, CREATOR, "x"))
    uuids = [o for _, _, o, _ in store.quads(error, MU.uuid, None)]
    assert len(uuids) == 1
    assert str(error).endswith(str(uuids[0]))


def test_optional_detail_and_reference(store):
    reference = URIRef("http://data.lblod.info/id/remote-data-objects/1")
    error = asyncio.run(
        create_error(store, CREATOR, "Boom", detail="Traceback...", reference=reference)
    )
    assert store.count(error, DCT.references, reference) == 1
    assert store.count(error, OSLC.largePreview, Literal("Traceback...")) == 1


def test_without_optionals_no_extra_facts(store):
    error = asyncio.run(create_error(store, CREATOR, "Boom"))
    assert store.count(error, DCT.references, None) == 0
    assert store.count(error, OSLC.largePreview, None) == 0


def test_messages_with_quotes_are_escaped(store):
    message = 'Could not parse "document"\nline 2'
    error = asyncio.run(create_error(store, CREATOR, message))
    assert store.count(error, OSLC.message, Literal(message)) == 1
