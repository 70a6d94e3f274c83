"""Tests for identifier minting, literal encoding and triple rendering."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from rdflib import BNode, Literal, URIRef
from rdflib.namespace import XSD

from SubmissionFlow.constants import Status
from SubmissionFlow.terms import (
    FactListBuilder,
    as_uri,
    date_time,
    integer,
    mint_uri,
    new_uuid,
    render_triples,
    term_from_json,
)


class TestIdentifiers:
    def test_mint_uri_appends_uuid_to_base(self):
        uri, identifier = mint_uri("http://data.lblod.info/id/automatic-submission-job/")
        assert uri == URIRef(f"http://data.lblod.info/id/automatic-submission-job/{identifier}")

    def test_mint_uri_keeps_given_identifier(self):
        uri, identifier = mint_uri("http://example.org/", "abc")
        assert identifier == "abc"
        assert uri == URIRef("http://example.org/abc")

    def test_new_uuids_are_distinct(self):
        assert len({new_uuid() for _ in range(50)}) == 50

    def test_as_uri_accepts_enums(self):
        assert as_uri(Status.BUSY) == URIRef(Status.BUSY.value)
        assert isinstance(as_uri("http://example.org/a"), URIRef)


class TestLiterals:
    def test_naive_datetimes_are_treated_as_utc(self):
        value = date_time(datetime(2024, 5, 1, 12, 30))
        assert value.datatype == XSD.dateTime
        assert value.toPython() == datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    def test_integer_literal_is_typed(self):
        value = integer(7)
        assert value.datatype == XSD.integer
        assert value.toPython() == 7


class TestJsonTerms:
    def test_uri_term(self):
        assert term_from_json({"type": "uri", "value": "http://ex/a"}) == URIRef("http://ex/a")

    def test_bnode_term(self):
        assert isinstance(term_from_json({"type": "bnode", "value": "b0"}), BNode)

    def test_typed_literal_term(self):
        term = term_from_json(
            {"type": "typed-literal", "value": "3", "datatype": str(XSD.integer)}
        )
        assert term == Literal(3, datatype=XSD.integer)

    def test_language_literal_term(self):
        term = term_from_json({"type": "literal", "value": "hallo", "xml:lang": "nl"})
        assert term == Literal("hallo", lang="nl")

    def test_unknown_term_type_is_rejected(self):
        with pytest.raises(ValueError):
            term_from_json({"type": "triple", "value": ""})


class TestRendering:
    def test_empty_input_renders_nothing(self):
        assert render_triples(()) == ""

    def test_literals_are_escaped(self):
        builder = FactListBuilder()
        builder.add(URIRef("http://ex/s"), URIRef("http://ex/p"), Literal('say "hi"'))
        rendered = render_triples(builder.build(), indent="")
        assert rendered == '<http://ex/s> <http://ex/p> "say \\"hi\\"" .'

    def test_builder_collects_in_order(self):
        s = URIRef("http://ex/s")
        p = URIRef("http://ex/p")
        builder = FactListBuilder().add_all(s, p, [Literal("a"), Literal("b")])
        assert len(builder) == 2
        assert [o for _, _, o in builder.build()] == [Literal("a"), Literal("b")]
