# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.submissions",
#   "purpose": "Read-only lookups of Submissions and Submission Documents",
#   "sections": [
#     {"id": "records", "name": "Records", "anchor": "REC", "kind": "api"},
#     {"id": "submissions", "name": "Submission Lookups", "anchor": "SUB", "kind": "api"},
#     {"id": "documents", "name": "Submission Document Lookups", "anchor": "DOC", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Lookups of Submissions, the activity that starts an automatic submission Job.

All functions are reads. A lookup that cannot follow its links returns
``None`` (or an empty list), never raises.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Mapping, Optional

from rdflib import URIRef
from rdflib.term import Identifier

from .constants import SPARQL_PREFIXES
from .store import GraphStore
from .terms import UriLike, as_uri, sparql_term, string

__all__ = [
    "SubmissionDocumentInfo",
    "SubmissionInfo",
    "get_submission_document_from_task",
    "get_submission_document_info_by_id",
    "get_submission_info",
    "get_submission_info_from_remote_data_object",
    "get_submission_info_from_submission_document_id",
    "get_submission_info_from_task",
]


def _uri(row: Mapping[str, Identifier], key: str) -> Optional[URIRef]:
    value = row.get(key)
    return value if isinstance(value, URIRef) else None


# --- Records ---------------------------------------------------------------


@dataclass(frozen=True)
class SubmissionInfo:
    """A Submission with its document, status and (optionally) downloaded file."""

    submission: URIRef
    graph: URIRef
    submitted_document: Optional[URIRef] = None
    status: Optional[URIRef] = None
    document_url: Optional[str] = None
    remote_data_object: Optional[URIRef] = None
    physical_file: Optional[URIRef] = None

    @classmethod
    def from_binding(cls, row: Mapping[str, Identifier]) -> "SubmissionInfo":
        url = row.get("documentUrl")
        return cls(
            submission=URIRef(row["submission"]),
            graph=URIRef(row["graph"]),
            submitted_document=_uri(row, "submittedDocument"),
            status=_uri(row, "status"),
            document_url=str(url) if url is not None else None,
            remote_data_object=_uri(row, "remoteDataObject"),
            physical_file=_uri(row, "physicalFile") or _uri(row, "file"),
        )


@dataclass(frozen=True)
class SubmissionDocumentInfo:
    submission_document: URIRef
    status: URIRef


# --- Submission Lookups ----------------------------------------------------


async def get_submission_info(store: GraphStore, submission: UriLike) -> Optional[SubmissionInfo]:
    """Return the Submission's document, status, remote data object and file."""
    submission_term = sparql_term(as_uri(submission))
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?submission ?status ?documentUrl ?remoteDataObject ?physicalFile ?submittedDocument ?graph WHERE {{
      BIND ({submission_term} AS ?submission)
      GRAPH ?graph {{
        ?physicalFile
          nie:dataSource ?remoteDataObject .
        ?submission
          nie:hasPart ?remoteDataObject ;
          prov:atLocation ?documentUrl ;
          dct:subject ?submittedDocument ;
          adms:status ?status .
      }}
    }} LIMIT 1"""
    )
    return SubmissionInfo.from_binding(rows[0]) if rows else None


async def get_submission_info_from_remote_data_object(
    store: GraphStore, remote_data_object: UriLike
) -> List[SubmissionInfo]:
    """Return every Submission that has ``remote_data_object`` as a part."""
    rdo = as_uri(remote_data_object)
    rdo_term = sparql_term(rdo)
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?submission ?documentUrl ?file ?submittedDocument ?status ?graph WHERE {{
      GRAPH ?graph {{
        ?file
          nie:dataSource {rdo_term} .
        ?submission
          nie:hasPart {rdo_term} ;
          prov:atLocation ?documentUrl ;
          dct:subject ?submittedDocument .
        OPTIONAL {{ ?submission adms:status ?status . }}
      }}
    }}"""
    )
    return [SubmissionInfo.from_binding({**row, "remoteDataObject": rdo}) for row in rows]


async def get_submission_info_from_task(
    store: GraphStore, task: UriLike
) -> Optional[SubmissionInfo]:
    """Return the Submission that generated the Job the Task belongs to."""
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?submission ?documentUrl ?submittedDocument ?status ?graph WHERE {{
      GRAPH ?graph {{
        {sparql_term(as_uri(task))}
          a task:Task ;
          dct:isPartOf ?job .
        ?job prov:generatedBy ?submission .
        ?submission
          dct:subject ?submittedDocument ;
          prov:atLocation ?documentUrl ;
          adms:status ?status .
      }}
    }} LIMIT 1"""
    )
    return SubmissionInfo.from_binding(rows[0]) if rows else None


async def get_submission_info_from_submission_document_id(
    store: GraphStore, document_id: str
) -> Optional[SubmissionInfo]:
    """Return the Submission whose Submission Document has ``mu:uuid`` ``document_id``."""
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?submission ?documentUrl ?submittedDocument ?status ?graph WHERE {{
      GRAPH ?graph {{
        ?submittedDocument
          mu:uuid {sparql_term(string(document_id))} .
        ?submission
          dct:subject ?submittedDocument ;
          adms:status ?status .
        OPTIONAL {{ ?submission prov:atLocation ?documentUrl . }}
      }}
    }} LIMIT 1"""
    )
    return SubmissionInfo.from_binding(rows[0]) if rows else None


# --- Submission Document Lookups -------------------------------------------


async def get_submission_document_from_task(store: GraphStore, task: UriLike) -> Optional[URIRef]:
    """Return the Submission Document processed by the Task's Job, if any."""
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?submissionDocument WHERE {{
      GRAPH ?g {{
        {sparql_term(as_uri(task))}
          a task:Task ;
          dct:isPartOf ?job .
        ?job prov:generatedBy ?submission .
        ?submission dct:subject ?submissionDocument .
      }}
    }} LIMIT 1"""
    )
    return _uri(rows[0], "submissionDocument") if rows else None


async def get_submission_document_info_by_id(
    store: GraphStore, document_id: str
) -> Optional[SubmissionDocumentInfo]:
    """Return the Submission Document with this UUID and its Submission's status."""
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?submissionDocument ?status WHERE {{
      GRAPH ?g {{
        ?submissionDocument
          mu:uuid {sparql_term(string(document_id))} .
        ?submission
          dct:subject ?submissionDocument ;
          adms:status ?status .
      }}
    }} LIMIT 1"""
    )
    if not rows:
        return None
    return SubmissionDocumentInfo(
        submission_document=URIRef(rows[0]["submissionDocument"]),
        status=URIRef(rows[0]["status"]),
    )
