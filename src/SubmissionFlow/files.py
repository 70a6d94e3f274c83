# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.files",
#   "purpose": "Create, update, look up, and remove logical/physical File pairs",
#   "sections": [
#     {"id": "filerecord", "name": "FileRecord", "anchor": "class-filerecord", "kind": "class"},
#     {"id": "paths", "name": "Path Mapping", "anchor": "PTH", "kind": "api"},
#     {"id": "create-file", "name": "create_file", "anchor": "function-create-file", "kind": "function"},
#     {"id": "update-file", "name": "update_file", "anchor": "function-update-file", "kind": "function"},
#     {"id": "remove-file", "name": "remove_file", "anchor": "function-remove-file", "kind": "function"},
#     {"id": "lookups", "name": "Counterpart Lookups", "anchor": "LKP", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Logical and physical File records.

A logical File stands for the content; its physical counterpart stands for
one stored copy and points back with ``nie:dataSource``. The two are written
in a single INSERT and removed in a single DELETE, so a concurrent reader
never observes one without the other. Updates and removals discover the
physical File from the logical one inside the ``WHERE`` clause of the same
operation and silently do nothing when the pair does not exist.

This module never touches file bytes; :mod:`SubmissionFlow.flow` does.
"""

from __future__ import annotations

import logging
import mimetypes
from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote, unquote

from rdflib import URIRef

from .constants import (
    BASES,
    DBPEDIA,
    DCT,
    DEFAULT_FORMAT,
    FORMATS,
    MU,
    NFO,
    NIE,
    RDF,
    SPARQL_PREFIXES,
)
from .settings import StoreSettings, get_settings
from .store import GraphStore
from .terms import (
    FactListBuilder,
    UriLike,
    as_uri,
    integer,
    mint_uri,
    new_uuid,
    now,
    render_triples,
    sparql_term,
    string,
)

__all__ = [
    "FileRecord",
    "create_file",
    "format_for_extension",
    "get_logical_file",
    "get_physical_file",
    "path_to_physical_file",
    "physical_file_to_path",
    "remove_file",
    "update_file",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileRecord:
    """Identifiers of a freshly created File pair.

    ``physical_file_path`` is where the caller should write the contents;
    :func:`create_file` does not write any bytes.
    """

    logical_file: URIRef
    physical_file: URIRef
    physical_file_path: str


# --- Path Mapping ----------------------------------------------------------


def path_to_physical_file(path: str, settings: Optional[StoreSettings] = None) -> URIRef:
    """Map a storage path to its externally addressable physical File IRI.

    The part after the share directory is percent-encoded, so characters
    that are valid in a path but not in an IRI (spaces, ``#``) survive.

    Examples:
        >>> path_to_physical_file("/share/submissions/a.ttl", StoreSettings())
        rdflib.term.URIRef('share://submissions/a.ttl')
        >>> path_to_physical_file("/share/my submissions/a.ttl", StoreSettings())
        rdflib.term.URIRef('share://my%20submissions/a.ttl')
    """
    settings = settings or get_settings()
    head, found, tail = path.partition(settings.share_directory)
    if not found:
        return URIRef(quote(path, safe="/"))
    return URIRef(f"{quote(head, safe='/')}{settings.share_scheme}{quote(tail, safe='/')}")


def physical_file_to_path(physical_file: UriLike, settings: Optional[StoreSettings] = None) -> str:
    """Inverse of :func:`path_to_physical_file`."""
    settings = settings or get_settings()
    decoded = unquote(str(as_uri(physical_file)))
    return decoded.replace(settings.share_scheme, settings.share_directory, 1)


def format_for_extension(extension: str) -> str:
    """Return the MIME type recorded for files with ``extension``."""
    extension = extension.lstrip(".").lower()
    if extension in FORMATS:
        return FORMATS[extension]
    guessed, _ = mimetypes.guess_type(f"file.{extension}")
    return guessed or DEFAULT_FORMAT


# --- Create / Update / Remove ---------------------------------------------


async def create_file(
    store: GraphStore,
    path_prefix: str,
    extension: str,
    size: int,
    creator: UriLike,
    graph: UriLike,
    *,
    settings: Optional[StoreSettings] = None,
) -> FileRecord:
    """Create a logical and a physical File in ``graph`` with one INSERT.

    Args:
        store: Graph store to write to.
        path_prefix: Directory (ending in ``/``) where the contents will live.
            A new UUID and ``extension`` are appended to form the file path.
        extension: File extension, also used to derive the ``dct:format``.
        size: Content size in bytes, computed by the caller.
        creator: Service creating the File.
        graph: Named graph receiving both File records.
        settings: Overrides the share directory/scheme mapping.

    Returns:
        The new logical and physical File IRIs and the target storage path.

    Raises:
        StoreWriteError: If the store rejects the insert. Nothing is written.
    """
    physical_uuid = new_uuid()
    filename = f"{physical_uuid}.{extension}"
    path = f"{path_prefix}{filename}"
    physical_file = path_to_physical_file(path, settings)
    logical_file, logical_uuid = mint_uri(BASES["file"])
    timestamp = now()
    creator_uri = as_uri(creator)
    file_format = string(format_for_extension(extension))

    builder = FactListBuilder()
    for subject, uuid_value in ((physical_file, physical_uuid), (logical_file, logical_uuid)):
        builder.add(subject, RDF.type, NFO.FileDataObject)
        builder.add(subject, MU.uuid, string(uuid_value))
        builder.add(subject, NFO.fileName, string(filename))
        builder.add(subject, DCT.creator, creator_uri)
        builder.add(subject, DCT.created, timestamp)
        builder.add(subject, DCT.modified, timestamp)
        builder.add(subject, DCT["format"], file_format)
        builder.add(subject, NFO.fileSize, integer(size))
        builder.add(subject, DBPEDIA.fileExtension, string(extension))
    builder.add(physical_file, NIE.dataSource, logical_file)

    await store.update(
        f"""
    {SPARQL_PREFIXES}
    INSERT DATA {{
      GRAPH {sparql_term(as_uri(graph))} {{
{render_triples(builder.build())}
      }}
    }}"""
    )
    logger.debug(
        "Created file pair",
        extra={"stage": "files", "entity": logical_file, "graph": as_uri(graph)},
    )
    return FileRecord(
        logical_file=logical_file,
        physical_file=physical_file,
        physical_file_path=path,
    )


async def update_file(store: GraphStore, logical_file: UriLike, size: int) -> None:
    """Replace ``dct:modified`` and ``nfo:fileSize`` on a File pair.

    Does nothing when no physical File points to ``logical_file``.
    """
    logical = sparql_term(as_uri(logical_file))
    timestamp = sparql_term(now())
    size_term = sparql_term(integer(size))
    await store.update(
        f"""
    {SPARQL_PREFIXES}
    DELETE {{
      GRAPH ?g {{
        ?physicalFile
          dct:modified ?physicalModified ;
          nfo:fileSize ?physicalSize .
        {logical}
          dct:modified ?logicalModified ;
          nfo:fileSize ?logicalSize .
      }}
    }}
    INSERT {{
      GRAPH ?g {{
        ?physicalFile
          dct:modified {timestamp} ;
          nfo:fileSize {size_term} .
        {logical}
          dct:modified {timestamp} ;
          nfo:fileSize {size_term} .
      }}
    }}
    WHERE {{
      GRAPH ?g {{
        ?physicalFile
          nie:dataSource {logical} ;
          dct:modified ?physicalModified ;
          nfo:fileSize ?physicalSize .
        {logical}
          dct:modified ?logicalModified ;
          nfo:fileSize ?logicalSize .
      }}
    }}"""
    )
    logger.debug("Updated file metadata", extra={"stage": "files", "entity": logical_file})


async def remove_file(store: GraphStore, logical_file: UriLike) -> None:
    """Delete every fact about a logical File and its physical counterpart.

    Does nothing when the pair does not exist.
    """
    logical = sparql_term(as_uri(logical_file))
    await store.update(
        f"""
    {SPARQL_PREFIXES}
    DELETE {{
      GRAPH ?g {{
        ?physicalFile ?physicalPredicate ?physicalObject .
        {logical} ?logicalPredicate ?logicalObject .
      }}
    }}
    WHERE {{
      GRAPH ?g {{
        ?physicalFile
          nie:dataSource {logical} ;
          ?physicalPredicate ?physicalObject .
        {logical} ?logicalPredicate ?logicalObject .
      }}
    }}"""
    )
    logger.debug("Removed file pair", extra={"stage": "files", "entity": logical_file})


# --- Counterpart Lookups ---------------------------------------------------


async def get_physical_file(store: GraphStore, logical_file: UriLike) -> Optional[URIRef]:
    """Return a physical File pointing at ``logical_file``, or ``None``."""
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?physicalFile WHERE {{
      ?physicalFile nie:dataSource {sparql_term(as_uri(logical_file))} .
    }} LIMIT 1"""
    )
    value = rows[0].get("physicalFile") if rows else None
    return value if isinstance(value, URIRef) else None


async def get_logical_file(store: GraphStore, physical_file: UriLike) -> Optional[URIRef]:
    """Return the logical File (or remote data object) behind ``physical_file``."""
    rows = await store.select(
        f"""
    {SPARQL_PREFIXES}
    SELECT ?logicalFile WHERE {{
      {sparql_term(as_uri(physical_file))} nie:dataSource ?logicalFile .
    }} LIMIT 1"""
    )
    value = rows[0].get("logicalFile") if rows else None
    return value if isinstance(value, URIRef) else None
