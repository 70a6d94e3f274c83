# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.containers",
#   "purpose": "Pure construction of Input/Results Containers and Harvesting Collections",
#   "sections": [
#     {"id": "containerrole", "name": "ContainerRole", "anchor": "class-containerrole", "kind": "class"},
#     {"id": "containercontents", "name": "ContainerContents", "anchor": "class-containercontents", "kind": "class"},
#     {"id": "containerfragment", "name": "ContainerFragment", "anchor": "class-containerfragment", "kind": "class"},
#     {"id": "build-container", "name": "build_container", "anchor": "function-build-container", "kind": "function"}
#   ]
# }
# === /NAVMAP ===

"""Container and harvesting-collection fact construction.

Tasks and Jobs reference their inputs and results through a container node.
Files hang directly off the container via ``task:hasFile``; remote data
objects are grouped in a nested ``hrvst:HarvestingCollection`` that only
exists when there is at least one of them. Building a container for empty
contents yields an empty fragment, and callers then add no container facts at
all. No store I/O happens here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from rdflib import URIRef

from .constants import BASES, DCT, HRVST, MU, NFO, RDF, TASK
from .terms import FactListBuilder, Triple, UriLike, as_uri, mint_uri, string

__all__ = [
    "ContainerContents",
    "ContainerFragment",
    "ContainerRole",
    "build_container",
]


class ContainerRole(Enum):
    """Which side of a Task a container sits on."""

    INPUT = "inputContainer"
    RESULTS = "resultsContainer"

    @property
    def link_predicate(self) -> URIRef:
        return TASK[self.value]

    @property
    def base(self) -> str:
        return BASES[self.value]


@dataclass(frozen=True)
class ContainerContents:
    """Files and remote data objects to attach to a container.

    Both collections are always present; "nothing to attach" is two empty
    tuples rather than a missing value.
    """

    files: Tuple[URIRef, ...] = ()
    remote_data_objects: Tuple[URIRef, ...] = ()

    @classmethod
    def of(
        cls,
        files: Iterable[UriLike] = (),
        remote_data_objects: Iterable[UriLike] = (),
    ) -> "ContainerContents":
        return cls(
            files=tuple(as_uri(f) for f in files),
            remote_data_objects=tuple(as_uri(r) for r in remote_data_objects),
        )

    @property
    def is_empty(self) -> bool:
        return not self.files and not self.remote_data_objects


EMPTY_CONTENTS = ContainerContents()


@dataclass(frozen=True)
class ContainerFragment:
    """Facts describing one container, or nothing at all.

    Attributes:
        container: IRI of the container node, ``None`` for an empty fragment.
        harvesting_collection: IRI of the nested collection, if one was built.
        triples: Container (and collection) facts, excluding the owner link.
    """

    container: Optional[URIRef] = None
    harvesting_collection: Optional[URIRef] = None
    triples: Tuple[Triple, ...] = ()
    role: ContainerRole = ContainerRole.INPUT

    @property
    def is_empty(self) -> bool:
        return self.container is None

    def linked_to(self, owner: URIRef) -> Tuple[Triple, ...]:
        """Return the fragment's facts plus the link from ``owner`` to the container."""
        if self.container is None:
            return ()
        return ((owner, self.role.link_predicate, self.container),) + self.triples


def build_container(
    contents: ContainerContents,
    role: ContainerRole,
    creator: UriLike,
) -> ContainerFragment:
    """Build the facts for a container holding ``contents``.

    Args:
        contents: Files and remote data objects to attach.
        role: Whether this is an input or a results container.
        creator: Service recorded as creator of the harvesting collection.

    Returns:
        A populated :class:`ContainerFragment`, or an empty one when
        ``contents`` holds neither files nor remote data objects.
    """
    if contents.is_empty:
        return ContainerFragment(role=role)

    container, container_uuid = mint_uri(role.base)
    builder = FactListBuilder()
    builder.add(container, RDF.type, NFO.DataContainer)
    builder.add(container, MU.uuid, string(container_uuid))
    builder.add_all(container, TASK.hasFile, contents.files)

    collection: Optional[URIRef] = None
    if contents.remote_data_objects:
        collection, collection_uuid = mint_uri(BASES["harvestingCollection"])
        builder.add(container, TASK.hasHarvestingCollection, collection)
        builder.add(collection, RDF.type, HRVST.HarvestingCollection)
        builder.add(collection, MU.uuid, string(collection_uuid))
        builder.add(collection, DCT.creator, as_uri(creator))
        builder.add_all(collection, DCT.hasPart, contents.remote_data_objects)

    return ContainerFragment(
        container=container,
        harvesting_collection=collection,
        triples=builder.build(),
        role=role,
    )
