# === NAVMAP v1 ===
# {
#   "module": "SubmissionFlow.constants",
#   "purpose": "Static vocabulary registry shared by every entity manager",
#   "sections": [
#     {"id": "prefixes", "name": "Prefixes & Namespaces", "anchor": "PFX", "kind": "constants"},
#     {"id": "bases", "name": "Identifier Bases & Graphs", "anchor": "BAS", "kind": "constants"},
#     {"id": "statuses", "name": "Status Vocabularies", "anchor": "STA", "kind": "api"},
#     {"id": "operations", "name": "Operations & Services", "anchor": "OPS", "kind": "api"}
#   ]
# }
# === /NAVMAP ===

"""Static vocabulary registry for the automatic submission flow.

Every IRI this package writes to or reads from the triplestore is declared
here exactly once. Tables are exposed as read-only mappings and enumerations
so that callers cannot mutate process-wide configuration after import.
Namespaces are :class:`rdflib.Namespace` objects, which means attribute access
(``NFO.FileDataObject``) yields ready-to-use :class:`rdflib.URIRef` terms.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from rdflib import Namespace, URIRef
from rdflib.namespace import RDF, XSD

__all__ = [
    "PREFIXES",
    "SPARQL_PREFIXES",
    "ADMS",
    "ASJ",
    "COGS",
    "DBPEDIA",
    "DCT",
    "EXT",
    "HRVST",
    "JOBO",
    "JS",
    "MU",
    "NFO",
    "NIE",
    "OSLC",
    "PROV",
    "RDF",
    "TASK",
    "TASKO",
    "XSD",
    "BASES",
    "GRAPHS",
    "FORMATS",
    "DEFAULT_FORMAT",
    "ERROR_SUBJECT",
    "Status",
    "JOB_STATUSES",
    "TASK_STATUSES",
    "DownloadStatus",
    "SubmissionStatus",
    "Operation",
    "CogsOperation",
    "Service",
]

# --- Prefixes & Namespaces -------------------------------------------------

PREFIXES: Mapping[str, str] = MappingProxyType(
    {
        "meb": "http://rdf.myexperiment.org/ontologies/base/",
        "rdf": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
        "xsd": "http://www.w3.org/2001/XMLSchema#",
        "pav": "http://purl.org/pav/",
        "dct": "http://purl.org/dc/terms/",
        "oslc": "http://open-services.net/ns/core#",
        "melding": "http://lblod.data.gift/vocabularies/automatische-melding/",
        "lblodBesluit": "http://lblod.data.gift/vocabularies/besluit/",
        "besluit": "http://data.vlaanderen.be/ns/besluit#",
        "mandaat": "http://data.vlaanderen.be/ns/mandaat#",
        "adms": "http://www.w3.org/ns/adms#",
        "muAccount": "http://mu.semte.ch/vocabularies/account/",
        "eli": "http://data.europa.eu/eli/ontology#",
        "org": "http://www.w3.org/ns/org#",
        "elod": "http://linkedeconomy.org/ontology#",
        "nie": "http://www.semanticdesktop.org/ontologies/2007/01/19/nie#",
        "prov": "http://www.w3.org/ns/prov#",
        "mu": "http://mu.semte.ch/vocabularies/core/",
        "foaf": "http://xmlns.com/foaf/0.1/",
        "nfo": "http://www.semanticdesktop.org/ontologies/2007/03/22/nfo#",
        "skos": "http://www.w3.org/2004/02/skos/core#",
        "dbpedia": "http://dbpedia.org/ontology/",
        "ext": "http://mu.semte.ch/vocabularies/ext/",
        "http": "http://www.w3.org/2011/http#",
        "rpioHttp": "http://redpencil.data.gift/vocabularies/http/",
        "dgftSec": "http://lblod.data.gift/vocabularies/security/",
        "dgftOauth": "http://kanselarij.vo.data.gift/vocabularies/oauth-2.0-session/",
        "wotSec": "https://www.w3.org/2019/wot/security#",
        "cogs": "http://vocab.deri.ie/cogs#",
        "asj": "http://data.lblod.info/id/automatic-submission-job/",
        "services": "http://lblod.data.gift/services/",
        "job": "http://lblod.data.gift/jobs/",
        "task": "http://redpencil.data.gift/vocabularies/tasks/",
        "js": "http://redpencil.data.gift/id/concept/JobStatus/",
        "tasko": "http://lblod.data.gift/id/jobs/concept/TaskOperation/",
        "jobo": "http://lblod.data.gift/id/jobs/concept/JobOperation/",
        "hrvst": "http://lblod.data.gift/vocabularies/harvesting/",
        "lblodlg": "http://data.lblod.info/vocabularies/leidinggevenden/",
    }
)

SPARQL_PREFIXES = "\n".join(f"PREFIX {key}: <{value}>" for key, value in PREFIXES.items())

ADMS = Namespace(PREFIXES["adms"])
ASJ = Namespace(PREFIXES["asj"])
COGS = Namespace(PREFIXES["cogs"])
DCT = Namespace(PREFIXES["dct"])
DBPEDIA = Namespace(PREFIXES["dbpedia"])
EXT = Namespace(PREFIXES["ext"])
HRVST = Namespace(PREFIXES["hrvst"])
JOBO = Namespace(PREFIXES["jobo"])
JS = Namespace(PREFIXES["js"])
MU = Namespace(PREFIXES["mu"])
NFO = Namespace(PREFIXES["nfo"])
NIE = Namespace(PREFIXES["nie"])
OSLC = Namespace(PREFIXES["oslc"])
PROV = Namespace(PREFIXES["prov"])
SERVICES = Namespace(PREFIXES["services"])
TASK = Namespace(PREFIXES["task"])
TASKO = Namespace(PREFIXES["tasko"])

# --- Identifier Bases & Graphs ---------------------------------------------

BASES: Mapping[str, str] = MappingProxyType(
    {
        "job": PREFIXES["asj"],
        "task": PREFIXES["asj"],
        "error": "http://data.lblod.info/errors/",
        "resultsContainer": PREFIXES["asj"],
        "inputContainer": PREFIXES["asj"],
        "harvestingCollection": PREFIXES["asj"],
        "remoteDataObject": "http://data.lblod.info/id/remote-data-objects/",
        "file": PREFIXES["asj"],
    }
)

GRAPHS: Mapping[str, URIRef] = MappingProxyType(
    {
        "error": URIRef("http://mu.semte.ch/graphs/error"),
    }
)

FORMATS: Mapping[str, str] = MappingProxyType(
    {
        "ttl": "text/turtle",
    }
)
DEFAULT_FORMAT = "application/octet-stream"

ERROR_SUBJECT = "Automatic Submission Service"


# --- Status Vocabularies ---------------------------------------------------


class Status(str, Enum):
    """Lifecycle states shared by Jobs and Tasks."""

    SCHEDULED = f"{PREFIXES['js']}scheduled"
    BUSY = f"{PREFIXES['js']}busy"
    SUCCESS = f"{PREFIXES['js']}success"
    FAILED = f"{PREFIXES['js']}failed"

    @property
    def uri(self) -> URIRef:
        return URIRef(self.value)


# Statuses accepted by the Job and Task transitions; ``scheduled`` is Task-only.
JOB_STATUSES = frozenset({Status.BUSY, Status.SUCCESS, Status.FAILED})
TASK_STATUSES = frozenset(Status)


class DownloadStatus(str, Enum):
    """Statuses the download service puts on remote data objects."""

    # The misspelling is part of the published vocabulary.
    SCHEDULED = "http://lblod.data.gift/file-download-statuses/sheduled"
    ONGOING = "http://lblod.data.gift/file-download-statuses/ongoing"
    SUCCESS = "http://lblod.data.gift/file-download-statuses/success"
    FAILURE = "http://lblod.data.gift/file-download-statuses/failure"

    @property
    def uri(self) -> URIRef:
        return URIRef(self.value)


class SubmissionStatus(str, Enum):
    CONCEPT = "http://lblod.data.gift/concepts/79a52da4-f491-4e2f-9374-89a13cde8ecd"
    SUBMITTABLE = "http://lblod.data.gift/concepts/f6330856-e261-430f-b949-8e510d20d0ff"

    @property
    def uri(self) -> URIRef:
        return URIRef(self.value)


# --- Operations & Services -------------------------------------------------


class Operation(str, Enum):
    """Task and Job operations a job-controller uses to place pipeline steps."""

    REGISTER = f"{PREFIXES['tasko']}register"
    DOWNLOAD = f"{PREFIXES['tasko']}download"
    IMPORT = f"{PREFIXES['tasko']}import"
    ENRICH = f"{PREFIXES['tasko']}enrich"
    AUTOMATIC_SUBMISSION_FLOW = f"{PREFIXES['jobo']}automaticSubmissionFlow"

    @property
    def uri(self) -> URIRef:
        return URIRef(self.value)


class CogsOperation(str, Enum):
    TRANSFORMATION = f"{PREFIXES['cogs']}TransformationProcess"
    WEB_SERVICE_LOOKUP = f"{PREFIXES['cogs']}WebServiceLookup"

    @property
    def uri(self) -> URIRef:
        return URIRef(self.value)


class Service(str, Enum):
    """Creator identities of the services taking part in the flow."""

    AUTOMATIC_SUBMISSION = f"{PREFIXES['services']}automatic-submission-service"
    IMPORT_SUBMISSION = f"{PREFIXES['services']}import-submission-service"
    ENRICH_SUBMISSION = f"{PREFIXES['services']}enrich-submission-service"

    @property
    def uri(self) -> URIRef:
        return URIRef(self.value)
