"""Version parsing, constraint extraction, remote catalog and resolution."""

from .catalog import RemoteCatalog
from .models import CatalogEntry, Constraint, ConstraintKind, RequestedVersion, TrustArtifact
from .parser import classify, parse_version, try_parse_version
from .resolver import VersionResolver, find_requested_version, installed_versions

__all__ = [
    "CatalogEntry",
    "Constraint",
    "ConstraintKind",
    "RemoteCatalog",
    "RequestedVersion",
    "TrustArtifact",
    "VersionResolver",
    "classify",
    "find_requested_version",
    "installed_versions",
    "parse_version",
    "try_parse_version",
]
