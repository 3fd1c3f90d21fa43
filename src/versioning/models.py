"""Data models for version requests and resolution."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

import semantic_version


class ConstraintKind(Enum):
    """Resolution strategy derived from a requested version string."""
    EXACT = "exact"
    LATEST = "latest"
    LATEST_MATCHING = "latest-matching"
    LATEST_ALLOWED = "latest-allowed"
    MIN_REQUIRED = "min-required"


@dataclass(frozen=True)
class Constraint:
    """Typed form of a requested version.

    ``raw`` is the normalized request (leading ``v`` stripped). ``pattern`` is
    only set for the latest family and holds the regex candidates must match.
    """
    kind: ConstraintKind
    raw: str
    pattern: Optional[str] = None


@dataclass(frozen=True)
class RequestedVersion:
    """Raw requested string plus the precedence step that produced it."""
    raw: str
    source: str  # "environment" | file path | "default"


@dataclass(frozen=True)
class CatalogEntry:
    """One remotely available release."""
    version: semantic_version.Version
    product: str

    def __str__(self) -> str:
        return str(self.version)


@dataclass
class TrustArtifact:
    """Checksum material fetched for a single install operation."""
    digest_list: Dict[str, str] = field(default_factory=dict)
    signature: Optional[bytes] = None
