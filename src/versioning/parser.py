"""Version parsing and requested-string classification."""

from typing import Iterable, List, Optional

import semantic_version

from constants import ConstraintKeywords, Constants
from errors import ParseError
from .models import Constraint, ConstraintKind


def parse_version(text: str) -> semantic_version.Version:
    """Parse a strict ``major.minor.patch[-prerelease]`` string.

    Raises:
        ParseError: When ``text`` is not a semantic version.
    """
    try:
        return semantic_version.Version(text.strip())
    except ValueError as exc:
        raise ParseError(text) from exc


def try_parse_version(text: str) -> Optional[semantic_version.Version]:
    """Return the parsed version, or None when ``text`` is not a version."""
    try:
        return parse_version(text)
    except ParseError:
        return None


def sort_descending(texts: Iterable[str]) -> List[semantic_version.Version]:
    """Parse ``texts``, drop the ones that are not versions, newest first."""
    parsed = [v for v in (try_parse_version(t) for t in texts) if v is not None]
    parsed.sort(reverse=True)
    return parsed


def normalize_request(raw: str) -> str:
    """Trim whitespace and strip one leading ``v`` (``v1.2.3`` -> ``1.2.3``)."""
    s = raw.strip()
    if s.startswith("v"):
        s = s[1:]
    return s


def classify(raw: str) -> Constraint:
    """Classify a requested version string into a Constraint.

    ``latest`` and ``latest:<regex>`` use the latest family; the regex after
    the first ``:`` replaces the default three-component pattern. Keywords
    ``latest-allowed`` and ``min-required`` defer to the project's
    ``required_version``. Anything else is an exact pin returned as-is.
    """
    req = normalize_request(raw)

    if req == ConstraintKeywords.MIN_REQUIRED.value:
        return Constraint(kind=ConstraintKind.MIN_REQUIRED, raw=req)
    if req == ConstraintKeywords.LATEST_ALLOWED.value:
        return Constraint(kind=ConstraintKind.LATEST_ALLOWED, raw=req)
    if req == ConstraintKeywords.LATEST.value:
        return Constraint(
            kind=ConstraintKind.LATEST,
            raw=req,
            pattern=Constants.DEFAULT_LATEST_PATTERN,
        )
    if req.startswith(ConstraintKeywords.LATEST.value + ":"):
        _, pattern = req.split(":", 1)
        return Constraint(kind=ConstraintKind.LATEST_MATCHING, raw=req, pattern=pattern)

    return Constraint(kind=ConstraintKind.EXACT, raw=req)
