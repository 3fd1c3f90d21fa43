"""Extract ``required_version`` constraints from Terraform declaration files.

Only the first declaration found is used: files are visited in filesystem
enumeration order and the first ``required_version`` in the first file that
has one wins. Multiple declarations are never merged.
"""
from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from common.fs import LOCAL_FS, LocalFileSystem
from constants import Constants, ConstraintKeywords

logger = logging.getLogger(__name__)

# HCL:  required_version = ">= 1.2.0"
# JSON: "required_version": ">= 1.2.0"
_DECLARATION_RE = re.compile(
    r'^\s*"?required_version"?\s*[:=]\s*"(?P<spec>[^"]*)"',
    re.MULTILINE,
)
_MIN_TOKEN_RE = re.compile(
    r"(?P<op>[~=!<>]{0,2})\s*(?P<num>[0-9]+(?:\.[0-9]+){0,2})(?P<pre>-[a-z]+[0-9]+)?"
)
_NUMERIC_RE = re.compile(r"[0-9]+(?:\.[0-9]+)*")
_FULL_VERSION_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+$")


def _find_in_json(node: Any) -> Optional[str]:
    if isinstance(node, dict):
        value = node.get("required_version")
        if isinstance(value, str) and value.strip():
            return value
        children = node.values()
    elif isinstance(node, list):
        children = node
    else:
        return None
    for child in children:
        found = _find_in_json(child)
        if found:
            return found
    return None


def _spec_from_text(name: str, text: str) -> Optional[str]:
    if name.endswith(".tf.json"):
        try:
            found = _find_in_json(json.loads(text))
        except json.JSONDecodeError:
            found = None
        if found:
            return found.strip()
    for match in _DECLARATION_RE.finditer(text):
        spec = match.group("spec").strip()
        if spec:
            return spec
    return None


def find_version_spec(directory: Path, fs: LocalFileSystem = LOCAL_FS) -> Optional[str]:
    """Return the first ``required_version`` specifier declared in ``directory``.

    Unreadable files and a missing directory are skipped; they are optional.
    """
    try:
        names = fs.listdir(directory)
    except OSError:
        return None

    for name in names:
        if not name.endswith(Constants.DECLARATION_SUFFIXES):
            continue
        path = Path(directory) / name
        if not fs.is_file(path):
            continue
        try:
            text = fs.read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Skipping unreadable declaration file %s: %s", path, exc)
            continue
        spec = _spec_from_text(name, text)
        if spec:
            logger.debug("Found required_version '%s' in %s", spec, path)
            return spec
    return None


def min_required(spec: Optional[str]) -> Optional[str]:
    """Lowest version a specifier admits, padded to ``major.minor.patch``.

    ``!=`` names a version to avoid rather than a minimum, so it yields None,
    as does a specifier without any numeric token.
    """
    if not spec:
        return None
    match = _MIN_TOKEN_RE.search(spec)
    if match is None:
        return None
    if match.group("op").strip().startswith("!="):
        return None

    found = match.group("num")
    while not _FULL_VERSION_RE.match(found):
        found += ".0"
    return found + (match.group("pre") or "")


def latest_allowed_mapping(spec: Optional[str]) -> Optional[str]:
    """Translate a specifier into a requested string of the latest family.

    * ``> X`` / ``>= X``  -> ``latest``
    * ``< X`` / ``<= X``  -> ``X`` (exact pin)
    * ``~> X.Y``          -> ``latest:^X\\.`` (rightmost component dropped)

    Anything else yields None. A single-component ``~> X`` has no component
    left to keep after the drop and also yields None.
    """
    if not spec:
        return None
    s = spec.strip()
    token_match = _NUMERIC_RE.search(s)
    token = token_match.group(0) if token_match else ""

    if s.startswith("~>"):
        if "." not in token:
            return None
        prefix = token.rsplit(".", 1)[0]
        return f"{ConstraintKeywords.LATEST.value}:^{re.escape(prefix)}\\."
    if s.startswith(">"):
        return ConstraintKeywords.LATEST.value
    if s.startswith("<"):
        return token or None
    return None
