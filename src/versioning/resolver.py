"""Resolve the requested version for the current working context.

Precedence, first non-empty wins:

1. ``TFENV_TERRAFORM_VERSION``
2. ``.terraform-version`` in the working directory or its nearest ancestor
3. ``~/.terraform-version``
4. ``<config_dir>/version`` written by ``tfenv use``
5. ``latest``

Latest-family requests are answered from installed versions first; the
remote catalog is only consulted when nothing installed matches.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

import semantic_version

from common.fs import LOCAL_FS, LocalFileSystem
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, ConstraintKeywords
from errors import NoMatchingVersion, ResolutionError
from settings import Settings
from .catalog import RemoteCatalog
from .models import Constraint, ConstraintKind, RequestedVersion
from .parser import classify, sort_descending
from .required_version import find_version_spec, latest_allowed_mapping, min_required

logger = logging.getLogger(__name__)


def find_local_version_file(start: Path, fs: LocalFileSystem = LOCAL_FS) -> Optional[Path]:
    """Walk from ``start`` up to the filesystem root looking for a version file."""
    current = Path(start)
    while True:
        candidate = current / Constants.VERSION_FILE
        if fs.is_file(candidate):
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def _read_trimmed(path: Path, fs: LocalFileSystem) -> str:
    try:
        return fs.read_text(path).strip()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read version file %s: %s", path, exc)
        return ""


def find_requested_version(
    workdir: Path,
    home: Optional[Path],
    *,
    override: Optional[str] = None,
    default_file: Optional[Path] = None,
    fs: LocalFileSystem = LOCAL_FS,
) -> RequestedVersion:
    """Apply the precedence chain and return the raw requested string.

    Pure with respect to its arguments: all filesystem probes go through ``fs``.
    """
    if override and override.strip():
        return RequestedVersion(raw=override.strip(), source=Constants.ENV_VERSION_OVERRIDE)

    local = find_local_version_file(workdir, fs)
    if local is not None:
        raw = _read_trimmed(local, fs)
        if raw:
            return RequestedVersion(raw=raw, source=str(local))

    if home is not None:
        home_file = Path(home) / Constants.VERSION_FILE
        if fs.is_file(home_file):
            raw = _read_trimmed(home_file, fs)
            if raw:
                return RequestedVersion(raw=raw, source=str(home_file))

    if default_file is not None and fs.is_file(default_file):
        raw = _read_trimmed(default_file, fs)
        if raw:
            return RequestedVersion(raw=raw, source=str(default_file))

    return RequestedVersion(raw=ConstraintKeywords.LATEST.value, source="default")


def installed_versions(versions_dir: Path, fs: LocalFileSystem = LOCAL_FS) -> List[semantic_version.Version]:
    """Installed Version Set, newest first.

    Read live from ``versions_dir``: every subdirectory whose name is a valid
    version, whether or not it holds a binary.
    """
    if not fs.is_dir(versions_dir):
        return []
    return sort_descending(
        name for name in fs.listdir(versions_dir) if fs.is_dir(Path(versions_dir) / name)
    )


class VersionResolver:
    """Turns the configured request into a concrete version string."""

    def __init__(
        self,
        settings: Settings,
        catalog: Optional[RemoteCatalog] = None,
        fs: LocalFileSystem = LOCAL_FS,
    ):
        self.settings = settings
        self.catalog = catalog or RemoteCatalog(settings.product, settings.remote)
        self.fs = fs

    def requested_version(self) -> RequestedVersion:
        return find_requested_version(
            self.settings.workdir,
            self.settings.home,
            override=self.settings.version_override,
            default_file=self.settings.default_version_file,
            fs=self.fs,
        )

    def resolve(self) -> str:
        """Resolve the request found through the precedence chain."""
        requested = self.requested_version()
        logger.debug("Requested version '%s' (set by %s)", requested.raw, requested.source)
        return self.resolve_requested(requested.raw)

    def resolve_requested(self, raw: str, *, local_first: bool = True) -> str:
        """Resolve a raw requested string such as ``1.5.0`` or ``latest:^1\\.2``.

        Args:
            raw: Requested version text.
            local_first: When False, latest-family requests skip the installed
                versions and go straight to the remote catalog.

        Raises:
            ResolutionError: When no version satisfies the request.
        """
        constraint = classify(raw)
        version = self._resolve_constraint(constraint, local_first=local_first)
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved version",
                extra=extra_context(
                    event="decision",
                    component="resolver",
                    action="resolve",
                    requested=raw,
                    kind=constraint.kind.value,
                    resolved=version,
                ),
            )
        return version

    def _resolve_constraint(self, constraint: Constraint, *, local_first: bool) -> str:
        kind = constraint.kind

        if kind == ConstraintKind.EXACT:
            return constraint.raw

        if kind == ConstraintKind.MIN_REQUIRED:
            spec = find_version_spec(self.settings.workdir, self.fs)
            found = min_required(spec)
            if found is None:
                raise ResolutionError(
                    f"min-required could not be determined from required_version "
                    f"'{spec}' in {self.settings.workdir}"
                    if spec
                    else f"min-required could not be determined: no required_version found in {self.settings.workdir}"
                )
            logger.info("Resolved min-required to %s from '%s'", found, spec)
            return found

        if kind == ConstraintKind.LATEST_ALLOWED:
            spec = find_version_spec(self.settings.workdir, self.fs)
            mapped = latest_allowed_mapping(spec)
            if mapped is None:
                raise ResolutionError(
                    f"latest-allowed could not be mapped from required_version '{spec}' in {self.settings.workdir}"
                )
            logger.info("Mapped latest-allowed to '%s' from '%s'", mapped, spec)
            return self._resolve_constraint(classify(mapped), local_first=local_first)

        pattern = constraint.pattern if constraint.pattern is not None else Constants.DEFAULT_LATEST_PATTERN
        if local_first:
            local = self.latest_local_matching(pattern)
            if local is not None:
                return local
        if self.settings.auto_install or not local_first:
            remote = self.latest_remote_matching(pattern)
            if remote is not None:
                return remote
            raise NoMatchingVersion(pattern, remote_checked=True)
        raise NoMatchingVersion(pattern, remote_checked=False)

    def latest_local_matching(self, pattern: str) -> Optional[str]:
        """Newest installed version whose name matches ``pattern``."""
        regex = _compile(pattern, "latest local matching")
        for version in installed_versions(self.settings.versions_dir, self.fs):
            if regex.search(str(version)):
                return str(version)
        return None

    def latest_remote_matching(self, pattern: str) -> Optional[str]:
        """Newest remote catalog version matching ``pattern``."""
        logger.info("Looking up remote versions matching '%s'", pattern)
        entry = self.catalog.latest(pattern)
        return str(entry.version) if entry is not None else None


def _compile(pattern: str, purpose: str) -> "re.Pattern[str]":
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ResolutionError(f"Invalid regex '{pattern}' for {purpose}: {exc}") from exc
