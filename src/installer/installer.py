"""Download, verify and place a release binary.

Stages run strictly in order and any failure aborts the install:

    asset name -> download URL -> fetch -> checksum -> signature
    -> create versions/<v>/ -> extract executable -> chmod +x

Trust failures are raised before anything under ``versions/`` is created.
A failed extraction may leave an empty version directory behind; retrying the
install simply overwrites it.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, List, Optional

from common.http_client import fetch_bytes
from common.logging_utils import extra_context, is_debug_enabled, safe_url
from settings import Settings
from trust.verifier import TrustChainVerifier
from versioning.resolver import installed_versions
from .archive import extract_binary
from .target import PlatformTarget, resolve_target

logger = logging.getLogger(__name__)

BytesFetcher = Callable[[str], bytes]


class Installer:
    """Installs product releases under ``<config_dir>/versions``."""

    def __init__(
        self,
        settings: Settings,
        verifier: Optional[TrustChainVerifier] = None,
        fetch: Optional[BytesFetcher] = None,
        target: Optional[PlatformTarget] = None,
    ):
        self.settings = settings
        self.product = settings.product
        self.target = target or resolve_target()
        self.verifier = verifier or TrustChainVerifier(
            settings.root,
            signature_enabled=settings.signature_enabled,
        )
        self._fetch = fetch or (lambda url: fetch_bytes(url, context="download"))

    @property
    def binary_name(self) -> str:
        return self.product.binary_name(self.target.os_name)

    def version_dir(self, version: str) -> Path:
        return self.settings.versions_dir / version

    def binary_path(self, version: str) -> Path:
        return self.version_dir(version) / self.binary_name

    def is_installed(self, version: str) -> bool:
        """True only when the binary exists and is executable."""
        path = self.binary_path(version)
        if not path.is_file():
            return False
        if os.name == "nt":
            return True
        return os.access(path, os.X_OK)

    def installed_versions(self) -> List[str]:
        return [str(v) for v in installed_versions(self.settings.versions_dir)]

    def asset_name(self, version: str) -> str:
        return self.product.asset_name(version, self.target.os_name, self.target.arch)

    def download_url(self, version: str) -> str:
        return self.product.download_url(self.settings.remote, version, self.asset_name(version))

    def install(self, version: str) -> Path:
        """Install ``version`` and return the path of its binary.

        Raises:
            FetchError: The archive or trust material could not be downloaded.
            TrustError: Checksum or signature verification failed.
            ExtractionError: The archive lacks the executable.
        """
        asset = self.asset_name(version)
        url = self.download_url(version)
        logger.info("Downloading %s", safe_url(url))
        artifact = self._fetch(url)
        if is_debug_enabled(logger):
            logger.debug(
                "Downloaded archive",
                extra=extra_context(
                    event="download",
                    component="installer",
                    action="fetch",
                    target=safe_url(url),
                    size=len(artifact),
                ),
            )

        self.verifier.verify(self.product, version, asset, artifact)

        dest = self.version_dir(version)
        dest.mkdir(parents=True, exist_ok=True)
        path = extract_binary(artifact, dest, self.binary_name)
        logger.info("Installed %s %s to %s", self.product.name, version, dest)
        return path
