"""Checksum and signature verification for downloaded release archives.

Digest lists and signatures always come from the canonical trust root,
never from ``TFENV_REMOTE``: a mirror may serve the archive, but it cannot
supply the digests that archive is checked against.
"""
from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from common.http_client import fetch_bytes
from constants import Constants
from errors import ChecksumMismatch, ChecksumNotFound
from products import Product
from versioning.models import TrustArtifact
from . import gpg

logger = logging.getLogger(__name__)

BytesFetcher = Callable[[str], bytes]
SignatureVerifier = Callable[[bytes, bytes, Optional[Path]], None]


def sha256sums_url(version: str) -> str:
    return Constants.SHA256SUMS_TEMPLATE.format(base=Constants.TRUST_ROOT_URL, version=version)


def signature_url(version: str) -> str:
    return Constants.SHA256SUMS_SIG_TEMPLATE.format(base=Constants.TRUST_ROOT_URL, version=version)


def parse_digest_list(text: str) -> Dict[str, str]:
    """Parse ``<hex>  <filename>`` lines into ``{filename: hex}``."""
    out: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.strip().split()
        if len(parts) >= 2:
            # sha256sum marks binary mode with a leading '*'
            out.setdefault(parts[1].lstrip("*"), parts[0])
    return out


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def verify_checksum(artifact: bytes, asset: str, digests: Dict[str, str], source: str = "SHA256SUMS") -> str:
    """Check ``artifact`` against the digest published for ``asset``.

    Returns:
        The verified hex digest.

    Raises:
        ChecksumNotFound: No line names ``asset`` exactly.
        ChecksumMismatch: The computed digest differs.
    """
    expected = digests.get(asset)
    if expected is None:
        raise ChecksumNotFound(asset, source)
    actual = sha256_hex(artifact)
    if actual.lower() != expected.strip().lower():
        raise ChecksumMismatch(asset, expected, actual)
    return actual


class TrustChainVerifier:
    """Runs the checksum stage and, when enabled, the signature stage."""

    def __init__(
        self,
        root: Path,
        signature_enabled: bool = False,
        fetch: Optional[BytesFetcher] = None,
        signature_verifier: Optional[SignatureVerifier] = None,
    ):
        self.root = Path(root)
        self.signature_enabled = signature_enabled
        self._fetch = fetch or (lambda url: fetch_bytes(url, context="trust"))
        self._verify_signature = signature_verifier or gpg.verify_detached

    @property
    def keys_file(self) -> Path:
        return self.root.joinpath(*Constants.BUNDLED_KEYS)

    def covers(self, product: Product) -> bool:
        return product.trust_root_covered

    def verify(self, product: Product, version: str, asset: str, artifact: bytes) -> Optional[TrustArtifact]:
        """Verify ``artifact`` for ``product`` ``version``.

        Returns:
            The trust material used, or None when the product is outside the
            trust root's coverage and verification was skipped.

        Raises:
            TrustError: Any checksum or signature failure.
        """
        if not self.covers(product):
            logger.warning(
                "Skipping checksum/PGP verification for product '%s': no canonical checksums are published for it.",
                product.name,
            )
            return None

        sums_url = sha256sums_url(version)
        sums = self._fetch(sums_url)
        digests = parse_digest_list(sums.decode("utf-8", errors="replace"))
        verify_checksum(artifact, asset, digests, source=sums_url)
        logger.info("Checksum verified for %s", asset)

        trust = TrustArtifact(digest_list=digests)
        if self.signature_enabled:
            logger.info("Verifying SHA256SUMS signature with gpg")
            trust.signature = self._fetch(signature_url(version))
            self._verify_signature(sums, trust.signature, self.keys_file)
            logger.info("PGP signature verified for terraform %s SHA256SUMS", version)
        return trust
