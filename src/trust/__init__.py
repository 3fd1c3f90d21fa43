"""Trust chain: SHA256SUMS checksums and detached PGP signatures."""

from .verifier import TrustChainVerifier, parse_digest_list, verify_checksum

__all__ = ["TrustChainVerifier", "parse_digest_list", "verify_checksum"]
