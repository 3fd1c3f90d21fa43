"""Error taxonomy shared by the resolver, the trust chain and the installer.

Every error raised by the core derives from ``TfenvError`` so the CLI can
report it uniformly. ``exit_code`` selects the process exit status.
"""
from __future__ import annotations

from typing import Optional

from constants import ExitCodes


class TfenvError(Exception):
    """Base class for all core errors."""

    exit_code = ExitCodes.FILE_ERROR


class ParseError(TfenvError, ValueError):
    """Malformed version string. Recoverable: callers skip the candidate."""

    def __init__(self, text: str):
        super().__init__(f"'{text}' is not a valid version")
        self.text = text


class ConfigError(TfenvError):
    """Unreadable or malformed configuration."""

    exit_code = ExitCodes.CONFIG_ERROR


class ResolutionError(TfenvError):
    """No constraint-satisfying version could be determined."""

    exit_code = ExitCodes.RESOLUTION_ERROR


class NoMatchingVersion(ResolutionError):
    """A latest-family pattern matched nothing locally or remotely."""

    def __init__(self, pattern: str, *, remote_checked: bool):
        if remote_checked:
            message = f"No versions matching '{pattern}' found in remote"
        else:
            message = f"No installed versions matched '{pattern}' and auto-install disabled"
        super().__init__(message)
        self.pattern = pattern
        self.remote_checked = remote_checked


class FetchError(TfenvError):
    """Network or HTTP failure. Never retried."""

    exit_code = ExitCodes.CONNECTION_ERROR

    def __init__(self, url: str, status: Optional[int] = None, reason: Optional[str] = None):
        if status is not None:
            message = f"Failed to fetch {url}: HTTP {status}"
        else:
            message = f"Failed to fetch {url}: {reason or 'connection error'}"
        super().__init__(message)
        self.url = url
        self.status = status


class TrustError(TfenvError):
    """Base for checksum and signature failures."""

    exit_code = ExitCodes.TRUST_ERROR


class ChecksumNotFound(TrustError):
    """The digest list has no entry for the asset."""

    def __init__(self, asset: str, source: str):
        super().__init__(f"No checksum found for asset {asset} in {source}")
        self.asset = asset


class ChecksumMismatch(TrustError):
    """The downloaded artifact does not hash to the published digest."""

    def __init__(self, asset: str, expected: str, actual: str):
        super().__init__(f"SHA256 mismatch for {asset}: expected {expected} got {actual}")
        self.asset = asset
        self.expected = expected
        self.actual = actual


class SignatureInvalid(TrustError):
    """The digest list signature could not be verified."""


class ExtractionError(TfenvError):
    """The archive does not contain the expected executable."""

    exit_code = ExitCodes.EXTRACTION_ERROR
