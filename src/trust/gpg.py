"""Detached-signature verification with an ephemeral GnuPG home.

Keys are imported into a keyring that exists only for the duration of one
verification; the user's default keyring is never read or written.
"""
from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from errors import SignatureInvalid

logger = logging.getLogger(__name__)

GPG_TIMEOUT = 60


def _run(cmd: List[str]) -> subprocess.CompletedProcess:
    logger.debug("Running %s", " ".join(cmd))
    return subprocess.run(
        cmd,
        capture_output=True,
        text=True,
        timeout=GPG_TIMEOUT,
        check=False,
    )


def verify_detached(
    data: bytes,
    signature: bytes,
    keys_file: Optional[Path] = None,
    gpg: Optional[str] = None,
) -> None:
    """Verify ``signature`` over ``data`` using only the keys in ``keys_file``.

    Raises:
        SignatureInvalid: When gpg is missing, the key import fails or the
            signature does not verify.
    """
    gpg_bin = gpg or shutil.which("gpg")
    if not gpg_bin:
        raise SignatureInvalid("gpg not found in PATH; cannot verify SHA256SUMS signature")

    with tempfile.TemporaryDirectory(prefix="tfenv-gnupg-") as home:
        home_path = Path(home)
        home_path.chmod(0o700)
        data_path = home_path / "SHA256SUMS"
        sig_path = home_path / "SHA256SUMS.sig"
        data_path.write_bytes(data)
        sig_path.write_bytes(signature)

        try:
            if keys_file is not None and keys_file.is_file():
                result = _run([gpg_bin, "--batch", "--homedir", home, "--import", str(keys_file)])
                if result.returncode != 0:
                    raise SignatureInvalid(f"gpg key import from {keys_file} failed: {result.stderr.strip()}")
            else:
                logger.warning("No bundled keys found; verifying against an empty keyring")

            result = _run([gpg_bin, "--batch", "--homedir", home, "--verify", str(sig_path), str(data_path)])
        except (OSError, subprocess.SubprocessError) as exc:
            raise SignatureInvalid(f"failed to invoke gpg: {exc}") from exc

        if result.returncode != 0:
            raise SignatureInvalid(f"gpg signature verification failed: {result.stderr.strip()}")
