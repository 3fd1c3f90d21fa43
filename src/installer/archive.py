"""Zip bundle handling: release archives carry a single executable."""

from __future__ import annotations

import io
import os
import posixpath
import stat
import tempfile
import zipfile
import zlib
from pathlib import Path
from typing import IO, Iterator, Tuple

from errors import ExtractionError


def unzip(data: bytes) -> Iterator[Tuple[str, IO[bytes]]]:
    """Yield ``(entry_name, reader)`` for every file entry in the archive."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise ExtractionError(f"failed to read zip archive: {exc}") from exc
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            with archive.open(info) as reader:
                yield info.filename, reader


def make_executable(path: Path) -> None:
    """Set the executable bits; Windows has no such concept."""
    if os.name == "nt":
        return
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def extract_binary(data: bytes, dest_dir: Path, binary_name: str) -> Path:
    """Extract the entry named ``binary_name`` into ``dest_dir``.

    The bytes land in a temporary sibling first and are moved into place with
    ``os.replace``, so repeated or concurrent installs of the same version
    leave exactly one complete binary.

    Raises:
        ExtractionError: When the archive has no such entry or the entry
            fails to decompress.
    """
    target = dest_dir / binary_name
    for name, reader in unzip(data):
        if posixpath.basename(name) != binary_name:
            continue
        fd, tmp_name = tempfile.mkstemp(prefix=f".{binary_name}.", dir=dest_dir)
        tmp_path = Path(tmp_name)
        try:
            try:
                with os.fdopen(fd, "wb") as out:
                    while True:
                        chunk = reader.read(1024 * 1024)
                        if not chunk:
                            break
                        out.write(chunk)
            except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
                raise ExtractionError(f"failed to extract {name}: {exc}") from exc
            tmp_path.chmod(0o644)
            make_executable(tmp_path)
            os.replace(tmp_path, target)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return target
    raise ExtractionError(f"{binary_name} binary not found inside archive")
