"""Filesystem access seam.

The declaration-file search and the ``required_version`` scan read through
this small interface so tests can hand in an in-memory tree instead of
mutating the real filesystem.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import List


class LocalFileSystem:
    """Thin wrapper over the real filesystem."""

    def is_file(self, path: Path) -> bool:
        return Path(path).is_file()

    def is_dir(self, path: Path) -> bool:
        return Path(path).is_dir()

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def listdir(self, path: Path) -> List[str]:
        """Entry names in enumeration order, which is not sorted."""
        return os.listdir(path)


LOCAL_FS = LocalFileSystem()
