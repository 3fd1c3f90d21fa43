"""Shared fixtures: settings factory, in-memory filesystem and zip builder."""

import io
import zipfile
from pathlib import Path, PurePosixPath

import pytest

from products import get_product
from settings import Settings


class FakeFileSystem:
    """In-memory stand-in for common.fs.LocalFileSystem.

    Files are registered with their full path; parent directories are
    implied. ``listdir`` preserves registration order.
    """

    def __init__(self, files=None, dirs=()):
        self.files = {}
        self.dirs = set()
        self.reads = []
        for d in dirs:
            self.add_dir(d)
        for path, content in (files or {}).items():
            self.add_file(path, content)

    def add_dir(self, path):
        p = PurePosixPath(str(path))
        self.dirs.add(str(p))
        for parent in p.parents:
            self.dirs.add(str(parent))

    def add_file(self, path, content):
        p = PurePosixPath(str(path))
        self.files[str(p)] = content
        for parent in p.parents:
            self.dirs.add(str(parent))

    def is_file(self, path):
        return str(PurePosixPath(str(path))) in self.files

    def is_dir(self, path):
        return str(PurePosixPath(str(path))) in self.dirs

    def read_text(self, path):
        key = str(PurePosixPath(str(path)))
        self.reads.append(key)
        if key not in self.files:
            raise FileNotFoundError(key)
        return self.files[key]

    def listdir(self, path):
        base = PurePosixPath(str(path))
        if str(base) not in self.dirs:
            raise FileNotFoundError(str(base))
        names = []
        for entry in list(self.files) + sorted(self.dirs):
            p = PurePosixPath(entry)
            if p.parent == base and p != base and p.name not in names:
                names.append(p.name)
        return names


@pytest.fixture
def fake_fs():
    return FakeFileSystem()


@pytest.fixture
def make_settings(tmp_path):
    """Factory for Settings rooted in a temporary directory."""

    def _make(**overrides):
        values = {
            "root": tmp_path / "root",
            "config_dir": tmp_path / "root",
            "workdir": tmp_path / "project",
            "home": tmp_path / "home",
            "product": get_product("terraform"),
            "remote": "https://releases.hashicorp.com/terraform/",
            "auto_install": True,
            "trust_tfenv": False,
            "version_override": None,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


def build_zip(entries):
    """Return zip bytes containing ``{name: bytes}`` entries."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


@pytest.fixture
def zip_bytes():
    return build_zip


def make_installed(versions_dir: Path, *versions, binary="terraform"):
    """Create version directories holding an executable stub binary."""
    for v in versions:
        d = versions_dir / v
        d.mkdir(parents=True, exist_ok=True)
        b = d / binary
        b.write_bytes(b"#!/bin/sh\n")
        b.chmod(0o755)
