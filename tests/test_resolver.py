"""Tests for the version resolver: precedence chain and constraint semantics."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from errors import NoMatchingVersion, ResolutionError
from products import get_product
from versioning.catalog import RemoteCatalog
from versioning.resolver import (
    VersionResolver,
    find_local_version_file,
    find_requested_version,
    installed_versions,
)

from conftest import FakeFileSystem, make_installed


def index_html(*versions):
    return "\n".join(f'<a href="/terraform/{v}/">terraform_{v}</a>' for v in versions)


def catalog_for(*versions):
    fetch = MagicMock(return_value=index_html(*versions))
    return RemoteCatalog(get_product("terraform"), "https://releases.hashicorp.com/terraform/", fetch), fetch


def write_tf(workdir: Path, spec: str):
    workdir.mkdir(parents=True, exist_ok=True)
    (workdir / "main.tf").write_text(f'terraform {{\n  required_version = "{spec}"\n}}\n')


class TestFindRequestedVersion:
    """Precedence chain over an in-memory filesystem."""

    def test_override_wins(self):
        fs = FakeFileSystem({"/work/.terraform-version": "1.1.0\n"})
        req = find_requested_version(Path("/work"), Path("/home/u"), override=" 1.5.0 ", fs=fs)
        assert req.raw == "1.5.0"
        assert req.source == "TFENV_TERRAFORM_VERSION"
        assert fs.reads == []

    def test_nearest_ancestor_wins(self):
        fs = FakeFileSystem({
            "/work/.terraform-version": "1.1.0\n",
            "/work/a/.terraform-version": "1.2.0\n",
        })
        fs.add_dir("/work/a/b/c")
        req = find_requested_version(Path("/work/a/b/c"), Path("/home/u"), fs=fs)
        assert req.raw == "1.2.0"
        assert req.source == "/work/a/.terraform-version"

    def test_walks_to_filesystem_root(self):
        fs = FakeFileSystem({"/.terraform-version": "0.15.5"})
        assert find_local_version_file(Path("/x/y/z"), fs) == Path("/.terraform-version")

    def test_home_file(self):
        fs = FakeFileSystem({"/home/u/.terraform-version": "  v1.4.0  \n"})
        req = find_requested_version(Path("/work"), Path("/home/u"), fs=fs)
        assert req.raw == "v1.4.0"

    def test_empty_local_file_falls_through_to_home(self):
        fs = FakeFileSystem({
            "/work/.terraform-version": "   \n",
            "/home/u/.terraform-version": "1.3.3",
        })
        req = find_requested_version(Path("/work"), Path("/home/u"), fs=fs)
        assert req.raw == "1.3.3"

    def test_default_version_file(self):
        fs = FakeFileSystem({"/root/version": "1.0.11\n"})
        req = find_requested_version(Path("/work"), Path("/home/u"), default_file=Path("/root/version"), fs=fs)
        assert req.raw == "1.0.11"

    def test_falls_back_to_latest(self):
        req = find_requested_version(Path("/work"), Path("/home/u"), fs=FakeFileSystem())
        assert req.raw == "latest"
        assert req.source == "default"


class TestInstalledVersions:
    """Installed Version Set read from the filesystem."""

    def test_only_version_named_directories(self, tmp_path):
        versions_dir = tmp_path / "versions"
        (versions_dir / "1.2.0").mkdir(parents=True)
        (versions_dir / "1.10.0").mkdir()
        (versions_dir / "scratch").mkdir()
        (versions_dir / "1.9.0").write_text("a file, not a dir")
        assert [str(v) for v in installed_versions(versions_dir)] == ["1.10.0", "1.2.0"]

    def test_missing_versions_dir(self, tmp_path):
        assert installed_versions(tmp_path / "nope") == []


class TestResolveExact:
    """Exact pins."""

    def test_returned_as_is_without_lookup(self, make_settings):
        catalog, fetch = catalog_for("1.5.0")
        resolver = VersionResolver(make_settings(version_override="v1.5.7"), catalog)
        assert resolver.resolve() == "1.5.7"
        fetch.assert_not_called()

    def test_from_version_file(self, make_settings, tmp_path):
        settings = make_settings()
        settings.workdir.mkdir(parents=True)
        (settings.workdir / ".terraform-version").write_text("1.4.6\n")
        assert VersionResolver(settings, catalog_for()[0]).resolve() == "1.4.6"


class TestResolveLatest:
    """Latest-family resolution, local before remote."""

    def test_local_match_skips_remote(self, make_settings):
        settings = make_settings(version_override="latest")
        make_installed(settings.versions_dir, "1.2.0", "1.3.1")
        catalog, fetch = catalog_for("1.9.0")
        assert VersionResolver(settings, catalog).resolve() == "1.3.1"
        fetch.assert_not_called()

    def test_local_prerelease_not_selected_by_default_pattern(self, make_settings):
        settings = make_settings(version_override="latest", auto_install=False)
        make_installed(settings.versions_dir, "1.2.0", "1.6.0-beta1")
        assert VersionResolver(settings, catalog_for()[0]).resolve() == "1.2.0"

    def test_remote_when_nothing_installed(self, make_settings):
        settings = make_settings(version_override=r"latest:^1\.2\.")
        catalog, fetch = catalog_for("1.2.0", "1.2.5", "1.3.0")
        assert VersionResolver(settings, catalog).resolve() == "1.2.5"
        fetch.assert_called_once()

    def test_remote_default_pattern_skips_prerelease(self, make_settings):
        settings = make_settings(version_override="latest")
        catalog, _ = catalog_for("1.5.7", "1.6.0-rc1", "1.6.0-alpha20230405")
        assert VersionResolver(settings, catalog).resolve() == "1.5.7"

    def test_local_without_pattern_match_goes_remote(self, make_settings):
        settings = make_settings(version_override=r"latest:^1\.5\.")
        make_installed(settings.versions_dir, "1.4.0")
        catalog, fetch = catalog_for("1.5.0", "1.5.3")
        assert VersionResolver(settings, catalog).resolve() == "1.5.3"
        fetch.assert_called_once()

    def test_no_remote_match(self, make_settings):
        settings = make_settings(version_override=r"latest:^9\.")
        catalog, _ = catalog_for("1.5.0")
        with pytest.raises(NoMatchingVersion, match="found in remote") as exc_info:
            VersionResolver(settings, catalog).resolve()
        assert exc_info.value.remote_checked is True

    def test_installed_only_mode(self, make_settings):
        settings = make_settings(version_override="latest", auto_install=False)
        catalog, fetch = catalog_for("1.5.0")
        with pytest.raises(NoMatchingVersion, match="auto-install disabled") as exc_info:
            VersionResolver(settings, catalog).resolve()
        assert exc_info.value.remote_checked is False
        fetch.assert_not_called()

    def test_remote_first_ignores_installed(self, make_settings):
        settings = make_settings(auto_install=False)
        make_installed(settings.versions_dir, "1.2.0")
        catalog, fetch = catalog_for("1.2.0", "1.3.0")
        resolver = VersionResolver(settings, catalog)
        assert resolver.resolve_requested("latest", local_first=False) == "1.3.0"
        fetch.assert_called_once()

    def test_invalid_regex_is_resolution_error(self, make_settings):
        settings = make_settings(version_override="latest:(")
        make_installed(settings.versions_dir, "1.0.0")
        with pytest.raises(ResolutionError, match=r"Invalid regex '\('"):
            VersionResolver(settings, catalog_for()[0]).resolve()


class TestResolveFromRequiredVersion:
    """min-required and latest-allowed read the project's required_version."""

    def test_min_required(self, make_settings):
        settings = make_settings(version_override="min-required")
        write_tf(settings.workdir, ">= 1.2")
        assert VersionResolver(settings, catalog_for()[0]).resolve() == "1.2.0"

    def test_min_required_not_equal_fails(self, make_settings):
        settings = make_settings(version_override="min-required")
        write_tf(settings.workdir, "!= 1.3.0")
        with pytest.raises(ResolutionError, match="min-required"):
            VersionResolver(settings, catalog_for()[0]).resolve()

    def test_min_required_without_declaration_fails(self, make_settings):
        settings = make_settings(version_override="min-required")
        settings.workdir.mkdir(parents=True)
        with pytest.raises(ResolutionError):
            VersionResolver(settings, catalog_for()[0]).resolve()

    def test_latest_allowed_pessimistic_minor(self, make_settings):
        settings = make_settings(version_override="latest-allowed")
        write_tf(settings.workdir, "~> 1.2")
        catalog, _ = catalog_for("1.2.9", "1.3.0", "2.0.0")
        # ~> 1.2 keeps only the major prefix, so 1.3.0 is admitted
        assert VersionResolver(settings, catalog).resolve() == "1.3.0"

    def test_latest_allowed_pessimistic_patch(self, make_settings):
        settings = make_settings(version_override="latest-allowed")
        write_tf(settings.workdir, "~> 1.2.0")
        catalog, _ = catalog_for("1.2.9", "1.3.0", "2.0.0")
        assert VersionResolver(settings, catalog).resolve() == "1.2.9"

    def test_latest_allowed_upper_bound_pins(self, make_settings):
        settings = make_settings(version_override="latest-allowed")
        write_tf(settings.workdir, "<= 1.4.2")
        catalog, fetch = catalog_for("1.9.0")
        assert VersionResolver(settings, catalog).resolve() == "1.4.2"
        fetch.assert_not_called()

    def test_latest_allowed_lower_bound_is_latest(self, make_settings):
        settings = make_settings(version_override="latest-allowed")
        write_tf(settings.workdir, ">= 1.0.0")
        make_installed(settings.versions_dir, "1.1.0")
        assert VersionResolver(settings, catalog_for("1.9.0")[0]).resolve() == "1.1.0"

    def test_latest_allowed_unmapped_fails(self, make_settings):
        settings = make_settings(version_override="latest-allowed")
        write_tf(settings.workdir, "~> 1")
        with pytest.raises(ResolutionError, match="latest-allowed"):
            VersionResolver(settings, catalog_for()[0]).resolve()
