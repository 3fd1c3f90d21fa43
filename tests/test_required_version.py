"""Tests for required_version extraction and its derived queries."""

import pytest

from versioning.required_version import find_version_spec, latest_allowed_mapping, min_required

from conftest import FakeFileSystem


class TestFindVersionSpec:
    """Scanning declaration files in a directory."""

    def test_hcl_declaration(self, fake_fs):
        fake_fs.add_file("/proj/main.tf", 'terraform {\n  required_version = ">= 1.2.0"\n}\n')
        assert find_version_spec("/proj", fake_fs) == ">= 1.2.0"

    def test_json_declaration(self, fake_fs):
        fake_fs.add_file("/proj/main.tf.json", '{"terraform": [{"required_version": "~> 1.4"}]}')
        assert find_version_spec("/proj", fake_fs) == "~> 1.4"

    def test_commented_declaration_ignored(self, fake_fs):
        fake_fs.add_file(
            "/proj/main.tf",
            '# required_version = "= 0.12.0"\n// required_version = "= 0.13.0"\nterraform {\n  required_version = "1.1.0"\n}\n',
        )
        assert find_version_spec("/proj", fake_fs) == "1.1.0"

    def test_first_file_in_enumeration_order_wins(self):
        fs = FakeFileSystem()
        fs.add_file("/proj/z.tf", 'required_version = ">= 2.0.0"\n')
        fs.add_file("/proj/a.tf", 'required_version = ">= 1.0.0"\n')
        assert find_version_spec("/proj", fs) == ">= 2.0.0"

    def test_first_declaration_in_file_wins(self, fake_fs):
        fake_fs.add_file("/proj/main.tf", 'required_version = "< 1.3.0"\nrequired_version = ">= 1.0.0"\n')
        assert find_version_spec("/proj", fake_fs) == "< 1.3.0"

    def test_other_suffixes_ignored(self, fake_fs):
        fake_fs.add_file("/proj/notes.txt", 'required_version = ">= 9.0.0"\n')
        fake_fs.add_file("/proj/vars.tfvars", 'required_version = ">= 9.0.0"\n')
        assert find_version_spec("/proj", fake_fs) is None

    def test_missing_directory_is_none(self, fake_fs):
        assert find_version_spec("/does/not/exist", fake_fs) is None

    def test_real_filesystem(self, tmp_path):
        (tmp_path / "versions.tf").write_text('terraform {\n  required_version = "!= 1.3.0"\n}\n')
        assert find_version_spec(tmp_path) == "!= 1.3.0"


class TestMinRequired:
    """Lowest admitted version from a specifier."""

    @pytest.mark.parametrize(
        "spec,expected",
        [
            (">= 1.2.0", "1.2.0"),
            ("~> 1.2", "1.2.0"),
            ("1", "1.0.0"),
            ("= 0.12.31", "0.12.31"),
            (">= 1.5.0, < 2.0.0", "1.5.0"),
            (">= 1.6-rc1", "1.6.0-rc1"),
        ],
    )
    def test_extracts_and_pads(self, spec, expected):
        assert min_required(spec) == expected

    def test_not_equal_is_not_a_minimum(self):
        assert min_required("!= 1.3.0") is None

    def test_no_token(self):
        assert min_required(">= foo") is None
        assert min_required(None) is None


class TestLatestAllowedMapping:
    """Translating specifiers into latest-family requests."""

    def test_greater_than_is_unconstrained_latest(self):
        assert latest_allowed_mapping("> 1.2.0") == "latest"
        assert latest_allowed_mapping(">= 1.2.0") == "latest"

    def test_upper_bound_is_exact_pin(self):
        assert latest_allowed_mapping("<= 1.4.2") == "1.4.2"
        assert latest_allowed_mapping("< 1.5.0") == "1.5.0"

    def test_pessimistic_drops_rightmost_component(self):
        assert latest_allowed_mapping("~> 1.2") == r"latest:^1\."
        assert latest_allowed_mapping("~> 1.2.3") == r"latest:^1\.2\."

    def test_single_component_pessimistic_has_no_mapping(self):
        assert latest_allowed_mapping("~> 1") is None

    def test_unmapped_operators(self):
        assert latest_allowed_mapping("= 1.2.0") is None
        assert latest_allowed_mapping("!= 1.2.0") is None
        assert latest_allowed_mapping(None) is None
