"""Unit tests for utility functions (buildinit.utils).

Tests cover:
- derive_package_name / is_valid_package_name
- load_json (use tmp_path)
- write_file
- Rich output helpers (print_summary_table, print_success, etc.)
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from buildinit.utils import (
    derive_package_name,
    is_valid_package_name,
    load_json,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    write_file,
)


# ---------------------------------------------------------------------------
# Package names
# ---------------------------------------------------------------------------


class TestDerivePackageName:
    @pytest.mark.unit
    def test_simple_name(self):
        assert derive_package_name("demo") == "demo"

    @pytest.mark.unit
    def test_special_chars_dropped(self):
        assert derive_package_name("My-App 2") == "myapp2"

    @pytest.mark.unit
    def test_underscores_preserved(self):
        assert derive_package_name("my_app") == "my_app"

    @pytest.mark.unit
    def test_leading_digits_stripped(self):
        assert derive_package_name("2048-game") == "game"

    @pytest.mark.unit
    def test_nothing_usable(self):
        assert derive_package_name("123-456") == ""


class TestIsValidPackageName:
    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["demo", "org.acme.demo", "my_app", "a1.b2"])
    def test_valid(self, name):
        assert is_valid_package_name(name)

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["", "org..acme", "1demo", "org.acme-demo", "import.x", ".demo"])
    def test_invalid(self, name):
        assert not is_valid_package_name(name)


# ---------------------------------------------------------------------------
# load_json
# ---------------------------------------------------------------------------


class TestJsonIO:
    @pytest.mark.unit
    def test_load_json_dict(self, tmp_path: Path):
        data = {"key": "value", "number": 42}
        filepath = tmp_path / "test.json"
        filepath.write_text(json.dumps(data))

        result = load_json(filepath)
        assert result == data

    @pytest.mark.unit
    def test_load_json_list_wraps_in_dict(self, tmp_path: Path):
        filepath = tmp_path / "test.json"
        filepath.write_text(json.dumps([1, 2, 3]))

        assert load_json(filepath) == {"_root": [1, 2, 3]}

    @pytest.mark.unit
    def test_load_json_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_load_json_invalid_json(self, tmp_path: Path):
        filepath = tmp_path / "bad.json"
        filepath.write_text("not valid json")

        with pytest.raises(json.JSONDecodeError):
            load_json(filepath)


# ---------------------------------------------------------------------------
# write_file
# ---------------------------------------------------------------------------


class TestWriteFile:
    @pytest.mark.unit
    async def test_creates_parents(self, tmp_path: Path):
        filepath = tmp_path / "deep" / "nested" / "build.gradle"
        result = await write_file(filepath, "plugins {\n}\n")

        assert result == filepath
        assert filepath.read_text() == "plugins {\n}\n"

    @pytest.mark.unit
    async def test_overwrites(self, tmp_path: Path):
        filepath = tmp_path / "settings.gradle"
        filepath.write_text("old")
        await write_file(str(filepath), "new")

        assert filepath.read_text() == "new"


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichHelpers:
    @pytest.mark.unit
    def test_print_summary_table(self):
        with patch("buildinit.utils.console") as mock_console:
            print_summary_table({"Project type": "java-library"}, title="Generated Build")
        assert mock_console.print.call_count == 2

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "helper,style",
        [(print_success, "green"), (print_error, "red"), (print_warning, "yellow")],
    )
    def test_message_helpers(self, helper, style):
        with patch("buildinit.utils.console") as mock_console:
            helper("done")
        (message,), _ = mock_console.print.call_args
        assert style in message
        assert "done" in message
