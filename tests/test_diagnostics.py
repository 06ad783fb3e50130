"""Tests for patchfmt.diagnostics: error formatting and actionable hints."""

from __future__ import annotations

from patchfmt.diagnostics import format_error_with_hint, format_hint
from patchfmt.errors import InvalidArgument, InvalidInput, PatchfmtConfigError


def test_hint_bad_unified_value() -> None:
    hint = format_hint(InvalidArgument("Invalid --unified value: 'abc' (expected an integer)."))
    assert hint is not None
    assert "-U5" in hint


def test_hint_invalid_json() -> None:
    hint = format_hint(InvalidInput("Invalid JSON in <stdin>: Expecting value"))
    assert hint is not None
    assert "JSON" in hint


def test_hint_missing_field() -> None:
    hint = format_hint(InvalidInput("Missing required field records[0].patch.hunks."))
    assert hint is not None
    assert "hunks" in hint


def test_hint_config_error() -> None:
    hint = format_hint(PatchfmtConfigError("Invalid TOML in patchfmt.toml: x"))
    assert hint is not None
    assert "--config" in hint


def test_hint_unknown_error_returns_none() -> None:
    assert format_hint(RuntimeError("something unexpected")) is None
    assert format_hint(InvalidInput("Invalid file mode for records[0].side_a: '7'")) is None


def test_format_error_with_hint() -> None:
    result = format_error_with_hint(InvalidInput("Input file not found: x.json"))
    assert result.startswith("error: Input file not found: x.json")
    assert "\nhint: " in result


def test_format_error_without_hint() -> None:
    assert format_error_with_hint(RuntimeError("boom")) == "error: boom"
