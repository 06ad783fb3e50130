"""Error formatting and actionable hints for patchfmt CLI output.

Keep this module small and dependency-light: it is imported by the CLI layer
and only depends on the error hierarchy.
"""

from __future__ import annotations

from patchfmt.errors import InvalidArgument, InvalidInput, PatchfmtConfigError


def format_hint(exc: BaseException) -> str | None:
    """Return an actionable hint for a known error, or None."""
    msg = str(exc)

    if isinstance(exc, InvalidArgument):
        if "--unified" in msg:
            return "pass a non-negative whole number of context lines, e.g. `-U5`"
        return None

    if isinstance(exc, InvalidInput):
        if "Invalid JSON" in msg:
            return "the input must be a JSON object or an array of objects"
        if "not found" in msg:
            return "pass a readable file path, or `-` to read from stdin"
        if "Missing required field" in msg or "Expected records" in msg:
            return "each record needs side_a/side_b ({mode, object_id}) and patch ({old_path, new_path, hunks})"
        return None

    if isinstance(exc, PatchfmtConfigError):
        if "Invalid TOML" in msg:
            return "fix the syntax of patchfmt.toml or pass --config pointing at another file"
        return "check the [diff] table of patchfmt.toml"

    return None


def format_error_with_hint(exc: BaseException) -> str:
    """Format error message + optional hint for stderr output."""
    msg = (str(exc) or repr(exc)).strip()
    result = f"error: {msg}"
    hint = format_hint(exc)
    if hint:
        result += f"\nhint: {hint}"
    return result
