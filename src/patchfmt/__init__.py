from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from patchfmt.errors import InvalidArgument, InvalidInput, PatchfmtConfigError, PatchfmtError
from patchfmt.options import RenderConfig, resolve, should_display
from patchfmt.records import DiffRecord, FilePatch, Hunk, Side, coerce_records, load_records
from patchfmt.render import render


def _package_version() -> str:
    try:
        return version("patchfmt")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "DiffRecord",
    "FilePatch",
    "Hunk",
    "InvalidArgument",
    "InvalidInput",
    "PatchfmtConfigError",
    "PatchfmtError",
    "RenderConfig",
    "Side",
    "__version__",
    "coerce_records",
    "load_records",
    "render",
    "resolve",
    "should_display",
]
