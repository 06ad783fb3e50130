"""User configuration loading for patchfmt.

Reads the optional `[diff]` table of `patchfmt.toml`. Values there act as
defaults underneath command-line flags; a missing file means built-in
defaults.
"""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from patchfmt.color import COLOR_MODES
from patchfmt.errors import PatchfmtConfigError

logger = logging.getLogger("patchfmt.config")

CONFIG_FILENAME = "patchfmt.toml"


@dataclass(frozen=True)
class PatchfmtConfig:
    src_prefix: str | None = None
    dst_prefix: str | None = None
    no_prefix: bool = False
    context: int | None = None
    abbrev: int | None = None
    full_index: bool = False
    color: str = "auto"

    def merge_flags(self, flags: Mapping[str, Any]) -> dict[str, Any]:
        """Layer command-line `flags` over the prefixes configured here.

        `--default-prefix` discards every configured prefix setting, and an
        explicit `--src-prefix`/`--dst-prefix` discards a configured
        `no_prefix`.
        """

        out: dict[str, Any] = {}
        if not flags.get("default-prefix"):
            if self.src_prefix is not None:
                out["src-prefix"] = self.src_prefix
            if self.dst_prefix is not None:
                out["dst-prefix"] = self.dst_prefix
            explicit = flags.get("src-prefix") is not None or flags.get("dst-prefix") is not None
            if self.no_prefix and not explicit:
                out["no-prefix"] = True
        out.update(flags)
        return out


def find_config(start: Path) -> Path | None:
    """Walk upward from `start` looking for `patchfmt.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        candidate = cur / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if cur.parent == cur:
            return None
        cur = cur.parent


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise PatchfmtConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise PatchfmtConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise PatchfmtConfigError(f"Expected {name} to be an integer.")
    if value < 0:
        raise PatchfmtConfigError(f"Expected {name} to be non-negative.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise PatchfmtConfigError(f"Expected {name} to be a string.")
    return value


def load_config(path: Path | None = None, *, start: Path | None = None) -> PatchfmtConfig:
    """Load `patchfmt.toml`.

    With no `path`, the file is searched for upward from `start` (default:
    the current directory); if none is found the defaults are returned. An
    explicit `path` must exist.
    """

    if path is None:
        path = find_config(start if start is not None else Path.cwd())
        if path is None:
            logger.debug("No %s found; using defaults", CONFIG_FILENAME)
            return PatchfmtConfig()

    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise PatchfmtConfigError(f"Missing config file at: {path}") from e
    except OSError as e:
        raise PatchfmtConfigError(f"Failed reading config file: {path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise PatchfmtConfigError(f"Config is not valid UTF-8: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise PatchfmtConfigError(f"Invalid TOML in {path}: {e}") from e

    diff_tbl = _as_table(data.get("diff"), name="diff")
    logger.debug("Loaded %s (%d diff setting(s))", path, len(diff_tbl))

    src_prefix = None
    if "src_prefix" in diff_tbl:
        src_prefix = _as_str(diff_tbl["src_prefix"], name="diff.src_prefix")

    dst_prefix = None
    if "dst_prefix" in diff_tbl:
        dst_prefix = _as_str(diff_tbl["dst_prefix"], name="diff.dst_prefix")

    no_prefix = False
    if "no_prefix" in diff_tbl:
        no_prefix = _as_bool(diff_tbl["no_prefix"], name="diff.no_prefix")

    context = None
    if "context" in diff_tbl:
        context = _as_int(diff_tbl["context"], name="diff.context")

    abbrev = None
    if "abbrev" in diff_tbl:
        abbrev = _as_int(diff_tbl["abbrev"], name="diff.abbrev")

    full_index = False
    if "full_index" in diff_tbl:
        full_index = _as_bool(diff_tbl["full_index"], name="diff.full_index")

    color = "auto"
    if "color" in diff_tbl:
        color = _as_str(diff_tbl["color"], name="diff.color")
        if color not in COLOR_MODES:
            raise PatchfmtConfigError(
                f"Unsupported diff.color: {color!r}. Supported: {', '.join(COLOR_MODES)}."
            )

    return PatchfmtConfig(
        src_prefix=src_prefix,
        dst_prefix=dst_prefix,
        no_prefix=no_prefix,
        context=context,
        abbrev=abbrev,
        full_index=full_index,
        color=color,
    )
