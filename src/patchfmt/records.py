"""Diff record data model and input normalization.

Records are produced upstream (by whatever computed the line differences) and
are consumed read-only by the renderer. Two input shapes are accepted when
building records from plain data:

- the snake_case shape of this module's dataclasses::

    {"side_a": {"mode": ..., "object_id": ...}, "side_b": {...},
     "patch": {"old_path": ..., "new_path": ..., "hunks": [
        {"old_start": 1, "old_line_count": 2, "new_start": 1,
         "new_line_count": 3, "lines": [" a", "+b"]}]}}

- the shape emitted by the JavaScript `diff` package's ``structuredPatch``::

    {"a": {"mode": ..., "oid": ...}, "b": {...},
     "diff": {"oldFileName": ..., "newFileName": ..., "hunks": [
        {"oldStart": 1, "oldLines": 2, "newStart": 1, "newLines": 3,
         "lines": [" a", "+b"]}]}}
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any

from patchfmt.errors import InvalidInput

logger = logging.getLogger("patchfmt.records")

ABSENT_MODE = "000000"
DEV_NULL = "/dev/null"

_MODE_RE = re.compile(r"[0-7]{6}")


@dataclass(frozen=True)
class Side:
    mode: str
    object_id: str

    @property
    def absent(self) -> bool:
        return self.mode == ABSENT_MODE


@dataclass(frozen=True)
class Hunk:
    old_start: int
    old_line_count: int
    new_start: int
    new_line_count: int
    lines: tuple[str, ...]

    def header(self) -> str:
        return (
            f"@@ -{self.old_start},{self.old_line_count} "
            f"+{self.new_start},{self.new_line_count} @@"
        )


@dataclass(frozen=True)
class FilePatch:
    old_path: str
    new_path: str
    hunks: tuple[Hunk, ...] = ()


@dataclass(frozen=True)
class DiffRecord:
    side_a: Side
    side_b: Side
    patch: FilePatch

    @property
    def is_added(self) -> bool:
        return self.side_a.absent

    @property
    def is_deleted(self) -> bool:
        return self.side_b.absent

    @property
    def is_renamed(self) -> bool:
        p = self.patch
        return p.old_path != p.new_path and DEV_NULL not in (p.old_path, p.new_path)


def _as_mapping(value: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InvalidInput(f"Expected {name} to be an object.")
    return value


def _as_str(value: Any, *, name: str) -> str:
    if not isinstance(value, str):
        raise InvalidInput(f"Expected {name} to be a string.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidInput(f"Expected {name} to be an integer.")
    if value < 0:
        raise InvalidInput(f"Expected {name} to be non-negative, got {value}.")
    return value


def _as_list(value: Any, *, name: str) -> list[Any]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise InvalidInput(f"Expected {name} to be a list.")
    return list(value)


def _pick(data: Mapping[str, Any], *keys: str, name: str) -> Any:
    """Return the first of `keys` present in `data`."""
    for k in keys:
        if k in data:
            return data[k]
    raise InvalidInput(f"Missing required field {name}.")


def _side_from_mapping(data: Any, *, name: str) -> Side:
    tbl = _as_mapping(data, name=name)
    mode = _as_str(_pick(tbl, "mode", name=f"{name}.mode"), name=f"{name}.mode")
    oid = _pick(tbl, "object_id", "oid", name=f"{name}.object_id")
    return Side(mode=mode, object_id=_as_str(oid, name=f"{name}.object_id"))


def _hunk_from_mapping(data: Any, *, name: str) -> Hunk:
    tbl = _as_mapping(data, name=name)

    def field(snake: str, camel: str) -> int:
        return _as_int(_pick(tbl, snake, camel, name=f"{name}.{snake}"), name=f"{name}.{snake}")

    lines = _as_list(_pick(tbl, "lines", name=f"{name}.lines"), name=f"{name}.lines")
    return Hunk(
        old_start=field("old_start", "oldStart"),
        old_line_count=field("old_line_count", "oldLines"),
        new_start=field("new_start", "newStart"),
        new_line_count=field("new_line_count", "newLines"),
        lines=tuple(_as_str(line, name=f"{name}.lines[{i}]") for i, line in enumerate(lines)),
    )


def _patch_from_mapping(data: Any, *, name: str) -> FilePatch:
    tbl = _as_mapping(data, name=name)
    old_path = _pick(tbl, "old_path", "oldFileName", name=f"{name}.old_path")
    new_path = _pick(tbl, "new_path", "newFileName", name=f"{name}.new_path")
    hunks = _as_list(_pick(tbl, "hunks", name=f"{name}.hunks"), name=f"{name}.hunks")
    return FilePatch(
        old_path=_as_str(old_path, name=f"{name}.old_path"),
        new_path=_as_str(new_path, name=f"{name}.new_path"),
        hunks=tuple(_hunk_from_mapping(h, name=f"{name}.hunks[{i}]") for i, h in enumerate(hunks)),
    )


def record_from_mapping(data: Any, *, name: str = "record") -> DiffRecord:
    """Build a DiffRecord from either accepted mapping shape."""

    tbl = _as_mapping(data, name=name)
    return DiffRecord(
        side_a=_side_from_mapping(_pick(tbl, "side_a", "a", name=f"{name}.side_a"), name=f"{name}.side_a"),
        side_b=_side_from_mapping(_pick(tbl, "side_b", "b", name=f"{name}.side_b"), name=f"{name}.side_b"),
        patch=_patch_from_mapping(_pick(tbl, "patch", "diff", name=f"{name}.patch"), name=f"{name}.patch"),
    )


def validate_record(record: DiffRecord, *, name: str = "record") -> DiffRecord:
    """Check a record against the data model; return it unchanged."""

    if not isinstance(record, DiffRecord):
        raise InvalidInput(f"Expected {name} to be a DiffRecord, got {type(record).__name__}.")

    for side_name, side in (("side_a", record.side_a), ("side_b", record.side_b)):
        if not isinstance(side, Side):
            raise InvalidInput(f"Expected {name}.{side_name} to be a Side.")
        _as_str(side.object_id, name=f"{name}.{side_name}.object_id")
        mode = _as_str(side.mode, name=f"{name}.{side_name}.mode")
        if not _MODE_RE.fullmatch(mode):
            raise InvalidInput(f"Invalid file mode for {name}.{side_name}: {mode!r}")

    if record.side_a.absent and record.side_b.absent:
        raise InvalidInput(f"{name} has neither an old nor a new side.")

    patch = record.patch
    if not isinstance(patch, FilePatch):
        raise InvalidInput(f"Expected {name}.patch to be a FilePatch.")
    _as_str(patch.old_path, name=f"{name}.patch.old_path")
    _as_str(patch.new_path, name=f"{name}.patch.new_path")
    if patch.hunks is None:
        raise InvalidInput(f"Missing required field {name}.patch.hunks.")

    for i, hunk in enumerate(_as_list(patch.hunks, name=f"{name}.patch.hunks")):
        hname = f"{name}.patch.hunks[{i}]"
        if not isinstance(hunk, Hunk):
            raise InvalidInput(f"Expected {hname} to be a Hunk.")
        for field in ("old_start", "old_line_count", "new_start", "new_line_count"):
            _as_int(getattr(hunk, field), name=f"{hname}.{field}")
        for j, line in enumerate(_as_list(hunk.lines, name=f"{hname}.lines")):
            if not _as_str(line, name=f"{hname}.lines[{j}]"):
                raise InvalidInput(f"{hname}.lines[{j}] is empty; every line needs a marker.")

    return record


def coerce_records(value: Any) -> tuple[DiffRecord, ...]:
    """Normalize one record or a sequence of records into a validated tuple.

    Items may be DiffRecord instances or mappings in either accepted shape.
    """

    if value is None:
        raise InvalidInput("Expected a diff record or a list of diff records, got None.")
    if isinstance(value, (DiffRecord, Mapping)):
        items: list[Any] = [value]
    else:
        items = _as_list(value, name="records")

    out: list[DiffRecord] = []
    for i, item in enumerate(items):
        name = f"records[{i}]"
        rec = item if isinstance(item, DiffRecord) else record_from_mapping(item, name=name)
        out.append(validate_record(rec, name=name))
    return tuple(out)


def load_records(source: str | Path | IO[str]) -> tuple[DiffRecord, ...]:
    """Read diff records from a JSON file path or an open text stream."""

    if isinstance(source, (str, Path)):
        path = Path(source)
        logger.debug("Reading diff records from %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise InvalidInput(f"Input file not found: {path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise InvalidInput(f"Failed reading input file: {path}") from e
        label = str(path)
    else:
        text = source.read()
        label = getattr(source, "name", "<stream>")

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidInput(f"Invalid JSON in {label}: {e}") from e

    records = coerce_records(data)
    logger.debug("Loaded %d diff record(s) from %s", len(records), label)
    return records
