"""Render diff records as raw, numstat, summary and unified patch text.

Output formats follow git's diff output:
https://git-scm.com/docs/diff-format

Rendering is pure: abbreviation and color are injected callables, nothing is
logged or written, and records are never mutated.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from patchfmt.abbrev import shorten_hash
from patchfmt.color import Annotator, Style, plain, style_for_line
from patchfmt.options import RenderConfig
from patchfmt.records import DEV_NULL, DiffRecord, coerce_records

Abbrev = Callable[[str], str]


def _status(record: DiffRecord) -> str:
    # Only A/D/M; renames and copies are reported as modifications.
    if record.is_added:
        return "A"
    if record.is_deleted:
        return "D"
    return "M"


def render_raw(records: Sequence[DiffRecord], *, abbrev: Abbrev = shorten_hash) -> str:
    out: list[str] = []
    for rec in records:
        a, b, p = rec.side_a, rec.side_b, rec.patch
        path = p.new_path if p.old_path == DEV_NULL else p.old_path
        out.append(
            f":{a.mode} {b.mode} {abbrev(a.object_id)} {abbrev(b.object_id)} {_status(rec)}\t{path}\n"
        )
    out.append("\n")
    return "".join(out)


def count_lines(record: DiffRecord) -> tuple[int, int]:
    """Return (added, removed) line counts summed over all hunks."""
    added = 0
    removed = 0
    for hunk in record.patch.hunks:
        for line in hunk.lines:
            if line.startswith("+"):
                added += 1
            elif line.startswith("-"):
                removed += 1
    return added, removed


def render_numstat(records: Sequence[DiffRecord]) -> str:
    out: list[str] = []
    for rec in records:
        added, removed = count_lines(rec)
        p = rec.patch
        if p.old_path == p.new_path:
            out.append(f"{added}\t{removed}\t{p.old_path}\n")
        else:
            out.append(f"{added}\t{removed}\t{p.old_path} => {p.new_path}\n")
    return "".join(out)


def render_summary(records: Sequence[DiffRecord]) -> str:
    out: list[str] = []
    for rec in records:
        p = rec.patch
        if p.old_path == p.new_path:
            continue
        if p.old_path == DEV_NULL:
            out.append(f"create mode {rec.side_b.mode} {p.new_path}\n")
        elif p.new_path == DEV_NULL:
            out.append(f"delete mode {rec.side_a.mode} {p.old_path}\n")
        else:
            # TODO: collapse the shared path prefix, e.g. `rename src/{a.py => b.py}`.
            out.append(f"rename {p.old_path} => {p.new_path}\n")
    return "".join(out)


def _display_path(path: str, prefix: str) -> str:
    return path if path.startswith("/") else f"{prefix}{path}"


def _patch_header(rec: DiffRecord, config: RenderConfig, abbrev: Abbrev) -> list[str]:
    a, b, p = rec.side_a, rec.side_b, rec.patch
    a_path = _display_path(p.old_path, config.source_prefix)
    b_path = _display_path(p.new_path, config.dest_prefix)

    # A new file is named by its new path on the `diff --git` line, never /dev/null.
    git_a = f"{config.source_prefix}{p.new_path}" if p.old_path == DEV_NULL else a_path

    lines = [f"diff --git {git_a} {b_path}\n"]
    index = f"index {abbrev(a.object_id)}..{abbrev(b.object_id)}"
    if a.mode == b.mode:
        lines.append(f"{index} {a.mode}\n")
    else:
        if a.absent:
            lines.append(f"new file mode {b.mode}\n")
        else:
            lines.append(f"old mode {a.mode}\n")
            lines.append(f"new mode {b.mode}\n")
        lines.append(f"{index}\n")
    return lines


def render_patch(
    records: Sequence[DiffRecord],
    config: RenderConfig,
    *,
    abbrev: Abbrev = shorten_hash,
    annotate: Annotator = plain,
) -> str:
    out: list[str] = []
    for rec in records:
        out.extend(_patch_header(rec, config, abbrev))
        p = rec.patch
        if not p.hunks:
            continue

        out.append(f"--- {_display_path(p.old_path, config.source_prefix)}\n")
        out.append(f"+++ {_display_path(p.new_path, config.dest_prefix)}\n")
        for hunk in p.hunks:
            out.append(annotate(Style.HEADER, hunk.header()) + "\n")
            for line in hunk.lines:
                out.append(annotate(style_for_line(line), line) + "\n")
    return "".join(out)


def render(
    records: Any,
    config: RenderConfig,
    *,
    abbrev: Abbrev = shorten_hash,
    annotate: Annotator = plain,
) -> str:
    """Render `records` in every format enabled by `config`.

    `records` may be a single record or a sequence; items may be DiffRecord
    instances or mappings (see `patchfmt.records`). Sections are emitted in
    the order raw, numstat, summary, patch. `config.no_patch` is not consulted
    here; callers check `should_display()` before rendering.

    Raises InvalidInput for a malformed record, before any text is built.
    """

    recs = coerce_records(records)

    parts: list[str] = []
    if config.raw:
        parts.append(render_raw(recs, abbrev=abbrev))
    if config.numstat:
        parts.append(render_numstat(recs))
    # --stat and --compact-summary are not supported.
    if config.summary:
        parts.append(render_summary(recs))
    if config.patch:
        parts.append(render_patch(recs, config, abbrev=abbrev, annotate=annotate))
    return "".join(parts)
