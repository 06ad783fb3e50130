"""Diff formatting flags and their resolution into a render configuration.

`resolve()` turns a sparse flag map (absent key means "flag not given") into
an immutable RenderConfig. `should_display()` tells a caller whether rendering
would produce anything at all.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from patchfmt.errors import InvalidArgument

DEFAULT_CONTEXT_LINES = 3
DEFAULT_SOURCE_PREFIX = "a/"
DEFAULT_DEST_PREFIX = "b/"


@dataclass(frozen=True)
class FlagSpec:
    name: str
    description: str
    kind: str  # "boolean" or "string"
    short: str | None = None
    metavar: str | None = None


DIFF_FORMATTING_FLAGS: tuple[FlagSpec, ...] = (
    FlagSpec("patch", "Generate a patch.", "boolean", short="p"),
    FlagSpec(
        "no-patch",
        "Suppress patch output. Useful for commands that output a patch by default.",
        "boolean",
        short="s",
    ),
    FlagSpec("raw", "Generate diff in raw format.", "boolean"),
    FlagSpec("patch-with-raw", "Alias for --patch --raw.", "boolean"),
    FlagSpec("numstat", "Generate a diffstat in a machine-friendly format.", "boolean"),
    FlagSpec("summary", "List newly added, deleted, or moved files.", "boolean"),
    FlagSpec(
        "unified",
        "Generate patches with N lines of context. Implies --patch.",
        "string",
        short="U",
        metavar="N",
    ),
    FlagSpec("src-prefix", 'Show the given source prefix instead of "a/".', "string", metavar="PREFIX"),
    FlagSpec("dst-prefix", 'Show the given destination prefix instead of "b/".', "string", metavar="PREFIX"),
    FlagSpec("no-prefix", "Do not show source or destination prefixes.", "boolean"),
    FlagSpec("default-prefix", 'Use default "a/" and "b/" source and destination prefixes.', "boolean"),
)


@dataclass(frozen=True)
class RenderConfig:
    raw: bool = False
    numstat: bool = False
    summary: bool = False
    patch: bool = False
    no_patch: bool = False
    context_lines: int = DEFAULT_CONTEXT_LINES
    source_prefix: str = DEFAULT_SOURCE_PREFIX
    dest_prefix: str = DEFAULT_DEST_PREFIX

    def should_display(self) -> bool:
        return should_display(self)


def should_display(config: RenderConfig) -> bool:
    """True if rendering `config` would emit at least one section."""
    return not config.no_patch and (config.raw or config.numstat or config.summary or config.patch)


def _get(flags: Mapping[str, Any], name: str) -> Any:
    """Look up a dashed flag name, falling back to its underscored spelling."""
    if name in flags:
        return flags[name]
    return flags.get(name.replace("-", "_"))


def _parse_context_lines(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgument(f"Invalid --unified value: {value!r} (expected an integer).")
    if isinstance(value, int):
        n = value
    elif isinstance(value, str) and value.strip().isdecimal():
        n = int(value.strip())
    else:
        raise InvalidArgument(f"Invalid --unified value: {value!r} (expected an integer).")
    if n < 0:
        raise InvalidArgument(f"Invalid --unified value: {n} (must be non-negative).")
    return n


def _parse_prefix(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


def resolve(flags: Mapping[str, Any], *, default_to_patch_when_empty: bool = True) -> RenderConfig:
    """Resolve formatting flags into a RenderConfig.

    Later rules win over earlier ones:
    - `raw`, `numstat`, `summary`, `patch` enable their own format.
    - `patch-with-raw` enables both patch and raw.
    - `unified=N` enables patch and sets the context line count.
    - `src-prefix` / `dst-prefix` override the prefixes (empty string counts),
      `default-prefix` restores "a/" and "b/", `no-prefix` clears both.
    - With no format selected and `default_to_patch_when_empty`, patch is on.
    - `no-patch` only suppresses display; it leaves the formats as resolved.

    Unknown keys are ignored.
    """

    raw = bool(_get(flags, "raw"))
    numstat = bool(_get(flags, "numstat"))
    summary = bool(_get(flags, "summary"))
    patch = bool(_get(flags, "patch"))
    context_lines = DEFAULT_CONTEXT_LINES

    if _get(flags, "patch-with-raw"):
        patch = True
        raw = True

    unified = _get(flags, "unified")
    if unified is not None:
        context_lines = _parse_context_lines(unified)
        patch = True

    source_prefix = DEFAULT_SOURCE_PREFIX
    dest_prefix = DEFAULT_DEST_PREFIX
    src = _get(flags, "src-prefix")
    if src is not None:
        source_prefix = _parse_prefix(src)
    dst = _get(flags, "dst-prefix")
    if dst is not None:
        dest_prefix = _parse_prefix(dst)
    if _get(flags, "default-prefix"):
        source_prefix = DEFAULT_SOURCE_PREFIX
        dest_prefix = DEFAULT_DEST_PREFIX
    if _get(flags, "no-prefix"):
        source_prefix = ""
        dest_prefix = ""

    if default_to_patch_when_empty and not (raw or numstat or summary or patch):
        patch = True

    return RenderConfig(
        raw=raw,
        numstat=numstat,
        summary=summary,
        patch=patch,
        no_patch=bool(_get(flags, "no-patch")),
        context_lines=context_lines,
        source_prefix=source_prefix,
        dest_prefix=dest_prefix,
    )


def _dest(name: str) -> str:
    return name.replace("-", "_")


def add_diff_formatting_arguments(parser: argparse.ArgumentParser) -> None:
    """Register every diff formatting flag on `parser`.

    All flags default to None so `flags_from_namespace` can tell "not given"
    apart from an explicit empty value.
    """

    group = parser.add_argument_group("diff formatting")
    for flag in DIFF_FORMATTING_FLAGS:
        names = [f"--{flag.name}"]
        if flag.short:
            names.insert(0, f"-{flag.short}")
        if flag.kind == "boolean":
            group.add_argument(
                *names, dest=_dest(flag.name), action="store_true", default=None, help=flag.description
            )
        else:
            group.add_argument(
                *names,
                dest=_dest(flag.name),
                default=None,
                metavar=flag.metavar,
                help=flag.description,
            )


def flags_from_namespace(ns: argparse.Namespace) -> dict[str, Any]:
    """Collect the diff formatting flags that were actually given."""

    out: dict[str, Any] = {}
    for flag in DIFF_FORMATTING_FLAGS:
        value = getattr(ns, _dest(flag.name), None)
        if value is not None:
            out[flag.name] = value
    return out
