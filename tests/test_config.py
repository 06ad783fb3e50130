from __future__ import annotations

from pathlib import Path

import pytest

from patchfmt.config import PatchfmtConfig, find_config, load_config
from patchfmt.errors import PatchfmtConfigError
from patchfmt.options import resolve


def test_missing_config_yields_defaults(tmp_path: Path) -> None:
    cfg = load_config(start=tmp_path)
    assert cfg == PatchfmtConfig()
    assert cfg.color == "auto"
    assert cfg.merge_flags({}) == {}


def test_load_config_overrides_work(tmp_path: Path) -> None:
    (tmp_path / "patchfmt.toml").write_text(
        "\n".join(
            [
                "[diff]",
                'src_prefix = "old/"',
                'dst_prefix = "new/"',
                "no_prefix = false",
                "context = 5",
                "abbrev = 12",
                "full_index = true",
                'color = "never"',
            ]
        )
        + "\n",
        encoding="utf-8",
    )
    cfg = load_config(start=tmp_path)
    assert cfg.src_prefix == "old/"
    assert cfg.dst_prefix == "new/"
    assert cfg.no_prefix is False
    assert cfg.context == 5
    assert cfg.abbrev == 12
    assert cfg.full_index is True
    assert cfg.color == "never"


def test_find_config_walks_upward(tmp_path: Path) -> None:
    (tmp_path / "patchfmt.toml").write_text("[diff]\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_config(nested) == (tmp_path / "patchfmt.toml").resolve()


def test_explicit_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(PatchfmtConfigError, match="Missing config file"):
        load_config(tmp_path / "nope.toml")


def test_invalid_toml_raises(tmp_path: Path) -> None:
    p = tmp_path / "patchfmt.toml"
    p.write_text("[diff\n", encoding="utf-8")
    with pytest.raises(PatchfmtConfigError, match="Invalid TOML"):
        load_config(p)


@pytest.mark.parametrize(
    "body",
    [
        "diff = 3\n",
        "[diff]\nno_prefix = 1\n",
        "[diff]\ncontext = \"3\"\n",
        "[diff]\nabbrev = -1\n",
        "[diff]\nsrc_prefix = 7\n",
        "[diff]\ncolor = \"rainbow\"\n",
    ],
)
def test_invalid_values_raise(tmp_path: Path, body: str) -> None:
    p = tmp_path / "patchfmt.toml"
    p.write_text(body, encoding="utf-8")
    with pytest.raises(PatchfmtConfigError):
        load_config(p)


def test_configured_prefixes_sit_below_flags() -> None:
    cfg = PatchfmtConfig(src_prefix="old/", dst_prefix="new/")
    assert resolve(cfg.merge_flags({})).source_prefix == "old/"
    merged = cfg.merge_flags({"src-prefix": "x/"})
    assert resolve(merged).source_prefix == "x/"
    assert resolve(merged).dest_prefix == "new/"


def test_default_prefix_flag_discards_configured_prefixes() -> None:
    cfg = PatchfmtConfig(src_prefix="old/", no_prefix=True)
    merged = cfg.merge_flags({"default-prefix": True})
    assert "no-prefix" not in merged
    resolved = resolve(merged)
    assert (resolved.source_prefix, resolved.dest_prefix) == ("a/", "b/")


def test_explicit_prefix_flag_discards_configured_no_prefix() -> None:
    cfg = PatchfmtConfig(no_prefix=True)
    assert resolve(cfg.merge_flags({})).source_prefix == ""
    resolved = resolve(cfg.merge_flags({"dst-prefix": "new/"}))
    assert resolved.source_prefix == "a/"
    assert resolved.dest_prefix == "new/"
