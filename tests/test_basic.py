from __future__ import annotations

import json
import subprocess
import sys

import patchfmt


def test_public_api_exports() -> None:
    for name in ("render", "resolve", "should_display", "DiffRecord", "InvalidInput"):
        assert hasattr(patchfmt, name)
    assert isinstance(patchfmt.__version__, str)


def test_module_invocation_renders_stdin(tmp_path) -> None:
    record = {
        "side_a": {"mode": "100644", "object_id": "1111111111"},
        "side_b": {"mode": "100644", "object_id": "2222222222"},
        "patch": {"old_path": "f.txt", "new_path": "f.txt", "hunks": []},
    }
    proc = subprocess.run(
        [sys.executable, "-m", "patchfmt", "--numstat"],
        input=json.dumps(record),
        cwd=tmp_path,
        check=False,
        text=True,
        capture_output=True,
    )
    assert proc.returncode == 0
    assert proc.stdout == "0\t0\tf.txt\n"


def test_cli_version_flag() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "patchfmt", "--version"],
        check=False,
        text=True,
        capture_output=True,
    )
    assert proc.returncode == 0
    assert proc.stdout.startswith("patchfmt ")
