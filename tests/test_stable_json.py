from __future__ import annotations

import json
from pathlib import Path

from tree_manifest.stable_json import write_json


def test_write_json_is_sorted_lf_terminated_and_round_trips(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "summary.json"
    write_json(out, {"b": 1, "a": ["./é"]}, make_parents=True)

    raw = out.read_bytes()
    assert raw.endswith(b"}\n")
    assert b"\r\n" not in raw
    assert raw.index(b'"a"') < raw.index(b'"b"')
    assert json.loads(out.read_text(encoding="utf-8")) == {"a": ["./é"], "b": 1}


def test_write_json_keeps_undecodable_path_characters(tmp_path: Path) -> None:
    out = tmp_path / "summary.json"
    path = b"./caf\xe9".decode("utf-8", "surrogateescape")

    write_json(out, {"path": path})
    assert "\\udce9" in out.read_text(encoding="utf-8")
