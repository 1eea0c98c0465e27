from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def write_json(
    path: str | Path,
    data: Any,
    *,
    make_parents: bool = False,
    indent: int = 2,
    sort_keys: bool = True,
    ensure_ascii: bool = False,
) -> None:
    """Write JSON deterministically (UTF-8, LF newlines, trailing newline).

    Undecodable filename characters (lone surrogates) are kept as ``\\udcXX``
    escapes instead of failing the write.
    """

    p = Path(path)
    if make_parents:
        p.parent.mkdir(parents=True, exist_ok=True)

    text = json.dumps(data, indent=indent, sort_keys=sort_keys, ensure_ascii=ensure_ascii)
    p.write_text(text + "\n", encoding="utf-8", errors="backslashreplace", newline="\n")
