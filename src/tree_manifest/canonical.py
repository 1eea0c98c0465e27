"""Canonical ordering and serialization of manifest entries.

Line format (one per regular file, LF terminated, no header or footer):

    <lowercase-hex-digest><two spaces><./relative/path>

Entries are ordered by the raw bytes of their path. Ordering never goes
through locale collation, so output is identical on every platform and under
every ``LC_ALL``/``LANG`` setting.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO

SEPARATOR = "  "


@dataclass(frozen=True, slots=True)
class ManifestEntry:
    digest: str
    path: str


def path_sort_key(path: str) -> bytes:
    # fsencode restores the original bytes of undecodable names (surrogateescape).
    return os.fsencode(path)


def canonicalize(entries: Iterable[ManifestEntry]) -> list[ManifestEntry]:
    ordered = sorted(entries, key=lambda e: path_sort_key(e.path))
    for prev, cur in zip(ordered, ordered[1:]):
        if prev.path == cur.path:
            raise ValueError(f"duplicate manifest path: {cur.path!r}")
    return ordered


def format_line(entry: ManifestEntry) -> str:
    return f"{entry.digest}{SEPARATOR}{entry.path}\n"


def encode_line(entry: ManifestEntry) -> bytes:
    return entry.digest.encode("ascii") + SEPARATOR.encode("ascii") + os.fsencode(entry.path) + b"\n"


def render(entries: Iterable[ManifestEntry]) -> str:
    return "".join(format_line(e) for e in canonicalize(entries))


def render_bytes(entries: Iterable[ManifestEntry]) -> bytes:
    return b"".join(encode_line(e) for e in canonicalize(entries))


def write_manifest(entries: Iterable[ManifestEntry], stream: BinaryIO) -> int:
    """Write the canonical manifest to a binary stream; returns lines written."""

    count = 0
    for entry in canonicalize(entries):
        stream.write(encode_line(entry))
        count += 1
    stream.flush()
    return count


__all__ = [
    "SEPARATOR",
    "ManifestEntry",
    "canonicalize",
    "encode_line",
    "format_line",
    "path_sort_key",
    "render",
    "render_bytes",
    "write_manifest",
]
