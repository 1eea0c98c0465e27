from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path

from tree_manifest.errors import ManifestError, RootNotFound, from_os_error

logger = logging.getLogger(__name__)

ROOT_MARKER = "."

ErrorHandler = Callable[[ManifestError], None]


@dataclass(frozen=True, slots=True)
class WalkedFile:
    rel_path: str
    abs_path: Path


def _join(rel_dir: str, name: str) -> str:
    return f"{rel_dir}/{name}"


def _raise(error: ManifestError) -> None:
    raise error


def iter_files(root: str | Path, *, on_error: ErrorHandler | None = None) -> Iterator[WalkedFile]:
    """Yield every regular file below ``root``, depth first.

    Relative paths are rooted at ``./`` and always use ``/`` separators.
    Directories are descended into but never yielded. Symbolic links, devices,
    sockets and FIFOs are skipped without a diagnostic.

    A directory or entry that cannot be read is reported to ``on_error`` and
    its subtree is skipped. Without a handler the error is raised.
    """

    root_path = Path(root)
    if not root_path.is_dir():
        raise RootNotFound(f"root is not a directory: {root_path}", path=str(root_path))

    handle = on_error or _raise
    # Stack of (absolute dir, manifest-relative dir).
    pending: list[tuple[str, str]] = [(os.fspath(root_path), ROOT_MARKER)]

    while pending:
        abs_dir, rel_dir = pending.pop()
        try:
            with os.scandir(abs_dir) as it:
                entries = list(it)
        except OSError as exc:
            handle(from_os_error(exc, path=rel_dir))
            continue

        for entry in entries:
            rel = _join(rel_dir, entry.name)
            try:
                if entry.is_dir(follow_symlinks=False):
                    pending.append((entry.path, rel))
                elif entry.is_file(follow_symlinks=False):
                    yield WalkedFile(rel_path=rel, abs_path=Path(entry.path))
                else:
                    logger.debug("skipping non-regular entry %s", rel)
            except OSError as exc:
                handle(from_os_error(exc, path=rel))


__all__ = ["ROOT_MARKER", "WalkedFile", "iter_files"]
