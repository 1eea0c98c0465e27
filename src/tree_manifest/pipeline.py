from __future__ import annotations

import logging
import sys
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from tqdm import tqdm

from tree_manifest.canonical import ManifestEntry, canonicalize, path_sort_key
from tree_manifest.config import ManifestConfig
from tree_manifest.errors import ManifestError, StrictModeAbort
from tree_manifest.hash_utils import digest_entry
from tree_manifest.walker import WalkedFile, iter_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SkippedPath:
    path: str
    kind: str
    reason: str


@dataclass(slots=True)
class ManifestResult:
    algorithm: str
    entries: list[ManifestEntry] = field(default_factory=list)
    skipped: list[SkippedPath] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.skipped


class _Collector:
    """Single-threaded sink for digests and failures.

    Only the thread driving the pipeline touches it; worker threads hand back
    results through futures.
    """

    def __init__(self, *, strict: bool) -> None:
        self.strict = strict
        self.entries: list[ManifestEntry] = []
        self.skipped: list[SkippedPath] = []

    def fail(self, error: ManifestError) -> None:
        if self.strict:
            raise StrictModeAbort(error) from error
        logger.warning("skipping %s", error)
        self.skipped.append(SkippedPath(path=error.path or "", kind=error.kind, reason=str(error)))

    def add(self, entry: ManifestEntry) -> None:
        logger.debug("hashed %s", entry.path)
        self.entries.append(entry)


def _digest_sequential(
    files: Iterable[WalkedFile], algorithm: str, sink: _Collector, bar: tqdm
) -> None:
    for walked in files:
        try:
            sink.add(digest_entry(walked, algorithm))
        except ManifestError as exc:
            sink.fail(exc)
        bar.update(1)


def _digest_parallel(
    files: Iterable[WalkedFile], algorithm: str, workers: int, sink: _Collector, bar: tqdm
) -> None:
    ex = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="tree-manifest")
    try:
        futs: list[Future[ManifestEntry]] = [ex.submit(digest_entry, w, algorithm) for w in files]
        for fut in as_completed(futs):
            try:
                sink.add(fut.result())
            except ManifestError as exc:
                sink.fail(exc)
            bar.update(1)
    except BaseException:
        ex.shutdown(wait=True, cancel_futures=True)
        raise
    ex.shutdown(wait=True)


def build_manifest(root: str | Path = ".", config: ManifestConfig | None = None) -> ManifestResult:
    """Walk ``root``, hash every regular file and return the canonical manifest.

    Per-path failures are logged and recorded in ``ManifestResult.skipped``;
    with ``config.strict`` the first failure raises ``StrictModeAbort``
    instead. A missing root always raises ``RootNotFound``.
    """

    cfg = config or ManifestConfig()
    sink = _Collector(strict=cfg.strict)
    files = iter_files(root, on_error=sink.fail)

    logger.info("building manifest for %s (algorithm=%s, workers=%d)", root, cfg.algorithm, cfg.workers)
    with tqdm(desc="Hashing", unit="file", file=sys.stderr, disable=not cfg.progress, leave=False) as bar:
        if cfg.workers > 1:
            _digest_parallel(files, cfg.algorithm, cfg.workers, sink, bar)
        else:
            _digest_sequential(files, cfg.algorithm, sink, bar)

    entries = canonicalize(sink.entries)
    logger.info("manifest complete: %d file(s), %d skipped", len(entries), len(sink.skipped))
    return ManifestResult(
        algorithm=cfg.algorithm,
        entries=entries,
        skipped=sorted(sink.skipped, key=lambda s: path_sort_key(s.path)),
    )


__all__ = ["ManifestResult", "SkippedPath", "build_manifest"]
