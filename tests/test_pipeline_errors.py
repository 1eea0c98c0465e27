from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from tree_manifest import ManifestConfig, build_manifest
from tree_manifest.errors import AccessDenied, FileVanished, RootNotFound, StrictModeAbort

from tests.fixtures import HELLO_SHA256, write_tree


@pytest.fixture()
def vanishing_tree(monkeypatch, tmp_path: Path) -> Path:
    """Tree whose ``./b/gone.txt`` disappears between the walk and the read."""

    from tree_manifest import hash_utils

    root = write_tree(tmp_path / "t", {"a.txt": "hello", "b/gone.txt": "bye", "c.txt": "hello"})
    real_hash_file = hash_utils.hash_file

    def _hash_file(path, algorithm="sha256"):
        if Path(path).name == "gone.txt":
            Path(path).unlink(missing_ok=True)
        return real_hash_file(path, algorithm)

    monkeypatch.setattr(hash_utils, "hash_file", _hash_file)
    return root


@pytest.mark.parametrize("workers", [1, 4])
def test_vanished_file_is_skipped_without_touching_other_entries(
    vanishing_tree: Path, workers: int, caplog
) -> None:
    with caplog.at_level(logging.WARNING, logger="tree_manifest"):
        result = build_manifest(vanishing_tree, ManifestConfig(workers=workers))

    assert [(e.digest, e.path) for e in result.entries] == [
        (HELLO_SHA256, "./a.txt"),
        (HELLO_SHA256, "./c.txt"),
    ]
    assert not result.ok
    assert [(s.path, s.kind) for s in result.skipped] == [("./b/gone.txt", FileVanished.kind)]
    assert any("./b/gone.txt" in r.getMessage() for r in caplog.records)


@pytest.mark.parametrize("workers", [1, 4])
def test_strict_mode_aborts_on_vanished_file(vanishing_tree: Path, workers: int) -> None:
    with pytest.raises(StrictModeAbort) as excinfo:
        build_manifest(vanishing_tree, ManifestConfig(workers=workers, strict=True))

    assert isinstance(excinfo.value.cause, FileVanished)
    assert excinfo.value.path == "./b/gone.txt"


def test_unreadable_directory_is_skipped_in_default_mode(monkeypatch, tmp_path: Path) -> None:
    from tree_manifest import walker

    root = write_tree(tmp_path / "t", {"ok.txt": "hello", "private/key.pem": "k"})
    real_scandir = os.scandir

    def _scandir(path):
        if os.path.basename(path) == "private":
            raise PermissionError(13, "Permission denied", path)
        return real_scandir(path)

    monkeypatch.setattr(walker.os, "scandir", _scandir)

    result = build_manifest(root)
    assert [e.path for e in result.entries] == ["./ok.txt"]
    assert [(s.path, s.kind) for s in result.skipped] == [("./private", AccessDenied.kind)]

    with pytest.raises(StrictModeAbort) as excinfo:
        build_manifest(root, ManifestConfig(strict=True))
    assert isinstance(excinfo.value.cause, AccessDenied)


def test_missing_root_is_fatal_even_without_strict(tmp_path: Path) -> None:
    with pytest.raises(RootNotFound):
        build_manifest(tmp_path / "does-not-exist")
