"""Deterministic content manifests for directory trees.

A manifest lists every regular file below a root as ``<hex-digest>  ./path``,
sorted byte-wise by path, so two trees with the same contents produce
byte-identical manifests that can be compared with any ``diff`` tool.
"""

from tree_manifest.canonical import ManifestEntry, render, write_manifest
from tree_manifest.config import ManifestConfig
from tree_manifest.pipeline import ManifestResult, SkippedPath, build_manifest

__all__: list[str] = [
    "ManifestConfig",
    "ManifestEntry",
    "ManifestResult",
    "SkippedPath",
    "build_manifest",
    "render",
    "write_manifest",
]
