from __future__ import annotations

import hashlib
from pathlib import Path

from tree_manifest.canonical import ManifestEntry
from tree_manifest.errors import FileVanished, UnsupportedAlgorithm, from_os_error
from tree_manifest.walker import WalkedFile

DEFAULT_ALGORITHM = "sha256"

# Fixed-length digests only; shake_* would make the hex width caller-dependent.
SUPPORTED_ALGORITHMS: tuple[str, ...] = (
    "blake2b",
    "blake2s",
    "md5",
    "sha1",
    "sha224",
    "sha256",
    "sha384",
    "sha512",
    "sha3_256",
    "sha3_512",
)

CHUNK_SIZE = 1024 * 1024


def resolve_algorithm(name: str) -> str:
    normalized = name.strip().lower().replace("-", "_")
    if normalized not in SUPPORTED_ALGORITHMS:
        raise UnsupportedAlgorithm(
            f"unsupported digest algorithm {name!r} (expected one of: "
            + ", ".join(SUPPORTED_ALGORITHMS)
            + ")"
        )
    return normalized


def digest_width(algorithm: str) -> int:
    """Number of hex characters in a rendered digest for ``algorithm``."""

    return hashlib.new(resolve_algorithm(algorithm)).digest_size * 2


def hash_file(path: str | Path, algorithm: str = DEFAULT_ALGORITHM) -> str:
    file_path = Path(path)
    digest = hashlib.new(resolve_algorithm(algorithm))
    with file_path.open("rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def digest_entry(walked: WalkedFile, algorithm: str = DEFAULT_ALGORITHM) -> ManifestEntry:
    """Hash one walked file into a manifest entry.

    OS-level failures are translated into ``FileVanished``, ``AccessDenied`` or
    ``ManifestIOError`` carrying the manifest-relative path.
    """

    try:
        digest = hash_file(walked.abs_path, algorithm)
    except IsADirectoryError as exc:
        # Replaced by a directory between the walk and the read.
        raise FileVanished(f"{walked.rel_path}: no longer a regular file", path=walked.rel_path) from exc
    except OSError as exc:
        raise from_os_error(exc, path=walked.rel_path) from exc
    return ManifestEntry(digest=digest, path=walked.rel_path)


__all__ = [
    "CHUNK_SIZE",
    "DEFAULT_ALGORITHM",
    "SUPPORTED_ALGORITHMS",
    "digest_entry",
    "digest_width",
    "hash_file",
    "resolve_algorithm",
]
