from __future__ import annotations

from pathlib import Path

HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"
EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def write_tree(root: Path, files: dict[str, bytes | str]) -> Path:
    """Create ``files`` (relative POSIX path -> content) below ``root``.

    Files are created in the given order, so callers control creation order.
    """

    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            p.write_bytes(content.encode("utf-8"))
        else:
            p.write_bytes(content)
    return root


def manifest_paths(text: str) -> list[str]:
    return [line.split("  ", 1)[1] for line in text.splitlines()]
