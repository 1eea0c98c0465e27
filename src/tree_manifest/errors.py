from __future__ import annotations


class ManifestError(Exception):
    """Base class for failures raised while building a manifest."""

    kind = "error"

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class AccessDenied(ManifestError):
    kind = "access_denied"


class FileVanished(ManifestError):
    kind = "file_vanished"


class ManifestIOError(ManifestError):
    kind = "io_error"


class RootNotFound(ManifestError):
    kind = "root_not_found"


class UnsupportedAlgorithm(ManifestError, ValueError):
    kind = "unsupported_algorithm"


class StrictModeAbort(ManifestError):
    """Raised in strict mode on the first per-path failure."""

    kind = "strict_abort"

    def __init__(self, cause: ManifestError) -> None:
        super().__init__(f"aborting (strict mode): {cause}", path=cause.path)
        self.cause = cause


def from_os_error(exc: OSError, *, path: str) -> ManifestError:
    """Map an OSError raised for ``path`` onto the manifest error taxonomy."""

    reason = exc.strerror or exc.__class__.__name__
    if isinstance(exc, FileNotFoundError):
        return FileVanished(f"{path}: no longer exists ({reason})", path=path)
    if isinstance(exc, PermissionError):
        return AccessDenied(f"{path}: permission denied ({reason})", path=path)
    return ManifestIOError(f"{path}: {reason}", path=path)


__all__ = [
    "AccessDenied",
    "FileVanished",
    "ManifestError",
    "ManifestIOError",
    "RootNotFound",
    "StrictModeAbort",
    "UnsupportedAlgorithm",
    "from_os_error",
]
