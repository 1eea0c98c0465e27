from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from tree_manifest.hash_utils import DEFAULT_ALGORITHM, resolve_algorithm

ENV_ALGORITHM = "TREE_MANIFEST_ALGORITHM"
ENV_WORKERS = "TREE_MANIFEST_WORKERS"
ENV_STRICT = "TREE_MANIFEST_STRICT"


def _env(name: str, default: str | None = None, environ: Mapping[str, str] | None = None) -> str | None:
    value = (os.environ if environ is None else environ).get(name)
    if value is None or value == "":
        return default
    return value


def _env_bool(name: str, default: bool = False, environ: Mapping[str, str] | None = None) -> bool:
    raw = _env(name, environ=environ)
    if raw is None:
        return default
    raw_norm = raw.strip().lower()
    if raw_norm in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if raw_norm in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, default: int, environ: Mapping[str, str] | None = None) -> int:
    raw = _env(name, environ=environ)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass(frozen=True, slots=True)
class ManifestConfig:
    algorithm: str = DEFAULT_ALGORITHM
    workers: int = 1
    strict: bool = False
    progress: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "algorithm", resolve_algorithm(self.algorithm))
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    def with_overrides(self, **overrides: Any) -> ManifestConfig:
        """Return a copy with every non-None override applied."""

        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def config_from_env(environ: Mapping[str, str] | None = None) -> ManifestConfig:
    """Build a config from optional ``TREE_MANIFEST_*`` variables.

    Nothing is required; unset variables fall back to the defaults. Locale
    variables are never read.
    """

    return ManifestConfig(
        algorithm=_env(ENV_ALGORITHM, DEFAULT_ALGORITHM, environ) or DEFAULT_ALGORITHM,
        workers=_env_int(ENV_WORKERS, 1, environ),
        strict=_env_bool(ENV_STRICT, False, environ),
    )


__all__ = [
    "ENV_ALGORITHM",
    "ENV_STRICT",
    "ENV_WORKERS",
    "ManifestConfig",
    "config_from_env",
]
