from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from tree_manifest.canonical import write_manifest
from tree_manifest.config import ManifestConfig, config_from_env
from tree_manifest.errors import ManifestError, UnsupportedAlgorithm
from tree_manifest.hash_utils import SUPPORTED_ALGORITHMS, resolve_algorithm
from tree_manifest.pipeline import ManifestResult, build_manifest
from tree_manifest.stable_json import write_json

logger = logging.getLogger("tree_manifest")

SUMMARY_SCHEMA_VERSION = "1.0.0"


def _algorithm_arg(value: str) -> str:
    try:
        return resolve_algorithm(value)
    except UnsupportedAlgorithm as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tree-manifest",
        description=(
            "Print a deterministic content manifest of a directory tree: one "
            "'<hex-digest>  ./relative/path' line per regular file, sorted byte-wise by path. "
            "Exit codes: 0=manifest written, 1=fatal error."
        ),
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Directory to describe (default: current working directory)",
    )
    parser.add_argument(
        "--algorithm",
        default=None,
        type=_algorithm_arg,
        metavar="NAME",
        help=(
            "Digest algorithm, one of: "
            + ", ".join(SUPPORTED_ALGORITHMS)
            + " (default: sha256, or $TREE_MANIFEST_ALGORITHM)"
        ),
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of hashing threads (default: 1, or $TREE_MANIFEST_WORKERS)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Abort on the first unreadable file or directory instead of skipping it",
    )
    parser.add_argument("--progress", action="store_true", help="Show a progress bar on stderr")
    parser.add_argument(
        "--summary-json",
        type=Path,
        default=None,
        help="Also write a JSON run summary (file count, skipped paths) to this path",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug diagnostics on stderr")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report fatal errors")
    return parser


def _setup_logging(*, verbose: bool, quiet: bool) -> tuple[logging.Handler, int]:
    level = logging.DEBUG if verbose else logging.ERROR if quiet else logging.WARNING
    previous_level = logger.level
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return handler, previous_level


def _summary_payload(result: ManifestResult) -> dict[str, Any]:
    return {
        "schema_version": SUMMARY_SCHEMA_VERSION,
        "algorithm": result.algorithm,
        "file_count": len(result.entries),
        "skipped_count": len(result.skipped),
        "skipped": [
            {"path": s.path, "kind": s.kind, "reason": s.reason} for s in result.skipped
        ],
    }


def _silence_stdout() -> None:
    # Reader closed the pipe; the exit-time flush must not hit fd 1 again.
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, sys.stdout.fileno())
    finally:
        os.close(devnull)


def _run(args: argparse.Namespace) -> int:
    try:
        config: ManifestConfig = config_from_env().with_overrides(
            algorithm=args.algorithm,
            workers=args.workers,
            strict=args.strict,
            progress=args.progress or None,
        )
        result = build_manifest(args.root, config)
    except ManifestError as exc:
        logger.error("%s", exc)
        return 1
    except ValueError as exc:
        logger.error("invalid configuration: %s", exc)
        return 1

    # Written before stdout so a failed summary never follows a complete manifest.
    if args.summary_json is not None:
        try:
            write_json(args.summary_json, _summary_payload(result), make_parents=True)
        except OSError as exc:
            logger.error("cannot write summary %s: %s", args.summary_json, exc)
            return 1

    try:
        write_manifest(result.entries, sys.stdout.buffer)
    except BrokenPipeError:
        _silence_stdout()
        return 1

    if result.skipped:
        logger.warning("%d path(s) skipped; manifest is incomplete", len(result.skipped))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    handler, previous_level = _setup_logging(verbose=args.verbose, quiet=args.quiet)
    try:
        return _run(args)
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


__all__ = ["main"]
