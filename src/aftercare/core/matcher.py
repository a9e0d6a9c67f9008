"""Glob-lite path and filename matching."""

from __future__ import annotations

from pathlib import PurePosixPath

from aftercare.utils import to_posix


def matches_pattern(path: str, pattern: str) -> bool:
    """Check a path against an exclusion-style pattern.

    Three shapes are understood:
        ``main.ts``        exact filename
        ``*.module.ts``    filename ends with the suffix after ``*``
        ``**/index.ts``    exact filename anywhere, or path ends in ``/index.ts``

    The part after ``**/`` may itself be a ``*.suffix`` pattern, so
    ``**/*.ts`` matches every ``.ts`` file.
    """
    normalized = to_posix(path)
    filename = PurePosixPath(normalized).name

    if pattern.startswith("**/"):
        rest = pattern[3:]
        if rest.startswith("*"):
            return matches_pattern(normalized, rest)
        return filename == rest or normalized.endswith("/" + rest)
    if pattern.startswith("*"):
        return filename.endswith(pattern[1:])
    return filename == pattern


def matches_any(path: str, patterns: tuple[str, ...] | list[str]) -> bool:
    return any(matches_pattern(path, p) for p in patterns)


def has_prefix(relative_path: str, prefix: str) -> bool:
    """Plain string prefix test on ``/``-normalised paths.

    ``backend/src/core`` also matches ``backend/src/core-utils/x.ts``.
    """
    return to_posix(relative_path).startswith(to_posix(prefix))


def is_under(relative_path: str, directory: str) -> bool:
    """Path-component prefix test: is *relative_path* inside *directory*."""
    directory = to_posix(directory).strip("/")
    if not directory:
        return True
    return to_posix(relative_path).startswith(directory + "/")
