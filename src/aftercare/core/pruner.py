"""Delete candidate files and prune directories left empty."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from aftercare.models.cleanup import CleanupResult, DeletionFailure

log = logging.getLogger(__name__)


def delete_files(candidates: Iterable[Path], *, dry_run: bool = False) -> CleanupResult:
    """Remove each candidate, recording failures instead of stopping.

    Under *dry_run* nothing is touched and every candidate is reported as
    deleted.
    """
    result = CleanupResult(dry_run=dry_run)
    for path in candidates:
        if dry_run:
            result.deleted.append(path)
            continue
        try:
            path.unlink()
            result.deleted.append(path)
        except OSError as e:
            result.errors.append(DeletionFailure(path=path, message=e.strerror or str(e)))
    return result


def _is_empty(directory: Path, gone: set[Path]) -> bool:
    """Whether every entry in *directory* has already been removed."""
    try:
        with os.scandir(directory) as it:
            return all(directory / entry.name in gone for entry in it)
    except OSError as e:
        log.debug("Cannot read directory %s: %s", directory, e)
        return False


def remove_empty_directories(
    roots: Iterable[Path],
    *,
    dry_run: bool = False,
    pending: Iterable[Path] = (),
) -> list[Path]:
    """Remove each root and the directories below it that are, or become, empty.

    The walk is post-order: a directory is checked only after all of its
    subdirectories were handled, so chains of nested empty directories go in
    one pass. *pending* are files considered already deleted, which lets a
    dry run report the same directories a real run would remove. A root that
    ends up empty is removed too. Directory symlinks are never entered.
    """
    gone: set[Path] = set(pending)
    removed: list[Path] = []

    for root in roots:
        if not root.is_dir():
            log.debug("Scan path does not exist: %s", root)
            continue

        visited: set[str] = set()
        # (directory, children_done)
        stack: list[tuple[Path, bool]] = [(root, False)]
        while stack:
            directory, children_done = stack.pop()

            if not children_done:
                real = os.path.realpath(directory)
                if real in visited:
                    continue
                visited.add(real)
                stack.append((directory, True))
                try:
                    with os.scandir(directory) as it:
                        subdirs = [directory / e.name for e in it if e.is_dir(follow_symlinks=False)]
                except OSError as e:
                    log.debug("Cannot read directory %s: %s", directory, e)
                    continue
                stack.extend((d, False) for d in sorted(subdirs, reverse=True))
                continue

            if not _is_empty(directory, gone):
                continue
            if not dry_run:
                try:
                    directory.rmdir()
                except OSError as e:
                    log.debug("Cannot remove directory %s: %s", directory, e)
                    continue
            gone.add(directory)
            removed.append(directory)

    return removed
