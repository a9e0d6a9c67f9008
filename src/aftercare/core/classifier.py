"""Classify files as unused, orphaned tests or unused DTOs."""

from __future__ import annotations

import logging
import os
import re
import time
from collections.abc import Set
from pathlib import Path
from typing import Callable

from aftercare.core.matcher import has_prefix, matches_any
from aftercare.models.cleanup import CandidateSet, CleanupConfig
from aftercare.models.graph import ImportGraph
from aftercare.utils import relative_posix

log = logging.getLogger(__name__)

ENTRY_POINT_NAMES = frozenset({"main.ts", "index.ts", "index.tsx"})
ENTRY_POINT_SUFFIX = ".module.ts"
TEST_FILE_RE = re.compile(r"\.spec\.(tsx?)$")
DATA_OBJECT_DIRS = frozenset({"dto", "dtos"})
DATA_OBJECT_SUFFIX = ".dto.ts"

BirthTimeFn = Callable[[Path], float | None]


def birth_time(path: Path) -> float | None:
    """Return the file's creation time, or None where the platform lacks it.

    Linux ``stat`` does not expose a creation time through ``os.stat``, so
    there the answer is always None.
    """
    try:
        return getattr(os.stat(path), "st_birthtime", None)
    except OSError:
        return None


def is_entry_point(path: Path) -> bool:
    return path.name in ENTRY_POINT_NAMES or path.name.endswith(ENTRY_POINT_SUFFIX)


def implementation_for(test_file: Path) -> Path | None:
    """``foo.spec.ts`` -> ``foo.ts`` in the same directory; None for non-tests."""
    if not TEST_FILE_RE.search(test_file.name):
        return None
    return test_file.with_name(TEST_FILE_RE.sub(r".\1", test_file.name))


class DeadFileClassifier:
    """Applies the three deletion rules and the shared exclusion test."""

    def __init__(
        self,
        config: CleanupConfig,
        root: Path,
        *,
        now: float | None = None,
        birth_time_fn: BirthTimeFn = birth_time,
    ) -> None:
        self.config = config
        self.root = root
        self._now = now
        self._birth_time = birth_time_fn

    def is_recent(self, path: Path) -> bool:
        created = self._birth_time(path)
        if created is None:
            return False
        now = self._now if self._now is not None else time.time()
        return now - created < self.config.recent_file_threshold_hours * 3600

    def is_excluded(self, path: Path) -> bool:
        """Excluded path prefix, then filename pattern, then recency."""
        relative = relative_posix(path, self.root)

        if any(has_prefix(relative, prefix) for prefix in self.config.exclude_paths):
            return True
        if matches_any(relative, self.config.exclude_patterns):
            return True
        if self.config.exclude_recent_files and self.is_recent(path):
            return True
        return False

    def is_data_object(self, path: Path) -> bool:
        parents = Path(relative_posix(path.parent, self.root)).parts
        return bool(DATA_OBJECT_DIRS.intersection(parents)) or path.name.endswith(DATA_OBJECT_SUFFIX)

    def find_unused(self, files: list[Path], graph: ImportGraph, removed: Set[Path] = frozenset()) -> list[Path]:
        """Files nothing imports that are neither excluded nor entry points.

        Importers listed in *removed* do not count.
        """
        return [
            f for f in files
            if not (graph.importers(f) - removed) and not self.is_excluded(f) and not is_entry_point(f)
        ]

    def find_orphaned_tests(self, files: list[Path], removed: Set[Path] = frozenset()) -> list[Path]:
        """Test files whose implementation is missing from their directory.

        An implementation listed in *removed* counts as missing.
        """
        orphaned: list[Path] = []
        for f in files:
            impl = implementation_for(f)
            if impl is None or self.is_excluded(f):
                continue
            if impl in removed or not impl.exists():
                orphaned.append(f)
        return orphaned

    def find_unused_data_objects(
        self, files: list[Path], graph: ImportGraph, removed: Set[Path] = frozenset()
    ) -> list[Path]:
        """DTO files nothing imports. Entry-point names do not protect them."""
        return [
            f for f in files
            if self.is_data_object(f) and not (graph.importers(f) - removed) and not self.is_excluded(f)
        ]

    def classify(self, files: list[Path], graph: ImportGraph) -> CandidateSet:
        """Apply the rules until deleting the candidates would expose no new ones.

        Candidates from one round are treated as already deleted in the next,
        so a file imported only by dead files is found in the same run.
        """
        removed: set[Path] = set()
        rounds = 0
        while True:
            rounds += 1
            candidates = CandidateSet(
                unused=self.find_unused(files, graph, removed),
                orphaned_tests=self.find_orphaned_tests(files, removed),
                unused_data_objects=self.find_unused_data_objects(files, graph, removed),
            )
            found = set(candidates.all())
            if found <= removed:
                break
            removed |= found

        log.debug("Classification settled after %d round(s)", rounds)
        log.debug(
            "Classified %d files: %d unused, %d orphaned tests, %d unused DTOs",
            len(files),
            len(candidates.unused),
            len(candidates.orphaned_tests),
            len(candidates.unused_data_objects),
        )
        return candidates
