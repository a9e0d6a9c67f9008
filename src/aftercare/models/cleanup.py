"""Cleanup configuration and result dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class CleanupConfig:
    """Settings for one cleanup run.

    ``source_root`` is both the root of the import graph and the directory
    that alias specifiers (``@/foo``) resolve against. ``scan_paths`` are the
    roots pruned for empty directories.
    """

    enabled: bool = True
    exclude_paths: tuple[str, ...] = (
        "backend/src/database/migrations",
        "backend/src/core",
        "backend/src/shared",
        "backend/src/infrastructure",
        "backend/src/config",
    )
    exclude_patterns: tuple[str, ...] = (
        "*.config.ts",
        "*.constants.ts",
        "*.enum.ts",
        "**/index.ts",
        "main.ts",
        "*.module.ts",
    )
    exclude_recent_files: bool = True
    recent_file_threshold_hours: float = 24
    dry_run: bool = False
    log_level: str = "info"
    scan_paths: tuple[str, ...] = ("backend/src/modules",)
    source_root: str = "backend/src"
    alias_prefix: str = "@/"


@dataclass(slots=True)
class CandidateSet:
    """Deletion candidates grouped by the rule that found them."""

    unused: list[Path] = field(default_factory=list)
    orphaned_tests: list[Path] = field(default_factory=list)
    unused_data_objects: list[Path] = field(default_factory=list)

    def all(self) -> list[Path]:
        """Union of all groups, first occurrence order, no duplicates."""
        return list(dict.fromkeys([*self.unused, *self.orphaned_tests, *self.unused_data_objects]))

    def __len__(self) -> int:
        return len(self.all())


@dataclass(frozen=True, slots=True)
class DeletionFailure:
    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(slots=True)
class CleanupResult:
    """Result of deleting candidates and pruning directories."""

    deleted: list[Path] = field(default_factory=list)
    errors: list[DeletionFailure] = field(default_factory=list)
    removed_dirs: list[Path] = field(default_factory=list)
    dry_run: bool = False
