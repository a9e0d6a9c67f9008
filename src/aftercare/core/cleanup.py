"""Dead-file cleanup orchestration."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from aftercare import report
from aftercare.core.classifier import BirthTimeFn, DeadFileClassifier, birth_time
from aftercare.core.import_graph import ImportGraphBuilder, enumerate_source_files
from aftercare.core.pruner import delete_files, remove_empty_directories
from aftercare.models.cleanup import CandidateSet, CleanupConfig, CleanupResult
from aftercare.models.graph import ImportGraph
from aftercare.utils import absolute_path

log = logging.getLogger(__name__)


@dataclass(slots=True)
class CleanupScan:
    """Analysis half of a cleanup run. Never touches the filesystem."""

    files: list[Path] = field(default_factory=list)
    graph: ImportGraph = field(default_factory=ImportGraph)
    candidates: CandidateSet = field(default_factory=CandidateSet)


@dataclass(slots=True)
class CleanupReport:
    scan: CleanupScan = field(default_factory=CleanupScan)
    result: CleanupResult = field(default_factory=CleanupResult)
    skipped: str = ""
    elapsed: float = 0.0


class CleanupCoordinator:
    """Drives graph building, classification and pruning for one run."""

    def __init__(
        self,
        config: CleanupConfig,
        root: Path,
        *,
        birth_time_fn: BirthTimeFn = birth_time,
    ) -> None:
        self.config = config
        self.root = absolute_path(root)
        self.source_root = absolute_path(self.root / config.source_root)
        self._birth_time = birth_time_fn

    def scan(self) -> CleanupScan:
        """Enumerate, build the graph and classify. MUST NOT delete anything."""
        files = enumerate_source_files(self.source_root)
        graph = ImportGraphBuilder(self.root, self.config).build(files)
        classifier = DeadFileClassifier(self.config, self.root, birth_time_fn=self._birth_time)
        return CleanupScan(files=files, graph=graph, candidates=classifier.classify(files, graph))

    def clean(self, scan: CleanupScan) -> CleanupResult:
        """Delete the scan's candidates and prune empty directories."""
        dry_run = self.config.dry_run
        result = delete_files(scan.candidates.all(), dry_run=dry_run)
        roots = [absolute_path(self.root / p) for p in self.config.scan_paths]
        result.removed_dirs = remove_empty_directories(roots, dry_run=dry_run, pending=result.deleted)
        return result

    def run(self, *, verbose: bool = True) -> CleanupReport:
        """Scan, clean and (when *verbose*) print the report to stderr."""
        if not self.config.enabled:
            log.debug("Cleanup disabled in config")
            return CleanupReport(skipped="disabled")
        if not self.source_root.is_dir():
            log.debug("Source root not found: %s", self.source_root)
            return CleanupReport(skipped="source root not found")

        started = time.monotonic()
        if verbose:
            report.cleanup_header(self.config.dry_run)

        scan = self.scan()
        if not scan.files:
            if verbose:
                report.echo("No TypeScript files found")
                report.divider()
            return CleanupReport(scan=scan, elapsed=time.monotonic() - started)

        candidates = scan.candidates.all()
        if verbose:
            report.echo(f"Analyzing {len(scan.files)} files...")
            report.echo()

        if not candidates:
            if verbose:
                report.success("✓ No unused files found")
                report.divider()
            return CleanupReport(scan=scan, elapsed=time.monotonic() - started)

        if verbose:
            report.echo(f"Found {len(candidates)} unused file(s):")
            report.echo()
            report.candidate_group("Unused files", scan.candidates.unused, self.root)
            report.candidate_group("Orphaned tests", scan.candidates.orphaned_tests, self.root)
            report.candidate_group("Unused DTOs", scan.candidates.unused_data_objects, self.root)

        result = self.clean(scan)
        elapsed = time.monotonic() - started
        for failure in result.errors:
            log.debug("Could not delete %s", failure)

        if verbose:
            report.cleanup_summary(
                len(result.deleted),
                (str(e) for e in result.errors),
                result.removed_dirs,
                dry_run=result.dry_run,
                elapsed=elapsed,
            )
        return CleanupReport(scan=scan, result=result, elapsed=elapsed)
