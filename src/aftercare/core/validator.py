"""Run lint, format and type-check commands for affected projects."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from aftercare.models.project import (
    CommandResult,
    OutcomeStatus,
    ProjectDescriptor,
    ValidationOutcome,
)
from aftercare.utils import DEFAULT_COMMAND_TIMEOUT, run_command

log = logging.getLogger(__name__)

TYPE_ERROR_MARKERS = ("error TS", "error:")

ProgressCallback = Callable[[str, str], None]  # (project_name, status_message)
CommandRunner = Callable[..., CommandResult]


def extract_type_errors(output: str) -> list[str]:
    """Collect trimmed output lines that look like compiler errors."""
    return [line.strip() for line in output.splitlines() if any(m in line for m in TYPE_ERROR_MARKERS)]


class ValidationRunner:
    """Validates projects one at a time, in the order given.

    A project never raises past its own boundary: missing directories are
    skipped and command failures are folded into the outcome.
    """

    def __init__(
        self,
        root: Path,
        *,
        timeout: float = DEFAULT_COMMAND_TIMEOUT,
        runner: CommandRunner = run_command,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.root = root
        self.timeout = timeout
        self._run = runner
        self._on_progress = on_progress

    def _progress(self, project: ProjectDescriptor, message: str) -> None:
        if self._on_progress:
            self._on_progress(project.name, message)

    def _skip(self, project: ProjectDescriptor, reason: str) -> ValidationOutcome:
        log.info("Skipping project '%s': %s", project.name, reason)
        self._progress(project, f"Skipped ({reason})")
        return ValidationOutcome(project=project.name, status=OutcomeStatus.SKIPPED, reason=reason)

    def validate(self, project: ProjectDescriptor) -> ValidationOutcome:
        """Lint, format and type-check a single project."""
        project_dir = self.root / project.path

        if not project_dir.is_dir():
            return self._skip(project, "path not found")
        if not (project_dir / project.manifest).exists():
            return self._skip(project, f"no {project.manifest}")

        self._progress(project, "Running lint...")
        lint = self._run(project.lint_command, project_dir, timeout=self.timeout)
        self._progress(project, "Lint: OK (auto-fixed)" if lint.success else "Lint: Some issues remain")

        format_ok: bool | None = None
        if project.format_command:
            fmt = self._run(project.format_command, project_dir, timeout=self.timeout)
            format_ok = fmt.success
            if fmt.success:
                self._progress(project, "Format: OK")

        self._progress(project, "Running type-check...")
        check = self._run(project.type_check_command, project_dir, timeout=self.timeout)

        if check.success:
            self._progress(project, "Type-check: OK")
            return ValidationOutcome(
                project=project.name,
                status=OutcomeStatus.PASSED,
                output=check.output,
                lint_ok=lint.success,
                format_ok=format_ok,
            )

        errors = extract_type_errors(check.output)
        if check.timed_out:
            self._progress(project, f"Type-check: timed out after {self.timeout:g}s")
        else:
            self._progress(project, f"Type-check: {len(errors)} error(s)")
        return ValidationOutcome(
            project=project.name,
            status=OutcomeStatus.FAILED,
            output=check.output,
            errors=errors,
            lint_ok=lint.success,
            format_ok=format_ok,
        )

    def validate_all(self, projects: list[ProjectDescriptor]) -> list[ValidationOutcome]:
        outcomes: list[ValidationOutcome] = []
        for project in projects:
            try:
                outcomes.append(self.validate(project))
            except OSError as e:
                log.warning("Project '%s' could not be validated: %s", project.name, e)
                outcomes.append(
                    ValidationOutcome(project=project.name, status=OutcomeStatus.SKIPPED, reason=str(e))
                )
        return outcomes
