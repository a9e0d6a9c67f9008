"""Project descriptor and validation outcome dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class ProjectDescriptor:
    """A sub-project with its own lint and type-check commands."""

    name: str
    path: str
    lint_command: str
    type_check_command: str
    format_command: str | None = None
    patterns: tuple[str, ...] = ()
    manifest: str = "package.json"


def _default_projects() -> tuple[ProjectDescriptor, ...]:
    return (
        ProjectDescriptor(
            name="backend",
            path="backend",
            lint_command="npm run lint",
            format_command="npm run format",
            type_check_command="npm run type-check",
            patterns=("**/*.ts",),
        ),
        ProjectDescriptor(
            name="frontend",
            path="frontend",
            lint_command="npm run lint",
            type_check_command="npm run type-check",
            patterns=("**/*.ts", "**/*.tsx"),
        ),
        ProjectDescriptor(
            name="dashboard",
            path="dashboard",
            lint_command="npm run lint",
            type_check_command="npm run type-check",
            patterns=("**/*.ts", "**/*.tsx"),
        ),
    )


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Settings for the validation stage.

    ``trigger_auto_resolver`` turns a type-check failure into a non-zero
    exit. Cleanup runs only when ``cleanup_agent`` was delegated to during
    the session and ``cleanup_project`` was among the affected projects.
    """

    projects: tuple[ProjectDescriptor, ...] = field(default_factory=_default_projects)
    trigger_auto_resolver: bool = True
    cleanup_agent: str = "backend-developer"
    cleanup_project: str = "backend"
    command_timeout: float = 120


@dataclass(slots=True)
class CommandResult:
    """Outcome of one external command."""

    success: bool
    output: str = ""
    timed_out: bool = False


class OutcomeStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(slots=True)
class ValidationOutcome:
    """Result of validating one project."""

    project: str
    status: OutcomeStatus
    output: str = ""
    errors: list[str] = field(default_factory=list)
    lint_ok: bool | None = None
    format_ok: bool | None = None
    reason: str = ""

    @property
    def success(self) -> bool:
        """Skipped projects are not failures."""
        return self.status is not OutcomeStatus.FAILED

    def prefixed_errors(self) -> list[str]:
        return [f"[{self.project}] {line}" for line in self.errors]
