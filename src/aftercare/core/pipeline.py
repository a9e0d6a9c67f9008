"""Top-level control flow for the post-session hook."""

from __future__ import annotations

import json
import logging
import os
import shutil
import sys
from enum import Enum
from pathlib import Path
from typing import Callable

from aftercare import report
from aftercare.core.changes import extract_changed_paths, used_subagent
from aftercare.core.projects import resolve_projects
from aftercare.core.validator import CommandRunner, ValidationRunner
from aftercare.models.project import CommandResult, ProjectDescriptor, ValidationConfig, ValidationOutcome
from aftercare.models.transcript import HookInput
from aftercare.utils import SESSION_ROOT_ENV, run_command

log = logging.getLogger(__name__)

# Timeout for the cleanup subprocess (seconds).
CLEANUP_TIMEOUT = 60

EXIT_OK = 0
EXIT_NEEDS_FOLLOW_UP = 1

CleanupLauncher = Callable[[Path, str], CommandResult]


class PipelineState(str, Enum):
    IDLE = "idle"
    EXTRACTING_CHANGES = "extracting_changes"
    RESOLVING_PROJECTS = "resolving_projects"
    VALIDATING = "validating"
    CLEANUP_TRIGGERED = "cleanup_triggered"
    DONE = "done"


def find_aftercare_executable() -> str | None:
    """Find the aftercare CLI executable on PATH."""
    return shutil.which("aftercare")


def cleanup_command() -> list[str]:
    exe = find_aftercare_executable()
    if exe is not None:
        return [exe, "cleanup"]
    return [sys.executable, "-m", "aftercare.cli", "cleanup"]


def run_cleanup_process(root: Path, session_id: str) -> CommandResult:
    """Run ``aftercare cleanup`` as a blocking subprocess.

    The session id is passed on stdin the same way the host passes it to
    this hook. The child reports to its stderr, which is captured here.
    """
    env = dict(os.environ)
    env[SESSION_ROOT_ENV] = str(root)
    return run_command(
        cleanup_command(),
        root,
        timeout=CLEANUP_TIMEOUT,
        input_text=json.dumps({"session_id": session_id}),
        env=env,
    )


class Pipeline:
    """Extract changes, resolve projects, validate, then maybe clean up.

    ``run`` returns the process exit status: 1 only when a type-check failed
    and automatic error resolution is enabled, 0 otherwise. The cleanup
    outcome never changes the exit status.
    """

    def __init__(
        self,
        root: Path,
        config: ValidationConfig,
        *,
        runner: CommandRunner = run_command,
        launch_cleanup: CleanupLauncher = run_cleanup_process,
        verbose: bool = True,
    ) -> None:
        self.root = root
        self.config = config
        self._runner = runner
        self._launch_cleanup = launch_cleanup
        self._verbose = verbose
        self.state = PipelineState.IDLE
        self.history: list[PipelineState] = [PipelineState.IDLE]
        self.changed_paths: list[str] = []
        self.affected: list[ProjectDescriptor] = []
        self.outcomes: list[ValidationOutcome] = []
        self.cleanup_result: CommandResult | None = None

    def _enter(self, state: PipelineState) -> None:
        log.debug("Pipeline: %s -> %s", self.state.value, state.value)
        self.state = state
        self.history.append(state)

    def _finish(self, status: int) -> int:
        self._enter(PipelineState.DONE)
        return status

    def run(self, raw_input: str | None) -> int:
        hook_input = HookInput.parse(raw_input)
        if hook_input is None:
            log.debug("No usable hook input, nothing to do")
            return self._finish(EXIT_OK)

        self._enter(PipelineState.EXTRACTING_CHANGES)
        self.changed_paths = extract_changed_paths(hook_input.transcript)
        if not self.changed_paths:
            return self._finish(EXIT_OK)

        self._enter(PipelineState.RESOLVING_PROJECTS)
        self.affected = resolve_projects(self.changed_paths, self.config.projects, self.root)
        if not self.affected:
            return self._finish(EXIT_OK)

        self._enter(PipelineState.VALIDATING)
        self.outcomes = self._validate()
        failed = [o for o in self.outcomes if not o.success]

        if failed:
            if self._verbose:
                report.validation_failure(failed, escalate=self.config.trigger_auto_resolver)
            if self.config.trigger_auto_resolver:
                return self._finish(EXIT_NEEDS_FOLLOW_UP)
            return self._finish(EXIT_OK)

        if self._verbose:
            report.validation_success()

        if self._should_clean(hook_input):
            self._enter(PipelineState.CLEANUP_TRIGGERED)
            self._cleanup(hook_input.session_id)

        return self._finish(EXIT_OK)

    def _validate(self) -> list[ValidationOutcome]:
        if self._verbose:
            report.validation_header([p.name for p in self.affected])
        validator = ValidationRunner(
            self.root,
            timeout=self.config.command_timeout,
            runner=self._runner,
            on_progress=report.project_progress if self._verbose else None,
        )
        outcomes = validator.validate_all(self.affected)
        if self._verbose:
            report.echo()
        return outcomes

    def _should_clean(self, hook_input: HookInput) -> bool:
        backend_affected = any(p.name == self.config.cleanup_project for p in self.affected)
        return backend_affected and used_subagent(hook_input.transcript, self.config.cleanup_agent)

    def _cleanup(self, session_id: str) -> None:
        try:
            result = self._launch_cleanup(self.root, session_id)
        except OSError as e:
            log.debug("Cleanup could not be started: %s", e)
            return
        self.cleanup_result = result
        if result.output.strip() and self._verbose:
            report.echo(result.output.rstrip())
        if not result.success:
            log.debug("Cleanup warning: %s", result.output.strip() or "exited with an error")
