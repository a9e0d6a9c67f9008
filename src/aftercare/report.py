"""Human-readable progress and result output on stderr."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import click

from aftercare.models.project import ValidationOutcome
from aftercare.utils import format_elapsed, relative_posix

DIVIDER = "━" * 58
MAX_PREVIEW_ERRORS = 10


def echo(message: str = "") -> None:
    click.echo(message, err=True)


def divider() -> None:
    echo(DIVIDER)


def banner(title: str) -> None:
    echo()
    divider()
    echo(click.style(title, bold=True))
    divider()


def success(message: str) -> None:
    echo(click.style(message, fg="green"))


def bullet(text: str, indent: int = 2, mark: str = "-") -> None:
    echo(f"{' ' * indent}{mark} {text}")


def project_progress(project: str, message: str) -> None:
    echo(f"  [{click.style(project, fg='cyan')}] {message}")


# ── validation ─────────────────────────────────────────────────────────────

def validation_header(project_names: Sequence[str]) -> None:
    banner("Auto-Fix: Processing changed files")
    echo(f"Projects: {', '.join(project_names)}")
    echo()


def error_preview(errors: Sequence[str], limit: int = MAX_PREVIEW_ERRORS) -> list[str]:
    """First *limit* errors, plus a line counting the rest."""
    lines = list(errors[:limit])
    if len(errors) > limit:
        lines.append(f"... and {len(errors) - limit} more errors")
    return lines


def validation_failure(failed: Sequence[ValidationOutcome], *, escalate: bool) -> None:
    divider()
    echo(click.style(f"Type errors found in: {', '.join(o.project for o in failed)}", fg="red"))
    echo()
    all_errors = [line for o in failed for line in o.prefixed_errors()]
    if all_errors:
        echo("Error preview:")
        for line in error_preview(all_errors):
            echo(f"  {line}")
        echo()
    if escalate:
        echo("Use the auto-error-resolver agent to fix the errors")
        echo("WE DO NOT LEAVE A MESS BEHIND")
    else:
        echo("Automatic error resolution is disabled")
    divider()


def validation_success() -> None:
    divider()
    success("All checks passed!")
    divider()


# ── cleanup ────────────────────────────────────────────────────────────────

def cleanup_header(dry_run: bool) -> None:
    banner("Backend Cleanup: Scanning for unused files")
    if dry_run:
        echo(click.style("[DRY RUN MODE - No files will be deleted]", fg="yellow"))
        echo()


def candidate_group(label: str, paths: Sequence[Path], root: Path) -> None:
    if not paths:
        return
    echo(f"  {label} ({len(paths)}):")
    for path in paths:
        bullet(relative_posix(path, root), indent=4)
    echo()


def cleanup_summary(
    deleted: int,
    errors: Iterable[str],
    removed_dirs: Sequence[Path],
    *,
    dry_run: bool,
    elapsed: float | None = None,
) -> None:
    verb = "Would delete" if dry_run else "Deleted"
    echo(f"{verb}: {deleted} file(s)")
    errors = list(errors)
    if errors:
        echo(click.style(f"Errors: {len(errors)}", fg="red"))
        for message in errors:
            bullet(message)
        echo()
    if removed_dirs:
        verb = "Would remove" if dry_run else "Removed"
        echo(f"{verb} {len(removed_dirs)} empty director(ies)")
    if elapsed is not None:
        echo(click.style(f"Finished in {format_elapsed(elapsed)}", fg="bright_black"))
    divider()
