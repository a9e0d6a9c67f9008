"""CLI interface for Aftercare."""

from __future__ import annotations

import logging
import sys
from dataclasses import replace

import click

from aftercare.core.cleanup import CleanupCoordinator
from aftercare.core.pipeline import EXIT_OK, Pipeline
from aftercare.models.transcript import HookInput
from aftercare.settings import load_cleanup_config, load_validation_config
from aftercare.utils import debug_enabled, session_root

log = logging.getLogger(__name__)

_CONFIG_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
}


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity >= 2 or debug_enabled():
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    logging.basicConfig(level=level, format="[aftercare] %(levelname)s: %(message)s", stream=sys.stderr)


def _read_stdin() -> str | None:
    """Read the hook payload, or None when attached to a terminal."""
    if sys.stdin is None or sys.stdin.isatty():
        return None
    try:
        return sys.stdin.read()
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Could not read stdin: %s", e)
        return None


@click.group()
@click.option("-v", "--verbose", count=True, help="Increase verbosity (-v info, -vv debug)")
def main(verbose: int) -> None:
    """Aftercare: validate touched projects and prune dead files after a session."""
    _setup_logging(verbose)


# ── validate ─────────────────────────────────────────────────────────────

@main.command()
def validate() -> None:
    """Stop hook: lint and type-check projects touched in the session.

    Reads the hook payload as JSON from stdin. Exits 1 when a type-check
    failed and automatic error resolution is enabled, 0 otherwise.
    """
    root = session_root()
    try:
        config = load_validation_config(root)
        status = Pipeline(root, config).run(_read_stdin())
    except Exception:
        # Internal errors never block the session
        if debug_enabled():
            log.exception("Validation hook failed")
        status = EXIT_OK
    sys.exit(status)


# ── cleanup ──────────────────────────────────────────────────────────────

@main.command()
@click.option("--dry-run", is_flag=True, help="Report what would be deleted without deleting it")
def cleanup(dry_run: bool) -> None:
    """Delete unreferenced backend files and prune empty directories.

    Always exits 0: cleanup problems are reported, never escalated.
    """
    root = session_root()
    try:
        raw = _read_stdin()
        if raw and raw.strip() and HookInput.parse(raw) is None:
            log.debug("Ignoring malformed cleanup input")
            sys.exit(EXIT_OK)

        config = load_cleanup_config(root)
        if dry_run:
            config = replace(config, dry_run=True)
        if not logging.getLogger().isEnabledFor(logging.DEBUG):
            logging.getLogger("aftercare").setLevel(_CONFIG_LOG_LEVELS[config.log_level])

        CleanupCoordinator(config, root).run()
    except Exception:
        if debug_enabled():
            log.exception("Cleanup failed")
    sys.exit(EXIT_OK)


if __name__ == "__main__":
    main()
