"""Extract touched file paths from a session transcript."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from aftercare.models.transcript import DELEGATION_TOOL, ToolInvocation, TranscriptEvent


def _assistant_invocations(events: Iterable[TranscriptEvent]) -> Iterator[ToolInvocation]:
    for event in events:
        if event.type != "assistant":
            continue
        yield from event.invocations


def extract_changed_paths(events: Iterable[TranscriptEvent]) -> list[str]:
    """Distinct paths touched by Write, Edit and MultiEdit, in first-seen order."""
    paths: dict[str, None] = {}
    for invocation in _assistant_invocations(events):
        for path in invocation.file_paths():
            paths.setdefault(path, None)
    return list(paths)


def used_subagent(events: Iterable[TranscriptEvent], agent: str) -> bool:
    """Whether the session delegated work to *agent* via the Task tool."""
    return any(
        inv.name == DELEGATION_TOOL and inv.subagent_type == agent
        for inv in _assistant_invocations(events)
    )
