"""Hook payload and transcript dataclasses."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)


class ToolKind(str, Enum):
    """File-modifying tools recognised in a transcript."""

    WRITE = "Write"
    EDIT = "Edit"
    MULTI_EDIT = "MultiEdit"


DELEGATION_TOOL = "Task"


@dataclass(frozen=True, slots=True)
class ToolInvocation:
    """One tool call recorded in an assistant message."""

    name: str
    input: dict[str, Any] = field(default_factory=dict)

    @property
    def kind(self) -> ToolKind | None:
        """The file-modifying tool kind, or None for any other tool."""
        try:
            return ToolKind(self.name)
        except ValueError:
            return None

    @property
    def subagent_type(self) -> str | None:
        value = self.input.get("subagent_type")
        return value if isinstance(value, str) else None

    def file_paths(self) -> list[str]:
        """Paths this invocation writes to. Empty for non-modifying tools."""
        kind = self.kind
        if kind is None:
            return []

        if kind is ToolKind.MULTI_EDIT and isinstance(self.input.get("edits"), list):
            return [
                edit["file_path"]
                for edit in self.input["edits"]
                if isinstance(edit, dict) and isinstance(edit.get("file_path"), str) and edit["file_path"]
            ]

        path = self.input.get("file_path")
        return [path] if isinstance(path, str) and path else []

    @classmethod
    def from_content(cls, item: Any) -> ToolInvocation | None:
        """Build from a message content item, or None if it is not a tool call.

        Accepts both the nested ``{"type": "tool_use", "tool_use": {...}}``
        shape and the flat ``{"type": "tool_use", "name": ..., "input": ...}``
        shape.
        """
        if not isinstance(item, dict) or item.get("type") != "tool_use":
            return None

        payload = item.get("tool_use")
        if not isinstance(payload, dict):
            payload = item

        name = payload.get("name")
        tool_input = payload.get("input")
        if not isinstance(name, str):
            return None
        if not isinstance(tool_input, dict):
            tool_input = {}
        return cls(name=name, input=tool_input)


@dataclass(frozen=True, slots=True)
class TranscriptEvent:
    """A session event. Only assistant events carry tool invocations."""

    type: str
    invocations: tuple[ToolInvocation, ...] = ()

    @classmethod
    def from_raw(cls, raw: Any) -> TranscriptEvent | None:
        if not isinstance(raw, dict) or not isinstance(raw.get("type"), str):
            return None

        event_type = raw["type"]
        if event_type != "assistant":
            return cls(type=event_type)

        message = raw.get("message")
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, list):
            return cls(type=event_type)

        invocations = tuple(
            inv for inv in (ToolInvocation.from_content(item) for item in content) if inv is not None
        )
        return cls(type=event_type, invocations=invocations)


@dataclass(frozen=True, slots=True)
class HookInput:
    """Payload a host process writes to the hook's stdin."""

    session_id: str = ""
    transcript: tuple[TranscriptEvent, ...] = ()
    transcript_path: Path | None = None
    cwd: str | None = None

    @classmethod
    def parse(cls, text: str | None) -> HookInput | None:
        """Parse a raw JSON payload, returning None if it is absent or malformed."""
        if not text or not text.strip():
            return None
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            log.debug("Hook input is not valid JSON")
            return None
        if not isinstance(data, dict):
            return None

        session_id = data.get("session_id")
        cwd = data.get("cwd")
        raw_path = data.get("transcript_path")
        transcript_path = Path(raw_path) if isinstance(raw_path, str) and raw_path else None

        raw_events = data.get("transcript")
        if isinstance(raw_events, list):
            events = _parse_events(raw_events)
        elif transcript_path is not None:
            events = load_transcript_file(transcript_path)
        else:
            events = ()

        return cls(
            session_id=session_id if isinstance(session_id, str) else "",
            transcript=events,
            transcript_path=transcript_path,
            cwd=cwd if isinstance(cwd, str) else None,
        )


def _parse_events(raw_events: list[Any]) -> tuple[TranscriptEvent, ...]:
    return tuple(ev for ev in (TranscriptEvent.from_raw(raw) for raw in raw_events) if ev is not None)


def load_transcript_file(path: Path) -> tuple[TranscriptEvent, ...]:
    """Read a JSONL transcript, skipping lines that are not JSON objects."""
    raw_events: list[Any] = []
    try:
        with open(path, encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    raw_events.append(json.loads(line))
                except json.JSONDecodeError:
                    log.debug("Skipping malformed transcript line %d in %s", lineno, path)
    except (OSError, UnicodeDecodeError) as e:
        log.debug("Cannot read transcript %s: %s", path, e)
        return ()
    return _parse_events(raw_events)
