"""Aftercare data models."""

from aftercare.models.cleanup import CandidateSet, CleanupConfig, CleanupResult, DeletionFailure
from aftercare.models.graph import ImportGraph
from aftercare.models.project import (
    CommandResult,
    OutcomeStatus,
    ProjectDescriptor,
    ValidationConfig,
    ValidationOutcome,
)
from aftercare.models.transcript import HookInput, ToolInvocation, ToolKind, TranscriptEvent

__all__ = [
    "CandidateSet",
    "CleanupConfig",
    "CleanupResult",
    "CommandResult",
    "DeletionFailure",
    "HookInput",
    "ImportGraph",
    "OutcomeStatus",
    "ProjectDescriptor",
    "ToolInvocation",
    "ToolKind",
    "TranscriptEvent",
    "ValidationConfig",
    "ValidationOutcome",
]
