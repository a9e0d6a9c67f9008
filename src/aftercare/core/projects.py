"""Map changed files onto configured projects."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from aftercare.core.matcher import is_under, matches_any
from aftercare.models.project import ProjectDescriptor
from aftercare.utils import relative_posix

log = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".ts", ".tsx")


def is_source_file(path: str) -> bool:
    return path.endswith(SOURCE_SUFFIXES)


def project_owns(project: ProjectDescriptor, relative_path: str) -> bool:
    """Whether a session-relative path belongs to *project*."""
    if not is_under(relative_path, project.path):
        return False
    if not project.patterns:
        return True
    inner = relative_posix(relative_path, project.path.strip("/")) if project.path.strip("/") else relative_path
    return matches_any(inner, project.patterns)


def resolve_projects(
    paths: Iterable[str],
    projects: Sequence[ProjectDescriptor],
    root: Path | str,
) -> list[ProjectDescriptor]:
    """Return the projects touched by *paths*, in configuration order."""
    relative = [relative_posix(p, root) for p in paths if is_source_file(p)]

    affected: set[str] = set()
    for rel in relative:
        for project in projects:
            if project.name not in affected and project_owns(project, rel):
                affected.add(project.name)
                log.debug("%s belongs to project '%s'", rel, project.name)

    return [p for p in projects if p.name in affected]
