"""Tests for mapping changed files to projects."""

from __future__ import annotations

from pathlib import Path

from aftercare.core.projects import is_source_file, resolve_projects
from aftercare.models.project import ProjectDescriptor, ValidationConfig


def project(name: str, path: str | None = None, patterns: tuple[str, ...] = ()) -> ProjectDescriptor:
    return ProjectDescriptor(
        name=name,
        path=path or name,
        lint_command="npm run lint",
        type_check_command="npm run type-check",
        patterns=patterns,
    )


ROOT = Path("/work/repo")


class TestResolveProjects:
    def test_only_touched_project_is_returned(self):
        projects = [project("backend"), project("frontend")]
        assert resolve_projects(["backend/src/x.ts"], projects, ROOT) == [projects[0]]

    def test_absolute_paths_are_made_relative(self):
        projects = [project("backend"), project("frontend")]
        result = resolve_projects(["/work/repo/frontend/src/App.tsx"], projects, ROOT)
        assert [p.name for p in result] == ["frontend"]

    def test_windows_separators(self):
        projects = [project("backend")]
        result = resolve_projects(["C:\\work\\repo\\backend\\src\\x.ts"], projects, "C:\\work\\repo")
        assert [p.name for p in result] == ["backend"]

    def test_configuration_order_not_touch_order(self):
        projects = [project("backend"), project("frontend"), project("dashboard")]
        paths = ["dashboard/a.ts", "frontend/b.tsx", "backend/c.ts"]
        assert [p.name for p in resolve_projects(paths, projects, ROOT)] == ["backend", "frontend", "dashboard"]

    def test_non_source_files_are_ignored(self):
        projects = [project("backend")]
        assert resolve_projects(["backend/README.md", "backend/package.json"], projects, ROOT) == []

    def test_prefix_must_end_at_a_directory_boundary(self):
        projects = [project("backend")]
        assert resolve_projects(["backend-legacy/src/x.ts"], projects, ROOT) == []

    def test_patterns_restrict_owned_files(self):
        projects = [project("backend", patterns=("**/*.ts",))]
        assert resolve_projects(["backend/src/view.tsx"], projects, ROOT) == []
        assert resolve_projects(["backend/src/view.ts"], projects, ROOT) == projects

    def test_default_projects(self):
        config = ValidationConfig()
        paths = ["/work/repo/frontend/src/App.tsx", "/work/repo/backend/src/app.service.ts"]
        assert [p.name for p in resolve_projects(paths, config.projects, ROOT)] == ["backend", "frontend"]


def test_is_source_file():
    assert is_source_file("a.ts")
    assert is_source_file("a.tsx")
    assert not is_source_file("a.js")
    assert not is_source_file("a.ts.map")
