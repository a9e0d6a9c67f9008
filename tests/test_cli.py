"""Tests for the command-line entry points."""

from __future__ import annotations

import json
from unittest.mock import patch

from click.testing import CliRunner

from aftercare.cli import main
from tests.conftest import write


def hook_payload(*file_paths):
    content = [{"type": "tool_use", "tool_use": {"name": "Write", "input": {"file_path": p}}} for p in file_paths]
    return json.dumps({"session_id": "s", "transcript": [{"type": "assistant", "message": {"content": content}}]})


class TestValidateCommand:
    def test_empty_input_exits_zero(self, session):
        result = CliRunner().invoke(main, ["validate"], input="")
        assert result.exit_code == 0

    def test_malformed_input_exits_zero(self, session):
        result = CliRunner().invoke(main, ["validate"], input="{broken")
        assert result.exit_code == 0

    def test_untouched_projects_exit_zero(self, session):
        result = CliRunner().invoke(main, ["validate"], input=hook_payload("README.md"))
        assert result.exit_code == 0

    def test_pipeline_status_becomes_exit_code(self, session):
        with patch("aftercare.cli.Pipeline") as pipeline:
            pipeline.return_value.run.return_value = 1
            result = CliRunner().invoke(main, ["validate"], input=hook_payload("backend/src/a.ts"))
        assert result.exit_code == 1
        root, config = pipeline.call_args.args
        assert root == session
        assert config.trigger_auto_resolver is True

    def test_internal_error_never_blocks(self, session):
        with patch("aftercare.cli.Pipeline", side_effect=RuntimeError("boom")):
            result = CliRunner().invoke(main, ["validate"], input=hook_payload("backend/src/a.ts"))
        assert result.exit_code == 0


class TestCleanupCommand:
    def test_dry_run_keeps_files(self, session):
        orphan = write(session / "backend" / "src", "modules/old/old.spec.ts")
        result = CliRunner().invoke(main, ["cleanup", "--dry-run"], input=json.dumps({"session_id": "s"}))
        assert result.exit_code == 0
        assert orphan.exists()

    def test_deletes_unused_files(self, session):
        config = {"excludeRecentFiles": False}
        write(session, ".claude/nestjs/hooks/backend-cleanup-config.json", json.dumps(config))
        stray = write(session / "backend" / "src", "modules/orders/stray.ts")

        result = CliRunner().invoke(main, ["cleanup"], input="")
        assert result.exit_code == 0
        assert not stray.exists()
        assert not stray.parent.exists()
        assert not (session / "backend" / "src" / "modules").exists()

    def test_malformed_input_exits_zero_without_touching_files(self, session):
        stray = write(session / "backend" / "src", "modules/orders/stray.ts")
        result = CliRunner().invoke(main, ["cleanup"], input="not json")
        assert result.exit_code == 0
        assert stray.exists()

    def test_missing_backend_exits_zero(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLAUDE_PROJECT_DIR", str(tmp_path))
        result = CliRunner().invoke(main, ["cleanup"], input="")
        assert result.exit_code == 0

    def test_unexpected_error_exits_zero(self, session):
        with patch("aftercare.cli.CleanupCoordinator", side_effect=RuntimeError("boom")):
            result = CliRunner().invoke(main, ["cleanup"], input="")
        assert result.exit_code == 0
