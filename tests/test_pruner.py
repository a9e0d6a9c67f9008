"""Tests for file deletion and empty directory pruning."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from aftercare.core.pruner import delete_files, remove_empty_directories
from tests.conftest import write


class TestDeleteFiles:
    def test_deletes_every_candidate(self, tmp_path):
        files = [write(tmp_path, "a.ts"), write(tmp_path, "b/c.ts")]
        result = delete_files(files)

        assert result.deleted == files
        assert result.errors == []
        assert not any(f.exists() for f in files)

    def test_dry_run_touches_nothing(self, tmp_path):
        files = [write(tmp_path, "a.ts")]
        result = delete_files(files, dry_run=True)

        assert result.dry_run
        assert result.deleted == files
        assert files[0].exists()

    def test_failure_is_recorded_and_the_rest_continue(self, tmp_path):
        missing = tmp_path / "gone.ts"
        kept = write(tmp_path, "kept.ts")
        result = delete_files([missing, kept])

        assert result.deleted == [kept]
        assert [e.path for e in result.errors] == [missing]
        assert str(result.errors[0]).startswith(f"{missing}: ")

    def test_permission_error_message(self, tmp_path):
        target = write(tmp_path, "locked.ts")
        with patch("pathlib.Path.unlink", side_effect=PermissionError(13, "Permission denied")):
            result = delete_files([target])
        assert result.deleted == []
        assert result.errors[0].message == "Permission denied"


class TestRemoveEmptyDirectories:
    def test_nested_empty_directories_go_in_one_pass(self, tmp_path):
        (tmp_path / "mod" / "a" / "b" / "c").mkdir(parents=True)
        write(tmp_path, "mod/keep/x.ts")

        removed = remove_empty_directories([tmp_path / "mod"])

        assert removed == [tmp_path / "mod" / "a" / "b" / "c", tmp_path / "mod" / "a" / "b", tmp_path / "mod" / "a"]
        assert not (tmp_path / "mod" / "a").exists()
        assert (tmp_path / "mod" / "keep" / "x.ts").exists()

    def test_root_left_empty_is_removed(self, tmp_path):
        target = write(tmp_path, "mod/users/old.ts")
        target.unlink()

        removed = remove_empty_directories([tmp_path / "mod"])

        assert removed == [tmp_path / "mod" / "users", tmp_path / "mod"]
        assert not (tmp_path / "mod").exists()
        assert tmp_path.is_dir()

    def test_missing_root_is_ignored(self, tmp_path):
        assert remove_empty_directories([tmp_path / "nope"]) == []

    def test_dry_run_reports_without_removing(self, tmp_path):
        target = write(tmp_path, "mod/users/dto/old.dto.ts")

        removed = remove_empty_directories([tmp_path / "mod"], dry_run=True, pending=[target])

        assert removed == [tmp_path / "mod" / "users" / "dto", tmp_path / "mod" / "users", tmp_path / "mod"]
        assert target.exists()

    def test_dry_run_without_pending_sees_the_files(self, tmp_path):
        write(tmp_path, "mod/users/a.ts")
        assert remove_empty_directories([tmp_path / "mod"], dry_run=True) == []

    def test_non_empty_directory_survives(self, tmp_path):
        write(tmp_path, "mod/users/.gitkeep")
        assert remove_empty_directories([tmp_path / "mod"]) == []
        assert (tmp_path / "mod" / "users").is_dir()

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_directory_symlinks_are_not_entered(self, tmp_path):
        outside = tmp_path / "outside" / "empty"
        outside.mkdir(parents=True)
        (tmp_path / "mod").mkdir()
        (tmp_path / "mod" / "link").symlink_to(tmp_path / "outside", target_is_directory=True)

        assert remove_empty_directories([tmp_path / "mod"]) == []
        assert outside.is_dir()
