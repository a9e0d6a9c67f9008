"""Tests for pattern and prefix matching."""

from __future__ import annotations

import pytest

from aftercare.core.matcher import has_prefix, is_under, matches_any, matches_pattern


class TestMatchesPattern:
    @pytest.mark.parametrize(
        ("path", "pattern", "expected"),
        [
            ("backend/src/main.ts", "main.ts", True),
            ("backend/src/domain.ts", "main.ts", False),
            ("backend/src/app.module.ts", "*.module.ts", True),
            ("backend/src/app.modules.ts", "*.module.ts", False),
            ("backend/src/users/index.ts", "**/index.ts", True),
            ("index.ts", "**/index.ts", True),
            ("backend/src/users/reindex.ts", "**/index.ts", False),
            ("backend/src/users/dto/create.ts", "**/dto/create.ts", True),
            ("backend/src/a.tsx", "**/*.tsx", True),
            ("backend/src/a.ts", "**/*.tsx", False),
        ],
    )
    def test_shapes(self, path, pattern, expected):
        assert matches_pattern(path, pattern) is expected

    def test_backslashes_are_normalised(self):
        assert matches_pattern("backend\\src\\users\\index.ts", "**/users/index.ts")

    def test_matches_any(self):
        assert matches_any("x/app.config.ts", ("*.enum.ts", "*.config.ts"))
        assert not matches_any("x/app.ts", ())


class TestPrefixes:
    def test_has_prefix_is_plain_string_prefix(self):
        assert has_prefix("backend/src/core/x.ts", "backend/src/core")
        assert has_prefix("backend/src/core-utils/x.ts", "backend/src/core")
        assert not has_prefix("backend/src/modules/x.ts", "backend/src/core")

    def test_is_under_respects_components(self):
        assert is_under("backend/src/x.ts", "backend")
        assert is_under("backend/src/x.ts", "backend/")
        assert not is_under("backend-legacy/src/x.ts", "backend")
        assert not is_under("backend", "backend")

    def test_is_under_empty_directory_matches_everything(self):
        assert is_under("anything.ts", "")
