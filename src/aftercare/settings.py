"""JSON-backed configuration for the validation and cleanup stages."""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any

from aftercare.models.cleanup import CleanupConfig
from aftercare.models.project import ProjectDescriptor, ValidationConfig

log = logging.getLogger(__name__)

CONFIG_DIR = Path(".claude") / "nestjs" / "hooks"
VALIDATION_CONFIG_FILE = CONFIG_DIR / "auto-fix-config.json"
CLEANUP_CONFIG_FILE = CONFIG_DIR / "backend-cleanup-config.json"

LOG_LEVELS = ("info", "debug", "warn")


class ConfigError(ValueError):
    """Raised when a configuration value has the wrong shape."""


class Settings:
    """Read-only view of a JSON settings file.

    Uses dot-notation keys for nested access:
        settings.get("projects")            # reads data["projects"]
        settings.get("limits.timeout", 60)  # reads data["limits"]["timeout"]

    A missing file yields empty settings. A malformed file is reported with
    a warning and also yields empty settings, so every lookup falls back to
    its default.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._data: dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def __contains__(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            log.warning("Could not parse config file %s, using defaults: %s", self._path, e)
            return
        if not isinstance(data, dict):
            log.warning("Config file %s is not a JSON object, using defaults", self._path)
            return
        self._data = data


# ── field coercion ─────────────────────────────────────────────────────────

def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"expected true/false, got {value!r}")
    return value


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        raise ConfigError(f"expected a non-negative number, got {value!r}")
    return value


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"expected a string, got {value!r}")
    return value


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"expected a list of strings, got {value!r}")
    return tuple(value)


def _as_log_level(value: Any) -> str:
    level = _as_str(value)
    if level not in LOG_LEVELS:
        raise ConfigError(f"expected one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


def _pick(settings: Settings, key: str, coerce, default: Any) -> Any:
    """Read and coerce one field, falling back to *default* on any problem."""
    if key not in settings:
        return default
    try:
        return coerce(settings.get(key))
    except ConfigError as e:
        log.warning("Invalid '%s' in %s, using default: %s", key, settings.path, e)
        return default


def parse_project(raw: Any) -> ProjectDescriptor:
    """Build a ProjectDescriptor from its camelCase JSON form."""
    if not isinstance(raw, dict):
        raise ConfigError(f"project entry must be an object, got {raw!r}")
    try:
        name = _as_str(raw["name"])
        path = _as_str(raw["path"]).replace("\\", "/").strip("/")
        lint = _as_str(raw["lintCommand"])
        type_check = _as_str(raw["typeCheckCommand"])
    except KeyError as e:
        raise ConfigError(f"project entry is missing {e.args[0]!r}") from None

    fmt = raw.get("formatCommand")
    return ProjectDescriptor(
        name=name,
        path=path,
        lint_command=lint,
        type_check_command=type_check,
        format_command=_as_str(fmt) if fmt is not None else None,
        patterns=_as_str_tuple(raw.get("patterns", [])),
        manifest=_as_str(raw.get("manifest", "package.json")),
    )


def _as_projects(value: Any) -> tuple[ProjectDescriptor, ...]:
    if not isinstance(value, list):
        raise ConfigError(f"expected a list of projects, got {value!r}")
    projects: list[ProjectDescriptor] = []
    seen: set[str] = set()
    for raw in value:
        try:
            project = parse_project(raw)
        except ConfigError as e:
            log.warning("Ignoring invalid project entry: %s", e)
            continue
        if project.name in seen:
            log.warning("Project '%s' listed twice, keeping the first entry", project.name)
            continue
        seen.add(project.name)
        projects.append(project)
    return tuple(projects)


# ── loaders ────────────────────────────────────────────────────────────────

def _defaults(cls) -> dict[str, Any]:
    instance = cls()
    return {f.name: getattr(instance, f.name) for f in fields(cls)}


def load_validation_config(root: Path) -> ValidationConfig:
    """Load the validation-stage configuration relative to the session root."""
    settings = Settings(root / VALIDATION_CONFIG_FILE)
    d = _defaults(ValidationConfig)
    return ValidationConfig(
        projects=_pick(settings, "projects", _as_projects, d["projects"]),
        trigger_auto_resolver=_pick(settings, "triggerAutoResolver", _as_bool, d["trigger_auto_resolver"]),
        cleanup_agent=_pick(settings, "cleanupAgent", _as_str, d["cleanup_agent"]),
        cleanup_project=_pick(settings, "cleanupProject", _as_str, d["cleanup_project"]),
        command_timeout=_pick(settings, "commandTimeout", _as_number, d["command_timeout"]),
    )


def load_cleanup_config(root: Path) -> CleanupConfig:
    """Load the cleanup-stage configuration relative to the session root.

    Each field falls back to its own default, so a file that only sets
    ``dryRun`` keeps every other default.
    """
    settings = Settings(root / CLEANUP_CONFIG_FILE)
    d = _defaults(CleanupConfig)
    return CleanupConfig(
        enabled=_pick(settings, "enabled", _as_bool, d["enabled"]),
        exclude_paths=_pick(settings, "excludePaths", _as_str_tuple, d["exclude_paths"]),
        exclude_patterns=_pick(settings, "excludePatterns", _as_str_tuple, d["exclude_patterns"]),
        exclude_recent_files=_pick(settings, "excludeRecentFiles", _as_bool, d["exclude_recent_files"]),
        recent_file_threshold_hours=_pick(
            settings, "recentFileThresholdHours", _as_number, d["recent_file_threshold_hours"]
        ),
        dry_run=_pick(settings, "dryRun", _as_bool, d["dry_run"]),
        log_level=_pick(settings, "logLevel", _as_log_level, d["log_level"]),
        scan_paths=_pick(settings, "scanPaths", _as_str_tuple, d["scan_paths"]),
        source_root=_pick(settings, "sourceRoot", _as_str, d["source_root"]),
        alias_prefix=_pick(settings, "aliasPrefix", _as_str, d["alias_prefix"]),
    )
