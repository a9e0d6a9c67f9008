"""Build a file-level import graph for a TypeScript source tree."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from aftercare.models.cleanup import CleanupConfig
from aftercare.models.graph import ImportGraph
from aftercare.utils import absolute_path

log = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".ts", ".tsx")
SKIP_DIRS = frozenset({"node_modules"})
RESOLVE_SUFFIXES = (".ts", ".tsx", "/index.ts", "/index.tsx")

# Static import declarations, including multi-line clauses, ``import type``
# and side-effect imports. Dynamic ``import()`` and ``require()`` never match.
IMPORT_RE = re.compile(
    r"""^[ \t]*import(?:\s+[^'";]+?\s+from)?\s*(['"])([^'"\n]+)\1""",
    re.M,
)
# String literals are matched first so comment markers inside them (a glob
# such as "src/**/*.ts" or a URL) are left alone.
COMMENT_RE = re.compile(
    r"""('(?:\\.|[^'\\\n])*'|"(?:\\.|[^"\\\n])*"|`(?:\\.|[^`\\])*`)|/\*.*?\*/|//[^\n]*""",
    re.S,
)


def enumerate_source_files(root: Path) -> list[Path]:
    """Recursively list ``.ts``/``.tsx`` files below *root*.

    Hidden directories and ``node_modules`` are skipped. Directory symlinks
    are not followed, and each real directory is visited once.
    """
    root = absolute_path(root)
    files: list[Path] = []
    visited: set[str] = set()
    stack: list[Path] = [root]

    while stack:
        current = stack.pop()
        try:
            real = os.path.realpath(current)
        except OSError:
            continue
        if real in visited:
            continue
        visited.add(real)

        try:
            with os.scandir(current) as it:
                for entry in it:
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            if entry.name.startswith(".") or entry.name in SKIP_DIRS:
                                continue
                            stack.append(current / entry.name)
                        elif entry.is_file() and entry.name.endswith(SOURCE_SUFFIXES):
                            files.append(current / entry.name)
                    except OSError:
                        log.debug("Cannot access: %s", entry.path)
        except OSError as e:
            log.debug("Cannot read directory %s: %s", current, e)

    return sorted(files)


def extract_specifiers(text: str) -> list[str]:
    """Return the module specifiers of top-level import declarations."""
    text = COMMENT_RE.sub(lambda m: m.group(1) or "", text)
    return [m.group(2) for m in IMPORT_RE.finditer(text)]


def resolve_specifier(
    specifier: str,
    from_file: Path,
    alias_root: Path,
    alias_prefix: str = "@/",
) -> Path | None:
    """Resolve an import specifier to an existing file, or None.

    Bare module names (``@nestjs/common``, ``lodash``) are external. The
    alias prefix is rewritten against *alias_root*; everything else starting
    with ``.`` resolves against the importing file's directory.
    """
    if alias_prefix and specifier.startswith(alias_prefix):
        base = os.path.join(alias_root, specifier[len(alias_prefix):])
    elif specifier.startswith("."):
        base = os.path.join(from_file.parent, specifier)
    else:
        return None

    base = os.path.normpath(base)
    for candidate in (base, *(base + suffix for suffix in RESOLVE_SUFFIXES)):
        if os.path.isfile(candidate):
            return Path(candidate)
    return None


class ImportGraphBuilder:
    """Parses import declarations and links files that reference each other."""

    def __init__(self, root: Path, config: CleanupConfig) -> None:
        self.root = absolute_path(root)
        self.config = config
        self.alias_root = absolute_path(self.root / config.source_root)

    def build(self, files: list[Path]) -> ImportGraph:
        """Build the graph over *files*.

        Every file becomes a node. Only edges between files in the list are
        kept. A file that cannot be read keeps zero outgoing edges.
        """
        graph = ImportGraph()
        known = set(files)
        for path in files:
            graph.add_node(path)

        for path in files:
            for target in self._imports_of(path):
                if target in known:
                    graph.add_edge(path, target)

        log.debug("Built import graph: %d files, %d edges", len(graph), sum(len(t) for t in graph.imports.values()))
        return graph

    def _imports_of(self, path: Path) -> list[Path]:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            log.debug("Cannot parse %s, treating it as having no imports: %s", path, e)
            return []

        resolved: list[Path] = []
        for specifier in extract_specifiers(text):
            target = resolve_specifier(specifier, path, self.alias_root, self.config.alias_prefix)
            if target is None:
                log.debug("Unresolved import '%s' in %s", specifier, path)
                continue
            resolved.append(target)
        return resolved
