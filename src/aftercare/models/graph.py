"""Import graph dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(slots=True)
class ImportGraph:
    """Forward and reverse import adjacency keyed by absolute file path.

    Edges are only added through ``add_edge`` so both maps stay symmetric.
    """

    imports: dict[Path, set[Path]] = field(default_factory=dict)
    imported_by: dict[Path, set[Path]] = field(default_factory=dict)

    def add_node(self, path: Path) -> None:
        self.imports.setdefault(path, set())
        self.imported_by.setdefault(path, set())

    def add_edge(self, source: Path, target: Path) -> None:
        self.add_node(source)
        self.add_node(target)
        self.imports[source].add(target)
        self.imported_by[target].add(source)

    def importers(self, path: Path) -> set[Path]:
        return self.imported_by.get(path, set())

    def is_symmetric(self) -> bool:
        forward = {(a, b) for a, targets in self.imports.items() for b in targets}
        reverse = {(a, b) for b, sources in self.imported_by.items() for a in sources}
        return forward == reverse and self.imports.keys() == self.imported_by.keys()

    def __contains__(self, path: Path) -> bool:
        return path in self.imports

    def __len__(self) -> int:
        return len(self.imports)
