from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from .models import Node, Relationship


class EntityStore(Protocol):
    """Read side of the external entity persistence layer."""

    async def list_nodes(self) -> list[Node]: ...

    async def list_relationships(self) -> list[Relationship]: ...


@dataclass(slots=True)
class StaticEntityStore:
    """Serves a fixed snapshot. Used by the CLI, local runs and tests."""

    nodes: list[Node] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)

    async def list_nodes(self) -> list[Node]:
        return list(self.nodes)

    async def list_relationships(self) -> list[Relationship]:
        return list(self.relationships)

    @classmethod
    def from_json_file(cls, path: str | Path) -> "StaticEntityStore":
        """Load `{"nodes": [...], "relationships": [...]}` from disk."""
        data = json.loads(Path(path).expanduser().read_text(encoding="utf-8"))
        return cls(
            nodes=[Node.from_record(n) for n in data.get("nodes") or []],
            relationships=[Relationship.from_record(r) for r in data.get("relationships") or []],
        )
