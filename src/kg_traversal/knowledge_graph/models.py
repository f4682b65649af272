from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Node:
    """A knowledge graph entity as served by the entity store.

    `id` is unique across the snapshot. The record is read-only here; the
    store owns its lifecycle.
    """

    id: str
    label: str = ""
    node_type: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, d: dict[str, Any]) -> "Node":
        return cls(
            id=str(d["id"]),
            label=d.get("label") or "",
            node_type=d.get("node_type") or "",
            properties=dict(d.get("properties") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "node_type": self.node_type,
            "properties": self.properties,
        }


@dataclass(frozen=True, slots=True)
class Relationship:
    """A directed, typed edge from `from_node_id` to `to_node_id`."""

    id: str
    from_node_id: str
    to_node_id: str
    relationship_type: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_record(cls, d: dict[str, Any]) -> "Relationship":
        return cls(
            id=str(d.get("id") or ""),
            from_node_id=str(d["from_node_id"]),
            to_node_id=str(d["to_node_id"]),
            relationship_type=d.get("relationship_type") or "",
            properties=dict(d.get("properties") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "from_node_id": self.from_node_id,
            "to_node_id": self.to_node_id,
            "relationship_type": self.relationship_type,
            "properties": self.properties,
        }
