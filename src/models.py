"""
Core data types for the graph editor.

Nodes and edges are small mutable records owned by GraphModel. A GraphSnapshot
is the frozen copy handed to the path search so a run never observes later edits.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class Node:
    id: str
    label: str
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "x": self.x, "y": self.y}


@dataclass
class Edge:
    id: str
    source: str
    target: str
    weight: float = 1
    control: Optional[Point] = None
    # True for reverse twins created by undirected mode rather than by the user
    synthetic: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }
        if self.control is not None:
            data["control"] = self.control.to_dict()
        return data


def edge_id_for(source: str, target: str) -> str:
    """Edge ids are derived from their endpoints, so each source->target pair is unique."""
    return f"e{source}-{target}"


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable copy of a graph at one point in time."""
    nodes: Tuple[Node, ...] = field(default_factory=tuple)
    edges: Tuple[Edge, ...] = field(default_factory=tuple)
    edge_mode: str = "directed"

    @classmethod
    def capture(cls, nodes, edges, edge_mode: str = "directed") -> "GraphSnapshot":
        return cls(
            nodes=tuple(replace(n) for n in nodes),
            edges=tuple(replace(e) for e in edges),
            edge_mode=edge_mode,
        )

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None
