"""
Step-recording Dijkstra search.

run() is a pure function: the same graph snapshot and endpoints always yield an
identical step log. The log records every decision the search makes so it can
be replayed one step at a time:

- Visit  : a node was settled (smallest tentative distance, first in node order on ties)
- Relax  : an outgoing edge to an unsettled node was considered
- Update : that relaxation improved the target's distance
- Done   : final shortest path (empty if the end is unreachable), always last

The search is the plain O(V^2) variant without a priority queue. Graphs are
drawn by hand, so observability of each step matters more than asymptotics.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from src.models import Edge


@dataclass(frozen=True)
class Visit:
    node: str
    kind = "visit"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "node": self.node}


@dataclass(frozen=True)
class Relax:
    edge: str
    source: str
    target: str
    kind = "relax"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "edge": self.edge, "from": self.source, "to": self.target}


@dataclass(frozen=True)
class Update:
    edge: str
    source: str
    target: str
    kind = "update"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "edge": self.edge, "from": self.source, "to": self.target}


@dataclass(frozen=True)
class Done:
    path: Tuple[str, ...]
    kind = "done"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.kind, "path": list(self.path)}


Step = Union[Visit, Relax, Update, Done]


def run(graph, start_id: str, end_id: str) -> List[Step]:
    """
    Run Dijkstra from start_id and record every step.

    Args:
        graph: anything exposing ordered `nodes` and `edges` (GraphModel or GraphSnapshot)
        start_id: id of the source node
        end_id: id of the destination node

    Returns:
        The step log, terminated by exactly one Done step.
    """
    nodes = list(graph.nodes)
    edges = list(graph.edges)

    distances: Dict[str, float] = {n.id: math.inf for n in nodes}
    prev: Dict[str, Optional[str]] = {n.id: None for n in nodes}
    distances[start_id] = 0
    visited = set()
    steps: List[Step] = []

    while len(visited) < len(nodes):
        current = None
        best = math.inf
        for node in nodes:
            if node.id not in visited and distances[node.id] < best:
                best = distances[node.id]
                current = node.id
        if current is None:
            break
        visited.add(current)
        steps.append(Visit(current))

        for edge in edges:
            if edge.source != current or edge.target in visited:
                continue
            steps.append(Relax(edge.id, current, edge.target))
            alt = distances[current] + (edge.weight or 1)
            if alt < distances.get(edge.target, math.inf):
                distances[edge.target] = alt
                prev[edge.target] = current
                steps.append(Update(edge.id, current, edge.target))

    steps.append(Done(reconstruct_path(prev, start_id, end_id)))
    return steps


def reconstruct_path(prev: Dict[str, Optional[str]], start_id: str, end_id: str) -> Tuple[str, ...]:
    """Walk predecessors back from end_id; empty unless the walk reaches start_id."""
    path: List[str] = []
    u = end_id
    while u is not None:
        path.insert(0, u)
        u = prev.get(u)
    if not path or path[0] != start_id:
        return ()
    return tuple(path)


def final_path(steps: List[Step]) -> Tuple[str, ...]:
    if steps and isinstance(steps[-1], Done):
        return steps[-1].path
    return ()


def path_cost(path: Iterable[str], edges: Iterable[Edge]) -> Optional[float]:
    """
    Total weight along a path.

    Uses the stored weights as-is, so a zero-weight edge contributes 0 here even
    though the search treats it as 1. Returns None for paths shorter than two
    nodes or when a hop has no matching edge.
    """
    path = list(path)
    if len(path) < 2:
        return None
    by_pair = {(e.source, e.target): e for e in edges}
    cost = 0
    for a, b in zip(path, path[1:]):
        edge = by_pair.get((a, b))
        if edge is None:
            return None
        cost += edge.weight or 0
    return cost
