"""
Edge topology rules.

Converting between directed and undirected modes, and keeping manual edge bends
consistent with node positions:

- directed -> undirected: every edge without a reverse twin gets one (same weight)
- undirected -> directed: of each reciprocal pair the synthesized twin is dropped;
  if neither was synthesized, the edge whose source id sorts first (string
  comparison) survives
- bends: an explicit control point is dropped once it sits within
  BEND_SNAP_TOLERANCE of the default curve midpoint
"""

import math
from typing import Dict, List, Optional

from src.models import Edge, Node, Point, edge_id_for

# Perpendicular offset of the default curve midpoint, as a fraction of chord length
CURVE_OFFSET_RATIO = 0.18

# Explicit bends closer than this to the default are considered redundant
BEND_SNAP_TOLERANCE = 2.0


def to_undirected(edges: List[Edge]) -> List[Edge]:
    """Return the edge list with a reverse edge synthesized for every one-way edge."""
    existing = {e.id for e in edges}
    result = list(edges)
    for edge in edges:
        rev_id = edge_id_for(edge.target, edge.source)
        if rev_id not in existing:
            result.append(Edge(id=rev_id, source=edge.target, target=edge.source,
                               weight=edge.weight, synthetic=True))
            existing.add(rev_id)
    return result


def _keep_directed(edge: Edge, twin: Optional[Edge]) -> bool:
    if twin is None or twin is edge:
        return True
    if edge.synthetic != twin.synthetic:
        return not edge.synthetic
    return edge.source < edge.target


def to_directed(edges: List[Edge]) -> List[Edge]:
    """
    Return the edge list with one direction kept per reciprocal pair.

    A twin synthesized by undirected mode always yields to the edge it mirrors,
    so a directed -> undirected -> directed round trip restores the original
    edges. When both directions were created by the user, the survivor is the
    edge with source < target under plain string ordering ("10" sorts before "9").
    Edges without a reverse twin are always kept.
    """
    by_pair = {(e.source, e.target): e for e in edges}
    kept = [e for e in edges if _keep_directed(e, by_pair.get((e.target, e.source)))]
    for edge in kept:
        edge.synthetic = False
    return kept


def default_control(source: Node, target: Node) -> Point:
    """Midpoint of the chord pushed sideways by CURVE_OFFSET_RATIO of its length."""
    dx = target.x - source.x
    dy = target.y - source.y
    mx = (source.x + target.x) / 2
    my = (source.y + target.y) / 2
    norm = math.hypot(dx, dy) or 1
    offset = CURVE_OFFSET_RATIO * norm
    return Point(mx + (-dy / norm) * offset, my + (dx / norm) * offset)


def resolve_control(edge: Edge, node_map: Dict[str, Node]) -> Optional[Point]:
    """The control point to draw with: the explicit bend if set, else the default."""
    if edge.control is not None:
        return edge.control
    source = node_map.get(edge.source)
    target = node_map.get(edge.target)
    if source is None or target is None:
        return None
    return default_control(source, target)


def is_near_default(edge: Edge, node_map: Dict[str, Node]) -> bool:
    if edge.control is None:
        return False
    source = node_map.get(edge.source)
    target = node_map.get(edge.target)
    if source is None or target is None:
        return False
    default = default_control(source, target)
    return math.hypot(edge.control.x - default.x, edge.control.y - default.y) < BEND_SNAP_TOLERANCE


def reconcile_bends(edges: List[Edge], node_map: Dict[str, Node]) -> List[str]:
    """
    Clear explicit control points that have become redundant.

    Mutates the edges in place and returns the ids of edges whose bend was dropped.
    """
    cleared = []
    for edge in edges:
        if is_near_default(edge, node_map):
            edge.control = None
            cleared.append(edge.id)
    return cleared
