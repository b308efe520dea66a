"""
Graph Model - owner of nodes and edges for the interactive editor.

Every edit goes through this class so the structural invariants hold at all times:
- node ids are unique and assigned as max(numeric ids) + 1
- edge ids are "e{source}-{target}", one edge per ordered pair
- every edge endpoint references an existing node (node removal cascades)
- weights are finite and non-negative

Invalid edits never raise. The editor is fed continuous, possibly-invalid user
input, so a rejected edit is logged and returns a falsy value instead.
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Mapping, Optional

import networkx as nx

from src.config import EDGE_MODE_DIRECTED, EDGE_MODE_UNDIRECTED, EDGE_MODES
from src.models import Edge, GraphSnapshot, Node, Point, edge_id_for
from src import topology

logger = logging.getLogger(__name__)

# New nodes land somewhere inside this box
SPAWN_ORIGIN = (250.0, 200.0)
SPAWN_SPREAD = 100.0

SEED_NODES = [
    {"id": "1", "label": "1", "x": 150, "y": 150},
    {"id": "2", "label": "2", "x": 450, "y": 150},
    {"id": "3", "label": "3", "x": 300, "y": 300},
]

SEED_EDGES = [
    {"source": "1", "target": "2", "weight": 1},
    {"source": "2", "target": "3", "weight": 2},
    {"source": "1", "target": "3", "weight": 4},
]


@dataclass(frozen=True)
class EditEvent:
    """
    Notification sent to listeners after an applied edit.

    structural is True when the edit can change a search result
    (nodes, edges, weights, edge mode) and False for layout-only edits.
    """
    kind: str
    structural: bool
    target_id: Optional[str] = None


def parse_weight(value) -> Optional[float]:
    """Parse a user-supplied weight. Returns None unless it is a finite number >= 0."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        weight = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(weight) or weight < 0:
        return None
    if weight.is_integer():
        return int(weight)
    return weight


def _is_finite(*values) -> bool:
    try:
        return all(math.isfinite(float(v)) and not isinstance(v, bool) for v in values)
    except (TypeError, ValueError, OverflowError):
        return False


def coerce_point(value) -> Optional[Point]:
    """
    Read a control point from a Point, an (x, y) pair or an {"x": .., "y": ..} mapping.

    Returns None for anything else, including non-finite coordinates.
    """
    if isinstance(value, Point):
        x, y = value.x, value.y
    elif isinstance(value, Mapping):
        if "x" not in value or "y" not in value:
            return None
        x, y = value["x"], value["y"]
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        x, y = value
    else:
        return None
    if not _is_finite(x, y):
        return None
    return Point(float(x), float(y))


class GraphModel:
    """
    Mutable graph with ordered nodes and edges.

    Usage:
        graph = GraphModel.seeded()
        node_id = graph.add_node("Depot")
        graph.add_edge("3", node_id, weight=2.5)
        graph.toggle_edge_mode()
    """

    def __init__(self, edge_mode: str = EDGE_MODE_DIRECTED, rng: Optional[random.Random] = None):
        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        self._edge_mode = edge_mode if edge_mode in EDGE_MODES else EDGE_MODE_DIRECTED
        self._rng = rng or random.Random()
        self._listeners: List[Callable[[EditEvent], None]] = []

    @classmethod
    def seeded(cls, edge_mode: str = EDGE_MODE_DIRECTED, rng: Optional[random.Random] = None) -> "GraphModel":
        """Build the initial three-node graph shown when the editor opens."""
        graph = cls(rng=rng)
        graph.load(SEED_NODES, SEED_EDGES)
        if edge_mode == EDGE_MODE_UNDIRECTED:
            graph.set_edge_mode(EDGE_MODE_UNDIRECTED)
        return graph

    # --- Queries ---

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes)

    @property
    def edges(self) -> List[Edge]:
        return list(self._edges)

    @property
    def edge_mode(self) -> str:
        return self._edge_mode

    @property
    def is_directed(self) -> bool:
        return self._edge_mode == EDGE_MODE_DIRECTED

    def node_ids(self) -> List[str]:
        return [n.id for n in self._nodes]

    def node_map(self) -> Dict[str, Node]:
        return {n.id: n for n in self._nodes}

    def has_node(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None

    def get_node(self, node_id: str) -> Optional[Node]:
        for node in self._nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def snapshot(self) -> GraphSnapshot:
        return GraphSnapshot.capture(self._nodes, self._edges, self._edge_mode)

    def to_networkx(self) -> nx.DiGraph:
        """Export as a networkx DiGraph (undirected mode already stores both directions)."""
        G = nx.DiGraph()
        for node in self._nodes:
            G.add_node(node.id, label=node.label, x=node.x, y=node.y)
        for edge in self._edges:
            G.add_edge(edge.source, edge.target, id=edge.id, weight=edge.weight, control=edge.control)
        return G

    # --- Change notification ---

    def on_change(self, callback: Callable[[EditEvent], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def off_change(self, callback: Callable[[EditEvent], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _emit(self, kind: str, structural: bool, target_id: Optional[str] = None) -> None:
        event = EditEvent(kind=kind, structural=structural, target_id=target_id)
        for callback in list(self._listeners):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Error in graph listener for {kind}: {e}")

    # --- Node edits ---

    def next_node_id(self) -> str:
        numeric = []
        for node in self._nodes:
            try:
                numeric.append(int(node.id))
            except ValueError:
                continue
        return str(max([0] + numeric) + 1)

    def add_node(self, label: str) -> Optional[str]:
        """
        Create a node near the spawn area and return its id.

        Empty or whitespace-only labels are rejected.
        """
        if not isinstance(label, str) or not label.strip():
            logger.debug(f"Rejected node with empty label {label!r}")
            return None
        node_id = self.next_node_id()
        x = SPAWN_ORIGIN[0] + self._rng.random() * SPAWN_SPREAD
        y = SPAWN_ORIGIN[1] + self._rng.random() * SPAWN_SPREAD
        self._nodes.append(Node(id=node_id, label=label, x=x, y=y))
        logger.debug(f"Added node {node_id} ({label!r}) at ({x:.1f}, {y:.1f})")
        self._emit("add_node", True, node_id)
        return node_id

    def remove_node(self, node_id: str) -> bool:
        """Remove a node together with every edge touching it."""
        node = self.get_node(node_id)
        if node is None:
            logger.debug(f"Ignored removal of unknown node {node_id!r}")
            return False
        self._nodes = [n for n in self._nodes if n.id != node_id]
        before = len(self._edges)
        self._edges = [e for e in self._edges if e.source != node_id and e.target != node_id]
        logger.debug(f"Removed node {node_id} and {before - len(self._edges)} incident edges")
        self._emit("remove_node", True, node_id)
        return True

    def remove_last_node(self) -> bool:
        if not self._nodes:
            return False
        return self.remove_node(self._nodes[-1].id)

    def move_node(self, node_id: str, x: float, y: float) -> bool:
        """
        Move a node. Any coordinates are accepted; viewport clamping belongs to the caller.

        Bends that become indistinguishable from the default curve are cleared.
        """
        node = self.get_node(node_id)
        if node is None or not _is_finite(x, y):
            logger.debug(f"Rejected move of node {node_id!r} to ({x!r}, {y!r})")
            return False
        node.x = float(x)
        node.y = float(y)
        cleared = topology.reconcile_bends(self._edges, self.node_map())
        if cleared:
            logger.debug(f"Cleared redundant bends on {cleared}")
        self._emit("move_node", False, node_id)
        return True

    # --- Edge edits ---

    def add_edge(self, source_id: str, target_id: str, weight=1) -> Optional[str]:
        """
        Add a source -> target edge and return its id.

        In undirected mode the reverse edge is added too (unless it already exists).
        Self-loops, missing endpoints, duplicates and invalid weights are rejected.
        """
        parsed = parse_weight(weight)
        new_id = edge_id_for(source_id, target_id)
        if (
            source_id == target_id
            or not self.has_node(source_id)
            or not self.has_node(target_id)
            or self.get_edge(new_id) is not None
            or parsed is None
        ):
            logger.debug(f"Rejected edge {source_id!r} -> {target_id!r} (weight {weight!r})")
            return None
        self._edges.append(Edge(id=new_id, source=source_id, target=target_id, weight=parsed))
        if self._edge_mode == EDGE_MODE_UNDIRECTED:
            rev_id = edge_id_for(target_id, source_id)
            if self.get_edge(rev_id) is None:
                self._edges.append(Edge(id=rev_id, source=target_id, target=source_id,
                                        weight=parsed, synthetic=True))
        self._emit("add_edge", True, new_id)
        return new_id

    def remove_edge(self, edge_id: str) -> bool:
        if self.get_edge(edge_id) is None:
            logger.debug(f"Ignored removal of unknown edge {edge_id!r}")
            return False
        self._edges = [e for e in self._edges if e.id != edge_id]
        self._emit("remove_edge", True, edge_id)
        return True

    def set_edge_weight(self, edge_id: str, weight) -> bool:
        """Set an edge weight; the previous weight is kept if the new one is invalid."""
        edge = self.get_edge(edge_id)
        parsed = parse_weight(weight)
        if edge is None or parsed is None:
            logger.debug(f"Rejected weight {weight!r} for edge {edge_id!r}")
            return False
        edge.weight = parsed
        self._emit("set_weight", True, edge_id)
        return True

    def set_edge_control(self, edge_id: str, point) -> bool:
        """
        Bend an edge through an explicit control point (None restores the default curve).

        Accepts anything coerce_point understands; malformed points are rejected.
        """
        edge = self.get_edge(edge_id)
        if edge is None:
            return False
        control = None
        if point is not None:
            control = coerce_point(point)
            if control is None:
                logger.debug(f"Rejected control point {point!r} for edge {edge_id!r}")
                return False
        edge.control = control
        self._emit("bend_edge", False, edge_id)
        return True

    def clear_edge_control_if_near_default(self, edge_id: str) -> bool:
        edge = self.get_edge(edge_id)
        if edge is None or not topology.is_near_default(edge, self.node_map()):
            return False
        edge.control = None
        self._emit("bend_edge", False, edge_id)
        return True

    # --- Edge mode ---

    def set_edge_mode(self, mode: str) -> bool:
        if mode not in EDGE_MODES:
            logger.debug(f"Rejected edge mode {mode!r}")
            return False
        if mode == self._edge_mode:
            return False
        if mode == EDGE_MODE_UNDIRECTED:
            self._edges = topology.to_undirected(self._edges)
        else:
            self._edges = topology.to_directed(self._edges)
        self._edge_mode = mode
        logger.info(f"Edge mode switched to {mode} ({len(self._edges)} edges)")
        self._emit("set_edge_mode", True)
        return True

    def toggle_edge_mode(self) -> str:
        target = EDGE_MODE_DIRECTED if self._edge_mode == EDGE_MODE_UNDIRECTED else EDGE_MODE_UNDIRECTED
        self.set_edge_mode(target)
        return self._edge_mode

    def load(self, nodes: Iterable[Dict], edges: Iterable[Dict]) -> None:
        """
        Replace the contents from plain dicts, dropping anything that breaks the invariants.

        Edges are inserted as given (no reverse synthesis), in order.
        """
        self._nodes = []
        self._edges = []
        seen = set()
        for nd in nodes:
            node_id = str(nd.get("id", ""))
            if not node_id or node_id in seen or not _is_finite(nd.get("x", 0), nd.get("y", 0)):
                continue
            seen.add(node_id)
            self._nodes.append(Node(
                id=node_id,
                label=str(nd.get("label", node_id)),
                x=float(nd.get("x", 0)),
                y=float(nd.get("y", 0)),
            ))
        for ed in edges:
            source, target = str(ed.get("source", "")), str(ed.get("target", ""))
            weight = parse_weight(ed.get("weight", 1))
            edge_id = edge_id_for(source, target)
            if source == target or source not in seen or target not in seen or weight is None:
                continue
            if self.get_edge(edge_id) is not None:
                continue
            self._edges.append(Edge(
                id=edge_id,
                source=source,
                target=target,
                weight=weight,
                control=coerce_point(ed.get("control")),
            ))
        self._emit("load", True)
