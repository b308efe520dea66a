"""
Edit Actions Module

Executes graph mutations based on user interactions.
Translates the discrete intents reported by the chart and the control bar
(node moved, edge bent, weight edited, delete edge clicked, ...) into
GraphModel operations.
"""

import logging
from typing import Dict, Any, Optional, Tuple

from src.graph_model import GraphModel, coerce_point
from src.edit.constants import CHART_WIDTH, CHART_HEIGHT, NODE_MARGIN, DEFAULT_EDGE_WEIGHT

logger = logging.getLogger(__name__)


def clamp_to_viewport(position: Tuple[float, float],
                      width: float = CHART_WIDTH,
                      height: float = CHART_HEIGHT,
                      margin: float = NODE_MARGIN) -> Tuple[float, float]:
    """Keep a node position at least `margin` away from every canvas border."""
    x, y = position
    x = max(margin, min(width - margin, x))
    y = max(margin, min(height - margin, y))
    return x, y


class EditActions:
    """
    Handles execution of editing intents.

    Each method performs one GraphModel operation; commit() dispatches an
    intent dict to the matching method. Invalid intents are no-ops.
    """

    def __init__(self, graph: GraphModel, width: float = CHART_WIDTH, height: float = CHART_HEIGHT):
        self.graph = graph
        self.width = width
        self.height = height

    def add_node(self, label: str) -> Optional[str]:
        return self.graph.add_node(label)

    def remove_node(self, node_id: str) -> bool:
        return self.graph.remove_node(node_id)

    def remove_last_node(self) -> bool:
        return self.graph.remove_last_node()

    def connect_nodes(self, source_id: str, target_id: str, weight=DEFAULT_EDGE_WEIGHT) -> Optional[str]:
        """Create an edge between two existing nodes (plus its reverse in undirected mode)."""
        if not source_id or not target_id:
            return None
        return self.graph.add_edge(source_id, target_id, weight)

    def move_node(self, node_id: str, position) -> bool:
        """Move a node, clamped to the visible canvas. Position is an (x, y) pair or {"x", "y"} dict."""
        point = coerce_point(position)
        if point is None:
            logger.debug(f"Ignored move of {node_id!r} to unparseable position {position!r}")
            return False
        x, y = clamp_to_viewport((point.x, point.y), self.width, self.height)
        return self.graph.move_node(node_id, x, y)

    def bend_edge(self, edge_id: str, position: Optional[Tuple[float, float]]) -> bool:
        """Bend an edge through `position`, or straighten it back to the default when None."""
        if position is None:
            return self.graph.set_edge_control(edge_id, None)
        if not self.graph.set_edge_control(edge_id, position):
            return False
        self.graph.clear_edge_control_if_near_default(edge_id)
        return True

    def edit_weight(self, edge_id: str, value) -> bool:
        return self.graph.set_edge_weight(edge_id, value)

    def delete_edge(self, edge_id: str) -> bool:
        return self.graph.remove_edge(edge_id)

    def toggle_edge_mode(self) -> str:
        return self.graph.toggle_edge_mode()

    def commit(self, intent: Dict[str, Any]) -> Any:
        """Execute the action described by an intent dict."""
        action = intent.get('action')

        if action == 'add_node':
            return self.add_node(intent.get('label', ''))

        elif action == 'remove_node':
            return self.remove_node(intent.get('node_id'))

        elif action == 'remove_last_node':
            return self.remove_last_node()

        elif action == 'connect_nodes':
            return self.connect_nodes(
                intent.get('source_id'),
                intent.get('target_id'),
                intent.get('weight', DEFAULT_EDGE_WEIGHT),
            )

        elif action == 'move_node':
            return self.move_node(intent.get('node_id'), intent.get('position'))

        elif action == 'bend_edge':
            return self.bend_edge(intent.get('edge_id'), intent.get('position'))

        elif action == 'edit_weight':
            return self.edit_weight(intent.get('edge_id'), intent.get('weight'))

        elif action == 'delete_edge':
            return self.delete_edge(intent.get('edge_id'))

        elif action == 'toggle_edge_mode':
            return self.toggle_edge_mode()

        logger.warning(f"Unknown edit action: {action!r}")
        return None
