"""
Edit Handlers - Event handlers for graph editing in app.py

This module extracts the chart event handling from app.py to keep the main
application file focused on layout. Raw chart payloads are normalized here
and turned into intents for EditActions; nothing below app.py touches pixels.
"""

import logging
from nicegui import ui
from typing import Dict, Any, Callable

from src.chart_builder import (
    normalize_click_payload,
    resolve_node_id_from_payload,
    resolve_edge_id_from_payload,
)
from src.edit.actions import EditActions
from src.session import VisualizerSession

logger = logging.getLogger(__name__)


def setup_edit_handlers(
    state: Dict[str, Any],
    session: VisualizerSession,
    edit_actions: EditActions,
    refresh_chart_ui: Callable,
):
    """
    Set up all chart event handlers.

    Args:
        state: Page state dictionary (selected node / edge)
        session: The page's VisualizerSession
        edit_actions: EditActions bound to session.graph
        refresh_chart_ui: Function to redraw chart and controls

    Returns:
        Dict with handler functions for binding to UI events
    """

    def handle_chart_click(event):
        """Select a node (as search endpoint candidate) or an edge (for editing)."""
        raw = event.args if hasattr(event, 'args') else event
        payload = normalize_click_payload(raw)

        edge_id = resolve_edge_id_from_payload(payload, session.graph)
        if edge_id:
            state['selected_edge_id'] = edge_id
            state['selected_node_id'] = None
            edge = session.graph.get_edge(edge_id)
            ui.notify(f'Edge {edge.source} → {edge.target} selected (weight {edge.weight})',
                      position='bottom', timeout=800)
            refresh_chart_ui()
            return

        node_id = resolve_node_id_from_payload(payload, session.graph)
        state['selected_node_id'] = node_id
        state['selected_edge_id'] = None
        refresh_chart_ui()

    def handle_move_node(x, y):
        """Move the selected node to data coordinates (x, y)."""
        node_id = state.get('selected_node_id')
        if not node_id:
            ui.notify('Click a node first', type='warning', position='bottom')
            return
        if edit_actions.commit({'action': 'move_node', 'node_id': node_id, 'position': (x, y)}):
            refresh_chart_ui()
        else:
            ui.notify('Enter numeric x and y', type='negative', position='bottom')

    def handle_bend_edge(x, y):
        """Bend the selected edge through the control point (x, y)."""
        edge_id = state.get('selected_edge_id')
        if not edge_id:
            ui.notify('Select an edge first', type='warning', position='bottom')
            return
        if edit_actions.commit({'action': 'bend_edge', 'edge_id': edge_id, 'position': (x, y)}):
            refresh_chart_ui()
        else:
            ui.notify('Enter numeric x and y', type='negative', position='bottom')

    def handle_weight_submit(value):
        edge_id = state.get('selected_edge_id')
        if not edge_id:
            ui.notify('Select an edge first', type='warning', position='bottom')
            return
        if edit_actions.commit({'action': 'edit_weight', 'edge_id': edge_id, 'weight': value}):
            ui.notify('Weight updated', type='positive', position='bottom', timeout=800)
        else:
            ui.notify('Weight must be a number ≥ 0', type='negative', position='bottom')
        refresh_chart_ui()

    def handle_delete_edge():
        edge_id = state.get('selected_edge_id')
        if edge_id and edit_actions.commit({'action': 'delete_edge', 'edge_id': edge_id}):
            state['selected_edge_id'] = None
            refresh_chart_ui()

    def handle_straighten_edge():
        edge_id = state.get('selected_edge_id')
        if edge_id and edit_actions.commit({'action': 'bend_edge', 'edge_id': edge_id, 'position': None}):
            refresh_chart_ui()

    return {
        'handle_chart_click': handle_chart_click,
        'handle_move_node': handle_move_node,
        'handle_bend_edge': handle_bend_edge,
        'handle_weight_submit': handle_weight_submit,
        'handle_delete_edge': handle_delete_edge,
        'handle_straighten_edge': handle_straighten_edge,
    }
