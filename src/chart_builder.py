"""
Chart event helpers.

Click events from ui.echart arrive in several shapes depending on how they
were bound. These helpers normalize them and map them back to graph ids.
"""

from typing import Dict, Any, Optional

from src.graph_model import GraphModel


# Event keys we request from ECharts click events
REQUESTED_EVENT_KEYS = ['componentType', 'name', 'dataType', 'value']


def normalize_click_payload(raw_payload: Any) -> Dict[str, Any]:
    """Normalize NiceGUI chart click payloads into a dictionary for easier parsing."""
    if isinstance(raw_payload, dict):
        return raw_payload
    if isinstance(raw_payload, (list, tuple)):
        return {
            REQUESTED_EVENT_KEYS[i]: raw_payload[i]
            for i in range(min(len(raw_payload), len(REQUESTED_EVENT_KEYS)))
        }
    if isinstance(raw_payload, str):
        return {'name': raw_payload}
    return {}


def resolve_node_id_from_payload(payload: Dict[str, Any], graph: GraphModel) -> Optional[str]:
    """Return a node id from a normalized payload, validated against the graph."""
    if not isinstance(payload, dict):
        return None
    if payload.get('componentType') != 'series' or payload.get('dataType') == 'edge':
        return None

    # Node entries carry their id as value and their label as name
    for key in ('value', 'name'):
        node_id = payload.get(key)
        if isinstance(node_id, str) and graph.has_node(node_id):
            return node_id

    name = payload.get('name')
    if not name:
        return None
    for node in graph.nodes:
        if node.label == name:
            return node.id
    return None


def resolve_edge_id_from_payload(payload: Dict[str, Any], graph: GraphModel) -> Optional[str]:
    """Return an edge id from a normalized payload. Links carry their id as name and value."""
    if not isinstance(payload, dict):
        return None
    if payload.get('componentType') != 'series' or payload.get('dataType') != 'edge':
        return None
    for key in ('value', 'name'):
        edge_id = payload.get(key)
        if isinstance(edge_id, str) and graph.get_edge(edge_id) is not None:
            return edge_id
    return None
