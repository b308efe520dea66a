"""
Graph visualizer that produces an ECharts-compatible configuration for rendering
the editable graph together with the state of a Dijkstra playback.

This implementation uses NetworkX to assemble the graph structure, but the output
is a plain dict representing ECharts option/config which can be used with NiceGUI.

Color precedence:
- nodes: on the revealed final path > currently visited > default
- edges: on the revealed final path > last improved (update) > last considered (relax) > default
"""

from typing import Any, Dict, Optional

import networkx as nx

from src.graph_model import GraphModel
from src.models import Edge, Node, Point
from src.playback import PlaybackController
from src.topology import resolve_control
from src.edit.constants import NODE_RADIUS

THEME = {
    "edge": "#a3a3a3",
    "edge_path": "#2563eb",
    "edge_update": "#22c55e",
    "edge_relax": "#06b6d4",
    "node_fill": "#f3f4f6",
    "node_stroke": "#64748b",
    "node_text": "#334155",
    "node_path_fill": "#2563eb",
    "node_path_stroke": "#1e40af",
    "node_path_text": "#ffffff",
    "node_visit_fill": "#f59e0b",
    "node_visit_stroke": "#d97706",
}


def curveness_for(source: Node, target: Node, control: Optional[Point]) -> float:
    """
    Convert a quadratic control point to ECharts' curveness.

    ECharts places the control point at midpoint + curveness * (dy, -dx), so the
    curveness is the projection of (control - midpoint) onto that direction.
    """
    if control is None:
        return 0.0
    dx = target.x - source.x
    dy = target.y - source.y
    length_sq = dx * dx + dy * dy
    if length_sq == 0:
        return 0.0
    mx = (source.x + target.x) / 2
    my = (source.y + target.y) / 2
    return ((control.x - mx) * dy - (control.y - my) * dx) / length_sq


class GraphVisualizer:
    """
    Build an ECharts configuration (dict) for the graph and the current playback.

    The returned dict follows an ECharts option pattern with a single 'graph' series:
      {
        "series": [
          {
            "type": "graph",
            "layout": "none",
            "data": [...],     # one entry per node, fixed x/y
            "links": [...],    # one entry per edge, weight label, curveness
          }
        ]
      }
    """

    def __init__(self):
        self.G = nx.DiGraph()

    def _node_style(self, node_id: str, playback: Optional[PlaybackController]) -> Dict[str, Any]:
        fill, stroke, text = THEME["node_fill"], THEME["node_stroke"], THEME["node_text"]
        on_path = False
        if playback is not None:
            on_path = playback.is_node_on_path(node_id)
            if on_path:
                fill, stroke, text = THEME["node_path_fill"], THEME["node_path_stroke"], THEME["node_path_text"]
            elif playback.highlight.node == node_id:
                fill, stroke = THEME["node_visit_fill"], THEME["node_visit_stroke"]
        return {
            "itemStyle": {"color": fill, "borderColor": stroke, "borderWidth": 2},
            "label": {"color": text},
            "on_path": on_path,
        }

    def _edge_style(self, edge: Edge, playback: Optional[PlaybackController]) -> Dict[str, Any]:
        color, width, state = THEME["edge"], 2, "idle"
        if playback is not None:
            hl = playback.highlight
            if playback.is_edge_on_path(edge):
                color, width, state = THEME["edge_path"], 5, "path"
            elif hl.update_edge == edge.id:
                color, width, state = THEME["edge_update"], 4, "update"
            elif hl.relax_edge == edge.id:
                color, width, state = THEME["edge_relax"], 4, "relax"
        return {"color": color, "width": width, "state": state}

    def generate_echarts(self, graph: GraphModel, playback: Optional[PlaybackController] = None) -> Dict[str, Any]:
        """
        Given the graph and (optionally) a playback controller, construct the ECharts option dict.
        """
        self.G = graph.to_networkx()
        node_map = graph.node_map()

        data = []
        for n, attrs in self.G.nodes(data=True):
            style = self._node_style(n, playback)
            data.append({
                "id": n,
                "name": attrs.get("label", n),
                "value": n,
                "x": attrs["x"],
                "y": attrs["y"],
                "symbolSize": NODE_RADIUS * 2,
                "itemStyle": style["itemStyle"],
                "label": {"show": True, **style["label"]},
                "on_path": style["on_path"],
            })

        links = []
        for src, tgt, attrs in self.G.edges(data=True):
            edge = graph.get_edge(attrs["id"])
            control = resolve_control(edge, node_map)
            style = self._edge_style(edge, playback)
            links.append({
                "id": edge.id,
                "name": edge.id,
                "value": edge.id,
                "source": src,
                "target": tgt,
                "state": style["state"],
                "control": control.to_dict() if control else None,
                "label": {"show": True, "formatter": str(edge.weight)},
                "lineStyle": {
                    "color": style["color"],
                    "width": style["width"],
                    "curveness": curveness_for(node_map[src], node_map[tgt], control),
                },
            })

        option = {
            "animation": False,
            "tooltip": {},
            "series": [
                {
                    "type": "graph",
                    "layout": "none",
                    "roam": False,
                    "draggable": False,
                    "edgeSymbol": ["none", "arrow"],
                    "edgeSymbolSize": [0, 12],
                    "edgeLabel": {"show": True, "fontSize": 13},
                    "data": data,
                    "links": links,
                }
            ]
        }
        return option
