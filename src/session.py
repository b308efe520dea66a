"""
Visualizer session: the GraphModel / PlaybackController pair behind one page.

The session is created when the page mounts, handed to the renderer and the
edit handlers explicitly, and disposed on unmount. It also owns the start/end
selection and the rule for edits made while a run is active:

- structural edits (nodes, edges, weights, edge mode) cancel the run, since the
  recorded steps may reference nodes or weights that no longer exist
- layout edits (moving nodes, bending edges) keep the run; the log stays valid
"""

import logging
from typing import Optional

from src.config import EDGE_MODE_DIRECTED, get_edge_mode, get_speed_ms
from src.graph_model import EditEvent, GraphModel
from src.playback import PlaybackController
from src.scheduling import Scheduler

logger = logging.getLogger(__name__)


class VisualizerSession:
    def __init__(
        self,
        graph: Optional[GraphModel] = None,
        playback: Optional[PlaybackController] = None,
        start_id: Optional[str] = "1",
        end_id: Optional[str] = "3",
    ):
        self.graph = graph or GraphModel.seeded()
        self.playback = playback or PlaybackController()
        self.start_id = start_id
        self.end_id = end_id
        self.playback.attach(self._run_input)
        self.graph.on_change(self._on_graph_change)

    @classmethod
    def from_config(cls, scheduler: Optional[Scheduler] = None, config: Optional[dict] = None) -> "VisualizerSession":
        """Build a session with the seed graph and configured speed / edge mode."""
        graph = GraphModel.seeded(edge_mode=get_edge_mode(config))
        playback = PlaybackController(scheduler=scheduler, speed_ms=get_speed_ms(config))
        return cls(graph=graph, playback=playback)

    def _on_graph_change(self, event: EditEvent) -> None:
        if event.structural:
            if self.playback.has_run:
                logger.info(f"Graph edit '{event.kind}' invalidated the current run")
                self.playback.reset()
            self._repair_selection()

    def _repair_selection(self) -> None:
        """Keep start/end pointing at existing nodes; both are None once the graph is empty."""
        ids = self.graph.node_ids()
        if self.start_id not in ids:
            self.start_id = ids[0] if ids else None
        if self.end_id not in ids:
            self.end_id = ids[-1] if ids else None

    def _run_input(self):
        if not self.graph.has_node(self.start_id) or not self.graph.has_node(self.end_id):
            logger.debug(f"No run: endpoints {self.start_id!r} -> {self.end_id!r} are not both in the graph")
            return None
        return self.graph, self.start_id, self.end_id

    def select(self, start_id: Optional[str] = None, end_id: Optional[str] = None) -> None:
        """Change the search endpoints. A run in progress keeps its original endpoints."""
        if start_id is not None and self.graph.has_node(start_id):
            self.start_id = start_id
        if end_id is not None and self.graph.has_node(end_id):
            self.end_id = end_id

    def run(self) -> bool:
        """Start a run from the current selection. Returns False when an endpoint is missing."""
        run_input = self._run_input()
        if run_input is None:
            return False
        self.playback.start(*run_input)
        return True

    @property
    def is_directed(self) -> bool:
        return self.graph.edge_mode == EDGE_MODE_DIRECTED

    def dispose(self) -> None:
        self.graph.off_change(self._on_graph_change)
        self.playback.dispose()
