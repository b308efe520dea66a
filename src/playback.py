"""
Playback Controller - turns a flat step log into an interactive animation.

Phases:
- idle     : no run yet (index == -1)
- armed    : a step log exists and the index has not reached the Done step
- finished : the index sits on the Done step

Orthogonal to the phase is the paused flag. While not paused, a tick every
speed_ms advances the index. Once Done is reached the search stops advancing and
the final path is revealed one segment per tick (path_reveal_index).

Highlights are never stored: they are folded from steps[0..index] on demand,
so stepping back and forth or scrubbing always shows a consistent picture.

Exactly one tick is pending at a time. Every state change cancels it before
anything new is scheduled, and each tick carries the generation it was
scheduled in so a late callback from an older run is ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from src.config import DEFAULT_SPEED_MS, clamp_speed
from src.models import GraphSnapshot
from src.path_search import Done, Relax, Step, Update, Visit, path_cost, run
from src.scheduling import AsyncioScheduler, Scheduler, TickHandle

logger = logging.getLogger(__name__)

PHASE_IDLE = "idle"
PHASE_ARMED = "armed"
PHASE_FINISHED = "finished"

# Returns (graph, start_id, end_id) for runs started implicitly by step/pause controls,
# or None when there is nothing to run
RunSource = Callable[[], Optional[Tuple[Any, str, str]]]


@dataclass
class PlaybackState:
    steps: List[Step] = field(default_factory=list)
    index: int = -1
    paused: bool = True
    speed_ms: int = DEFAULT_SPEED_MS
    path_reveal_index: int = 0
    snapshot: Optional[GraphSnapshot] = None
    start_id: Optional[str] = None
    end_id: Optional[str] = None


@dataclass(frozen=True)
class Highlight:
    node: Optional[str] = None
    relax_edge: Optional[str] = None
    update_edge: Optional[str] = None


def derive_highlight(steps: List[Step], index: int) -> Highlight:
    """Last Visit node, last Relax edge and last Update edge within steps[0..index]."""
    node = relax_edge = update_edge = None
    if 0 <= index < len(steps):
        for step in steps[:index + 1]:
            if isinstance(step, Visit):
                node = step.node
            elif isinstance(step, Relax):
                relax_edge = step.edge
            elif isinstance(step, Update):
                update_edge = step.edge
    return Highlight(node=node, relax_edge=relax_edge, update_edge=update_edge)


def _snapshot_of(graph) -> GraphSnapshot:
    if isinstance(graph, GraphSnapshot):
        return graph
    if hasattr(graph, "snapshot"):
        return graph.snapshot()
    return GraphSnapshot.capture(graph.nodes, graph.edges)


class PlaybackController:
    """
    State machine driving step index, pause/resume, speed and path reveal.

    Usage:
        playback = PlaybackController(scheduler=AsyncioScheduler())
        playback.attach(lambda: (graph, "1", "3"))
        playback.start(graph, "1", "3")
        playback.toggle_pause()
        playback.step_back()
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        speed_ms: int = DEFAULT_SPEED_MS,
        run_source: Optional[RunSource] = None,
    ):
        self._scheduler = scheduler or AsyncioScheduler()
        self._state = PlaybackState(speed_ms=clamp_speed(speed_ms))
        self._run_source = run_source
        self._pending: Optional[TickHandle] = None
        self._generation = 0
        self._listeners: List[Callable[["PlaybackController"], None]] = []

    # --- Wiring ---

    def attach(self, run_source: RunSource) -> None:
        """Set where implicit runs (step/pause with no run yet) take their input from."""
        self._run_source = run_source

    def on_change(self, callback: Callable[["PlaybackController"], None]) -> None:
        if callback not in self._listeners:
            self._listeners.append(callback)

    def off_change(self, callback: Callable[["PlaybackController"], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                logger.error(f"Error in playback listener: {e}")

    # --- Read-only state ---

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def steps(self) -> List[Step]:
        return self._state.steps

    @property
    def index(self) -> int:
        return self._state.index

    @property
    def paused(self) -> bool:
        return self._state.paused

    @property
    def speed_ms(self) -> int:
        return self._state.speed_ms

    @property
    def path_reveal_index(self) -> int:
        return self._state.path_reveal_index

    @property
    def has_run(self) -> bool:
        return bool(self._state.steps) and self._state.index >= 0

    @property
    def phase(self) -> str:
        if not self.has_run:
            return PHASE_IDLE
        if isinstance(self.current_step, Done):
            return PHASE_FINISHED
        return PHASE_ARMED

    @property
    def current_step(self) -> Optional[Step]:
        if 0 <= self._state.index < len(self._state.steps):
            return self._state.steps[self._state.index]
        return None

    @property
    def highlight(self) -> Highlight:
        return derive_highlight(self._state.steps, self._state.index)

    @property
    def path(self) -> Tuple[str, ...]:
        """The final path, known only once the index is on the Done step."""
        step = self.current_step
        if isinstance(step, Done):
            return step.path
        return ()

    @property
    def revealed_path(self) -> Tuple[str, ...]:
        path = self.path
        if not path:
            return ()
        return path[:self._state.path_reveal_index + 2]

    @property
    def reveal_complete(self) -> bool:
        return self._state.path_reveal_index >= max(0, len(self.path) - 1)

    def is_node_on_path(self, node_id: str) -> bool:
        path = self.path
        if node_id not in path:
            return False
        return path.index(node_id) <= self._state.path_reveal_index + 1

    def is_edge_on_path(self, edge) -> bool:
        path = self.path
        if len(path) < 2:
            return False
        last = min(self._state.path_reveal_index + 1, len(path) - 1)
        for i in range(last):
            if path[i] == edge.source and path[i + 1] == edge.target:
                return True
        return False

    @property
    def path_cost(self) -> Optional[float]:
        if self._state.snapshot is None:
            return None
        return path_cost(self.path, self._state.snapshot.edges)

    @property
    def revealed_cost(self) -> Optional[float]:
        if self._state.snapshot is None:
            return None
        return path_cost(self.revealed_path, self._state.snapshot.edges)

    def to_view(self) -> Dict[str, Any]:
        """Plain-dict view state for the renderer."""
        hl = self.highlight
        return {
            "phase": self.phase,
            "index": self._state.index,
            "total": len(self._state.steps),
            "paused": self._state.paused,
            "speed_ms": self._state.speed_ms,
            "current_step": self.current_step.to_dict() if self.current_step else None,
            "highlight": {"node": hl.node, "relax_edge": hl.relax_edge, "update_edge": hl.update_edge},
            "path": list(self.path),
            "path_reveal_index": self._state.path_reveal_index,
            "revealed_path": list(self.revealed_path),
            "path_cost": self.path_cost,
            "revealed_cost": self.revealed_cost,
        }

    # --- Commands ---

    def start(self, graph, start_id: str, end_id: str) -> None:
        """Compute a fresh step log and play it from the first step."""
        self._cancel_pending()
        snapshot = _snapshot_of(graph)
        steps = run(snapshot, start_id, end_id)
        self._state = PlaybackState(
            steps=steps,
            index=0,
            paused=False,
            speed_ms=self._state.speed_ms,
            path_reveal_index=0,
            snapshot=snapshot,
            start_id=start_id,
            end_id=end_id,
        )
        logger.info(f"Started run {start_id} -> {end_id}: {len(steps)} steps")
        self._reschedule()
        self._notify()

    def _start_implicit(self) -> bool:
        if self._run_source is None:
            logger.warning("No run source attached; ignoring playback control")
            return False
        run_input = self._run_source()
        if run_input is None:
            return False
        self.start(*run_input)
        return True

    def step_forward(self) -> None:
        if not self.has_run:
            if self._start_implicit():
                self._move_to(self._state.index + 1)
            return
        self._move_to(self._state.index + 1)

    def step_back(self) -> None:
        if not self.has_run:
            self._start_implicit()
            return
        self._move_to(self._state.index - 1)

    def seek(self, index: int) -> None:
        """Scrub to an arbitrary step (clamped to the log)."""
        if not self.has_run:
            return
        self._move_to(int(index))

    def toggle_pause(self) -> None:
        if not self.has_run:
            self._start_implicit()
            return
        self._set_paused(not self._state.paused)

    def pause(self) -> None:
        if self.has_run:
            self._set_paused(True)

    def set_speed(self, speed_ms) -> int:
        """
        Change the tick interval. The pending tick keeps its original delay;
        only ticks scheduled afterwards use the new speed.
        """
        self._state.speed_ms = clamp_speed(speed_ms)
        self._notify()
        return self._state.speed_ms

    def reset(self) -> None:
        """Drop the current run and any pending tick."""
        had_run = self.has_run
        self._cancel_pending()
        self._state = PlaybackState(speed_ms=self._state.speed_ms)
        if had_run:
            logger.debug("Playback reset")
            self._notify()

    def dispose(self) -> None:
        self.reset()
        self._listeners.clear()

    # --- Internals ---

    def _set_paused(self, paused: bool) -> None:
        if paused == self._state.paused:
            return
        self._state.paused = paused
        self._reschedule()
        self._notify()

    def _move_to(self, index: int) -> None:
        index = max(0, min(len(self._state.steps) - 1, index))
        if index == self._state.index:
            return
        self._state.index = index
        self._state.path_reveal_index = 0
        self._reschedule()
        self._notify()

    def _cancel_pending(self) -> None:
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _reschedule(self) -> None:
        self._cancel_pending()
        phase = self.phase
        if phase == PHASE_FINISHED:
            if not self.reveal_complete:
                self._schedule(self._reveal_tick)
        elif phase == PHASE_ARMED and not self._state.paused:
            self._schedule(self._advance_tick)

    def _schedule(self, tick: Callable[[], None]) -> None:
        generation = self._generation

        def fire():
            if generation != self._generation:
                return
            self._pending = None
            tick()

        self._pending = self._scheduler.schedule(self._state.speed_ms, fire)

    def _advance_tick(self) -> None:
        if self.phase != PHASE_ARMED or self._state.paused:
            return
        self._move_to(self._state.index + 1)

    def _reveal_tick(self) -> None:
        if self.phase != PHASE_FINISHED or self.reveal_complete:
            return
        self._state.path_reveal_index += 1
        self._reschedule()
        self._notify()
