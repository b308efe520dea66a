"""
Main NiceGUI application for the Dijkstra visualizer.

Builds one VisualizerSession per page, renders the graph with ui.echart and
provides the control bar (endpoints, run, node/edge editing, playback).
"""

from nicegui import ui
import sys
import logging

from dotenv import load_dotenv
load_dotenv()

from src.config import (
    get_port,
    get_log_level,
    MIN_SPEED_MS,
    MAX_SPEED_MS,
    SPEED_STEP_MS,
)
from src.session import VisualizerSession
from src.graph_viz import GraphVisualizer
from src.edit import EditActions, CHART_WIDTH, CHART_HEIGHT
from src.edit.handlers import setup_edit_handlers
from src.chart_builder import REQUESTED_EVENT_KEYS
from src.playback import PHASE_IDLE, PHASE_FINISHED

logging.basicConfig(
    level=get_log_level(),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
)
logger = logging.getLogger(__name__)


def describe_step(view: dict) -> str:
    """One-line status text for the current playback position."""
    if view['phase'] == PHASE_IDLE:
        return 'Press Run to start the search'
    step = view['current_step'] or {}
    prefix = f"Step {view['index'] + 1}/{view['total']}"
    kind = step.get('type')
    if kind == 'visit':
        return f"{prefix}: visit {step['node']}"
    if kind == 'relax':
        return f"{prefix}: consider {step['from']} → {step['to']}"
    if kind == 'update':
        return f"{prefix}: improve {step['to']} via {step['from']}"
    if view['path']:
        return f"{prefix}: done"
    return f"{prefix}: done, end node is unreachable"


def describe_path(view: dict) -> str:
    if view['phase'] != PHASE_FINISHED or not view['path']:
        return ''
    text = f"🎯 Path: {' → '.join(view['path'])}"
    if view['path_cost'] is not None:
        text += f"   💰 Cost: {view['path_cost']}"
    return text


@ui.page('/')
def main_page():
    session = VisualizerSession.from_config()
    visualizer = GraphVisualizer()
    edit_actions = EditActions(session.graph, CHART_WIDTH, CHART_HEIGHT)

    state = {
        'chart': None,
        'selected_node_id': None,
        'selected_edge_id': None,
    }
    controls = {}

    def node_options():
        return {n.id: n.label for n in session.graph.nodes}

    def refresh_controls():
        options = node_options()
        for key, current in (('start', session.start_id), ('end', session.end_id),
                             ('edge_source', None), ('edge_target', None)):
            select = controls.get(key)
            if select is None:
                continue
            value = current if current in options else (select.value if select.value in options else None)
            select.set_options(options, value=value)

        view = session.playback.to_view()
        controls['status'].text = describe_step(view)
        controls['path'].text = describe_path(view)
        controls['pause'].text = '▶️ Play' if view['paused'] or view['phase'] == PHASE_IDLE else '⏸️ Pause'
        controls['mode'].text = '🔄 Directed' if session.is_directed else '↔️ Undirected'
        edge_id = state.get('selected_edge_id')
        node_id = state.get('selected_node_id')
        if edge_id:
            controls['selection'].text = f'Selected edge: {edge_id}'
        elif node_id:
            controls['selection'].text = f'Selected node: {node_id}'
        else:
            controls['selection'].text = ''

        scrub = controls['scrub']
        scrub.props(f"max={max(0, view['total'] - 1)}")
        scrub.value = max(0, view['index'])
        scrub.set_enabled(view['phase'] != PHASE_IDLE)

    def refresh_chart_ui():
        chart = state['chart']
        if chart is None:
            return
        options = visualizer.generate_echarts(session.graph, session.playback)
        chart.options.clear()
        chart.options.update(options)
        chart.update()
        refresh_controls()

    session.playback.on_change(lambda _: refresh_chart_ui())

    handlers = setup_edit_handlers(
        state=state,
        session=session,
        edit_actions=edit_actions,
        refresh_chart_ui=refresh_chart_ui,
    )

    # --- Actions ---

    def on_run():
        if not session.run():
            ui.notify('Pick a start and an end node', type='warning', position='bottom')
            refresh_chart_ui()

    def on_scrub(e):
        """Jump to the step chosen on the slider; scrubbing pauses auto-advance."""
        try:
            index = int(e.args)
        except (TypeError, ValueError):
            return
        session.playback.pause()
        session.playback.seek(index)

    def on_add_node():
        label = controls['label'].value or ''
        if edit_actions.commit({'action': 'add_node', 'label': label}):
            controls['label'].value = ''
        else:
            ui.notify('Enter a node label', type='warning', position='bottom')
        refresh_chart_ui()

    def on_remove_node():
        edit_actions.commit({'action': 'remove_last_node'})
        refresh_chart_ui()

    def on_add_edge():
        edge_id = edit_actions.commit({
            'action': 'connect_nodes',
            'source_id': controls['edge_source'].value,
            'target_id': controls['edge_target'].value,
        })
        if not edge_id:
            ui.notify('Edge not added (same node, missing node or duplicate)', type='warning', position='bottom')
        refresh_chart_ui()

    def on_toggle_mode():
        edit_actions.commit({'action': 'toggle_edge_mode'})
        refresh_chart_ui()

    def on_select_start(e):
        session.select(start_id=e.value)

    def on_select_end(e):
        session.select(end_id=e.value)

    def handle_keyboard(e):
        if not e.action.keydown:
            return
        if e.key == ' ':
            session.playback.toggle_pause()
        elif e.key == 'ArrowRight':
            session.playback.step_forward()
        elif e.key == 'ArrowLeft':
            session.playback.step_back()

    ui.keyboard(on_key=handle_keyboard, ignore=['input', 'select', 'textarea'])

    # --- Layout Construction ---

    with ui.column().classes('w-full items-center gap-3 p-4'):
        ui.label('Graph-based Dijkstra Visualizer').classes('text-2xl font-bold')

        with ui.row().classes('items-center gap-4 flex-wrap justify-center'):
            controls['start'] = ui.select(node_options(), value=session.start_id, label='Start',
                                          on_change=on_select_start).classes('w-24')
            controls['end'] = ui.select(node_options(), value=session.end_id, label='End',
                                        on_change=on_select_end).classes('w-24')
            ui.button('🚀 Run Dijkstra', on_click=on_run).props('color=positive')
            controls['label'] = ui.input('Node label').classes('w-28')
            ui.button('➕ Add', on_click=on_add_node)
            ui.button('➖ Remove', on_click=on_remove_node).props('color=pink')
            controls['mode'] = ui.button('🔄 Directed', on_click=on_toggle_mode).props('color=warning')

        with ui.row().classes('items-center gap-4 flex-wrap justify-center'):
            controls['edge_source'] = ui.select(node_options(), label='From').classes('w-24')
            controls['edge_target'] = ui.select(node_options(), label='To').classes('w-24')
            ui.button('Add edge', on_click=on_add_edge)
            controls['weight'] = ui.input('Weight').classes('w-24')
            ui.button('Set weight', on_click=lambda: handlers['handle_weight_submit'](controls['weight'].value))
            ui.button('Straighten', on_click=handlers['handle_straighten_edge']).props('flat')
            ui.button('🗑️ Delete edge', on_click=handlers['handle_delete_edge']).props('color=negative flat')
            controls['selection'] = ui.label('').classes('text-sm text-gray-500')

        with ui.row().classes('items-center gap-4 flex-wrap justify-center'):
            controls['pos_x'] = ui.number('x', format='%.0f').classes('w-20')
            controls['pos_y'] = ui.number('y', format='%.0f').classes('w-20')
            ui.button('Move node', on_click=lambda: handlers['handle_move_node'](
                controls['pos_x'].value, controls['pos_y'].value)).props('flat')
            ui.button('Bend edge', on_click=lambda: handlers['handle_bend_edge'](
                controls['pos_x'].value, controls['pos_y'].value)).props('flat')

        with ui.row().classes('items-center gap-4 flex-wrap justify-center'):
            ui.button('⏮️', on_click=session.playback.step_back)
            controls['pause'] = ui.button('▶️ Play', on_click=session.playback.toggle_pause)
            ui.button('⏭️', on_click=session.playback.step_forward)
            ui.label('Speed:').classes('text-xs')
            ui.slider(min=MIN_SPEED_MS, max=MAX_SPEED_MS, step=SPEED_STEP_MS,
                      value=session.playback.speed_ms,
                      on_change=lambda e: session.playback.set_speed(e.value)).classes('w-32')
            controls['status'] = ui.label('').classes('text-sm font-mono')

        with ui.row().classes('items-center gap-2 w-[600px]'):
            ui.label('Step:').classes('text-xs')
            controls['scrub'] = ui.slider(min=0, max=0, step=1, value=0).classes('flex-grow')
            controls['scrub'].on('change', on_scrub)

        controls['path'] = ui.label('').classes('text-sm font-semibold text-blue-700')

        state['chart'] = ui.echart(visualizer.generate_echarts(session.graph, session.playback))
        state['chart'].style(f'width: {int(CHART_WIDTH)}px; height: {int(CHART_HEIGHT)}px;')
        state['chart'].on('chart:click', handlers['handle_chart_click'], REQUESTED_EVENT_KEYS)

    refresh_controls()
    ui.context.client.on_disconnect(session.dispose)


if __name__ in {"__main__", "__mp_main__"}:
    port = get_port()
    logger.info(f"Serving Dijkstra visualizer on port {port}")
    ui.run(
        title='Dijkstra Visualizer',
        port=port,
        reload=not getattr(sys, 'frozen', False),
    )
