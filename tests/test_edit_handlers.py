"""
Tests for the chart/control-bar handlers.

The NiceGUI `ui` module is patched out, so no client context is needed.
"""

from unittest.mock import MagicMock, patch

import pytest

from src.edit import EditActions
from src.edit.handlers import setup_edit_handlers
from src.models import Point
from src.playback import PlaybackController
from src.session import VisualizerSession


@pytest.fixture
def page(scheduler):
    session = VisualizerSession(playback=PlaybackController(scheduler=scheduler))
    state = {'chart': None, 'selected_node_id': None, 'selected_edge_id': None}
    refresh = MagicMock()
    handlers = setup_edit_handlers(
        state=state,
        session=session,
        edit_actions=EditActions(session.graph),
        refresh_chart_ui=refresh,
    )
    return session, state, handlers, refresh


def node_click(node_id, label=None):
    return {'componentType': 'series', 'dataType': 'node', 'name': label or node_id, 'value': node_id}


def edge_click(edge_id):
    return {'componentType': 'series', 'dataType': 'edge', 'name': edge_id, 'value': edge_id}


@patch('src.edit.handlers.ui')
def test_click_selects_node_then_moves_it(mock_ui, page):
    session, state, handlers, refresh = page

    handlers['handle_chart_click'](node_click('2'))
    assert state['selected_node_id'] == '2'

    handlers['handle_move_node'](200, 120)
    node = session.graph.get_node('2')
    assert (node.x, node.y) == (200, 120)
    assert refresh.call_count == 2


@patch('src.edit.handlers.ui')
def test_move_is_clamped_to_canvas(mock_ui, page):
    session, state, handlers, _ = page
    handlers['handle_chart_click'](node_click('1'))
    handlers['handle_move_node'](-100, 900)
    node = session.graph.get_node('1')
    assert (node.x, node.y) == (30, 370)


@patch('src.edit.handlers.ui')
def test_move_without_selection_or_values_warns(mock_ui, page):
    session, state, handlers, _ = page

    handlers['handle_move_node'](10, 10)
    assert mock_ui.notify.call_count == 1

    handlers['handle_chart_click'](node_click('1'))
    handlers['handle_move_node'](None, 10)
    assert mock_ui.notify.call_count == 2
    assert session.graph.get_node('1').x == 150


@patch('src.edit.handlers.ui')
def test_bend_and_straighten_selected_edge(mock_ui, page):
    session, state, handlers, _ = page

    handlers['handle_chart_click'](edge_click('e1-2'))
    assert state['selected_edge_id'] == 'e1-2'
    assert state['selected_node_id'] is None

    handlers['handle_bend_edge'](300, 100)
    assert session.graph.get_edge('e1-2').control == Point(300, 100)

    handlers['handle_straighten_edge']()
    assert session.graph.get_edge('e1-2').control is None


@patch('src.edit.handlers.ui')
def test_weight_submit_and_delete(mock_ui, page):
    session, state, handlers, _ = page
    handlers['handle_chart_click'](edge_click('e2-3'))

    handlers['handle_weight_submit']('5')
    assert session.graph.get_edge('e2-3').weight == 5

    handlers['handle_weight_submit']('-5')
    assert session.graph.get_edge('e2-3').weight == 5

    handlers['handle_delete_edge']()
    assert session.graph.get_edge('e2-3') is None
    assert state['selected_edge_id'] is None


@patch('src.edit.handlers.ui')
def test_layout_edits_from_handlers_keep_the_run(mock_ui, page):
    session, state, handlers, _ = page
    session.run()

    handlers['handle_chart_click'](node_click('3'))
    handlers['handle_move_node'](320, 280)

    assert session.playback.has_run
