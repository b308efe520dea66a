"""
Editing system for the visualizer graph.

This package translates discrete edit intents into GraphModel operations:
- EditActions: intent dispatch and viewport clamping
- setup_edit_handlers: chart event handlers for app.py integration

Usage:
    from src.edit import EditActions
    from src.edit.handlers import setup_edit_handlers
"""

from src.edit.constants import (
    CHART_WIDTH,
    CHART_HEIGHT,
    NODE_MARGIN,
    NODE_RADIUS,
    DEFAULT_EDGE_WEIGHT,
)
from src.edit.actions import EditActions, clamp_to_viewport

__all__ = [
    'EditActions',
    'clamp_to_viewport',
    'CHART_WIDTH',
    'CHART_HEIGHT',
    'NODE_MARGIN',
    'NODE_RADIUS',
    'DEFAULT_EDGE_WEIGHT',
]
