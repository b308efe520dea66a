"""
Shared constants for the graph editing system.

Coordinates are in the chart's data space, which matches the canvas the
nodes are placed on (origin top-left, y pointing down).
"""

# Default canvas size used when the page has not reported its own
CHART_WIDTH = 600.0
CHART_HEIGHT = 400.0

# Nodes are kept this far from the canvas border when moved
NODE_MARGIN = 30.0

# Drawn node radius; edges start and end on the circle
NODE_RADIUS = 25.0

# Default weight for edges created from the UI
DEFAULT_EDGE_WEIGHT = 1
