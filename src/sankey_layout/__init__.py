"""sankey_layout: Sankey diagram layout engine.

Turns a weighted, directed flow graph into positioned geometry: node
columns, rectangles and link ribbons (thickness plus offsets at both ends).
"""

from sankey_layout.api import compute_layout, journey_metrics, layout_rows
from sankey_layout.config import DEFAULT_PALETTE, LayoutConfig, Padding, TransformConfig
from sankey_layout.graph import GraphError, Link, Node, SankeyGraph
from sankey_layout.journey import JourneyAnalyzer, JourneyMetrics, JourneySummary
from sankey_layout.layout import SankeyLayout, compute
from sankey_layout.transform import TabularTransform
from sankey_layout.traversal import Reach, collect_backward, collect_forward, highlight_link, highlight_node

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_PALETTE",
    "GraphError",
    "JourneyAnalyzer",
    "JourneyMetrics",
    "JourneySummary",
    "LayoutConfig",
    "Link",
    "Node",
    "Padding",
    "Reach",
    "SankeyGraph",
    "SankeyLayout",
    "TabularTransform",
    "TransformConfig",
    "collect_backward",
    "collect_forward",
    "compute",
    "compute_layout",
    "highlight_link",
    "highlight_node",
    "journey_metrics",
    "layout_rows",
]
