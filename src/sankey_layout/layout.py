"""Layout module: Sankey layout pipeline.

Phases:
  1. Depth assignment (breadth-first layering from zero-inflow nodes)
  2. Node values (max of inflow and outflow)
  3. Column placement (x positions)
  4. Initial vertical placement (one scale shared by every column)
  5. Relaxation (barycenter nudging + collision resolution)
  6. Link offsets (thickness, sy, ty)

Every phase mutates the graph's nodes and links in place.
"""

from __future__ import annotations

import math

import networkx as nx
import structlog

from sankey_layout.config import LayoutConfig
from sankey_layout.graph import Link, Node, SankeyGraph

logger = structlog.get_logger(__name__)

# ─── Depth Assignment ─────────────────────────────────────────────────────────


def assign_depths(graph: SankeyGraph, node_align: str = "justify") -> int:
    """Assign a column index to every node and return the maximum depth.

    Sources (nodes without incoming links) sit at depth 0; every other node
    reachable from a source gets the layer at which breadth-first search
    first reaches it. Nodes outside every source's reach fall back to 0.
    A graph with no source at all (every node on a cycle) is laid out in a
    single column.

    With ``node_align == "justify"`` every sink shallower than the maximum
    depth is pushed to the maximum so all exits share the last column.
    """
    nodes = graph.nodes
    if not nodes:
        return 0

    sources = [n.id for n in nodes if not n.target_links]
    if not sources:
        logger.debug("sankey_cyclic_fallback", nodes=len(nodes))
        for node in nodes:
            node.depth = 0
        return 0

    depths: dict[str, int] = {}
    for depth, layer in enumerate(nx.bfs_layers(graph.to_digraph(), sources)):
        for node_id in layer:
            depths[node_id] = depth

    for node in nodes:
        node.depth = depths.get(node.id, 0)

    deepest = max(n.depth for n in nodes)

    if node_align == "justify":
        for node in nodes:
            if not node.source_links and node.depth < deepest:
                node.depth = deepest

    return deepest


# ─── Node Values ──────────────────────────────────────────────────────────────


def compute_node_values(nodes: list[Node]) -> None:
    """value = max(Σ incoming link values, Σ outgoing link values)."""
    for node in nodes:
        inflow = math.fsum(link.value for link in node.target_links)
        outflow = math.fsum(link.value for link in node.source_links)
        node.value = max(inflow, outflow)


# ─── Columns ──────────────────────────────────────────────────────────────────


def max_depth(nodes: list[Node]) -> int:
    return max((n.depth for n in nodes), default=0)


def group_columns(nodes: list[Node]) -> list[list[Node]]:
    """Group nodes by depth. Within a column, nodes keep their list order."""
    columns: list[list[Node]] = [[] for _ in range(max_depth(nodes) + 1)]
    for node in nodes:
        columns[node.depth].append(node)
    return columns


def position_columns(nodes: list[Node], config: LayoutConfig) -> None:
    """Spread columns evenly across the canvas width."""
    pad = config.padding
    inner_width = config.width - pad.left - pad.right - config.node_width
    depth = max_depth(nodes)
    step = inner_width / depth if depth > 0 else 0.0

    for node in nodes:
        node.x = pad.left + node.depth * step
        node.width = config.node_width


# ─── Initial Vertical Placement ───────────────────────────────────────────────


def global_scale(columns: list[list[Node]], config: LayoutConfig) -> float:
    """Pixels per unit of flow, shared by every column.

    The most crowded column decides: each column with a positive total
    proposes ``(inner_height - spacing) / total`` and the smallest proposal
    wins. Returns 0 when no column carries any value.
    """
    scale = math.inf
    for column in columns:
        total = math.fsum(n.value for n in column)
        if total <= 0:
            continue
        spacing = max(0.0, (len(column) - 1) * config.node_padding)
        candidate = (config.inner_height - spacing) / total
        if candidate < scale:
            scale = candidate
    return scale if math.isfinite(scale) else 0.0


def initialize_node_y(nodes: list[Node], config: LayoutConfig) -> float:
    """Stack each column top-down, largest value first. Returns the scale used."""
    columns = group_columns(nodes)
    scale = global_scale(columns, config)

    for column in columns:
        # Stable: equal values keep their original relative order.
        column.sort(key=lambda n: n.value, reverse=True)
        y = config.padding.top
        for node in column:
            node.y = y
            node.height = max(1.0, node.value * scale)
            y += node.height + config.node_padding

    return scale


# ─── Relaxation ───────────────────────────────────────────────────────────────


def weighted_center(node: Node, direction: str) -> float:
    """Value-weighted average center of a node's neighbours.

    direction: "incoming" averages over link sources, "outgoing" over link
    targets. A node whose links carry no weight keeps its own center.
    """
    if direction == "incoming":
        pairs = [(link.source.center, link.value) for link in node.target_links]
    else:
        pairs = [(link.target.center, link.value) for link in node.source_links]

    total = math.fsum(w for _, w in pairs)
    if total <= 0:
        return node.center
    return math.fsum(c * w for c, w in pairs) / total


def resolve_collisions(column: list[Node], config: LayoutConfig) -> None:
    """Remove vertical overlaps inside one column.

    Sorts the column by y, pushes nodes down until each sits at least
    ``node_padding`` below its predecessor, then, if the last node spills
    past the bottom padding, pulls nodes back up while keeping the order
    and the gaps.
    """
    if not column:
        return

    gap = config.node_padding
    column.sort(key=lambda n: n.y)

    y = config.padding.top
    for node in column:
        dy = y - node.y
        if dy > 0:
            node.y += dy
        y = node.y + node.height + gap

    last = column[-1]
    overflow = last.y + last.height - config.inner_bottom
    if overflow > 0:
        last.y -= overflow
        for i in range(len(column) - 2, -1, -1):
            overflow = column[i].y + column[i].height + gap - column[i + 1].y
            if overflow > 0:
                column[i].y -= overflow


def relax_node_positions(nodes: list[Node], config: LayoutConfig) -> None:
    """Nudge nodes toward their neighbours' weighted centers.

    Each iteration runs a forward sweep (columns 1..n, pulled by incoming
    links) and a backward sweep (columns n-1..0, pulled by outgoing links).
    The pull is damped linearly from 1 down to 1/iterations.
    """
    columns = group_columns(nodes)
    iterations = config.iterations

    for i in range(iterations):
        damping = 1 - i / iterations

        for c in range(1, len(columns)):
            for node in columns[c]:
                if not node.target_links:
                    continue
                delta = weighted_center(node, "incoming") - node.center
                node.y += delta * damping
            resolve_collisions(columns[c], config)

        for c in range(len(columns) - 2, -1, -1):
            for node in columns[c]:
                if not node.source_links:
                    continue
                delta = weighted_center(node, "outgoing") - node.center
                node.y += delta * damping
            resolve_collisions(columns[c], config)


# ─── Link Offsets ─────────────────────────────────────────────────────────────


def _target_y(link: Link) -> float:
    return link.target.y


def _source_y(link: Link) -> float:
    return link.source.y


def compute_link_offsets(nodes: list[Node]) -> None:
    """Order each node's links and fix their thickness and offsets.

    Thickness is decided once, at the source node, proportionally to value.
    Target-side offsets stack those same widths.
    """
    for node in nodes:
        node.source_links.sort(key=_target_y)
        node.target_links.sort(key=_source_y)

    for node in nodes:
        out_total = math.fsum(link.value for link in node.source_links)
        sy = 0.0
        for link in node.source_links:
            link.width = link.value / out_total * node.height if out_total > 0 else 0.0
            link.sy = sy
            sy += link.width

    for node in nodes:
        ty = 0.0
        for link in node.target_links:
            link.ty = ty
            ty += link.width


# ─── Full Layout Pipeline ──────────────────────────────────────────────────────


class SankeyLayout:
    """Runs the full layout pipeline with one fixed configuration.

    Instances hold no per-graph state, so one layout object can be reused
    for any number of graphs.
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self.config = config if config is not None else LayoutConfig()

    def compute(self, graph: SankeyGraph) -> SankeyGraph:
        """Populate every geometry field of ``graph`` and return it."""
        nodes = graph.nodes
        if not nodes:
            return graph

        depth = assign_depths(graph, self.config.node_align)
        compute_node_values(nodes)
        position_columns(nodes, self.config)
        scale = initialize_node_y(nodes, self.config)
        relax_node_positions(nodes, self.config)
        compute_link_offsets(nodes)

        logger.debug(
            "sankey_layout_computed",
            nodes=len(nodes),
            links=len(graph.links),
            max_depth=depth,
            scale=scale,
        )
        return graph


def compute(graph: SankeyGraph, config: LayoutConfig | None = None) -> SankeyGraph:
    """Lay out ``graph`` in place with ``config`` (defaults if omitted)."""
    return SankeyLayout(config).compute(graph)
