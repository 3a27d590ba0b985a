"""Graph model: nodes, links and the graph that owns them.

Nodes and links reference each other directly: a link points at its source
and target ``Node`` objects, and each node keeps ordered lists of its
outgoing (``source_links``) and incoming (``target_links``) links. Every
layout phase mutates these objects in place; nothing is copied.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any

import networkx as nx


class GraphError(ValueError):
    """Raised when a graph is assembled with duplicate or dangling references."""


@dataclass(eq=False)
class Node:
    """A flow node. Geometry fields are filled in by the layout engine."""

    id: str
    label: str = ""
    value: float = 0.0
    depth: int = 0
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    color: str | None = None
    source_links: list[Link] = field(default_factory=list)
    target_links: list[Link] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.label:
            self.label = self.id

    @property
    def center(self) -> float:
        """Vertical center in pixels."""
        return self.y + self.height / 2

    @property
    def inflow(self) -> float:
        return math.fsum(link.value for link in self.target_links)

    @property
    def outflow(self) -> float:
        return math.fsum(link.value for link in self.source_links)

    def __repr__(self) -> str:
        return f"Node(id={self.id!r}, depth={self.depth}, value={self.value})"


@dataclass(eq=False)
class Link:
    """A directed, weighted flow between two nodes of the same graph."""

    source: Node
    target: Node
    value: float
    width: float = 0.0
    sy: float = 0.0
    ty: float = 0.0
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple[str, str]:
        """The (source_id, target_id) pair identifying this link."""
        return (self.source.id, self.target.id)

    def __repr__(self) -> str:
        return f"Link({self.source.id!r} -> {self.target.id!r}, value={self.value})"


@dataclass
class SankeyGraph:
    """Node and link collections for one layout computation.

    ``nodes`` order is significant: it decides the relative order of nodes
    within a column whenever the layout has to break a tie.
    """

    nodes: list[Node] = field(default_factory=list)
    links: list[Link] = field(default_factory=list)
    _index: dict[str, Node] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for node in self.nodes:
            if node.id in self._index:
                raise GraphError(f"duplicate node id: {node.id!r}")
            self._index[node.id] = node

    def node(self, node_id: str) -> Node:
        """Look up a node by id. Raises KeyError if absent."""
        return self._index[node_id]

    def add_node(self, node_id: str, label: str = "", color: str | None = None) -> Node:
        """Append a new node. Raises GraphError on a duplicate id."""
        if node_id in self._index:
            raise GraphError(f"duplicate node id: {node_id!r}")
        node = Node(id=node_id, label=label, color=color)
        self.nodes.append(node)
        self._index[node_id] = node
        return node

    def add_link(self, source_id: str, target_id: str, value: float) -> Link:
        """Create a link between two existing nodes and wire both endpoints.

        Raises GraphError when an endpoint is unknown or the (source, target)
        pair already has a link.
        """
        try:
            source = self.node(source_id)
        except KeyError:
            raise GraphError(f"unknown source node: {source_id!r}") from None
        try:
            target = self.node(target_id)
        except KeyError:
            raise GraphError(f"unknown target node: {target_id!r}") from None
        if any(link.target is target for link in source.source_links):
            raise GraphError(f"duplicate link: {source_id!r} -> {target_id!r}")

        link = Link(source=source, target=target, value=value)
        source.source_links.append(link)
        target.target_links.append(link)
        self.links.append(link)
        return link

    def to_digraph(self) -> nx.DiGraph:
        """Build a networkx view of the graph keyed by node id.

        Edges come from each node's ``source_links``, so the view follows
        the same wiring the layout phases walk. Node attribute ``node`` and
        edge attribute ``link`` hold the original objects, and edge
        ``weight`` holds the link value.
        """
        g: nx.DiGraph = nx.DiGraph()
        for node in self.nodes:
            g.add_node(node.id, node=node)
        for node in self.nodes:
            for link in node.source_links:
                g.add_edge(node.id, link.target.id, link=link, weight=link.value)
        return g

    @classmethod
    def from_edges(cls, *edges: tuple[str, str, float]) -> SankeyGraph:
        """Build a graph from ``(source, target, value)`` triples.

        Nodes are created in first-seen order.
        """
        graph = cls()
        seen: set[str] = set()
        for src, tgt, value in edges:
            for node_id in (src, tgt):
                if node_id not in seen:
                    seen.add(node_id)
                    graph.add_node(node_id)
            graph.add_link(src, tgt, value)
        return graph
