"""Reachability over a positioned graph.

Hover highlighting needs the set of links and nodes upstream and/or
downstream of a node. The walks here use an explicit stack and visited
set, so long chains and cycles are both safe.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from sankey_layout.graph import Link, Node

HighlightMode = Literal["forward", "backward", "both", "none"]


@dataclass
class Reach:
    """Links (as (source_id, target_id) keys) and node ids touched by a walk."""

    link_keys: set[tuple[str, str]] = field(default_factory=set)
    node_ids: set[str] = field(default_factory=set)

    def update(self, other: Reach) -> None:
        self.link_keys |= other.link_keys
        self.node_ids |= other.node_ids


def _walk(start: Node, direction: str) -> Reach:
    reach = Reach(node_ids={start.id})
    stack: list[Node] = [start]
    while stack:
        node = stack.pop()
        links = node.source_links if direction == "forward" else node.target_links
        for link in links:
            if link.key in reach.link_keys:
                continue
            reach.link_keys.add(link.key)
            nxt = link.target if direction == "forward" else link.source
            reach.node_ids.add(nxt.id)
            stack.append(nxt)
    return reach


def collect_forward(node: Node) -> Reach:
    """Everything downstream of ``node``, including ``node`` itself."""
    return _walk(node, "forward")


def collect_backward(node: Node) -> Reach:
    """Everything upstream of ``node``, including ``node`` itself."""
    return _walk(node, "backward")


def highlight_node(node: Node, mode: HighlightMode = "both") -> Reach:
    if mode == "none":
        return Reach()
    reach = Reach(node_ids={node.id})
    if mode in ("forward", "both"):
        reach.update(collect_forward(node))
    if mode in ("backward", "both"):
        reach.update(collect_backward(node))
    return reach


def highlight_link(link: Link, mode: HighlightMode = "both") -> Reach:
    """A link highlights only itself and its two endpoints."""
    if mode == "none":
        return Reach()
    return Reach(link_keys={link.key}, node_ids={link.source.id, link.target.id})
