"""Public API: one-call entry points for embedding hosts."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from sankey_layout.config import DEFAULT_PALETTE, LayoutConfig, TransformConfig
from sankey_layout.graph import SankeyGraph
from sankey_layout.journey import JourneyAnalyzer, JourneyMetrics
from sankey_layout.layout import SankeyLayout
from sankey_layout.transform import TabularTransform


def compute_layout(graph: SankeyGraph, config: LayoutConfig | None = None) -> SankeyGraph:
    """Lay out a pre-built graph in place and return it."""
    return SankeyLayout(config).compute(graph)


def layout_rows(
    rows: Iterable[Mapping[str, Any]],
    transform_config: TransformConfig,
    config: LayoutConfig | None = None,
    palette: Sequence[str] | None = None,
) -> SankeyGraph:
    """Build a graph from tabular rows and lay it out."""
    graph = TabularTransform.transform(rows, transform_config, palette or DEFAULT_PALETTE)
    return compute_layout(graph, config)


def journey_metrics(graph: SankeyGraph) -> list[JourneyMetrics]:
    return JourneyAnalyzer.analyze(graph)
