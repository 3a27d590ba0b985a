"""Journey analysis: read a flow graph as a user funnel.

Per node: how much flow arrives, how much leaves, how much is lost on the
way, and whether the node is an entry (source) or exit (sink) point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from sankey_layout.graph import SankeyGraph


@dataclass(frozen=True)
class JourneyMetrics:
    """Flow metrics for a single node.

    ``drop_off`` is the flow that arrives but does not leave, so a sink
    drops everything it receives. Nodes without inflow drop nothing.
    """

    node_id: str
    label: str
    inflow: float
    outflow: float
    drop_off: float
    drop_off_rate: float
    conversion_rate: float
    is_source: bool
    is_sink: bool


@dataclass(frozen=True)
class JourneySummary:
    """Whole-graph funnel totals."""

    total_entries: float
    total_exits: float
    overall_conversion: float


class JourneyAnalyzer:
    """Derives ``JourneyMetrics`` from a graph's links. Never mutates the graph."""

    @staticmethod
    def analyze(graph: SankeyGraph) -> list[JourneyMetrics]:
        metrics: list[JourneyMetrics] = []
        for node in graph.nodes:
            inflow = math.fsum(link.value for link in node.target_links)
            outflow = math.fsum(link.value for link in node.source_links)
            is_source = not node.target_links
            is_sink = not node.source_links

            if inflow > 0:
                drop_off = inflow - outflow
                drop_off_rate = drop_off / inflow
                conversion_rate = outflow / inflow
            else:
                drop_off = 0.0
                drop_off_rate = 0.0
                # A pure entry point converts everything it emits.
                conversion_rate = 1.0 if outflow > 0 else 0.0

            metrics.append(
                JourneyMetrics(
                    node_id=node.id,
                    label=node.label,
                    inflow=inflow,
                    outflow=outflow,
                    drop_off=drop_off,
                    drop_off_rate=drop_off_rate,
                    conversion_rate=conversion_rate,
                    is_source=is_source,
                    is_sink=is_sink,
                )
            )
        return metrics

    @staticmethod
    def summary(graph: SankeyGraph) -> JourneySummary:
        """Total flow entering at sources vs. total flow reaching sinks."""
        entries = math.fsum(n.outflow for n in graph.nodes if not n.target_links)
        exits = math.fsum(n.inflow for n in graph.nodes if not n.source_links)
        conversion = exits / entries if entries > 0 else 0.0
        return JourneySummary(total_entries=entries, total_exits=exits, overall_conversion=conversion)
