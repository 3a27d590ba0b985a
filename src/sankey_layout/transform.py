"""Tabular transform: build a SankeyGraph from row-oriented data.

BI hosts hand over rows as mappings. Each usable row contributes one
(source, target, value) triple; duplicate pairs are summed into a single
link and nodes are colored from a palette in first-seen order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from sankey_layout.config import DEFAULT_PALETTE, TransformConfig
from sankey_layout.graph import SankeyGraph

logger = structlog.get_logger(__name__)


def _text(row: Mapping[str, Any], field: str) -> str:
    value = row.get(field)
    return "" if value is None else str(value)


def _number(row: Mapping[str, Any], field: str) -> float:
    """Coerce a cell to float; missing or unparsable cells count as 0."""
    value = row.get(field)
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class TabularTransform:
    """Row → graph conversion. Stateless; use the ``transform`` classmethod."""

    @classmethod
    def transform(
        cls,
        rows: Iterable[Mapping[str, Any]],
        config: TransformConfig,
        palette: Sequence[str] = DEFAULT_PALETTE,
    ) -> SankeyGraph:
        """Convert ``rows`` into a fully wired graph.

        A row is skipped when its source or target is empty or its value is
        not a positive number. Skipped rows add neither nodes nor links.
        """
        totals: dict[tuple[str, str], float] = {}
        node_ids: list[str] = []
        seen: set[str] = set()
        colors: dict[str, str] = {}
        dropped = 0

        for row in rows:
            source = _text(row, config.source_field)
            target = _text(row, config.target_field)
            value = _number(row, config.value_field)
            if not source or not target or not value > 0:
                dropped += 1
                continue

            for node_id, color_field in (
                (source, config.source_color_field),
                (target, config.target_color_field),
            ):
                if node_id not in seen:
                    seen.add(node_id)
                    node_ids.append(node_id)
                if color_field and node_id not in colors:
                    color = _text(row, color_field)
                    if color:
                        colors[node_id] = color

            key = (source, target)
            totals[key] = totals.get(key, 0.0) + value

        if dropped:
            logger.debug("tabular_rows_dropped", dropped=dropped, kept_links=len(totals))

        graph = SankeyGraph()
        for i, node_id in enumerate(node_ids):
            fallback = palette[i % len(palette)] if palette else None
            graph.add_node(node_id, color=colors.get(node_id, fallback))
        for (source, target), value in totals.items():
            graph.add_link(source, target, value)

        return graph
