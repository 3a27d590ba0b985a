"""Tests for transform.py: tabular rows to SankeyGraph."""

from __future__ import annotations

from sankey_layout.config import DEFAULT_PALETTE, TransformConfig
from sankey_layout.transform import TabularTransform

FIELDS = TransformConfig(source_field="from", target_field="to", value_field="count")


def transform(rows, config: TransformConfig = FIELDS, **kwargs):
    return TabularTransform.transform(rows, config, **kwargs)


class TestTabularTransform:
    def test_basic_rows(self):
        graph = transform([{"from": "A", "to": "B", "count": 10}, {"from": "B", "to": "C", "count": 7}])
        assert [n.id for n in graph.nodes] == ["A", "B", "C"]
        assert [link.key for link in graph.links] == [("A", "B"), ("B", "C")]

    def test_aggregates_duplicate_pairs(self):
        rows = [
            {"from": "A", "to": "B", "count": 5},
            {"from": "A", "to": "B", "count": 3},
            {"from": "A", "to": "B", "count": 2},
        ]
        graph = transform(rows)
        assert len(graph.links) == 1
        assert graph.links[0].value == 10

    def test_link_order_follows_first_appearance(self):
        rows = [
            {"from": "A", "to": "C", "count": 1},
            {"from": "A", "to": "B", "count": 1},
            {"from": "A", "to": "C", "count": 1},
        ]
        graph = transform(rows)
        assert [link.key for link in graph.links] == [("A", "C"), ("A", "B")]

    def test_skips_missing_or_non_positive_rows(self):
        rows = [
            {"from": "A", "to": "B", "count": 10},
            {"from": "B", "to": "C", "count": 0},
            {"from": "", "to": "D", "count": 5},
            {"from": "E", "to": "", "count": 5},
            {"from": "F", "to": "G", "count": -1},
            {"from": "H", "to": None, "count": 4},
            {"to": "I", "count": 4},
        ]
        graph = transform(rows)
        assert len(graph.links) == 1
        assert graph.links[0].source.id == "A"
        assert [n.id for n in graph.nodes] == ["A", "B"]

    def test_coerces_values(self):
        rows = [
            {"from": "A", "to": "B", "count": "2.5"},
            {"from": "A", "to": "C", "count": "n/a"},
            {"from": 1, "to": 2, "count": 4},
        ]
        graph = transform(rows)
        assert graph.links[0].value == 2.5
        assert [link.key for link in graph.links] == [("A", "B"), ("1", "2")]

    def test_wires_node_references(self):
        rows = [{"from": "A", "to": "B", "count": 10}, {"from": "A", "to": "C", "count": 5}]
        graph = transform(rows)
        a, b = graph.node("A"), graph.node("B")
        assert len(a.source_links) == 2
        assert len(a.target_links) == 0
        assert len(b.target_links) == 1
        assert b.target_links[0].source is a

    def test_assigns_palette_colors(self):
        graph = transform([{"from": "A", "to": "B", "count": 10}])
        assert graph.nodes[0].color == DEFAULT_PALETTE[0]
        assert graph.nodes[1].color == DEFAULT_PALETTE[1]

    def test_palette_wraps(self):
        rows = [{"from": f"N{i}", "to": f"N{i + 1}", "count": 1} for i in range(15)]
        graph = transform(rows)
        assert len(graph.nodes) == 16
        assert graph.nodes[len(DEFAULT_PALETTE)].color == DEFAULT_PALETTE[0]

    def test_custom_palette(self):
        graph = transform([{"from": "A", "to": "B", "count": 1}], palette=["red"])
        assert [n.color for n in graph.nodes] == ["red", "red"]

    def test_color_fields_override_palette(self):
        config = TransformConfig(
            source_field="from",
            target_field="to",
            value_field="count",
            source_color_field="from_color",
            target_color_field="to_color",
        )
        rows = [
            {"from": "A", "to": "B", "count": 1, "from_color": "#000000", "to_color": ""},
            {"from": "B", "to": "C", "count": 1, "from_color": "#111111", "to_color": "#222222"},
        ]
        graph = transform(rows, config)
        assert graph.node("A").color == "#000000"
        assert graph.node("B").color == "#111111"
        assert graph.node("C").color == "#222222"

    def test_empty_rows(self):
        graph = transform([])
        assert graph.nodes == []
        assert graph.links == []
