"""Tests for encode/decode consistency."""

import pytest

from flowspec.compiler.decoder import decode_spec
from flowspec.compiler.encoder import encode_spec
from flowspec.compiler.grouping import LabelGroupingEngine
from flowspec.models.graph_model import BranchEdge, GraphModel
from flowspec.models.spec_document import SpecConfig


def _review_loop() -> GraphModel:
    """planner fans out to writer or end; writer loops through reviewer."""
    graph = GraphModel.empty()
    engine = LabelGroupingEngine()
    planner = graph.add_step("Planner").node_id
    writer = graph.add_step("Writer").node_id
    reviewer = graph.add_step("Reviewer").node_id

    engine.connect(graph, writer, reviewer)
    engine.connect(graph, "source", planner)
    engine.connect(graph, planner, writer)
    engine.connect(graph, planner, "end")
    engine.rename_condition(graph, planner, "needs_draft")
    engine.connect(graph, reviewer, writer)
    engine.connect(graph, reviewer, "end")
    return graph


def _topology(graph: GraphModel) -> set:
    """edges as (source label, target label, condition) triples."""
    return {
        (
            graph.label_of(e.source),
            graph.label_of(e.target),
            e.condition if isinstance(e, BranchEdge) else None,
        )
        for e in graph.edges
    }


class TestRoundTrip:
    """Test that decoding an encoded graph gives back the same graph."""

    def test_topology_survives(self):
        """Labels, edge kinds and conditions come back unchanged."""
        graph = _review_loop()
        decoded = decode_spec(encode_spec(graph)).graph

        assert _topology(decoded) == _topology(graph)
        assert {s.label for s in decoded.steps} == {"Planner", "Writer", "Reviewer"}

    def test_reencode_is_identical(self):
        """encode(decode(encode(g))) == encode(g)."""
        config = SpecConfig(name="Editorial", language="typescript")
        first = encode_spec(_review_loop(), config)

        decoded = decode_spec(first)
        second = encode_spec(decoded.graph, decoded.config)

        assert second == first

    def test_config_survives(self):
        config = SpecConfig(name="Editorial", tools="my_tools.Registry")
        decoded = decode_spec(encode_spec(_review_loop(), config))
        assert decoded.config == config

    def test_generic_labels_keep_counting(self):
        """A group added after reload does not reuse an existing generic label."""
        graph = _review_loop()
        decoded = decode_spec(encode_spec(graph)).graph

        engine = LabelGroupingEngine()
        writer = next(s.node_id for s in decoded.steps if s.label == "Writer")
        engine.connect(decoded, writer, "end")

        labels = {e.condition for e in decoded.outgoing(writer)}
        assert labels == {"conditional_edge_3"}

    @pytest.mark.parametrize("label", ["a: b", "[x]", "null", "12", " padded", "it's", "#tag"])
    def test_awkward_labels_survive(self, label):
        graph = GraphModel.empty()
        engine = LabelGroupingEngine()
        step = graph.add_step(label).node_id
        engine.connect(graph, "source", step)
        engine.connect(graph, step, step)
        engine.connect(graph, step, "end")

        decoded = decode_spec(encode_spec(graph)).graph

        assert [s.label for s in decoded.steps] == [label]
        assert _topology(decoded) == _topology(graph)

    def test_empty_graph(self):
        text = encode_spec(GraphModel.empty())
        decoded = decode_spec(text)

        assert decoded.graph.steps == []
        assert decoded.graph.edges == []
        assert encode_spec(decoded.graph) == text
