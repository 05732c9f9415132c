"""Tests for encoding graphs into specification text."""

import pytest
import yaml

from flowspec.compiler.encoder import build_spec_document, encode_spec
from flowspec.compiler.grouping import LabelGroupingEngine
from flowspec.errors import StructuralInvariantViolation, UnresolvedEndpointError
from flowspec.models.graph_model import BranchEdge, DirectEdge, EntryNode, GraphModel, TerminalNode
from flowspec.models.spec_document import SpecConfig


def _body(spec: str) -> dict:
    return yaml.safe_load(spec)


def _supervisor_graph() -> GraphModel:
    graph = GraphModel.empty()
    supervisor = graph.add_step("Supervisor")
    graph.add_edge(DirectEdge(edge_id="edge-1", source="source", target=supervisor.node_id))
    graph.add_edge(DirectEdge(edge_id="edge-2", source=supervisor.node_id, target="end"))
    return graph


class TestEncodeLayout:
    """Test the emitted text."""

    def test_supervisor_example(self):
        """A single step between start and end encodes to two direct edges."""
        spec = encode_spec(_supervisor_graph())
        body = _body(spec)

        assert body["nodes"] == [{"name": "Supervisor"}]
        assert body["edges"] == [
            {"from": "__start__", "to": "Supervisor"},
            {"from": "Supervisor", "to": "__end__"},
        ]

    def test_exact_text(self):
        """Scalars come first in fixed order, then nodes, then edges."""
        spec = encode_spec(_supervisor_graph())
        body_text = spec.split("\n\n", 1)[1]

        assert body_text == "\n".join([
            "name: CustomAgent",
            "builder_name: builder",
            "compiled_name: graph",
            "config: config.Configuration",
            "state: state.State",
            "input: state.InputState",
            "output: Any",
            "implementation: implementation.IMPLEMENTATION",
            "language: python",
            "prompts: prompts.Prompts",
            "pipeline: pipeline.Pipeline",
            "tools: tools.Tools",
            "nodes:",
            "  - name: Supervisor",
            "edges:",
            "  - from: __start__",
            "    to: Supervisor",
            "  - from: Supervisor",
            "    to: __end__",
        ])

    def test_header_names_generated_files(self):
        """The header comment follows the target language."""
        python_spec = encode_spec(_supervisor_graph())
        ts_spec = encode_spec(_supervisor_graph(), SpecConfig(language="typescript"))

        assert python_spec.startswith("# This YAML was auto-generated")
        assert "stub.py" in python_spec and "implementation.py" in python_spec
        assert "stub.ts" in ts_spec and "implementation.ts" in ts_spec
        assert "language: typescript" in ts_spec

    def test_language_override_only_touches_header(self):
        """An explicit language changes the header but not the body."""
        graph = _supervisor_graph()
        spec = encode_spec(graph, language="typescript")

        assert "stub.ts" in spec
        assert "language: python" in spec

    def test_config_fields_pass_through(self):
        """Scalar naming fields are written unchanged."""
        config = SpecConfig(name="Researcher", output="state.OutputState")
        body = _body(encode_spec(_supervisor_graph(), config))

        assert body["name"] == "Researcher"
        assert body["output"] == "state.OutputState"

    def test_deterministic(self):
        """Encoding the same graph twice gives identical text."""
        graph = _supervisor_graph()
        assert encode_spec(graph) == encode_spec(graph)

    def test_empty_graph(self):
        """A graph without edges has empty nodes and edges lists."""
        body = _body(encode_spec(GraphModel.empty()))
        assert body["nodes"] is None
        assert body["edges"] is None

    def test_awkward_labels_are_quoted(self):
        """Labels YAML would misread are quoted and read back intact."""
        graph = GraphModel.empty()
        tricky = graph.add_step("route: a, b")
        boolish = graph.add_step("yes")
        graph.add_edge(DirectEdge(edge_id="edge-1", source="source", target=tricky.node_id))
        graph.add_edge(BranchEdge(edge_id="edge-2", source=tricky.node_id, target=boolish.node_id, condition="c"))
        graph.add_edge(BranchEdge(edge_id="edge-3", source=tricky.node_id, target="end", condition="c"))

        body = _body(encode_spec(graph))

        assert body["nodes"] == [{"name": "route: a, b"}, {"name": "yes"}]
        assert body["edges"][1]["paths"] == ["yes", "__end__"]


class TestEncodeOrdering:
    """Test edge ordering and branch grouping."""

    def test_direct_edges_in_three_passes(self):
        """Start edges first, then end edges, then the rest."""
        graph = GraphModel.empty()
        a = graph.add_step("A")
        b = graph.add_step("B")
        graph.add_edge(DirectEdge(edge_id="edge-1", source=a.node_id, target=b.node_id))
        graph.add_edge(DirectEdge(edge_id="edge-2", source=b.node_id, target="end"))
        graph.add_edge(DirectEdge(edge_id="edge-3", source="source", target=a.node_id))

        body = _body(encode_spec(graph))

        assert body["edges"] == [
            {"from": "__start__", "to": "A"},
            {"from": "B", "to": "__end__"},
            {"from": "A", "to": "B"},
        ]
        assert body["nodes"] == [{"name": "A"}, {"name": "B"}]

    def test_start_to_end_edge_emitted_once(self):
        """A direct entry→terminal edge is not duplicated."""
        graph = GraphModel.empty()
        graph.add_edge(DirectEdge(edge_id="edge-1", source="source", target="end"))

        body = _body(encode_spec(graph))
        assert body["edges"] == [{"from": "__start__", "to": "__end__"}]

    def test_branch_group_becomes_one_entry(self):
        """Edges sharing a source encode to one entry with ordered paths."""
        graph = GraphModel.empty()
        engine = LabelGroupingEngine()
        a = graph.add_step("A")
        b = graph.add_step("B")
        engine.connect(graph, "source", a.node_id)
        engine.connect(graph, a.node_id, b.node_id)
        engine.connect(graph, a.node_id, "end")
        engine.connect(graph, a.node_id, a.node_id)
        engine.connect(graph, b.node_id, "end")

        body = _body(encode_spec(graph))

        assert body["edges"] == [
            {"from": "__start__", "to": "A"},
            {"from": "B", "to": "__end__"},
            {"from": "A", "condition": "conditional_edge_1", "paths": ["B", "__end__", "A"]},
        ]

    def test_branch_from_entry_uses_start_keyword(self):
        """A conditional group on the entry node is written from __start__."""
        graph = GraphModel.empty()
        engine = LabelGroupingEngine()
        a = graph.add_step("A")
        engine.connect(graph, "source", a.node_id)
        engine.connect(graph, "source", "end")

        body = _body(encode_spec(graph))
        assert body["edges"] == [
            {"from": "__start__", "condition": "conditional_edge_1", "paths": ["A", "__end__"]},
        ]

    def test_unconnected_steps_are_left_out(self):
        """Only steps touched by an edge are listed."""
        graph = _supervisor_graph()
        graph.add_step("Orphan")

        document = build_spec_document(graph)
        assert document.node_names() == ["Supervisor"]


class TestEncodeInvariants:
    """Test that ambiguous graphs are refused."""

    def test_two_entry_nodes(self):
        """A second entry node is a structural violation."""
        graph = _supervisor_graph()
        graph.nodes.append(EntryNode(node_id="source-2"))

        with pytest.raises(StructuralInvariantViolation):
            encode_spec(graph)

    def test_two_terminal_nodes(self):
        graph = _supervisor_graph()
        graph.nodes.append(TerminalNode(node_id="end-2"))

        with pytest.raises(StructuralInvariantViolation):
            encode_spec(graph)

    def test_inconsistent_group_labels(self):
        """Branch members of one source must share their label."""
        graph = GraphModel.empty()
        a = graph.add_step("A")
        graph.add_edge(BranchEdge(edge_id="edge-1", source=a.node_id, target="end", condition="x"))
        graph.add_edge(BranchEdge(edge_id="edge-2", source=a.node_id, target=a.node_id, condition="y"))

        with pytest.raises(StructuralInvariantViolation) as exc_info:
            encode_spec(graph)
        assert "mixes condition labels" in str(exc_info.value)

    def test_unresolvable_endpoint(self):
        """An edge pointing at a missing node is refused."""
        graph = _supervisor_graph()
        graph.edges.append(DirectEdge(edge_id="edge-9", source="source", target="ghost"))

        with pytest.raises(UnresolvedEndpointError) as exc_info:
            encode_spec(graph)
        assert exc_info.value.node_id == "ghost"

    def test_duplicate_step_labels(self):
        """Two referenced steps with the same label cannot be told apart."""
        graph = GraphModel.empty()
        first = graph.add_step("Worker")
        second = graph.add_step("Worker")
        graph.add_edge(DirectEdge(edge_id="edge-1", source="source", target=first.node_id))
        graph.add_edge(DirectEdge(edge_id="edge-2", source=second.node_id, target="end"))

        with pytest.raises(StructuralInvariantViolation):
            encode_spec(graph)

    @pytest.mark.parametrize("label", ["__start__", "__end__"])
    def test_reserved_step_label(self, label):
        """A step named like a reserved node would decode as that node."""
        graph = GraphModel.empty()
        step = graph.add_step(label)
        graph.add_edge(DirectEdge(edge_id="edge-1", source="source", target=step.node_id))
        graph.add_edge(DirectEdge(edge_id="edge-2", source=step.node_id, target="end"))

        with pytest.raises(StructuralInvariantViolation) as exc_info:
            encode_spec(graph)
        assert "reserved" in str(exc_info.value)

    def test_empty_step_label(self):
        graph = GraphModel.empty()
        step = graph.add_step("")
        graph.add_edge(DirectEdge(edge_id="edge-1", source="source", target=step.node_id))

        with pytest.raises(StructuralInvariantViolation):
            encode_spec(graph)
