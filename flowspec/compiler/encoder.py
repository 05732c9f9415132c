"""Encode a GraphModel into the YAML specification consumed by langgraph-gen.

Encoding is a pure function of the graph topology and the scalar config: the
same input always produces byte-identical text, which upstream callers rely on
for change detection.
"""

import json

import yaml

from flowspec.errors import StructuralInvariantViolation, UnresolvedEndpointError
from flowspec.models.graph_model import BranchEdge, DirectEdge, GraphModel, Node
from flowspec.models.spec_document import (
    END,
    FILE_EXTENSIONS,
    SPEC_FIELD_ORDER,
    START,
    BranchSpecEdge,
    DirectSpecEdge,
    SpecConfig,
    SpecDocument,
    SpecNode,
)


HEADER_TEMPLATE = """\
# This YAML was auto-generated based on an architecture
# designed in LangGraph Builder (https://build.langchain.com).
#
# The YAML was used by langgraph-gen (https://github.com/langchain-ai/langgraph-gen-py)
# to generate a code stub for a LangGraph application that follows the architecture.
#
# langgraph-gen is an open source CLI tool that converts YAML specifications into LangGraph code stubs.
#
# The code stub generated from this YAML can be found in stub{ext}.
#
# A placeholder implementation for the generated stub can be found in implementation{ext}.

"""

# characters that end a plain scalar inside a flow sequence
_FLOW_INDICATORS = set(",[]{}:#")


def _spec_name(node: Node) -> str:
    if node.kind == "entry":
        return START
    if node.kind == "terminal":
        return END
    return node.label


def _format_scalar(value: str, in_flow: bool = False) -> str:
    """Write a string so that a YAML reader gets the same string back."""
    needs_quotes = value != value.strip() or (in_flow and bool(_FLOW_INDICATORS & set(value)))
    if not needs_quotes:
        try:
            needs_quotes = yaml.safe_load(value) != value
        except yaml.YAMLError:
            needs_quotes = True
    if needs_quotes:
        return json.dumps(value, ensure_ascii=False)
    return value


def _check_invariants(graph: GraphModel) -> None:
    # both raise unless exactly one of each reserved node exists
    graph.entry
    graph.terminal

    for edge in graph.edges:
        for endpoint in (edge.source, edge.target):
            if graph.get_node(endpoint) is None:
                raise UnresolvedEndpointError(edge.edge_id, endpoint)

    group_labels: dict[str, str] = {}
    for edge in graph.edges:
        if not isinstance(edge, BranchEdge):
            continue
        expected = group_labels.setdefault(edge.group_key, edge.condition)
        if edge.condition != expected:
            raise StructuralInvariantViolation(
                f"branch group of {edge.group_key} mixes condition labels "
                f"{expected!r} and {edge.condition!r}"
            )


def _collect_step_labels(graph: GraphModel, node_ids: list[str]) -> list[str]:
    """Distinct step labels in first-encountered order."""
    labels: list[str] = []
    owners: dict[str, str] = {}
    for node_id in node_ids:
        node = graph.get_node(node_id)
        if node.kind != "step":
            continue
        if not node.label:
            raise StructuralInvariantViolation(f"step {node.node_id} has an empty label")
        if node.label in (START, END):
            raise StructuralInvariantViolation(
                f"step {node.node_id} uses the reserved name {node.label!r}"
            )
        owner = owners.setdefault(node.label, node.node_id)
        if owner != node.node_id:
            raise StructuralInvariantViolation(
                f"steps {owner} and {node.node_id} share the label {node.label!r}"
            )
        if node.label not in labels:
            labels.append(node.label)
    return labels


def build_spec_document(graph: GraphModel, config: SpecConfig | None = None) -> SpecDocument:
    """Project a graph onto the typed specification form.

    Steps are listed in the order their edges are written (source before
    target), so decoding and re-encoding reproduces the same ``nodes`` list.

    Raises:
        StructuralInvariantViolation: if the graph cannot be encoded unambiguously
    """
    _check_invariants(graph)
    config = config or SpecConfig()

    def name_of(node_id: str) -> str:
        return _spec_name(graph.get_node(node_id))

    direct = [edge for edge in graph.edges if isinstance(edge, DirectEdge)]
    branch = [edge for edge in graph.edges if isinstance(edge, BranchEdge)]

    entry_id = graph.entry.node_id
    terminal_id = graph.terminal.node_id

    from_entry = [e for e in direct if e.source == entry_id]
    to_terminal = [e for e in direct if e.target == terminal_id and e.source != entry_id]
    between_steps = [e for e in direct if e.source != entry_id and e.target != terminal_id]

    edges: list[DirectSpecEdge | BranchSpecEdge] = []
    visited: list[str] = []
    for edge in from_entry + to_terminal + between_steps:
        edges.append(DirectSpecEdge(from_=name_of(edge.source), to=name_of(edge.target)))
        visited += [edge.source, edge.target]

    groups: dict[str, list[BranchEdge]] = {}
    for edge in branch:
        groups.setdefault(edge.group_key, []).append(edge)
    for source_id, members in groups.items():
        edges.append(BranchSpecEdge(
            from_=name_of(source_id),
            condition=members[0].condition,
            paths=[name_of(e.target) for e in members],
        ))
        visited += [source_id] + [e.target for e in members]

    return SpecDocument(
        config=config,
        nodes=[SpecNode(name=label) for label in _collect_step_labels(graph, visited)],
        edges=edges,
    )


def render_spec(document: SpecDocument, language: str | None = None) -> str:
    """Serialize a SpecDocument in the line-oriented layout langgraph-gen reads."""
    language = language or document.config.language
    lines: list[str] = []

    for field_name in SPEC_FIELD_ORDER:
        value = getattr(document.config, field_name)
        lines.append(f"{field_name}: {_format_scalar(value)}")

    lines.append("nodes:")
    for node in document.nodes:
        lines.append(f"  - name: {_format_scalar(node.name)}")

    lines.append("edges:")
    for edge in document.edges:
        lines.append(f"  - from: {_format_scalar(edge.from_)}")
        if isinstance(edge, BranchSpecEdge):
            paths = ", ".join(_format_scalar(p, in_flow=True) for p in edge.paths)
            lines.append(f"    condition: {_format_scalar(edge.condition)}")
            lines.append(f"    paths: [{paths}]")
        else:
            lines.append(f"    to: {_format_scalar(edge.to)}")

    header = HEADER_TEMPLATE.format(ext=FILE_EXTENSIONS.get(language, ".py"))
    return header + "\n".join(lines)


def encode_spec(
    graph: GraphModel,
    config: SpecConfig | None = None,
    language: str | None = None,
) -> str:
    """Encode a graph and its naming fields as specification text.

    Args:
        graph: The graph to encode
        config: Scalar naming fields; defaults when omitted
        language: Language named in the header comment, defaults to config.language

    Returns:
        The specification text
    """
    document = build_spec_document(graph, config)
    return render_spec(document, language)
