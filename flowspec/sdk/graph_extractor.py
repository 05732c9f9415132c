"""Import an existing compiled LangGraph into the editor.

Usage (e.g. after create_workflow()):

    from flowspec.sdk.graph_extractor import extract_graph
    app = create_workflow()
    graph = extract_graph(app)
    spec = encode_spec(graph)
"""

from __future__ import annotations

from flowspec.compiler.layout import ENTRY_POSITION, TERMINAL_POSITION, place_steps
from flowspec.models.graph_model import (
    BranchEdge,
    DirectEdge,
    EntryNode,
    GraphModel,
    StepNode,
    TerminalNode,
)
from flowspec.models.spec_document import END, START
from flowspec.utils.identifiers import generic_condition_label, step_node_id


def _node_label(node_id: str, node) -> str:
    meta = getattr(node, "metadata", None) or {}
    return meta.get("label") or getattr(node, "name", None) or node_id


def _branch_names(compiled_graph) -> dict[str, str]:
    """best-effort lookup of the router name registered for each source node."""
    builder = getattr(compiled_graph, "builder", None)
    branches = getattr(builder, "branches", None)
    if not isinstance(branches, dict):
        return {}
    names: dict[str, str] = {}
    for source, by_name in branches.items():
        if isinstance(by_name, dict) and by_name:
            names[source] = str(next(iter(by_name)))
    return names


def extract_graph(compiled_graph) -> GraphModel:
    """Build a GraphModel from a compiled LangGraph.

    Nodes keep the label the user attached via add_node(..., metadata={"label": ...})
    or their registered name. Conditional edges leaving one node become one
    branch group, labelled with the router's name when the builder exposes it
    and with a generic label otherwise.
    """
    lc_graph = compiled_graph.get_graph()
    router_names = _branch_names(compiled_graph)

    entry = EntryNode(position=ENTRY_POSITION.model_copy())
    terminal = TerminalNode(position=TERMINAL_POSITION.model_copy())
    id_map = {START: entry.node_id, END: terminal.node_id}

    step_items = [(nid, node) for nid, node in lc_graph.nodes.items() if nid not in id_map]
    positions = place_steps(len(step_items))
    steps: list[StepNode] = []
    for index, (node_id, node) in enumerate(step_items):
        step = StepNode(
            node_id=step_node_id(index + 1),
            label=_node_label(node_id, node),
            position=positions[index],
        )
        id_map[node_id] = step.node_id
        steps.append(step)

    graph = GraphModel(nodes=[entry, terminal, *steps], node_count=len(steps))

    for edge in lc_graph.edges:
        source = id_map.get(edge.source, terminal.node_id)
        target = id_map.get(edge.target, terminal.node_id)

        if not edge.conditional:
            graph.add_edge(DirectEdge(edge_id=graph.next_edge_id(), source=source, target=target))
            continue

        label = graph.condition_labels.get(source)
        if label is None:
            label = router_names.get(edge.source)
            if label is None:
                graph.conditional_group_count += 1
                label = generic_condition_label(graph.conditional_group_count)
            graph.condition_labels[source] = label

        graph.add_edge(BranchEdge(
            edge_id=graph.next_edge_id(),
            source=source,
            target=target,
            condition=label,
        ))

    return graph
