"""Conditional label grouping for edges that share a source node.

As soon as a node has more than one outgoing edge, all of them become paths of
one conditional group with a single condition label. A label the user typed is
always kept; otherwise a generic ``conditional_edge_<n>`` label is minted from
the graph's counter.
"""

from flowspec.models.graph_model import BranchEdge, DirectEdge, Edge, GraphModel
from flowspec.utils.identifiers import generic_condition_label


GENERIC_LABEL_PREFIX = "conditional_edge"


def is_generic_label(label: str | None) -> bool:
    """True for labels minted by the engine rather than typed by the user."""
    return not label or label.startswith(GENERIC_LABEL_PREFIX)


class LabelGroupingEngine:
    """Keeps each source node's outgoing edges consistent.

    The engine holds no state of its own: the per-source labels and the
    generic label counter live on the GraphModel it is handed.
    """

    def group_label(self, graph: GraphModel, source_id: str) -> str | None:
        """Current label of a source's group, if it has one."""
        for edge in graph.outgoing(source_id):
            if isinstance(edge, BranchEdge):
                return edge.condition
        return graph.condition_labels.get(source_id)

    def _resolve_label(self, graph: GraphModel, source_id: str) -> str:
        current = self.group_label(graph, source_id)
        if current and not is_generic_label(current):
            return current

        is_grouped = any(isinstance(e, BranchEdge) for e in graph.outgoing(source_id))
        if is_grouped and current:
            return current

        # first transition of this source from one edge to several
        graph.conditional_group_count += 1
        return generic_condition_label(graph.conditional_group_count)

    def _promote(self, graph: GraphModel, source_id: str, label: str) -> None:
        for edge in graph.outgoing(source_id):
            graph.replace_edge(BranchEdge(
                edge_id=edge.edge_id,
                source=edge.source,
                target=edge.target,
                condition=label,
            ))
        graph.condition_labels[source_id] = label

    def connect(self, graph: GraphModel, source_id: str, target_id: str) -> Edge:
        """Add an edge, grouping it with any siblings leaving the same source."""
        siblings = graph.outgoing(source_id)
        edge = DirectEdge(
            edge_id=graph.next_edge_id(),
            source=source_id,
            target=target_id,
        )

        if not siblings:
            graph.add_edge(edge)
            return edge

        label = self._resolve_label(graph, source_id)
        graph.add_edge(edge)
        self._promote(graph, source_id, label)
        return graph.get_edge(edge.edge_id)

    def disconnect(self, graph: GraphModel, edge_id: str) -> Edge:
        """Remove one edge.

        Remaining siblings keep their branch status even when a single one is
        left; only a source with no edges at all starts over as direct.
        """
        return graph.remove_edge(edge_id)

    def rename_condition(self, graph: GraphModel, source_id: str, label: str) -> None:
        """Apply a user-entered condition label to a source's group."""
        label = label.strip()
        if not label:
            raise ValueError("condition label must not be empty")
        if graph.get_node(source_id) is None:
            raise KeyError(source_id)

        graph.condition_labels[source_id] = label
        for edge in graph.outgoing(source_id):
            if isinstance(edge, BranchEdge):
                graph.replace_edge(edge.model_copy(update={"condition": label}))

    def toggle_branch(self, graph: GraphModel, edge_id: str) -> Edge:
        """Flip a single edge between direct and conditional."""
        edge = graph.get_edge(edge_id)
        if edge is None:
            raise KeyError(edge_id)

        if isinstance(edge, BranchEdge):
            toggled = DirectEdge(edge_id=edge.edge_id, source=edge.source, target=edge.target)
        else:
            toggled = BranchEdge(
                edge_id=edge.edge_id,
                source=edge.source,
                target=edge.target,
                condition=self._resolve_label(graph, edge.source),
            )
            graph.condition_labels[edge.source] = toggled.condition

        graph.replace_edge(toggled)
        return toggled
