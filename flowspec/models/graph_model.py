"""Data model for the editable workflow graph.

Both the encoder and the decoder operate on a GraphModel. Nodes and edges are
tagged variants, so a direct edge can never carry a condition label and the
reserved entry/terminal nodes are distinguishable by kind alone.
"""

from typing import Annotated, Literal, Self, Union

from pydantic import BaseModel, Field, model_validator

from flowspec.errors import StructuralInvariantViolation
from flowspec.utils.identifiers import edge_id, step_node_id


# reserved node ids
ENTRY_ID = "source"
TERMINAL_ID = "end"


class Position(BaseModel):
    """canvas coordinates, purely cosmetic."""

    x: float = 0.0
    y: float = 0.0


class EntryNode(BaseModel):
    """the workflow's start node, encoded as __start__."""

    model_config = {"extra": "forbid"}

    kind: Literal["entry"] = "entry"
    node_id: str = ENTRY_ID
    label: str = "source"
    position: Position = Field(default_factory=Position)


class TerminalNode(BaseModel):
    """the workflow's end node, encoded as __end__."""

    model_config = {"extra": "forbid"}

    kind: Literal["terminal"] = "terminal"
    node_id: str = TERMINAL_ID
    label: str = "end"
    position: Position = Field(default_factory=lambda: Position(x=0, y=600))


class StepNode(BaseModel):
    """a user-named processing step."""

    model_config = {"extra": "forbid"}

    kind: Literal["step"] = "step"
    node_id: str
    label: str
    position: Position = Field(default_factory=Position)


Node = Annotated[Union[EntryNode, TerminalNode, StepNode], Field(discriminator="kind")]


class DirectEdge(BaseModel):
    """an unconditional transition."""

    model_config = {"extra": "forbid"}

    kind: Literal["direct"] = "direct"
    edge_id: str
    source: str
    target: str


class BranchEdge(BaseModel):
    """one path of a conditional group; the group is keyed by source."""

    model_config = {"extra": "forbid"}

    kind: Literal["branch"] = "branch"
    edge_id: str
    source: str
    target: str
    condition: str

    @property
    def group_key(self) -> str:
        return self.source


Edge = Annotated[Union[DirectEdge, BranchEdge], Field(discriminator="kind")]


class GraphModel(BaseModel):
    """the full editable graph plus the bookkeeping the label grouping needs."""

    model_config = {"extra": "forbid"}

    nodes: list[Node]
    edges: list[Edge] = Field(default_factory=list)

    # per-source condition label, keyed by source node id
    condition_labels: dict[str, str] = Field(default_factory=dict)
    conditional_group_count: int = 0

    # counters behind step-<n> / edge-<n> ids
    node_count: int = 0
    edge_count: int = 0

    @model_validator(mode="after")
    def validate_reserved_nodes(self) -> Self:
        """A graph is built with exactly one entry and one terminal node."""
        for kind in ("entry", "terminal"):
            count = sum(1 for node in self.nodes if node.kind == kind)
            if count != 1:
                raise ValueError(f"graph must contain exactly one {kind} node, found {count}")
        return self

    @classmethod
    def empty(cls) -> "GraphModel":
        """A graph holding only the two reserved nodes."""
        return cls(nodes=[EntryNode(), TerminalNode()])

    # --- lookups ---

    def _single(self, kind: str) -> Node:
        matches = [node for node in self.nodes if node.kind == kind]
        if len(matches) != 1:
            raise StructuralInvariantViolation(
                f"graph must contain exactly one {kind} node, found {len(matches)}"
            )
        return matches[0]

    @property
    def entry(self) -> EntryNode:
        return self._single("entry")

    @property
    def terminal(self) -> TerminalNode:
        return self._single("terminal")

    @property
    def steps(self) -> list[StepNode]:
        return [node for node in self.nodes if node.kind == "step"]

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.node_id == node_id:
                return node
        return None

    def label_of(self, node_id: str) -> str:
        """Display label of a node; raises KeyError for unknown ids."""
        node = self.get_node(node_id)
        if node is None:
            raise KeyError(node_id)
        return node.label

    def get_edge(self, edge_id: str) -> Edge | None:
        for edge in self.edges:
            if edge.edge_id == edge_id:
                return edge
        return None

    def outgoing(self, source_id: str) -> list[Edge]:
        return [edge for edge in self.edges if edge.source == source_id]

    def has_source_to_end_path(self) -> bool:
        """True once something leaves the entry node and something reaches the end."""
        if not self.edges:
            return False
        entry_id = self.entry.node_id
        terminal_id = self.terminal.node_id
        leaves_entry = any(edge.source == entry_id for edge in self.edges)
        reaches_end = any(edge.target == terminal_id for edge in self.edges)
        return leaves_entry and reaches_end

    # --- node mutations ---

    def add_step(self, label: str | None = None, position: Position | None = None) -> StepNode:
        """Add a step node with a fresh id; entry/terminal nodes are never added."""
        self.node_count += 1
        node_id = step_node_id(self.node_count)
        while self.get_node(node_id) is not None:
            self.node_count += 1
            node_id = step_node_id(self.node_count)

        node = StepNode(
            node_id=node_id,
            label=label if label is not None else f"Node {self.node_count}",
            position=position or Position(),
        )
        self.nodes.append(node)
        return node

    def rename_node(self, node_id: str, label: str) -> None:
        node = self.get_node(node_id)
        if node is None:
            raise KeyError(node_id)
        node.label = label

    def remove_node(self, node_id: str) -> None:
        """Remove a step node along with every edge touching it."""
        node = self.get_node(node_id)
        if node is None:
            raise KeyError(node_id)
        if node.kind != "step":
            raise ValueError(f"cannot remove the {node.kind} node")

        self.nodes = [n for n in self.nodes if n.node_id != node_id]
        self.edges = [
            e for e in self.edges if e.source != node_id and e.target != node_id
        ]
        self.condition_labels.pop(node_id, None)

    # --- edge mutations ---

    def next_edge_id(self) -> str:
        self.edge_count += 1
        new_id = edge_id(self.edge_count)
        while self.get_edge(new_id) is not None:
            self.edge_count += 1
            new_id = edge_id(self.edge_count)
        return new_id

    def add_edge(self, edge: Edge) -> None:
        for endpoint in (edge.source, edge.target):
            if self.get_node(endpoint) is None:
                raise KeyError(endpoint)
        self.edges.append(edge)

    def replace_edge(self, edge: Edge) -> None:
        """Swap in a new variant of an existing edge, keeping its position in order."""
        for index, existing in enumerate(self.edges):
            if existing.edge_id == edge.edge_id:
                self.edges[index] = edge
                return
        raise KeyError(edge.edge_id)

    def remove_edge(self, edge_id: str) -> Edge:
        edge = self.get_edge(edge_id)
        if edge is None:
            raise KeyError(edge_id)
        self.edges = [e for e in self.edges if e.edge_id != edge_id]
        return edge
