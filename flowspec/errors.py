"""Errors raised while encoding or decoding a workflow specification."""


class SpecError(Exception):
    """Base class for specification compiler errors."""
    pass


class ParseError(SpecError):
    """Raised when specification text is not well-formed."""
    pass


class StructuralInvariantViolation(SpecError):
    """Raised when a graph cannot be encoded without guessing.

    Covers duplicated reserved nodes, branch groups whose members disagree on
    the condition label, and step labels that cannot identify a node.
    """
    pass


class UnresolvedEndpointError(StructuralInvariantViolation):
    """Raised when an edge points at a node id the graph does not contain."""

    def __init__(self, edge_id: str, node_id: str) -> None:
        super().__init__(f"edge {edge_id} references unknown node: {node_id}")
        self.edge_id = edge_id
        self.node_id = node_id


class UnresolvedReferenceWarning(UserWarning):
    """Emitted when a decoded edge names a label that matches no node.

    The edge is routed to the terminal node instead of failing the decode.
    """
    pass
