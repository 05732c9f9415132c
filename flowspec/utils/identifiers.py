"""ID generation and timestamp utilities."""

from datetime import datetime, timezone


def step_node_id(index: int) -> str:
    """Generate the id of the index-th step node (1-based)."""
    return f"step-{index}"


def edge_id(index: int, path_index: int | None = None) -> str:
    """Generate an edge id; branch paths get a second component."""
    if path_index is None:
        return f"edge-{index}"
    return f"edge-{index}-{path_index}"


def generic_condition_label(count: int) -> str:
    """Generate the auto-minted label for the count-th conditional group."""
    return f"conditional_edge_{count}"


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
