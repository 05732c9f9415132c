"""Utility functions for flowspec."""

from flowspec.utils.identifiers import (
    edge_id,
    generic_condition_label,
    step_node_id,
    utc_timestamp,
)

__all__ = [
    "edge_id",
    "generic_condition_label",
    "step_node_id",
    "utc_timestamp",
]
