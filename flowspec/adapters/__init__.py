"""Adapters for persisting editor state."""

from flowspec.adapters.store import (
    CUSTOM_TEMPLATES_KEY,
    EDGE_LABELS_KEY,
    GRAPH_CONFIG_KEY,
    LANGUAGE_KEY,
    SKIP_TEMPLATES_KEY,
    SPEC_KEY,
    InMemoryStore,
    KeyValueStore,
    SqliteStore,
)

__all__ = [
    "KeyValueStore",
    "InMemoryStore",
    "SqliteStore",
    "SPEC_KEY",
    "EDGE_LABELS_KEY",
    "GRAPH_CONFIG_KEY",
    "LANGUAGE_KEY",
    "SKIP_TEMPLATES_KEY",
    "CUSTOM_TEMPLATES_KEY",
]
