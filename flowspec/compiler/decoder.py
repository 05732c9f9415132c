"""Decode specification text back into an editable GraphModel.

This is the single load path: restoring saved state, importing a file and the
HTTP decode endpoint all go through decode_spec. Decoding is all-or-nothing for
malformed text, but tolerant of edges that name unknown steps: those are routed
to the terminal node and reported with an UnresolvedReferenceWarning.
"""

import logging
import re
import warnings
from dataclasses import dataclass, field
from typing import Any

import yaml
from pydantic import ValidationError

from flowspec.compiler.layout import ENTRY_POSITION, TERMINAL_POSITION, place_steps
from flowspec.errors import ParseError, UnresolvedReferenceWarning
from flowspec.models.graph_model import (
    BranchEdge,
    DirectEdge,
    EntryNode,
    GraphModel,
    StepNode,
    TerminalNode,
)
from flowspec.models.spec_document import (
    END,
    SPEC_FIELD_ORDER,
    START,
    BranchSpecEdge,
    DirectSpecEdge,
    SpecConfig,
    SpecDocument,
    SpecNode,
)
from flowspec.utils.identifiers import edge_id, step_node_id


logger = logging.getLogger(__name__)

_GENERIC_LABEL = re.compile(r"^conditional_edge_(\d+)$")


@dataclass
class DecodedSpec:
    """result of decoding: the rebuilt graph, its naming fields, and fallbacks taken."""

    graph: GraphModel
    config: SpecConfig
    unresolved: list[str] = field(default_factory=list)


def _as_list(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _parse_config(data: dict) -> SpecConfig:
    """Scalar fields; absent or empty values keep their defaults."""
    values: dict[str, str] = {}
    for name in SPEC_FIELD_ORDER:
        value = data.get(name)
        if value is None or value == "":
            continue
        values[name] = str(value)

    if values.get("language") not in (None, "python", "typescript"):
        logger.warning("ignoring unsupported language %r", values["language"])
        del values["language"]
    return SpecConfig(**values)


def _parse_edge(entry: Any, index: int) -> DirectSpecEdge | BranchSpecEdge:
    if not isinstance(entry, dict):
        raise ParseError(f"edge #{index} must be a mapping")
    try:
        if "condition" in entry and isinstance(entry.get("paths"), list):
            return BranchSpecEdge.model_validate(entry)
        return DirectSpecEdge.model_validate(entry)
    except ValidationError as e:
        raise ParseError(f"edge #{index} is malformed: {e}") from e


def parse_spec(text: str) -> SpecDocument:
    """Parse specification text into its typed form.

    Raises:
        ParseError: if the text is not a well-formed specification
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ParseError("specification must be a mapping")

    nodes = []
    for index, entry in enumerate(_as_list(data, "nodes")):
        try:
            nodes.append(SpecNode.model_validate(entry))
        except ValidationError as e:
            raise ParseError(f"node #{index} is malformed: {e}") from e

    edges = [_parse_edge(entry, index) for index, entry in enumerate(_as_list(data, "edges"))]

    return SpecDocument(config=_parse_config(data), nodes=nodes, edges=edges)


def build_graph(document: SpecDocument) -> DecodedSpec:
    """Rebuild a GraphModel from a parsed specification.

    Raises:
        ParseError: if one source is given two different condition labels
    """
    entry = EntryNode(position=ENTRY_POSITION.model_copy())
    terminal = TerminalNode(position=TERMINAL_POSITION.model_copy())

    positions = place_steps(len(document.nodes))
    steps = [
        StepNode(node_id=step_node_id(index + 1), label=node.name, position=positions[index])
        for index, node in enumerate(document.nodes)
    ]

    # first node wins when a hand-written spec repeats a name
    by_label: dict[str, str] = {}
    for step in steps:
        by_label.setdefault(step.label, step.node_id)

    unresolved: list[str] = []

    def resolve(name: str) -> str:
        if name == START:
            return entry.node_id
        if name == END:
            return terminal.node_id
        if name in by_label:
            return by_label[name]
        unresolved.append(name)
        warnings.warn(
            f"unknown node {name!r} in specification, routing edge to {END}",
            UnresolvedReferenceWarning,
            stacklevel=3,
        )
        return terminal.node_id

    edges: list[DirectEdge | BranchEdge] = []
    condition_labels: dict[str, str] = {}
    for index, spec_edge in enumerate(document.edges):
        source = resolve(spec_edge.from_)
        if isinstance(spec_edge, BranchSpecEdge):
            previous = condition_labels.get(source)
            if previous is not None and previous != spec_edge.condition:
                raise ParseError(
                    f"edge #{index} gives {spec_edge.from_!r} the condition "
                    f"{spec_edge.condition!r}, but it already has {previous!r}"
                )
            for path_index, path in enumerate(spec_edge.paths):
                edges.append(BranchEdge(
                    edge_id=edge_id(index, path_index),
                    source=source,
                    target=resolve(path),
                    condition=spec_edge.condition,
                ))
            condition_labels[source] = spec_edge.condition
        else:
            edges.append(DirectEdge(
                edge_id=edge_id(index),
                source=source,
                target=resolve(spec_edge.to),
            ))

    # keep minting after the highest generic label already in use
    group_count = 0
    for label in condition_labels.values():
        match = _GENERIC_LABEL.match(label)
        if match:
            group_count = max(group_count, int(match.group(1)))

    graph = GraphModel(
        nodes=[entry, terminal, *steps],
        edges=edges,
        condition_labels=condition_labels,
        conditional_group_count=group_count,
        node_count=len(steps),
        edge_count=len(edges),
    )

    if unresolved:
        logger.warning("decoded specification with %d unresolved reference(s): %s",
                       len(unresolved), ", ".join(unresolved))

    return DecodedSpec(graph=graph, config=document.config, unresolved=unresolved)


def decode_spec(text: str) -> DecodedSpec:
    """Decode specification text into a graph and its naming fields.

    Args:
        text: Specification text, as produced by encode_spec or written by hand

    Returns:
        DecodedSpec with the rebuilt graph, config, and any unresolved labels

    Raises:
        ParseError: if the text is not well-formed; nothing is built in that case
    """
    return build_graph(parse_spec(text))
