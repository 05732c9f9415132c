"""flowspec - compile visually composed workflow graphs to langgraph-gen specs and back."""

from flowspec.errors import (
    ParseError,
    SpecError,
    StructuralInvariantViolation,
    UnresolvedEndpointError,
    UnresolvedReferenceWarning,
)
from flowspec.models.graph_model import (
    BranchEdge,
    DirectEdge,
    EntryNode,
    GraphModel,
    StepNode,
    TerminalNode,
)
from flowspec.models.spec_document import SpecConfig
from flowspec.compiler import (
    DecodedSpec,
    LabelGroupingEngine,
    decode_spec,
    encode_spec,
)
from flowspec.sdk.session import EditorSession

__all__ = [
    # Errors
    "ParseError",
    "SpecError",
    "StructuralInvariantViolation",
    "UnresolvedEndpointError",
    "UnresolvedReferenceWarning",
    # Graph model
    "BranchEdge",
    "DirectEdge",
    "EntryNode",
    "GraphModel",
    "StepNode",
    "TerminalNode",
    "SpecConfig",
    # Compiler
    "DecodedSpec",
    "LabelGroupingEngine",
    "decode_spec",
    "encode_spec",
    # High-level APIs
    "EditorSession",
]
