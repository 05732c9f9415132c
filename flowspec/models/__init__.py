"""Core data models for flowspec."""

from flowspec.models.graph_model import (
    BranchEdge,
    DirectEdge,
    Edge,
    EntryNode,
    GraphModel,
    Node,
    Position,
    StepNode,
    TerminalNode,
)
from flowspec.models.spec_document import (
    BranchSpecEdge,
    DirectSpecEdge,
    SpecConfig,
    SpecDocument,
    SpecNode,
)
from flowspec.models.codegen import (
    GenerateRequest,
    GenerateResponse,
    TemplateInfo,
)

__all__ = [
    # Graph
    "BranchEdge",
    "DirectEdge",
    "Edge",
    "EntryNode",
    "GraphModel",
    "Node",
    "Position",
    "StepNode",
    "TerminalNode",
    # Specification
    "BranchSpecEdge",
    "DirectSpecEdge",
    "SpecConfig",
    "SpecDocument",
    "SpecNode",
    # Code generation
    "GenerateRequest",
    "GenerateResponse",
    "TemplateInfo",
]
