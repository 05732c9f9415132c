"""SDK for editing sessions, code generation and LangGraph import."""

from flowspec.sdk.codegen_client import (
    CodegenClient,
    CodegenError,
    generated_filename,
    organize_templates,
)
from flowspec.sdk.graph_extractor import extract_graph
from flowspec.sdk.session import EditorSession

__all__ = [
    "CodegenClient",
    "CodegenError",
    "generated_filename",
    "organize_templates",
    "extract_graph",
    "EditorSession",
]
