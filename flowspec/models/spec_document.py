"""Typed form of the YAML workflow specification.

The specification is what langgraph-gen consumes: a block of scalar naming
fields followed by the ``nodes`` and ``edges`` lists.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, Field, field_validator


Language = Literal["python", "typescript"]

# file extension of generated files, per target language
FILE_EXTENSIONS: dict[str, str] = {"python": ".py", "typescript": ".ts"}

# reserved names standing in for the entry and terminal nodes
START = "__start__"
END = "__end__"


class SpecConfig(BaseModel):
    """scalar naming fields, in the order they are written out."""

    model_config = {"extra": "forbid"}

    name: str = "CustomAgent"
    builder_name: str = "builder"
    compiled_name: str = "graph"
    config: str = "config.Configuration"
    state: str = "state.State"
    input: str = "state.InputState"
    output: str = "Any"
    implementation: str = "implementation.IMPLEMENTATION"
    language: Language = "python"
    prompts: str = "prompts.Prompts"
    pipeline: str = "pipeline.Pipeline"
    tools: str = "tools.Tools"


SPEC_FIELD_ORDER: tuple[str, ...] = tuple(SpecConfig.model_fields)


def _as_text(value: Any) -> Any:
    # hand-written specs may hold bare numbers or booleans where names belong
    if value is None or isinstance(value, (str, list, dict)):
        return value
    return str(value)


class SpecNode(BaseModel):
    """an entry of the ``nodes`` list."""

    name: str

    coerce_name = field_validator("name", mode="before")(_as_text)


class DirectSpecEdge(BaseModel):
    """``{from, to}``"""

    model_config = {"populate_by_name": True}

    from_: str = Field(alias="from")
    to: str

    coerce_ends = field_validator("from_", "to", mode="before")(_as_text)


class BranchSpecEdge(BaseModel):
    """``{from, condition, paths}``, one entry per conditional group."""

    model_config = {"populate_by_name": True}

    from_: str = Field(alias="from")
    condition: str
    paths: list[str]

    coerce_ends = field_validator("from_", "condition", mode="before")(_as_text)

    @field_validator("paths", mode="before")
    @classmethod
    def coerce_paths(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_as_text(path) for path in value]
        return value


SpecEdge = Union[DirectSpecEdge, BranchSpecEdge]


class SpecDocument(BaseModel):
    """the whole specification: config block, nodes and edges."""

    config: SpecConfig = Field(default_factory=SpecConfig)
    nodes: list[SpecNode] = Field(default_factory=list)
    edges: list[SpecEdge] = Field(default_factory=list)

    def node_names(self) -> list[str]:
        return [node.name for node in self.nodes]
