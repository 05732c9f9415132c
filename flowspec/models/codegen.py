"""Request and response models for the langgraph-gen code generation service."""

from typing import Literal

from pydantic import BaseModel, Field

from flowspec.models.spec_document import Language


class GenerateRequest(BaseModel):
    """body of POST /generate."""

    model_config = {"extra": "forbid"}

    spec: str
    language: Language = "python"
    format: Literal["yaml"] = "yaml"
    skip: list[str] | None = None  # template types not to generate
    templates: dict[str, str] = Field(default_factory=dict)  # template type -> template name

    def to_payload(self) -> dict:
        """JSON body as the service expects it; templates only when chosen."""
        payload = self.model_dump(exclude={"templates"})
        if self.templates:
            payload["templates"] = dict(self.templates)
        return payload


class GenerateResponse(BaseModel):
    """generated files keyed by template type (stub, implementation, graph, ...)."""

    files: dict[str, str] = Field(default_factory=dict)
    error: str | None = None


class TemplateInfo(BaseModel):
    """a template the service can render."""

    name: str
    path: str = ""
    language: str
    template_type: str
    content: str = ""
