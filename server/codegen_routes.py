"""API routes proxying the langgraph-gen code generation service."""

import os

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from flowspec.models.codegen import GenerateRequest, TemplateInfo
from flowspec.models.spec_document import Language
from flowspec.sdk.codegen_client import DEFAULT_SERVER_URL, CodegenClient, CodegenError

router = APIRouter()


class GenerateCodeRequest(BaseModel):
    """request body for generating code from a specification."""

    spec: str
    language: Language = "python"
    skip: list[str] | None = None
    templates: dict[str, str] = Field(default_factory=dict)
    server_url: str | None = None


class GenerateCodeResponse(BaseModel):
    files: dict[str, str]


class TemplatesResponse(BaseModel):
    templates: list[TemplateInfo]


def get_client(server_url: str | None) -> CodegenClient:
    """client for the requested server, or the configured default."""
    return CodegenClient(server_url or os.getenv("CODEGEN_SERVER_URL", DEFAULT_SERVER_URL))


@router.post("/generate-code")
def generate_code(request: GenerateCodeRequest) -> GenerateCodeResponse:
    """generate code stubs for a specification."""
    client = get_client(request.server_url)
    try:
        result = client.generate(GenerateRequest(
            spec=request.spec,
            language=request.language,
            skip=request.skip or None,
            templates=request.templates,
        ))
    except CodegenError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return GenerateCodeResponse(files=result.files)


@router.get("/templates")
def list_templates(server_url: str | None = None) -> TemplatesResponse:
    """list the templates offered by the code generation service."""
    client = get_client(server_url)
    try:
        templates = client.list_templates()
    except CodegenError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return TemplatesResponse(templates=templates)
