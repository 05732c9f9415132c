"""Client for the langgraph-gen code generation service.

The service turns a specification into code stubs:

    client = CodegenClient("http://localhost:8001")
    files = client.generate(GenerateRequest(spec=spec_text)).files
"""

from __future__ import annotations

import logging
import os

import httpx
from pydantic import ValidationError

from flowspec.models.codegen import GenerateRequest, GenerateResponse, TemplateInfo
from flowspec.models.spec_document import FILE_EXTENSIONS


logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = os.getenv("CODEGEN_SERVER_URL", "http://localhost:8001")


class CodegenError(Exception):
    """Exception raised when the code generation service fails."""
    pass


def normalize_base_url(url: str) -> str:
    """Strip trailing slashes and endpoint suffixes users tend to paste."""
    base = url.rstrip("/")
    for suffix in ("/generate", "/templates"):
        if base.endswith(suffix):
            base = base[: -len(suffix)]
    return base


def generated_filename(template_type: str, language: str) -> str:
    """File name of a generated template, e.g. stub.py or graph.ts."""
    return f"{template_type}{FILE_EXTENSIONS.get(language, '.py')}"


def organize_templates(templates: list[TemplateInfo]) -> dict[str, dict[str, list[str]]]:
    """Group template names by language, then by template type."""
    organized: dict[str, dict[str, list[str]]] = {"python": {}, "typescript": {}}
    for template in templates:
        by_type = organized.setdefault(template.language, {})
        by_type.setdefault(template.template_type, []).append(template.name)
    return organized


class CodegenClient:
    """Talk to a langgraph-gen server over HTTP."""

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Base URL of the generation server
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport, mainly for tests
        """
        self.base_url = normalize_base_url(base_url)
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Generate code files for a specification.

        Args:
            request: Specification text plus language and template choices

        Returns:
            The generated files keyed by template type

        Raises:
            CodegenError: if the server is unreachable or reports an error
        """
        url = f"{self.base_url}/generate"
        logger.info("requesting %s code generation from %s", request.language, url)

        try:
            with self._client() as client:
                response = client.post(url, json=request.to_payload())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise CodegenError(
                f"code generation failed with status {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise CodegenError(
                f"Failed to connect to server at {self.base_url}: {e}"
            ) from e
        except ValueError as e:
            raise CodegenError("server returned invalid JSON") from e

        if not isinstance(data, dict):
            raise CodegenError("unexpected response from code generation server")
        try:
            result = GenerateResponse.model_validate(data)
        except ValidationError as e:
            raise CodegenError("unexpected response from code generation server") from e
        if result.error:
            raise CodegenError(result.error)
        return result

    def list_templates(self) -> list[TemplateInfo]:
        """List the templates the server can render.

        Raises:
            CodegenError: if the server is unreachable or returns no list
        """
        url = f"{self.base_url}/templates"

        try:
            with self._client() as client:
                response = client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise CodegenError(
                f"template listing failed with status {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            raise CodegenError(
                f"Failed to connect to server at {self.base_url}: {e}"
            ) from e
        except ValueError as e:
            raise CodegenError("server returned invalid JSON") from e

        templates = data.get("templates") if isinstance(data, dict) else None
        if not isinstance(templates, list):
            raise CodegenError("No templates returned from server")
        try:
            return [TemplateInfo.model_validate(t) for t in templates]
        except ValidationError as e:
            raise CodegenError("server returned a malformed template entry") from e
