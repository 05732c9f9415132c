"""API routes for encoding graphs to specifications and back."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from flowspec.compiler.decoder import decode_spec
from flowspec.compiler.encoder import encode_spec
from flowspec.errors import ParseError, StructuralInvariantViolation
from flowspec.models.graph_model import GraphModel
from flowspec.models.spec_document import Language, SpecConfig

router = APIRouter()


class EncodeRequest(BaseModel):
    """request body for encoding a graph."""

    graph: GraphModel
    config: SpecConfig = Field(default_factory=SpecConfig)
    language: Language | None = None  # header comment only


class EncodeResponse(BaseModel):
    spec: str


class DecodeRequest(BaseModel):
    """request body for decoding specification text."""

    spec: str


class DecodeResponse(BaseModel):
    graph: GraphModel
    config: SpecConfig
    unresolved: list[str]


@router.post("/spec/encode")
def encode(request: EncodeRequest) -> EncodeResponse:
    """encode a graph as specification text."""
    try:
        spec = encode_spec(request.graph, request.config, request.language)
    except StructuralInvariantViolation as e:
        raise HTTPException(status_code=400, detail=str(e))
    return EncodeResponse(spec=spec)


@router.post("/spec/decode")
def decode(request: DecodeRequest) -> DecodeResponse:
    """rebuild a graph from specification text.

    Edges naming unknown nodes are routed to the end node and listed in
    ``unresolved`` rather than failing the request.
    """
    try:
        decoded = decode_spec(request.spec)
    except ParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return DecodeResponse(
        graph=decoded.graph,
        config=decoded.config,
        unresolved=decoded.unresolved,
    )
