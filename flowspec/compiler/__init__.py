"""Graph <-> specification compiler."""

from flowspec.compiler.decoder import DecodedSpec, decode_spec, parse_spec
from flowspec.compiler.encoder import build_spec_document, encode_spec, render_spec
from flowspec.compiler.grouping import LabelGroupingEngine, is_generic_label
from flowspec.compiler.layout import place_steps

__all__ = [
    "DecodedSpec",
    "decode_spec",
    "parse_spec",
    "build_spec_document",
    "encode_spec",
    "render_spec",
    "LabelGroupingEngine",
    "is_generic_label",
    "place_steps",
]
