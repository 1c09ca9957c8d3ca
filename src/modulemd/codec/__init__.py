"""YAML reading and writing for modulemd documents."""

from .defaults import emit_defaults, parse_defaults
from .documents import SubdocumentInfo, parse_subdocuments
from .emitter import FOLDED, LITERAL, Emitter
from .streams import dump_stream, emit_stream, parse_stream
from .translations import emit_translation, parse_translation

__all__ = [
    "FOLDED",
    "LITERAL",
    "Emitter",
    "SubdocumentInfo",
    "dump_stream",
    "emit_defaults",
    "emit_stream",
    "emit_translation",
    "parse_defaults",
    "parse_stream",
    "parse_subdocuments",
    "parse_translation",
]

