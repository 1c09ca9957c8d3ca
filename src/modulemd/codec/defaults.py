"""YAML codec for ``document: modulemd-defaults`` documents."""

from __future__ import annotations

from loguru import logger

from ..core.exceptions import EmitError, MdVersionError, ParseError, ValidationError
from ..core.types import DefaultsVersion, DocumentType
from ..model.defaults import Defaults, DefaultsV1
from .documents import SubdocumentInfo
from .emitter import Emitter
from .nodes import iter_mapping, line_of, read_string, read_string_set, read_uint64, unknown_key


def parse_defaults(subdoc: SubdocumentInfo, strict: bool = False) -> Defaults:
    """Build a Defaults object from a ``modulemd-defaults`` sub-document.

    Raises:
        ParseError: If the document is malformed or names no module.
        ValidationError: If the defaults are inconsistent, or on unknown
            keys in strict mode.
    """
    if subdoc.error is not None:
        raise subdoc.error
    if subdoc.doctype is not DocumentType.DEFAULTS or subdoc.data is None:
        raise ParseError(f"Document {subdoc.index} is not a defaults document")
    if subdoc.mdversion != DefaultsVersion.ONE:
        raise MdVersionError(f"Unsupported defaults mdversion: {subdoc.mdversion}")

    module_name: str | None = None
    modified = 0
    default_stream: str | None = None
    profiles: dict[str, set[str]] = {}

    for key, value in iter_mapping(subdoc.data, "defaults data"):
        if key == "module":
            module_name = read_string(value, "module")
        elif key == "modified":
            modified = read_uint64(value, "modified")
        elif key == "stream":
            default_stream = read_string(value, "stream")
        elif key == "profiles":
            for stream_name, profile_node in iter_mapping(value, "profiles"):
                profiles[stream_name] = read_string_set(profile_node, f"profiles.{stream_name}")
        else:
            unknown_key(key, value, "defaults data", strict)

    if not module_name:
        raise ParseError("Defaults document is missing the module name", line_of(subdoc.data))

    defaults = DefaultsV1(
        module_name=module_name,
        modified=modified,
        default_stream=default_stream,
        profile_defaults=profiles,
    )
    defaults.validate()
    logger.debug(f"Parsed defaults for module {module_name}")
    return defaults


def emit_defaults(defaults: Defaults, emitter: Emitter) -> None:
    """Append one ``modulemd-defaults`` document to ``emitter``."""
    try:
        defaults.validate()
    except ValidationError as e:
        raise EmitError(f"Refusing to emit invalid defaults: {e}") from e

    emitter.start_document()
    emitter.start_mapping()
    emitter.key_value("document", DocumentType.DEFAULTS.value)
    emitter.key_value("version", int(defaults.mdversion))
    emitter.scalar("data")
    emitter.start_mapping()

    emitter.key_value("module", defaults.module_name)
    if defaults.modified:
        emitter.key_value("modified", defaults.modified)
    emitter.key_value("stream", defaults.default_stream)
    if defaults.profile_defaults:
        emitter.scalar("profiles")
        emitter.start_mapping()
        for stream_name in defaults.get_streams_with_default_profiles():
            emitter.key_string_set(stream_name, defaults.profile_defaults[stream_name], flow=True)
        emitter.end_mapping()

    emitter.end_mapping()
    emitter.end_mapping()
    emitter.end_document()
