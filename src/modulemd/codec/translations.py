"""YAML codec for ``document: modulemd-translations`` documents."""

from __future__ import annotations

from loguru import logger

from ..core.exceptions import MdVersionError, ParseError
from ..core.types import DocumentType
from ..model.translation import Translation, TranslationEntry
from .documents import SubdocumentInfo
from .emitter import FOLDED, Emitter
from .nodes import iter_mapping, line_of, read_string, read_uint64, unknown_key

TRANSLATION_VERSION = 1


def parse_translation(subdoc: SubdocumentInfo, strict: bool = False) -> Translation:
    """Build a Translation from a ``modulemd-translations`` sub-document.

    Raises:
        ParseError: If the document is malformed or lacks module/stream.
        ValidationError: On unknown keys in strict mode.
    """
    if subdoc.error is not None:
        raise subdoc.error
    if subdoc.doctype is not DocumentType.TRANSLATIONS or subdoc.data is None:
        raise ParseError(f"Document {subdoc.index} is not a translations document")
    if subdoc.mdversion != TRANSLATION_VERSION:
        raise MdVersionError(f"Unsupported translations mdversion: {subdoc.mdversion}")

    module_name: str | None = None
    module_stream: str | None = None
    modified = 0
    entries: dict[str, TranslationEntry] = {}

    for key, value in iter_mapping(subdoc.data, "translations data"):
        if key == "module":
            module_name = read_string(value, "module")
        elif key == "stream":
            module_stream = read_string(value, "stream")
        elif key == "modified":
            modified = read_uint64(value, "modified")
        elif key == "translations":
            for locale, entry_node in iter_mapping(value, "translations"):
                entries[locale] = _parse_entry(locale, entry_node, strict)
        else:
            unknown_key(key, value, "translations data", strict)

    if not module_name or not module_stream:
        raise ParseError(
            "Translations document needs both module and stream", line_of(subdoc.data)
        )

    logger.debug(f"Parsed translations for {module_name}:{module_stream} ({len(entries)} locales)")
    return Translation(
        version=TRANSLATION_VERSION,
        module_name=module_name,
        module_stream=module_stream,
        modified=modified,
        entries=entries,
    )


def _parse_entry(locale: str, node, strict: bool) -> TranslationEntry:
    what = f"translation '{locale}'"
    entry = TranslationEntry(locale=locale)
    for key, value in iter_mapping(node, what):
        if key == "summary":
            entry.summary = read_string(value, "summary")
        elif key == "description":
            entry.description = read_string(value, "description")
        elif key == "profiles":
            for profile_name, text_node in iter_mapping(value, f"{what} profiles"):
                entry.profile_descriptions[profile_name] = read_string(text_node, profile_name)
        else:
            unknown_key(key, value, what, strict)
    return entry


def emit_translation(translation: Translation, emitter: Emitter) -> None:
    """Append one ``modulemd-translations`` document to ``emitter``."""
    emitter.start_document()
    emitter.start_mapping()
    emitter.key_value("document", DocumentType.TRANSLATIONS.value)
    emitter.key_value("version", translation.version)
    emitter.scalar("data")
    emitter.start_mapping()

    emitter.key_value("module", translation.module_name)
    emitter.key_value("stream", translation.module_stream)
    emitter.key_value("modified", translation.modified)
    emitter.scalar("translations")
    emitter.start_mapping()
    for locale in translation.get_locales():
        entry = translation.entries[locale]
        emitter.scalar(locale)
        emitter.start_mapping()
        emitter.key_value("summary", entry.summary)
        emitter.key_value("description", entry.description, FOLDED)
        if entry.profile_descriptions:
            emitter.scalar("profiles")
            emitter.start_mapping()
            for profile_name in sorted(entry.profile_descriptions):
                emitter.key_value(profile_name, entry.profile_descriptions[profile_name])
            emitter.end_mapping()
        emitter.end_mapping()
    emitter.end_mapping()

    emitter.end_mapping()
    emitter.end_mapping()
    emitter.end_document()
