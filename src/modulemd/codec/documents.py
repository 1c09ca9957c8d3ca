"""Splitting a YAML stream into typed sub-documents.

Every document in a modulemd stream is a mapping with three keys::

    document: modulemd | modulemd-defaults | modulemd-translations
    version: <integer schema version>
    data: <schema-specific mapping>

``parse_subdocuments`` reads the envelope of each document and hands back
the ``data`` node untouched so the matching codec can interpret it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

import yaml

from ..core.exceptions import ModulemdError, ParseError
from ..core.types import DocumentType
from .nodes import iter_mapping, line_of, read_string, read_uint64


@dataclass
class SubdocumentInfo:
    """One document from a YAML stream.

    Attributes:
        index: 0-based position of the document in the stream.
        doctype: Declared document type (None if it could not be read).
        mdversion: Declared schema version (0 if it could not be read).
        data: The ``data`` mapping node, ready for a codec.
        yaml_text: Source text of the document, when available.
        error: Why the envelope could not be read, if it could not.
    """

    index: int
    doctype: DocumentType | None = None
    mdversion: int = 0
    data: yaml.Node | None = None
    yaml_text: str | None = None
    error: ModulemdError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_subdocuments(text: str) -> Iterator[SubdocumentInfo]:
    """Yield one SubdocumentInfo per document in ``text``.

    Envelope problems are reported on the SubdocumentInfo and do not stop
    iteration. A YAML syntax error does: the tokenizer cannot resynchronize,
    so a final failed SubdocumentInfo is yielded and iteration ends.

    Args:
        text: Multi-document YAML text.
    """
    loader = yaml.SafeLoader(text)
    index = 0
    try:
        while True:
            try:
                if not loader.check_node():
                    break
                node = loader.get_node()
            except yaml.YAMLError as e:
                mark = getattr(e, "problem_mark", None)
                yield SubdocumentInfo(
                    index=index,
                    error=ParseError(
                        f"Invalid YAML in document {index}: {getattr(e, 'problem', e)}",
                        mark.line + 1 if mark is not None else None,
                    ),
                )
                return

            info = SubdocumentInfo(
                index=index,
                yaml_text=text[node.start_mark.index : node.end_mark.index],
            )
            try:
                _read_envelope(node, info)
            except ModulemdError as e:
                info.error = e
            yield info
            index += 1
    finally:
        loader.dispose()


def _read_envelope(node: yaml.Node, info: SubdocumentInfo) -> None:
    doctype: DocumentType | None = None
    mdversion: int | None = None
    data: yaml.Node | None = None

    for key, value in iter_mapping(node, "document root"):
        if key == "document":
            name = read_string(value, "document")
            try:
                doctype = DocumentType(name)
            except ValueError:
                raise ParseError(f"Unknown document type '{name}'", line_of(value))
        elif key == "version":
            mdversion = read_uint64(value, "version")
        elif key == "data":
            data = value
        else:
            raise ParseError(f"Unexpected key '{key}' in document root", line_of(value))

    if doctype is None:
        raise ParseError("Document is missing the 'document' key", line_of(node))
    info.doctype = doctype

    if mdversion is None:
        raise ParseError("Document is missing the 'version' key", line_of(node))
    info.mdversion = mdversion

    if data is None:
        raise ParseError("Document is missing the 'data' key", line_of(node))
    if not isinstance(data, yaml.MappingNode):
        raise ParseError("Document 'data' must be a mapping", line_of(data))
    info.data = data
