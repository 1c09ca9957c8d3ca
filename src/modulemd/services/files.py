"""File and string entry points.

These are the only I/O-shaped functions in the package: everything else
works on in-memory text and objects.
"""

from __future__ import annotations

from pathlib import Path
from typing import IO

from loguru import logger

from ..codec.documents import parse_subdocuments
from ..codec.streams import parse_stream
from ..core.exceptions import ParseError, ValidationError
from ..core.types import DocumentType
from ..index.module_index import ModuleIndex, SubdocumentFailure
from ..model.stream import ModuleStream


def read_stream_string(
    text: str,
    strict: bool = False,
    module_name: str | None = None,
    stream_name: str | None = None,
) -> ModuleStream:
    """Parse a single module stream document from ``text``.

    Args:
        text: YAML holding exactly one ``modulemd`` document.
        strict: Reject unknown keys.
        module_name: Name to use when the document does not set one.
        stream_name: Stream name to use when the document does not set one.

    Raises:
        ParseError: If the text is not exactly one module stream document.
        ValidationError: If the stream is invalid.
    """
    subdocs = list(parse_subdocuments(text))
    if len(subdocs) != 1:
        raise ParseError(f"Expected exactly one document, found {len(subdocs)}")

    subdoc = subdocs[0]
    if subdoc.error is not None:
        raise subdoc.error
    if subdoc.doctype is not DocumentType.MODULESTREAM:
        raise ValidationError(f"Expected a modulemd document, found {subdoc.doctype.value}")

    stream = parse_stream(subdoc, strict)
    if stream.module_name is None:
        stream.module_name = module_name
    if stream.stream_name is None:
        stream.stream_name = stream_name
    return stream


def read_stream(
    source: str | Path | IO[str],
    strict: bool = False,
    module_name: str | None = None,
    stream_name: str | None = None,
) -> ModuleStream:
    """Parse a single module stream document from a path or an open text stream.

    The module and stream names, whether read or filled in from the
    arguments, are available as ``module_name`` and ``stream_name`` on the
    returned stream. See read_stream_string for the other arguments.
    """
    if isinstance(source, (str, Path)):
        logger.debug(f"Reading module stream from {source}")
        text = Path(source).read_text(encoding="utf-8")
    else:
        text = source.read()
    return read_stream_string(text, strict, module_name, stream_name)


def read_index(
    path: str | Path, strict: bool = False
) -> tuple[ModuleIndex, list[SubdocumentFailure]]:
    """Load every document in a file into a new index.

    Returns:
        The index and the documents that failed to load.
    """
    index = ModuleIndex()
    failures = index.update_from_file(path, strict)
    return index, failures


def write_index(index: ModuleIndex, destination: str | Path | IO[str]) -> None:
    """Write ``index`` as canonical YAML to a path or an open text stream."""
    if isinstance(destination, (str, Path)):
        index.dump_to_file(destination)
    else:
        index.dump_to_stream(destination)
