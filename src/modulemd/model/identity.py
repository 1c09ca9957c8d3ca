"""Canonical string identities for module streams.

Two encodings exist:

NSVC (legacy)
    ``module:stream:version[:context]``. The version is always rendered
    (``0`` when unset). There is no identity without a stream name.

NSVCA
    ``module[:stream[:version[:context[:arch]]]]`` truncated after the last
    *present* field. Fields before it that are absent render as empty
    strings, so a stream with only an arch set encodes as ``m::::x86_64``.
    A version of 0 counts as absent.
"""

from __future__ import annotations

from typing import Protocol


class StreamIdentity(Protocol):
    """The identity fields shared by every stream variant."""

    module_name: str | None
    stream_name: str | None
    version: int
    context: str | None
    arch: str | None


def nsvc(stream: StreamIdentity) -> str | None:
    """Encode a stream's legacy NSVC identity.

    Args:
        stream: Any object carrying the identity fields.

    Returns:
        The NSVC string, or None without a module or stream name.

    Example:
        >>> nsvc(ModuleStreamV2("m", "s", version=42))
        'm:s:42'
    """
    if not stream.module_name or not stream.stream_name:
        return None

    result = f"{stream.module_name}:{stream.stream_name}:{stream.version}"
    if stream.context:
        result = f"{result}:{stream.context}"
    return result


def nsvca(stream: StreamIdentity) -> str | None:
    """Encode a stream's NSVCA identity.

    Args:
        stream: Any object carrying the identity fields.

    Returns:
        The NSVCA string, or None without a module name.

    Example:
        >>> nsvca(ModuleStreamV2("m", None, arch="x86_64"))
        'm::::x86_64'
    """
    if not stream.module_name:
        return None

    fields = [
        stream.stream_name or None,
        str(stream.version) if stream.version else None,
        stream.context or None,
        stream.arch or None,
    ]

    last = -1
    for i, value in enumerate(fields):
        if value is not None:
            last = i

    if last < 0:
        return stream.module_name

    parts = [value or "" for value in fields[: last + 1]]
    return ":".join([stream.module_name, *parts])


def identity_key(stream: StreamIdentity) -> tuple[str, str, int, str, str]:
    """Sort key ordering streams by module, stream, version, context, arch."""
    return (
        stream.module_name or "",
        stream.stream_name or "",
        stream.version,
        stream.context or "",
        stream.arch or "",
    )
