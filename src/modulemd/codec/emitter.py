"""Event-level YAML emission.

``Emitter`` collects PyYAML events and renders them with ``yaml.emit``.
Working at the event level keeps full control of key order and scalar
style, which is what makes the output canonical.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import IO

import yaml

from ..core.exceptions import EmitError
from ..core.types import GenericValue

FOLDED = ">"
LITERAL = "|"

_resolver = yaml.resolver.Resolver()
_STR_TAG = "tag:yaml.org,2002:str"


class Emitter:
    """Builder for a canonical multi-document YAML stream.

    Example:
        emitter = Emitter()
        emitter.start_stream()
        emitter.start_document()
        emitter.start_mapping()
        emitter.key_value("document", "modulemd")
        emitter.end_mapping()
        emitter.end_document()
        emitter.end_stream()
        emitter.to_string()
        # "---\\ndocument: modulemd\\n...\\n"
    """

    def __init__(self) -> None:
        self._events: list[yaml.Event] = []

    # -- structure -------------------------------------------------------

    def start_stream(self) -> None:
        self._events.append(yaml.StreamStartEvent())

    def end_stream(self) -> None:
        self._events.append(yaml.StreamEndEvent())

    def start_document(self) -> None:
        self._events.append(yaml.DocumentStartEvent(explicit=True))

    def end_document(self) -> None:
        self._events.append(yaml.DocumentEndEvent(explicit=True))

    def start_mapping(self, flow: bool = False) -> None:
        self._events.append(yaml.MappingStartEvent(None, None, True, flow_style=flow))

    def end_mapping(self) -> None:
        self._events.append(yaml.MappingEndEvent())

    def start_sequence(self, flow: bool = False) -> None:
        self._events.append(yaml.SequenceStartEvent(None, None, True, flow_style=flow))

    def end_sequence(self) -> None:
        self._events.append(yaml.SequenceEndEvent())

    # -- scalars ---------------------------------------------------------

    def scalar(self, value: str, style: str | None = None) -> None:
        """Emit a string scalar.

        Plain style is used unless ``style`` asks otherwise; the emitter
        falls back to quoting on its own when plain is not possible.
        """
        if value == "":
            style = "'"
        self._events.append(yaml.ScalarEvent(None, None, (True, True), value, style=style))

    def key_value(self, key: str, value: str | int | None, style: str | None = None) -> None:
        """Emit ``key: value``; nothing at all when value is None."""
        if value is None:
            return
        self.scalar(key)
        self.scalar(str(value), style)

    def key_string_list(self, key: str, values: Iterable[str], flow: bool = False) -> None:
        """Emit ``key`` followed by ``values`` as a sequence, in the given order."""
        self.scalar(key)
        self.start_sequence(flow)
        for value in values:
            self.scalar(value)
        self.end_sequence()

    def key_string_set(self, key: str, values: Iterable[str], flow: bool = False) -> None:
        """Emit ``key`` followed by the sorted ``values`` as a sequence."""
        self.key_string_list(key, sorted(values), flow)

    # -- free-form values ------------------------------------------------

    def generic(self, value: GenericValue) -> None:
        """Emit an arbitrary value with ordinary YAML typing (used for xmd).

        Mapping keys are sorted. Strings that would read back as another
        type (``"1"``, ``"true"``) are quoted.
        """
        try:
            node = yaml.representer.SafeRepresenter().represent_data(value)
        except yaml.YAMLError as e:
            raise EmitError(f"Cannot represent value {value!r}: {e}")
        self._emit_node(node)

    def _emit_node(self, node: yaml.Node) -> None:
        if isinstance(node, yaml.ScalarNode):
            implicit = (
                node.tag == _resolver.resolve(yaml.ScalarNode, node.value, (True, False)),
                node.tag == _resolver.resolve(yaml.ScalarNode, node.value, (False, True)),
            )
            style = node.style
            if node.tag == _STR_TAG and node.value == "":
                style = "'"
            self._events.append(
                yaml.ScalarEvent(None, node.tag, implicit, node.value, style=style)
            )
        elif isinstance(node, yaml.SequenceNode):
            self._events.append(
                yaml.SequenceStartEvent(None, node.tag, True, flow_style=False)
            )
            for item in node.value:
                self._emit_node(item)
            self._events.append(yaml.SequenceEndEvent())
        else:
            self._events.append(
                yaml.MappingStartEvent(None, node.tag, True, flow_style=False)
            )
            for key_node, value_node in node.value:
                self._emit_node(key_node)
                self._emit_node(value_node)
            self._events.append(yaml.MappingEndEvent())

    # -- output ----------------------------------------------------------

    def to_string(self) -> str:
        """Render all collected events as YAML text."""
        try:
            return yaml.emit(self._events, allow_unicode=True)
        except yaml.YAMLError as e:
            raise EmitError(f"YAML emission failed: {e}")

    def write(self, stream: IO[str]) -> None:
        try:
            yaml.emit(self._events, stream, allow_unicode=True)
        except yaml.YAMLError as e:
            raise EmitError(f"YAML emission failed: {e}")
