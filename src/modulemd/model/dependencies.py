"""V2 requirement sets.

A ``Dependencies`` object is one alternative in a stream's dependency list.
It maps each required module name to the set of acceptable stream tokens.
A token prefixed with ``-`` means "any stream except this one". An empty
set means "any stream".
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Dependencies:
    """One requirement set of a V2 module stream.

    Attributes:
        buildrequires: Module name -> stream tokens needed at build time.
        requires: Module name -> stream tokens needed at run time.
    """

    buildrequires: dict[str, set[str]] = field(default_factory=dict)
    requires: dict[str, set[str]] = field(default_factory=dict)

    def add_buildtime_stream(self, module_name: str, module_stream: str) -> None:
        self.buildrequires.setdefault(module_name, set()).add(module_stream)

    def add_runtime_stream(self, module_name: str, module_stream: str) -> None:
        self.requires.setdefault(module_name, set()).add(module_stream)

    def set_empty_buildtime_dependencies_for_module(self, module_name: str) -> None:
        """Require ``module_name`` at build time with any stream."""
        self.buildrequires[module_name] = set()

    def set_empty_runtime_dependencies_for_module(self, module_name: str) -> None:
        """Require ``module_name`` at run time with any stream."""
        self.requires[module_name] = set()

    def get_buildtime_modules(self) -> list[str]:
        return sorted(self.buildrequires)

    def get_runtime_modules(self) -> list[str]:
        return sorted(self.requires)

    def get_buildtime_streams(self, module_name: str) -> list[str] | None:
        """Sorted stream tokens for ``module_name``, or None if not required."""
        streams = self.buildrequires.get(module_name)
        return None if streams is None else sorted(streams)

    def get_runtime_streams(self, module_name: str) -> list[str] | None:
        """Sorted stream tokens for ``module_name``, or None if not required."""
        streams = self.requires.get(module_name)
        return None if streams is None else sorted(streams)

    # TODO: expand negated ("-stream") tokens once callers can supply the set
    # of known streams for a module; today membership is a literal token match.
    def requires_module_and_stream(self, module_name: str, module_stream: str) -> bool:
        return module_stream in self.requires.get(module_name, ())

    def buildrequires_module_and_stream(
        self, module_name: str, module_stream: str
    ) -> bool:
        return module_stream in self.buildrequires.get(module_name, ())
