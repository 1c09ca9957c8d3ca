"""Stream components: the RPMs and modules a stream is built from."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ComponentRpm:
    """An RPM package built as part of a module stream.

    Attributes:
        key: Name of the component within the stream (the mapping key).
        rationale: Why the component is part of the stream.
        name: Override for the real package name (V2 only).
        repository: SCM repository URL.
        cache: Lookaside cache URL.
        ref: SCM ref to build from.
        buildorder: Build batch number; 0 means unset.
        buildafter: Keys of components that must be built first (V2 only).
        buildonly: Built but not shipped (V2 only).
        arches: Architectures to build for; empty means all.
        multilib: Architectures to provide multilib packages for.
    """

    key: str
    rationale: str | None = None
    name: str | None = None
    repository: str | None = None
    cache: str | None = None
    ref: str | None = None
    buildorder: int = 0
    buildafter: set[str] = field(default_factory=set)
    buildonly: bool = False
    arches: set[str] = field(default_factory=set)
    multilib: set[str] = field(default_factory=set)


@dataclass
class ComponentModule:
    """Another module stream bundled into this one.

    Attributes:
        key: Name of the component within the stream.
        rationale: Why the component is part of the stream.
        repository: SCM repository URL.
        ref: SCM ref to build from.
        buildorder: Build batch number; 0 means unset.
        buildafter: Keys of components that must be built first (V2 only).
    """

    key: str
    rationale: str | None = None
    repository: str | None = None
    ref: str | None = None
    buildorder: int = 0
    buildafter: set[str] = field(default_factory=set)


Component = ComponentRpm | ComponentModule
