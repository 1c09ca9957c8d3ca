"""Module stream object model.

A module stream is one build of one stream of a module. Two schema
versions exist and are modelled as independent dataclasses:

- ``ModuleStreamV1``: single buildtime/runtime requirement maps
  (module name -> one stream name).
- ``ModuleStreamV2``: an ordered list of ``Dependencies`` alternatives,
  component ``buildafter`` ordering and an rpm-map of structured artifacts.

``ModuleStream`` is the union of the two. Equality is the generated
dataclass equality: same variant and every field equal, with sets compared
as sets and the dependency list compared in order.

Example:
    stream = new_module_stream(2, "foo", "latest")
    stream.version = 42
    stream.context = "c0ffee43"
    stream.get_NSVCA_as_string()
    # "foo:latest:42:c0ffee43"
"""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field
from typing import ClassVar, Union

from ..core.exceptions import ContractViolation, ValidationError
from ..core.types import GenericValue, ModuleStreamVersion
from .buildorder import validate_buildorder
from .components import ComponentModule, ComponentRpm
from .dependencies import Dependencies
from .identity import nsvc, nsvca
from .profile import BuildOpts, Profile, RpmMapEntry, ServiceLevel
from .translation import Translation, TranslationEntry


class _StreamCommon:
    """Behaviour shared by every stream variant.

    Holds no fields; each variant dataclass declares its own.
    """

    MDVERSION: ClassVar[ModuleStreamVersion]

    @property
    def mdversion(self) -> ModuleStreamVersion:
        return self.MDVERSION

    # -- identity --------------------------------------------------------

    def get_nsvc_as_string(self) -> str | None:
        """Legacy ``module:stream:version[:context]`` identity."""
        return nsvc(self)

    def get_NSVCA_as_string(self) -> str | None:
        """``module:stream:version:context:arch`` identity, truncated."""
        return nsvca(self)

    # -- translations ----------------------------------------------------

    def associate_translation(self, translation: Translation | None) -> None:
        """Attach the translation overlay for this stream's name."""
        self._translation = translation

    def get_translation(self) -> Translation | None:
        return self._translation

    def _translation_entry(self, locale: str | None) -> TranslationEntry | None:
        if not locale or self._translation is None:
            return None
        return self._translation.get_translation_entry(locale)

    def get_summary(self, locale: str | None = None) -> str | None:
        """Get the summary, translated into ``locale`` when available."""
        entry = self._translation_entry(locale)
        if entry is not None and entry.summary is not None:
            return entry.summary
        return self.summary

    def get_description(self, locale: str | None = None) -> str | None:
        """Get the description, translated into ``locale`` when available."""
        entry = self._translation_entry(locale)
        if entry is not None and entry.description is not None:
            return entry.description
        return self.description

    def get_profile_description(
        self, profile_name: str, locale: str | None = None
    ) -> str | None:
        """Get a profile's description, translated when available."""
        entry = self._translation_entry(locale)
        if entry is not None and profile_name in entry.profile_descriptions:
            return entry.profile_descriptions[profile_name]
        profile = self.profiles.get(profile_name)
        return profile.description if profile else None

    # -- collections -----------------------------------------------------

    def add_profile(self, profile: Profile) -> None:
        self.profiles[profile.name] = _copy.deepcopy(profile)

    def add_servicelevel(self, servicelevel: ServiceLevel) -> None:
        self.servicelevels[servicelevel.name] = _copy.deepcopy(servicelevel)

    def add_component(self, component: ComponentRpm | ComponentModule) -> None:
        if isinstance(component, ComponentRpm):
            self.rpm_components[component.key] = _copy.deepcopy(component)
        else:
            self.module_components[component.key] = _copy.deepcopy(component)

    # -- whole-object operations -----------------------------------------

    def copy(self, module_name: str | None = None, stream_name: str | None = None):
        """Deep-copy the stream, optionally renaming it.

        The attached translation is shared with the copy, not duplicated.

        Args:
            module_name: New module name; keeps the current one if None.
            stream_name: New stream name; keeps the current one if None.
        """
        memo = {id(self._translation): self._translation}
        duplicate = _copy.deepcopy(self, memo)
        if module_name is not None:
            duplicate.module_name = module_name
        if stream_name is not None:
            duplicate.stream_name = stream_name
        return duplicate

    def _validate_common(self) -> None:
        label = self.get_NSVCA_as_string() or "<unnamed>"
        if not self.summary:
            raise ValidationError(f"Module stream '{label}' is missing a summary")
        if not self.description:
            raise ValidationError(f"Module stream '{label}' is missing a description")
        if not self.module_licenses:
            raise ValidationError(f"Module stream '{label}' is missing a module license")
        for key, component in self.rpm_components.items():
            if component.key != key:
                raise ValidationError(
                    f"Component key '{component.key}' stored under '{key}'"
                )
        for key, profile in self.profiles.items():
            if profile.name != key:
                raise ValidationError(f"Profile '{profile.name}' stored under '{key}'")
        validate_buildorder(self.rpm_components, self.module_components)


@dataclass
class ModuleStreamV1(_StreamCommon):
    """A module stream described with the version 1 schema."""

    MDVERSION: ClassVar[ModuleStreamVersion] = ModuleStreamVersion.ONE

    module_name: str | None = None
    stream_name: str | None = None
    version: int = 0
    context: str | None = None
    arch: str | None = None

    summary: str | None = None
    description: str | None = None
    community: str | None = None
    documentation: str | None = None
    tracker: str | None = None
    servicelevels: dict[str, ServiceLevel] = field(default_factory=dict)
    module_licenses: set[str] = field(default_factory=set)
    content_licenses: set[str] = field(default_factory=set)
    xmd: GenericValue = None
    buildtime_requires: dict[str, str] = field(default_factory=dict)
    runtime_requires: dict[str, str] = field(default_factory=dict)
    profiles: dict[str, Profile] = field(default_factory=dict)
    rpm_api: set[str] = field(default_factory=set)
    rpm_filters: set[str] = field(default_factory=set)
    buildopts: BuildOpts | None = None
    rpm_components: dict[str, ComponentRpm] = field(default_factory=dict)
    module_components: dict[str, ComponentModule] = field(default_factory=dict)
    rpm_artifacts: set[str] = field(default_factory=set)

    _translation: Translation | None = field(default=None, compare=False, repr=False)

    def add_buildtime_requirement(self, module_name: str, module_stream: str) -> None:
        self.buildtime_requires[module_name] = module_stream

    def add_runtime_requirement(self, module_name: str, module_stream: str) -> None:
        self.runtime_requires[module_name] = module_stream

    def get_buildtime_modules(self) -> list[str]:
        return sorted(self.buildtime_requires)

    def get_runtime_modules(self) -> list[str]:
        return sorted(self.runtime_requires)

    def get_buildtime_requirement_stream(self, module_name: str) -> str | None:
        return self.buildtime_requires.get(module_name)

    def get_runtime_requirement_stream(self, module_name: str) -> str | None:
        return self.runtime_requires.get(module_name)

    def depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        """Whether the stream requires ``module_name:stream_name`` at run time."""
        return self.runtime_requires.get(module_name) == stream_name

    def build_depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        """Whether the stream requires ``module_name:stream_name`` to build."""
        return self.buildtime_requires.get(module_name) == stream_name

    def validate(self) -> None:
        """Check required fields and cross-field rules.

        Raises:
            ValidationError: On the first violation found.
        """
        self._validate_common()
        for component in self.rpm_components.values():
            if component.buildafter or component.buildonly or component.name:
                raise ValidationError(
                    f"Component '{component.key}' uses fields that require mdversion 2"
                )
        for module in self.module_components.values():
            if module.buildafter:
                raise ValidationError(
                    f"Module component '{module.key}' uses buildafter, which requires mdversion 2"
                )
        if self.buildopts is not None and self.buildopts.rpm_whitelist:
            raise ValidationError("buildopts whitelist requires mdversion 2")


@dataclass
class ModuleStreamV2(_StreamCommon):
    """A module stream described with the version 2 schema."""

    MDVERSION: ClassVar[ModuleStreamVersion] = ModuleStreamVersion.TWO

    module_name: str | None = None
    stream_name: str | None = None
    version: int = 0
    context: str | None = None
    arch: str | None = None

    summary: str | None = None
    description: str | None = None
    community: str | None = None
    documentation: str | None = None
    tracker: str | None = None
    servicelevels: dict[str, ServiceLevel] = field(default_factory=dict)
    module_licenses: set[str] = field(default_factory=set)
    content_licenses: set[str] = field(default_factory=set)
    xmd: GenericValue = None
    dependencies: list[Dependencies] = field(default_factory=list)
    profiles: dict[str, Profile] = field(default_factory=dict)
    rpm_api: set[str] = field(default_factory=set)
    rpm_filters: set[str] = field(default_factory=set)
    buildopts: BuildOpts | None = None
    rpm_components: dict[str, ComponentRpm] = field(default_factory=dict)
    module_components: dict[str, ComponentModule] = field(default_factory=dict)
    rpm_artifacts: set[str] = field(default_factory=set)
    rpm_artifact_map: dict[str, dict[str, RpmMapEntry]] = field(default_factory=dict)

    _translation: Translation | None = field(default=None, compare=False, repr=False)

    def add_dependencies(self, deps: Dependencies) -> None:
        """Append a copy of ``deps`` as a new requirement alternative."""
        self.dependencies.append(_copy.deepcopy(deps))

    def clear_dependencies(self) -> None:
        self.dependencies.clear()

    def set_rpm_artifact_map_entry(
        self, entry: RpmMapEntry, digest_type: str, digest: str
    ) -> None:
        self.rpm_artifact_map.setdefault(digest_type, {})[digest] = _copy.deepcopy(entry)

    def get_rpm_artifact_map_entry(
        self, digest_type: str, digest: str
    ) -> RpmMapEntry | None:
        return self.rpm_artifact_map.get(digest_type, {}).get(digest)

    def depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        """Whether any requirement set lists ``stream_name`` for ``module_name``.

        Stream tokens are compared literally; negated tokens are not expanded.
        """
        return any(
            deps.requires_module_and_stream(module_name, stream_name)
            for deps in self.dependencies
        )

    def build_depends_on_stream(self, module_name: str, stream_name: str) -> bool:
        """Whether any requirement set build-requires ``module_name:stream_name``."""
        return any(
            deps.buildrequires_module_and_stream(module_name, stream_name)
            for deps in self.dependencies
        )

    def validate(self) -> None:
        """Check required fields and cross-field rules.

        Raises:
            ValidationError: On the first violation found.
        """
        self._validate_common()
        for digest_type, entries in self.rpm_artifact_map.items():
            for digest, entry in entries.items():
                if not (entry.name and entry.version and entry.release and entry.arch):
                    raise ValidationError(
                        f"rpm-map entry {digest_type}:{digest} is incomplete"
                    )


ModuleStream = Union[ModuleStreamV1, ModuleStreamV2]

_VARIANTS: dict[int, type] = {
    ModuleStreamVersion.ONE: ModuleStreamV1,
    ModuleStreamVersion.TWO: ModuleStreamV2,
}


def new_module_stream(
    mdversion: int,
    module_name: str | None = None,
    stream_name: str | None = None,
    *,
    fatal: bool = True,
) -> ModuleStream | None:
    """Create an empty stream of the requested schema version.

    Args:
        mdversion: 1 or 2.
        module_name: Optional module name.
        stream_name: Optional stream name.
        fatal: Raise on an unknown mdversion (default). When False, return
            None instead.

    Returns:
        A ModuleStreamV1 or ModuleStreamV2.

    Raises:
        ContractViolation: If mdversion is not 1 or 2 and ``fatal`` is True.
    """
    cls = _VARIANTS.get(mdversion)
    if cls is None:
        if fatal:
            raise ContractViolation(f"Unknown module stream mdversion: {mdversion}")
        return None
    return cls(module_name=module_name, stream_name=stream_name)
