"""Per-module default stream and profile selection."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.exceptions import ContractViolation, ValidationError
from ..core.types import DefaultsVersion


@dataclass
class DefaultsV1:
    """Version 1 defaults document for a single module.

    Attributes:
        module_name: Module these defaults apply to.
        modified: Last-modified stamp (YYYYMMDDHHMM); newer wins on merge.
        default_stream: Stream selected when the user names none.
        profile_defaults: Stream name -> profiles installed by default.
    """

    module_name: str
    modified: int = 0
    default_stream: str | None = None
    profile_defaults: dict[str, set[str]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.module_name:
            raise ContractViolation("Defaults require a module name")

    @property
    def mdversion(self) -> DefaultsVersion:
        return DefaultsVersion.ONE

    def add_default_profile_for_stream(self, stream_name: str, profile_name: str) -> None:
        self.profile_defaults.setdefault(stream_name, set()).add(profile_name)

    def set_empty_default_profiles_for_stream(self, stream_name: str) -> None:
        """Declare that ``stream_name`` installs no profile by default."""
        self.profile_defaults[stream_name] = set()

    def remove_profiles_for_stream(self, stream_name: str) -> None:
        self.profile_defaults.pop(stream_name, None)

    def get_default_profiles_for_stream(self, stream_name: str) -> list[str] | None:
        """Sorted default profiles for ``stream_name``, or None if unspecified."""
        profiles = self.profile_defaults.get(stream_name)
        return None if profiles is None else sorted(profiles)

    def get_streams_with_default_profiles(self) -> list[str]:
        return sorted(self.profile_defaults)

    def validate(self) -> None:
        """Check the document for internal consistency.

        Raises:
            ValidationError: If a profile set names an empty stream.
        """
        for stream_name in self.profile_defaults:
            if not stream_name:
                raise ValidationError(
                    f"Defaults for module '{self.module_name}' list profiles "
                    "for an empty stream name"
                )

    def copy(self) -> DefaultsV1:
        return DefaultsV1(
            module_name=self.module_name,
            modified=self.modified,
            default_stream=self.default_stream,
            profile_defaults={k: set(v) for k, v in self.profile_defaults.items()},
        )


Defaults = DefaultsV1
