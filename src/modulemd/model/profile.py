"""Profiles, service levels, build options and rpm-map entries."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field


@dataclass
class Profile:
    """A named set of packages installed together.

    Attributes:
        name: Profile name.
        description: Human-readable description.
        rpms: Package names installed by this profile.
    """

    name: str
    description: str | None = None
    rpms: set[str] = field(default_factory=set)


@dataclass
class ServiceLevel:
    """A support commitment with an optional end-of-life date."""

    name: str
    eol: datetime.date | None = None


@dataclass
class BuildOpts:
    """Build-time options for the stream's RPM components.

    Attributes:
        rpm_macros: Extra RPM macros, one definition per line.
        rpm_whitelist: Binary package names allowed to be produced (V2 only).
    """

    rpm_macros: str | None = None
    rpm_whitelist: set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        return self.rpm_macros is None and not self.rpm_whitelist


@dataclass
class RpmMapEntry:
    """Structured NEVRA of one built artifact (V2 rpm-map)."""

    name: str
    epoch: int
    version: str
    release: str
    arch: str

    @property
    def nevra(self) -> str:
        """The ``name-epoch:version-release.arch`` string."""
        return f"{self.name}-{self.epoch}:{self.version}-{self.release}.{self.arch}"
