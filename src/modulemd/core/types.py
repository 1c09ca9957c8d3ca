"""Type definitions for modulemd."""

from enum import Enum, IntEnum
from typing import Union

# Free-form metadata (xmd) value: scalars, lists and mappings, nested freely.
GenericValue = Union[
    str, int, float, bool, None, list["GenericValue"], dict[str, "GenericValue"]
]


class ModuleStreamVersion(IntEnum):
    """Schema version of a module stream document."""

    UNSET = 0
    ONE = 1
    TWO = 2

    @classmethod
    def latest(cls) -> "ModuleStreamVersion":
        """Most recent stream schema version."""
        return cls.TWO


class DefaultsVersion(IntEnum):
    """Schema version of a defaults document."""

    UNSET = 0
    ONE = 1

    @classmethod
    def latest(cls) -> "DefaultsVersion":
        """Most recent defaults schema version."""
        return cls.ONE


class DocumentType(Enum):
    """Value of the top-level ``document`` key."""

    MODULESTREAM = "modulemd"
    DEFAULTS = "modulemd-defaults"
    TRANSLATIONS = "modulemd-translations"
