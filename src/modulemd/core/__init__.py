"""Core types, errors and configuration for modulemd."""

from .config import Config
from .exceptions import (
    BuildOrderError,
    ContractViolation,
    EmitError,
    MdVersionError,
    MergeConflictError,
    ModulemdError,
    NoMatchesError,
    ParseError,
    TooManyMatchesError,
    ValidationError,
)
from .types import DefaultsVersion, DocumentType, GenericValue, ModuleStreamVersion

__all__ = [
    "Config",
    "ContractViolation",
    "ModulemdError",
    "ParseError",
    "ValidationError",
    "MdVersionError",
    "BuildOrderError",
    "NoMatchesError",
    "TooManyMatchesError",
    "MergeConflictError",
    "EmitError",
    "GenericValue",
    "ModuleStreamVersion",
    "DefaultsVersion",
    "DocumentType",
]
