"""Reading, writing, querying and merging modulemd metadata.

The package logs through loguru but is silent by default; call
``logger.enable("modulemd")`` to see its diagnostics.

Example:
    from modulemd import ModuleIndex

    index = ModuleIndex()
    failures = index.update_from_file("modules.yaml")
    nodejs = index.get_module("nodejs")
    nodejs.get_stream_by_NSVCA("10", 20181101171344, "6c81f848", "x86_64")
"""

from loguru import logger

from .core import (
    BuildOrderError,
    Config,
    ContractViolation,
    DefaultsVersion,
    DocumentType,
    EmitError,
    MdVersionError,
    MergeConflictError,
    ModulemdError,
    ModuleStreamVersion,
    NoMatchesError,
    ParseError,
    TooManyMatchesError,
    ValidationError,
)
from .index import Module, ModuleIndex, ModuleIndexMerger, SubdocumentFailure
from .model import (
    BuildOpts,
    ComponentModule,
    ComponentRpm,
    Defaults,
    DefaultsV1,
    Dependencies,
    ModuleStream,
    ModuleStreamV1,
    ModuleStreamV2,
    Profile,
    RpmMapEntry,
    ServiceLevel,
    Translation,
    TranslationEntry,
    new_module_stream,
)
from .services import read_index, read_stream, read_stream_string, write_index

logger.disable("modulemd")

__version__ = "2.0.0"

__all__ = [
    "BuildOpts",
    "BuildOrderError",
    "ComponentModule",
    "ComponentRpm",
    "Config",
    "ContractViolation",
    "Defaults",
    "DefaultsV1",
    "DefaultsVersion",
    "Dependencies",
    "DocumentType",
    "EmitError",
    "MdVersionError",
    "MergeConflictError",
    "Module",
    "ModuleIndex",
    "ModuleIndexMerger",
    "ModuleStream",
    "ModuleStreamV1",
    "ModuleStreamV2",
    "ModuleStreamVersion",
    "ModulemdError",
    "NoMatchesError",
    "ParseError",
    "Profile",
    "RpmMapEntry",
    "ServiceLevel",
    "SubdocumentFailure",
    "TooManyMatchesError",
    "Translation",
    "TranslationEntry",
    "ValidationError",
    "new_module_stream",
    "read_index",
    "read_stream",
    "read_stream_string",
    "write_index",
]
