"""Module, ModuleIndex and the prioritized index merger."""

from .merger import ModuleIndexMerger
from .module import Module
from .module_index import ModuleIndex, SubdocumentFailure

__all__ = ["Module", "ModuleIndex", "ModuleIndexMerger", "SubdocumentFailure"]
