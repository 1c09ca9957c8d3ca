"""A collection of modules loaded from one or more YAML sources."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Callable, TypeVar

from loguru import logger

from ..codec.defaults import emit_defaults, parse_defaults
from ..codec.documents import SubdocumentInfo, parse_subdocuments
from ..codec.emitter import Emitter
from ..codec.streams import emit_stream, parse_stream
from ..codec.translations import emit_translation, parse_translation
from ..core.exceptions import ModulemdError, ValidationError
from ..core.types import DefaultsVersion, DocumentType, ModuleStreamVersion
from ..model.defaults import Defaults
from ..model.identity import identity_key
from ..model.stream import ModuleStream
from ..model.translation import Translation
from .module import Module

T = TypeVar("T")


@dataclass
class SubdocumentFailure:
    """A document that could not be loaded into an index.

    Attributes:
        index: 0-based position of the document in its source.
        doctype: Declared document type, if it could be read.
        yaml_text: Source text of the failing document, when recoverable.
        error: The parse, validation or routing error.
    """

    index: int
    doctype: DocumentType | None
    yaml_text: str | None
    error: ModulemdError

    def __str__(self) -> str:
        kind = self.doctype.value if self.doctype else "unknown"
        return f"document {self.index} ({kind}): {self.error}"


class ModuleIndex:
    """Mapping of module name to Module.

    Modules are created on first use. Loading from text never stops at a
    bad document: each failure is returned and the remaining documents are
    still added.
    """

    def __init__(self) -> None:
        self._modules: dict[str, Module] = {}

    def __repr__(self) -> str:
        return f"ModuleIndex(modules={self.get_module_names()})"

    # -- loading ---------------------------------------------------------

    def update_from_string(self, text: str, strict: bool = False) -> list[SubdocumentFailure]:
        """Add every document in ``text`` to the index.

        Args:
            text: Multi-document modulemd YAML.
            strict: Reject documents with unknown keys.

        Returns:
            One SubdocumentFailure per document that was not added.
        """
        failures: list[SubdocumentFailure] = []
        loaded = 0
        for subdoc in parse_subdocuments(text):
            try:
                self._add_subdocument(subdoc, strict)
                loaded += 1
            except ModulemdError as e:
                logger.debug(f"Document {subdoc.index} failed to load: {e}")
                failures.append(
                    SubdocumentFailure(
                        index=subdoc.index,
                        doctype=subdoc.doctype,
                        yaml_text=subdoc.yaml_text,
                        error=e,
                    )
                )
        logger.info(f"Loaded {loaded} document(s), {len(failures)} failure(s)")
        return failures

    def update_from_file(self, path: str | Path, strict: bool = False) -> list[SubdocumentFailure]:
        """Read ``path`` as UTF-8 and add its documents to the index."""
        logger.debug(f"Loading module index data from {path}")
        return self.update_from_string(Path(path).read_text(encoding="utf-8"), strict)

    def update_from_stream(self, stream: IO[str], strict: bool = False) -> list[SubdocumentFailure]:
        """Read an open text stream to the end and add its documents."""
        return self.update_from_string(stream.read(), strict)

    def _add_subdocument(self, subdoc: SubdocumentInfo, strict: bool) -> None:
        if subdoc.error is not None:
            raise subdoc.error
        if subdoc.doctype is DocumentType.MODULESTREAM:
            self.add_module_stream(parse_stream(subdoc, strict))
        elif subdoc.doctype is DocumentType.DEFAULTS:
            self.add_defaults(parse_defaults(subdoc, strict))
        else:
            self.add_translation(parse_translation(subdoc, strict))

    # -- modules ---------------------------------------------------------

    def get_module(self, module_name: str) -> Module | None:
        return self._modules.get(module_name)

    def get_module_names(self) -> list[str]:
        return sorted(self._modules)

    def add_module(self, module: Module) -> None:
        """Store a copy of ``module``, replacing any module of the same name."""
        self._modules[module.module_name] = module.copy()

    def remove_module(self, module_name: str) -> bool:
        """Drop a module. Returns whether it was present."""
        return self._modules.pop(module_name, None) is not None

    def _update_module(self, module_name: str, update: Callable[[Module], T]) -> T:
        """Apply ``update`` to the named module, creating it if needed.

        A module created here is only kept when ``update`` succeeds.
        """
        module = self._modules.get(module_name)
        if module is not None:
            return update(module)
        module = Module(module_name)
        result = update(module)
        self._modules[module_name] = module
        return result

    def add_module_stream(self, stream: ModuleStream) -> ModuleStreamVersion:
        """Add a copy of ``stream`` to the module it names.

        Raises:
            ValidationError: If the stream has no module name.
            MdVersionError: If the module already holds another mdversion.
        """
        if not stream.module_name:
            raise ValidationError("Module streams added to an index need a module name")
        return self._update_module(stream.module_name, lambda m: m.add_stream(stream))

    def add_defaults(self, defaults: Defaults) -> DefaultsVersion:
        return self._update_module(defaults.module_name, lambda m: m.set_defaults(defaults))

    def add_translation(self, translation: Translation) -> None:
        self._update_module(translation.module_name, lambda m: m.add_translation(translation))

    # -- introspection ---------------------------------------------------

    def get_stream_mdversion(self) -> ModuleStreamVersion:
        """Highest stream mdversion held by any module, UNSET if none."""
        versions = [m.stream_mdversion for m in self._modules.values()]
        return max(versions, default=ModuleStreamVersion.UNSET)

    def get_defaults_mdversion(self) -> DefaultsVersion:
        versions = [
            m.get_defaults().mdversion
            for m in self._modules.values()
            if m.get_defaults() is not None
        ]
        return max(versions, default=DefaultsVersion.UNSET)

    # -- output ----------------------------------------------------------

    def _emitter(self) -> Emitter:
        modules = [self._modules[name] for name in self.get_module_names()]
        emitter = Emitter()
        emitter.start_stream()
        for module in modules:
            defaults = module.get_defaults()
            if defaults is not None:
                emit_defaults(defaults, emitter)
        streams = [s for module in modules for s in module.get_all_streams()]
        for stream in sorted(streams, key=identity_key):
            emit_stream(stream, emitter)
        for module in modules:
            for translation in module.get_translations():
                emit_translation(translation, emitter)
        emitter.end_stream()
        return emitter

    def dump_to_string(self) -> str:
        """Render the index as canonical multi-document YAML.

        Defaults come first, then streams ordered by module, stream,
        version, context and arch, then translations.

        Raises:
            EmitError: If any member fails validation.
        """
        return self._emitter().to_string()

    def dump_to_file(self, path: str | Path) -> None:
        emitter = self._emitter()
        with open(path, "w", encoding="utf-8") as f:
            emitter.write(f)
        logger.debug(f"Wrote module index to {path}")

    def dump_to_stream(self, stream: IO[str]) -> None:
        self._emitter().write(stream)

    def copy(self) -> ModuleIndex:
        return _copy.deepcopy(self)
