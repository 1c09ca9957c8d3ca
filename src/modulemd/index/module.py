"""All streams, defaults and translations for one module name."""

from __future__ import annotations

import copy as _copy

from loguru import logger

from ..core.exceptions import (
    ContractViolation,
    MdVersionError,
    NoMatchesError,
    TooManyMatchesError,
    ValidationError,
)
from ..core.types import DefaultsVersion, ModuleStreamVersion
from ..model.defaults import Defaults
from ..model.stream import ModuleStream
from ..model.translation import Translation


class Module:
    """Owner of every stream object sharing one module name.

    Streams are stored as copies; duplicates by identity are allowed and
    told apart only by their full NSVCA. Every stream in a module has the
    same mdversion, fixed by the first stream added.

    Translations are keyed by stream name, not by stream object, so they
    can be added before or after the streams they describe and survive
    the removal of those streams.

    Example:
        module = Module("nodejs")
        module.add_stream(stream)
        module.get_stream_by_NSVCA("10", 20181101171344, "6c81f848", "x86_64")
    """

    def __init__(self, module_name: str):
        if not module_name:
            raise ContractViolation("Module requires a non-empty module name")
        self.module_name = module_name
        self._streams: list[ModuleStream] = []
        self._defaults: Defaults | None = None
        self._translations: dict[str, Translation] = {}
        self._stream_mdversion = ModuleStreamVersion.UNSET

    def __repr__(self) -> str:
        return f"Module({self.module_name!r}, streams={len(self._streams)})"

    @property
    def stream_mdversion(self) -> ModuleStreamVersion:
        """mdversion shared by all streams; UNSET until one is added."""
        return self._stream_mdversion

    # -- streams ---------------------------------------------------------

    def add_stream(
        self,
        stream: ModuleStream,
        version: ModuleStreamVersion = ModuleStreamVersion.UNSET,
    ) -> ModuleStreamVersion:
        """Store a copy of ``stream`` in this module.

        A stream without a module name is given this module's name. The
        copy carries only the translation registered here for its stream
        name, if any.

        Args:
            stream: Stream to add. It is not validated here.
            version: Required mdversion. UNSET accepts the stream's own
                version, or the one already established for the module.

        Returns:
            The mdversion the stream was stored with.

        Raises:
            ValidationError: If the stream has no stream name or belongs to
                another module.
            MdVersionError: If the stream's mdversion disagrees with
                ``version`` or with the streams already in the module.
        """
        if not stream.stream_name:
            raise ValidationError(f"Cannot add a stream without a stream name to {self.module_name}")
        if stream.module_name and stream.module_name != self.module_name:
            raise ValidationError(
                f"Stream {stream.get_NSVCA_as_string()} does not belong to module "
                f"{self.module_name}"
            )

        if version != ModuleStreamVersion.UNSET and version != stream.mdversion:
            raise MdVersionError(
                f"Stream {stream.get_NSVCA_as_string()} is mdversion {int(stream.mdversion)}, "
                f"not {int(version)}; conversion between versions is not supported"
            )
        if (
            self._stream_mdversion != ModuleStreamVersion.UNSET
            and stream.mdversion != self._stream_mdversion
        ):
            raise MdVersionError(
                f"Module {self.module_name} holds mdversion {int(self._stream_mdversion)} "
                f"streams; cannot add mdversion {int(stream.mdversion)}"
            )

        stored = stream.copy(module_name=self.module_name)
        stored.associate_translation(self._translations.get(stored.stream_name))
        self._streams.append(stored)
        self._stream_mdversion = stored.mdversion
        logger.debug(f"Added stream {stored.get_NSVCA_as_string()}")
        return stored.mdversion

    def get_all_streams(self) -> list[ModuleStream]:
        """The stored streams themselves, in insertion order."""
        return self._streams

    def get_stream_names(self) -> list[str]:
        return sorted({s.stream_name for s in self._streams})

    def get_streams_by_stream_name(self, stream_name: str) -> list[ModuleStream]:
        """Streams named ``stream_name``, newest version first.

        Ties on version are broken by context, ascending. Returns an empty
        list when nothing matches.
        """
        matches = [s for s in self._streams if s.stream_name == stream_name]
        return sorted(matches, key=lambda s: (-s.version, s.context or ""))

    def get_stream_by_NSVC(
        self, stream_name: str, version: int, context: str | None = None
    ) -> ModuleStream | None:
        """Legacy lookup ignoring arch. Returns the first match or None."""
        for stream in self._streams:
            if (
                stream.stream_name == stream_name
                and stream.version == version
                and stream.context == context
            ):
                return stream
        return None

    def get_stream_by_NSVCA(
        self,
        stream_name: str,
        version: int = 0,
        context: str | None = None,
        arch: str | None = None,
    ) -> ModuleStream:
        """Find exactly one stream matching every given criterion.

        A version of 0 and a context or arch of None match anything.

        Raises:
            NoMatchesError: If no stream matches.
            TooManyMatchesError: If more than one stream matches.
        """
        matches = [
            s
            for s in self._streams
            if s.stream_name == stream_name
            and (not version or s.version == version)
            and (context is None or s.context == context)
            and (arch is None or s.arch == arch)
        ]
        query = f"{self.module_name}:{stream_name}:{version}:{context or '*'}:{arch or '*'}"
        if not matches:
            raise NoMatchesError(f"No streams matched {query}")
        if len(matches) > 1:
            raise TooManyMatchesError(f"{len(matches)} streams matched {query}")
        return matches[0]

    def remove_streams_by_NSVCA(
        self,
        stream_name: str,
        version: int = 0,
        context: str | None = None,
        arch: str | None = None,
    ) -> None:
        """Remove every stream whose identity equals all four values.

        Removing something that is not there is not an error.
        """
        before = len(self._streams)
        self._streams = [
            s
            for s in self._streams
            if (s.stream_name, s.version, s.context, s.arch)
            != (stream_name, version, context, arch)
        ]
        logger.debug(
            f"Removed {before - len(self._streams)} stream(s) matching "
            f"{self.module_name}:{stream_name}:{version}:{context}:{arch}"
        )

    def remove_streams_by_name(self, stream_name: str) -> None:
        """Remove every stream named ``stream_name``."""
        self._streams = [s for s in self._streams if s.stream_name != stream_name]

    # -- defaults --------------------------------------------------------

    def set_defaults(
        self,
        defaults: Defaults | None,
        version: DefaultsVersion = DefaultsVersion.UNSET,
    ) -> DefaultsVersion:
        """Store a copy of ``defaults``, or clear them when None.

        Returns:
            The stored defaults version, or UNSET after clearing.

        Raises:
            ValidationError: If the defaults name another module.
            MdVersionError: If ``version`` disagrees with the defaults.
        """
        if defaults is None:
            self._defaults = None
            return DefaultsVersion.UNSET

        if defaults.module_name != self.module_name:
            raise ValidationError(
                f"Defaults for module '{defaults.module_name}' cannot be set on "
                f"module '{self.module_name}'"
            )
        if version != DefaultsVersion.UNSET and version != defaults.mdversion:
            raise MdVersionError(
                f"Defaults are mdversion {int(defaults.mdversion)}, not {int(version)}"
            )

        self._defaults = defaults.copy()
        return self._defaults.mdversion

    def get_defaults(self) -> Defaults | None:
        return self._defaults

    # -- translations ----------------------------------------------------

    def add_translation(self, translation: Translation) -> None:
        """Register a translation and attach it to matching streams.

        Replaces any translation already registered for the same stream
        name.

        Raises:
            ValidationError: If the translation names another module.
        """
        if translation.module_name != self.module_name:
            raise ValidationError(
                f"Translation for module '{translation.module_name}' cannot be added "
                f"to module '{self.module_name}'"
            )
        stored = translation.copy()
        self._translations[stored.module_stream] = stored
        for stream in self._streams:
            if stream.stream_name == stored.module_stream:
                stream.associate_translation(stored)

    def get_translation(self, stream_name: str) -> Translation | None:
        return self._translations.get(stream_name)

    def get_translated_streams(self) -> list[str]:
        """Names of streams that have a registered translation."""
        return sorted(self._translations)

    def get_translations(self) -> list[Translation]:
        return [self._translations[name] for name in self.get_translated_streams()]

    # -- whole-module operations -----------------------------------------

    def validate(self) -> None:
        """Validate every stream and the defaults.

        Raises:
            ValidationError: On the first invalid member found.
        """
        for stream in self._streams:
            stream.validate()
        if self._defaults is not None:
            if self._defaults.module_name != self.module_name:
                raise ValidationError(
                    f"Defaults name '{self._defaults.module_name}' does not match "
                    f"module '{self.module_name}'"
                )
            self._defaults.validate()

    def copy(self) -> Module:
        """Deep copy; streams in the copy share the copy's translations."""
        return _copy.deepcopy(self)
