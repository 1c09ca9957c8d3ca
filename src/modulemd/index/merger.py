"""Combining several ModuleIndex sources into one.

Each source index is associated with an integer priority; higher
priorities win disagreements that have a defined winner. Anything without
one is collected as a conflict and reported together, so ``resolve()``
either returns a complete index or raises with every problem found.

Rules:

- Streams: the same NSVCA from two sources must be structurally equal.
- Defaults: the default stream of the highest-priority source naming one
  wins. At equal priority the newer ``modified`` wins; equal stamps with
  different streams conflict unless a higher priority or newer stamp
  settles it. Profile sets for a stream are unioned at equal priority and
  replaced outright by a higher priority.
- Translations: entries are merged per locale with the same precedence as
  the default stream.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from ..core.exceptions import MergeConflictError, ModulemdError
from ..model.defaults import DefaultsV1
from ..model.identity import identity_key, nsvca
from ..model.stream import ModuleStream
from ..model.translation import Translation, TranslationEntry
from .module_index import ModuleIndex


@dataclass
class _Source:
    index: ModuleIndex
    priority: int
    order: int

    @property
    def label(self) -> str:
        return f"index #{self.order} (priority {self.priority})"


@dataclass
class _DefaultsState:
    module_name: str
    modified: int = 0
    stream: str | None = None
    stream_priority: int | None = None
    stream_modified: int = 0
    stream_source: str = ""
    stream_conflict: str | None = None
    profiles: dict[str, tuple[int, set[str]]] = field(default_factory=dict)


@dataclass
class _TranslationState:
    module_name: str
    module_stream: str
    modified: int = 0
    # locale -> (priority, modified, entry, source label)
    entries: dict[str, tuple[int, int, TranslationEntry, str]] = field(default_factory=dict)
    # locale -> unresolved disagreement, cleared when a later entry wins
    conflicts: dict[str, str] = field(default_factory=dict)


class ModuleIndexMerger:
    """Merge prioritized ModuleIndex sources.

    Example:
        merger = ModuleIndexMerger()
        merger.associate_index(base, 0)
        merger.associate_index(updates, 0)
        merged = merger.resolve()
    """

    def __init__(self) -> None:
        self._sources: list[_Source] = []

    def associate_index(self, index: ModuleIndex, priority: int = 0) -> None:
        """Register ``index`` as a merge source.

        The index is copied, so later changes to it do not affect the merge.
        """
        self._sources.append(_Source(index.copy(), priority, len(self._sources)))
        logger.debug(f"Associated index #{len(self._sources) - 1} with priority {priority}")

    def resolve(self) -> ModuleIndex:
        """Merge every associated index.

        Returns:
            A new index; the sources are not modified.

        Raises:
            MergeConflictError: Listing every conflict found. No partial
                result is produced.
        """
        conflicts: list[str] = []
        merged = ModuleIndex()
        ordered = sorted(self._sources, key=lambda s: (s.priority, s.order))

        self._merge_streams(ordered, merged, conflicts)
        self._merge_defaults(ordered, merged, conflicts)
        self._merge_translations(ordered, merged, conflicts)

        if conflicts:
            logger.debug(f"Merge failed with {len(conflicts)} conflict(s)")
            raise MergeConflictError(conflicts)

        logger.info(
            f"Merged {len(self._sources)} index(es) into {len(merged.get_module_names())} module(s)"
        )
        return merged

    def _merge_streams(
        self, sources: list[_Source], merged: ModuleIndex, conflicts: list[str]
    ) -> None:
        seen: dict[tuple, tuple[ModuleStream, str]] = {}
        for source in sources:
            for module_name in source.index.get_module_names():
                for stream in source.index.get_module(module_name).get_all_streams():
                    key = identity_key(stream)
                    previous = seen.get(key)
                    if previous is not None:
                        other, other_label = previous
                        if other != stream:
                            conflicts.append(
                                f"Module stream {nsvca(stream)} differs between "
                                f"{other_label} and {source.label}"
                            )
                        continue
                    seen[key] = (stream, source.label)
                    try:
                        merged.add_module_stream(stream)
                    except ModulemdError as e:
                        conflicts.append(f"{source.label}: {e}")

    def _merge_defaults(
        self, sources: list[_Source], merged: ModuleIndex, conflicts: list[str]
    ) -> None:
        states: dict[str, _DefaultsState] = {}
        for source in sources:
            for module_name in source.index.get_module_names():
                defaults = source.index.get_module(module_name).get_defaults()
                if defaults is None:
                    continue
                state = states.setdefault(module_name, _DefaultsState(module_name))
                state.modified = max(state.modified, defaults.modified)
                self._merge_default_stream(state, defaults, source)
                for stream_name, profiles in defaults.profile_defaults.items():
                    current = state.profiles.get(stream_name)
                    if current is None or source.priority > current[0]:
                        state.profiles[stream_name] = (source.priority, set(profiles))
                    else:
                        current[1].update(profiles)

        for module_name, state in states.items():
            if state.stream_conflict is not None:
                conflicts.append(state.stream_conflict)
            merged.add_defaults(
                DefaultsV1(
                    module_name=module_name,
                    modified=state.modified,
                    default_stream=state.stream,
                    profile_defaults={k: v for k, (_, v) in state.profiles.items()},
                )
            )

    @staticmethod
    def _merge_default_stream(state: _DefaultsState, defaults: DefaultsV1, source: _Source) -> None:
        if defaults.default_stream is None:
            return
        take = (
            state.stream is None
            or source.priority > state.stream_priority
            or defaults.modified > state.stream_modified
        )
        if take:
            state.stream = defaults.default_stream
            state.stream_priority = source.priority
            state.stream_modified = defaults.modified
            state.stream_source = source.label
            state.stream_conflict = None
        elif (
            state.stream_conflict is None
            and defaults.modified == state.stream_modified
            and defaults.default_stream != state.stream
        ):
            state.stream_conflict = (
                f"Default stream for module {state.module_name} is "
                f"'{state.stream}' in {state.stream_source} but "
                f"'{defaults.default_stream}' in {source.label}"
            )

    def _merge_translations(
        self, sources: list[_Source], merged: ModuleIndex, conflicts: list[str]
    ) -> None:
        states: dict[tuple[str, str], _TranslationState] = {}
        for source in sources:
            for module_name in source.index.get_module_names():
                for translation in source.index.get_module(module_name).get_translations():
                    key = (translation.module_name, translation.module_stream)
                    state = states.setdefault(key, _TranslationState(*key))
                    state.modified = max(state.modified, translation.modified)
                    for locale, entry in translation.entries.items():
                        self._merge_translation_entry(
                            state, locale, entry, translation.modified, source
                        )

        for state in states.values():
            conflicts.extend(state.conflicts.values())
            merged.add_translation(
                Translation(
                    version=1,
                    module_name=state.module_name,
                    module_stream=state.module_stream,
                    modified=state.modified,
                    entries={
                        locale: entry.copy() for locale, (_, _, entry, _) in state.entries.items()
                    },
                )
            )

    @staticmethod
    def _merge_translation_entry(
        state: _TranslationState,
        locale: str,
        entry: TranslationEntry,
        modified: int,
        source: _Source,
    ) -> None:
        current = state.entries.get(locale)
        if current is None:
            state.entries[locale] = (source.priority, modified, entry, source.label)
            return

        priority, current_modified, current_entry, current_label = current
        if source.priority > priority or modified > current_modified:
            state.entries[locale] = (source.priority, modified, entry, source.label)
            state.conflicts.pop(locale, None)
        elif (
            locale not in state.conflicts
            and modified == current_modified
            and entry != current_entry
        ):
            state.conflicts[locale] = (
                f"Translation {state.module_name}:{state.module_stream} [{locale}] differs "
                f"between {current_label} and {source.label}"
            )
