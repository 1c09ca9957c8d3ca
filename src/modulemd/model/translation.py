"""Locale-specific overlays for a module stream's human-readable text."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TranslationEntry:
    """Translated strings for one locale.

    Attributes:
        locale: Locale identifier such as ``en_GB``.
        summary: Translated stream summary.
        description: Translated stream description.
        profile_descriptions: Profile name -> translated profile description.
    """

    locale: str
    summary: str | None = None
    description: str | None = None
    profile_descriptions: dict[str, str] = field(default_factory=dict)

    def copy(self) -> TranslationEntry:
        return TranslationEntry(
            locale=self.locale,
            summary=self.summary,
            description=self.description,
            profile_descriptions=dict(self.profile_descriptions),
        )


@dataclass
class Translation:
    """All translations for one module stream name.

    A translation applies to every stream object of the module that shares
    ``module_stream``, whatever its version, context or arch.

    Attributes:
        version: Translation schema version (always 1).
        module_name: Module the strings belong to.
        module_stream: Stream name the strings belong to.
        modified: Last-modified stamp (YYYYMMDDHHMM); newer wins on merge.
        entries: Locale -> TranslationEntry.
    """

    version: int
    module_name: str
    module_stream: str
    modified: int = 0
    entries: dict[str, TranslationEntry] = field(default_factory=dict)

    def set_translation_entry(self, entry: TranslationEntry) -> None:
        self.entries[entry.locale] = entry

    def get_translation_entry(self, locale: str) -> TranslationEntry | None:
        return self.entries.get(locale)

    def get_locales(self) -> list[str]:
        return sorted(self.entries)

    def copy(self) -> Translation:
        return Translation(
            version=self.version,
            module_name=self.module_name,
            module_stream=self.module_stream,
            modified=self.modified,
            entries={k: v.copy() for k, v in self.entries.items()},
        )
