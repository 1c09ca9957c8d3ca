"""Tests for merging prioritized module indexes."""

import pytest

from modulemd.core.exceptions import MergeConflictError
from modulemd.index import ModuleIndex, ModuleIndexMerger
from modulemd.model import DefaultsV1, Translation, TranslationEntry, new_module_stream


def _merge(*sources):
    merger = ModuleIndexMerger()
    for index, priority in sources:
        merger.associate_index(index, priority)
    return merger.resolve()


def _defaults_index(module_name="foo", **kwargs):
    index = ModuleIndex()
    index.add_defaults(DefaultsV1(module_name, **kwargs))
    return index


def _translation_index(summary, modified, locale="en_GB"):
    translation = Translation(1, "foo", "bar", modified=modified)
    translation.set_translation_entry(TranslationEntry(locale, summary=summary))
    index = ModuleIndex()
    index.add_translation(translation)
    return index


def _stream_index(summary="summary", mdversion=2, stream_name="bar"):
    stream = new_module_stream(mdversion, "foo", stream_name)
    stream.version = 1
    stream.summary = summary
    stream.description = "desc"
    stream.module_licenses.add("MIT")
    index = ModuleIndex()
    index.add_module_stream(stream)
    return index


class TestFedoraMerge:
    """Merging a release repository with its updates."""

    def test_streams(self, f29_index, f29_updates_index):
        """Streams are unioned and identical duplicates collapse."""
        merged = _merge((f29_index, 0), (f29_updates_index, 0))
        nodejs = merged.get_module("nodejs")
        assert len(nodejs.get_all_streams()) == 4
        assert [s.version for s in nodejs.get_streams_by_stream_name("11")] == [
            20181102165620,
            20180920144611,
        ]
        assert merged.get_module_names() == ["dwm", "nodejs"]

    def test_defaults(self, f29_index, f29_updates_index):
        """Profiles are unioned and the newest stamp is kept."""
        defaults = _merge((f29_index, 0), (f29_updates_index, 0)).get_module("nodejs").get_defaults()
        assert defaults.default_stream == "10"
        assert defaults.modified == 201811010000
        assert defaults.get_streams_with_default_profiles() == ["10", "11"]

    def test_translations(self, f29_index, f29_updates_index):
        """Locales from both sources are combined."""
        merged = _merge((f29_index, 0), (f29_updates_index, 0))
        translation = merged.get_module("nodejs").get_translation("10")
        assert translation.get_locales() == ["en_GB", "nl_NL"]
        assert translation.modified == 201811010000
        stream = merged.get_module("nodejs").get_stream_by_NSVCA("10", 20181101171344)
        assert stream.get_summary("en_GB") == "JavaScript runtime"

    def test_remove_streams(self, f29_index, f29_updates_index):
        """Streams can be pruned from the merged result."""
        nodejs = _merge((f29_index, 0), (f29_updates_index, 0)).get_module("nodejs")
        nodejs.remove_streams_by_NSVCA("10", 20181101171344, "6c81f848", "x86_64")
        assert len(nodejs.get_all_streams()) == 3
        nodejs.remove_streams_by_NSVCA("10", 20181101171344, "6c81f848", "x86_64")
        assert len(nodejs.get_all_streams()) == 3
        nodejs.remove_streams_by_name("11")
        assert [s.version for s in nodejs.get_all_streams()] == [20180816123422]

    def test_sources_untouched(self, f29_index, f29_updates_index):
        """Merging and later edits do not change the sources."""
        merger = ModuleIndexMerger()
        merger.associate_index(f29_index, 0)
        f29_index.remove_module("dwm")
        merger.associate_index(f29_updates_index, 0)
        merged = merger.resolve()
        assert merged.get_module_names() == ["dwm", "nodejs"]
        merged.get_module("nodejs").remove_streams_by_name("10")
        assert f29_updates_index.get_module("nodejs").get_stream_names() == ["10", "11"]


class TestStreamConflicts:
    """Tests for same-identity streams."""

    def test_equal_streams(self):
        """Equal streams merge into one."""
        merged = _merge((_stream_index(), 0), (_stream_index(), 5))
        assert len(merged.get_module("foo").get_all_streams()) == 1

    def test_different_streams(self):
        """Streams that differ under one identity conflict."""
        with pytest.raises(MergeConflictError) as excinfo:
            _merge((_stream_index("one"), 0), (_stream_index("two"), 0))
        assert len(excinfo.value.conflicts) == 1
        assert "foo:bar:1" in excinfo.value.conflicts[0]

    def test_mixed_mdversions(self):
        """One module cannot end up holding V1 and V2 streams."""
        with pytest.raises(MergeConflictError) as excinfo:
            _merge((_stream_index(), 0), (_stream_index(mdversion=1, stream_name="baz"), 0))
        assert len(excinfo.value.conflicts) == 1
        assert excinfo.value.conflicts[0].startswith("index #1 (priority 0)")
        assert "mdversion" in excinfo.value.conflicts[0]


class TestDefaultsMerge:
    """Tests for default stream and profile resolution."""

    def test_priority_wins(self):
        """A higher priority default stream wins regardless of stamps."""
        merged = _merge(
            (_defaults_index(default_stream="new", modified=2), 0),
            (_defaults_index(default_stream="old", modified=1), 10),
        )
        assert merged.get_module("foo").get_defaults().default_stream == "old"

    def test_newer_wins_at_same_priority(self):
        """At equal priority the newer stamp wins."""
        merged = _merge(
            (_defaults_index(default_stream="new", modified=2), 0),
            (_defaults_index(default_stream="old", modified=1), 0),
        )
        assert merged.get_module("foo").get_defaults().default_stream == "new"

    def test_none_never_overrides(self):
        """A source without a default stream keeps the existing one."""
        merged = _merge(
            (_defaults_index(default_stream="bar", modified=1), 0),
            (_defaults_index(modified=5), 10),
        )
        defaults = merged.get_module("foo").get_defaults()
        assert defaults.default_stream == "bar"
        assert defaults.modified == 5

    def test_same_stamp_conflict(self):
        """Equal stamps with different streams conflict."""
        with pytest.raises(MergeConflictError, match="Default stream for module foo"):
            _merge(
                (_defaults_index(default_stream="a", modified=1), 0),
                (_defaults_index(default_stream="b", modified=1), 0),
            )

    def test_tie_settled_by_higher_priority(self):
        """A higher priority source settles a tie between lower ones."""
        merged = _merge(
            (_defaults_index(default_stream="a", modified=1), 0),
            (_defaults_index(default_stream="b", modified=1), 0),
            (_defaults_index(default_stream="c", modified=1), 10),
        )
        assert merged.get_module("foo").get_defaults().default_stream == "c"

    def test_tie_settled_regardless_of_order(self):
        """Association order does not matter when a higher priority wins."""
        merged = _merge(
            (_defaults_index(default_stream="c", modified=1), 10),
            (_defaults_index(default_stream="a", modified=1), 0),
            (_defaults_index(default_stream="b", modified=1), 0),
        )
        assert merged.get_module("foo").get_defaults().default_stream == "c"

    def test_tie_settled_by_newer_stamp(self):
        """A newer stamp at the same priority settles an older tie."""
        merged = _merge(
            (_defaults_index(default_stream="a", modified=1), 0),
            (_defaults_index(default_stream="b", modified=1), 0),
            (_defaults_index(default_stream="c", modified=2), 0),
        )
        assert merged.get_module("foo").get_defaults().default_stream == "c"

    def test_tie_at_top_priority_conflicts(self):
        """A tie among the highest sources still conflicts."""
        with pytest.raises(MergeConflictError) as excinfo:
            _merge(
                (_defaults_index(default_stream="c", modified=1), 0),
                (_defaults_index(default_stream="a", modified=1), 10),
                (_defaults_index(default_stream="b", modified=1), 10),
            )
        assert len(excinfo.value.conflicts) == 1
        assert "'a' in index #1 (priority 10)" in excinfo.value.conflicts[0]

    def test_same_stamp_same_stream(self):
        """Agreeing sources do not conflict."""
        merged = _merge(
            (_defaults_index(default_stream="a", modified=1), 0),
            (_defaults_index(default_stream="a", modified=1), 0),
        )
        assert merged.get_module("foo").get_defaults().default_stream == "a"

    def test_profiles_union(self):
        """Profiles at equal priority are unioned."""
        merged = _merge(
            (_defaults_index(profile_defaults={"bar": {"a"}}), 0),
            (_defaults_index(profile_defaults={"bar": {"b"}}), 0),
        )
        defaults = merged.get_module("foo").get_defaults()
        assert defaults.get_default_profiles_for_stream("bar") == ["a", "b"]

    def test_profiles_replaced_by_priority(self):
        """A higher priority replaces the profile set outright."""
        merged = _merge(
            (_defaults_index(profile_defaults={"bar": {"a"}}), 0),
            (_defaults_index(profile_defaults={"bar": set()}), 1),
        )
        defaults = merged.get_module("foo").get_defaults()
        assert defaults.get_default_profiles_for_stream("bar") == []

    def test_all_conflicts_reported(self):
        """Every conflict is collected before failing."""
        first = _defaults_index("foo", default_stream="a", modified=1)
        first.add_defaults(DefaultsV1("baz", default_stream="a", modified=1))
        second = _defaults_index("foo", default_stream="b", modified=1)
        second.add_defaults(DefaultsV1("baz", default_stream="b", modified=1))
        with pytest.raises(MergeConflictError) as excinfo:
            _merge((first, 0), (second, 0))
        assert len(excinfo.value.conflicts) == 2


class TestTranslationMerge:
    """Tests for per-locale translation resolution."""

    def _summary(self, merged, locale="en_GB"):
        return merged.get_module("foo").get_translation("bar").get_translation_entry(locale).summary

    def test_newer_wins(self):
        """The newer stamp wins at equal priority."""
        merged = _merge((_translation_index("new", 2), 0), (_translation_index("old", 1), 0))
        assert self._summary(merged) == "new"
        assert merged.get_module("foo").get_translation("bar").modified == 2

    def test_priority_wins(self):
        """A higher priority wins over a newer stamp."""
        merged = _merge((_translation_index("new", 2), 0), (_translation_index("old", 1), 3))
        assert self._summary(merged) == "old"

    def test_same_stamp_conflict(self):
        """Equal stamps with different text conflict."""
        with pytest.raises(MergeConflictError, match=r"\[en_GB\]"):
            _merge((_translation_index("a", 1), 0), (_translation_index("b", 1), 0))

    def test_tie_settled_by_higher_priority(self):
        """A higher priority entry settles a tie between lower ones."""
        merged = _merge(
            (_translation_index("a", 1), 0),
            (_translation_index("b", 1), 0),
            (_translation_index("c", 1), 10),
        )
        assert self._summary(merged) == "c"

    def test_tie_settled_by_newer_stamp(self):
        """A newer entry at the same priority settles an older tie."""
        merged = _merge(
            (_translation_index("a", 1), 0),
            (_translation_index("b", 1), 0),
            (_translation_index("c", 2), 0),
        )
        assert self._summary(merged) == "c"

    def test_tie_in_other_locale_still_conflicts(self):
        """Settling one locale leaves ties in other locales reported."""
        with pytest.raises(MergeConflictError) as excinfo:
            _merge(
                (_translation_index("a", 1, "de_DE"), 0),
                (_translation_index("b", 1, "de_DE"), 0),
                (_translation_index("c", 1), 10),
            )
        assert len(excinfo.value.conflicts) == 1
        assert "[de_DE]" in excinfo.value.conflicts[0]

    def test_locales_combined(self):
        """Different locales never conflict."""
        merged = _merge(
            (_translation_index("a", 1, "en_GB"), 0),
            (_translation_index("b", 1, "de_DE"), 0),
        )
        assert self._summary(merged, "de_DE") == "b"
        assert self._summary(merged, "en_GB") == "a"


class TestEmptyMerge:
    """Tests for degenerate merges."""

    def test_no_sources(self):
        """Nothing in, nothing out."""
        assert ModuleIndexMerger().resolve().get_module_names() == []
