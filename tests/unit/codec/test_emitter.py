"""Tests for the event-level YAML emitter."""

import datetime

from modulemd.codec import FOLDED, Emitter


def _document(build) -> str:
    emitter = Emitter()
    emitter.start_stream()
    emitter.start_document()
    emitter.start_mapping()
    build(emitter)
    emitter.end_mapping()
    emitter.end_document()
    emitter.end_stream()
    return emitter.to_string()


class TestEmitter:
    """Tests for Emitter."""

    def test_explicit_document_markers(self):
        """Documents start with --- and end with ..."""
        text = _document(lambda e: e.key_value("document", "modulemd"))
        assert text == "---\ndocument: modulemd\n...\n"

    def test_none_values_omitted(self):
        """key_value skips None entirely."""
        text = _document(lambda e: (e.key_value("a", None), e.key_value("b", 1)))
        assert text == "---\nb: 1\n...\n"

    def test_empty_string_quoted(self):
        """Empty strings are written as ''."""
        assert _document(lambda e: e.key_value("a", "")) == "---\na: ''\n...\n"

    def test_schema_strings_stay_plain(self):
        """Schema strings that look like numbers are written plain."""
        assert _document(lambda e: e.key_value("version", "1.23")) == "---\nversion: 1.23\n...\n"

    def test_folded_description(self):
        """Folded style without a trailing newline uses >-."""
        text = _document(lambda e: e.key_value("description", "desc", FOLDED))
        assert text == "---\ndescription: >-\n  desc\n...\n"

    def test_string_sets_sorted(self):
        """key_string_set sorts its values; flow style stays on one line."""

        def build(e):
            e.key_string_set("block", {"b", "a"})
            e.key_string_set("flow", {"y", "x"}, flow=True)
            e.key_string_set("empty", set(), flow=True)

        assert _document(build) == "---\nblock:\n- a\n- b\nflow: [x, y]\nempty: []\n...\n"

    def test_generic_values(self):
        """Free-form values keep their YAML types; look-alike strings are quoted."""

        def build(e):
            e.scalar("xmd")
            e.generic({"s": "1", "i": 1, "b": True, "n": None, "l": ["x"]})

        assert _document(build) == (
            "---\nxmd:\n  b: true\n  i: 1\n  l:\n  - x\n  n: null\n  s: '1'\n...\n"
        )

    def test_generic_date(self):
        """Dates in free-form values are written plain."""

        def build(e):
            e.scalar("xmd")
            e.generic({"when": datetime.date(2077, 10, 23)})

        assert _document(build) == "---\nxmd:\n  when: 2077-10-23\n...\n"

    def test_write_to_stream(self, tmp_path):
        """write() renders to an open file."""
        emitter = Emitter()
        emitter.start_stream()
        emitter.start_document()
        emitter.start_mapping()
        emitter.key_value("a", "b")
        emitter.end_mapping()
        emitter.end_document()
        emitter.end_stream()
        path = tmp_path / "out.yaml"
        with open(path, "w", encoding="utf-8") as f:
            emitter.write(f)
        assert path.read_text(encoding="utf-8") == "---\na: b\n...\n"
