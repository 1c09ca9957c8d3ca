"""Tests for the modulemd-tool command line."""

import pytest

from modulemd.cli.main import create_parser, main


def _run(argv) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


class TestParser:
    """Tests for argument parsing."""

    def test_merge_arguments(self):
        """Priorities are collected once per flag."""
        args = create_parser().parse_args(["merge", "a.yaml", "b.yaml", "-p", "1", "-p", "2"])
        assert args.command == "merge"
        assert args.files == ["a.yaml", "b.yaml"]
        assert args.priority == [1, 2]
        assert args.strict is None

    def test_no_command(self, capsys):
        """Without a command the help is printed."""
        assert _run([]) == 0
        assert "modulemd-tool" in capsys.readouterr().out


class TestValidate:
    """Tests for the validate command."""

    def test_valid_file(self, fixtures_dir, capsys):
        """A valid file reports OK."""
        assert _run(["validate", str(fixtures_dir / "f29.yaml")]) == 0
        assert "OK (2 modules)" in capsys.readouterr().out

    def test_invalid_file(self, fixtures_dir, capsys):
        """Load failures are printed and the exit status is 1."""
        path = fixtures_dir / "buildafter" / "cycle.yaml"
        assert _run(["validate", str(path)]) == 1
        assert "buildafter cycle" in capsys.readouterr().err

    def test_strict_from_environment(self, tmp_path, monkeypatch, capsys):
        """MODULEMD_STRICT turns unknown keys into failures."""
        path = tmp_path / "extra.yaml"
        path.write_text(
            "document: modulemd-defaults\nversion: 1\ndata:\n  module: foo\n  extra: 1\n",
            encoding="utf-8",
        )
        monkeypatch.delenv("MODULEMD_STRICT", raising=False)
        assert _run(["validate", str(path)]) == 0
        monkeypatch.setenv("MODULEMD_STRICT", "yes")
        assert _run(["validate", str(path)]) == 1
        assert "Unknown key 'extra'" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        """Unreadable input is reported as an error."""
        assert _run(["validate", str(tmp_path / "nope.yaml")]) == 1
        assert capsys.readouterr().err.startswith("Error: ")


class TestMerge:
    """Tests for the merge command."""

    def test_merge_to_file(self, fixtures_dir, tmp_path):
        """Merged output is written to the requested file."""
        out = tmp_path / "merged.yaml"
        status = _run(
            [
                "merge",
                str(fixtures_dir / "f29.yaml"),
                str(fixtures_dir / "f29-updates.yaml"),
                "-o",
                str(out),
            ]
        )
        assert status == 0
        text = out.read_text(encoding="utf-8")
        assert text.count("document: modulemd\n") == 5

    def test_priority_count_mismatch(self, fixtures_dir, capsys):
        """Priorities must be given once per file."""
        status = _run(["merge", str(fixtures_dir / "f29.yaml"), "-p", "1", "-p", "2"])
        assert status == 1
        assert "2 priorities for 1 files" in capsys.readouterr().err

    def test_conflict(self, tmp_path, capsys):
        """Merge conflicts are reported with a failing status."""
        one = tmp_path / "one.yaml"
        two = tmp_path / "two.yaml"
        template = (
            "document: modulemd-defaults\nversion: 1\ndata:\n"
            "  module: foo\n  modified: 1\n  stream: {}\n"
        )
        one.write_text(template.format("a"), encoding="utf-8")
        two.write_text(template.format("b"), encoding="utf-8")
        assert _run(["merge", str(one), str(two)]) == 1
        assert "Merge conflict" in capsys.readouterr().err


class TestDump:
    """Tests for the dump command."""

    def test_dump_stdout(self, reference_v2_text, fixtures_dir, capsys):
        """A canonical file is printed unchanged."""
        assert _run(["dump", str(fixtures_dir / "reference.v2.yaml")]) == 0
        assert capsys.readouterr().out == reference_v2_text

    def test_dump_reports_failures(self, tmp_path, reference_v1_text, capsys):
        """Failed documents are left out and reported."""
        path = tmp_path / "mixed.yaml"
        path.write_text(reference_v1_text + "---\ndocument: nonsense\nversion: 1\ndata: {}\n...\n", encoding="utf-8")
        assert _run(["dump", str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.out == reference_v1_text
        assert "Unknown document type 'nonsense'" in captured.err
