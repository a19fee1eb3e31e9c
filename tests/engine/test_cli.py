"""
Tests for the Command Line
==========================
Run against a throwaway dictionary directory so results do not depend on
the bundled word lists.
"""

import io
import json
import logging

import pytest

from atomspell.cli import EXIT_ERROR, EXIT_MISSPELLED, EXIT_OK, build_parser, main
from atomspell.config_logging import LOGGER_NAMESPACE


@pytest.fixture(autouse=True)
def restore_logging():
    """main() configures the atomspell logger; undo it after each test."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def dict_dir(tmp_path, english_words, french_words):
    directory = tmp_path / "dicts"
    directory.mkdir()
    (directory / "dictionary(eng).txt").write_text(english_words, encoding="utf-8")
    (directory / "dictionary(fra).txt").write_text(french_words, encoding="utf-8")
    return directory


@pytest.fixture
def write(tmp_path):
    def _write(name, content):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


class TestCheckCommand:
    def test_misspellings_with_suggestions(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo wrold")
        code = main(["check", path, "-l", "eng", "-s", "--dict-dir", str(dict_dir)])
        out = capsys.readouterr().out
        assert code == EXIT_MISSPELLED
        assert "1:1: Helo -> Hello, Help, Held, Hero" in out
        assert "1:6: wrold -> world" in out
        assert "2 misspelled of 2 words" in out

    def test_clean_file(self, dict_dir, write, capsys):
        path = write("doc.txt", "Hello world.\n")
        assert main(["check", path, "--dict-dir", str(dict_dir)]) == EXIT_OK
        assert "All words are well spelled!" in capsys.readouterr().out

    def test_json_output(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo world")
        code = main(["check", path, "--json", "--dict-dir", str(dict_dir)])
        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_MISSPELLED
        assert data["misspelled_count"] == 1
        assert data["accuracy"] == 50.0
        assert "suggestions" not in data["misspellings"][0]

    def test_json_with_suggestions_and_stats(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo world")
        main(["check", path, "--json", "-s", "--stats", "--dict-dir", str(dict_dir)])
        data = json.loads(capsys.readouterr().out)
        assert data["misspellings"][0]["suggestions"][0]["word"] == "Hello"
        assert data["stats"]["words"] == 2

    def test_text_stats(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo world world")
        main(["check", path, "--stats", "--dict-dir", str(dict_dir)])
        out = capsys.readouterr().out
        assert "Accuracy: 67%" in out
        assert "Top words: world (2), helo (1)" in out

    def test_auto_detect(self, dict_dir, write, capsys):
        path = write("doc.txt", "Bonjour le monde")
        assert main(["check", path, "-l", "auto", "--dict-dir", str(dict_dir)]) == EXIT_OK
        assert "French (fra, detected)" in capsys.readouterr().out

    def test_auto_detect_with_default(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo")
        code = main(["check", path, "-l", "auto", "-d", "eng", "--dict-dir", str(dict_dir)])
        assert code == EXIT_MISSPELLED
        assert "English (eng, selected)" in capsys.readouterr().out

    def test_auto_detect_without_default(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo")
        assert main(["check", path, "-l", "auto", "--dict-dir", str(dict_dir)]) == EXIT_ERROR
        assert capsys.readouterr().err.startswith("error:")

    def test_custom_words(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo wrold")
        custom = write("custom.txt", "helo\nwrold\n")
        code = main(["check", path, "--custom", custom, "--dict-dir", str(dict_dir)])
        assert code == EXIT_OK

    def test_code_file(self, dict_dir, write, capsys):
        """The file extension marks source code; --code skips its identifiers."""
        path = write("main.py", "hello_wrold = 1\n")
        assert main(["check", path, "--dict-dir", str(dict_dir)]) == EXIT_MISSPELLED
        assert "Checked as source code (py)" in capsys.readouterr().out
        assert main(["check", path, "--code", "--json", "--dict-dir", str(dict_dir)]) == EXIT_OK
        data = json.loads(capsys.readouterr().out)
        assert data["likely_code"] is True
        assert data["file_type"] == "py"

    def test_unknown_language(self, dict_dir, write, capsys):
        path = write("doc.txt", "Helo")
        assert main(["check", path, "-l", "xx", "--dict-dir", str(dict_dir)]) == EXIT_ERROR
        assert "Unknown language: xx" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main(["check", str(tmp_path / "missing.txt")]) == EXIT_ERROR
        assert "File not found" in capsys.readouterr().err


class TestStdinCommand:
    def test_reads_standard_input(self, dict_dir, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("Helo wrold\n"))
        code = main(["stdin", "-l", "eng", "-s", "--dict-dir", str(dict_dir)])
        assert code == EXIT_MISSPELLED
        assert "wrold -> world" in capsys.readouterr().out


class TestOtherCommands:
    def test_frequency(self, write, capsys):
        path = write("doc.txt", "b a b c b a")
        assert main(["frequency", path, "--top", "2"]) == EXIT_OK
        lines = capsys.readouterr().out.splitlines()
        assert lines == ["b  3", "a  2"]

    def test_frequency_json(self, write, capsys):
        path = write("doc.txt", "b a b")
        main(["frequency", path, "--json"])
        data = json.loads(capsys.readouterr().out)
        assert data == [{"word": "b", "count": 2}, {"word": "a", "count": 1}]

    def test_create_dict(self, tmp_path, write, capsys):
        source = write("corpus.txt", "The cat and the dog. A cat!")
        output = tmp_path / "out" / "dictionary(xyz).txt"
        assert main(["create-dict", source, str(output)]) == EXIT_OK
        assert output.read_text(encoding="utf-8").splitlines() == [
            "cat\t2", "the\t2", "and\t1", "dog\t1",
        ]
        assert "Wrote 4 words" in capsys.readouterr().out

    def test_create_dict_without_counts(self, tmp_path, write):
        source = write("corpus.txt", "the cat the")
        output = tmp_path / "words.txt"
        main(["create-dict", source, str(output), "--no-counts", "-m", "1"])
        assert output.read_text(encoding="utf-8") == "the\ncat\n"

    def test_languages_json(self, dict_dir, capsys):
        assert main(["languages", "--json", "--dict-dir", str(dict_dir)]) == EXIT_OK
        rows = {row["code"]: row for row in json.loads(capsys.readouterr().out)}
        assert rows["eng"]["loaded"] is True
        assert rows["eng"]["words"] == 17
        assert rows["kor"]["loaded"] is False

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            build_parser().parse_args(["--version"])
        assert exc.value.code == 0
        assert "atomspell" in capsys.readouterr().out
