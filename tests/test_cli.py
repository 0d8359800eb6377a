"""Tests for the passcraft command-line interface."""

from unittest.mock import patch

import pyperclip
import pytest

from passcraft import SPECIALS, GenerationConfig
from passcraft.cli import main
from passcraft.storage import HistoryStore, PreferenceStore


@pytest.fixture
def run(tmp_path):
    def _run(*argv):
        return main(["--data-dir", str(tmp_path), *argv])
    return _run


def _passwords(out: str) -> list[str]:
    return [line.split()[0] for line in out.splitlines() if "bits)" in line]


class TestGenerateCommand:
    def test_generates_batch(self, run, capsys):
        assert run("generate", "-n", "14", "--numbers", "-c", "2") == 0
        pws = _passwords(capsys.readouterr().out)
        assert len(pws) == 2
        assert all(len(pw) == 14 for pw in pws)
        assert all(any(c.isdigit() for c in pw) for pw in pws)

    def test_count_clamped(self, run, capsys):
        assert run("generate", "--specials", "-c", "10") == 0
        pws = _passwords(capsys.readouterr().out)
        assert len(pws) == 3
        assert all(pw[-1] in SPECIALS for pw in pws)

    def test_shows_strength(self, run, capsys):
        run("generate", "-n", "20", "--numbers", "--specials", "-c", "1")
        assert "(Very Strong, " in capsys.readouterr().out

    def test_no_entropy_source(self, run, capsys):
        assert run("generate", "-n", "10") == 1
        assert "Select Pronounceable" in capsys.readouterr().err

    def test_invalid_length(self, run, capsys):
        assert run("generate", "-n", "5", "--numbers") == 1
        assert "between 6 and 100" in capsys.readouterr().err

    def test_unsatisfiable(self, run, capsys):
        with patch("passcraft.is_valid", return_value=False):
            assert run("generate", "--numbers") == 1
        assert "relaxing" in capsys.readouterr().err

    def test_records_history(self, run, capsys, tmp_path):
        run("generate", "--pronounceable", "-c", "3")
        pws = _passwords(capsys.readouterr().out)
        stored = [e.value for e in HistoryStore(tmp_path / "history.json").entries()]
        assert stored == pws

    def test_no_history_flag(self, run, tmp_path):
        run("generate", "--numbers", "--no-history")
        assert HistoryStore(tmp_path / "history.json").entries() == []

    def test_failure_records_nothing(self, run, tmp_path):
        run("generate", "-n", "10")
        assert HistoryStore(tmp_path / "history.json").entries() == []
        assert not (tmp_path / "preferences.json").exists()

    def test_saves_and_reuses_preferences(self, run, capsys, tmp_path):
        run("generate", "-n", "18", "--numbers", "-c", "1")
        saved = PreferenceStore(tmp_path / "preferences.json").load()
        assert saved.length == 18
        assert saved.allow_numbers is True
        assert saved.count == 1
        capsys.readouterr()

        assert run("generate") == 0
        (pw,) = _passwords(capsys.readouterr().out)
        assert len(pw) == 18

    def test_negated_flag_overrides_saved(self, run, capsys):
        run("generate", "--numbers", "--specials", "-c", "1")
        capsys.readouterr()
        run("generate", "--no-specials")
        (pw,) = _passwords(capsys.readouterr().out)
        assert not any(c in SPECIALS for c in pw)

    @patch("passcraft.cli.pyperclip.copy")
    def test_copy(self, mock_copy, run, capsys):
        run("generate", "--numbers", "-c", "2", "--copy")
        out = capsys.readouterr().out
        mock_copy.assert_called_once_with("\n".join(_passwords(out)))
        assert "Copied to clipboard!" in out

    @patch("passcraft.cli.pyperclip.copy")
    def test_copy_failure_is_reported(self, mock_copy, run, capsys):
        mock_copy.side_effect = pyperclip.PyperclipException("no clipboard")
        assert run("generate", "--numbers", "--copy") == 0
        captured = capsys.readouterr()
        assert "Could not copy to clipboard" in captured.err
        assert "Copied" not in captured.out


class TestStrengthCommand:
    def test_label(self, run, capsys):
        assert run("strength", "-n", "16", "--numbers", "--specials") == 0
        assert "[###-] Strong" in capsys.readouterr().out

    def test_weak(self, run, capsys):
        run("strength", "-n", "10", "--numbers")
        assert "[#---] Weak" in capsys.readouterr().out

    def test_bad_length(self, run, capsys):
        assert run("strength", "-n", "0") == 1


class TestHistoryCommand:
    def test_empty(self, run, capsys):
        assert run("history") == 0
        assert "No history yet" in capsys.readouterr().out

    def test_lists_newest_first(self, run, capsys, tmp_path):
        HistoryStore(tmp_path / "history.json").add(["older"])
        HistoryStore(tmp_path / "history.json").add(["newer"])
        run("history")
        out = capsys.readouterr().out
        assert out.index("newer") < out.index("older")

    def test_clear(self, run, tmp_path):
        HistoryStore(tmp_path / "history.json").add(["x"])
        assert run("history", "--clear") == 0
        assert HistoryStore(tmp_path / "history.json").entries() == []

    @patch("passcraft.cli.pyperclip.copy")
    def test_copy_entry(self, mock_copy, run, tmp_path):
        HistoryStore(tmp_path / "history.json").add(["first", "second"])
        assert run("history", "--copy", "2") == 0
        mock_copy.assert_called_once_with("second")

    def test_copy_missing_entry(self, run, capsys):
        assert run("history", "--copy", "4") == 1
        assert "no history entry 4" in capsys.readouterr().err


class TestPrefsCommand:
    def test_show(self, run, capsys, tmp_path):
        PreferenceStore(tmp_path / "preferences.json").save(GenerationConfig(length=42))
        run("prefs")
        out = capsys.readouterr().out
        assert "length" in out and "42" in out

    def test_reset(self, run, capsys, tmp_path):
        run("generate", "-n", "30", "--numbers")
        capsys.readouterr()
        assert run("prefs", "--reset") == 0
        out = capsys.readouterr().out
        assert "Preferences reset." in out
        assert not (tmp_path / "preferences.json").exists()


def test_no_command_prints_help(run, capsys):
    assert run() == 0
    assert "usage: passcraft" in capsys.readouterr().out
