"""Tests for the interactive launcher."""

import json

import pytest

import run


@pytest.fixture
def answers(monkeypatch):
    """Feed canned answers to input()."""
    def feed(*values):
        it = iter(values)

        def fake_input(prompt=""):
            try:
                return next(it)
            except StopIteration:
                raise EOFError
        monkeypatch.setattr("builtins.input", fake_input)
    return feed


def read_log(workdir):
    path = workdir / "logfile.txt"
    return [json.loads(line) for line in path.read_text().splitlines()]


class TestMain:
    def test_backup_success(self, tmp_path, answers, capsys):
        (tmp_path / "test.txt").write_text("hello")
        answers("test.txt", "backup")

        assert run.main(["--workdir", str(tmp_path)]) == run.EXIT_OK
        assert "Your backup created: test.txt." in capsys.readouterr().out
        assert read_log(tmp_path)[0]["outcome"] == "ok"

    def test_backup_then_restore(self, tmp_path, answers, capsys):
        src = tmp_path / "test.txt"
        src.write_text("v1")
        answers("test.txt", "backup")
        assert run.main(["-w", str(tmp_path)]) == run.EXIT_OK

        src.write_text("v2")
        answers("test.txt", "restore")
        assert run.main(["-w", str(tmp_path)]) == run.EXIT_OK
        assert src.read_text() == "v1"
        assert "Your file has been restored: test.txt" in capsys.readouterr().out

    def test_delete_missing_exits_nonzero(self, tmp_path, answers, capsys):
        answers("ghost.txt", "delete")

        assert run.main(["-w", str(tmp_path)]) == run.EXIT_FAILURE
        assert "SourceNotFound" in capsys.readouterr().err
        assert read_log(tmp_path)[0]["outcome"] == "SourceNotFound"

    def test_traversal_rejected(self, tmp_path, answers, capsys):
        answers("../etc/passwd", "delete")

        assert run.main(["-w", str(tmp_path)]) == run.EXIT_FAILURE
        assert "PathTraversal" in capsys.readouterr().err

    def test_unknown_command(self, tmp_path, answers, capsys):
        (tmp_path / "test.txt").write_text("x")
        answers("test.txt", "shred")

        assert run.main(["-w", str(tmp_path)]) == run.EXIT_USAGE
        assert "unknown command" in capsys.readouterr().err

    @pytest.mark.parametrize("word", ["exit", "QUIT"])
    def test_quit_word(self, tmp_path, answers, capsys, word):
        answers(word)
        assert run.main(["-w", str(tmp_path)]) == run.EXIT_OK
        assert "Bye." in capsys.readouterr().out
        assert not (tmp_path / "logfile.txt").exists()

    def test_eof(self, tmp_path, answers):
        answers()
        assert run.main(["-w", str(tmp_path)]) == run.EXIT_USAGE

    def test_undecodable_input(self, tmp_path, monkeypatch, capsys):
        def bad_input(prompt=""):
            raise UnicodeDecodeError("utf-8", b"\xe9", 0, 1, "invalid continuation byte")

        monkeypatch.setattr("builtins.input", bad_input)
        assert run.main(["-w", str(tmp_path)]) == run.EXIT_USAGE
        assert "not valid text" in capsys.readouterr().err

    def test_printable_replaces_surrogates(self):
        assert run.printable("caf\udce9.txt") == "caf\ufffd.txt"

    def test_missing_config(self, tmp_path, answers, capsys):
        answers("test.txt", "backup")
        code = run.main(["-w", str(tmp_path), "-c", str(tmp_path / "nope.json")])
        assert code == run.EXIT_USAGE
        assert "Config file not found" in capsys.readouterr().err

    def test_custom_log_file(self, tmp_path, answers):
        cfg = tmp_path / "config.json"
        cfg.write_text(json.dumps({"backup": {"log_file": "actions.jsonl"}}))
        (tmp_path / "test.txt").write_text("x")
        answers("test.txt", "backup")

        assert run.main(["-w", str(tmp_path), "-c", str(cfg)]) == run.EXIT_OK
        assert (tmp_path / "actions.jsonl").exists()
        assert not (tmp_path / "logfile.txt").exists()
