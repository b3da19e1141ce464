"""
tests/test_cli.py — pytest tests for the radixstream command line entry point
and configuration helpers.
"""

import io
import sys

import pytest

from radixstream import __main__ as cli
from radixstream import config


@pytest.fixture()
def no_tty(monkeypatch):
    """Non-interactive stdin, so main() never prompts."""
    monkeypatch.setattr(sys, "stdin", io.StringIO(""))


@pytest.fixture()
def answers(monkeypatch):
    """Feed scripted answers to input()."""
    def feed(*replies):
        pending = iter(replies)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(pending))
    return feed


class TestParseArgs:

    def test_defaults(self):
        args = cli.parse_args(["notes.txt"])

        assert args.input_path == "notes.txt"
        assert args.zero_streaming is None
        assert args.speed is None
        assert args.display == "terminal"
        assert not args.keep_case
        assert not args.yes

    def test_streaming_flags(self):
        assert cli.parse_args(["f", "--zero-streaming"]).zero_streaming is True
        assert cli.parse_args(["f", "--sparse"]).zero_streaming is False

    def test_streaming_flags_are_exclusive(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["f", "--zero-streaming", "--sparse"])

    @pytest.mark.parametrize("speed", ["0", "-10"])
    def test_rejects_non_positive_speed(self, speed):
        with pytest.raises(SystemExit):
            cli.parse_args(["f", "--speed", speed])

    def test_rejects_unknown_display(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["f", "--display", "printer"])


class TestCollectSettings:

    def test_non_interactive_uses_defaults(self):
        settings = cli.collect_settings(cli.parse_args(["notes.txt"]), interactive=False)

        assert settings == cli.SessionSettings(
            input_path="notes.txt",
            zero_streaming=False,
            update_speed=config.DEFAULT_UPDATE_SPEED_MS
        )

    def test_non_interactive_needs_a_path(self):
        with pytest.raises(ValueError):
            cli.collect_settings(cli.parse_args([]), interactive=False)

    def test_prompts_for_missing_settings(self, answers):
        answers("notes.txt", "y", "fast", "-3", "25")
        settings = cli.collect_settings(cli.parse_args([]), interactive=True)

        assert settings.input_path == "notes.txt"
        assert settings.zero_streaming is True
        assert settings.update_speed == 25

    def test_flags_skip_prompts(self, answers):
        answers()  # any prompt would raise StopIteration
        args = cli.parse_args(["notes.txt", "--sparse", "--speed", "5"])
        settings = cli.collect_settings(args, interactive=True)

        assert settings.zero_streaming is False
        assert settings.update_speed == 5

    @pytest.mark.parametrize("reply, expected", [("y", True), ("Yes", True), ("n", False), ("", False), ("x", False)])
    def test_prompt_yes_no(self, answers, reply, expected):
        answers(reply)
        assert cli.prompt_yes_no("? ") is expected

    def test_prompt_speed_default(self, answers):
        answers("")
        assert cli.prompt_speed(70) == 70


class TestMain:

    def test_console_session(self, tmp_path, no_tty, capsys):
        path = tmp_path / "input.txt"
        path.write_bytes(b"AABCA")

        status = cli.main([str(path), "--sparse", "--speed", "1", "--display", "console", "--yes"])
        out = capsys.readouterr().out

        assert status == 0
        assert "Total steps: 5" in out
        assert "Distinct symbols: 3" in out
        assert "'a'   x3" in out

    def test_missing_file_aborts_before_encoding(self, tmp_path, no_tty, capsys):
        status = cli.main([str(tmp_path / "nope.txt"), "--display", "console"])
        out = capsys.readouterr().out

        assert status == 1
        assert "Failed to open" in out
        assert "Session Summary" not in out

    def test_missing_path_without_terminal(self, no_tty, capsys):
        assert cli.main(["--display", "console"]) == 2
        assert "No input path" in capsys.readouterr().out

    def test_stdin_needs_a_non_terminal_display(self, no_tty, capsys):
        assert cli.main(["-"]) == 2

    def test_zero_capacity_from_config_is_rejected(self, tmp_path, no_tty, monkeypatch, capsys):
        path = tmp_path / "input.txt"
        path.write_bytes(b"abc")
        monkeypatch.setattr(config, "QUEUE_CAPACITY", 0)

        assert cli.main([str(path), "--display", "console", "--yes"]) == 2
        assert "capacities must be positive" in capsys.readouterr().out

    def test_stdin_console_session(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"abab")))

        status = cli.main(["-", "--speed", "1", "--display", "console"])

        assert status == 0
        assert "Total steps: 4" in capsys.readouterr().out


class TestConfig:

    def test_env_int_reads_value(self, monkeypatch):
        monkeypatch.setenv("RADIXSTREAM_TEST_VALUE", "12")
        assert config._env_int("RADIXSTREAM_TEST_VALUE", 3) == 12

    def test_env_int_falls_back_on_bad_value(self, monkeypatch, capsys):
        monkeypatch.setenv("RADIXSTREAM_TEST_VALUE", "twelve")
        assert config._env_int("RADIXSTREAM_TEST_VALUE", 3) == 3
        assert "[config] Warning" in capsys.readouterr().out

    def test_env_int_missing(self, monkeypatch):
        monkeypatch.delenv("RADIXSTREAM_TEST_VALUE", raising=False)
        assert config._env_int("RADIXSTREAM_TEST_VALUE", 3) == 3
