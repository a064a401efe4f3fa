"""Tests for console color handling"""

from unittest.mock import patch

from redlock_exec.core.colors import ConsoleColors


class TestConsoleColors:
    def test_error_is_red_when_enabled(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        with patch("redlock_exec.core.colors.sys.stderr") as stderr:
            stderr.isatty.return_value = True
            ConsoleColors.configure()

        assert ConsoleColors.is_enabled() is True
        assert ConsoleColors.error("error:") == "\033[91merror:\033[0m"

    def test_flag_disables_colors(self):
        ConsoleColors.configure(no_color=True)

        assert ConsoleColors.is_enabled() is False
        assert ConsoleColors.error("error:") == "error:"

    def test_no_color_environment_variable(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        with patch("redlock_exec.core.colors.sys.stderr") as stderr:
            stderr.isatty.return_value = True
            ConsoleColors.configure()

        assert ConsoleColors.is_enabled() is False

    def test_not_a_terminal(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        with patch("redlock_exec.core.colors.sys.stderr") as stderr:
            stderr.isatty.return_value = False
            ConsoleColors.configure()

        assert ConsoleColors.is_enabled() is False
