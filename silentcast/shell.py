"""Per-platform shells and terminal wrapping for script actions."""

from __future__ import annotations

import os
import shutil
import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence

_POSIX_INTERACTIVE = ("vim", "nano", "emacs", "htop", "top", "less", "more")
_WINDOWS_INTERACTIVE = ("vim", "nano", "more", "edit")
_LINUX_TERMINALS = ("gnome-terminal", "konsole", "xterm", "xfce4-terminal")


class ShellExecutor(ABC):
    """Knows the platform shell and how to run a command in a terminal window."""

    @abstractmethod
    def shell(self) -> tuple[str, str]:
        """The shell program and the flag that makes it run one command."""

    @abstractmethod
    def wrap_in_terminal(self, command: Sequence[str]) -> list[str]:
        """Return an argument vector that runs ``command`` in a new terminal."""

    @abstractmethod
    def is_interactive_command(self, command: str) -> bool:
        """Whether ``command`` needs a terminal to be useful."""


class GenericShell(ShellExecutor):
    """POSIX shell without any terminal emulator to open."""

    def shell(self) -> tuple[str, str]:
        return os.environ.get("SHELL") or "sh", "-c"

    def wrap_in_terminal(self, command: Sequence[str]) -> list[str]:
        return list(command)

    def is_interactive_command(self, command: str) -> bool:
        return any(name in command for name in _POSIX_INTERACTIVE)


class DarwinShell(GenericShell):
    def wrap_in_terminal(self, command: Sequence[str]) -> list[str]:
        line = " ".join(command).replace('"', '\\"')
        script = f'tell application "Terminal" to do script "{line}"'
        return ["osascript", "-e", script]


class LinuxShell(GenericShell):
    def wrap_in_terminal(self, command: Sequence[str]) -> list[str]:
        for terminal in _LINUX_TERMINALS:
            if shutil.which(terminal) is None:
                continue
            if terminal == "gnome-terminal":
                return [terminal, "--", *command]
            return [terminal, "-e", " ".join(command)]
        return list(command)


class WindowsShell(ShellExecutor):
    def shell(self) -> tuple[str, str]:
        return "cmd", "/c"

    def wrap_in_terminal(self, command: Sequence[str]) -> list[str]:
        return ["cmd", "/c", "start", "cmd", "/k", " ".join(command)]

    def is_interactive_command(self, command: str) -> bool:
        lowered = command.lower()
        return any(name in lowered for name in _WINDOWS_INTERACTIVE)


def get_shell_executor() -> ShellExecutor:
    """Return the shell executor for the running platform."""
    if sys.platform == "darwin":
        return DarwinShell()
    if sys.platform == "win32":
        return WindowsShell()
    if sys.platform.startswith("linux"):
        return LinuxShell()
    return GenericShell()