"""Per-platform rules for launching applications."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Sequence

_URL_SCHEMES = ("http://", "https://", "file://", "mailto:")
_DOCUMENT_EXTENSIONS = (".pdf", ".html", ".png", ".jpg", ".jpeg", ".gif")


class AppLauncher(ABC):
    """Builds the command line that launches an application on one platform."""

    @abstractmethod
    def prepare_command(self, path: str, args: Sequence[str]) -> list[str]:
        """Return the argument vector that launches ``path`` with ``args``."""

    @abstractmethod
    def is_special_path(self, path: str) -> bool:
        """Whether ``path`` is opened by the system rather than checked on disk."""

    @abstractmethod
    def requires_shell(self, path: str) -> bool:
        """Whether ``path`` has to be opened through the system shell."""


class DarwinLauncher(AppLauncher):
    def prepare_command(self, path: str, args: Sequence[str]) -> list[str]:
        args = list(args or ())
        if path.endswith(".app"):
            if args:
                return ["open", "-a", path, "--args", *args]
            return ["open", path]
        return [path, *args]

    def is_special_path(self, path: str) -> bool:
        return path.startswith(("/System/", "/Applications/")) or path.endswith(".app")

    def requires_shell(self, path: str) -> bool:
        return path.endswith(".app")


class LinuxLauncher(AppLauncher):
    def prepare_command(self, path: str, args: Sequence[str]) -> list[str]:
        if self.is_special_path(path):
            return ["xdg-open", path]
        return [path, *(args or ())]

    def is_special_path(self, path: str) -> bool:
        if path.startswith(_URL_SCHEMES):
            return True
        return path.lower().endswith(_DOCUMENT_EXTENSIONS)

    def requires_shell(self, path: str) -> bool:
        return path.endswith(".desktop")


class WindowsLauncher(AppLauncher):
    def prepare_command(self, path: str, args: Sequence[str]) -> list[str]:
        if self.requires_shell(path):
            return ["cmd", "/c", "start", "", path]
        return [path, *(args or ())]

    def is_special_path(self, path: str) -> bool:
        return path.startswith(("ms-", "http://", "https://"))

    def requires_shell(self, path: str) -> bool:
        return self.is_special_path(path) or path.lower().endswith((".url", ".lnk"))


def get_app_launcher() -> AppLauncher:
    """Return the application launcher for the running platform."""
    if sys.platform == "darwin":
        return DarwinLauncher()
    if sys.platform == "win32":
        return WindowsLauncher()
    if sys.platform.startswith("linux"):
        return LinuxLauncher()
    raise RuntimeError(f"unsupported platform: {sys.platform}")