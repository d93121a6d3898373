"""Executing grimoire actions: launching applications and running scripts."""

from __future__ import annotations

import os
import re
import shutil
import subprocess
import threading
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path

from .errors import ErrorType, SpellbookError
from .launcher import get_app_launcher
from .settings import ActionConfig
from .shell import get_shell_executor

_ENV_REFERENCE = re.compile(
    r"\$\{(?P<braced>[^}]*)\}|\$(?P<special>[*#$@!?\-0-9])|\$(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
)
_QUICK_COMMANDS = ("git", "echo", "date", "pwd", "ls", "true", "false")


class ActionError(SpellbookError):
    """Raised when an action cannot be found, prepared or run."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(ErrorType.EXECUTION, message, cause)


def expand_env(value: str) -> str:
    """Replace ``$NAME`` and ``${NAME}`` with environment values; unset names become empty."""

    def substitute(match: re.Match) -> str:
        name = next(group for group in match.groups() if group is not None) if any(
            group is not None for group in match.groups()
        ) else ""
        return os.environ.get(name, "")

    return _ENV_REFERENCE.sub(substitute, value)


def _environment(extra: Mapping[str, str]) -> dict[str, str]:
    env = dict(os.environ)
    env.update({key: expand_env(value) for key, value in extra.items()})
    return env


def _release(process: subprocess.Popen) -> None:
    """Let the process run on its own while still reaping it when it exits."""
    threading.Thread(target=process.wait, daemon=True).start()


def _home_dir() -> str | None:
    try:
        return str(Path.home())
    except (RuntimeError, KeyError):
        return None


class Executor(ABC):
    """Runs one configured action."""

    @abstractmethod
    def execute(self) -> None:
        """Run the action; raise ActionError if it fails."""

    @abstractmethod
    def __str__(self) -> str:
        """Short description of the action."""


class AppExecutor(Executor):
    """Launches an application and leaves it running."""

    def __init__(self, config: ActionConfig) -> None:
        self.config = config

    def execute(self) -> None:
        path = expand_env(self.config.command)
        launcher = get_app_launcher()

        if not launcher.is_special_path(path):
            try:
                os.stat(path)
            except FileNotFoundError:
                if shutil.which(path) is None:
                    raise ActionError(f"application not found: {path}") from None
            except OSError as exc:
                raise ActionError("failed to check application", exc) from exc

        argv = launcher.prepare_command(path, self.config.args)
        cwd = expand_env(self.config.working_dir) if self.config.working_dir else None
        env = _environment(self.config.env) if self.config.env else None

        try:
            process = subprocess.Popen(
                argv,
                cwd=cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise ActionError("failed to start application", exc) from exc
        _release(process)

    def __str__(self) -> str:
        return self.config.description or f"Launch {self.config.command}"


class ScriptExecutor(Executor):
    """Runs a command through the shell, or directly when arguments are given."""

    def __init__(self, config: ActionConfig) -> None:
        self.config = config

    def execute(self) -> None:
        command = expand_env(self.config.command)
        if not command.strip():
            raise ActionError("empty command")

        shell_executor = get_shell_executor()
        if self.config.args:
            argv = [*command.split(), *self.config.args]
        else:
            shell, flag = shell_executor.shell()
            argv = [shell, flag, command]

        if self.config.working_dir:
            cwd = expand_env(self.config.working_dir)
        else:
            cwd = _home_dir()
        env = _environment(self.config.env)

        if shell_executor.is_interactive_command(command):
            argv = shell_executor.wrap_in_terminal(argv)

        try:
            process = subprocess.Popen(
                argv,
                cwd=cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as exc:
            raise ActionError("failed to start script", exc) from exc

        if not command.startswith(_QUICK_COMMANDS):
            _release(process)
            return

        status = process.wait()
        if status > 0:
            raise ActionError(f"script execution failed: exit status {status}")
        if status < 0:
            raise ActionError(f"script execution failed: signal {-status}")

    def __str__(self) -> str:
        return self.config.description or f"Run script: {self.config.command}"


class ActionManager:
    """Looks up spells in the grimoire and runs the matching action."""

    def __init__(self, grimoire: Mapping[str, ActionConfig]) -> None:
        self.grimoire = grimoire

    def execute(self, spell_name: str) -> None:
        """Run the action for ``spell_name``; raise ActionError on any failure."""
        action = self.grimoire.get(spell_name)
        if action is None:
            raise ActionError(f"spell '{spell_name}' not found in grimoire")

        try:
            executor = self._create_executor(action)
        except ActionError as exc:
            raise ActionError(
                f"failed to create executor for spell '{spell_name}'", exc
            ) from exc

        try:
            executor.execute()
        except ActionError as exc:
            raise ActionError(f"failed to execute spell '{spell_name}'", exc) from exc

    @staticmethod
    def _create_executor(action: ActionConfig) -> Executor:
        if action.type == "app":
            return AppExecutor(action)
        if action.type == "script":
            return ScriptExecutor(action)
        raise ActionError(f"unknown action type: {action.type}")