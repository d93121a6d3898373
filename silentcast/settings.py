"""Configuration model, application constants and per-platform config locations."""

from __future__ import annotations

import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

APP_NAME = "silentcast"
CONFIG_NAME = "spellbook"
APP_DISPLAY_NAME = "SilentCast"
APP_DESCRIPTION = "Silent Hotkey Task Runner"


@dataclass(frozen=True)
class KeyNames:
    """Top-level key names used in configuration files."""

    daemon: str = "daemon"
    hotkeys: str = "hotkeys"
    shortcuts: str = "spells"
    actions: str = "grimoire"
    logger: str = "logger"
    updater: str = "updater"


def _mapping(value: Any, what: str) -> Mapping:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"{what}: expected a mapping, got {type(value).__name__}")
    return value


def _str(value: Any, what: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, Mapping)):
        raise ValueError(f"{what}: expected a scalar, got {type(value).__name__}")
    return str(value)


def _bool(value: Any, what: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ValueError(f"{what}: expected a boolean, got {value!r}")


def _int(value: Any, what: str) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise ValueError(f"{what}: expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValueError(f"{what}: expected an integer, got {value!r}")


def parse_duration_ms(value: Any) -> timedelta:
    """Turn a whole number of milliseconds from a config file into a timedelta."""
    return timedelta(milliseconds=_int(value, "duration"))


@dataclass
class DaemonConfig:
    auto_start: bool = False
    log_level: str = ""
    config_watch: bool = False


@dataclass
class LoggerConfig:
    level: str = ""
    file: str = ""
    max_size: int = 0
    max_backups: int = 0
    max_age: int = 0
    compress: bool = False


@dataclass
class UpdaterConfig:
    enabled: bool = False
    check_interval: str = ""
    auto_install: bool = False
    prerelease: bool = False


@dataclass
class HotkeyConfig:
    prefix: str = ""
    timeout: timedelta = timedelta(0)
    sequence_timeout: timedelta = timedelta(0)


@dataclass
class ActionConfig:
    """An action from the grimoire: an application to launch or a script to run."""

    type: str = ""
    command: str = ""
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    working_dir: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ActionConfig:
        data = _mapping(data, "action")
        args = data.get("args")
        if args is None:
            args = []
        elif not isinstance(args, list):
            raise ValueError(f"args: expected a list, got {type(args).__name__}")
        env = _mapping(data.get("env"), "env")
        return cls(
            type=_str(data.get("type"), "type"),
            command=_str(data.get("command"), "command"),
            args=[_str(arg, "args") for arg in args],
            env={_str(k, "env"): _str(v, "env") for k, v in env.items()},
            working_dir=_str(data.get("working_dir"), "working_dir"),
            description=_str(data.get("description"), "description"),
        )


@dataclass
class Config:
    """The whole configuration, keyed by the standard top-level names."""

    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    hotkeys: HotkeyConfig = field(default_factory=HotkeyConfig)
    shortcuts: dict[str, str] = field(default_factory=dict)
    actions: dict[str, ActionConfig] = field(default_factory=dict)
    logger: LoggerConfig = field(default_factory=LoggerConfig)
    updater: UpdaterConfig = field(default_factory=UpdaterConfig)
    prefix_explicitly_set: bool = False

    @classmethod
    def from_dict(cls, data: Any) -> Config:
        data = _mapping(data, "configuration")
        daemon = _mapping(data.get("daemon"), "daemon")
        hotkeys = _mapping(data.get("hotkeys"), "hotkeys")
        spells = _mapping(data.get("spells"), "spells")
        grimoire = _mapping(data.get("grimoire"), "grimoire")
        logger = _mapping(data.get("logger"), "logger")
        updater = _mapping(data.get("updater"), "updater")
        return cls(
            daemon=DaemonConfig(
                auto_start=_bool(daemon.get("auto_start"), "daemon.auto_start"),
                log_level=_str(daemon.get("log_level"), "daemon.log_level"),
                config_watch=_bool(daemon.get("config_watch"), "daemon.config_watch"),
            ),
            hotkeys=HotkeyConfig(
                prefix=_str(hotkeys.get("prefix"), "hotkeys.prefix"),
                timeout=parse_duration_ms(hotkeys.get("timeout")),
                sequence_timeout=parse_duration_ms(hotkeys.get("sequence_timeout")),
            ),
            shortcuts={_str(k, "spells"): _str(v, "spells") for k, v in spells.items()},
            actions={
                _str(name, "grimoire"): ActionConfig.from_dict(action)
                for name, action in grimoire.items()
            },
            logger=LoggerConfig(
                level=_str(logger.get("level"), "logger.level"),
                file=_str(logger.get("file"), "logger.file"),
                max_size=_int(logger.get("max_size"), "logger.max_size"),
                max_backups=_int(logger.get("max_backups"), "logger.max_backups"),
                max_age=_int(logger.get("max_age"), "logger.max_age"),
                compress=_bool(logger.get("compress"), "logger.compress"),
            ),
            updater=UpdaterConfig(
                enabled=_bool(updater.get("enabled"), "updater.enabled"),
                check_interval=_str(updater.get("check_interval"), "updater.check_interval"),
                auto_install=_bool(updater.get("auto_install"), "updater.auto_install"),
                prerelease=_bool(updater.get("prerelease"), "updater.prerelease"),
            ),
            prefix_explicitly_set="prefix" in hotkeys,
        )


def _home_dir() -> str | None:
    name = "USERPROFILE" if sys.platform == "win32" else "HOME"
    return os.environ.get(name) or None


class PlatformResolver(ABC):
    """Knows the platform's extra config file name and default config directory."""

    @abstractmethod
    def platform_config_file(self) -> str:
        """Name of the config file that applies only to this platform."""

    @abstractmethod
    def default_config_path(self) -> str:
        """Directory that holds the configuration by default."""


class DarwinResolver(PlatformResolver):
    def platform_config_file(self) -> str:
        return f"{CONFIG_NAME}.mac.yml"

    def default_config_path(self) -> str:
        home = _home_dir()
        if home:
            return os.path.join(home, "Library", "Application Support", APP_NAME)
        return "."


class LinuxResolver(PlatformResolver):
    def platform_config_file(self) -> str:
        return f"{CONFIG_NAME}.linux.yml"

    def default_config_path(self) -> str:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        if xdg:
            return os.path.join(xdg, APP_NAME)
        home = _home_dir()
        if not home:
            return ""
        return os.path.join(home, ".config", APP_NAME)


class WindowsResolver(PlatformResolver):
    def platform_config_file(self) -> str:
        return f"{CONFIG_NAME}.windows.yml"

    def default_config_path(self) -> str:
        app_data = os.environ.get("APPDATA")
        if app_data:
            return os.path.join(app_data, APP_NAME)
        return "."


def get_platform_resolver() -> PlatformResolver:
    """Return the resolver for the running platform."""
    if sys.platform == "darwin":
        return DarwinResolver()
    if sys.platform == "win32":
        return WindowsResolver()
    if sys.platform.startswith("linux"):
        return LinuxResolver()
    raise RuntimeError(f"unsupported platform: {sys.platform}")