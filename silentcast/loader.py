"""Loading, merging and validating configuration files."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any

import yaml

from .settings import (
    CONFIG_NAME,
    Config,
    KeyNames,
    PlatformResolver,
    get_platform_resolver,
)

_BOOL_TAG = "tag:yaml.org,2002:bool"
_VALID_ACTION_TYPES = ("app", "script")
_VALID_LOG_LEVELS = ("debug", "info", "warn", "error")


class _YamlLoader(yaml.SafeLoader):
    """Safe loader that treats only true/false spellings as booleans."""


_YamlLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _BOOL_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_YamlLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


class ConfigLoadError(Exception):
    """Raised when configuration cannot be read, parsed or validated."""


def _uses_standard_names(keys: KeyNames) -> bool:
    return (
        keys.daemon == "daemon"
        and keys.hotkeys == "hotkeys"
        and keys.shortcuts == "spells"
        and keys.actions == "grimoire"
    )


def map_custom_keys(
    data: str | bytes, keys: KeyNames | None = None
) -> tuple[dict[str, Any], bool]:
    """Parse YAML and rename custom top-level keys to the standard ones.

    Returns the mapping and whether ``prefix`` appeared in the hotkeys section.
    """
    keys = keys or KeyNames()
    try:
        raw = yaml.load(data, Loader=_YamlLoader)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(str(exc)) from exc
    if raw is None:
        raw = {}
    if not isinstance(raw, Mapping):
        raise ConfigLoadError("configuration must be a mapping at the top level")

    hotkeys = raw.get(keys.hotkeys)
    has_prefix = isinstance(hotkeys, Mapping) and "prefix" in hotkeys

    if _uses_standard_names(keys):
        return dict(raw), has_prefix

    pairs = (
        (keys.daemon, "daemon"),
        (keys.hotkeys, "hotkeys"),
        (keys.shortcuts, "spells"),
        (keys.actions, "grimoire"),
        (keys.logger, "logger"),
        (keys.updater, "updater"),
    )
    mapped = {standard: raw[custom] for custom, standard in pairs if custom in raw}
    return mapped, has_prefix


class Loader:
    """Reads the common and the platform config file and merges them."""

    def __init__(
        self,
        base_path: str | os.PathLike,
        keys: KeyNames | None = None,
        resolver: PlatformResolver | None = None,
    ) -> None:
        self.keys = keys or KeyNames()
        resolver = resolver or get_platform_resolver()
        base = Path(base_path)
        self.config_paths = [
            base / f"{CONFIG_NAME}.yml",
            base / resolver.platform_config_file(),
        ]

    def load(self) -> Config:
        """Load every existing config file, apply defaults and validate."""
        cfg = Config()
        has_config = False
        for path in self.config_paths:
            try:
                data = path.read_bytes()
            except FileNotFoundError:
                continue
            except OSError as exc:
                raise ConfigLoadError(f"failed to load {path}: {exc}") from exc
            try:
                self._merge(cfg, self._parse(data))
            except ConfigLoadError as exc:
                raise ConfigLoadError(f"failed to load {path}: {exc}") from exc
            has_config = True

        if has_config:
            self._apply_defaults(cfg)

        try:
            self._validate(cfg)
        except ConfigLoadError as exc:
            raise ConfigLoadError(f"configuration validation failed: {exc}") from exc
        return cfg

    def _parse(self, data: bytes) -> Config:
        try:
            mapped, has_prefix = map_custom_keys(data, self.keys)
        except ConfigLoadError as exc:
            raise ConfigLoadError(f"failed to map custom keys: {exc}") from exc
        try:
            parsed = Config.from_dict(mapped)
        except (ValueError, TypeError) as exc:
            raise ConfigLoadError(f"failed to parse YAML: {exc}") from exc
        parsed.prefix_explicitly_set = parsed.prefix_explicitly_set or has_prefix
        return parsed

    @staticmethod
    def _apply_defaults(cfg: Config) -> None:
        if not cfg.daemon.log_level:
            cfg.daemon.log_level = "info"
        if not cfg.hotkeys.prefix and not cfg.prefix_explicitly_set:
            cfg.hotkeys.prefix = "alt+space"
        if not cfg.hotkeys.timeout:
            cfg.hotkeys.timeout = timedelta(milliseconds=1000)
        if not cfg.hotkeys.sequence_timeout:
            cfg.hotkeys.sequence_timeout = timedelta(milliseconds=2000)
        if not cfg.logger.level:
            cfg.logger.level = "info"
        if not cfg.logger.max_size:
            cfg.logger.max_size = 10
        if not cfg.logger.max_backups:
            cfg.logger.max_backups = 3
        if not cfg.logger.max_age:
            cfg.logger.max_age = 7

    @staticmethod
    def _merge(dst: Config, src: Config) -> None:
        if src.daemon.log_level:
            dst.daemon.log_level = src.daemon.log_level
        if src.daemon.auto_start:
            dst.daemon.auto_start = True
        if not src.daemon.config_watch:
            dst.daemon.config_watch = False

        if src.prefix_explicitly_set:
            dst.hotkeys.prefix = src.hotkeys.prefix
            dst.prefix_explicitly_set = True
        elif src.hotkeys.prefix:
            dst.hotkeys.prefix = src.hotkeys.prefix
        if src.hotkeys.timeout > timedelta(0):
            dst.hotkeys.timeout = src.hotkeys.timeout
        if src.hotkeys.sequence_timeout > timedelta(0):
            dst.hotkeys.sequence_timeout = src.hotkeys.sequence_timeout

        if src.logger.level:
            dst.logger.level = src.logger.level
        if src.logger.file:
            dst.logger.file = src.logger.file
        if src.logger.max_size > 0:
            dst.logger.max_size = src.logger.max_size
        if src.logger.max_backups > 0:
            dst.logger.max_backups = src.logger.max_backups
        if src.logger.max_age > 0:
            dst.logger.max_age = src.logger.max_age
        if src.logger.compress:
            dst.logger.compress = True

        dst.shortcuts.update(src.shortcuts)
        dst.actions.update(src.actions)

    @staticmethod
    def _validate(cfg: Config) -> None:
        if not cfg.hotkeys.prefix and not cfg.prefix_explicitly_set:
            raise ConfigLoadError("hotkeys.prefix is required")

        for spell, action in cfg.shortcuts.items():
            if action not in cfg.actions:
                raise ConfigLoadError(
                    f"spell '{spell}' references non-existent grimoire action '{action}'"
                )

        for name, action in cfg.actions.items():
            if not action.type:
                raise ConfigLoadError(f"grimoire action '{name}' missing type")
            if action.type not in _VALID_ACTION_TYPES:
                raise ConfigLoadError(
                    f"grimoire action '{name}' has invalid type '{action.type}' "
                    "(must be 'app' or 'script')"
                )
            if not action.command:
                raise ConfigLoadError(f"grimoire action '{name}' missing command")

        if cfg.daemon.log_level not in _VALID_LOG_LEVELS:
            raise ConfigLoadError(f"invalid log level '{cfg.daemon.log_level}'")