"""Key, key sequence and event types, and per-platform key code tables."""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Key:
    """One key, possibly held together with modifier keys."""

    name: str
    modifiers: list[str] = field(default_factory=list)
    code: int = 0

    def __str__(self) -> str:
        if not self.modifiers:
            return self.name
        return "+".join(self.modifiers) + "+" + self.name


@dataclass
class KeySequence:
    """Keys pressed one after another, such as ``g,s``."""

    keys: list[Key] = field(default_factory=list)

    def __str__(self) -> str:
        return ",".join(str(key) for key in self.keys)


@dataclass
class Event:
    """A recognised hotkey sequence and the spell it casts."""

    sequence: KeySequence
    spell_name: str
    timestamp: datetime = field(default_factory=datetime.now)


class ParseError(ValueError):
    """Raised when a key sequence string cannot be parsed."""

    def __init__(self, input: str, message: str) -> None:
        super().__init__(f"failed to parse key sequence '{input}': {message}")
        self.input = input
        self.message = message


class ValidationError(ValueError):
    """Raised when a key sequence is not acceptable for registration."""

    def __init__(self, sequence: str, message: str) -> None:
        super().__init__(f"invalid key sequence '{sequence}': {message}")
        self.sequence = sequence
        self.message = message


def _first_wins(groups: Iterable[Mapping[int, str]]) -> dict[int, str]:
    table: dict[int, str] = {}
    for group in groups:
        for code, name in group.items():
            table.setdefault(code, name)
    return table


class KeyMapper(ABC):
    """Platform knowledge about modifier names and raw key codes."""

    _MODIFIERS: Mapping[str, str] = {}
    _SPECIAL: Mapping[str, int] = {}
    _KEY_NAMES: Mapping[int, str] = {}
    _MODIFIER_CODES: Mapping[int, str] = {}

    def modifier_map(self) -> dict[str, str]:
        """Modifier spellings accepted in config, mapped to their normal names."""
        return dict(self._MODIFIERS)

    def special_keys(self) -> dict[str, int]:
        """Extra key names with platform key codes."""
        return dict(self._SPECIAL)

    def key_name_from_rawcode(self, rawcode: int) -> str | None:
        """Name of the key with this raw code, or None if unknown."""
        return self._KEY_NAMES.get(rawcode)

    def modifier_name(self, rawcode: int) -> str | None:
        """Name of the modifier with this raw code, or None if it is not one."""
        return self._MODIFIER_CODES.get(rawcode)


class DarwinKeyMapper(KeyMapper):
    _MODIFIERS = {
        "cmd": "cmd",
        "command": "cmd",
        "ctrl": "ctrl",
        "control": "ctrl",
        "alt": "alt",
        "option": "alt",
        "opt": "alt",
        "shift": "shift",
    }
    _SPECIAL = {"fn": 0x3F, "capslock": 0x39, "clear": 0x47, "help": 0x72}
    _KEY_NAMES = _first_wins([
        {0: "a", 11: "b", 8: "c", 2: "d", 14: "e", 3: "f", 5: "g", 4: "h",
         34: "i", 38: "j", 40: "k", 37: "l", 46: "m", 45: "n", 31: "o", 35: "p",
         12: "q", 15: "r", 1: "s", 17: "t", 32: "u", 9: "v", 13: "w", 7: "x",
         16: "y", 6: "z"},
        {29: "0", 18: "1", 19: "2", 20: "3", 21: "4", 23: "5", 22: "6", 26: "7",
         28: "8", 25: "9"},
        {122: "f1", 120: "f2", 99: "f3", 118: "f4", 96: "f5", 97: "f6",
         98: "f7", 100: "f8", 101: "f9", 109: "f10", 103: "f11", 111: "f12"},
        {49: "space", 36: "enter", 48: "tab", 53: "esc", 51: "backspace",
         117: "delete", 114: "insert", 115: "home", 119: "end", 116: "pageup",
         121: "pagedown", 126: "up", 125: "down", 123: "left", 124: "right"},
        {71: "numlock", 75: "divide", 67: "multiply", 78: "subtract", 69: "add",
         82: "numpad0", 83: "numpad1", 84: "numpad2", 85: "numpad3",
         86: "numpad4", 87: "numpad5", 88: "numpad6", 89: "numpad7",
         91: "numpad8", 92: "numpad9"},
        {57: "capslock", 107: "scrolllock", 113: "pause",
         27: "minus", 24: "equal", 33: "leftbracket", 30: "rightbracket",
         41: "semicolon", 39: "apostrophe", 50: "grave", 42: "backslash",
         43: "comma", 47: "period", 44: "slash"},
    ])
    _MODIFIER_CODES = {
        59: "ctrl", 62: "ctrl",
        56: "shift", 60: "shift",
        58: "alt", 61: "alt",
        55: "cmd", 54: "cmd",
    }


class LinuxKeyMapper(KeyMapper):
    _MODIFIERS = {
        "ctrl": "ctrl",
        "control": "ctrl",
        "alt": "alt",
        "opt": "alt",
        "option": "alt",
        "shift": "shift",
        "cmd": "super",
        "command": "super",
        "win": "super",
        "windows": "super",
        "meta": "super",
        "super": "super",
    }
    _SPECIAL: Mapping[str, int] = {}
    _KEY_NAMES = _first_wins([
        {38: "a", 56: "b", 54: "c", 40: "d", 26: "e", 41: "f", 42: "g", 43: "h",
         31: "i", 44: "j", 45: "k", 46: "l", 58: "m", 57: "n", 32: "o", 33: "p",
         24: "q", 27: "r", 39: "s", 28: "t", 30: "u", 55: "v", 25: "w", 53: "x",
         29: "y", 52: "z"},
        {19: "0", 10: "1", 11: "2", 12: "3", 13: "4", 14: "5", 15: "6", 16: "7",
         17: "8", 18: "9"},
        {67: "f1", 68: "f2", 69: "f3", 70: "f4", 71: "f5", 72: "f6",
         73: "f7", 74: "f8", 75: "f9", 76: "f10", 95: "f11", 96: "f12"},
        {65: "space", 36: "enter", 23: "tab", 9: "esc", 22: "backspace",
         119: "delete", 118: "insert", 110: "home", 115: "end", 112: "pageup",
         117: "pagedown", 111: "up", 116: "down", 113: "left", 114: "right"},
        {77: "numlock", 106: "divide", 63: "multiply", 82: "subtract", 86: "add",
         90: "numpad0", 87: "numpad1", 88: "numpad2", 89: "numpad3",
         83: "numpad4", 84: "numpad5", 85: "numpad6", 79: "numpad7",
         80: "numpad8", 81: "numpad9"},
        {66: "capslock", 78: "scrolllock", 127: "pause",
         20: "minus", 21: "equal", 34: "leftbracket", 35: "rightbracket",
         47: "semicolon", 48: "apostrophe", 49: "grave", 51: "backslash",
         59: "comma", 60: "period", 61: "slash"},
    ])
    _MODIFIER_CODES = {
        37: "ctrl", 105: "ctrl",
        50: "shift", 62: "shift",
        64: "alt", 108: "alt",
        133: "super", 134: "super",
    }


class WindowsKeyMapper(KeyMapper):
    _MODIFIERS = {
        "win": "win",
        "windows": "win",
        "ctrl": "ctrl",
        "control": "ctrl",
        "alt": "alt",
        "shift": "shift",
    }
    _SPECIAL = {"printscreen": 0x2C, "scrolllock": 0x91, "pause": 0x13, "numlock": 0x90}
    # Numpad scan codes share values with the navigation keys; the earlier
    # group keeps the name.
    _KEY_NAMES = _first_wins([
        {30: "a", 48: "b", 46: "c", 32: "d", 18: "e", 33: "f", 34: "g", 35: "h",
         23: "i", 36: "j", 37: "k", 38: "l", 50: "m", 49: "n", 24: "o", 25: "p",
         16: "q", 19: "r", 31: "s", 20: "t", 22: "u", 47: "v", 17: "w", 45: "x",
         21: "y", 44: "z"},
        {11: "0", 2: "1", 3: "2", 4: "3", 5: "4", 6: "5", 7: "6", 8: "7",
         9: "8", 10: "9"},
        {59: "f1", 60: "f2", 61: "f3", 62: "f4", 63: "f5", 64: "f6",
         65: "f7", 66: "f8", 67: "f9", 68: "f10", 87: "f11", 88: "f12"},
        {57: "space", 28: "enter", 15: "tab", 1: "esc", 14: "backspace",
         83: "delete", 82: "insert", 71: "home", 79: "end", 73: "pageup",
         81: "pagedown", 72: "up", 80: "down", 75: "left", 77: "right"},
        {69: "numlock", 53: "divide", 55: "multiply", 74: "subtract", 78: "add",
         96: "numpad0", 79: "numpad1", 80: "numpad2", 81: "numpad3",
         75: "numpad4", 76: "numpad5", 77: "numpad6", 71: "numpad7",
         72: "numpad8", 73: "numpad9"},
        {58: "capslock", 70: "scrolllock", 119: "pause",
         12: "minus", 13: "equal", 26: "leftbracket", 27: "rightbracket",
         39: "semicolon", 40: "apostrophe", 41: "grave", 43: "backslash",
         51: "comma", 52: "period", 53: "slash"},
    ])
    _MODIFIER_CODES = {
        29: "ctrl", 157: "ctrl",
        42: "shift", 54: "shift",
        56: "alt", 184: "alt",
        91: "win", 92: "win",
    }


def get_key_mapper() -> KeyMapper:
    """Return the key mapper for the running platform."""
    if sys.platform == "darwin":
        return DarwinKeyMapper()
    if sys.platform == "win32":
        return WindowsKeyMapper()
    if sys.platform.startswith("linux"):
        return LinuxKeyMapper()
    raise RuntimeError(f"unsupported platform: {sys.platform}")