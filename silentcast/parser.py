"""Parsing key sequence strings such as ``ctrl+shift+a`` or ``g,s``."""

from __future__ import annotations

import string

from .keys import Key, KeyMapper, KeySequence, ParseError, get_key_mapper

_COMMON_KEYS: dict[str, int] = {
    **{ch: ord(ch) for ch in string.ascii_lowercase},
    **{ch: ord(ch) for ch in string.digits},
    **{f"f{i}": 0x70 + i - 1 for i in range(1, 13)},
    "space": 0x20,
    "enter": 0x0D,
    "return": 0x0D,
    "tab": 0x09,
    "esc": 0x1B,
    "escape": 0x1B,
    "backspace": 0x08,
    "delete": 0x2E,
    "insert": 0x2D,
    "home": 0x24,
    "end": 0x23,
    "pageup": 0x21,
    "pagedown": 0x22,
    "up": 0x26,
    "down": 0x28,
    "left": 0x25,
    "right": 0x27,
}


class Parser:
    """Turns key sequence strings into KeySequence objects for one platform."""

    def __init__(self, key_mapper: KeyMapper | None = None) -> None:
        mapper = key_mapper or get_key_mapper()
        self._key_codes = {**_COMMON_KEYS, **mapper.special_keys()}
        self._modifiers = mapper.modifier_map()

    def parse(self, sequence: str) -> KeySequence:
        """Parse comma-separated keys; raise ParseError if any part is invalid."""
        if not sequence:
            raise ParseError(sequence, "empty sequence")
        keys = []
        for part in sequence.split(","):
            part = part.strip()
            if not part:
                raise ParseError(sequence, "empty key in sequence")
            keys.append(self._parse_key(part))
        return KeySequence(keys)

    def _parse_key(self, text: str) -> Key:
        *modifiers, main = text.lower().split("+")
        normalised = []
        for modifier in modifiers:
            try:
                normalised.append(self._modifiers[modifier])
            except KeyError:
                raise ParseError(text, f"unknown modifier: {modifier}") from None
        try:
            code = self._key_codes[main]
        except KeyError:
            raise ParseError(text, f"unknown key: {main}") from None
        return Key(name=main, modifiers=normalised, code=code)