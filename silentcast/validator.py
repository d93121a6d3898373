"""Validating hotkey sequences and detecting conflicts between them."""

from __future__ import annotations

from .keys import ParseError, ValidationError
from .parser import Parser


class Validator:
    """Keeps registered sequences and rejects duplicates and prefix conflicts."""

    def __init__(self, parser: Parser | None = None) -> None:
        self._parser = parser or Parser()
        self._registered: dict[str, str] = {}

    def validate(self, sequence: str, spell_name: str) -> None:
        """Raise ParseError or ValidationError if ``sequence`` cannot be registered."""
        key_sequence = self._parser.parse(sequence)
        if not key_sequence.keys:
            raise ValidationError(sequence, "sequence must contain at least one key")

        normalised = self._normalise(sequence)
        existing = self._registered.get(normalised)
        if existing is not None and existing != spell_name:
            raise ValidationError(
                sequence, f"sequence already registered for spell '{existing}'"
            )
        self._check_prefix_conflicts(normalised)

    def register(self, sequence: str, spell_name: str) -> None:
        """Validate and then record ``sequence`` for ``spell_name``."""
        self.validate(sequence, spell_name)
        self._registered[self._normalise(sequence)] = spell_name

    def unregister(self, sequence: str) -> None:
        """Forget ``sequence``; unknown sequences are ignored."""
        self._registered.pop(self._normalise(sequence), None)

    def clear(self) -> None:
        """Forget every registered sequence."""
        self._registered.clear()

    def registered(self) -> dict[str, str]:
        """A copy of the normalised sequence to spell name mapping."""
        return dict(self._registered)

    def _normalise(self, sequence: str) -> str:
        try:
            return str(self._parser.parse(sequence))
        except ParseError:
            return sequence.lower()

    def _check_prefix_conflicts(self, normalised: str) -> None:
        parts = normalised.split(",")
        for registered, existing_spell in self._registered.items():
            if registered == normalised:
                continue
            registered_parts = registered.split(",")
            if len(parts) < len(registered_parts) and registered_parts[: len(parts)] == parts:
                raise ValidationError(
                    normalised,
                    f"sequence conflicts with longer sequence '{registered}' "
                    f"(spell: {existing_spell})",
                )
            if (
                len(registered_parts) < len(parts)
                and parts[: len(registered_parts)] == registered_parts
            ):
                raise ValidationError(
                    normalised,
                    f"sequence conflicts with shorter sequence '{registered}' "
                    f"(spell: {existing_spell})",
                )