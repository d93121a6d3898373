"""Hotkey manager interface and an in-memory manager used without a keyboard hook."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Callable

from .keys import Event
from .parser import Parser
from .settings import HotkeyConfig

Handler = Callable[[Event], None]


class HotkeyManager(ABC):
    """Registers hotkey sequences and reports casts to a handler."""

    handler: Handler | None = None

    @abstractmethod
    def start(self) -> None:
        """Begin listening for hotkeys."""

    @abstractmethod
    def stop(self) -> None:
        """Stop listening for hotkeys."""

    @abstractmethod
    def register(self, sequence: str, spell_name: str) -> None:
        """Bind ``sequence`` to ``spell_name``."""

    @abstractmethod
    def unregister(self, sequence: str) -> None:
        """Remove the binding of ``sequence``."""

    @property
    @abstractmethod
    def running(self) -> bool:
        """Whether the manager is listening."""


class MockManager(HotkeyManager):
    """A manager whose key presses are simulated by calling simulate_key_press."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._running = False
        self.handler: Handler | None = None
        self.sequences: dict[str, str] = {}
        self.start_error: BaseException | None = None
        self.stop_error: BaseException | None = None

    def start(self) -> None:
        with self._lock:
            if self.start_error is not None:
                raise self.start_error
            self._running = True

    def stop(self) -> None:
        with self._lock:
            if self.stop_error is not None:
                raise self.stop_error
            self._running = False

    def register(self, sequence: str, spell_name: str) -> None:
        with self._lock:
            self.sequences[sequence] = spell_name

    def unregister(self, sequence: str) -> None:
        with self._lock:
            self.sequences.pop(sequence, None)

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    def simulate_key_press(self, sequence: str) -> None:
        """Pass an event to the handler if ``sequence`` is registered."""
        with self._lock:
            handler = self.handler
            spell_name = self.sequences.get(sequence)
        if spell_name is None or handler is None:
            return
        key_sequence = Parser().parse(sequence)
        handler(Event(sequence=key_sequence, spell_name=spell_name))


def create_manager(config: HotkeyConfig) -> HotkeyManager:
    """Create the hotkey manager available without a system keyboard hook."""
    return MockManager()