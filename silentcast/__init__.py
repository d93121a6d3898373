"""Hotkey task runner toolkit: spellbook loading, key sequences and action execution."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "executors",
    "keys",
    "launcher",
    "loader",
    "mock",
    "parser",
    "settings",
    "shell",
    "validator",
    "watcher",
]