import sys

import pytest

from silentcast.keys import (
    DarwinKeyMapper,
    Event,
    Key,
    KeySequence,
    LinuxKeyMapper,
    ParseError,
    ValidationError,
    WindowsKeyMapper,
    get_key_mapper,
)


@pytest.mark.parametrize(
    "sequence, want",
    [
        (KeySequence([Key("a", [])]), "a"),
        (KeySequence([Key("a", ["ctrl"])]), "ctrl+a"),
        (KeySequence([Key("a", ["ctrl", "shift"])]), "ctrl+shift+a"),
        (KeySequence([Key("g", []), Key("s", [])]), "g,s"),
    ],
)
def test_key_sequence_str(sequence, want):
    assert str(sequence) == want


def test_key_str_without_modifiers_is_name():
    key = Key("space", code=0x20)
    assert str(key) == "space"
    assert key.modifiers == []


def test_empty_sequence_str():
    assert str(KeySequence()) == ""


def test_event_holds_sequence_and_spell():
    seq = KeySequence([Key("g"), Key("s")])
    event = Event(seq, "git_status")
    assert event.spell_name == "git_status"
    assert str(event.sequence) == "g,s"
    assert event.timestamp.year >= 2000


def test_parse_error_message():
    err = ParseError("", "empty sequence")
    assert str(err) == "failed to parse key sequence '': empty sequence"
    assert err.input == ""
    assert err.message == "empty sequence"


def test_validation_error_message():
    err = ValidationError("g", "sequence conflicts with longer sequence 'g,s'")
    assert "invalid key sequence 'g'" in str(err)
    assert err.sequence == "g"
    with pytest.raises(ValueError):
        raise err


def test_darwin_modifier_map():
    mods = DarwinKeyMapper().modifier_map()
    assert mods["command"] == "cmd"
    assert mods["option"] == "alt"
    assert mods["control"] == "ctrl"


def test_linux_modifier_map_super():
    mods = LinuxKeyMapper().modifier_map()
    for spelling in ("cmd", "command", "win", "windows", "meta", "super"):
        assert mods[spelling] == "super"


def test_windows_modifier_map():
    mods = WindowsKeyMapper().modifier_map()
    assert mods["windows"] == "win"
    assert "cmd" not in mods


def test_special_keys():
    assert DarwinKeyMapper().special_keys()["fn"] == 0x3F
    assert WindowsKeyMapper().special_keys()["printscreen"] == 0x2C
    assert LinuxKeyMapper().special_keys() == {}


def test_modifier_map_is_a_copy():
    mapper = LinuxKeyMapper()
    mapper.modifier_map()["ctrl"] = "changed"
    assert mapper.modifier_map()["ctrl"] == "ctrl"


@pytest.mark.parametrize(
    "mapper, rawcode, name",
    [
        (DarwinKeyMapper(), 0, "a"),
        (DarwinKeyMapper(), 49, "space"),
        (DarwinKeyMapper(), 122, "f1"),
        (LinuxKeyMapper(), 38, "a"),
        (LinuxKeyMapper(), 65, "space"),
        (LinuxKeyMapper(), 9, "esc"),
        (WindowsKeyMapper(), 30, "a"),
        (WindowsKeyMapper(), 57, "space"),
        (WindowsKeyMapper(), 96, "numpad0"),
    ],
)
def test_key_name_from_rawcode(mapper, rawcode, name):
    assert mapper.key_name_from_rawcode(rawcode) == name


def test_unknown_rawcode_is_none():
    assert LinuxKeyMapper().key_name_from_rawcode(5000) is None


def test_windows_shared_codes_keep_navigation_names():
    mapper = WindowsKeyMapper()
    assert mapper.key_name_from_rawcode(79) == "end"
    assert mapper.key_name_from_rawcode(72) == "up"


@pytest.mark.parametrize(
    "mapper, rawcode, name",
    [
        (DarwinKeyMapper(), 55, "cmd"),
        (DarwinKeyMapper(), 58, "alt"),
        (LinuxKeyMapper(), 133, "super"),
        (LinuxKeyMapper(), 37, "ctrl"),
        (WindowsKeyMapper(), 91, "win"),
        (WindowsKeyMapper(), 42, "shift"),
    ],
)
def test_modifier_name(mapper, rawcode, name):
    assert mapper.modifier_name(rawcode) == name


def test_letter_is_not_modifier():
    assert LinuxKeyMapper().modifier_name(38) is None


@pytest.mark.parametrize("mapper", [DarwinKeyMapper(), LinuxKeyMapper(), WindowsKeyMapper()])
def test_modifier_codes_name_known_modifiers(mapper):
    targets = set(mapper.modifier_map().values())
    for code in range(256):
        name = mapper.modifier_name(code)
        if name is not None:
            assert name in targets


@pytest.mark.parametrize(
    "platform, cls",
    [("darwin", DarwinKeyMapper), ("win32", WindowsKeyMapper), ("linux", LinuxKeyMapper)],
)
def test_get_key_mapper(monkeypatch, platform, cls):
    monkeypatch.setattr(sys, "platform", platform)
    assert type(get_key_mapper()) is cls


def test_get_key_mapper_unsupported(monkeypatch):
    monkeypatch.setattr(sys, "platform", "plan9")
    with pytest.raises(RuntimeError):
        get_key_mapper()