import pytest

from silentcast.keys import (
    DarwinKeyMapper,
    Key,
    KeySequence,
    LinuxKeyMapper,
    ParseError,
    WindowsKeyMapper,
)
from silentcast.parser import Parser


@pytest.fixture
def parser():
    return Parser(LinuxKeyMapper())


def test_single_key(parser):
    seq = parser.parse("a")
    assert len(seq.keys) == 1
    assert seq.keys[0].name == "a"
    assert seq.keys[0].modifiers == []
    assert seq.keys[0].code == 97


def test_key_with_modifier(parser):
    seq = parser.parse("ctrl+a")
    assert len(seq.keys) == 1
    assert seq.keys[0].name == "a"
    assert seq.keys[0].modifiers == ["ctrl"]


def test_multiple_modifiers(parser):
    seq = parser.parse("ctrl+shift+a")
    assert len(seq.keys) == 1
    assert seq.keys[0].name == "a"
    assert seq.keys[0].modifiers == ["ctrl", "shift"]


def test_sequential_keys(parser):
    seq = parser.parse("g,s")
    assert [k.name for k in seq.keys] == ["g", "s"]


def test_sequential_with_modifiers(parser):
    seq = parser.parse("ctrl+g,s")
    assert len(seq.keys) == 2
    assert len(seq.keys[0].modifiers) == 1
    assert seq.keys[1].modifiers == []


def test_function_key(parser):
    seq = parser.parse("f1")
    assert seq.keys[0].name == "f1"
    assert seq.keys[0].code == 0x70


def test_special_key(parser):
    seq = parser.parse("space")
    assert seq.keys[0].name == "space"
    assert seq.keys[0].code == 0x20


@pytest.mark.parametrize(
    "mapper, modifier, normal",
    [
        (DarwinKeyMapper(), "cmd", "cmd"),
        (WindowsKeyMapper(), "win", "win"),
        (LinuxKeyMapper(), "ctrl", "ctrl"),
        (LinuxKeyMapper(), "cmd", "super"),
    ],
)
def test_platform_modifier(mapper, modifier, normal):
    seq = Parser(mapper).parse(f"{modifier}+space")
    assert seq.keys[0].modifiers == [normal]


def test_platform_special_key():
    seq = Parser(DarwinKeyMapper()).parse("fn")
    assert seq.keys[0].code == 0x3F


@pytest.mark.parametrize(
    "text, message",
    [
        ("", "empty sequence"),
        ("a,,b", "empty key in sequence"),
        ("invalid+a", "unknown modifier: invalid"),
        ("unknownkey", "unknown key: unknownkey"),
    ],
)
def test_errors(parser, text, message):
    with pytest.raises(ParseError) as info:
        parser.parse(text)
    assert info.value.message == message


def test_windows_rejects_mac_modifier():
    with pytest.raises(ParseError):
        Parser(WindowsKeyMapper()).parse("cmd+a")


def test_case_insensitive(parser):
    seq = parser.parse("CTRL+A")
    assert seq.keys[0].name == "a"
    assert seq.keys[0].modifiers == ["ctrl"]


def test_whitespace_is_trimmed(parser):
    assert str(parser.parse(" g , s ")) == "g,s"


@pytest.mark.parametrize(
    "sequence, expected",
    [
        (KeySequence([Key(name="a", modifiers=[])]), "a"),
        (KeySequence([Key(name="a", modifiers=["ctrl"])]), "ctrl+a"),
        (KeySequence([Key(name="a", modifiers=["ctrl", "shift"])]), "ctrl+shift+a"),
        (KeySequence([Key(name="g"), Key(name="s")]), "g,s"),
    ],
)
def test_key_sequence_string(sequence, expected):
    assert str(sequence) == expected


def test_parse_round_trip(parser):
    assert str(parser.parse("Control+Alt+Space,x")) == "ctrl+alt+space,x"