import pytest

from pixedit.core.shortcuts import parse_shortcut, validate_shortcut


@pytest.mark.parametrize(
    "shortcut",
    ["ctrl+shift+x", "Ctrl+Alt+S", "super+print_screen", "cmd+f5", "control + 4"],
)
def test_valid_shortcuts(shortcut: str) -> None:
    assert validate_shortcut(shortcut)


@pytest.mark.parametrize(
    "shortcut",
    [
        "",
        "x",
        "ctrl",
        "ctrl+shift",
        "ctrl+a+b",
        "ctrl+",
        "+x",
        "ctrl+banana",
        "f5",
    ],
)
def test_invalid_shortcuts(shortcut: str) -> None:
    assert not validate_shortcut(shortcut)
    assert parse_shortcut(shortcut) is None


def test_parse_canonicalizes_modifiers() -> None:
    modifiers, key = parse_shortcut("Control+Option+Win+Q")
    assert modifiers == frozenset({"ctrl", "alt", "super"})
    assert key == "q"


def test_repeated_modifier_counts_once() -> None:
    assert parse_shortcut("ctrl+control+k") == (frozenset({"ctrl"}), "k")
