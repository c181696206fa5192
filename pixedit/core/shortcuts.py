"""
Parsing and validation of global shortcut strings.

Shortcuts are written as "+"-joined key names, e.g. "ctrl+shift+x". A
shortcut is only registered when it contains at least one modifier and
exactly one non-modifier key.
"""

from typing import FrozenSet, Optional, Tuple

# Aliases accepted for each modifier, mapped to a canonical name
MODIFIER_ALIASES = {
    "ctrl": "ctrl",
    "control": "ctrl",
    "shift": "shift",
    "alt": "alt",
    "option": "alt",
    "super": "super",
    "win": "super",
    "cmd": "super",
    "meta": "super",
}

# Named non-modifier keys understood by the hotkey listener
NAMED_KEYS = {
    "space", "tab", "enter", "esc", "insert", "delete", "home", "end",
    "page_up", "page_down", "print_screen",
    *(f"f{i}" for i in range(1, 13)),
}


def parse_shortcut(shortcut: str) -> Optional[Tuple[FrozenSet[str], str]]:
    """
    Split a shortcut string into (modifiers, key).

    Args:
        shortcut: The shortcut string (e.g., "ctrl+shift+x").

    Returns:
        A (frozenset of canonical modifier names, key name) tuple, or None
        when the string is not a valid shortcut.
    """
    if not shortcut:
        return None

    parts = [part.strip().lower() for part in shortcut.split("+")]
    if any(not part for part in parts):
        return None

    modifiers = set()
    keys = []
    for part in parts:
        if part in MODIFIER_ALIASES:
            modifiers.add(MODIFIER_ALIASES[part])
        elif len(part) == 1 or part in NAMED_KEYS:
            keys.append(part)
        else:
            return None

    if not modifiers or len(keys) != 1:
        return None

    return frozenset(modifiers), keys[0]


def validate_shortcut(shortcut: str) -> bool:
    """Return True if the shortcut has at least one modifier plus one key."""
    return parse_shortcut(shortcut) is not None
