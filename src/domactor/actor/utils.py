"""Key tables for translating text and key names into CDP key events."""

import logging
from typing import NamedTuple

logger = logging.getLogger(__name__)

# CDP modifier bitmask values
MODIFIER_BITS: dict[str, int] = {'Alt': 1, 'Control': 2, 'Meta': 4, 'Shift': 8}

# key name -> (code, windowsVirtualKeyCode)
_NAMED_KEYS: dict[str, tuple[str, int]] = {
    'Alt': ('AltLeft', 18),
    'Control': ('ControlLeft', 17),
    'Meta': ('MetaLeft', 91),
    'Shift': ('ShiftLeft', 16),
    'ArrowDown': ('ArrowDown', 40),
    'ArrowLeft': ('ArrowLeft', 37),
    'ArrowRight': ('ArrowRight', 39),
    'ArrowUp': ('ArrowUp', 38),
    'End': ('End', 35),
    'Home': ('Home', 36),
    'PageDown': ('PageDown', 34),
    'PageUp': ('PageUp', 33),
    'Backspace': ('Backspace', 8),
    'Delete': ('Delete', 46),
    'Insert': ('Insert', 45),
    'Enter': ('Enter', 13),
    'Tab': ('Tab', 9),
    'Escape': ('Escape', 27),
    'Space': ('Space', 32),
    **{f'F{n}': (f'F{n}', 111 + n) for n in range(1, 13)},
}

# unshifted punctuation -> (code, windowsVirtualKeyCode)
_PUNCTUATION: dict[str, tuple[str, int]] = {
    ' ': ('Space', 32),
    '-': ('Minus', 189),
    '=': ('Equal', 187),
    '[': ('BracketLeft', 219),
    ']': ('BracketRight', 221),
    '\\': ('Backslash', 220),
    ';': ('Semicolon', 186),
    "'": ('Quote', 222),
    ',': ('Comma', 188),
    '.': ('Period', 190),
    '/': ('Slash', 191),
    '`': ('Backquote', 192),
}

# shifted character -> the key it is typed with
_SHIFTED: dict[str, str] = {
    '!': '1', '@': '2', '#': '3', '$': '4', '%': '5', '^': '6', '&': '7',
    '*': '8', '(': '9', ')': '0', '_': '-', '+': '=', '{': '[', '}': ']',
    '|': '\\', ':': ';', '"': "'", '<': ',', '>': '.', '?': '/', '~': '`',
}


class KeyStroke(NamedTuple):
    """Key event fields needed to type one character."""
    key: str
    code: str
    virtual_key_code: int | None
    modifiers: int


def get_key_info(key: str) -> tuple[str, int | None]:
    """Get the code and virtual key code for a key name.

    Args:
        key: Key name (e.g., 'Enter', 'Tab', 'a', 'Control')

    Returns:
        Tuple of (code, windowsVirtualKeyCode)
    """
    if key in _NAMED_KEYS:
        return _NAMED_KEYS[key]

    if len(key) == 1:
        if key.isascii() and key.isalpha():
            return (f'Key{key.upper()}', ord(key.upper()))
        if key.isdigit():
            return (f'Digit{key}', ord(key))
        if key in _PUNCTUATION:
            return _PUNCTUATION[key]
        return (key, ord(key))

    logger.warning(f'Unknown key: {key}, using default handling')
    return (key, None)


def get_key_stroke(char: str) -> KeyStroke:
    """Describe the key press that types a single character."""
    if char in _SHIFTED:
        base = _SHIFTED[char]
        code, vk_code = get_key_info(base)
        return KeyStroke(base, code, vk_code, MODIFIER_BITS['Shift'])

    if char.isascii() and char.isupper():
        code, vk_code = get_key_info(char)
        return KeyStroke(char.lower(), code, vk_code, MODIFIER_BITS['Shift'])

    code, vk_code = get_key_info(char)
    return KeyStroke(char, code, vk_code, 0)


def calculate_modifier_bitmask(modifiers: list[str] | None) -> int:
    """Calculate the CDP modifier bitmask from a list of modifier names.

    Args:
        modifiers: List of modifier names ('Alt', 'Control', 'Meta', 'Shift')

    Returns:
        Integer bitmask for CDP Input events
    """
    bitmask = 0
    for mod in modifiers or []:
        bitmask |= MODIFIER_BITS.get(mod, 0)
    return bitmask


def split_key_combination(key: str) -> tuple[list[str], str]:
    """Split a combination like 'Control+Shift+A' into modifiers and the main key.

    A trailing '+' is the plus key itself, as in 'Control++' or '+'.
    """
    if key.endswith('+'):
        prefix = key[:-1].rstrip('+')
        return (prefix.split('+') if prefix else []), '+'

    *modifiers, main_key = key.split('+')
    return modifiers, main_key
