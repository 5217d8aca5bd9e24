"""Key names and decoding of raw terminal input.

Pages handle symbolic key names rather than raw bytes. Printable characters
are passed through as themselves; control keys and escape sequences map to
the names below.
"""

ENTER = "enter"
ESCAPE = "escape"
BACKSPACE = "backspace"
DELETE = "delete"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
PAGE_UP = "page_up"
PAGE_DOWN = "page_down"
F5 = "f5"

#: Keys that navigate back one level
BACK_KEYS = frozenset({LEFT, BACKSPACE, DELETE})

#: Keys that reload the current page
RELOAD_KEYS = frozenset({F5, "r", "R"})

#: Keys that quit the dashboard
QUIT_KEYS = frozenset({"q", "Q"})

_SINGLE_KEYS: dict[str, str] = {
    "\r": ENTER,
    "\n": ENTER,
    "\x1b": ESCAPE,
    "\x7f": BACKSPACE,
    "\b": BACKSPACE,
    "\x10": UP,  # Ctrl+p
    "\x0e": DOWN,  # Ctrl+n
}

_ESCAPE_SEQUENCES: dict[str, str] = {
    "[A": UP,
    "[B": DOWN,
    "[C": RIGHT,
    "[D": LEFT,
    "[3~": DELETE,
    "[5~": PAGE_UP,
    "[6~": PAGE_DOWN,
    "[15~": F5,
    "OA": UP,
    "OB": DOWN,
    "OC": RIGHT,
    "OD": LEFT,
}


def decode_key(raw: str) -> str:
    """
    Translate raw terminal input into a key name.

    Args:
        raw: A single character, or ESC followed by the rest of an escape
            sequence (e.g. ``"\\x1b[A"``).

    Returns:
        A key name from this module, or ``raw`` itself for printable input.
    """
    if raw.startswith("\x1b") and len(raw) > 1:
        return _ESCAPE_SEQUENCES.get(raw[1:], ESCAPE)
    return _SINGLE_KEYS.get(raw, raw)
