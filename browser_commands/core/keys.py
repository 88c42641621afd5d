"""
Key-sequence parsing.

A key token passed to `Browser.keys()` is one of:
- a literal string, typed character by character ("hello");
- a bracketed control key name ("{enter}", "{ARROW_LEFT}"), case-insensitive;
- a list/tuple chord whose leading items are modifiers and whose last item
  is the text or key pressed while they are held (["{shift}", "taylor"]).

Names resolve through the `Key` table below. Member values are the key
names understood by Playwright's keyboard API.
"""
# @file purpose: Control-key table and key-token parsing.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Sequence, Union

from .errors import UnknownKeyError


class Key(str, Enum):
    """Named control keys. Aliases share the value of their canonical key."""

    # editing / navigation
    ENTER = "Enter"
    RETURN_KEY = "Enter"
    TAB = "Tab"
    ESCAPE = "Escape"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    INSERT = "Insert"
    HOME = "Home"
    END = "End"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    SPACE = "Space"
    PAUSE = "Pause"

    # arrows
    ARROW_LEFT = "ArrowLeft"
    ARROW_UP = "ArrowUp"
    ARROW_RIGHT = "ArrowRight"
    ARROW_DOWN = "ArrowDown"
    LEFT = "ArrowLeft"
    UP = "ArrowUp"
    RIGHT = "ArrowRight"
    DOWN = "ArrowDown"

    # modifiers
    SHIFT = "Shift"
    CONTROL = "Control"
    ALT = "Alt"
    META = "Meta"
    COMMAND = "Meta"

    # punctuation
    SEMICOLON = "Semicolon"
    EQUALS = "Equal"

    # numpad
    NUMPAD0 = "Numpad0"
    NUMPAD1 = "Numpad1"
    NUMPAD2 = "Numpad2"
    NUMPAD3 = "Numpad3"
    NUMPAD4 = "Numpad4"
    NUMPAD5 = "Numpad5"
    NUMPAD6 = "Numpad6"
    NUMPAD7 = "Numpad7"
    NUMPAD8 = "Numpad8"
    NUMPAD9 = "Numpad9"
    MULTIPLY = "NumpadMultiply"
    ADD = "NumpadAdd"
    SUBTRACT = "NumpadSubtract"
    DECIMAL = "NumpadDecimal"
    DIVIDE = "NumpadDivide"

    # function keys
    F1 = "F1"
    F2 = "F2"
    F3 = "F3"
    F4 = "F4"
    F5 = "F5"
    F6 = "F6"
    F7 = "F7"
    F8 = "F8"
    F9 = "F9"
    F10 = "F10"
    F11 = "F11"
    F12 = "F12"


# lowercase name -> Key, aliases included
KEY_NAMES: dict[str, Key] = {name.lower(): member for name, member in Key.__members__.items()}


@dataclass(frozen=True)
class Chord:
    """Modifier keys held down while `target` is pressed or typed."""

    modifiers: tuple[Key, ...]
    target: Union[str, Key]

    def combinations(self) -> list[str]:
        """Playwright press() strings, one per pressed key."""
        held = [m.value for m in self.modifiers]
        if isinstance(self.target, Key):
            return ["+".join(held + [self.target.value])]
        return ["+".join(held + [ch]) for ch in self.target]


KeyToken = Union[str, Key, Chord]


def is_key_name(token: Any) -> bool:
    return (
        isinstance(token, str)
        and len(token) > 2
        and token.startswith("{")
        and token.endswith("}")
    )


def lookup(name: str) -> Key:
    """Resolve a key name, with or without braces, to a `Key`."""
    bare = name.strip("{}").strip().lower()
    try:
        return KEY_NAMES[bare]
    except KeyError as e:
        raise UnknownKeyError(name) from e


def parse_key(token: Any) -> KeyToken:
    if isinstance(token, (Key, Chord)):
        return token
    if isinstance(token, (list, tuple)):
        return _parse_chord(token)
    if is_key_name(token):
        return lookup(token)
    return str(token)


def parse_keys(tokens: Iterable[Any]) -> list[KeyToken]:
    """Parse every token up front; unknown names fail here, not at dispatch."""
    return [parse_key(token) for token in tokens]


def _parse_chord(parts: Sequence[Any]) -> Union[Chord, KeyToken]:
    if not parts:
        raise ValueError("empty key chord")
    if len(parts) == 1:
        return parse_key(parts[0])

    *heads, last = parts
    modifiers = []
    for head in heads:
        key = head if isinstance(head, Key) else lookup(str(head))
        modifiers.append(key)
    target = lookup(last) if is_key_name(last) else (last if isinstance(last, Key) else str(last))
    return Chord(modifiers=tuple(modifiers), target=target)
