"""Keyboard and mouse state tracking fed by window-system callbacks."""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Union

from snakecore.events import Event


class Key(IntEnum):
    # Alphabet keys
    A = 65
    B = 66
    C = 67
    D = 68
    E = 69
    F = 70
    G = 71
    H = 72
    I = 73  # noqa: E741
    J = 74
    K = 75
    L = 76
    M = 77
    N = 78
    O = 79  # noqa: E741
    P = 80
    Q = 81
    R = 82
    S = 83
    T = 84
    U = 85
    V = 86
    W = 87
    X = 88
    Y = 89
    Z = 90

    # Numeric keys
    Zero = 48
    One = 49
    Two = 50
    Three = 51
    Four = 52
    Five = 53
    Six = 54
    Seven = 55
    Eight = 56
    Nine = 57

    # Function keys
    F1 = 290
    F2 = 291
    F3 = 292
    F4 = 293
    F5 = 294
    F6 = 295
    F7 = 296
    F8 = 297
    F9 = 298
    F10 = 299
    F11 = 300
    F12 = 301

    # Special keys
    Space = 32
    Enter = 257
    Tab = 258
    CapsLock = 280
    Shift = 340
    LeftControl = 341
    RightControl = 345
    Alt = 342
    Escape = 256
    Backspace = 259
    Delete = 261
    ArrowUp = 265
    ArrowDown = 264
    ArrowLeft = 263
    ArrowRight = 262
    PageUp = 266
    PageDown = 267
    Home = 268
    End = 269
    Insert = 260
    Accent = 96


class MouseButton(IntEnum):
    LEFT_BUTTON = 0
    RIGHT_BUTTON = 1
    SCROLL = 2
    NONE = 3


class MouseAction(IntEnum):
    UP = 0
    DOWN = 1
    MOVE = 2
    TOGGLE_VISIBILITY = 3


class InputType(IntEnum):
    RELEASE = 0
    PRESS = 1
    HELD = 2


class MouseEventType(IntEnum):
    RECEIVE = 0  # input was received
    SET = 1  # the window should apply a new state, e.g. a new cursor position


@dataclass
class MouseEvent(Event):
    event_type: MouseEventType
    mouse_action: MouseAction
    mouse_button: MouseButton
    mouse_pos_new: tuple[int, int]
    mouse_pos_old: tuple[int, int]
    data_payload: Any = 0


@dataclass
class KeyEvent(Event):
    key: int
    event_type: int


KeyLike = Union[Key, int, str]


def _key_code(key: KeyLike) -> int:
    """Key code with lower-case ASCII letters folded to upper case."""
    if isinstance(key, str):
        if len(key) != 1:
            raise ValueError(f"expected a single character, got {key!r}")
        key = ord(key)
    code = int(key)
    if ord("a") <= code <= ord("z"):
        code -= ord("a") - ord("A")
    return code


class Input:
    """Current key and mouse-button states and the cursor position."""

    def __init__(self) -> None:
        self._mouse_position: tuple[int, int] = (0, 0)
        self._last_mouse_position: tuple[int, int] = (0, 0)
        self._key_states: dict[int, InputType] = {}
        self._mouse_states: dict[int, InputType] = {}

    def is_key_down(self, key: KeyLike) -> bool:
        """True if the key was pressed this frame or is held (case-insensitive)."""
        return self._key_states.get(_key_code(key), InputType.RELEASE) != InputType.RELEASE

    def is_key_pressed(self, key: KeyLike) -> bool:
        """True only if the key was pressed this frame (case-insensitive)."""
        return self._key_states.get(_key_code(key), InputType.RELEASE) == InputType.PRESS

    def is_mouse_down(self, button: Union[MouseButton, int]) -> bool:
        return self._mouse_states.get(int(button), InputType.RELEASE) != InputType.RELEASE

    def is_mouse_clicked(self, button: Union[MouseButton, int]) -> bool:
        return self._mouse_states.get(int(button), InputType.RELEASE) == InputType.PRESS

    def mouse_position(self) -> tuple[int, int]:
        return self._mouse_position

    def mouse_delta(self) -> tuple[float, float]:
        """Cursor movement between the last two positions."""
        return (
            float(self._mouse_position[0] - self._last_mouse_position[0]),
            float(self._mouse_position[1] - self._last_mouse_position[1]),
        )

    def move_mouse(self, x: int, y: int) -> None:
        """Record a new cursor position, keeping the previous one for deltas."""
        self._last_mouse_position = self._mouse_position
        self._mouse_position = (int(x), int(y))

    def key_callback(self, key: int, scancode: int, action: int, mods: int) -> None:
        self._key_states[int(key)] = InputType(action)

    def mouse_callback(self, button: int, action: int, mods: int) -> None:
        if action != MouseAction.MOVE:
            self._mouse_states[int(button)] = InputType(action)