"""Keyboard input for the terminal frontends.

Raw bytes are read one at a time and folded into action strings
(``"up"``, ``"undo"``, ``"quit"`` ...).  Arrow keys arrive as multi-byte
sequences: ``ESC [ A..D`` on POSIX terminals and a ``\\xe0``/``\\x00``
prefix followed by ``H P K M`` from ``msvcrt`` on Windows.
"""

from __future__ import annotations

import os
import sys
import time
from typing import Callable, Optional

from backend.models.cell import Direction

# Reads the next byte of a sequence, or None if it does not arrive in time.
ReadNext = Callable[[], Optional[str]]

ESCAPE_WAIT = 0.1


# -- key tables ---------------------------------------------------------------

_KEY_MAP: dict[str, str] = {
    "w": "up",
    "s": "down",
    "a": "left",
    "d": "right",
    "q": "quit",
    "\x03": "quit",  # Ctrl-C
    "r": "restart",
    "x": "undo",
    "u": "undo",
    "y": "redo",
    "h": "help",
    "?": "help",
    "\r": "enter",
    "\n": "enter",
}

_ARROW_MAP: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
}

_WINDOWS_ARROW_MAP: dict[str, str] = {
    "H": "up",
    "P": "down",
    "M": "right",
    "K": "left",
}

_WINDOWS_PREFIXES = ("\xe0", "\x00")

DIRECTIONS: dict[str, Direction] = {
    "up": Direction.UP,
    "down": Direction.DOWN,
    "left": Direction.LEFT,
    "right": Direction.RIGHT,
}


def resolve(ch: str) -> str:
    """Map a single raw character to its action string.

    Letters are case-insensitive; unmapped printable characters are
    returned as-is and everything else becomes ``""``.
    """
    action = _KEY_MAP.get(ch.lower() if ch.isalpha() else ch)
    if action is not None:
        return action
    return ch if ch.isprintable() else ""


def resolve_arrow(ch: str) -> str:
    """Map the final byte of an ``ESC [`` sequence to its action string."""
    return _ARROW_MAP.get(ch, "")


def resolve_sequence(first: str, read_next: ReadNext) -> str:
    """Fold *first* and any bytes that follow it into one action.

    *read_next* is only called while a multi-byte sequence is still open.
    A lone ``ESC`` quits, and a truncated arrow sequence resolves to ``""``.
    """
    if first in _WINDOWS_PREFIXES:
        return _WINDOWS_ARROW_MAP.get(read_next() or "", "")
    if first != "\x1b":
        return resolve(first)
    if read_next() != "[":
        return "quit"
    return resolve_arrow(read_next() or "")


# -- platform readers ---------------------------------------------------------


if os.name == "nt":
    import msvcrt  # type: ignore[import-not-found]

    def _wait_char(timeout: float) -> str | None:
        end = time.monotonic() + timeout
        while time.monotonic() < end:
            if msvcrt.kbhit():
                return msvcrt.getwch()
            time.sleep(0.02)
        return None

    def _read_action(timeout: float) -> str | None:
        first = _wait_char(timeout)
        if first is None:
            return None
        return resolve_sequence(first, lambda: _wait_char(ESCAPE_WAIT))

else:
    import select
    import termios
    import tty

    def _read_action(timeout: float) -> str | None:
        fd = sys.stdin.fileno()

        def read_within(wait: float) -> str | None:
            ready, _, _ = select.select([fd], [], [], wait)
            if not ready:
                return None
            # os.read bypasses Python's buffer so select sees pending bytes.
            return os.read(fd, 1).decode("utf-8", errors="ignore")

        old = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            first = read_within(timeout)
            if first is None:
                return None
            return resolve_sequence(first, lambda: read_within(ESCAPE_WAIT))
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old)


# -- public API ---------------------------------------------------------------


def get_key_timeout(timeout: float) -> str | None:
    """Wait up to *timeout* seconds for a key and return its action string.

    Actions: ``up``/``down``/``left``/``right``, ``undo`` (x, u),
    ``redo`` (y), ``restart`` (r), ``help`` (h, ?), ``enter``, ``quit``
    (q, Ctrl-C, Escape), any other printable character, or ``""``.

    Returns None if nothing was pressed in time.
    """
    return _read_action(timeout)
