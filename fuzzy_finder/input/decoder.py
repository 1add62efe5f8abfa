"""Timed state machine turning key tokens into finder events.

Terminals send arrow keys as ESC followed by ``[`` and a letter, while a lone
Escape press sends only ESC. The only distinguishing signal is the gap before
the next byte, so a pending ESC resolves to ``CANCEL`` once it has waited
longer than ``timeout_s`` with nothing following it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

ESC_SEQUENCE_TIMEOUT_MS = 25


class EventKind(Enum):
    INSERT = auto()
    BACKSPACE = auto()
    NAVIGATE_UP = auto()
    NAVIGATE_DOWN = auto()
    CONFIRM = auto()
    CANCEL = auto()


@dataclass(frozen=True)
class KeyEvent:
    kind: EventKind
    char: str = ""


class DecoderState(Enum):
    IDLE = auto()
    PENDING_ESCAPE = auto()
    PENDING_BRACKET = auto()


_ARROWS = {
    "A": EventKind.NAVIGATE_UP,
    "B": EventKind.NAVIGATE_DOWN,
}


class EscapeDecoder:
    """Consume key tokens and emit at most one :class:`KeyEvent` per call."""

    def __init__(
        self,
        timeout_s: float = ESC_SEQUENCE_TIMEOUT_MS / 1000.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.timeout_s = timeout_s
        self.clock = clock
        self.state = DecoderState.IDLE
        self.pending_since: float | None = None

    def _reset(self) -> None:
        self.state = DecoderState.IDLE
        self.pending_since = None

    def _expired(self, now: float) -> bool:
        return (
            self.state is not DecoderState.IDLE
            and self.pending_since is not None
            and now - self.pending_since > self.timeout_s
        )

    def check_timeout(self, now: float | None = None) -> KeyEvent | None:
        """Resolve a stale pending escape as a standalone Escape press."""
        if now is None:
            now = self.clock()
        if not self._expired(now):
            return None
        self._reset()
        return KeyEvent(EventKind.CANCEL)

    def feed(self, token: str, now: float | None = None) -> KeyEvent | None:
        if now is None:
            now = self.clock()

        if token in {"CTRL_C", "CTRL_D"}:
            self._reset()
            return KeyEvent(EventKind.CANCEL)

        # The gap already elapsed before this token showed up.
        expired = self.check_timeout(now)
        if expired is not None:
            return expired

        if self.state is DecoderState.PENDING_ESCAPE:
            if token == "[":
                self.state = DecoderState.PENDING_BRACKET
                return None
            self._reset()
            return self._feed_idle(token, now)

        if self.state is DecoderState.PENDING_BRACKET:
            self._reset()
            kind = _ARROWS.get(token)
            return KeyEvent(kind) if kind is not None else None

        return self._feed_idle(token, now)

    def _feed_idle(self, token: str, now: float) -> KeyEvent | None:
        if token == "ESC":
            self.state = DecoderState.PENDING_ESCAPE
            self.pending_since = now
            return None
        if token == "\n":
            return KeyEvent(EventKind.CONFIRM)
        if token == "BACKSPACE":
            return KeyEvent(EventKind.BACKSPACE)
        if len(token) == 1 and token.isprintable():
            return KeyEvent(EventKind.INSERT, token)
        return None
