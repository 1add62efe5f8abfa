"""Low-level terminal input polling.

Reads raw bytes from the input descriptor without blocking for longer than a
short poll interval and turns them into key tokens. Escape sequences are NOT
interpreted here; ``ESC`` is passed through so the timed decoder can decide
whether it starts an arrow sequence.
"""

from __future__ import annotations

import codecs
import os
import select
from collections import deque

READ_CHUNK_SIZE = 1024
DEFAULT_POLL_INTERVAL_MS = 5

_CONTROL_TOKENS = {
    "\x1b": "ESC",
    "\x7f": "BACKSPACE",
    "\x08": "BACKSPACE",
    "\x03": "CTRL_C",
    "\x04": "CTRL_D",
    "\r": "\n",
}


def tokenize(text: str) -> list[str]:
    """Map decoded characters to key tokens, one token per character."""
    return [_CONTROL_TOKENS.get(ch, ch) for ch in text]


class KeyReader:
    """Poll an input descriptor and yield one key token at a time."""

    def __init__(
        self,
        fd: int,
        poll_interval_ms: float = DEFAULT_POLL_INTERVAL_MS,
        typeahead: bytes = b"",
    ) -> None:
        self.fd = fd
        self.poll_interval_ms = poll_interval_ms
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending: deque[str] = deque()
        self._eof = False
        if typeahead:
            self.feed_bytes(typeahead)

    def feed_bytes(self, data: bytes) -> None:
        """Queue raw bytes as if they had just been read from the descriptor."""
        self._pending.extend(tokenize(self._decoder.decode(data)))

    def poll(self) -> str | None:
        """Return the next token, or ``None`` if nothing arrived this interval.

        End of input is reported as ``CTRL_D`` so a closed stream ends the
        session rather than spinning forever.
        """
        if self._pending:
            return self._pending.popleft()
        if self._eof:
            return "CTRL_D"

        ready, _, _ = select.select([self.fd], [], [], max(0.0, self.poll_interval_ms / 1000.0))
        if not ready:
            return None
        data = os.read(self.fd, READ_CHUNK_SIZE)
        if not data:
            self._eof = True
            self._pending.extend(tokenize(self._decoder.decode(b"", final=True)))
            return self._pending.popleft() if self._pending else "CTRL_D"
        self.feed_bytes(data)
        if not self._pending:
            # Partial multi-byte character; wait for the rest.
            return None
        return self._pending.popleft()
