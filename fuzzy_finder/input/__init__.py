"""Input-layer public API: raw token polling and the timed escape decoder."""

from .decoder import ESC_SEQUENCE_TIMEOUT_MS, DecoderState, EscapeDecoder, EventKind, KeyEvent
from .reader import DEFAULT_POLL_INTERVAL_MS, KeyReader, tokenize

__all__ = [
    "DEFAULT_POLL_INTERVAL_MS",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "DecoderState",
    "EscapeDecoder",
    "EventKind",
    "KeyEvent",
    "KeyReader",
    "tokenize",
]
