"""Regression tests for key-token polling and escape decoding.

Covers ESC timing, arrow sequences, abandoned sequences, control-key
cancellation and UTF-8 reassembly across reads.
"""

from __future__ import annotations

import os
import unittest

from fuzzy_finder.input import DecoderState, EscapeDecoder, EventKind, KeyEvent, KeyReader, tokenize


class EscapeDecoderTests(unittest.TestCase):
    def _decoder(self) -> EscapeDecoder:
        return EscapeDecoder(timeout_s=0.025, clock=lambda: 0.0)

    def test_arrow_sequence_within_timeout_navigates_once(self) -> None:
        decoder = self._decoder()

        self.assertIsNone(decoder.feed("ESC", now=1.000))
        self.assertIsNone(decoder.feed("[", now=1.002))
        self.assertEqual(decoder.feed("A", now=1.004), KeyEvent(EventKind.NAVIGATE_UP))
        self.assertIsNone(decoder.check_timeout(now=5.0))
        self.assertIs(decoder.state, DecoderState.IDLE)

    def test_down_arrow_sequence(self) -> None:
        decoder = self._decoder()
        events = [decoder.feed(token, now=2.0) for token in ("ESC", "[", "B")]

        self.assertEqual(events, [None, None, KeyEvent(EventKind.NAVIGATE_DOWN)])

    def test_lone_escape_cancels_after_timeout_exactly_once(self) -> None:
        decoder = self._decoder()
        decoder.feed("ESC", now=1.000)

        self.assertIsNone(decoder.check_timeout(now=1.010))
        self.assertEqual(decoder.check_timeout(now=1.030), KeyEvent(EventKind.CANCEL))
        self.assertIsNone(decoder.check_timeout(now=1.050))

    def test_pending_bracket_also_times_out(self) -> None:
        decoder = self._decoder()
        decoder.feed("ESC", now=1.000)
        decoder.feed("[", now=1.001)

        self.assertIs(decoder.state, DecoderState.PENDING_BRACKET)
        self.assertEqual(decoder.check_timeout(now=1.100), KeyEvent(EventKind.CANCEL))

    def test_escape_followed_by_other_key_redispatches_that_key(self) -> None:
        decoder = self._decoder()
        decoder.feed("ESC", now=1.000)

        self.assertEqual(decoder.feed("x", now=1.001), KeyEvent(EventKind.INSERT, "x"))
        self.assertIs(decoder.state, DecoderState.IDLE)

    def test_unknown_sequence_tail_is_dropped(self) -> None:
        decoder = self._decoder()
        decoder.feed("ESC", now=1.000)
        decoder.feed("[", now=1.001)

        self.assertIsNone(decoder.feed("C", now=1.002))
        self.assertIs(decoder.state, DecoderState.IDLE)
        self.assertEqual(decoder.feed("a", now=1.003), KeyEvent(EventKind.INSERT, "a"))

    def test_ctrl_c_and_ctrl_d_cancel_from_any_state(self) -> None:
        for token in ("CTRL_C", "CTRL_D"):
            decoder = self._decoder()
            self.assertEqual(decoder.feed(token, now=1.0), KeyEvent(EventKind.CANCEL))

            decoder.feed("ESC", now=1.0)
            self.assertEqual(decoder.feed(token, now=1.001), KeyEvent(EventKind.CANCEL))
            self.assertIs(decoder.state, DecoderState.IDLE)

    def test_token_after_expired_escape_resolves_as_cancel(self) -> None:
        decoder = self._decoder()
        decoder.feed("ESC", now=1.000)

        self.assertEqual(decoder.feed("[", now=2.000), KeyEvent(EventKind.CANCEL))

    def test_idle_tokens_map_to_events(self) -> None:
        decoder = self._decoder()

        self.assertEqual(decoder.feed("\n", now=0.0), KeyEvent(EventKind.CONFIRM))
        self.assertEqual(decoder.feed("BACKSPACE", now=0.0), KeyEvent(EventKind.BACKSPACE))
        self.assertEqual(decoder.feed("[", now=0.0), KeyEvent(EventKind.INSERT, "["))
        self.assertEqual(decoder.feed("é", now=0.0), KeyEvent(EventKind.INSERT, "é"))
        self.assertIsNone(decoder.feed("\t", now=0.0))

    def test_injected_clock_is_used_when_now_is_omitted(self) -> None:
        ticks = iter([10.0, 10.001, 10.5])
        decoder = EscapeDecoder(timeout_s=0.025, clock=lambda: next(ticks))

        self.assertIsNone(decoder.feed("ESC"))
        self.assertIsNone(decoder.check_timeout())
        self.assertEqual(decoder.check_timeout(), KeyEvent(EventKind.CANCEL))


class KeyReaderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.read_fd, self.write_fd = os.pipe()

    def tearDown(self) -> None:
        for fd in (self.read_fd, self.write_fd):
            try:
                os.close(fd)
            except OSError:
                pass

    def _drain(self, reader: KeyReader, limit: int = 50) -> list[str]:
        tokens: list[str] = []
        for _ in range(limit):
            token = reader.poll()
            if token is None:
                break
            tokens.append(token)
        return tokens

    def test_tokenize_maps_control_bytes(self) -> None:
        self.assertEqual(
            tokenize("a\x1b\x7f\x08\x03\x04\r\n"),
            ["a", "ESC", "BACKSPACE", "BACKSPACE", "CTRL_C", "CTRL_D", "\n", "\n"],
        )

    def test_arrow_and_enter_bytes_become_tokens(self) -> None:
        os.write(self.write_fd, b"ab\x1b[A\r\x7f")
        reader = KeyReader(self.read_fd, poll_interval_ms=5)

        self.assertEqual(self._drain(reader), ["a", "b", "ESC", "[", "A", "\n", "BACKSPACE"])

    def test_poll_returns_none_when_no_input(self) -> None:
        reader = KeyReader(self.read_fd, poll_interval_ms=1)

        self.assertIsNone(reader.poll())

    def test_multibyte_character_split_across_reads(self) -> None:
        reader = KeyReader(self.read_fd, poll_interval_ms=5)
        os.write(self.write_fd, "ä".encode("utf-8")[:1])
        self.assertIsNone(reader.poll())

        os.write(self.write_fd, "ä".encode("utf-8")[1:])
        self.assertEqual(reader.poll(), "ä")

    def test_end_of_input_reports_ctrl_d(self) -> None:
        reader = KeyReader(self.read_fd, poll_interval_ms=5)
        os.close(self.write_fd)

        self.assertEqual(reader.poll(), "CTRL_D")
        self.assertEqual(reader.poll(), "CTRL_D")

    def test_typeahead_is_delivered_before_new_input(self) -> None:
        os.write(self.write_fd, b"z")
        reader = KeyReader(self.read_fd, poll_interval_ms=5, typeahead=b"xy")

        self.assertEqual(self._drain(reader), ["x", "y", "z"])


if __name__ == "__main__":
    unittest.main()
