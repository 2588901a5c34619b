"""Tests for the LineBuffer."""

import pytest

from shellcraft.editing.line_buffer import LineBuffer, RawLine
from shellcraft.editing.modifications import AppendLine, UpdateLine


class TestRoundTrip:
    @pytest.mark.parametrize("text", [
        "",
        "\n",
        "\n\n",
        "single line",
        "single line\n",
        "a\nb\nc\n",
        "a\n\n\nb",
        "crlf line\r\nanother\r\n",
        "  indented\t\n# comment\n\n",
    ])
    def test_from_text_to_text_is_identity(self, text):
        assert LineBuffer.from_text(text).to_text() == text

    def test_empty_batch_is_identity(self):
        text = "alias ll='ls -la'\nexport EDITOR=vim\n"
        buffer = LineBuffer.from_text(text)
        buffer.apply([])
        assert buffer.to_text() == text


class TestLines:
    def test_trailing_newline_is_not_a_line(self):
        buffer = LineBuffer.from_text("a\nb\n")
        assert buffer.lines == ["a", "b"]
        assert buffer.trailing_newline is True

    def test_missing_trailing_newline_recorded(self):
        buffer = LineBuffer.from_text("a\nb")
        assert buffer.lines == ["a", "b"]
        assert buffer.trailing_newline is False
        assert buffer.to_text() == "a\nb"

    def test_raw_lines_carry_positions(self):
        buffer = LineBuffer.from_text("x\ny\n")
        assert buffer.raw_lines() == [RawLine(0, "x"), RawLine(1, "y")]

    def test_append_to_empty_buffer_ends_with_newline(self):
        buffer = LineBuffer.from_text("")
        buffer.apply([AppendLine("alias g='git'")])
        assert buffer.to_text() == "alias g='git'\n"

    def test_copy_is_independent(self):
        buffer = LineBuffer.from_text("a\nb\n")
        clone = buffer.copy()
        clone.apply([UpdateLine(0, "A")])
        assert buffer.lines == ["a", "b"]
        assert clone.lines == ["A", "b"]

    def test_sequence_protocol(self):
        buffer = LineBuffer.from_text("a\nb\n")
        assert len(buffer) == 2
        assert buffer[1] == "b"
        assert list(buffer) == ["a", "b"]
