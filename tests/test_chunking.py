"""Tests for SMS-sized message splitting."""

import pytest

from chairtext import DigestEntry, format_daily_digest, is_appointment_line, split_message_into_chunks

NAMES = ["Jane", "Sam", "Lee", "Ana", "Bo", "Kai", "Max"]


def _digest(count: int, names: list[str] | None = None) -> str:
    names = names or NAMES
    entries = [DigestEntry(names[i % len(names)], f"{9 + i:02d}:00") for i in range(count)]
    return format_daily_digest(count, entries)


def _appointment_lines(chunks: list[str]) -> list[str]:
    return [line for chunk in chunks for line in chunk.split("\n") if is_appointment_line(line)]


class TestAppointmentLine:
    @pytest.mark.parametrize("line", ["1. Jane 9:00 AM", "12. Sam", "3."])
    def test_matches(self, line):
        assert is_appointment_line(line)

    @pytest.mark.parametrize("line", ["", "Today:", " 1. indented", "1) Jane", "You have 1 appointment today."])
    def test_does_not_match(self, line):
        assert not is_appointment_line(line)


class TestSingleChunk:
    def test_short_message_unchanged(self):
        assert split_message_into_chunks("Hello there") == ["Hello there"]

    def test_short_message_is_trimmed(self):
        assert split_message_into_chunks("\n  Hello there \n\n") == ["Hello there"]

    def test_no_appointments_digest(self):
        message = format_daily_digest(0, [])
        assert split_message_into_chunks(message) == [message]

    def test_two_appointments_stay_together(self):
        message = _digest(2)
        assert split_message_into_chunks(message) == [message]

    def test_confirmation_fits_in_one_part(self):
        message = "Client: Jane\n\nDate: Friday January 17, 2025\n\nTime: 2:00 PM"
        assert split_message_into_chunks(message) == [message]

    def test_empty_message(self):
        assert split_message_into_chunks("") == []
        assert split_message_into_chunks(" \n ") == []


class TestAppointmentGrouping:
    def test_third_appointment_starts_new_chunk(self):
        chunks = split_message_into_chunks(_digest(3))
        assert chunks == [
            "You have 3 appointments today.\n\nToday:\n1. Jane 9:00 AM\n2. Sam 10:00 AM",
            "3. Lee 11:00 AM",
        ]

    def test_five_appointments_split_two_two_one(self):
        chunks = split_message_into_chunks(_digest(5))
        assert len(chunks) == 3
        assert [len(_appointment_lines([c])) for c in chunks] == [2, 2, 1]
        assert chunks[1] == "3. Lee 11:00 AM\n4. Ana 12:00 PM"
        assert chunks[2] == "5. Bo 1:00 PM"

    def test_five_long_names_still_split_two_two_one(self):
        names = ["Christopher Johnson", "Alexandria Williams", "Maximilian Rodriguez"]
        chunks = split_message_into_chunks(_digest(5, names))
        assert [len(_appointment_lines([c])) for c in chunks] == [2, 2, 1]

    @pytest.mark.parametrize("count", [1, 2, 3, 4, 5, 6, 7, 11])
    def test_never_more_than_two_per_chunk(self, count):
        chunks = split_message_into_chunks(_digest(count))
        assert all(len(_appointment_lines([c])) <= 2 for c in chunks)

    @pytest.mark.parametrize("count", [1, 3, 5, 8])
    def test_every_line_appears_once_in_order(self, count):
        message = _digest(count)
        chunks = split_message_into_chunks(message)
        original = [line for line in message.split("\n") if is_appointment_line(line)]
        assert _appointment_lines(chunks) == original

    def test_header_stays_in_first_chunk(self):
        chunks = split_message_into_chunks(_digest(4))
        assert chunks[0].startswith("You have 4 appointments today.")

    def test_chunks_are_trimmed(self):
        for chunk in split_message_into_chunks(_digest(6)):
            assert chunk == chunk.strip()


class TestLengthFlush:
    def test_overlong_chunk_after_first_is_flushed(self):
        note = "x" * 100
        message = "\n".join(
            ["Header", "1. a", "2. b", "3. c", note, "4. d", "5. e", "6. f"]
        )
        chunks = split_message_into_chunks(message)
        assert chunks == [
            "Header\n1. a\n2. b",
            f"3. c\n{note}",
            "4. d\n5. e",
            "6. f",
        ]

    def test_first_chunk_is_not_length_flushed(self):
        long_entry = "1. " + "y" * 120
        chunks = split_message_into_chunks(f"Header\n{long_entry}")
        assert chunks == [f"Header\n{long_entry}"]

    def test_custom_max_length(self):
        message = "\n".join(["Hdr", "1. aaaa", "2. bbbb", "3. cccc", "notes here", "4. dddd"])
        chunks = split_message_into_chunks(message, max_length=10)
        assert chunks[0] == "Hdr\n1. aaaa\n2. bbbb"
        assert chunks[1] == "3. cccc\nnotes here"
        assert chunks[2] == "4. dddd"


class TestPlainTextFallback:
    def test_long_text_without_appointments_is_split_by_length(self):
        message = " ".join(f"word{i}" for i in range(60))
        chunks = split_message_into_chunks(message)
        assert len(chunks) > 1
        assert all(len(chunk) <= 95 for chunk in chunks)
        assert " ".join(chunks).split() == message.split()

    def test_multiline_text_packs_lines(self):
        lines = [f"Line number {i} of the notice" for i in range(8)]
        chunks = split_message_into_chunks("\n".join(lines), max_length=60)
        assert all(len(chunk) <= 60 for chunk in chunks)
        assert [line for chunk in chunks for line in chunk.split("\n")] == lines

    def test_invalid_max_length(self):
        with pytest.raises(ValueError):
            split_message_into_chunks("hello", max_length=0)
