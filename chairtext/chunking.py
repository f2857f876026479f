"""Split long notification text into SMS-sized parts.

Carrier gateways truncate or mangle long emails, so a digest is sent as
several short emails. Each part holds at most two numbered appointment lines
and a numbered line is never split across parts.
"""

from __future__ import annotations

import re
import textwrap

DEFAULT_MAX_CHUNK_LENGTH = 95
MAX_APPOINTMENTS_PER_CHUNK = 2

_APPOINTMENT_LINE_RE = re.compile(r"^\d+\.")


def is_appointment_line(line: str) -> bool:
    """True for enumerated digest lines such as ``3. Jane 9:00 AM``."""
    return bool(_APPOINTMENT_LINE_RE.match(line))


def split_message_into_chunks(message: str, max_length: int = DEFAULT_MAX_CHUNK_LENGTH) -> list[str]:
    """Split ``message`` into ordered, stripped parts.

    A new part starts when a third numbered line would join the current
    one (the new part opens with a blank spacer line, removed by the final
    strip). Once at least one part exists, a part that has grown past
    ``max_length`` is flushed right after the line that overflowed it; the
    first part is exempt so the header stays with the first entries.

    Messages without any numbered line are split on length alone.
    """
    if max_length < 1:
        raise ValueError("max_length must be positive")
    if not message or not message.strip():
        return []

    lines = message.split("\n")
    if len(message.strip()) > max_length and not any(is_appointment_line(line) for line in lines):
        return _split_by_length(lines, max_length)

    chunks: list[str] = []
    current = ""
    appointments_in_chunk = 0

    for line in lines:
        if is_appointment_line(line):
            if appointments_in_chunk == MAX_APPOINTMENTS_PER_CHUNK and current.strip():
                chunks.append(current.strip())
                current = "\n" + line
                appointments_in_chunk = 1
                continue
            appointments_in_chunk += 1

        current += ("\n" if current else "") + line

        if len(current) > max_length and chunks:
            _flush(chunks, current)
            current = ""
            appointments_in_chunk = 0

    _flush(chunks, current)
    return chunks


def _flush(chunks: list[str], text: str) -> None:
    text = text.strip()
    if text:
        chunks.append(text)


def _split_by_length(lines: list[str], max_length: int) -> list[str]:
    """Greedy line packing; lines longer than ``max_length`` are word-wrapped."""
    pieces: list[str] = []
    for line in lines:
        if len(line) > max_length:
            pieces.extend(textwrap.wrap(line, width=max_length, break_long_words=True))
        else:
            pieces.append(line)

    chunks: list[str] = []
    current = ""
    for piece in pieces:
        candidate = f"{current}\n{piece}" if current else piece
        if len(candidate.strip()) > max_length and current.strip():
            _flush(chunks, current)
            current = piece
        else:
            current = candidate
    _flush(chunks, current)
    return chunks
