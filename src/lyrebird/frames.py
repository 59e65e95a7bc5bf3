"""Splitting streamed text into event frames.

A streaming body is a sequence of frames separated by a blank line::

    event: content_block_delta
    data: {"type": "content_block_delta", "index": 0, "delta": {...}}

:class:`FrameBuffer` accumulates decoded text and hands back complete
frames; :func:`parse_frame` pulls the label and payload out of one;
:func:`decode_event` turns the payload into a typed stream event.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from dataclasses import dataclass

from pydantic import ValidationError

from lyrebird.errors import FrameDecodeWarning
from lyrebird.events import StreamEvent, stream_event_adapter

FRAME_SEPARATOR = "\n\n"
DONE_SENTINEL = "[DONE]"


@dataclass
class Frame:
    """One blank-line-delimited unit of the event stream."""

    raw: str
    data: str
    event: str | None = None

    @property
    def is_done(self) -> bool:
        return self.raw == f"data: {DONE_SENTINEL}" or self.data == DONE_SENTINEL


class FrameBuffer:
    """Accumulator for streamed text not yet resolved into frames.

    After :meth:`frames` is exhausted the buffer only holds an
    incomplete trailing frame.
    """

    def __init__(self) -> None:
        self._buffer = ""
        # no separator starts before this index
        self._searched = 0
        # a trailing "\r" may still pair with the next chunk's "\n"
        self._pending_cr = ""

    def feed(self, text: str) -> None:
        text = self._pending_cr + text
        self._pending_cr = ""
        if text.endswith("\r"):
            text, self._pending_cr = text[:-1], "\r"
        self._buffer += text.replace("\r\n", "\n")

    def frames(self) -> Iterator[Frame]:
        """Yield every complete frame currently in the buffer."""
        start = 0
        exhausted = False
        try:
            while True:
                index = self._buffer.find(
                    FRAME_SEPARATOR, max(start, self._searched)
                )
                if index == -1:
                    exhausted = True
                    return
                raw = self._buffer[start:index]
                start = index + len(FRAME_SEPARATOR)
                yield parse_frame(raw)
        finally:
            self._buffer = self._buffer[start:]
            self._searched = max(len(self._buffer) - 1, 0) if exhausted else 0

    @property
    def remainder(self) -> str:
        return self._buffer + self._pending_cr


def parse_frame(raw: str) -> Frame:
    """Split a raw frame into its event label and data payload.

    Lines that carry neither an ``event:`` nor a ``data:`` field are
    kept as payload, so a bare JSON frame still decodes.
    """
    event = None
    data_lines: list[str] = []
    for line in raw.lstrip().split("\n"):
        if line.startswith(":"):
            continue
        if line.startswith("event:"):
            event = line[len("event:"):].strip() or None
        elif line.startswith("data:"):
            value = line[len("data:"):]
            data_lines.append(value[1:] if value.startswith(" ") else value)
        elif line.startswith(("id:", "retry:")):
            continue
        elif line:
            data_lines.append(line)
    return Frame(raw=raw, data="\n".join(data_lines).strip(), event=event)


def decode_event(payload: str) -> StreamEvent:
    """Decode a frame payload into the stream event its ``type`` names.

    Raises:
        FrameDecodeWarning: If the payload is not JSON or does not match
            any known event.
    """
    try:
        return stream_event_adapter.validate_python(json.loads(payload))
    except (json.JSONDecodeError, ValidationError, RecursionError) as e:
        raise FrameDecodeWarning(payload, reason=str(e)) from e
