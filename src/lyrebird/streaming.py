"""Streaming primitives for assembling a response from its events.

A ``tool_use`` block opens with ``content_block_start`` (id and name)
and its input arrives as ``input_json_delta`` fragments.  The
:class:`ToolCallAccumulator` reassembles those fragments by block index;
:class:`StreamResult` collects everything else a caller may want once
the stream has finished.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from lyrebird.errors import StreamError
from lyrebird.events import (
    ContentBlockStartEvent,
    ErrorEvent,
    MessageDeltaEvent,
    MessageStartEvent,
    StreamEvent,
)
from lyrebird.message import Usage


@dataclass
class ToolCallFragment:
    """A fragment of a tool call from a streaming event."""

    index: int
    call_id: str | None = None
    name: str | None = None
    arguments_delta: str | None = None


@dataclass
class ToolCall:
    """A resolved ``tool_use`` block."""

    id: str = ""
    name: str = ""
    arguments: str = ""

    @property
    def input(self) -> dict[str, Any]:
        """The parsed tool input; an empty object when none was streamed."""
        if not self.arguments:
            return {}
        return json.loads(self.arguments)


class ToolCallAccumulator:
    """Assembles complete tool calls from streaming fragments."""

    def __init__(self) -> None:
        self._pending: dict[int, ToolCall] = {}

    def feed(self, fragment: ToolCallFragment) -> None:
        if fragment.index not in self._pending:
            self._pending[fragment.index] = ToolCall()
        tc = self._pending[fragment.index]
        if fragment.call_id is not None:
            tc.id = fragment.call_id
        if fragment.name is not None:
            tc.name = fragment.name
        if fragment.arguments_delta is not None:
            tc.arguments += fragment.arguments_delta

    def __contains__(self, index: int) -> bool:
        return index in self._pending

    def finalize(self) -> list[ToolCall]:
        """Return completed tool calls in index order."""
        return [self._pending[i] for i in sorted(self._pending)]


@dataclass
class StreamResult:
    """Summary of a finished streaming response."""

    text: str = ""
    id: str | None = None
    model: str | None = None
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage = field(default_factory=Usage)
    tool_calls: list[ToolCall] = field(default_factory=list)


class StreamAccumulator:
    """Folds stream events into a :class:`StreamResult`."""

    def __init__(self) -> None:
        self._result = StreamResult()
        self._tool_calls = ToolCallAccumulator()

    def feed(self, event: StreamEvent) -> None:
        if isinstance(event, ErrorEvent):
            raise StreamError(event.error.type, event.error.message)

        if isinstance(event, MessageStartEvent) and event.message is not None:
            self._result.id = event.message.id
            self._result.model = event.message.model
            self._result.usage = self._result.usage.merge(event.message.usage)
        elif isinstance(event, ContentBlockStartEvent):
            block = event.content_block
            if block is not None and block.type == "tool_use":
                self._tool_calls.feed(ToolCallFragment(
                    index=event.index or 0,
                    call_id=block.id,
                    name=block.name,
                ))
        elif isinstance(event, MessageDeltaEvent):
            if event.delta is not None:
                if event.delta.stop_reason is not None:
                    self._result.stop_reason = event.delta.stop_reason
                if event.delta.stop_sequence is not None:
                    self._result.stop_sequence = event.delta.stop_sequence
                self._result.usage = self._result.usage.merge(event.delta.usage)
            self._result.usage = self._result.usage.merge(event.usage)

        if event.text:
            self._result.text += event.text
        if event.delta is not None and event.delta.partial_json is not None:
            index = event.index or 0
            if index in self._tool_calls:
                self._tool_calls.feed(ToolCallFragment(
                    index=index,
                    arguments_delta=event.delta.partial_json,
                ))

    def finalize(self) -> StreamResult:
        self._result.tool_calls = self._tool_calls.finalize()
        return self._result
