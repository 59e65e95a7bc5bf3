"""Unit tests for streaming primitives."""

import pytest

from lyrebird.errors import StreamError
from lyrebird.events import stream_event_adapter
from lyrebird.sse import encode_frame, sse_generator
from lyrebird.frames import FrameBuffer, decode_event
from lyrebird.streaming import (
    StreamAccumulator,
    ToolCall,
    ToolCallAccumulator,
    ToolCallFragment,
)


class TestToolCallAccumulator:
    def test_arguments_accumulated_across_fragments(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=0, call_id="c1", name="echo", arguments_delta='{"te'))
        acc.feed(ToolCallFragment(index=0, arguments_delta='xt": "hi"}'))
        result = acc.finalize()

        assert result == [ToolCall(id="c1", name="echo", arguments='{"text": "hi"}')]
        assert result[0].input == {"text": "hi"}

    def test_finalize_returns_index_order(self):
        acc = ToolCallAccumulator()
        acc.feed(ToolCallFragment(index=2, call_id="c3", name="c"))
        acc.feed(ToolCallFragment(index=0, call_id="c1", name="a"))
        acc.feed(ToolCallFragment(index=1, call_id="c2", name="b"))

        assert [tc.name for tc in acc.finalize()] == ["a", "b", "c"]

    def test_no_arguments_gives_empty_input(self):
        assert ToolCall(id="c1", name="f").input == {}


class TestStreamAccumulator:
    def _event(self, payload: dict):
        return stream_event_adapter.validate_python(payload)

    def test_partial_json_for_unknown_block_ignored(self):
        acc = StreamAccumulator()
        acc.feed(self._event({
            "type": "content_block_delta",
            "index": 3,
            "delta": {"type": "input_json_delta", "partial_json": "{}"},
        }))
        assert acc.finalize().tool_calls == []

    def test_usage_merged(self):
        acc = StreamAccumulator()
        acc.feed(self._event({
            "type": "message_start",
            "message": {"id": "m", "usage": {"input_tokens": 5, "output_tokens": 1}},
        }))
        acc.feed(self._event({
            "type": "message_delta",
            "delta": {"stop_reason": "stop_sequence", "stop_sequence": "END"},
            "usage": {"output_tokens": 9},
        }))
        result = acc.finalize()

        assert result.usage.input_tokens == 5
        assert result.usage.output_tokens == 9
        assert result.stop_sequence == "END"

    def test_error_event_raises(self):
        with pytest.raises(StreamError):
            StreamAccumulator().feed(self._event({
                "type": "error",
                "error": {"type": "overloaded_error", "message": "Overloaded"},
            }))


class TestEncodeFrame:
    def test_frame_parses_back_to_same_event(self):
        event = decode_event(
            '{"type":"content_block_delta","index":0,'
            '"delta":{"type":"text_delta","text":"Hi"}}'
        )
        buf = FrameBuffer()
        buf.feed(encode_frame(event))
        (frame,) = list(buf.frames())

        assert frame.event == "content_block_delta"
        assert decode_event(frame.data) == event

    @pytest.mark.asyncio
    async def test_sse_generator_appends_done(self):
        async def events():
            yield decode_event('{"type":"ping"}')

        frames = [f async for f in sse_generator(events(), done=True)]

        assert frames == [
            'event: ping\ndata: {"type":"ping"}\n\n',
            "data: [DONE]\n\n",
        ]
