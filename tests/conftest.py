import httpx
import pytest

from lyrebird.client import Client
from lyrebird.config import RequestConfig
from lyrebird.events import stream_event_adapter
from lyrebird.message import Message, MessageRole
from lyrebird.sse import encode_frame


# ---------------------------------------------------------------------------
# Stream body builders
# ---------------------------------------------------------------------------

def frame(payload: dict) -> str:
    """One SSE frame carrying *payload*, encoded the way a relay would."""
    return encode_frame(stream_event_adapter.validate_python(payload))


def text_delta(text: str, index: int = 0) -> str:
    return frame({
        "type": "content_block_delta",
        "index": index,
        "delta": {"type": "text_delta", "text": text},
    })


DONE = "data: [DONE]\n\n"


def make_text_stream(*fragments: str, done: bool = False) -> str:
    """A realistic streaming body whose deltas carry *fragments*."""
    parts = [
        frame({
            "type": "message_start",
            "message": {
                "id": "msg_1",
                "type": "message",
                "role": "assistant",
                "content": [],
                "model": "claude-test",
                "stop_reason": None,
                "stop_sequence": None,
                "usage": {"input_tokens": 12, "output_tokens": 1},
            },
        }),
        frame({
            "type": "content_block_start",
            "index": 0,
            "content_block": {"type": "text", "text": ""},
        }),
        frame({"type": "ping"}),
        *[text_delta(f) for f in fragments],
        frame({"type": "content_block_stop", "index": 0}),
        frame({
            "type": "message_delta",
            "delta": {"stop_reason": "end_turn", "stop_sequence": None},
            "usage": {"output_tokens": 15},
        }),
        frame({"type": "message_stop"}),
    ]
    if done:
        parts.append(DONE)
    return "".join(parts)


def split_bytes(body: bytes, *offsets: int) -> list[bytes]:
    """Cut *body* at the given byte offsets."""
    bounds = [0, *offsets, len(body)]
    return [body[a:b] for a, b in zip(bounds, bounds[1:])]


class ChunkSource:
    """Async byte-chunk source that counts how many chunks were pulled."""

    def __init__(self, chunks: list[bytes]):
        self._chunks = list(chunks)
        self.pulled = 0

    def __aiter__(self):
        return self

    async def __anext__(self) -> bytes:
        if self.pulled >= len(self._chunks):
            raise StopAsyncIteration
        chunk = self._chunks[self.pulled]
        self.pulled += 1
        return chunk


class Recorder:
    """Callback test double; may be used sync or async."""

    def __init__(self):
        self.calls: list[str] = []

    def __call__(self, text: str) -> None:
        self.calls.append(text)

    async def async_call(self, text: str) -> None:
        self.calls.append(text)

    @property
    def text(self) -> str:
        return "".join(self.calls)


# ---------------------------------------------------------------------------
# HTTP doubles
# ---------------------------------------------------------------------------

def make_client(handler) -> Client:
    """Client whose requests are answered by *handler* (no network)."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return Client(http_client=http_client)


def make_config(**overrides) -> RequestConfig:
    kwargs = dict(
        api_key="sk-test",
        model="claude-test",
        messages=[Message(role=MessageRole.USER, content="Hello")],
    )
    kwargs.update(overrides)
    return RequestConfig(**kwargs)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def stream_config():
    return make_config(stream=True)
