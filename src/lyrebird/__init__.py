from lyrebird.client import Client
from lyrebird.config import RequestConfig
from lyrebird.errors import (
    BadRequest,
    EncodingError,
    FrameDecodeWarning,
    LyrebirdError,
    ResponseParseError,
    StatusError,
    StreamError,
    TransportError,
    Unauthorized,
    UnexpectedStatus,
)
from lyrebird.instrumentation import instrument, uninstrument
from lyrebird.message import Message, MessageResponse, MessageRole
from lyrebird.streaming import StreamResult
from lyrebird.tools import Tool, tool

__all__ = [
    "BadRequest",
    "Client",
    "EncodingError",
    "FrameDecodeWarning",
    "LyrebirdError",
    "Message",
    "MessageResponse",
    "MessageRole",
    "RequestConfig",
    "ResponseParseError",
    "StatusError",
    "StreamError",
    "StreamResult",
    "Tool",
    "TransportError",
    "Unauthorized",
    "UnexpectedStatus",
    "instrument",
    "tool",
    "uninstrument",
]
