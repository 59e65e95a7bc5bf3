from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_serializer


class MessageRole(Enum):
    ASSISTANT = "assistant"
    USER = "user"


class Message(BaseModel):
    """One turn of the conversation sent to the API.

    ``content`` is either plain text or a list of content blocks
    (e.g. ``tool_result`` blocks answering a ``tool_use``).
    """

    role: MessageRole
    content: str | list[dict[str, Any]]

    @field_serializer('role')
    def serialize_role(self, role: MessageRole, _info) -> str:
        return role.value


class Usage(BaseModel):
    model_config = ConfigDict(extra="ignore")

    input_tokens: int | None = None
    output_tokens: int | None = None

    def merge(self, other: "Usage | None") -> "Usage":
        """Return a copy with any counts set on *other* taking precedence."""
        if other is None:
            return self.model_copy()
        return Usage(
            input_tokens=(
                other.input_tokens
                if other.input_tokens is not None
                else self.input_tokens
            ),
            output_tokens=(
                other.output_tokens
                if other.output_tokens is not None
                else self.output_tokens
            ),
        )


class ContentBlock(BaseModel):
    """A block of response content.

    ``text`` blocks carry ``text``; ``tool_use`` blocks carry ``id``,
    ``name`` and ``input``.
    """

    model_config = ConfigDict(extra="ignore")

    type: str
    text: str | None = None
    id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None


class MessageResponse(BaseModel):
    """A full response message, as returned by a non-streaming request
    and carried by the ``message_start`` stream event."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    type: str = "message"
    role: str | None = None
    content: list[ContentBlock] = []
    model: str | None = None
    stop_reason: str | None = None
    stop_sequence: str | None = None
    usage: Usage | None = None

    def first_text(self) -> str | None:
        """Text of the first block tagged ``"text"``, if there is one."""
        for block in self.content:
            if block.type == "text":
                return block.text or ""
        return None
