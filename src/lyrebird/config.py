"""Request configuration.

A :class:`RequestConfig` is built once with every option named up
front and is validated on construction::

    config = RequestConfig(
        model="claude-3-opus-20240229",
        messages=[Message(role=MessageRole.USER, content="Hello")],
        max_tokens=1024,
        stream=True,
    )
"""

import os
from typing import Any

from pydantic import BaseModel, Field, InstanceOf, field_validator, model_validator

from lyrebird.message import Message
from lyrebird.tools import Tool

API_URL = "https://api.anthropic.com"
MESSAGES_PATH = "/v1/messages"
API_VERSION = "2023-06-01"


class RequestConfig(BaseModel):
    """Everything needed to send one Messages API request.

    Args:
        api_key: API key; falls back to ``ANTHROPIC_API_KEY``.
        model: Model name.
        messages: Conversation so far, oldest first.
        max_tokens: Upper bound on generated tokens.
        stream: Deliver the response incrementally.
        temperature: Sampling temperature in ``[0, 1]``.
        system: System prompt; omitted from the body when empty.
        tools: Tool definitions, either :class:`Tool` objects or dicts.
        tool_choice: ``"auto"``, ``"any"`` or the name of one tool.
        metadata: Request metadata, e.g. ``{"user_id": "..."}``.
        stop_sequences: Custom sequences that end generation.
        beta: Value of the ``anthropic-beta`` header.
        version: Value of the ``anthropic-version`` header.
        verbose: Forward raw response text instead of parsed text.
        base_url: Scheme and host of the API.
        timeout: Request timeout in seconds.
    """

    model_config = {"arbitrary_types_allowed": True}

    api_key: str | None = Field(default=None, repr=False)
    model: str = Field(min_length=1)
    messages: list[Message | dict[str, Any]] = Field(min_length=1)
    max_tokens: int = Field(default=1024, gt=0)
    stream: bool = False
    temperature: float = Field(default=0.0, ge=0.0, le=1.0)
    system: str = ""
    tools: list[InstanceOf[Tool] | dict[str, Any]] | None = None
    tool_choice: str | dict[str, Any] | None = None
    metadata: dict[str, Any] | None = None
    stop_sequences: list[str] | None = None
    beta: str | None = None
    version: str = API_VERSION
    verbose: bool = False
    base_url: str = API_URL
    timeout: float = Field(default=600.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, base_url: str) -> str:
        return base_url.rstrip("/")

    @model_validator(mode="after")
    def resolve_api_key(self) -> "RequestConfig":
        if not self.api_key:
            self.api_key = os.getenv("ANTHROPIC_API_KEY")
        if not self.api_key:
            raise ValueError(
                "No API key given and ANTHROPIC_API_KEY is not set"
            )
        return self

    @property
    def url(self) -> str:
        return f"{self.base_url}{MESSAGES_PATH}"

    def headers(self) -> dict[str, str]:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": self.version,
            "content-type": "application/json",
        }
        if self.beta:
            headers["anthropic-beta"] = self.beta
        return headers

    def body(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                m.model_dump() if isinstance(m, Message) else m
                for m in self.messages
            ],
            "stream": self.stream,
            "temperature": self.temperature,
        }
        if self.system:
            body["system"] = self.system
        if self.tools is not None:
            body["tools"] = [
                t.model_dump() if isinstance(t, Tool) else t
                for t in self.tools
            ]
        if self.tool_choice is not None:
            body["tool_choice"] = _tool_choice(self.tool_choice)
        if self.metadata is not None:
            body["metadata"] = self.metadata
        if self.stop_sequences:
            body["stop_sequences"] = self.stop_sequences
        return body


def _tool_choice(choice: str | dict[str, Any]) -> dict[str, Any]:
    if isinstance(choice, dict):
        return choice
    if choice in ("auto", "any"):
        return {"type": choice}
    return {"type": "tool", "name": choice}
