"""Streaming example: print fragments as they arrive, keep the whole
message for the end.

Usage:
    Add ANTHROPIC_API_KEY=sk-... to .env, then:
    uv run --env-file=.env examples/streaming_usage.py
"""

import asyncio
import logging

from lyrebird import Client, LyrebirdError, Message, MessageRole, RequestConfig

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s:%(name)s:%(levelname)s:%(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


async def main():
    config = RequestConfig(
        model="claude-3-opus-20240229",
        messages=[
            Message(role=MessageRole.USER, content="Write me a poem about bravery"),
        ],
        max_tokens=1024,
        stream=True,
    )

    fragments: list[str] = []

    def on_text(text: str):
        print(text, end="", flush=True)
        fragments.append(text)

    async with Client() as client:
        try:
            result = await client.execute(config, on_text)
        except LyrebirdError as e:
            logger.error("Error: %s", e)
            return

    print()
    print(f"Message: {''.join(fragments)}")
    logger.info(
        "stop_reason=%s input_tokens=%s output_tokens=%s",
        result.stop_reason,
        result.usage.input_tokens,
        result.usage.output_tokens,
    )


if __name__ == "__main__":
    asyncio.run(main())
