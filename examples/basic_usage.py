"""Non-streaming example: one request, one answer.

Usage:
    Add ANTHROPIC_API_KEY=sk-... to .env, then:
    uv run --env-file=.env examples/basic_usage.py
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
    )

    async with Client() as client:
        try:
            await client.execute(config, print)
        except LyrebirdError as e:
            logger.error("Error: %s", e)


if __name__ == "__main__":
    asyncio.run(main())
