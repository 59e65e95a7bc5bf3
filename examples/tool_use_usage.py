"""Tool-use example: offer a tool, run it when the model asks, and send
the result back.

Usage:
    Add ANTHROPIC_API_KEY=sk-... to .env, then:
    uv run --env-file=.env examples/tool_use_usage.py
"""

import asyncio
import logging

from lyrebird import Client, LyrebirdError, Message, MessageRole, RequestConfig, tool

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s:%(name)s:%(levelname)s:%(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


@tool
def get_weather(location: str):
    """Get the current weather in a given location"""
    return f"It is 18C and foggy in {location}."


async def main():
    messages = [
        Message(
            role=MessageRole.USER,
            content="What is the weather like in San Francisco?",
        ),
    ]
    tools = {get_weather.name: get_weather}

    async with Client() as client:
        try:
            result = await client.execute(
                RequestConfig(
                    model="claude-3-opus-20240229",
                    messages=messages,
                    tools=list(tools.values()),
                    metadata={"user_id": "111"},
                    stream=True,
                ),
                lambda text: print(text, end="", flush=True),
            )
            print()
            if not result.tool_calls:
                return

            messages.append(Message(
                role=MessageRole.ASSISTANT,
                content=[
                    {"type": "tool_use", "id": call.id, "name": call.name, "input": call.input}
                    for call in result.tool_calls
                ],
            ))
            messages.append(Message(
                role=MessageRole.USER,
                content=[
                    {
                        "type": "tool_result",
                        "tool_use_id": call.id,
                        "content": str(tools[call.name](**call.input)),
                    }
                    for call in result.tool_calls
                ],
            ))
            logger.info("Ran %d tool call(s)", len(result.tool_calls))

            await client.execute(
                RequestConfig(
                    model="claude-3-opus-20240229",
                    messages=messages,
                    tools=list(tools.values()),
                ),
                print,
            )
        except LyrebirdError as e:
            logger.error("Error: %s", e)


if __name__ == "__main__":
    asyncio.run(main())
