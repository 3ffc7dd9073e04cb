"""
Server-Sent Events framing for explanation streams.
"""
import re
from contextlib import aclosing
from typing import AsyncGenerator, AsyncIterator, Mapping, Optional

from fastapi.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}

# Any of the three SSE line terminators ends a data line
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def format_sse(text: str) -> str:
    """
    Frame a text event as `data: <text>\\n\\n`.

    Multi-line text stays a single event with one `data:` line per line.
    """
    lines = _LINE_BREAK.split(text)
    return "".join(f"data: {line}\n" for line in lines) + "\n"


async def sse_frames(events: AsyncGenerator[str, None]) -> AsyncIterator[str]:
    """Frame every event of an explanation stream."""
    async with aclosing(events) as stream:
        async for text in stream:
            yield format_sse(text)


class EventStreamResponse(StreamingResponse):
    """
    StreamingResponse for `text/event-stream` bodies.

    The body generator is closed when the response ends, including when the
    client goes away mid-stream, so upstream streams are released right
    there instead of at garbage collection.
    """

    media_type = "text/event-stream"

    def __init__(
        self,
        content: AsyncGenerator[str, None],
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
    ):
        super().__init__(
            content,
            status_code=status_code,
            headers=SSE_HEADERS if headers is None else headers,
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            aclose = getattr(self.body_iterator, "aclose", None)
            if aclose is not None:
                await aclose()
