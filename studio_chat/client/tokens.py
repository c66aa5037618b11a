"""Unified token sequence over both response framings."""

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import aclosing

from studio_chat.client.payload import normalize_payload
from studio_chat.client.protocol import StreamFraming, detect_framing
from studio_chat.client.sse import iter_sse_payloads
from studio_chat.client.transport import read_text

logger = logging.getLogger(__name__)


async def iter_tokens(
    chunks: AsyncIterator[bytes],
    content_type: str | None,
    cancel: asyncio.Event | None = None,
    encoding: str = "utf-8",
) -> AsyncGenerator[str]:
    """Yield text tokens from a streamed response body.

    The framing is chosen once from ``content_type``. Event streams are
    parsed into ``data:`` payloads and normalized; plain chunked bodies
    yield every decoded fragment verbatim.

    Args:
        chunks: Raw body bytes.
        content_type: Declared Content-Type of the response.
        cancel: Optional event that ends the stream early without error.
        encoding: Body text encoding.

    Yields:
        Tokens in arrival order.
    """
    framing = detect_framing(content_type)
    logger.debug(f"Reading {framing.value} response ({content_type!r})")

    async with aclosing(read_text(chunks, cancel, encoding)) as fragments:
        if framing is StreamFraming.PLAIN_CHUNKS:
            async for fragment in fragments:
                yield fragment
            return

        async with aclosing(iter_sse_payloads(fragments)) as payloads:
            async for payload in payloads:
                yield normalize_payload(payload)
