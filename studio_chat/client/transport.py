"""Incremental text decoding of a streamed response body.

Bytes arrive in arbitrary network-sized chunks. A stateful decoder carries
any incomplete multi-byte sequence over to the next read so a chunk
boundary never splits a code point.
"""

import asyncio
import codecs
import logging
from collections.abc import AsyncGenerator, AsyncIterator

logger = logging.getLogger(__name__)

_END = object()


async def _read(chunks: AsyncIterator[bytes]) -> object:
    return await anext(chunks, _END)


async def _next_chunk(
    chunks: AsyncIterator[bytes],
    cancel: asyncio.Event | None,
) -> object:
    """Await the next chunk, or ``_END`` on exhaustion or cancellation."""
    if cancel is None:
        return await _read(chunks)
    if cancel.is_set():
        return _END

    read = asyncio.create_task(_read(chunks))
    waiter = asyncio.create_task(cancel.wait())
    try:
        await asyncio.wait({read, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        if not read.done():
            read.cancel()
            await asyncio.wait({read})

    # A chunk that landed in the same loop turn as the cancel is discarded
    if read.cancelled() or cancel.is_set():
        logger.debug("Stream read cancelled")
        return _END
    return read.result()


async def read_text(
    chunks: AsyncIterator[bytes],
    cancel: asyncio.Event | None = None,
    encoding: str = "utf-8",
) -> AsyncGenerator[str]:
    """Decode a byte stream into text fragments as they arrive.

    Empty reads produce no fragment. Read errors propagate unchanged.
    The byte source is closed on every exit path, including early
    abandonment by the consumer.

    Args:
        chunks: Async iterator of raw body bytes (e.g. ``response.aiter_bytes()``).
        cancel: Optional event; once set, the pending read is abandoned and
            the sequence ends without error.
        encoding: Body text encoding.

    Yields:
        Decoded text fragments in arrival order.
    """
    decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
    try:
        while True:
            chunk = await _next_chunk(chunks, cancel)
            if chunk is _END:
                break
            text = decoder.decode(chunk)
            if text:
                yield text

        if cancel is None or not cancel.is_set():
            tail = decoder.decode(b"", final=True)
            if tail:
                yield tail
    finally:
        aclose = getattr(chunks, "aclose", None)
        if aclose is not None:
            await aclose()
