"""Server-Sent Events frame parsing.

Splits decoded text into lines across chunk boundaries and extracts the
payload of every ``data:`` line. Comments (``:``), blank separators and
unknown fields are skipped.
"""

import logging
import re
from collections.abc import AsyncGenerator, AsyncIterable

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"

_LINE_BREAK = re.compile(r"\r?\n")


def _strip_data_prefix(line: str) -> str:
    payload = line[len(DATA_PREFIX) :]
    if payload.startswith(" "):
        payload = payload[1:]
    return payload


class SSELineBuffer:
    """Line buffer that turns text fragments into ``data:`` payloads.

    The trailing segment after the last line break is held back until more
    text arrives or the stream ends.
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a line break."""
        return self._buffer

    def feed(self, text: str) -> list[str]:
        """Append a fragment and return payloads of the lines it completed."""
        self._buffer += text
        *lines, self._buffer = _LINE_BREAK.split(self._buffer)

        payloads = []
        for line in lines:
            payload = self._parse_line(line)
            if payload is not None:
                payloads.append(payload)
        return payloads

    def flush(self) -> list[str]:
        """Emit a final unterminated ``data:`` line, if one is buffered."""
        tail = self._buffer.strip()
        self._buffer = ""
        if tail.startswith(DATA_PREFIX):
            return [_strip_data_prefix(tail)]
        if tail:
            logger.debug(f"Discarding unterminated non-data line: {tail[:80]!r}")
        return []

    @staticmethod
    def _parse_line(line: str) -> str | None:
        if not line.rstrip():
            return None
        if line.startswith(":"):
            return None
        if line.startswith(DATA_PREFIX):
            return _strip_data_prefix(line)
        return None


async def iter_sse_payloads(fragments: AsyncIterable[str]) -> AsyncGenerator[str]:
    """Yield raw ``data:`` payloads from a stream of decoded text.

    Args:
        fragments: Decoded text in arrival order.

    Yields:
        Payload strings, each exactly once, in line-arrival order.
    """
    buffer = SSELineBuffer()
    async for fragment in fragments:
        for payload in buffer.feed(fragment):
            yield payload
    for payload in buffer.flush():
        yield payload
