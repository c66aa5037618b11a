"""Normalization of event-stream payloads into text tokens."""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

# Checked in order; the first field holding a string wins.
TEXT_FIELDS = ("content", "token", "text")


def _extract_text(decoded: Any) -> str | None:
    if isinstance(decoded, str):
        return decoded
    if isinstance(decoded, dict):
        for field in TEXT_FIELDS:
            value = decoded.get(field)
            if isinstance(value, str):
                return value
    return None


def normalize_payload(payload: str) -> str:
    """Turn one raw ``data:`` payload into a token.

    Payloads that look like JSON (first non-space character ``{`` or ``[``)
    are decoded. A decoded string is used as-is; a decoded object yields its
    ``content``, ``token`` or ``text`` field, in that order. Anything else,
    including payloads that fail to decode, is returned unchanged.

    Args:
        payload: Raw payload text from a ``data:`` line.

    Returns:
        The token text.
    """
    if not payload.lstrip().startswith(("{", "[")):
        return payload

    try:
        decoded = json.loads(payload)
    except json.JSONDecodeError:
        logger.debug(f"Payload is not valid JSON, using raw text: {payload[:80]!r}")
        return payload

    text = _extract_text(decoded)
    return payload if text is None else text
