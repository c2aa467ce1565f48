"""JSON envelope around array fields."""
from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


class JsonCodec:
    """decode(str) -> structured value or None; encode(structured value) -> str."""

    def __init__(self, *, ensure_ascii: bool = False):
        self.ensure_ascii = ensure_ascii

    def decode(self, value: Any) -> Any:
        # Malformed input is not fatal here; the caller's shape check rejects None.
        if isinstance(value, (bytes, bytearray)):
            try:
                value = value.decode("utf-8")
            except UnicodeDecodeError:
                logger.debug("json decode skipped: payload is not utf-8")
                return None
        if not isinstance(value, str):
            logger.debug("json decode skipped: expected str, got %s", type(value).__name__)
            return None
        try:
            return json.loads(value)
        except ValueError as e:
            logger.debug("json decode failed: %s", e)
            return None

    def encode(self, value: Any) -> str:
        return json.dumps(value, ensure_ascii=self.ensure_ascii, separators=(",", ":"))
