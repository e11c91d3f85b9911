from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def decode_json_field(value: Any, default: Any) -> Any:
    """Read a nested field stored as embedded JSON text.

    The JSON column type hands back text with some drivers and decoded
    structures with others; both are accepted. Empty values yield ``default``.
    """
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        if not value.strip():
            return default
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed JSON field: %.80r", value)
            return default
    return value


def encode_json_field(value: Any, *, empty_as_null: bool = False) -> Any:
    if value is None:
        return None
    if empty_as_null and not value:
        return None
    return json.dumps(value, ensure_ascii=False)
