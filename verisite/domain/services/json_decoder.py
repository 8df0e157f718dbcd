"""Decoder for JSON objects embedded in free-form model output."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..errors import ParseError

_decoder = json.JSONDecoder()


@dataclass(frozen=True)
class JsonDecodeResult:
    """Tagged result of decoding: a parsed object, or a ParseError."""

    value: Optional[Dict[str, Any]] = None
    error: Optional[ParseError] = None

    @property
    def ok(self) -> bool:
        """Whether a JSON object was found."""
        return self.error is None


def decode_json_object(text: Optional[str]) -> JsonDecodeResult:
    """Find the first well-formed JSON object embedded in ``text``.

    Model replies often wrap the payload in prose or Markdown code fences,
    so every ``{`` is tried as a starting point until one decodes into a
    JSON object. Never raises.

    Args:
        text: Raw text returned by the external capability

    Returns:
        Decode result carrying either the object or a ParseError with the raw text
    """
    raw_text = text or ""
    if not raw_text.strip():
        return JsonDecodeResult(error=ParseError(raw_text, "Empty response"))

    start = raw_text.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(raw_text, start)
        except ValueError:
            pass
        else:
            if isinstance(value, dict):
                return JsonDecodeResult(value=value)
        start = raw_text.find("{", start + 1)

    return JsonDecodeResult(error=ParseError(raw_text, "No JSON object found in response"))
