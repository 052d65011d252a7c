from __future__ import annotations

import json

from .errors import ParseError
from .models import AnalysisResult


def _reject_constant(token: str) -> float:
    raise ParseError(f"Malformed JSON in response: {token} is not valid JSON")


def extract_json_object(text: str) -> AnalysisResult:
    """Decode the largest brace-delimited span of ``text``.

    The span runs from the first ``{`` to the last ``}``, so prose before or
    after the object (or a fenced code block) is ignored. Nothing is validated
    beyond a successful strict decode; ``NaN`` and ``Infinity`` are rejected.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise ParseError("No JSON in response")

    try:
        data = json.loads(text[start : end + 1], parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed JSON in response: {exc}") from exc
    return data
