from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from content_insights.errors import MalformedResponseError

log = logging.getLogger("content_insights.parser")

_FENCE_OPEN = re.compile(r"^```[A-Za-z0-9_-]*[ \t]*\r?\n?")
_FENCE_CLOSE = re.compile(r"\r?\n?```\s*$")
_TRAILING_COMMA = re.compile(r",\s*([}\]])")
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F]")

_MISSING = object()


def strip_code_fence(text: str) -> str:
    """
    Remove a leading ```json (or bare ```) marker and a trailing ``` marker.
    """
    s = text.strip()
    s = _FENCE_OPEN.sub("", s, count=1)
    s = _FENCE_CLOSE.sub("", s, count=1)
    return s.strip()


def _repair(text: str) -> str:
    """Common fixes for near-JSON model output."""
    s = text.replace("\ufeff", "")
    s = s.replace("\u201c", '"').replace("\u201d", '"')
    s = _CONTROL_CHARS.sub("", s)
    s = _TRAILING_COMMA.sub(r"\1", s)
    return s


def _outermost_block(text: str) -> Optional[str]:
    """
    Slice from the first opening bracket to the last matching closing one.
    Handles models that wrap the JSON in a sentence of chatter.
    """
    starts = [i for i in (text.find("{"), text.find("[")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    closer = "}" if text[start] == "{" else "]"
    end = text.rfind(closer)
    if end <= start:
        return None
    return text[start:end + 1]


def _try_loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return _MISSING


def normalize_response(raw_text: str) -> Any:
    """
    Parse raw model output into a JSON value.

    Strategy: strip fences and parse; then repair common artifacts; then
    cut the outermost JSON block out of surrounding text.
    Raises MalformedResponseError (with the raw text) when all of them fail.
    """
    if raw_text is None or not raw_text.strip():
        raise MalformedResponseError("Empty response from model", raw_text=raw_text or "")

    cleaned = strip_code_fence(raw_text)

    parsed = _try_loads(cleaned)
    if parsed is not _MISSING:
        return parsed

    parsed = _try_loads(_repair(cleaned))
    if parsed is not _MISSING:
        log.debug("Parsed model output after repair")
        return parsed

    block = _outermost_block(cleaned)
    if block is not None:
        parsed = _try_loads(_repair(block))
        if parsed is not _MISSING:
            log.debug("Parsed model output from embedded JSON block")
            return parsed

    try:
        json.loads(cleaned)
    except json.JSONDecodeError as e:
        detail = f"{e.msg} at line {e.lineno}, column {e.colno}"
    else:  # pragma: no cover
        detail = "unknown"

    raise MalformedResponseError(f"Invalid JSON from model: {detail}", raw_text=raw_text)


def extract_records(payload: Any, key: str, raw_text: str = "") -> List[Dict[str, Any]]:
    """
    Return the list of record objects stored under `key`.

    A bare top-level list is accepted as the records themselves.
    A missing key yields an empty list.
    """
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict):
        records = payload.get(key)
        if records is None:
            log.warning("Model output has no '%s' key", key)
            return []
    else:
        raise MalformedResponseError(
            f"Expected a JSON object with '{key}', got {type(payload).__name__}",
            raw_text=raw_text,
        )

    if not isinstance(records, list):
        raise MalformedResponseError(f"'{key}' must be a list", raw_text=raw_text)

    for pos, rec in enumerate(records, start=1):
        if not isinstance(rec, dict):
            raise MalformedResponseError(
                f"'{key}' item {pos} is {type(rec).__name__}, expected an object",
                raw_text=raw_text,
            )

    return records
