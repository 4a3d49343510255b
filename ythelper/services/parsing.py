"""Lenient JSON extraction and per-field sanitization of model output."""

import json
import re
from typing import Any

from ythelper.exceptions import ResponseParseError
from ythelper.models.analysis import MAX_TAGS, MAX_THUMBNAILS, MAX_TITLES, AnalysisResult

_BRACED_BLOCK = re.compile(r"\{[\s\S]*\}")

# field -> maximum number of entries kept
LIST_FIELDS = {
    "titles": MAX_TITLES,
    "tags": MAX_TAGS,
    "thumbnails": MAX_THUMBNAILS,
}


def _whole_text(text: str) -> str:
    return text


def _braced_block(text: str) -> str | None:
    match = _BRACED_BLOCK.search(text)
    return match.group(0) if match else None


_STAGES = (_whole_text, _braced_block)


def parse_model_json(text: str | None) -> Any:
    """Parse model output as JSON.

    The whole text is tried first. Models sometimes wrap the object in prose or
    code fences, so the span from the first ``{`` to the last ``}`` is tried next.
    """
    text = text or ""
    last_error: json.JSONDecodeError | None = None
    for stage in _STAGES:
        candidate = stage(text)
        if candidate is None:
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
    raise ResponseParseError("Model response did not contain valid JSON.") from last_error


def _string_list(value: Any, limit: int) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value[:limit] if isinstance(item, str)]


def sanitize_payload(payload: Any) -> AnalysisResult:
    """Coerce an arbitrary parsed payload into a well-formed AnalysisResult.

    Wrong or missing fields become empty defaults; nothing here raises.
    """
    if not isinstance(payload, dict):
        payload = {}
    description = payload.get("description")
    return AnalysisResult(
        description=description if isinstance(description, str) else "",
        **{field: _string_list(payload.get(field), limit) for field, limit in LIST_FIELDS.items()},
    )
