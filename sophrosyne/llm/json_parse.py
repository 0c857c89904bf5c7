import json
import re
from typing import Any

from sophrosyne.llm.errors import InvalidResponse, JsonParsingFailed

RATE_LIMIT_CODE = 429
UNKNOWN_API_ERROR = "Unknown API error"


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    # remove ```json ... ``` or ``` ... ```
    if s.startswith("```"):
        s = re.sub(r"^```[a-zA-Z0-9]*\s*", "", s)
        s = re.sub(r"\s*```$", "", s)
    return s.strip()


def parse_envelope(raw: bytes | str) -> dict:
    """Step 1: the HTTP body must be a JSON object."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError):
        raise InvalidResponse()
    if not isinstance(data, dict):
        raise InvalidResponse()
    return data


def envelope_error(envelope: dict) -> tuple[int, str] | None:
    """Step 2: application-level error object, as (code, message)."""
    err = envelope.get("error")
    if not isinstance(err, dict):
        return None
    code = err.get("code")
    # bool is an int subclass; a flag is not an error code
    if not isinstance(code, int) or isinstance(code, bool):
        return None
    message = err.get("message")
    if not isinstance(message, str) or not message:
        message = UNKNOWN_API_ERROR
    return code, message


def extract_content(envelope: dict) -> str:
    """Step 3: choices[0].message.content as a non-empty string."""
    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        raise InvalidResponse()
    first = choices[0]
    if not isinstance(first, dict):
        raise InvalidResponse()
    message = first.get("message")
    if not isinstance(message, dict):
        raise InvalidResponse()
    content = message.get("content")
    if not isinstance(content, str) or not content:
        raise InvalidResponse()
    return content


def parse_json_object(content: str) -> dict[str, Any]:
    """Step 4: the content itself must be a non-empty JSON object."""
    try:
        parsed = json.loads(_strip_code_fences(content))
    except json.JSONDecodeError:
        raise JsonParsingFailed()
    if not isinstance(parsed, dict) or not parsed:
        raise JsonParsingFailed()
    return parsed


def require_journey_shape(journey: dict[str, Any]) -> dict[str, Any]:
    """Step 5: path.days (or legacy path.weeks) must be a non-empty list."""
    path = journey.get("path")
    if not isinstance(path, dict):
        raise InvalidResponse("Journey is missing its path object")
    days = path.get("days")
    if isinstance(days, list) and days:
        return journey
    weeks = path.get("weeks")
    if isinstance(weeks, list) and weeks:
        return journey
    raise InvalidResponse("Journey path has no days or weeks")
