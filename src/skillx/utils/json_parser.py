"""Decoding of JSON payloads returned by language models."""

from __future__ import annotations

import json
from typing import TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


class DecodeError(ValueError):
    """Model output could not be decoded into the expected shape."""


def extract_json(text: str | None) -> dict | list:
    """Extract a JSON document from an LLM response.

    Tries in order:
    1. Direct json.loads on the full text
    2. The body of a fenced code block (```json ... ```)
    3. The outermost {...} object
    4. The outermost [...] array
    5. A truncated object with its missing closers appended
    """
    if not text or not text.strip():
        raise DecodeError("Empty response, expected JSON")
    text = text.strip()

    candidates = [text]
    unfenced = _strip_code_fences(text)
    if unfenced != text:
        candidates.append(unfenced)

    for candidate in candidates:
        for parse in (json.loads, _outermost_object, _outermost_array):
            try:
                value = parse(candidate)
            except json.JSONDecodeError:
                continue
            if isinstance(value, (dict, list)):
                return value

    repaired = _close_truncated(candidates[-1])
    if repaired is not None:
        return repaired

    raise DecodeError(f"Could not extract JSON from text: {text[:200]}...")


def parse_model(model_cls: type[M], data: object) -> M:
    """Validate decoded JSON against a pydantic model.

    Raises DecodeError instead of pydantic's ValidationError so callers
    handle every malformed-payload case the same way.
    """
    if not isinstance(data, dict):
        raise DecodeError(f"Expected JSON object for {model_cls.__name__}, got {type(data).__name__}")
    try:
        return model_cls.model_validate(data)
    except ValidationError as exc:
        raise DecodeError(f"Invalid {model_cls.__name__} payload: {exc}") from exc


def _strip_code_fences(text: str) -> str:
    lines = text.split("\n")
    if lines and lines[0].strip().startswith("```"):
        lines = lines[1:]
    while lines and lines[-1].strip() in ("```", ""):
        lines = lines[:-1]
    return "\n".join(lines).strip()


def _outermost_object(text: str) -> object:
    return _slice_between(text, "{", "}")


def _outermost_array(text: str) -> object:
    return _slice_between(text, "[", "]")


def _slice_between(text: str, opener: str, closer: str) -> object:
    start = text.find(opener)
    end = text.rfind(closer)
    if start == -1 or end <= start:
        raise json.JSONDecodeError(f"no {opener}...{closer} span", text, 0)
    return json.loads(text[start : end + 1])


def _close_truncated(text: str) -> dict | None:
    """Repair output cut off by max_tokens by appending missing closers."""
    start = text.find("{")
    if start == -1:
        return None

    candidate = text[start:].rstrip().rstrip(",")
    open_brackets = candidate.count("[") - candidate.count("]")
    open_braces = candidate.count("{") - candidate.count("}")
    if open_braces <= 0 and open_brackets <= 0:
        return None

    # Cut back to the last complete string value when the tail is mid-token
    for attempt in (candidate, candidate[: candidate.rfind('"') + 1]):
        attempt = attempt.rstrip().rstrip(",")
        ob = attempt.count("{") - attempt.count("}")
        ol = attempt.count("[") - attempt.count("]")
        try:
            value = json.loads(attempt + "]" * max(0, ol) + "}" * max(0, ob))
        except json.JSONDecodeError:
            continue
        if isinstance(value, dict):
            return value
    return None
