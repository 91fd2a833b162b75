"""Shared utilities for parsing LLM responses."""

import json
import logging
import re
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

CAMPAIGN_FALLBACK: Dict[str, str] = {
    "adCopy": "Error: Could not parse AI response. Please try again.",
    "cta": "Learn More",
    "hooks": (
        "Discover how we can help|Transform your business today|Get started now|"
        "See the difference|Contact us today"
    ),
    "landingPageCopy": (
        "We apologize, but there was an issue generating the campaign content. "
        "Please try generating the campaign again."
    ),
    "imageSuggestion": "Professional business meeting or collaboration scene",
}

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"(^|\n)\s*//[^\n]*")
_TRAILING_COMMA_OBJECT = re.compile(r",\s*}")
_TRAILING_COMMA_ARRAY = re.compile(r",\s*]")
_FIRST_ARRAY = re.compile(r"\[[\s\S]*?\]")


def parse_json_response(text: str) -> dict:
    """Extract and parse JSON from an LLM response that may contain extra text.

    Tries three strategies in order:
    1. Direct json.loads on the stripped text
    2. Extract JSON from markdown code fences (```json ... ```)
    3. Find the outermost { ... } brace pair

    Raises ValueError if no valid JSON can be found.
    """
    stripped = text.strip()

    # Strategy 1: direct parse
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass

    # Strategy 2: markdown code fences
    if "```" in stripped:
        for block in stripped.split("```"):
            block = block.strip()
            if block.startswith("json"):
                block = block[4:].strip()
            try:
                return json.loads(block)
            except json.JSONDecodeError:
                continue

    # Strategy 3: outermost braces
    start = stripped.find("{")
    end = stripped.rfind("}")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(stripped[start : end + 1])
        except json.JSONDecodeError:
            pass

    raise ValueError(f"Could not parse JSON from LLM response: {stripped[:200]}")


def _strip_fences(text: str) -> str:
    if text.startswith("```"):
        text = re.sub(r"^```json\s*", "", text, flags=re.IGNORECASE)
        text = re.sub(r"^```\s*", "", text)
        if text.endswith("```"):
            text = re.sub(r"```\s*$", "", text)
    return text


def _first_balanced_object(text: str) -> str:
    """Cut the first top-level {...} object, ignoring braces inside strings.

    Returns the text unchanged when there is no opening brace or the object
    never closes.
    """
    start = text.find("{")
    if start == -1:
        return text

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        ch = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : index + 1]
    return text


def sanitize_json_text(text: str) -> str:
    """Clean common LLM artifacts so the result has a chance to be valid JSON."""
    cleaned = (text or "").strip()
    cleaned = _strip_fences(cleaned)
    cleaned = _BLOCK_COMMENT.sub("", cleaned)
    cleaned = _LINE_COMMENT.sub(r"\1", cleaned)
    cleaned = _first_balanced_object(cleaned)
    cleaned = _TRAILING_COMMA_OBJECT.sub("}", cleaned)
    cleaned = _TRAILING_COMMA_ARRAY.sub("]", cleaned)
    return cleaned.strip()


def parse_campaign_payload(text: str) -> Dict[str, Any]:
    """Parse campaign JSON from the model; fall back to a fixed payload when it is unusable."""
    try:
        parsed = parse_json_response(text or "")
    except ValueError:
        # Comments, trailing commas or chatter after the object
        cleaned = sanitize_json_text(text)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error(f"Campaign JSON parse failed: {e}. Cleaned text: {cleaned[:500]}")
            return dict(CAMPAIGN_FALLBACK)

    if not isinstance(parsed, dict):
        logger.error(f"Campaign response is not a JSON object: {type(parsed).__name__}")
        return dict(CAMPAIGN_FALLBACK)
    return parsed


def normalize_hooks(value: Any) -> str:
    if isinstance(value, list):
        return " | ".join(str(item) for item in value)
    if isinstance(value, str):
        return value
    return ""


def extract_json_array(text: str) -> List[Any]:
    """Find the first [...] in the response and parse it.

    Raises ValueError when there is no array or it does not parse.
    """
    match = _FIRST_ARRAY.search(text or "")
    if not match:
        raise ValueError("No JSON array found in response")

    candidate = match.group(0)
    candidate = re.sub(r"^```json\s*", "", candidate)
    candidate = re.sub(r"\s*```$", "", candidate)
    candidate = re.sub(r"^- ", "", candidate, flags=re.MULTILINE)
    candidate = candidate.strip("`").strip()

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON array: {e}") from e
    if not isinstance(parsed, list):
        raise ValueError("Parsed value is not a list")
    return parsed


def _find_labeled_line(text: str, label: str) -> str | None:
    prefix = f"{label}:"
    for line in (text or "").splitlines():
        stripped = line.strip()
        if stripped.startswith(prefix):
            return stripped[len(prefix) :].strip()
    return None


def parse_labeled_list(text: str, label: str) -> List[str]:
    """Items of a ``LABEL: a, b, c`` line; empty list if the label is absent."""
    remainder = _find_labeled_line(text, label)
    if not remainder:
        return []
    return [item.strip() for item in remainder.split(",") if item.strip()]


def parse_labeled_value(text: str, label: str) -> str:
    return _find_labeled_line(text, label) or ""
