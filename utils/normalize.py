from __future__ import annotations

import json
from typing import Any, List, Optional, Union

DEFAULT_CARD_KIND = "text"
FOLDER_KINDS = ("flashcards", "questions")
DEFAULT_FOLDER_KIND = "flashcards"

Number = Union[int, float]


def normalize_options(raw: Any) -> list:
    """Materialize a persisted options value as a list.

    Lists pass through untouched. Strings are parsed as JSON. Missing, empty,
    ``"null"``, unparseable or non-array input yields ``[]``.
    """
    if not raw or raw == "null":
        return []
    if isinstance(raw, list):
        return raw
    if not isinstance(raw, (str, bytes, bytearray)):
        return []
    try:
        parsed = json.loads(raw)
    except ValueError:
        return []
    return parsed if isinstance(parsed, list) else []


def encode_options(raw: Any) -> str:
    """JSON text for the options column; non-list payloads store an empty array."""
    if raw and isinstance(raw, list):
        return json.dumps(raw)
    return "[]"


def normalize_card_kind(raw: Any) -> str:
    return raw if raw else DEFAULT_CARD_KIND


def normalize_srs_level(raw: Any) -> int:
    if not raw:
        return 0
    try:
        level = int(raw)
    except (TypeError, ValueError):
        return 0
    return max(level, 0)


def normalize_commentary(raw: Any) -> str:
    return raw if raw else ""


def normalize_folder_kind(raw: Any) -> str:
    return raw if raw in FOLDER_KINDS else DEFAULT_FOLDER_KIND


def coerce_id(raw: Any) -> Optional[Number]:
    """Numeric form of a row id or reference so "5" and 5 compare equal.

    Returns None for anything that is not a number, and None never matches.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return None
    if number != number:
        return None
    return int(number) if number.is_integer() else number


def is_blank(value: Any) -> bool:
    """True for values a required field must not carry (None, empty or whitespace-only text)."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def missing_fields(payload: dict, required: List[str]) -> List[str]:
    return [name for name in required if is_blank(payload.get(name))]
