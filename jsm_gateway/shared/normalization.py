from __future__ import annotations
from typing import Any, Optional


def normalize_str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None

def is_blank(value: Any) -> bool:
    """True for values a caller left empty: None, "", False, 0."""
    if isinstance(value, (dict, list)):
        return False
    return value is None or value == "" or value is False or value == 0

def split_choice_tokens(value: Any) -> list[str]:
    """Split a list or a comma-separated string into lower-case trimmed tokens."""
    if isinstance(value, (list, tuple)):
        raw = [str(item) for item in value]
    else:
        raw = str(value).split(",")
    return [token.strip().lower() for token in raw]

def label_key(value: Any) -> str:
    return str(value).strip().lower()
