"""Text and date normalization used for sorting aggregated content."""

import unicodedata
from datetime import datetime, timezone
from typing import Any


def normalize_text(text: str, *, lowercase: bool = True) -> str:
    """Fold accents, optionally case, and runs of whitespace out of `text`."""
    if not text:
        return ""

    folded = "".join(
        c for c in unicodedata.normalize("NFKD", text) if not unicodedata.combining(c)
    )
    if lowercase:
        folded = folded.casefold()
    return " ".join(folded.split())


def collation_key(name: str | None) -> tuple[str, str]:
    """
    Locale-style sort key for display names.

    Compares accent- and case-insensitively first, then falls back to the raw
    string so that the ordering stays total. Missing names sort first.
    """
    if not name:
        return ("", "")
    return (normalize_text(name), name)


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a publish date into an aware datetime.

    Accepts datetimes, ISO-8601 strings (with or without `Z`) and numeric
    epoch milliseconds. Missing or unparseable values map to the epoch.
    """
    if value is None or value == "":
        return _EPOCH

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

    if isinstance(value, bool):
        return _EPOCH

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return _EPOCH

    text = str(value).strip()
    if text.isdigit():
        return parse_timestamp(int(text))

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
