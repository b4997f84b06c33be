import re
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TypeVar

T = TypeVar("T")

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_key(value: str | None) -> str:
    """
    Reduce a label to a comparable key.

    Lower-cases, trims, maps "&" to "and" and strips everything that is not
    an ASCII letter or digit ("Fox & Friends" -> "foxandfriends").
    """
    text = str(value if value is not None else "").strip().lower()
    text = text.replace("&", "and")
    return _NON_ALNUM.sub("", text)


def uniq(items: Iterable[T]) -> list[T]:
    """Drop duplicates, keeping the first occurrence of each item."""
    return list(dict.fromkeys(items))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def safe_now_iso() -> str:
    return utc_now().isoformat().replace("+00:00", "Z")
