# src/models/payload.py

"""Helpers that map loosely-shaped provider records onto :class:`Item`.

Provider payloads disagree on key names (``title`` vs ``name``,
``link`` vs ``url``) and on types (prices can be strings, numbers or
objects).  Nothing here invents a value: a field the payload does not
carry becomes ``None``.
"""

import math
from typing import Any

from src.models.item import Item, Price


def pick(record: dict[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among *keys*, else ``None``."""
    for key in keys:
        value = record.get(key)
        if value is not None and value != "":
            return value
    return None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite(value: Any) -> bool:
    return _is_number(value) and (
        not isinstance(value, float) or math.isfinite(value)
    )


def price_from(value: Any) -> Price:
    """Normalise a provider price field.

    Compound price objects prefer their raw/display text, then a
    numeric sub-field.  Scalars pass through untouched.
    """
    if isinstance(value, dict):
        display = pick(value, "raw", "display")
        if display is not None:
            return str(display)
        numeric = pick(value, "value", "extracted_value", "amount")
        return numeric if _is_finite(numeric) else None
    if _is_finite(value) or isinstance(value, str):
        return value
    return None


def currency_from(record: dict[str, Any]) -> str | None:
    """Read a currency from the record or from its compound price."""
    currency = record.get("currency")
    if isinstance(currency, str) and currency:
        return currency
    price = record.get("price")
    if isinstance(price, dict):
        nested = price.get("currency")
        if isinstance(nested, str) and nested:
            return nested
    return None


def as_rating(value: Any) -> float | None:
    """Coerce a rating to a float on the 0-5 scale, else ``None``."""
    if not _is_number(value) and not isinstance(value, str):
        return None
    try:
        rating = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    if not math.isfinite(rating) or not 0 <= rating <= 5:
        return None
    return rating


def as_reviews(value: Any) -> int | None:
    """Coerce a review count to a non-negative int, or ``None``."""
    if _is_finite(value):
        return max(int(value), 0)
    if isinstance(value, str):
        digits = value.replace(",", "").strip()
        if digits.isdigit():
            return int(digits)
    return None


def as_text(value: Any) -> str | None:
    """Return *value* as a string when it is one, else ``None``."""
    return value if isinstance(value, str) and value else None


def item_from_payload(record: dict[str, Any], source: str) -> Item:
    """Reshape a generic scraped record (Apify, cache rows) into an Item.

    A missing title becomes ``""``; :class:`ItemValidator` drops those.
    """
    title = pick(record, "title", "name")
    return Item(
        title=str(title) if title is not None else "",
        price=price_from(record.get("price")),
        currency=currency_from(record),
        rating=as_rating(pick(record, "rating", "stars")),
        reviews=as_reviews(
            pick(
                record,
                "reviews",
                "reviewsCount",
                "ratings_total",
                "reviewCount",
            )
        ),
        url=as_text(pick(record, "url", "link")),
        thumbnail=as_text(
            pick(record, "thumbnail", "thumbnailImage", "image")
        ),
        source=source,
        raw=record,
    )
