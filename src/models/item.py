# src/models/item.py

"""Listing data models shared by scrapers, the cache and the aggregator."""

from dataclasses import dataclass, field
from typing import Any

Price = float | int | str | None


@dataclass(frozen=True)
class Item:
    """A single normalized listing from one provider."""

    title: str
    price: Price = None
    currency: str | None = None
    rating: float | None = None
    reviews: int | None = None
    url: str | None = None
    thumbnail: str | None = None
    source: str = ""
    raw: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any](),
        compare=False,
        repr=False,
    )


@dataclass
class ScoredItem:
    """An Item merged with its duplicates, plus its running score.

    Display fields come from the first occurrence; ``sources`` keeps
    every contributing provider tag once, in arrival order.
    """

    title: str
    price: Price = None
    currency: str | None = None
    rating: float | None = None
    reviews: int | None = None
    url: str | None = None
    thumbnail: str | None = None
    source: str = ""
    score: float = 0.0
    sources: list[str] = field(
        default_factory=lambda: list[str]()
    )
    raw: dict[str, Any] = field(
        default_factory=lambda: dict[str, Any](),
        compare=False,
        repr=False,
    )

    @classmethod
    def from_item(cls, item: Item) -> "ScoredItem":
        """Seed a ScoredItem from the first occurrence of a listing."""
        return cls(
            title=item.title,
            price=item.price,
            currency=item.currency,
            rating=item.rating,
            reviews=item.reviews,
            url=item.url,
            thumbnail=item.thumbnail,
            source=item.source,
            sources=[item.source],
            raw=item.raw,
        )

    def add_source(self, source: str) -> None:
        """Record a contributing provider tag, ignoring repeats."""
        if source not in self.sources:
            self.sources.append(source)

    def to_dict(self) -> dict[str, Any]:
        """Plain-field view used for JSON output."""
        return {
            "title": self.title,
            "price": self.price,
            "currency": self.currency,
            "rating": self.rating,
            "reviews": self.reviews,
            "url": self.url,
            "thumbnail": self.thumbnail,
            "score": round(self.score, 4),
            "sources": list(self.sources),
        }

    def to_summary_row(self) -> dict[str, Any]:
        """Flattened fields handed to the narrative generator."""
        return {
            "title": self.title,
            "price": self.price,
            "rating": self.rating,
            "reviews": self.reviews,
            "sources": list(self.sources),
            "url": self.url,
        }
