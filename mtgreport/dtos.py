"""Request and response objects exchanged with the outside world."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def format_time(value: datetime) -> str:
    """Render a datetime as RFC 3339 with trailing fractional zeros dropped."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")
    offset = value.utcoffset()
    minutes = int(offset.total_seconds() // 60) if offset else 0
    if minutes == 0:
        return text + "Z"
    sign = "+" if minutes > 0 else "-"
    hours, mins = divmod(abs(minutes), 60)
    return f"{text}{sign}{hours:02d}:{mins:02d}"


def _require_mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError("request body must be an object")
    return data


def _str_field(data: Mapping, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key} must be a string")
    return value


@dataclass
class RequestInsertCard:
    """Body of a request that adds one card."""

    name: str = ""
    set_name: str = ""
    collector_number: str = ""
    foil: bool | None = None

    @classmethod
    def from_dict(cls, data: Mapping) -> RequestInsertCard:
        """Build the request from decoded JSON, rejecting mistyped fields."""
        data = _require_mapping(data)
        foil = data.get("foil")
        if foil is not None and not isinstance(foil, bool):
            raise ValueError("field foil must be a boolean")
        return cls(
            name=_str_field(data, "name"),
            set_name=_str_field(data, "set_name"),
            collector_number=_str_field(data, "collector_number"),
            foil=foil,
        )


@dataclass
class RequestUpdateCard:
    """Body of a request that renames a card; the id comes from the URL."""

    id: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, card_id: str, data: Mapping) -> RequestUpdateCard:
        """Build the request from the path id and decoded JSON."""
        data = _require_mapping(data)
        return cls(id=card_id, name=_str_field(data, "name"))


@dataclass
class ResponseInsertCard:
    """A card as returned after it has been stored."""

    id: int = 0
    name: str = ""
    set: str = ""
    collector_number: str = ""
    foil: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "set": self.set,
            "collector_number": self.collector_number,
            "foil": self.foil,
        }


@dataclass
class ResponseCard:
    """A card with its latest price details."""

    id: int = 0
    name: str = ""
    set: str = ""
    collector_number: str = ""
    foil: bool = False
    last_price: float = 0.0
    old_price: float = 0.0
    price_change: float = 0.0
    last_update: datetime = ZERO_TIME

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "set": self.set,
            "collector_number": self.collector_number,
            "foil": self.foil,
            "last_price": self.last_price,
            "old_price": self.old_price,
            "price_change": self.price_change,
            "last_update": format_time(self.last_update),
        }


@dataclass
class ResponseConciliateJob:
    """Outcome of a price conciliation run."""

    processed: int = 0
    not_processed: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"processed": self.processed, "not_processed": self.not_processed}


@dataclass
class ResponsePaginatedCards:
    """One page of cards together with paging figures."""

    cards: list[ResponseCard] = field(default_factory=list)
    page: int = 0
    limit: int = 0
    total: int = 0
    total_pages: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "cards": [card.to_dict() for card in self.cards],
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "total_pages": self.total_pages,
        }


@dataclass
class ResponseCollectionStats:
    """Aggregate figures about the collection."""

    total_cards: int = 0
    foil_cards: int = 0
    unique_sets: int = 0
    total_value: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_cards": self.total_cards,
            "foil_cards": self.foil_cards,
            "unique_sets": self.unique_sets,
            "total_value": self.total_value,
        }