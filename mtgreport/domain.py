"""Core domain objects of the card collection and the errors they raise."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class CardDetails:
    """Price information recorded for one card at one point in time."""

    card_id: int = 0
    last_price: float = 0.0
    old_price: float = 0.0
    price_change: float = 0.0
    last_update: datetime | None = None


@dataclass
class Card:
    """A card in the collection, with its latest price details."""

    id: int = 0
    name: str = ""
    set_name: str = ""
    collector_number: str = ""
    foil: bool = False
    details: CardDetails = field(default_factory=CardDetails)

    def validate_card_fields(self, foil: str) -> None:
        """Check the required fields and set ``foil`` from its text form.

        Raises ValueError when a field is missing or ``foil`` is neither
        ``"true"`` nor ``"false"``.
        """
        if not self.name:
            raise ValueError("name is required")
        if not self.collector_number:
            raise ValueError("collector number is required")
        if foil == "true":
            self.foil = True
        elif foil == "false":
            self.foil = False
        else:
            raise ValueError("foil bool is required")


@dataclass
class UpdateCard:
    """A rename request for an existing card."""

    id: int = 0
    name: str = ""


@dataclass
class CardsPrice:
    """Total value of the collection before and after the last update."""

    old_price: float = 0.0
    new_price: float = 0.0
    price_change: float = 0.0
    last_update: datetime | None = None


@dataclass
class CollectionStats:
    """Aggregate figures about the whole collection."""

    total_cards: int = 0
    foil_cards: int = 0
    unique_sets: int = 0
    total_value: float = 0.0


class DomainError(Exception):
    """Base class for errors raised by the domain layer."""

    default_message = "domain error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(self.default_message if message is None else message)


class CardAlreadyExistsError(DomainError):
    """The card is already in the collection."""

    default_message = "card already exists"


class CardNotFoundError(DomainError):
    """No card matches the request."""

    default_message = "card not found"


class CardsPriceNotFoundError(DomainError):
    """No total price has been recorded."""

    default_message = "cards price not found"


class InvalidSetNameError(DomainError):
    """The set name is not known."""

    default_message = "invalid set name"