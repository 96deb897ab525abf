"""Abstract interfaces between the services and their collaborators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from mtgreport.domain import Card, CardDetails, CardsPrice, CollectionStats, UpdateCard
from mtgreport.dtos import (
    RequestInsertCard,
    RequestUpdateCard,
    ResponseCard,
    ResponseCollectionStats,
    ResponseInsertCard,
    ResponsePaginatedCards,
)


class Email(ABC):
    """Sends the price report."""

    @abstractmethod
    def send_email(self, cards_table: str, cards_price_table: str) -> None:
        """Send a report built from the two HTML fragments."""


class CardGateway(ABC):
    """Looks up the market price of a card."""

    @abstractmethod
    def get_card_price(self, card: Card) -> float:
        """Return the card's price in US dollars."""


class ExchangeGateway(ABC):
    """Looks up exchange rates."""

    @abstractmethod
    def get_usd(self) -> float:
        """Return the value of one US dollar in local currency."""


class CardsRepository(ABC):
    """Storage of the card collection."""

    @abstractmethod
    def insert_card(self, card: Card) -> Card:
        """Store one card and return it with its id."""

    @abstractmethod
    def insert_cards(self, cards: list[Card]) -> None:
        """Store a batch of cards."""

    @abstractmethod
    def get_card_by_id(self, card_id: str) -> Card:
        """Return the card with the given id."""

    @abstractmethod
    def get_cards(self, filters: Mapping[str, str]) -> list[Card]:
        """Return every card matching the filters."""

    @abstractmethod
    def get_cards_paginated(self, filters: Mapping[str, str], offset: int, limit: int) -> list[Card]:
        """Return one window of the cards matching the filters."""

    @abstractmethod
    def get_cards_count(self, filters: Mapping[str, str]) -> int:
        """Return how many cards match the filters."""

    @abstractmethod
    def delete_card(self, card_id: str) -> None:
        """Remove the card with the given id."""

    @abstractmethod
    def get_card_history(self, card_id: str) -> list[Card]:
        """Return every recorded price of the card."""

    @abstractmethod
    def get_card_history_paginated(self, card_id: str, offset: int, limit: int) -> list[Card]:
        """Return one window of the card's price history."""

    @abstractmethod
    def get_card_history_count(self, card_id: str) -> int:
        """Return how many prices are recorded for the card."""

    @abstractmethod
    def update_card(self, card: UpdateCard) -> Card:
        """Rename a card and return it."""

    @abstractmethod
    def get_collection_stats(self) -> CollectionStats:
        """Return aggregate figures about the collection."""


class ConciliateRepository(ABC):
    """Storage used while refreshing card prices."""

    @abstractmethod
    def get_cards_for_update(self, offset: int, limit: int) -> list[Card]:
        """Return one window of cards whose prices should be refreshed."""

    @abstractmethod
    def insert_card_details(self, details: list[CardDetails]) -> None:
        """Store a batch of new price records."""


class ReportRepository(ABC):
    """Storage used when building the price report."""

    @abstractmethod
    def insert_total_price(self) -> None:
        """Record the current total value of the collection."""

    @abstractmethod
    def get_cards_report(self) -> list[Card]:
        """Return the cards that go into the report."""

    @abstractmethod
    def get_total_price(self) -> CardsPrice:
        """Return the latest total value and its change."""


class CardServicePort(ABC):
    """Operations on the card collection offered to handlers."""

    @abstractmethod
    def insert_card(self, card_request: RequestInsertCard) -> ResponseInsertCard:
        """Add one card."""

    @abstractmethod
    def insert_cards(self, file: Iterable[str]) -> tuple[int, int]:
        """Add cards from lines of text; return processed and rejected counts."""

    @abstractmethod
    def get_card_by_id(self, card_id: str) -> ResponseCard:
        """Return one card."""

    @abstractmethod
    def get_cards(self, filters: Mapping[str, str]) -> list[ResponseCard]:
        """Return cards matching the filters."""

    @abstractmethod
    def get_cards_paginated(self, filters: Mapping[str, str], page: int, limit: int) -> ResponsePaginatedCards:
        """Return one page of cards matching the filters."""

    @abstractmethod
    def delete_card(self, card_id: str) -> None:
        """Remove one card."""

    @abstractmethod
    def get_card_history(self, card_id: str) -> list[ResponseCard]:
        """Return the price history of a card."""

    @abstractmethod
    def get_card_history_paginated(self, card_id: str, page: int, limit: int) -> ResponsePaginatedCards:
        """Return one page of a card's price history."""

    @abstractmethod
    def update_card(self, card_request: RequestUpdateCard) -> ResponseInsertCard:
        """Rename a card."""

    @abstractmethod
    def get_collection_stats(self) -> ResponseCollectionStats:
        """Return aggregate figures about the collection."""


class PriceService(ABC):
    """Refreshes card prices."""

    @abstractmethod
    def conciliate(self) -> int:
        """Refresh prices and return how many cards were updated."""


class ReportServicePort(ABC):
    """Builds and sends the price report."""

    @abstractmethod
    def process_and_send(self) -> None:
        """Build the report and send it."""