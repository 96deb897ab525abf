"""Operations on the card collection: adding, reading, renaming and paging cards."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping

from mtgreport.domain import Card, UpdateCard
from mtgreport.dtos import (
    ZERO_TIME,
    RequestInsertCard,
    RequestUpdateCard,
    ResponseCard,
    ResponseCollectionStats,
    ResponseInsertCard,
    ResponsePaginatedCards,
)
from mtgreport.logger import Logger
from mtgreport.ports import CardServicePort, CardsRepository

_SPACE = r"\t\n\f\r "
_LETTER = r"[^\W\d_]"
_LINE = re.compile(
    rf"name: ((?:{_LETTER}|[{_SPACE}\-,'\"!?])+), "
    rf"set_name: ((?:{_LETTER}|[{_SPACE}\-])+), "
    rf"collector_number: ([0-9A-Za-z_{_SPACE}]+), "
    rf"foil: ([0-9A-Za-z_{_SPACE}]+)"
)
_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class CardServiceError(Exception):
    """Raised when the repository or the input fails a card operation."""


def _parse_id(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid syntax: {text!r}")
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        raise ValueError(f"value out of range: {text!r}")
    return value


def _to_response(card: Card) -> ResponseCard:
    details = card.details
    return ResponseCard(
        id=card.id,
        name=card.name,
        set=card.set_name,
        collector_number=card.collector_number,
        foil=card.foil,
        last_price=details.last_price,
        old_price=details.old_price,
        price_change=details.price_change,
        last_update=details.last_update or ZERO_TIME,
    )


def _to_insert_response(card: Card) -> ResponseInsertCard:
    return ResponseInsertCard(
        id=card.id,
        name=card.name,
        set=card.set_name,
        collector_number=card.collector_number,
        foil=card.foil,
    )


def _total_pages(total: int, limit: int) -> int:
    return (total + limit - 1) // limit


class CardService(CardServicePort):
    """Card operations backed by a repository."""

    def __init__(self, repository: CardsRepository, commit_size: int, log: Logger) -> None:
        self.repository = repository
        self.commit_size = commit_size
        self.log = log

    def insert_card(self, card_request: RequestInsertCard) -> ResponseInsertCard:
        card = Card(
            name=card_request.name,
            set_name=card_request.set_name,
            collector_number=card_request.collector_number,
            foil=bool(card_request.foil),
        )
        try:
            stored = self.repository.insert_card(card)
        except Exception as err:
            raise CardServiceError(f"service failed to insert card: {err}") from err
        return _to_insert_response(stored)

    def get_card_by_id(self, card_id: str) -> ResponseCard:
        try:
            card = self.repository.get_card_by_id(card_id)
        except Exception as err:
            raise CardServiceError(f"service failed to get card: {err}") from err
        return _to_response(card)

    def get_cards(self, filters: Mapping[str, str]) -> list[ResponseCard]:
        try:
            cards = self.repository.get_cards(filters)
        except Exception as err:
            raise CardServiceError(f"service failed to get card: {err}") from err
        return [_to_response(card) for card in cards]

    def update_card(self, card_request: RequestUpdateCard) -> ResponseInsertCard:
        try:
            card_id = _parse_id(card_request.id)
        except ValueError as err:
            raise CardServiceError(f"service failed to parse id in update card: {err}") from err
        try:
            card = self.repository.update_card(UpdateCard(id=card_id, name=card_request.name))
        except Exception as err:
            raise CardServiceError(f"service failed to update card: {err}") from err
        return _to_insert_response(card)

    def delete_card(self, card_id: str) -> None:
        try:
            self.repository.delete_card(card_id)
        except Exception as err:
            raise CardServiceError(f"service failed to delete card: {err}") from err

    def get_card_history(self, card_id: str) -> list[ResponseCard]:
        try:
            cards = self.repository.get_card_history(card_id)
        except Exception as err:
            raise CardServiceError(f"service failed to get card history: {err}") from err
        return [_to_response(card) for card in cards]

    def insert_cards(self, file: Iterable[str | bytes]) -> tuple[int, int]:
        """Add cards described one per line; return (processed, not processed).

        Lines look like ``name: X, set_name: Y, collector_number: Z, foil: true``.
        Blank lines are skipped, malformed lines are counted as not processed,
        and cards are stored in batches of ``commit_size``.
        """
        rejected = 0
        processed = 0

        def batches() -> Iterator[list[Card]]:
            nonlocal rejected
            batch: list[Card] = []
            for line in self._lines(file):
                if not line:
                    continue
                match = _LINE.search(line)
                if match is None:
                    self.log.with_fields({"line": line}).warn("service failed to parse line in insert cards")
                    rejected += 1
                    continue
                name, set_name, collector_number, foil = match.groups()
                card = Card(name=name, set_name=set_name, collector_number=collector_number)
                try:
                    card.validate_card_fields(foil)
                except ValueError as err:
                    rejected += 1
                    self.log.warn(f"service failed to insert one card in insert cards: {err}")
                    continue
                batch.append(card)
                if len(batch) == self.commit_size:
                    yield batch
                    batch = []
            if batch:
                yield batch

        for batch in batches():
            try:
                self.repository.insert_cards(batch)
            except Exception as err:
                self.log.warn(f"service failed to insert cards: {err}")
                rejected += len(batch)
                continue
            processed += len(batch)

        return processed, rejected

    def _lines(self, file: Iterable[str | bytes]) -> Iterator[str]:
        try:
            for raw in file:
                if isinstance(raw, (bytes, bytearray)):
                    raw = bytes(raw).decode("utf-8", errors="replace")
                line = raw.rstrip("\n")
                if line.endswith("\r"):
                    line = line[:-1]
                yield line
        except (OSError, UnicodeError) as err:
            self.log.error(f"service scanner failed to insert cards: {err}")

    def get_cards_paginated(self, filters: Mapping[str, str], page: int, limit: int) -> ResponsePaginatedCards:
        offset = (page - 1) * limit
        try:
            total = self.repository.get_cards_count(filters)
        except Exception as err:
            raise CardServiceError(f"service failed to get cards count: {err}") from err
        try:
            cards = self.repository.get_cards_paginated(filters, offset, limit)
        except Exception as err:
            raise CardServiceError(f"service failed to get cards paginated: {err}") from err
        return ResponsePaginatedCards(
            cards=[_to_response(card) for card in cards],
            page=page,
            limit=limit,
            total=total,
            total_pages=_total_pages(total, limit),
        )

    def get_card_history_paginated(self, card_id: str, page: int, limit: int) -> ResponsePaginatedCards:
        offset = (page - 1) * limit
        try:
            total = self.repository.get_card_history_count(card_id)
        except Exception as err:
            raise CardServiceError(f"service failed to get card history count: {err}") from err
        try:
            cards = self.repository.get_card_history_paginated(card_id, offset, limit)
        except Exception as err:
            raise CardServiceError(f"service failed to get card history paginated: {err}") from err
        return ResponsePaginatedCards(
            cards=[_to_response(card) for card in cards],
            page=page,
            limit=limit,
            total=total,
            total_pages=_total_pages(total, limit),
        )

    def get_collection_stats(self) -> ResponseCollectionStats:
        try:
            stats = self.repository.get_collection_stats()
        except Exception as err:
            raise CardServiceError(f"service failed to get collection stats: {err}") from err
        return ResponseCollectionStats(
            total_cards=stats.total_cards,
            foil_cards=stats.foil_cards,
            unique_sets=stats.unique_sets,
            total_value=stats.total_value,
        )