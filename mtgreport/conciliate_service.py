"""Refreshes card prices from the market, converted to local currency."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from datetime import datetime

from mtgreport.domain import Card, CardDetails
from mtgreport.logger import Logger
from mtgreport.ports import CardGateway, ConciliateRepository, ExchangeGateway, PriceService

EXCHANGE_DEFAULT = 4.80
MAX_REQUESTS_PER_SECOND = 10


class _Ticker:
    """Paces calls to one per interval, skipping ticks that were missed."""

    def __init__(self, interval: float, clock: Callable[[], float], sleep: Callable[[float], None]) -> None:
        self._interval = interval
        self._clock = clock
        self._sleep = sleep
        self._next = clock() + interval

    def wait(self) -> None:
        now = self._clock()
        if now < self._next:
            self._sleep(self._next - now)
            self._next += self._interval
        else:
            missed = int((now - self._next) // self._interval) + 1
            self._next += missed * self._interval


class ConciliateService(PriceService):
    """Walks the collection in batches and stores fresh prices."""

    def __init__(
        self,
        repository: ConciliateRepository,
        card_gateway: CardGateway,
        exchange_gateway: ExchangeGateway,
        commit_size: int,
        log: Logger,
        *,
        max_requests_per_second: float = MAX_REQUESTS_PER_SECOND,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests_per_second <= 0:
            raise ValueError("max_requests_per_second must be positive")
        self.repository = repository
        self.card_gateway = card_gateway
        self.exchange_gateway = exchange_gateway
        self.commit_size = commit_size
        self.log = log
        self._interval = 1.0 / max_requests_per_second
        self._sleep = sleep
        self._clock = clock

    def conciliate(self) -> int:
        """Refresh prices and return how many price records were stored."""
        try:
            exchange = self.exchange_gateway.get_usd()
        except Exception as err:
            self.log.error(f"service failed to get usd exchange: {err}")
            exchange = EXCHANGE_DEFAULT

        updated = 0
        for details in self._batches(exchange):
            self.log.info("inserting cards...")
            if not details:
                self.log.info("no cards to insert")
                continue
            try:
                self.repository.insert_card_details(details)
            except TimeoutError as err:
                self.log.error(f"service failed to insert card details: {err}")
                break
            except Exception as err:
                self.log.warn(f"service failed to insert card details: {err}")
                continue
            updated += len(details)
            self.log.info("cards inserted!")
        return updated

    def _batches(self, exchange: float) -> Iterator[list[CardDetails]]:
        offset = 0
        while True:
            try:
                cards = self.repository.get_cards_for_update(offset, self.commit_size)
            except TimeoutError as err:
                self.log.error(f"service failed to get cards for update due context timeout: {err}")
                return
            except Exception as err:
                self.log.error(f"service failed to get cards for update: {err}")
                cards = []
            if not cards:
                return

            self._price_batch(cards, exchange)
            yield [card.details for card in cards if card.details.last_update is not None]
            offset += self.commit_size

    def _price_batch(self, cards: list[Card], exchange: float) -> None:
        ticker = _Ticker(self._interval, self._clock, self._sleep)
        for card in cards:
            try:
                price = self.card_gateway.get_card_price(card)
                failure = None
            except Exception as err:
                failure = err
            ticker.wait()
            if isinstance(failure, TimeoutError):
                self.log_error(card, f"service failed to get card price due context timeout: {failure}")
                break
            if failure is not None:
                self.log_error(card, f"service failed to get card price: {failure}")
                continue

            details = card.details
            previous = details.last_price
            details.card_id = card.id
            details.old_price = previous
            details.last_price = price * exchange
            details.price_change = details.last_price - previous
            details.last_update = datetime.now().astimezone()

    def log_error(self, card: Card, err: object) -> None:
        """Log a warning carrying the card's identifying fields."""
        self.log.with_fields(
            {
                "card_id": card.id,
                "card_name": card.name,
                "set_name": card.set_name,
                "collector_number": card.collector_number,
                "foil": card.foil,
            }
        ).warn(err)