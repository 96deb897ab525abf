"""Builds the HTML price report and sends it by e-mail."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from mtgreport.domain import Card, CardsPrice
from mtgreport.dtos import ZERO_TIME
from mtgreport.logger import Logger
from mtgreport.ports import Email, ReportRepository, ReportServicePort

_CELL = "border: 1px solid black; padding: 10px;"
_HEADERS = (
    "ID",
    "Name",
    "Set Name",
    "Collector Number",
    "Foil",
    "Old Price",
    "Last Price",
    "Price Change",
    "Last Update",
)
_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class ReportServiceError(Exception):
    """Raised when a step of building or sending the report fails."""


def _rfc1123(value: datetime) -> str:
    zone = value.tzname() or "UTC"
    return (
        f"{_DAYS[value.weekday()]}, {value.day:02d} {_MONTHS[value.month - 1]} {value.year:04d} "
        f"{value.hour:02d}:{value.minute:02d}:{value.second:02d} {zone}"
    )


def _change_color(change: float) -> str:
    if change > 0:
        return "green"
    if change < 0:
        return "red"
    return "black"


def _cell(value: str, style: str = _CELL) -> str:
    return f"<td style='{style}'>{value}</td>"


class ReportService(ReportServicePort):
    """Records the total value, formats the report and e-mails it."""

    def __init__(self, repository: ReportRepository, email: Email, log: Logger) -> None:
        self.repository = repository
        self.email = email
        self.log = log

    def process_and_send(self) -> None:
        try:
            self.repository.insert_total_price()
        except Exception as err:
            raise ReportServiceError(f"service failed to insert total price in process and send: {err}") from err

        try:
            cards = self.repository.get_cards_report()
        except Exception as err:
            raise ReportServiceError(f"service failed to get cards reports in process and send: {err}") from err

        cards_table = self.format_cards_table(cards)

        try:
            price = self.repository.get_total_price()
        except Exception as err:
            raise ReportServiceError(f"service failed to get total price in process and send: {err}") from err

        price_text = self.format_cards_price(price)

        try:
            self.email.send_email(cards_table, price_text)
        except Exception as err:
            raise ReportServiceError(f"service failed to send email in process and send: {err}") from err

    def format_cards_table(self, cards: Iterable[Card]) -> str:
        """Render the cards as HTML table rows, closed by ``</table>``."""
        parts = ["<tr>", *(f"<th style='{_CELL}'>{title}</th>" for title in _HEADERS), "</tr>"]
        for card in cards:
            details = card.details
            last_update = details.last_update or ZERO_TIME
            color = _change_color(details.price_change)
            parts.extend(
                (
                    "<tr>",
                    _cell(str(card.id)),
                    _cell(card.name),
                    _cell(card.set_name),
                    _cell(card.collector_number),
                    _cell("true" if card.foil else "false"),
                    _cell(f"{details.old_price:.2f}"),
                    _cell(f"{details.last_price:.2f}"),
                    _cell(f"{details.price_change:.2f}", f"{_CELL} color: {color};"),
                    _cell(_rfc1123(last_update)),
                    "</tr>",
                )
            )
        parts.append("</table>")
        return "".join(parts)

    def format_cards_price(self, price: CardsPrice) -> str:
        """Describe the change in total value as an HTML sentence."""
        if price.price_change > 0:
            trend = "<span style='color: green;'>increased</span>"
        elif price.price_change < 0:
            trend = "<span style='color: red;'>decreased</span>"
        else:
            trend = "<span style='color: black;'>stayed the same</span>"
        return (
            f"The total value of your MTG card investment has {trend} from "
            f"<strong>R${price.old_price:.2f}</strong> to <strong>R${price.new_price:.2f}</strong>. "
            f"That's a change of <strong>R${price.price_change:.2f}</strong>."
        )