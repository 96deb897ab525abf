import io
from datetime import datetime, timezone

import pytest

from mtgreport.domain import Card, CardDetails, CardsPrice
from mtgreport.logger import Logger
from mtgreport.ports import Email, ReportRepository
from mtgreport.report_service import ReportService, ReportServiceError


class FakeRepository(ReportRepository):
    def __init__(self, cards=None, price=None, fail_on=None):
        self.cards = cards if cards is not None else []
        self.price = price if price is not None else CardsPrice()
        self.fail_on = fail_on
        self.calls = []

    def _call(self, name):
        self.calls.append(name)
        if self.fail_on == name:
            raise RuntimeError("database error")

    def insert_total_price(self):
        self._call("insert_total_price")

    def get_cards_report(self):
        self._call("get_cards_report")
        return self.cards

    def get_total_price(self):
        self._call("get_total_price")
        return self.price


class FakeEmail(Email):
    def __init__(self, error=None):
        self.sent = []
        self.error = error

    def send_email(self, cards_table, cards_price_table):
        self.sent.append((cards_table, cards_price_table))
        if self.error:
            raise self.error


def make_service(repo=None, email=None):
    return ReportService(repo or FakeRepository(), email or FakeEmail(), Logger(stream=io.StringIO()))


def test_new_keeps_collaborators():
    repo, email, log = FakeRepository(), FakeEmail(), Logger(stream=io.StringIO())
    service = ReportService(repo, email, log)
    assert service.repository is repo
    assert service.email is email
    assert service.log is log


def test_process_and_send_success():
    now = datetime.now(timezone.utc)
    cards = [
        Card(1, "Lightning Bolt", "Alpha", "161", False, CardDetails(1, 10.50, 9.00, 1.50, now)),
    ]
    price = CardsPrice(100.00, 110.50, 10.50, now)
    repo = FakeRepository(cards, price)
    email = FakeEmail()
    make_service(repo, email).process_and_send()
    assert repo.calls == ["insert_total_price", "get_cards_report", "get_total_price"]
    assert len(email.sent) == 1
    table, text = email.sent[0]
    assert "Lightning Bolt" in table
    assert "increased" in text


@pytest.mark.parametrize(
    "fail_on, message",
    [
        ("insert_total_price", "service failed to insert total price in process and send"),
        ("get_cards_report", "service failed to get cards reports in process and send"),
        ("get_total_price", "service failed to get total price in process and send"),
    ],
)
def test_process_and_send_repository_errors(fail_on, message):
    repo = FakeRepository(fail_on=fail_on)
    email = FakeEmail()
    with pytest.raises(ReportServiceError, match=message):
        make_service(repo, email).process_and_send()
    assert repo.calls[-1] == fail_on
    assert email.sent == []


def test_process_and_send_email_error():
    email = FakeEmail(RuntimeError("email error"))
    with pytest.raises(ReportServiceError, match="service failed to send email in process and send"):
        make_service(FakeRepository(), email).process_and_send()
    assert len(email.sent) == 1


def test_format_cards_table():
    now = datetime.now(timezone.utc)
    cards = [
        Card(1, "Lightning Bolt", "Alpha", "161", False, CardDetails(0, 10.50, 9.00, 1.50, now)),
        Card(2, "Counterspell", "Alpha", "50", True, CardDetails(0, 4.00, 5.25, -1.25, now)),
        Card(3, "Black Lotus", "Alpha", "232", False, CardDetails(0, 5000.00, 5000.00, 0.00, None)),
    ]
    result = make_service().format_cards_table(cards)
    for expected in (
        "<tr>", "<td", "Lightning Bolt", "Counterspell", "Black Lotus", "Alpha", "161", "50", "232",
        "10.50", "4.00", "5000.00", "color: green", "color: red", "color: black", "</table>",
    ):
        assert expected in result
    assert result.endswith("</table>")
    assert result.count("<tr>") == 4


def test_format_cards_table_dates():
    fixed = datetime(2023, 12, 25, 10, 30, tzinfo=timezone.utc)
    cards = [
        Card(1, "Lightning Bolt", "M21", "123", True, CardDetails(0, 1.0, 1.0, 0.0, fixed)),
        Card(2, "Counterspell", "M21", "456", False, CardDetails(0, 1.0, 1.0, 0.0, None)),
    ]
    result = make_service().format_cards_table(cards)
    assert "Mon, 25 Dec 2023 10:30:00 UTC" in result
    assert "Mon, 01 Jan 0001 00:00:00 UTC" in result
    assert ">true</td>" in result and ">false</td>" in result


@pytest.mark.parametrize(
    "price, expected",
    [
        (CardsPrice(100.00, 110.50, 10.50), "increased"),
        (CardsPrice(100.00, 85.25, -14.75), "decreased"),
        (CardsPrice(100.00, 100.00, 0.00), "stayed the same"),
    ],
)
def test_format_cards_price(price, expected):
    result = make_service().format_cards_price(price)
    assert expected in result
    assert f"R${price.old_price:.2f}" in result
    assert f"R${price.new_price:.2f}" in result
    assert f"R${price.price_change:.2f}" in result


def test_format_cards_price_full_sentence():
    result = make_service().format_cards_price(CardsPrice(100.00, 110.50, 10.50))
    assert result == (
        "The total value of your MTG card investment has <span style='color: green;'>increased</span> "
        "from <strong>R$100.00</strong> to <strong>R$110.50</strong>. "
        "That's a change of <strong>R$10.50</strong>."
    )