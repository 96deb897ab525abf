import pytest

from mtgreport.dtos import RequestInsertCard, RequestUpdateCard
from mtgreport.validate import ValidationError, Validator


@pytest.fixture
def validator():
    return Validator()


@pytest.mark.parametrize(
    "card",
    [
        RequestInsertCard(name="Lightning Bolt", set_name="M21", collector_number="123", foil=True),
        RequestInsertCard(name="Lightning Bolt", set_name="M21", collector_number="123", foil=False),
    ],
)
def test_card_valid(validator, card):
    assert validator.card(card) is None


@pytest.mark.parametrize(
    "card, message",
    [
        (RequestInsertCard(name="", set_name="M21", collector_number="123", foil=True), "name is required"),
        (
            RequestInsertCard(name="Lightning Bolt", set_name="M21", collector_number="", foil=True),
            "collector_number is required",
        ),
        (
            RequestInsertCard(name="Lightning Bolt", set_name="", collector_number="123", foil=True),
            "set_name is required",
        ),
        (
            RequestInsertCard(name="Lightning Bolt", set_name="M21", collector_number="123", foil=None),
            "foil is required",
        ),
        (
            RequestInsertCard(name="Lightning Bolt", set_name="M21", collector_number="123", foil="yes"),
            "foil must be true or false",
        ),
    ],
)
def test_card_invalid(validator, card, message):
    with pytest.raises(ValidationError) as exc:
        validator.card(card)
    assert str(exc.value) == message


def test_card_id_valid(validator):
    assert validator.card_id(["api", "card", "123"]) == "123"


@pytest.mark.parametrize(
    "parts, message",
    [
        (["api", "card"], "invalid url"),
        (["api", "card", "123", "extra"], "invalid url"),
        (["api", "card", ""], "id is required"),
        (["api", "card", "abc"], "invalid id"),
        (["api", "card", "12@3"], "invalid id"),
    ],
)
def test_card_id_invalid(validator, parts, message):
    with pytest.raises(ValidationError) as exc:
        validator.card_id(parts)
    assert str(exc.value) == message


def test_card_name_valid(validator):
    assert validator.card_name(RequestUpdateCard(name="Lightning Bolt")) is None


def test_card_name_empty(validator):
    with pytest.raises(ValidationError) as exc:
        validator.card_name(RequestUpdateCard(name=""))
    assert str(exc.value) == "name is required"


@pytest.mark.parametrize(
    "set_name, name, collector_number, expected",
    [
        ("", "", "", {}),
        ("M21", "", "", {"set_name": "M21"}),
        ("", "Lightning Bolt", "", {"name": "Lightning Bolt"}),
        ("", "", "123", {"collector_number": "123"}),
        (
            "M21",
            "Lightning Bolt",
            "123",
            {"set_name": "M21", "name": "Lightning Bolt", "collector_number": "123"},
        ),
        ("M21", "", "123", {"set_name": "M21", "collector_number": "123"}),
    ],
)
def test_filters(validator, set_name, name, collector_number, expected):
    assert validator.filters(set_name, name, collector_number) == expected


def test_pagination_defaults(validator):
    assert validator.pagination("", "") == (1, 20)


def test_pagination_values(validator):
    assert validator.pagination("3", "100") == (3, 100)


@pytest.mark.parametrize(
    "page, limit, message",
    [
        ("abc", "", "invalid page parameter"),
        ("0", "", "page must be greater than 0"),
        ("", "x", "invalid limit parameter"),
        ("", "0", "limit must be between 1 and 100"),
        ("", "101", "limit must be between 1 and 100"),
    ],
)
def test_pagination_invalid(validator, page, limit, message):
    with pytest.raises(ValidationError) as exc:
        validator.pagination(page, limit)
    assert str(exc.value) == message