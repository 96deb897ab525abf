"""Validation of incoming request data."""

from __future__ import annotations

import re
from collections.abc import Sequence

from mtgreport.dtos import RequestInsertCard, RequestUpdateCard

_INTEGER = re.compile(r"[+-]?[0-9]+")
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1
_DEFAULT_PAGE = 1
_DEFAULT_LIMIT = 20
_MAX_LIMIT = 100


class ValidationError(ValueError):
    """Raised when request data is invalid."""


def _parse_int(text: str) -> int | None:
    if not _INTEGER.fullmatch(text):
        return None
    value = int(text)
    if not _INT_MIN <= value <= _INT_MAX:
        return None
    return value


class Validator:
    """Checks request fields and URL parts."""

    def card(self, card: RequestInsertCard) -> None:
        """Check that a new card carries every required field."""
        if not card.name:
            raise ValidationError("name is required")
        if not card.collector_number:
            raise ValidationError("collector_number is required")
        if not card.set_name:
            raise ValidationError("set_name is required")
        if card.foil is None:
            raise ValidationError("foil is required")
        if not isinstance(card.foil, bool):
            raise ValidationError("foil must be true or false")

    def card_id(self, parts: Sequence[str]) -> str:
        """Return the numeric id from a path split into three parts."""
        if len(parts) != 3:
            raise ValidationError("invalid url")
        card_id = parts[2]
        if not card_id:
            raise ValidationError("id is required")
        if _parse_int(card_id) is None:
            raise ValidationError("invalid id")
        return card_id

    def card_name(self, card: RequestUpdateCard) -> None:
        """Check that a rename request carries a name."""
        if not card.name:
            raise ValidationError("name is required")

    def filters(self, set_name: str, name: str, collector_number: str) -> dict[str, str]:
        """Collect the non-empty search parameters into a filter map."""
        candidates = {
            "set_name": set_name,
            "name": name,
            "collector_number": collector_number,
        }
        return {key: value for key, value in candidates.items() if value}

    def pagination(self, page: str, limit: str) -> tuple[int, int]:
        """Parse page and limit parameters, applying defaults when empty."""
        page_number = _DEFAULT_PAGE
        page_size = _DEFAULT_LIMIT

        if page:
            parsed = _parse_int(page)
            if parsed is None:
                raise ValidationError("invalid page parameter")
            if parsed < 1:
                raise ValidationError("page must be greater than 0")
            page_number = parsed

        if limit:
            parsed = _parse_int(limit)
            if parsed is None:
                raise ValidationError("invalid limit parameter")
            if not 1 <= parsed <= _MAX_LIMIT:
                raise ValidationError("limit must be between 1 and 100")
            page_size = parsed

        return page_number, page_size