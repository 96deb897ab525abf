# mtgreport

Core logic for keeping track of a Magic: The Gathering card collection and
what it is worth. It has no dependencies outside the standard library.

## What is in the package

- **`mtgreport.domain`**: the dataclasses `Card`, `CardDetails`,
  `UpdateCard`, `CardsPrice` and `CollectionStats`, and the errors
  `DomainError`, `CardAlreadyExistsError`, `CardNotFoundError`,
  `CardsPriceNotFoundError` and `InvalidSetNameError`.
  `Card.validate_card_fields(foil)` checks that name and collector number are
  set and turns the text `"true"` or `"false"` into the `foil` flag, raising
  `ValueError` otherwise.
- **`mtgreport.dtos`**: `RequestInsertCard.from_dict(data)` and
  `RequestUpdateCard.from_dict(card_id, data)` build requests from decoded
  JSON and raise `ValueError` on mistyped fields. The responses
  (`ResponseInsertCard`, `ResponseCard`, `ResponseConciliateJob`,
  `ResponsePaginatedCards`, `ResponseCollectionStats`) each have `to_dict()`;
  times are rendered as RFC 3339.
- **`mtgreport.validate`**: `Validator` with `card`, `card_id`, `card_name`,
  `filters` and `pagination`; invalid input raises `ValidationError`
  (a `ValueError`).
- **`mtgreport.ports`**: abstract base classes for what the services need:
  `CardsRepository`, `ConciliateRepository`, `ReportRepository`,
  `CardGateway`, `ExchangeGateway` and `Email`, plus the service interfaces
  `CardServicePort`, `PriceService` and `ReportServicePort`.
- **`mtgreport.card_service`**: `CardService(repository, commit_size, log)`.
  It inserts, lists, renames and deletes cards, returns price history and
  paged results (with `total_pages` rounded up), and reports collection
  statistics. Repository failures are raised as `CardServiceError` with a
  message such as `service failed to get card: ...`.
- **`mtgreport.conciliate_service`**:
  `ConciliateService(repository, card_gateway, exchange_gateway, commit_size, log)`.
  `conciliate()` reads cards in batches of `commit_size`, asks the card
  gateway for each price, converts it with the US dollar rate (4.80 if the
  rate cannot be fetched), paces price requests to at most
  `max_requests_per_second` (10 by default), stores the new price details and
  returns how many were stored. A `TimeoutError` ends the run; other
  failures are logged and skipped.
- **`mtgreport.report_service`**: `ReportService(repository, email, log)`.
  `process_and_send()` records the total value, turns the cards the
  repository returns for the report into HTML table rows
  (`format_cards_table`), describes the change in total value
  (`format_cards_price`) and passes both to `Email.send_email`. A failing
  step raises `ReportServiceError`.
- **Supporting pieces**:
  - `mtgreport.timer.Timer`: `now()` gives the current UTC time as
    `YYYY-MM-DD HH:MM:SS`.
  - `mtgreport.logger.Logger(level="debug", stream=None)`: `key=value` log
    lines on standard error by default, with `info`, `warn`, `error`,
    `with_fields(fields)` and `with_error(err)`. `LogEntry.fatal` logs and
    exits with status 1.
  - `mtgreport.web.WebClient`: `new_request(method, url, body)` and
    `do(request)` over `urllib`, with a 30 second timeout. Error statuses come
    back as `HttpResponse` objects; transport failures raise `WebError`.
  - `mtgreport.database.Client`: wraps a DB-API 2.0 connection with
    `execute`, `query`, `query_row` and `begin(options)`, which returns a
    `Transaction` usable as a context manager (commit on success, rollback on
    error). `TxOptions` sets an `Isolation` level and read-only mode.

## Validating input

```python
from mtgreport.validate import Validator, ValidationError

validator = Validator()

validator.filters("M21", "", "123")
# {'set_name': 'M21', 'collector_number': '123'}

validator.card_id(["api", "card", "42"])
# '42'

validator.pagination("", "")
# (1, 20)

try:
    validator.pagination("1", "500")
except ValidationError as err:
    print(err)  # limit must be between 1 and 100
```

Page numbers start at 1; the page size defaults to 20 and may be anything
from 1 to 100.

## Bulk import

`CardService.insert_cards(file)` takes any iterable of text or byte lines,
such as an open file, with one card per line:

```text
name: Lightning Bolt, set_name: Magic Core Set, collector_number: 123, foil: true
```

Blank lines are skipped. Lines that do not match, or whose `foil` is not
`true` or `false`, are logged and counted as not processed. Cards are handed
to `CardsRepository.insert_cards` in batches of `commit_size`; a failed batch
counts all its cards as not processed. The method returns
`(processed, not_processed)`.

## What the package does not do

The package holds the domain logic only. It ships no concrete repository
(no database schema or SQL queries), no card price or exchange-rate gateway,
no e-mail sender, no HTTP server or request handlers, and no command-line
entry point. To use the services, implement the abstract classes in
`mtgreport.ports` and pass your implementations in.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.