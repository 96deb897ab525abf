"""Thin layer over a DB-API 2.0 connection with explicit transactions."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any


class DatabaseError(Exception):
    """Raised for misuse of the client or an empty single-row query."""


class Isolation(Enum):
    """Transaction isolation levels."""

    DEFAULT = "Default"
    READ_UNCOMMITTED = "Read Uncommitted"
    READ_COMMITTED = "Read Committed"
    WRITE_COMMITTED = "Write Committed"
    REPEATABLE_READ = "Repeatable Read"
    SNAPSHOT = "Snapshot"
    SERIALIZABLE = "Serializable"
    LINEARIZABLE = "Linearizable"

    def __str__(self) -> str:
        return self.value

    @property
    def sql(self) -> str:
        return self.value.upper()


@dataclass(frozen=True)
class TxOptions:
    """Options for starting a transaction."""

    isolation: Isolation = Isolation.DEFAULT
    read_only: bool = False


@dataclass(frozen=True)
class Result:
    """Outcome of a statement that returns no rows."""

    last_insert_id: int | None
    rows_affected: int


def _run(cursor: Any, query: str, args: Sequence[Any]) -> None:
    if args:
        cursor.execute(query, tuple(args))
    else:
        cursor.execute(query)


def _execute(connection: Any, query: str, args: Sequence[Any]) -> Result:
    cursor = connection.cursor()
    try:
        _run(cursor, query, args)
        return Result(cursor.lastrowid, cursor.rowcount)
    finally:
        cursor.close()


def _drain(cursor: Any) -> Iterator[Sequence[Any]]:
    try:
        yield from iter(cursor.fetchone, None)
    finally:
        cursor.close()


def _query(connection: Any, query: str, args: Sequence[Any]) -> Iterator[Sequence[Any]]:
    cursor = connection.cursor()
    try:
        _run(cursor, query, args)
    except BaseException:
        cursor.close()
        raise
    return _drain(cursor)


def _query_row(connection: Any, query: str, args: Sequence[Any]) -> Sequence[Any]:
    cursor = connection.cursor()
    try:
        _run(cursor, query, args)
        row = cursor.fetchone()
    finally:
        cursor.close()
    if row is None:
        raise DatabaseError("no rows in result set")
    return row


class Transaction:
    """An open transaction; usable as a context manager that commits on success."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection
        self._done = False

    def _check_open(self) -> None:
        if self._done:
            raise DatabaseError("transaction has already been committed or rolled back")

    def commit(self) -> None:
        self._check_open()
        self._done = True
        self._connection.commit()

    def rollback(self) -> None:
        self._check_open()
        self._done = True
        self._connection.rollback()

    def execute(self, query: str, *args: Any) -> Result:
        self._check_open()
        return _execute(self._connection, query, args)

    def query(self, query: str, *args: Any) -> Iterator[Sequence[Any]]:
        """Run a query and iterate over its rows."""
        self._check_open()
        return _query(self._connection, query, args)

    def query_row(self, query: str, *args: Any) -> Sequence[Any]:
        """Return the first row; raise DatabaseError when there is none."""
        self._check_open()
        return _query_row(self._connection, query, args)

    def __enter__(self) -> Transaction:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        if self._done:
            return
        if exc_type is None:
            self.commit()
        else:
            self.rollback()


class Client:
    """Runs statements on a connection; plain statements commit at once."""

    def __init__(self, connection: Any) -> None:
        self._connection = connection

    def execute(self, query: str, *args: Any) -> Result:
        result = _execute(self._connection, query, args)
        self._connection.commit()
        return result

    def query(self, query: str, *args: Any) -> Iterator[Sequence[Any]]:
        """Run a query and iterate over its rows."""
        return _query(self._connection, query, args)

    def query_row(self, query: str, *args: Any) -> Sequence[Any]:
        """Return the first row; raise DatabaseError when there is none."""
        return _query_row(self._connection, query, args)

    def begin(self, options: TxOptions | None = None) -> Transaction:
        """Start a transaction, applying isolation and read-only options."""
        if options is not None:
            if not isinstance(options.isolation, Isolation):
                raise DatabaseError("invalid isolation level")
            cursor = self._connection.cursor()
            try:
                if options.isolation is not Isolation.DEFAULT:
                    cursor.execute(f"SET TRANSACTION ISOLATION LEVEL {options.isolation.sql}")
                start = "START TRANSACTION READ ONLY" if options.read_only else "START TRANSACTION"
                cursor.execute(start)
            finally:
                cursor.close()
        return Transaction(self._connection)