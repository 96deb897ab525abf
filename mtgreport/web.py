"""Small HTTP client used by the price gateways."""

from __future__ import annotations

import re
import urllib.error
import urllib.request
from typing import IO, Any, Union

DEFAULT_TIMEOUT = 30.0

_METHOD = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

Body = Union[bytes, bytearray, str, IO[bytes], None]


class WebError(Exception):
    """Raised when a request cannot be built or sent."""


class HttpResponse:
    """A response whose body is still open for reading."""

    def __init__(self, raw: Any) -> None:
        self._raw = raw

    def body(self) -> IO[bytes]:
        """Return the readable body stream."""
        return self._raw

    def status_code(self) -> int:
        """Return the HTTP status code."""
        return self._raw.getcode()

    def close(self) -> None:
        self._raw.close()

    def __enter__(self) -> HttpResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _read_body(body: Body) -> bytes | None:
    if body is None:
        return None
    if isinstance(body, (bytes, bytearray)):
        return bytes(body)
    if isinstance(body, str):
        return body.encode("utf-8")
    return body.read()


class WebClient:
    """Builds and sends HTTP requests with a fixed timeout.

    Error statuses are returned as ordinary responses; only transport
    failures raise.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def new_request(self, method: str, url: str, body: Body = None) -> urllib.request.Request:
        """Build a request; raise WebError on a bad method or URL."""
        if not _METHOD.fullmatch(method):
            raise WebError(f"invalid method {method!r}")
        data = _read_body(body)
        try:
            return urllib.request.Request(url, data=data, method=method)
        except ValueError as err:
            raise WebError(str(err)) from err

    def do(self, request: Any) -> HttpResponse:
        """Send a request built by ``new_request`` and return its response."""
        if not isinstance(request, urllib.request.Request):
            raise WebError("invalid http request")
        try:
            raw = urllib.request.urlopen(request, timeout=self.timeout)
        except urllib.error.HTTPError as err:
            return HttpResponse(err)
        except (urllib.error.URLError, OSError) as err:
            raise WebError(str(err)) from err
        return HttpResponse(raw)