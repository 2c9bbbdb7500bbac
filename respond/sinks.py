"""Response sink and request metadata adapters.

The responder only needs three things from an HTTP reply (set a header,
write the status, write body bytes) and one thing from the request (read a
header). These protocols describe that surface. :class:`WerkzeugSink` and
:func:`as_request_meta` adapt Werkzeug/Flask objects to it.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Protocol, Type, runtime_checkable

from werkzeug.datastructures import Headers
from werkzeug.wrappers import Response

from respond.constants import HEADER_CONTENT_TYPE

logger = logging.getLogger(__name__)


@runtime_checkable
class ResponseSink(Protocol):
    """Write target for a single HTTP reply."""

    def set_header(self, name: str, value: str) -> None:
        ...

    def write_status(self, code: int) -> None:
        ...

    def write(self, data: bytes) -> int:
        ...


@runtime_checkable
class RequestMeta(Protocol):
    """Read access to request headers."""

    def get_header(self, name: str) -> str:
        ...


class WerkzeugSink:
    """Collect a reply into a :class:`werkzeug.wrappers.Response`.

    Headers must be set before the status is written. Once the status has
    been committed, later header changes and repeated status writes are
    ignored with a warning, as an HTTP server would do. Writing body bytes
    before any status commits ``200``.
    """

    def __init__(
        self,
        response: Optional[Response] = None,
        response_class: Type[Response] = Response,
    ):
        if response is None:
            response = response_class()
            response.headers.pop(HEADER_CONTENT_TYPE, None)
        self.response = response
        self.committed = False
        self.bytes_written = 0
        self._body = bytearray()

    def set_header(self, name: str, value: str) -> None:
        if self.committed:
            logger.warning("Ignoring header %s set after status was written", name)
            return
        self.response.headers[name] = value

    def write_status(self, code: int) -> None:
        if self.committed:
            logger.warning(
                "Superfluous status write %s (status already %s)",
                code,
                self.response.status_code,
            )
            return
        self.response.status_code = code
        self.committed = True

    def write(self, data: bytes) -> int:
        if not self.committed:
            self.write_status(200)
        self._body.extend(data)
        self.response.set_data(bytes(self._body))
        self.bytes_written += len(data)
        return len(data)

    @property
    def body(self) -> bytes:
        return bytes(self._body)


class HeaderRequestMeta:
    """:class:`RequestMeta` over a case-insensitive header collection."""

    def __init__(self, headers: Any):
        self._headers = headers

    def get_header(self, name: str) -> str:
        return self._headers.get(name) or ''


def as_request_meta(request: Any) -> RequestMeta:
    """Coerce *request* into a :class:`RequestMeta`.

    Accepts an object already providing ``get_header``, a Werkzeug/Flask
    request (or anything exposing ``headers``), or a plain mapping of header
    names to values.
    """
    if isinstance(request, RequestMeta):
        return request

    headers = getattr(request, 'headers', None)
    if headers is not None:
        return HeaderRequestMeta(headers)

    if isinstance(request, Mapping):
        return HeaderRequestMeta(Headers(list(request.items())))

    raise TypeError(f"Cannot read request headers from {type(request).__name__}")


__all__ = [
    "HeaderRequestMeta",
    "RequestMeta",
    "ResponseSink",
    "WerkzeugSink",
    "as_request_meta",
]
