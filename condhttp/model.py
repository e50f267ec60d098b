"""
Defines the types shared by the interception pipeline and the client.

These types are as simple as possible in order to most conveniently consume and
produce instances of them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence, Tuple

import requests

from .entity import Entity


class Method(Enum):
    """
    The closed set of request types the client knows how to send.
    """

    DELETE = 'DELETE'
    GET = 'GET'
    HEAD = 'HEAD'
    OPTIONS = 'OPTIONS'
    POST = 'POST'
    PUT = 'PUT'
    TRACE = 'TRACE'

    @classmethod
    def of_string(cls, value: str) -> 'Method':
        try:
            return cls(value.upper())
        except ValueError:
            raise ValueError('{} is not a valid request type'.format(value)) from None

    @property
    def carries_body(self) -> bool:
        """
        Whether parameters are sent form-encoded in the body rather than in
        the query string.
        """
        return self in (Method.POST, Method.PUT)


@dataclass(frozen=True)
class RequestKey:
    """
    The identity of a request for the purposes of the conditional cache.

    Build these with `condhttp.keys` rather than directly, so that the URL is
    normalised the same way on both sides of an exchange.
    """

    method: Method
    """
    The HTTP method of the request.
    """

    url: str
    """
    The normalised, absolute URL of the request, including its query string.
    """


@dataclass(frozen=True)
class CacheEntry:
    """
    What we remember about the last successful response for a key.

    An entry is always replaced as a whole. An entry with no validators but a
    stored body is valid: we have a body, but no way to revalidate it.
    """

    last_modified: Optional[str] = None
    """
    The raw value of the response's `Last-Modified` header.
    """

    etag: Optional[str] = None
    """
    The raw value of the response's `ETag` header.
    """

    stored_body: Optional[str] = None
    """
    The decoded response body, or `None` if the response had no entity.
    """


@dataclass(frozen=True)
class Request:
    """
    A request as callers describe it.
    """

    method: Method
    url: str
    params: Sequence[Tuple[str, str]] = ()
    """
    Ordered name/value pairs. Sent in the query string or in a form-encoded
    body depending on `method`.
    """

    def to_requests(self) -> requests.Request:
        """
        Build the `requests` representation of this request.
        """
        params = list(self.params)
        if self.method.carries_body:
            return requests.Request(self.method.value, self.url, data=params or None)
        return requests.Request(self.method.value, self.url, params=params)


@dataclass
class Response:
    """
    What a fetch handler receives.
    """

    status_code: int
    """
    The effective status code. A revalidated `304` shows up here as `200`.
    """

    response: requests.Response = field(compare=False)
    """
    The underlying `requests` response.
    """

    entity: Optional[Entity] = field(default=None, compare=False)
    """
    The response body, or `None` if the response cannot carry one.
    """
