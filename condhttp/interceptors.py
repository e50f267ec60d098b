"""
The two halves of the conditional GET and gzip pipeline.

`on_request_send()` runs just before a request goes out on the wire and
`on_response_receive()` runs as soon as its response comes back. Both take the
cache explicitly; bind it with `functools.partial` to get a `RequestMutator` or
`ResponseMutator` for `InterceptingAdapter`.
"""

from http import HTTPStatus
import logging
from typing import Callable, Optional

import requests

from .cache import Cache
from .entity import StreamEntity, TextEntity, decoding_entity, entity_of, entity_string, replace_entity
from .errors import CacheInvariantError
from .keys import key_from_request, key_from_response
from .model import CacheEntry


logger = logging.getLogger(__name__)

RequestMutator = Callable[[requests.PreparedRequest], None]
ResponseMutator = Callable[[requests.Response], None]

VALIDATOR_HEADERS = ('If-None-Match', 'If-Modified-Since')


def is_ok(status_code: int) -> bool:
    return 200 <= status_code <= 204


def first_header(response: requests.Response, name: str) -> Optional[str]:
    """
    The first value of header `name`.

    `requests` folds repeated headers into one comma-separated value, so ask the
    urllib3 response for the individual values where there is one.
    """
    raw_headers = getattr(response.raw, 'headers', None)
    if raw_headers is not None and hasattr(raw_headers, 'getlist'):
        values = raw_headers.getlist(name)
        if values:
            return values[0]
    return response.headers.get(name)


def on_request_send(request: requests.PreparedRequest, cache: Cache) -> None:
    """
    Ask for gzip and attach any validators we hold for the request.
    """
    logger.debug('Processing request')
    if 'Accept-Encoding' not in request.headers:
        request.headers['Accept-Encoding'] = 'gzip'

    key = key_from_request(request.method, request.url)
    logger.debug('Request key is {}'.format(key))

    # A redirect hop is a copy of the previous request, validators included.
    for header in VALIDATOR_HEADERS:
        request.headers.pop(header, None)

    entry = cache.get(key)
    if entry is not None and entry.stored_body is not None:
        logger.debug('Key found in cache, sending a conditional request')
        if entry.etag is not None:
            request.headers['If-None-Match'] = entry.etag
        if entry.last_modified is not None:
            request.headers['If-Modified-Since'] = entry.last_modified

    logger.debug('Done processing request')


def on_response_receive(response: requests.Response, cache: Cache) -> None:
    """
    Decode and remember successful responses, and answer `304`s from the cache.

    @throws CacheInvariantError
      If a `304` arrives and the cache has no body for its request.
    """
    logger.debug('Processing response')
    code = response.status_code
    logger.debug('Got response {} {}'.format(code, response.reason))
    key = key_from_response(response)
    logger.debug('Request key from response is {}'.format(key))

    if is_ok(code):
        # Read before the body, and with it the raw headers, is replaced.
        last_modified = first_header(response, 'Last-Modified')
        etag = first_header(response, 'ETag')
        stored_body = None
        entity = entity_of(response)
        if entity is not None:
            decoding = decoding_entity(entity)
            try:
                stored_body = entity_string(decoding)
            finally:
                decoding.consume()
            replace_entity(response, TextEntity(stored_body))

        cache.put(key, CacheEntry(
            last_modified=last_modified,
            etag=etag,
            stored_body=stored_body,
        ))
    elif code == HTTPStatus.NOT_MODIFIED:
        logger.debug('304 Not Modified, so we pass on the cached entity')
        entry = cache.get(key)
        if entry is None or entry.stored_body is None:
            raise CacheInvariantError(key)
        not_modified = StreamEntity(response.raw, response.headers) if response.raw is not None else None
        replace_entity(response, TextEntity(entry.stored_body))
        if not_modified is not None:
            not_modified.consume()
        response.status_code = HTTPStatus.OK.value
        response.reason = HTTPStatus.OK.phrase

    logger.debug('Done processing response')
