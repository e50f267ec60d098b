"""
A small HTTP client that does conditional GET and gzip for you.

Sample usage::

    from condhttp.client import create
    from condhttp.model import Method, Request

    client = create()
    # The second call is sent with If-None-Match / If-Modified-Since and, if
    # the server answers 304, is served from the cache.
    page = client.get('http://www.example.com/')
    page = client.get('http://www.example.com/')

    feed = client.get_xml(Request(Method.GET, 'http://www.example.com/rss.xml', (('limit', '5'),)))
"""

from dataclasses import dataclass
from functools import partial
from io import BytesIO, TextIOWrapper
import logging
from typing import Callable, Optional, Sequence, TextIO, Tuple, TypeVar, Union
from xml.etree import ElementTree

import requests
from requests.adapters import BaseAdapter

from .adapter import InterceptingAdapter
from .cache import Cache, ResponseCache
from .entity import Entity, decoding_entity, entity_of, entity_string
from .errors import StatusCode
from .interceptors import is_ok, on_request_send, on_response_receive
from .model import Method, Request, Response


logger = logging.getLogger(__name__)

T = TypeVar('T')
Params = Sequence[Tuple[str, str]]


@dataclass
class ClientConfig:
    user_agent: Optional[str] = None
    """
    The `User-Agent` header to send. Defaults to the client's class name.
    """

    connection_timeout: float = 20.0
    """
    Seconds to wait for a connection to be established.
    """

    socket_timeout: float = 3.0
    """
    Seconds to wait for data once connected.
    """


class BasicClient:
    """
    Executes requests through a session whose adapters do conditional GET and
    transparent gzip decoding.

    The cache lives as long as the client. Requests may be issued from several
    threads at once.
    """

    def __init__(self,
                 config: Optional[ClientConfig] = None,
                 cache: Optional[Cache] = None,
                 transport: Optional[BaseAdapter] = None) -> None:
        """
        @param config
          Timeouts and user agent.
        @param cache
          The cache to use. A fresh `ResponseCache` if not given.
        @param transport
          The adapter that performs the actual I/O. An `HTTPAdapter` if not
          given.
        """
        self.config = config if config is not None else ClientConfig()
        self.cache = cache if cache is not None else ResponseCache()

        logger.debug('Configuring http client')
        self.session = requests.Session()
        # Let the request interceptor negotiate the encoding.
        self.session.headers.pop('Accept-Encoding', None)
        self.session.headers['User-Agent'] = self.config.user_agent or '{}.{}'.format(
            type(self).__module__, type(self).__qualname__)

        adapter = InterceptingAdapter(request_mutator=partial(on_request_send, cache=self.cache),
                                      response_mutator=partial(on_response_receive, cache=self.cache),
                                      transport=transport)
        self.session.mount('http://', adapter)
        self.session.mount('https://', adapter)
        logger.debug('Done configuring http client')

    @property
    def timeout(self) -> Tuple[float, float]:
        return self.config.connection_timeout, self.config.socket_timeout

    def fetch(self, request: Request, handler: Callable[[Response], T]) -> T:
        """
        Execute a request and run `handler` on the result, whatever its status.

        The response body is released once `handler` returns or raises.
        """
        logger.debug('Beginning fetch of {} {}'.format(request.method.value, request.url))
        prepared = self.session.prepare_request(request.to_requests())
        # Proxies and CA bundles from the environment, as `Session.request()` would.
        settings = self.session.merge_environment_settings(prepared.url, {}, True, None, None)
        result = self.session.send(prepared, timeout=self.timeout, **settings)
        entity = entity_of(result)
        try:
            logger.debug('Done fetch, starting handler')
            value = handler(Response(result.status_code, result, entity))
            logger.debug('Done handler')
            return value
        finally:
            self._release(result, entity)

    def fetch_ok(self, request: Request, handler: Callable[[Response], T]) -> T:
        """
        Like `fetch()`, but only runs `handler` for a status code in 200-204.

        @throws StatusCode
          For any other status code.
        """
        def check(response: Response) -> T:
            if not is_ok(response.status_code):
                contents = entity_string(decoding_entity(response.entity)) if response.entity is not None else ''
                raise StatusCode(response.status_code, response.response.reason, contents)
            return handler(response)

        return self.fetch(request, check)

    def fetch_ok_for(self, method: Method, path: str, params: Params, handler: Callable[[Response], T]) -> T:
        return self.fetch_ok(Request(method, path, tuple(params)), handler)

    def get_string(self, request: Request) -> str:
        return self.fetch_ok(request, lambda response: entity_string(response.entity))

    def get(self, path: str, params: Params = ()) -> str:
        return self.get_string(Request(Method.GET, path, tuple(params)))

    def post(self, path: str, params: Params) -> str:
        return self.get_string(Request(Method.POST, path, tuple(params)))

    def get_content(self, request: Request) -> BytesIO:
        """
        Fetch the body of a successful response into memory.

        @throws ValueError
          If the response has no body.
        """
        def read(response: Response) -> BytesIO:
            if response.entity is None:
                raise ValueError('Attempt to get empty content')
            return BytesIO(response.entity.content().read())

        return self.fetch_ok(request, read)

    def get_source(self, request: Request) -> TextIO:
        return TextIOWrapper(self.get_content(request), encoding='utf-8')

    def get_xml(self, request: Union[Request, str], params: Params = ()) -> ElementTree.Element:
        if isinstance(request, str):
            request = Request(Method.GET, request, tuple(params))
        return ElementTree.parse(self.get_content(request)).getroot()

    def close(self):
        """
        Shut the session down, freeing all connection resources.
        """
        self.session.close()
        self.cache.close()

    shutdown = close

    def _release(self, response: requests.Response, entity: Optional[Entity]) -> None:
        try:
            if entity is not None:
                entity.consume()
            else:
                response.close()
        except Exception:
            logger.exception('Unexpected error occurred while releasing the response for {}'.format(response.url))


def create(config: Optional[ClientConfig] = None) -> BasicClient:
    return BasicClient(config)
