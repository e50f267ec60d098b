from abc import ABC, abstractmethod
import gzip
from io import BytesIO
import logging
from typing import IO, List, Mapping, Optional

import requests


logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

# Statuses that never carry a body (RFC 7230, section 3.3.3).
_BODILESS_STATUSES = {204, 205, 304}


class Entity(ABC):
    """
    The body of a response, as a stream plus the metadata we need to decode it.
    """

    @abstractmethod
    def content(self) -> IO[bytes]:
        """
        @return
          A file-like object over the body bytes.
        """

    @property
    @abstractmethod
    def content_length(self) -> int:
        """
        The length of the body in bytes, or -1 if it is not known.
        """

    @property
    def content_encoding(self) -> Optional[str]:
        return None

    def consume(self) -> None:
        """
        Read whatever is left of the body and release the underlying resources.
        """


class StreamEntity(Entity):
    """
    An entity backed by the raw, undecoded stream of a transport response.
    """

    def __init__(self, stream: IO[bytes], headers: Mapping[str, str]) -> None:
        self.__stream = stream
        self.__encoding = headers.get('Content-Encoding')
        try:
            self.__length = int(headers.get('Content-Length', -1))
        except ValueError:
            self.__length = -1

    def content(self) -> IO[bytes]:
        return self.__stream

    @property
    def content_length(self) -> int:
        return self.__length

    @property
    def content_encoding(self) -> Optional[str]:
        return self.__encoding

    def consume(self) -> None:
        stream = self.__stream
        try:
            if not stream.closed:
                while stream.read(CHUNK_SIZE):
                    pass
        finally:
            stream.close()
            # urllib3 responses hand their connection back to the pool here.
            release_conn = getattr(stream, 'release_conn', None)
            if release_conn is not None:
                release_conn()


class TextBody(BytesIO):
    """
    An in-memory response body that can stand in for a urllib3 response.
    """

    version = None
    """
    The HTTP version of the response the body was put into, as urllib3 reports it.
    """


class TextEntity(Entity):
    """
    An in-memory entity holding decoded text, encoded as UTF-8.
    """

    def __init__(self, text: str) -> None:
        self.__text = text
        self.__data = text.encode('utf-8')

    @property
    def text(self) -> str:
        return self.__text

    def content(self) -> TextBody:
        return TextBody(self.__data)

    @property
    def content_length(self) -> int:
        return len(self.__data)


class GzipDecodingEntity(Entity):
    """
    Wraps a gzip-encoded entity and decompresses it as it is read.
    """

    def __init__(self, wrapped: Entity) -> None:
        self.__wrapped = wrapped

    def content(self) -> IO[bytes]:
        return gzip.GzipFile(fileobj=self.__wrapped.content(), mode='rb')

    @property
    def content_length(self) -> int:
        # Unknowable without decompressing the whole stream.
        return -1

    @property
    def content_encoding(self) -> Optional[str]:
        return self.__wrapped.content_encoding

    def consume(self) -> None:
        self.__wrapped.consume()


def content_codings(content_encoding: Optional[str]) -> List[str]:
    """
    Split a `Content-Encoding` header into its lower-cased coding names.

    Parameters attached to a coding (after a `;`) are dropped.
    """
    if not content_encoding:
        return []
    codings = (element.split(';', 1)[0].strip().lower() for element in content_encoding.split(','))
    return [coding for coding in codings if coding]


def decoding_entity(entity: Entity) -> Entity:
    """
    Wrap `entity` so that reading it yields the unencoded body.

    Only gzip is understood. For any other content coding a warning is logged
    and `entity` is returned as is, so its bytes will be read verbatim.
    """
    if entity.content_encoding is None:
        return entity

    logger.debug('Unpacking content with encoding {}'.format(entity.content_encoding))
    if 'gzip' in content_codings(entity.content_encoding):
        return GzipDecodingEntity(entity)

    logger.warning('Content encoding header found, but no gzip codec: {}'.format(entity.content_encoding))
    return entity


def entity_string(entity: Optional[Entity]) -> str:
    """
    Read an entity fully as UTF-8 text. A missing entity reads as `''`.

    Malformed byte sequences become replacement characters rather than errors.
    """
    if entity is None:
        return ''
    return entity.content().read().decode('utf-8', errors='replace')


def can_have_entity(response: requests.Response) -> bool:
    request = response.request
    if request is not None and (request.method or '').upper() == 'HEAD':
        return False
    status = response.status_code
    return status >= 200 and status not in _BODILESS_STATUSES


def entity_of(response: requests.Response) -> Optional[Entity]:
    """
    @return
      The body of `response` as an entity, or `None` if the response cannot
      carry one.
    """
    if response.raw is None or not can_have_entity(response):
        return None
    return StreamEntity(response.raw, response.headers)


def replace_entity(response: requests.Response, entity: TextEntity) -> None:
    """
    Swap the body of `response` for an in-memory text entity.

    The headers are brought in line with the new body so that `requests` reads
    it back without trying to decode it again. The protocol version of the
    replaced stream is kept. Releasing the replaced stream is up to the caller.
    """
    body = entity.content()
    body.version = getattr(response.raw, 'version', None)
    response.raw = body
    response.headers.pop('Content-Encoding', None)
    response.headers['Content-Length'] = str(entity.content_length)
