class StatusCode(Exception):
    """
    Raised by `fetch_ok()` when a response has a status code outside 200-204.
    """

    def __init__(self, code: int, reason: str, contents: str) -> None:
        super().__init__('Unexpected status code: {}\n{}'.format(code, contents))
        self.__code = code
        self.__reason = reason
        self.__contents = contents

    @property
    def code(self) -> int:
        return self.__code

    @property
    def reason(self) -> str:
        return self.__reason

    @property
    def contents(self) -> str:
        return self.__contents


class CacheInvariantError(Exception):
    """
    A `304 Not Modified` arrived for a request we never sent validators for.

    Validators are only attached when a cache entry with a body exists, so this
    means either a bug or a transport that paired responses with the wrong
    requests.
    """

    def __init__(self, key) -> None:
        super().__init__('Received 304 Not Modified but there is no cached body for {}'.format(key))
        self.__key = key

    @property
    def key(self):
        return self.__key


class MissingRequestContext(Exception):
    """
    A response reached the pipeline without the request that produced it.
    """
