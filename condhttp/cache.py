from abc import ABC, abstractmethod
import logging
import threading
from typing import Dict, Optional

from .model import CacheEntry, RequestKey


logger = logging.getLogger(__name__)


class Cache(ABC):
    """
    An abstraction of the conditional GET cache.

    A cache has a narrow scope: remember the validators and body of the last
    successful response for a key, so that the next request for that key can be
    sent conditionally and a `304` can be answered from memory. There is no
    expiry. An entry only ever changes by being overwritten.
    """

    @abstractmethod
    def get(self, key: RequestKey) -> Optional[CacheEntry]:
        """
        Retrieve the entry for `key`.

        @param key
          The key to look up in the cache.
        @return
          The entry stored under `key`, or `None` if there is none.
        """

    @abstractmethod
    def put(self, key: RequestKey, entry: CacheEntry) -> None:
        """
        Store `entry` under `key`, replacing any previous entry as a whole.

        @param key
          The key of the request that produced the response.
        @param entry
          The entry to store.
        """

    def close(self):
        """
        Close any resources associated with the cache.
        """


class ResponseCache(Cache):
    """
    An in-memory cache shared by every request of one client.

    All access goes through a single lock. When two responses for the same key
    race, the last writer wins.
    """

    def __init__(self) -> None:
        self.__entries = {}  # type: Dict[RequestKey, CacheEntry]
        self.__lock = threading.Lock()

    def get(self, key: RequestKey) -> Optional[CacheEntry]:
        with self.__lock:
            entry = self.__entries.get(key)
        if entry is None:
            logger.debug('No cache entry for {}'.format(key))
        return entry

    def put(self, key: RequestKey, entry: CacheEntry) -> None:
        with self.__lock:
            self.__entries[key] = entry
        logger.debug('Stored cache entry for {}'.format(key))

    def __contains__(self, key: RequestKey) -> bool:
        with self.__lock:
            return key in self.__entries

    def __len__(self) -> int:
        with self.__lock:
            return len(self.__entries)

    def close(self):
        with self.__lock:
            self.__entries.clear()
