from .client import BasicClient, ClientConfig, create
from .errors import CacheInvariantError, MissingRequestContext, StatusCode
from .model import Method, Request, Response

__all__ = [
    'BasicClient',
    'CacheInvariantError',
    'ClientConfig',
    'Method',
    'MissingRequestContext',
    'Request',
    'Response',
    'StatusCode',
    'create',
]
