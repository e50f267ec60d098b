"""
Derives cache keys for requests.

The outgoing and incoming interceptors never share a call stack. One sees the
prepared request, the other only the finished response. Both must arrive at
the same key, so both go through `key_from_request()`.
"""

from typing import Optional, Union
from urllib.parse import urljoin, urlsplit, urlunsplit

import requests

from .errors import MissingRequestContext
from .model import Method, RequestKey


def remove_dot_segments(path: str) -> str:
    """
    Resolve `.` and `..` segments as described in RFC 3986, section 5.2.4.
    """
    output = []
    segments = path.split('/')
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == '.':
            if last:
                output.append('')
        elif segment == '..':
            if output and output != ['']:
                output.pop()
            if last:
                output.append('')
        else:
            output.append(segment)
    result = '/'.join(output)
    if path.startswith('/') and not result.startswith('/'):
        result = '/' + result
    return result


def normalize_url(url: str, base: Optional[str] = None) -> str:
    """
    Produce the canonical absolute form of `url`.

    @param url
      An absolute URL, or a reference relative to `base`.
    @param base
      The URL of the target the request was sent to, if known.
    """
    if base:
        url = urljoin(base, url)
    parts = urlsplit(url)
    path = remove_dot_segments(parts.path) or '/'
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ''))


def key_from_request(method: Union[Method, str], url: str, base: Optional[str] = None) -> RequestKey:
    if not isinstance(method, Method):
        method = Method.of_string(method)
    return RequestKey(method=method, url=normalize_url(url, base))


def key_from_response(response: requests.Response) -> RequestKey:
    """
    Recover the key of the request that produced `response`.

    @throws MissingRequestContext
      If the transport did not attach the originating request.
    """
    request = response.request
    if request is None or request.method is None or request.url is None:
        raise MissingRequestContext('Response for {} carries no originating request'.format(response.url))
    return key_from_request(request.method, request.url, base=response.url)
