import logging
from typing import Optional

import requests
from requests.adapters import BaseAdapter, HTTPAdapter

from .interceptors import RequestMutator, ResponseMutator


logger = logging.getLogger(__name__)


class InterceptingAdapter(BaseAdapter):
    """
    Runs a request mutator and a response mutator around another adapter.

    Mount it on a `requests.Session`. The session still owns redirects, so each
    hop of a redirect chain is intercepted on its own.
    """

    def __init__(self,
                 request_mutator: RequestMutator,
                 response_mutator: ResponseMutator,
                 transport: Optional[BaseAdapter] = None) -> None:
        super().__init__()
        self.request_mutator = request_mutator
        self.response_mutator = response_mutator
        self.transport = transport if transport is not None else HTTPAdapter()

    def send(self, request: requests.PreparedRequest, stream=False, timeout=None, verify=True, cert=None,
             proxies=None) -> requests.Response:
        """
        Send a request, letting the mutators rewrite the request before it goes
        out and the response before anyone else sees it.
        """
        logger.debug('Intercepting {} {}'.format(request.method, request.url))
        self.request_mutator(request)
        response = self.transport.send(request, stream=stream, timeout=timeout, verify=verify, cert=cert,
                                       proxies=proxies)
        try:
            self.response_mutator(response)
        except Exception:
            response.close()
            raise
        return response

    def close(self):
        self.transport.close()
