# Copyright (C) 2024-2025 OVH SAS
#
# This library is free software; you can redistribute it and/or
# modify it under the terms of the GNU Lesser General Public
# License as published by the Free Software Foundation; either
# version 3.0 of the License, or (at your option) any later version.
#
# This library is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# Lesser General Public License for more details.
#
# You should have received a copy of the GNU Lesser General Public
# License along with this library.

import json as jsonlib
from urllib.parse import quote

import urllib3

from kvpbase.common.constants import (
    CONNECTION_TIMEOUT,
    HTTP_CONTENT_TYPE_JSON,
    READ_TIMEOUT,
)
from kvpbase.common.exceptions import (
    DeadlineReached,
    KvpbaseException,
    KvpbaseTimeout,
    from_response,
)
from kvpbase.common.http_urllib3 import (
    URLLIB3_REQUESTS_KWARGS,
    get_pool_manager,
    kvpbase_exception_from_httperror,
)
from kvpbase.common.logger import get_logger
from kvpbase.common.utils import deadline_to_timeout, monotonic_time


def encode_params(params):
    """
    Build a query string from a dictionary.

    Parameters whose value is None are skipped, parameters whose
    value is True are sent as bare flags ("?config").
    """
    out_param = []
    for key, value in params.items():
        if value is None or value is False:
            continue
        if value is True:
            out_param.append(quote(str(key), safe=""))
        else:
            out_param.append(
                "%s=%s" % (quote(str(key), safe=""), quote(str(value), safe=""))
            )
    return "&".join(out_param)


class HttpApi(object):
    """
    Provides facilities to make HTTP requests
    towards the same endpoint, with a pool of connections.
    """

    def __init__(
        self,
        endpoint=None,
        pool_manager=None,
        connection="keep-alive",
        service_type="unknown",
        **kwargs,
    ):
        """
        :param pool_manager: an optional pool manager that will be reused
        :type pool_manager: `urllib3.PoolManager`
        :param endpoint: base of the URL that will requested
        :type endpoint: `str`
        :keyword connection: 'keep-alive' to keep connections open (default)
            or 'close' to explicitly close them.
        """
        self.endpoint = endpoint

        if not pool_manager:
            # get_pool_manager filters its args
            pool_manager = get_pool_manager(**kwargs)
        self.pool_manager = pool_manager

        self.connection = connection
        self.service_type = service_type

    def _logger(self):
        """Try to get a logger from a child class, or create one."""
        if not hasattr(self, "logger"):
            setattr(self, "logger", get_logger(None, self.__class__.__name__))
        return getattr(self, "logger")

    def _direct_request(
        self,
        method,
        url,
        headers=None,
        data=None,
        json=None,
        params=None,
        pool_manager=None,
        stream=False,
        **kwargs,
    ):
        """
        Make an HTTP request.

        :param method: HTTP method to use (e.g. "GET")
        :type method: `str`
        :param url: URL to request
        :type url: `str`
        :keyword deadline: deadline for the request, in monotonic time.
            Supersedes `read_timeout`.
        :type deadline: `float` seconds
        :keyword timeout: optional timeout for the request (in seconds).
            May be a `urllib3.Timeout(connect=connection_timeout,
            read=read_timeout)`.
            This method also accepts `connection_timeout` and `read_timeout`
            as separate arguments.
        :type timeout: `float` or `urllib3.Timeout`
        :keyword headers: optional headers to add to the request
        :type headers: `dict`
        :keyword stream: do not read the response body, let the caller
            read it from the returned response.
        :type stream: `bool`

        :raise kvpbase.common.exceptions.KvpbaseTimeout: in case of read,
            write or connection timeout
        :raise kvpbase.common.exceptions.KvpbaseNetworkException: in case
            of connection error
        :raise kvpbase.common.exceptions.DeadlineReached: if the deadline
            is reached before or during the request
        :raise kvpbase.common.exceptions.StatusMessageException: in case
            of HTTP status code >= 400
        """
        # Filter arguments that are not recognized by urllib3
        out_kwargs = {k: v for k, v in kwargs.items() if k in URLLIB3_REQUESTS_KWARGS}

        # Ensure headers are all strings
        if headers:
            out_headers = {k: str(v) for k, v in headers.items()}
        else:
            out_headers = {}

        # Look for a request deadline, deduce the timeout from it.
        deadline = kwargs.get("deadline")
        if deadline is not None:
            to = deadline_to_timeout(deadline, True)
            to = min(to, kwargs.get("read_timeout") or to)
            out_kwargs["timeout"] = urllib3.Timeout(
                connect=min(to, kwargs.get("connection_timeout") or CONNECTION_TIMEOUT),
                read=to,
            )

        # Ensure there is a timeout
        if "timeout" not in out_kwargs:
            out_kwargs["timeout"] = urllib3.Timeout(
                connect=kwargs.get("connection_timeout") or CONNECTION_TIMEOUT,
                read=kwargs.get("read_timeout") or READ_TIMEOUT,
            )

        # Convert json and add Content-Type
        if json is not None:
            out_headers["Content-Type"] = HTTP_CONTENT_TYPE_JSON
            data = jsonlib.dumps(json, separators=(",", ":"))

        # Explicitly keep or close the connection
        if "Connection" not in out_headers:
            out_headers["Connection"] = self.connection

        out_kwargs["headers"] = out_headers
        out_kwargs["body"] = data
        if stream:
            out_kwargs["preload_content"] = False

        # Add query string
        if params:
            encoded_args = encode_params(params)
            if encoded_args:
                url += "?" + encoded_args

        if not pool_manager:
            pool_manager = self.pool_manager

        self._logger().debug("%s %s", method, url)
        try:
            resp = pool_manager.request(method, url, **out_kwargs)
            if stream and resp.status < 400:
                body = None
            else:
                body = resp.data
            if body and resp.headers.get("Content-Type", "").startswith(
                HTTP_CONTENT_TYPE_JSON
            ):
                try:
                    body = jsonlib.loads(body)
                except (UnicodeDecodeError, ValueError) as exc:
                    self._logger().warning(
                        "Response body isn't decodable JSON: %s", body
                    )
                    if resp.status < 400:
                        raise KvpbaseException(
                            "Response body isn't decodable JSON"
                        ) from exc
        except urllib3.exceptions.HTTPError as exc:
            try:
                kvpbase_exception_from_httperror(exc, url=url)
            except KvpbaseTimeout as timeout_exc:
                if deadline is not None and monotonic_time() >= deadline:
                    raise DeadlineReached() from timeout_exc
                raise

        self._logger().debug("%s %s -> %s", method, url, resp.status)
        if resp.status >= 400:
            raise from_response(resp, body)
        return resp, body

    def _request(self, method, url, endpoint=None, **kwargs):
        """
        Make a request to an HTTP endpoint.

        :param method: HTTP method to use (e.g. "GET")
        :type method: `str`
        :param url: URL to request, relative to the endpoint
        :type url: `str`
        :param endpoint: endpoint to use in place of `self.endpoint`
        :type endpoint: `str`

        See `_direct_request` for the other keyword arguments
        and the exceptions.
        """
        if not endpoint:
            if not self.endpoint:
                raise ValueError(
                    "Endpoint not set in function call nor in class constructor"
                )
            endpoint = self.endpoint
        url = "/".join([endpoint.rstrip("/"), url.lstrip("/")])
        return self._direct_request(method, url, **kwargs)
