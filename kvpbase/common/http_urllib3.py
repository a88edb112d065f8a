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

import os
from urllib.parse import urlparse

import urllib3
from urllib3 import exceptions as urllibexc
from urllib3 import make_headers

from kvpbase.common.exceptions import (
    KvpbaseException,
    KvpbaseNetworkException,
    KvpbaseProtocolError,
    KvpbaseTimeout,
    reraise,
)

DEFAULT_NB_POOL_CONNECTIONS = 32
DEFAULT_POOL_MAXSIZE = 32

URLLIB3_REQUESTS_KWARGS = (
    "fields",
    "headers",
    "body",
    "redirect",
    "timeout",
    "pool_timeout",
    "release_conn",
    "chunked",
    "preload_content",
    "decode_content",
)
# Passed as is to the pool manager
URLLIB3_POOLMANAGER_KWARGS = (
    "socket_options",
    "source_address",
    "ca_certs",
)

PROXY_URL = os.getenv("KVPBASE_PROXY_URL")


class SafePoolManagerMixin:
    """
    `urllib3.PoolManager` wrapper that filters out keyword arguments
    not recognized by urllib3.
    """

    def request(self, *args, **kwargs):
        """
        Filter out arguments that are not recognized by urllib3,
        then call `urllib3.PoolManager.request`.
        """
        kwargs2 = {k: v for k, v in kwargs.items() if k in URLLIB3_REQUESTS_KWARGS}
        return super().request(*args, **kwargs2)


class SafePoolManager(SafePoolManagerMixin, urllib3.PoolManager):
    pass


class SafeProxyManager(SafePoolManagerMixin, urllib3.ProxyManager):
    pass


def get_pool_manager(
    pool_connections=DEFAULT_NB_POOL_CONNECTIONS,
    pool_maxsize=DEFAULT_POOL_MAXSIZE,
    block=False,
    ignore_tls_errors=False,
    **kwargs,
):
    """
    Get `urllib3.PoolManager` to manage pools of connections.
    Requests sent through it are never retried.

    :param pool_connections: number of connection pools (see "num_pools").
    :type pool_connections: `int`
    :param pool_maxsize: number of connections per connection pool
    :type pool_maxsize: `int`
    :param block: if True, there can be at most pool_maxsize connections
        open to a particular host.
    :type block: `bool`
    :param ignore_tls_errors: do not verify server certificates
    :type ignore_tls_errors: `bool`
    """
    kw = {k: v for k, v in kwargs.items() if k in URLLIB3_POOLMANAGER_KWARGS}
    kw["num_pools"] = int(pool_connections)
    kw["maxsize"] = int(pool_maxsize)
    kw["retries"] = urllib3.Retry(0, read=False)
    kw["block"] = block
    if ignore_tls_errors:
        kw["cert_reqs"] = "CERT_NONE"
    if PROXY_URL is None:
        return SafePoolManager(**kw)
    proxy = urlparse(PROXY_URL)
    if proxy.username is not None and proxy.password is not None:
        kw["proxy_headers"] = make_headers(
            proxy_basic_auth=f"{proxy.username}:{proxy.password}"
        )
    return SafeProxyManager(proxy_url=PROXY_URL, **kw)


def kvpbase_exception_from_httperror(exc, url=None):
    """
    Convert an HTTPError from urllib3 to a KvpbaseException,
    and re-raise it.
    """
    extra = None
    if url:
        extra = f"host={urlparse(url).netloc}"
    if isinstance(exc, urllibexc.MaxRetryError):
        if isinstance(exc.reason, urllibexc.NewConnectionError):
            reraise(KvpbaseNetworkException, exc.reason, extra)
        if isinstance(exc.reason, urllibexc.TimeoutError):
            reraise(KvpbaseTimeout, exc.reason, extra)
        reraise(KvpbaseNetworkException, exc, extra)
    elif isinstance(exc, (urllibexc.ProxyError, urllibexc.ClosedPoolError)):
        reraise(KvpbaseNetworkException, exc, extra)
    elif isinstance(exc, urllibexc.ProtocolError):
        reraise(KvpbaseProtocolError, exc, extra)
    elif isinstance(exc, urllibexc.TimeoutError):
        reraise(KvpbaseTimeout, exc, extra)
    elif isinstance(exc, urllibexc.SSLError):
        reraise(KvpbaseNetworkException, exc, extra)
    else:
        reraise(KvpbaseException, exc, extra)
