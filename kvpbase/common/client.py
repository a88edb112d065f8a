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

from kvpbase.api.base import HttpApi
from kvpbase.common.configuration import validate_client_conf
from kvpbase.common.credentials import credentials_from_conf
from kvpbase.common.logger import get_logger
from kvpbase.common.utils import (
    check_name,
    ensure_trailing_slash,
    quote_key,
    quote_path,
)


class StorageClient(HttpApi):
    """
    Client directed towards the storage service, on behalf of one user,
    with logging facility.

    Every request carries the authentication headers computed
    from the credentials at construction time.
    """

    def __init__(self, conf, endpoint=None, credentials=None, logger=None, **kwargs):
        """
        :param conf: dictionary with at least `user_guid`, and `endpoint`
            if not passed as a parameter. Credentials are read from
            `api_key`, or `email` and `password`, if not passed
            as a parameter.
        :param credentials: credentials to authenticate requests with
        :type credentials: `kvpbase.common.credentials.Credentials`

        :raise kvpbase.common.exceptions.ConfigurationException:
            if the configuration is incomplete
        """
        conf = dict(conf)
        if endpoint:
            conf["endpoint"] = endpoint
        validate_client_conf(conf)
        self.conf = conf
        self.user_guid = conf["user_guid"]
        self.logger = logger or get_logger(conf)
        self.credentials = credentials or credentials_from_conf(conf)
        self._auth_headers = self.credentials.headers()

        super().__init__(
            endpoint=ensure_trailing_slash(conf["endpoint"]),
            service_type="kvpbase",
            **kwargs,
        )

    def _direct_request(self, method, url, headers=None, **kwargs):
        out_headers = dict(self._auth_headers)
        if headers:
            out_headers.update(headers)
        return super()._direct_request(method, url, headers=out_headers, **kwargs)

    def _make_uri(self, *segments):
        """
        Build the URL of a resource owned by the user:
        {endpoint}{user_guid}[/{segment}...]
        """
        return self.endpoint + quote_path(self.user_guid, *segments)

    def _container_uri(self, container):
        check_name(container, "container")
        return self._make_uri(container)

    def _object_uri(self, container, obj):
        check_name(container, "container")
        check_name(obj, "object key")
        return self._make_uri(container) + "/" + quote_key(obj)
