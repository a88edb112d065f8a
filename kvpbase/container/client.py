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

from kvpbase.common import exceptions
from kvpbase.common.client import StorageClient
from kvpbase.common.constants import (
    CREATED_STATUSES,
    DELETED_STATUSES,
    QUERY_AUDITLOG,
    QUERY_CONFIG,
    QUERY_COUNT,
    QUERY_INDEX,
    QUERY_KEYS,
    QUERY_SEARCH,
)


class ContainerClient(StorageClient):
    """
    Intermediate level class to manage containers.
    Methods return the decoded JSON bodies, as sent by the service.
    """

    def container_list(self, **kwargs):
        """
        Get the names of the containers owned by the user.

        :rtype: `list` of `str`
        """
        _resp, body = self._direct_request("GET", self._make_uri(), **kwargs)
        return body or []

    def container_create(self, container, settings=None, **kwargs):
        """
        Create a container.

        :param settings: settings of the new container, as sent
            to the service (see `ContainerSettings.to_dict`)
        :type settings: `dict`
        """
        resp, body = self._direct_request(
            "POST", self._container_uri(container), json=settings or {}, **kwargs
        )
        if resp.status not in CREATED_STATUSES:
            raise exceptions.from_response(resp, body)

    def container_get_settings(self, container, **kwargs):
        _resp, body = self._direct_request(
            "GET", self._container_uri(container), params={QUERY_CONFIG: True}, **kwargs
        )
        return body

    def container_update_settings(self, container, settings, **kwargs):
        self._direct_request(
            "PUT",
            self._container_uri(container),
            params={QUERY_CONFIG: True},
            json=settings,
            **kwargs,
        )

    def container_get_properties(self, container, **kwargs):
        """Get the key-value pairs attached to a container."""
        _resp, body = self._direct_request(
            "GET", self._container_uri(container), params={QUERY_KEYS: True}, **kwargs
        )
        return body or {}

    def container_set_properties(self, container, properties, **kwargs):
        """Replace the key-value pairs attached to a container."""
        self._direct_request(
            "PUT",
            self._container_uri(container),
            params={QUERY_KEYS: True},
            json=properties,
            **kwargs,
        )

    def container_enumerate(
        self, container, start_index=None, max_results=None, filters=None, **kwargs
    ):
        """
        Enumerate the objects of a container.

        :param start_index: index of the first object to return
        :param max_results: maximum number of objects to return
        :param filters: criteria the objects must match
            (see `EnumerationFilter.to_dict`)
        :type filters: `dict`
        """
        params = {
            QUERY_SEARCH: True,
            QUERY_INDEX: start_index,
            QUERY_COUNT: max_results,
        }
        _resp, body = self._direct_request(
            "PUT",
            self._container_uri(container),
            params=params,
            json=filters,
            **kwargs,
        )
        return body or {}

    def container_audit_log(self, container, **kwargs):
        _resp, body = self._direct_request(
            "GET",
            self._container_uri(container),
            params={QUERY_AUDITLOG: True},
            **kwargs,
        )
        return body or []

    def container_delete(self, container, **kwargs):
        resp, body = self._direct_request(
            "DELETE", self._container_uri(container), **kwargs
        )
        if resp.status not in DELETED_STATUSES:
            raise exceptions.from_response(resp, body)

    def container_exists(self, container, **kwargs):
        """
        Tell if a container exists.

        :rtype: `bool`
        """
        try:
            self._direct_request("HEAD", self._container_uri(container), **kwargs)
        except exceptions.NotFound:
            return False
        return True
