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
    HTTP_CONTENT_TYPE_OCTET_STREAM,
    QUERY_COUNT,
    QUERY_INDEX,
    QUERY_KEYS,
    QUERY_METADATA,
    QUERY_RENAME,
    QUERY_TAGS,
)
from kvpbase.common.decorators import ensure_headers
from kvpbase.common.utils import tags_to_csv


def _check_range(start_index=None, count=None):
    if start_index is not None and start_index < 0:
        raise ValueError(f"start index must not be negative, got {start_index}")
    if count is not None and count <= 0:
        raise ValueError(f"count must be positive, got {count}")


class ContentClient(StorageClient):
    """
    Intermediate level class to manage objects.
    """

    @ensure_headers
    def content_create(
        self, container, obj, data, content_type=None, content_length=None, **kwargs
    ):
        """
        Create an object.

        :param data: content of the object
        :type data: `bytes` or file-like object
        :param content_length: size of `data`, required to send
            a file-like object in one piece (not chunked)
        """
        headers = kwargs.pop("headers")
        headers["Content-Type"] = content_type or HTTP_CONTENT_TYPE_OCTET_STREAM
        if content_length is not None:
            headers["Content-Length"] = content_length
        resp, body = self._direct_request(
            "POST",
            self._object_uri(container, obj),
            data=data,
            headers=headers,
            **kwargs,
        )
        if resp.status not in CREATED_STATUSES:
            raise exceptions.from_response(resp, body)

    def content_write_range(self, container, obj, start_index, data, **kwargs):
        """
        Write `data` in an existing object, starting at `start_index`.
        The object grows if the range goes beyond its end.
        """
        if start_index is None:
            raise ValueError("start index is required")
        _check_range(start_index)
        resp, body = self._direct_request(
            "PUT",
            self._object_uri(container, obj),
            params={QUERY_INDEX: start_index},
            data=data,
            **kwargs,
        )
        if resp.status not in CREATED_STATUSES:
            raise exceptions.from_response(resp, body)

    def content_set_tags(self, container, obj, tags, **kwargs):
        self._direct_request(
            "PUT",
            self._object_uri(container, obj),
            params={QUERY_TAGS: tags_to_csv(tags)},
            **kwargs,
        )

    def content_get_properties(self, container, obj, **kwargs):
        """Get the key-value pairs attached to an object."""
        _resp, body = self._direct_request(
            "GET",
            self._object_uri(container, obj),
            params={QUERY_KEYS: True},
            **kwargs,
        )
        return body or {}

    def content_set_properties(self, container, obj, properties, **kwargs):
        """Replace the key-value pairs attached to an object."""
        self._direct_request(
            "PUT",
            self._object_uri(container, obj),
            params={QUERY_KEYS: True},
            json=properties,
            **kwargs,
        )

    def content_show(self, container, obj, **kwargs):
        """Get the metadata of an object."""
        _resp, body = self._direct_request(
            "GET",
            self._object_uri(container, obj),
            params={QUERY_METADATA: True},
            **kwargs,
        )
        return body

    def content_fetch(self, container, obj, start_index=None, count=None, **kwargs):
        """
        Read an object, or a range of it.

        :returns: the HTTP response, with its body not read yet
        """
        _check_range(start_index, count)
        params = None
        if count is not None:
            params = {QUERY_INDEX: start_index or 0, QUERY_COUNT: count}
        elif start_index:
            raise ValueError("reading from a start index requires a count")
        resp, _body = self._direct_request(
            "GET",
            self._object_uri(container, obj),
            params=params,
            stream=True,
            **kwargs,
        )
        return resp

    def content_rename(self, container, obj, new_name, **kwargs):
        if not new_name:
            raise ValueError("new object key must not be empty")
        self._direct_request(
            "PUT",
            self._object_uri(container, obj),
            params={QUERY_RENAME: new_name},
            **kwargs,
        )

    def content_delete(self, container, obj, **kwargs):
        resp, body = self._direct_request(
            "DELETE", self._object_uri(container, obj), **kwargs
        )
        if resp.status not in DELETED_STATUSES:
            raise exceptions.from_response(resp, body)

    def content_exists(self, container, obj, **kwargs):
        """
        Tell if an object exists.

        :rtype: `bool`
        """
        try:
            self._direct_request("HEAD", self._object_uri(container, obj), **kwargs)
        except exceptions.NotFound:
            return False
        return True
