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

import io

from kvpbase.common.constants import HTTP_CONTENT_TYPE_OCTET_STREAM
from kvpbase.common.exceptions import PreconditionFailed


class KvpbaseStream(io.RawIOBase):
    """
    Make a seekable, readable and writable file-like object
    from a remote object.

    Each `read` or `write` is one ranged request to the service,
    there is no buffering and no read-ahead. Wrap the stream
    in `io.BufferedReader` or `io.BufferedWriter` to get some.

    The length of the object is fetched when the stream is opened,
    and after each write.
    """

    def __init__(self, api, container, obj):
        """
        :param api: the API to send requests with
        :type api: `kvpbase.api.object_storage.ObjectStorageApi`
        :param container: name of the container holding the object
        :param obj: key of the object, created empty if missing

        :raise kvpbase.common.exceptions.PreconditionFailed: if the
            container does not exist
        """
        super().__init__()
        self.api = api
        self.container = container
        self.obj = obj
        self._position = 0
        self._metadata = None

        if not api.container_exists(container):
            raise PreconditionFailed(f"Container '{container}' does not exist")
        if not api.object_exists(container, obj):
            api.object_create(
                container, obj, b"", content_type=HTTP_CONTENT_TYPE_OCTET_STREAM
            )
        self._refresh()

    def _refresh(self):
        self._metadata = self.api.object_show(self.container, self.obj)

    def _check_not_closed(self):
        if self.closed:
            raise ValueError("I/O operation on closed stream")

    @property
    def metadata(self):
        """Last fetched metadata of the object."""
        return self._metadata

    @property
    def length(self):
        """Last fetched length of the object."""
        return self._metadata.content_length or 0

    def readable(self):
        return True

    def writable(self):
        return True

    def seekable(self):
        return True

    def readinto(self, b):  # pylint: disable=invalid-name
        """
        Read at most `len(b)` bytes at the current position.
        The position moves forward by the number of bytes actually read.
        """
        self._check_not_closed()
        count = min(len(b), self.length - self._position)
        if count <= 0:
            return 0
        with self.api.object_fetch(
            self.container, self.obj, start_index=self._position, count=count
        ) as resp:
            data = resp.read()
        read_len = len(data)
        b[0:read_len] = data
        self._position += read_len
        return read_len

    def write(self, b):
        """
        Write `b` at the current position, then refresh the length
        of the object and move the position after the written bytes.
        """
        self._check_not_closed()
        data = bytes(b)
        if not data:
            return 0
        self.api.object_write_range(self.container, self.obj, self._position, data)
        self._refresh()
        self._position += len(data)
        return len(data)

    def seek(self, offset, whence=io.SEEK_SET):
        self._check_not_closed()
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._position + offset
        elif whence == io.SEEK_END:
            position = self.length + offset
        else:
            raise ValueError(f"Invalid whence ({whence})")
        if position < 0:
            raise ValueError(f"Negative seek position {position}")
        self._position = position
        return position

    def tell(self):
        self._check_not_closed()
        return self._position

    def truncate(self, size=None):
        raise io.UnsupportedOperation("truncate")

    def __repr__(self):
        return "KvpbaseStream(container=%r, obj=%r, position=%d)" % (
            self.container,
            self.obj,
            self._position,
        )
