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

from kvpbase.api.models import (
    AuditLogEntry,
    ContainerMetadata,
    ContainerSettings,
    EnumerationFilter,
    KvpbaseObject,
    ObjectMetadata,
)
from kvpbase.common.constants import (
    DOWNLOAD_BUFFER_SIZE,
    MAX_TRANSFER_SIZE,
    TIMEOUT_KEYS,
    TOKEN_PATH,
    UPLOAD_BUFFER_SIZE,
)
from kvpbase.common.credentials import credentials_from_conf
from kvpbase.common.decorators import (
    cancellable,
    ensure_headers,
    handle_container_not_found,
    handle_object_not_found,
    patch_kwargs,
)
from kvpbase.common.easy_value import boolean_value, float_value, int_value
from kvpbase.common.exceptions import (
    KvpbaseException,
    KvpbaseProtocolError,
    PreconditionFailed,
)
from kvpbase.common.http_urllib3 import get_pool_manager
from kvpbase.common.logger import get_logger
from kvpbase.common.utils import check_name, iter_chunks


class ObjectStorageApi(object):
    """
    The Object Storage API.

    High level API that wraps `ContainerClient` and `ContentClient`
    classes, on behalf of one user.

    Every method that takes a `kwargs` argument accepts at least
    the following keywords:

        - `headers`: `dict` of extra headers to send
        - `connection_timeout`: `float`
        - `read_timeout`: `float`
        - `deadline`: `float`, monotonic time after which the operation
          is abandoned. An abandoned operation returns None (False for
          existence checks) instead of raising an exception. Writes
          already applied by the service are not rolled back.
    """

    def __init__(self, user_guid, endpoint, credentials=None, logger=None, **kwargs):
        """
        Initialize the object storage API.

        :param user_guid: identifier of the user owning the containers
        :type user_guid: `str`
        :param endpoint: base URL of the storage service
        :type endpoint: `str`
        :param credentials: how to authenticate requests. If not set,
            built from the `api_key` keyword, or from the `email`
            and `password` keywords.
        :type credentials: `kvpbase.common.credentials.Credentials`

        :keyword ignore_tls_errors: do not verify the server's certificate
            (True by default)
        :type ignore_tls_errors: `bool`
        :keyword max_transfer_size: size above which a warning is emitted
            when sending a body in one request (512MiB by default)
        :type max_transfer_size: `int`
        :keyword upload_buffer_size: size of the chunks sent by the upload
            helpers (1MiB by default)
        :type upload_buffer_size: `int`
        :keyword download_buffer_size: size of the ranges read by the
            download helpers (1MiB by default)
        :type download_buffer_size: `int`
        :keyword connection_timeout: connection timeout
        :type connection_timeout: `float` seconds
        :keyword read_timeout: timeout for responses
        :type read_timeout: `float` seconds
        :keyword pool_manager: a pooled connection manager that will be used
            for all requests
        :type pool_manager: `urllib3.PoolManager`
        """
        self.user_guid = user_guid
        conf = {"user_guid": user_guid, "endpoint": endpoint}
        for key in ("api_key", "email", "password"):
            value = kwargs.pop(key, None)
            if value:
                conf[key] = value
        self.logger = logger or get_logger(conf)

        self.ignore_tls_errors = boolean_value(
            kwargs.pop("ignore_tls_errors", None), True
        )
        self.max_transfer_size = int_value(
            kwargs.pop("max_transfer_size", None), MAX_TRANSFER_SIZE
        )
        self.upload_buffer_size = int_value(
            kwargs.pop("upload_buffer_size", None), UPLOAD_BUFFER_SIZE
        )
        self.download_buffer_size = int_value(
            kwargs.pop("download_buffer_size", None), DOWNLOAD_BUFFER_SIZE
        )
        for name in ("max_transfer_size", "upload_buffer_size", "download_buffer_size"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")

        self._global_kwargs = {
            tok: float_value(tov, None)
            for tok, tov in kwargs.items()
            if tok in TIMEOUT_KEYS
        }
        self.logger.debug("Global API parameters: %s", self._global_kwargs)

        credentials = credentials or credentials_from_conf(conf)
        pool_manager = kwargs.pop("pool_manager", None)
        if pool_manager is None:
            pool_manager = get_pool_manager(
                ignore_tls_errors=self.ignore_tls_errors, **kwargs
            )

        from kvpbase.container.client import ContainerClient
        from kvpbase.content.client import ContentClient

        self.container = ContainerClient(
            conf, credentials=credentials, logger=self.logger, pool_manager=pool_manager
        )
        self.content = ContentClient(
            conf, credentials=credentials, logger=self.logger, pool_manager=pool_manager
        )
        self.endpoint = self.container.endpoint

    def _check_transfer_size(self, size):
        if size is not None and size > self.max_transfer_size:
            self.logger.warning(
                "Sending %d bytes in one request, more than the maximum "
                "transfer size (%d bytes)",
                size,
                self.max_transfer_size,
            )

    # General

    def verify_connectivity(self, **kwargs):
        """
        Check that the storage service answers.

        :returns: True if the service responded with a 2xx status,
            False in any other case (errors are logged, not raised)
        """
        kwargs = dict(self._global_kwargs, **kwargs)
        try:
            resp, _body = self.container._direct_request("GET", self.endpoint, **kwargs)
        except KvpbaseException as exc:
            self.logger.info("Storage service at %s unreachable: %s", self.endpoint, exc)
            return False
        return 200 <= resp.status <= 299

    @cancellable()
    @patch_kwargs
    def authenticate(self, **kwargs):
        """
        Ask the service for an authentication token.

        :returns: the token, or None if the service sent an empty response
        :rtype: `str`
        """
        _resp, body = self.container._direct_request(
            "GET", self.endpoint + TOKEN_PATH, **kwargs
        )
        if isinstance(body, bytes):
            body = body.decode("utf-8").strip()
        return body or None

    # Containers

    @cancellable()
    @patch_kwargs
    def container_list(self, **kwargs):
        """
        Get the names of the user's containers.

        :rtype: `list` of `str`
        """
        return self.container.container_list(**kwargs)

    @cancellable()
    @patch_kwargs
    def container_create(
        self,
        container,
        public_read=True,
        public_write=False,
        audit_logging=False,
        **kwargs,
    ):
        """
        Create a container.

        :param container: name of the container to create
        :type container: `str`
        :param public_read: let anybody read the container's objects
        :param public_write: let anybody write objects in the container
        :param audit_logging: keep track of the operations
            made in the container

        :raise kvpbase.common.exceptions.Conflict: if the container
            already exists
        """
        check_name(container, "container")
        settings = ContainerSettings(
            user_guid=self.user_guid,
            name=container,
            is_public_read=public_read,
            is_public_write=public_write,
            enable_audit_logging=audit_logging,
        )
        self.container.container_create(container, settings.to_dict(), **kwargs)

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_get_settings(self, container, **kwargs):
        """
        Get the settings of a container.

        :rtype: `ContainerSettings`
        """
        body = self.container.container_get_settings(container, **kwargs)
        return ContainerSettings.from_dict(body or {})

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_update_settings(self, container, settings, **kwargs):
        """
        Update the settings of a container.

        :type settings: `ContainerSettings` or `dict`
        """
        if isinstance(settings, ContainerSettings):
            settings = settings.to_dict()
        self.container.container_update_settings(container, settings, **kwargs)

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_get_properties(self, container, **kwargs):
        """
        Get the key-value pairs attached to a container.

        :rtype: `dict`
        """
        return self.container.container_get_properties(container, **kwargs)

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_set_properties(self, container, properties, **kwargs):
        """
        Replace the key-value pairs attached to a container.

        :type properties: `dict`
        """
        self.container.container_set_properties(container, properties, **kwargs)

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_enumerate(
        self, container, start_index=None, max_results=None, filters=None, **kwargs
    ):
        """
        Enumerate the objects of a container.

        :param start_index: index of the first object to return
        :type start_index: `int`
        :param max_results: maximum number of objects to return
        :type max_results: `int`
        :param filters: criteria the objects must match
        :type filters: `EnumerationFilter` or `dict`
        :rtype: `ContainerMetadata`
        """
        if start_index is not None and start_index < 0:
            raise ValueError("start index must not be negative")
        if max_results is not None and max_results <= 0:
            raise ValueError("maximum number of results must be positive")
        if isinstance(filters, EnumerationFilter):
            filters = filters.to_dict()
        body = self.container.container_enumerate(
            container,
            start_index=start_index,
            max_results=max_results,
            filters=filters,
            **kwargs,
        )
        return ContainerMetadata.from_dict(body)

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_audit_log(self, container, **kwargs):
        """
        Get the audit log of a container.

        :rtype: `list` of `AuditLogEntry`
        """
        body = self.container.container_audit_log(container, **kwargs)
        return [AuditLogEntry.from_dict(entry) for entry in body]

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    def container_delete(self, container, **kwargs):
        """
        Delete a container.

        :raise kvpbase.common.exceptions.NoSuchContainer: if the container
            does not exist
        """
        self.container.container_delete(container, **kwargs)

    @cancellable(False)
    @patch_kwargs
    def container_exists(self, container, **kwargs):
        """
        Tell if a container exists.

        :rtype: `bool`
        """
        return self.container.container_exists(container, **kwargs)

    # Objects

    @cancellable()
    @handle_container_not_found
    @patch_kwargs
    @ensure_headers
    def object_create(
        self, container, obj, data, content_type=None, content_length=None, **kwargs
    ):
        """
        Create an object.

        :param container: name of the container where to create the object
        :param obj: key of the object
        :param data: content of the object
        :type data: `bytes`, `str` (encoded as UTF-8) or file-like object
        :param content_type: MIME type of the object
            (application/octet-stream by default)
        :param content_length: size of `data` when it is a file-like object

        :raise kvpbase.common.exceptions.Conflict: if the object
            already exists
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        if isinstance(data, (bytes, bytearray)):
            content_length = len(data)
        self._check_transfer_size(content_length)
        self.content.content_create(
            container,
            obj,
            data,
            content_type=content_type,
            content_length=content_length,
            **kwargs,
        )

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_write_range(self, container, obj, start_index, data, **kwargs):
        """
        Write `data` in an existing object, starting at `start_index`.
        The object grows if the data goes beyond its end.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._check_transfer_size(len(data))
        self.content.content_write_range(container, obj, start_index, data, **kwargs)

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_set_tags(self, container, obj, tags, **kwargs):
        """
        Set the tags of an object.

        :type tags: `list` of `str`
        """
        self.content.content_set_tags(container, obj, tags, **kwargs)

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_set_properties(self, container, obj, properties, **kwargs):
        """
        Replace the key-value pairs attached to an object.

        :type properties: `dict`
        """
        self.content.content_set_properties(container, obj, properties, **kwargs)

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_get_properties(self, container, obj, **kwargs):
        """
        Get the key-value pairs attached to an object.

        :rtype: `dict`
        """
        return self.content.content_get_properties(container, obj, **kwargs)

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_show(self, container, obj, **kwargs):
        """
        Get the metadata of an object.

        :rtype: `ObjectMetadata`
        """
        body = self.content.content_show(container, obj, **kwargs)
        return ObjectMetadata.from_dict(body or {})

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_fetch(self, container, obj, start_index=None, count=None, **kwargs):
        """
        Read an object, or `count` bytes of it starting at `start_index`.

        The returned object holds an open connection, read it
        until the end or close it.

        :rtype: `KvpbaseObject`
        """
        resp = self.content.content_fetch(
            container, obj, start_index=start_index, count=count, **kwargs
        )
        return KvpbaseObject(
            resp.headers.get("Content-Type"),
            int_value(resp.headers.get("Content-Length"), None),
            resp,
        )

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_rename(self, container, obj, new_name, **kwargs):
        """
        Rename an object.

        :param new_name: new key of the object
        """
        self.content.content_rename(container, obj, new_name, **kwargs)

    @cancellable()
    @handle_object_not_found
    @patch_kwargs
    def object_delete(self, container, obj, **kwargs):
        """
        Delete an object.

        :raise kvpbase.common.exceptions.NoSuchObject: if the object
            does not exist
        """
        self.content.content_delete(container, obj, **kwargs)

    @cancellable(False)
    @patch_kwargs
    def object_exists(self, container, obj, **kwargs):
        """
        Tell if an object exists.

        :rtype: `bool`
        """
        return self.content.content_exists(container, obj, **kwargs)

    # Upload and download helpers

    def _read_range(self, container, obj, start_index, count, **kwargs):
        resp = self.content.content_fetch(
            container, obj, start_index=start_index, count=count, **kwargs
        )
        try:
            return resp.read()
        finally:
            resp.release_conn()

    def _upload(self, stream, container, obj, content_type=None, **kwargs):
        position = 0
        for chunk in iter_chunks(stream, self.upload_buffer_size):
            if position == 0:
                self.content.content_create(
                    container, obj, chunk, content_type=content_type, **kwargs
                )
            else:
                self.content.content_write_range(
                    container, obj, position, chunk, **kwargs
                )
            position += len(chunk)
            self.logger.debug("Uploaded %d bytes of %s/%s", position, container, obj)
        if position == 0:
            self.content.content_create(
                container, obj, b"", content_type=content_type, **kwargs
            )
        return ObjectMetadata.from_dict(
            self.content.content_show(container, obj, **kwargs) or {}
        )

    def _download(self, stream, container, obj, **kwargs):
        meta = ObjectMetadata.from_dict(
            self.content.content_show(container, obj, **kwargs) or {}
        )
        length = meta.content_length or 0
        position = 0
        while position < length:
            count = min(self.download_buffer_size, length - position)
            data = self._read_range(container, obj, position, count, **kwargs)
            if not data:
                raise KvpbaseProtocolError(
                    f"Empty read at offset {position} of {container}/{obj} "
                    f"({length} bytes expected)"
                )
            stream.write(data)
            position += len(data)
            self.logger.debug("Downloaded %d bytes of %s/%s", position, container, obj)
        return position

    def _check_container(self, container, **kwargs):
        if not self.container.container_exists(container, **kwargs):
            raise PreconditionFailed(f"Container '{container}' does not exist")

    def _check_object(self, container, obj, must_exist, **kwargs):
        exists = self.content.content_exists(container, obj, **kwargs)
        if must_exist and not exists:
            raise PreconditionFailed(
                f"Object '{obj}' does not exist in container '{container}'"
            )
        if not must_exist and exists:
            raise PreconditionFailed(
                f"Object '{obj}' already exists in container '{container}'"
            )

    @cancellable()
    @patch_kwargs
    def upload_file(self, filename, container, obj, content_type=None, **kwargs):
        """
        Create an object from a local file, sending it by chunks
        of `upload_buffer_size` bytes.

        :raise kvpbase.common.exceptions.PreconditionFailed: if the
            container does not exist, the file does not exist,
            or the object already exists
        :rtype: `ObjectMetadata`
        """
        self._check_container(container, **kwargs)
        if not os.path.isfile(filename):
            raise PreconditionFailed(f"File '{filename}' does not exist")
        self._check_object(container, obj, False, **kwargs)
        with open(filename, "rb") as stream:
            return self._upload(stream, container, obj, content_type, **kwargs)

    @cancellable()
    @patch_kwargs
    def upload_from_stream(self, stream, container, obj, content_type=None, **kwargs):
        """
        Create an object from a readable file-like object, sending it
        by chunks of `upload_buffer_size` bytes.

        :raise kvpbase.common.exceptions.PreconditionFailed: if the
            container does not exist, or the object already exists
        :rtype: `ObjectMetadata`
        """
        if stream is None or not hasattr(stream, "read"):
            raise ValueError("A readable stream is required")
        self._check_container(container, **kwargs)
        self._check_object(container, obj, False, **kwargs)
        return self._upload(stream, container, obj, content_type, **kwargs)

    @cancellable()
    @patch_kwargs
    def download_file(self, filename, container, obj, **kwargs):
        """
        Save an object in a new local file, reading it by ranges
        of `download_buffer_size` bytes.

        :raise kvpbase.common.exceptions.PreconditionFailed: if the
            container does not exist, the file already exists,
            or the object does not exist
        :returns: the number of bytes written
        """
        self._check_container(container, **kwargs)
        if os.path.exists(filename):
            raise PreconditionFailed(f"File '{filename}' already exists")
        self._check_object(container, obj, True, **kwargs)
        with open(filename, "xb") as stream:
            return self._download(stream, container, obj, **kwargs)

    @cancellable()
    @patch_kwargs
    def download_to_stream(self, stream, container, obj, **kwargs):
        """
        Write an object in a writable file-like object, reading it
        by ranges of `download_buffer_size` bytes.

        :raise kvpbase.common.exceptions.PreconditionFailed: if the
            container or the object does not exist
        :returns: the number of bytes written
        """
        if stream is None or not hasattr(stream, "write"):
            raise ValueError("A writable stream is required")
        self._check_container(container, **kwargs)
        self._check_object(container, obj, True, **kwargs)
        return self._download(stream, container, obj, **kwargs)
