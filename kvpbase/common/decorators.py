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

from functools import wraps

from kvpbase.common.exceptions import (
    DeadlineReached,
    NoSuchContainer,
    NoSuchObject,
    NotFound,
)


def ensure_headers(func):
    @wraps(func)
    def ensure_headers_wrapper(*args, **kwargs):
        if kwargs.setdefault("headers", dict()) is None:
            kwargs["headers"] = dict()
        return func(*args, **kwargs)

    return ensure_headers_wrapper


def handle_container_not_found(fnc):
    @wraps(fnc)
    def _wrapped(self, container, *args, **kwargs):
        try:
            return fnc(self, container, *args, **kwargs)
        except NotFound as err:
            raise NoSuchContainer(
                err.http_status, f"Container '{container}' does not exist.", err.body
            ) from err

    return _wrapped


def handle_object_not_found(fnc):
    """
    Catch `kvpbase.common.exceptions.NotFound` exceptions and raise
    `kvpbase.common.exceptions.NoSuchObject`. The service does not
    tell a missing container from a missing object.
    """

    @wraps(fnc)
    def _wrapped(self, container, obj, *args, **kwargs):
        try:
            return fnc(self, container, obj, *args, **kwargs)
        except NotFound as err:
            raise NoSuchObject(
                err.http_status,
                f"Object '{obj}' does not exist in container '{container}'.",
                err.body,
            ) from err

    return _wrapped


def patch_kwargs(fnc):
    """
    Patch keyword arguments with the ones passed to the class' constructor.
    Requires the class to have a `_global_kwargs` member (dict).
    """

    @wraps(fnc)
    def _patch_kwargs(self, *args, **kwargs):
        for argk, argv in self._global_kwargs.items():
            if argk not in kwargs:
                kwargs[argk] = argv
        return fnc(self, *args, **kwargs)

    return _patch_kwargs


def cancellable(default=None):
    """
    Turn a `DeadlineReached` exception into a "not completed" return
    value. Requires the class to have a `logger` member.

    :param default: value to return when the deadline is reached
    """

    def _cancellable(fnc):
        @wraps(fnc)
        def _wrapped(self, *args, **kwargs):
            try:
                return fnc(self, *args, **kwargs)
            except DeadlineReached:
                self.logger.info("%s cancelled: deadline reached", fnc.__name__)
                return default

        return _wrapped

    return _cancellable
