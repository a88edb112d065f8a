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

"""
Kvpbase object storage Python API.

Basic object storage example:

    >>> from kvpbase import ObjectStorageApi
    >>> api = ObjectStorageApi("default", "http://localhost:8000",
    ...                        api_key="default")
    >>> api.container_create("mycontainer")
    >>> api.object_create("mycontainer", "hello.txt", b"Hello, world!",
    ...                   content_type="text/plain")
    >>> api.object_fetch("mycontainer", "hello.txt").read()
    b'Hello, world!'
"""

import importlib
import importlib.metadata

try:
    __version__ = __canonical_version__ = importlib.metadata.version("kvpbase")
except importlib.metadata.PackageNotFoundError:
    __version__ = __canonical_version__ = "0.0.0"

__all__ = ["ObjectStorageApi", "KvpbaseStream"]

_LAZY_ATTRIBUTES = {
    "ObjectStorageApi": "kvpbase.api.object_storage",
    "KvpbaseStream": "kvpbase.api.stream",
}


def __getattr__(name):
    # Load the API on first access, "import kvpbase" stays cheap.
    module_name = _LAZY_ATTRIBUTES.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(importlib.import_module(module_name), name)
