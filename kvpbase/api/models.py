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
Data exchanged with the storage service.

Python attributes are mapped to the JSON keys used by the service.
Attributes set to None are omitted when serializing.
"""

import json
from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from kvpbase.common.easy_value import csv_value
from kvpbase.common.schema import SchemaRegistry
from kvpbase.common.timestamp import to_datetime, to_isoformat


class AuditLogEntryType(str, Enum):
    """Action recorded in a container's audit log."""

    ENUMERATE = "Enumerate"
    READ = "Read"
    READ_RANGE = "ReadRange"
    WRITE = "Write"
    WRITE_KEY_VALUE = "WriteKeyValue"
    WRITE_RANGE = "WriteRange"
    WRITE_TAGS = "WriteTags"
    DELETE = "Delete"
    DELETE_KEY_VALUE = "DeleteKeyValue"
    DELETE_TAGS = "DeleteTags"
    RENAME = "Rename"
    EXISTS = "Exists"
    CONFIGURATION = "Configuration"


def wire(name, default=None, kind=None, default_factory=None):
    """
    Declare a dataclass field serialized as `name`.

    :param kind: how to convert the value: "datetime", "tags",
        an Enum subclass or a `Model` subclass (applied to each item
        of lists).
    """
    metadata = {"wire": name, "kind": kind}
    if default_factory is not None:
        return field(default_factory=default_factory, metadata=metadata)
    return field(default=default, metadata=metadata)


class Model(object):
    """Mixin providing JSON conversion to dataclasses declared with `wire`."""

    schema_name = None

    def __post_init__(self):
        # Naive dates are UTC, like the ones the service sends
        for fld in fields(self):
            value = getattr(self, fld.name)
            if fld.metadata["kind"] == "datetime" and value is not None:
                setattr(self, fld.name, to_datetime(value))

    @staticmethod
    def _encode(kind, value):
        if kind == "datetime":
            return to_isoformat(value)
        if isinstance(kind, type) and issubclass(kind, Enum):
            return kind(value).value
        if isinstance(kind, type) and issubclass(kind, Model):
            if isinstance(value, list):
                return [item.to_dict() for item in value]
            return value.to_dict()
        if isinstance(value, (list, tuple)):
            return list(value)
        if isinstance(value, dict):
            return dict(value)
        return value

    @staticmethod
    def _decode(kind, value):
        if value is None:
            return None
        if kind == "datetime":
            return to_datetime(value)
        if kind == "tags":
            return csv_value(value)
        if isinstance(kind, type) and issubclass(kind, Enum):
            return kind(value)
        if isinstance(kind, type) and issubclass(kind, Model):
            if isinstance(value, list):
                return [kind.from_dict(item) for item in value]
            return kind.from_dict(value)
        return value

    def to_dict(self):
        """Serialize to a JSON-compatible dictionary, omitting None values."""
        out = {}
        for fld in fields(self):
            value = getattr(self, fld.name)
            if value is None:
                continue
            out[fld.metadata["wire"]] = self._encode(fld.metadata["kind"], value)
        return out

    def to_json(self):
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data):
        """
        Build an instance from a dictionary decoded from JSON.
        Unknown keys are ignored, missing or null keys keep their default.

        :raises kvpbase.common.schema.SchemaValidationError: if the
            dictionary does not match the expected schema
        """
        if cls.schema_name:
            SchemaRegistry().validate(cls.schema_name, data)
        kwargs = {}
        for fld in fields(cls):
            key = fld.metadata["wire"]
            if data.get(key) is not None:
                kwargs[fld.name] = cls._decode(fld.metadata["kind"], data[key])
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text):
        return cls.from_dict(json.loads(text))


@dataclass
class ContainerSettings(Model):
    """Configuration of a container."""

    schema_name = "container_settings"

    id: Optional[int] = wire("Id")
    guid: Optional[str] = wire("GUID")
    user_guid: Optional[str] = wire("UserGuid")
    name: Optional[str] = wire("Name")
    is_public_read: Optional[bool] = wire("IsPublicRead", True)
    is_public_write: Optional[bool] = wire("IsPublicWrite", False)
    enable_audit_logging: Optional[bool] = wire("EnableAuditLogging", False)
    created_utc: Optional[datetime] = wire("CreatedUtc", kind="datetime")


@dataclass
class ObjectMetadata(Model):
    """Description of a stored object."""

    schema_name = "object_metadata"

    id: Optional[int] = wire("Id")
    guid: Optional[str] = wire("GUID")
    container_guid: Optional[str] = wire("ContainerGUID")
    object_key: Optional[str] = wire("ObjectKey")
    content_type: Optional[str] = wire("ContentType")
    content_length: Optional[int] = wire("ContentLength")
    md5: Optional[str] = wire("Md5")
    tags: Optional[List[str]] = wire("Tags", kind="tags")
    created_utc: Optional[datetime] = wire("CreatedUtc", kind="datetime")
    last_update_utc: Optional[datetime] = wire("LastUpdateUtc", kind="datetime")
    last_access_utc: Optional[datetime] = wire("LastAccessUtc", kind="datetime")


@dataclass
class EnumerationFilter(Model):
    """
    Criteria to select objects when enumerating a container.
    Every criterion is optional, unset criteria are not sent.
    """

    schema_name = "enumeration_filter"

    created_before: Optional[datetime] = wire("CreatedBefore", kind="datetime")
    created_after: Optional[datetime] = wire("CreatedAfter", kind="datetime")
    updated_before: Optional[datetime] = wire("UpdatedBefore", kind="datetime")
    updated_after: Optional[datetime] = wire("UpdatedAfter", kind="datetime")
    last_access_before: Optional[datetime] = wire("LastAccessBefore", kind="datetime")
    last_access_after: Optional[datetime] = wire("LastAccessAfter", kind="datetime")
    prefix: Optional[str] = wire("Prefix")
    md5: Optional[str] = wire("Md5")
    content_type: Optional[str] = wire("ContentType")
    size_min: Optional[int] = wire("SizeMin")
    size_max: Optional[int] = wire("SizeMax")
    tags: Optional[List[str]] = wire("Tags")
    key_value_pairs: Optional[Dict[str, str]] = wire("KeyValuePairs")


@dataclass
class AuditLogEntry(Model):
    schema_name = "audit_log_entry"

    id: Optional[int] = wire("Id")
    guid: Optional[str] = wire("GUID")
    container_guid: Optional[str] = wire("ContainerGUID")
    object_guid: Optional[str] = wire("ObjectGUID")
    action: Optional[AuditLogEntryType] = wire("Action", kind=AuditLogEntryType)
    metadata: Optional[str] = wire("Metadata")
    created_utc: Optional[datetime] = wire("CreatedUtc", kind="datetime")


@dataclass
class ContainerStatistics(Model):
    objects: Optional[int] = wire("Objects")
    bytes: Optional[int] = wire("Bytes")


@dataclass
class ContainerMetadata(Model):
    """
    Result of a container enumeration: statistics about the container
    and the requested page of object descriptions.
    """

    schema_name = "container_metadata"

    user_guid: Optional[str] = wire("UserGuid")
    name: Optional[str] = wire("Name")
    params: Optional[Dict[str, Any]] = wire("Params")
    statistics: Optional[ContainerStatistics] = wire(
        "Statistics", kind=ContainerStatistics
    )
    objects: List[ObjectMetadata] = wire(
        "Objects", kind=ObjectMetadata, default_factory=list
    )


class KvpbaseObject(object):
    """
    Object content returned by a read: content type, length,
    and a readable stream of the data.

    The stream must be consumed or closed to release the connection.
    """

    def __init__(self, content_type, content_length, data):
        self.content_type = content_type
        self.content_length = content_length
        self.data = data

    def read(self, amt=None):
        return self.data.read(amt)

    def close(self):
        self.data.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def __repr__(self):
        return "KvpbaseObject(content_type=%r, content_length=%r)" % (
            self.content_type,
            self.content_length,
        )
