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

import hashlib
import json
from datetime import datetime, timezone
from io import BytesIO
from urllib.parse import parse_qsl, unquote, urlparse

from kvpbase.api.object_storage import ObjectStorageApi
from kvpbase.common.http_urllib3 import urllib3
from kvpbase.common.timestamp import to_isoformat

FAKE_ENDPOINT = "http://1.2.3.4:8000/"
FAKE_USER = "default"
FAKE_API_KEY = "default"
FAKE_TOKEN = "fake-token"


def fake_response(status, body=b"", headers=None, reason=None, method="GET"):
    """Build a real urllib3 response around an in-memory body."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode("utf-8")
        headers = dict(headers or {}, **{"Content-Type": "application/json"})
    elif isinstance(body, str):
        body = body.encode("utf-8")
        headers = dict({"Content-Type": "text/plain"}, **(headers or {}))
    headers = dict(headers or {})
    if method == "HEAD":
        body = b""
    else:
        headers["Content-Length"] = str(len(body))
    return urllib3.HTTPResponse(
        body=BytesIO(body),
        headers=headers,
        status=status,
        reason=reason or str(status),
        preload_content=False,
        request_method=method,
    )


class FakeObject(object):
    def __init__(self, container, key, data, content_type):
        self.container = container
        self.key = key
        self.data = bytearray(data)
        self.content_type = content_type
        self.tags = []
        self.keys = {}
        self.created = datetime.now(timezone.utc)
        self.updated = self.created

    def metadata(self):
        return {
            "Id": id(self) % 100000,
            "GUID": f"guid-{self.container.name}-{self.key}",
            "ContainerGUID": self.container.settings["GUID"],
            "ObjectKey": self.key,
            "ContentType": self.content_type,
            "ContentLength": len(self.data),
            "Md5": hashlib.md5(bytes(self.data)).hexdigest(),
            "Tags": ",".join(self.tags) if self.tags else None,
            "CreatedUtc": to_isoformat(self.created),
            "LastUpdateUtc": to_isoformat(self.updated),
            "LastAccessUtc": to_isoformat(self.updated),
        }


class FakeContainer(object):
    def __init__(self, name, settings):
        self.name = name
        self.settings = dict(settings)
        self.settings.setdefault("GUID", f"guid-{name}")
        self.settings["Name"] = name
        self.settings["CreatedUtc"] = to_isoformat(datetime.now(timezone.utc))
        self.objects = {}
        self.keys = {}
        self.audit_log = []

    def audit(self, action, obj=None):
        if not self.settings.get("EnableAuditLogging"):
            return
        self.audit_log.append(
            {
                "Id": len(self.audit_log) + 1,
                "GUID": f"audit-{len(self.audit_log) + 1}",
                "ContainerGUID": self.settings["GUID"],
                "ObjectGUID": f"guid-{self.name}-{obj}" if obj else None,
                "Action": action,
                "Metadata": None,
                "CreatedUtc": to_isoformat(datetime.now(timezone.utc)),
            }
        )


class FakeStorageServer(object):
    """
    In-memory storage service, to be used as the pool manager
    of an `ObjectStorageApi`.

    Every request is recorded in `requests` as a
    (method, url, headers, body) tuple.
    """

    def __init__(self, user_guid=FAKE_USER, api_key=FAKE_API_KEY):
        self.user_guid = user_guid
        self.api_key = api_key
        self.containers = {}
        self.requests = []
        self.endpoint = urlparse(FAKE_ENDPOINT)

    def request(self, method, url, headers=None, body=None, **kwargs):
        headers = headers or {}
        if hasattr(body, "read"):
            body = body.read()
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.requests.append((method, url, headers, body))
        parsed = urlparse(url)
        query = dict(parse_qsl(parsed.query, keep_blank_values=True))
        segments = [unquote(s) for s in parsed.path.split("/")[1:]]
        if segments and segments[-1] == "":
            segments.pop()

        if not segments:
            return fake_response(200, method=method)
        if headers.get("x-api-key") != self.api_key:
            return fake_response(401, {"message": "Unauthorized"}, method=method)
        if segments == ["token"]:
            return fake_response(200, FAKE_TOKEN, method=method)
        if segments[0] != self.user_guid:
            return fake_response(401, {"message": "Unauthorized"}, method=method)
        if len(segments) == 1:
            return fake_response(200, sorted(self.containers), method=method)
        if len(segments) == 2:
            return self._container_request(method, segments[1], query, body)
        return self._object_request(
            method, segments[1], "/".join(segments[2:]), query, headers, body
        )

    def _container_request(self, method, name, query, body):
        container = self.containers.get(name)
        if method == "POST":
            if container is not None:
                return fake_response(409, {"message": "Container exists"})
            self.containers[name] = FakeContainer(name, json.loads(body or b"{}"))
            return fake_response(201, method=method)
        if container is None:
            return fake_response(404, {"message": "Not found"}, method=method)
        if method == "HEAD":
            return fake_response(200, method=method)
        if method == "DELETE":
            del self.containers[name]
            return fake_response(204, method=method)
        if method == "GET" and "config" in query:
            return fake_response(200, container.settings)
        if method == "GET" and "keys" in query:
            return fake_response(200, container.keys)
        if method == "GET" and "auditlog" in query:
            return fake_response(200, container.audit_log)
        if method == "PUT" and "config" in query:
            settings = json.loads(body)
            for key in ("GUID", "Name", "CreatedUtc"):
                settings.pop(key, None)
            container.settings.update(settings)
            container.audit("Configuration")
            return fake_response(200, method=method)
        if method == "PUT" and "keys" in query:
            container.keys = json.loads(body)
            return fake_response(200, method=method)
        if method == "PUT" and "search" in query:
            return self._enumerate(container, query, json.loads(body or b"{}"))
        return fake_response(400, {"message": "Unsupported"}, method=method)

    def _enumerate(self, container, query, filters):
        objects = sorted(container.objects.values(), key=lambda o: o.key)
        if filters.get("Prefix"):
            objects = [o for o in objects if o.key.startswith(filters["Prefix"])]
        if filters.get("ContentType"):
            objects = [o for o in objects if o.content_type == filters["ContentType"]]
        if filters.get("SizeMin") is not None:
            objects = [o for o in objects if len(o.data) >= filters["SizeMin"]]
        if filters.get("SizeMax") is not None:
            objects = [o for o in objects if len(o.data) <= filters["SizeMax"]]
        index = int(query.get("index") or 0)
        count = int(query.get("count") or 1000)
        container.audit("Enumerate")
        return fake_response(
            200,
            {
                "UserGuid": self.user_guid,
                "Name": container.name,
                "Params": {"StartIndex": index, "MaxResults": count},
                "Statistics": {
                    "Objects": len(container.objects),
                    "Bytes": sum(len(o.data) for o in container.objects.values()),
                },
                "Objects": [o.metadata() for o in objects[index : index + count]],
            },
        )

    def _object_request(self, method, name, key, query, headers, body):
        container = self.containers.get(name)
        if container is None:
            return fake_response(404, {"message": "Not found"}, method=method)
        obj = container.objects.get(key)
        if method == "POST":
            if obj is not None:
                return fake_response(409, {"message": "Object exists"})
            container.objects[key] = FakeObject(
                container,
                key,
                body or b"",
                headers.get("Content-Type", "application/octet-stream"),
            )
            container.audit("Write", key)
            return fake_response(201, method=method)
        if obj is None:
            return fake_response(404, {"message": "Not found"}, method=method)
        if method == "HEAD":
            return fake_response(200, method=method)
        if method == "DELETE":
            del container.objects[key]
            container.audit("Delete", key)
            return fake_response(204, method=method)
        if method == "GET":
            return self._object_read(container, obj, query)
        if method == "PUT":
            return self._object_update(container, obj, query, body)
        return fake_response(400, {"message": "Unsupported"}, method=method)

    def _object_read(self, container, obj, query):
        if "metadata" in query:
            return fake_response(200, obj.metadata())
        if "keys" in query:
            return fake_response(200, obj.keys)
        data = bytes(obj.data)
        action = "Read"
        if "count" in query:
            start = int(query.get("index") or 0)
            count = int(query["count"])
            if start >= len(data):
                return fake_response(400, {"message": "Out of range"})
            data = data[start : start + count]
            action = "ReadRange"
        container.audit(action, obj.key)
        return fake_response(200, data, {"Content-Type": obj.content_type})

    def _object_update(self, container, obj, query, body):
        if "index" in query:
            start = int(query["index"])
            body = body or b""
            if start > len(obj.data):
                obj.data.extend(b"\x00" * (start - len(obj.data)))
            obj.data[start : start + len(body)] = body
            obj.updated = datetime.now(timezone.utc)
            container.audit("WriteRange", obj.key)
        elif "tags" in query:
            obj.tags = [t for t in query["tags"].split(",") if t]
            container.audit("WriteTags", obj.key)
        elif "keys" in query:
            obj.keys = json.loads(body)
            container.audit("WriteKeyValue", obj.key)
        elif "rename" in query:
            new_key = query["rename"]
            if new_key in container.objects:
                return fake_response(409, {"message": "Object exists"})
            del container.objects[obj.key]
            obj.key = new_key
            container.objects[new_key] = obj
            container.audit("Rename", new_key)
        else:
            return fake_response(400, {"message": "Unsupported"})
        return fake_response(200)

    def requested(self, method=None):
        """Get the URLs requested, optionally filtered by method."""
        return [url for m, url, _h, _b in self.requests if method in (None, m)]


def make_api(server=None, **kwargs):
    """Get an `ObjectStorageApi` talking to a `FakeStorageServer`."""
    server = server or FakeStorageServer()
    kwargs.setdefault("api_key", server.api_key)
    return ObjectStorageApi(
        server.user_guid, FAKE_ENDPOINT, pool_manager=server, **kwargs
    )
