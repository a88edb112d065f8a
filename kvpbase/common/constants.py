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

# Authentication headers
API_KEY_HEADER = "x-api-key"
EMAIL_HEADER = "x-email"
PASSWORD_HEADER = "x-password"

HTTP_CONTENT_TYPE_JSON = "application/json"
HTTP_CONTENT_TYPE_OCTET_STREAM = "application/octet-stream"

# Default timeouts (seconds)
CONNECTION_TIMEOUT = 2.0
READ_TIMEOUT = 30.0
TIMEOUT_KEYS = ("connection_timeout", "read_timeout")

# Transfer sizes (bytes)
MAX_TRANSFER_SIZE = 536870912
UPLOAD_BUFFER_SIZE = 1048576
DOWNLOAD_BUFFER_SIZE = 1048576

# Path of the token request, relative to the endpoint
TOKEN_PATH = "token"

# Query string parameters. Flags are sent without value ("?config").
QUERY_CONFIG = "config"
QUERY_KEYS = "keys"
QUERY_SEARCH = "search"
QUERY_METADATA = "metadata"
QUERY_AUDITLOG = "auditlog"
QUERY_INDEX = "index"
QUERY_COUNT = "count"
QUERY_TAGS = "tags"
QUERY_RENAME = "rename"

# Statuses expected on success, by kind of request
CREATED_STATUSES = (200, 201)
DELETED_STATUSES = (200, 204)
