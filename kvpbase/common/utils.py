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

import time
from urllib.parse import quote

from kvpbase.common.exceptions import DeadlineReached


def ensure_trailing_slash(endpoint):
    """Make sure the endpoint URL ends with a slash."""
    if not endpoint:
        raise ValueError("Endpoint must not be empty")
    if not endpoint.endswith("/"):
        endpoint += "/"
    return endpoint


def check_name(value, what="name"):
    """
    Ensure a container name or object key is a non-empty string.

    :returns: the value, unchanged
    """
    if not value or not isinstance(value, str):
        raise ValueError(f"{what} must be a non-empty string, got {value!r}")
    return value


def quote_path(*segments):
    """
    Join path segments, percent-encoding each of them
    (including any '/' they contain).
    """
    return "/".join(quote(segment, safe="") for segment in segments)


def quote_key(key):
    """
    Percent-encode an object key. Slashes are kept as is,
    they are part of the key.
    """
    return quote(key, safe="/")


def tags_to_csv(tags):
    """Serialize a list of tags as a comma-separated string."""
    if isinstance(tags, str):
        return tags
    return ",".join(str(tag) for tag in tags)


def iter_chunks(stream, chunk_size):
    """
    Read a file-like object by chunks of at most `chunk_size` bytes,
    until the end of the stream.
    """
    while True:
        data = stream.read(chunk_size)
        if not data:
            return
        yield data


def monotonic_time():
    """Get the monotonic time as float seconds"""
    return time.monotonic()


def deadline_to_timeout(deadline, check=False):
    """Convert a deadline (`float` seconds) to a timeout (`float` seconds)"""
    dl_to = deadline - monotonic_time()
    if check and dl_to <= 0.0:
        raise DeadlineReached()
    return dl_to


def timeout_to_deadline(timeout, now=None):
    """Convert a timeout (`float` seconds) to a deadline (`float` seconds)."""
    if now is None:
        now = monotonic_time()
    return now + timeout
