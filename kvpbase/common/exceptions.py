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

from enum import Enum
from json import loads as json_loads


class ExceptionType(str, Enum):
    """Category of a failed request, as reported to callers."""

    UNKNOWN = "Unknown"
    CANNOT_CONNECT = "CannotConnect"
    INTERNAL_SERVER_ERROR = "InternalServerError"
    CONFLICT = "Conflict"
    NOT_FOUND = "NotFound"
    UNAUTHORIZED = "Unauthorized"
    BAD_REQUEST = "BadRequest"


class KvpbaseException(Exception):
    exc_type = ExceptionType.UNKNOWN


class ConfigurationException(KvpbaseException):
    pass


class CommandError(Exception):
    pass


class PreconditionFailed(KvpbaseException):
    """
    Raised by the client itself, before any request is sent,
    when a local check does not pass (missing container,
    existing object, existing or missing local file...).
    """

    pass


class KvpbaseNetworkException(KvpbaseException):
    """Network related exception (connection, timeout...)."""

    exc_type = ExceptionType.CANNOT_CONNECT


class KvpbaseTimeout(KvpbaseNetworkException):
    pass


class KvpbaseProtocolError(KvpbaseNetworkException):
    pass


class DeadlineReached(KvpbaseException):
    """
    Special exception to be raised when a deadline is reached.
    This differs from the `KvpbaseTimeout` in that the caller asked
    for the operation to be abandoned.
    """

    def __str__(self):
        if not self.args:
            return "Deadline reached"
        return super().__str__()


class StatusMessageException(KvpbaseException):
    """
    Error carrying an HTTP status, a message and the raw response body.
    """

    def __init__(self, http_status, message=None, body=None):
        self.http_status = http_status
        self.message = message or "n/a"
        self.body = body
        super().__init__(self.message)

    def __str__(self):
        return f"{self.message} (HTTP {self.http_status})"


class ClientException(StatusMessageException):
    pass


class BadRequest(ClientException):
    """
    Request is not correct.
    """

    exc_type = ExceptionType.BAD_REQUEST

    def __init__(self, http_status=400, message=None, body=None):
        super().__init__(http_status, message, body)


class Unauthorized(ClientException):
    """Credentials are missing or have been rejected."""

    exc_type = ExceptionType.UNAUTHORIZED

    def __init__(self, http_status=401, message=None, body=None):
        super().__init__(http_status, message, body)


class NotFound(ClientException):
    """Resource was not found."""

    exc_type = ExceptionType.NOT_FOUND

    def __init__(self, http_status=404, message=None, body=None):
        super().__init__(http_status, message, body)


class NoSuchContainer(NotFound):
    pass


class NoSuchObject(NotFound):
    pass


class Conflict(ClientException):
    exc_type = ExceptionType.CONFLICT

    def __init__(self, http_status=409, message=None, body=None):
        super().__init__(http_status, message, body)


class ServerException(StatusMessageException):
    pass


class InternalServerError(ServerException):
    """The service failed to process the request (HTTP 5xx)."""

    exc_type = ExceptionType.INTERNAL_SERVER_ERROR

    def __init__(self, http_status=500, message=None, body=None):
        super().__init__(http_status, message, body)


_http_status_map = {
    400: BadRequest,
    401: Unauthorized,
    404: NotFound,
    409: Conflict,
}


def _exception_class(http_status):
    if http_status >= 500:
        return InternalServerError
    return _http_status_map.get(http_status, ClientException)


def error_type_from_status(http_status):
    """
    Get the `ExceptionType` matching an HTTP status,
    or None if the status does not denote an error.
    """
    if http_status < 400:
        return None
    return _exception_class(http_status).exc_type


def _message_from_body(body):
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return None
        try:
            body = json_loads(body)
        except ValueError:
            return body
    if isinstance(body, dict):
        return body.get("message") or body.get("Message")
    if isinstance(body, str):
        return body
    return None


def from_response(resp, body=None):
    """
    Build an exception from an HTTP response.
    The raw body is kept in the `body` attribute.
    """
    http_status = resp.status
    cls = _exception_class(http_status)
    if body:
        message = _message_from_body(body) or resp.reason
        return cls(http_status, message, body)
    return cls(http_status, resp.reason)


def reraise(exc_type, exc_value, extra_message=None):
    """
    Raise an exception of type `exc_type` with arguments of `exc_value`
    plus maybe `extra_message` at the beginning.
    """
    args = exc_value.args
    if isinstance(exc_value, StatusMessageException):
        args = (exc_value.message,) + args
    if extra_message:
        args = (extra_message,) + args
    raise exc_type(*args) from exc_value
