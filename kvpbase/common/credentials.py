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

"""Credentials sent along with every request to the storage service."""

from kvpbase.common.constants import API_KEY_HEADER, EMAIL_HEADER, PASSWORD_HEADER
from kvpbase.common.exceptions import ConfigurationException


class Credentials(object):
    """Base class of the supported authentication modes."""

    def headers(self):
        """Get the authentication headers, as a new dictionary."""
        raise NotImplementedError


class ApiKeyCredentials(Credentials):
    def __init__(self, api_key):
        if not api_key:
            raise ConfigurationException("API key must not be empty")
        self.api_key = api_key

    def headers(self):
        return {API_KEY_HEADER: self.api_key}

    def __repr__(self):
        return f"{self.__class__.__name__}(api_key=***)"

    def __eq__(self, other):
        return isinstance(other, ApiKeyCredentials) and other.api_key == self.api_key


class EmailPasswordCredentials(Credentials):
    def __init__(self, email, password):
        if not email or not password:
            raise ConfigurationException("Email and password must not be empty")
        self.email = email
        self.password = password

    def headers(self):
        return {EMAIL_HEADER: self.email, PASSWORD_HEADER: self.password}

    def __repr__(self):
        return f"{self.__class__.__name__}(email={self.email!r}, password=***)"

    def __eq__(self, other):
        return (
            isinstance(other, EmailPasswordCredentials)
            and other.email == self.email
            and other.password == self.password
        )


def credentials_from_conf(conf):
    """
    Build credentials from a configuration dictionary.
    Exactly one of `api_key` or (`email`, `password`) must be set.

    :raises ConfigurationException: if no authentication mode,
        or both, are configured.
    """
    api_key = conf.get("api_key")
    email = conf.get("email")
    password = conf.get("password")
    if api_key and (email or password):
        raise ConfigurationException(
            "Configure either an API key or an email and password, not both"
        )
    if api_key:
        return ApiKeyCredentials(api_key)
    if email or password:
        return EmailPasswordCredentials(email, password)
    raise ConfigurationException(
        "No credentials: configure an API key or an email and password"
    )
