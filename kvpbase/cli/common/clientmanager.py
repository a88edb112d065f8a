# Copyright (C) 2024-2025 OVH SAS
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from logging import getLevelName, getLogger

from kvpbase.common.exceptions import CommandError

LOG = getLogger(__name__)

CREDENTIAL_KEYS = ("api_key", "email", "password")


class ClientManager(object):
    """
    kvpbase command line god object.

    Holds the options of the shell, and lazily builds the API client.
    Options not set on the command line (or in the environment)
    are looked up in the configuration profile.
    """

    def __init__(self, options):
        self._options = options
        self._profile_conf = None
        self._storage = None
        self._pool_manager = None
        self._logger = None

        LOG.setLevel(getLogger("").getEffectiveLevel())
        LOG.debug(
            "Using parameters %s",
            {k: v for k, v in self._options.items() if k not in CREDENTIAL_KEYS},
        )
        self._options["log_level"] = getLevelName(LOG.getEffectiveLevel())

    @property
    def profile_conf(self):
        """Dict holding what's in local configuration files."""
        if self._profile_conf is None:
            from kvpbase.common.configuration import (
                DEFAULT_PROFILE,
                load_profile_conf,
            )

            profile = self._options.get("profile") or DEFAULT_PROFILE
            self._profile_conf = load_profile_conf(
                profile, failsafe=not self._options.get("profile")
            )
        return self._profile_conf

    def _get_option(self, key):
        return self._options.get(key) or self.profile_conf.get(key)

    @property
    def user_guid(self):
        """Identifier of the user set on the CLI, environment or profile."""
        user_guid = self._get_option("user_guid")
        if not user_guid:
            msg = "Set a user GUID with --user-guid, KVPBASE_USER_GUID\n"
            raise CommandError("Missing parameter: \n%s" % msg)
        return user_guid

    @property
    def endpoint(self):
        endpoint = self._get_option("endpoint")
        if not endpoint:
            msg = "Set an endpoint with --endpoint, KVPBASE_ENDPOINT\n"
            raise CommandError("Missing parameter: \n%s" % msg)
        return endpoint

    @property
    def buffer_size(self):
        """Buffer size set on the CLI, or None."""
        return self._options.get("buffer_size")

    @property
    def logger(self):
        if self._logger is None:
            from kvpbase.common.logger import get_logger

            self._logger = get_logger(self._options, "kvpbase")
        return self._logger

    @property
    def pool_manager(self):
        if self._pool_manager is None:
            from kvpbase.common.http_urllib3 import get_pool_manager

            ignore_tls_errors = self.client_kwargs().get("ignore_tls_errors", True)
            self._pool_manager = get_pool_manager(ignore_tls_errors=ignore_tls_errors)
        return self._pool_manager

    def client_kwargs(self, **overrides):
        """
        Build the keyword arguments of `ObjectStorageApi`, from the
        profile first, then from the command line.
        """
        from kvpbase.common.configuration import client_kwargs_from_conf

        kwargs = client_kwargs_from_conf(self.profile_conf)
        if any(self._options.get(key) for key in CREDENTIAL_KEYS):
            for key in CREDENTIAL_KEYS:
                kwargs.pop(key, None)
                if self._options.get(key):
                    kwargs[key] = self._options[key]
        for key in ("endpoint", "user_guid"):
            kwargs.pop(key, None)
        if self._options.get("verify_tls"):
            kwargs["ignore_tls_errors"] = False
        if self.buffer_size:
            kwargs["upload_buffer_size"] = self.buffer_size
            kwargs["download_buffer_size"] = self.buffer_size
        kwargs.update(overrides)
        return kwargs

    def make_storage(self, **overrides):
        """
        Get a new instance of ObjectStorageApi, sharing the pool manager
        of the other instances.
        """
        from kvpbase.api.object_storage import ObjectStorageApi

        return ObjectStorageApi(
            self.user_guid,
            self.endpoint,
            logger=self.logger,
            pool_manager=self.pool_manager,
            **self.client_kwargs(**overrides),
        )

    @property
    def storage(self):
        """
        Get an instance of ObjectStorageApi.
        """
        if self._storage is None:
            self._storage = self.make_storage()
        return self._storage
