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

import unittest

from mock import MagicMock as Mock

from kvpbase.common.client import StorageClient
from kvpbase.common.credentials import EmailPasswordCredentials
from kvpbase.common.exceptions import ConfigurationException
from tests.unit.api import fake_response


class TestStorageClient(unittest.TestCase):
    def setUp(self):
        self.pool_manager = Mock()
        self.pool_manager.request.return_value = fake_response(200)
        self.conf = {
            "user_guid": "default",
            "endpoint": "http://1.2.3.4:8000",
            "api_key": "secret",
        }

    def test_init(self):
        client = StorageClient(self.conf, pool_manager=self.pool_manager)
        self.assertEqual("http://1.2.3.4:8000/", client.endpoint)
        self.assertEqual("default", client.user_guid)
        self.assertEqual("kvpbase", client.service_type)

    def test_init_incomplete(self):
        del self.conf["endpoint"]
        self.assertRaises(
            ConfigurationException,
            StorageClient,
            self.conf,
            pool_manager=self.pool_manager,
        )
        self.assertRaises(
            ConfigurationException,
            StorageClient,
            {"user_guid": "default", "endpoint": "http://1.2.3.4:8000/"},
            pool_manager=self.pool_manager,
        )

    def test_uris(self):
        client = StorageClient(self.conf, pool_manager=self.pool_manager)
        self.assertEqual("http://1.2.3.4:8000/default", client._make_uri())
        self.assertEqual(
            "http://1.2.3.4:8000/default/my%20bucket",
            client._container_uri("my bucket"),
        )
        self.assertEqual(
            "http://1.2.3.4:8000/default/bucket/dir/key",
            client._object_uri("bucket", "dir/key"),
        )
        self.assertRaises(ValueError, client._object_uri, "bucket", "")

    def test_auth_headers(self):
        client = StorageClient(self.conf, pool_manager=self.pool_manager)
        client._direct_request("GET", client._make_uri(), headers={"X-Extra": 1})
        _args, kwargs = self.pool_manager.request.call_args
        self.assertEqual("secret", kwargs["headers"]["x-api-key"])
        self.assertEqual("1", kwargs["headers"]["X-Extra"])

    def test_explicit_credentials(self):
        creds = EmailPasswordCredentials("me@example.com", "pw")
        client = StorageClient(
            self.conf,
            endpoint="http://5.6.7.8:8000/",
            credentials=creds,
            pool_manager=self.pool_manager,
        )
        self.assertEqual("http://5.6.7.8:8000/", client.endpoint)
        client._direct_request("HEAD", client._container_uri("bucket"))
        _args, kwargs = self.pool_manager.request.call_args
        self.assertEqual("me@example.com", kwargs["headers"]["x-email"])
        self.assertEqual("pw", kwargs["headers"]["x-password"])
        self.assertNotIn("x-api-key", kwargs["headers"])
