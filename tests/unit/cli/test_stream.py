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

import os
import shutil
import tempfile

from kvpbase.cli.stream.stream import StreamDownload, StreamGet, StreamPut, StreamUpload
from kvpbase.common.exceptions import CommandError, PreconditionFailed
from tests.unit.api import make_api
from tests.unit.cli import CliTestCase


class StreamCommandsTest(CliTestCase):
    def setUp(self):
        super().setUp()
        self.api = make_api(self.server, upload_buffer_size=3, download_buffer_size=3)
        self.app.client_manager.storage = self.api
        self.api.container_create("bucket")
        self.tmpdir = tempfile.mkdtemp()
        self.local = os.path.join(self.tmpdir, "local.bin")

    def tearDown(self):
        super().tearDown()
        shutil.rmtree(self.tmpdir)

    def _write_local(self, data):
        with open(self.local, "wb") as out:
            out.write(data)

    def _read_local(self, path=None):
        with open(path or self.local, "rb") as source:
            return source.read()

    def test_upload_download(self):
        self._write_local(b"0123456789")
        _cmd, (columns, data) = self.take_action(
            StreamUpload, "bucket", "remote.bin", self.local
        )
        self.assertEqual(10, dict(zip(columns, data))["ContentLength"])
        self.assertEqual(3, len(self.server.requested("PUT")))

        dest = os.path.join(self.tmpdir, "copy.bin")
        _cmd, (_columns, data) = self.take_action(
            StreamDownload, "bucket", "remote.bin", dest
        )
        self.assertEqual((dest, 10), data)
        self.assertEqual(b"0123456789", self._read_local(dest))

    def test_upload_missing_file(self):
        self.assertRaises(
            CommandError, self.take_action, StreamUpload, "bucket", "x", self.local
        )

    def test_upload_existing_object(self):
        self.api.object_create("bucket", "remote.bin", b"old")
        self._write_local(b"new")
        self.assertRaises(
            PreconditionFailed,
            self.take_action,
            StreamUpload,
            "bucket",
            "remote.bin",
            self.local,
        )

    def test_download_existing_file(self):
        self.api.object_create("bucket", "remote.bin", b"data")
        self._write_local(b"precious")
        self.assertRaises(
            CommandError,
            self.take_action,
            StreamDownload,
            "bucket",
            "remote.bin",
            self.local,
        )
        self.assertEqual(b"precious", self._read_local())

    def test_download_missing_container(self):
        dest = os.path.join(self.tmpdir, "copy.bin")
        self.assertRaises(
            PreconditionFailed,
            self.take_action,
            StreamDownload,
            "nobucket",
            "remote.bin",
            dest,
        )
        self.assertFalse(os.path.exists(dest))

    def test_download_missing_object(self):
        dest = os.path.join(self.tmpdir, "copy.bin")
        self.assertRaises(
            PreconditionFailed,
            self.take_action,
            StreamDownload,
            "bucket",
            "missing",
            dest,
        )
        self.assertFalse(os.path.exists(dest))
        self.assertEqual([], self.server.requested("GET"))

    def test_put_get(self):
        self._write_local(b"abcdefghij")
        self.app.client_manager.buffer_size = 4
        self.take_action(StreamPut, "bucket", "remote.bin", self.local)
        obj = self.server.containers["bucket"].objects["remote.bin"]
        self.assertEqual(b"abcdefghij", bytes(obj.data))
        self.assertTrue(self.server.requested("PUT")[-1].endswith("?index=8"))

        self._write_local(b"XY")
        self.take_action(
            StreamPut, "bucket", "remote.bin", self.local, "--offset", "2"
        )
        self.assertEqual(b"abXYefghij", bytes(obj.data))

        dest = os.path.join(self.tmpdir, "copy.bin")
        _cmd, (_columns, data) = self.take_action(
            StreamGet, "bucket", "remote.bin", dest, "--offset", "6"
        )
        self.assertEqual((dest, 4), data)
        self.assertEqual(b"ghij", self._read_local(dest))

    def test_get_missing_object(self):
        dest = os.path.join(self.tmpdir, "copy.bin")
        self.assertRaises(
            CommandError, self.take_action, StreamGet, "bucket", "missing", dest
        )
        self.assertFalse(self.api.object_exists("bucket", "missing"))
        self.assertFalse(os.path.exists(dest))
