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
from io import StringIO

from mock import MagicMock as Mock

from tests.unit.api import FakeStorageServer, make_api


class CliTestCase(unittest.TestCase):
    """Run commands against a fake storage service."""

    def setUp(self):
        super().setUp()
        self.server = FakeStorageServer()
        self.api = make_api(self.server)
        self.app = Mock()
        self.app.client_manager.storage = self.api
        self.app.client_manager.buffer_size = None
        self.app.stdout = StringIO()

    def parse(self, cls, *argv):
        cmd = cls(self.app, None)
        parser = cmd.get_parser("kvpbase")
        return cmd, parser.parse_args(list(argv))

    def take_action(self, cls, *argv):
        cmd, parsed_args = self.parse(cls, *argv)
        return cmd, cmd.take_action(parsed_args)

    def run_command(self, cls, *argv):
        cmd, parsed_args = self.parse(cls, *argv)
        return cmd.run(parsed_args)
