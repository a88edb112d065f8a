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

import logging
import unittest
from io import StringIO
from logging.handlers import SysLogHandler

from mock import patch

from kvpbase.common.logger import get_logger
from tests.utils import random_str


class TestLogger(unittest.TestCase):
    def test_get_logger(self):
        sio = StringIO()
        name = "test-" + random_str(6)
        logger = logging.getLogger(name)
        logger.addHandler(logging.StreamHandler(sio))
        logger = get_logger(None, name)
        logger.warning("msg1")
        self.assertEqual(sio.getvalue(), "msg1\n")
        logger.debug("msg2")
        self.assertEqual(sio.getvalue(), "msg1\n")
        conf = {"log_level": "DEBUG"}
        logger = get_logger(conf, name)
        logger.debug("msg3")
        self.assertEqual(sio.getvalue(), "msg1\nmsg3\n")

    def test_get_logger_no_syslog_by_default(self):
        logger = get_logger({}, "test-" + random_str(6))
        self.assertFalse(
            [h for h in logger.handlers if isinstance(h, SysLogHandler)]
        )
        self.assertTrue(logger.propagate)

    def test_get_logger_udp_syslog(self):
        name = "test-" + random_str(6)
        conf = {"log_udp_host": "127.0.0.1", "log_udp_port": "5140"}
        logger = get_logger(conf, name)
        handlers = [h for h in logger.handlers if isinstance(h, SysLogHandler)]
        self.assertEqual(1, len(handlers))
        self.assertEqual(("127.0.0.1", 5140), handlers[0].address)
        self.assertFalse(logger.propagate)
        # A second call replaces the handler
        logger = get_logger(conf, name)
        handlers = [h for h in logger.handlers if isinstance(h, SysLogHandler)]
        self.assertEqual(1, len(handlers))
        for handler in handlers:
            logger.removeHandler(handler)
            handler.close()

    def test_get_logger_verbose(self):
        sio = StringIO()
        name = "test-" + random_str(6)
        with patch("sys.__stderr__", sio):
            logger = get_logger({"log_format": "%(message)s"}, name, verbose=True)
        logger.info("hello")
        self.assertTrue(sio.getvalue().endswith(" hello\n"))
        self.assertFalse(logger.propagate)
