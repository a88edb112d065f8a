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
from io import BytesIO

from mock import patch

from kvpbase.common.exceptions import DeadlineReached
from kvpbase.common.utils import (
    check_name,
    deadline_to_timeout,
    ensure_trailing_slash,
    iter_chunks,
    quote_key,
    quote_path,
    tags_to_csv,
    timeout_to_deadline,
)


class TestUtils(unittest.TestCase):
    def test_ensure_trailing_slash(self):
        self.assertEqual("http://host:8000/", ensure_trailing_slash("http://host:8000"))
        self.assertEqual(
            "http://host:8000/", ensure_trailing_slash("http://host:8000/")
        )
        self.assertRaises(ValueError, ensure_trailing_slash, "")

    def test_check_name(self):
        self.assertEqual("bucket", check_name("bucket"))
        self.assertRaises(ValueError, check_name, "")
        self.assertRaises(ValueError, check_name, None)
        self.assertRaises(ValueError, check_name, 42, "container")

    def test_quote_path(self):
        self.assertEqual("user/bucket/key", quote_path("user", "bucket", "key"))
        self.assertEqual(
            "user/bucket/dir%2Fmy%20file%3F", quote_path("user", "bucket", "dir/my file?")
        )
        self.assertEqual("user/%C3%A9t%C3%A9", quote_path("user", "été"))

    def test_quote_key(self):
        self.assertEqual("dir/my%20file%3F", quote_key("dir/my file?"))
        self.assertEqual("a/b/%C3%A9t%C3%A9%25", quote_key("a/b/été%"))

    def test_tags_to_csv(self):
        self.assertEqual("a,b,c", tags_to_csv(["a", "b", "c"]))
        self.assertEqual("", tags_to_csv([]))
        self.assertEqual("a,b", tags_to_csv("a,b"))

    def test_iter_chunks(self):
        chunks = list(iter_chunks(BytesIO(b"abcdefghij"), 4))
        self.assertEqual([b"abcd", b"efgh", b"ij"], chunks)
        self.assertEqual([], list(iter_chunks(BytesIO(b""), 4)))

    def test_deadline_to_timeout(self):
        with patch("kvpbase.common.utils.monotonic_time", return_value=100.0):
            self.assertEqual(5.0, deadline_to_timeout(105.0))
            self.assertEqual(-1.0, deadline_to_timeout(99.0))
            self.assertRaises(DeadlineReached, deadline_to_timeout, 99.0, True)
            self.assertRaises(DeadlineReached, deadline_to_timeout, 100.0, True)
            self.assertEqual(110.0, timeout_to_deadline(10.0))
        self.assertEqual(12.5, timeout_to_deadline(2.5, now=10.0))
