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


import json

import importlib_resources
from jsonschema import ValidationError, validate

from kvpbase.common.exceptions import KvpbaseException


class SchemaNotFound(KvpbaseException):
    pass


class SchemaValidationError(KvpbaseException):
    pass


class SchemaRegistry:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(SchemaRegistry, cls).__new__(cls)
            cls._instance.__cache = {}
        return cls._instance

    def validate(self, schema_name, data):
        schema = self.get(schema_name)
        try:
            validate(instance=data, schema=schema)
        except ValidationError as exc:
            raise SchemaValidationError(
                f"Error during schema validation: {exc.message}"
            ) from exc

    def get(self, schema_name):
        if schema_name in self.__cache:
            return self.__cache[schema_name]
        _schema_name = schema_name
        if not _schema_name.endswith(".schema.json"):
            _schema_name += ".schema.json"
        ref = importlib_resources.files("kvpbase.common") / "schemas" / _schema_name
        try:
            data = json.loads(ref.read_text(encoding="utf-8"))
        except OSError as exc:
            raise SchemaNotFound(f"Schema '{schema_name}' not found") from exc
        self.__cache[schema_name] = data
        return data
