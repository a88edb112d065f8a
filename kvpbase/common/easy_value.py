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


def int_value(value, default):
    """
    Cast an object to an integer.

    Return the default if the object is None or the empty string.
    """
    if value in (None, "None", ""):
        return default
    return int(value)


def float_value(value, default):
    """
    Cast an object to a float.

    Return the default if the object is None or the empty string.
    """
    if value in (None, "None", ""):
        return default
    return float(value)


TRUE_VALUES = set(("true", "1", "yes", "on", "t", "y"))
FALSE_VALUES = set(("false", "0", "no", "off", "f", "n"))


def boolean_value(value, default=False):
    """
    Make a boolean value from an object.

    If the object is None or an empty string, return the default value.
    If the object does not look like something "boolean", raise ValueError.
    """
    if value in (None, "None", ""):
        return default
    value = str(value).lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValueError("Boolean value expected")


def csv_value(value):
    """
    Make a list of strings from a comma-separated string.

    Lists and tuples are returned as lists, None gives an empty list.
    """
    if value in (None, ""):
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [v.strip() for v in str(value).split(",") if v.strip()]
