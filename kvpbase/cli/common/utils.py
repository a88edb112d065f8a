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

from argparse import Action

from kvpbase.common.timestamp import to_isoformat


class KeyValueAction(Action):
    def __call__(self, parser, namespace, values, option_string=None):
        if getattr(namespace, self.dest, None) is None:
            setattr(namespace, self.dest, {})

        if "=" in values:
            getattr(namespace, self.dest, {}).update([values.split("=", 1)])
        else:
            getattr(namespace, self.dest, {}).pop(values, None)


def format_date(value):
    if value is None:
        return None
    return to_isoformat(value)


def flat_dict_from_model(model):
    """
    Make a flat dictionary from a data transfer object,
    with dates and enums converted to strings.
    """
    out = {}
    for key, value in model.to_dict().items():
        if isinstance(value, list):
            value = ",".join(str(v) for v in value)
        out[key] = value
    return out
