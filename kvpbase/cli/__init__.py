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

import os

from cliff import command, lister, show

DEFAULT_STREAM_BUFFER_SIZE = 4096


def add_common_parser_options(parser):
    """
    Add optional parameters common to all kvpbase commands to parser.
    """
    parser.add_argument(
        "--endpoint",
        metavar="<url>",
        dest="endpoint",
        default=os.environ.get("KVPBASE_ENDPOINT", ""),
        help="URL of the storage service (Env: KVPBASE_ENDPOINT).",
    )
    parser.add_argument(
        "--user-guid",
        "--user",
        metavar="<user-guid>",
        dest="user_guid",
        default=os.environ.get("KVPBASE_USER_GUID", ""),
        help="Identifier of the user owning the containers "
        "(Env: KVPBASE_USER_GUID).",
    )
    parser.add_argument(
        "--api-key",
        metavar="<api-key>",
        dest="api_key",
        default=os.environ.get("KVPBASE_API_KEY", ""),
        help="API key to authenticate with (Env: KVPBASE_API_KEY).",
    )
    parser.add_argument(
        "--email",
        metavar="<email>",
        dest="email",
        default=os.environ.get("KVPBASE_EMAIL", ""),
        help="Email to authenticate with, along with a password "
        "(Env: KVPBASE_EMAIL).",
    )
    parser.add_argument(
        "--password",
        metavar="<password>",
        dest="password",
        default=os.environ.get("KVPBASE_PASSWORD", ""),
        help="Password to authenticate with (Env: KVPBASE_PASSWORD).",
    )
    parser.add_argument(
        "--profile",
        metavar="<profile>",
        dest="profile",
        default=os.environ.get("KVPBASE_PROFILE", ""),
        help="Section of the configuration files to load default "
        "values from (Env: KVPBASE_PROFILE).",
    )
    parser.add_argument(
        "--verify-tls",
        dest="verify_tls",
        action="store_true",
        help="Verify the certificate of the storage service.",
    )
    parser.add_argument(
        "--buffer-size",
        metavar="<bytes>",
        dest="buffer_size",
        type=int,
        help="Size of the chunks sent or received by uploads and downloads.",
    )


class Command(command.Command):
    """
    Wraps cliff's command.Command and sets the process' return code
    according to the class' "success" field.
    """

    success = True

    def run(self, parsed_args):
        return_code = super().run(parsed_args)
        if return_code == 0:
            return_code = int(not self.success)
        return return_code


class Lister(lister.Lister):
    """
    Wraps cliff's lister.Lister and sets the process' return code
    according to the class' "success" field.
    """

    success = True

    def run(self, parsed_args):
        super().run(parsed_args)
        return int(not self.success)


class ShowOne(show.ShowOne):
    """
    Wraps cliff's show.ShowOne and sets the process' return code
    according to the class' "success" field.
    """

    success = True

    def run(self, parsed_args):
        super().run(parsed_args)
        return int(not self.success)
