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

"""Command-line interface to the Kvpbase storage service"""

import logging
import sys

from cliff.app import App
from cliff.commandmanager import CommandManager

from kvpbase import __version__ as kvpbase_version
from kvpbase.cli import add_common_parser_options
from kvpbase.cli.common.clientmanager import ClientManager

LOG = logging.getLogger(__name__)

GROUP_LIST = ["service", "container", "object", "stream"]


class KvpbaseShell(App):
    """
    Launched without command, the shell runs in interactive mode:
    commands are read one by one from the prompt.
    """

    def __init__(self):
        super().__init__(
            description=__doc__.strip() if __doc__ else None,
            version=kvpbase_version,
            command_manager=CommandManager("kvpbase.cli"),
            deferred_help=True,
        )
        self.client_manager = None

    def configure_logging(self):
        super().configure_logging()

        root_logger = logging.getLogger("")

        if self.options.verbose_level == 0:
            root_logger.setLevel(logging.ERROR)
        elif self.options.verbose_level == 1:
            root_logger.setLevel(logging.WARNING)
        elif self.options.verbose_level == 2:
            root_logger.setLevel(logging.INFO)
        elif self.options.verbose_level >= 3:
            root_logger.setLevel(logging.DEBUG)

        urllib3_log = logging.getLogger("urllib3")

        if self.options.debug:
            urllib3_log.setLevel(logging.DEBUG)
        else:
            urllib3_log.setLevel(logging.WARNING)

        cliff_log = logging.getLogger("cliff")
        cliff_log.setLevel(logging.ERROR)

        stevedore_log = logging.getLogger("stevedore")
        stevedore_log.setLevel(logging.ERROR)

    def build_option_parser(self, description, version):
        parser = super().build_option_parser(description, version)
        add_common_parser_options(parser)
        return parser

    def initialize_app(self, argv):
        super().initialize_app(argv)

        for group in GROUP_LIST:
            cmd_group = "kvpbase.%s" % group
            self.command_manager.add_command_group(cmd_group)
            LOG.debug("%s API: cmd group %s", group, cmd_group)

        self.print_help_if_requested()

        options = {
            "endpoint": self.options.endpoint,
            "user_guid": self.options.user_guid,
            "api_key": self.options.api_key,
            "email": self.options.email,
            "password": self.options.password,
            "profile": self.options.profile,
            "verify_tls": self.options.verify_tls,
            "buffer_size": self.options.buffer_size,
            "log_level": logging.getLevelName(
                logging.getLogger("").getEffectiveLevel()
            ),
        }
        self.client_manager = ClientManager(options)

    def prepare_to_run_command(self, cmd):
        LOG.debug(
            "command: %s -> %s.%s",
            getattr(cmd, "cmd_name", "<none>"),
            cmd.__class__.__module__,
            cmd.__class__.__name__,
        )

    def clean_up(self, cmd, result, err):
        LOG.debug("clean up %s: %s", cmd.__class__.__name__, err or "")


def main(argv=sys.argv[1:]):
    return KvpbaseShell().run(argv)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
