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

"""Service-wide commands"""

from logging import getLogger

from kvpbase.cli import ShowOne


class PingService(ShowOne):
    """Check that the storage service answers"""

    log = getLogger(__name__ + ".PingService")

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        storage = self.app.client_manager.storage
        reachable = storage.verify_connectivity()
        self.success = reachable
        return ("Endpoint", "Reachable"), (storage.endpoint, reachable)


class ShowToken(ShowOne):
    """Get an authentication token from the storage service"""

    log = getLogger(__name__ + ".ShowToken")

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        token = self.app.client_manager.storage.authenticate()
        self.success = token is not None
        return ("Token",), (token,)
