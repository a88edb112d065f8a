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

"""Container-related commands"""

from logging import getLogger

from kvpbase.api.models import EnumerationFilter
from kvpbase.cli import Command, Lister, ShowOne
from kvpbase.cli.common.utils import KeyValueAction, flat_dict_from_model, format_date
from kvpbase.common.easy_value import boolean_value
from kvpbase.common.exceptions import Conflict, NotFound
from kvpbase.common.timestamp import to_datetime


class ContainerCommandMixin(object):
    """Command taking a container name as parameter"""

    def patch_parser_container(self, parser):
        parser.add_argument(
            "container",
            metavar="<container>",
            help="Name of the container to interact with.",
        )


class ContainersCommandMixin(object):
    """Command taking some container names as parameter"""

    def patch_parser_container(self, parser):
        parser.add_argument(
            "containers",
            metavar="<container>",
            nargs="+",
            help="Names of the containers to interact with.",
        )


class ListContainer(Lister):
    """List the containers of the user"""

    log = getLogger(__name__ + ".ListContainer")

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        names = self.app.client_manager.storage.container_list()
        return ("Name",), ((name,) for name in names)


class CreateContainer(ContainersCommandMixin, Lister):
    """Create containers"""

    log = getLogger(__name__ + ".CreateContainer")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        parser.add_argument(
            "--public-read",
            metavar="<bool>",
            type=boolean_value,
            default=True,
            help="Let anybody read the objects (default: yes).",
        )
        parser.add_argument(
            "--public-write",
            metavar="<bool>",
            type=boolean_value,
            default=False,
            help="Let anybody write objects (default: no).",
        )
        parser.add_argument(
            "--audit-logging",
            metavar="<bool>",
            type=boolean_value,
            default=False,
            help="Keep track of the operations (default: no).",
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        results = []
        for container in parsed_args.containers:
            try:
                self.app.client_manager.storage.container_create(
                    container,
                    public_read=parsed_args.public_read,
                    public_write=parsed_args.public_write,
                    audit_logging=parsed_args.audit_logging,
                )
                results.append((container, True))
            except Conflict:
                self.success = False
                results.append((container, False))
        return ("Name", "Created"), results


class ShowContainer(ContainerCommandMixin, ShowOne):
    """Show the settings of a container"""

    log = getLogger(__name__ + ".ShowContainer")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        settings = self.app.client_manager.storage.container_get_settings(
            parsed_args.container
        )
        info = flat_dict_from_model(settings)
        return list(zip(*sorted(info.items())))


class SetContainer(ContainerCommandMixin, Command):
    """Update the settings or the key-value pairs of a container"""

    log = getLogger(__name__ + ".SetContainer")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        parser.add_argument(
            "--public-read",
            metavar="<bool>",
            type=boolean_value,
            help="Let anybody read the objects.",
        )
        parser.add_argument(
            "--public-write",
            metavar="<bool>",
            type=boolean_value,
            help="Let anybody write objects.",
        )
        parser.add_argument(
            "--audit-logging",
            metavar="<bool>",
            type=boolean_value,
            help="Keep track of the operations.",
        )
        parser.add_argument(
            "--property",
            metavar="<key=value>",
            action=KeyValueAction,
            help="Key-value pair to add/update for the container.",
        )
        parser.add_argument(
            "--clear",
            default=False,
            action="store_true",
            help="Clear previous key-value pairs.",
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        storage = self.app.client_manager.storage
        container = parsed_args.container

        changes = {
            "is_public_read": parsed_args.public_read,
            "is_public_write": parsed_args.public_write,
            "enable_audit_logging": parsed_args.audit_logging,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        if changes:
            settings = storage.container_get_settings(container)
            for key, value in changes.items():
                setattr(settings, key, value)
            storage.container_update_settings(container, settings)

        if parsed_args.property or parsed_args.clear:
            properties = {}
            if not parsed_args.clear:
                properties = storage.container_get_properties(container)
            properties.update(parsed_args.property or {})
            storage.container_set_properties(container, properties)


class ShowContainerKeys(ContainerCommandMixin, ShowOne):
    """Show the key-value pairs of a container"""

    log = getLogger(__name__ + ".ShowContainerKeys")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        properties = self.app.client_manager.storage.container_get_properties(
            parsed_args.container
        )
        return list(zip(*sorted(properties.items()))) or ((), ())


class EnumerateContainer(ContainerCommandMixin, Lister):
    """Enumerate the objects of a container"""

    log = getLogger(__name__ + ".EnumerateContainer")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        parser.add_argument(
            "--start-index", metavar="<n>", type=int, help="Index of the first object."
        )
        parser.add_argument(
            "--max-results", metavar="<n>", type=int, help="Maximum number of objects."
        )
        parser.add_argument("--prefix", metavar="<prefix>", help="Key prefix.")
        parser.add_argument("--md5", metavar="<md5>", help="MD5 of the content.")
        parser.add_argument(
            "--content-type", metavar="<content-type>", help="Content type."
        )
        parser.add_argument(
            "--size-min", metavar="<bytes>", type=int, help="Minimum size."
        )
        parser.add_argument(
            "--size-max", metavar="<bytes>", type=int, help="Maximum size."
        )
        parser.add_argument(
            "--tag",
            metavar="<tag>",
            dest="tags",
            action="append",
            help="Tag the objects must have (may be repeated).",
        )
        parser.add_argument(
            "--property",
            metavar="<key=value>",
            action=KeyValueAction,
            help="Key-value pair the objects must have (may be repeated).",
        )
        for field in (
            "created-before",
            "created-after",
            "updated-before",
            "updated-after",
            "last-access-before",
            "last-access-after",
        ):
            parser.add_argument(
                "--" + field,
                metavar="<date>",
                type=to_datetime,
                help="ISO 8601 date (UTC if no offset).",
            )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        filters = EnumerationFilter(
            created_before=parsed_args.created_before,
            created_after=parsed_args.created_after,
            updated_before=parsed_args.updated_before,
            updated_after=parsed_args.updated_after,
            last_access_before=parsed_args.last_access_before,
            last_access_after=parsed_args.last_access_after,
            prefix=parsed_args.prefix,
            md5=parsed_args.md5,
            content_type=parsed_args.content_type,
            size_min=parsed_args.size_min,
            size_max=parsed_args.size_max,
            tags=parsed_args.tags,
            key_value_pairs=parsed_args.property,
        )
        result = self.app.client_manager.storage.container_enumerate(
            parsed_args.container,
            start_index=parsed_args.start_index,
            max_results=parsed_args.max_results,
            filters=filters if filters.to_dict() else None,
        )
        columns = ("Key", "Size", "Content-Type", "Md5", "Last-Update")
        rows = (
            (
                obj.object_key,
                obj.content_length,
                obj.content_type,
                obj.md5,
                format_date(obj.last_update_utc),
            )
            for obj in result.objects
        )
        return columns, rows


class ShowContainerAuditLog(ContainerCommandMixin, Lister):
    """Show the audit log of a container"""

    log = getLogger(__name__ + ".ShowContainerAuditLog")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        entries = self.app.client_manager.storage.container_audit_log(
            parsed_args.container
        )
        columns = ("Created", "Action", "Object", "Metadata")
        rows = (
            (
                format_date(entry.created_utc),
                entry.action.value if entry.action else None,
                entry.object_guid,
                entry.metadata,
            )
            for entry in entries
        )
        return columns, rows


class DeleteContainer(ContainersCommandMixin, Lister):
    """Delete containers"""

    log = getLogger(__name__ + ".DeleteContainer")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        results = []
        for container in parsed_args.containers:
            try:
                self.app.client_manager.storage.container_delete(container)
                results.append((container, True))
            except NotFound:
                self.success = False
                results.append((container, False))
        return ("Name", "Deleted"), results


class ContainerExists(ContainerCommandMixin, ShowOne):
    """Tell if a container exists"""

    log = getLogger(__name__ + ".ContainerExists")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser_container(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        exists = self.app.client_manager.storage.container_exists(
            parsed_args.container
        )
        self.success = exists
        return ("Container", "Exists"), (parsed_args.container, exists)
