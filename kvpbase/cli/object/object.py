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

"""Object-related commands"""

import os
from logging import getLogger

from kvpbase.cli import Command, Lister, ShowOne
from kvpbase.cli.common.utils import KeyValueAction, flat_dict_from_model
from kvpbase.common.exceptions import NotFound


class ContainerCommandMixin(object):
    """Command taking a container name as parameter"""

    def patch_parser(self, parser):
        parser.add_argument(
            "container",
            metavar="<container>",
            help="Name of the container to interact with.",
        )


class ObjectCommandMixin(ContainerCommandMixin):
    """Command taking an object key as parameter"""

    def patch_parser(self, parser):
        super().patch_parser(parser)
        parser.add_argument(
            "object", metavar="<object>", help="Key of the object to manipulate."
        )


class MetadataShowMixin(object):
    """Command showing the metadata of an object"""

    def show_metadata(self, metadata):
        info = flat_dict_from_model(metadata)
        return list(zip(*sorted(info.items())))


class WriteObject(ObjectCommandMixin, MetadataShowMixin, ShowOne):
    """Create an object from the command line"""

    log = getLogger(__name__ + ".WriteObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument("data", metavar="<data>", help="Content of the object.")
        parser.add_argument(
            "--content-type",
            metavar="<type>",
            default="text/plain",
            help="Content type of the object (default: text/plain).",
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        storage = self.app.client_manager.storage
        storage.object_create(
            parsed_args.container,
            parsed_args.object,
            parsed_args.data,
            content_type=parsed_args.content_type,
        )
        return self.show_metadata(
            storage.object_show(parsed_args.container, parsed_args.object)
        )


class WriteObjectRange(ObjectCommandMixin, Command):
    """Write data in an existing object, at some offset"""

    log = getLogger(__name__ + ".WriteObjectRange")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "start_index", metavar="<offset>", type=int, help="Where to write."
        )
        parser.add_argument("data", metavar="<data>", help="Data to write.")
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        self.app.client_manager.storage.object_write_range(
            parsed_args.container,
            parsed_args.object,
            parsed_args.start_index,
            parsed_args.data,
        )


class SetObjectTags(ObjectCommandMixin, Command):
    """Set the tags of an object"""

    log = getLogger(__name__ + ".SetObjectTags")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument("tags", metavar="<tag>", nargs="+", help="Tags to set.")
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        self.app.client_manager.storage.object_set_tags(
            parsed_args.container, parsed_args.object, parsed_args.tags
        )


class SetObjectKeys(ObjectCommandMixin, Command):
    """Set the key-value pairs of an object"""

    log = getLogger(__name__ + ".SetObjectKeys")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "--property",
            metavar="<key=value>",
            action=KeyValueAction,
            help="Key-value pair to add/update for the object.",
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
        properties = {}
        if not parsed_args.clear:
            properties = storage.object_get_properties(
                parsed_args.container, parsed_args.object
            )
        properties.update(parsed_args.property or {})
        storage.object_set_properties(
            parsed_args.container, parsed_args.object, properties
        )


class ShowObjectKeys(ObjectCommandMixin, ShowOne):
    """Show the key-value pairs of an object"""

    log = getLogger(__name__ + ".ShowObjectKeys")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        properties = self.app.client_manager.storage.object_get_properties(
            parsed_args.container, parsed_args.object
        )
        return list(zip(*sorted(properties.items()))) or ((), ())


class ShowObject(ObjectCommandMixin, MetadataShowMixin, ShowOne):
    """Show the metadata of an object"""

    log = getLogger(__name__ + ".ShowObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        metadata = self.app.client_manager.storage.object_show(
            parsed_args.container, parsed_args.object
        )
        return self.show_metadata(metadata)


class UploadObject(ContainerCommandMixin, MetadataShowMixin, ShowOne):
    """Upload a local file as a new object"""

    log = getLogger(__name__ + ".UploadObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument("file", metavar="<filename>", help="File to upload.")
        parser.add_argument(
            "--key",
            metavar="<key>",
            help="Key of the object (default: the name of the file).",
        )
        parser.add_argument(
            "--content-type", metavar="<type>", help="Content type of the object."
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        key = parsed_args.key or os.path.basename(parsed_args.file)
        metadata = self.app.client_manager.storage.upload_file(
            parsed_args.file,
            parsed_args.container,
            key,
            content_type=parsed_args.content_type,
        )
        return self.show_metadata(metadata)


class ReadObject(ObjectCommandMixin, Command):
    """Print the content of an object"""

    log = getLogger(__name__ + ".ReadObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        return parser

    def read(self, parsed_args, start_index=None, count=None):
        with self.app.client_manager.storage.object_fetch(
            parsed_args.container,
            parsed_args.object,
            start_index=start_index,
            count=count,
        ) as obj:
            data = obj.read()
        self.app.stdout.write(data.decode("utf-8", "replace"))
        self.app.stdout.write("\n")

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        self.read(parsed_args)


class ReadObjectRange(ReadObject):
    """Print a range of the content of an object"""

    log = getLogger(__name__ + ".ReadObjectRange")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        parser.add_argument(
            "start_index", metavar="<offset>", type=int, help="Where to start."
        )
        parser.add_argument(
            "count", metavar="<count>", type=int, help="Number of bytes to read."
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        self.read(parsed_args, parsed_args.start_index, parsed_args.count)


class DownloadObject(ObjectCommandMixin, ShowOne):
    """Save an object in a new local file"""

    log = getLogger(__name__ + ".DownloadObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "--file",
            metavar="<filename>",
            help="File to create (default: the key of the object).",
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        filename = parsed_args.file or parsed_args.object
        size = self.app.client_manager.storage.download_file(
            filename, parsed_args.container, parsed_args.object
        )
        return ("File", "Size"), (filename, size)


class RenameObject(ObjectCommandMixin, Command):
    """Rename an object"""

    log = getLogger(__name__ + ".RenameObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument("new_name", metavar="<new-key>", help="New key.")
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        self.app.client_manager.storage.object_rename(
            parsed_args.container, parsed_args.object, parsed_args.new_name
        )


class DeleteObject(ContainerCommandMixin, Lister):
    """Delete objects from a container"""

    log = getLogger(__name__ + ".DeleteObject")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "objects", metavar="<object>", nargs="+", help="Object(s) to delete"
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        results = []
        for obj in parsed_args.objects:
            try:
                self.app.client_manager.storage.object_delete(
                    parsed_args.container, obj
                )
                results.append((obj, True))
            except NotFound:
                self.success = False
                results.append((obj, False))
        return ("Name", "Deleted"), results


class ObjectExists(ObjectCommandMixin, ShowOne):
    """Tell if an object exists"""

    log = getLogger(__name__ + ".ObjectExists")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        exists = self.app.client_manager.storage.object_exists(
            parsed_args.container, parsed_args.object
        )
        self.success = exists
        return ("Container", "Object", "Exists"), (
            parsed_args.container,
            parsed_args.object,
            exists,
        )
