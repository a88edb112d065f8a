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

"""Commands transferring data by chunks"""

import os
import shutil
from logging import getLogger

from kvpbase.api.stream import KvpbaseStream
from kvpbase.cli import DEFAULT_STREAM_BUFFER_SIZE, Command, ShowOne
from kvpbase.cli.common.utils import flat_dict_from_model
from kvpbase.common.exceptions import CommandError, PreconditionFailed


class StreamCommandMixin(object):
    """Command transferring a local file to or from an object"""

    def patch_parser(self, parser):
        parser.add_argument(
            "container",
            metavar="<container>",
            help="Name of the container holding the object.",
        )
        parser.add_argument("object", metavar="<object>", help="Key of the object.")
        parser.add_argument("file", metavar="<filename>", help="Local file.")


class StreamUpload(StreamCommandMixin, ShowOne):
    """
    Upload a local file as a new object, by chunks of --buffer-size bytes
    """

    log = getLogger(__name__ + ".StreamUpload")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "--content-type", metavar="<type>", help="Content type of the object."
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        if not os.path.isfile(parsed_args.file):
            raise CommandError(f"File '{parsed_args.file}' does not exist")
        with open(parsed_args.file, "rb") as source:
            metadata = self.app.client_manager.storage.upload_from_stream(
                source,
                parsed_args.container,
                parsed_args.object,
                content_type=parsed_args.content_type,
            )
        info = flat_dict_from_model(metadata)
        return list(zip(*sorted(info.items())))


class StreamDownload(StreamCommandMixin, ShowOne):
    """
    Save an object in a new local file, by ranges of --buffer-size bytes
    """

    log = getLogger(__name__ + ".StreamDownload")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        if os.path.exists(parsed_args.file):
            raise CommandError(f"File '{parsed_args.file}' already exists")
        storage = self.app.client_manager.storage
        if not storage.container_exists(parsed_args.container):
            raise PreconditionFailed(
                f"Container '{parsed_args.container}' does not exist"
            )
        if not storage.object_exists(parsed_args.container, parsed_args.object):
            raise PreconditionFailed(
                f"Object '{parsed_args.object}' does not exist "
                f"in container '{parsed_args.container}'"
            )
        with open(parsed_args.file, "xb") as dest:
            size = storage.download_to_stream(
                dest, parsed_args.container, parsed_args.object
            )
        return ("File", "Size"), (parsed_args.file, size)


class StreamPut(StreamCommandMixin, Command):
    """
    Copy a local file in an object through a seekable stream,
    overwriting the beginning of the object
    """

    log = getLogger(__name__ + ".StreamPut")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "--offset",
            metavar="<offset>",
            type=int,
            default=0,
            help="Where to start writing in the object (default: 0).",
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        buffer_size = self.app.client_manager.buffer_size or DEFAULT_STREAM_BUFFER_SIZE
        stream = KvpbaseStream(
            self.app.client_manager.storage, parsed_args.container, parsed_args.object
        )
        with stream, open(parsed_args.file, "rb") as source:
            stream.seek(parsed_args.offset)
            shutil.copyfileobj(source, stream, buffer_size)
            self.log.info("Object length is now %d bytes", stream.length)


class StreamGet(StreamCommandMixin, ShowOne):
    """
    Copy an object in a new local file through a seekable stream
    """

    log = getLogger(__name__ + ".StreamGet")

    def get_parser(self, prog_name):
        parser = super().get_parser(prog_name)
        self.patch_parser(parser)
        parser.add_argument(
            "--offset",
            metavar="<offset>",
            type=int,
            default=0,
            help="Where to start reading in the object (default: 0).",
        )
        return parser

    def take_action(self, parsed_args):
        self.log.debug("take_action(%s)", parsed_args)
        if os.path.exists(parsed_args.file):
            raise CommandError(f"File '{parsed_args.file}' already exists")
        storage = self.app.client_manager.storage
        if not storage.object_exists(parsed_args.container, parsed_args.object):
            raise CommandError(
                f"Object '{parsed_args.object}' does not exist "
                f"in container '{parsed_args.container}'"
            )
        buffer_size = self.app.client_manager.buffer_size or DEFAULT_STREAM_BUFFER_SIZE
        stream = KvpbaseStream(storage, parsed_args.container, parsed_args.object)
        with stream, open(parsed_args.file, "xb") as dest:
            stream.seek(parsed_args.offset)
            shutil.copyfileobj(stream, dest, buffer_size)
            size = dest.tell()
        return ("File", "Size"), (parsed_args.file, size)
