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

from configparser import ConfigParser
from glob import glob
from os import path

from yaml import safe_load

from kvpbase.common.constants import TIMEOUT_KEYS
from kvpbase.common.easy_value import boolean_value, float_value, int_value
from kvpbase.common.exceptions import ConfigurationException

DEFAULT_PROFILE = "default"

CLIENT_STRING_KEYS = ("endpoint", "user_guid", "api_key", "email", "password")
CLIENT_INT_KEYS = ("max_transfer_size", "upload_buffer_size", "download_buffer_size")


def read_conf(conf_path, section_name=None, defaults=None, use_yaml=False):
    """
    Read an INI (or YAML) configuration file.

    :param section_name: only return the options of this section
    :returns: a dictionary of options, or a dictionary of sections
        if no section name has been specified
    """
    if use_yaml:
        return parse_config(conf_path)
    if defaults is None:
        defaults = {}
    parser = ConfigParser(defaults, interpolation=None)
    success = parser.read(conf_path)
    if not success:
        raise ConfigurationException(f"Unable to read config from {conf_path}")
    if section_name:
        if not parser.has_section(section_name):
            raise ConfigurationException(
                f"Unable to find section {section_name} in config {conf_path}"
            )
        return dict(parser.items(section_name))
    conf = {}
    for section in parser.sections():
        conf[section] = dict(parser.items(section))
    return conf


def parse_config(conf_path):
    with open(conf_path, "r") as f:
        conf = safe_load(f)
    if conf is None:
        return {}
    if not isinstance(conf, dict):
        raise ConfigurationException(f"{conf_path} does not contain a mapping")
    return conf


def validate_client_conf(conf):
    """Ensure a client configuration names a user and an endpoint."""
    missing = [key for key in ("user_guid", "endpoint") if not conf.get(key)]
    if missing:
        raise ConfigurationException(
            "Missing client configuration: %s" % ", ".join(missing)
        )


def config_paths():
    """
    Yield paths to potential client configuration files.
    """
    yield "/etc/kvpbase/client.conf"
    for conf_path in sorted(glob("/etc/kvpbase/client.conf.d/*")):
        yield conf_path
    yield path.expanduser("~/.kvpbase/client.conf")


# Keep profiles, avoid loading files everytime
PROFILE_CONF_CACHE = dict()


def load_profile_conf(profile=DEFAULT_PROFILE, failsafe=False, fresh=False):
    """
    Load a client profile from the local configuration files.

    :param profile: name of the section to load.
    :param failsafe: in case of error, return an empty configuration.
    :param fresh: if True, reload configuration from files,
        do not use the cache.
    :returns: a dictionary with the profile options.
    """
    if not fresh and profile in PROFILE_CONF_CACHE:
        return PROFILE_CONF_CACHE[profile]

    parser = ConfigParser({}, interpolation=None)
    loaded_files = parser.read(config_paths())
    if not loaded_files:
        error = "Unable to read any client configuration file"
    elif not parser.has_section(profile):
        error = f"Unable to find [{profile}] section in any of {loaded_files}"
    else:
        conf = dict(parser.items(profile))
        PROFILE_CONF_CACHE[profile] = conf
        return conf
    if failsafe:
        return {}
    raise ConfigurationException(error)


def client_kwargs_from_conf(conf):
    """
    Convert a configuration dictionary (values are strings when read
    from a file) into keyword arguments for `ObjectStorageApi`.
    Unknown keys are ignored, empty values are dropped.
    """
    kwargs = {}
    for key in CLIENT_STRING_KEYS:
        if conf.get(key):
            kwargs[key] = str(conf[key])
    for key in CLIENT_INT_KEYS:
        value = int_value(conf.get(key), None)
        if value is not None:
            kwargs[key] = value
    for key in TIMEOUT_KEYS:
        value = float_value(conf.get(key), None)
        if value is not None:
            kwargs[key] = value
    if conf.get("ignore_tls_errors") not in (None, ""):
        kwargs["ignore_tls_errors"] = boolean_value(conf["ignore_tls_errors"])
    return kwargs
