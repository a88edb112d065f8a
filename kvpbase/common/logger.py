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

import errno
import logging
import os
import socket
import sys
from logging.handlers import SYSLOG_UDP_PORT, SysLogHandler

DEFAULT_LOG_FORMAT = "%(process)d %(thread)X %(name)s %(levelname)s %(message)s"


def _syslog_handler(conf):
    """
    Build a syslog handler if the configuration asks for one,
    otherwise return None.
    """
    facility = getattr(
        SysLogHandler, conf.get("log_facility", "LOG_LOCAL0"), SysLogHandler.LOG_LOCAL0
    )
    udp_host = conf.get("log_udp_host")
    if udp_host:
        udp_port = int(conf.get("log_udp_port", SYSLOG_UDP_PORT))
        return SysLogHandler(address=(udp_host, udp_port), facility=facility)
    log_address = conf.get("log_address")
    if not log_address:
        return None
    if os.path.exists(log_address):
        try:
            return SysLogHandler(address=log_address, facility=facility)
        except socket.error as exc:
            if exc.errno not in [errno.ENOTSOCK, errno.ENOENT]:
                raise exc
    return SysLogHandler(facility=facility)


def get_logger(conf, name=None, verbose=False, fmt=None):
    """
    Get a logger configured from a dictionary.

    Recognized keys: `log_level`, `log_format`, `log_facility`,
    `log_address`, `log_udp_host`, `log_udp_port`, `syslog_prefix`
    and `is_cli`. Logs go to syslog only when an address is configured,
    and to stderr when `verbose` or `is_cli` is set.
    """
    if not conf:
        conf = {}

    if name is None:
        name = "kvpbase"

    if fmt is None:
        fmt = conf.get("log_format", DEFAULT_LOG_FORMAT)

    logger = logging.getLogger(name)

    if not hasattr(get_logger, "handler4logger"):
        get_logger.handler4logger = {}
    if logger in get_logger.handler4logger:
        logger.removeHandler(get_logger.handler4logger.pop(logger))

    handler = _syslog_handler(conf)
    if handler is not None:
        handler.ident = "%s: " % conf.get(
            "syslog_prefix", os.path.basename(sys.argv[0])
        )
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
        get_logger.handler4logger[logger] = handler

    if verbose or conf.get("is_cli"):
        if not hasattr(get_logger, "console_handler4logger"):
            get_logger.console_handler4logger = {}
        if logger in get_logger.console_handler4logger:
            logger.removeHandler(get_logger.console_handler4logger[logger])

        console_handler = logging.StreamHandler(sys.__stderr__)
        console_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s.%(msecs)03d " + fmt, datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(console_handler)
        get_logger.console_handler4logger[logger] = console_handler

    logging_level = getattr(
        logging, str(conf.get("log_level", "INFO")).upper(), logging.INFO
    )
    logger.setLevel(logging_level)
    # Without handlers of its own, let records reach the application's.
    logger.propagate = not logger.handlers

    return logger
