#
#  MIT License
#
#  (C) Copyright 2023 Hewlett Packard Enterprise Development LP
#
#  Permission is hereby granted, free of charge, to any person obtaining a
#  copy of this software and associated documentation files (the "Software"),
#  to deal in the Software without restriction, including without limitation
#  the rights to use, copy, modify, merge, publish, distribute, sublicense,
#  and/or sell copies of the Software, and to permit persons to whom the
#  Software is furnished to do so, subject to the following conditions:
#
#  The above copyright notice and this permission notice shall be included
#  in all copies or substantial portions of the Software.
#
#  THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
#  IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
#  FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL
#  THE AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR
#  OTHER LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE,
#  ARISING FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR
#  OTHER DEALINGS IN THE SOFTWARE.
#
"""
Logging for netplanner.

Every module creates its own ``LOG = Logger(__name__)``; all of them share a
single rotating file handler.

Environment variables:
    NETPLANNER_LOG_FILE: Path to the log file
                         (default: ``~/.netplanner/netplanner.log``).
    NETPLANNER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO).
"""
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = '%(asctime)s | %(name)-28s | %(levelname)-8s | %(message)s'
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5

_handler = None


def log_file() -> Path:
    """
    Resolves the log file path.
    """
    default_path = Path.home() / '.netplanner' / 'netplanner.log'
    return Path(os.environ.get('NETPLANNER_LOG_FILE', str(default_path)))


def log_level() -> int:
    """
    Resolves the log level, falling back to INFO for unknown names.
    """
    level = os.environ.get('NETPLANNER_LOG_LEVEL', 'INFO').upper()
    return getattr(logging, level, logging.INFO)


def _shared_handler() -> logging.Handler:
    """
    Creates (once) the handler every ``Logger`` writes to. If the log
    directory can not be created the handler writes to stderr instead.
    """
    global _handler  # pylint: disable=global-statement
    if _handler is None:
        path = log_file()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            _handler = RotatingFileHandler(
                path,
                maxBytes=MAX_BYTES,
                backupCount=BACKUP_COUNT,
                encoding='utf-8',
                delay=True,
            )
        except OSError:
            _handler = logging.StreamHandler()
            _handler.setLevel(logging.WARNING)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return _handler


class Logger(logging.Logger):

    """
    A logger bound to the netplanner log file.
    """

    def __init__(self, name: str, level: int = None) -> None:
        """
        :param name: Name of the logger, usually ``__name__``.
        :param level: Logging level (default: ``NETPLANNER_LOG_LEVEL``).
        """
        super().__init__(name, log_level() if level is None else level)
        self.addHandler(_shared_handler())
