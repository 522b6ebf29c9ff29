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
Reading and writing the netplan configuration file.
"""
import os

import yaml

from netplanner.logger import Logger

LOG = Logger(__name__)


class LocalFilesystem:

    """
    The host's filesystem.
    """

    @staticmethod
    def exists(path: str) -> bool:
        """
        Whether ``path`` exists.
        """
        return os.path.exists(path)

    @staticmethod
    def read(path: str) -> str:
        """
        Returns the content of ``path``.
        """
        with open(path, 'r', encoding='utf-8') as file:
            return file.read()

    @staticmethod
    def write(path: str, content: str) -> None:
        """
        Replaces the content of ``path``.
        """
        with open(path, 'w', encoding='utf-8') as file:
            file.write(content)


def dump_plan(plan: dict) -> str:
    """
    Serializes a plan document to YAML, keeping the key order.

    :param plan: The plan document.
    """
    return yaml.safe_dump(plan, default_flow_style=False, sort_keys=False)


def read_config_file(filesystem, path: str) -> dict:
    """
    Reads a ``KEY=VALUE`` style file into a dictionary. Lines without an
    ``=`` are skipped.

    :param filesystem: Filesystem to read from.
    :param path: Path to the file.
    """
    values = {}
    for line in filesystem.read(path).split('\n'):
        if '=' in line:
            key, value = line.split('=')[:2]
            values[key] = value
    return values


class PlanFile:

    """
    A netplan YAML file.

    ``old_config`` and ``new_config`` hold the serialized plan before and
    after the last ``write``.
    """

    def __init__(self, path: str, filesystem=None) -> None:
        """
        :param path: Path to the configuration file.
        :param filesystem: Filesystem to use (default: ``LocalFilesystem``).
        """
        self.path = path
        self.filesystem = filesystem or LocalFilesystem()
        self.old_config = ''
        self.new_config = ''

    def load(self) -> [dict, None]:
        """
        Returns the plan stored in the file, or ``None`` if there is no file
        or it holds no document.
        """
        if not self.filesystem.exists(self.path):
            LOG.info('%s does not exist, nothing to load.', self.path)
            return None
        content = self.filesystem.read(self.path)
        self.old_config = content
        document = yaml.safe_load(content)
        if not isinstance(document, dict) or not document:
            LOG.warning('%s holds no plan, keeping the current one.', self.path)
            return None
        LOG.info('Loaded %s', self.path)
        return document

    def write(self, plan: dict) -> bool:
        """
        Writes ``plan`` to the file unless the file already holds exactly
        the same content.

        :param plan: The plan document.
        :returns: Whether the file was written.
        """
        if self.filesystem.exists(self.path):
            self.old_config = self.filesystem.read(self.path)
        self.new_config = dump_plan(plan)
        if self.old_config == self.new_config:
            LOG.info('%s is unchanged, not writing.', self.path)
            return False
        self.filesystem.write(self.path, self.new_config)
        LOG.info('Wrote %s', self.path)
        return True
