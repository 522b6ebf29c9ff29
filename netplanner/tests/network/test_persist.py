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
Tests for the ``netplanner.network.persist`` module.
"""
import os

import mock
from mock import mock_open
import yaml

from netplanner.network import persist
from netplanner.tests.mocks import MemoryFilesystem

CONFIG_FILE = '/etc/netplan/config.yaml'

static_plan = {
    'network': {
        'version': 2,
        'renderer': 'networkd',
        'ethernets': {
            'eth0': {
                'addresses': ['192.168.4.8/24'],
                'nameservers': {
                    'search': ['guardian-angel.local'],
                    'addresses': ['192.168.4.1'],
                },
                'routes': [{'to': '0.0.0.0/0', 'via': '192.168.4.1'}],
            },
        },
        'wifis': {
            'wlan0': {
                'dhcp4': 'yes',
                'access-points': {
                    'TellMyWiFiLoveHer': {'password': 'supersecretpassword'},
                },
            },
        },
    },
}


class TestPlanFile:
    """
    Tests for loading and writing the configuration file.
    """

    filesystem = None
    plan_file = None

    def setup_method(self) -> None:
        """
        Sets up an empty in-memory filesystem.
        """
        self.filesystem = MemoryFilesystem()
        self.plan_file = persist.PlanFile(CONFIG_FILE, self.filesystem)

    def test_load_no_file(self) -> None:
        """
        Asserts nothing is loaded without a file.
        """
        assert self.plan_file.load() is None

    def test_load_empty_file(self) -> None:
        """
        Asserts a file without a document loads nothing.
        """
        for content in ['', '# comment only\n', '[]\n']:
            self.filesystem.files[CONFIG_FILE] = content
            assert self.plan_file.load() is None

    def test_write_then_load(self) -> None:
        """
        Asserts a written plan loads back as the same structure.
        """
        assert self.plan_file.write(static_plan)
        assert self.filesystem.files[CONFIG_FILE].startswith('network:\n')
        assert self.plan_file.load() == static_plan

    def test_dhcp_stays_a_string(self) -> None:
        """
        Asserts ``dhcp4: 'yes'`` is quoted so YAML does not read a boolean.
        """
        self.plan_file.write(static_plan)
        content = self.filesystem.files[CONFIG_FILE]
        assert "dhcp4: 'yes'" in content
        assert yaml.safe_load(content)['network']['wifis']['wlan0']['dhcp4'] \
            == 'yes'

    def test_write_unchanged(self) -> None:
        """
        Asserts writing the same plan twice only touches the file once.
        """
        assert self.plan_file.write(static_plan)
        assert not self.plan_file.write(static_plan)
        assert self.filesystem.writes == 1
        assert self.plan_file.old_config == self.plan_file.new_config

    def test_old_and_new_config(self) -> None:
        """
        Asserts the previous file content is kept as ``old_config``.
        """
        self.filesystem.files[CONFIG_FILE] = 'network:\n  version: 2\n'
        self.plan_file.write(static_plan)
        assert self.plan_file.old_config == 'network:\n  version: 2\n'
        assert self.plan_file.new_config == self.filesystem.files[CONFIG_FILE]
        assert self.plan_file.old_config != self.plan_file.new_config


class TestLocalFilesystem:
    """
    Tests for the host filesystem.
    """

    def test_write(self) -> None:
        """
        Asserts content is written to the given path.
        """
        with mock.patch('netplanner.network.persist.open', mock_open()) as mock_file:
            persist.LocalFilesystem().write(CONFIG_FILE, 'network: {}\n')
        mock_file.assert_called_once_with(CONFIG_FILE, 'w', encoding='utf-8')
        mock_file().write.assert_called_once_with('network: {}\n')

    def test_exists(self, tmp_path) -> None:
        """
        Asserts existence is checked on disk.
        """
        path = os.path.join(tmp_path, 'config.yaml')
        filesystem = persist.LocalFilesystem()
        assert not filesystem.exists(path)
        filesystem.write(path, 'network: {}\n')
        assert filesystem.exists(path)
        assert filesystem.read(path) == 'network: {}\n'


def test_read_config_file() -> None:
    """
    Asserts ``KEY=VALUE`` lines are read and anything else is skipped.
    """
    filesystem = MemoryFilesystem({
        '/etc/default/netplanner': 'SSID=home\n# comment\nPSK=a=b\n',
    })
    actual = persist.read_config_file(filesystem, '/etc/default/netplanner')
    assert actual == {'SSID': 'home', 'PSK': 'a'}
