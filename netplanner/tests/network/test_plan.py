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
Tests for the ``netplanner.network.plan`` module.
"""
import pytest

from netplanner.network import plan
from netplanner.network.validate import validate_interface_options


def definition_for(**options) -> tuple:
    """
    Validates ``options`` and builds the type and definition for them.
    """
    return plan.interface_definition(validate_interface_options(options))


class TestInterfaceMap:
    """
    Tests for selecting the ethernets/wifis map.
    """

    def test_created(self) -> None:
        """
        Asserts the maps are created when the plan has none.
        """
        document = plan.new_plan({'version': 2, 'renderer': 'networkd'})
        assert plan.interface_map(document, 'ethernet') == {}
        assert plan.interface_map(document, 'wifi') == {}
        assert document['network']['ethernets'] == {}
        assert document['network']['wifis'] == {}

    def test_existing_wifis_kept(self) -> None:
        """
        Asserts existing wifi interfaces survive adding another one.
        """
        document = plan.new_plan(
            {'version': 2, 'renderer': 'networkd',
             'wifis': {'wlan0': {'dhcp4': 'yes'}}}
        )
        plan.configure_netplan_interface(
            document, 'wlan1', 'wifi', {'dhcp4': 'yes'}
        )
        assert set(document['network']['wifis']) == {'wlan0', 'wlan1'}

    def test_unsupported_type(self) -> None:
        """
        Asserts types other than ethernet and wifi are refused.
        """
        document = plan.new_plan({'version': 2, 'renderer': 'networkd'})
        with pytest.raises(plan.UnsupportedTypeError):
            plan.configure_netplan_interface(document, 'bond0', 'bond', {})
        assert 'bonds' not in document['network']

    def test_replace(self) -> None:
        """
        Asserts a second definition replaces the first instead of merging.
        """
        document = plan.new_plan({'version': 2, 'renderer': 'networkd'})
        plan.configure_netplan_interface(
            document, 'eth0', 'ethernet',
            {'addresses': ['192.168.4.8/24'],
             'routes': [{'to': '0.0.0.0/0', 'via': '192.168.4.1'}]}
        )
        plan.configure_netplan_interface(
            document, 'eth0', 'ethernet', {'dhcp4': 'yes'}
        )
        assert document['network']['ethernets'] == {'eth0': {'dhcp4': 'yes'}}


class TestInterfaceDefinition:
    """
    Tests for building interface definitions from high-level options.
    """

    def test_dhcp(self) -> None:
        """
        Asserts DHCP drops every static setting.
        """
        iface_type, definition = definition_for(
            dhcp=True,
            ip='192.168.4.8',
            defaultGateway='192.168.4.1',
            nameservers=['192.168.4.1'],
            domain='guardian-angel.local',
        )
        assert iface_type == 'ethernet'
        assert definition == {'dhcp4': 'yes'}

    def test_default_prefix(self) -> None:
        """
        Asserts the prefix defaults to 24.
        """
        _, definition = definition_for(dhcp=False, ip='192.168.4.8')
        assert definition == {'addresses': ['192.168.4.8/24']}

    def test_static(self) -> None:
        """
        Asserts a complete static definition.
        """
        _, definition = definition_for(
            ip='192.168.4.8',
            prefix=16,
            defaultGateway='192.168.4.1',
            nameservers=['192.168.4.1', '9.9.9.9'],
            domain='guardian-angel.local',
        )
        assert definition == {
            'addresses': ['192.168.4.8/16'],
            'nameservers': {
                'search': ['guardian-angel.local'],
                'addresses': ['192.168.4.1', '9.9.9.9'],
            },
            'routes': [{'to': '0.0.0.0/0', 'via': '192.168.4.1'}],
        }

    def test_gateway_only(self) -> None:
        """
        Asserts a gateway always gives exactly one default route.
        """
        _, definition = definition_for(defaultGateway='10.0.0.1')
        assert definition == {
            'routes': [{'to': '0.0.0.0/0', 'via': '10.0.0.1'}],
        }

    def test_nameservers_without_domain(self) -> None:
        """
        Asserts ``search`` is only set with a domain, and a domain alone does
        not add nameservers.
        """
        _, definition = definition_for(nameservers=['1.1.1.1'])
        assert definition == {'nameservers': {'addresses': ['1.1.1.1']}}
        _, definition = definition_for(domain='example.local')
        assert definition == {}

    def test_access_point(self) -> None:
        """
        Asserts an access point makes a wifi interface.
        """
        iface_type, definition = definition_for(
            dhcp=True,
            accessPoint={'ssid': 'TellMyWiFiLoveHer',
                         'wifiPassword': 'supersecretpassword'},
        )
        assert iface_type == 'wifi'
        assert definition == {
            'dhcp4': 'yes',
            'access-points': {
                'TellMyWiFiLoveHer': {'password': 'supersecretpassword'},
            },
        }

    def test_explicit_type(self) -> None:
        """
        Asserts an explicit type wins over the access point.
        """
        iface_type, _ = definition_for(type='wifi', dhcp=True)
        assert iface_type == 'wifi'
        iface_type, definition = definition_for(
            type='ethernet',
            accessPoint={'ssid': 'home', 'wifiPassword': 'secret'},
        )
        assert iface_type == 'ethernet'
        assert 'access-points' not in definition
