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
The netplan configuration of a host.
"""
# pylint: disable=too-many-instance-attributes
import copy

from netplanner.logger import Logger
from netplanner.network import plan as netplan_plan
from netplanner.network.persist import PlanFile
from netplanner.network.persist import read_config_file
from netplanner.network.status import build_status
from netplanner.network.validate import validate_config
from netplanner.network.validate import validate_interface_options
from netplanner.network.validate import validate_netplan_interface
from netplanner.os import BinaryNotFoundError
from netplanner.os import CommandResult
from netplanner.os import ExecutionError
from netplanner.os import execute
from netplanner.os import find_binary

LOG = Logger(__name__)


class Netplan:

    """
    Holds a netplan plan, persists it and drives the ``netplan``, ``ip`` and
    ``route`` tools.
    """

    def __init__(self, config: dict = None, filesystem=None) -> None:
        """
        :param config: ``network`` settings and ``configFile`` path.
        :param filesystem: Filesystem for the configuration file.
        :raises ValidationError: When ``config`` is invalid.
        """
        validated = validate_config(copy.deepcopy(config))
        self.plan = netplan_plan.new_plan(validated['network'])
        self.config_file = validated['configFile']
        self._plan_file = PlanFile(self.config_file, filesystem)
        self.binary = find_binary('netplan')
        self.ip_binary = find_binary('ip')
        self.route_binary = find_binary('route')
        LOG.debug('Binaries: netplan=%s ip=%s route=%s',
                  self.binary, self.ip_binary, self.route_binary)

    @property
    def old_config(self) -> str:
        """
        The configuration file content before the last write.
        """
        return self._plan_file.old_config

    @property
    def new_config(self) -> str:
        """
        The configuration file content produced by the last write.
        """
        return self._plan_file.new_config

    def load_config(self) -> None:
        """
        Replaces the plan with the one in the configuration file, if there is
        one.
        """
        loaded = self._plan_file.load()
        if loaded is not None:
            self.plan = loaded

    def write_config(self) -> bool:
        """
        Writes the plan to the configuration file if it changed.
        """
        return self._plan_file.write(self.plan)

    def read_config_file(self, path: str) -> dict:
        """
        Reads a ``KEY=VALUE`` style file, e.g. credentials kept beside the
        plan, from the same filesystem as the configuration file.

        :param path: Path to the file.
        """
        return read_config_file(self._plan_file.filesystem, path)

    def configure_netplan_interface(self, **options) -> None:
        """
        Sets an interface from a netplan definition.

        :keyword name: Name of the interface.
        :keyword type: ``ethernet`` (default) or ``wifi``.
        :keyword definition: The netplan definition for the interface.
        :raises ValidationError: When the options are invalid.
        """
        validated = validate_netplan_interface(options)
        netplan_plan.configure_netplan_interface(
            self.plan,
            validated['name'],
            validated['type'],
            validated['definition'],
        )
        LOG.info('Configured %s interface [%s]',
                 validated['type'], validated['name'])

    def configure_interface(self, name: str, **options) -> None:
        """
        Sets an interface from a high-level description.

        :param name: Name of the interface.
        :keyword dhcp: Use DHCP, static options are then ignored.
        :keyword ip: Static IP address.
        :keyword prefix: Prefix length for ``ip`` (default 24).
        :keyword defaultGateway: Gateway for the default route.
        :keyword domain: DNS search domain.
        :keyword nameservers: List of DNS server addresses.
        :keyword accessPoint: ``ssid`` and ``wifiPassword`` of a wifi network.
        :keyword type: ``ethernet`` or ``wifi``, derived from ``accessPoint``
                       when not given.
        :raises ValidationError: When the options are invalid.
        """
        validated = validate_interface_options(options)
        if validated['dhcp'] and \
                any(key in validated for key in
                    ['ip', 'defaultGateway', 'nameservers', 'domain']):
            LOG.warning('DHCP is enabled for [%s], ignoring static settings.',
                        name)
        iface_type, definition = netplan_plan.interface_definition(validated)
        self.configure_netplan_interface(
            name=name,
            type=iface_type,
            definition=definition,
        )

    def status(self) -> dict:
        """
        Reports the addresses, MACs and default gateways of every interface.

        :raises BinaryNotFoundError: When ``ip`` or ``route`` is missing.
        :raises ExecutionError: When ``ip addr`` or ``route -n`` fails.
        """
        address_result = execute(self.ip_binary, ['-j', 'addr'])
        route_result = execute(self.route_binary, ['-n'])
        route6_output = None
        try:
            route6_output = execute(self.route_binary, ['-6n']).stdout
        except (BinaryNotFoundError, ExecutionError) as error:
            LOG.info('No IPv6 routes: %s', error)
        return build_status(
            address_result.stdout,
            route_result.stdout,
            route6_output,
        )

    def generate(self) -> CommandResult:
        """
        Runs ``netplan generate``.
        """
        return execute(self.binary, ['generate'])

    def apply(self, force: bool = True) -> [CommandResult, None]:
        """
        Runs ``netplan apply``.

        :param force: Apply even if the last write did not change anything.
        :returns: The command result, or ``None`` if applying was skipped.
        """
        if force or self.old_config != self.new_config:
            return execute(self.binary, ['apply'])
        LOG.info('Configuration unchanged, skipping netplan apply.')
        return None
