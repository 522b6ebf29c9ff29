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
Parses the output of ``ip addr``, ``route -n`` and ``route -6n`` into a
status report per interface::

    {
        'eno1': {
            'type': 'ether',
            'mac': '3c:52:82:6b:1f:0a',
            'ipv4': {'ip': '192.168.1.20', 'broadcast': '192.168.1.255',
                     'prefix': 24, 'gateway': '192.168.1.1'},
            'ipv6': {'ip': 'fe80::3e52:82ff:fe6b:1f0a', 'prefix': 64},
        },
    }

Keys are only present when the tools reported a value.
"""
import json
import re

from netplanner.logger import Logger

LOG = Logger(__name__)

families = {
    'inet': 'ipv4',
    'inet6': 'ipv6',
}

interface_line = re.compile(r'^[0-9]+:')
link_line = re.compile(r'^link/')
inet_line = re.compile(r'^(inet6?)\s')


def _prefix(value: str) -> [int, str]:
    return int(value) if value.isdigit() else value


def parse_ip(addr_info: list, family: str) -> [dict, None]:
    """
    Returns the first address of ``family`` from an ``addr_info`` list.

    :param addr_info: ``addr_info`` of an interface from ``ip -j addr``.
    :param family: ``inet`` or ``inet6``.
    """
    for info in addr_info:
        if info.get('family') == family:
            address = {}
            if info.get('local') is not None:
                address['ip'] = info['local']
            if info.get('broadcast') is not None:
                address['broadcast'] = info['broadcast']
            if info.get('prefixlen') is not None:
                address['prefix'] = info['prefixlen']
            return address
    return None


def parse_address_json(records: list) -> dict:
    """
    Parses the records of ``ip -j addr``.

    :param records: The decoded JSON array.
    """
    status = {}
    for record in records:
        interface = {}
        if record.get('link_type'):
            interface['type'] = record['link_type']
        if record.get('address'):
            interface['mac'] = record['address']
        for family, key in families.items():
            address = parse_ip(record.get('addr_info', []), family)
            if address is not None:
                interface[key] = address
        status[record['ifname']] = interface
    return status


def parse_address_text(output: str) -> dict:
    """
    Parses the plain text output of ``ip addr``.

    :param output: stdout of ``ip addr``.
    """
    status = {}
    current = None
    for line in output.splitlines():
        stripped = line.strip()
        if interface_line.match(line):
            current = line.split(':')[1].strip()
            status[current] = {}
            continue
        if current is None:
            continue
        words = stripped.split()
        if link_line.match(stripped):
            status[current]['type'] = words[0].split('/')[1]
            if len(words) > 1:
                status[current]['mac'] = words[1]
            continue
        match = inet_line.match(stripped)
        if match:
            address = {}
            for index, word in enumerate(words[:-1]):
                if word == match.group(1):
                    ip, _, prefix = words[index + 1].partition('/')
                    address['ip'] = ip
                    if prefix:
                        address['prefix'] = _prefix(prefix)
                elif word == 'brd':
                    address['broadcast'] = words[index + 1]
            status[current][families[match.group(1)]] = address
    return status


def parse_addresses(output: str) -> dict:
    """
    Parses ``ip addr`` output, JSON if ``-j`` was honoured and plain text
    otherwise.

    :param output: stdout of ``ip -j addr``.
    """
    if not output:
        return {}
    try:
        records = json.loads(output)
    except ValueError:
        LOG.info('Address listing is not JSON, parsing it as text.')
        return parse_address_text(output)
    if not isinstance(records, list):
        return parse_address_text(output)
    return parse_address_json(records)


def _route_gateways(lines: list, columns: tuple, is_default) -> list:
    """
    Returns ``(interface, gateway)`` for each default route in a route table.

    :param lines: Lines of the route table.
    :param columns: Header names of the gateway and interface columns.
    :param is_default: Tells whether a destination is the default route.
    """
    header = None
    gateways = []
    for line in lines:
        row = line.split()
        if not row:
            continue
        if header is None:
            if 'Destination' in line:
                header = row
            continue
        if not is_default(row[0]):
            continue
        try:
            gateway_index = header.index(columns[0])
            iface_index = header.index(columns[1])
        except ValueError:
            LOG.warning('Route table header %s is missing %s', header, columns)
            return gateways
        if max(gateway_index, iface_index) < len(row):
            gateways.append((row[iface_index], row[gateway_index]))
    return gateways


def apply_ipv4_routes(status: dict, output: str) -> None:
    """
    Adds the default IPv4 gateway of each interface from ``route -n``.

    :param status: Status report to update.
    :param output: stdout of ``route -n``.
    """
    if not output:
        return
    gateways = _route_gateways(
        output.splitlines(),
        ('Gateway', 'Iface'),
        lambda destination: destination.startswith('0.0.0.0'),
    )
    for iface, gateway in gateways:
        if 'ipv4' in status.get(iface, {}):
            status[iface]['ipv4']['gateway'] = gateway


def apply_ipv6_routes(status: dict, output: str) -> None:
    """
    Adds the default IPv6 gateway of each interface from ``route -6n``. A
    next hop of ``::`` means there is no gateway.

    :param status: Status report to update.
    :param output: stdout of ``route -6n``.
    """
    if not output:
        return
    gateways = _route_gateways(
        [line.replace('Next Hop', 'Next_Hop') for line in output.splitlines()],
        ('Next_Hop', 'If'),
        lambda destination: destination == '::/0',
    )
    for iface, gateway in gateways:
        if gateway != '::' and 'ipv6' in status.get(iface, {}):
            status[iface]['ipv6']['gateway'] = gateway


def build_status(
        address_output: str,
        route_output: str,
        route6_output: str = None,
) -> dict:
    """
    Builds the status report from the three command outputs. Routes never
    add interfaces that ``ip addr`` did not list.

    :param address_output: stdout of ``ip -j addr``.
    :param route_output: stdout of ``route -n``.
    :param route6_output: stdout of ``route -6n``, if it succeeded.
    """
    status = parse_addresses(address_output)
    apply_ipv4_routes(status, route_output)
    apply_ipv6_routes(status, route6_output)
    return status
