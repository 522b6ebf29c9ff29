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
Validation of netplanner input.

Each validator returns the normalized value, with defaults applied, or raises
``ValidationError`` naming the offending field. Nothing is mutated until
validation has passed.
"""
import re

import netaddr

RENDERERS = ['networkd', 'NetworkManager']
INTERFACE_TYPES = ['ethernet', 'wifi']
DEFAULT_VERSION = 2
DEFAULT_RENDERER = 'networkd'
DEFAULT_CONFIG_FILE = '/etc/netplan/config.yaml'
DEFAULT_PREFIX = 24

CONFIG_FILE_REGEX = re.compile(r'^(/[^/ ]*)+/?$')
DOMAIN_REGEX = re.compile(
    r'^(?=.{1,253}$)'
    r'((?!-)[A-Za-z0-9-]{1,63}(?<!-)\.)+'
    r'(?!-)[A-Za-z0-9-]{1,63}(?<!-)$'
)


class ValidationError(Exception):

    """
    An exception for input that violates the configuration schema.
    """

    def __init__(self, field: str, constraint: str) -> None:
        self.field = field
        self.constraint = constraint
        self.message = f'"{field}" {constraint}'
        super().__init__(self.message)


def _reject_unknown(options: dict, allowed: list, parent: str = '') -> None:
    for key in options:
        if key not in allowed:
            raise ValidationError(f'{parent}{key}', 'is not allowed')


def _mapping(value, field: str) -> dict:
    if not isinstance(value, dict):
        raise ValidationError(field, 'must be an object')
    return value


def _integer(value, field: str, minimum: int = None, maximum: int = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, 'must be an integer')
    if minimum is not None and value < minimum:
        raise ValidationError(field, f'must be greater than or equal to {minimum}')
    if maximum is not None and value > maximum:
        raise ValidationError(field, f'must be less than or equal to {maximum}')
    return value


def _string(value, field: str) -> str:
    if not isinstance(value, str) or not value:
        raise ValidationError(field, 'must be a non-empty string')
    return value


def _choice(value, field: str, choices: list) -> str:
    if value not in choices:
        raise ValidationError(field, f'must be one of {choices}')
    return value


def ip_address(value, field: str) -> str:
    """
    Validates a single IPv4 or IPv6 address (without a prefix length).

    :param value: The address.
    :param field: Field name used in the error.
    """
    if not isinstance(value, str) or \
            not (netaddr.valid_ipv4(value, netaddr.INET_PTON)
                 or netaddr.valid_ipv6(value)):
        raise ValidationError(field, 'must be a valid ip address')
    return value


def domain(value, field: str) -> str:
    """
    Validates a domain name, e.g. ``example.local``.

    :param value: The domain name.
    :param field: Field name used in the error.
    """
    if not isinstance(value, str) or not DOMAIN_REGEX.match(value):
        raise ValidationError(field, 'must contain a valid domain name')
    return value


def validate_config(config: dict = None) -> dict:
    """
    Validates the settings a ``Netplan`` object is created with.

    :param config: ``{'network': {...}, 'configFile': '...'}``, all optional.
    :returns: The settings with defaults applied.
    """
    config = _mapping({} if config is None else config, 'value')
    _reject_unknown(config, ['network', 'configFile'])

    network = dict(_mapping(config.get('network', {}), 'network'))
    _reject_unknown(
        network, ['version', 'renderer', 'ethernets', 'wifis'], 'network.'
    )
    network['version'] = _integer(
        network.get('version', DEFAULT_VERSION), 'network.version'
    )
    network['renderer'] = _choice(
        network.get('renderer', DEFAULT_RENDERER), 'network.renderer', RENDERERS
    )
    for key in ['ethernets', 'wifis']:
        if key in network:
            _mapping(network[key], f'network.{key}')

    config_file = config.get('configFile', DEFAULT_CONFIG_FILE)
    if not isinstance(config_file, str) or \
            not CONFIG_FILE_REGEX.match(config_file):
        raise ValidationError(
            'configFile', 'must be an absolute path, e.g. /etc/netplan/x.yaml'
        )
    return {'network': network, 'configFile': config_file}


def validate_netplan_interface(options: dict) -> dict:
    """
    Validates a raw netplan interface definition.

    :param options: ``name``, ``type`` and ``definition``.
    """
    options = _mapping(options, 'value')
    _reject_unknown(options, ['name', 'type', 'definition'])
    if 'name' not in options:
        raise ValidationError('name', 'is required')
    if 'definition' not in options:
        raise ValidationError('definition', 'is required')
    return {
        'name': _string(options['name'], 'name'),
        'type': _choice(options.get('type', 'ethernet'), 'type', INTERFACE_TYPES),
        'definition': _mapping(options['definition'], 'definition'),
    }


def validate_access_point(access_point) -> dict:
    """
    Validates wifi access point credentials.

    :param access_point: ``{'ssid': ..., 'wifiPassword': ...}``
    """
    access_point = _mapping(access_point, 'accessPoint')
    _reject_unknown(access_point, ['ssid', 'wifiPassword'], 'accessPoint.')
    for key in ['ssid', 'wifiPassword']:
        if key not in access_point:
            raise ValidationError(f'accessPoint.{key}', 'is required')
        _string(access_point[key], f'accessPoint.{key}')
    return {
        'ssid': access_point['ssid'],
        'wifiPassword': access_point['wifiPassword'],
    }


def validate_interface_options(options: dict) -> dict:
    """
    Validates the high-level description of an interface.

    :param options: ``dhcp``, ``ip``, ``prefix``, ``defaultGateway``,
                    ``domain``, ``nameservers``, ``accessPoint`` and ``type``.
    :returns: The options with ``dhcp`` and ``prefix`` defaulted.
    """
    options = _mapping(options, 'value')
    _reject_unknown(options, [
        'dhcp', 'ip', 'prefix', 'defaultGateway', 'domain', 'nameservers',
        'accessPoint', 'type',
    ])
    validated = {}

    dhcp = options.get('dhcp', False)
    if not isinstance(dhcp, bool):
        raise ValidationError('dhcp', 'must be a boolean')
    validated['dhcp'] = dhcp
    validated['prefix'] = _integer(
        options.get('prefix', DEFAULT_PREFIX), 'prefix', 0, 32
    )
    if options.get('ip') is not None:
        validated['ip'] = ip_address(options['ip'], 'ip')
    if options.get('defaultGateway') is not None:
        validated['defaultGateway'] = ip_address(
            options['defaultGateway'], 'defaultGateway'
        )
    if options.get('domain') is not None:
        validated['domain'] = domain(options['domain'], 'domain')
    if options.get('nameservers') is not None:
        nameservers = options['nameservers']
        if not isinstance(nameservers, (list, tuple)):
            raise ValidationError('nameservers', 'must be an array')
        validated['nameservers'] = [
            ip_address(nameserver, f'nameservers[{index}]')
            for index, nameserver in enumerate(nameservers)
        ]
    if options.get('accessPoint') is not None:
        validated['accessPoint'] = validate_access_point(options['accessPoint'])
    if options.get('type') is not None:
        validated['type'] = _choice(options['type'], 'type', INTERFACE_TYPES)
    return validated
