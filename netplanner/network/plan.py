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
The netplan document and the builder for interface definitions.
"""
from netplanner.logger import Logger

LOG = Logger(__name__)

DEFAULT_ROUTE = '0.0.0.0/0'

interface_maps = {
    'ethernet': 'ethernets',
    'wifi': 'wifis',
}


class UnsupportedTypeError(Exception):

    """
    An exception for interface types netplanner does not handle.
    """

    def __init__(self, message) -> None:
        self.message = message
        super().__init__(self.message)


def new_plan(network: dict) -> dict:
    """
    Creates a plan document from validated ``network`` settings.

    :param network: ``version``, ``renderer`` and optionally ``ethernets``
                    and ``wifis``.
    """
    return {'network': dict(network)}


def interface_map(plan: dict, iface_type: str) -> dict:
    """
    Returns the map holding interfaces of ``iface_type``, creating it if the
    plan does not have one yet.

    :param plan: The plan document.
    :param iface_type: ``ethernet`` or ``wifi``.
    :raises UnsupportedTypeError: For any other type.
    """
    if iface_type not in interface_maps:
        raise UnsupportedTypeError(
            f'Unsupported interface type: {iface_type}'
        )
    network = plan.setdefault('network', {})
    key = interface_maps[iface_type]
    if network.get(key) is None:
        network[key] = {}
    return network[key]


def configure_netplan_interface(
        plan: dict,
        name: str,
        iface_type: str,
        definition: dict,
) -> None:
    """
    Stores ``definition`` for interface ``name``, replacing any previous
    definition of that interface.

    :param plan: The plan document.
    :param name: Name of the interface, e.g. ``eth0``.
    :param iface_type: ``ethernet`` or ``wifi``.
    :param definition: A netplan interface definition.
    """
    interfaces = interface_map(plan, iface_type)
    if name in interfaces:
        LOG.info('Replacing definition of %s interface [%s]', iface_type, name)
    interfaces[name] = definition


def build_definition(options: dict) -> dict:
    """
    Builds a netplan interface definition from validated options. With DHCP
    enabled every static setting is dropped.

    :param options: Validated interface options.
    """
    if options.get('dhcp'):
        return {'dhcp4': 'yes'}
    definition = {}
    if options.get('ip'):
        definition['addresses'] = [f'{options["ip"]}/{options["prefix"]}']
    if options.get('nameservers') is not None:
        nameservers = {}
        if options.get('domain'):
            nameservers['search'] = [options['domain']]
        nameservers['addresses'] = list(options['nameservers'])
        definition['nameservers'] = nameservers
    if options.get('defaultGateway'):
        definition['routes'] = [
            {
                'to': DEFAULT_ROUTE,
                'via': options['defaultGateway'],
            },
        ]
    return definition


def add_access_point(definition: dict, access_point: dict) -> None:
    """
    Adds wifi credentials to an interface definition.

    :param definition: The interface definition to update.
    :param access_point: ``ssid`` and ``wifiPassword``.
    """
    definition['access-points'] = {
        access_point['ssid']: {
            'password': access_point['wifiPassword'],
        },
    }


def resolve_type(options: dict) -> str:
    """
    Resolves the interface type. An explicit ``type`` wins, otherwise an
    interface with an access point is wifi and anything else is ethernet.

    :param options: Validated interface options.
    """
    if options.get('type'):
        return options['type']
    if options.get('accessPoint'):
        return 'wifi'
    return 'ethernet'


def interface_definition(options: dict) -> tuple:
    """
    Builds the type and definition for a high-level interface description.

    :param options: Validated interface options.
    :returns: ``(type, definition)``
    """
    iface_type = resolve_type(options)
    definition = build_definition(options)
    access_point = options.get('accessPoint')
    if access_point:
        if iface_type == 'wifi':
            add_access_point(definition, access_point)
        else:
            LOG.warning('Ignoring access point [%s] for %s interface.',
                        access_point['ssid'], iface_type)
    return iface_type, definition
