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
Handles the netplan configuration of the running system.
"""
import click

from netplanner.logger import Logger
from netplanner.network.netplan import Netplan

LOG = Logger(__name__)


def _split(value: [list, str, None]) -> [list, None]:
    """
    Splits a comma delimited string, lists are returned as they are.
    """
    if value is None or isinstance(value, list):
        return value
    items = [item.strip() for item in value.split(',') if item.strip()]
    return items or None


def load(**kwargs) -> Netplan:
    """
    Creates a ``Netplan`` for the configuration file and loads it.

    :keyword config_file: Path to the netplan configuration file.
    :keyword renderer: Renderer to set on the plan.
    """
    config = {}
    if kwargs.get('config_file'):
        config['configFile'] = kwargs['config_file']
    netplan = Netplan(config)
    netplan.load_config()
    renderer = kwargs.get('renderer')
    if renderer:
        netplan.plan.setdefault('network', {})['renderer'] = renderer
    return netplan


def interface_options(**kwargs) -> dict:
    """
    Translates command line options to ``Netplan.configure_interface``
    options.
    """
    options = {
        'dhcp': kwargs.get('dhcp', False),
        'ip': kwargs.get('ip'),
        'defaultGateway': kwargs.get('gateway'),
        'domain': kwargs.get('search'),
        'nameservers': _split(kwargs.get('dns')),
        'type': kwargs.get('type'),
    }
    if kwargs.get('prefix') is not None:
        options['prefix'] = kwargs['prefix']
    if kwargs.get('ssid') or kwargs.get('wifi_password'):
        options['accessPoint'] = {
            'ssid': kwargs.get('ssid'),
            'wifiPassword': kwargs.get('wifi_password'),
        }
    return {key: value for key, value in options.items() if value is not None}


def interface(**kwargs) -> None:
    """
    Configures the given interface, then generates and applies the
    configuration unless deferred.

    :keyword name: Name of the interface.
    :keyword defer: Only write the configuration file.
    :keyword force: Apply even if the configuration file did not change.
    """
    name = kwargs['name']
    LOG.info('Working on interface [%s] ... ', name)
    netplan = load(**kwargs)
    netplan.configure_interface(name, **interface_options(**kwargs))
    if netplan.write_config():
        click.echo(f'Wrote {netplan.config_file}')
    else:
        click.echo(f'{netplan.config_file} is up to date.')
    if kwargs.get('defer'):
        LOG.info('Deferring netplan generate/apply.')
        return
    netplan.generate()
    if netplan.apply(force=kwargs.get('force', False)) is None:
        click.echo('Nothing to apply.')
    else:
        click.echo(f'Applied configuration for: {name}')


def status(**kwargs) -> dict:
    """
    Returns the status report of the running system.
    """
    return load(**kwargs).status()


def generate(**kwargs) -> None:
    """
    Runs ``netplan generate`` for the configuration file.
    """
    result = load(**kwargs).generate()
    LOG.debug(vars(result))


def apply(**kwargs) -> None:
    """
    Runs ``netplan apply`` for the configuration file.
    """
    result = load(**kwargs).apply()
    LOG.debug(vars(result))
    click.echo('Applied configuration.')
