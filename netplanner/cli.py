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
The netplanner command line.
"""

import json
import sys

import click
import yaml
from click_option_group import optgroup
from click_option_group import MutuallyExclusiveOptionGroup

from netplanner.logger import Logger
from netplanner.network import config
from netplanner.network.plan import UnsupportedTypeError
from netplanner.network.validate import INTERFACE_TYPES
from netplanner.network.validate import RENDERERS
from netplanner.network.validate import ValidationError
from netplanner.os import BinaryNotFoundError
from netplanner.os import ExecutionError

CONTEXT_SETTINGS = {'help_option_names': ['-h', '--help']}
LOG = Logger(__name__)


def config_file_option(function):
    """
    Adds the ``--config-file`` option to a command.
    """
    return click.option(
        '--config-file',
        metavar='<file path>',
        default=None,
        help='Path to the netplan configuration file '
             '(default: /etc/netplan/config.yaml).'
    )(function)


def _run(action, **kwargs):
    """
    Runs a ``config`` action, exiting with a message if it fails.
    """
    try:
        return action(**kwargs)
    except (ValidationError, UnsupportedTypeError) as error:
        LOG.error(error.message)
        sys.exit(f'Invalid configuration: {error.message}')
    except BinaryNotFoundError as error:
        LOG.critical(error.message)
        sys.exit(error.message)
    except ExecutionError as error:
        LOG.critical(error.message)
        LOG.critical(error.stdout)
        LOG.critical(error.stderr)
        sys.exit(f'Failed! {error.message}\n{error.stderr}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option()
def netplanner() -> None:
    """
    Manages the netplan configuration of this host.

    \f
    """
    LOG.info('Invoked.')


@netplanner.command()
@click.argument('name')
@optgroup.group(
    'Addressing',
    cls=MutuallyExclusiveOptionGroup,
    help='Use DHCP or give a static IP.'
)
@optgroup.option(
    '--dhcp',
    is_flag=True,
    default=False,
    help='Use DHCP, static options are ignored.'
)
@optgroup.option(
    '--ip',
    metavar='<address>',
    help='A static IP address.'
)
@click.option(
    '--prefix',
    type=click.IntRange(0, 32),
    default=None,
    help='Prefix length of the static IP (default: 24).'
)
@click.option(
    '--gateway',
    metavar='<address>',
    help='The gateway for the default route.'
)
@click.option(
    '--dns',
    type=str,
    default=None,
    help='Comma delimited list of one or more IP addresses for DNS.'
)
@click.option(
    '--search',
    type=str,
    default=None,
    help='A DNS search domain.'
)
@click.option(
    '--type',
    type=click.Choice(INTERFACE_TYPES),
    default=None,
    help='Interface type (default: wifi if --ssid is given, else ethernet).'
)
@click.option(
    '--ssid',
    type=str,
    default=None,
    help='SSID of the wifi access point.'
)
@click.option(
    '--wifi-password',
    type=str,
    default=None,
    help='Password of the wifi access point.'
)
@click.option(
    '--renderer',
    type=click.Choice(RENDERERS),
    default=None,
    help='The netplan renderer to use.'
)
@click.option(
    '--defer',
    is_flag=True,
    default=False,
    help='Only write the configuration file, do not generate or apply.'
)
@click.option(
    '--force',
    is_flag=True,
    default=False,
    help='Apply even if the configuration file did not change.'
)
@config_file_option
def interface(**kwargs) -> None:
    """
    Configures an interface, writes the netplan configuration and applies it.

    \b
    NAME of the interface to configure.
    \f
    """
    LOG.info('Calling interface with: %s',
             {k: v for k, v in kwargs.items() if k != 'wifi_password'})
    _run(config.interface, **kwargs)


@netplanner.command()
@click.option(
    '--output',
    type=click.Choice(['yaml', 'json']),
    default='yaml',
    help='Output format (default: yaml).'
)
@config_file_option
def status(**kwargs) -> None:
    """
    Prints the addresses and default gateways of every interface.
    """
    output = kwargs.pop('output')
    report = _run(config.status, **kwargs)
    if output == 'json':
        click.echo(json.dumps(report, indent=2))
    else:
        click.echo(yaml.safe_dump(report, default_flow_style=False), nl=False)


@netplanner.command()
@config_file_option
def generate(**kwargs) -> None:
    """
    Runs ``netplan generate``.
    """
    _run(config.generate, **kwargs)
    click.echo('Generated backend configuration.')


@netplanner.command()
@config_file_option
def apply(**kwargs) -> None:
    """
    Runs ``netplan apply``.
    """
    _run(config.apply, **kwargs)
