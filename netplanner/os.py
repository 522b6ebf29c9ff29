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
Running external commands.
"""
import dataclasses
import os
import shutil
import subprocess
import time

from netplanner.logger import Logger

LOG = Logger(__name__)

# Search these on top of $PATH, the network tools commonly live here.
SYSTEM_PATHS = ['/sbin', '/usr/sbin']


class BinaryNotFoundError(Exception):

    """
    An exception for executables that could not be located.
    """

    def __init__(self, message) -> None:
        self.message = message
        super().__init__(self.message)


class ExecutionError(Exception):

    """
    An exception for commands that exited with a non-zero code.
    """

    def __init__(self, message, code: int, stdout: str, stderr: str) -> None:
        self.message = message
        self.code = code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(self.message)


@dataclasses.dataclass
class CommandResult:
    """
    Output of a successful command.
    """
    stdout: str = ''
    stderr: str = ''
    code: int = 0


class _CLI:

    """
    Runs a command and records its output, exit code and duration.
    """

    def __init__(self, args: list) -> None:
        """
        :param args: The command and its arguments.
        """
        self.args = [str(arg) for arg in args]
        self.stdout = ''
        self.stderr = ''
        self.return_code = None
        self.duration = None
        self._run()

    def _run(self) -> None:
        start = time.monotonic()
        try:
            with subprocess.Popen(
                    self.args,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    stdin=subprocess.DEVNULL,
            ) as process:
                stdout, stderr = process.communicate()
                self.return_code = process.returncode
        except FileNotFoundError as error:
            self.stderr = str(error)
            self.return_code = 127
        else:
            self.stdout = stdout.decode('utf-8', errors='replace').strip()
            self.stderr = stderr.decode('utf-8', errors='replace').strip()
        finally:
            self.duration = time.monotonic() - start


def run_command(args: list) -> _CLI:
    """
    Runs a command and returns the finished ``_CLI`` object.

    :param args: The command and its arguments.
    """
    result = _CLI(args)
    LOG.info('Ran %s (exit code %s, %.3fs)',
             result.args, result.return_code, result.duration)
    if result.return_code != 0:
        LOG.debug('stdout: %s', result.stdout)
        LOG.debug('stderr: %s', result.stderr)
    return result


def find_binary(name: str) -> [str, None]:
    """
    Locates an executable in $PATH, ``/sbin`` or ``/usr/sbin``.

    :param name: Name of the executable.
    :returns: The full path, or ``None`` if it was not found.
    """
    paths = os.environ.get('PATH', '').split(os.pathsep)
    for path in SYSTEM_PATHS:
        if path not in paths:
            paths.append(path)
    return shutil.which(name, path=os.pathsep.join(paths))


def execute(binary: str, args: list = None) -> CommandResult:
    """
    Runs ``binary`` with ``args`` and returns its output.

    :param binary: Full path to the executable.
    :param args: Arguments for the executable.
    :raises BinaryNotFoundError: When no binary was given.
    :raises ExecutionError: When the command exits with a non-zero code.
    """
    args = args or []
    if not binary:
        raise BinaryNotFoundError(
            f'Executable not found, can not run with arguments {args}'
        )
    result = run_command([binary] + args)
    if result.return_code != 0:
        raise ExecutionError(
            f'{binary} failed with code {result.return_code} using '
            f'args {args}',
            code=result.return_code,
            stdout=result.stdout,
            stderr=result.stderr,
        )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        code=result.return_code,
    )
