"""
# Xilize: cli.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Command-line interface.
"""

import argparse
import os
import re
import sys

from xilize._version import __version__
from xilize.constants import (
    COMMAND_LINE_ERROR_EXIT_CODE,
    GENERIC_ERROR_EXIT_CODE,
    IO_ERROR_EXIT_CODE,
    OKAY_EXIT_CODE,
)
from xilize.core import create_master_scope, xilize_document
from xilize.exceptions import XilizeException
from xilize.scopes import Scope

DESCRIPTION = '''
    Convert Xilize markup to XHTML.
'''
XIL_FILE_NAME_HELP = '''
    name of Xilize file to be converted
    (can be abbreviated as `file` or `file.` for increased productivity)
'''
ALL_MODE_HELP = '''
    convert all Xilize files under the working directory
'''
DEFINITION_HELP = '''
    define a key for every file converted (may be given more than once)
'''


def is_xil_file(file_name: str) -> bool:
    return file_name.endswith('.xil')


def extract_xil_name(xil_file_name_argument: str) -> str:
    """
    Extract name-without-extension from a Xilize file name argument.

    Here, Xilize file name argument may be of the form `«xil_name».xil`, `«xil_name».`, or `«xil_name»`.
    The path is normalised by resolving `./` and `../`.
    """
    xil_file_name_argument = os.path.normpath(xil_file_name_argument)
    xil_name = re.sub(pattern=r'[.](xil)? \Z', repl='', string=xil_file_name_argument, flags=re.VERBOSE)

    return xil_name


def parse_definition(definition_argument: str) -> tuple[str, str]:
    """
    Parse a `KEY=VALUE` definition argument.
    """
    key, separator, value = definition_argument.partition('=')
    if separator == '' or key.strip() == '':
        raise argparse.ArgumentTypeError(f'definition `{definition_argument}` is not of the form KEY=VALUE')

    return key.strip(), value


def parse_command_line_arguments() -> argparse.Namespace:
    argument_parser = argparse.ArgumentParser(description=DESCRIPTION)
    argument_parser.add_argument(
        '-v', '--version',
        action='version',
        version=f'{argument_parser.prog} version {__version__}',
    )
    argument_parser.add_argument(
        '-a', '--all',
        dest='all_mode_enabled',
        action='store_true',
        help=ALL_MODE_HELP,
    )
    argument_parser.add_argument(
        '-d', '--define',
        dest='definitions',
        action='append',
        default=[],
        help=DEFINITION_HELP,
        metavar='KEY=VALUE',
        type=parse_definition,
    )
    argument_parser.add_argument(
        'xil_file_name_arguments',
        default=[],
        help=XIL_FILE_NAME_HELP,
        metavar='file.xil',
        nargs='*',
    )

    return argument_parser.parse_args()


def generate_html_file(master_scope: Scope, xil_file_name_argument: str, uses_command_line_argument: bool) -> int:
    """
    Convert one Xilize file, writing the output beside it.

    Returns an exit code for the file.
    """
    xil_name = extract_xil_name(xil_file_name_argument)
    xil_file_name = f'{xil_name}.xil'
    try:
        with open(xil_file_name, 'r', encoding='utf-8') as xil_file:
            xil = xil_file.read()
    except FileNotFoundError as file_not_found_error:
        if uses_command_line_argument:
            print(f'error: argument `{xil_file_name_argument}`: file `{xil_file_name}` not found', file=sys.stderr)
            return COMMAND_LINE_ERROR_EXIT_CODE
        else:
            error_message = f'file `{xil_file_name}` not found for `{xil_file_name}` in xil_file_name_list'
            raise FileNotFoundError(error_message) from file_not_found_error

    error_count_before = master_scope.reporter.error_count
    try:
        html = xilize_document(xil, xil_file_name, master_scope)
    except XilizeException as exception:
        print(f'error: `{xil_file_name}`: {exception}', file=sys.stderr)
        return exception.exit_code

    html_file_name = f'{xil_name}.{master_scope.value("_OutputExtension_")}'
    try:
        with open(html_file_name, 'w', encoding='utf-8') as html_file:
            html_file.write(html)
        print(f'success: wrote to `{html_file_name}`')
    except IOError:
        print(f'error: cannot write to `{html_file_name}`', file=sys.stderr)
        return IO_ERROR_EXIT_CODE

    if master_scope.reporter.error_count > error_count_before:
        return GENERIC_ERROR_EXIT_CODE

    return OKAY_EXIT_CODE


def main():
    parsed_arguments = parse_command_line_arguments()
    xil_file_name_arguments = parsed_arguments.xil_file_name_arguments
    all_mode_enabled = parsed_arguments.all_mode_enabled
    definitions = dict(parsed_arguments.definitions)

    master_scope = create_master_scope(definitions=definitions)
    exit_codes = [OKAY_EXIT_CODE]

    if all_mode_enabled:
        if len(xil_file_name_arguments) > 0:
            print('error: option -a (or --all) cannot be used with positional argument', file=sys.stderr)
            sys.exit(COMMAND_LINE_ERROR_EXIT_CODE)

        xil_file_names = [
            os.path.join(path, file_name)
            for path, _, file_names in os.walk(os.curdir)
            for file_name in file_names
            if is_xil_file(file_name)
        ]
        for xil_file_name in sorted(xil_file_names):
            exit_codes.append(generate_html_file(master_scope, xil_file_name, uses_command_line_argument=False))

    else:
        for xil_file_name_argument in xil_file_name_arguments:
            exit_codes.append(generate_html_file(master_scope, xil_file_name_argument, uses_command_line_argument=True))

    sys.exit(max(exit_codes))


if __name__ == '__main__':
    main()
