"""
# Xilize: utilities.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Common utility functions.
"""

import re
from typing import Optional


def compute_longest_common_prefix(strings: list[str]) -> str:
    shortest_string = min(strings, key=len, default='')

    prefix = shortest_string
    while len(prefix) > 0:
        if all(string.startswith(prefix) for string in strings):
            break

        prefix = prefix[:-1]

    return prefix


def de_indent(string: str) -> str:
    """
    De-indent a string.

    Empty lines do not count towards the longest common indentation.
    Whitespace-only lines do count towards the longest common indentation,
    except for the last line, which, if whitespace-only, will have its whitespace erased.
    Used on script code, where the common indentation of a block's lines is incidental.
    """
    string = re.sub(
        pattern=r'^ [^\S\n]+ \Z',
        repl='',
        string=string,
        flags=re.ASCII | re.MULTILINE | re.VERBOSE,
    )
    indentations = re.findall(
        pattern=r'^ [^\S\n]+ | ^ (?! $ )',
        string=string,
        flags=re.ASCII | re.MULTILINE | re.VERBOSE,
    )
    longest_common_indentation = compute_longest_common_prefix(indentations)

    string = re.sub(
        pattern=f'^ {re.escape(longest_common_indentation)}',
        repl='',
        string=string,
        flags=re.MULTILINE | re.VERBOSE,
    )

    return string


def escape_attribute_value_html(value: str) -> str:
    """
    Escape an attribute value that will be delimited by double quotes.

    Existing entity references are left alone.
    Entity names are taken to be any run of up to 31 letters,
    decimal code points any run of up to 7 digits,
    and hexadecimal code points any run of up to 6 digits.
    """
    value = re.sub(
        pattern='''
            [&]
            (?!
                (?:
                    [a-zA-Z]{1,31}
                        |
                    [#] (?: [0-9]{1,7} | [xX] [0-9a-fA-F]{1,6} )
                )
                [;]
            )
        ''',
        repl='&amp;',
        string=value,
        flags=re.VERBOSE,
    )
    value = re.sub(pattern='<', repl='&lt;', string=value)
    value = re.sub(pattern='>', repl='&gt;', string=value)
    value = re.sub(pattern='"', repl='&quot;', string=value)

    return value


def replace_unkind_characters(string: str) -> str:
    """
    Escape every ampersand and angle bracket, entity references included.
    """
    string = string.replace('&', '&amp;')
    string = string.replace('>', '&gt;')
    string = string.replace('<', '&lt;')

    return string


def break_lines(string: str) -> str:
    return string.replace('\n', '<br />\n')


def is_true_value(value: str) -> bool:
    return re.fullmatch(pattern='true|yes|1|on', string=value, flags=re.IGNORECASE) is not None


def normalise_line(line: str, tab_replacement: str) -> str:
    """
    Strip trailing whitespace from a line, then expand its tabs.
    """
    line = re.sub(pattern=r'\s+ \Z', repl='', string=line, flags=re.VERBOSE)
    return line.replace('\t', tab_replacement)


def wrap_line(line: str, width: int) -> list[str]:
    """
    Wrap a line at the last space at or before `width`.

    A non-positive width, or a line with no suitable space, leaves the line whole.
    """
    if width < 1:
        return [line]

    wrapped_lines = []
    while True:
        if width > len(line):
            wrapped_lines.append(line)
            break

        space_index = line.rfind(' ', 0, width + 1)
        if space_index == -1:
            wrapped_lines.append(line)
            break

        wrapped_lines.append(line[:space_index])
        line = line[space_index + 1:]
        if line == '':
            break

    return wrapped_lines


def none_to_empty_string(string: Optional[str]) -> str:
    if string is None:
        return ''

    return string
