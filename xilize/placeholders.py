"""
# Xilize: placeholders.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Placeholder protection.
"""

import re
import warnings


class PlaceholderMaster:
    """
    Placeholder protection for one run of the inline-markup pipeline.

    Protected text (literals, code, existing markup, generated tags) must not be altered
    by the passes to follow. To protect a string, it is stashed in a table
    and temporarily replaced by a key consisting of code points in the main Unicode Private Use Area.
    Specifically, the key shall be of the form `«marker»«run_characters»«marker»`,
    where «marker» is `U+F8FF`, and «run_characters» are between `U+E000` and `U+E009`,
    each representing a decimal digit of the key's index in the table.

    Keys contain no letters, digits, whitespace or markup punctuation,
    so the passes treat them as opaque; «marker» itself counts as a phrase boundary.

    The very first call should be to `replace_marker_occurrences(...)`,
    lest occurrences of «marker» in the input be confounding.
    The very last call should be to `unprotect(...)`.

    The table and its counter belong to the instance,
    so every pipeline run uses its own master.
    """
    MARKER = '\uF8FF'
    _RUN_CHARACTER_MIN = '\uE000'
    _RUN_CHARACTER_MAX = '\uE009'

    _RUN_CODE_POINT_MIN = ord(_RUN_CHARACTER_MIN)

    _PLACEHOLDER_PATTERN_COMPILED = re.compile(
        pattern=f'{MARKER} (?P<run_characters> [{_RUN_CHARACTER_MIN}-{_RUN_CHARACTER_MAX}]+ ) {MARKER}',
        flags=re.VERBOSE,
    )

    _snippets: list[str]

    def __init__(self):
        self._snippets = []

    @property
    def snippet_count(self) -> int:
        return len(self._snippets)

    def replace_marker_occurrences(self, string: str) -> str:
        """
        Replace occurrences of «marker» with a placeholder.
        """
        if PlaceholderMaster.MARKER not in string:
            return string

        return re.sub(
            pattern=PlaceholderMaster.MARKER,
            repl=lambda _: self.protect(PlaceholderMaster.MARKER),
            string=string,
        )

    def protect(self, string: str) -> str:
        """
        Protect a string by stashing it and returning its placeholder.
        """
        index = len(self._snippets)
        self._snippets.append(string)

        run_characters = ''.join(
            chr(int(digit) + PlaceholderMaster._RUN_CODE_POINT_MIN)
            for digit in str(index)
        )

        return f'{PlaceholderMaster.MARKER}{run_characters}{PlaceholderMaster.MARKER}'

    def unprotect(self, string: str) -> str:
        """
        Unprotect a string by restoring placeholders to their strings.

        Stashed strings may themselves contain placeholders, which are restored in turn.
        """
        if PlaceholderMaster.MARKER not in string:
            return string

        return re.sub(
            pattern=PlaceholderMaster._PLACEHOLDER_PATTERN_COMPILED,
            repl=self._unprotect_substitute_function,
            string=string,
        )

    def _unprotect_substitute_function(self, placeholder_match: re.Match) -> str:
        run_characters = placeholder_match.group('run_characters')
        index = int(''.join(
            str(ord(character) - PlaceholderMaster._RUN_CODE_POINT_MIN)
            for character in run_characters
        ))

        try:
            snippet = self._snippets[index]
        except IndexError:
            warnings.warn(
                f'warning: placeholder encountered with unknown index {index}; left as is\n\n'
                f'Possible cause: a placeholder from another pipeline run has leaked into this one'
            )
            return placeholder_match.group()

        return self.unprotect(snippet)
