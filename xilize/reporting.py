"""
# Xilize: reporting.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Diagnostic reporting.
"""

import sys
from typing import Optional, TextIO


def format_diagnostic(severity: str, message: str, source: Optional[str] = None, line_number: Optional[int] = None) -> str:
    """
    Format a diagnostic as ``«severity»: `«source»`, line «line_number»: «message»``.

    The source and line parts are omitted when unknown.
    """
    if source is None:
        return f'{severity}: {message}'

    if line_number is None:
        return f'{severity}: `{source}`: {message}'

    return f'{severity}: `{source}`, line {line_number}: {message}'


class Reporter:
    """
    Diagnostic sink shared by every scope of a run.

    Diagnostics are printed to `stream` (standard error when None, resolved at print time).
    Errors and warnings are counted, so that the command line can pick an exit code.
    """
    _stream: Optional[TextIO]
    _error_count: int
    _warning_count: int

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream
        self._error_count = 0
        self._warning_count = 0

    @property
    def error_count(self) -> int:
        return self._error_count

    @property
    def warning_count(self) -> int:
        return self._warning_count

    def reset_counts(self):
        self._error_count = 0
        self._warning_count = 0

    def report(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self._print(format_diagnostic('info', message, source, line_number))

    def warning(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self._warning_count += 1
        self._print(format_diagnostic('warning', message, source, line_number))

    def error(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self._error_count += 1
        self._print(format_diagnostic('error', message, source, line_number))

    def debug(self, message: str, source: Optional[str] = None, line_number: Optional[int] = None):
        self._print(format_diagnostic('debug', message, source, line_number))

    def _print(self, diagnostic: str):
        stream = sys.stderr if self._stream is None else self._stream
        print(diagnostic, file=stream)
