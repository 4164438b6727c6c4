"""
# Xilize: exceptions.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Exception classes.
"""

from typing import Optional

from xilize.constants import GENERIC_ERROR_EXIT_CODE


class XilizeException(Exception):
    _exit_code: int

    def __init__(self, message: str, exit_code: int = GENERIC_ERROR_EXIT_CODE):
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> int:
        return self._exit_code


class TranslationException(XilizeException):
    pass


class EvaluationException(XilizeException):
    """
    Failure raised by a script evaluator.

    `line_number` is the best-effort source line of the failure, or None if unknown.
    """
    _line_number: Optional[int]

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self._line_number = line_number

    @property
    def line_number(self) -> Optional[int]:
        return self._line_number


class SignatureOverrideException(XilizeException):
    _signature_name: str

    def __init__(self, signature_name: str):
        super().__init__(f'signature `{signature_name}` overwritten by a native signature')
        self._signature_name = signature_name

    @property
    def signature_name(self) -> str:
        return self._signature_name
