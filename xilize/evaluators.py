"""
# Xilize: evaluators.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Script evaluation for macros, conditions and custom signatures.
"""

import abc
import ast
import traceback
from typing import Any, Optional

from xilize.exceptions import EvaluationException


class ScriptEvaluator(abc.ABC):
    """
    Base class for a script evaluator.

    An evaluator holds one namespace for the duration of a run;
    callers bind names into it before evaluating code.
    """
    @abc.abstractmethod
    def bind(self, name: str, value: Any):
        raise NotImplementedError

    @abc.abstractmethod
    def evaluate_value(self, code: str, location: str, line_number: int = 1) -> Any:
        """
        Evaluate code and return the resulting object.

        `location` names the source of the code (used in diagnostics),
        and `line_number` is the source line of the first line of code.
        Failures raise `EvaluationException`.
        """
        raise NotImplementedError

    def evaluate(self, code: str, location: str, line_number: int = 1) -> str:
        value = self.evaluate_value(code, location, line_number)
        if value is None:
            return ''

        return str(value)


class PythonEvaluator(ScriptEvaluator):
    """
    Evaluator backed by Python `exec` and `eval`.

    Every statement of the code is executed,
    and if the final statement is an expression, its value is the result.
    Line numbers are shifted so that tracebacks refer to source lines.
    """
    _namespace: dict[str, Any]

    def __init__(self):
        self._namespace = {}

    @property
    def namespace(self) -> dict[str, Any]:
        return self._namespace

    def bind(self, name: str, value: Any):
        self._namespace[name] = value

    def evaluate_value(self, code: str, location: str, line_number: int = 1) -> Any:
        try:
            module = ast.parse(code, filename=location, mode='exec')
        except SyntaxError as syntax_error:
            failure_line_number = None
            if syntax_error.lineno is not None:
                failure_line_number = syntax_error.lineno + line_number - 1
            raise EvaluationException(f'syntax error: {syntax_error.msg}', failure_line_number) from syntax_error

        ast.increment_lineno(module, line_number - 1)

        final_expression = None
        if len(module.body) > 0 and isinstance(module.body[-1], ast.Expr):
            final_expression = ast.Expression(body=module.body.pop().value)

        try:
            exec(compile(module, location, 'exec'), self._namespace)
            if final_expression is None:
                return None
            return eval(compile(final_expression, location, 'eval'), self._namespace)
        except EvaluationException:
            raise
        except Exception as exception:
            raise EvaluationException(
                f'{type(exception).__name__}: {exception}',
                PythonEvaluator._find_failure_line_number(exception, location),
            ) from exception

    @staticmethod
    def _find_failure_line_number(exception: Exception, location: str) -> Optional[int]:
        failure_line_number = None
        for frame_summary in traceback.extract_tb(exception.__traceback__):
            if frame_summary.filename == location:
                failure_line_number = frame_summary.lineno

        return failure_line_number
