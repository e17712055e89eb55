"""Evaluation of sub-expressions embedded in command-line arguments.

Three forms reach the evaluator:

- ``$name``        variable lookup
- ``$(expr)``      expression, evaluated by a small literal/arithmetic interpreter
- ``${cmd}``       command substitution and ``$<cmd>`` file substitution,
                   delegated to a host supplied command runner

Whatever comes back is coerced to text before it becomes an argument value.
"""

from __future__ import annotations

import ast
import operator
import os
from typing import Any, Callable, Dict, Mapping, Optional

import structlog

from ..errors import EvaluationFailure

logger = structlog.get_logger(__name__)

CommandRunner = Callable[[str, str], Any]

MAX_RESULT_BITS = 10000
MAX_SEQUENCE_LENGTH = 1_000_000


def _power(base: Any, exponent: Any) -> Any:
    if isinstance(base, int) and isinstance(exponent, int) and abs(base) > 1:
        if exponent * base.bit_length() > MAX_RESULT_BITS:
            raise EvaluationFailure(f"result of {base} ** {exponent} is too large")
    elif isinstance(exponent, (int, float)) and abs(exponent) > MAX_RESULT_BITS:
        raise EvaluationFailure(f"exponent {exponent} is too large")
    return operator.pow(base, exponent)


def _multiply(left: Any, right: Any) -> Any:
    for sequence, count in ((left, right), (right, left)):
        if isinstance(sequence, (str, list)) and isinstance(count, int):
            if len(sequence) * count > MAX_SEQUENCE_LENGTH:
                raise EvaluationFailure("repeated sequence is too long")
    return operator.mul(left, right)


_BINARY_OPS: Dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: _multiply,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: _power,
}

_UNARY_OPS: Dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.Not: operator.not_,
}


def to_text(value: Any) -> str:
    """Coerce an evaluation result to its argument form."""
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    if isinstance(value, bool):
        return "t" if value else "nil"
    if isinstance(value, (list, tuple)):
        return " ".join(to_text(item) for item in value)
    return str(value)


class Evaluator:
    """Evaluate embedded sub-expressions for the tokenizer."""

    def __init__(
        self,
        variables: Optional[Mapping[str, Any]] = None,
        functions: Optional[Mapping[str, Callable[..., Any]]] = None,
        command_runner: Optional[CommandRunner] = None,
    ):
        self.variables = variables if variables is not None else os.environ
        self.functions = dict(functions or {})
        self.command_runner = command_runner

    def variable(self, name: str) -> str:
        return to_text(self.variables.get(name, ""))

    def expression(self, source: str, position: Optional[int] = None) -> str:
        try:
            tree = ast.parse(source.strip() or "None", mode="eval")
            result = self._eval(tree.body)
            text = to_text(result)
        except EvaluationFailure:
            raise
        except RecursionError as exc:
            raise EvaluationFailure("expression nested too deeply", source=source, position=position) from exc
        except Exception as exc:
            raise EvaluationFailure(str(exc) or type(exc).__name__, source=source, position=position) from exc
        logger.debug("evaluate.expression", source=source, result=text)
        return text

    def command(self, source: str, delimiter: str, position: Optional[int] = None) -> str:
        """Run a ``${...}`` (delimiter ``{``) or ``$<...>`` (delimiter ``<``) substitution."""
        if self.command_runner is None:
            raise EvaluationFailure(
                "command substitution is not available", source=source, position=position
            )
        try:
            text = to_text(self.command_runner(source, delimiter))
        except EvaluationFailure:
            raise
        except Exception as exc:
            raise EvaluationFailure(str(exc), source=source, position=position) from exc
        logger.debug("evaluate.command", source=source, delimiter=delimiter)
        return text

    # Interpreter -------------------------------------------------------------------
    def _eval(self, node: ast.AST) -> Any:
        if isinstance(node, ast.Constant):
            return node.value
        if isinstance(node, ast.Name):
            if node.id in self.variables:
                return self._coerce_number(self.variables[node.id])
            if node.id in ("t", "True"):
                return True
            if node.id in ("nil", "None", "False"):
                return None if node.id != "False" else False
            raise EvaluationFailure(f"unbound symbol: {node.id}")
        if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
            return _BINARY_OPS[type(node.op)](self._eval(node.left), self._eval(node.right))
        if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
            return _UNARY_OPS[type(node.op)](self._eval(node.operand))
        if isinstance(node, (ast.List, ast.Tuple)):
            return [self._eval(item) for item in node.elts]
        if isinstance(node, ast.Call) and isinstance(node.func, ast.Name):
            func = self.functions.get(node.func.id)
            if func is None:
                raise EvaluationFailure(f"undefined function: {node.func.id}")
            args = [self._eval(arg) for arg in node.args]
            try:
                return func(*args)
            except EvaluationFailure:
                raise
            except Exception as exc:
                raise EvaluationFailure(f"{node.func.id}: {exc!r}") from exc
        raise EvaluationFailure(f"unsupported expression: {type(node).__name__}")

    @staticmethod
    def _coerce_number(value: Any) -> Any:
        if isinstance(value, str):
            for kind in (int, float):
                try:
                    return kind(value)
                except ValueError:
                    continue
        return value
