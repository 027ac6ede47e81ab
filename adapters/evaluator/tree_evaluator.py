"""
Adapter: TreeEvaluator
Implementuje port Evaluator — iteracyjne przejście drzewa parsowania VinLisp
(jawny stos ramek, głębokość zagnieżdżenia nie zależy od stosu Pythona).

Arytmetyka całkowita o stałej szerokości (domyślnie 64 bity, jak `long` w C):
  + - *     zawijanie w kodzie U2 (overflow="wrap") albo BAD_NUM (overflow="error")
  / %       dzielenie i reszta z obcięciem do zera; dzielnik 0 → DIV_ZERO
  ^         potęgowanie przez podnoszenie do kwadratu; wynik poza zakresem → BAD_NUM
  min max   mniejszy / większy z argumentów

Błędy są wartościami (ErrorValue), nie wyjątkami. Fold idzie od lewej,
pierwszy błąd kończy obliczenie węzła i przechodzi w górę bez zmian.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from contracts import (
    ERROR_MESSAGES,
    ErrorKind,
    ErrorValue,
    EvalResult,
    ExpressionNode,
    NumberNode,
    NumberValue,
    OperatorNode,
    ProgramNode,
    TreeNode,
    Value,
)

_NUMBER_RE = re.compile(r"-?[0-9]+")


class TreeEvaluator:
    """Ewaluator drzewa VinLisp ze stałą szerokością liczb całkowitych."""

    def __init__(
        self,
        int_bits: int = 64,
        overflow: Literal["wrap", "error"] = "wrap",
    ) -> None:
        if int_bits < 2:
            raise ValueError(f"int_bits must be at least 2, got {int_bits}")
        if overflow not in ("wrap", "error"):
            raise ValueError(f"Unknown overflow policy: {overflow!r}")
        self.int_bits = int_bits
        self.overflow = overflow
        self.min_int = -(1 << (int_bits - 1))
        self.max_int = (1 << (int_bits - 1)) - 1

        self._ops: dict[str, Callable[[int, int], Value]] = {
            "+":   lambda a, b: self._narrow(a + b),
            "-":   lambda a, b: self._narrow(a - b),
            "*":   lambda a, b: self._narrow(a * b),
            "/":   self._div,
            "%":   self._mod,
            "^":   self._pow,
            "min": lambda a, b: NumberValue(value=min(a, b)),
            "max": lambda a, b: NumberValue(value=max(a, b)),
        }

    # -- Evaluator protocol ------------------------------------------------

    def eval_tree(self, node: TreeNode) -> EvalResult:
        value, steps = self._eval(node)
        return EvalResult(value=value, steps=steps)

    def apply_operator(self, x: Value, op: str, y: Value) -> Value:
        if isinstance(x, ErrorValue):
            return x
        if isinstance(y, ErrorValue):
            return y

        fn = self._ops.get(op)
        if fn is None:
            return ErrorValue(error=ErrorKind.BAD_OP)
        return fn(x.value, y.value)

    # -- Prywatne ----------------------------------------------------------

    def _eval(self, node: TreeNode) -> tuple[Value, list[str]]:
        """Zwraca (wartość, lista kroków). Jawny stos ramek zamiast rekurencji."""

        if isinstance(node, NumberNode):
            return self._number(node.text), []

        steps: list[str] = []
        stack = [_frame(node)]
        value: Value | None = None   # wynik właśnie zamkniętego operandu

        while stack:
            frame = stack[-1]

            if value is not None:
                # błąd przechodzi w górę bez zmian przez wszystkie ramki
                if isinstance(value, ErrorValue):
                    return value, steps
                if frame.acc is None:
                    frame.acc = value
                else:
                    result = self.apply_operator(frame.acc, frame.op, value)
                    steps.append(f"{_fmt(frame.acc)} {frame.op} {_fmt(value)} = {_fmt(result)}")
                    if isinstance(result, ErrorValue):
                        return result, steps
                    frame.acc = result
                value = None

            if frame.index < len(frame.operands):
                child = frame.operands[frame.index]
                frame.index += 1
                if isinstance(child, NumberNode):
                    value = self._number(child.text)
                else:
                    stack.append(_frame(child))
                continue

            stack.pop()
            value = frame.acc

        return value, steps

    def _number(self, text: str) -> Value:
        if not _NUMBER_RE.fullmatch(text):
            return ErrorValue(error=ErrorKind.BAD_NUM)
        n = int(text)
        if not self._in_range(n):
            return ErrorValue(error=ErrorKind.BAD_NUM)
        return NumberValue(value=n)

    def _in_range(self, n: int) -> bool:
        return self.min_int <= n <= self.max_int

    def _wrap(self, n: int) -> int:
        return ((n - self.min_int) % (1 << self.int_bits)) + self.min_int

    def _narrow(self, n: int) -> Value:
        if self._in_range(n):
            return NumberValue(value=n)
        if self.overflow == "error":
            return ErrorValue(error=ErrorKind.BAD_NUM)
        return NumberValue(value=self._wrap(n))

    def _div(self, a: int, b: int) -> Value:
        if b == 0:
            return ErrorValue(error=ErrorKind.DIV_ZERO)
        return self._narrow(_trunc_div(a, b))

    def _mod(self, a: int, b: int) -> Value:
        if b == 0:
            return ErrorValue(error=ErrorKind.DIV_ZERO)
        return NumberValue(value=a - b * _trunc_div(a, b))

    def _pow(self, base: int, exp: int) -> Value:
        if exp < 0:
            # Wynik rzeczywisty obcięty do całkowitej, jak (long)pow(b, e)
            if base == 0:
                return ErrorValue(error=ErrorKind.DIV_ZERO)
            if base == 1:
                return NumberValue(value=1)
            if base == -1:
                return NumberValue(value=1 if exp % 2 == 0 else -1)
            return NumberValue(value=0)

        result = 1
        while exp:
            if exp & 1:
                result *= base
                if not self._in_range(result):
                    return ErrorValue(error=ErrorKind.BAD_NUM)
            exp >>= 1
            if exp:
                base *= base
                # najwyższy bit wykładnika jest jeszcze przed nami
                if not self._in_range(base):
                    return ErrorValue(error=ErrorKind.BAD_NUM)
        return NumberValue(value=result)


@dataclass
class _Frame:
    """Forma w trakcie foldu: operator, operandy, następny indeks, akumulator."""
    op: str
    operands: list
    index: int = 0
    acc: Optional[Value] = None


def _frame(node: TreeNode) -> _Frame:
    if isinstance(node, (ExpressionNode, ProgramNode)):
        op = node.operator.text
        operands = node.operands
        if not operands:
            raise ValueError(f"Form {op!r} has no operands")
        return _Frame(op=op, operands=operands)

    if isinstance(node, OperatorNode):
        raise TypeError(f"Operator node {node.text!r} cannot be evaluated on its own")

    raise TypeError(f"Nieznany typ węzła drzewa: {type(node)}")


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return -q if (a < 0) != (b < 0) else q


def _fmt(v: Value) -> str:
    """Czytelna reprezentacja wartości w krokach."""
    if isinstance(v, ErrorValue):
        return ERROR_MESSAGES[v.error]
    return str(v.value)
