"""
contracts.py — Jedyne źródło prawdy dla typów danych VinLisp.
Parser, ewaluator, powłoka i API importują typy WYŁĄCZNIE stąd.
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

CONTRACTS_VERSION = "1.0.0"


# ─────────────────────────── Drzewo parsowania ───────────────────────────

class NumberNode(BaseModel):
    node_type: Literal["number"] = "number"
    text: str    # surowy literał, np. "-12"; zakres sprawdza ewaluator


class OperatorNode(BaseModel):
    node_type: Literal["operator"] = "operator"
    text: str    # "+", "min", ...; nieznane odrzuca ewaluator (BAD_OP)


class ExpressionNode(BaseModel):
    """Nawiasowa forma `( op expr+ )`; children = [OperatorNode, expr, expr, ...]."""
    node_type: Literal["expression"] = "expression"
    children: list["FormChild"]

    @property
    def operator(self) -> OperatorNode:
        return _operator_of(self.children)

    @property
    def operands(self) -> list["ExprNode"]:
        return _operands_of(self.children)


class ProgramNode(BaseModel):
    """Korzeń: `op expr+` bez nawiasów, zakotwiczony na całej linii."""
    node_type: Literal["program"] = "program"
    children: list["FormChild"]

    @property
    def operator(self) -> OperatorNode:
        return _operator_of(self.children)

    @property
    def operands(self) -> list["ExprNode"]:
        return _operands_of(self.children)


FormChild = Annotated[
    Union[NumberNode, OperatorNode, ExpressionNode], Field(discriminator="node_type")
]
ExprNode = Annotated[Union[NumberNode, ExpressionNode], Field(discriminator="node_type")]
TreeNode = Annotated[
    Union[NumberNode, OperatorNode, ExpressionNode, ProgramNode],
    Field(discriminator="node_type"),
]
ExpressionNode.model_rebuild()
ProgramNode.model_rebuild()


def _operator_of(children: list) -> OperatorNode:
    if not children or not isinstance(children[0], OperatorNode):
        raise ValueError("Form must start with an operator node")
    return children[0]


def _operands_of(children: list) -> list:
    return list(children[1:])


# ─────────────────────────── Diagnostyka składni ─────────────────────────

class SyntaxDiagnostic(BaseModel):
    source: str = "<stdin>"
    line: Optional[int] = None      # 1-based; None gdy koniec wejścia
    column: Optional[int] = None    # 1-based
    expected: list[str] = Field(default_factory=list)   # np. ["number", "'('"]
    found: Optional[str] = None     # napotkany tekst; None = koniec wejścia
    message: str
    context: str = ""               # linia wejścia z kursorem '^'


class ParseOutcome(BaseModel):
    """Wynik parsowania: dokładnie jedno z pól program / error jest ustawione."""
    text: str
    program: Optional[ProgramNode] = None
    error: Optional[SyntaxDiagnostic] = None

    @property
    def ok(self) -> bool:
        return self.program is not None


# ─────────────────────────── Wartości ────────────────────────────────────

class ErrorKind(str, Enum):
    DIV_ZERO = "div_zero"
    BAD_OP = "bad_op"
    BAD_NUM = "bad_num"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.DIV_ZERO: "Error: Division by zero!",
    ErrorKind.BAD_OP: "Error: Invalid operator!",
    ErrorKind.BAD_NUM: "Error: Invalid number!",
}


class NumberValue(BaseModel):
    kind: Literal["number"] = "number"
    value: int


class ErrorValue(BaseModel):
    kind: Literal["error"] = "error"
    error: ErrorKind

    @property
    def message(self) -> str:
        return ERROR_MESSAGES[self.error]


Value = Annotated[Union[NumberValue, ErrorValue], Field(discriminator="kind")]


# ─────────────────────────── Evaluator ───────────────────────────────────

class EvalResult(BaseModel):
    value: Value
    steps: list[str] = Field(default_factory=list)  # czytelne kroki foldu

    @property
    def is_error(self) -> bool:
        return isinstance(self.value, ErrorValue)


# ─────────────────────────── Powłoka ─────────────────────────────────────

class LineResult(BaseModel):
    """Wynik przetworzenia jednej linii przez powłokę (REPL, CLI, API)."""
    text: str
    parse: ParseOutcome
    result: Optional[EvalResult] = None
    rendered: str

    @property
    def parse_failed(self) -> bool:
        return not self.parse.ok
