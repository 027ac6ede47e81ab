"""
Adapter: LarkExpressionParser
Implementuje port ExpressionParser — gramatyka VinLisp (notacja polska) w lark.

Gramatyka:
  number   : /-?[0-9]+/
  operator : '+' | '-' | '*' | '/' | '%' | '^' | 'min' | 'max'
  expr     : number | '(' operator expr expr+ ')'
  program  : operator expr expr+     (cała linia, bez nawiasów)

Każda forma wymaga co najmniej dwóch operandów: `+ 1` to błąd składni.

Parser LALR z leksykiem kontekstowym: w pozycji operatora '-' jest operatorem,
w pozycji operandu '-12' jest liczbą. Transformer działa w trakcie redukcji,
więc głębokość zagnieżdżenia nie zależy od stosu Pythona.
Opcjonalny max_depth odrzuca linie zagnieżdżone głębiej niż limit (diagnostyka
wskazuje pierwszy nadmiarowy nawias).
"""
from __future__ import annotations

import logging

from lark import Lark, Token, Transformer, v_args
from lark.exceptions import (
    UnexpectedCharacters,
    UnexpectedEOF,
    UnexpectedInput,
    UnexpectedToken,
)

from contracts import (
    ExpressionNode,
    NumberNode,
    OperatorNode,
    ParseOutcome,
    ProgramNode,
    SyntaxDiagnostic,
)

logger = logging.getLogger("vinlisp.parser")

GRAMMAR = r"""
    start: operator expr expr+

    ?expr: number
         | "(" operator expr expr+ ")"   -> expression

    number: NUMBER
    operator: OPERATOR

    NUMBER: /-?[0-9]+/
    OPERATOR: "+" | "-" | "*" | "/" | "%" | "^" | "min" | "max"

    %import common.WS
    %ignore WS
"""

# Czytelne nazwy terminali w diagnostyce
_TERMINAL_NAMES: dict[str, str] = {
    "NUMBER": "number",
    "OPERATOR": "operator",
    "LPAR": "'('",
    "RPAR": "')'",
    "$END": "end of input",
}

_END = "$END"


class _TreeBuilder(Transformer):
    """Zamienia węzły lark na węzły z contracts.py."""

    @v_args(inline=True)
    def number(self, token: Token) -> NumberNode:
        return NumberNode(text=str(token))

    @v_args(inline=True)
    def operator(self, token: Token) -> OperatorNode:
        return OperatorNode(text=str(token))

    def expression(self, children: list) -> ExpressionNode:
        return ExpressionNode(children=children)

    def start(self, children: list) -> ProgramNode:
        return ProgramNode(children=children)


class LarkExpressionParser:
    """Parser linii VinLisp; obiekt niemutowalny po zbudowaniu gramatyki."""

    def __init__(self, source: str = "<stdin>", max_depth: int | None = None) -> None:
        self._source = source
        self._max_depth = max_depth
        self._lark = Lark(
            GRAMMAR,
            parser="lalr",
            lexer="contextual",
            transformer=_TreeBuilder(),
        )

    # -- ExpressionParser protocol -----------------------------------------

    def parse(self, text: str) -> ParseOutcome:
        try:
            program = self._lark.parse(text)
        except UnexpectedInput as exc:
            diagnostic = self._diagnostic(text, exc)
            logger.debug("Syntax error in %r: %s", text, diagnostic.message)
            return ParseOutcome(text=text, error=diagnostic)

        if self._max_depth is not None:
            diagnostic = self._depth_diagnostic(text, self._max_depth)
            if diagnostic is not None:
                logger.debug("Nesting limit exceeded in %r", text)
                return ParseOutcome(text=text, error=diagnostic)

        return ParseOutcome(text=text, program=program)

    # -- Prywatne ----------------------------------------------------------

    def _diagnostic(self, text: str, exc: UnexpectedInput) -> SyntaxDiagnostic:
        found: str | None
        if isinstance(exc, UnexpectedToken):
            expected = set(exc.expected or ())
            found = None if exc.token.type == _END else str(exc.token)
        elif isinstance(exc, UnexpectedCharacters):
            expected = set(exc.allowed or ())
            found = exc.char
        elif isinstance(exc, UnexpectedEOF):
            expected = set(exc.expected or ())
            found = None
        else:
            expected = set()
            found = None

        if found is None:
            line, column = _end_position(text)
        else:
            line, column = _position(exc)
            if line is None:
                line, column = _end_position(text)

        expected_names = sorted(
            {_TERMINAL_NAMES.get(name, name.lower()) for name in expected}
        )
        where = "end of input" if found is None else repr(found)
        if expected_names:
            message = f"expected {_join_alternatives(expected_names)} at {where}"
        else:
            message = f"unexpected {where}"

        return SyntaxDiagnostic(
            source=self._source,
            line=line,
            column=column,
            expected=expected_names,
            found=found,
            message=message,
            context=_caret_context(text, line, column),
        )

    def _depth_diagnostic(self, text: str, limit: int) -> SyntaxDiagnostic | None:
        """Pierwszy '(' powyżej limitu zagnieżdżenia albo None."""
        depth = 0
        line, column = 1, 0
        for char in text:
            column += 1
            if char == "\n":
                line, column = line + 1, 0
            elif char == "(":
                depth += 1
                if depth > limit:
                    return SyntaxDiagnostic(
                        source=self._source,
                        line=line,
                        column=column,
                        found="(",
                        message=f"expression nested deeper than {limit} levels",
                        context=_caret_context(text, line, column),
                    )
            elif char == ")":
                depth -= 1
        return None


def _position(exc: UnexpectedInput) -> tuple[int | None, int | None]:
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)
    if isinstance(line, int) and line > 0 and isinstance(column, int) and column > 0:
        return line, column
    return None, None


def _end_position(text: str) -> tuple[int, int]:
    lines = text.split("\n")
    return len(lines), len(lines[-1]) + 1


def _join_alternatives(names: list[str]) -> str:
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " or " + names[-1]


def _caret_context(text: str, line: int | None, column: int | None) -> str:
    if line is None or column is None:
        return ""
    lines = text.split("\n")
    if line > len(lines):
        return ""
    return f"{lines[line - 1]}\n{' ' * (column - 1)}^"
