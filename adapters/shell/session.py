"""
Adapter: Session
Łączy ExpressionParser i Evaluator: jedna linia tekstu → LineResult.

Sesja nie trzyma stanu między liniami; ta sama instancja obsługuje REPL,
tryb wsadowy CLI i endpointy API.
"""
from __future__ import annotations

from adapters.evaluator.tree_evaluator import TreeEvaluator
from adapters.parser.lark_parser import LarkExpressionParser
from adapters.shell.rendering import render_diagnostic, render_value
from config import Settings
from contracts import LineResult
from ports.evaluator import Evaluator
from ports.expression_parser import ExpressionParser


class Session:
    def __init__(self, parser: ExpressionParser, evaluator: Evaluator) -> None:
        self.parser = parser
        self.evaluator = evaluator

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        max_depth: int | None = None,
    ) -> "Session":
        """max_depth nadpisuje settings.max_depth (API używa api_max_depth)."""
        settings = settings or Settings()
        return cls(
            parser=LarkExpressionParser(
                max_depth=max_depth if max_depth is not None else settings.max_depth,
            ),
            evaluator=TreeEvaluator(
                int_bits=settings.int_bits,
                overflow=settings.overflow,
            ),
        )

    def run_line(self, text: str) -> LineResult:
        """Parsuje i liczy linię; błąd składni nie wywołuje ewaluatora."""
        outcome = self.parser.parse(text)
        if outcome.error is not None:
            return LineResult(
                text=text,
                parse=outcome,
                rendered=render_diagnostic(outcome.error),
            )

        result = self.evaluator.eval_tree(outcome.program)
        return LineResult(
            text=text,
            parse=outcome,
            result=result,
            rendered=render_value(result.value),
        )
