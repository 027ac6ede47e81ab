"""
Port: ExpressionParser
Odpowiedzialność: rozpoznawanie linii VinLisp i budowa drzewa parsowania.
"""
from typing import Protocol, runtime_checkable

from contracts import ParseOutcome


@runtime_checkable
class ExpressionParser(Protocol):
    def parse(self, text: str) -> ParseOutcome:
        """
        Parses one line of prefix-notation input into a ParseOutcome.

        On success:
          - outcome.program is the root ProgramNode covering the whole line

        On failure (bad token, missing operand, unbalanced parenthesis,
        trailing characters, empty input):
          - outcome.error is a SyntaxDiagnostic with position and expected tokens

        Never raises; errors are encoded in the returned object.
        Does not check numeric range of literals.
        """
        ...
