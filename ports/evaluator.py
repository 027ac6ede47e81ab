"""
Port: Evaluator
Odpowiedzialność: deterministyczne liczenie drzewa parsowania do wartości VinLisp.
"""
from typing import Protocol, runtime_checkable

from contracts import EvalResult, TreeNode, Value


@runtime_checkable
class Evaluator(Protocol):
    def eval_tree(self, node: TreeNode) -> EvalResult:
        """
        Reduces a parse tree node to a single Value.
        Returns EvalResult with:
          - value: NumberValue, or ErrorValue (DIV_ZERO / BAD_OP / BAD_NUM)
          - steps: human-readable fold steps, e.g. "1 - 2 = -1"
        Semantic errors are returned, never raised.
        Raises TypeError only for objects that are not parse tree nodes.
        """
        ...

    def apply_operator(self, x: Value, op: str, y: Value) -> Value:
        """
        Binary-operator rule: propagates an ErrorValue operand (left wins),
        otherwise dispatches on op. Unknown op yields ErrorValue(BAD_OP).
        """
        ...
