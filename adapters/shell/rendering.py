"""
Renderowanie wyników VinLisp dla powłoki: wartości, diagnostyka składni, drzewa.
"""
from __future__ import annotations

from rich.tree import Tree

from contracts import (
    ErrorValue,
    ExpressionNode,
    NumberNode,
    OperatorNode,
    ProgramNode,
    SyntaxDiagnostic,
    TreeNode,
    Value,
)


def render_value(value: Value) -> str:
    """Liczba dziesiętnie albo jeden z trzech stałych komunikatów błędu."""
    if isinstance(value, ErrorValue):
        return value.message
    return str(value.value)


def render_diagnostic(diagnostic: SyntaxDiagnostic) -> str:
    """Format zbliżony do mpc: `<stdin>:1:4: error: expected ...` + kursor."""
    where = diagnostic.source
    if diagnostic.line is not None and diagnostic.column is not None:
        where = f"{where}:{diagnostic.line}:{diagnostic.column}"
    header = f"{where}: error: {diagnostic.message}"
    if diagnostic.context:
        return f"{header}\n{diagnostic.context}"
    return header


def _label(node: TreeNode) -> str:
    if isinstance(node, NumberNode):
        return f"number '{node.text}'"
    if isinstance(node, OperatorNode):
        return f"operator '{node.text}'"
    if isinstance(node, ExpressionNode):
        return "expression"
    if isinstance(node, ProgramNode):
        return "program"
    raise TypeError(f"Nieznany typ węzła drzewa: {type(node)}")


def tree_depth(node: TreeNode) -> int:
    """Liczba poziomów drzewa (sam liść = 1)."""
    deepest = 0
    stack = [(node, 1)]
    while stack:
        n, depth = stack.pop()
        deepest = max(deepest, depth)
        stack.extend((child, depth + 1) for child in getattr(n, "children", ()))
    return deepest


def format_tree(node: TreeNode, indent: str = "  ") -> str:
    """Wcięty zrzut drzewa, jedna linia na węzeł."""
    lines: list[str] = []
    stack = [(node, 0)]
    while stack:
        n, depth = stack.pop()
        lines.append(f"{indent * depth}{_label(n)}")
        # odwrotnie, żeby zdejmować dzieci od lewej
        stack.extend((child, depth + 1) for child in reversed(getattr(n, "children", ())))
    return "\n".join(lines)


def build_rich_tree(node: TreeNode) -> Tree:
    tree = Tree(_label(node))
    stack = [(node, tree)]
    while stack:
        n, branch = stack.pop()
        for child in getattr(n, "children", ()):
            stack.append((child, branch.add(_label(child))))
    return tree
