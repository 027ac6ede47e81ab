from __future__ import annotations

import pytest

from adapters.evaluator.tree_evaluator import TreeEvaluator
from adapters.parser.lark_parser import LarkExpressionParser
from contracts import (
    ErrorKind,
    ErrorValue,
    ExpressionNode,
    NumberNode,
    NumberValue,
    OperatorNode,
    ProgramNode,
)
from ports.evaluator import Evaluator

_PARSER = LarkExpressionParser()

INT64_MAX = 9223372036854775807
INT64_MIN = -9223372036854775808


def _eval(text: str, evaluator: TreeEvaluator | None = None):
    outcome = _PARSER.parse(text)
    assert outcome.ok, outcome.error
    return (evaluator or TreeEvaluator()).eval_tree(outcome.program)


def _value(text: str, evaluator: TreeEvaluator | None = None):
    return _eval(text, evaluator).value


def test_tree_evaluator_implements_port():
    assert isinstance(TreeEvaluator(), Evaluator)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("+ 1 2", 3),
        ("+ 1 (* 2 3)", 7),
        ("* 2 (+ 1 2)", 6),
        ("- 1 2 3", -4),
        ("- -5 3", -8),
        ("* 2 3 4", 24),
        ("/ 7 2", 3),
        ("/ -7 2", -3),
        ("/ 7 -2", -3),
        ("% 7 3", 1),
        ("% -7 2", -1),
        ("% 7 -2", 1),
        ("^ 2 10", 1024),
        ("^ -3 3", -27),
        ("^ 7 0", 1),
        ("^ 0 0", 1),
        ("min 5 3 9", 3),
        ("max 5 3 9", 9),
        ("+ 1 (- (* 4 5) (/ 10 2)) (max 1 (min 8 2))", 18),
    ],
)
def test_eval_valid_programs_return_numbers(text, expected):
    assert _value(text) == NumberValue(value=expected)


def test_eval_folds_left_to_right():
    result = _eval("- 1 2 3")

    assert result.value == NumberValue(value=-4)
    assert result.steps == ["1 - 2 = -1", "-1 - 3 = -4"]


def test_eval_steps_follow_evaluation_order():
    result = _eval("+ 1 (* 2 3)")

    assert result.steps == ["2 * 3 = 6", "1 + 6 = 7"]


def test_division_by_zero_is_an_error_value():
    result = _eval("/ 5 0")

    assert result.is_error
    assert result.value == ErrorValue(error=ErrorKind.DIV_ZERO)
    assert result.value.message == "Error: Division by zero!"


def test_remainder_by_zero_is_division_by_zero():
    assert _value("% 5 0") == ErrorValue(error=ErrorKind.DIV_ZERO)


@pytest.mark.parametrize(
    "text",
    [
        "+ 1 (/ 1 0)",
        "* (+ 1 (/ 4 0)) 5",
        "max 1 2 (% 3 0) 4",
    ],
)
def test_error_dominates_enclosing_folds(text):
    assert _value(text) == ErrorValue(error=ErrorKind.DIV_ZERO)


def test_error_short_circuits_later_siblings():
    result = _eval("+ (/ 1 0) (+ 1 2) 99999999999999999999")

    assert result.value == ErrorValue(error=ErrorKind.DIV_ZERO)
    assert result.steps == ["1 / 0 = Error: Division by zero!"]


def test_left_error_wins_over_later_error():
    assert _value("+ (/ 1 0) 99999999999999999999") == ErrorValue(error=ErrorKind.DIV_ZERO)
    assert _value("+ 99999999999999999999 (/ 1 0)") == ErrorValue(error=ErrorKind.BAD_NUM)


def test_out_of_range_literal_is_bad_number():
    assert _value(f"+ {INT64_MAX + 1} 0") == ErrorValue(error=ErrorKind.BAD_NUM)
    assert _value(f"+ {INT64_MIN - 1} 0") == ErrorValue(error=ErrorKind.BAD_NUM)
    assert _value(f"+ {INT64_MAX} {INT64_MIN}") == NumberValue(value=-1)


def test_addition_wraps_like_native_long():
    assert _value(f"+ {INT64_MAX} 1") == NumberValue(value=INT64_MIN)
    assert _value(f"- {INT64_MIN} 1") == NumberValue(value=INT64_MAX)
    assert _value(f"/ {INT64_MIN} -1") == NumberValue(value=INT64_MIN)
    assert _value(f"% {INT64_MIN} -1") == NumberValue(value=0)


def test_overflow_error_policy_reports_bad_number():
    evaluator = TreeEvaluator(overflow="error")

    assert _value(f"+ {INT64_MAX} 1", evaluator) == ErrorValue(error=ErrorKind.BAD_NUM)
    assert _value(f"* {INT64_MAX} 2", evaluator) == ErrorValue(error=ErrorKind.BAD_NUM)
    assert _value("+ 1 2", evaluator) == NumberValue(value=3)


def test_narrow_integer_width():
    evaluator = TreeEvaluator(int_bits=8)

    assert _value("+ 127 1", evaluator) == NumberValue(value=-128)
    assert _value("+ 128 0", evaluator) == ErrorValue(error=ErrorKind.BAD_NUM)
    assert _value("+ -128 0", evaluator) == NumberValue(value=-128)


def test_power_overflow_is_bad_number():
    assert _value("^ 2 62") == NumberValue(value=1 << 62)
    assert _value("^ 2 63") == ErrorValue(error=ErrorKind.BAD_NUM)
    assert _value("^ -2 63") == NumberValue(value=INT64_MIN)
    assert _value("^ 10 100") == ErrorValue(error=ErrorKind.BAD_NUM)


def test_power_with_negative_exponent_truncates():
    assert _value("^ 2 -1") == NumberValue(value=0)
    assert _value("^ 1 -5") == NumberValue(value=1)
    assert _value("^ -1 -3") == NumberValue(value=-1)
    assert _value("^ -1 -4") == NumberValue(value=1)
    assert _value("^ 0 -1") == ErrorValue(error=ErrorKind.DIV_ZERO)


def test_unknown_operator_is_bad_operator():
    tree = ProgramNode(
        children=[OperatorNode(text="&"), NumberNode(text="1"), NumberNode(text="2")]
    )

    result = TreeEvaluator().eval_tree(tree)

    assert result.value == ErrorValue(error=ErrorKind.BAD_OP)
    assert result.value.message == "Error: Invalid operator!"


def test_unknown_operator_still_propagates_operand_errors():
    tree = ProgramNode(
        children=[
            OperatorNode(text="&"),
            NumberNode(text="1"),
            ExpressionNode(
                children=[OperatorNode(text="/"), NumberNode(text="1"), NumberNode(text="0")]
            ),
        ]
    )

    assert TreeEvaluator().eval_tree(tree).value == ErrorValue(error=ErrorKind.DIV_ZERO)


def test_malformed_number_text_is_bad_number():
    for text in ["", "12a", "+5", "1_000", " 7"]:
        tree = ProgramNode(
            children=[OperatorNode(text="+"), NumberNode(text=text), NumberNode(text="1")]
        )
        assert TreeEvaluator().eval_tree(tree).value == ErrorValue(error=ErrorKind.BAD_NUM)


def test_number_node_evaluates_on_its_own():
    assert TreeEvaluator().eval_tree(NumberNode(text="-42")).value == NumberValue(value=-42)


def test_single_operand_form_returns_operand():
    tree = ExpressionNode(children=[OperatorNode(text="-"), NumberNode(text="5")])

    result = TreeEvaluator().eval_tree(tree)

    assert result.value == NumberValue(value=5)
    assert result.steps == []


def test_apply_operator_propagates_left_error_first():
    evaluator = TreeEvaluator()
    left = ErrorValue(error=ErrorKind.DIV_ZERO)
    right = ErrorValue(error=ErrorKind.BAD_NUM)

    assert evaluator.apply_operator(left, "+", right) == left
    assert evaluator.apply_operator(NumberValue(value=1), "+", right) == right
    assert evaluator.apply_operator(left, "nope", NumberValue(value=1)) == left


def test_operator_node_cannot_be_evaluated():
    with pytest.raises(TypeError):
        TreeEvaluator().eval_tree(OperatorNode(text="+"))


def test_non_node_raises_type_error():
    with pytest.raises(TypeError):
        TreeEvaluator().eval_tree("+ 1 2")  # type: ignore[arg-type]


def test_invalid_configuration_is_rejected():
    with pytest.raises(ValueError):
        TreeEvaluator(int_bits=1)
    with pytest.raises(ValueError):
        TreeEvaluator(overflow="saturate")  # type: ignore[arg-type]


def test_evaluation_does_not_mutate_tree():
    tree = _PARSER.parse("+ 1 (* 2 3)").program
    before = tree.model_copy(deep=True)

    TreeEvaluator().eval_tree(tree)
    TreeEvaluator().eval_tree(tree)

    assert tree == before


def _nested(depth: int) -> str:
    return "+ 1 " + "(+ 1 " * depth + "1" + ")" * depth


def test_deeply_nested_line_evaluates_without_recursion():
    result = _eval(_nested(5000))

    assert result.value == NumberValue(value=5002)
    assert len(result.steps) == 5001
    assert result.steps[0] == "1 + 1 = 2"
    assert result.steps[-1] == "1 + 5001 = 5002"


def test_deep_error_propagates_to_the_root():
    line = "+ 1 " + "(+ 1 " * 3000 + "(/ 1 0)" + ")" * 3000

    result = _eval(line)

    assert result.value == ErrorValue(error=ErrorKind.DIV_ZERO)
    assert result.steps == ["1 / 0 = Error: Division by zero!"]


def test_form_without_operands_is_rejected():
    tree = ProgramNode(
        children=[
            OperatorNode(text="+"),
            NumberNode(text="1"),
            ExpressionNode(children=[OperatorNode(text="*")]),
        ]
    )

    with pytest.raises(ValueError):
        TreeEvaluator().eval_tree(tree)
