import itertools

import pytest

from droll.dice import evaluate
from droll.models import INT_MAX, INT_MIN, MAX_LITERAL, Binary, NumericLiteral, Operator
from droll.parser import parse


def always(value):
    return lambda: value


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1d20", 20),
        ("1d20+10", 30),
        ("3d6+10", 28),
        ("1d20+2d3", 26),
        ("d6", 6),
        ("-1", -1),
        ("+-1", -1),
        ("-d20", -20),
        ("-1d20", -20),
        ("10-3-2", 5),
    ],
)
def test_evaluate_highest_rolls(text, expected):
    assert evaluate(always(1.0))(parse(text)) == expected


def test_evaluate_half_source():
    assert evaluate(always(0.5))(parse("2d20+1d8")) == 24


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("3d6", 3),
        ("d20", 1),
        ("-1d20", -1),
    ],
)
def test_die_never_shows_less_than_one(text, expected):
    assert evaluate(always(0.0))(parse(text)) == expected


def test_zero_dice_roll_to_zero():
    expr = Binary(NumericLiteral(0), NumericLiteral(6), Operator.DIE)
    assert evaluate(always(0.99))(expr) == 0


def test_rounds_half_away_from_zero():
    # 0.625 * 4 == 2.5
    assert evaluate(always(0.625))(parse("d4")) == 3


def test_negative_sides_clamp_to_one():
    assert evaluate(always(0.9))(parse("2d-6")) == 2


@pytest.mark.parametrize(("text", "expected"), [("-1", -1), ("7", 7), ("+-+12", -12)])
def test_literal_ignores_source(text, expected):
    def source():
        raise AssertionError("random source must not be called")

    assert evaluate(source)(parse(text)) == expected


@pytest.mark.parametrize(
    ("amount", "sides", "r"),
    list(itertools.product([0, 1, 3], [1, 6, 20], [0.0, 0.01, 0.3, 0.5, 0.74, 0.999])),
)
def test_binary_roll_formula(amount, sides, r):
    expr = Binary(NumericLiteral(amount), NumericLiteral(sides), Operator.DIE)
    result = evaluate(always(r))(expr)

    assert result == amount * max(1, int(r * sides + 0.5))
    assert result >= amount


def test_source_called_once_per_die_node():
    calls = []

    def source():
        calls.append(1)
        return 0.5

    evaluate(source)(parse("2d20+1d8+d6-4"))
    assert len(calls) == 3


def test_source_called_in_evaluation_order():
    samples = iter([0.5, 1.0])
    # (d (d 4) 6): inner die first => 2, then 2 * 6
    assert evaluate(lambda: next(samples))(parse("d4d6")) == 12

    samples = iter([0.5, 1.0])
    assert evaluate(lambda: next(samples))(parse("1d4+1d10")) == 12


def test_evaluator_is_reusable():
    ev = evaluate(always(1.0))
    assert ev(parse("1d20")) == 20
    assert ev(parse("3d6+10")) == 28
    assert ev(parse("1d20")) == 20


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (f"{MAX_LITERAL}", INT_MAX),
        (f"{MAX_LITERAL}+1", INT_MAX),
        (f"-{MAX_LITERAL}-5", INT_MIN),
        (f"{MAX_LITERAL}d2", INT_MAX),
        (f"-{MAX_LITERAL}d2", INT_MIN),
    ],
)
def test_arithmetic_saturates(text, expected):
    assert evaluate(always(1.0))(parse(text)) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("+".join(["1"] * 2000), 2000),
        ("-".join(["1"] * 2000), -1998),
        ("+".join(["1d6"] * 1500), 9000),
        ("-" * 600 + "1", 1),
        ("-" * 601 + "1", -1),
        ("+-" * 2500 + "d20", 20),
        ("-" + "+-" * 2500 + "d20", -20),
    ],
)
def test_evaluate_long_and_deep_notation(text, expected):
    assert evaluate(always(1.0))(parse(text)) == expected


def test_deep_tree_rolls_in_order():
    samples = iter([0.5, 1.0, 0.0])
    # 3000 unary pluses bind to the first literal only
    text = "+" * 3000 + "1d4+1d10-1d6"
    assert evaluate(lambda: next(samples))(parse(text)) == 2 + 10 - 1
