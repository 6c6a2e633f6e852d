from __future__ import annotations

import logging
import math
import random
import secrets
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeAlias

from .config import get_settings
from .models import INT_MAX, INT_MIN, Binary, Expression, NumericLiteral, Operator, Unary
from .parser import parse


logger = logging.getLogger(__name__)

RandomSource: TypeAlias = Callable[[], float]
Evaluator: TypeAlias = Callable[[Expression], int]

_rng: random.Random | None = None


def _now_utc_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _saturate(value: int) -> int:
    return max(INT_MIN, min(INT_MAX, value))


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _get_rng() -> random.Random:
    global _rng
    if _rng is None:
        seed = get_settings().seed
        _rng = secrets.SystemRandom() if seed is None else random.Random(seed)
    return _rng


def default_random_source() -> float:
    """Uniform float in [0, 1) from the process-wide generator.

    The generator is ``secrets.SystemRandom`` unless ``DROLL_SEED`` is set.
    """

    return _get_rng().random()


def _rng_source_name() -> str:
    return "random.Random" if get_settings().seed is not None else "secrets.SystemRandom"


def _calc_roll(random_source: RandomSource, amount: int, sides: int) -> int:
    # One sample per node, scaled by the dice count; a die never shows less than 1.
    per_die = max(1, _round_half_away(random_source() * sides))
    return _saturate(amount * per_die)


def evaluate(random_source: RandomSource) -> Evaluator:
    """Bind ``random_source`` and return an evaluator for expression trees.

    ``random_source`` takes no arguments and returns a float in [0, 1). It is
    called once per die node, after that node's operands, left to right::

        >>> evaluate(lambda: 1.0)(parse("1d20+10"))
        30

    Arithmetic saturates to the signed 64-bit range.
    """

    def _apply(node: Binary | Unary, values: list[int]) -> int:
        rhs = values.pop()
        if isinstance(node, Binary):
            lhs = values.pop()
            if node.op is Operator.DIE:
                return _calc_roll(random_source, lhs, rhs)
            if node.op is Operator.PLUS:
                return _saturate(lhs + rhs)
            return _saturate(lhs - rhs)

        if node.op is Operator.DIE:
            return _calc_roll(random_source, 1, rhs)
        if node.op is Operator.PLUS:
            return rhs
        return _saturate(-rhs)

    def _eval(expr: Expression) -> int:
        # Post-order walk with an explicit stack; operands are pushed right
        # first so the left subtree is resolved (and rolled) first.
        values: list[int] = []
        stack: list[tuple[Expression, bool]] = [(expr, False)]

        while stack:
            node, operands_done = stack.pop()

            if isinstance(node, NumericLiteral):
                values.append(_saturate(node.value))
            elif not isinstance(node, (Binary, Unary)):
                raise TypeError(f"not an expression: {node!r}")
            elif operands_done:
                values.append(_apply(node, values))
            else:
                stack.append((node, True))
                if isinstance(node, Binary):
                    stack.append((node.right, False))
                    stack.append((node.left, False))
                else:
                    stack.append((node.operand, False))

        return values.pop()

    return _eval


def roll(text: str) -> int:
    """Parse and roll ``text`` with the default random source. Raises DiceError for invalid input."""

    total = evaluate(default_random_source)(parse(text))
    logger.debug("rolled %r => %d", text, total)
    return total


def roll_from_text(text: str) -> dict[str, Any]:
    """Parse, then roll. Raises DiceError for invalid input."""

    expr = parse(text)
    total = evaluate(default_random_source)(expr)

    return {
        "request_id": uuid.uuid4().hex,
        "timestamp": _now_utc_iso(),
        "input": text,
        "expression": str(expr),
        "rng": {
            "source": _rng_source_name(),
        },
        "total": total,
    }
