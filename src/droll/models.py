from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, TypeAlias


# Literals are unsigned 64-bit; evaluation results are signed 64-bit.
MAX_LITERAL: int = 2**64 - 1
INT_MIN: int = -(2**63)
INT_MAX: int = 2**63 - 1

Symbol: TypeAlias = Literal["+", "-", "d"]


@dataclass(frozen=True)
class IntegerToken:
    value: int


@dataclass(frozen=True)
class OperatorToken:
    symbol: Symbol


Token: TypeAlias = IntegerToken | OperatorToken

PLUS = OperatorToken("+")
MINUS = OperatorToken("-")
DIE = OperatorToken("d")


class Operator(Enum):
    DIE = "d"
    PLUS = "+"
    MINUS = "-"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class NumericLiteral:
    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Unary:
    """Prefix application: ``-X``, ``+X`` or ``dX`` (one die with X sides)."""

    operand: Expression
    op: Operator

    def __str__(self) -> str:
        return render(self)


@dataclass(frozen=True)
class Binary:
    """Infix application: ``L+R``, ``L-R`` or ``LdR`` (L dice with R sides)."""

    left: Expression
    right: Expression
    op: Operator

    def __str__(self) -> str:
        return render(self)


Expression: TypeAlias = NumericLiteral | Unary | Binary


def render(expr: Expression) -> str:
    """Fully parenthesized prefix form, e.g. ``(+ (d 3 6) 10)``."""

    parts: list[str] = []
    # Pending items, last one first; plain strings are emitted as they are.
    stack: list[Expression | str] = [expr]

    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, NumericLiteral):
            parts.append(str(item.value))
        elif isinstance(item, Unary):
            stack.extend([")", item.operand, f"({item.op} "])
        else:
            stack.extend([")", item.right, " ", item.left, f"({item.op} "])

    return "".join(parts)
