from __future__ import annotations

import logging
from collections.abc import Sequence

from .errors import ParseError
from .lexer import tokenize
from .models import (
    Binary,
    Expression,
    IntegerToken,
    NumericLiteral,
    Operator,
    OperatorToken,
    Token,
    Unary,
)


logger = logging.getLogger(__name__)

_OPERATORS: dict[str, Operator] = {
    "+": Operator.PLUS,
    "-": Operator.MINUS,
    "d": Operator.DIE,
}

# (left, right) binding powers; higher binds tighter.
_INFIX_BINDING_POWER: dict[Operator, tuple[int, int]] = {
    Operator.PLUS: (1, 2),
    Operator.MINUS: (1, 2),
    Operator.DIE: (3, 4),
}

_PREFIX_BINDING_POWER: dict[Operator, int] = {
    Operator.PLUS: 5,
    Operator.MINUS: 5,
    Operator.DIE: 7,
}


class _TokenStream:
    def __init__(self, tokens: Sequence[Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def next(self) -> Token | None:
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token


def _to_operator(token: OperatorToken) -> Operator:
    try:
        return _OPERATORS[token.symbol]
    except KeyError:
        raise ParseError(f"syntax error, unknown operator '{token.symbol}'") from None


def _infix_binding_power(op: Operator) -> tuple[int, int]:
    try:
        return _INFIX_BINDING_POWER[op]
    except KeyError:
        raise ParseError(f"syntax error, '{op}' is not an infix operator") from None


def _prefix_binding_power(op: Operator) -> int:
    try:
        return _PREFIX_BINDING_POWER[op]
    except KeyError:
        raise ParseError(f"syntax error, '{op}' is not a prefix operator") from None


def _expect_operand(tokens: _TokenStream, op: Operator) -> None:
    nxt = tokens.peek()
    if nxt is None:
        raise ParseError(f"unexpected end of input, expecting token after '{op}' token")
    if op is Operator.DIE and isinstance(nxt, OperatorToken) and nxt.symbol == "d":
        raise ParseError("syntax error, found 'd' token directly after 'd' token")


def _parse_prefix_chain(tokens: _TokenStream) -> tuple[list[Operator], IntegerToken]:
    # Collect prefix operators up to the first number.
    ops: list[Operator] = []
    token = tokens.next()
    if token is None:
        raise ParseError("unexpected end of input")

    while isinstance(token, OperatorToken):
        op = _to_operator(token)
        _expect_operand(tokens, op)
        ops.append(op)
        token = tokens.next()

    if token is None:
        raise ParseError("unexpected end of input")
    return ops, token


def _parse_infix(tokens: _TokenStream, lhs: Expression, min_bp: int) -> Expression:
    while True:
        token = tokens.peek()
        if token is None:
            break
        if isinstance(token, IntegerToken):
            raise ParseError(f"syntax error, unexpected number {token.value}")

        op = _to_operator(token)
        l_bp, r_bp = _infix_binding_power(op)
        if l_bp < min_bp:
            break

        tokens.next()
        _expect_operand(tokens, op)
        rhs = _parse_expr(tokens, r_bp)
        lhs = Binary(lhs, rhs, op)

    return lhs


def _parse_expr(tokens: _TokenStream, min_bp: int) -> Expression:
    ops, number = _parse_prefix_chain(tokens)

    # Innermost prefix first: each one takes the infix operators that bind
    # at least as tightly as its own binding power, then wraps them.
    lhs: Expression = NumericLiteral(number.value)
    for op in reversed(ops):
        lhs = _parse_infix(tokens, lhs, _prefix_binding_power(op))
        lhs = Unary(lhs, op)

    return _parse_infix(tokens, lhs, min_bp)


def parse_tokens(tokens: Sequence[Token]) -> Expression:
    """Build an expression tree from an already tokenized notation."""

    return _parse_expr(_TokenStream(tokens), 0)


def parse(text: str) -> Expression:
    """Tokenize ``text`` and build its expression tree by precedence climbing.

    Binding powers (higher binds tighter):

    - infix ``+``/``-``: 1, 2
    - infix ``d``: 3, 4
    - prefix ``+``/``-``: 5
    - prefix ``d``: 7

    So ``3d6+10`` is ``(+ (d 3 6) 10)``, ``-1d20`` is ``(d (- 1) 20)`` and
    ``-d20`` is ``(- (d 20))``.

    Raises ``LexError`` for unreadable text and ``ParseError`` for a token
    sequence that is not an expression.
    """

    expr = parse_tokens(tokenize(text))
    logger.debug("parsed %r as %s", text, expr)
    return expr
