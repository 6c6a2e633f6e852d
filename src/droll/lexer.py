from __future__ import annotations

import logging

from .errors import LexError
from .models import DIE, MAX_LITERAL, MINUS, PLUS, IntegerToken, OperatorToken, Token


logger = logging.getLogger(__name__)

_OPERATOR_TOKENS: dict[str, OperatorToken] = {
    "+": PLUS,
    "-": MINUS,
    "d": DIE,
}

_DIGITS = "0123456789"
_LEADING_DIGITS = "123456789"
_MAX_LITERAL_DIGITS = len(str(MAX_LITERAL))


def _number_too_large(digits: str) -> LexError:
    shown = digits if len(digits) <= 24 else f"{digits[:20]}...({len(digits)} digits)"
    return LexError(
        f"failed to parse number token: `{shown}` is too large to fit in target type"
    )


def _number_token(text: str, start: int) -> tuple[IntegerToken, int]:
    end = start
    while end < len(text) and text[end] in _DIGITS:
        end += 1

    digits = text[start:end]
    # Length first: int() refuses very long digit strings.
    if len(digits) > _MAX_LITERAL_DIGITS:
        raise _number_too_large(digits)

    value = int(digits)
    if value > MAX_LITERAL:
        raise _number_too_large(digits)
    return IntegerToken(value), end


def tokenize(text: str) -> list[Token]:
    """Split dice notation into tokens.

    Only ``1-9`` (starting a number), ``0-9`` (continuing one), ``+``, ``-`` and
    ``d`` are accepted. Whitespace is not skipped. The first unreadable
    character raises ``LexError`` and no tokens are returned.
    """

    tokens: list[Token] = []
    pos = 0

    while pos < len(text):
        char = text[pos]

        if char in _LEADING_DIGITS:
            token, pos = _number_token(text, pos)
            tokens.append(token)
            continue

        op_token = _OPERATOR_TOKENS.get(char)
        if op_token is None:
            raise LexError(f"unexpected character `{char}`")

        tokens.append(op_token)
        pos += 1

    logger.debug("tokenized %r into %s", text, tokens)
    return tokens
