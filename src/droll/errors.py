from __future__ import annotations


class DiceError(ValueError):
    """User-facing validation errors (fail-fast, no roll performed)."""


class LexError(DiceError):
    """Raised when the notation contains text the tokenizer cannot read."""


class ParseError(DiceError):
    """Raised when the token sequence does not form an expression."""
