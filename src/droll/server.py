from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from .config import get_settings
from .dice import roll_from_text
from .errors import DiceError


mcp = FastMCP("droll")


@mcp.tool()
def roll_dice(text: str):
    """Roll dice notation such as ``3d6+10``, ``d20`` or ``-1d4``.

    Input: text (string) using digits, ``+``, ``-`` and ``d`` only
    Output: structured JSON with the parsed expression and the total

    Raises a hard error (exception) on invalid input.
    """

    try:
        return roll_from_text(text)
    except DiceError as e:
        raise ValueError(str(e)) from None


def run() -> None:
    logging.basicConfig(level=get_settings().log_level.upper())
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
