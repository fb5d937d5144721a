"""
punbot.constants — Shared Constants & Reply Texts
==================================================

Single source of truth for everything the bot says out loud.
"""

from __future__ import annotations

REJECTION_MESSAGE = "Like Africa, Kenya not try to give yourself points?"

EMPTY_SCORES_MESSAGE = "No pun points yet."

# Key of the single run-metadata row in the ``info`` table.
LAST_RUN_KEY = "lastrun"


def welcome_message(bot_name: str) -> str:
    """The one-time banner posted on the very first start."""
    return (
        "Hi I keep track of pun points."
        "\n Give a point by typing `@whomever pun point`."
        f"\n I can also spit out the scores: `@{bot_name} tell me what the dang scores are??`"
        f"\n Or just `@{bot_name} scores`"
        "\n Bye now."
    )


def format_score_line(name: str, points: int) -> str:
    """One line of the score report: ``"<name>: <points>"``."""
    return f"{name}: {points}"
