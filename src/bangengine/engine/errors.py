from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

RejectionCode = Literal[
    "match_over",
    "wrong_phase",
    "not_your_turn",
    "wrong_stage",
    "unknown_card",
    "card_not_owned",
    "must_draw_first",
    "already_drawn",
    "bang_limit",
    "missing_target",
    "invalid_target",
    "wrong_card_type",
    "pending_action",
    "not_applicable",
    "invalid_argument",
    "unknown_move",
]


class IllegalStateError(RuntimeError):
    """The match state violates a setup invariant. Not recoverable."""


class EmptyResourceError(RuntimeError):
    """Deck and discard pile are both empty while a card must be drawn."""


@dataclass(frozen=True)
class Rejection:
    """A recoverable refusal of a move. State is left untouched."""

    code: RejectionCode
    message: str
