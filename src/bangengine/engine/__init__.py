"""Deterministic, headless rules engine for Bang!.

IMPORTANT: This package must never import a UI toolkit.
"""

from .actions import Move, MoveName
from .errors import EmptyResourceError, IllegalStateError, Rejection
from .match import (
    apply,
    check_victory,
    is_card_playable,
    legal_move_names,
    new_match,
    playable_cards,
    players_in_range,
    replay,
    step,
    valid_targets,
)
from .state import MatchConfig, MatchState, PendingAction, PlayerState, StepResult, VictoryResult
from .turns import validate_match
from .types import Card, CardType, Character, CharacterId, Content, RoleName
from .view import project

__all__ = [
    "Card",
    "CardType",
    "Character",
    "CharacterId",
    "Content",
    "EmptyResourceError",
    "IllegalStateError",
    "MatchConfig",
    "MatchState",
    "Move",
    "MoveName",
    "PendingAction",
    "PlayerState",
    "Rejection",
    "RoleName",
    "StepResult",
    "VictoryResult",
    "apply",
    "check_victory",
    "is_card_playable",
    "legal_move_names",
    "new_match",
    "playable_cards",
    "players_in_range",
    "project",
    "replay",
    "step",
    "valid_targets",
    "validate_match",
]
