from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

MoveName = Literal[
    "select_character",
    "standard_draw",
    "play_bang",
    "play_missed",
    "use_barrel",
    "take_damage",
    "play_beer",
    "play_saloon",
    "play_stagecoach",
    "play_wells_fargo",
    "play_panic",
    "play_cat_balou",
    "play_duel",
    "respond_to_duel",
    "play_gatling",
    "play_indians",
    "respond_to_indians",
    "play_general_store",
    "respond_to_general_store",
    "play_dynamite",
    "resolve_dynamite",
    "play_jail",
    "resolve_jail",
    "equip_card",
    "pass_turn",
    "discard_cards",
    "use_ability",
]


@dataclass(frozen=True)
class Move:
    """One attempted move. Arguments a move does not use stay at their defaults."""

    player: str
    name: MoveName
    card_id: str | None = None
    target_id: str | None = None
    card_ids: tuple[str, ...] = ()
    character_id: str | None = None
    amount: int = 1
    from_discard: bool = False
    target_card_id: str | None = None

    @staticmethod
    def select(player: str, character_id: str) -> "Move":
        return Move(player=player, name="select_character", character_id=character_id)

    @staticmethod
    def draw(player: str) -> "Move":
        return Move(player=player, name="standard_draw")

    @staticmethod
    def play(player: str, name: MoveName, card_id: str, target_id: str | None = None) -> "Move":
        return Move(player=player, name=name, card_id=card_id, target_id=target_id)

    @staticmethod
    def take_damage(player: str, amount: int = 1) -> "Move":
        return Move(player=player, name="take_damage", amount=amount)

    @staticmethod
    def pass_turn(player: str) -> "Move":
        return Move(player=player, name="pass_turn")

    @staticmethod
    def discard(player: str, card_ids: tuple[str, ...]) -> "Move":
        return Move(player=player, name="discard_cards", card_ids=tuple(card_ids))
