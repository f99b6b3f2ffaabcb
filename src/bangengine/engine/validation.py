from __future__ import annotations

from .abilities import counts_as_bang, has_unlimited_bangs
from .distance import distance, is_in_range
from .errors import Rejection
from .state import MatchState
from .types import CardType

SELF_TARGETABLE: frozenset[str] = frozenset({"BEER"})

# Equipment a player may carry at most one of, keyed to its status flag.
EQUIPMENT_FLAGS: dict[str, str] = {
    "BARREL": "barrel",
    "MUSTANG": "mustang",
    "SCOPE": "scope",
    "DYNAMITE": "dynamite",
}


def has_card(state: MatchState, player_id: str, card_id: str) -> bool:
    return card_id in state.players[player_id].hand


def effective_type(state: MatchState, player_id: str, card_id: str) -> CardType:
    """The type a card is played as (Calamity Janet's Missed! counts as Bang!)."""
    card = state.card(card_id)
    if card.type == "MISSED" and counts_as_bang(state, player_id, card_id):
        return "BANG"
    return card.type


def is_valid_target(state: MatchState, player_id: str, target_id: str, card_type: CardType) -> bool:
    target = state.players.get(target_id)
    if target is None or target.is_dead:
        return False
    if player_id == target_id and card_type not in SELF_TARGETABLE:
        return False

    if card_type == "BANG":
        return is_in_range(state, player_id, target_id)
    if card_type == "PANIC":
        return distance(state, player_id, target_id) <= 1 and target.card_count > 0
    if card_type == "CAT_BALOU":
        return target.card_count > 0
    if card_type == "DUEL":
        return player_id != target_id
    if card_type == "JAIL":
        return target_id != state.sheriff_id and not target.in_jail
    return True


def can_play_bang(state: MatchState, player_id: str) -> bool:
    if has_unlimited_bangs(state, player_id):
        return True
    return state.players[player_id].bangs_played_this_turn == 0


def can_play_card(
    state: MatchState, player_id: str, card_id: str, target_id: str | None = None
) -> Rejection | None:
    """Why ``player_id`` may not play ``card_id`` right now, or None if they may."""
    ps = state.players[player_id]
    if not ps.has_drawn:
        return Rejection("must_draw_first", "Draw your cards first.")
    if not has_card(state, player_id, card_id):
        return Rejection("card_not_owned", "That card is not in your hand.")
    card = state.cards.find(card_id)
    if card is None:
        return Rejection("unknown_card", f"Unknown card {card_id}.")

    ctype = effective_type(state, player_id, card_id)
    if ctype == "BANG" and not can_play_bang(state, player_id):
        return Rejection("bang_limit", "Only one BANG! per turn.")

    requires_target = card.requires_target or ctype == "BANG"
    if requires_target and target_id is None:
        return Rejection("missing_target", "Select a target.")
    if requires_target and target_id is not None:
        if not is_valid_target(state, player_id, target_id, ctype):
            return Rejection("invalid_target", "That player cannot be targeted with this card.")
    return None


def can_equip(state: MatchState, player_id: str, card_id: str) -> Rejection | None:
    card = state.card(card_id)
    if not card.is_equipment:
        return Rejection("wrong_card_type", "Only equipment can be equipped.")
    if card.type == "JAIL":
        return Rejection("wrong_card_type", "Jail is played on another player.")
    flag = EQUIPMENT_FLAGS.get(card.type)
    if flag is not None and getattr(state.players[player_id], flag):
        return Rejection("invalid_argument", f"You already have {card.name} in play.")
    return None


def can_drink_beer(state: MatchState, player_id: str) -> Rejection | None:
    ps = state.players[player_id]
    if ps.health >= ps.max_health:
        return Rejection("not_applicable", "You are already at full health.")
    if len(state.alive_players()) <= 2:
        return Rejection("not_applicable", "Beer has no effect with two players left.")
    return None


# UI affordance queries


def valid_targets(state: MatchState, player_id: str, card_id: str) -> list[str]:
    """Players ``card_id`` could be aimed at. Empty for untargeted cards."""
    card = state.cards.find(card_id)
    if card is None:
        return []
    ctype = effective_type(state, player_id, card_id)
    if not (card.requires_target or ctype == "BANG"):
        return []
    return [pid for pid in state.alive_players() if is_valid_target(state, player_id, pid, ctype)]


def is_card_playable(state: MatchState, player_id: str, card_id: str) -> bool:
    if state.phase != "play" or state.current_player != player_id or state.stage != "action":
        return False
    if state.cards.find(card_id) is None or not has_card(state, player_id, card_id):
        return False
    card = state.card(card_id)
    ctype = effective_type(state, player_id, card_id)
    if ctype == "MISSED":
        return False
    if not state.players[player_id].has_drawn:
        return False
    if card.is_equipment and ctype != "JAIL":
        return can_equip(state, player_id, card_id) is None
    if ctype == "BEER":
        return can_drink_beer(state, player_id) is None
    if card.requires_target or ctype == "BANG":
        return any(
            can_play_card(state, player_id, card_id, target) is None
            for target in valid_targets(state, player_id, card_id)
        )
    return can_play_card(state, player_id, card_id) is None


def playable_cards(state: MatchState, player_id: str) -> list[str]:
    return [cid for cid in state.players[player_id].hand if is_card_playable(state, player_id, cid)]
