"""State mutations shared by several moves and by the turn machine."""

from __future__ import annotations

import logging

from .abilities import trigger
from .deck import discard, draw_cards, draw_check
from .state import MatchState, PlayerState
from .types import Card, CardType
from .victory import check_victory

logger = logging.getLogger(__name__)

DYNAMITE_RANKS: frozenset[str] = frozenset({"2", "3", "4", "5", "6", "7", "8", "9"})

_FLAG_FOR_TYPE: dict[str, str] = {
    "BARREL": "barrel",
    "MUSTANG": "mustang",
    "SCOPE": "scope",
    "DYNAMITE": "dynamite",
    "JAIL": "in_jail",
}


def take_from_hand(state: MatchState, player_id: str, card_id: str) -> None:
    state.players[player_id].hand.remove(card_id)


def play_to_discard(state: MatchState, player_id: str, card_id: str) -> None:
    take_from_hand(state, player_id, card_id)
    discard(state, card_id)
    state.emit("CARD_PLAYED", player=player_id, card_id=card_id, card_type=state.card(card_id).type)


def place_in_play(state: MatchState, player_id: str, card: Card) -> None:
    ps = state.players[player_id]
    ps.in_play.append(card.id)
    if card.is_weapon:
        ps.weapon = card.id
    flag = _FLAG_FOR_TYPE.get(card.type)
    if flag is not None:
        setattr(ps, flag, True)


def remove_from_play(state: MatchState, player_id: str, card_id: str) -> None:
    """Take an equipped card off the table and clear whatever it granted."""
    ps = state.players[player_id]
    ps.in_play.remove(card_id)
    if ps.weapon == card_id:
        ps.weapon = None
    flag = _FLAG_FOR_TYPE.get(state.card(card_id).type)
    if flag is not None:
        setattr(ps, flag, False)


def find_in_play(state: MatchState, player_id: str, card_type: CardType) -> str | None:
    for card_id in state.players[player_id].in_play:
        if state.card(card_id).type == card_type:
            return card_id
    return None


def take_any_card(state: MatchState, player_id: str, card_id: str) -> None:
    """Remove a card from a player's hand or, failing that, from their table."""
    ps = state.players[player_id]
    if card_id in ps.hand:
        ps.hand.remove(card_id)
    else:
        remove_from_play(state, player_id, card_id)


def heal(state: MatchState, player_id: str, amount: int) -> None:
    ps = state.players[player_id]
    before = ps.health
    ps.health = min(ps.max_health, ps.health + amount)
    if ps.health > before:
        state.emit("PLAYER_HEALED", player=player_id, amount=ps.health - before)


def apply_damage(state: MatchState, player_id: str, amount: int, source_id: str | None) -> None:
    ps = state.players[player_id]
    ps.health -= amount
    state.emit("PLAYER_DAMAGED", player=player_id, amount=amount, source=source_id)
    if ps.health <= 0:
        handle_death(state, player_id, killer_id=source_id)
        return
    trigger(state, player_id, "on_damage", {"amount": amount, "attacker_id": source_id})


def _clear_table(ps: PlayerState) -> None:
    ps.hand = []
    ps.in_play = []
    ps.weapon = None
    ps.barrel = False
    ps.mustang = False
    ps.scope = False
    ps.dynamite = False
    ps.in_jail = False


def handle_death(state: MatchState, player_id: str, killer_id: str | None) -> None:
    ps = state.players[player_id]
    ps.is_dead = True
    ps.health = 0
    logger.info("Player %s (%s) eliminated", player_id, ps.role)
    state.emit("PLAYER_DIED", player=player_id, role=ps.role, killer=killer_id)

    pending = state.pending_action
    if pending is not None and player_id in pending.remaining_targets:
        pending.remaining_targets.remove(player_id)

    for pid in state.alive_players():
        trigger(state, pid, "on_death", {"dead_player_id": player_id})

    for card_id in ps.hand + ps.in_play:
        discard(state, card_id)
    _clear_table(ps)

    if killer_id is None or killer_id == player_id:
        return
    killer = state.players[killer_id]
    if killer.is_dead:
        return
    if killer.role == "sheriff" and ps.role == "deputy":
        for card_id in killer.hand:
            discard(state, card_id)
        killer.hand = []
        state.emit("SHERIFF_PENALIZED", player=killer_id)
    if ps.role == "outlaw":
        draw_cards(state, killer_id, state.config.outlaw_bounty)
        state.emit("BOUNTY_PAID", player=killer_id, victim=player_id)


def update_winner(state: MatchState) -> None:
    if state.winner is not None or state.phase != "play":
        return
    result = check_victory(state)
    if result is None:
        return
    state.winner = result
    state.phase = "ended"
    state.pending_action = None
    logger.info("Match won by %s", result.winner)
    state.emit("GAME_ENDED", winner=result.winner, survivors=list(result.survivors))


def explodes(card: Card) -> bool:
    return card.suit == "spades" and card.rank in DYNAMITE_RANKS


def resolve_dynamite(state: MatchState, player_id: str) -> None:
    """Draw! for Dynamite: explode on spades 2-9, otherwise pass it left."""
    ps = state.players[player_id]
    if not ps.dynamite:
        return
    dynamite_id = find_in_play(state, player_id, "DYNAMITE")
    check = draw_check(state, player_id, lambda c: not explodes(c))

    if dynamite_id is not None:
        remove_from_play(state, player_id, dynamite_id)
    ps.dynamite = False

    if explodes(check):
        if dynamite_id is not None:
            discard(state, dynamite_id)
        state.emit("DYNAMITE_EXPLODED", player=player_id)
        apply_damage(state, player_id, state.config.dynamite_damage, source_id=None)
        return

    alive = state.alive_players()
    next_id = alive[(alive.index(player_id) + 1) % len(alive)]
    nxt = state.players[next_id]
    if dynamite_id is not None:
        nxt.in_play.append(dynamite_id)
    nxt.dynamite = True
    state.emit("DYNAMITE_PASSED", player=player_id, to=next_id)


def resolve_jail(state: MatchState, player_id: str) -> bool:
    """Draw! for Jail. Returns True when the prisoner gets to play this turn."""
    ps = state.players[player_id]
    if not ps.in_jail:
        return True
    jail_id = find_in_play(state, player_id, "JAIL")
    check = draw_check(state, player_id, lambda c: c.suit == "hearts")
    if jail_id is not None:
        remove_from_play(state, player_id, jail_id)
        discard(state, jail_id)
    ps.in_jail = False
    escaped = check.suit == "hearts"
    state.emit("JAIL_RESOLVED", player=player_id, escaped=escaped)
    return escaped
