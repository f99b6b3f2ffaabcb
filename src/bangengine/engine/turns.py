"""Turn order, the selection phase and the end/start-of-turn transitions."""

from __future__ import annotations

import logging

from .abilities import trigger
from .deck import discard, draw_cards
from .errors import IllegalStateError
from .resolution import resolve_dynamite, resolve_jail, update_winner
from .state import MatchState
from .types import Character

logger = logging.getLogger(__name__)


def next_alive(state: MatchState, player_id: str) -> str:
    order = state.turn_order
    n = len(order)
    i = order.index(player_id)
    for k in range(1, n + 1):
        pid = order[(i + k) % n]
        if not state.players[pid].is_dead:
            return pid
    raise IllegalStateError("No living player left to take a turn.")


def others_in_turn_order(state: MatchState, player_id: str) -> list[str]:
    """Living players other than ``player_id``, starting with the one after them."""
    order = state.turn_order
    i = order.index(player_id)
    rotated = order[i + 1 :] + order[:i]
    return [pid for pid in rotated if not state.players[pid].is_dead]


def rotate_to(order: list[str], first: str) -> list[str]:
    i = order.index(first)
    return order[i:] + order[:i]


def assign_character(state: MatchState, player_id: str, character: Character) -> None:
    """Fix a player's character and bring health and hand size in line with it."""
    ps = state.players[player_id]
    bonus = state.config.sheriff_health_bonus if ps.role == "sheriff" else 0
    ps.character = character
    ps.has_selected_character = True
    ps.max_health = character.health + bonus
    ps.health = ps.max_health

    delta = ps.health - len(ps.hand)
    if delta > 0:
        draw_cards(state, player_id, delta)
    elif delta < 0:
        for _ in range(-delta):
            discard(state, ps.hand.pop())
    state.emit("CHARACTER_SELECTED", player=player_id, character=character.id, health=ps.health)


def all_selected(state: MatchState) -> bool:
    return all(p.has_selected_character for p in state.players.values())


def begin_play(state: MatchState) -> None:
    state.turn_order = rotate_to(state.turn_order, state.sheriff_id)
    state.phase = "play"
    state.emit("PHASE_CHANGED", phase="play")
    logger.debug("Character selection complete, sheriff %s starts", state.sheriff_id)
    start_turn(state, state.sheriff_id)


def start_turn(state: MatchState, player_id: str) -> None:
    # Loops past players killed by Dynamite or kept in Jail.
    while True:
        ps = state.players[player_id]
        state.current_player = player_id
        state.pending_action = None
        state.discard_required = False
        ps.bangs_played_this_turn = 0
        ps.has_drawn = False
        state.turn_number += 1
        state.emit("TURN_STARTED", player=player_id, turn=state.turn_number)

        if ps.dynamite:
            resolve_dynamite(state, player_id)
            update_winner(state)
            if state.phase != "play":
                return
            if ps.is_dead:
                player_id = next_alive(state, player_id)
                continue

        if ps.in_jail and not resolve_jail(state, player_id):
            state.emit("TURN_SKIPPED", player=player_id)
            player_id = next_alive(state, player_id)
            continue
        return


def end_turn(state: MatchState) -> None:
    state.emit("TURN_ENDED", player=state.current_player)
    state.discard_required = False
    start_turn(state, next_alive(state, state.current_player))


def after_move(state: MatchState) -> None:
    """Bookkeeping that runs after every accepted move."""
    update_winner(state)
    if state.phase != "play":
        return
    if state.pending_action is None and state.players[state.current_player].is_dead:
        end_turn(state)
        update_winner(state)
        if state.phase != "play":
            return
    for pid in state.alive_players():
        trigger(state, pid, "on_hand_empty")


def validate_match(state: MatchState) -> None:
    """Raise IllegalStateError if the state breaks a structural invariant."""
    cfg = state.config
    n = len(state.players)
    if not cfg.min_players <= n <= cfg.max_players:
        raise IllegalStateError(f"Player count {n} outside {cfg.min_players}-{cfg.max_players}.")
    if sorted(state.turn_order) != sorted(state.players):
        raise IllegalStateError("Turn order does not match the seated players.")

    sheriffs = [pid for pid, p in state.players.items() if p.role == "sheriff"]
    if sheriffs != [state.sheriff_id]:
        raise IllegalStateError(f"Expected exactly one sheriff at {state.sheriff_id}, found {sheriffs}.")

    expected = len(state.cards.all_ids())
    total = state.total_cards()
    if total != expected:
        raise IllegalStateError(f"Card count drifted: {total} != {expected}.")

    for pid, p in state.players.items():
        if p.health > p.max_health:
            raise IllegalStateError(f"Player {pid} health {p.health} above max {p.max_health}.")
        if p.is_dead and (p.hand or p.in_play):
            raise IllegalStateError(f"Dead player {pid} still holds cards.")
        if not p.is_dead and state.phase == "play" and p.health <= 0:
            raise IllegalStateError(f"Player {pid} at {p.health} health is not marked dead.")
        if p.weapon is not None and p.weapon not in p.in_play:
            raise IllegalStateError(f"Player {pid} weapon {p.weapon} is not in play.")

    pending = state.pending_action
    if pending is not None and state.players[pending.target_player_id].is_dead:
        raise IllegalStateError("Pending action targets a dead player.")
