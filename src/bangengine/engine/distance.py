from __future__ import annotations

from .state import MatchState

# Returned when either player is not seated among the living.
UNREACHABLE = 10**9

DEFAULT_RANGE = 1  # the Colt .45 everyone carries


def base_distance(state: MatchState, from_player: str, to_player: str) -> int:
    """Seats between two living players, the shorter way round the table."""
    if from_player == to_player:
        return 0
    alive = state.alive_players()
    if from_player not in alive or to_player not in alive:
        return UNREACHABLE
    n = len(alive)
    i = alive.index(from_player)
    j = alive.index(to_player)
    clockwise = (j - i) % n
    counter_clockwise = (i - j) % n
    return min(clockwise, counter_clockwise)


def distance(state: MatchState, from_player: str, to_player: str) -> int:
    d = base_distance(state, from_player, to_player)
    if d == 0 or d == UNREACHABLE:
        return d

    attacker = state.players[from_player]
    target = state.players[to_player]

    if target.mustang:
        d += 1
    if attacker.scope:
        d = max(1, d - 1)
    if target.ability == "distance-plus-one":
        d += 1
    if attacker.ability == "distance-minus-one":
        d = max(1, d - 1)
    return max(1, d)


def attack_range(state: MatchState, player_id: str) -> int:
    ps = state.players[player_id]
    if ps.weapon is None:
        return DEFAULT_RANGE
    return state.card(ps.weapon).range or DEFAULT_RANGE


def is_in_range(state: MatchState, attacker: str, target: str) -> bool:
    return distance(state, attacker, target) <= attack_range(state, attacker)


def players_in_range(state: MatchState, attacker: str) -> list[str]:
    return [pid for pid in state.alive_players() if pid != attacker and is_in_range(state, attacker, pid)]
