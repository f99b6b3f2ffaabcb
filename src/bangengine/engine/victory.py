from __future__ import annotations

from .state import MatchState, VictoryResult


def check_victory(state: MatchState) -> VictoryResult | None:
    """Return the winning side, or None while the match goes on.

    Pure: reads the state only. Poll after every applied move.
    """
    alive = state.alive_players()
    roles = [state.players[pid].role for pid in alive]
    survivors = tuple(alive)

    sheriff_alive = "sheriff" in roles
    outlaws_alive = "outlaw" in roles
    renegade_alive = "renegade" in roles

    if not sheriff_alive:
        if len(alive) == 1 and renegade_alive:
            return VictoryResult(winner="renegade", survivors=survivors)
        return VictoryResult(winner="outlaws", survivors=survivors)

    if not outlaws_alive and not renegade_alive:
        return VictoryResult(winner="sheriff", survivors=survivors)

    # Sheriff against the Renegade alone: the Renegade still has to win the showdown.
    if len(alive) == 2 and renegade_alive:
        return None

    if len(alive) == 1 and renegade_alive:
        return VictoryResult(winner="renegade", survivors=survivors)

    return None
