"""Per-viewer projection of the match state.

Hands are hidden from everyone but their owner, roles from everyone but their
owner unless the player is the sheriff or already dead, and the deck is reduced
to a count.
"""

from __future__ import annotations

from .serialize import snapshot
from .state import MatchState

HIDDEN = "HIDDEN"


def role_visible(state: MatchState, player_id: str, viewer_id: str | None) -> bool:
    ps = state.players[player_id]
    if ps.role == "sheriff" or ps.is_dead:
        return True
    return viewer_id is not None and viewer_id == player_id


def project(state: MatchState, viewer_id: str | None = None) -> dict[str, object]:
    """``viewer_id=None`` gives the spectator view."""
    view = snapshot(state)
    # The logs name cards that left hidden hands.
    view.pop("action_log")
    view["deck"] = {"count": len(state.deck)}
    view["viewer"] = viewer_id

    players = view["players"]
    assert isinstance(players, dict)
    for pid, pview in players.items():
        ps = state.players[pid]
        if pid != viewer_id:
            pview["hand"] = [HIDDEN] * len(ps.hand)
            pview["character_choices"] = []
        if not role_visible(state, pid, viewer_id):
            pview["role"] = HIDDEN
    return view
