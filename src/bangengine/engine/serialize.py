from __future__ import annotations

from .actions import Move
from .state import MatchState, PendingAction, PlayerState


def move_to_dict(m: Move) -> dict[str, object]:
    return {
        "player": m.player,
        "name": m.name,
        "card_id": m.card_id,
        "target_id": m.target_id,
        "card_ids": list(m.card_ids),
        "character_id": m.character_id,
        "amount": m.amount,
        "from_discard": m.from_discard,
        "target_card_id": m.target_card_id,
    }


def move_from_dict(d: dict[str, object]) -> Move:
    card_ids = d.get("card_ids") or []
    assert isinstance(card_ids, list)
    return Move(
        player=str(d["player"]),
        name=d["name"],  # type: ignore[arg-type]
        card_id=d.get("card_id"),  # type: ignore[arg-type]
        target_id=d.get("target_id"),  # type: ignore[arg-type]
        card_ids=tuple(str(c) for c in card_ids),
        character_id=d.get("character_id"),  # type: ignore[arg-type]
        amount=int(d.get("amount", 1)),  # type: ignore[arg-type]
        from_discard=bool(d.get("from_discard", False)),
        target_card_id=d.get("target_card_id"),  # type: ignore[arg-type]
    )


def _pending_to_dict(p: PendingAction | None) -> dict[str, object] | None:
    if p is None:
        return None
    return {
        "kind": p.kind,
        "source_player_id": p.source_player_id,
        "target_player_id": p.target_player_id,
        "card_id": p.card_id,
        "remaining_targets": list(p.remaining_targets),
        "requires_missed": p.requires_missed,
        "revealed_cards": list(p.revealed_cards),
        "bang_count": p.bang_count,
        "barrel_used": p.barrel_used,
    }


def _player_to_dict(p: PlayerState) -> dict[str, object]:
    return {
        "id": p.id,
        "name": p.name,
        "role": p.role,
        "character": p.character.id if p.character is not None else None,
        "character_choices": [c.id for c in p.character_choices],
        "health": p.health,
        "max_health": p.max_health,
        "hand": list(p.hand),
        "in_play": list(p.in_play),
        "weapon": p.weapon,
        "barrel": p.barrel,
        "mustang": p.mustang,
        "scope": p.scope,
        "dynamite": p.dynamite,
        "in_jail": p.in_jail,
        "is_dead": p.is_dead,
        "bangs_played_this_turn": p.bangs_played_this_turn,
        "has_drawn": p.has_drawn,
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    winner = None
    if state.winner is not None:
        winner = {"winner": state.winner.winner, "survivors": list(state.winner.survivors)}
    return {
        "seed": state.seed,
        "phase": state.phase,
        "stage": state.stage,
        "turn_number": state.turn_number,
        "current_player": state.current_player,
        "turn_order": list(state.turn_order),
        "sheriff_id": state.sheriff_id,
        "deck": list(state.deck),
        "discard_pile": list(state.discard_pile),
        "pending_action": _pending_to_dict(state.pending_action),
        "discard_required": state.discard_required,
        "winner": winner,
        "players": {pid: _player_to_dict(p) for pid, p in state.players.items()},
        "action_log": [move_to_dict(m) for m in state.action_log if isinstance(m, Move)],
    }
