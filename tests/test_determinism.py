from __future__ import annotations

import json

from bangengine.engine.actions import Move
from bangengine.engine.match import new_match, playable_cards, replay, step, valid_targets
from bangengine.engine.moves import MOVE_FOR_CARD
from bangengine.engine.serialize import move_from_dict, move_to_dict, snapshot
from bangengine.engine.state import MatchConfig
from bangengine.engine.turns import validate_match
from bangengine.engine.validation import effective_type
from bangengine.services.telemetry import TelemetryService

CONFIG = MatchConfig(auto_select_characters=True)


def _choose_move(state) -> Move:
    pending = state.pending_action
    if pending is not None:
        pid = pending.target_player_id
        if pending.kind == "general_store":
            return Move(player=pid, name="respond_to_general_store", card_id=pending.revealed_cards[0])
        return Move(player=pid, name="take_damage")

    pid = state.current_player
    ps = state.players[pid]
    if state.discard_required:
        extra = len(ps.hand) - ps.health
        return Move(player=pid, name="discard_cards", card_ids=tuple(ps.hand[:extra]))
    if not ps.has_drawn:
        return Move.draw(pid)

    for cid in playable_cards(state, pid):
        name = MOVE_FOR_CARD.get(effective_type(state, pid, cid))
        if name is None:
            continue
        targets = valid_targets(state, pid, cid)
        # deterministic choice: first legal target
        return Move(player=pid, name=name, card_id=cid, target_id=targets[0] if targets else None)
    return Move.pass_turn(pid)


def _play(state, limit: int) -> list[Move]:
    moves: list[Move] = []
    for _ in range(limit):
        if state.phase == "ended":
            break
        m = _choose_move(state)
        moves.append(m)
        step(state, m)
        validate_match(state)
    return moves


def test_engine_determinism_replay(content) -> None:
    seed = 424242
    state1 = new_match(content, 5, seed=seed, config=CONFIG)
    moves = _play(state1, 200)
    assert len(moves) > 10
    snap1 = snapshot(state1)

    # Round-trip the log through JSON as a saved game would.
    saved = json.loads(json.dumps([move_to_dict(m) for m in moves]))
    state2 = replay(content, 5, seed, [move_from_dict(d) for d in saved], config=CONFIG)
    assert snapshot(state2) == snap1


def test_seeds_diverge(content) -> None:
    a = new_match(content, 4, seed=1, config=CONFIG)
    b = new_match(content, 4, seed=2, config=CONFIG)
    _play(a, 40)
    _play(b, 40)
    assert snapshot(a) != snapshot(b)


def test_telemetry_export(content, tmp_path) -> None:
    state = new_match(content, 4, seed=7, config=CONFIG)
    _play(state, 60)

    telemetry = TelemetryService(tmp_path / "telemetry" / "match.jsonl")
    written = telemetry.export_match(state)
    assert written == len(state.event_log)

    lines = telemetry.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == written
    first = json.loads(lines[0])
    assert first["type"] == "MATCH_STARTED"
    assert first["payload"]["seed"] == 7
    assert "ts" in first
