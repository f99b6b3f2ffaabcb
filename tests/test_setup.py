from __future__ import annotations

import pytest

from bangengine.engine.errors import IllegalStateError
from bangengine.engine.match import apply, new_match
from bangengine.engine.serialize import snapshot


@pytest.mark.parametrize("count", [4, 5, 6, 7])
def test_new_match_deals_roles_and_characters(content, count: int) -> None:
    state = new_match(content, count, seed=11)
    assert state.phase == "character_selection"
    assert state.sheriff_id == "0"
    assert state.total_cards() == 80

    roles = [p.role for p in state.players.values()]
    assert sorted(roles) == sorted(content.roles.for_player_count(count))
    assert state.players["0"].role == "sheriff"

    offered = [c.id for p in state.players.values() for c in p.character_choices]
    assert len(offered) == 2 * count
    assert len(set(offered)) == len(offered)
    for p in state.players.values():
        bonus = 1 if p.role == "sheriff" else 0
        assert p.health == p.character_choices[0].health + bonus
        assert len(p.hand) == p.health


def test_character_selection_starts_the_sheriffs_turn(content) -> None:
    state = new_match(content, 4, seed=3)
    for pid in ("2", "0", "3", "1"):
        choice = state.players[pid].character_choices[1]
        res = apply(state, pid, "select_character", character_id=choice.id)
        assert res.ok

    assert state.phase == "play"
    assert state.current_player == "0"
    assert state.turn_number == 1
    for p in state.players.values():
        assert p.character == p.character_choices[1]
        bonus = 1 if p.role == "sheriff" else 0
        assert p.health == p.max_health == p.character.health + bonus
        assert len(p.hand) == p.health
    assert state.total_cards() == 80


def test_character_selection_rejections(content) -> None:
    state = new_match(content, 4, seed=3)
    foreign = state.players["1"].character_choices[0].id
    assert apply(state, "0", "select_character", character_id=foreign).code == "invalid_argument"
    assert apply(state, "0", "standard_draw").code == "wrong_phase"

    mine = state.players["0"].character_choices[0].id
    assert apply(state, "0", "select_character", character_id=mine).ok
    assert apply(state, "0", "select_character", character_id=mine).code == "not_applicable"


@pytest.mark.parametrize("count", [3, 8])
def test_player_count_is_checked(content, count: int) -> None:
    with pytest.raises(IllegalStateError):
        new_match(content, count, seed=1)


def test_names_must_match_the_seats(content) -> None:
    state = new_match(content, 4, seed=1, names=["Ann", "Bo", "Cy", "Di"])
    assert state.players["2"].name == "Cy"
    with pytest.raises(ValueError):
        new_match(content, 4, seed=1, names=["Ann"])


def test_same_seed_same_table(content) -> None:
    a = snapshot(new_match(content, 6, seed=99))
    b = snapshot(new_match(content, 6, seed=99))
    c = snapshot(new_match(content, 6, seed=100))
    assert a == b
    assert a["deck"] != c["deck"]
