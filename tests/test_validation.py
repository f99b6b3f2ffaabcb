from __future__ import annotations

from bangengine.engine.match import (
    is_card_playable,
    legal_move_names,
    playable_cards,
    valid_targets,
)
from bangengine.engine.validation import can_equip, can_play_card, is_valid_target


def test_can_play_card_reasons(table) -> None:
    s = table.state
    table.give("0", "card-1", "card-2")
    assert can_play_card(s, "0", "card-1", "1").code == "must_draw_first"

    table.ready("0")
    assert can_play_card(s, "0", "card-3", "1").code == "card_not_owned"
    assert can_play_card(s, "0", "card-1", None).code == "missing_target"
    assert can_play_card(s, "0", "card-1", "2").code == "invalid_target"
    assert can_play_card(s, "0", "card-1", "0").code == "invalid_target"
    assert can_play_card(s, "0", "card-1", "1") is None

    table.p("0").bangs_played_this_turn = 1
    assert can_play_card(s, "0", "card-2", "1").code == "bang_limit"


def test_targets_per_card_type(table) -> None:
    s = table.state
    assert not is_valid_target(s, "1", "0", "JAIL")
    assert is_valid_target(s, "0", "1", "JAIL")
    assert is_valid_target(s, "0", "2", "DUEL")
    assert is_valid_target(s, "0", "2", "CAT_BALOU") is False  # nothing to discard

    table.give("2", "card-30")
    assert is_valid_target(s, "0", "2", "CAT_BALOU")
    assert not is_valid_target(s, "0", "2", "PANIC")  # too far

    table.kill("3")
    assert not is_valid_target(s, "0", "3", "DUEL")


def test_valid_targets(table) -> None:
    table.give("0", "card-1", "card-38", "card-56")
    assert valid_targets(table.state, "0", "card-1") == ["1", "3"]
    assert valid_targets(table.state, "0", "card-56") == ["1", "2", "3"]
    assert valid_targets(table.state, "0", "card-38") == []


def test_can_equip(table) -> None:
    table.equip("0", "card-72")
    assert can_equip(table.state, "0", "card-73").code == "invalid_argument"
    assert can_equip(table.state, "0", "card-78") is None
    assert can_equip(table.state, "0", "card-1").code == "wrong_card_type"
    assert can_equip(table.state, "0", "card-75").code == "wrong_card_type"


def test_card_playability(table) -> None:
    table.give("0", "card-1", "card-26", "card-38", "card-66")
    assert playable_cards(table.state, "0") == []

    table.ready("0")
    assert not is_card_playable(table.state, "0", "card-26")  # Missed! is only a response
    assert not is_card_playable(table.state, "0", "card-38")  # full health
    assert not is_card_playable(table.state, "1", "card-1")
    assert playable_cards(table.state, "0") == ["card-1", "card-66"]

    table.p("0").health = 3
    assert is_card_playable(table.state, "0", "card-38")


def test_legal_moves_follow_the_turn(table) -> None:
    table.give("0", "card-1")
    assert legal_move_names(table.state, "0") == ["standard_draw"]
    assert legal_move_names(table.state, "1") == []

    table.ready("0")
    assert legal_move_names(table.state, "0") == ["play_bang", "pass_turn"]

    table.give("1", "card-30")
    assert table.act("0", "play_bang", card_id="card-1", target_id="1").ok
    assert legal_move_names(table.state, "0") == []
    assert legal_move_names(table.state, "1") == ["play_missed", "take_damage"]


def test_legal_moves_include_sids_ability(table) -> None:
    table.give("2", "card-30", "card-31")
    table.p("2").health = 2
    assert legal_move_names(table.state, "2") == ["use_ability"]
