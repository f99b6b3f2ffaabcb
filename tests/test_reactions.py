from __future__ import annotations


def test_duel_alternates_until_someone_declines(table) -> None:
    table.give("0", "card-56", "card-3")
    table.give("1", "card-2")
    table.ready("0")

    assert table.act("0", "play_duel", card_id="card-56", target_id="1").ok
    pending = table.state.pending_action
    assert pending.kind == "duel"
    assert table.state.stage == "respond_to_duel"
    assert pending.target_player_id == "1"

    assert table.act("1", "respond_to_duel", card_id="card-2").ok
    assert table.state.pending_action.target_player_id == "0"
    assert table.act("0", "respond_to_duel", card_id="card-3").ok
    assert table.state.pending_action.target_player_id == "1"
    assert table.state.pending_action.bang_count == 2

    # No card offered: the duel is lost.
    assert table.act("1", "respond_to_duel").ok
    assert table.state.pending_action is None
    assert table.p("1").health == 3
    assert table.p("0").health == 5


def test_duel_initiator_can_lose(table) -> None:
    table.give("0", "card-56")
    table.give("1", "card-2")
    table.ready("0")

    assert table.act("0", "play_duel", card_id="card-56", target_id="2").ok
    table.give("2", "card-3")
    assert table.act("2", "respond_to_duel", card_id="card-3").ok
    assert table.act("0", "take_damage").ok
    assert table.p("0").health == 4
    assert table.p("2").health == 4
    assert table.state.current_player == "0"


def test_duel_response_must_be_an_owned_bang(table) -> None:
    table.give("0", "card-56")
    table.give("1", "card-26")
    table.ready("0")
    assert table.act("0", "play_duel", card_id="card-56", target_id="1").ok

    assert table.act("1", "respond_to_duel", card_id="card-26").code == "wrong_card_type"
    assert table.act("1", "respond_to_duel", card_id="card-5").code == "card_not_owned"
    assert table.act("0", "respond_to_duel").code == "not_your_turn"
    assert table.state.pending_action is not None


def test_duel_cannot_target_self(table) -> None:
    table.give("0", "card-56")
    table.ready("0")
    assert table.act("0", "play_duel", card_id="card-56", target_id="0").code == "invalid_target"


def test_gatling_walks_the_table_in_turn_order(table) -> None:
    table.give("0", "card-61", "card-1")
    table.give("2", "card-26")
    table.ready("0")

    assert table.act("0", "play_gatling", card_id="card-61").ok
    pending = table.state.pending_action
    assert pending.kind == "gatling"
    assert pending.target_player_id == "1"
    assert pending.remaining_targets == ["2", "3"]
    assert table.state.stage == "respond_to_bang"

    assert table.act("1", "take_damage").ok
    assert table.state.pending_action.target_player_id == "2"
    assert table.act("2", "play_missed", card_id="card-26").ok
    assert table.state.pending_action.target_player_id == "3"
    assert table.act("3", "take_damage").ok
    assert table.state.pending_action is None

    assert [table.p(pid).health for pid in ("0", "1", "2", "3")] == [5, 3, 4, 3]
    # Gatling is not a BANG!, the budget is untouched.
    assert table.p("0").bangs_played_this_turn == 0
    assert table.act("0", "play_bang", card_id="card-1", target_id="1").ok


def test_gatling_skips_players_killed_along_the_way(table) -> None:
    table.give("0", "card-61")
    table.kill("2")
    table.p("1").health = 1
    table.ready("0")

    assert table.act("0", "play_gatling", card_id="card-61").ok
    assert table.state.pending_action.remaining_targets == ["3"]
    assert table.act("1", "take_damage").ok
    assert table.p("1").is_dead
    assert table.state.pending_action.target_player_id == "3"


def test_indians_require_a_bang_discard(table) -> None:
    table.give("0", "card-59")
    table.give("2", "card-2")
    table.give("3", "card-26")
    table.ready("0")

    assert table.act("0", "play_indians", card_id="card-59").ok
    assert table.state.stage == "respond_to_indians"
    assert table.act("1", "respond_to_indians").ok
    assert table.p("1").health == 3

    assert table.act("2", "respond_to_indians", card_id="card-2").ok
    assert table.p("2").health == 4
    assert "card-2" in table.state.discard_pile

    assert table.act("3", "respond_to_indians", card_id="card-26").code == "wrong_card_type"
    assert table.act("3", "take_damage").ok
    assert table.p("3").health == 3
    assert table.state.pending_action is None


def test_general_store_gives_everyone_one_card(table) -> None:
    table.give("0", "card-62")
    table.ready("0")
    table.stack("card-30", "card-31", "card-32", "card-33")

    assert table.act("0", "play_general_store", card_id="card-62").ok
    pending = table.state.pending_action
    assert pending.kind == "general_store"
    assert pending.revealed_cards == ["card-30", "card-31", "card-32", "card-33"]
    assert pending.target_player_id == "0"
    assert table.state.total_cards() == 80

    before = {pid: len(table.p(pid).hand) for pid in ("0", "1", "2", "3")}
    assert table.act("1", "respond_to_general_store", card_id="card-30").code == "not_your_turn"
    assert table.act("0", "respond_to_general_store", card_id="card-1").code == "invalid_argument"

    for pid, pick in (("0", "card-33"), ("1", "card-30"), ("2", "card-31"), ("3", "card-32")):
        assert table.act(pid, "respond_to_general_store", card_id=pick).ok
        assert pick in table.p(pid).hand

    assert table.state.pending_action is None
    assert {pid: len(table.p(pid).hand) for pid in before} == {pid: n + 1 for pid, n in before.items()}


def test_only_one_pending_action_at_a_time(table) -> None:
    table.give("0", "card-1", "card-56")
    table.ready("0")
    assert table.act("0", "play_bang", card_id="card-1", target_id="1").ok
    assert table.act("0", "play_duel", card_id="card-56", target_id="3").code == "pending_action"
    assert table.state.pending_action.kind == "bang"
