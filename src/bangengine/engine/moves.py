"""Move handlers.

Every handler has the shape ``(state, move) -> Rejection | None``. All checks
run before the first mutation, so a rejected move leaves the state exactly as
it found it. Accepted moves return None; ``match.step`` then runs the shared
after-move bookkeeping (victory, dead current player, Suzy Lafayette).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Callable

from .abilities import (
    DrawHint,
    black_jack_draw,
    counts_as_bang,
    counts_as_missed,
    has_virtual_barrel,
    jesse_jones_draw,
    kit_carlson_draw,
    kit_carlson_options,
    pedro_ramirez_draw,
    requires_double_missed,
    sid_ketchum_heal,
    trigger,
)
from .actions import Move, MoveName
from .deck import discard, draw_card, draw_cards, draw_check
from .errors import IllegalStateError, Rejection
from .resolution import (
    apply_damage,
    heal,
    place_in_play,
    play_to_discard,
    remove_from_play,
    resolve_dynamite,
    resolve_jail,
    take_any_card,
    take_from_hand,
)
from .state import MatchState, PendingAction, PendingKind, Stage
from .turns import all_selected, assign_character, begin_play, end_turn, others_in_turn_order
from .types import CardType
from .validation import can_drink_beer, can_equip, can_play_card, effective_type, has_card

MoveHandler = Callable[[MatchState, Move], Rejection | None]

# Which move plays a card of a given type from the hand. Missed! has none.
MOVE_FOR_CARD: dict[CardType, MoveName] = {
    "BANG": "play_bang",
    "BEER": "play_beer",
    "SALOON": "play_saloon",
    "STAGECOACH": "play_stagecoach",
    "WELLS_FARGO": "play_wells_fargo",
    "PANIC": "play_panic",
    "CAT_BALOU": "play_cat_balou",
    "DUEL": "play_duel",
    "INDIANS": "play_indians",
    "GATLING": "play_gatling",
    "GENERAL_STORE": "play_general_store",
    "VOLCANIC": "equip_card",
    "SCHOFIELD": "equip_card",
    "REMINGTON": "equip_card",
    "REV_CARABINE": "equip_card",
    "WINCHESTER": "equip_card",
    "BARREL": "equip_card",
    "MUSTANG": "equip_card",
    "SCOPE": "equip_card",
    "DYNAMITE": "play_dynamite",
    "JAIL": "play_jail",
}


# Guards


def _in_play(state: MatchState, move: Move) -> Rejection | None:
    if state.phase != "play":
        return Rejection("wrong_phase", "The match is not in the play phase.")
    if move.player not in state.players:
        return Rejection("invalid_argument", f"Unknown player {move.player}.")
    return None


def _on_turn(state: MatchState, move: Move) -> Rejection | None:
    rej = _in_play(state, move)
    if rej is not None:
        return rej
    if move.player != state.current_player:
        return Rejection("not_your_turn", "Not your turn.")
    if state.pending_action is not None:
        return Rejection("pending_action", "Waiting for another player to respond.")
    if state.stage != "action":
        return Rejection("wrong_stage", "Discard down to your health first.")
    return None


def _responding(state: MatchState, move: Move, stages: Iterable[Stage]) -> Rejection | None:
    rej = _in_play(state, move)
    if rej is not None:
        return rej
    pending = state.pending_action
    if pending is None or pending.stage not in stages:
        return Rejection("wrong_stage", "There is nothing to respond to.")
    if move.player != pending.target_player_id:
        return Rejection("not_your_turn", "Another player must respond.")
    return None


def _card_in_hand(state: MatchState, move: Move, *types: CardType) -> Rejection | None:
    rej = _on_turn(state, move)
    if rej is not None:
        return rej
    if move.card_id is None:
        return Rejection("invalid_argument", "Choose a card.")
    if not state.players[move.player].has_drawn:
        return Rejection("must_draw_first", "Draw your cards first.")
    if not has_card(state, move.player, move.card_id):
        return Rejection("card_not_owned", "That card is not in your hand.")
    if effective_type(state, move.player, move.card_id) not in types:
        return Rejection("wrong_card_type", f"{state.card(move.card_id).name} cannot be played that way.")
    return can_play_card(state, move.player, move.card_id, move.target_id)


def _owned_card(state: MatchState, move: Move) -> Rejection | None:
    if move.card_id is None:
        return Rejection("invalid_argument", "Choose a card.")
    if not has_card(state, move.player, move.card_id):
        return Rejection("card_not_owned", "That card is not in your hand.")
    return None


# Pending action bookkeeping


def _open_pending(state: MatchState, pending: PendingAction) -> None:
    state.pending_action = pending
    state.emit(
        "PENDING_ACTION_OPENED",
        kind=pending.kind,
        source=pending.source_player_id,
        target=pending.target_player_id,
    )


def _advance_pending(state: MatchState) -> None:
    """Hand the pending action to the next queued target, or close it."""
    pending = state.pending_action
    assert pending is not None
    while pending.remaining_targets:
        nxt = pending.remaining_targets.pop(0)
        if state.players[nxt].is_dead:
            continue
        pending.target_player_id = nxt
        pending.requires_missed = 1
        pending.barrel_used = False
        state.emit("PENDING_ACTION_TARGET", kind=pending.kind, target=nxt)
        return
    if pending.revealed_cards:
        raise IllegalStateError("General Store closed with cards left on the table.")
    _close_pending(state)


def _close_pending(state: MatchState) -> None:
    pending = state.pending_action
    assert pending is not None
    state.pending_action = None
    state.emit("PENDING_ACTION_RESOLVED", kind=pending.kind, source=pending.source_player_id)


def _open_multi_target(state: MatchState, move: Move, kind: PendingKind) -> None:
    assert move.card_id is not None
    targets = others_in_turn_order(state, move.player)
    play_to_discard(state, move.player, move.card_id)
    _open_pending(
        state,
        PendingAction(
            kind=kind,
            source_player_id=move.player,
            target_player_id=targets[0],
            card_id=move.card_id,
            remaining_targets=targets[1:],
            requires_missed=1,
        ),
    )


# Setup and draw


def _select_character(state: MatchState, move: Move) -> Rejection | None:
    if state.phase != "character_selection":
        return Rejection("wrong_phase", "Characters have already been chosen.")
    ps = state.players.get(move.player)
    if ps is None:
        return Rejection("invalid_argument", f"Unknown player {move.player}.")
    if ps.has_selected_character:
        return Rejection("not_applicable", "You already chose a character.")
    choice = next((c for c in ps.character_choices if c.id == move.character_id), None)
    if choice is None:
        return Rejection("invalid_argument", "Pick one of the two characters you were offered.")

    assign_character(state, move.player, choice)
    if all_selected(state):
        begin_play(state)
    return None


def _standard_draw(state: MatchState, move: Move) -> Rejection | None:
    rej = _on_turn(state, move)
    if rej is not None:
        return rej
    pid = move.player
    ps = state.players[pid]
    if ps.has_drawn:
        return Rejection("already_drawn", "You already drew this turn.")

    hint = trigger(state, pid, "on_draw_phase") or DrawHint()
    kit_draw = hint.use_special_draw and ps.ability == "look-top-three" and len(state.deck) >= 3
    jesse_draw = hint.can_draw_from_player and move.target_id is not None
    pedro_draw = hint.can_draw_from_discard and move.from_discard and bool(state.discard_pile)

    if move.card_ids and not kit_draw:
        return Rejection("invalid_argument", "You cannot choose which cards to draw.")
    if kit_draw and move.card_ids:
        options = kit_carlson_options(state)
        picks = set(move.card_ids)
        if len(move.card_ids) != 2 or len(picks) != 2 or not picks <= set(options):
            return Rejection("invalid_argument", "Choose two of the top three cards.")
    if move.target_id is not None and not hint.can_draw_from_player:
        return Rejection("invalid_argument", "You cannot draw from another player.")
    if jesse_draw:
        target = state.players.get(move.target_id or "")
        if target is None or target.is_dead or move.target_id == pid:
            return Rejection("invalid_target", "Draw from another living player.")
    if move.from_discard and not hint.can_draw_from_discard:
        return Rejection("invalid_argument", "You cannot draw from the discard pile.")

    if kit_draw:
        kit_carlson_draw(state, pid, move.card_ids or None)
    elif hint.use_special_draw and ps.ability == "second-card-reveal":
        black_jack_draw(state, pid)
    elif jesse_draw:
        assert move.target_id is not None
        jesse_jones_draw(state, pid, move.target_id)
    elif pedro_draw:
        pedro_ramirez_draw(state, pid)
    else:
        draw_cards(state, pid, state.config.draw_phase_cards)
    ps.has_drawn = True
    trigger(state, pid, "on_hand_empty")
    return None


# Bang! and the responses to it


def _play_bang(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "BANG")
    if rej is not None:
        return rej
    assert move.card_id is not None and move.target_id is not None
    play_to_discard(state, move.player, move.card_id)
    state.players[move.player].bangs_played_this_turn += 1
    _open_pending(
        state,
        PendingAction(
            kind="bang",
            source_player_id=move.player,
            target_player_id=move.target_id,
            card_id=move.card_id,
            requires_missed=2 if requires_double_missed(state, move.player) else 1,
        ),
    )
    return None


def _play_missed(state: MatchState, move: Move) -> Rejection | None:
    rej = _responding(state, move, ("respond_to_bang",)) or _owned_card(state, move)
    if rej is not None:
        return rej
    assert move.card_id is not None
    if not counts_as_missed(state, move.player, move.card_id):
        return Rejection("wrong_card_type", "Only a Missed! cancels a shot.")

    pending = state.pending_action
    assert pending is not None
    play_to_discard(state, move.player, move.card_id)
    pending.requires_missed -= 1
    state.emit("MISSED_PLAYED", player=move.player, still_required=pending.requires_missed)
    if pending.requires_missed <= 0:
        _advance_pending(state)
    return None


def _use_barrel(state: MatchState, move: Move) -> Rejection | None:
    rej = _responding(state, move, ("respond_to_bang",))
    if rej is not None:
        return rej
    ps = state.players[move.player]
    if not (ps.barrel or has_virtual_barrel(state, move.player)):
        return Rejection("not_applicable", "You have no Barrel.")
    pending = state.pending_action
    assert pending is not None
    if pending.barrel_used:
        return Rejection("not_applicable", "You already tried your Barrel against this shot.")

    pending.barrel_used = True
    check = draw_check(state, move.player, lambda c: c.suit == "hearts")
    dodged = check.suit == "hearts"
    state.emit("BARREL_USED", player=move.player, dodged=dodged)
    if dodged:
        _advance_pending(state)
    return None


def _take_damage(state: MatchState, move: Move) -> Rejection | None:
    rej = _responding(state, move, ("respond_to_bang", "respond_to_duel", "respond_to_indians"))
    if rej is not None:
        return rej
    if move.amount != 1:
        return Rejection("invalid_argument", "An attack deals exactly 1 damage.")
    pending = state.pending_action
    assert pending is not None
    if pending.kind == "duel":
        _lose_duel(state, move.player)
        return None
    apply_damage(state, move.player, 1, pending.source_player_id)
    _advance_pending(state)
    return None


# Duel


def _play_duel(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "DUEL")
    if rej is not None:
        return rej
    assert move.card_id is not None and move.target_id is not None
    play_to_discard(state, move.player, move.card_id)
    _open_pending(
        state,
        PendingAction(
            kind="duel",
            source_player_id=move.player,
            target_player_id=move.target_id,
            card_id=move.card_id,
        ),
    )
    return None


def _lose_duel(state: MatchState, loser_id: str) -> None:
    pending = state.pending_action
    assert pending is not None
    winner_id = pending.source_player_id
    _close_pending(state)
    state.emit("DUEL_LOST", player=loser_id, winner=winner_id, bangs=pending.bang_count)
    apply_damage(state, loser_id, 1, winner_id)


def _respond_to_duel(state: MatchState, move: Move) -> Rejection | None:
    rej = _responding(state, move, ("respond_to_duel",))
    if rej is not None:
        return rej
    if move.card_id is None:
        _lose_duel(state, move.player)
        return None
    rej = _owned_card(state, move)
    if rej is not None:
        return rej
    if not counts_as_bang(state, move.player, move.card_id):
        return Rejection("wrong_card_type", "Answer a Duel with a BANG! or take the hit.")

    pending = state.pending_action
    assert pending is not None
    play_to_discard(state, move.player, move.card_id)
    pending.bang_count += 1
    # The last shooter becomes the source; the other duellist must answer.
    pending.source_player_id, pending.target_player_id = move.player, pending.source_player_id
    state.emit("PENDING_ACTION_TARGET", kind="duel", target=pending.target_player_id)
    return None


# Multi-target cards


def _play_gatling(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "GATLING")
    if rej is not None:
        return rej
    _open_multi_target(state, move, "gatling")
    return None


def _play_indians(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "INDIANS")
    if rej is not None:
        return rej
    _open_multi_target(state, move, "indians")
    return None


def _respond_to_indians(state: MatchState, move: Move) -> Rejection | None:
    rej = _responding(state, move, ("respond_to_indians",))
    if rej is not None:
        return rej
    pending = state.pending_action
    assert pending is not None
    if move.card_id is None:
        apply_damage(state, move.player, 1, pending.source_player_id)
        _advance_pending(state)
        return None

    rej = _owned_card(state, move)
    if rej is not None:
        return rej
    if not counts_as_bang(state, move.player, move.card_id):
        return Rejection("wrong_card_type", "Discard a BANG! or take the hit.")
    play_to_discard(state, move.player, move.card_id)
    _advance_pending(state)
    return None


def _play_general_store(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "GENERAL_STORE")
    if rej is not None:
        return rej
    assert move.card_id is not None
    play_to_discard(state, move.player, move.card_id)
    queue = [move.player] + others_in_turn_order(state, move.player)
    revealed = [draw_card(state) for _ in queue]
    state.emit("GENERAL_STORE_REVEALED", player=move.player, cards=list(revealed))
    _open_pending(
        state,
        PendingAction(
            kind="general_store",
            source_player_id=move.player,
            target_player_id=queue[0],
            card_id=move.card_id,
            remaining_targets=queue[1:],
            revealed_cards=revealed,
        ),
    )
    return None


def _respond_to_general_store(state: MatchState, move: Move) -> Rejection | None:
    rej = _responding(state, move, ("respond_to_general_store",))
    if rej is not None:
        return rej
    pending = state.pending_action
    assert pending is not None
    if move.card_id is None or move.card_id not in pending.revealed_cards:
        return Rejection("invalid_argument", "Pick one of the revealed cards.")

    pending.revealed_cards.remove(move.card_id)
    state.players[move.player].hand.append(move.card_id)
    state.emit("GENERAL_STORE_PICK", player=move.player, card_id=move.card_id)
    _advance_pending(state)
    return None


# Brown cards without a response


def _play_beer(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "BEER") or can_drink_beer(state, move.player)
    if rej is not None:
        return rej
    assert move.card_id is not None
    card = state.card(move.card_id)
    play_to_discard(state, move.player, move.card_id)
    heal(state, move.player, card.healing or 1)
    return None


def _play_saloon(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "SALOON")
    if rej is not None:
        return rej
    assert move.card_id is not None
    card = state.card(move.card_id)
    play_to_discard(state, move.player, move.card_id)
    for pid in state.alive_players():
        heal(state, pid, card.healing or 1)
    return None


def _draw_card_play(count: int, card_type: CardType) -> MoveHandler:
    def handler(state: MatchState, move: Move) -> Rejection | None:
        rej = _card_in_hand(state, move, card_type)
        if rej is not None:
            return rej
        assert move.card_id is not None
        play_to_discard(state, move.player, move.card_id)
        draw_cards(state, move.player, count)
        return None

    return handler


def _pick_target_card(state: MatchState, move: Move) -> tuple[str | None, Rejection | None]:
    """The chosen card on the target, or a random one from hand and table."""
    assert move.target_id is not None
    target = state.players[move.target_id]
    pool = target.hand + target.in_play
    if move.target_card_id is not None:
        if move.target_card_id not in pool:
            return None, Rejection("invalid_argument", "That card is not held by the target.")
        return move.target_card_id, None
    return pool[state.rng.randrange(len(pool))], None


def _play_panic(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "PANIC")
    if rej is not None:
        return rej
    picked, rej = _pick_target_card(state, move)
    if rej is not None:
        return rej
    assert move.card_id is not None and move.target_id is not None and picked is not None
    play_to_discard(state, move.player, move.card_id)
    take_any_card(state, move.target_id, picked)
    state.players[move.player].hand.append(picked)
    state.emit("CARD_STOLEN", player=move.player, source=move.target_id)
    return None


def _play_cat_balou(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "CAT_BALOU")
    if rej is not None:
        return rej
    picked, rej = _pick_target_card(state, move)
    if rej is not None:
        return rej
    assert move.card_id is not None and move.target_id is not None and picked is not None
    play_to_discard(state, move.player, move.card_id)
    take_any_card(state, move.target_id, picked)
    discard(state, picked)
    state.emit("CARD_DISCARDED", player=move.target_id, card_id=picked, by=move.player)
    return None


# Blue cards


def _equip(state: MatchState, player_id: str, owner_id: str, card_id: str) -> None:
    card = state.card(card_id)
    owner = state.players[owner_id]
    if card.is_weapon and owner.weapon is not None:
        old = owner.weapon
        remove_from_play(state, owner_id, old)
        discard(state, old)
        state.emit("WEAPON_REPLACED", player=owner_id, old=old, new=card_id)
    take_from_hand(state, player_id, card_id)
    place_in_play(state, owner_id, card)
    state.emit("EQUIPMENT_PLACED", player=player_id, owner=owner_id, card_id=card_id, card_type=card.type)


def _equip_card(state: MatchState, move: Move) -> Rejection | None:
    rej = _on_turn(state, move) or _owned_card(state, move)
    if rej is not None:
        return rej
    assert move.card_id is not None
    if not state.players[move.player].has_drawn:
        return Rejection("must_draw_first", "Draw your cards first.")
    rej = can_equip(state, move.player, move.card_id)
    if rej is not None:
        return rej
    _equip(state, move.player, move.player, move.card_id)
    return None


def _play_dynamite(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "DYNAMITE")
    if rej is not None:
        return rej
    assert move.card_id is not None
    rej = can_equip(state, move.player, move.card_id)
    if rej is not None:
        return rej
    _equip(state, move.player, move.player, move.card_id)
    return None


def _play_jail(state: MatchState, move: Move) -> Rejection | None:
    rej = _card_in_hand(state, move, "JAIL")
    if rej is not None:
        return rej
    assert move.card_id is not None and move.target_id is not None
    _equip(state, move.player, move.target_id, move.card_id)
    return None


def _resolve_dynamite(state: MatchState, move: Move) -> Rejection | None:
    """Manual draw! for a rigged position.

    ``start_turn`` already resolves Dynamite and Jail before the bearer can act,
    so in normal play these two moves are never legal.
    """
    rej = _on_turn(state, move)
    if rej is not None:
        return rej
    ps = state.players[move.player]
    if ps.has_drawn or not ps.dynamite:
        return Rejection("not_applicable", "There is no Dynamite to resolve.")
    resolve_dynamite(state, move.player)
    return None


def _resolve_jail(state: MatchState, move: Move) -> Rejection | None:
    rej = _on_turn(state, move)
    if rej is not None:
        return rej
    ps = state.players[move.player]
    if ps.has_drawn or not ps.in_jail:
        return Rejection("not_applicable", "You are not in Jail.")
    if not resolve_jail(state, move.player):
        state.emit("TURN_SKIPPED", player=move.player)
        end_turn(state)
    return None


# End of turn


def _pass_turn(state: MatchState, move: Move) -> Rejection | None:
    rej = _in_play(state, move)
    if rej is not None:
        return rej
    if move.player != state.current_player:
        return Rejection("not_your_turn", "Not your turn.")
    if state.pending_action is not None:
        return Rejection("pending_action", "Wait until the pending action is resolved.")
    if state.discard_required:
        return Rejection("wrong_stage", "Discard down to your health first.")
    ps = state.players[move.player]
    if not ps.has_drawn:
        return Rejection("must_draw_first", "Draw your cards first.")

    if len(ps.hand) > ps.health:
        state.discard_required = True
        state.emit("DISCARD_REQUIRED", player=move.player, count=len(ps.hand) - ps.health)
        return None
    end_turn(state)
    return None


def _discard_cards(state: MatchState, move: Move) -> Rejection | None:
    rej = _in_play(state, move)
    if rej is not None:
        return rej
    if move.player != state.current_player:
        return Rejection("not_your_turn", "Not your turn.")
    if state.stage != "discard":
        return Rejection("wrong_stage", "You only discard at the end of your turn.")
    ids = move.card_ids
    if not ids or len(set(ids)) != len(ids):
        return Rejection("invalid_argument", "Choose distinct cards to discard.")
    ps = state.players[move.player]
    if any(cid not in ps.hand for cid in ids):
        return Rejection("card_not_owned", "That card is not in your hand.")
    if len(ps.hand) - len(ids) < ps.health:
        return Rejection("invalid_argument", "Discard only down to your health.")

    for cid in ids:
        ps.hand.remove(cid)
        discard(state, cid)
    state.emit("CARDS_DISCARDED", player=move.player, cards=list(ids))
    if len(ps.hand) <= ps.health:
        end_turn(state)
    return None


def _use_ability(state: MatchState, move: Move) -> Rejection | None:
    rej = _in_play(state, move)
    if rej is not None:
        return rej
    ps = state.players[move.player]
    if ps.is_dead or ps.ability != "discard-for-health":
        return Rejection("not_applicable", "Your character has no ability to activate.")
    ids = move.card_ids
    if len(ids) != 2 or len(set(ids)) != 2:
        return Rejection("invalid_argument", "Discard exactly two cards.")
    if any(cid not in ps.hand for cid in ids):
        return Rejection("card_not_owned", "That card is not in your hand.")
    if ps.health >= ps.max_health:
        return Rejection("not_applicable", "You are already at full health.")

    sid_ketchum_heal(state, move.player, ids)
    # Healing mid-discard can leave the hand already within the limit.
    if state.discard_required and move.player == state.current_player and len(ps.hand) <= ps.health:
        end_turn(state)
    return None


MOVES: dict[MoveName, MoveHandler] = {
    "select_character": _select_character,
    "standard_draw": _standard_draw,
    "play_bang": _play_bang,
    "play_missed": _play_missed,
    "use_barrel": _use_barrel,
    "take_damage": _take_damage,
    "play_beer": _play_beer,
    "play_saloon": _play_saloon,
    "play_stagecoach": _draw_card_play(2, "STAGECOACH"),
    "play_wells_fargo": _draw_card_play(3, "WELLS_FARGO"),
    "play_panic": _play_panic,
    "play_cat_balou": _play_cat_balou,
    "play_duel": _play_duel,
    "respond_to_duel": _respond_to_duel,
    "play_gatling": _play_gatling,
    "play_indians": _play_indians,
    "respond_to_indians": _respond_to_indians,
    "play_general_store": _play_general_store,
    "respond_to_general_store": _respond_to_general_store,
    "play_dynamite": _play_dynamite,
    "resolve_dynamite": _resolve_dynamite,
    "play_jail": _play_jail,
    "resolve_jail": _resolve_jail,
    "equip_card": _equip_card,
    "pass_turn": _pass_turn,
    "discard_cards": _discard_cards,
    "use_ability": _use_ability,
}
