from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Sequence

from .abilities import counts_as_missed, has_virtual_barrel, kit_carlson_options
from .actions import Move, MoveName
from .deck import build_deck, draw_cards, shuffle
from .distance import players_in_range
from .errors import IllegalStateError, Rejection
from .moves import MOVE_FOR_CARD, MOVES
from .state import MatchConfig, MatchState, PlayerState, StepResult
from .turns import after_move, assign_character, begin_play, validate_match
from .types import Content, RoleName
from .validation import effective_type, is_card_playable, playable_cards, valid_targets
from .victory import check_victory

logger = logging.getLogger(__name__)

__all__ = [
    "apply",
    "check_victory",
    "is_card_playable",
    "kit_carlson_options",
    "legal_move_names",
    "new_match",
    "playable_cards",
    "players_in_range",
    "replay",
    "step",
    "valid_targets",
]


def _rejected(rejection: Rejection) -> StepResult:
    return StepResult(ok=False, events=[], error=rejection.message, code=rejection.code)


def step(state: MatchState, move: Move) -> StepResult:
    """Apply a single move to the match state.

    This mutates `state` in-place but remains deterministic for a given
    (seed, player count, move sequence). A rejected move changes nothing.
    """
    if state.phase == "ended":
        return _rejected(Rejection("match_over", "Match already ended."))

    # Log first so replay has a full record of attempted moves
    state.action_log.append(move)

    handler = MOVES.get(move.name)
    if handler is None:
        return _rejected(Rejection("unknown_move", f"Unknown move {move.name}."))

    mark = len(state.event_log)
    rejection = handler(state, move)
    if rejection is not None:
        logger.debug("Rejected %s by %s: %s", move.name, move.player, rejection.code)
        return _rejected(rejection)

    after_move(state)
    logger.debug("Applied %s by %s", move.name, move.player)
    return StepResult(ok=True, events=state.event_log[mark:])


def apply(state: MatchState, player_id: str, move_name: str, **args: object) -> StepResult:
    """Keyword front door to ``step``: ``apply(state, "0", "play_bang", card_id=..., target_id="1")``."""
    if "card_ids" in args:
        args["card_ids"] = tuple(args["card_ids"])  # type: ignore[arg-type]
    try:
        move = Move(player=player_id, name=move_name, **args)  # type: ignore[arg-type]
    except TypeError as e:
        return _rejected(Rejection("invalid_argument", str(e)))
    return step(state, move)


def _seat_roles(rng: random.Random, roles: Sequence[RoleName]) -> list[RoleName]:
    # Sheriff sits at seat 0; everyone else is dealt at random.
    others = [r for r in roles if r != "sheriff"]
    rng.shuffle(others)
    return ["sheriff", *others]


def new_match(
    content: Content,
    player_count: int,
    seed: int,
    config: MatchConfig | None = None,
    names: Sequence[str] | None = None,
) -> MatchState:
    cfg = config or MatchConfig()
    if not cfg.min_players <= player_count <= cfg.max_players:
        raise IllegalStateError(f"Bang! needs {cfg.min_players}-{cfg.max_players} players, got {player_count}.")
    roles = content.roles.for_player_count(player_count)
    if roles is None or list(roles).count("sheriff") != 1:
        raise IllegalStateError(f"No valid role table for {player_count} players.")
    if names is not None and len(names) != player_count:
        raise ValueError("Provide one name per player.")

    rng = random.Random(seed)
    deck = build_deck(content.cards)
    shuffle(rng, deck)
    seat_roles = _seat_roles(rng, roles)
    roster = content.characters.all()
    rng.shuffle(roster)
    if len(roster) < 2 * player_count:
        raise IllegalStateError("Not enough characters to offer two to every player.")

    players: dict[str, PlayerState] = {}
    for seat in range(player_count):
        pid = str(seat)
        choices = tuple(roster[2 * seat : 2 * seat + 2])
        bonus = cfg.sheriff_health_bonus if seat_roles[seat] == "sheriff" else 0
        health = choices[0].health + bonus
        players[pid] = PlayerState(
            id=pid,
            name=names[seat] if names is not None else f"Player {seat + 1}",
            role=seat_roles[seat],
            character_choices=choices,
            health=health,
            max_health=health,
        )

    state = MatchState(
        content=content,
        config=cfg,
        seed=seed,
        rng=rng,
        players=players,
        turn_order=list(players),
        sheriff_id="0",
        deck=deck,
        current_player="0",
    )
    # Provisional hands, reconciled once characters are chosen
    for pid, ps in players.items():
        draw_cards(state, pid, ps.health)
    state.emit("MATCH_STARTED", players=player_count, seed=seed, sheriff=state.sheriff_id)

    if cfg.auto_select_characters:
        for pid, ps in players.items():
            assign_character(state, pid, ps.character_choices[0])
        begin_play(state)

    validate_match(state)
    logger.debug("New %d-player match, seed %d", player_count, seed)
    return state


def replay(
    content: Content,
    player_count: int,
    seed: int,
    actions: Iterable[Move],
    config: MatchConfig | None = None,
) -> MatchState:
    state = new_match(content=content, player_count=player_count, seed=seed, config=config)
    for a in actions:
        step(state, a)
        if state.phase == "ended":
            break
    return state


def legal_move_names(state: MatchState, player_id: str) -> list[MoveName]:
    """Moves that could be accepted from ``player_id`` with suitable arguments."""
    ps = state.players[player_id]
    if state.phase == "ended" or ps.is_dead:
        return []
    if state.phase == "character_selection":
        return [] if ps.has_selected_character else ["select_character"]

    names: list[MoveName] = []
    pending = state.pending_action
    if pending is not None and pending.target_player_id == player_id:
        if pending.stage == "respond_to_bang":
            if any(counts_as_missed(state, player_id, c) for c in ps.hand):
                names.append("play_missed")
            if (ps.barrel or has_virtual_barrel(state, player_id)) and not pending.barrel_used:
                names.append("use_barrel")
            names.append("take_damage")
        elif pending.stage == "respond_to_duel":
            names += ["respond_to_duel", "take_damage"]
        elif pending.stage == "respond_to_indians":
            names += ["respond_to_indians", "take_damage"]
        else:
            names.append("respond_to_general_store")
    elif state.current_player == player_id and pending is None:
        if state.discard_required:
            names.append("discard_cards")
        elif not ps.has_drawn:
            if ps.dynamite:
                names.append("resolve_dynamite")
            if ps.in_jail:
                names.append("resolve_jail")
            names.append("standard_draw")
        else:
            for card_id in playable_cards(state, player_id):
                move = MOVE_FOR_CARD.get(effective_type(state, player_id, card_id))
                if move is not None and move not in names:
                    names.append(move)
            names.append("pass_turn")

    if ps.ability == "discard-for-health" and len(ps.hand) >= 2 and ps.health < ps.max_health:
        names.append("use_ability")
    return names
