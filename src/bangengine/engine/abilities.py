"""Character abilities.

Triggered abilities are dispatched through ``ABILITY_HANDLERS``, a table keyed
by every character id. Passive abilities are plain predicates read by the
rule checks that care about them (range, Bang budget, Barrel, Missed!).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Callable, Literal

from .deck import discard, draw_card, draw_cards
from .state import MatchState
from .types import CharacterId

AbilityEvent = Literal["on_draw_phase", "on_damage", "on_death", "on_hand_empty"]


@dataclass(frozen=True)
class DrawHint:
    """Tells the draw move to replace the standard two-card draw."""

    use_special_draw: bool = False
    can_draw_from_player: bool = False
    can_draw_from_discard: bool = False


Payload = Mapping[str, object]
Handler = Callable[[MatchState, str, Payload], DrawHint | None]


def _draw_on_damage(state: MatchState, player_id: str, payload: Payload) -> None:
    amount = payload.get("amount", 0)
    if isinstance(amount, int) and amount > 0:
        draw_cards(state, player_id, amount)


def _draw_from_attacker(state: MatchState, player_id: str, payload: Payload) -> None:
    attacker_id = payload.get("attacker_id")
    if not isinstance(attacker_id, str) or attacker_id == player_id:
        return
    attacker = state.players[attacker_id]
    if not attacker.hand:
        return
    card_id = attacker.hand.pop(state.rng.randrange(len(attacker.hand)))
    state.players[player_id].hand.append(card_id)
    state.emit("CARD_STOLEN", player=player_id, source=attacker_id, ability="draw-from-attacker")


def _special_draw(state: MatchState, player_id: str, payload: Payload) -> DrawHint:
    return DrawHint(use_special_draw=True)


def _draw_from_player_hint(state: MatchState, player_id: str, payload: Payload) -> DrawHint:
    return DrawHint(can_draw_from_player=True)


def _draw_from_discard_hint(state: MatchState, player_id: str, payload: Payload) -> DrawHint:
    return DrawHint(can_draw_from_discard=True)


def _draw_when_empty(state: MatchState, player_id: str, payload: Payload) -> None:
    if len(state.players[player_id].hand) == 0:
        draw_cards(state, player_id, 1)


def _take_dead_cards(state: MatchState, player_id: str, payload: Payload) -> None:
    dead_id = payload.get("dead_player_id")
    if not isinstance(dead_id, str) or dead_id == player_id:
        return
    dead = state.players[dead_id]
    taken = dead.hand + dead.in_play
    state.players[player_id].hand.extend(taken)
    dead.hand = []
    dead.in_play = []
    if taken:
        state.emit("CARDS_INHERITED", player=player_id, source=dead_id, count=len(taken))


ABILITY_HANDLERS: dict[CharacterId, dict[AbilityEvent, Handler]] = {
    "bart-cassidy": {"on_damage": _draw_on_damage},
    "black-jack": {"on_draw_phase": _special_draw},
    "calamity-janet": {},
    "el-gringo": {"on_damage": _draw_from_attacker},
    "jesse-jones": {"on_draw_phase": _draw_from_player_hint},
    "jourdonnais": {},
    "kit-carlson": {"on_draw_phase": _special_draw},
    "lucky-duke": {},
    "paul-regret": {},
    "pedro-ramirez": {"on_draw_phase": _draw_from_discard_hint},
    "rose-doolan": {},
    "sid-ketchum": {},
    "slab-the-killer": {},
    "suzy-lafayette": {"on_hand_empty": _draw_when_empty},
    "vulture-sam": {"on_death": _take_dead_cards},
    "willy-the-kid": {},
}


def trigger(
    state: MatchState,
    player_id: str,
    event: AbilityEvent,
    payload: Payload | None = None,
) -> DrawHint | None:
    ps = state.players[player_id]
    if ps.character is None or ps.is_dead:
        return None
    handler = ABILITY_HANDLERS[ps.character.id].get(event)
    if handler is None:
        return None
    return handler(state, player_id, payload or {})


# Passive abilities


def has_unlimited_bangs(state: MatchState, player_id: str) -> bool:
    ps = state.players[player_id]
    if ps.ability == "unlimited-bangs":
        return True
    return ps.weapon is not None and state.card(ps.weapon).type == "VOLCANIC"


def requires_double_missed(state: MatchState, attacker_id: str) -> bool:
    return state.players[attacker_id].ability == "double-missed-required"


def can_swap_bang_missed(state: MatchState, player_id: str) -> bool:
    return state.players[player_id].ability == "bang-missed-swap"


def has_virtual_barrel(state: MatchState, player_id: str) -> bool:
    return state.players[player_id].ability == "virtual-barrel"


def counts_as_bang(state: MatchState, player_id: str, card_id: str) -> bool:
    ctype = state.card(card_id).type
    return ctype == "BANG" or (ctype == "MISSED" and can_swap_bang_missed(state, player_id))


def counts_as_missed(state: MatchState, player_id: str, card_id: str) -> bool:
    ctype = state.card(card_id).type
    return ctype == "MISSED" or (ctype == "BANG" and can_swap_bang_missed(state, player_id))


# Draw-phase procedures selected by the DrawHint


def black_jack_draw(state: MatchState, player_id: str) -> None:
    ps = state.players[player_id]
    ps.hand.append(draw_card(state))
    second = draw_card(state)
    ps.hand.append(second)
    card = state.card(second)
    state.emit("CARD_REVEALED", player=player_id, card_id=second, suit=card.suit)
    if card.is_red:
        ps.hand.append(draw_card(state))
    state.emit("CARDS_DRAWN", player=player_id, count=3 if card.is_red else 2)


def kit_carlson_options(state: MatchState) -> list[str]:
    """The top three cards of the deck, top first."""
    return list(reversed(state.deck[-3:]))


def kit_carlson_draw(state: MatchState, player_id: str, chosen: Sequence[str] | None = None) -> None:
    """Look at the top three, keep two, put the third back on top."""
    options = kit_carlson_options(state)
    picks = list(chosen) if chosen is not None else options[:2]
    for card_id in options:
        state.deck.remove(card_id)
    ps = state.players[player_id]
    ps.hand.extend(picks)
    for card_id in reversed(options):
        if card_id not in picks:
            state.deck.append(card_id)
    state.emit("CARDS_DRAWN", player=player_id, count=len(picks))


def jesse_jones_draw(state: MatchState, player_id: str, target_id: str) -> None:
    ps = state.players[player_id]
    target = state.players[target_id]
    if target.hand:
        ps.hand.append(target.hand.pop(state.rng.randrange(len(target.hand))))
        state.emit("CARD_STOLEN", player=player_id, source=target_id, ability="draw-from-player")
    else:
        ps.hand.append(draw_card(state))
    ps.hand.append(draw_card(state))
    state.emit("CARDS_DRAWN", player=player_id, count=2)


def pedro_ramirez_draw(state: MatchState, player_id: str) -> None:
    ps = state.players[player_id]
    if state.discard_pile:
        ps.hand.append(state.discard_pile.pop())
    else:
        ps.hand.append(draw_card(state))
    ps.hand.append(draw_card(state))
    state.emit("CARDS_DRAWN", player=player_id, count=2)


def sid_ketchum_heal(state: MatchState, player_id: str, card_ids: Sequence[str]) -> None:
    ps = state.players[player_id]
    for card_id in card_ids:
        ps.hand.remove(card_id)
        discard(state, card_id)
    ps.health = min(ps.max_health, ps.health + 1)
    state.emit("PLAYER_HEALED", player=player_id, amount=1, ability="discard-for-health")
