from __future__ import annotations

import logging
import random
from typing import Callable

from .errors import EmptyResourceError
from .state import MatchState
from .types import Card, CardDatabase

logger = logging.getLogger(__name__)


def build_deck(cards: CardDatabase) -> list[str]:
    """All card ids in catalogue order, unshuffled."""
    return list(cards.all_ids())


def shuffle(rng: random.Random, items: list[str]) -> None:
    rng.shuffle(items)


def reshuffle_discard(state: MatchState) -> None:
    if not state.discard_pile:
        return
    state.deck = list(state.discard_pile) + state.deck
    state.discard_pile = []
    shuffle(state.rng, state.deck)
    logger.warning("Deck exhausted, reshuffled %d discarded cards", len(state.deck))
    state.emit("DECK_RESHUFFLED", size=len(state.deck))


def draw_card(state: MatchState) -> str:
    """Pop the top card, reshuffling the discard pile into the deck if needed."""
    if not state.deck:
        reshuffle_discard(state)
    if not state.deck:
        raise EmptyResourceError("Both the deck and the discard pile are empty.")
    return state.deck.pop()


def draw_cards(state: MatchState, player_id: str, count: int) -> list[str]:
    ps = state.players[player_id]
    drawn: list[str] = []
    for _ in range(max(0, count)):
        card_id = draw_card(state)
        ps.hand.append(card_id)
        drawn.append(card_id)
    if drawn:
        state.emit("CARDS_DRAWN", player=player_id, count=len(drawn))
    return drawn


def discard(state: MatchState, card_id: str) -> None:
    state.discard_pile.append(card_id)


def draw_check(state: MatchState, player_id: str, favorable: Callable[[Card], bool]) -> Card:
    """Resolve a "draw!": flip the top card onto the discard pile.

    Lucky Duke flips two and keeps whichever is favourable for him.
    """
    flips = 2 if state.players[player_id].ability == "double-draw-flip" else 1
    flipped: list[Card] = []
    for _ in range(flips):
        card_id = draw_card(state)
        discard(state, card_id)
        flipped.append(state.card(card_id))
    chosen = next((c for c in flipped if favorable(c)), flipped[0])
    state.emit(
        "DRAW_CHECK",
        player=player_id,
        flipped=[c.id for c in flipped],
        card_id=chosen.id,
        suit=chosen.suit,
        rank=chosen.rank,
    )
    return chosen
