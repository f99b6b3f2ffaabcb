"""
Pytest fixtures for engine tests.

``make_table`` builds a match past character selection and then rigs it into a
known position: fixed roles, chosen characters (Sid Ketchum by default, whose
ability only fires when asked), empty hands and the sheriff to act.
"""

from __future__ import annotations

from typing import Callable, Mapping

import pytest

from bangengine.engine.match import apply, new_match
from bangengine.engine.resolution import place_in_play, remove_from_play
from bangengine.engine.state import MatchConfig, MatchState, PlayerState, StepResult
from bangengine.engine.types import Content, RoleName
from bangengine.paths import get_paths
from bangengine.services.content import ContentService

DEFAULT_ROLES: dict[int, tuple[RoleName, ...]] = {
    4: ("sheriff", "outlaw", "outlaw", "renegade"),
    5: ("sheriff", "outlaw", "outlaw", "renegade", "deputy"),
    6: ("sheriff", "outlaw", "outlaw", "renegade", "deputy", "outlaw"),
    7: ("sheriff", "outlaw", "outlaw", "renegade", "deputy", "outlaw", "deputy"),
}


class Table:
    def __init__(self, state: MatchState) -> None:
        self.state = state

    def p(self, player_id: str) -> PlayerState:
        return self.state.players[player_id]

    def _detach(self, card_id: str) -> None:
        s = self.state
        if card_id in s.deck:
            s.deck.remove(card_id)
            return
        if card_id in s.discard_pile:
            s.discard_pile.remove(card_id)
            return
        for pid, ps in s.players.items():
            if card_id in ps.hand:
                ps.hand.remove(card_id)
                return
            if card_id in ps.in_play:
                remove_from_play(s, pid, card_id)
                return
        raise AssertionError(f"{card_id} is nowhere on the table")

    def give(self, player_id: str, *card_ids: str) -> None:
        for cid in card_ids:
            self._detach(cid)
            self.p(player_id).hand.append(cid)

    def equip(self, player_id: str, card_id: str) -> None:
        self._detach(card_id)
        place_in_play(self.state, player_id, self.state.card(card_id))

    def stack(self, *card_ids: str) -> None:
        """Put cards on top of the deck; the first one listed is drawn first."""
        for cid in card_ids:
            self._detach(cid)
        for cid in reversed(card_ids):
            self.state.deck.append(cid)

    def to_discard(self, card_id: str) -> None:
        self._detach(card_id)
        self.state.discard_pile.append(card_id)

    def ready(self, player_id: str = "0") -> None:
        self.p(player_id).has_drawn = True

    def kill(self, player_id: str) -> None:
        ps = self.p(player_id)
        for cid in list(ps.hand) + list(ps.in_play):
            self.to_discard(cid)
        ps.is_dead = True
        ps.health = 0

    def act(self, player_id: str, move_name: str, **args: object) -> StepResult:
        return apply(self.state, player_id, move_name, **args)


@pytest.fixture(scope="session")
def content() -> Content:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir).load_content()


@pytest.fixture
def make_table(content: Content) -> Callable[..., Table]:
    def make(
        players: int = 4,
        characters: Mapping[str, str] | None = None,
        roles: Mapping[str, RoleName] | None = None,
        seed: int = 1,
    ) -> Table:
        state = new_match(content, players, seed, config=MatchConfig(auto_select_characters=True))
        chars = characters or {}
        overrides = roles or {}
        for seat, pid in enumerate(state.turn_order):
            ps = state.players[pid]
            ps.role = overrides.get(pid, DEFAULT_ROLES[players][seat])
            ps.character = content.characters.get(chars.get(pid, "sid-ketchum"))
            bonus = 1 if ps.role == "sheriff" else 0
            ps.max_health = ps.health = ps.character.health + bonus
            state.discard_pile.extend(ps.hand)
            ps.hand = []
        return Table(state)

    return make


@pytest.fixture
def table(make_table: Callable[..., Table]) -> Table:
    return make_table()
