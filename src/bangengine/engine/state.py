from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from .types import Card, CardDatabase, Character, Content, RoleName

Event = dict[str, object]

Phase = Literal["character_selection", "play", "ended"]
Stage = Literal[
    "action",
    "discard",
    "respond_to_bang",
    "respond_to_duel",
    "respond_to_indians",
    "respond_to_general_store",
]
PendingKind = Literal["bang", "duel", "indians", "gatling", "general_store"]
Winner = Literal["sheriff", "outlaws", "renegade"]

# Gatling shares the Bang response stage: Missed!, Barrel or damage.
STAGE_FOR_PENDING: dict[PendingKind, Stage] = {
    "bang": "respond_to_bang",
    "gatling": "respond_to_bang",
    "duel": "respond_to_duel",
    "indians": "respond_to_indians",
    "general_store": "respond_to_general_store",
}


@dataclass(frozen=True)
class MatchConfig:
    min_players: int = 4
    max_players: int = 7
    draw_phase_cards: int = 2
    sheriff_health_bonus: int = 1
    dynamite_damage: int = 3
    outlaw_bounty: int = 3
    auto_select_characters: bool = False


@dataclass
class PlayerState:
    id: str
    name: str
    role: RoleName
    character_choices: tuple[Character, ...]
    health: int
    max_health: int
    hand: list[str] = field(default_factory=list)
    in_play: list[str] = field(default_factory=list)
    character: Character | None = None
    has_selected_character: bool = False
    weapon: str | None = None  # card id, also present in in_play
    barrel: bool = False
    mustang: bool = False
    scope: bool = False
    dynamite: bool = False
    in_jail: bool = False
    is_dead: bool = False
    bangs_played_this_turn: int = 0
    has_drawn: bool = False

    @property
    def ability(self) -> str | None:
        return self.character.ability if self.character is not None else None

    @property
    def card_count(self) -> int:
        return len(self.hand) + len(self.in_play)


@dataclass
class PendingAction:
    """A card effect waiting for one or more players to respond."""

    kind: PendingKind
    source_player_id: str
    target_player_id: str
    card_id: str
    remaining_targets: list[str] = field(default_factory=list)
    requires_missed: int = 0
    revealed_cards: list[str] = field(default_factory=list)
    bang_count: int = 0
    barrel_used: bool = False

    @property
    def stage(self) -> Stage:
        return STAGE_FOR_PENDING[self.kind]


@dataclass(frozen=True)
class VictoryResult:
    winner: Winner
    survivors: tuple[str, ...]


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    code: str | None = None


@dataclass
class MatchState:
    content: Content
    config: MatchConfig
    seed: int
    rng: random.Random
    players: dict[str, PlayerState]
    turn_order: list[str]
    sheriff_id: str
    deck: list[str]  # top of the deck is the last element
    discard_pile: list[str] = field(default_factory=list)
    pending_action: PendingAction | None = None
    phase: Phase = "character_selection"
    current_player: str = "0"
    discard_required: bool = False
    turn_number: int = 0
    winner: VictoryResult | None = None
    action_log: list[object] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    @property
    def cards(self) -> CardDatabase:
        return self.content.cards

    @property
    def stage(self) -> Stage:
        if self.pending_action is not None:
            return self.pending_action.stage
        if self.discard_required:
            return "discard"
        return "action"

    def card(self, card_id: str) -> Card:
        return self.content.cards.get(card_id)

    def player(self, player_id: str) -> PlayerState:
        return self.players[player_id]

    def alive_players(self) -> list[str]:
        """Living player ids in turn order."""
        return [pid for pid in self.turn_order if not self.players[pid].is_dead]

    def emit(self, event_type: str, **fields: object) -> Event:
        event: Event = {"type": event_type, **fields}
        self.event_log.append(event)
        return event

    def total_cards(self) -> int:
        """Cards across every zone, including a General Store's revealed pool."""
        revealed = len(self.pending_action.revealed_cards) if self.pending_action else 0
        in_players = sum(p.card_count for p in self.players.values())
        return len(self.deck) + len(self.discard_pile) + in_players + revealed
