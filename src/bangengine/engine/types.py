from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

Suit = Literal["hearts", "diamonds", "clubs", "spades"]
Rank = Literal["A", "2", "3", "4", "5", "6", "7", "8", "9", "10", "J", "Q", "K"]
Category = Literal["instant", "equipment"]

CardType = Literal[
    "BANG",
    "MISSED",
    "BEER",
    "SALOON",
    "STAGECOACH",
    "WELLS_FARGO",
    "PANIC",
    "CAT_BALOU",
    "DUEL",
    "INDIANS",
    "GATLING",
    "GENERAL_STORE",
    "VOLCANIC",
    "SCHOFIELD",
    "REMINGTON",
    "REV_CARABINE",
    "WINCHESTER",
    "BARREL",
    "DYNAMITE",
    "JAIL",
    "MUSTANG",
    "SCOPE",
]

RoleName = Literal["sheriff", "deputy", "outlaw", "renegade"]
Team = Literal["law", "outlaw", "renegade"]

Timing = Literal["passive", "onDraw", "onDamage", "onTurn", "reactive", "onDeath"]

CharacterId = Literal[
    "bart-cassidy",
    "black-jack",
    "calamity-janet",
    "el-gringo",
    "jesse-jones",
    "jourdonnais",
    "kit-carlson",
    "lucky-duke",
    "paul-regret",
    "pedro-ramirez",
    "rose-doolan",
    "sid-ketchum",
    "slab-the-killer",
    "suzy-lafayette",
    "vulture-sam",
    "willy-the-kid",
]

RED_SUITS: frozenset[str] = frozenset({"hearts", "diamonds"})


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    type: CardType
    suit: Suit
    rank: Rank
    category: Category
    description: str
    range: int | None = None
    healing: int | None = None
    requires_target: bool = False
    is_weapon: bool = False
    is_equipment: bool = False

    @property
    def is_red(self) -> bool:
        return self.suit in RED_SUITS


@dataclass(frozen=True)
class Character:
    id: CharacterId
    name: str
    health: int
    ability: str
    timing: Timing
    description: str


@dataclass(frozen=True)
class RoleInfo:
    role: RoleName
    team: Team
    goal: str
    reveal_on_death: bool


@dataclass(frozen=True)
class CardDatabase:
    """Immutable card catalogue; the single owner of Card values."""

    cards: dict[str, Card]

    def get(self, card_id: str) -> Card:
        return self.cards[card_id]

    def find(self, card_id: str) -> Card | None:
        return self.cards.get(card_id)

    def all_ids(self) -> Sequence[str]:
        return list(self.cards.keys())


@dataclass(frozen=True)
class CharacterRoster:
    characters: dict[str, Character]

    def get(self, character_id: str) -> Character:
        return self.characters[character_id]

    def all(self) -> list[Character]:
        return list(self.characters.values())


@dataclass(frozen=True)
class RoleTable:
    roles: dict[RoleName, RoleInfo]
    distribution: dict[int, tuple[RoleName, ...]]

    def for_player_count(self, count: int) -> tuple[RoleName, ...] | None:
        return self.distribution.get(count)


@dataclass(frozen=True)
class Content:
    """Everything static a match needs."""

    cards: CardDatabase
    characters: CharacterRoster
    roles: RoleTable
