from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from bangengine.engine.types import (
    Card,
    CardDatabase,
    Character,
    CharacterRoster,
    Content,
    RoleInfo,
    RoleName,
    RoleTable,
)


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def _load_schema(path: Path) -> object:
    return _load_json(path)


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


def _optional_int(obj: Mapping[str, object], key: str) -> int | None:
    v = obj.get(key)
    if v is None:
        return None
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> dict[str, object]:
        path = self._data_dir / f"{name}.json"
        schema = _load_schema(self._schema_dir / f"{name}.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_cards_db(self) -> CardDatabase:
        """One Card per deck entry, ids ``card-1`` .. ``card-80`` in catalogue order."""
        raw = self._load_validated("cards")
        types = raw.get("card_types")
        deck = raw.get("deck")
        if not isinstance(types, dict) or not isinstance(deck, list):
            raise ContentError("cards.json needs card_types and deck")

        cards: dict[str, Card] = {}
        for n, entry in enumerate(deck, start=1):
            if not isinstance(entry, dict):
                continue
            ctype = _require_str(entry, "type")
            meta = types.get(ctype)
            if not isinstance(meta, dict):
                raise ContentError(f"Deck entry {n} uses undefined card type {ctype}")
            card = Card(
                id=f"card-{n}",
                name=_require_str(meta, "name"),
                type=ctype,  # type: ignore[arg-type]
                suit=_require_str(entry, "suit"),  # type: ignore[arg-type]
                rank=_require_str(entry, "rank"),  # type: ignore[arg-type]
                category=_require_str(meta, "category"),  # type: ignore[arg-type]
                description=_require_str(meta, "description"),
                range=_optional_int(meta, "range"),
                healing=_optional_int(meta, "healing"),
                requires_target=bool(meta.get("requires_target", False)),
                is_weapon=bool(meta.get("is_weapon", False)),
                is_equipment=bool(meta.get("is_equipment", False)),
            )
            cards[card.id] = card
        return CardDatabase(cards=cards)

    def load_characters(self) -> CharacterRoster:
        raw = self._load_validated("characters")
        items = raw.get("characters")
        if not isinstance(items, list):
            raise ContentError("characters.json.characters must be a list")
        out: dict[str, Character] = {}
        for item in items:
            if not isinstance(item, dict):
                continue
            ch = Character(
                id=_require_str(item, "id"),  # type: ignore[arg-type]
                name=_require_str(item, "name"),
                health=_require_int(item, "health"),
                ability=_require_str(item, "ability"),
                timing=_require_str(item, "timing"),  # type: ignore[arg-type]
                description=_require_str(item, "description"),
            )
            out[ch.id] = ch
        return CharacterRoster(characters=out)

    def load_roles(self) -> RoleTable:
        raw = self._load_validated("roles")
        raw_roles = raw.get("roles")
        raw_dist = raw.get("distribution")
        if not isinstance(raw_roles, dict) or not isinstance(raw_dist, dict):
            raise ContentError("roles.json needs roles and distribution")

        roles: dict[RoleName, RoleInfo] = {}
        for name, info in raw_roles.items():
            if not isinstance(info, dict):
                continue
            roles[name] = RoleInfo(
                role=name,
                team=_require_str(info, "team"),  # type: ignore[arg-type]
                goal=_require_str(info, "goal"),
                reveal_on_death=bool(info.get("reveal_on_death", True)),
            )

        distribution: dict[int, tuple[RoleName, ...]] = {}
        for count, lst in raw_dist.items():
            if not isinstance(lst, list):
                continue
            if len(lst) != int(count):
                raise ContentError(f"Role distribution for {count} players lists {len(lst)} roles")
            distribution[int(count)] = tuple(lst)
        return RoleTable(roles=roles, distribution=distribution)

    def load_content(self) -> Content:
        return Content(
            cards=self.load_cards_db(),
            characters=self.load_characters(),
            roles=self.load_roles(),
        )

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_content()
