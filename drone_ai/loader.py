"""
Definition Loader

Loads drone and card definitions from JSON into a DefinitionTables.
Used by tooling and replays; a host that already holds definitions builds
DefinitionTables directly.

    {
      "drones": [{"name": "Dart", "class": 1, "stats": {"attack": 1, "speed": 6}, ...}],
      "cards": [{"id": "CARD001", "name": "Laser Blast", "cost": 2, "effect": {...}}]
    }

Keys may be camelCase or snake_case.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from drone_ai.definitions import (
    Ability, AbilityEffect, AbilityTargeting, Card, CardEffect, CardTargeting, Condition,
    ConditionalEffect, DefinitionTables, DroneDefinition, StatFilter,
)
from drone_ai.models import DamageType, StatMod

logger = logging.getLogger(__name__)

_CAMEL = re.compile(r'(?<!^)(?=[A-Z])')

# Keys whose snake_case form differs from the field name
_ALIASES = {
    "class": "drone_class",
}


def snake_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow copy of `data` with camelCase keys converted to snake_case"""
    result = {}
    for key, value in data.items():
        key = _ALIASES.get(key, _CAMEL.sub('_', key).lower())
        result[key] = value
    return result


def _stat_mod(raw: Optional[Mapping[str, Any]]) -> Optional[StatMod]:
    if not raw:
        return None
    return StatMod(stat=raw["stat"], value=int(raw.get("value", 0)), type=raw.get("type", "temporary"))


def _ability_effect(raw: Mapping[str, Any]) -> AbilityEffect:
    data = snake_keys(raw)
    sub = data.get("sub_effect")
    return AbilityEffect(
        type=data["type"],
        value=int(data.get("value", 0)),
        keyword=data.get("keyword"),
        mod=_stat_mod(data.get("mod")),
        sub_effect=_ability_effect(sub) if sub else None,
        scope=data.get("scope"),
        condition=data.get("condition"),
    )


def parse_ability(raw: Mapping[str, Any]) -> Ability:
    data = snake_keys(raw)
    effects = data.get("effects")
    if effects is None:
        effects = [data["effect"]] if data.get("effect") else []
    targeting = None
    if data.get("targeting"):
        t = snake_keys(data["targeting"])
        targeting = AbilityTargeting(
            type=t["type"],
            affinity=t.get("affinity", "ANY"),
            location=t.get("location", "ANY_LANE"),
            restrictions=tuple(t.get("restrictions", ())),
        )
    cost = data.get("cost") or {}
    return Ability(
        name=data["name"],
        type=data.get("type", "PASSIVE"),
        trigger=data.get("trigger"),
        effects=tuple(_ability_effect(e) for e in effects),
        targeting=targeting,
        energy_cost=int(cost.get("energy", 0)) if isinstance(cost, Mapping) else int(cost),
    )


def parse_drone_definition(raw: Mapping[str, Any]) -> DroneDefinition:
    data = snake_keys(raw)
    stats = data.get("stats", data)
    max_per_lane = data.get("max_per_lane")
    return DroneDefinition(
        name=data["name"],
        drone_class=int(data.get("drone_class", 0)),
        attack=int(stats.get("attack", 0)),
        hull=int(stats.get("hull", 1)),
        shields=int(stats.get("shields", 0)),
        speed=int(stats.get("speed", 0)),
        limit=int(data.get("limit", 3)),
        abilities=tuple(parse_ability(a) for a in data.get("abilities", ())),
        upgrade_slots=int(data.get("upgrade_slots", 2)),
        max_per_lane=int(max_per_lane) if max_per_lane is not None else None,
        damage_type=DamageType.parse(data.get("damage_type")),
        is_token=bool(data.get("is_token", False)),
        selectable=bool(data.get("selectable", True)),
    )


def _condition(raw: Optional[Mapping[str, Any]]) -> Optional[Condition]:
    if not raw:
        return None
    data = snake_keys(raw)
    return Condition(
        type=data["type"],
        stat=data.get("stat"),
        value=int(data.get("value", 0)),
        threshold=int(data.get("threshold", 0)),
        bonus_damage=int(data.get("bonus_damage", 0)),
        lanes=tuple(data.get("lanes", ())),
    )


def parse_card_effect(raw: Mapping[str, Any]) -> CardEffect:
    data = snake_keys(raw)
    damage_type = data.get("damage_type")
    if damage_type is None and data.get("is_piercing"):
        damage_type = DamageType.PIERCING
    return CardEffect(
        type=data["type"],
        value=int(data.get("value", 0)),
        scope=data.get("scope", "SINGLE"),
        damage_type=DamageType.parse(damage_type) if damage_type else None,
        mod=_stat_mod(data.get("mod")),
        go_again=bool(data.get("go_again", False)),
        properties=tuple(data.get("properties", ())),
        marked_bonus=int(data.get("marked_bonus", 0)),
        splash_damage=int(data.get("splash_damage", 0)),
        condition=_condition(data.get("condition")),
        count=int(data.get("count", 0)),
        search_count=int(data.get("search_count", 0)),
        token_name=data.get("token_name"),
        keyword=data.get("keyword"),
        effects=tuple(parse_card_effect(e) for e in data.get("effects", ())),
    )


def _card_targeting(raw: Optional[Mapping[str, Any]]) -> Optional[CardTargeting]:
    if not raw:
        return None
    data = snake_keys(raw)
    affected = data.get("affected_filter")
    return CardTargeting(
        type=data["type"],
        affinity=data.get("affinity", "ANY"),
        location=data.get("location", "ANY_LANE"),
        custom=tuple(data.get("custom", ())),
        affected_filter=StatFilter(affected["stat"], affected["comparison"], int(affected["value"]))
        if affected else None,
    )


def parse_card(raw: Mapping[str, Any]) -> Card:
    data = snake_keys(raw)
    conditionals = []
    for entry in data.get("conditional_effects", ()):
        c = snake_keys(entry)
        conditionals.append(ConditionalEffect(
            id=str(c.get("id", "")),
            timing=c.get("timing", "POST"),
            condition=_condition(c["condition"]),
            grant=parse_card_effect(c.get("grant") or c["granted_effect"]),
        ))
    return Card(
        id=str(data["id"]),
        name=data["name"],
        cost=int(data.get("cost", 0)),
        effect=parse_card_effect(data["effect"]),
        targeting=_card_targeting(data.get("targeting")),
        conditional_effects=tuple(conditionals),
        momentum_cost=int(data.get("momentum_cost", 0)),
        play_condition=_condition(data.get("play_condition")),
        card_type=data.get("card_type", data.get("type", "Tactic")),
    )


def _parse_all(entries: List[Mapping[str, Any]], parser, kind: str) -> list:
    parsed = []
    for entry in entries:
        try:
            parsed.append(parser(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"⚠️ Skipping malformed {kind} definition {entry.get('name', entry.get('id', '?'))}: {e}")
    return parsed


def load_definitions(source: Union[Mapping[str, Any], str, Path]) -> DefinitionTables:
    """Build DefinitionTables from a dict or JSON file; malformed entries are logged and skipped"""
    if isinstance(source, (str, Path)):
        with open(source, 'r') as f:
            source = json.load(f)
    drones = _parse_all(source.get("drones", []), parse_drone_definition, "drone")
    cards = _parse_all(source.get("cards", []), parse_card, "card")
    logger.info(f"Loaded {len(drones)} drone and {len(cards)} card definitions")
    return DefinitionTables(drones, cards)
