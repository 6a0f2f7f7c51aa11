"""
Static Definitions

Frozen drone, ability and card definitions, and the pre-indexed lookup table
that is handed to the evaluation context. Nothing in here changes after a
game starts; keyword questions are answered by the pure predicates in
drone_ai.keywords over a definition's ability tuple.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from drone_ai.models import DamageType, StatMod

logger = logging.getLogger(__name__)

__all__ = [
    'StatMod', 'AbilityEffect', 'AbilityTargeting', 'Ability', 'DroneDefinition',
    'StatFilter', 'CardTargeting', 'CardEffect', 'Condition', 'ConditionalEffect',
    'Card', 'DefinitionTables',
]


# Ability kinds
PASSIVE = "PASSIVE"
TRIGGERED = "TRIGGERED"
ACTIVE = "ACTIVE"


@dataclass(frozen=True)
class AbilityEffect:
    type: str
    value: int = 0
    keyword: Optional[str] = None
    mod: Optional[StatMod] = None
    sub_effect: Optional['AbilityEffect'] = None
    scope: Optional[str] = None
    condition: Optional[str] = None  # e.g. TARGET_IS_MARKED for CONDITIONAL_KEYWORD


@dataclass(frozen=True)
class AbilityTargeting:
    type: str                      # SELF / DRONE / LANE
    affinity: str = "ANY"          # FRIENDLY / ENEMY / ANY
    location: str = "ANY_LANE"     # SAME_LANE / OTHER_LANES / ANY_LANE
    restrictions: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Ability:
    name: str
    type: str = PASSIVE
    trigger: Optional[str] = None
    effects: Tuple[AbilityEffect, ...] = ()
    targeting: Optional[AbilityTargeting] = None
    energy_cost: int = 0

    @property
    def effect(self) -> Optional[AbilityEffect]:
        """Primary effect, or None for an ability with no effects"""
        return self.effects[0] if self.effects else None

    @property
    def is_active(self) -> bool:
        return self.type == ACTIVE


@dataclass(frozen=True)
class DroneDefinition:
    name: str
    drone_class: int
    attack: int = 0
    hull: int = 1
    shields: int = 0
    speed: int = 0
    limit: int = 3
    abilities: Tuple[Ability, ...] = ()
    upgrade_slots: int = 2
    max_per_lane: Optional[int] = None
    damage_type: DamageType = DamageType.NORMAL
    is_token: bool = False
    selectable: bool = True


@dataclass(frozen=True)
class StatFilter:
    """Filter on one drone stat, e.g. `attack GTE 3`"""
    stat: str
    comparison: str
    value: int

    def matches(self, actual: int) -> bool:
        if self.comparison == "GTE":
            return actual >= self.value
        if self.comparison == "LTE":
            return actual <= self.value
        if self.comparison == "GT":
            return actual > self.value
        if self.comparison == "LT":
            return actual < self.value
        if self.comparison == "EQ":
            return actual == self.value
        logger.warning(f"Unknown stat filter comparison '{self.comparison}'")
        return False


@dataclass(frozen=True)
class CardTargeting:
    type: str                        # DRONE / LANE / SHIP_SECTION / DRONE_CARD / APPLIED_UPGRADE / NONE
    affinity: str = "ANY"            # ENEMY / FRIENDLY / ANY
    location: str = "ANY_LANE"
    custom: Tuple[str, ...] = ()     # EXHAUSTED / READY / MARKED / DAMAGED_HULL / NOT_TOKEN
    affected_filter: Optional[StatFilter] = None


@dataclass(frozen=True)
class Condition:
    """
    A condition attached to a card.

    The same shape serves repeat conditions (OWN_DAMAGED_SECTIONS,
    LANES_CONTROLLED), splash bonuses (FRIENDLY_COUNT_IN_LANE), play conditions
    (LANE_CONTROL_COMPARISON, CONTROL_LANES, CONTROL_LANE_EMPTY) and conditional
    effect triggers (TARGET_STAT_LTE, ON_DESTROY, ...).
    """
    type: str
    stat: Optional[str] = None
    value: int = 0
    threshold: int = 0
    bonus_damage: int = 0
    lanes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CardEffect:
    type: str
    value: int = 0
    scope: str = "SINGLE"            # SINGLE / FILTERED / LANE / ALL
    damage_type: Optional[DamageType] = None
    mod: Optional[StatMod] = None
    go_again: bool = False
    properties: Tuple[str, ...] = ()
    marked_bonus: int = 0
    splash_damage: int = 0
    condition: Optional[Condition] = None
    count: int = 0
    search_count: int = 0
    token_name: Optional[str] = None
    keyword: Optional[str] = None
    effects: Tuple['CardEffect', ...] = ()

    @property
    def is_piercing(self) -> bool:
        return self.damage_type == DamageType.PIERCING


@dataclass(frozen=True)
class ConditionalEffect:
    id: str
    timing: str                      # PRE / POST
    condition: Condition
    grant: CardEffect


@dataclass(frozen=True)
class Card:
    id: str
    name: str
    cost: int
    effect: CardEffect
    targeting: Optional[CardTargeting] = None
    conditional_effects: Tuple[ConditionalEffect, ...] = ()
    momentum_cost: int = 0
    play_condition: Optional[Condition] = None
    card_type: str = "Tactic"

    @property
    def effect_type(self) -> str:
        return self.effect.type


class DefinitionTables:
    """
    Immutable, pre-indexed definition lookup.

    Built once per game from the definition lists and passed into every
    evaluation context; lookups never fall back to a global table.
    """

    def __init__(self, drones: Iterable[DroneDefinition] = (), cards: Iterable[Card] = ()):
        drone_index = {}
        for drone in drones:
            if drone.name in drone_index:
                logger.warning(f"Duplicate drone definition '{drone.name}', keeping the first")
                continue
            drone_index[drone.name] = drone
        card_index = {}
        for card in cards:
            if card.id in card_index:
                logger.warning(f"Duplicate card definition '{card.id}', keeping the first")
                continue
            card_index[card.id] = card
        self._drones: Mapping[str, DroneDefinition] = MappingProxyType(drone_index)
        self._cards: Mapping[str, Card] = MappingProxyType(card_index)

    @property
    def drones(self) -> Mapping[str, DroneDefinition]:
        return self._drones

    @property
    def cards(self) -> Mapping[str, Card]:
        return self._cards

    def drone(self, name: str) -> Optional[DroneDefinition]:
        return self._drones.get(name)

    def card(self, card_id: str) -> Optional[Card]:
        return self._cards.get(card_id)

    def abilities_of(self, name: str) -> Tuple[Ability, ...]:
        definition = self._drones.get(name)
        return definition.abilities if definition else ()

    def __contains__(self, name: str) -> bool:
        return name in self._drones

    def __repr__(self):
        return f"DefinitionTables(drones={len(self._drones)}, cards={len(self._cards)})"
