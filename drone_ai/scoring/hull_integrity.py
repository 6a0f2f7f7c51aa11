"""
Hull Integrity Helpers

Ship-wide damage state: how close a player is to losing, how urgently the AI
should defend, and whether a hit pushes a section across a damage threshold.
"""

import logging
import math
from dataclasses import replace
from typing import Optional, Tuple

from drone_ai.context import EvaluationContext, StatusClassifier
from drone_ai.models import BoardReader, DamageType, Drone, ShipSection, ShipStatus

logger = logging.getLogger(__name__)

_SEVERITY = {ShipStatus.HEALTHY: 0, ShipStatus.DAMAGED: 1, ShipStatus.CRITICAL: 2}


def damage_fraction(player: BoardReader) -> float:
    """Fraction of total ship hull lost, 0.0 - 1.0"""
    total = sum(s.max_hull for s in player.ship_sections.values())
    if total <= 0:
        return 0.0
    lost = sum(max(0, s.max_hull - s.hull) for s in player.ship_sections.values())
    return lost / total


def defense_urgency(player: BoardReader, context: EvaluationContext) -> float:
    """Defense multiplier by damage tier (1x healthy ... 8x near loss)"""
    w = context.weights.defense_urgency
    fraction = damage_fraction(player)
    tier = sum(1 for threshold in w.tier_thresholds if fraction >= threshold)
    return w.tier_multipliers[min(tier, len(w.tier_multipliers) - 1)]


def describe_damage_state(player: BoardReader) -> str:
    fraction = damage_fraction(player)
    return f"{fraction * 100:.0f}% hull lost"


def win_race_modifiers(context: EvaluationContext) -> Tuple[float, float]:
    """
    (defense multiplier, offense multiplier) for the AI.

    Ahead on the damage race: defend harder, attack less eagerly. Behind:
    the reverse. Level: both 1.0.
    """
    w = context.weights.win_race
    advantage = damage_fraction(context.opponent) - damage_fraction(context.ai)
    if advantage >= w.advantage_threshold:
        return w.ahead_defense, w.ahead_offense
    if advantage <= -w.advantage_threshold:
        return w.behind_defense, w.behind_offense
    return 1.0, 1.0


def count_damaged_sections(player: BoardReader, classifier: StatusClassifier) -> int:
    return sum(
        1 for s in player.ship_sections.values()
        if classifier(s) in (ShipStatus.DAMAGED, ShipStatus.CRITICAL)
    )


def section_transition(section: ShipSection, hull_damage: int,
                       classifier: StatusClassifier) -> Tuple[ShipStatus, ShipStatus]:
    """Status before and after `hull_damage` lands on the section's hull"""
    before = classifier(section)
    after = classifier(replace(section, hull=section.hull - max(0, hull_damage)))
    return before, after


def would_cross_threshold(section: ShipSection, hull_damage: int,
                          classifier: StatusClassifier) -> bool:
    before, after = section_transition(section, hull_damage, classifier)
    return _SEVERITY[after] > _SEVERITY[before]


def is_lethal(damage: int, drone: Drone, damage_type: Optional[DamageType] = None,
              piercing: bool = False) -> bool:
    """
    Whether `damage` destroys `drone`.

    Ion never destroys. Kinetic only lands on an unshielded drone.
    Shield-breaker strips two shields per point before the rest hits hull.
    """
    damage_type = DamageType.parse(damage_type)
    if damage_type == DamageType.PIERCING:
        piercing = True
    shields = 0 if piercing else drone.current_shields
    if damage_type == DamageType.ION:
        return False
    if damage_type == DamageType.KINETIC:
        return shields == 0 and damage >= drone.hull
    if damage_type == DamageType.SHIELD_BREAKER:
        stripped = min(damage * 2, shields)
        spent = math.ceil(stripped / 2)
        return damage - spent >= drone.hull
    return damage >= drone.hull + shields
