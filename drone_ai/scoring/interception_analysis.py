"""
Interception Analysis

Who can intercept whom in a lane. Only ready drones take part and speeds are
effective speeds.

Intercepting does not exhaust a drone, attacking does. A drone that attacks
gives up its ability to intercept for the rest of the round, which is what
threats_kept_in_check() prices.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from drone_ai.context import EvaluationContext
from drone_ai.models import Drone, ShipStatus
from drone_ai.scoring.hull_integrity import (
    defense_urgency, describe_damage_state, would_cross_threshold,
)
from drone_ai.scoring.lane_score import drone_impact

logger = logging.getLogger(__name__)


@dataclass
class LaneInterception:
    lane: str
    ai_slow_attackers: List[str] = field(default_factory=list)
    ai_unchecked_threats: List[str] = field(default_factory=list)
    ai_defensive_interceptors: List[str] = field(default_factory=list)
    enemy_interceptors: List[str] = field(default_factory=list)


@dataclass
class Threat:
    name: str
    ship_damage: int
    impact: float
    speed: int


@dataclass
class ThreatsInCheck:
    threats: List[Threat] = field(default_factory=list)
    total_threat_damage: int = 0
    total_impact: float = 0.0
    projected_hull: Optional[int] = None
    would_cross_threshold: bool = False
    section_status: ShipStatus = ShipStatus.HEALTHY
    urgency: float = 1.0
    damage_state: str = ""


def analyze_lane_interception(lane: str, context: EvaluationContext) -> LaneInterception:
    ai_ready = [d for d in context.ai.drones_in(lane) if d.is_ready]
    enemy_ready = [d for d in context.opponent.drones_in(lane) if d.is_ready]
    ai_speeds = {d.id: context.stats(d, lane).speed for d in ai_ready}
    enemy_speeds = {d.id: context.stats(d, lane).speed for d in enemy_ready}
    ai_max = max(ai_speeds.values(), default=0)
    enemy_max = max(enemy_speeds.values(), default=0)

    result = LaneInterception(lane)
    for drone in ai_ready:
        speed = ai_speeds[drone.id]
        if enemy_max > 0 and speed <= enemy_max:
            result.ai_slow_attackers.append(drone.id)
        if speed > enemy_max:
            result.ai_unchecked_threats.append(drone.id)
        if any(speed >= s for s in enemy_speeds.values()):
            result.ai_defensive_interceptors.append(drone.id)

    if ai_max > 0:
        result.enemy_interceptors = [d.id for d in enemy_ready if enemy_speeds[d.id] >= ai_max]
    return result


def threats_kept_in_check(drone: Drone, lane: str, context: EvaluationContext) -> ThreatsInCheck:
    """Enemy ship threats this AI drone currently blocks by being able to intercept"""
    speed = context.stats(drone, lane).speed
    result = ThreatsInCheck(
        urgency=defense_urgency(context.ai, context),
        damage_state=describe_damage_state(context.ai),
    )

    for enemy in context.opponent.drones_in(lane):
        if not enemy.is_ready:
            continue
        stats = context.stats(enemy, lane)
        if speed < stats.speed:
            continue
        ship_damage = stats.attack + stats.ship_bonus_damage
        impact = drone_impact(enemy, lane, context)
        result.threats.append(Threat(enemy.name, ship_damage, impact, stats.speed))
        result.total_threat_damage += ship_damage
        result.total_impact += impact

    section = context.section_in_lane(context.ai, lane)
    if section is None:
        return result

    hull_damage = max(0, result.total_threat_damage - section.allocated_shields)
    result.projected_hull = section.hull - hull_damage
    result.section_status = context.ship_status(section)
    result.would_cross_threshold = would_cross_threshold(section, hull_damage, context.ship_status)
    return result
