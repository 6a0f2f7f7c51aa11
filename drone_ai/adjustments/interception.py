"""
Interception Adjustment

Attacking exhausts a drone, so a drone that attacks can no longer intercept
this round. Intercepting does not exhaust, so one interceptor can block
several attackers.

Two passes over the scored candidates:
1. Defensive penalties for attacks by drones that keep enemy threats in
   check, plus interception risk / unchecked threat terms on section
   attacks.
2. Removal bonuses for attacks and single-target cards that kill an enemy
   interceptor. These read the section attack scores settled in pass 1, so
   pass 1 must finish first.
"""

import logging
from typing import Dict, List

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate, ActionType, TargetType
from drone_ai.models import LANES, DamageType, Drone, ShipStatus
from drone_ai.scoring.hull_integrity import is_lethal, win_race_modifiers
from drone_ai.scoring.interception_analysis import (
    LaneInterception, analyze_lane_interception, threats_kept_in_check,
)

logger = logging.getLogger(__name__)


def _defensive_penalty(candidate: ActionCandidate, context: EvaluationContext):
    check = threats_kept_in_check(candidate.drone, candidate.lane, context)
    if not check.threats:
        return

    names = ", ".join(f"{t.name} ({t.ship_damage} ship dmg)" for t in check.threats)
    candidate.add_reasoning("Threats In Check", 0, f"{len(check.threats)} [{names}]")
    candidate.add_reasoning("AI Damage State", 0, f"{check.damage_state} (urgency {check.urgency:g}x)")

    urgency_w = context.weights.defense_urgency
    penalty = check.total_threat_damage * urgency_w.base_damage_penalty * check.urgency
    if not check.would_cross_threshold and check.section_status != ShipStatus.CRITICAL:
        penalty *= urgency_w.soft_threat_factor
        candidate.add_reasoning("No Threshold Cross", 0, f"section stays {check.section_status.value}")
    elif check.would_cross_threshold:
        thresholds = context.weights.threshold_bonus
        extra = (thresholds.cross_to_damaged if check.section_status == ShipStatus.HEALTHY
                 else thresholds.cross_to_critical)
        penalty -= extra
        candidate.add_reasoning("Would Cross Threshold", 0, f"{check.section_status.value} -> worse")

    defense, _ = win_race_modifiers(context)
    if defense != 1.0:
        penalty *= defense
        candidate.add_reasoning("Win Race (Defense)", 0, f"x{defense:g}")

    if penalty:
        candidate.add_reasoning("Defense Penalty", penalty,
                                f"{check.total_threat_damage} dmg x {check.urgency:g}x urgency")


def _section_attack_terms(candidate: ActionCandidate, analysis: LaneInterception, context: EvaluationContext):
    attacker_id = candidate.drone.id
    if attacker_id in analysis.ai_slow_attackers:
        candidate.add_reasoning("Interception Risk", context.weights.penalties.interception_risk)
    if attacker_id in analysis.ai_unchecked_threats:
        candidate.add_reasoning("Unchecked Threat", context.weights.interception.unchecked_threat_bonus)


def best_unblocked_value(lane: str, analysis: LaneInterception, candidates: List[ActionCandidate],
                         context: EvaluationContext) -> float:
    """Best single section attack in `lane` held back by interception, risk penalty removed"""
    risk = context.weights.penalties.interception_risk
    best = 0.0
    for candidate in candidates:
        if (candidate.action_type == ActionType.ATTACK
                and candidate.target_type == TargetType.SECTION
                and candidate.lane == lane
                and candidate.drone.id in analysis.ai_slow_attackers):
            best = max(best, candidate.score - risk)
    return best


def _removal_bonus(candidate: ActionCandidate, lane: str, analysis: LaneInterception,
                   candidates: List[ActionCandidate], context: EvaluationContext):
    if candidate.action_type == ActionType.ATTACK:
        stats = context.stats(candidate.drone, lane)
        damage_type = candidate.drone.damage_type
        piercing = damage_type == DamageType.PIERCING
        if not is_lethal(stats.attack, candidate.target, damage_type, piercing):
            return
        value = best_unblocked_value(lane, analysis, candidates, context)
        if value > 0:
            candidate.add_reasoning("Interceptor Removal", value)
        return

    effect = candidate.card.effect
    if effect.type == "DESTROY" and effect.scope == "SINGLE":
        tag = "Interceptor Removal (Destroy)"
    elif effect.type == "DAMAGE" and effect.scope == "SINGLE":
        if not is_lethal(effect.value, candidate.target, effect.damage_type, effect.is_piercing):
            return
        tag = "Interceptor Removal (Lethal Damage)"
    else:
        return
    value = best_unblocked_value(lane, analysis, candidates, context)
    if value > 0:
        premium = context.weights.interception.interceptor_removal_card_premium
        candidate.add_reasoning(tag, round(value * premium))


def apply_interception_adjustments(candidates: List[ActionCandidate],
                                   context: EvaluationContext) -> List[ActionCandidate]:
    analyses: Dict[str, LaneInterception] = {lane: analyze_lane_interception(lane, context) for lane in LANES}

    # pass 1: defensive penalties and section attack risk
    for candidate in candidates:
        if candidate.action_type != ActionType.ATTACK or candidate.is_invalid:
            continue
        analysis = analyses[candidate.lane]
        if candidate.drone.id in analysis.ai_defensive_interceptors:
            _defensive_penalty(candidate, context)
        if candidate.target_type == TargetType.SECTION:
            _section_attack_terms(candidate, analysis, context)

    # pass 2: bonuses for removing enemy interceptors
    for candidate in candidates:
        if candidate.is_invalid or not isinstance(candidate.target, Drone):
            continue
        if candidate.action_type == ActionType.ATTACK:
            lane = candidate.lane
        elif candidate.action_type == ActionType.PLAY_CARD:
            lane = context.lane_of(candidate.target.id, context.opponent)
        else:
            continue
        if lane is None or candidate.target.id not in analyses[lane].enemy_interceptors:
            continue
        _removal_bonus(candidate, lane, analyses[lane], candidates, context)

    return candidates
