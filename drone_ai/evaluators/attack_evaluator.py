"""
Attack Evaluator

Handles drone attacks against enemy drones and enemy ship sections.

Drone attacks start from the target value and layer on trade quality, what
the attacker gives up by attacking (anti-ship role, guardian duty,
interception coverage), growth, retaliation risk and lane impact.
Section attacks are scored from damage landed, thresholds crossed and the
section's shield state.
"""

import logging
from typing import Optional

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate, ActionEvaluator, ActionType, TargetType
from drone_ai.keywords import (
    GUARDIAN, PIERCING, RETALIATE, conditional_keyword_vs_marked, growth_attack_gain,
    retaliate_damage, triggers_on_ship_hull_damage,
)
from drone_ai.models import DamageType, Drone, SectionTarget, ShipStatus
from drone_ai.scoring.hull_integrity import is_lethal, section_transition, win_race_modifiers
from drone_ai.scoring.lane_score import impact_delta
from drone_ai.scoring.target_value import damage_type_term, target_value
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

ANTI_SHIP_MISUSE = "Anti-Ship Misuse"


def _coverage_penalty(attacker: Drone, target: Drone, lane: str, speed: int,
                      context: EvaluationContext) -> float:
    """Penalty for giving up interception of slower enemy ship attackers"""
    p = context.weights.penalties
    threat = 0
    blocked = 0
    for enemy in context.opponent.drones_in(lane):
        if enemy.id == target.id or not enemy.is_ready:
            continue
        stats = context.stats(enemy, lane)
        if stats.speed <= speed:
            blocked += 1
            threat += stats.attack + stats.ship_bonus_damage
    if not blocked:
        return 0
    return min(threat * p.interception_coverage_multiplier, p.interception_coverage_min)


def evaluate_drone_attack(attacker: Drone, target: Drone, context: EvaluationContext,
                          lane: Optional[str] = None) -> Evaluation:
    lane = lane or context.lane_of(attacker.id, context.ai)
    w = context.weights
    abilities = context.abilities_of(attacker)
    a_stats = context.stats(attacker, lane)
    t_stats = context.stats(target, lane)
    ev = Evaluation()

    damage_type = attacker.damage_type
    piercing = PIERCING in a_stats.keywords or damage_type == DamageType.PIERCING
    hunter = conditional_keyword_vs_marked(abilities, PIERCING)
    if hunter is not None and target.is_marked:
        piercing = True
        ev.info(hunter.name, "piercing vs marked target")

    ev.merge(target_value(target, context, damage=a_stats.attack, piercing=piercing,
                          damage_type=damage_type, lane=lane, attacking_player=context.ai))

    if a_stats.drone_class < t_stats.drone_class:
        ev.add("Favorable Trade", w.attack.favorable_trade)

    if a_stats.ship_bonus_damage > 0:
        ev.add(ANTI_SHIP_MISUSE, w.penalties.anti_ship_attacking_drone)

    if triggers_on_ship_hull_damage(abilities):
        ev.add("Ship Damage Trigger Wasted", w.threat_drones.ship_damage_drone_penalty)

    if GUARDIAN in a_stats.keywords:
        ev.add("Guardian Protection Risk", w.penalties.guardian_attack_risk)
    elif lane is not None:
        coverage = _coverage_penalty(attacker, target, lane, a_stats.speed, context)
        if coverage:
            ev.add("Losing Interception Coverage", coverage)

    growth_name, growth = growth_attack_gain(abilities)
    if growth > 0:
        ev.add(growth_name, growth * w.attack.growth_multiplier, f"+{growth} attack")

    lethal = is_lethal(a_stats.attack, target, damage_type, piercing)
    if not lethal:
        retaliate = retaliate_damage(context.abilities_of(target))
        if retaliate is None and RETALIATE in t_stats.keywords:
            retaliate = 0
        if retaliate is not None:
            damage = retaliate or t_stats.attack
            if damage >= attacker.hull + attacker.current_shields:
                ev.add("Retaliate LETHAL", w.penalties.retaliate_lethal, f"{damage} damage")
            else:
                ev.add("Retaliate", damage * w.penalties.retaliate_damage_multiplier, f"{damage} damage")

    if lethal and lane is not None:
        delta = impact_delta(lane, context.ai, context.opponent, context,
                             lambda scratch: scratch.remove_drone(target.id),
                             mutate_opposing=True)
        if delta.delta > 0:
            ev.add("Lane Impact", delta.delta * w.attack.lane_impact_weight)
        if delta.flips_to_even:
            ev.add("Lane Flip", abs(delta.before) * w.attack.lane_flip_bonus)

    return ev


def evaluate_section_attack(attacker: Drone, target: SectionTarget, context: EvaluationContext,
                            lane: Optional[str] = None) -> Evaluation:
    lane = lane or context.lane_of(attacker.id, context.ai)
    w = context.weights
    abilities = context.abilities_of(attacker)
    stats = context.stats(attacker, lane)
    section = target.section
    shields = section.allocated_shields
    ev = Evaluation()

    damage_type = attacker.damage_type
    piercing = PIERCING in stats.keywords or damage_type == DamageType.PIERCING
    attack = stats.attack
    total = attack + stats.ship_bonus_damage

    ev.add("Base Damage", attack * w.cards.ship_attack_multiplier, f"{attack} attack")
    if stats.ship_bonus_damage:
        ev.add("Ship Bonus Damage", stats.ship_bonus_damage * w.cards.ship_attack_multiplier)

    if damage_type == DamageType.ION:
        hull_damage = 0
    elif damage_type == DamageType.KINETIC and shields > 0 and not piercing:
        hull_damage = 0
    elif piercing:
        hull_damage = total
    elif damage_type == DamageType.SHIELD_BREAKER:
        hull_damage = max(0, total - (shields + 1) // 2)
    else:
        hull_damage = max(0, total - shields)

    before, after = section_transition(section, hull_damage, context.ship_status)
    if after != before and after == ShipStatus.CRITICAL:
        ev.add("Threshold", w.threshold_bonus.cross_to_critical, f"{before.value}->critical")
    elif before == ShipStatus.HEALTHY and after == ShipStatus.DAMAGED:
        ev.add("Threshold", w.threshold_bonus.cross_to_damaged, "healthy->damaged")

    if shields == 0:
        ev.add("No Shields", w.attack.no_shields)
    elif total >= shields:
        ev.add("Shield Break", w.attack.shield_break)

    if attack >= w.attack.high_attack_value:
        ev.add("High Attack", w.attack.high_attack)

    if piercing and shields > 0:
        ev.add("Piercing", shields * w.scoring.piercing_shield_multiplier)

    if damage_type in (DamageType.ION, DamageType.KINETIC, DamageType.SHIELD_BREAKER):
        ev.add("Damage Type", damage_type_term(shields, total, damage_type, context), damage_type.value)

    if triggers_on_ship_hull_damage(abilities) and hull_damage > 0:
        ev.add("Ship Damage Trigger", w.attack.ship_damage_trigger)

    _, offense = win_race_modifiers(context)
    if offense != 1.0 and ev.score > 0:
        ev.scale("Win Race", offense)

    return ev


class AttackEvaluator(ActionEvaluator):
    """Scores ATTACK candidates against drones and ship sections"""

    def __init__(self):
        super().__init__("Attack")

    def can_evaluate(self, candidate: ActionCandidate) -> bool:
        return candidate.action_type == ActionType.ATTACK

    def evaluate(self, candidate: ActionCandidate, context: EvaluationContext) -> Evaluation:
        if candidate.target_type == TargetType.SECTION:
            return evaluate_section_attack(candidate.drone, candidate.target, context, candidate.lane)
        return evaluate_drone_attack(candidate.drone, candidate.target, context, candidate.lane)
