"""
Drone Card Evaluators

Handles READY_DRONE, CREATE_TOKENS (Jammer / Rally Beacon) and
EXHAUST_DRONE.

READY_DRONE and EXHAUST_DRONE flip a drone's exhaustion on a scratch board
and fold the lane-score change into the score.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.cards.common import charge_cost
from drone_ai.keywords import DEFENDER, GUARDIAN, INTERCEPTOR, has_active_ability, has_trigger
from drone_ai.models import LANES, Drone, LaneTarget, adjacent_lanes
from drone_ai.scoring.lane_score import impact_delta
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

RALLY_BEACON = "Rally Beacon"
MOVEMENT_EFFECTS = ("SINGLE_MOVE", "MULTI_MOVE")


def evaluate_ready_drone(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    if not isinstance(target, Drone):
        return ev.invalidate("No valid target")
    lane = context.lane_of(target.id, context.ai)
    if lane is None:
        return ev.invalidate("Target not found on board")

    stats = context.stats(target, lane)
    attack = stats.attack
    enemies = context.opponent.drones_in(lane)

    # offence
    section = context.section_in_lane(context.opponent, lane)
    if section is not None and section.hull > 0:
        guarded = any(context.has_keyword(d, GUARDIAN, lane) for d in enemies)
        if not guarded:
            ship_damage = attack + stats.ship_bonus_damage
            ev.add("Ship Attack", ship_damage * w.ship_attack_multiplier, f"{ship_damage} damage")
    if enemies and attack > 0:
        ev.add("Drone Attacks", attack * w.drone_attack_multiplier * len(enemies), f"{len(enemies)} targets")

    # defence
    blockable = [d for d in enemies if d.is_ready and stats.speed > context.stats(d, lane).speed]
    if blockable:
        ev.add("Interception", len(blockable) * w.interception_value_per_threat, f"{len(blockable)} threats")

    if DEFENDER in stats.keywords:
        ev.add(DEFENDER, w.defender_keyword_bonus)
    if GUARDIAN in stats.keywords:
        ev.add(GUARDIAN, w.guardian_keyword_bonus)

    delta = impact_delta(lane, context.ai, context.opponent, context,
                         lambda scratch: scratch.update_drone(target.id, is_exhausted=False))
    if delta.delta > 0:
        ev.add("Lane Impact", delta.delta * w.lane_impact_weight)
        if delta.flips_to_even:
            ev.add("Lane Flip", w.lane_flip_bonus)

    return charge_cost(ev, card, context)


def _evaluate_jammer(card: Card, context: EvaluationContext) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    drones = context.ai.all_drones()
    available = [
        lane for lane in LANES
        if not any(context.is_jammer(d) for d in context.ai.drones_in(lane))
    ]
    if not available:
        return ev.invalidate("No available lanes (all have Jammers)")

    cpu = sum(d.drone_class for d in drones)
    high_value = sum(1 for d in drones if d.drone_class >= w.jammer_high_value_class)
    ev.add("Base Value", w.jammer_base_value)
    ev.add("CPU Protection", cpu * w.jammer_cpu_value_multiplier, f"{cpu} total CPU")
    ev.add("High-Value Drones", high_value * w.jammer_high_value_drone_bonus, f"{high_value} drones")
    charge_cost(ev, card, context)
    return ev.scale("Available Lanes", len(available) / len(LANES), f"{len(available)}/{len(LANES)}")


def _evaluate_rally_beacon(card: Card, target, context: EvaluationContext) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    if not isinstance(target, LaneTarget):
        return ev.invalidate("No target lane")
    lane = target.lane
    in_lane = context.ai.drones_in(lane)
    if any(d.is_token and d.name == RALLY_BEACON for d in in_lane):
        return ev.invalidate("Lane already has a Rally Beacon")

    ev.add("Base Value", w.rally_beacon_base_value)
    adjacent = sum(
        1 for adj in adjacent_lanes(lane) for d in context.ai.drones_in(adj) if not d.is_token
    )
    if adjacent:
        ev.add("Adjacent Drones", adjacent * w.rally_beacon_adjacent_drone_value, f"{adjacent} drones")
    defending = sum(1 for d in in_lane if not d.is_token)
    if defending:
        ev.add("Defending Drones", defending * w.rally_beacon_defending_drone_value, f"{defending} drones")
    movement_cards = sum(1 for c in context.ai.hand if c.effect_type in MOVEMENT_EFFECTS)
    if movement_cards:
        ev.add("Movement Cards", movement_cards * w.rally_beacon_movement_card_bonus, f"{movement_cards} in hand")
    return charge_cost(ev, card, context)


def evaluate_create_tokens(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    if card.effect.token_name == RALLY_BEACON:
        return _evaluate_rally_beacon(card, target, context)
    return _evaluate_jammer(card, context)


def _has_denied_ability(drone: Drone, context: EvaluationContext) -> bool:
    abilities = context.abilities_of(drone)
    return (has_active_ability(abilities)
            or has_trigger(abilities, "ON_ATTACK", "ON_DAMAGE_DEALT"))


def evaluate_exhaust_drone(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    if not isinstance(target, Drone):
        return ev.invalidate("No valid target")
    if target.is_exhausted:
        return ev.invalidate("Target already exhausted")
    enemy_lane = context.lane_of(target.id, context.opponent)
    lane = enemy_lane or context.lane_of(target.id, context.ai)
    if lane is None:
        return ev.invalidate("Target not found on board")

    stats = context.stats(target, lane)
    if stats.attack > 0:
        ev.add("Attack Threat", stats.attack * w.exhaust_value_multiplier, f"{stats.attack} attack denied")
    if INTERCEPTOR in stats.keywords:
        ev.add("Interceptor", w.exhaust_interceptor_bonus)
    if DEFENDER in stats.keywords:
        ev.add(DEFENDER, w.exhaust_defender_bonus)
    if GUARDIAN in stats.keywords:
        ev.add(GUARDIAN, w.exhaust_guardian_bonus)
    if _has_denied_ability(target, context):
        ev.add("Active Ability", w.exhaust_ability_bonus)

    if enemy_lane is not None:
        delta = impact_delta(lane, context.ai, context.opponent, context,
                             lambda scratch: scratch.update_drone(target.id, is_exhausted=True),
                             mutate_opposing=True)
        if delta.delta > 0:
            ev.add("Lane Advantage", delta.delta * w.exhaust_lane_impact_weight)

    return charge_cost(ev, card, context)
