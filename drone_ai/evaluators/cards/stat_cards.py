"""
Stat Card Evaluators

Handles MODIFY_STAT (single drone or whole lane) and REPEATING_EFFECT.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.cards.common import add_go_again, charge_cost
from drone_ai.models import Drone, LaneTarget
from drone_ai.scoring.hull_integrity import count_damaged_sections
from drone_ai.scoring.lane_score import impact_delta, lanes_controlled
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

EXHAUSTED_SCORE = -1


def _lane_buff(card: Card, target: LaneTarget, context: EvaluationContext, ev: Evaluation) -> Evaluation:
    w = context.weights.cards
    lane = target.lane
    active = [d for d in context.ai.drones_in(lane) if d.is_ready]
    if not active:
        return ev.invalidate("No active drones in lane")

    def buff_active(scratch):
        for drone in active:
            scratch.apply_stat_mod(drone.id, card.effect.mod)

    delta = impact_delta(lane, context.ai, context.opponent, context, buff_active)
    ev.add("Lane Impact", delta.delta * w.lane_impact_weight)
    ev.add("Multi-Buff", len(active) * w.multi_buff_bonus_per_drone, f"{len(active)} drones")
    return ev


def _single_buff(card: Card, target: Drone, context: EvaluationContext, ev: Evaluation) -> Evaluation:
    w = context.weights.cards
    mod = card.effect.mod
    if target.is_exhausted:
        return ev.add("Invalid (Exhausted)", EXHAUSTED_SCORE)

    lane = context.lane_of(target.id)
    stats = context.stats(target, lane)
    if mod.stat == "attack" and mod.value > 0:
        ev.add("Target Class", stats.drone_class * w.class_value_multiplier)
        ev.add("Attack Buff", mod.value * w.attack_buff_multiplier)
    elif mod.stat == "attack" and mod.value < 0:
        ev.add("Threat Reduction", stats.attack * w.threat_reduction_multiplier)
    elif mod.stat == "speed" and mod.value > 0:
        opponents = context.opponent.drones_in(lane) if lane else ()
        enemy_max = context.max_speed(opponents, lane) if opponents else -1
        if stats.speed <= enemy_max < stats.speed + mod.value:
            ev.add("Interceptor Overcome", w.interceptor_overcome_bonus, f"enemy max speed {enemy_max}")
        else:
            ev.add("Speed Buff", w.speed_buff_bonus)
    else:
        ev.add("Generic Stat", w.generic_stat_bonus, mod.stat)
    return ev


def evaluate_modify_stat(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    effect = card.effect
    ev = Evaluation()
    if effect.mod is None:
        logger.warning(f"⚠️ MODIFY_STAT card {card.name} has no stat mod")
        return ev

    if card.targeting is not None and card.targeting.type == "LANE":
        if not isinstance(target, LaneTarget):
            return ev.invalidate("No valid target")
        _lane_buff(card, target, context, ev)
    else:
        if not isinstance(target, Drone):
            return ev.invalidate("No valid target")
        _single_buff(card, target, context, ev)

    if ev.score > 0:
        if effect.mod.is_permanent:
            ev.scale("Permanent Mod", context.weights.cards.permanent_mod_multiplier)
        if effect.go_again:
            add_go_again(ev, context)
        charge_cost(ev, card, context)
    return ev


def evaluate_repeating_effect(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    condition = card.effect.condition
    condition_type = condition.type if condition else None
    ev = Evaluation()

    if condition_type == "LANES_CONTROLLED":
        lanes = len(lanes_controlled(context.ai, context.opponent))
        if lanes == 0:
            return ev.invalidate("No lanes controlled - card does nothing")
        sub_type = card.effect.effects[0].type if card.effect.effects else None
        per_repeat = {
            "GAIN_ENERGY": w.lane_control_energy_value,
            "DRAW": w.lane_control_draw_value,
        }.get(sub_type, w.lane_control_rally_bonus)
        ev.add("Lane Control", lanes * per_repeat, f"{lanes} lanes")
        return charge_cost(ev, card, context)

    if condition_type == "OWN_DAMAGED_SECTIONS":
        repeats = 1 + count_damaged_sections(context.ai, context.ship_status)
    else:
        if condition_type is not None:
            logger.debug(f"Unknown repeat condition {condition_type} on {card.name}, assuming one repeat")
        repeats = 1
    ev.add("Repeating Effect", repeats * w.repeat_value_per_repeat, f"{repeats} repeats")
    return charge_cost(ev, card, context)
