"""
Status Card Evaluators

Handles APPLY_CANNOT_MOVE, APPLY_CANNOT_ATTACK, APPLY_CANNOT_INTERCEPT,
APPLY_DOES_NOT_READY on enemy drones, and CLEAR_ALL_STATUS on friendly ones.

A status the target already carries, or a target that is not on the board,
makes the play invalid.
"""

import logging
from typing import Optional, Tuple

from drone_ai.context import EvaluationContext
from drone_ai.definitions import ACTIVE, Card
from drone_ai.evaluators.cards.common import charge_cost
from drone_ai.keywords import (
    ALWAYS_INTERCEPTS, DEFENDER, DOGFIGHT, GUARDIAN, has_after_attack_effect,
    has_on_move_trigger, has_trigger,
)
from drone_ai.models import Drone
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def _enemy_target(target, already: str, label: str, context: EvaluationContext,
                  ev: Evaluation) -> Tuple[Optional[Drone], Optional[str]]:
    if not isinstance(target, Drone):
        ev.invalidate("No target provided")
        return None, None
    if getattr(target, already):
        ev.invalidate(f"Target already {label}")
        return None, None
    lane = context.lane_of(target.id, context.opponent)
    if lane is None:
        ev.invalidate("Target not found on board")
        return None, None
    return target, lane


def _class_bonus(drone_class: int, class_2: float, class_3: float) -> float:
    if drone_class >= 3:
        return class_3
    if drone_class == 2:
        return class_2
    return 0


def evaluate_apply_cannot_move(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.status
    ev = Evaluation()
    drone, lane = _enemy_target(target, "cannot_move", "cannot move", context, ev)
    if drone is None:
        return ev

    attack = context.stats(drone, lane).attack
    if attack > 0:
        ev.add("Attack Locked", attack * w.move_deny, f"{attack} attack")
    if has_on_move_trigger(context.abilities_of(drone)):
        ev.add("ON_MOVE Ability", w.on_move_ability_bonus)
    if drone.is_exhausted:
        ev.scale("Already Exhausted", w.exhausted_move_factor)
    return charge_cost(ev, card, context)


def evaluate_apply_cannot_attack(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.status
    ev = Evaluation()
    drone, lane = _enemy_target(target, "cannot_attack", "cannot attack", context, ev)
    if drone is None:
        return ev

    stats = context.stats(drone, lane)
    if stats.attack > 0:
        ev.add("Attack Denied", stats.attack * w.attack_deny, f"{stats.attack} attack")
    if GUARDIAN in stats.keywords:
        ev.add(GUARDIAN, w.guardian_bonus)
    if DEFENDER in stats.keywords:
        ev.add(DEFENDER, w.defender_bonus)
    class_bonus = _class_bonus(stats.drone_class, w.class_2_bonus, w.class_3_bonus)
    if class_bonus:
        ev.add("High Class", class_bonus, f"class {stats.drone_class}")
    if has_after_attack_effect(context.abilities_of(drone)):
        ev.add("After-Attack Ability", w.after_attack_bonus)
    if drone.is_exhausted:
        ev.scale("Already Exhausted", w.exhausted_attack_factor)
    return charge_cost(ev, card, context)


def evaluate_apply_cannot_intercept(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.status
    ev = Evaluation()
    drone, lane = _enemy_target(target, "cannot_intercept", "cannot intercept", context, ev)
    if drone is None:
        return ev

    stats = context.stats(drone, lane)
    if stats.speed > 0:
        ev.add("Interception Denied", stats.speed * w.intercept_deny, f"{stats.speed} speed")
    if ALWAYS_INTERCEPTS in stats.keywords:
        ev.add(ALWAYS_INTERCEPTS, w.always_intercepts_bonus)
    if DOGFIGHT in stats.keywords:
        ev.add(DOGFIGHT, w.dogfight_bonus)
    attackers = sum(
        1 for d in context.ai.drones_in(lane)
        if d.is_ready and context.stats(d, lane).attack > 0
    )
    if attackers:
        ev.add("Ready Attackers", attackers * w.ready_attacker_value, f"{attackers} in lane")
    if drone.is_exhausted:
        ev.scale("Already Exhausted", w.exhausted_intercept_factor)
    return charge_cost(ev, card, context)


def _has_powerful_ability(drone: Drone, context: EvaluationContext) -> bool:
    abilities = context.abilities_of(drone)
    return (any(a.type == ACTIVE for a in abilities)
            or has_trigger(abilities, "ON_ROUND_START", "ON_ATTACK"))


def evaluate_apply_does_not_ready(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.status
    ev = Evaluation()
    drone, lane = _enemy_target(target, "does_not_ready", "does not ready", context, ev)
    if drone is None:
        return ev

    stats = context.stats(drone, lane)
    if stats.attack > 0:
        ev.add("Next Turn Delayed", stats.attack * w.ready_deny * w.ready_duration_factor,
               f"{stats.attack} attack")
    class_bonus = _class_bonus(stats.drone_class, w.ready_class_2_bonus, w.ready_class_3_bonus)
    if class_bonus:
        ev.add("High Class", class_bonus, f"class {stats.drone_class}")
    if _has_powerful_ability(drone, context):
        ev.add("Powerful Ability", w.powerful_ability_bonus)
    if drone.is_ready:
        ev.add("Currently Ready", w.target_ready_bonus)
    else:
        ev.scale("Already Exhausted", w.exhausted_ready_factor)
    return charge_cost(ev, card, context)


CLEARABLE = (
    ("cannot_move", "Clears Cannot Move"),
    ("cannot_attack", "Clears Cannot Attack"),
    ("cannot_intercept", "Clears Cannot Intercept"),
    ("does_not_ready", "Clears Does Not Ready"),
)


def evaluate_clear_all_status(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.status
    ev = Evaluation()
    if not isinstance(target, Drone):
        return ev.invalidate("No target provided")
    if context.lane_of(target.id, context.ai) is None:
        return ev.invalidate("Target not found on board")

    cleared = 0
    for flag, tag in CLEARABLE:
        if getattr(target, flag):
            cleared += 1
            ev.add(tag, w.clear_value_per_effect)
    if target.is_marked:
        cleared += 1
        ev.add("Clears Marked", w.marked_clear_bonus)
    if cleared == 0:
        return Evaluation().invalidate("Target has no status effects to clear")

    if target.drone_class >= 2:
        ev.add("High-Value Drone", w.clear_high_class_bonus, f"class {target.drone_class}")
    if card.effect.go_again:
        ev.add("Go Again", w.clear_go_again_bonus)
    return charge_cost(ev, card, context)
