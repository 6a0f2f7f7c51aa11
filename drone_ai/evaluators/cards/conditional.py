"""
Conditional Effects Evaluator

Predicts whether a card's secondary effects fire and scores what they grant.

- PRE conditions are checked against the target as it is now.
- POST conditions are predicted from the card's primary effect (will the
  damage kill the target, will it reach the hull).

Any primary effect can carry any conditional, so this runs for every card
play and its score is added on top of the primary evaluation.
"""

import logging
from typing import Optional

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card, CardEffect, Condition
from drone_ai.models import Drone
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def _stat(target: Drone, stat: Optional[str], context: EvaluationContext) -> int:
    if not stat:
        return 0
    return context.stat_value(target, stat)


def _opponent_has_more(target: Drone, context: EvaluationContext) -> bool:
    lane = context.lane_of(target.id, context.ai)
    if lane is None:
        return False
    return len(context.opponent.drones_in(lane)) > len(context.ai.drones_in(lane))


def pre_condition_met(condition: Condition, target, context: EvaluationContext) -> bool:
    """True when a PRE condition holds for the target as it stands"""
    if condition is None or not isinstance(target, Drone):
        return False
    kind = condition.type
    if kind == "TARGET_STAT_LT":
        return _stat(target, condition.stat, context) < condition.value
    if kind == "TARGET_STAT_LTE":
        return _stat(target, condition.stat, context) <= condition.value
    if kind == "TARGET_STAT_GT":
        return _stat(target, condition.stat, context) > condition.value
    if kind == "TARGET_STAT_GTE":
        return _stat(target, condition.stat, context) >= condition.value
    if kind == "TARGET_IS_MARKED":
        return target.is_marked
    if kind == "TARGET_IS_EXHAUSTED":
        return target.is_exhausted
    if kind == "TARGET_IS_READY":
        return target.is_ready
    if kind == "OPPONENT_HAS_MORE_IN_LANE":
        return _opponent_has_more(target, context)
    logger.warning(f"⚠️ Unknown condition type: {kind}")
    return False


def post_condition_met(condition: Condition, primary: CardEffect, target) -> bool:
    """Predict a POST condition from the primary effect's outcome"""
    if condition is None or primary is None or not isinstance(target, Drone):
        return False
    if primary.type != "DAMAGE":
        return False
    damage = primary.value
    if condition.type == "ON_DESTROY":
        return damage >= target.current_shields + target.hull
    if condition.type == "ON_HULL_DAMAGE":
        return damage > 0 and damage > target.current_shields
    return False


def score_granted_effect(effect: CardEffect, target, context: EvaluationContext) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    kind = effect.type

    if kind == "DESTROY":
        if not isinstance(target, Drone):
            return ev
        resources = target.hull + target.current_shields
        value = (resources * context.weights.scoring.resource_value_multiplier
                 + (target.drone_class or 1) * w.lethal_class_multiplier
                 + w.lethal_base_bonus)
        ev.add("Conditional DESTROY", value, f"{resources} resources + lethal bonus")
    elif kind == "BONUS_DAMAGE":
        ev.add("Bonus Damage", effect.value * w.damage_multiplier, f"+{effect.value} damage")
    elif kind == "GO_AGAIN":
        ev.add("Conditional Go Again", w.go_again_bonus)
    elif kind == "DRAW":
        count = effect.value or 1
        ev.add("Conditional Draw", count * w.draw_base_value, f"{count} cards")
    elif kind == "GAIN_ENERGY":
        energy = effect.value or 1
        ev.add("Conditional Energy", energy * w.conditional_energy_value, f"+{energy} energy")
    elif kind == "MODIFY_STAT":
        mod = effect.mod
        if mod is None:
            return ev
        if mod.stat == "attack" and mod.value > 0:
            value = mod.value * w.attack_buff_multiplier
        else:
            value = abs(mod.value) * w.generic_stat_bonus
        ev.add("Conditional Stat Mod", value, f"{mod.stat} {mod.value:+d}")
    else:
        logger.warning(f"⚠️ Unknown granted effect type: {kind}")
    return ev


def evaluate_conditional_effects(card: Card, target, context: EvaluationContext) -> Evaluation:
    """Bonus from every conditional on `card` predicted to fire against `target`"""
    ev = Evaluation()
    for conditional in card.conditional_effects:
        if conditional.timing == "PRE":
            met = pre_condition_met(conditional.condition, target, context)
        elif conditional.timing == "POST":
            met = post_condition_met(conditional.condition, card.effect, target)
        else:
            logger.debug(f"Conditional {conditional.id} on {card.name} has unknown timing {conditional.timing}")
            met = False
        if met:
            ev.merge(score_granted_effect(conditional.grant, target, context))
    return ev
