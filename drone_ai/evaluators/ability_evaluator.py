"""
Ability Evaluator

Handles activation of a drone's ACTIVE ability (repairs, sniping, purging a
token). The effect value is scored first; the energy cost is charged only
when the activation is legal.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Ability
from drone_ai.evaluators.base import ActionCandidate, ActionEvaluator, ActionType
from drone_ai.models import Drone
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

CROSS_LANE_LOCATIONS = ("ANY_LANE", "OTHER_LANES")


def evaluate_ability(ability: Ability, target: Drone, context: EvaluationContext) -> Evaluation:
    w = context.weights.abilities
    effect = ability.effect
    ev = Evaluation()
    ev.info("Active Ability", ability.name)

    effect_type = effect.type if effect else None
    if effect_type == "HEAL":
        healed = min(effect.value, target.missing_hull)
        if healed <= 0:
            return ev.invalidate("No healing needed")
        ev.add("Heal", healed * w.heal_per_point, f"{healed} hull")
        ev.add("Target Class", target.drone_class * w.heal_class_multiplier)
    elif effect_type == "DAMAGE":
        ev.add("Damage", effect.value * w.damage_per_point, f"{effect.value} damage")
        if effect.value >= target.hull + target.current_shields:
            cw = context.weights.cards
            ev.add("Lethal", cw.lethal_base_bonus + target.drone_class * cw.lethal_class_multiplier)
        if ability.targeting is not None and ability.targeting.location in CROSS_LANE_LOCATIONS:
            ev.add("Cross-Lane", w.cross_lane_bonus)
    elif effect_type == "DESTROY_TOKEN_SELF":
        # lock-down value is added by the movement inhibitor pass
        ev.add("Purge", context.weights.thruster_inhibitor.purge_base_value)
    else:
        logger.debug(f"No specific scoring for ability effect {effect_type} ({ability.name})")
        ev.add("Ability Value", w.default_value)

    if ability.energy_cost:
        ev.add("Energy Cost", -ability.energy_cost * w.energy_cost_multiplier, f"{ability.energy_cost} energy")
    return ev


class AbilityEvaluator(ActionEvaluator):
    """Scores USE_ABILITY candidates"""

    def __init__(self):
        super().__init__("Ability")

    def can_evaluate(self, candidate: ActionCandidate) -> bool:
        return candidate.action_type == ActionType.USE_ABILITY

    def evaluate(self, candidate: ActionCandidate, context: EvaluationContext) -> Evaluation:
        return evaluate_ability(candidate.ability, candidate.target, context)
