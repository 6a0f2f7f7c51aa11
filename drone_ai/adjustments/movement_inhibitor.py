"""
Movement Inhibitor Adjustment

A drone with INHIBIT_MOVEMENT locks every drone in its lane in place. Taking
it out frees the AI's ready drones there, so attacks on an enemy inhibitor
and the AI's own purge abilities are worth more the more drones are locked.
"""

import logging
from typing import List

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate, ActionType
from drone_ai.keywords import inhibits_movement
from drone_ai.models import Drone

logger = logging.getLogger(__name__)

PURGE_EFFECT = "DESTROY_TOKEN_SELF"


def locked_ready_drones(lane: str, context: EvaluationContext, exclude: str = "") -> int:
    return sum(1 for d in context.ai.drones_in(lane) if d.is_ready and d.id != exclude)


def apply_movement_inhibitor_adjustments(candidates: List[ActionCandidate],
                                         context: EvaluationContext) -> List[ActionCandidate]:
    w = context.weights.thruster_inhibitor
    for candidate in candidates:
        if candidate.is_invalid:
            continue

        if candidate.action_type == ActionType.ATTACK and isinstance(candidate.target, Drone):
            target = candidate.target
            if not inhibits_movement(context.abilities_of(target)):
                continue
            locked = locked_ready_drones(candidate.lane, context)
            bonus = w.removal_base_bonus + locked * w.locked_drone_value
            candidate.add_reasoning("Inhibitor Removal", bonus, f"{locked} drones locked")

        elif candidate.action_type == ActionType.USE_ABILITY:
            effect = candidate.ability.effect
            if effect is None or effect.type != PURGE_EFFECT:
                continue
            locked = locked_ready_drones(candidate.lane, context, exclude=candidate.drone.id)
            if locked:
                candidate.add_reasoning("Lock-down Released", locked * w.locked_drone_value,
                                        f"{locked} drones locked")
    return candidates
