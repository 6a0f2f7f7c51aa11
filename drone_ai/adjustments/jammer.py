"""
Jammer Adjustment

A ready enemy Jammer soaks up every card that targets its lane-mates. Card
plays aimed past a Jammer are invalid, and whatever they would have been
worth is credited to attacks that take the Jammer out.
"""

import logging
from collections import defaultdict
from typing import Dict, List

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate, ActionType
from drone_ai.models import Drone

logger = logging.getLogger(__name__)


def jammed_lanes(context: EvaluationContext) -> List[str]:
    """Lanes holding a ready enemy Jammer"""
    return [
        lane for lane, drone in context.opponent.ready_drones()
        if context.is_jammer(drone)
    ]


def apply_jammer_adjustments(candidates: List[ActionCandidate], context: EvaluationContext) -> List[ActionCandidate]:
    jammed = set(jammed_lanes(context))
    if not jammed:
        return candidates

    blocked_value: Dict[str, float] = defaultdict(float)
    for candidate in candidates:
        if candidate.action_type != ActionType.PLAY_CARD or not isinstance(candidate.target, Drone):
            continue
        target = candidate.target
        lane = context.lane_of(target.id, context.opponent)
        if lane not in jammed or context.is_jammer(target):
            continue
        if candidate.score > 0:
            blocked_value[lane] += candidate.score
        candidate.set_invalid("Blocked by Jammer")

    w = context.weights.jammer
    for candidate in candidates:
        if candidate.action_type != ActionType.ATTACK or not isinstance(candidate.target, Drone):
            continue
        if not context.is_jammer(candidate.target):
            continue
        lane = candidate.lane or context.lane_of(candidate.target.id, context.opponent)
        value = blocked_value.get(lane, 0)
        if value <= 0:
            continue
        candidate.add_reasoning("Jammer Removal", value, "unblocks card plays")
        attack = context.stats(candidate.drone, lane).attack
        if attack <= w.efficiency_attack_threshold:
            candidate.add_reasoning("Efficient Jammer Removal", w.efficiency_bonus, f"{attack} attack attacker")

    if blocked_value:
        logger.debug(f"Jammer blocked value by lane: {dict(blocked_value)}")
    return candidates
