"""
Drone Pacing Adjustment

When the AI is short on ready drones it should spend cards rather than trade
its remaining drones away.
"""

import logging
from typing import List

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate, ActionType

logger = logging.getLogger(__name__)


def apply_pacing_adjustments(candidates: List[ActionCandidate], context: EvaluationContext) -> List[ActionCandidate]:
    w = context.weights.pacing
    ai_ready = len(context.ai.ready_drones())
    opponent_ready = len(context.opponent.ready_drones())
    if ai_ready > opponent_ready - w.ready_drone_deficit_threshold:
        return candidates

    for candidate in candidates:
        if candidate.action_type == ActionType.PLAY_CARD and candidate.score > 0:
            candidate.add_reasoning("Pacing", w.non_drone_action_bonus,
                                    f"AI has {ai_ready} ready drones vs {opponent_ready}")
    return candidates
