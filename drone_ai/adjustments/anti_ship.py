"""
Anti-Ship Adjustment

Anti-ship drones are penalised for attacking drones. When nothing else on the
list is worth doing, the penalty would force a pass, so it is lifted.
"""

import logging
from typing import List

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.attack_evaluator import ANTI_SHIP_MISUSE
from drone_ai.evaluators.base import ActionCandidate

logger = logging.getLogger(__name__)


def apply_anti_ship_adjustments(candidates: List[ActionCandidate],
                                context: EvaluationContext) -> List[ActionCandidate]:
    penalised = [c for c in candidates if c.has(ANTI_SHIP_MISUSE) and not c.is_invalid]
    if not penalised:
        return candidates

    alternatives = any(c.score > 0 for c in candidates if not c.has(ANTI_SHIP_MISUSE))
    if alternatives:
        return candidates

    for candidate in penalised:
        candidate.add_reasoning("Anti-Ship Penalty Removed", -candidate.value_of(ANTI_SHIP_MISUSE),
                                "no other positive action")
    logger.debug(f"Lifted anti-ship penalty on {len(penalised)} attacks")
    return candidates
