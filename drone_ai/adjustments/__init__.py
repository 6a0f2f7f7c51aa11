"""
Adjustment Passes

Corrections applied over the whole scored candidate list, after per-candidate
scoring and before selection. Each pass may compare candidates to each other
or to board-wide counts. Order is fixed.
"""

import logging
from typing import List

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate

from .jammer import apply_jammer_adjustments
from .interception import apply_interception_adjustments
from .anti_ship import apply_anti_ship_adjustments
from .movement_inhibitor import apply_movement_inhibitor_adjustments
from .pacing import apply_pacing_adjustments

logger = logging.getLogger(__name__)

ADJUSTMENT_PASSES = (
    apply_jammer_adjustments,
    apply_interception_adjustments,
    apply_anti_ship_adjustments,
    apply_movement_inhibitor_adjustments,
    apply_pacing_adjustments,
)


def apply_adjustments(candidates: List[ActionCandidate], context: EvaluationContext) -> List[ActionCandidate]:
    for adjustment in ADJUSTMENT_PASSES:
        adjustment(candidates, context)
    return candidates


__all__ = [
    'ADJUSTMENT_PASSES',
    'apply_adjustments',
    'apply_jammer_adjustments',
    'apply_interception_adjustments',
    'apply_anti_ship_adjustments',
    'apply_movement_inhibitor_adjustments',
    'apply_pacing_adjustments',
]
