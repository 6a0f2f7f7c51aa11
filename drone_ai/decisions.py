"""
Turn Decisions

Entry points the host calls once per AI decision:

    decision = decide_deployment(context)
    decision = decide_action(context)

Each runs candidate generation -> scoring -> adjustment passes -> selection
and returns a Decision record. The full candidate list travels with the
decision as its log context and is handed to the audit logger.
"""

import logging
from typing import Optional

from drone_ai import decision_log
from drone_ai.adjustments import apply_adjustments
from drone_ai.candidates import generate_action_candidates, generate_deployment_candidates
from drone_ai.context import EvaluationContext
from drone_ai.evaluators import action_evaluators, deployment_evaluators
from drone_ai.evaluators.base import Decision, DecisionType
from drone_ai.selector import ActionSelector

logger = logging.getLogger(__name__)


def _selector(context: EvaluationContext, selector: Optional[ActionSelector]) -> ActionSelector:
    return selector or ActionSelector(context.weights, context.rng)


def decide_deployment(context: EvaluationContext, selector: Optional[ActionSelector] = None) -> Decision:
    """Pick a drone type and lane to deploy, or pass"""
    candidates = generate_deployment_candidates(context)
    deployment_evaluators().score_all(candidates, context)

    selection = _selector(context, selector).select_deployment(candidates)
    if selection.is_pass:
        logger.info(f"🛑 Deployment pass: {selection.reason}")
        decision = Decision(DecisionType.PASS, log_context=candidates, reason=selection.reason)
    else:
        chosen = selection.chosen
        logger.info(f"✅ Deploy {chosen.drone_name} to {chosen.lane} (score: {chosen.score:.1f}, "
                    f"{len(selection.pool)} tied)")
        decision = Decision(DecisionType.DEPLOY, payload=chosen, log_context=candidates)

    decision_log.log_decision("deployment", decision, context.turn)
    return decision


def decide_action(context: EvaluationContext, selector: Optional[ActionSelector] = None) -> Decision:
    """Pick an attack, move, card play or ability use, or pass"""
    candidates = generate_action_candidates(context)
    action_evaluators().score_all(candidates, context)
    apply_adjustments(candidates, context)

    selection = _selector(context, selector).select_action(candidates)
    if selection.is_pass:
        logger.info(f"🛑 Action pass: {selection.reason}")
        decision = Decision(DecisionType.PASS, log_context=candidates, reason=selection.reason)
    else:
        chosen = selection.chosen
        logger.info(f"✅ Best action: {chosen.display_text} (score: {chosen.score:.1f})")
        logger.info(f"   Reasoning: {' | '.join(chosen.rendered_trace())}")
        decision = Decision(DecisionType.ACTION, payload=chosen, log_context=candidates)

    decision_log.log_decision("action", decision, context.turn)
    return decision
