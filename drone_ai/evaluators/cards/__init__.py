"""
Card Evaluators

One scoring function per card effect type, dispatched through a registry.
Every function has the shape (card, target, context, move=None) -> Evaluation.
Conditional effects are scored separately and added to the primary score.
"""

import logging
from typing import Callable, Dict

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.base import ActionCandidate, ActionEvaluator, ActionType
from drone_ai.evaluators.cards.conditional import evaluate_conditional_effects
from drone_ai.evaluators.cards.damage_cards import (
    evaluate_damage, evaluate_damage_scaling, evaluate_destroy, evaluate_destroy_upgrade,
    evaluate_overflow_damage, evaluate_splash_damage,
)
from drone_ai.evaluators.cards.drone_cards import (
    evaluate_create_tokens, evaluate_exhaust_drone, evaluate_ready_drone,
)
from drone_ai.evaluators.cards.heal_cards import (
    evaluate_heal_hull, evaluate_heal_shields, evaluate_restore_section_shields,
)
from drone_ai.evaluators.cards.movement_cards import evaluate_multi_move, evaluate_single_move
from drone_ai.evaluators.cards.stat_cards import evaluate_modify_stat, evaluate_repeating_effect
from drone_ai.evaluators.cards.status_cards import (
    evaluate_apply_cannot_attack, evaluate_apply_cannot_intercept, evaluate_apply_cannot_move,
    evaluate_apply_does_not_ready, evaluate_clear_all_status,
)
from drone_ai.evaluators.cards.upgrade_cards import evaluate_modify_drone_base
from drone_ai.evaluators.cards.utility_cards import (
    evaluate_draw, evaluate_gain_energy, evaluate_increase_threat, evaluate_mark_drone,
    evaluate_search_and_draw,
)
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

CardScorer = Callable[..., Evaluation]

CARD_EVALUATORS: Dict[str, CardScorer] = {
    'DESTROY': evaluate_destroy,
    'DAMAGE': evaluate_damage,
    'OVERFLOW_DAMAGE': evaluate_overflow_damage,
    'SPLASH_DAMAGE': evaluate_splash_damage,
    'DAMAGE_SCALING': evaluate_damage_scaling,
    'DESTROY_UPGRADE': evaluate_destroy_upgrade,
    'GAIN_ENERGY': evaluate_gain_energy,
    'DRAW': evaluate_draw,
    'SEARCH_AND_DRAW': evaluate_search_and_draw,
    'HEAL_SHIELDS': evaluate_heal_shields,
    'HEAL_HULL': evaluate_heal_hull,
    'RESTORE_SECTION_SHIELDS': evaluate_restore_section_shields,
    'REPEATING_EFFECT': evaluate_repeating_effect,
    'MODIFY_STAT': evaluate_modify_stat,
    'MODIFY_DRONE_BASE': evaluate_modify_drone_base,
    'SINGLE_MOVE': evaluate_single_move,
    'MULTI_MOVE': evaluate_multi_move,
    'READY_DRONE': evaluate_ready_drone,
    'CREATE_TOKENS': evaluate_create_tokens,
    'EXHAUST_DRONE': evaluate_exhaust_drone,
    'APPLY_CANNOT_MOVE': evaluate_apply_cannot_move,
    'APPLY_CANNOT_ATTACK': evaluate_apply_cannot_attack,
    'APPLY_CANNOT_INTERCEPT': evaluate_apply_cannot_intercept,
    'APPLY_DOES_NOT_READY': evaluate_apply_does_not_ready,
    'CLEAR_ALL_STATUS': evaluate_clear_all_status,
    'INCREASE_THREAT': evaluate_increase_threat,
    'MARK_DRONE': evaluate_mark_drone,
}


def has_evaluator(effect_type: str) -> bool:
    return effect_type in CARD_EVALUATORS


def evaluate_card_play(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    """Primary effect score plus any conditional bonus"""
    scorer = CARD_EVALUATORS.get(card.effect_type)
    if scorer is None:
        logger.warning(f"⚠️ No evaluator for card effect {card.effect_type} ({card.name})")
        return Evaluation().info("Unknown Effect", card.effect_type)

    ev = scorer(card, target, context, move)
    if not ev.invalid and card.conditional_effects:
        ev.merge(evaluate_conditional_effects(card, target, context))
    return ev


class CardPlayEvaluator(ActionEvaluator):
    """Scores PLAY_CARD candidates"""

    def __init__(self):
        super().__init__("Card")

    def can_evaluate(self, candidate: ActionCandidate) -> bool:
        return candidate.action_type == ActionType.PLAY_CARD

    def evaluate(self, candidate: ActionCandidate, context: EvaluationContext) -> Evaluation:
        return evaluate_card_play(candidate.card, candidate.target, context, candidate.move)


__all__ = [
    'CARD_EVALUATORS',
    'CardPlayEvaluator',
    'evaluate_card_play',
    'evaluate_conditional_effects',
    'has_evaluator',
]
