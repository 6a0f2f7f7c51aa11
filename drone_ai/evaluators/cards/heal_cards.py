"""
Heal Card Evaluators

Handles HEAL_SHIELDS, HEAL_HULL and RESTORE_SECTION_SHIELDS. Healing is
capped at what is actually missing.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.cards.common import add_go_again
from drone_ai.models import Drone, SectionTarget
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def evaluate_heal_shields(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    ev = Evaluation()
    if not isinstance(target, Drone):
        return ev.invalidate("No valid target")
    restored = min(card.effect.value, target.missing_shields)
    ev.add("Shields Restored", restored * context.weights.cards.shield_heal_value_per_point,
           f"{restored} shields")
    return ev


def evaluate_heal_hull(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    effect = card.effect
    ev = Evaluation()

    if isinstance(target, SectionTarget):
        return ev.add("Section Hull", w.section_heal_value, target.name)
    if not isinstance(target, Drone):
        return ev.invalidate("No valid target")

    healed = min(effect.value, target.missing_hull)
    if healed <= 0:
        return ev.invalidate("Drone already at full hull")
    ev.add("Drone Hull", healed * (w.drone_heal_base_per_point + effect.value), f"{healed} hull")
    if effect.go_again:
        add_go_again(ev, context, enabler=False)
    return ev


def evaluate_restore_section_shields(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    ev = Evaluation()
    if not isinstance(target, SectionTarget):
        return ev.invalidate("No valid target")
    restored = min(card.effect.value, target.section.missing_shields)
    if restored <= 0:
        return ev.invalidate("Section already at full shields")
    return ev.add("Section Shields", restored * context.weights.cards.shield_heal_value_per_point,
                  f"{restored} shields restored")
