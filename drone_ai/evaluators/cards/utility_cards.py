"""
Utility Card Evaluators

Handles resource cards: GAIN_ENERGY, DRAW, SEARCH_AND_DRAW, plus the
board-agnostic INCREASE_THREAT and MARK_DRONE effects.

Energy and draw cards are valued by what they unlock, so they do not pay the
usual cost penalty.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.cards.common import charge_cost
from drone_ai.models import Drone
from drone_ai.targeting import card_targets, is_targeted
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def evaluate_gain_energy(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    """Value of the most expensive card the extra energy makes playable"""
    w = context.weights.cards
    energy = context.ai.energy
    projected = energy + card.effect.value
    ev = Evaluation()

    enabled = [c for c in context.ai.hand if energy < c.cost <= projected]
    if not enabled:
        return ev.invalidate("No cards enabled by energy gain")

    usable = [c for c in enabled if not is_targeted(c) or card_targets(c, context)]
    if not usable:
        return ev.invalidate(f"Enabled cards have no valid targets ({len(enabled)} enabled)")

    best = max(usable, key=lambda c: c.cost)
    ev.add("Enables", w.enables_card_base + best.cost * w.enables_card_per_cost,
           f"{best.name} ({best.cost} energy)")
    return ev


def _energy_after(card: Card, context: EvaluationContext) -> int:
    return context.ai.energy - card.cost


def evaluate_draw(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    remaining = _energy_after(card, context)
    ev = Evaluation()
    if remaining > 0:
        ev.add("Draw Value", w.draw_base_value + remaining * w.energy_remaining_multiplier,
               f"{remaining} energy left")
    else:
        ev.add("Draw Value", w.low_priority_score, "no energy left to use draws")
    return ev


def evaluate_search_and_draw(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    effect = card.effect
    remaining = _energy_after(card, context)
    ev = Evaluation()
    ev.add("Draw", effect.value * w.search_draw_value_per_card, f"{effect.value} cards")
    ev.add("Search", effect.search_count * w.search_bonus_per_search, f"{effect.search_count} cards")
    if remaining > 0:
        ev.add("Energy Remaining", remaining * w.energy_remaining_multiplier)
    return ev


def evaluate_increase_threat(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    ev.add("Threat Increase", w.threat_increase_base_value + card.effect.value * w.threat_increase_per_point,
           f"+{card.effect.value} threat")
    return charge_cost(ev, card, context)


def evaluate_mark_drone(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    ev = Evaluation()
    if not isinstance(target, Drone):
        return ev.invalidate("No valid target")
    if target.is_marked:
        return ev.invalidate("Target already marked")
    ev.add("Mark", context.weights.cards.mark_base_value, target.name)
    return charge_cost(ev, card, context)
