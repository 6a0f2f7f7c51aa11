"""
Movement Card Evaluators

Handles SINGLE_MOVE (one drone, one adjacent lane, candidate carries the
move) and MULTI_MOVE (up to N drones out of a lane).
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.cards.common import add_go_again, charge_cost
from drone_ai.evaluators.move_evaluator import move_lane_impact, on_move_value
from drone_ai.models import LaneTarget
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

DO_NOT_EXHAUST = "DO_NOT_EXHAUST"


def evaluate_single_move(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    ev = Evaluation()
    if move is None:
        return ev.invalidate("Missing move metadata")

    exhausts = DO_NOT_EXHAUST not in card.effect.properties
    impact = move_lane_impact(move.drone, move.from_lane, move.to_lane, context, exhausts=exhausts)
    ev.add("Move Impact", impact, f"{move.from_lane}->{move.to_lane}")

    gains = on_move_value(move.drone, context)
    if gains:
        ev.add("OnMove Ability", gains)

    if card.effect.go_again:
        add_go_again(ev, context, enabler=False)
    return charge_cost(ev, card, context)


def evaluate_multi_move(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    w = context.weights.cards
    ev = Evaluation()
    if not isinstance(target, LaneTarget):
        return ev.invalidate("No valid target")

    available = len(context.ai.drones_in(target.lane))
    movable = min(available, card.effect.count) if card.effect.count else available
    if movable == 0:
        return ev.invalidate("No drones to move")

    ev.add("Flexibility", movable * w.multi_move_flexibility_per_drone, f"{movable} drones")
    if DO_NOT_EXHAUST in card.effect.properties:
        ev.add("Stay Ready", movable * w.multi_move_stay_ready_per_drone)
    return charge_cost(ev, card, context)
