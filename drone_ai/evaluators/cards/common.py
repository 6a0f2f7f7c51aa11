"""
Helpers shared by the card evaluators.
"""

from typing import List, Optional

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card, StatFilter
from drone_ai.keywords import NOT_FIRST_ACTION
from drone_ai.models import BoardReader, Drone
from drone_ai.trace import Evaluation

COST_TAG = "Cost"


def charge_cost(ev: Evaluation, card: Card, context: EvaluationContext) -> Evaluation:
    penalty = card.cost * context.weights.scoring.cost_penalty_multiplier
    return ev.add(COST_TAG, -penalty, f"{card.cost} energy")


def drone_lane(target, context: EvaluationContext) -> Optional[str]:
    """Lane of a drone target on either board, or None"""
    if not isinstance(target, Drone):
        return None
    return context.lane_of(target.id)


def matching_drones(board: BoardReader, lane: str, stat_filter: Optional[StatFilter],
                    context: EvaluationContext) -> List[Drone]:
    drones = board.drones_in(lane)
    if stat_filter is None:
        return list(drones)
    return [d for d in drones if stat_filter.matches(context.stat_value(d, stat_filter.stat, lane))]


def has_ready_not_first_action(context: EvaluationContext) -> bool:
    """AI has a ready drone that only acts after another action this turn"""
    return any(
        context.has_keyword(drone, NOT_FIRST_ACTION, lane)
        for lane, drone in context.ai.ready_drones()
    )


def add_go_again(ev: Evaluation, context: EvaluationContext, enabler: bool = True) -> Evaluation:
    w = context.weights.cards
    ev.add("Go Again", w.go_again_bonus)
    if enabler and has_ready_not_first_action(context):
        ev.add("NOT_FIRST_ACTION Enabler", w.not_first_action_enabler_bonus)
    return ev
