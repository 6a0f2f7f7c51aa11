"""
Move Evaluator

Handles relocating a ready drone to an adjacent lane. The move is measured
twice on scratch boards: once for the lane the drone leaves and once for the
lane it arrives in, where it lands exhausted.
"""

import logging
from dataclasses import replace

from drone_ai.context import EvaluationContext
from drone_ai.evaluators.base import ActionCandidate, ActionEvaluator, ActionType
from drone_ai.keywords import on_move_stat_gains
from drone_ai.models import Drone, ShipStatus
from drone_ai.scoring.lane_score import impact_delta
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def move_lane_impact(drone: Drone, from_lane: str, to_lane: str, context: EvaluationContext,
                     exhausts: bool = True) -> float:
    """Combined change in AI lane score across both lanes touched by the move"""
    moved = replace(drone, is_exhausted=True) if exhausts else drone
    leaving = impact_delta(from_lane, context.ai, context.opponent, context,
                           lambda scratch: scratch.remove_drone(drone.id))
    arriving = impact_delta(to_lane, context.ai, context.opponent, context,
                            lambda scratch: scratch.add_drone(to_lane, moved))
    return leaving.delta + arriving.delta


def on_move_value(drone: Drone, context: EvaluationContext) -> float:
    w = context.weights.move
    gains = on_move_stat_gains(context.abilities_of(drone))
    return (gains.get("attack", 0) * w.on_move_attack_bonus
            + gains.get("speed", 0) * w.on_move_speed_bonus)


def evaluate_move(drone: Drone, from_lane: str, to_lane: str, context: EvaluationContext) -> Evaluation:
    w = context.weights.move
    ev = Evaluation()
    ev.add("Move Cost", -w.base_move_cost)

    leaving = impact_delta(from_lane, context.ai, context.opponent, context,
                           lambda scratch: scratch.remove_drone(drone.id))
    moved = replace(drone, is_exhausted=True)
    arriving = impact_delta(to_lane, context.ai, context.opponent, context,
                            lambda scratch: scratch.add_drone(to_lane, moved))
    ev.add("Leaving Lane", leaving.delta, from_lane)
    ev.add("Arriving Lane", arriving.delta, to_lane)

    destination = arriving.before
    own_status = context.section_status(context.ai, to_lane)
    if own_status in (ShipStatus.DAMAGED, ShipStatus.CRITICAL) and destination < 0:
        ev.add("Defensive Move", w.defensive_move_bonus, f"own section {own_status.value}")

    enemy_status = context.section_status(context.opponent, to_lane)
    if enemy_status in (ShipStatus.DAMAGED, ShipStatus.CRITICAL) and destination > 0:
        ev.add("Offensive Move", w.offensive_move_damaged, f"enemy section {enemy_status.value}")

    gains = on_move_value(drone, context)
    if gains:
        ev.add("OnMove Ability", gains)

    if enemy_status == ShipStatus.CRITICAL and destination > context.weights.deployment.overkill_lane_score:
        ev.add("Overkill Penalty", context.weights.penalties.overkill, "lane already won")

    return ev


class MoveEvaluator(ActionEvaluator):
    """Scores MOVE candidates"""

    def __init__(self):
        super().__init__("Move")

    def can_evaluate(self, candidate: ActionCandidate) -> bool:
        return candidate.action_type == ActionType.MOVE

    def evaluate(self, candidate: ActionCandidate, context: EvaluationContext) -> Evaluation:
        return evaluate_move(candidate.drone, candidate.lane, candidate.to_lane, context)
