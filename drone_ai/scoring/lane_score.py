"""
Lane Evaluator

Signed advantage score for one lane, positive in favour of `forces`.
Counterfactual deltas score the live board, then a ScratchState copy with a
single mutation, and diff the two.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, NamedTuple, Sequence

from drone_ai.context import EvaluationContext
from drone_ai.models import LANES, BoardReader, Drone, ScratchState, ShipStatus, counterfactual
from drone_ai.weights import Weights

logger = logging.getLogger(__name__)


class LaneStanding(Enum):
    LOSING_BADLY = "losing_badly"
    BALANCED = "balanced"
    WINNING_STRONGLY = "winning_strongly"


class LaneDelta(NamedTuple):
    before: float
    after: float

    @property
    def delta(self) -> float:
        return self.after - self.before

    @property
    def flips_to_even(self) -> bool:
        """Lane goes from behind to level or ahead"""
        return self.before < 0 <= self.after


def drone_impact(drone: Drone, lane: str, context: EvaluationContext) -> float:
    """One drone's contribution to its side's lane strength"""
    w = context.weights.scoring
    stats = context.stats(drone, lane)
    attack_value = stats.attack * w.attack_multiplier
    if drone.is_exhausted:
        attack_value *= w.exhausted_attack_factor
    return (
        attack_value
        + stats.drone_class * w.class_multiplier
        + (stats.hull + stats.current_shields) * w.durability_multiplier
        + stats.ship_bonus_damage * w.attack_multiplier
    )


def _side_power(drones: Sequence[Drone], lane: str, context: EvaluationContext) -> float:
    return sum(drone_impact(d, lane, context) for d in drones)


def _section_term(forces: BoardReader, opposing: BoardReader, lane: str,
                  context: EvaluationContext) -> float:
    w = context.weights.lane
    term = 0.0
    own = context.section_status(forces, lane)
    if own == ShipStatus.DAMAGED:
        term += w.own_section_damaged
    elif own == ShipStatus.CRITICAL:
        term += w.own_section_critical
    enemy = context.section_status(opposing, lane)
    if enemy == ShipStatus.DAMAGED:
        term += w.enemy_section_damaged
    elif enemy == ShipStatus.CRITICAL:
        term += w.enemy_section_critical
    return term


def lane_score(lane: str, forces: BoardReader, opposing: BoardReader,
               context: EvaluationContext) -> float:
    ours = forces.drones_in(lane)
    theirs = opposing.drones_in(lane)
    base = _side_power(ours, lane, context) - _side_power(theirs, lane, context)
    speed = (context.max_speed(ours, lane) - context.max_speed(theirs, lane)) \
        * context.weights.scoring.speed_advantage_multiplier
    return base + speed + _section_term(forces, opposing, lane, context)


def impact_delta(lane: str, forces: BoardReader, opposing: BoardReader,
                 context: EvaluationContext,
                 mutation: Callable[[ScratchState], None],
                 mutate_opposing: bool = False) -> LaneDelta:
    """
    Lane score before and after a hypothetical mutation.

    The mutation runs on a scratch copy of `forces` (or of `opposing` when
    `mutate_opposing` is set); the live boards are never touched.
    """
    before = lane_score(lane, forces, opposing, context)
    if mutate_opposing:
        after = lane_score(lane, forces, counterfactual(opposing, mutation), context)
    else:
        after = lane_score(lane, counterfactual(forces, mutation), opposing, context)
    return LaneDelta(before, after)


def current_lane_scores(context: EvaluationContext) -> Dict[str, float]:
    """AI-perspective score for every lane"""
    return {lane: lane_score(lane, context.ai, context.opponent, context) for lane in LANES}


def classify_lane(score: float, weights: Weights) -> LaneStanding:
    if score < weights.lane.losing_badly:
        return LaneStanding.LOSING_BADLY
    if score > weights.lane.winning_strongly:
        return LaneStanding.WINNING_STRONGLY
    return LaneStanding.BALANCED


def is_dominant(score: float, weights: Weights) -> bool:
    return score > weights.lane.dominance


def lanes_controlled(player: BoardReader, opponent: BoardReader) -> List[str]:
    """Lanes where `player` fields more non-token drones than `opponent`"""
    controlled = []
    for lane in LANES:
        ours = sum(1 for d in player.drones_in(lane) if not d.is_token)
        theirs = sum(1 for d in opponent.drones_in(lane) if not d.is_token)
        if ours > theirs:
            controlled.append(lane)
    return controlled
