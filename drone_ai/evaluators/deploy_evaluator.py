"""
Deploy Evaluator

Handles deployment placement:
- Affordability (resources, copies, type limit, CPU limit, card energy reserve)
- Per-lane legality (max per lane, ion stacking)
- Lane impact of adding the drone, measured on a scratch board
- Strategic bonuses keyed to the lane's current standing
"""

import logging
from typing import Optional

from drone_ai.context import EvaluationContext
from drone_ai.definitions import DroneDefinition
from drone_ai.evaluators.base import ActionCandidate, ActionEvaluator, ActionType
from drone_ai.keywords import (
    ALWAYS_INTERCEPTS, GUARDIAN, has_on_deploy_mark, has_round_start_threat, is_anti_ship,
    keywords_of,
)
from drone_ai.models import DamageType, Drone, ShipStatus
from drone_ai.scoring.lane_score import (
    LaneStanding, classify_lane, impact_delta,
)
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)

TEMP_DRONE_ID = "temp"


def deployment_resources(context: EvaluationContext) -> int:
    ai = context.ai
    budget = ai.initial_deployment_budget if context.turn == 1 else ai.deployment_budget
    return budget + ai.energy


def reserved_energy(context: EvaluationContext) -> int:
    """Energy kept back for the most expensive card in hand"""
    return max((card.cost for card in context.ai.hand), default=0)


def drone_from_definition(definition: DroneDefinition, owner: str, drone_id: str = TEMP_DRONE_ID) -> Drone:
    return Drone(
        id=drone_id,
        name=definition.name,
        owner=owner,
        drone_class=definition.drone_class,
        attack=definition.attack,
        speed=definition.speed,
        hull=definition.hull,
        max_hull=definition.hull,
        current_shields=definition.shields,
        current_max_shields=definition.shields,
        damage_type=definition.damage_type,
        is_token=definition.is_token,
    )


def check_affordability(definition: DroneDefinition, context: EvaluationContext) -> Optional[str]:
    """Reason the drone cannot be deployed at all this turn, or None"""
    ai = context.ai
    cost = definition.drone_class

    if deployment_resources(context) < cost:
        return "Insufficient total resources"

    availability = ai.drone_availability.get(definition.name)
    if availability is not None and availability.ready_count <= 0:
        if availability.rebuilding_count > 0:
            return f"No copies available ({availability.rebuilding_count} rebuilding)"
        return "No copies available"

    if ai.deployed_drone_counts.get(definition.name, 0) >= definition.limit:
        return "Deployment limit reached"

    if ai.non_token_drone_count() >= ai.cpu_limit:
        return "CPU limit reached"

    budget = ai.initial_deployment_budget if context.turn == 1 else ai.deployment_budget
    energy_cost = cost - min(budget, cost)
    reserve = reserved_energy(context)
    if ai.energy - energy_cost < reserve:
        return f"Reserves energy for cards (needs {reserve})"
    return None


def _ion_stacking_reason(definition: DroneDefinition, lane: str, context: EvaluationContext) -> Optional[str]:
    if definition.damage_type != DamageType.ION:
        return None
    ai_drones = context.ai.drones_in(lane)

    def is_ion(drone: Drone) -> bool:
        known = context.definition_of(drone.name)
        return (known.damage_type if known else drone.damage_type) == DamageType.ION

    existing_ion = sum(1 for d in ai_drones if is_ion(d))
    if existing_ion < 1:
        return None

    worthwhile = sum(1 for d in context.opponent.drones_in(lane) if d.current_shields >= 2)
    section = context.section_in_lane(context.opponent, lane)
    if section is not None and section.allocated_shields >= 2:
        worthwhile += 1
    has_hull_dealer = any(not is_ion(d) and d.attack > 0 for d in ai_drones)

    if not has_hull_dealer:
        return "Ion without follow-up: no hull damage dealers in lane"
    if worthwhile <= existing_ion:
        return f"Ion stacking: {existing_ion} Ion drone(s) for only {worthwhile} target(s) with 2+ shields"
    return None


def _strategic_bonus(definition: DroneDefinition, temp: Drone, lane: str, current: float,
                     context: EvaluationContext) -> float:
    w = context.weights.deployment
    standing = classify_lane(current, context.weights)
    stats = context.stats(temp, lane)
    keywords = keywords_of(definition.abilities)
    bonus = 0.0
    if standing == LaneStanding.LOSING_BADLY:
        if stats.speed >= w.fast_drone_speed:
            bonus += w.fast_drone_defensive
        if ALWAYS_INTERCEPTS in keywords or GUARDIAN in keywords:
            bonus += w.guardian_defensive
    elif standing == LaneStanding.WINNING_STRONGLY:
        if stats.attack >= w.high_attack_value:
            bonus += w.high_attack_offensive
        if is_anti_ship(definition.abilities):
            bonus += w.anti_ship_offensive
    elif definition.drone_class <= w.cheap_drone_max_class:
        bonus += w.cheap_drone_balanced
    return bonus


def evaluate_deployment(definition: DroneDefinition, lane: str, context: EvaluationContext) -> Evaluation:
    """
    Score deploying one drone type into one lane.

    Assumes the drone passed check_affordability(). Lane-level rule
    violations come back invalid with the reason in the trace.
    """
    ev = Evaluation()
    w = context.weights.deployment

    if definition.max_per_lane:
        count = context.ai.count_type_in_lane(definition.name, lane)
        if count >= definition.max_per_lane:
            return ev.invalidate(f"Max per lane reached ({count}/{definition.max_per_lane})")

    ion_reason = _ion_stacking_reason(definition, lane, context)
    if ion_reason:
        return ev.invalidate(ion_reason)

    temp = drone_from_definition(definition, context.ai.player_id)
    delta = impact_delta(lane, context.ai, context.opponent, context,
                         lambda scratch: scratch.add_drone(lane, temp))
    current, projected = delta.before, delta.after

    ev.info("Lane Score", f"{current:.0f}")
    ev.info("Projected", f"{projected:.0f}")
    ev.add("Impact", projected - current)
    ev.add("Strategic Bonus", _strategic_bonus(definition, temp, lane, current, context),
           classify_lane(current, context.weights).value)

    stabilize = 0
    if current < 0 <= projected:
        stabilize = context.rng.randint(w.stabilization_min, w.stabilization_max)
    ev.add("Stabilize", stabilize)

    dominance = 0
    if projected > context.weights.lane.dominance >= current:
        dominance = context.rng.randint(w.dominance_min, w.dominance_max)
    ev.add("Dominance", dominance)

    if has_on_deploy_mark(definition.abilities):
        if any(not d.is_marked for d in context.opponent.drones_in(lane)):
            ev.add("OnDeploy Mark", w.mark_enemy_value)

    if has_round_start_threat(definition.abilities):
        ev.add("Threat Drone", context.weights.threat_drones.round_start_deploy_bonus)

    status = context.section_status(context.opponent, lane)
    if status in (ShipStatus.DAMAGED, ShipStatus.CRITICAL) and current > w.overkill_lane_score:
        ev.add("Overkill Penalty", context.weights.penalties.overkill, status.value)

    return ev


class DeployEvaluator(ActionEvaluator):
    """Scores DEPLOY candidates"""

    def __init__(self):
        super().__init__("Deploy")

    def can_evaluate(self, candidate: ActionCandidate) -> bool:
        return candidate.action_type == ActionType.DEPLOY

    def evaluate(self, candidate: ActionCandidate, context: EvaluationContext) -> Evaluation:
        definition = context.definition_of(candidate.drone_name)
        if definition is None:
            logger.error(f"⚠️ Drone '{candidate.drone_name}' not found in definitions")
            return Evaluation().invalidate(f"Unknown drone type {candidate.drone_name}")

        reason = check_affordability(definition, context)
        if reason:
            return Evaluation().invalidate(reason)
        if candidate.lane is None:
            return Evaluation()
        return evaluate_deployment(definition, candidate.lane, context)
