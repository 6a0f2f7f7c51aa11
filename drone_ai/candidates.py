"""
Candidate Generation

Enumerates every action the AI could take this decision, unscored:

- Deployments: each drone type in the active pool, per lane. A type that
  cannot be afforded at all yields one lane-less candidate that the deploy
  evaluator marks invalid.
- Card plays: one per (card, target), per (card, drone, destination) for
  single-move cards, or once for untargeted cards.
- Attacks on enemy drones and on the ship section in the attacker's lane.
- Moves to adjacent lanes.
- Active ability uses, one per legal target.
"""

import logging
from typing import List, Set, Tuple

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.base import ActionCandidate, ActionType, MoveData, TargetType
from drone_ai.evaluators.deploy_evaluator import check_affordability
from drone_ai.keywords import GUARDIAN, active_abilities, inhibits_movement
from drone_ai.models import (
    LANES, Drone, DroneCardTarget, LaneTarget, SectionTarget, UpgradeTarget, adjacent_lanes,
)
from drone_ai.targeting import (
    ability_targets, card_targets, is_targeted, play_condition_met, target_owner,
)

logger = logging.getLogger(__name__)


def target_type_of(target) -> TargetType:
    if isinstance(target, Drone):
        return TargetType.DRONE
    if isinstance(target, SectionTarget):
        return TargetType.SECTION
    if isinstance(target, LaneTarget):
        return TargetType.LANE
    if isinstance(target, DroneCardTarget):
        return TargetType.DRONE_CARD
    if isinstance(target, UpgradeTarget):
        return TargetType.UPGRADE
    return TargetType.NONE


# ========== Deployment ==========

def generate_deployment_candidates(context: EvaluationContext) -> List[ActionCandidate]:
    candidates = []
    for name in context.ai.active_drone_pool:
        definition = context.definition_of(name)
        if definition is None:
            logger.error(f"⚠️ Drone '{name}' in active pool not found in definitions")
            candidates.append(ActionCandidate(ActionType.DEPLOY, drone_name=name))
            continue
        if check_affordability(definition, context) is not None:
            candidates.append(ActionCandidate(ActionType.DEPLOY, drone_name=name))
            continue
        for lane in LANES:
            candidates.append(ActionCandidate(ActionType.DEPLOY, drone_name=name, lane=lane))
    return candidates


# ========== Card plays ==========

def is_playable(card: Card, context: EvaluationContext) -> bool:
    ai = context.ai
    if ai.energy < card.cost:
        return False
    if card.momentum_cost and ai.momentum < card.momentum_cost:
        return False
    if not play_condition_met(card, context):
        return False
    # untargeted cards other than board-wide ones need a choice the host makes
    if card.targeting is not None and card.targeting.type == "NONE" and card.effect.scope != "ALL":
        return False
    return True


def _filter_card_targets(card: Card, targets: list, context: EvaluationContext) -> list:
    effect_type = card.effect_type
    if effect_type == "HEAL_SHIELDS":
        targets = [t for t in targets if isinstance(t, Drone) and t.current_shields < t.current_max_shields]
    if effect_type == "HEAL_HULL" and card.targeting.type == "SHIP_SECTION":
        targets = [t for t in targets if isinstance(t, SectionTarget) and t.section.hull < t.section.max_hull]
    if effect_type in ("DAMAGE", "DESTROY"):
        opponent_id = context.opponent.player_id
        targets = [t for t in targets if target_owner(t, context) == opponent_id]
    return targets


def _single_move_candidates(card: Card, context: EvaluationContext, seen: Set[Tuple]) -> List[ActionCandidate]:
    candidates = []
    for from_lane, drone in context.ai.ready_drones():
        definition = context.definition_of(drone.name)
        for to_lane in adjacent_lanes(from_lane):
            if definition is not None and definition.max_per_lane:
                if context.ai.count_type_in_lane(drone.name, to_lane) >= definition.max_per_lane:
                    continue
            key = (card.id, drone.id, from_lane, to_lane)
            if key in seen:
                continue
            seen.add(key)
            candidates.append(ActionCandidate(
                ActionType.PLAY_CARD, card=card, lane=from_lane, to_lane=to_lane,
                move=MoveData(drone, from_lane, to_lane),
            ))
    return candidates


def generate_card_candidates(context: EvaluationContext) -> List[ActionCandidate]:
    candidates = []
    seen: Set[Tuple] = set()
    for card in context.ai.hand:
        if not is_playable(card, context):
            continue

        if card.effect_type == "SINGLE_MOVE":
            candidates.extend(_single_move_candidates(card, context, seen))
        elif is_targeted(card):
            targets = _filter_card_targets(card, card_targets(card, context), context)
            for target in targets:
                key = (card.id, target.id, target_owner(target, context))
                if key in seen:
                    continue
                seen.add(key)
                candidates.append(ActionCandidate(
                    ActionType.PLAY_CARD, card=card, target=target, target_type=target_type_of(target),
                ))
        else:
            key = (card.id,)
            if key not in seen:
                seen.add(key)
                candidates.append(ActionCandidate(ActionType.PLAY_CARD, card=card))
    return candidates


# ========== Drone actions ==========

def generate_attack_candidates(context: EvaluationContext) -> List[ActionCandidate]:
    candidates = []
    opponent = context.opponent
    for lane, attacker in context.ai.ready_drones():
        if context.is_jammer(attacker) or attacker.cannot_attack:
            continue
        if context.stats(attacker, lane).attack <= 0:
            continue

        enemies = opponent.drones_in(lane)
        for target in enemies:
            candidates.append(ActionCandidate(
                ActionType.ATTACK, drone=attacker, target=target, target_type=TargetType.DRONE, lane=lane,
            ))

        name = context.section_name_in_lane(opponent.player_id, lane)
        section = opponent.ship_sections.get(name) if name else None
        if section is None or section.hull <= 0:
            continue
        if any(context.has_keyword(d, GUARDIAN, lane) for d in enemies):
            continue
        candidates.append(ActionCandidate(
            ActionType.ATTACK, drone=attacker, target=SectionTarget(name, opponent.player_id, section),
            target_type=TargetType.SECTION, lane=lane,
        ))
    return candidates


def _lane_inhibited(lane: str, context: EvaluationContext) -> bool:
    drones = context.ai.drones_in(lane) + context.opponent.drones_in(lane)
    return any(inhibits_movement(context.abilities_of(d)) for d in drones)


def generate_move_candidates(context: EvaluationContext) -> List[ActionCandidate]:
    candidates = []
    for from_lane, drone in context.ai.ready_drones():
        if drone.cannot_move or _lane_inhibited(from_lane, context):
            continue
        definition = context.definition_of(drone.name)
        for to_lane in adjacent_lanes(from_lane):
            if definition is not None and definition.max_per_lane:
                if context.ai.count_type_in_lane(drone.name, to_lane) >= definition.max_per_lane:
                    continue
            candidates.append(ActionCandidate(ActionType.MOVE, drone=drone, lane=from_lane, to_lane=to_lane))
    return candidates


def generate_ability_candidates(context: EvaluationContext) -> List[ActionCandidate]:
    candidates = []
    energy = context.ai.energy
    for lane, drone in context.ai.ready_drones():
        for ability in active_abilities(context.abilities_of(drone)):
            if ability.energy_cost and energy < ability.energy_cost:
                continue
            for target in ability_targets(ability, drone, lane, context):
                candidates.append(ActionCandidate(
                    ActionType.USE_ABILITY, drone=drone, ability=ability, target=target,
                    target_type=TargetType.DRONE, lane=lane,
                ))
    return candidates


def generate_action_candidates(context: EvaluationContext) -> List[ActionCandidate]:
    candidates = []
    candidates.extend(generate_card_candidates(context))
    candidates.extend(generate_attack_candidates(context))
    candidates.extend(generate_move_candidates(context))
    candidates.extend(generate_ability_candidates(context))
    logger.debug(f"Generated {len(candidates)} action candidates")
    return candidates
