"""
Target Enumeration

Lists the legal targets for a card or an active ability from the AI's point
of view. The host's rules engine stays authoritative: when the context carries
a target provider, card targets come from it instead.

Also answers whether a card's play condition is met (lane control checks).
"""

import logging
from typing import List, Optional, Sequence, Tuple

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Ability, Card, CardTargeting, Condition, DroneDefinition
from drone_ai.models import (
    LANES, BoardReader, Drone, DroneCardTarget, LaneTarget, PlayerState, SectionTarget, UpgradeTarget,
)
from drone_ai.scoring.lane_score import lanes_controlled

logger = logging.getLogger(__name__)


def is_targeted(card: Card) -> bool:
    return card.targeting is not None and card.targeting.type != "NONE"


def _boards(affinity: str, context: EvaluationContext) -> Tuple[PlayerState, ...]:
    if affinity == "ENEMY":
        return (context.opponent,)
    if affinity == "FRIENDLY":
        return (context.ai,)
    return (context.ai, context.opponent)


def _passes_custom(drone: Drone, custom: Sequence[str]) -> bool:
    for restriction in custom:
        if restriction == "EXHAUSTED" and not drone.is_exhausted:
            return False
        if restriction == "READY" and drone.is_exhausted:
            return False
        if restriction == "MARKED" and not drone.is_marked:
            return False
        if restriction == "NOT_MARKED" and drone.is_marked:
            return False
        if restriction == "DAMAGED_HULL" and drone.hull >= drone.max_hull:
            return False
        if restriction == "NOT_TOKEN" and drone.is_token:
            return False
    return True


def _drone_targets(targeting: CardTargeting, context: EvaluationContext) -> List[Drone]:
    targets = []
    for board in _boards(targeting.affinity, context):
        for lane, drone in board.iter_drones():
            if not _passes_custom(drone, targeting.custom):
                continue
            f = targeting.affected_filter
            if f is not None and not f.matches(context.stat_value(drone, f.stat, lane)):
                continue
            targets.append(drone)
    return targets


def _section_targets(targeting: CardTargeting, context: EvaluationContext) -> List[SectionTarget]:
    targets = []
    for board in _boards(targeting.affinity, context):
        names = context.placed_sections.get(board.player_id) or tuple(board.ship_sections)
        for name in names:
            section = board.ship_sections.get(name)
            if section is not None:
                targets.append(SectionTarget(name, board.player_id, section))
    return targets


def remaining_upgrade_slots(player: BoardReader, definition: DroneDefinition) -> int:
    used = sum(u.slots for u in player.upgrades_for(definition.name))
    return definition.upgrade_slots - used


def _drone_card_targets(context: EvaluationContext) -> List[DroneCardTarget]:
    """Drone types in the AI's pool that still have a free upgrade slot"""
    ai = context.ai
    targets = []
    for name in ai.active_drone_pool:
        definition = context.definition_of(name)
        if definition is None:
            logger.warning(f"⚠️ Drone '{name}' in active pool has no definition")
            continue
        if remaining_upgrade_slots(ai, definition) > 0:
            targets.append(DroneCardTarget(name, ai.player_id))
    return targets


def _upgrade_targets(targeting: CardTargeting, context: EvaluationContext) -> List[UpgradeTarget]:
    affinity = targeting.affinity if targeting.affinity != "ANY" else "ENEMY"
    targets = []
    for board in _boards(affinity, context):
        for upgrades in board.applied_upgrades.values():
            targets.extend(UpgradeTarget(upgrade, board.player_id) for upgrade in upgrades)
    return targets


def valid_card_targets(card: Card, context: EvaluationContext) -> list:
    targeting = card.targeting
    if targeting is None:
        return []
    kind = targeting.type
    if kind == "DRONE":
        return _drone_targets(targeting, context)
    if kind == "LANE":
        return [LaneTarget(lane, board.player_id)
                for board in _boards(targeting.affinity, context) for lane in LANES]
    if kind == "SHIP_SECTION":
        return _section_targets(targeting, context)
    if kind == "DRONE_CARD":
        return _drone_card_targets(context)
    if kind == "APPLIED_UPGRADE":
        return _upgrade_targets(targeting, context)
    if kind != "NONE":
        logger.warning(f"⚠️ Unknown targeting type {kind} on {card.name}")
    return []


def card_targets(card: Card, context: EvaluationContext) -> list:
    """Targets for `card`, from the host's provider when one is attached"""
    if context.target_provider is not None:
        return list(context.target_provider(card, context) or ())
    return valid_card_targets(card, context)


def target_owner(target, context: EvaluationContext) -> str:
    if isinstance(target, Drone):
        return context.owner_of(target).player_id
    return getattr(target, "owner", "")


def ability_targets(ability: Ability, source: Drone, source_lane: str,
                    context: EvaluationContext) -> List[Drone]:
    """Targets for an ACTIVE ability used by `source` from `source_lane`"""
    targeting = ability.targeting
    if targeting is None:
        return []
    if targeting.type == "SELF":
        return [source]

    board = context.ai if targeting.affinity == "FRIENDLY" else context.opponent
    if targeting.location == "SAME_LANE":
        lanes = [source_lane]
    elif targeting.location == "OTHER_LANES":
        lanes = [lane for lane in LANES if lane != source_lane]
    else:
        lanes = list(LANES)

    damaged_only = "DAMAGED_HULL" in targeting.restrictions
    return [
        drone for lane in lanes for drone in board.drones_in(lane)
        if not damaged_only or drone.hull < drone.max_hull
    ]


def _lane_condition_met(condition: Condition, context: EvaluationContext) -> bool:
    controlled = lanes_controlled(context.ai, context.opponent)
    kind = condition.type
    if kind == "CONTROL_LANES":
        return all(lane in controlled for lane in condition.lanes)
    if kind == "CONTROL_LANE_EMPTY":
        return any(not context.opponent.drones_in(lane) for lane in controlled)
    if kind == "LANE_CONTROL_COMPARISON":
        theirs = lanes_controlled(context.opponent, context.ai)
        return len(controlled) > len(theirs)
    logger.warning(f"⚠️ Unknown play condition {kind}")
    return False


PLAY_CONDITION_TYPES = ("CONTROL_LANES", "CONTROL_LANE_EMPTY", "LANE_CONTROL_COMPARISON")


def play_condition_met(card: Card, context: EvaluationContext) -> bool:
    """Lane-control requirements on the card itself or on its effect"""
    if card.play_condition is not None and not _lane_condition_met(card.play_condition, context):
        return False
    condition: Optional[Condition] = card.effect.condition
    if condition is not None and condition.type in PLAY_CONDITION_TYPES:
        return _lane_condition_met(condition, context)
    return True
