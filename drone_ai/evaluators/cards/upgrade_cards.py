"""
Upgrade Card Evaluator

Handles MODIFY_DRONE_BASE: permanent upgrades applied to a drone type in the
active pool rather than to a single drone on the board.

Upgrades are prized: the base value is substantial and grows with how many
copies of the type are deployed (and ready) now, how many more can still be
deployed, and how scarce the type's upgrade slots are.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card, DroneDefinition
from drone_ai.evaluators.cards.common import add_go_again, charge_cost
from drone_ai.models import DroneCardTarget, PlayerState
from drone_ai.targeting import remaining_upgrade_slots
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def deployed_count(player: PlayerState, drone_name: str) -> int:
    return sum(1 for d in player.all_drones() if d.name == drone_name)


def ready_count(player: PlayerState, drone_name: str) -> int:
    return sum(1 for _, d in player.ready_drones() if d.name == drone_name)


def remaining_capacity(player: PlayerState, definition: DroneDefinition) -> int:
    """Copies of the type that can still be deployed, counting limit upgrades"""
    limit = definition.limit + sum(
        u.mod.value for u in player.upgrades_for(definition.name)
        if u.mod is not None and u.mod.stat == "limit"
    )
    return limit - deployed_count(player, definition.name)


def has_upgraded_keyword(player: PlayerState, drone_name: str, keyword: str) -> bool:
    return any(u.keyword == keyword for u in player.upgrades_for(drone_name))


def evaluate_modify_drone_base(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    ev = Evaluation()
    if not isinstance(target, DroneCardTarget) or not target.name:
        return ev.invalidate("No valid target")
    definition = context.definition_of(target.name)
    if definition is None:
        logger.warning(f"⚠️ Upgrade target '{target.name}' not found in definitions")
        return ev.invalidate(f"Invalid drone type: {target.name}")

    w = context.weights.upgrades
    ai = context.ai
    effect = card.effect
    mod = effect.mod
    stat = mod.stat if mod is not None else "ability"
    value = mod.value if mod is not None else 0

    if stat == "attack":
        ev.add("Upgrade", w.attack_base * value, f"+{value} attack")
        if definition.speed >= w.high_speed_value:
            ev.add("Fast attacker", w.attack_on_high_speed)
    elif stat == "speed":
        ev.add("Upgrade", w.speed_base * value, f"+{value} speed")
        if definition.attack >= w.high_attack_value:
            ev.add("Speedy heavy-hitter", w.speed_on_high_attack)
    elif stat == "shields":
        ev.add("Upgrade", w.shields_base * value, f"+{value} shields")
    elif stat == "limit":
        ev.add("Upgrade", w.limit_base * value, f"+{value} limit")
    elif stat == "cost":
        ev.add("Upgrade", w.cost_reduction_base * abs(value), f"{value} cost")
    elif stat == "ability" and effect.keyword:
        if has_upgraded_keyword(ai, target.name, effect.keyword):
            return ev.invalidate("Drone already has this keyword from upgrade")
        ev.add("Upgrade", w.ability_grant_base, f"grant {effect.keyword}")
        if effect.keyword == "PIERCING" and definition.attack >= w.high_attack_value:
            ev.add("Piercing on heavy-hitter", w.piercing_on_high_attack)
    else:
        logger.debug(f"Unknown upgrade stat '{stat}' on {card.name}")
        ev.add("Upgrade", w.unknown_stat_base, f"unknown stat {stat}")

    drone_class = definition.drone_class or 1
    ev.add("Drone Class", drone_class * w.drone_class_multiplier, f"class {drone_class}")

    deployed = deployed_count(ai, target.name)
    if deployed > 0:
        ev.add("Deployed", deployed * w.deployed_drone_bonus, f"{deployed} on board")
        ready = ready_count(ai, target.name)
        if ready > 0:
            ev.add("Ready", ready * w.ready_drone_bonus, f"{ready} ready")
    else:
        ev.add("No deployed drones", w.no_deployed_penalty)

    capacity = remaining_capacity(ai, definition)
    if capacity > 0:
        ev.add("Future deployments", capacity * w.remaining_limit_multiplier, f"{capacity} more")
    elif stat != "limit":
        ev.add("At deployment cap", w.low_remaining_limit_penalty)

    if remaining_upgrade_slots(ai, definition) == 1:
        ev.add("Last upgrade slot", w.upgrade_slots_scarcity)

    charge_cost(ev, card, context)
    if effect.go_again:
        add_go_again(ev, context)
    return ev
