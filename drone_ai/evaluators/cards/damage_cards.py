"""
Damage Card Evaluators

Handles DESTROY, DAMAGE, OVERFLOW_DAMAGE, SPLASH_DAMAGE, DAMAGE_SCALING and
DESTROY_UPGRADE effects. Every drone hit is priced by the target value
scorer so cards and attacks rank targets the same way.
"""

import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Card
from drone_ai.evaluators.cards.common import charge_cost, drone_lane, matching_drones
from drone_ai.models import Drone, LaneTarget, UpgradeTarget
from drone_ai.scoring.target_value import target_value
from drone_ai.trace import Evaluation

logger = logging.getLogger(__name__)


def _lane_value(drones, context: EvaluationContext, lane: str, **hit) -> float:
    return sum(target_value(d, context, lane=lane, **hit).score for d in drones)


def evaluate_destroy(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    ev = Evaluation()
    scope = card.effect.scope

    if scope == "SINGLE":
        if not isinstance(target, Drone):
            return ev.invalidate("No valid target")
        ev.merge(target_value(target, context, lane=drone_lane(target, context)))

    elif scope == "FILTERED":
        if not isinstance(target, LaneTarget):
            return ev.invalidate("No valid target")
        stat_filter = card.targeting.affected_filter if card.targeting else None
        hits = matching_drones(context.opponent, target.lane, stat_filter, context)
        ev.add("Filtered Targets", _lane_value(hits, context, target.lane), f"{len(hits)} drones")

    elif scope == "LANE":
        if not isinstance(target, LaneTarget):
            return ev.invalidate("No valid target")
        lane = target.lane
        enemy = _lane_value(context.opponent.drones_in(lane), context, lane)
        # friendly losses priced from the opponent's side of the board
        friendly = _lane_value(context.ai.drones_in(lane), context.swapped(), lane)
        ev.add("Enemy Losses", enemy)
        ev.add("Friendly Losses", -friendly)

    else:
        logger.warning(f"⚠️ Unhandled DESTROY scope {scope} on {card.name}")
        return ev

    return charge_cost(ev, card, context)


def evaluate_damage(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    effect = card.effect
    ev = Evaluation()
    hit = dict(damage=effect.value, piercing=effect.is_piercing, damage_type=effect.damage_type)

    if effect.scope == "FILTERED":
        if not isinstance(target, LaneTarget):
            return ev.invalidate("No valid target")
        stat_filter = card.targeting.affected_filter if card.targeting else None
        hits = matching_drones(context.opponent, target.lane, stat_filter, context)
        ev.add("Filtered Damage", _lane_value(hits, context, target.lane, **hit), f"{len(hits)} targets")
        if len(hits) > 1:
            ev.add("Multi-Hit", len(hits) * context.weights.cards.multi_hit_bonus_per_target)
    else:
        if not isinstance(target, Drone):
            return ev.invalidate("No valid target")
        ev.merge(target_value(target, context, lane=drone_lane(target, context), **hit))

    return charge_cost(ev, card, context)


def evaluate_overflow_damage(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    """Damage that carries into the ship section once the drone dies"""
    if not isinstance(target, Drone):
        return Evaluation().invalidate("No valid target")
    effect = card.effect
    piercing = effect.is_piercing
    ev = Evaluation()

    total = effect.value
    if target.is_marked and effect.marked_bonus:
        total += effect.marked_bonus
        ev.info("Marked", f"+{effect.marked_bonus} damage")

    to_kill = target.hull if piercing else target.hull + target.current_shields
    ev.merge(target_value(target, context, damage=total, piercing=piercing,
                          lane=drone_lane(target, context)))
    overflow = total - to_kill if total >= to_kill else 0
    if overflow > 0:
        ev.add("Overflow", overflow * context.weights.cards.overflow_ship_damage_multiplier,
               f"{overflow} to ship")
    return charge_cost(ev, card, context)


def evaluate_splash_damage(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    """Primary target plus its neighbours in lane order"""
    if not isinstance(target, Drone):
        return Evaluation().invalidate("No valid target")
    effect = card.effect
    lane = context.lane_of(target.id, context.opponent)
    if lane is None:
        return Evaluation().invalidate("Target not on board")
    ev = Evaluation()

    bonus = 0
    condition = effect.condition
    if condition is not None and condition.type == "FRIENDLY_COUNT_IN_LANE":
        friendly = len(context.ai.drones_in(lane))
        if friendly >= condition.threshold:
            bonus = condition.bonus_damage
            ev.info("Bonus", f"+{bonus} damage ({friendly} friendly drones)")

    enemies = context.opponent.drones_in(lane)
    index = next(i for i, d in enumerate(enemies) if d.id == target.id)
    adjacent = [enemies[i] for i in (index - 1, index + 1) if 0 <= i < len(enemies)]

    ev.merge(target_value(target, context, damage=effect.value + bonus, lane=lane))
    for drone in adjacent:
        splash = target_value(drone, context, damage=effect.splash_damage + bonus, lane=lane)
        ev.add("Splash", splash.score, drone.name)

    hits = 1 + len(adjacent)
    if hits > 1:
        ev.add("Multi-Hit", hits * context.weights.cards.multi_hit_bonus_per_target, f"{hits} targets")
    return charge_cost(ev, card, context)


def evaluate_damage_scaling(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    """Damage equal to the AI's ready drones in the target's lane"""
    if not isinstance(target, Drone):
        return Evaluation().invalidate("No valid target")
    lane = context.lane_of(target.id, context.opponent)
    ready = sum(1 for d in context.ai.drones_in(lane) if d.is_ready) if lane else 0
    ev = Evaluation()
    ev.info("Scaling Damage", f"{ready} ready friendly drones")
    ev.merge(target_value(target, context, damage=ready, lane=lane))
    return charge_cost(ev, card, context)


def evaluate_destroy_upgrade(card: Card, target, context: EvaluationContext, move=None) -> Evaluation:
    if not isinstance(target, UpgradeTarget):
        return Evaluation().invalidate("No valid target")
    w = context.weights.cards
    upgrade = target.upgrade
    ev = Evaluation()
    if upgrade.mod is not None:
        per_point = {
            "attack": w.upgrade_attack_value,
            "speed": w.upgrade_speed_value,
        }.get(upgrade.mod.stat, w.upgrade_other_value)
        ev.add("Upgrade Destroyed", upgrade.mod.value * per_point, f"{upgrade.mod.stat} +{upgrade.mod.value}")
    elif upgrade.keyword:
        ev.add("Upgrade Destroyed", w.upgrade_keyword_value, upgrade.keyword)
    else:
        ev.add("Upgrade Destroyed", w.upgrade_default_value)
    return charge_cost(ev, card, context)
