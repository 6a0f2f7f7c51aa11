"""
Target Value Scorer

One answer to "how good is it to damage or destroy this drone", shared by
drone attacks, damage and destroy cards, and the adjustment passes.

Tiers are summed in a fixed order and each tier always leaves a trace entry,
with value 0 when it does not apply:

1. Jammer blocking     - a ready Jammer shielding lane-mates from card effects
2. Interception blocker - target fast enough to intercept attackers in lane
3. Readiness           - target can still act this round
4. Threat              - class tier, attack tier, dangerous abilities
5. Efficiency          - lethal, piercing through shields
6. Damage type         - ion / kinetic / shield-breaker synergy or waste
"""

import logging
from typing import Optional

from drone_ai.context import EvaluationContext
from drone_ai.keywords import DEFENDER, GUARDIAN
from drone_ai.models import BoardReader, DamageType, Drone
from drone_ai.trace import Evaluation
from drone_ai.weights import OVERWHELMING_DAMAGE

logger = logging.getLogger(__name__)

TIER_JAMMER = "Jammer Blocking"
TIER_INTERCEPTION = "Interception Blocker"
TIER_READY = "Ready Target"
TIER_CLASS = "Class Threat"
TIER_ATTACK = "Attack Threat"
TIER_ABILITY = "Ability Threat"
TIER_LETHAL = "Lethal"
TIER_PIERCING = "Piercing Bypass"
TIER_DAMAGE_TYPE = "Damage Type"


def _jammer_blocking(target: Drone, owner: BoardReader, lane: Optional[str],
                     context: EvaluationContext) -> float:
    if not lane or not target.is_ready or not context.is_jammer(target):
        return 0
    w = context.weights.target
    mates = [d for d in owner.drones_in(lane) if d.id != target.id]
    if not mates:
        return 0
    protected = sum(
        context.stats(d, lane).drone_class * w.jammer_protected_class_multiplier
        + (w.jammer_protected_ready_bonus if d.is_ready else 0)
        for d in mates
    )
    return w.jammer_blocking_base + protected


def _interception_blocking(target: Drone, attackers: BoardReader, lane: Optional[str],
                           context: EvaluationContext) -> float:
    if not lane or not target.is_ready or context.is_jammer(target):
        return 0
    target_speed = context.stats(target, lane).speed
    blocked = [
        d for d in attackers.drones_in(lane)
        if d.is_ready and context.stats(d, lane).speed <= target_speed
    ]
    return len(blocked) * context.weights.target.interception_blocker_bonus


def _class_bonus(drone_class: int, context: EvaluationContext) -> float:
    bonuses = context.weights.target.class_bonuses
    if drone_class < 0 or not bonuses:
        return 0
    return bonuses[min(drone_class, len(bonuses) - 1)]


def _attack_bonus(attack: int, context: EvaluationContext) -> float:
    w = context.weights.target
    if attack >= w.high_attack_value:
        return w.high_attack_bonus
    if attack >= w.med_attack_value:
        return w.med_attack_bonus
    return w.low_attack_bonus


def damage_type_term(shields: int, damage: int, damage_type: DamageType,
                     context: EvaluationContext) -> float:
    w = context.weights.damage_types
    if damage_type == DamageType.SHIELD_BREAKER:
        if shields >= w.shield_breaker_high_shield_value:
            return w.shield_breaker_high_shield_bonus
        if shields <= w.shield_breaker_low_shield_value:
            return w.shield_breaker_low_shield_penalty
        return 0
    if damage_type == DamageType.ION:
        if shields <= 0:
            return w.ion_no_shields_penalty
        value = min(damage, shields) * w.ion_per_shield_value
        if damage >= shields:
            value += w.ion_full_strip_bonus
        value += max(0, damage - shields) * w.ion_wasted_penalty
        return value
    if damage_type == DamageType.KINETIC:
        if shields > 0:
            return w.kinetic_blocked_penalty
        return w.kinetic_unshielded_bonus
    return 0


def target_value(target: Drone, context: EvaluationContext,
                 damage: int = OVERWHELMING_DAMAGE,
                 piercing: bool = False,
                 damage_type: Optional[DamageType] = None,
                 lane: Optional[str] = None,
                 attacking_player: Optional[BoardReader] = None) -> Evaluation:
    """
    Score the value of hitting `target` with `damage`.

    Args:
        target: Drone being damaged or destroyed
        context: Evaluation context
        damage: Damage amount; OVERWHELMING_DAMAGE means guaranteed destruction
        piercing: Damage ignores shields
        damage_type: Optional non-default damage type
        lane: Target's lane, enables the jammer and interception tiers
        attacking_player: Side doing the damage (defaults to the target's opponent)

    Returns:
        Evaluation with one entry per tier
    """
    w = context.weights.target
    owner = context.owner_of(target)
    attackers = attacking_player if attacking_player is not None else context.other(owner.player_id)
    damage_type = DamageType.parse(damage_type) if damage_type is not None else None
    if damage_type == DamageType.PIERCING:
        piercing = True

    stats = context.stats(target, lane)
    shields = target.current_shields
    ev = Evaluation()

    ev.add(TIER_JAMMER, _jammer_blocking(target, owner, lane, context))
    ev.add(TIER_INTERCEPTION, _interception_blocking(target, attackers, lane, context))
    ev.add(TIER_READY, w.ready_target_bonus if target.is_ready else 0)

    ev.add(TIER_CLASS, _class_bonus(stats.drone_class, context), f"class {stats.drone_class}")
    ev.add(TIER_ATTACK, _attack_bonus(stats.attack, context), f"attack {stats.attack}")
    ability_bonus = 0
    notes = []
    if GUARDIAN in stats.keywords:
        ability_bonus += w.guardian_ability_bonus
        notes.append("guardian")
    if DEFENDER in stats.keywords:
        ability_bonus += w.defender_ability_bonus
        notes.append("defender")
    if stats.ship_bonus_damage > 0:
        ability_bonus += w.anti_ship_ability_bonus
        notes.append("anti-ship")
    ev.add(TIER_ABILITY, ability_bonus, ", ".join(notes))

    durability = target.hull + (0 if piercing else shields)
    ev.add(TIER_LETHAL, w.lethal_bonus if damage >= durability else 0)
    ev.add(TIER_PIERCING, w.piercing_bypass_bonus if piercing and shields > 0 else 0)

    type_value = 0
    if damage_type in (DamageType.ION, DamageType.KINETIC, DamageType.SHIELD_BREAKER):
        type_value = damage_type_term(shields, damage, damage_type, context)
    ev.add(TIER_DAMAGE_TYPE, type_value, damage_type.value if damage_type else "")

    return ev
