"""
Interception Decision Engine

Invoked when the opponent attacks. Given the AI drones already found eligible
to intercept, decides which one (if any) steps in.

Interceptors are tried cheapest first (lowest lane impact). For each one:
1. Opportunity cost: decline if a much bigger blockable threat is still to come
2. Survivability: durability vs the attacker's base damage
3. Survives -> trade tiers by impact ratio; dies -> sacrifice tiers
4. DOGFIGHT interceptors add a counter-damage bonus

The first interceptor that clears its tier is committed. Intercepting does not
exhaust, so there is no budgeting across attacks beyond the opportunity check.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from drone_ai import decision_log
from drone_ai.context import EvaluationContext
from drone_ai.keywords import DOGFIGHT
from drone_ai.models import Drone
from drone_ai.scoring.lane_score import drone_impact
from drone_ai.trace import TraceEntry, render_trace
from drone_ai.weights import INVALID_SCORE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttackContext:
    """The incoming attack: an opponent drone hitting an AI drone or section"""
    attacker: Drone
    target: Any
    target_type: str  # "drone" or "section"
    lane: str

    @property
    def targets_section(self) -> bool:
        return self.target_type == "section"


@dataclass
class InterceptionOption:
    """One interceptor considered for an attack, with its score and reasoning"""
    instigator: str
    target_name: str
    score: float = 0.0
    trace: List[TraceEntry] = field(default_factory=list)
    is_chosen: bool = False
    interceptor: Optional[Drone] = None

    def add(self, tag: str, value: float = 0.0, note: str = ""):
        self.trace.append(TraceEntry(tag, value, note))
        self.score += value

    def reject(self, tag: str, note: str = ""):
        self.trace.append(TraceEntry(tag, INVALID_SCORE, note))
        self.score = INVALID_SCORE

    @property
    def display_text(self) -> str:
        return f"intercept: {self.instigator} -> {self.target_name}"

    def has(self, tag: str) -> bool:
        return any(e.tag == tag for e in self.trace)

    def pairs(self):
        return [(e.tag, e.value) for e in self.trace]

    def rendered_trace(self) -> List[str]:
        return render_trace(self.trace)


@dataclass
class InterceptionDecision:
    interceptor: Optional[Drone]
    log_context: List[InterceptionOption]
    attack: AttackContext

    @property
    def intercepts(self) -> bool:
        return self.interceptor is not None

    @property
    def summary(self) -> str:
        if self.interceptor is None:
            return f"DECLINE: {self.attack.attacker.name} attack in {self.attack.lane}"
        return f"INTERCEPT: {self.interceptor.name} blocks {self.attack.attacker.name}"


@dataclass(frozen=True)
class ThreatDamage:
    base: int          # what an interceptor takes
    ship_threat: int   # what the ship would take, including ship bonus damage


def attack_damage(attack: AttackContext, context: EvaluationContext) -> ThreatDamage:
    stats = context.stats(attack.attacker, attack.lane)
    base = stats.attack or 1
    if attack.targets_section:
        return ThreatDamage(base, base + stats.ship_bonus_damage)
    return ThreatDamage(base, base)


def max_blockable_threat(interceptors: List[Drone], attack: AttackContext, context: EvaluationContext) -> int:
    """
    Largest ship threat among the other ready enemy drones in the lane that
    some interceptor is fast enough to block.
    """
    lane = attack.lane
    interceptor_speeds = [context.stats(i, lane).speed for i in interceptors]
    best = 0
    for drone in context.opponent.drones_in(lane):
        if drone.is_exhausted or drone.id == attack.attacker.id:
            continue
        stats = context.stats(drone, lane)
        threat = (stats.attack or 1) + stats.ship_bonus_damage
        if any(speed > stats.speed for speed in interceptor_speeds):
            best = max(best, threat)
    return best


def protection_value(attack: AttackContext, damage: ThreatDamage, attacker_impact: float,
                     option: InterceptionOption, context: EvaluationContext) -> float:
    w = context.weights.interception
    if not attack.targets_section:
        option.add("Protecting Drone", 0, f"value {attacker_impact:.0f}")
        return attacker_impact

    section = context.section_in_lane(context.ai, attack.lane)
    if section is None:
        value = damage.ship_threat * w.ship_protection_multiplier
        option.add("Protecting Ship", 0, f"value {value:.0f}")
    elif section.allocated_shields > 0:
        value = damage.ship_threat * w.shield_protection_multiplier
        option.add("Protecting Shields", 0, f"value {value:.0f}")
    else:
        value = damage.ship_threat * w.hull_protection_multiplier
        option.add("Protecting Hull", 0, f"value {value:.0f}")
    return value


def _ratio(numerator: float, denominator: float) -> float:
    if denominator > 0:
        return numerator / denominator
    return float('inf') if numerator > 0 else 0.0


def _classify_trade(option: InterceptionOption, survives: bool, protection: float,
                    attacker_impact: float, interceptor_impact: float, context: EvaluationContext) -> bool:
    w = context.weights.interception
    if survives:
        ratio = _ratio(interceptor_impact, attacker_impact)
        if ratio < w.excellent_trade_ratio:
            option.add("Excellent Trade", w.excellent_trade_score, f"ratio {ratio:.2f}")
        elif ratio < w.good_trade_ratio:
            option.add("Good Trade", w.good_trade_score, f"ratio {ratio:.2f}")
        elif protection > interceptor_impact * w.protection_multiplier:
            option.add("Protective", w.protective_score,
                       f"saving {protection:.0f} vs {interceptor_impact:.0f}")
        else:
            option.reject("Poor Value", f"defender {interceptor_impact:.0f} vs protection {protection:.0f}")
            return False
        return True

    ratio = _ratio(protection, interceptor_impact)
    if ratio > w.excellent_sacrifice_ratio:
        option.add("Excellent Sacrifice", w.excellent_sacrifice_score, f"ratio {ratio:.2f}")
    elif ratio > w.good_sacrifice_ratio:
        option.add("Good Sacrifice", w.good_sacrifice_score, f"ratio {ratio:.2f}")
    else:
        option.reject("Poor Sacrifice",
                      f"lose {interceptor_impact:.0f} to save only {protection:.0f} (ratio {ratio:.2f})")
        return False
    return True


def _dogfight_bonus(option: InterceptionOption, interceptor: Drone, attack: AttackContext,
                    context: EvaluationContext):
    if not context.has_keyword(interceptor, DOGFIGHT, attack.lane):
        return
    damage = context.stats(interceptor, attack.lane).attack
    if damage <= 0:
        return
    w = context.weights.interception
    if damage >= attack.attacker.durability:
        option.add("Dogfight Kill", w.dogfight_kill_bonus, f"{damage} dmg kills attacker")
    else:
        option.add("Dogfight Damage", damage * w.dogfight_damage_multiplier, f"{damage} dmg to attacker")


def evaluate_interceptor(interceptor: Drone, attack: AttackContext, damage: ThreatDamage,
                         blockable_threat: int, context: EvaluationContext) -> InterceptionOption:
    w = context.weights.interception
    lane = attack.lane
    option = InterceptionOption(interceptor.name, attack.attacker.name, interceptor=interceptor)

    durability = interceptor.durability
    survives = durability > damage.base
    taken = min(damage.base, durability)
    option.add("Incoming Damage", 0, f"{damage.base} dmg, prevents {damage.ship_threat} ship dmg"
               if attack.targets_section else f"{damage.base} dmg")
    option.add("Durability", 0, f"{durability} ({interceptor.hull}H + {interceptor.current_shields}S)")
    option.add("Survives" if survives else "Dies", 0, f"takes {taken}")

    if blockable_threat > 0:
        limit = damage.ship_threat * w.opportunity_cost_multiplier
        if blockable_threat > limit:
            option.reject("Opportunity Cost", f"save for bigger threat ({blockable_threat} > {limit:.1f})")
            return option
        option.add("No Bigger Threat", 0, f"max {blockable_threat} dmg")

    attacker_impact = drone_impact(attack.attacker, lane, context)
    interceptor_impact = drone_impact(interceptor, lane, context)
    protection = protection_value(attack, damage, attacker_impact, option, context)
    option.add("Impact", 0, f"attacker {attacker_impact:.0f} vs interceptor {interceptor_impact:.0f}")

    if _classify_trade(option, survives, protection, attacker_impact, interceptor_impact, context):
        _dogfight_bonus(option, interceptor, attack, context)
    return option


def decide_interception(interceptors: List[Drone], attack: AttackContext,
                        context: EvaluationContext) -> InterceptionDecision:
    """
    Commit the cheapest interceptor whose trade clears its tier, or decline.

    `context.ai` is the defending side; `context.opponent` owns the attacker.
    """
    options: List[InterceptionOption] = []
    if not interceptors:
        option = InterceptionOption("N/A", attack.attacker.name)
        option.reject("No interceptors available")
        decision = InterceptionDecision(None, [option], attack)
        decision_log.log_decision("interception", decision, context.turn)
        return decision

    damage = attack_damage(attack, context)
    blockable = max_blockable_threat(interceptors, attack, context)
    ordered = sorted(interceptors, key=lambda d: drone_impact(d, attack.lane, context))

    chosen: Optional[Drone] = None
    for interceptor in ordered:
        option = evaluate_interceptor(interceptor, attack, damage, blockable, context)
        options.append(option)
        if option.score > INVALID_SCORE:
            option.is_chosen = True
            chosen = interceptor
            logger.info(f"🛡️ Intercept {attack.attacker.name} with {interceptor.name} (score: {option.score:.0f})")
            break

    if chosen is None:
        logger.info(f"🛡️ Decline interception of {attack.attacker.name} in {attack.lane} "
                    f"(threat {damage.ship_threat} dmg, interceptor would take {damage.base})")

    decision = InterceptionDecision(chosen, options, attack)
    decision_log.log_decision("interception", decision, context.turn)
    return decision
