"""
Weights and Thresholds

Every numeric weight the scoring engine uses, grouped by concern. A `Weights`
instance is immutable and is handed to the evaluation context explicitly, so
alternate tuning profiles (difficulty levels) are just different instances.

Profiles are JSON files of per-group overrides:

    {
      "name": "hard",
      "version": "1.0.0",
      "weights": {
        "decision": {"action_pool_range": 8},
        "penalties": {"overkill": -200}
      }
    }

Usage:
    from drone_ai.weights import load_profile

    weights = load_profile()            # DRONE_AI_PROFILE or configs/normal.json
    weights = load_profile('configs/hard.json')

Environment:
    DRONE_AI_PROFILE - Path to JSON profile (default: configs/normal.json)
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# Sentinel score for rule-violating / unaffordable candidates
INVALID_SCORE = -999

# Damage amount meaning "guaranteed destruction" for target scoring
OVERWHELMING_DAMAGE = 999

DEFAULT_PROFILE_PATH = Path(__file__).parent.parent / "configs" / "normal.json"


@dataclass(frozen=True)
class ScoringWeights:
    attack_multiplier: float = 4
    class_multiplier: float = 2
    durability_multiplier: float = 0.5
    speed_advantage_multiplier: float = 8
    cost_penalty_multiplier: float = 4
    resource_value_multiplier: float = 8
    piercing_shield_multiplier: float = 8
    exhausted_attack_factor: float = 0.5


@dataclass(frozen=True)
class LaneWeights:
    losing_badly: float = -15
    winning_strongly: float = 15
    dominance: float = 20
    own_section_damaged: float = -20
    own_section_critical: float = -40
    enemy_section_damaged: float = 15
    enemy_section_critical: float = 30


@dataclass(frozen=True)
class DecisionThresholds:
    min_deploy_score: float = 5
    min_action_score: float = 0
    action_pool_range: float = 20
    deploy_pool_range: float = 0


@dataclass(frozen=True)
class DeploymentBonuses:
    fast_drone_defensive: float = 15
    fast_drone_speed: int = 4
    guardian_defensive: float = 20
    high_attack_offensive: float = 15
    high_attack_value: int = 4
    anti_ship_offensive: float = 20
    cheap_drone_balanced: float = 10
    cheap_drone_max_class: int = 1
    stabilization_min: int = 10
    stabilization_max: int = 30
    dominance_min: int = 10
    dominance_max: int = 30
    mark_enemy_value: float = 15
    overkill_lane_score: float = 5


@dataclass(frozen=True)
class AttackBonuses:
    favorable_trade: float = 20
    lane_impact_weight: float = 0.5
    lane_flip_bonus: float = 0.5
    growth_multiplier: float = 8
    no_shields: float = 40
    shield_break: float = 35
    high_attack: float = 10
    high_attack_value: int = 3
    ship_damage_trigger: float = 25


@dataclass(frozen=True)
class Penalties:
    overkill: float = -150
    guardian_attack_risk: float = -200
    interception_risk: float = -80
    anti_ship_attacking_drone: float = -100
    interception_coverage_multiplier: float = -5
    interception_coverage_min: float = -10
    retaliate_lethal: float = -50
    retaliate_damage_multiplier: float = -5


@dataclass(frozen=True)
class InterceptionWeights:
    excellent_trade_ratio: float = 0.3
    good_trade_ratio: float = 0.7
    protection_multiplier: float = 1.5
    excellent_sacrifice_ratio: float = 2.0
    good_sacrifice_ratio: float = 1.3
    opportunity_cost_multiplier: float = 1.5
    excellent_trade_score: float = 90
    good_trade_score: float = 70
    protective_score: float = 50
    excellent_sacrifice_score: float = 60
    good_sacrifice_score: float = 45
    unchecked_threat_bonus: float = 100
    interceptor_removal_card_premium: float = 1.15
    shield_protection_multiplier: float = 5
    hull_protection_multiplier: float = 15
    ship_protection_multiplier: float = 10
    dogfight_kill_bonus: float = 30
    dogfight_damage_multiplier: float = 5


@dataclass(frozen=True)
class DefenseUrgency:
    # Fraction of total ship hull lost at which each tier starts
    tier_thresholds: Tuple[float, ...] = (0.20, 0.40, 0.55)
    tier_multipliers: Tuple[float, ...] = (1.0, 2.0, 4.0, 8.0)
    base_damage_penalty: float = -3
    soft_threat_factor: float = 0.7


@dataclass(frozen=True)
class WinRace:
    advantage_threshold: float = 0.10
    ahead_defense: float = 1.5
    ahead_offense: float = 0.7
    behind_defense: float = 0.7
    behind_offense: float = 1.5


@dataclass(frozen=True)
class ThresholdBonus:
    cross_to_damaged: float = 8
    cross_to_critical: float = 12


@dataclass(frozen=True)
class CardEvaluation:
    damage_multiplier: float = 8
    multi_hit_bonus_per_target: float = 15
    lethal_base_bonus: float = 50
    lethal_class_multiplier: float = 15
    overflow_ship_damage_multiplier: float = 12
    ship_attack_multiplier: float = 8
    drone_attack_multiplier: float = 8
    interception_value_per_threat: float = 20
    guardian_keyword_bonus: float = 30
    defender_keyword_bonus: float = 15
    lane_impact_weight: float = 1.5
    lane_flip_bonus: float = 30
    enables_card_base: float = 60
    enables_card_per_cost: float = 5
    low_priority_score: float = 1
    draw_base_value: float = 10
    energy_remaining_multiplier: float = 2
    search_draw_value_per_card: float = 12
    search_bonus_per_search: float = 2
    shield_heal_value_per_point: float = 5
    section_heal_value: float = 80
    drone_heal_base_per_point: float = 5
    repeat_value_per_repeat: float = 25
    lane_control_energy_value: float = 30
    lane_control_draw_value: float = 35
    lane_control_rally_bonus: float = 25
    jammer_base_value: float = 30
    jammer_cpu_value_multiplier: float = 5
    jammer_high_value_drone_bonus: float = 15
    jammer_high_value_class: int = 3
    rally_beacon_base_value: float = 20
    rally_beacon_adjacent_drone_value: float = 10
    rally_beacon_defending_drone_value: float = 8
    rally_beacon_movement_card_bonus: float = 15
    attack_buff_multiplier: float = 8
    class_value_multiplier: float = 10
    threat_reduction_multiplier: float = 8
    interceptor_overcome_bonus: float = 60
    speed_buff_bonus: float = 20
    generic_stat_bonus: float = 10
    permanent_mod_multiplier: float = 1.5
    go_again_bonus: float = 40
    conditional_energy_value: float = 5
    not_first_action_enabler_bonus: float = 15
    multi_buff_bonus_per_drone: float = 10
    multi_move_flexibility_per_drone: float = 15
    multi_move_stay_ready_per_drone: float = 10
    exhaust_value_multiplier: float = 8
    exhaust_interceptor_bonus: float = 30
    exhaust_defender_bonus: float = 15
    exhaust_guardian_bonus: float = 20
    exhaust_ability_bonus: float = 20
    exhaust_lane_impact_weight: float = 0.5
    threat_increase_base_value: float = 250
    threat_increase_per_point: float = 2
    mark_base_value: float = 10
    upgrade_attack_value: float = 20
    upgrade_speed_value: float = 10
    upgrade_other_value: float = 8
    upgrade_keyword_value: float = 25
    upgrade_default_value: float = 15


@dataclass(frozen=True)
class StatusWeights:
    move_deny: float = 8
    attack_deny: float = 10
    intercept_deny: float = 6
    ready_deny: float = 8
    ready_duration_factor: float = 0.7
    clear_value_per_effect: float = 25
    marked_clear_bonus: float = 15
    on_move_ability_bonus: float = 15
    guardian_bonus: float = 30
    defender_bonus: float = 15
    class_2_bonus: float = 10
    class_3_bonus: float = 15
    after_attack_bonus: float = 15
    always_intercepts_bonus: float = 30
    dogfight_bonus: float = 20
    ready_attacker_value: float = 15
    ready_class_2_bonus: float = 8
    ready_class_3_bonus: float = 12
    powerful_ability_bonus: float = 10
    target_ready_bonus: float = 10
    exhausted_move_factor: float = 0.5
    exhausted_attack_factor: float = 0.6
    exhausted_intercept_factor: float = 0.5
    exhausted_ready_factor: float = 0.7
    clear_high_class_bonus: float = 20
    clear_go_again_bonus: float = 30


@dataclass(frozen=True)
class MoveEvaluation:
    base_move_cost: float = 10
    defensive_move_bonus: float = 25
    offensive_move_damaged: float = 20
    on_move_attack_bonus: float = 15
    on_move_speed_bonus: float = 10


@dataclass(frozen=True)
class JammerWeights:
    efficiency_bonus: float = 30
    efficiency_attack_threshold: int = 2


@dataclass(frozen=True)
class UpgradeEvaluation:
    attack_base: float = 40
    speed_base: float = 35
    shields_base: float = 30
    limit_base: float = 50
    cost_reduction_base: float = 45
    ability_grant_base: float = 60
    unknown_stat_base: float = 20
    drone_class_multiplier: float = 8
    deployed_drone_bonus: float = 15
    ready_drone_bonus: float = 8
    remaining_limit_multiplier: float = 10
    upgrade_slots_scarcity: float = 12
    attack_on_high_speed: float = 20
    high_speed_value: int = 4
    speed_on_high_attack: float = 15
    high_attack_value: int = 3
    piercing_on_high_attack: float = 30
    low_remaining_limit_penalty: float = -20
    no_deployed_penalty: float = -30


@dataclass(frozen=True)
class TargetScoring:
    jammer_blocking_base: float = 30
    jammer_protected_class_multiplier: float = 3
    jammer_protected_ready_bonus: float = 10
    interception_blocker_bonus: float = 40
    ready_target_bonus: float = 25
    class_bonuses: Tuple[float, ...] = (0, 3, 6, 10)
    low_attack_bonus: float = 0
    med_attack_bonus: float = 4
    high_attack_bonus: float = 8
    med_attack_value: int = 2
    high_attack_value: int = 4
    guardian_ability_bonus: float = 15
    defender_ability_bonus: float = 10
    anti_ship_ability_bonus: float = 10
    lethal_bonus: float = 20
    piercing_bypass_bonus: float = 5


@dataclass(frozen=True)
class DamageTypeWeights:
    shield_breaker_high_shield_bonus: float = 15
    shield_breaker_high_shield_value: int = 3
    shield_breaker_low_shield_penalty: float = -5
    shield_breaker_low_shield_value: int = 1
    ion_full_strip_bonus: float = 20
    ion_per_shield_value: float = 6
    ion_wasted_penalty: float = -3
    ion_no_shields_penalty: float = -50
    kinetic_unshielded_bonus: float = 25
    kinetic_blocked_penalty: float = -100


@dataclass(frozen=True)
class DronePacing:
    ready_drone_deficit_threshold: int = 1
    non_drone_action_bonus: float = 80


@dataclass(frozen=True)
class ThreatDrones:
    round_start_deploy_bonus: float = 20
    ship_damage_drone_penalty: float = -30


@dataclass(frozen=True)
class ThrusterInhibitor:
    purge_base_value: float = 40
    locked_drone_value: float = 15
    removal_base_bonus: float = 20


@dataclass(frozen=True)
class AbilityWeights:
    heal_per_point: float = 8
    heal_class_multiplier: float = 5
    damage_per_point: float = 8
    cross_lane_bonus: float = 20
    default_value: float = 10
    energy_cost_multiplier: float = 4


@dataclass(frozen=True)
class Weights:
    """Complete, immutable weights table for one tuning profile"""
    name: str = "normal"
    version: str = "1.0.0"
    scoring: ScoringWeights = field(default_factory=ScoringWeights)
    lane: LaneWeights = field(default_factory=LaneWeights)
    decision: DecisionThresholds = field(default_factory=DecisionThresholds)
    deployment: DeploymentBonuses = field(default_factory=DeploymentBonuses)
    attack: AttackBonuses = field(default_factory=AttackBonuses)
    penalties: Penalties = field(default_factory=Penalties)
    interception: InterceptionWeights = field(default_factory=InterceptionWeights)
    defense_urgency: DefenseUrgency = field(default_factory=DefenseUrgency)
    win_race: WinRace = field(default_factory=WinRace)
    threshold_bonus: ThresholdBonus = field(default_factory=ThresholdBonus)
    cards: CardEvaluation = field(default_factory=CardEvaluation)
    status: StatusWeights = field(default_factory=StatusWeights)
    move: MoveEvaluation = field(default_factory=MoveEvaluation)
    jammer: JammerWeights = field(default_factory=JammerWeights)
    upgrades: UpgradeEvaluation = field(default_factory=UpgradeEvaluation)
    target: TargetScoring = field(default_factory=TargetScoring)
    damage_types: DamageTypeWeights = field(default_factory=DamageTypeWeights)
    pacing: DronePacing = field(default_factory=DronePacing)
    threat_drones: ThreatDrones = field(default_factory=ThreatDrones)
    thruster_inhibitor: ThrusterInhibitor = field(default_factory=ThrusterInhibitor)
    abilities: AbilityWeights = field(default_factory=AbilityWeights)

    def with_overrides(self, overrides: Dict[str, Dict[str, Any]]) -> 'Weights':
        """
        Return a copy with per-group overrides applied.

        Unknown groups or keys are logged and skipped so a stale profile never
        takes the engine down.
        """
        group_names = {f.name for f in fields(self)} - {'name', 'version'}
        changes = {}
        for group_name, values in overrides.items():
            if group_name not in group_names:
                logger.warning(f"Unknown weights group '{group_name}' in profile {self.name}")
                continue
            if not isinstance(values, dict):
                logger.warning(f"Weights group '{group_name}' must be an object, got {type(values).__name__}")
                continue
            group = getattr(self, group_name)
            known = {f.name: f for f in fields(group)}
            group_changes = {}
            for key, value in values.items():
                if key not in known:
                    logger.warning(f"Unknown weight '{group_name}.{key}' in profile {self.name}")
                    continue
                current = getattr(group, key)
                group_changes[key] = tuple(value) if isinstance(current, tuple) else value
            changes[group_name] = replace(group, **group_changes)
        return replace(self, **changes)


def weights_from_dict(data: Dict[str, Any]) -> Weights:
    """Build weights from a parsed profile document"""
    base = Weights(
        name=str(data.get('name', 'custom')),
        version=str(data.get('version', '0.0.0')),
    )
    return base.with_overrides(data.get('weights', {}))


def _log_key_values(weights: Weights):
    """Log key values for verification."""
    logger.info(f"  [decision] min_deploy_score={weights.decision.min_deploy_score}, "
                f"min_action_score={weights.decision.min_action_score}, "
                f"action_pool_range={weights.decision.action_pool_range}")
    logger.info(f"  [penalties] overkill={weights.penalties.overkill}, "
                f"guardian_attack_risk={weights.penalties.guardian_attack_risk}")
    logger.info(f"  [pacing] non_drone_action_bonus={weights.pacing.non_drone_action_bonus}")


def load_profile(profile_path: Optional[str] = None) -> Weights:
    """
    Load a tuning profile.

    Args:
        profile_path: Path to JSON profile. If not provided, uses the
                      DRONE_AI_PROFILE env var or the packaged normal profile.

    Returns:
        Weights for the profile, or the defaults if the file is missing or
        unreadable.
    """
    if profile_path:
        path = Path(profile_path)
    else:
        env_path = os.environ.get('DRONE_AI_PROFILE')
        path = Path(env_path) if env_path else DEFAULT_PROFILE_PATH

    if not path.exists():
        logger.warning(f"Weights profile not found: {path}, using defaults")
        return Weights()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in weights profile {path}: {e}")
        return Weights()
    except OSError as e:
        logger.error(f"Error reading weights profile {path}: {e}")
        return Weights()

    if not isinstance(data, dict):
        logger.error(f"Weights profile {path} must contain a JSON object")
        return Weights()

    weights = weights_from_dict(data)
    logger.info(f"Loaded weights profile from: {path}")
    logger.info(f"  Profile name: {weights.name}")
    logger.info(f"  Profile version: {weights.version}")
    _log_key_values(weights)
    return weights
