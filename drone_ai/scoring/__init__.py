"""
Scoring primitives shared by every evaluator: target value, lane advantage,
interception dynamics and ship hull integrity.
"""

from .target_value import target_value
from .lane_score import (
    LaneDelta, LaneStanding, classify_lane, current_lane_scores, drone_impact,
    impact_delta, is_dominant, lane_score, lanes_controlled,
)
from .hull_integrity import (
    damage_fraction, defense_urgency, is_lethal, section_transition,
    win_race_modifiers, would_cross_threshold,
)
from .interception_analysis import (
    LaneInterception, ThreatsInCheck, analyze_lane_interception, threats_kept_in_check,
)

__all__ = [
    'target_value',
    'LaneDelta',
    'LaneStanding',
    'classify_lane',
    'current_lane_scores',
    'drone_impact',
    'impact_delta',
    'is_dominant',
    'lane_score',
    'lanes_controlled',
    'damage_fraction',
    'defense_urgency',
    'is_lethal',
    'section_transition',
    'win_race_modifiers',
    'would_cross_threshold',
    'LaneInterception',
    'ThreatsInCheck',
    'analyze_lane_interception',
    'threats_kept_in_check',
]
