"""
Drone AI Package

Action scoring and decision engine for the non-human player in a lane-based
drone combat game. The host builds an evaluation context from two player
snapshots and calls one of the decision entry points:

    context = build_context(ai, opponent, definitions, weights=load_profile())
    decision = decide_action(context)
"""

from .models import (
    LANES,
    DamageType,
    Drone,
    DroneAIError,
    PlayerState,
    ScratchState,
    ScratchStateError,
    ShipSection,
    ShipStatus,
    counterfactual,
)
from .definitions import Ability, Card, DefinitionTables, DroneDefinition
from .weights import INVALID_SCORE, Weights, load_profile
from .context import EffectiveStats, EvaluationContext, build_context
from .selector import ActionSelector, RandomSource, seeded_random
from .decisions import decide_action, decide_deployment
from .interception import AttackContext, InterceptionDecision, decide_interception
from .snapshot import Snapshot, SnapshotError, load_snapshot
from .loader import load_definitions

__all__ = [
    'LANES',
    'DamageType',
    'Drone',
    'DroneAIError',
    'PlayerState',
    'ScratchState',
    'ScratchStateError',
    'ShipSection',
    'ShipStatus',
    'counterfactual',
    'Ability',
    'Card',
    'DefinitionTables',
    'DroneDefinition',
    'INVALID_SCORE',
    'Weights',
    'load_profile',
    'EffectiveStats',
    'EvaluationContext',
    'build_context',
    'ActionSelector',
    'RandomSource',
    'seeded_random',
    'decide_action',
    'decide_deployment',
    'AttackContext',
    'InterceptionDecision',
    'decide_interception',
    'Snapshot',
    'SnapshotError',
    'load_snapshot',
    'load_definitions',
]
