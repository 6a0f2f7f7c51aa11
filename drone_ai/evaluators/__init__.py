"""
Evaluator System for Action Scoring

This package contains one evaluator per action shape. Each evaluator scores
candidates against an immutable evaluation context and records its reasoning
as (tag, value) trace entries.
"""

from .base import (
    ActionCandidate, ActionEvaluator, ActionType, CombinedEvaluator, Decision, DecisionType,
    MoveData, TargetType,
)
from .deploy_evaluator import DeployEvaluator
from .attack_evaluator import AttackEvaluator
from .move_evaluator import MoveEvaluator
from .ability_evaluator import AbilityEvaluator
from .cards import CardPlayEvaluator


def action_evaluators():
    """Evaluators for the action phase, in routing order"""
    return CombinedEvaluator([
        AttackEvaluator(),
        MoveEvaluator(),
        CardPlayEvaluator(),
        AbilityEvaluator(),
    ])


def deployment_evaluators():
    return CombinedEvaluator([DeployEvaluator()])


__all__ = [
    'ActionCandidate',
    'ActionEvaluator',
    'ActionType',
    'CombinedEvaluator',
    'Decision',
    'DecisionType',
    'MoveData',
    'TargetType',
    'DeployEvaluator',
    'AttackEvaluator',
    'MoveEvaluator',
    'AbilityEvaluator',
    'CardPlayEvaluator',
    'action_evaluators',
    'deployment_evaluators',
]
