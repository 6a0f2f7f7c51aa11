"""
Base Classes for Evaluator System

Defines the candidate and decision records, and the evaluator interface every
action shape implements. Evaluator functions take (unit, target, context,
extra) and return an Evaluation; they never mutate the context.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, NamedTuple, Optional
import logging

from drone_ai.context import EvaluationContext
from drone_ai.definitions import Ability, Card
from drone_ai.models import Drone
from drone_ai.trace import Evaluation, TraceEntry, render_trace
from drone_ai.weights import INVALID_SCORE

logger = logging.getLogger(__name__)


class ActionType(Enum):
    """Types of actions the AI can take"""
    DEPLOY = "deploy"
    ATTACK = "attack"
    MOVE = "move"
    PLAY_CARD = "play_card"
    USE_ABILITY = "use_ability"
    PASS = "pass"


class TargetType(Enum):
    DRONE = "drone"
    SECTION = "section"
    LANE = "lane"
    DRONE_CARD = "drone_card"
    UPGRADE = "upgrade"
    NONE = "none"


class DecisionType(Enum):
    PASS = "pass"
    DEPLOY = "deploy"
    ACTION = "action"


class MoveData(NamedTuple):
    drone: Drone
    from_lane: str
    to_lane: str


@dataclass
class ActionCandidate:
    """
    A possible action, scored by evaluators.

    Represents one legal (or deliberately recorded illegal) choice with:
    - What to do (type, instigator, target)
    - Score (higher = better, INVALID_SCORE for rule violations)
    - Trace of (tag, value) contributions explaining the score
    """
    action_type: ActionType
    score: float = 0.0
    trace: List[TraceEntry] = field(default_factory=list)

    # Who acts
    drone: Optional[Drone] = None          # attacker / mover / ability user
    drone_name: str = ""                   # deploy candidates (drone type)
    card: Optional[Card] = None
    ability: Optional[Ability] = None

    # What it acts on
    target: Any = None
    target_type: TargetType = TargetType.NONE
    lane: Optional[str] = None             # deploy lane / acting drone's lane
    to_lane: Optional[str] = None
    move: Optional[MoveData] = None

    is_chosen: bool = False

    def add_reasoning(self, reason: str, score_delta: float = 0.0, note: str = ""):
        """Add a trace entry with optional score adjustment"""
        self.trace.append(TraceEntry(reason, score_delta, note))
        self.score += score_delta

    def absorb(self, evaluation: Evaluation):
        """Fold an evaluator result into this candidate"""
        self.trace.extend(evaluation.entries)
        self.score += evaluation.score

    def set_invalid(self, reason: str):
        self.trace.append(TraceEntry("Invalid", INVALID_SCORE, reason))
        self.score = INVALID_SCORE

    @property
    def is_invalid(self) -> bool:
        return self.score <= INVALID_SCORE

    @property
    def instigator(self) -> str:
        if self.action_type == ActionType.PLAY_CARD and self.card is not None:
            if self.move is not None:
                return f"{self.card.name} ({self.move.drone.name})"
            return self.card.name
        if self.action_type == ActionType.USE_ABILITY and self.drone and self.ability:
            return f"{self.drone.name} ({self.ability.name})"
        if self.drone is not None:
            return self.drone.name
        return self.drone_name

    @property
    def target_name(self) -> str:
        if self.action_type == ActionType.DEPLOY:
            return self.lane or "N/A"
        if self.action_type == ActionType.MOVE:
            return self.to_lane or "N/A"
        if self.move is not None:
            return f"{self.move.from_lane}->{self.move.to_lane}"
        if self.target is None:
            return "N/A"
        return getattr(self.target, "name", None) or getattr(self.target, "id", "N/A")

    @property
    def display_text(self) -> str:
        return f"{self.action_type.value}: {self.instigator} -> {self.target_name}"

    def value_of(self, tag: str) -> float:
        return sum(e.value for e in self.trace if e.tag == tag)

    def has(self, tag: str) -> bool:
        return any(e.tag == tag for e in self.trace)

    def pairs(self):
        return [(e.tag, e.value) for e in self.trace]

    def rendered_trace(self) -> List[str]:
        return render_trace(self.trace)

    def __repr__(self):
        return f"ActionCandidate({self.display_text}, score={self.score:.1f})"


@dataclass
class Decision:
    """Result of one decision: pass, deploy or action"""
    decision_type: DecisionType
    payload: Optional[ActionCandidate] = None
    log_context: List[ActionCandidate] = field(default_factory=list)
    reason: str = ""

    @property
    def is_pass(self) -> bool:
        return self.decision_type == DecisionType.PASS

    @property
    def summary(self) -> str:
        if self.is_pass or self.payload is None:
            return f"PASS: {self.reason}"
        return f"{self.decision_type.value.upper()}: {self.payload.display_text} (score {self.payload.score:.1f})"


class ActionEvaluator(ABC):
    """
    Base class for action evaluators.

    Each evaluator scores one action shape (deploy, attack, move, card play,
    ability use). Scoring adds to the candidate; evaluators never touch the
    context or the live player states.
    """

    def __init__(self, name: str):
        self.name = name
        self.enabled = True
        self.logger = logging.getLogger(f"{__name__}.{name}")

    @abstractmethod
    def can_evaluate(self, candidate: ActionCandidate) -> bool:
        """True if this evaluator scores the given candidate"""
        pass

    @abstractmethod
    def evaluate(self, candidate: ActionCandidate, context: EvaluationContext) -> Evaluation:
        """Score one candidate"""
        pass

    def score(self, candidate: ActionCandidate, context: EvaluationContext):
        candidate.absorb(self.evaluate(candidate, context))
        self.log_evaluation(candidate)

    def log_evaluation(self, candidate: ActionCandidate):
        """Log evaluation for debugging"""
        reasons = " | ".join(candidate.rendered_trace())
        self.logger.debug(f"  [{self.name}] {candidate.display_text}: {candidate.score:.1f} - {reasons}")


class CombinedEvaluator:
    """
    Routes every candidate to the evaluator that handles its shape.

    Candidates nobody claims are logged and left at score 0.
    """

    def __init__(self, evaluators: List[ActionEvaluator]):
        self.evaluators = evaluators
        self.logger = logging.getLogger(__name__)

    def score_all(self, candidates: List[ActionCandidate], context: EvaluationContext) -> List[ActionCandidate]:
        for candidate in candidates:
            for evaluator in self.evaluators:
                if evaluator.enabled and evaluator.can_evaluate(candidate):
                    evaluator.score(candidate, context)
                    break
            else:
                self.logger.warning(f"⚠️ No evaluator for {candidate.display_text}")
        return candidates
