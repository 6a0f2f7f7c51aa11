"""
Action Selector

Turns a scored candidate list into a choice:

    Evaluate -> Pass                  (top score under the threshold)
    Evaluate -> SelectPool -> Choose  (uniform pick among near-top candidates)

The random draw goes through an injected RandomSource so replays with the
same seed pick the same candidate.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Protocol

from drone_ai.evaluators.base import ActionCandidate
from drone_ai.weights import Weights

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Anything with random() and randint(); random.Random qualifies"""

    def random(self) -> float:
        ...

    def randint(self, a: int, b: int) -> int:
        ...


def seeded_random(seed: Optional[int] = None) -> random.Random:
    return random.Random(seed)


@dataclass
class Selection:
    """Outcome of one selection: the chosen candidate or a pass reason"""
    chosen: Optional[ActionCandidate]
    top_score: float
    pool: List[ActionCandidate]
    reason: str = ""

    @property
    def is_pass(self) -> bool:
        return self.chosen is None


class ActionSelector:
    """
    Thresholding, pooling and randomized tie-break.

    Deployment uses a strict threshold (top score must reach the minimum);
    actions pass whenever the top score does not exceed it.
    """

    def __init__(self, weights: Weights, rng: RandomSource):
        self.weights = weights
        self.rng = rng

    def select(self, candidates: List[ActionCandidate], min_score: float, pool_range: float,
               strict: bool = False) -> Selection:
        if not candidates:
            return Selection(None, 0.0, [], "No candidates")

        top = max(c.score for c in candidates)
        below = top < min_score if strict else top <= min_score
        if below:
            return Selection(None, top, [], f"Top score {top:.1f} under threshold {min_score:g}")

        pool = [c for c in candidates if c.score >= top - pool_range]
        pool = [c for c in pool if c.score > 0]
        if not pool:
            return Selection(None, top, [], "No positive actions in pool")

        chosen = pool[int(self.rng.random() * len(pool))]
        chosen.is_chosen = True
        logger.debug(f"Pool of {len(pool)} within {pool_range:g} of {top:.1f}, chose {chosen.display_text}")
        return Selection(chosen, top, pool)

    def select_deployment(self, candidates: List[ActionCandidate]) -> Selection:
        thresholds = self.weights.decision
        return self.select(candidates, thresholds.min_deploy_score, thresholds.deploy_pool_range, strict=True)

    def select_action(self, candidates: List[ActionCandidate]) -> Selection:
        thresholds = self.weights.decision
        return self.select(candidates, thresholds.min_action_score, thresholds.action_pool_range)
