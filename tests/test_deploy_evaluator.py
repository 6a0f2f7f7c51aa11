"""
Tests for evaluators/deploy_evaluator.py

Affordability gates, lane legality and the lane-standing strategic bonuses.
"""

import pytest

from drone_ai.evaluators.base import ActionCandidate, ActionType
from drone_ai.evaluators.deploy_evaluator import (
    DeployEvaluator, check_affordability, deployment_resources, evaluate_deployment,
)
from drone_ai.keywords import GUARDIAN
from drone_ai.models import DamageType, DroneAvailability
from drone_ai.weights import INVALID_SCORE, Weights
from tests.factories import (
    AI_ID, OPPONENT_ID, FixedRandom, card, context, definitions, drone, drone_def, keyword_ability,
    player, section, SECTION_NAMES,
)

W = Weights()


def _losing_lane_context(defs, rng=None):
    """lane1 well below the losing-badly threshold for the AI"""
    opponent = player(OPPONENT_ID, {"lane1": [drone("e1", attack=3, drone_class=2, hull=3, speed=2)]})
    ai = player(AI_ID, initial_deployment_budget=5, energy=5)
    return context(ai, opponent, defs, rng=rng)


class TestStrategicBonus:

    def test_fast_drone_into_losing_lane(self):
        dart = drone_def("Dart", drone_class=1, attack=1, hull=1, speed=4)
        ev = evaluate_deployment(dart, "lane1", _losing_lane_context(definitions(dart)))
        assert ev.value_of("Strategic Bonus") == W.deployment.fast_drone_defensive
        assert ev.note_of("Strategic Bonus") == "losing_badly"

    def test_guardian_into_losing_lane(self):
        wall = drone_def("Wall", drone_class=2, attack=0, hull=4, speed=1,
                         abilities=[keyword_ability(GUARDIAN)])
        ev = evaluate_deployment(wall, "lane1", _losing_lane_context(definitions(wall)))
        assert ev.value_of("Strategic Bonus") == W.deployment.guardian_defensive

    def test_slow_plain_drone_into_losing_lane_gets_nothing(self):
        brick = drone_def("Brick", drone_class=1, attack=1, hull=2, speed=1)
        ev = evaluate_deployment(brick, "lane1", _losing_lane_context(definitions(brick)))
        assert ev.value_of("Strategic Bonus") == 0

    def test_cheap_drone_into_balanced_lane(self):
        dart = drone_def("Dart", drone_class=1, speed=4)
        ctx = context(player(AI_ID), player(OPPONENT_ID), definitions(dart))
        ev = evaluate_deployment(dart, "lane2", ctx)
        assert ev.value_of("Strategic Bonus") == W.deployment.cheap_drone_balanced

    def test_heavy_hitter_into_winning_lane(self):
        hammer = drone_def("Hammer", drone_class=3, attack=4, hull=3, speed=2)
        ai = player(AI_ID, {"lane1": [drone("a1", owner=AI_ID, attack=4, drone_class=2, hull=3, speed=3)]})
        ctx = context(ai, player(OPPONENT_ID), definitions(hammer))
        ev = evaluate_deployment(hammer, "lane1", ctx)
        assert ev.value_of("Strategic Bonus") == W.deployment.high_attack_offensive


class TestLaneTerms:

    def test_stabilize_draws_from_injected_rng(self):
        dart = drone_def("Dart", drone_class=1, attack=1, hull=1, speed=4)
        rng = FixedRandom()
        ev = evaluate_deployment(dart, "lane1", _losing_lane_context(definitions(dart), rng=rng))
        assert ev.value_of("Stabilize") == W.deployment.stabilization_min
        assert (W.deployment.stabilization_min, W.deployment.stabilization_max) in rng.randint_calls

    def test_impact_is_projected_minus_current(self):
        dart = drone_def("Dart", drone_class=1, attack=1, hull=1, speed=4)
        ctx = context(player(AI_ID), player(OPPONENT_ID), definitions(dart))
        ev = evaluate_deployment(dart, "lane3", ctx)
        expected = 1 * 4 + 1 * 2 + 1 * 0.5 + 4 * W.scoring.speed_advantage_multiplier
        assert ev.value_of("Impact") == expected

    def test_max_per_lane_is_invalid(self):
        solo = drone_def("Solo", max_per_lane=1)
        ai = player(AI_ID, {"lane1": [drone("a1", "Solo", AI_ID)]})
        ev = evaluate_deployment(solo, "lane1", context(ai, player(OPPONENT_ID), definitions(solo)))
        assert ev.invalid
        assert ev.score == INVALID_SCORE
        assert "Max per lane" in ev.note_of("Invalid")

    def test_ion_stacking_without_hull_damage_is_invalid(self):
        ion = drone_def("Zapper", damage_type=DamageType.ION)
        ai = player(AI_ID, {"lane1": [drone("a1", "Zapper", AI_ID, damage_type=DamageType.ION)]})
        ev = evaluate_deployment(ion, "lane1", context(ai, player(OPPONENT_ID), definitions(ion)))
        assert ev.invalid
        assert ev.note_of("Invalid").startswith("Ion without follow-up")

    def test_overkill_on_damaged_section(self):
        dart = drone_def("Dart", drone_class=1, attack=1, hull=1, speed=4)
        sections = {name: section(name) for name in SECTION_NAMES}
        sections["bridge"] = section("bridge", hull=3)
        ai = player(AI_ID, {"lane1": [drone("a1", owner=AI_ID, attack=3, speed=2)]})
        ctx = context(ai, player(OPPONENT_ID, sections=sections), definitions(dart))
        ev = evaluate_deployment(dart, "lane1", ctx)
        assert ev.value_of("Overkill Penalty") == W.penalties.overkill


class TestAffordability:

    def test_resources_use_initial_budget_on_first_turn(self):
        ai = player(AI_ID, initial_deployment_budget=6, deployment_budget=2, energy=1)
        assert deployment_resources(context(ai, turn=1)) == 7
        assert deployment_resources(context(ai, turn=2)) == 3

    @pytest.mark.parametrize("kwargs, reason", [
        ({"deployment_budget": 0, "energy": 1}, "Insufficient total resources"),
        ({"deployment_budget": 5, "energy": 5,
          "drone_availability": {"Dart": DroneAvailability(ready_count=0, rebuilding_count=1)}},
         "No copies available (1 rebuilding)"),
        ({"deployment_budget": 5, "energy": 5, "deployed_drone_counts": {"Dart": 3}},
         "Deployment limit reached"),
    ])
    def test_reasons(self, kwargs, reason):
        dart = drone_def("Dart", drone_class=2)
        ctx = context(player(AI_ID, **kwargs), turn=2, defs=definitions(dart))
        assert check_affordability(dart, ctx) == reason

    def test_cpu_limit(self):
        dart = drone_def("Dart", drone_class=1)
        ai = player(AI_ID, {"lane1": [drone("a1", owner=AI_ID)]}, cpu_limit=1, deployment_budget=5)
        assert check_affordability(dart, context(ai, turn=2, defs=definitions(dart))) == "CPU limit reached"

    def test_tokens_do_not_count_towards_cpu(self):
        dart = drone_def("Dart", drone_class=1)
        ai = player(AI_ID, {"lane1": [drone("a1", owner=AI_ID, is_token=True)]}, cpu_limit=1,
                    deployment_budget=5)
        assert check_affordability(dart, context(ai, turn=2, defs=definitions(dart))) is None

    def test_energy_reserved_for_cards(self):
        dart = drone_def("Dart", drone_class=1)
        hand = (card("big_hit", "DAMAGE", value=3, cost=3),)
        ai = player(AI_ID, deployment_budget=0, energy=3, hand=hand)
        reason = check_affordability(dart, context(ai, turn=2, defs=definitions(dart)))
        assert reason == "Reserves energy for cards (needs 3)"

    def test_budget_covers_cost_without_touching_reserve(self):
        dart = drone_def("Dart", drone_class=1)
        hand = (card("big_hit", "DAMAGE", value=3, cost=3),)
        ai = player(AI_ID, deployment_budget=1, energy=3, hand=hand)
        assert check_affordability(dart, context(ai, turn=2, defs=definitions(dart))) is None


class TestDeployEvaluator:

    def test_unknown_type_is_invalid(self):
        candidate = ActionCandidate(ActionType.DEPLOY, drone_name="Ghost", lane="lane1")
        DeployEvaluator().score(candidate, context())
        assert candidate.is_invalid
        assert candidate.trace[-1].note == "Unknown drone type Ghost"

    def test_unaffordable_candidate_keeps_reason(self):
        dart = drone_def("Dart", drone_class=3)
        candidate = ActionCandidate(ActionType.DEPLOY, drone_name="Dart")
        ctx = context(player(AI_ID, deployment_budget=0, energy=0), turn=2, defs=definitions(dart))
        DeployEvaluator().score(candidate, ctx)
        assert candidate.is_invalid
        assert candidate.trace[-1].note == "Insufficient total resources"
