"""
Tests for evaluators/ability_evaluator.py
"""

from drone_ai.evaluators.ability_evaluator import AbilityEvaluator, evaluate_ability
from drone_ai.evaluators.base import ActionCandidate, ActionType
from drone_ai.weights import INVALID_SCORE, Weights
from tests.factories import AI_ID, active_ability, context, drone

W = Weights()


class TestHeal:

    def test_full_hull_needs_no_healing(self):
        repair = active_ability("HEAL", value=2, affinity="FRIENDLY")
        ev = evaluate_ability(repair, drone("a1", owner=AI_ID, hull=3), context())
        assert ev.invalid
        assert ev.score == INVALID_SCORE
        assert ev.note_of("Invalid") == "No healing needed"

    def test_heal_capped_and_weighted_by_class(self):
        repair = active_ability("HEAL", value=3, affinity="FRIENDLY")
        patient = drone("a1", owner=AI_ID, drone_class=2, hull=1, max_hull=3)
        ev = evaluate_ability(repair, patient, context())
        assert ev.value_of("Heal") == 2 * W.abilities.heal_per_point
        assert ev.value_of("Target Class") == 2 * W.abilities.heal_class_multiplier
        assert ev.note_of("Active Ability") == "Heal"


class TestDamage:

    def test_lethal_snipe(self):
        snipe = active_ability("DAMAGE", value=2)
        ev = evaluate_ability(snipe, drone("e1", drone_class=2, hull=1, shields=1), context())
        assert ev.value_of("Damage") == 2 * W.abilities.damage_per_point
        assert ev.value_of("Lethal") == W.cards.lethal_base_bonus + 2 * W.cards.lethal_class_multiplier
        assert not ev.has("Cross-Lane")

    def test_cross_lane_reach(self):
        snipe = active_ability("DAMAGE", value=1, location="ANY_LANE")
        ev = evaluate_ability(snipe, drone("e1", hull=4), context())
        assert ev.value_of("Cross-Lane") == W.abilities.cross_lane_bonus
        assert not ev.has("Lethal")


class TestOtherEffects:

    def test_purge_base_value(self):
        purge = active_ability("DESTROY_TOKEN_SELF", targeting_type="SELF", affinity="FRIENDLY")
        me = drone("a1", owner=AI_ID)
        ev = evaluate_ability(purge, me, context())
        assert ev.value_of("Purge") == W.thruster_inhibitor.purge_base_value

    def test_unscored_effect_gets_default(self):
        odd = active_ability("SCAN")
        ev = evaluate_ability(odd, drone("e1"), context())
        assert ev.value_of("Ability Value") == W.abilities.default_value

    def test_energy_cost_charged(self):
        snipe = active_ability("DAMAGE", value=1, energy_cost=2)
        ev = evaluate_ability(snipe, drone("e1", hull=4), context())
        assert ev.value_of("Energy Cost") == -2 * W.abilities.energy_cost_multiplier

    def test_invalid_heal_is_not_charged(self):
        repair = active_ability("HEAL", value=1, energy_cost=2, affinity="FRIENDLY")
        ev = evaluate_ability(repair, drone("a1", owner=AI_ID), context())
        assert not ev.has("Energy Cost")


class TestAbilityEvaluator:

    def test_routes_use_ability(self):
        snipe = active_ability("DAMAGE", value=1)
        target = drone("e1", hull=4)
        candidate = ActionCandidate(ActionType.USE_ABILITY, drone=drone("a1", owner=AI_ID),
                                    ability=snipe, target=target)
        evaluator = AbilityEvaluator()
        assert evaluator.can_evaluate(candidate)
        evaluator.score(candidate, context())
        assert candidate.value_of("Damage") == W.abilities.damage_per_point
