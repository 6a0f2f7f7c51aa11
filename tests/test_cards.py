"""
Tests for the card evaluators and their dispatch registry.
"""

from dataclasses import replace

import pytest

from drone_ai.definitions import CardTargeting, Condition, CardEffect, ConditionalEffect
from drone_ai.evaluators.base import ActionCandidate, ActionType, MoveData, TargetType
from drone_ai.evaluators.cards import CARD_EVALUATORS, CardPlayEvaluator, evaluate_card_play, has_evaluator
from drone_ai.evaluators.cards.common import COST_TAG
from drone_ai.evaluators.cards.conditional import evaluate_conditional_effects
from drone_ai.models import LaneTarget, SectionTarget, ShipSection, StatMod
from drone_ai.scoring.target_value import TIER_LETHAL
from drone_ai.weights import INVALID_SCORE, Weights
from tests.factories import (
    AI_ID, OPPONENT_ID, card, context, drone, enemy_drone_targeting, player,
)

W = Weights()


def _enemy_board(*enemies, ai_drones=(), **ai_kwargs):
    return context(player(AI_ID, {"lane1": list(ai_drones)}, **ai_kwargs),
                   player(OPPONENT_ID, {"lane1": list(enemies)}))


class TestDispatch:

    def test_registry_covers_core_effects(self):
        for effect in ("DESTROY", "DAMAGE", "GAIN_ENERGY", "DRAW", "HEAL_HULL", "MODIFY_STAT",
                       "SINGLE_MOVE", "READY_DRONE", "EXHAUST_DRONE", "MARK_DRONE"):
            assert has_evaluator(effect)
        assert len(CARD_EVALUATORS) >= 25

    def test_unknown_effect_scores_zero_with_trace(self):
        weird = card("warp", "WARP_SPACE")
        ev = evaluate_card_play(weird, None, context())
        assert ev.score == 0
        assert ev.note_of("Unknown Effect") == "WARP_SPACE"

    def test_card_evaluator_routes_play_card(self):
        target = drone("e1", hull=2)
        ctx = _enemy_board(target)
        zap = card("zap", "DAMAGE", value=2, cost=2, targeting=enemy_drone_targeting())
        candidate = ActionCandidate(ActionType.PLAY_CARD, card=zap, target=target, target_type=TargetType.DRONE)
        evaluator = CardPlayEvaluator()
        assert evaluator.can_evaluate(candidate)
        evaluator.score(candidate, ctx)
        assert candidate.value_of(TIER_LETHAL) == W.target.lethal_bonus
        assert candidate.value_of(COST_TAG) == -2 * W.scoring.cost_penalty_multiplier


class TestDamageCards:

    def test_non_lethal_damage(self):
        target = drone("e1", hull=3, shields=1)
        zap = card("zap", "DAMAGE", value=2, targeting=enemy_drone_targeting())
        ev = evaluate_card_play(zap, target, _enemy_board(target))
        assert ev.value_of(TIER_LETHAL) == 0

    def test_destroy_requires_drone_target(self):
        kill = card("kill", "DESTROY", targeting=enemy_drone_targeting())
        ev = evaluate_card_play(kill, None, context())
        assert ev.invalid
        assert ev.score == INVALID_SCORE

    def test_lane_destroy_weighs_friendly_losses(self):
        mine = drone("a1", owner=AI_ID, attack=3, drone_class=2)
        theirs = drone("e1", attack=1)
        wipe = card("wipe", "DESTROY", scope="LANE", targeting=CardTargeting("LANE"))
        ev = evaluate_card_play(wipe, LaneTarget("lane1"), _enemy_board(theirs, ai_drones=[mine]))
        assert ev.value_of("Enemy Losses") > 0
        assert ev.value_of("Friendly Losses") < 0

    def test_overflow_into_ship(self):
        target = drone("e1", hull=1)
        blast = card("blast", "OVERFLOW_DAMAGE", value=3, targeting=enemy_drone_targeting())
        ev = evaluate_card_play(blast, target, _enemy_board(target))
        assert ev.value_of("Overflow") == 2 * W.cards.overflow_ship_damage_multiplier

    def test_splash_hits_neighbours(self):
        left, middle, right = drone("e1"), drone("e2"), drone("e3")
        burst = card("burst", "SPLASH_DAMAGE", value=2, splash_damage=1, targeting=enemy_drone_targeting())
        ev = evaluate_card_play(burst, middle, _enemy_board(left, middle, right))
        assert len([tag for tag, _ in ev.pairs() if tag == "Splash"]) == 2
        assert ev.value_of("Multi-Hit") == 3 * W.cards.multi_hit_bonus_per_target


class TestUtilityCards:

    def test_gain_energy_without_enabled_card_is_invalid(self):
        surge = card("surge", "GAIN_ENERGY", value=2, cost=0)
        ctx = context(player(AI_ID, energy=5, hand=(surge,)))
        assert evaluate_card_play(surge, None, ctx).invalid

    def test_gain_energy_enables_bigger_card(self):
        surge = card("surge", "GAIN_ENERGY", value=2, cost=0)
        big = card("big_draw", "DRAW", value=2, cost=4)
        ctx = context(player(AI_ID, energy=3, hand=(surge, big)))
        ev = evaluate_card_play(surge, None, ctx)
        assert ev.value_of("Enables") == W.cards.enables_card_base + 4 * W.cards.enables_card_per_cost

    def test_draw_with_no_energy_left_is_low_priority(self):
        draw = card("draw", "DRAW", value=1, cost=2)
        ev = evaluate_card_play(draw, None, context(player(AI_ID, energy=2)))
        assert ev.score == W.cards.low_priority_score

    def test_marking_marked_target_is_invalid(self):
        target = drone("e1", is_marked=True)
        mark = card("mark", "MARK_DRONE", targeting=enemy_drone_targeting())
        assert evaluate_card_play(mark, target, _enemy_board(target)).invalid


class TestHealCards:

    def test_heal_full_hull_drone_is_invalid(self):
        mine = drone("a1", owner=AI_ID, hull=3)
        fix = card("fix", "HEAL_HULL", value=2)
        assert evaluate_card_play(fix, mine, _enemy_board(ai_drones=[mine])).invalid

    def test_heal_capped_at_missing_hull(self):
        mine = drone("a1", owner=AI_ID, hull=2, max_hull=3)
        fix = card("fix", "HEAL_HULL", value=2)
        ev = evaluate_card_play(fix, mine, _enemy_board(ai_drones=[mine]))
        assert ev.note_of("Drone Hull") == "1 hull"

    def test_section_shields(self):
        worn = ShipSection(name="bridge", hull=10, max_hull=10, shields=3, allocated_shields=1)
        restore = card("restore", "RESTORE_SECTION_SHIELDS", value=5)
        ev = evaluate_card_play(restore, SectionTarget("bridge", AI_ID, worn), context())
        assert ev.value_of("Section Shields") == 2 * W.cards.shield_heal_value_per_point


class TestStatCards:

    def test_attack_buff_on_ready_drone(self):
        mine = drone("a1", owner=AI_ID, drone_class=2)
        buff = card("buff", "MODIFY_STAT", cost=1, mod=StatMod("attack", 2))
        ev = evaluate_card_play(buff, mine, _enemy_board(ai_drones=[mine]))
        assert ev.value_of("Attack Buff") == 2 * W.cards.attack_buff_multiplier
        assert ev.has(COST_TAG)

    def test_buffing_exhausted_drone_is_negative_and_free(self):
        mine = drone("a1", owner=AI_ID, is_exhausted=True)
        buff = card("buff", "MODIFY_STAT", cost=1, mod=StatMod("attack", 2))
        ev = evaluate_card_play(buff, mine, _enemy_board(ai_drones=[mine]))
        assert ev.score < 0
        assert not ev.has(COST_TAG)

    def test_speed_buff_past_interceptor(self):
        mine = drone("a1", owner=AI_ID, speed=2)
        ctx = _enemy_board(drone("e1", speed=3), ai_drones=[mine])
        boost = card("boost", "MODIFY_STAT", mod=StatMod("speed", 2))
        ev = evaluate_card_play(boost, mine, ctx)
        assert ev.value_of("Interceptor Overcome") == W.cards.interceptor_overcome_bonus


class TestMovementCards:

    def test_single_move_needs_move_metadata(self):
        shift = card("shift", "SINGLE_MOVE")
        assert evaluate_card_play(shift, None, context()).invalid

    def test_single_move_scores_move(self):
        mine = drone("a1", owner=AI_ID, attack=2)
        ctx = context(player(AI_ID, {"lane1": [mine]}), player(OPPONENT_ID, {"lane2": [drone("e1", attack=3)]}))
        shift = card("shift", "SINGLE_MOVE", cost=0)
        ev = evaluate_card_play(shift, None, ctx, MoveData(mine, "lane1", "lane2"))
        assert ev.has("Move Impact")


class TestConditionalEffects:

    def _zap(self, *conditionals):
        zap = card("zap", "DAMAGE", value=2, targeting=enemy_drone_targeting())
        return replace(zap, conditional_effects=conditionals)

    def test_post_on_destroy_fires_when_damage_kills(self):
        draw = ConditionalEffect("c1", "POST", Condition("ON_DESTROY"), CardEffect("DRAW", value=1))
        zap = self._zap(draw)
        target = drone("e1", hull=2)
        ev = evaluate_card_play(zap, target, _enemy_board(target))
        assert ev.value_of("Conditional Draw") == W.cards.draw_base_value

    def test_post_on_destroy_does_not_fire_on_survivor(self):
        draw = ConditionalEffect("c1", "POST", Condition("ON_DESTROY"), CardEffect("DRAW", value=1))
        target = drone("e1", hull=3)
        ev = evaluate_conditional_effects(self._zap(draw), target, _enemy_board(target))
        assert ev.score == 0
        assert ev.entries == []

    def test_pre_stat_condition_grants_destroy(self):
        execute = ConditionalEffect("c1", "PRE", Condition("TARGET_STAT_LTE", stat="hull", value=2),
                                    CardEffect("DESTROY"))
        target = drone("e1", hull=2)
        ev = evaluate_conditional_effects(self._zap(execute), target, _enemy_board(target))
        expected = 2 * W.scoring.resource_value_multiplier + W.cards.lethal_class_multiplier + W.cards.lethal_base_bonus
        assert ev.value_of("Conditional DESTROY") == expected

    @pytest.mark.parametrize("marked, fires", [(True, True), (False, False)])
    def test_pre_marked_condition(self, marked, fires):
        bonus = ConditionalEffect("c1", "PRE", Condition("TARGET_IS_MARKED"), CardEffect("BONUS_DAMAGE", value=2))
        target = drone("e1", hull=5, is_marked=marked)
        ev = evaluate_conditional_effects(self._zap(bonus), target, _enemy_board(target))
        assert ev.has("Bonus Damage") is fires
