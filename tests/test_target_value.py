"""
Tests for scoring/target_value.py

Covers tier ordering, lethal/piercing behaviour and damage-type synergy.
"""

import pytest

from drone_ai.models import DamageType
from drone_ai.scoring.target_value import (
    TIER_ABILITY, TIER_ATTACK, TIER_CLASS, TIER_DAMAGE_TYPE, TIER_INTERCEPTION, TIER_JAMMER,
    TIER_LETHAL, TIER_PIERCING, TIER_READY, target_value,
)
from drone_ai.weights import OVERWHELMING_DAMAGE, Weights
from drone_ai.keywords import GUARDIAN, JAMMER
from tests.factories import (
    AI_ID, OPPONENT_ID, context, definitions, drone, drone_def, keyword_ability, player,
)

W = Weights()


def _single_target_context(target, *ai_drones, defs=None):
    ai = player(AI_ID, {"lane1": list(ai_drones)})
    opponent = player(OPPONENT_ID, {"lane1": [target]})
    return context(ai, opponent, defs)


class TestTierTrace:
    """Every tier leaves an entry, in fixed order"""

    def test_all_tiers_present_in_order(self):
        target = drone("t1")
        ctx = _single_target_context(target)
        ev = target_value(target, ctx, damage=1, lane="lane1")
        tags = [tag for tag, _ in ev.pairs()]
        assert tags == [TIER_JAMMER, TIER_INTERCEPTION, TIER_READY, TIER_CLASS,
                        TIER_ATTACK, TIER_ABILITY, TIER_LETHAL, TIER_PIERCING, TIER_DAMAGE_TYPE]

    def test_exhausted_target_has_no_readiness_bonus(self):
        target = drone("t1", is_exhausted=True)
        ev = target_value(target, _single_target_context(target), damage=1)
        assert ev.value_of(TIER_READY) == 0

    def test_guardian_counts_as_dangerous_ability(self):
        defs = definitions(drone_def("Bulwark", abilities=[keyword_ability(GUARDIAN)]))
        target = drone("t1", name="Bulwark")
        ev = target_value(target, _single_target_context(target, defs=defs), damage=1)
        assert ev.value_of(TIER_ABILITY) == W.target.guardian_ability_bonus

    def test_interception_blocker_counts_blocked_attackers(self):
        target = drone("t1", speed=4)
        slow = drone("a1", owner=AI_ID, speed=3)
        slower = drone("a2", owner=AI_ID, speed=1)
        fast = drone("a3", owner=AI_ID, speed=5)
        ctx = _single_target_context(target, slow, slower, fast)
        ev = target_value(target, ctx, damage=1, lane="lane1")
        assert ev.value_of(TIER_INTERCEPTION) == 2 * W.target.interception_blocker_bonus

    def test_jammer_bonus_counts_lane_mates(self):
        defs = definitions(drone_def("Jammer", abilities=[keyword_ability(JAMMER)]), drone_def("Scout"))
        jammer = drone("j1", name="Jammer")
        mate = drone("m1", drone_class=2)
        ai = player(AI_ID)
        opponent = player(OPPONENT_ID, {"lane1": [jammer, mate]})
        ev = target_value(jammer, context(ai, opponent, defs), damage=1, lane="lane1")

        expected = (W.target.jammer_blocking_base
                    + 2 * W.target.jammer_protected_class_multiplier
                    + W.target.jammer_protected_ready_bonus)
        assert ev.value_of(TIER_JAMMER) == expected

    def test_lone_jammer_gets_no_blocking_bonus(self):
        defs = definitions(drone_def("Jammer", abilities=[keyword_ability(JAMMER)]))
        jammer = drone("j1", name="Jammer")
        ev = target_value(jammer, _single_target_context(jammer, defs=defs), damage=1, lane="lane1")
        assert ev.value_of(TIER_JAMMER) == 0


class TestLethal:

    def test_lethal_bonus_never_decreases_past_durability(self):
        target = drone("t1", hull=3, shields=2)
        ctx = _single_target_context(target)
        durability = target.hull + target.current_shields

        previous = None
        for damage in range(durability - 2, durability + 6):
            ev = target_value(target, ctx, damage=damage)
            if previous is not None:
                assert ev.value_of(TIER_LETHAL) >= previous.value_of(TIER_LETHAL)
                assert ev.score >= previous.score
            previous = ev

    def test_overwhelming_damage_is_lethal(self):
        target = drone("t1", hull=8, shields=3)
        ev = target_value(target, _single_target_context(target), damage=OVERWHELMING_DAMAGE)
        assert ev.value_of(TIER_LETHAL) == W.target.lethal_bonus

    def test_shields_count_unless_piercing(self):
        target = drone("t1", hull=2, shields=2)
        ctx = _single_target_context(target)
        assert target_value(target, ctx, damage=2).value_of(TIER_LETHAL) == 0
        assert target_value(target, ctx, damage=2, piercing=True).value_of(TIER_LETHAL) == W.target.lethal_bonus

    def test_lethal_bonus_ignores_damage_type(self):
        target = drone("t1", hull=1, shields=1)
        ev = target_value(target, _single_target_context(target), damage=5, damage_type=DamageType.ION)
        assert ev.value_of(TIER_LETHAL) == W.target.lethal_bonus


class TestPiercing:

    @pytest.mark.parametrize("damage", [1, 3, OVERWHELMING_DAMAGE])
    def test_piercing_against_unshielded_target_is_zero(self, damage):
        target = drone("t1", hull=3, shields=0)
        ev = target_value(target, _single_target_context(target), damage=damage, piercing=True)
        assert ev.value_of(TIER_PIERCING) == 0

    def test_piercing_through_shields_gets_bonus(self):
        target = drone("t1", hull=3, shields=1)
        ev = target_value(target, _single_target_context(target), damage=1, piercing=True)
        assert ev.value_of(TIER_PIERCING) == W.target.piercing_bypass_bonus


class TestDamageTypes:

    @pytest.mark.parametrize("damage", [1, 2, 5, OVERWHELMING_DAMAGE])
    def test_kinetic_against_shields_is_fixed_penalty(self, damage):
        target = drone("t1", hull=2, shields=1)
        ev = target_value(target, _single_target_context(target), damage=damage,
                          damage_type=DamageType.KINETIC)
        assert ev.value_of(TIER_DAMAGE_TYPE) == W.damage_types.kinetic_blocked_penalty

    @pytest.mark.parametrize("damage", [1, 4])
    def test_kinetic_against_unshielded_is_fixed_bonus(self, damage):
        target = drone("t1", hull=2, shields=0)
        ev = target_value(target, _single_target_context(target), damage=damage,
                          damage_type=DamageType.KINETIC)
        assert ev.value_of(TIER_DAMAGE_TYPE) == W.damage_types.kinetic_unshielded_bonus

    def test_ion_against_unshielded_is_wasted(self):
        target = drone("t1", hull=2, shields=0)
        ev = target_value(target, _single_target_context(target), damage=2, damage_type=DamageType.ION)
        assert ev.value_of(TIER_DAMAGE_TYPE) == W.damage_types.ion_no_shields_penalty

    def test_ion_full_strip_with_overkill(self):
        target = drone("t1", hull=2, shields=2)
        ev = target_value(target, _single_target_context(target), damage=3, damage_type=DamageType.ION)
        dt = W.damage_types
        expected = 2 * dt.ion_per_shield_value + dt.ion_full_strip_bonus + 1 * dt.ion_wasted_penalty
        assert ev.value_of(TIER_DAMAGE_TYPE) == expected

    def test_shield_breaker_rewards_heavy_shields(self):
        target = drone("t1", hull=2, shields=3)
        ev = target_value(target, _single_target_context(target), damage=1,
                          damage_type=DamageType.SHIELD_BREAKER)
        assert ev.value_of(TIER_DAMAGE_TYPE) == W.damage_types.shield_breaker_high_shield_bonus

    def test_default_damage_type_has_no_term(self):
        target = drone("t1", hull=2, shields=3)
        ev = target_value(target, _single_target_context(target), damage=1)
        assert ev.value_of(TIER_DAMAGE_TYPE) == 0
        assert ev.note_of(TIER_DAMAGE_TYPE) == ""
