"""
Tests for the adjustment passes run over the scored candidate list.
"""

import pytest

from drone_ai.adjustments import (
    apply_adjustments, apply_anti_ship_adjustments, apply_interception_adjustments,
    apply_jammer_adjustments, apply_movement_inhibitor_adjustments, apply_pacing_adjustments,
)
from drone_ai.adjustments.movement_inhibitor import PURGE_EFFECT
from drone_ai.evaluators.attack_evaluator import ANTI_SHIP_MISUSE
from drone_ai.evaluators.base import ActionCandidate, ActionType, TargetType
from drone_ai.keywords import INHIBIT_MOVEMENT, JAMMER
from drone_ai.models import SectionTarget
from drone_ai.weights import Weights
from tests.factories import (
    AI_ID, OPPONENT_ID, active_ability, card, context, definitions, drone, drone_def,
    enemy_drone_targeting, keyword_ability, player, section,
)

W = Weights()


def _attack(attacker, target, score=0.0, lane="lane1"):
    target_type = TargetType.SECTION if isinstance(target, SectionTarget) else TargetType.DRONE
    return ActionCandidate(ActionType.ATTACK, score=score, drone=attacker, target=target,
                           target_type=target_type, lane=lane)


def _card_play(card_obj, target, score=0.0):
    return ActionCandidate(ActionType.PLAY_CARD, score=score, card=card_obj, target=target,
                           target_type=TargetType.DRONE)


class TestJammer:

    def _board(self):
        defs = definitions(drone_def("Jammer", abilities=[keyword_ability(JAMMER)]))
        jammer = drone("j1", "Jammer", hull=2)
        mate = drone("m1", drone_class=2)
        striker = drone("a1", owner=AI_ID, attack=1)
        ctx = context(player(AI_ID, {"lane1": [striker]}), player(OPPONENT_ID, {"lane1": [jammer, mate]}), defs)
        return ctx, jammer, mate, striker

    def test_card_past_jammer_is_blocked_and_credited_to_removal(self):
        ctx, jammer, mate, striker = self._board()
        zap = card("zap", "DAMAGE", value=2, targeting=enemy_drone_targeting())
        play = _card_play(zap, mate, score=40)
        attack = _attack(striker, jammer, score=10)

        apply_jammer_adjustments([play, attack], ctx)

        assert play.is_invalid
        assert play.trace[-1].note == "Blocked by Jammer"
        assert attack.value_of("Jammer Removal") == 40
        assert attack.value_of("Efficient Jammer Removal") == W.jammer.efficiency_bonus

    def test_card_on_the_jammer_itself_is_allowed(self):
        ctx, jammer, _, _ = self._board()
        zap = card("zap", "DAMAGE", value=2, targeting=enemy_drone_targeting())
        play = _card_play(zap, jammer, score=40)
        apply_jammer_adjustments([play], ctx)
        assert play.score == 40

    def test_exhausted_jammer_blocks_nothing(self):
        defs = definitions(drone_def("Jammer", abilities=[keyword_ability(JAMMER)]))
        jammer = drone("j1", "Jammer", is_exhausted=True)
        mate = drone("m1")
        ctx = context(player(AI_ID), player(OPPONENT_ID, {"lane1": [jammer, mate]}), defs)
        play = _card_play(card("zap", "DAMAGE", value=2), mate, score=40)
        apply_jammer_adjustments([play], ctx)
        assert not play.is_invalid


class TestAntiShip:

    def _penalised(self):
        attack = ActionCandidate(ActionType.ATTACK, drone=drone("a1", owner=AI_ID))
        attack.add_reasoning("Lethal", 20)
        attack.add_reasoning(ANTI_SHIP_MISUSE, W.penalties.anti_ship_attacking_drone)
        return attack

    def test_penalty_lifted_when_nothing_else_is_positive(self):
        attack = self._penalised()
        other = ActionCandidate(ActionType.MOVE, score=-5)
        apply_anti_ship_adjustments([attack, other], context())
        assert attack.score == 20
        assert attack.has("Anti-Ship Penalty Removed")

    def test_penalty_kept_when_alternative_exists(self):
        attack = self._penalised()
        other = ActionCandidate(ActionType.MOVE, score=5)
        apply_anti_ship_adjustments([attack, other], context())
        assert attack.score == 20 + W.penalties.anti_ship_attacking_drone


class TestPacing:

    def _ready(self, prefix, owner, count):
        return {"lane1": [drone(f"{prefix}{i}", owner=owner) for i in range(count)]}

    def test_short_on_drones_boosts_positive_card_plays(self):
        ctx = context(player(AI_ID, self._ready("a", AI_ID, 1)),
                      player(OPPONENT_ID, self._ready("e", OPPONENT_ID, 3)))
        good = ActionCandidate(ActionType.PLAY_CARD, score=10)
        bad = ActionCandidate(ActionType.PLAY_CARD, score=-3)
        attack = ActionCandidate(ActionType.ATTACK, score=10)
        apply_pacing_adjustments([good, bad, attack], ctx)
        assert good.score == 10 + W.pacing.non_drone_action_bonus
        assert bad.score == -3
        assert attack.score == 10

    def test_even_drone_count_changes_nothing(self):
        ctx = context(player(AI_ID, self._ready("a", AI_ID, 3)),
                      player(OPPONENT_ID, self._ready("e", OPPONENT_ID, 3)))
        good = ActionCandidate(ActionType.PLAY_CARD, score=10)
        apply_pacing_adjustments([good], ctx)
        assert good.score == 10


class TestMovementInhibitor:

    def test_attacking_inhibitor_scales_with_locked_drones(self):
        defs = definitions(drone_def("Anchor", abilities=[keyword_ability(INHIBIT_MOVEMENT)]))
        anchor = drone("e1", "Anchor")
        mine = [drone("a1", owner=AI_ID), drone("a2", owner=AI_ID), drone("a3", owner=AI_ID, is_exhausted=True)]
        ctx = context(player(AI_ID, {"lane1": mine}), player(OPPONENT_ID, {"lane1": [anchor]}), defs)
        attack = _attack(mine[0], anchor, score=5)
        apply_movement_inhibitor_adjustments([attack], ctx)
        t = W.thruster_inhibitor
        assert attack.value_of("Inhibitor Removal") == t.removal_base_bonus + 2 * t.locked_drone_value

    def test_purge_ability_counts_other_locked_drones(self):
        purge = active_ability(PURGE_EFFECT, targeting_type="SELF", affinity="FRIENDLY")
        defs = definitions(drone_def("Buoy", abilities=[purge]))
        buoy = drone("a1", "Buoy", AI_ID)
        mate = drone("a2", owner=AI_ID)
        ctx = context(player(AI_ID, {"lane2": [buoy, mate]}), defs=defs)
        use = ActionCandidate(ActionType.USE_ABILITY, drone=buoy, ability=purge, target=buoy, lane="lane2")
        apply_movement_inhibitor_adjustments([use], ctx)
        assert use.value_of("Lock-down Released") == W.thruster_inhibitor.locked_drone_value


class TestInterception:

    def _board(self):
        slow = drone("a1", owner=AI_ID, attack=1, speed=1)
        hitter = drone("a2", owner=AI_ID, attack=3, speed=1)
        interceptor = drone("e1", hull=2, speed=2)
        ai = player(AI_ID, {"lane1": [slow, hitter]})
        opponent = player(OPPONENT_ID, {"lane1": [interceptor]})
        bridge = SectionTarget("bridge", OPPONENT_ID, opponent.ship_sections["bridge"])
        return context(ai, opponent), slow, hitter, interceptor, bridge

    def test_slow_section_attack_takes_interception_risk(self):
        ctx, slow, _, _, bridge = self._board()
        attack = _attack(slow, bridge, score=100)
        apply_interception_adjustments([attack], ctx)
        assert attack.value_of("Interception Risk") == W.penalties.interception_risk

    def test_unchecked_section_attack_bonus(self):
        fast = drone("a1", owner=AI_ID, attack=1, speed=4)
        opponent = player(OPPONENT_ID, {"lane1": [drone("e1", speed=2)]})
        ctx = context(player(AI_ID, {"lane1": [fast]}), opponent)
        bridge = SectionTarget("bridge", OPPONENT_ID, opponent.ship_sections["bridge"])
        attack = _attack(fast, bridge, score=10)
        apply_interception_adjustments([attack], ctx)
        assert attack.value_of("Unchecked Threat") == W.interception.unchecked_threat_bonus
        assert not attack.has("Interception Risk")
        assert attack.has("Threats In Check")

    def test_killing_interceptor_credits_blocked_section_attack(self):
        ctx, slow, hitter, interceptor, bridge = self._board()
        section_attack = _attack(slow, bridge, score=100)
        removal = _attack(hitter, interceptor, score=10)
        apply_interception_adjustments([section_attack, removal], ctx)
        assert removal.value_of("Interceptor Removal") == 100

    def test_destroy_card_on_interceptor_gets_premium(self):
        ctx, slow, _, interceptor, bridge = self._board()
        section_attack = _attack(slow, bridge, score=100)
        kill = card("kill", "DESTROY", targeting=enemy_drone_targeting())
        play = _card_play(kill, interceptor, score=10)
        apply_interception_adjustments([section_attack, play], ctx)
        premium = W.interception.interceptor_removal_card_premium
        assert play.value_of("Interceptor Removal (Destroy)") == round(100 * premium)


    def _guard_board(self, ai_sections=None, opponent_sections=None):
        guard = drone("g1", owner=AI_ID, attack=1, speed=4)
        raider = drone("e1", attack=2, speed=1)
        ai = player(AI_ID, {"lane1": [guard]}, sections=ai_sections)
        opponent = player(OPPONENT_ID, {"lane1": [raider]}, sections=opponent_sections)
        return context(ai, opponent), guard, raider

    def _defense_penalty(self, **sections):
        ctx, guard, raider = self._guard_board(**sections)
        attack = _attack(guard, raider, score=10)
        apply_interception_adjustments([attack], ctx)
        return attack

    def test_blocking_drone_pays_to_leave_its_post(self):
        attack = self._defense_penalty()
        # 2 ship damage, section stays healthy
        assert attack.value_of("Defense Penalty") == pytest.approx(
            2 * W.defense_urgency.base_damage_penalty * W.defense_urgency.soft_threat_factor)
        assert not attack.has("Win Race (Defense)")

    def test_defense_weighs_more_when_ahead(self):
        level = self._defense_penalty().value_of("Defense Penalty")
        ahead = self._defense_penalty(opponent_sections={
            "bridge": section("bridge"), "powerCell": section("powerCell", hull=5),
            "droneControlHub": section("droneControlHub"),
        })
        assert ahead.value_of("Defense Penalty") == pytest.approx(level * W.win_race.ahead_defense)
        assert ahead.has("Win Race (Defense)")

    def test_defense_weighs_less_when_behind(self):
        level = self._defense_penalty().value_of("Defense Penalty")
        behind = self._defense_penalty(ai_sections={
            "bridge": section("bridge"), "powerCell": section("powerCell"),
            "droneControlHub": section("droneControlHub", hull=5),
        })
        assert behind.value_of("Defense Penalty") == pytest.approx(level * W.win_race.behind_defense)


class TestPipeline:

    def test_invalid_candidates_stay_invalid(self):
        ctx = context()
        bad = ActionCandidate(ActionType.PLAY_CARD)
        bad.set_invalid("Blocked")
        apply_adjustments([bad], ctx)
        assert bad.is_invalid
