"""
Tests for candidates.py and targeting.py
"""

from dataclasses import replace

from drone_ai.candidates import (
    generate_ability_candidates, generate_action_candidates, generate_attack_candidates,
    generate_card_candidates, generate_deployment_candidates, generate_move_candidates,
)
from drone_ai.definitions import CardTargeting, Condition, StatFilter
from drone_ai.evaluators.base import ActionType, TargetType
from drone_ai.keywords import GUARDIAN, INHIBIT_MOVEMENT, JAMMER
from drone_ai.models import SectionTarget, Upgrade
from drone_ai.targeting import ability_targets, card_targets, play_condition_met, valid_card_targets
from tests.factories import (
    AI_ID, OPPONENT_ID, active_ability, card, context, definitions, drone, drone_def,
    enemy_drone_targeting, keyword_ability, player,
)


class TestDeploymentCandidates:

    def test_one_per_lane_for_affordable_types(self):
        defs = definitions(drone_def("Scout", drone_class=1), drone_def("Titan", drone_class=5))
        ai = player(AI_ID, energy=2, active_drone_pool=("Scout", "Titan"))
        candidates = generate_deployment_candidates(context(ai, defs=defs))

        scouts = [c for c in candidates if c.drone_name == "Scout"]
        titans = [c for c in candidates if c.drone_name == "Titan"]
        assert [c.lane for c in scouts] == ["lane1", "lane2", "lane3"]
        assert len(titans) == 1
        assert titans[0].lane is None

    def test_unknown_type_still_yields_candidate(self):
        ai = player(AI_ID, energy=5, active_drone_pool=("Ghost",))
        candidates = generate_deployment_candidates(context(ai))
        assert len(candidates) == 1
        assert candidates[0].action_type == ActionType.DEPLOY
        assert candidates[0].lane is None


class TestAttackCandidates:

    def test_drone_and_section_targets(self):
        attacker = drone("a1", owner=AI_ID, attack=2)
        ctx = context(player(AI_ID, {"lane1": [attacker]}), player(OPPONENT_ID, {"lane1": [drone("e1")]}))
        candidates = generate_attack_candidates(ctx)
        assert [c.target_type for c in candidates] == [TargetType.DRONE, TargetType.SECTION]
        assert candidates[1].target.name == "bridge"

    def test_guardian_shields_section(self):
        defs = definitions(drone_def("Warden", abilities=[keyword_ability(GUARDIAN)]))
        attacker = drone("a1", owner=AI_ID, attack=2)
        ctx = context(player(AI_ID, {"lane1": [attacker]}),
                      player(OPPONENT_ID, {"lane1": [drone("e1", "Warden")]}), defs)
        candidates = generate_attack_candidates(ctx)
        assert all(c.target_type == TargetType.DRONE for c in candidates)

    def test_attackers_that_cannot_attack_are_skipped(self):
        defs = definitions(drone_def("Jammer", abilities=[keyword_ability(JAMMER)]))
        mine = [
            drone("a1", owner=AI_ID, attack=2, is_exhausted=True),
            drone("a2", owner=AI_ID, attack=0),
            drone("a3", "Jammer", AI_ID, attack=2),
            drone("a4", owner=AI_ID, attack=2, cannot_attack=True),
        ]
        ctx = context(player(AI_ID, {"lane1": mine}), player(OPPONENT_ID, {"lane1": [drone("e1")]}), defs)
        assert generate_attack_candidates(ctx) == []


class TestMoveCandidates:

    def test_adjacent_lanes_only(self):
        middle = drone("a1", owner=AI_ID)
        edge = drone("a2", owner=AI_ID)
        ctx = context(player(AI_ID, {"lane2": [middle], "lane1": [edge]}))
        moves = {(c.drone.id, c.to_lane) for c in generate_move_candidates(ctx)}
        assert moves == {("a1", "lane1"), ("a1", "lane3"), ("a2", "lane2")}

    def test_inhibitor_locks_lane(self):
        defs = definitions(drone_def("Anchor", abilities=[keyword_ability(INHIBIT_MOVEMENT)]))
        ctx = context(player(AI_ID, {"lane1": [drone("a1", owner=AI_ID)]}),
                      player(OPPONENT_ID, {"lane1": [drone("e1", "Anchor")]}), defs)
        assert generate_move_candidates(ctx) == []

    def test_max_per_lane_blocks_destination(self):
        defs = definitions(drone_def("Solo", max_per_lane=1))
        ctx = context(player(AI_ID, {"lane1": [drone("a1", "Solo", AI_ID)], "lane2": [drone("a2", "Solo", AI_ID)]}),
                      defs=defs)
        moves = {(c.drone.id, c.to_lane) for c in generate_move_candidates(ctx)}
        assert moves == {("a2", "lane3")}

    def test_pinned_drone_cannot_move(self):
        ctx = context(player(AI_ID, {"lane2": [drone("a1", owner=AI_ID, cannot_move=True)]}))
        assert generate_move_candidates(ctx) == []


class TestCardCandidates:

    def test_damage_cards_only_target_enemies(self):
        zap = card("zap", "DAMAGE", value=1, targeting=CardTargeting("DRONE", "ANY"))
        ai = player(AI_ID, {"lane1": [drone("a1", owner=AI_ID)]}, energy=3, hand=(zap,))
        ctx = context(ai, player(OPPONENT_ID, {"lane1": [drone("e1")], "lane3": [drone("e2")]}))
        targets = [c.target.id for c in generate_card_candidates(ctx)]
        assert targets == ["e1", "e2"]

    def test_unaffordable_card_skipped(self):
        zap = card("zap", "DAMAGE", value=1, cost=4, targeting=enemy_drone_targeting())
        ctx = context(player(AI_ID, energy=3, hand=(zap,)), player(OPPONENT_ID, {"lane1": [drone("e1")]}))
        assert generate_card_candidates(ctx) == []

    def test_untargeted_card_once(self):
        draw = card("draw", "DRAW", value=2)
        ctx = context(player(AI_ID, energy=3, hand=(draw, draw)))
        candidates = generate_card_candidates(ctx)
        assert len(candidates) == 1
        assert candidates[0].target_type == TargetType.NONE

    def test_host_choice_card_skipped(self):
        pick = card("pick", "DRAW", value=1, targeting=CardTargeting("NONE"))
        assert generate_card_candidates(context(player(AI_ID, energy=3, hand=(pick,)))) == []

    def test_single_move_card_per_drone_and_destination(self):
        shift = card("shift", "SINGLE_MOVE", cost=0)
        ai = player(AI_ID, {"lane2": [drone("a1", owner=AI_ID)]}, hand=(shift,))
        candidates = generate_card_candidates(context(ai))
        assert sorted(c.move.to_lane for c in candidates) == ["lane1", "lane3"]
        assert all(c.move.drone.id == "a1" for c in candidates)

    def test_play_condition_gates_card(self):
        rally = replace(card("rally", "DRAW", value=1), play_condition=Condition("CONTROL_LANES", lanes=("lane1",)))
        ctx = context(player(AI_ID, energy=3, hand=(rally,)))
        assert not play_condition_met(rally, ctx)
        assert generate_card_candidates(ctx) == []


class TestAbilityCandidates:

    def test_one_per_target_in_lane(self):
        snipe = active_ability("DAMAGE", value=1)
        defs = definitions(drone_def("Sniper", abilities=[snipe]))
        ai = player(AI_ID, {"lane1": [drone("a1", "Sniper", AI_ID)]})
        opponent = player(OPPONENT_ID, {"lane1": [drone("e1"), drone("e2")], "lane2": [drone("e3")]})
        candidates = generate_ability_candidates(context(ai, opponent, defs))
        assert [c.target.id for c in candidates] == ["e1", "e2"]

    def test_energy_cost_gates_ability(self):
        snipe = active_ability("DAMAGE", value=1, energy_cost=3)
        defs = definitions(drone_def("Sniper", abilities=[snipe]))
        ai = player(AI_ID, {"lane1": [drone("a1", "Sniper", AI_ID)]}, energy=2)
        ctx = context(ai, player(OPPONENT_ID, {"lane1": [drone("e1")]}), defs)
        assert generate_ability_candidates(ctx) == []


class TestTargeting:

    def test_custom_restrictions_and_stat_filter(self):
        targeting = CardTargeting("DRONE", "ENEMY", custom=("READY",),
                                  affected_filter=StatFilter("attack", "GTE", 3))
        opponent = player(OPPONENT_ID, {"lane1": [
            drone("e1", attack=3), drone("e2", attack=1), drone("e3", attack=4, is_exhausted=True),
        ]})
        ctx = context(opponent=opponent)
        picked = valid_card_targets(card("c", "DESTROY", targeting=targeting), ctx)
        assert [d.id for d in picked] == ["e1"]

    def test_section_targets_follow_layout(self):
        targeting = CardTargeting("SHIP_SECTION", "FRIENDLY")
        picked = valid_card_targets(card("c", "HEAL_HULL", targeting=targeting), context())
        assert all(isinstance(t, SectionTarget) for t in picked)
        assert [t.name for t in picked] == ["bridge", "powerCell", "droneControlHub"]

    def test_drone_card_targets_need_free_slot(self):
        targeting = CardTargeting("DRONE_CARD", "FRIENDLY")
        defs = definitions(drone_def("Scout", upgrade_slots=1), drone_def("Tank", upgrade_slots=2))
        ai = player(AI_ID, active_drone_pool=("Scout", "Tank"),
                    applied_upgrades={"Scout": (Upgrade("u1", "Scout"),)})
        picked = valid_card_targets(card("c", "MODIFY_DRONE_BASE", targeting=targeting), context(ai, defs=defs))
        assert [t.name for t in picked] == ["Tank"]

    def test_host_provider_wins(self):
        provided = [drone("e9")]
        ctx = context(target_provider=lambda card_obj, ctx: provided)
        zap = card("zap", "DAMAGE", targeting=enemy_drone_targeting())
        assert card_targets(zap, ctx) == provided

    def test_ability_other_lanes_and_damaged_only(self):
        repair = active_ability("HEAL", value=1, affinity="FRIENDLY", location="OTHER_LANES",
                                restrictions=("DAMAGED_HULL",))
        source = drone("a1", owner=AI_ID)
        hurt = drone("a2", owner=AI_ID, hull=1, max_hull=3)
        fine = drone("a3", owner=AI_ID)
        ai = player(AI_ID, {"lane1": [source], "lane2": [hurt, fine]})
        assert ability_targets(repair, source, "lane1", context(ai)) == [hurt]

    def test_self_targeting(self):
        purge = active_ability("DESTROY_TOKEN_SELF", targeting_type="SELF", affinity="FRIENDLY")
        source = drone("a1", owner=AI_ID)
        assert ability_targets(purge, source, "lane1", context()) == [source]


def test_action_candidates_exclude_deployments():
    attacker = drone("a1", owner=AI_ID, attack=2)
    ctx = context(player(AI_ID, {"lane2": [attacker]}, active_drone_pool=("Scout",)))
    kinds = {c.action_type for c in generate_action_candidates(ctx)}
    assert ActionType.DEPLOY not in kinds
    assert kinds == {ActionType.ATTACK, ActionType.MOVE}
