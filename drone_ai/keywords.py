"""
Keyword Predicates

Pure functions over a resolved ability tuple. Evaluators ask these questions
instead of matching ability strings against a global table, so the answer only
depends on the definitions the context was built with.
"""

from typing import Dict, Iterable, List, Optional, Tuple, FrozenSet

from drone_ai.definitions import Ability, PASSIVE, TRIGGERED

GUARDIAN = "GUARDIAN"
DEFENDER = "DEFENDER"
JAMMER = "JAMMER"
PIERCING = "PIERCING"
DOGFIGHT = "DOGFIGHT"
RETALIATE = "RETALIATE"
ALWAYS_INTERCEPTS = "ALWAYS_INTERCEPTS"
INHIBIT_MOVEMENT = "INHIBIT_MOVEMENT"
INTERCEPTOR = "INTERCEPTOR"
NOT_FIRST_ACTION = "NOT_FIRST_ACTION"

Abilities = Iterable[Ability]


def _effects(abilities: Abilities):
    for ability in abilities:
        for effect in ability.effects:
            yield ability, effect


def keywords_of(abilities: Abilities) -> FrozenSet[str]:
    """Keywords granted unconditionally by passive abilities"""
    return frozenset(
        effect.keyword for ability, effect in _effects(abilities)
        if effect.type == "GRANT_KEYWORD" and effect.keyword
    )


def has_keyword(abilities: Abilities, keyword: str) -> bool:
    return keyword in keywords_of(abilities)


def ship_bonus_damage(abilities: Abilities) -> int:
    """Extra damage dealt when attacking a ship section"""
    return sum(
        effect.value for ability, effect in _effects(abilities)
        if ability.type == PASSIVE and effect.type == "BONUS_DAMAGE_VS_SHIP"
    )


def is_anti_ship(abilities: Abilities) -> bool:
    return ship_bonus_damage(abilities) > 0


def retaliate_damage(abilities: Abilities) -> Optional[int]:
    """
    Damage dealt back to an attacker that fails to destroy this drone.

    Returns None when the drone has no retaliate ability, and 0 when the
    ability carries no explicit value (callers fall back to effective attack).
    """
    for ability, effect in _effects(abilities):
        if effect.type == "GRANT_KEYWORD" and effect.keyword == RETALIATE:
            return effect.value
    return None


def growth_attack_gain(abilities: Abilities) -> Tuple[Optional[str], int]:
    """(ability name, permanent attack gained after attacking)"""
    for ability, effect in _effects(abilities):
        if effect.type != "AFTER_ATTACK" or effect.sub_effect is None:
            continue
        sub = effect.sub_effect
        if sub.type == "PERMANENT_STAT_MOD" and sub.mod and sub.mod.stat == "attack":
            return ability.name, sub.mod.value
    return None, 0


def conditional_keyword_vs_marked(abilities: Abilities, keyword: str = PIERCING) -> Optional[Ability]:
    """Ability granting `keyword` only when the target is marked, if any"""
    for ability, effect in _effects(abilities):
        if (effect.type == "CONDITIONAL_KEYWORD" and effect.keyword == keyword
                and effect.condition == "TARGET_IS_MARKED"):
            return ability
    return None


def has_trigger(abilities: Abilities, *triggers: str) -> bool:
    return any(a.type == TRIGGERED and a.trigger in triggers for a in abilities)


def has_on_move_trigger(abilities: Abilities) -> bool:
    return has_trigger(abilities, "ON_MOVE")


def on_move_stat_gains(abilities: Abilities) -> Dict[str, int]:
    """Permanent stat gains from ON_MOVE triggers, keyed by stat"""
    gains: Dict[str, int] = {}
    for ability in abilities:
        if ability.type != TRIGGERED or ability.trigger != "ON_MOVE":
            continue
        for effect in ability.effects:
            if effect.mod is not None:
                gains[effect.mod.stat] = gains.get(effect.mod.stat, 0) + effect.mod.value
    return gains


def has_on_deploy_mark(abilities: Abilities) -> bool:
    return any(
        ability.type == TRIGGERED and ability.trigger == "ON_DEPLOY"
        and effect.type == "MARK_RANDOM_ENEMY"
        for ability, effect in _effects(abilities)
    )


def has_round_start_threat(abilities: Abilities) -> bool:
    return any(
        ability.type == TRIGGERED and ability.trigger == "ON_ROUND_START"
        and effect.type == "INCREASE_THREAT"
        for ability, effect in _effects(abilities)
    )


def triggers_on_ship_hull_damage(abilities: Abilities) -> bool:
    return has_trigger(abilities, "ON_SHIP_SECTION_HULL_DAMAGE")


def inhibits_movement(abilities: Abilities) -> bool:
    return has_keyword(abilities, INHIBIT_MOVEMENT)


def active_abilities(abilities: Abilities) -> List[Ability]:
    return [a for a in abilities if a.is_active]


def has_active_ability(abilities: Abilities) -> bool:
    return bool(active_abilities(abilities))


def has_after_attack_effect(abilities: Abilities) -> bool:
    if has_trigger(abilities, "ON_ATTACK"):
        return True
    return any(effect.type == "AFTER_ATTACK" for _, effect in _effects(abilities))
