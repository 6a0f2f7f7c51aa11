"""
Board Context Builder

Assembles the read-only bundle every evaluator receives: both player
snapshots, the placed ship-section layout, definitions, weights, the
effective-stats provider, the ship-status classifier and the random source.
A context is built once per decision and never changes afterwards.
"""

import logging
import random
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from drone_ai.definitions import Ability, DefinitionTables, DroneDefinition
from drone_ai.keywords import JAMMER, keywords_of, ship_bonus_damage
from drone_ai.models import (
    LANES, BoardReader, Drone, PlayerState, ShipSection, ShipStatus, lane_index,
)
from drone_ai.weights import Weights

if TYPE_CHECKING:
    from drone_ai.selector import RandomSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectiveStats:
    attack: int
    speed: int
    hull: int
    max_shields: int
    drone_class: int
    current_shields: int = 0
    keywords: FrozenSet[str] = frozenset()
    ship_bonus_damage: int = 0


StatsProvider = Callable[[Drone, Optional[str]], EffectiveStats]
StatusClassifier = Callable[[ShipSection], ShipStatus]


def base_stats_provider(definitions: DefinitionTables) -> StatsProvider:
    """
    Default provider: snapshot stats plus stat mods, keywords from definitions.

    Upgrades, auras and lane-conditional bonuses are the host's concern; hosts
    that track them inject their own provider.
    """

    def provider(drone: Drone, lane: Optional[str] = None) -> EffectiveStats:
        abilities = definitions.abilities_of(drone.name)
        attack = drone.attack
        speed = drone.speed
        for mod in drone.stat_mods:
            if mod.stat == "attack":
                attack += mod.value
            elif mod.stat == "speed":
                speed += mod.value
        return EffectiveStats(
            attack=max(0, attack),
            speed=max(0, speed),
            hull=drone.hull,
            max_shields=drone.current_max_shields,
            drone_class=drone.drone_class,
            current_shields=drone.current_shields,
            keywords=keywords_of(abilities),
            ship_bonus_damage=ship_bonus_damage(abilities),
        )

    return provider


def classify_ship_status(section: ShipSection) -> ShipStatus:
    if section.hull <= section.thresholds.critical:
        return ShipStatus.CRITICAL
    if section.hull <= section.thresholds.damaged:
        return ShipStatus.DAMAGED
    return ShipStatus.HEALTHY


@dataclass(frozen=True)
class EvaluationContext:
    """Immutable inputs for one decision"""
    ai: PlayerState
    opponent: PlayerState
    placed_sections: Mapping[str, Tuple[str, ...]]
    definitions: DefinitionTables
    weights: Weights
    stats_provider: StatsProvider
    ship_status: StatusClassifier
    rng: 'RandomSource'
    turn: int = 1
    target_provider: Optional[Callable] = field(default=None, compare=False)

    # --- players -------------------------------------------------------

    def player(self, player_id: str) -> PlayerState:
        if player_id == self.ai.player_id:
            return self.ai
        return self.opponent

    def other(self, player_id: str) -> PlayerState:
        if player_id == self.ai.player_id:
            return self.opponent
        return self.ai

    def owner_of(self, drone: Drone) -> PlayerState:
        """Board a drone belongs to, by owner id or by position"""
        if drone.owner in (self.ai.player_id, self.opponent.player_id):
            return self.player(drone.owner)
        if self.ai.find_drone(drone.id) is not None:
            return self.ai
        return self.opponent

    def swapped(self) -> 'EvaluationContext':
        """Same context seen from the opponent's side"""
        return replace(self, ai=self.opponent, opponent=self.ai)

    # --- board lookups -------------------------------------------------

    def lane_of(self, drone_id: str, board: Optional[BoardReader] = None) -> Optional[str]:
        if board is not None:
            return board.lane_of(drone_id)
        return self.ai.lane_of(drone_id) or self.opponent.lane_of(drone_id)

    def section_name_in_lane(self, player_id: str, lane: str) -> Optional[str]:
        layout = self.placed_sections.get(player_id, ())
        idx = lane_index(lane)
        return layout[idx] if idx < len(layout) else None

    def section_in_lane(self, board: BoardReader, lane: str) -> Optional[ShipSection]:
        name = self.section_name_in_lane(board.player_id, lane)
        if name is None:
            return None
        return board.ship_sections.get(name)

    def section_status(self, board: BoardReader, lane: str) -> Optional[ShipStatus]:
        section = self.section_in_lane(board, lane)
        return self.ship_status(section) if section is not None else None

    # --- definitions and stats -----------------------------------------

    def definition_of(self, name: str) -> Optional[DroneDefinition]:
        return self.definitions.drone(name)

    def abilities_of(self, drone) -> Tuple[Ability, ...]:
        name = drone if isinstance(drone, str) else drone.name
        return self.definitions.abilities_of(name)

    def stats(self, drone: Drone, lane: Optional[str] = None) -> EffectiveStats:
        if lane is None:
            lane = self.lane_of(drone.id)
        return self.stats_provider(drone, lane)

    def has_keyword(self, drone: Drone, keyword: str, lane: Optional[str] = None) -> bool:
        return keyword in self.stats(drone, lane).keywords

    def stat_value(self, drone: Drone, stat: str, lane: Optional[str] = None) -> int:
        """One effective stat by name, falling back to the raw snapshot value"""
        stats = self.stats(drone, lane)
        if hasattr(stats, stat):
            return getattr(stats, stat)
        return getattr(drone, stat, 0)

    def is_jammer(self, drone: Drone) -> bool:
        return self.has_keyword(drone, JAMMER)

    def max_speed(self, drones: Sequence[Drone], lane: str, ready_only: bool = False) -> int:
        speeds = [self.stats(d, lane).speed for d in drones if d.is_ready or not ready_only]
        return max(speeds) if speeds else 0


def _default_layout(player: PlayerState) -> Tuple[str, ...]:
    return tuple(list(player.ship_sections)[:len(LANES)])


def _validate_board(player: PlayerState, definitions: DefinitionTables):
    for lane in player.drones_on_board:
        if lane not in LANES:
            logger.error(f"⚠️ Unknown lane '{lane}' on {player.player_id}'s board")
    for lane, drone in player.iter_drones():
        if drone.name not in definitions:
            logger.error(f"⚠️ Unknown drone type '{drone.name}' ({drone.id}) in {lane}, "
                         f"scoring with snapshot stats only")


def build_context(ai: PlayerState, opponent: PlayerState, definitions: DefinitionTables,
                  placed_sections: Optional[Dict[str, Sequence[str]]] = None,
                  weights: Optional[Weights] = None,
                  stats_provider: Optional[StatsProvider] = None,
                  ship_status: Optional[StatusClassifier] = None,
                  rng: Optional['RandomSource'] = None,
                  turn: int = 1,
                  target_provider: Optional[Callable] = None,
                  seed: Optional[int] = None) -> EvaluationContext:
    """
    Build the immutable evaluation context.

    Bad data (unknown drone types, missing layouts) is logged and scoring
    continues with defaults; nothing here raises for a malformed snapshot.
    """
    _validate_board(ai, definitions)
    _validate_board(opponent, definitions)

    layout: Dict[str, Tuple[str, ...]] = {}
    for player in (ai, opponent):
        given = (placed_sections or {}).get(player.player_id)
        if given is None:
            logger.debug(f"No section layout for {player.player_id}, using section order")
            layout[player.player_id] = _default_layout(player)
        else:
            layout[player.player_id] = tuple(given)
            missing: List[str] = [s for s in given if s not in player.ship_sections]
            if missing:
                logger.warning(f"⚠️ Placed sections {missing} not found for {player.player_id}")

    return EvaluationContext(
        ai=ai,
        opponent=opponent,
        placed_sections=layout,
        definitions=definitions,
        weights=weights or Weights(),
        stats_provider=stats_provider or base_stats_provider(definitions),
        ship_status=ship_status or classify_ship_status,
        rng=rng if rng is not None else random.Random(seed),
        turn=turn,
        target_provider=target_provider,
    )
