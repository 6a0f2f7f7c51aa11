"""
Board Models

Read-only snapshots of the board the engine scores against, plus the single
mutable type used for counterfactual simulation.

- Drone / ShipSection / PlayerState are frozen. Scoring code can read them but
  has no way to change them.
- ScratchState is a private structural copy of one player's board. It is the
  only type with mutating methods, and it is built fresh for every "what if".
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

LANES: Tuple[str, ...] = ("lane1", "lane2", "lane3")


class DroneAIError(Exception):
    """Base class for engine errors that must not be swallowed"""


class ScratchStateError(DroneAIError):
    """A counterfactual mutation referenced something that is not on the board"""


class DamageType(Enum):
    NORMAL = "NORMAL"
    PIERCING = "PIERCING"
    ION = "ION"                          # shields only
    KINETIC = "KINETIC"                  # hull only, fully blocked by shields
    SHIELD_BREAKER = "SHIELD_BREAKER"    # each point strips two shields

    @classmethod
    def parse(cls, value) -> 'DamageType':
        if isinstance(value, DamageType):
            return value
        if not value:
            return cls.NORMAL
        try:
            return cls(str(value).upper())
        except ValueError:
            logger.warning(f"Unknown damage type '{value}', treating as NORMAL")
            return cls.NORMAL


class ShipStatus(Enum):
    HEALTHY = "healthy"
    DAMAGED = "damaged"
    CRITICAL = "critical"


def lane_index(lane: str) -> int:
    """Zero-based index of a lane id"""
    return LANES.index(lane)


def adjacent_lanes(lane: str) -> List[str]:
    idx = lane_index(lane)
    return [LANES[i] for i in (idx - 1, idx + 1) if 0 <= i < len(LANES)]


@dataclass(frozen=True)
class StatMod:
    stat: str
    value: int
    type: str = "temporary"  # temporary / permanent

    @property
    def is_permanent(self) -> bool:
        return self.type == "permanent"


@dataclass(frozen=True)
class Drone:
    """A drone instance on the board"""
    id: str
    name: str
    owner: str = ""
    drone_class: int = 0
    attack: int = 0
    speed: int = 0
    hull: int = 1
    max_hull: int = 0
    current_shields: int = 0
    current_max_shields: int = 0
    is_exhausted: bool = False
    is_marked: bool = False
    is_suppressed: bool = False
    is_snared: bool = False
    cannot_move: bool = False
    cannot_attack: bool = False
    cannot_intercept: bool = False
    does_not_ready: bool = False
    damage_type: DamageType = DamageType.NORMAL
    is_token: bool = False
    stat_mods: Tuple[StatMod, ...] = ()

    def __post_init__(self):
        if self.max_hull < self.hull:
            object.__setattr__(self, 'max_hull', self.hull)

    @property
    def is_ready(self) -> bool:
        return not self.is_exhausted

    @property
    def durability(self) -> int:
        return self.hull + self.current_shields

    @property
    def missing_hull(self) -> int:
        return max(0, self.max_hull - self.hull)

    @property
    def missing_shields(self) -> int:
        return max(0, self.current_max_shields - self.current_shields)

    def status_effects(self) -> List[str]:
        """Names of clearable status effects currently applied"""
        flags = [
            ("marked", self.is_marked),
            ("suppressed", self.is_suppressed),
            ("snared", self.is_snared),
            ("cannot_move", self.cannot_move),
            ("cannot_attack", self.cannot_attack),
            ("cannot_intercept", self.cannot_intercept),
            ("does_not_ready", self.does_not_ready),
        ]
        return [name for name, active in flags if active]


@dataclass(frozen=True)
class SectionThresholds:
    damaged: int = 4   # hull at or below this is damaged
    critical: int = 0  # hull at or below this is critical


@dataclass(frozen=True)
class ShipSection:
    name: str
    hull: int
    max_hull: int
    shields: int = 0
    allocated_shields: int = 0
    thresholds: SectionThresholds = field(default_factory=SectionThresholds)

    @property
    def missing_hull(self) -> int:
        return max(0, self.max_hull - self.hull)

    @property
    def missing_shields(self) -> int:
        return max(0, self.shields - self.allocated_shields)


@dataclass(frozen=True)
class Upgrade:
    """An upgrade applied to every copy of a drone type"""
    instance_id: str
    drone_type: str
    mod: Optional[StatMod] = None
    keyword: Optional[str] = None
    slots: int = 1


@dataclass(frozen=True)
class DroneAvailability:
    ready_count: int = 0
    in_play_count: int = 0
    rebuilding_count: int = 0


class BoardReader:
    """Read protocol shared by PlayerState and ScratchState"""

    player_id: str
    drones_on_board: Dict[str, Sequence[Drone]]
    ship_sections: Dict[str, ShipSection]

    def drones_in(self, lane: str) -> Tuple[Drone, ...]:
        return tuple(self.drones_on_board.get(lane, ()))

    def iter_drones(self) -> Iterator[Tuple[str, Drone]]:
        for lane in LANES:
            for drone in self.drones_on_board.get(lane, ()):
                yield lane, drone

    def all_drones(self) -> List[Drone]:
        return [drone for _, drone in self.iter_drones()]

    def ready_drones(self) -> List[Tuple[str, Drone]]:
        return [(lane, drone) for lane, drone in self.iter_drones() if drone.is_ready]

    def find_drone(self, drone_id: str) -> Optional[Drone]:
        for _, drone in self.iter_drones():
            if drone.id == drone_id:
                return drone
        return None

    def lane_of(self, drone_id: str) -> Optional[str]:
        for lane, drone in self.iter_drones():
            if drone.id == drone_id:
                return lane
        return None

    def count_type_in_lane(self, drone_name: str, lane: str) -> int:
        return sum(1 for d in self.drones_in(lane) if d.name == drone_name)


@dataclass(frozen=True)
class PlayerState(BoardReader):
    """Live snapshot of one player. Never mutated by the engine."""
    player_id: str
    name: str = ""
    energy: int = 0
    momentum: int = 0
    deployment_budget: int = 0
    initial_deployment_budget: int = 0
    cpu_limit: int = 10
    hand: Tuple = ()
    drones_on_board: Dict[str, Tuple[Drone, ...]] = field(
        default_factory=lambda: {lane: () for lane in LANES})
    ship_sections: Dict[str, ShipSection] = field(default_factory=dict)
    drone_availability: Dict[str, DroneAvailability] = field(default_factory=dict)
    applied_upgrades: Dict[str, Tuple[Upgrade, ...]] = field(default_factory=dict)
    deployed_drone_counts: Dict[str, int] = field(default_factory=dict)
    active_drone_pool: Tuple[str, ...] = ()

    def non_token_drone_count(self) -> int:
        return sum(1 for d in self.all_drones() if not d.is_token)

    def upgrades_for(self, drone_type: str) -> Tuple[Upgrade, ...]:
        return tuple(self.applied_upgrades.get(drone_type, ()))

    def to_scratch(self) -> 'ScratchState':
        return ScratchState.of(self)


class ScratchState(BoardReader):
    """
    Disposable, mutable copy of one player's board.

    Lanes and sections are copied structurally; drones themselves are frozen
    values, so edits replace them rather than changing them in place. Nothing
    done here can leak back into the PlayerState it was built from.
    """

    def __init__(self, player_id: str, drones_on_board: Dict[str, List[Drone]],
                 ship_sections: Dict[str, ShipSection]):
        self.player_id = player_id
        self.drones_on_board = drones_on_board
        self.ship_sections = ship_sections

    @classmethod
    def of(cls, board: BoardReader) -> 'ScratchState':
        lanes = {lane: list(board.drones_on_board.get(lane, ())) for lane in LANES}
        return cls(board.player_id, lanes, dict(board.ship_sections))

    def _locate(self, drone_id: str) -> Tuple[str, int]:
        for lane in LANES:
            for idx, drone in enumerate(self.drones_on_board[lane]):
                if drone.id == drone_id:
                    return lane, idx
        raise ScratchStateError(f"Drone {drone_id} is not on {self.player_id}'s board")

    def add_drone(self, lane: str, drone: Drone):
        if lane not in self.drones_on_board:
            raise ScratchStateError(f"Unknown lane {lane}")
        self.drones_on_board[lane].append(drone)

    def remove_drone(self, drone_id: str) -> Drone:
        lane, idx = self._locate(drone_id)
        return self.drones_on_board[lane].pop(idx)

    def update_drone(self, drone_id: str, **changes) -> Drone:
        lane, idx = self._locate(drone_id)
        updated = replace(self.drones_on_board[lane][idx], **changes)
        self.drones_on_board[lane][idx] = updated
        return updated

    def move_drone(self, drone_id: str, to_lane: str) -> Drone:
        if to_lane not in self.drones_on_board:
            raise ScratchStateError(f"Unknown lane {to_lane}")
        drone = self.remove_drone(drone_id)
        self.drones_on_board[to_lane].append(drone)
        return drone

    def apply_stat_mod(self, drone_id: str, mod: StatMod) -> Drone:
        lane, idx = self._locate(drone_id)
        drone = self.drones_on_board[lane][idx]
        return self.update_drone(drone_id, stat_mods=drone.stat_mods + (mod,))

    def update_section(self, name: str, **changes) -> ShipSection:
        if name not in self.ship_sections:
            raise ScratchStateError(f"Unknown ship section {name}")
        updated = replace(self.ship_sections[name], **changes)
        self.ship_sections[name] = updated
        return updated


def counterfactual(board: BoardReader, mutation: Callable[[ScratchState], None]) -> ScratchState:
    """Copy `board` into a fresh ScratchState and apply `mutation` to the copy"""
    scratch = ScratchState.of(board)
    mutation(scratch)
    return scratch


@dataclass(frozen=True)
class SectionTarget:
    """A ship section as an attack or card target"""
    name: str
    owner: str
    section: ShipSection

    @property
    def id(self) -> str:
        return self.name


@dataclass(frozen=True)
class LaneTarget:
    lane: str
    owner: str = ""

    @property
    def id(self) -> str:
        return self.lane

    @property
    def name(self) -> str:
        return self.lane


@dataclass(frozen=True)
class DroneCardTarget:
    """A drone type in the active pool, targeted by upgrades"""
    name: str
    owner: str

    @property
    def id(self) -> str:
        return self.name


@dataclass(frozen=True)
class UpgradeTarget:
    upgrade: Upgrade
    owner: str

    @property
    def id(self) -> str:
        return self.upgrade.instance_id

    @property
    def name(self) -> str:
        return self.upgrade.drone_type
