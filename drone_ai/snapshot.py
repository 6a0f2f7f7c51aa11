"""
Snapshot Loader

Builds PlayerStates and the placed-section layout from a JSON snapshot of the
board, for tooling and replays. Keys may be camelCase (as the game client
writes them) or snake_case.

    {
      "turn": 4,
      "ai": {"playerId": "player2", "energy": 6, "hand": ["CARD001"],
             "dronesOnBoard": {"lane1": [{"id": "d1", "name": "Dart", ...}]},
             "shipSections": {"bridge": {"hull": 10, "maxHull": 10}}},
      "opponent": {"playerId": "player1", ...},
      "placedSections": {"player2": ["bridge", "powerCell", "droneControlHub"]}
    }

`player2` / `player1` are accepted in place of `ai` / `opponent`.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple, Union

from drone_ai.context import EvaluationContext, build_context
from drone_ai.definitions import DefinitionTables
from drone_ai.loader import snake_keys
from drone_ai.models import (
    LANES, DamageType, Drone, DroneAIError, DroneAvailability, PlayerState, SectionThresholds,
    ShipSection, StatMod, Upgrade,
)

logger = logging.getLogger(__name__)


class SnapshotError(DroneAIError):
    """Snapshot is missing required data or names an unknown lane"""


def _require(data: Mapping[str, Any], key: str, where: str):
    if key not in data:
        raise SnapshotError(f"Missing '{key}' in {where}")
    return data[key]


def _check_lane(lane: str, where: str):
    if lane not in LANES:
        raise SnapshotError(f"Unknown lane '{lane}' in {where}")


def parse_drone(raw: Mapping[str, Any], owner: str) -> Drone:
    data = snake_keys(raw)
    drone_id = _require(data, "id", "drone")
    name = _require(data, "name", f"drone {drone_id}")
    mods = tuple(
        StatMod(stat=m["stat"], value=int(m["value"]), type=m.get("type", "temporary"))
        for m in data.get("stat_mods", ())
    )
    return Drone(
        id=str(drone_id),
        name=name,
        owner=data.get("owner", owner),
        drone_class=int(data.get("drone_class", 0)),
        attack=int(data.get("attack", 0)),
        speed=int(data.get("speed", 0)),
        hull=int(data.get("hull", 1)),
        max_hull=int(data.get("max_hull", 0)),
        current_shields=int(data.get("current_shields", 0)),
        current_max_shields=int(data.get("current_max_shields", 0)),
        is_exhausted=bool(data.get("is_exhausted", False)),
        is_marked=bool(data.get("is_marked", False)),
        is_suppressed=bool(data.get("is_suppressed", False)),
        is_snared=bool(data.get("is_snared", False)),
        cannot_move=bool(data.get("cannot_move", False)),
        cannot_attack=bool(data.get("cannot_attack", False)),
        cannot_intercept=bool(data.get("cannot_intercept", False)),
        does_not_ready=bool(data.get("does_not_ready", False)),
        damage_type=DamageType.parse(data.get("damage_type")),
        is_token=bool(data.get("is_token", False)),
        stat_mods=mods,
    )


def parse_section(name: str, raw: Mapping[str, Any]) -> ShipSection:
    data = snake_keys(raw)
    hull = int(_require(data, "hull", f"section {name}"))
    thresholds = snake_keys(data.get("thresholds", {}))
    return ShipSection(
        name=name,
        hull=hull,
        max_hull=int(data.get("max_hull", hull)),
        shields=int(data.get("shields", 0)),
        allocated_shields=int(data.get("allocated_shields", 0)),
        thresholds=SectionThresholds(
            damaged=int(thresholds.get("damaged", SectionThresholds.damaged)),
            critical=int(thresholds.get("critical", SectionThresholds.critical)),
        ),
    )


def _parse_upgrades(raw: Mapping[str, Any]) -> Dict[str, Tuple[Upgrade, ...]]:
    upgrades = {}
    for drone_type, entries in raw.items():
        parsed = []
        for entry in entries:
            data = snake_keys(entry)
            mod = data.get("mod")
            parsed.append(Upgrade(
                instance_id=str(_require(data, "instance_id", f"upgrade on {drone_type}")),
                drone_type=drone_type,
                mod=StatMod(mod["stat"], int(mod["value"]), "permanent") if mod else None,
                keyword=data.get("keyword"),
                slots=int(data.get("slots", 1)),
            ))
        upgrades[drone_type] = tuple(parsed)
    return upgrades


def parse_player(raw: Mapping[str, Any], definitions: DefinitionTables) -> PlayerState:
    data = snake_keys(raw)
    player_id = _require(data, "player_id", "player")

    board = {lane: () for lane in LANES}
    for lane, drones in data.get("drones_on_board", {}).items():
        _check_lane(lane, f"{player_id}.dronesOnBoard")
        board[lane] = tuple(parse_drone(d, player_id) for d in drones)

    hand = []
    for card_id in data.get("hand", ()):
        if isinstance(card_id, Mapping):
            card_id = card_id.get("id")
        card = definitions.card(card_id)
        if card is None:
            logger.warning(f"⚠️ Card '{card_id}' in {player_id}'s hand not found in definitions, skipping")
            continue
        hand.append(card)

    availability = {
        name: DroneAvailability(**{k: int(v) for k, v in snake_keys(counts).items()
                                   if k in ("ready_count", "in_play_count", "rebuilding_count")})
        for name, counts in data.get("drone_availability", {}).items()
    }

    return PlayerState(
        player_id=player_id,
        name=data.get("name", player_id),
        energy=int(data.get("energy", 0)),
        momentum=int(data.get("momentum", 0)),
        deployment_budget=int(data.get("deployment_budget", 0)),
        initial_deployment_budget=int(data.get("initial_deployment_budget", 0)),
        cpu_limit=int(data.get("cpu_limit", 10)),
        hand=tuple(hand),
        drones_on_board=board,
        ship_sections={name: parse_section(name, s) for name, s in data.get("ship_sections", {}).items()},
        drone_availability=availability,
        applied_upgrades=_parse_upgrades(data.get("applied_upgrades", {})),
        deployed_drone_counts={k: int(v) for k, v in data.get("deployed_drone_counts", {}).items()},
        active_drone_pool=tuple(data.get("active_drone_pool", ())),
    )


@dataclass
class Snapshot:
    ai: PlayerState
    opponent: PlayerState
    placed_sections: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    turn: int = 1

    def context(self, definitions: DefinitionTables, **kwargs) -> EvaluationContext:
        """Evaluation context for this snapshot; kwargs go to build_context()"""
        kwargs.setdefault("turn", self.turn)
        return build_context(self.ai, self.opponent, definitions,
                             placed_sections=self.placed_sections, **kwargs)


def _side(data: Mapping[str, Any], primary: str, fallback: str) -> Mapping[str, Any]:
    if primary in data:
        return data[primary]
    if fallback in data:
        return data[fallback]
    raise SnapshotError(f"Snapshot has neither '{primary}' nor '{fallback}'")


def load_snapshot(source: Union[Mapping[str, Any], str, Path], definitions: DefinitionTables) -> Snapshot:
    """
    Parse a snapshot from a dict or a JSON file path.

    Raises SnapshotError on missing required keys or unknown lane ids. Unknown
    cards in hand are logged and skipped.
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            with open(path, 'r') as f:
                source = json.load(f)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Invalid JSON in {path}: {e}") from e

    data = snake_keys(source)
    ai = parse_player(_side(data, "ai", "player2"), definitions)
    opponent = parse_player(_side(data, "opponent", "player1"), definitions)

    placed: Dict[str, Tuple[str, ...]] = {}
    for player_id, layout in data.get("placed_sections", {}).items():
        placed[player_id] = tuple(layout)

    snapshot = Snapshot(ai=ai, opponent=opponent, placed_sections=placed, turn=int(data.get("turn", 1)))
    logger.debug(f"Loaded snapshot: turn {snapshot.turn}, "
                 f"{len(ai.all_drones())} AI drones vs {len(opponent.all_drones())} opponent drones")
    return snapshot
