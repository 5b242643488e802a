"""
Events, scene mutations and snapshots emitted by the game session
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

Vec3 = Tuple[float, float, float]


def as_vec3(v) -> Vec3:
    return (float(v[0]), float(v[1]), float(v[2]))


# ========== GAME EVENTS ==========

@dataclass(frozen=True)
class ItemCollected:
    pickup_id: int
    kind: str
    collected_count: int
    total: int


@dataclass(frozen=True)
class GameWon:
    collected_count: int
    ticks: int


# ========== SCENE MUTATIONS ==========

@dataclass(frozen=True)
class SpawnEntity:
    """Create a renderable entity. kind is wall, pickup, exit or player."""
    entity_id: str
    kind: str
    position: Vec3
    yaw: float = 0.0
    pitch: float = 0.0
    extents: Optional[Vec3] = None
    variant: Optional[str] = None


@dataclass(frozen=True)
class RemoveEntity:
    entity_id: str


@dataclass(frozen=True)
class SetTransform:
    entity_id: str
    position: Vec3
    yaw: float = 0.0
    pitch: float = 0.0


# ========== SNAPSHOT ==========

@dataclass(frozen=True)
class PickupView:
    pickup_id: int
    kind: str
    cell: Tuple[int, int]
    position: Vec3


@dataclass(frozen=True)
class Snapshot:
    """Everything a host needs to draw one frame"""
    state: str
    player_position: Optional[Vec3] = None
    yaw: float = 0.0
    pitch: float = 0.0
    pickups: Tuple[PickupView, ...] = ()
    colliders: tuple = ()
    exit_position: Optional[Vec3] = None
    collected_count: int = 0
    total_count: int = 0
    grid: object = None


@dataclass
class TickResult:
    events: list = field(default_factory=list)
    mutations: list = field(default_factory=list)
    snapshot: Optional[Snapshot] = None

    def events_of(self, event_type):
        return [e for e in self.events if isinstance(e, event_type)]
