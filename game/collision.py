"""
Collision detection - static wall boxes against the player sphere
"""

import logging

import numpy as np
from numba import njit

from maze.maze_core import Cell

logger = logging.getLogger(__name__)


@njit(cache=True)
def _first_penetration(centers, half_extents, px, py, pz, radius_sq):
    """
    Index of the first box the sphere penetrates, or -1 (Numba JIT compiled)

    Closest point on each box is the sphere centre clamped per axis to the
    box extents; penetration is a squared distance strictly below radius_sq.
    """
    for i in range(centers.shape[0]):
        lo = centers[i, 0] - half_extents[i, 0]
        hi = centers[i, 0] + half_extents[i, 0]
        qx = px
        if qx < lo:
            qx = lo
        elif qx > hi:
            qx = hi

        lo = centers[i, 1] - half_extents[i, 1]
        hi = centers[i, 1] + half_extents[i, 1]
        qy = py
        if qy < lo:
            qy = lo
        elif qy > hi:
            qy = hi

        lo = centers[i, 2] - half_extents[i, 2]
        hi = centers[i, 2] + half_extents[i, 2]
        qz = pz
        if qz < lo:
            qz = lo
        elif qz > hi:
            qz = hi

        dx = px - qx
        dy = py - qy
        dz = pz - qz
        if dx * dx + dy * dy + dz * dz < radius_sq:
            return i
    return -1


class WallCollider:
    """Axis-aligned box standing on one WALL cell"""

    def __init__(self, cell, center, half_extents):
        self.cell = cell
        self.center = np.asarray(center, dtype=np.float64)
        self.half_extents = np.asarray(half_extents, dtype=np.float64)

    @property
    def entity_id(self):
        """Scene-graph id for this wall"""
        return f"wall-{self.cell[0]}-{self.cell[1]}"

    def closest_point(self, position):
        """Point of the box nearest to position"""
        return np.clip(position, self.center - self.half_extents, self.center + self.half_extents)

    def __repr__(self):
        return f"WallCollider(cell={self.cell}, center={tuple(round(float(v), 3) for v in self.center)})"


def build_colliders(grid, cell_size, wall_height):
    """One box per WALL cell, centred on the cell at half wall height"""
    half_extents = (cell_size / 2.0, wall_height / 2.0, cell_size / 2.0)
    return [
        WallCollider(cell, grid.cell_to_world(*cell, cell_size, y=wall_height / 2.0), half_extents)
        for cell in grid.cells_of(Cell.WALL)
    ]


class CollisionWorld:
    """
    Immutable set of wall colliders for one session

    Collider data is packed into numpy arrays once so every query runs
    through the JIT kernel.
    """

    def __init__(self, colliders):
        self.colliders = tuple(colliders)
        if self.colliders:
            self._centers = np.ascontiguousarray([c.center for c in self.colliders], dtype=np.float64)
            self._half_extents = np.ascontiguousarray([c.half_extents for c in self.colliders], dtype=np.float64)
        else:
            self._centers = np.empty((0, 3), dtype=np.float64)
            self._half_extents = np.empty((0, 3), dtype=np.float64)

    @classmethod
    def from_grid(cls, grid, cell_size, wall_height):
        return cls(build_colliders(grid, cell_size, wall_height))

    def colliding_with(self, position, radius):
        """
        First collider the sphere at position penetrates

        Returns:
            WallCollider or None
        """
        hit = _first_penetration(
            self._centers, self._half_extents,
            float(position[0]), float(position[1]), float(position[2]),
            float(radius) * float(radius),
        )
        if hit < 0:
            return None
        return self.colliders[hit]

    def penetrating(self, position, radius):
        return self.colliding_with(position, radius) is not None

    def resolve_move(self, current_pos, proposed_pos, player_radius):
        """
        Accept or reject a move

        Any penetration rejects the whole move (no sliding), so walking
        diagonally into a corner stops dead.

        Returns:
            (final_pos, collided)
        """
        current = np.array(current_pos, dtype=np.float64)
        proposed = np.array(proposed_pos, dtype=np.float64)

        if np.array_equal(current, proposed):
            return current, False

        hit = self.colliding_with(proposed, player_radius)
        if hit is not None:
            logger.debug("Move blocked by %r", hit)
            return current, True
        return proposed, False

    def __len__(self):
        return len(self.colliders)

    def __iter__(self):
        return iter(self.colliders)

    def __repr__(self):
        return f"CollisionWorld(colliders={len(self.colliders)})"


def resolve_move(current_pos, proposed_pos, colliders, player_radius):
    """
    Resolve a sphere move against colliders

    Args:
        current_pos: Position the player occupies now
        proposed_pos: Position the player wants to move to
        colliders: CollisionWorld or iterable of WallCollider
        player_radius: Sphere radius

    Returns:
        (final_pos, collided)
    """
    if not isinstance(colliders, CollisionWorld):
        colliders = CollisionWorld(colliders)
    return colliders.resolve_move(current_pos, proposed_pos, player_radius)
