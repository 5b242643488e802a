import random

import numpy as np
import pytest

from game.collision import CollisionWorld, WallCollider, build_colliders, resolve_move
from maze.generator import generate
from maze.maze_core import Cell

RADIUS = 0.5
HALF = (2.0, 2.0, 2.0)


def wall_at(x, z, cell=(0, 0)):
    return WallCollider(cell, (x, 2.0, z), HALF)


def test_free_move_is_accepted():
    colliders = [wall_at(0.0, 0.0)]
    final, collided = resolve_move((0.0, 1.6, 4.0), (0.0, 1.6, 3.5), colliders, RADIUS)
    assert not collided
    np.testing.assert_allclose(final, (0.0, 1.6, 3.5))


def test_penetrating_move_is_rejected():
    colliders = [wall_at(0.0, 0.0)]
    current = (0.0, 1.6, 3.0)
    final, collided = resolve_move(current, (0.0, 1.6, 2.4), colliders, RADIUS)
    assert collided
    np.testing.assert_allclose(final, current)


def test_touching_exactly_at_radius_is_not_penetration():
    colliders = [wall_at(0.0, 0.0)]
    final, collided = resolve_move((0.0, 1.6, 3.0), (0.0, 1.6, 2.5), colliders, RADIUS)
    assert not collided
    np.testing.assert_allclose(final, (0.0, 1.6, 2.5))


def test_no_sliding_along_walls():
    # Wall to the east; a diagonal step would clear it on z but not on x
    colliders = [wall_at(4.0, 0.0)]
    current = (1.4, 1.6, 0.0)
    final, collided = resolve_move(current, (1.55, 1.6, 0.15), colliders, RADIUS)
    assert collided
    np.testing.assert_allclose(final, current)


def test_diagonal_into_corner_is_fully_blocked():
    colliders = [wall_at(4.0, 0.0), wall_at(0.0, 4.0)]
    current = (1.4, 1.6, 1.4)
    final, collided = resolve_move(current, (1.55, 1.6, 1.55), colliders, RADIUS)
    assert collided
    np.testing.assert_allclose(final, current)


def test_staying_put_never_collides():
    colliders = [wall_at(0.0, 0.0), wall_at(4.0, 4.0)]
    position = (0.0, 1.6, 2.6)
    final, collided = resolve_move(position, position, colliders, RADIUS)
    assert not collided
    np.testing.assert_allclose(final, position)


def test_no_colliders_accepts_everything():
    final, collided = resolve_move((0, 0, 0), (100.0, 0, -3.0), [], RADIUS)
    assert not collided
    np.testing.assert_allclose(final, (100.0, 0.0, -3.0))


def test_colliding_with_reports_the_wall():
    near = wall_at(0.0, 0.0, cell=(1, 2))
    far = wall_at(40.0, 40.0, cell=(9, 9))
    world = CollisionWorld([far, near])
    assert world.colliding_with((0.0, 1.6, 2.3), RADIUS) is near
    assert world.colliding_with((0.0, 1.6, 8.0), RADIUS) is None
    assert world.penetrating((0.0, 1.6, 2.3), RADIUS)


def test_closest_point_clamps_to_box():
    wall = wall_at(0.0, 0.0)
    np.testing.assert_allclose(wall.closest_point(np.array([5.0, 1.0, -1.0])), (2.0, 1.0, -1.0))


def test_one_collider_per_wall_cell():
    grid = generate(11, random.Random(0))
    colliders = build_colliders(grid, 4.0, 3.0)
    assert len(colliders) == len(grid.cells_of(Cell.WALL))
    for c in colliders:
        assert grid.get(*c.cell) == Cell.WALL
        np.testing.assert_allclose(c.half_extents, (2.0, 1.5, 2.0))
        assert c.center[1] == pytest.approx(1.5)
        assert c.entity_id == f"wall-{c.cell[0]}-{c.cell[1]}"


@pytest.mark.parametrize("seed", range(5))
def test_open_cell_centres_are_not_penetrating(seed):
    grid = generate(15, random.Random(seed))
    world = CollisionWorld.from_grid(grid, 4.0, 4.0)
    for col, row in grid.open_cells():
        assert not world.penetrating(grid.cell_to_world(col, row, 4.0, y=1.6), RADIUS)
