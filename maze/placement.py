"""
Entity placement - start/exit positions and pickup scattering
"""

import logging

from entities.pickup import Pickup
from maze.maze_core import Cell
from utils.constants import CELL_SIZE, PICKUP_HEIGHT, PICKUP_KINDS
from utils.errors import ConfigurationError

logger = logging.getLogger(__name__)


def pickup_candidates(grid):
    """Plain PATH cells, row-major. START and EXIT are never candidates."""
    return grid.cells_of(Cell.PATH)


def place(grid, desired_count, rng, cell_size=CELL_SIZE, pickup_height=PICKUP_HEIGHT):
    """
    Place start, exit and pickups on a generated grid

    Args:
        grid: Frozen Grid with start and exit marked
        desired_count: Requested number of pickups
        rng: random.Random instance
        cell_size: World size of one cell
        pickup_height: World y of pickups

    Returns:
        (start_pos, exit_pos, pickups). len(pickups) is the actual count and
        may be less than desired_count on small mazes.
    """
    if desired_count < 0:
        raise ConfigurationError(f"pickup count must be >= 0, got {desired_count}")

    start_pos = grid.cell_to_world(*grid.start, cell_size)
    exit_pos = grid.cell_to_world(*grid.exit, cell_size)

    candidates = pickup_candidates(grid)
    rng.shuffle(candidates)

    count = min(desired_count, len(candidates))
    pickups = []
    for i, cell in enumerate(candidates[:count]):
        kind = rng.choice(PICKUP_KINDS)
        position = grid.cell_to_world(*cell, cell_size, y=pickup_height)
        pickups.append(Pickup(i, kind, cell, position))

    if count < desired_count:
        logger.info("Only %d of %d pickups fit in a %dx%d maze",
                    count, desired_count, grid.size, grid.size)

    return start_pos, exit_pos, pickups
