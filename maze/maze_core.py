"""
Core maze data - block grid, coordinate mapping, and pathfinding
"""

import logging
from collections import deque
from enum import IntEnum

import numpy as np

from utils.constants import ADJ_DIRS
from utils.errors import MazeInvariantError

logger = logging.getLogger(__name__)


class Cell(IntEnum):
    """Cell kinds stored in the grid"""
    WALL = 0
    PATH = 1
    START = 2
    EXIT = 3


OPEN_CELLS = (Cell.PATH, Cell.START, Cell.EXIT)

_CELL_CHARS = {
    Cell.WALL: '#',
    Cell.PATH: '.',
    Cell.START: 'S',
    Cell.EXIT: 'E',
}


class Grid:
    """
    Square block maze. Every cell is either solid (WALL) or open.

    Odd (col, row) coordinates are carveable cell nodes; even coordinates
    are the walls between them. Storage is a numpy array indexed
    [row, col], frozen (read-only) once generation finishes.
    """

    def __init__(self, size):
        self.size = size
        self.cells = np.full((size, size), int(Cell.WALL), dtype=np.int8)
        self.start = None
        self.exit = None

    def in_bounds(self, col, row):
        """Check if coordinates are within grid bounds"""
        return 0 <= col < self.size and 0 <= row < self.size

    def is_interior_node(self, col, row):
        """Odd coordinates strictly inside the border"""
        return (0 < col < self.size - 1 and 0 < row < self.size - 1
                and col % 2 == 1 and row % 2 == 1)

    def get(self, col, row):
        if not self.in_bounds(col, row):
            raise MazeInvariantError(f"cell {(col, row)} outside 0..{self.size - 1}", cell=(col, row))
        return Cell(int(self.cells[row, col]))

    def set(self, col, row, kind):
        """Write a cell. Out-of-range addressing is a carving bug."""
        if not self.in_bounds(col, row):
            raise MazeInvariantError(f"cell {(col, row)} outside 0..{self.size - 1}", cell=(col, row))
        self.cells[row, col] = int(kind)

    def is_open(self, col, row):
        return self.in_bounds(col, row) and self.cells[row, col] != Cell.WALL

    def is_wall(self, col, row):
        return not self.is_open(col, row)

    def freeze(self):
        """Make the grid immutable for the rest of the session"""
        self.cells.setflags(write=False)

    @property
    def frozen(self):
        return not self.cells.flags.writeable

    def cells_of(self, kind):
        """All (col, row) of a given kind, row-major"""
        rows, cols = np.nonzero(self.cells == int(kind))
        return [(int(c), int(r)) for r, c in zip(rows, cols)]

    def open_cells(self):
        rows, cols = np.nonzero(self.cells != int(Cell.WALL))
        return [(int(c), int(r)) for r, c in zip(rows, cols)]

    def open_neighbors(self, col, row):
        """Open cells 4-adjacent to (col, row)"""
        res = []
        for dx, dy in ADJ_DIRS:
            nx, ny = col + dx, row + dy
            if self.is_open(nx, ny):
                res.append((nx, ny))
        return res

    def count_connections(self):
        """Number of adjacent open-cell pairs (edges of the path graph)"""
        open_mask = self.cells != int(Cell.WALL)
        horizontal = np.count_nonzero(open_mask[:, :-1] & open_mask[:, 1:])
        vertical = np.count_nonzero(open_mask[:-1, :] & open_mask[1:, :])
        return int(horizontal + vertical)

    # ---- coordinate mapping ----

    def cell_to_world(self, col, row, cell_size, y=0.0):
        """Continuous-space centre of a cell: (idx - N/2 + 0.5) * cell_size"""
        half = self.size / 2.0
        x = (col - half + 0.5) * cell_size
        z = (row - half + 0.5) * cell_size
        return np.array([x, y, z], dtype=np.float64)

    def world_to_cell(self, x, z, cell_size):
        """Inverse of cell_to_world on the ground plane"""
        half = self.size / 2.0
        col = int(np.floor(x / cell_size + half))
        row = int(np.floor(z / cell_size + half))
        return col, row

    def to_text(self):
        """ASCII dump, one line per row"""
        return "\n".join(
            "".join(_CELL_CHARS[Cell(int(v))] for v in row)
            for row in self.cells
        )

    def copy(self):
        other = Grid(self.size)
        other.cells = self.cells.copy()
        other.start = self.start
        other.exit = self.exit
        return other

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return (self.size == other.size and self.start == other.start
                and self.exit == other.exit
                and np.array_equal(self.cells, other.cells))

    def __hash__(self):
        return hash((self.size, self.start, self.exit, self.cells.tobytes()))

    def __repr__(self):
        return f"Grid(size={self.size}, start={self.start}, exit={self.exit}, open={len(self.open_cells())})"


# ========== PATHFINDING ==========

def reconstruct_path(prev, goal):
    """Reconstruct path from prev dictionary"""
    path = []
    cur = goal
    while cur is not None:
        path.append(cur)
        cur = prev[cur]
    path.reverse()
    return path


def bfs_shortest_path(grid, start, goal):
    """BFS shortest path over open cells"""
    if start == goal:
        return [start]

    q = deque([start])
    prev = {start: None}

    while q:
        x, y = q.popleft()
        for n in grid.open_neighbors(x, y):
            if n not in prev:
                prev[n] = (x, y)
                if n == goal:
                    return reconstruct_path(prev, goal)
                q.append(n)
    return []


def reachable_cells(grid, start):
    """Set of open cells reachable from start"""
    if not grid.is_open(*start):
        return set()

    q = deque([start])
    seen = {start}
    while q:
        x, y = q.popleft()
        for n in grid.open_neighbors(x, y):
            if n not in seen:
                seen.add(n)
                q.append(n)
    return seen


def is_perfect_maze(grid):
    """Open cells are connected and acyclic (a spanning tree)"""
    open_cells = grid.open_cells()
    if not open_cells:
        return False
    if len(reachable_cells(grid, open_cells[0])) != len(open_cells):
        return False
    return grid.count_connections() == len(open_cells) - 1
