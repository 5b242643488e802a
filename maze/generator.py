"""
Maze generation algorithms
All generators carve a perfect maze into a block Grid and can be stepped
for animated generation.
"""

import logging

from maze.maze_core import Grid, Cell
from utils.constants import CARVE_DIRS, MIN_MAZE_SIZE
from utils.errors import ConfigurationError, MazeInvariantError

logger = logging.getLogger(__name__)

FALLBACK_START = (1, 1)


class UnionFind:
    """Union-Find data structure for Kruskal's algorithm"""
    def __init__(self, n):
        self.parent = list(range(n))
        self.rank = [0] * n

    def find(self, x):
        while self.parent[x] != x:
            self.parent[x] = self.parent[self.parent[x]]
            x = self.parent[x]
        return x

    def union(self, a, b):
        ra = self.find(a)
        rb = self.find(b)
        if ra == rb:
            return False
        if self.rank[ra] < self.rank[rb]:
            self.parent[ra] = rb
        elif self.rank[ra] > self.rank[rb]:
            self.parent[rb] = ra
        else:
            self.parent[rb] = ra
            self.rank[ra] += 1
        return True


def validate_size(size):
    """Reject sizes that cannot hold a maze (must be an odd int >= 5)"""
    if isinstance(size, bool) or not isinstance(size, int):
        raise ConfigurationError(f"maze size must be an integer, got {size!r}")
    if size < MIN_MAZE_SIZE:
        raise ConfigurationError(f"maze size must be >= {MIN_MAZE_SIZE}, got {size}")
    if size % 2 == 0:
        raise ConfigurationError(f"maze size must be odd, got {size}")


def interior_nodes(size):
    """Carveable cell centres (odd coordinates), row-major"""
    return [(x, y) for y in range(1, size - 1, 2) for x in range(1, size - 1, 2)]


def exit_cell(size):
    return size - 2, size - 2


def pick_start(size, rng):
    """Random interior node, never the exit cell"""
    exit_pos = exit_cell(size)
    return rng.choice([c for c in interior_nodes(size) if c != exit_pos])


def carve_between(grid, a, b):
    """Open node b and the wall cell between a and b"""
    (ax, ay), (bx, by) = a, b
    grid.set((ax + bx) // 2, (ay + by) // 2, Cell.PATH)
    grid.set(bx, by, Cell.PATH)


def _step(grid, current, carved=None, done=False):
    return {"grid": grid, "current": current, "carved": carved, "done": done}


# ========== GENERATOR: RECURSIVE BACKTRACKER ==========

def gen_backtracker(grid, start, rng):
    """
    Randomized depth-first backtracker.

    Each stack frame keeps its own shuffled direction list, so the carve
    order is identical to the recursive formulation without its depth limit.
    """
    grid.set(*start, Cell.PATH)
    dirs = list(CARVE_DIRS)
    rng.shuffle(dirs)
    stack = [(start, iter(dirs))]

    yield _step(grid, start)

    while stack:
        (cx, cy), pending = stack[-1]
        for dx, dy in pending:
            nx, ny = cx + dx, cy + dy
            if not grid.is_interior_node(nx, ny):
                continue
            if grid.get(nx, ny) != Cell.WALL:
                continue
            if grid.get(cx + dx // 2, cy + dy // 2) != Cell.WALL:
                continue

            carve_between(grid, (cx, cy), (nx, ny))
            dirs = list(CARVE_DIRS)
            rng.shuffle(dirs)
            stack.append(((nx, ny), iter(dirs)))
            yield _step(grid, (nx, ny), carved=((cx, cy), (nx, ny)))
            break
        else:
            stack.pop()
            yield _step(grid, (cx, cy))


# ========== GENERATOR: PRIM ==========

def gen_prim(grid, start, rng):
    """Randomized Prim's algorithm over cell nodes"""
    grid.set(*start, Cell.PATH)
    frontier = []

    def add_frontier(x, y):
        for dx, dy in CARVE_DIRS:
            nx, ny = x + dx, y + dy
            if grid.is_interior_node(nx, ny) and grid.get(nx, ny) == Cell.WALL:
                frontier.append(((x, y), (nx, ny)))

    add_frontier(*start)
    yield _step(grid, start)

    while frontier:
        i = rng.randrange(len(frontier))
        a, b = frontier.pop(i)
        if grid.get(*b) != Cell.WALL:
            continue

        carve_between(grid, a, b)
        yield _step(grid, b, carved=(a, b))
        add_frontier(*b)


# ========== GENERATOR: KRUSKAL ==========

def gen_kruskal(grid, start, rng):
    """Kruskal's algorithm with union-find over cell nodes"""
    nodes = interior_nodes(grid.size)
    index = {node: i for i, node in enumerate(nodes)}
    uf = UnionFind(len(nodes))

    edges = []
    for x, y in nodes:
        if grid.is_interior_node(x + 2, y):
            edges.append(((x, y), (x + 2, y)))
        if grid.is_interior_node(x, y + 2):
            edges.append(((x, y), (x, y + 2)))
    rng.shuffle(edges)

    grid.set(*start, Cell.PATH)
    yield _step(grid, start)

    for a, b in edges:
        if uf.union(index[a], index[b]):
            grid.set(*a, Cell.PATH)
            carve_between(grid, a, b)
            yield _step(grid, b, carved=(a, b))


# ========== ALGORITHM LIST ==========

GEN_ALGOS = {
    "backtracker": gen_backtracker,
    "prim": gen_prim,
    "kruskal": gen_kruskal,
}


def _get_algorithm(name):
    try:
        return GEN_ALGOS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown maze algorithm {name!r}; expected one of {sorted(GEN_ALGOS)}"
        ) from None


def _finalize(grid, start):
    """Mark start and exit, then freeze the grid"""
    exit_pos = exit_cell(grid.size)
    grid.set(*exit_pos, Cell.EXIT)
    grid.set(*start, Cell.START)
    grid.start = start
    grid.exit = exit_pos
    grid.freeze()


def iter_generation(size, rng, algorithm="backtracker", start=None):
    """
    Step through maze generation.

    Yields dicts with keys grid, current, carved, done. The last step has
    done=True and a frozen grid with START and EXIT marked.
    """
    validate_size(size)
    gen_func = _get_algorithm(algorithm)

    grid = Grid(size)
    if start is None:
        start = pick_start(size, rng)
    elif not grid.is_interior_node(*start) or start == exit_cell(size):
        raise ConfigurationError(f"start {start} is not an interior cell node")

    yield from gen_func(grid, start, rng)
    _finalize(grid, start)
    yield _step(grid, start, done=True)


def _drain(steps):
    last = None
    for last in steps:
        pass
    return last["grid"]


def generate(size, rng, algorithm="backtracker"):
    """
    Generate a perfect maze.

    Args:
        size: Odd grid size >= 5
        rng: random.Random instance; the same stream gives the same maze
        algorithm: One of GEN_ALGOS

    Returns:
        Frozen Grid
    """
    validate_size(size)
    _get_algorithm(algorithm)

    try:
        grid = _drain(iter_generation(size, rng, algorithm))
    except MazeInvariantError as e:
        logger.error("Maze carving addressed %s out of bounds; regenerating from %s",
                     e.cell, FALLBACK_START, exc_info=True)
        grid = _drain(iter_generation(size, rng, algorithm, start=FALLBACK_START))

    logger.debug("Generated %s maze: %r", algorithm, grid)
    return grid
