"""
Global constants for Maze Runner 3D
"""

import math

GAME_TITLE = "Maze Runner 3D"
GAME_VERSION = "1.0.0"

# Screen settings
SCREEN_W = 960
SCREEN_H = 600
FPS = 60

# Maze
DEFAULT_MAZE_SIZE = 21
MIN_MAZE_SIZE = 5
CELL_SIZE = 4.0
WALL_HEIGHT = 4.0

# Carving step between cell nodes (odd coordinates), with the wall cell in between
CARVE_DIRS = [
    (0, -2),   # up
    (2, 0),    # right
    (0, 2),    # down
    (-2, 0),   # left
]

# 4-neighbourhood for path-cell adjacency
ADJ_DIRS = [(0, -1), (1, 0), (0, 1), (-1, 0)]

ALGORITHMS = ("backtracker", "prim", "kruskal")

# Player settings
EYE_HEIGHT = 1.6
PLAYER_RADIUS = 0.5
PLAYER_MOVE_SPEED = 0.12      # World units per tick
MOUSE_SENSITIVITY = 0.002     # Radians per pixel
MAX_PITCH = math.pi / 2

# Pickups and exit
PICKUP_COUNT = 5
PICKUP_RADIUS = 0.5
PICKUP_HEIGHT = 1.0
EXIT_RADIUS = 1.0

PICKUP_KINDS = ("gem", "coin", "orb", "key", "crystal")

# Entity ids used in scene mutations
PLAYER_ENTITY_ID = "player"
EXIT_ENTITY_ID = "exit"
