"""
Game configuration - maze size, dimensions, speeds and interaction radii
"""

import os

from utils.constants import (
    DEFAULT_MAZE_SIZE, CELL_SIZE, WALL_HEIGHT, EYE_HEIGHT,
    PLAYER_MOVE_SPEED, MOUSE_SENSITIVITY, PLAYER_RADIUS,
    PICKUP_RADIUS, EXIT_RADIUS, PICKUP_COUNT, PICKUP_HEIGHT,
    MIN_MAZE_SIZE, ALGORITHMS
)
from utils.errors import ConfigurationError

FIELDS = (
    'maze_size', 'cell_size', 'wall_height', 'eye_height',
    'move_speed', 'look_sensitivity', 'player_radius',
    'pickup_radius', 'exit_radius', 'pickup_count', 'pickup_height',
    'algorithm',
)

# env var -> (field, converter)
ENV_OVERRIDES = {
    'MAZE_SIZE': ('maze_size', int),
    'MAZE_PICKUPS': ('pickup_count', int),
    'MAZE_ALGO': ('algorithm', str),
    'MAZE_SPEED': ('move_speed', float),
    'MAZE_SENSITIVITY': ('look_sensitivity', float),
}


class GameConfig:
    """Configuration for a game session; every value can be overridden"""
    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(FIELDS)
        if unknown:
            raise ConfigurationError(f"unknown config option(s): {sorted(unknown)}")

        # Maze
        self.maze_size = kwargs.get('maze_size', DEFAULT_MAZE_SIZE)
        self.algorithm = kwargs.get('algorithm', 'backtracker')

        # World dimensions
        self.cell_size = kwargs.get('cell_size', CELL_SIZE)
        self.wall_height = kwargs.get('wall_height', WALL_HEIGHT)
        self.eye_height = kwargs.get('eye_height', EYE_HEIGHT)

        # Player
        self.move_speed = kwargs.get('move_speed', PLAYER_MOVE_SPEED)  # per tick
        self.look_sensitivity = kwargs.get('look_sensitivity', MOUSE_SENSITIVITY)

        # Interaction radii
        self.player_radius = kwargs.get('player_radius', PLAYER_RADIUS)
        self.pickup_radius = kwargs.get('pickup_radius', PICKUP_RADIUS)
        self.exit_radius = kwargs.get('exit_radius', EXIT_RADIUS)

        # Pickups
        self.pickup_count = kwargs.get('pickup_count', PICKUP_COUNT)
        self.pickup_height = kwargs.get('pickup_height', PICKUP_HEIGHT)

    @classmethod
    def from_env(cls, environ=None, **overrides):
        """Defaults, then MAZE_* environment variables, then explicit overrides"""
        environ = os.environ if environ is None else environ
        values = {}
        for var, (name, convert) in ENV_OVERRIDES.items():
            raw = environ.get(var)
            if raw is None or raw == '':
                continue
            try:
                values[name] = convert(raw)
            except ValueError:
                raise ConfigurationError(f"{var}={raw!r} is not a valid {convert.__name__}") from None
        values.update(overrides)
        return cls(**values)

    def replace(self, **overrides):
        """Copy with some values changed"""
        values = self.as_dict()
        values.update(overrides)
        return GameConfig(**values)

    def as_dict(self):
        return {name: getattr(self, name) for name in FIELDS}

    def validate(self):
        """
        Raise ConfigurationError for values the simulation cannot run with

        Returns:
            self, for chaining
        """
        size = self.maze_size
        if isinstance(size, bool) or not isinstance(size, int) or size < MIN_MAZE_SIZE or size % 2 == 0:
            raise ConfigurationError(f"maze_size must be an odd integer >= {MIN_MAZE_SIZE}, got {size!r}")
        if self.algorithm not in ALGORITHMS:
            raise ConfigurationError(f"algorithm must be one of {ALGORITHMS}, got {self.algorithm!r}")

        for name in ('cell_size', 'wall_height', 'eye_height', 'player_radius',
                     'pickup_radius', 'exit_radius'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)!r}")
        if self.move_speed < 0 or self.look_sensitivity < 0:
            raise ConfigurationError("move_speed and look_sensitivity must be >= 0")

        # A player wider than a corridor could never leave the start cell
        if self.player_radius >= self.cell_size / 2:
            raise ConfigurationError(
                f"player_radius {self.player_radius} must be below half a cell ({self.cell_size / 2})"
            )
        if self.eye_height >= self.wall_height + self.player_radius:
            raise ConfigurationError("eye_height must keep the player sphere within wall height")
        if isinstance(self.pickup_count, bool) or not isinstance(self.pickup_count, int) or self.pickup_count < 0:
            raise ConfigurationError(f"pickup_count must be an integer >= 0, got {self.pickup_count!r}")
        return self

    def __eq__(self, other):
        if not isinstance(other, GameConfig):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self):
        return (f"GameConfig(maze_size={self.maze_size}, algorithm={self.algorithm}, "
                f"pickups={self.pickup_count}, speed={self.move_speed})")
