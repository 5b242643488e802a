"""
Error types raised by the maze core
"""


class MazeError(Exception):
    """Base class for maze core errors"""


class ConfigurationError(MazeError, ValueError):
    """Invalid configuration (maze size, radii, pickup count, algorithm)"""


class MazeInvariantError(MazeError, RuntimeError):
    """
    Internal invariant broken during generation (out-of-bounds carving).

    Never escapes generate(): it is logged and generation falls back to a
    safe start cell.
    """

    def __init__(self, message, cell=None):
        super().__init__(message)
        self.cell = cell
