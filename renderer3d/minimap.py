"""
Minimap - top-down view with walls, pickups, exit and player
"""

import math

import pygame

from maze.maze_core import Cell
from utils.colors import COLOR_PLAYER, COLOR_GOAL, COLOR_START, PICKUP_COLORS


class Minimap3D:
    """
    Minimap overlay drawn from the session snapshot
    """

    def __init__(self, size=180, margin=10):
        self.size = size
        self.margin = margin
        self.visible = True

        # Colors
        self.bg_color = (20, 22, 28, 200)
        self.wall_color = (100, 100, 110)
        self.player_color = COLOR_PLAYER
        self.goal_color = COLOR_GOAL

        self.surface = pygame.Surface((size, size), pygame.SRCALPHA)

    def toggle(self):
        self.visible = not self.visible

    def render(self, screen, snapshot, cell_size):
        """
        Render minimap in the top-right corner

        Args:
            screen: pygame.Surface to render to
            snapshot: Session Snapshot
            cell_size: World size of one grid cell
        """
        grid = snapshot.grid
        if not self.visible or grid is None:
            return

        self.surface.fill(self.bg_color)
        scale = self.size / grid.size

        for col, row in grid.cells_of(Cell.WALL):
            pygame.draw.rect(self.surface, self.wall_color,
                             (int(col * scale), int(row * scale), math.ceil(scale), math.ceil(scale)))

        def to_map(position):
            return (int((position[0] / cell_size + grid.size / 2) * scale),
                    int((position[2] / cell_size + grid.size / 2) * scale))

        sx, sy = grid.start
        pygame.draw.rect(self.surface, COLOR_START,
                         (int(sx * scale), int(sy * scale), math.ceil(scale), math.ceil(scale)))

        radius = max(2, int(scale / 3))
        for pickup in snapshot.pickups:
            pygame.draw.circle(self.surface, PICKUP_COLORS.get(pickup.kind, (255, 255, 255)),
                               to_map(pickup.position), radius)

        pygame.draw.circle(self.surface, self.goal_color, to_map(snapshot.exit_position), radius + 1)

        px, py = to_map(snapshot.player_position)
        pygame.draw.circle(self.surface, self.player_color, (px, py), radius + 1)
        heading = (px - math.sin(snapshot.yaw) * scale * 1.5, py - math.cos(snapshot.yaw) * scale * 1.5)
        pygame.draw.line(self.surface, self.player_color, (px, py), heading, 2)

        screen.blit(self.surface, (screen.get_width() - self.size - self.margin, self.margin))
