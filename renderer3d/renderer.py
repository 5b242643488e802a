"""
3D Scene Renderer - first-person view from the session snapshot and scene graph
"""

import math

import numpy as np
import pygame

from .raycaster import Raycaster
from utils.colors import (
    COLOR_CEILING, COLOR_FLOOR, COLOR_WALL, COLOR_GOAL, COLOR_TEXT,
    COLOR_TEXT_HIGHLIGHT, COLOR_MENU_OVERLAY, PICKUP_COLORS
)
from utils.constants import PLAYER_ENTITY_ID
from utils.helpers import clamp, format_counter, shade_color

PICKUP_SPRITE_SIZE = 0.6
EXIT_SPRITE_SIZE = 1.6


class Renderer3D:
    """
    Draws walls, pickups, exit, HUD and overlays
    """

    def __init__(self, config, fov=66, column_width=3):
        """
        Args:
            config: GameConfig (cell size, wall and eye heights)
            fov: Horizontal field of view in degrees
            column_width: Screen pixels per ray
        """
        self.config = config
        self.column_width = column_width
        self.raycaster = Raycaster(fov=fov)
        self.z_buffer = None
        self.font = None
        self.big_font = None

    def _ensure_fonts(self):
        if self.font is None:
            self.font = pygame.font.SysFont("consolas", 20)
            self.big_font = pygame.font.SysFont("consolas", 42, bold=True)

    def horizon(self, screen_h, focal, pitch):
        """Screen row of the horizon; looking up moves it down"""
        offset = math.tan(clamp(pitch, -1.3, 1.3)) * focal
        return screen_h / 2.0 + offset

    def render(self, screen, snapshot, scene):
        """
        Render one frame

        Args:
            screen: pygame.Surface
            snapshot: Snapshot from the session
            scene: SceneGraph kept in sync with session mutations
        """
        self._ensure_fonts()
        screen_w, screen_h = screen.get_size()
        player = scene.get(PLAYER_ENTITY_ID)

        if snapshot.grid is None or player is None:
            screen.fill(COLOR_CEILING)
            self._draw_overlay(screen, snapshot)
            return

        self.raycaster.set_resolution(max(1, screen_w // self.column_width))
        focal = self.raycaster.focal_length(screen_w)
        horizon = self.horizon(screen_h, focal, player.pitch)

        screen.fill(COLOR_CEILING, (0, 0, screen_w, max(0, int(horizon))))
        screen.fill(COLOR_FLOOR, (0, max(0, int(horizon)), screen_w, screen_h))

        self._draw_walls(screen, snapshot.grid, player, focal, horizon)
        self._draw_sprites(screen, scene, player, focal, horizon)
        self._draw_hud(screen, snapshot)
        self._draw_overlay(screen, snapshot)

    def _draw_walls(self, screen, grid, player, focal, horizon):
        cfg = self.config
        rays = self.raycaster.cast_all_rays(grid, player.position, player.yaw, cfg.cell_size)
        self.z_buffer = rays[:, 0].copy()
        eye = player.position[1]
        max_shade_dist = cfg.cell_size * 8

        for i in range(rays.shape[0]):
            dist = rays[i, 0]
            top = horizon - (cfg.wall_height - eye) / dist * focal
            bottom = horizon + eye / dist * focal

            shade = clamp(1.0 - dist / max_shade_dist, 0.25, 1.0)
            if rays[i, 1] == 1:
                shade *= 0.8
            # Thin dark seam at cell edges
            u = rays[i, 2]
            if u < 0.02 or u > 0.98:
                shade *= 0.7

            y0 = int(clamp(top, -1, screen.get_height() + 1))
            y1 = int(clamp(bottom, -1, screen.get_height() + 1))
            if y1 > y0:
                screen.fill(shade_color(COLOR_WALL, shade),
                            (i * self.column_width, y0, self.column_width, y1 - y0))

    def _draw_sprites(self, screen, scene, player, focal, horizon):
        yaw = player.yaw
        forward = np.array([-math.sin(yaw), -math.cos(yaw)])
        right = np.array([math.cos(yaw), -math.sin(yaw)])
        eye = player.position[1]
        screen_w = screen.get_width()

        sprites = []
        for node in scene.nodes_of('pickup') + scene.nodes_of('exit'):
            rel = np.array([node.position[0] - player.position[0],
                            node.position[2] - player.position[2]])
            depth = float(rel @ forward)
            if depth <= 0.1:
                continue
            sprites.append((depth, float(rel @ right), node))

        # Far to near
        sprites.sort(key=lambda s: s[0], reverse=True)

        for depth, lateral, node in sprites:
            sx = screen_w / 2.0 + lateral / depth * focal
            col = int(sx // self.column_width)
            if col < 0 or col >= len(self.z_buffer) or depth >= self.z_buffer[col]:
                continue

            if node.kind == 'exit':
                size = EXIT_SPRITE_SIZE / depth * focal
                bottom = horizon + eye / depth * focal
                rect = pygame.Rect(int(sx - size / 4), int(bottom - size), int(size / 2), int(size))
                pygame.draw.rect(screen, COLOR_GOAL, rect, width=max(1, int(size / 12)))
            else:
                radius = PICKUP_SPRITE_SIZE / 2 / depth * focal
                sy = horizon + (eye - node.position[1]) / depth * focal
                color = PICKUP_COLORS.get(node.variant, (255, 255, 255))
                pygame.draw.circle(screen, color, (int(sx), int(sy)), max(1, int(radius)))

    def _draw_hud(self, screen, snapshot):
        text = f"Items {format_counter(snapshot.collected_count, snapshot.total_count)}"
        if snapshot.total_count and snapshot.collected_count == snapshot.total_count:
            text += "  -  find the exit!"
        surf = self.font.render(text, True, COLOR_TEXT)
        screen.blit(surf, (12, screen.get_height() - surf.get_height() - 10))

    def _draw_overlay(self, screen, snapshot):
        if snapshot.state == 'PLAYING':
            return

        if snapshot.state == 'IDLE':
            title, subtitle = "MAZE RUNNER 3D", "Press ENTER to start"
        else:
            title, subtitle = "YOU ESCAPED!", "Press R for a new maze"

        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill(COLOR_MENU_OVERLAY)
        screen.blit(overlay, (0, 0))

        w, h = screen.get_size()
        t = self.big_font.render(title, True, COLOR_TEXT_HIGHLIGHT)
        s = self.font.render(subtitle, True, COLOR_TEXT)
        screen.blit(t, ((w - t.get_width()) // 2, h // 2 - t.get_height()))
        screen.blit(s, ((w - s.get_width()) // 2, h // 2 + 10))
