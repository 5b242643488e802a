"""
Maze Runner 3D
First-person maze: collect every item, then find the exit
"""

import argparse
import logging
import os
import sys

os.environ.setdefault('SDL_VIDEO_ALLOW_SCREENSAVER', '1')

import pygame

from game.config import GameConfig
from game.input import InputSnapshot
from game.events import ItemCollected, GameWon
from game.game_state import SessionState
from game.session import GameSession
from renderer3d import Renderer3D, Minimap3D, SceneGraph
from utils.constants import GAME_TITLE, GAME_VERSION, FPS, SCREEN_W, SCREEN_H, ALGORITHMS
from utils.errors import ConfigurationError
from utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


class MazeGame:
    """
    Main game class - pygame glue around a GameSession
    """
    def __init__(self, config, seed=None, screen_size=(SCREEN_W, SCREEN_H)):
        pygame.init()
        pygame.display.set_caption(f"{GAME_TITLE} v{GAME_VERSION}")

        self.screen = pygame.display.set_mode(screen_size)
        self.clock = pygame.time.Clock()
        self.running = True

        self.session = GameSession(config, seed=seed)
        self.session.add_listener(self._on_game_event)
        self.scene = SceneGraph()
        self.renderer = Renderer3D(config)
        self.minimap = Minimap3D()

        self.mouse_captured = False

    def _on_game_event(self, event):
        if isinstance(event, ItemCollected):
            logger.debug("Picked up %s (%d/%d)", event.kind, event.collected_count, event.total)
        elif isinstance(event, GameWon):
            self._release_mouse()

    def _capture_mouse(self):
        pygame.event.set_grab(True)
        pygame.mouse.set_visible(False)
        pygame.mouse.get_rel()  # discard motion accumulated while released
        self.mouse_captured = True

    def _release_mouse(self):
        pygame.event.set_grab(False)
        pygame.mouse.set_visible(True)
        self.mouse_captured = False

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    if self.mouse_captured:
                        self._release_mouse()
                    else:
                        self.running = False
                elif event.key == pygame.K_RETURN and self.session.state == SessionState.IDLE:
                    self.session.start()
                    self._capture_mouse()
                elif event.key == pygame.K_r:
                    self.session.restart()
                    self._capture_mouse()
                elif event.key == pygame.K_m:
                    self.minimap.toggle()
            elif event.type == pygame.MOUSEBUTTONDOWN:
                if self.session.state == SessionState.PLAYING and not self.mouse_captured:
                    self._capture_mouse()

    def read_input(self):
        """Snapshot held keys and mouse motion for this frame"""
        keys = pygame.key.get_pressed()
        look_dx, look_dy = pygame.mouse.get_rel() if self.mouse_captured else (0, 0)
        return InputSnapshot.from_keys(
            forward_held=keys[pygame.K_w] or keys[pygame.K_UP],
            backward_held=keys[pygame.K_s] or keys[pygame.K_DOWN],
            left_held=keys[pygame.K_a] or keys[pygame.K_LEFT],
            right_held=keys[pygame.K_d] or keys[pygame.K_RIGHT],
            look_dx=look_dx,
            look_dy=look_dy,
        )

    def run(self):
        while self.running:
            self.clock.tick(FPS)
            self.handle_events()

            result = self.session.tick(self.read_input())
            self.scene.apply(result.mutations)

            self.renderer.render(self.screen, result.snapshot, self.scene)
            self.minimap.render(self.screen, result.snapshot, self.session.config.cell_size)
            pygame.display.flip()

        pygame.quit()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=GAME_TITLE)
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible mazes")
    parser.add_argument("--size", type=int, default=None, help="Odd maze size >= 5")
    parser.add_argument("--pickups", type=int, default=None, help="Number of items to collect")
    parser.add_argument("--algorithm", choices=ALGORITHMS, default=None)
    parser.add_argument("--width", type=int, default=SCREEN_W)
    parser.add_argument("--height", type=int, default=SCREEN_H)
    return parser.parse_args(argv)


def build_config(args):
    """Env defaults with command-line overrides on top"""
    overrides = {}
    if args.size is not None:
        overrides['maze_size'] = args.size
    if args.pickups is not None:
        overrides['pickup_count'] = args.pickups
    if args.algorithm is not None:
        overrides['algorithm'] = args.algorithm
    return GameConfig.from_env(**overrides).validate()


def main(argv=None):
    configure_logging()
    args = parse_args(argv)
    try:
        config = build_config(args)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    game = MazeGame(config, seed=args.seed, screen_size=(args.width, args.height))
    game.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
