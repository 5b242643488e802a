"""
Game session - maze generation, entity placement, per-tick update and
win detection
"""

import logging
import math
import random

import numpy as np

from entities.pickup import PickupManager
from entities.player import Player
from game.collision import CollisionWorld
from game.config import GameConfig
from game.events import (
    ItemCollected, GameWon, SpawnEntity, RemoveEntity, SetTransform,
    PickupView, Snapshot, TickResult, as_vec3
)
from game.game_state import GameStateManager, SessionState
from game.input import NO_INPUT
from game.player_controller import PlayerController
from maze.generator import generate
from maze.placement import place
from utils.constants import PLAYER_ENTITY_ID, EXIT_ENTITY_ID
from utils.helpers import ground_distance

logger = logging.getLogger(__name__)


def facing_yaw(grid, cell):
    """Yaw that looks down the first open corridor next to cell"""
    neighbors = grid.open_neighbors(*cell)
    if not neighbors:
        return 0.0
    nx, ny = neighbors[0]
    dx, dz = nx - cell[0], ny - cell[1]
    # forward is (-sin yaw, -cos yaw) on the x/z plane
    return math.atan2(-dx, -dz)


class MazeWorld:
    """
    Everything a session owns: grid, colliders, pickups, player.

    Built in one go by build() and never partially reset; a restart
    builds a new MazeWorld and drops the old one.
    """

    def __init__(self, grid, collision_world, pickups, player, start_position, exit_position):
        self.grid = grid
        self.collision_world = collision_world
        self.pickups = pickups
        self.player = player
        self.start_position = np.asarray(start_position, dtype=np.float64)
        self.exit_position = np.asarray(exit_position, dtype=np.float64)
        self.total_placed = pickups.total

    @property
    def collected_count(self):
        return self.pickups.collected_count

    @classmethod
    def build(cls, config, rng):
        """
        Generate a maze and populate it

        Args:
            config: Validated GameConfig
            rng: random.Random shared by generation and placement
        """
        grid = generate(config.maze_size, rng, config.algorithm)
        start_pos, exit_pos, pickups = place(
            grid, config.pickup_count, rng,
            cell_size=config.cell_size, pickup_height=config.pickup_height,
        )
        collision_world = CollisionWorld.from_grid(grid, config.cell_size, config.wall_height)
        player = Player(start_pos, yaw=facing_yaw(grid, grid.start), eye_height=config.eye_height)

        world = cls(grid, collision_world, PickupManager(pickups), player, start_pos, exit_pos)
        logger.info("Built %dx%d maze: start=%s exit=%s pickups=%d walls=%d",
                    grid.size, grid.size, grid.start, grid.exit,
                    world.total_placed, len(collision_world))
        return world

    def spawn_mutations(self):
        """Scene mutations that create every entity of this world"""
        mutations = [
            SpawnEntity(c.entity_id, 'wall', as_vec3(c.center), extents=as_vec3(c.half_extents))
            for c in self.collision_world
        ]
        mutations.extend(
            SpawnEntity(p.entity_id, 'pickup', as_vec3(p.position), variant=p.kind)
            for p in self.pickups
        )
        mutations.append(SpawnEntity(EXIT_ENTITY_ID, 'exit', as_vec3(self.exit_position)))
        mutations.append(SpawnEntity(PLAYER_ENTITY_ID, 'player', as_vec3(self.player.position),
                                     yaw=self.player.yaw, pitch=self.player.pitch))
        return mutations

    def despawn_mutations(self):
        """Scene mutations that remove every entity still alive in this world"""
        ids = [c.entity_id for c in self.collision_world]
        ids.extend(p.entity_id for p in self.pickups.get_uncollected_pickups())
        ids.extend([EXIT_ENTITY_ID, PLAYER_ENTITY_ID])
        return [RemoveEntity(entity_id) for entity_id in ids]

    def __repr__(self):
        return (f"MazeWorld(size={self.grid.size}, collected={self.collected_count}/"
                f"{self.total_placed}, player={self.player!r})")


class GameSession:
    """
    Owns one MazeWorld at a time and drives it tick by tick.

    Idle -> Playing on start(); Playing -> Won when every placed pickup is
    collected and the player reaches the exit; Playing/Won -> Playing on
    restart(), which builds a brand new world.
    """

    def __init__(self, config=None, rng=None, seed=None):
        """
        Args:
            config: GameConfig; defaults when None
            rng: random.Random used for every generation; overrides seed
            seed: Seed for a private random.Random when rng is None
        """
        self.config = (config if config is not None else GameConfig()).validate()
        self.rng = rng if rng is not None else random.Random(seed)
        self.state_manager = GameStateManager()
        self.world = None
        self.controller = None
        self.ticks = 0

        self._events = []
        self._mutations = []
        self._listeners = []

    # ---- state ----

    @property
    def state(self):
        return self.state_manager.current_state

    @property
    def collected_count(self):
        return self.world.collected_count if self.world else 0

    @property
    def total_count(self):
        return self.world.total_placed if self.world else 0

    def add_listener(self, callback):
        """callback(event) is called for every game event, once the tick that raised it has finished"""
        self._listeners.append(callback)

    def remove_listener(self, callback):
        self._listeners.remove(callback)

    # ---- lifecycle ----

    def start(self):
        """
        Begin the first game

        Returns:
            True if the session started; False if it was not idle
        """
        if not self.state_manager.is_state(SessionState.IDLE):
            logger.warning("start() ignored in state %s; use restart()", self.state.name)
            return False
        self._swap_world()
        return self.state_manager.transition_to(SessionState.PLAYING)

    def restart(self):
        """Throw away the current world and play a freshly generated one"""
        if self.state_manager.is_state(SessionState.IDLE):
            return self.start()
        self._swap_world()
        return self.state_manager.transition_to(SessionState.PLAYING)

    def _swap_world(self):
        new_world = MazeWorld.build(self.config, self.rng)
        if self.world is not None:
            self._mutations.extend(self.world.despawn_mutations())
        self.world = new_world
        self.controller = PlayerController(new_world.player, self.config.player_radius)
        self.ticks = 0
        self._mutations.extend(new_world.spawn_mutations())

    # ---- per-tick update ----

    def tick(self, inp=NO_INPUT):
        """
        Advance one frame

        Simulation only runs while PLAYING; in other states the call just
        hands back queued mutations and a snapshot.

        Returns:
            TickResult with events, mutations and snapshot
        """
        if self.state_manager.is_state(SessionState.PLAYING):
            self._simulate(inp)
        return self._flush()

    def _simulate(self, inp):
        world = self.world
        player = world.player
        cfg = self.config

        old_position = player.position.copy()
        old_yaw, old_pitch = player.yaw, player.pitch

        self.controller.tick(inp, cfg.move_speed, cfg.look_sensitivity, world.collision_world)
        self.ticks += 1

        if (not np.array_equal(old_position, player.position)
                or old_yaw != player.yaw or old_pitch != player.pitch):
            self._mutations.append(SetTransform(PLAYER_ENTITY_ID, as_vec3(player.position),
                                                player.yaw, player.pitch))

        # Pickups are counted before the win test so both see the same tick
        reach = cfg.player_radius + cfg.pickup_radius
        newly_collected = world.pickups.collect_near(player.position, reach)
        base = world.collected_count - len(newly_collected)
        for n, pickup in enumerate(newly_collected, start=base + 1):
            self._mutations.append(RemoveEntity(pickup.entity_id))
            logger.info("Collected %s %d (%d/%d)", pickup.kind, pickup.id, n, world.total_placed)
            self._events.append(ItemCollected(pickup.id, pickup.kind, n, world.total_placed))

        if self.win_condition_met():
            self.state_manager.transition_to(SessionState.WON)
            logger.info("Maze solved in %d ticks", self.ticks)
            self._events.append(GameWon(world.collected_count, self.ticks))

    def win_condition_met(self):
        """At the exit holding every placed pickup; never true with zero pickups"""
        world = self.world
        if world is None or world.total_placed == 0:
            return False
        if not world.pickups.all_collected():
            return False
        reach = self.config.player_radius + self.config.exit_radius
        return ground_distance(world.player.position, world.exit_position) < reach

    def _notify(self, events):
        """Listeners run after the tick's state is settled; their errors stay here"""
        for event in events:
            for callback in list(self._listeners):
                try:
                    callback(event)
                except Exception:
                    logger.exception("Listener %r failed on %r", callback, event)

    def _flush(self):
        result = TickResult(self._events, self._mutations, self.snapshot())
        self._events = []
        self._mutations = []
        self._notify(result.events)
        return result

    # ---- output ----

    def snapshot(self):
        """Current render state"""
        world = self.world
        if world is None:
            return Snapshot(state=self.state.name)

        player = world.player
        pickups = tuple(
            PickupView(p.id, p.kind, p.cell, as_vec3(p.position))
            for p in world.pickups.get_uncollected_pickups()
        )
        return Snapshot(
            state=self.state.name,
            player_position=as_vec3(player.position),
            yaw=player.yaw,
            pitch=player.pitch,
            pickups=pickups,
            colliders=world.collision_world.colliders,
            exit_position=as_vec3(world.exit_position),
            collected_count=world.collected_count,
            total_count=world.total_placed,
            grid=world.grid,
        )

    def __repr__(self):
        return f"GameSession(state={self.state.name}, world={self.world!r})"
