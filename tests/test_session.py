import logging
import math

import numpy as np
import pytest

from game.config import GameConfig
from game.events import ItemCollected, GameWon, SpawnEntity, RemoveEntity, SetTransform
from game.game_state import SessionState
from game.input import InputSnapshot, NO_INPUT
from game.session import GameSession
from utils.constants import PLAYER_ENTITY_ID, EXIT_ENTITY_ID


def make_session(seed=7, **overrides):
    return GameSession(GameConfig(**overrides), seed=seed)


def teleport(session, position):
    session.world.player.set_position(position)


def test_new_session_is_idle_and_inert():
    session = make_session()
    assert session.state == SessionState.IDLE
    result = session.tick(InputSnapshot.from_keys(forward_held=True))
    assert result.events == []
    assert result.mutations == []
    assert result.snapshot.state == 'IDLE'
    assert result.snapshot.player_position is None


def test_start_builds_world_and_plays():
    session = make_session(pickup_count=3)
    assert session.start() is True
    assert session.state == SessionState.PLAYING
    assert session.total_count == 3
    assert session.collected_count == 0

    world = session.world
    np.testing.assert_allclose(world.player.position[[0, 2]], world.start_position[[0, 2]])
    assert world.player.position[1] == pytest.approx(session.config.eye_height)
    assert not world.collision_world.penetrating(world.player.position, session.config.player_radius)


def test_start_twice_is_ignored():
    session = make_session()
    session.start()
    world = session.world
    assert session.start() is False
    assert session.world is world


def test_two_pickup_win_scenario():
    session = make_session(seed=3, pickup_count=2)
    won = []
    session.add_listener(lambda e: won.append(e) if isinstance(e, GameWon) else None)
    session.start()
    session.tick()

    world = session.world
    first, second = world.pickups.pickups

    teleport(session, first.position)
    result = session.tick()
    collected = result.events_of(ItemCollected)
    assert [e.pickup_id for e in collected] == [first.id]
    assert collected[0].collected_count == 1 and collected[0].total == 2
    assert RemoveEntity(first.entity_id) in result.mutations

    # Exit with one item missing does nothing
    teleport(session, world.exit_position)
    result = session.tick()
    assert result.events_of(GameWon) == []
    assert session.state == SessionState.PLAYING

    teleport(session, second.position)
    result = session.tick()
    assert [e.pickup_id for e in result.events_of(ItemCollected)] == [second.id]
    assert session.collected_count == 2

    teleport(session, world.exit_position)
    result = session.tick()
    assert len(result.events_of(GameWon)) == 1
    assert session.state == SessionState.WON
    assert result.snapshot.state == 'WON'

    # Stays won; no second event
    result = session.tick()
    assert result.events == []
    assert len(won) == 1


def test_collecting_last_item_on_the_exit_wins_same_tick():
    session = make_session(seed=3, pickup_count=1)
    session.start()
    world = session.world
    (only,) = world.pickups.pickups

    # Pretend the pickup sits next to the exit
    only.position = world.exit_position.copy()
    teleport(session, world.exit_position)
    result = session.tick()

    assert len(result.events_of(ItemCollected)) == 1
    assert len(result.events_of(GameWon)) == 1
    assert session.state == SessionState.WON


def test_zero_pickups_never_wins():
    session = make_session(pickup_count=0)
    session.start()
    assert session.total_count == 0

    teleport(session, session.world.exit_position)
    for _ in range(3):
        result = session.tick()
        assert result.events_of(GameWon) == []
    assert session.state == SessionState.PLAYING


def test_small_maze_uses_actual_placed_count():
    session = make_session(maze_size=5, pickup_count=50)
    session.start()
    world = session.world
    assert world.total_placed == 5

    for pickup in list(world.pickups):
        teleport(session, pickup.position)
        session.tick()
    assert session.collected_count == 5

    teleport(session, world.exit_position)
    result = session.tick()
    assert len(result.events_of(GameWon)) == 1


def test_no_simulation_after_win():
    session = make_session(seed=3, pickup_count=1)
    session.start()
    world = session.world
    teleport(session, world.pickups.pickups[0].position)
    session.tick()
    teleport(session, world.exit_position)
    session.tick()
    assert session.state == SessionState.WON

    before = world.player.position.copy()
    result = session.tick(InputSnapshot.from_keys(forward_held=True, look_dx=50))
    np.testing.assert_allclose(world.player.position, before)
    assert result.mutations == []


def test_restart_after_win_replaces_everything():
    session = make_session(seed=3, pickup_count=1)
    session.start()
    old_world = session.world
    teleport(session, old_world.pickups.pickups[0].position)
    session.tick()
    teleport(session, old_world.exit_position)
    session.tick()
    assert session.state == SessionState.WON

    assert session.restart() is True
    assert session.state == SessionState.PLAYING
    assert session.collected_count == 0
    assert session.ticks == 0

    new_world = session.world
    assert new_world is not old_world
    assert new_world.grid is not old_world.grid
    assert new_world.collision_world is not old_world.collision_world
    assert all(not p.collected for p in new_world.pickups)
    np.testing.assert_allclose(new_world.player.position[[0, 2]], new_world.start_position[[0, 2]])

    snapshot = session.snapshot()
    assert snapshot.colliders is new_world.collision_world.colliders
    assert len(snapshot.pickups) == 1


def test_restart_mutations_remove_old_then_spawn_new():
    session = make_session(pickup_count=2)
    result = session.start() and session.tick()
    first_spawns = [m for m in result.mutations if isinstance(m, SpawnEntity)]
    kinds = {m.kind for m in first_spawns}
    assert kinds == {'wall', 'pickup', 'exit', 'player'}
    assert len(first_spawns) == len(session.world.collision_world) + 2 + 2

    session.restart()
    result = session.tick()
    removes = [i for i, m in enumerate(result.mutations) if isinstance(m, RemoveEntity)]
    spawns = [i for i, m in enumerate(result.mutations) if isinstance(m, SpawnEntity)]
    assert removes and spawns
    assert max(removes) < min(spawns)
    assert len(removes) == len(first_spawns)


def test_restart_from_idle_starts():
    session = make_session()
    assert session.restart() is True
    assert session.state == SessionState.PLAYING


def test_movement_emits_transform():
    session = make_session()
    session.start()
    session.tick()

    player = session.world.player
    start = player.position.copy()
    forward = player.forward_vector()

    result = None
    for _ in range(10):
        result = session.tick(InputSnapshot.from_keys(forward_held=True))

    # Start faces an open corridor at least one cell long
    moved = player.position - start
    assert np.linalg.norm(moved) == pytest.approx(10 * session.config.move_speed)
    np.testing.assert_allclose(moved / np.linalg.norm(moved), forward, atol=1e-9)

    transforms = [m for m in result.mutations if isinstance(m, SetTransform)]
    assert transforms and transforms[-1].entity_id == PLAYER_ENTITY_ID


def test_idle_input_emits_no_transform():
    session = make_session()
    session.start()
    session.tick()
    result = session.tick(NO_INPUT)
    assert result.mutations == []


def test_look_emits_transform_without_moving():
    session = make_session()
    session.start()
    session.tick()
    before = session.world.player.position.copy()
    result = session.tick(InputSnapshot(look_delta_x=100))
    np.testing.assert_allclose(session.world.player.position, before)
    (transform,) = result.mutations
    assert transform.yaw == pytest.approx(session.world.player.yaw)


def test_same_seed_same_session():
    a = make_session(seed=42, pickup_count=4)
    b = make_session(seed=42, pickup_count=4)
    a.start()
    b.start()
    assert a.world.grid == b.world.grid
    assert [(p.cell, p.kind) for p in a.world.pickups] == [(p.cell, p.kind) for p in b.world.pickups]
    assert a.world.player.yaw == b.world.player.yaw


def test_snapshot_contents():
    session = make_session(pickup_count=3)
    session.start()
    snap = session.snapshot()
    world = session.world
    assert snap.state == 'PLAYING'
    assert snap.total_count == 3
    assert snap.exit_position == pytest.approx(tuple(world.exit_position))
    assert {p.pickup_id for p in snap.pickups} == {0, 1, 2}
    assert len(snap.colliders) == len(world.grid.cells_of(0))
    assert snap.grid is world.grid
    assert -math.pi / 2 <= snap.pitch <= math.pi / 2


def test_exit_entity_is_spawned_at_exit():
    session = make_session()
    session.start()
    result = session.tick()
    (exit_spawn,) = [m for m in result.mutations
                     if isinstance(m, SpawnEntity) and m.entity_id == EXIT_ENTITY_ID]
    assert exit_spawn.position == pytest.approx(tuple(session.world.exit_position))


def test_failing_listener_does_not_break_the_tick(caplog):
    session = make_session(seed=3, pickup_count=2)
    session.start()
    world = session.world
    first, second = world.pickups.pickups
    second.position = first.position.copy()

    seen = []

    def listener(event):
        seen.append(event)
        if isinstance(event, ItemCollected) and event.collected_count == 1:
            raise RuntimeError("listener bug")

    session.add_listener(listener)
    teleport(session, first.position)
    with caplog.at_level(logging.ERROR, logger="game.session"):
        result = session.tick()

    # Both pickups counted and despawned even though the listener blew up
    assert [e.collected_count for e in result.events_of(ItemCollected)] == [1, 2]
    assert session.collected_count == 2
    assert RemoveEntity(first.entity_id) in result.mutations
    assert RemoveEntity(second.entity_id) in result.mutations
    assert len(seen) == 2
    assert any(r.exc_info and "listener bug" in str(r.exc_info[1]) for r in caplog.records)

    teleport(session, world.exit_position)
    result = session.tick()
    assert len(result.events_of(GameWon)) == 1
    assert session.state == SessionState.WON


def test_listeners_see_settled_state():
    session = make_session(seed=3, pickup_count=1)
    session.start()
    world = session.world
    (only,) = world.pickups.pickups
    only.position = world.exit_position.copy()

    states = []
    session.add_listener(lambda e: states.append((type(e).__name__, session.state, session.collected_count)))
    teleport(session, world.exit_position)
    session.tick()

    assert states == [
        ('ItemCollected', SessionState.WON, 1),
        ('GameWon', SessionState.WON, 1),
    ]


def test_reach_ignores_height_difference():
    session = make_session(seed=3, pickup_count=1)
    session.start()
    world = session.world
    (only,) = world.pickups.pickups
    cfg = session.config

    # Eye at 1.6 and pickup at 1.0: 0.9 apart on the ground, over 1.0 in 3D
    assert world.player.position[1] - only.position[1] == pytest.approx(0.6)
    near = only.position + np.array([0.9, 0.0, 0.0])
    assert np.linalg.norm(np.array([near[0], cfg.eye_height, near[2]]) - only.position) > 1.0
    teleport(session, near)
    result = session.tick()
    assert len(result.events_of(ItemCollected)) == 1

    # Exit marker sits on the floor, 1.6 below the eye; reach is 1.5
    teleport(session, world.exit_position)
    result = session.tick()
    assert len(result.events_of(GameWon)) == 1
