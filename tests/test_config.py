import pytest

from game.config import GameConfig
from game.game_state import GameStateManager, SessionState
from game.session import GameSession
from utils.errors import ConfigurationError, MazeError


def test_defaults_validate():
    config = GameConfig().validate()
    assert config.maze_size == 21
    assert config.cell_size == 4.0
    assert config.pickup_count == 5
    assert config.algorithm == 'backtracker'


@pytest.mark.parametrize("overrides", [
    {'maze_size': 20},
    {'maze_size': 3},
    {'maze_size': '21'},
    {'cell_size': 0},
    {'player_radius': 2.0},
    {'exit_radius': -1.0},
    {'move_speed': -0.1},
    {'pickup_count': -1},
    {'pickup_count': 2.5},
    {'algorithm': 'wilson'},
    {'eye_height': 10.0},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(ConfigurationError):
        GameConfig(**overrides).validate()


def test_unknown_option_rejected():
    with pytest.raises(ConfigurationError):
        GameConfig(maze_width=21)


def test_session_validates_config(rng):
    with pytest.raises(MazeError):
        GameSession(GameConfig(maze_size=8), rng=rng)


def test_from_env_reads_overrides():
    env = {'MAZE_SIZE': '31', 'MAZE_PICKUPS': '8', 'MAZE_ALGO': 'prim', 'MAZE_SPEED': '0.2'}
    config = GameConfig.from_env(env).validate()
    assert config.maze_size == 31
    assert config.pickup_count == 8
    assert config.algorithm == 'prim'
    assert config.move_speed == pytest.approx(0.2)


def test_explicit_overrides_beat_env():
    config = GameConfig.from_env({'MAZE_SIZE': '31'}, maze_size=11)
    assert config.maze_size == 11


def test_blank_env_values_are_ignored():
    assert GameConfig.from_env({'MAZE_SIZE': ''}) == GameConfig()


def test_bad_env_value():
    with pytest.raises(ConfigurationError):
        GameConfig.from_env({'MAZE_PICKUPS': 'lots'})


def test_replace_copies():
    base = GameConfig()
    changed = base.replace(pickup_count=0)
    assert changed.pickup_count == 0
    assert base.pickup_count == 5
    assert changed.as_dict().keys() == base.as_dict().keys()


def test_state_transitions():
    manager = GameStateManager()
    assert manager.is_state(SessionState.IDLE)
    assert not manager.transition_to(SessionState.WON)
    assert manager.transition_to(SessionState.PLAYING)
    assert manager.transition_to(SessionState.WON)
    assert manager.previous_state == SessionState.PLAYING
    assert manager.get_state_name() == 'WON'
    assert not manager.transition_to(SessionState.IDLE)
    assert manager.transition_to(SessionState.PLAYING)
