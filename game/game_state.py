"""
Game State Machine - session states and allowed transitions
"""

import logging
from enum import Enum, auto

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Session states"""
    IDLE = auto()
    PLAYING = auto()
    WON = auto()


# state -> states reachable from it
TRANSITIONS = {
    SessionState.IDLE: {SessionState.PLAYING},
    SessionState.PLAYING: {SessionState.PLAYING, SessionState.WON},
    SessionState.WON: {SessionState.PLAYING},
}


class GameStateManager:
    """
    Tracks the current session state and validates transitions
    """
    def __init__(self):
        self.current_state = SessionState.IDLE
        self.previous_state = None

    def can_transition(self, new_state):
        return new_state in TRANSITIONS[self.current_state]

    def transition_to(self, new_state):
        """
        Transition to a new state

        Args:
            new_state: SessionState enum value

        Returns:
            True if the transition happened
        """
        if not self.can_transition(new_state):
            logger.warning("Ignoring transition %s -> %s",
                           self.current_state.name, new_state.name)
            return False

        self.previous_state = self.current_state
        self.current_state = new_state
        logger.info("Session %s -> %s", self.previous_state.name, new_state.name)
        return True

    def is_state(self, state):
        """Check if current state matches"""
        return self.current_state == state

    def get_state_name(self):
        """Get current state name"""
        return self.current_state.name

    def __repr__(self):
        return f"GameStateManager(state={self.current_state.name})"
