"""
Player controller - look and movement integration with wall collision
"""

import numpy as np

from utils.constants import MOUSE_SENSITIVITY, PLAYER_MOVE_SPEED, PLAYER_RADIUS


class PlayerController:
    """
    Applies one tick of input to a Player

    Speed is distance per tick, so displacement only matches wall-clock
    time when the host ticks at a fixed rate.
    """

    def __init__(self, player, player_radius=PLAYER_RADIUS):
        self.player = player
        self.player_radius = player_radius
        self.last_collided = False

    def apply_look(self, look_dx, look_dy, sensitivity):
        """Mouse right turns right, mouse down looks down"""
        self.player.rotate(-look_dx * sensitivity, -look_dy * sensitivity)

    def compute_velocity(self, forward_axis, right_axis, speed):
        """Horizontal velocity for this tick; zero when no intent"""
        velocity = (self.player.forward_vector() * forward_axis
                    + self.player.right_vector() * right_axis)
        norm = np.linalg.norm(velocity)
        if norm > 0.0:
            velocity = velocity / norm * speed
        return velocity

    def tick(self, inp, speed=PLAYER_MOVE_SPEED, sensitivity=MOUSE_SENSITIVITY, world=None):
        """
        Update orientation and position for one tick

        Args:
            inp: InputSnapshot
            speed: Distance per tick
            sensitivity: Radians per unit of look delta
            world: CollisionWorld; None moves without collision

        Returns:
            True if the move was rejected by a wall
        """
        player = self.player
        self.apply_look(inp.look_delta_x, inp.look_delta_y, sensitivity)

        player.velocity = self.compute_velocity(inp.forward_axis, inp.right_axis, speed)
        proposed = player.position + player.velocity

        if world is None:
            player.position = proposed
            self.last_collided = False
        else:
            player.position, self.last_collided = world.resolve_move(
                player.position, proposed, self.player_radius
            )
        return self.last_collided

    def __repr__(self):
        return f"PlayerController(player={self.player!r}, radius={self.player_radius})"
