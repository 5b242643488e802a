"""
First-person player state
"""

import math

import numpy as np

from utils.constants import EYE_HEIGHT, MAX_PITCH
from utils.helpers import clamp


class Player:
    """
    First-person avatar. Position is a world 3-vector with y fixed at eye
    height; yaw turns around the vertical axis, pitch tilts the view only.
    """

    def __init__(self, position, yaw=0.0, pitch=0.0, eye_height=EYE_HEIGHT):
        """
        Args:
            position: Starting world position; y is replaced by eye_height
            yaw: View yaw in radians (0 looks toward -z)
            pitch: View pitch in radians
            eye_height: Constant camera height
        """
        self.eye_height = eye_height
        self.position = np.array([position[0], eye_height, position[2]], dtype=np.float64)
        self.velocity = np.zeros(3, dtype=np.float64)
        self.yaw = yaw
        self.pitch = clamp(pitch, -MAX_PITCH, MAX_PITCH)

    def forward_vector(self):
        """Horizontal forward direction derived from yaw only"""
        return np.array([-math.sin(self.yaw), 0.0, -math.cos(self.yaw)])

    def right_vector(self):
        """Horizontal right direction derived from yaw only"""
        return np.array([math.cos(self.yaw), 0.0, -math.sin(self.yaw)])

    def rotate(self, delta_yaw, delta_pitch):
        """Apply look deltas and clamp pitch"""
        self.yaw += delta_yaw
        self.pitch = clamp(self.pitch + delta_pitch, -MAX_PITCH, MAX_PITCH)

    def set_position(self, position):
        """Teleport on the ground plane, keeping eye height"""
        self.position = np.array([position[0], self.eye_height, position[2]], dtype=np.float64)
        self.velocity[:] = 0.0

    def __repr__(self):
        x, y, z = self.position
        return f"Player(pos=({x:.2f}, {y:.2f}, {z:.2f}), yaw={math.degrees(self.yaw):.1f}°, pitch={math.degrees(self.pitch):.1f}°)"
