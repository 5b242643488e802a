"""
Per-tick input snapshot - the only thing the core reads from the host
"""

from utils.helpers import clamp


class InputSnapshot:
    """
    Movement intent and look delta for a single tick

    forward_axis and right_axis are in [-1, 1]; look deltas are raw
    mouse motion since the previous tick.
    """

    __slots__ = ("forward_axis", "right_axis", "look_delta_x", "look_delta_y")

    def __init__(self, forward_axis=0.0, right_axis=0.0, look_delta_x=0.0, look_delta_y=0.0):
        self.forward_axis = clamp(float(forward_axis), -1.0, 1.0)
        self.right_axis = clamp(float(right_axis), -1.0, 1.0)
        self.look_delta_x = float(look_delta_x)
        self.look_delta_y = float(look_delta_y)

    @classmethod
    def from_keys(cls, forward_held=False, backward_held=False, left_held=False,
                  right_held=False, look_dx=0.0, look_dy=0.0):
        """Build from held movement keys; opposite keys cancel out"""
        return cls(
            forward_axis=int(bool(forward_held)) - int(bool(backward_held)),
            right_axis=int(bool(right_held)) - int(bool(left_held)),
            look_delta_x=look_dx,
            look_delta_y=look_dy,
        )

    def __eq__(self, other):
        if not isinstance(other, InputSnapshot):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in self.__slots__)

    def __repr__(self):
        return (f"InputSnapshot(forward={self.forward_axis}, right={self.right_axis}, "
                f"look=({self.look_delta_x}, {self.look_delta_y}))")


NO_INPUT = InputSnapshot()
