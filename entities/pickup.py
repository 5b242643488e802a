"""
Pickup entities
The player must collect every placed pickup before the exit counts
"""

import logging

import numpy as np

from utils.helpers import ground_distance

logger = logging.getLogger(__name__)


class Pickup:
    """
    Collectible item sitting on a path cell
    """
    def __init__(self, pickup_id, kind, cell, position):
        """
        Args:
            pickup_id: Unique id within the session
            kind: One of PICKUP_KINDS (cosmetic only)
            cell: (col, row) grid cell
            position: World position (3-vector)
        """
        self.id = pickup_id
        self.kind = kind
        self.cell = cell
        self.position = np.asarray(position, dtype=np.float64)
        self.collected = False

    @property
    def entity_id(self):
        """Scene-graph id for this pickup"""
        return f"pickup-{self.id}"

    def is_within(self, position, radius):
        """Ground-plane distance test against an uncollected pickup"""
        return not self.collected and ground_distance(position, self.position) < radius

    def collect(self):
        """
        Mark as collected

        Returns:
            True if this call collected it
        """
        if self.collected:
            return False
        self.collected = True
        return True

    def __repr__(self):
        return f"Pickup(id={self.id}, kind={self.kind}, cell={self.cell}, collected={self.collected})"


class PickupManager:
    """
    Manages all pickups placed in the maze
    """
    def __init__(self, pickups=()):
        self.pickups = list(pickups)

    @property
    def total(self):
        """Number of pickups actually placed"""
        return len(self.pickups)

    @property
    def collected_count(self):
        return sum(1 for p in self.pickups if p.collected)

    def collect_near(self, position, radius):
        """
        Collect every uncollected pickup within radius of position

        Returns:
            List of newly collected Pickup objects
        """
        collected = []
        for pickup in self.pickups:
            if pickup.is_within(position, radius) and pickup.collect():
                logger.debug("Collected %r", pickup)
                collected.append(pickup)
        return collected

    def get_uncollected_pickups(self):
        """Get list of uncollected pickups"""
        return [p for p in self.pickups if not p.collected]

    def all_collected(self):
        return all(p.collected for p in self.pickups)

    def __len__(self):
        return len(self.pickups)

    def __iter__(self):
        return iter(self.pickups)

    def __repr__(self):
        return f"PickupManager(pickups={self.total}, uncollected={len(self.get_uncollected_pickups())})"
