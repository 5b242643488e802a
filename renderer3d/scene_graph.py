"""
Scene Graph - host-side mirror of the entities the session spawned
Applies SpawnEntity / RemoveEntity / SetTransform mutations
"""

import logging

from game.events import SpawnEntity, RemoveEntity, SetTransform

logger = logging.getLogger(__name__)


class SceneNode:
    """One renderable entity"""

    def __init__(self, entity_id, kind, position, yaw=0.0, pitch=0.0, extents=None, variant=None):
        self.entity_id = entity_id
        self.kind = kind
        self.position = position
        self.yaw = yaw
        self.pitch = pitch
        self.extents = extents
        self.variant = variant

    def __repr__(self):
        return f"SceneNode({self.entity_id}, kind={self.kind}, pos={self.position})"


class SceneGraph:
    """
    Renderable entities keyed by entity id
    """

    def __init__(self, strict=False):
        """
        Args:
            strict: Raise KeyError for mutations on unknown entities
                instead of logging a warning
        """
        self.nodes = {}
        self.strict = strict

    def apply(self, mutations):
        """Apply mutations in order"""
        for mutation in mutations:
            if isinstance(mutation, SpawnEntity):
                self._spawn(mutation)
            elif isinstance(mutation, RemoveEntity):
                if self.nodes.pop(mutation.entity_id, None) is None:
                    self._unknown("Remove", mutation.entity_id)
            elif isinstance(mutation, SetTransform):
                node = self.nodes.get(mutation.entity_id)
                if node is None:
                    self._unknown("Transform", mutation.entity_id)
                    continue
                node.position = mutation.position
                node.yaw = mutation.yaw
                node.pitch = mutation.pitch
            else:
                raise TypeError(f"not a scene mutation: {mutation!r}")

    def _unknown(self, action, entity_id):
        if self.strict:
            raise KeyError(entity_id)
        logger.warning("%s of unknown entity %s", action, entity_id)

    def _spawn(self, m):
        if m.entity_id in self.nodes:
            logger.warning("Entity %s spawned twice; replacing", m.entity_id)
        self.nodes[m.entity_id] = SceneNode(
            m.entity_id, m.kind, m.position, m.yaw, m.pitch, m.extents, m.variant
        )

    def get(self, entity_id):
        return self.nodes.get(entity_id)

    def nodes_of(self, kind):
        return [n for n in self.nodes.values() if n.kind == kind]

    def __contains__(self, entity_id):
        return entity_id in self.nodes

    def __len__(self):
        return len(self.nodes)

    def __repr__(self):
        return f"SceneGraph(nodes={len(self.nodes)})"
