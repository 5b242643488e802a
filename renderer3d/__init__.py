"""
3D Renderer Module - Wolfenstein3D style raycasting over the session snapshot
"""

from .raycaster import Raycaster
from .renderer import Renderer3D
from .minimap import Minimap3D
from .scene_graph import SceneGraph, SceneNode

__all__ = ['Raycaster', 'Renderer3D', 'Minimap3D', 'SceneGraph', 'SceneNode']
