"""
Raycaster Engine - DDA (Digital Differential Analyzer) algorithm
Casts one ray per screen column through the block grid
Optimized with Numba JIT compilation
"""

import math

import numpy as np
from numba import njit, float64, int32


@njit(cache=True)
def _numba_cast_all_rays(cells, size, gx, gz, dir_x, dir_z, plane_x, plane_z, num_rays):
    """
    Cast all rays using DDA (Numba JIT compiled)

    Args:
        cells: 2D int8 grid [row, col], 0 = wall
        size: Grid size
        gx, gz: Camera position in grid units
        dir_x, dir_z: Forward direction
        plane_x, plane_z: Camera plane (right * tan(fov/2))
        num_rays: Number of rays to cast

    Returns:
        results: numpy array shape (num_rays, 3)
                 [perp_dist, side, wall_u]
    """
    results = np.empty((num_rays, 3), dtype=np.float64)
    max_distance = 4.0 * size

    for i in range(num_rays):
        camera_x = 2.0 * i / num_rays - 1.0
        ray_x = dir_x + plane_x * camera_x
        ray_z = dir_z + plane_z * camera_x

        # Avoid division by zero
        if abs(ray_x) < 1e-10:
            ray_x = 1e-10
        if abs(ray_z) < 1e-10:
            ray_z = 1e-10

        map_x = int32(math.floor(gx))
        map_z = int32(math.floor(gz))

        delta_dist_x = abs(1.0 / ray_x)
        delta_dist_z = abs(1.0 / ray_z)

        if ray_x >= 0:
            step_x = int32(1)
            side_dist_x = (map_x + 1.0 - gx) * delta_dist_x
        else:
            step_x = int32(-1)
            side_dist_x = (gx - map_x) * delta_dist_x

        if ray_z >= 0:
            step_z = int32(1)
            side_dist_z = (map_z + 1.0 - gz) * delta_dist_z
        else:
            step_z = int32(-1)
            side_dist_z = (gz - map_z) * delta_dist_z

        side = 0
        while True:
            if side_dist_x < side_dist_z:
                side_dist_x += delta_dist_x
                map_x += step_x
                side = 1  # E/W face
            else:
                side_dist_z += delta_dist_z
                map_z += step_z
                side = 0  # N/S face

            if map_x < 0 or map_x >= size or map_z < 0 or map_z >= size:
                break
            if cells[map_z, map_x] == 0:
                break
            if min(side_dist_x, side_dist_z) > max_distance:
                break

        if side == 1:
            perp = side_dist_x - delta_dist_x
            hit = gz + perp * ray_z
        else:
            perp = side_dist_z - delta_dist_z
            hit = gx + perp * ray_x

        if perp < 0.001:
            perp = 0.001

        results[i, 0] = perp
        results[i, 1] = float64(side)
        results[i, 2] = hit - math.floor(hit)

    return results


class Raycaster:
    """
    DDA Raycasting engine for first-person maze rendering
    Uses Numba JIT for high-performance ray casting
    """

    def __init__(self, fov=66, num_rays=320):
        self.fov = fov
        self.num_rays = num_rays
        self.fov_rad = math.radians(fov)
        self.plane_scale = math.tan(self.fov_rad / 2)

    def set_resolution(self, num_rays):
        """Update ray count for different screen widths"""
        self.num_rays = num_rays

    def focal_length(self, screen_w):
        """Pixels per unit at depth 1"""
        return (screen_w / 2.0) / self.plane_scale

    def cast_all_rays(self, grid, position, yaw, cell_size):
        """
        Cast all rays from a world position and yaw

        Returns:
            numpy array shape (num_rays, 3): [dist, side, wall_u]
            dist is perpendicular distance in world units
        """
        half = grid.size / 2.0
        gx = position[0] / cell_size + half
        gz = position[2] / cell_size + half

        dir_x, dir_z = -math.sin(yaw), -math.cos(yaw)
        right_x, right_z = math.cos(yaw), -math.sin(yaw)

        results = _numba_cast_all_rays(
            grid.cells, int32(grid.size), float64(gx), float64(gz),
            float64(dir_x), float64(dir_z),
            float64(right_x * self.plane_scale), float64(right_z * self.plane_scale),
            int32(self.num_rays)
        )
        results[:, 0] *= cell_size
        return results
