import math

import numpy

import logutil
from blocks import AIR, BLOCK_ID, BLOCKS_BY_ID, BLOCK_OPAQUE, BLOCK_EMISSION
from oracle import (
    SpatialOracle,
    LIGHT_BLOCK,
    LIGHT_SKY,
    MAX_LIGHT,
    OVERWORLD,
)
from util import normalize, segment_hits_box, union

NEIGHBOR_OFFSETS_6 = numpy.array([
    ( 1, 0, 0), (-1, 0, 0),
    ( 0, 1, 0), ( 0,-1, 0),
    ( 0, 0, 1), ( 0, 0,-1),
], dtype=numpy.intp)


def _propagate(light_grid, passable):
    """ Flood `light_grid` into `passable` cells, losing one level per step.

    Breadth-first relaxation over the whole frontier at once. Sources keep
    their own level; only cells that would get brighter are revisited.

    """
    shape = numpy.array(light_grid.shape, dtype=numpy.intp)
    frontier = numpy.argwhere(light_grid > 1)
    while frontier.size:
        levels = light_grid[frontier[:, 0], frontier[:, 1], frontier[:, 2]] - 1
        updated = []
        for off in NEIGHBOR_OFFSETS_6:
            n_coords = frontier + off
            inside = numpy.all((n_coords >= 0) & (n_coords < shape), axis=1)
            n_coords = n_coords[inside]
            n_levels = levels[inside]
            open_cells = passable[n_coords[:, 0], n_coords[:, 1], n_coords[:, 2]]
            n_coords = n_coords[open_cells]
            n_levels = n_levels[open_cells]
            existing = light_grid[n_coords[:, 0], n_coords[:, 1], n_coords[:, 2]]
            better = n_levels > existing
            if not numpy.any(better):
                continue
            n_coords = n_coords[better]
            numpy.maximum.at(light_grid, (n_coords[:, 0], n_coords[:, 1], n_coords[:, 2]), n_levels[better])
            updated.append(n_coords)
        if not updated:
            break
        frontier = numpy.unique(numpy.concatenate(updated), axis=0)
        frontier = frontier[light_grid[frontier[:, 0], frontier[:, 1], frontier[:, 2]] > 1]
    return light_grid


class VoxelWorld(SpatialOracle):
    """ Fixed-size block grid with precomputed block and sky light.

    Positions outside the grid read as air lit by the open sky.

    """

    def __init__(self, size, origin=(0, 0, 0), dimension=OVERWORLD, has_sky=None):
        self.shape = tuple(int(s) for s in size)
        self.origin = tuple(int(o) for o in origin)
        self.dimension = dimension
        self.has_sky = (dimension == OVERWORLD) if has_sky is None else has_sky
        self.blocks = numpy.zeros(self.shape, dtype='u2')
        self.block_light = numpy.zeros(self.shape, dtype=numpy.uint8)
        sky = MAX_LIGHT if self.has_sky else 0
        self.sky_light = numpy.full(self.shape, sky, dtype=numpy.uint8)

    def _index(self, position):
        x, y, z = position
        ix = x - self.origin[0]
        iy = y - self.origin[1]
        iz = z - self.origin[2]
        if 0 <= ix < self.shape[0] and 0 <= iy < self.shape[1] and 0 <= iz < self.shape[2]:
            return ix, iy, iz
        return None

    def __getitem__(self, position):
        """
        retrieves the block id at the (x,y,z) coordinate tuple `position`
        """
        index = self._index(position)
        if index is None:
            return AIR
        return int(self.blocks[index])

    def set_block(self, position, name):
        index = self._index(position)
        if index is None:
            raise IndexError(f"position {position} outside world")
        self.blocks[index] = BLOCK_ID[name]

    def fill(self, lo, hi, name):
        """ Fill the inclusive box `lo`..`hi` (world coords, clipped). """
        block_id = BLOCK_ID[name]
        slices = []
        for axis in range(3):
            a = max(lo[axis] - self.origin[axis], 0)
            b = min(hi[axis] - self.origin[axis] + 1, self.shape[axis])
            if a >= b:
                return
            slices.append(slice(a, b))
        self.blocks[tuple(slices)] = block_id

    def set_light(self, position, block=None, sky=None):
        """ Override stored light values; used to pin light in tests. """
        index = self._index(position)
        if index is None:
            raise IndexError(f"position {position} outside world")
        if block is not None:
            self.block_light[index] = block
        if sky is not None:
            self.sky_light[index] = sky

    def surface_y(self, x, z):
        """ Y of the first non-air cell above the topmost solid block, or None. """
        index = self._index((x, self.origin[1], z))
        if index is None:
            return None
        column = self.blocks[index[0], :, index[2]]
        solid = numpy.nonzero(BLOCK_OPAQUE[column])[0]
        if solid.size == 0:
            return None
        return int(solid[-1]) + 1 + self.origin[1]

    def relight(self):
        """ Recompute sky light and block light for the whole grid. """
        opaque = BLOCK_OPAQUE[self.blocks]
        passable = ~opaque
        if self.has_sky:
            # Direct sky light reaches every cell with no opaque block above it.
            covered = numpy.cumsum(opaque[:, ::-1, :], axis=1)[:, ::-1, :] > 0
            sky = numpy.where(covered, 0, MAX_LIGHT).astype(numpy.int16)
            self.sky_light = _propagate(sky, passable).astype(numpy.uint8)
        else:
            self.sky_light = numpy.zeros(self.shape, dtype=numpy.uint8)
        torch = BLOCK_EMISSION[self.blocks].astype(numpy.int16)
        self.block_light = _propagate(torch, passable).astype(numpy.uint8)
        logutil.log(
            "WORLD",
            f"relight shape={self.shape} lit_cells={int(numpy.count_nonzero(self.block_light))}",
            level="DEBUG",
        )

    # SpatialOracle

    def block_at(self, position):
        return BLOCKS_BY_ID[self[position]].name

    def is_opaque(self, position):
        return bool(BLOCK_OPAQUE[self[position]])

    def collision_boxes(self, position):
        return BLOCKS_BY_ID[self[position]].collision

    def light_level(self, position, channel):
        index = self._index(position)
        if channel == LIGHT_BLOCK:
            return 0 if index is None else int(self.block_light[index])
        if channel == LIGHT_SKY:
            if index is None:
                return MAX_LIGHT if self.has_sky else 0
            return int(self.sky_light[index])
        raise ValueError(f"unknown light channel {channel!r}")

    def visual_bounding_box(self, position):
        return union(BLOCKS_BY_ID[self[position]].visual_boxes())

    def raycast(self, start, end, ignoring=None):
        """ Voxel walk from `start` to `end`, testing collision boxes of each
        cell crossed. The grid holds no entities, so `ignoring` has nothing
        to skip.

        """
        origin = numpy.asarray(start, dtype=float)
        direction = numpy.asarray(end, dtype=float) - origin
        cell = list(normalize(start))
        end_cell = normalize(end)
        step = [0, 0, 0]
        t_max = [math.inf, math.inf, math.inf]
        t_delta = [math.inf, math.inf, math.inf]
        for axis in range(3):
            d = direction[axis]
            if d > 0:
                step[axis] = 1
                t_max[axis] = (cell[axis] + 1 - origin[axis]) / d
                t_delta[axis] = 1.0 / d
            elif d < 0:
                step[axis] = -1
                t_max[axis] = (origin[axis] - cell[axis]) / -d
                t_delta[axis] = -1.0 / d
        max_steps = sum(abs(end_cell[i] - cell[i]) for i in range(3)) + 1
        for _ in range(max_steps):
            position = tuple(cell)
            for box in self.collision_boxes(position):
                if segment_hits_box(origin, direction, box.offset(*position)):
                    return position
            if position == end_cell:
                return None
            axis = min(range(3), key=lambda i: t_max[i])
            if t_max[axis] > 1.0:
                return None
            cell[axis] += step[axis]
            t_max[axis] += t_delta[axis]
        return None
