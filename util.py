import math
from typing import NamedTuple

import numpy as np

EPSILON = 1e-5


class Box(NamedTuple):
    """ Axis aligned box. Block shapes use block-local [0, 1] coordinates,
    world boxes are offset by the block position.

    """
    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    @property
    def length_y(self):
        return self.max_y - self.min_y

    def offset(self, dx, dy, dz):
        return Box(self.min_x + dx, self.min_y + dy, self.min_z + dz,
                   self.max_x + dx, self.max_y + dy, self.max_z + dz)

    def intersects(self, min_x, min_y, min_z, max_x, max_y, max_z):
        """ Strict overlap test; boxes that only touch do not intersect.

        """
        return (self.min_x < max_x and self.max_x > min_x
                and self.min_y < max_y and self.max_y > min_y
                and self.min_z < max_z and self.max_z > min_z)


FULL_BOX = Box(0.0, 0.0, 0.0, 1.0, 1.0, 1.0)


def unit_box(position):
    """ World-space box of the block cell at integer `position`. """
    x, y, z = position
    return FULL_BOX.offset(x, y, z)


def union(boxes):
    """ Bounding box of `boxes`, or None when there are none. """
    if not boxes:
        return None
    return Box(
        min(b.min_x for b in boxes),
        min(b.min_y for b in boxes),
        min(b.min_z for b in boxes),
        max(b.max_x for b in boxes),
        max(b.max_y for b in boxes),
        max(b.max_z for b in boxes),
    )


def approximately_equals(a, b, eps=EPSILON):
    return abs(b - a) < eps


def top_face(boxes):
    """ Bounding box of the part of a shape that touches the top of the
    block cell (y == 1), or None when nothing reaches it.

    """
    return union([b for b in boxes if approximately_equals(b.max_y, 1.0)])


def normalize(position):
    """ Accepts `position` of arbitrary precision and returns the block
    containing that position.

    Parameters
    ----------
    position : tuple of len 3

    Returns
    -------
    block_position : tuple of ints of len 3

    """
    x, y, z = position
    return (int(math.floor(x)), int(math.floor(y)), int(math.floor(z)))


# 4x4 transforms, row-major, applied to column vectors.

def translation(x, y, z):
    m = np.identity(4)
    m[:3, 3] = (x, y, z)
    return m


def scaling(sx, sy, sz):
    return np.diag([sx, sy, sz, 1.0])


def rotation_x(angle):
    c = math.cos(angle)
    s = math.sin(angle)
    m = np.identity(4)
    m[1, 1] = c
    m[1, 2] = -s
    m[2, 1] = s
    m[2, 2] = c
    return m


def rotation_y(angle):
    c = math.cos(angle)
    s = math.sin(angle)
    m = np.identity(4)
    m[0, 0] = c
    m[0, 2] = s
    m[2, 0] = -s
    m[2, 2] = c
    return m


def transform_point(matrix, point):
    x, y, z = point
    v = matrix @ np.array([x, y, z, 1.0])
    return v[:3] / v[3]


def segment_hits_box(origin, direction, box):
    """ Slab test: True if origin + t*direction hits `box` for t in [0, 1]. """
    t_min = 0.0
    t_max = 1.0
    lows = (box.min_x, box.min_y, box.min_z)
    highs = (box.max_x, box.max_y, box.max_z)
    for axis in range(3):
        o = origin[axis]
        d = direction[axis]
        if abs(d) < 1e-12:
            if o < lows[axis] or o > highs[axis]:
                return False
            continue
        t0 = (lows[axis] - o) / d
        t1 = (highs[axis] - o) / d
        if t0 > t1:
            t0, t1 = t1, t0
        t_min = max(t_min, t0)
        t_max = min(t_max, t1)
        if t_min > t_max:
            return False
    return True
