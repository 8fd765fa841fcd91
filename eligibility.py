"""Decide whether a light level label belongs at a block position.

A label marks open space on top of a surface a hostile mob could stand on:
an opaque block below whose top face covers the whole cell, or one of the
whitelisted exceptions. Frustum and line-of-sight checks only skip labels
that would not be seen; without a frustum or camera nothing is culled.
"""
from util import approximately_equals, top_face, unit_box


def covers_full_top(boxes):
    """ True if the top face of the collision `boxes` spans the whole
    horizontal unit square and has some height.

    """
    face = top_face(boxes)
    if face is None:
        return False
    covers_full_xz = (approximately_equals(face.min_x, 0.0)
                      and approximately_equals(face.max_x, 1.0)
                      and approximately_equals(face.min_z, 0.0)
                      and approximately_equals(face.max_z, 1.0))
    return covers_full_xz and face.max_y > face.min_y


def is_obstructed(oracle, position, camera_position, ignoring=None):
    """ True if an opaque block other than `position` sits between the camera
    and the center of the `position` cell.

    """
    x, y, z = position
    center = (x + 0.5, y + 0.5, z + 0.5)
    hit = oracle.raycast(camera_position, center, ignoring=ignoring)
    if hit is None or tuple(hit) == position:
        return False
    return oracle.is_opaque(hit)


def is_eligible(oracle, position, settings, frustum=None, camera_position=None, ignoring=None):
    """ Checks, cheapest and most selective first:

    1. the block below is not blacklisted,
    2. the block below is opaque,
    3. `position` itself has no collision shape,
    4. the cell is inside `frustum` (when given),
    5. the cell is not hidden from `camera_position` (when given),
    6. the block below is whitelisted, or else
    7. the block below has a full top face.

    """
    x, y, z = position
    below = (x, y - 1, z)
    block_below = oracle.block_at(below)

    if block_below in settings.blacklist:
        return False

    if not oracle.is_opaque(below):
        return False

    if not oracle.collision_shape_empty(position):
        return False

    if frustum is not None and not frustum.is_visible(unit_box(position)):
        return False

    if camera_position is not None and is_obstructed(oracle, position, camera_position, ignoring):
        return False

    if block_below in settings.whitelist:
        return True

    return covers_full_top(oracle.collision_boxes(below))
