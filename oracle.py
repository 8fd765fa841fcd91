"""Read-only world queries consumed by the overlay.

The host world implements `SpatialOracle`; the overlay never mutates it.
`world.VoxelWorld` is the reference implementation used by the demo and
the tests.
"""

LIGHT_BLOCK = 'block'
LIGHT_SKY = 'sky'

MAX_LIGHT = 15

OVERWORLD = 'overworld'
THE_NETHER = 'the_nether'
THE_END = 'the_end'


class SpatialOracle(object):
    # Dimension identifier of the world, e.g. OVERWORLD.
    dimension = None

    def block_at(self, position):
        """ Return the block identifier at integer `position`. """
        raise NotImplementedError

    def is_opaque(self, position):
        raise NotImplementedError

    def collision_boxes(self, position):
        """ Collision boxes of the block at `position` in block-local
        coordinates. An empty sequence means the block is passable.

        """
        raise NotImplementedError

    def collision_shape_empty(self, position):
        return len(self.collision_boxes(position)) == 0

    def light_level(self, position, channel):
        """ Light level (0-15) of `channel` (LIGHT_BLOCK or LIGHT_SKY). """
        raise NotImplementedError

    def visual_bounding_box(self, position):
        """ Block-local outline bounding box, or None when the block has no
        visual shape.

        """
        raise NotImplementedError

    def raycast(self, start, end, ignoring=None):
        """ Cast a segment from `start` to `end` against collision geometry.

        Returns the integer position of the first block hit, or None when
        the segment reaches `end` unobstructed. `ignoring` names an entity
        the ray must pass through.

        """
        raise NotImplementedError
