import numpy
from util import Box, FULL_BOX

SLAB_BOX = Box(0.0, 0.0, 0.0, 1.0, 0.5, 1.0)
SINKING_BOX = Box(0.0, 0.0, 0.0, 1.0, 14.0 / 16, 1.0)
SNOW_LAYER_BOX = Box(0.0, 0.0, 0.0, 1.0, 2.0 / 16, 1.0)
CARPET_BOX = Box(0.0, 0.0, 0.0, 1.0, 1.0 / 16, 1.0)
TORCH_BOX = Box(6.0 / 16, 0.0, 6.0 / 16, 10.0 / 16, 10.0 / 16, 10.0 / 16)


class Block(object):
    name = None
    # Opaque blocks hide what is behind them and count as a stand-on surface.
    opaque = True
    # Collision boxes in block-local [0,1] coords; empty means passable.
    collision = (FULL_BOX,)
    # Outline boxes; None means "same as collision".
    visual = None
    # Block light emitted (0-15).
    emission = 0

    @classmethod
    def visual_boxes(cls):
        if cls.visual is None:
            return cls.collision
        return cls.visual

class Air(Block):
    name = 'air'
    opaque = False
    collision = ()
    visual = ()

class Stone(Block):
    name = 'stone'

class Dirt(Block):
    name = 'dirt'

class Grass(Block):
    name = 'grass_block'

class Sand(Block):
    name = 'sand'

class Netherrack(Block):
    name = 'netherrack'

class EndStone(Block):
    name = 'end_stone'

class Bedrock(Block):
    name = 'bedrock'

class Barrier(Block):
    name = 'barrier'
    opaque = False

class CommandBlock(Block):
    name = 'command_block'

class ChainCommandBlock(Block):
    name = 'chain_command_block'

class RepeatingCommandBlock(Block):
    name = 'repeating_command_block'

class Glass(Block):
    name = 'glass'
    opaque = False

class Leaves(Block):
    name = 'leaves'
    opaque = False

class StoneSlab(Block):
    name = 'stone_slab'
    opaque = False
    collision = (SLAB_BOX,)

class Mud(Block):
    name = 'mud'
    collision = (SINKING_BOX,)
    visual = (FULL_BOX,)

class SoulSand(Block):
    name = 'soul_sand'
    collision = (SINKING_BOX,)
    visual = (FULL_BOX,)

class SlimeBlock(Block):
    name = 'slime_block'

class Glowstone(Block):
    name = 'glowstone'
    emission = 15

class Torch(Block):
    name = 'torch'
    opaque = False
    collision = ()
    visual = (TORCH_BOX,)
    emission = 14

class SnowLayer(Block):
    name = 'snow'
    opaque = False
    collision = ()
    visual = (SNOW_LAYER_BOX,)

class Carpet(Block):
    name = 'carpet'
    opaque = False
    collision = (CARPET_BOX,)

class TallGrass(Block):
    name = 'short_grass'
    opaque = False
    collision = ()
    visual = (Box(2.0 / 16, 0.0, 2.0 / 16, 14.0 / 16, 13.0 / 16, 14.0 / 16),)


BLOCKS = [
    Air,
    Stone,
    Dirt,
    Grass,
    Sand,
    Netherrack,
    EndStone,
    Bedrock,
    Barrier,
    CommandBlock,
    ChainCommandBlock,
    RepeatingCommandBlock,
    Glass,
    Leaves,
    StoneSlab,
    Mud,
    SoulSand,
    SlimeBlock,
    Glowstone,
    Torch,
    SnowLayer,
    Carpet,
    TallGrass,
]

AIR = 0
BLOCK_ID = {}
for i, x in enumerate(BLOCKS):
    BLOCK_ID[x.name] = i
BLOCKS_BY_ID = {i: x for i, x in enumerate(BLOCKS)}

BLOCK_OPAQUE = numpy.array([x.opaque for x in BLOCKS], dtype=numpy.bool_)
BLOCK_EMISSION = numpy.array([x.emission for x in BLOCKS], dtype=numpy.uint8)
