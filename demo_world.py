import numpy

import config
import logutil
from blocks import BLOCK_ID
from oracle import OVERWORLD, THE_NETHER, THE_END
from world import VoxelWorld

BASE_HEIGHT = 40
HILL_HEIGHT = 8
DIRT_DEPTH = 3

# dimension -> (filler, subsoil, top) block names.
TERRAIN_BLOCKS = {
    OVERWORLD: ('stone', 'dirt', 'grass_block'),
    THE_NETHER: ('netherrack', 'netherrack', 'netherrack'),
    THE_END: ('end_stone', 'end_stone', 'end_stone'),
}


def heightmap(size, seed):
    """ Smooth rolling hills from a handful of random sine waves. """
    rng = numpy.random.default_rng(seed)
    xs, zs = numpy.meshgrid(numpy.arange(size), numpy.arange(size), indexing='ij')
    h = numpy.zeros((size, size), dtype=numpy.float64)
    for _ in range(4):
        fx, fz = rng.uniform(0.02, 0.12, size=2)
        px, pz = rng.uniform(0, 2 * numpy.pi, size=2)
        h += numpy.sin(xs * fx + px) * numpy.cos(zs * fz + pz)
    h = (h - h.min()) / max(h.max() - h.min(), 1e-9)
    return (BASE_HEIGHT + h * HILL_HEIGHT).astype(numpy.intp)


def build_world(size=None, height=None, seed=None, dimension=OVERWORLD):
    size = config.WORLD_SIZE if size is None else size
    height = config.WORLD_HEIGHT if height is None else height
    seed = config.WORLD_SEED if seed is None else seed
    world = VoxelWorld((size, height, size), dimension=dimension)
    heights = numpy.minimum(heightmap(size, seed), height - 2)

    ys = numpy.arange(height)[numpy.newaxis, :, numpy.newaxis]
    top = heights[:, numpy.newaxis, :]
    filler, subsoil, top_block = TERRAIN_BLOCKS.get(dimension, TERRAIN_BLOCKS[OVERWORLD])
    blocks = world.blocks
    blocks[ys < top - DIRT_DEPTH] = BLOCK_ID[filler]
    blocks[(ys >= top - DIRT_DEPTH) & (ys < top - 1)] = BLOCK_ID[subsoil]
    blocks[ys == top - 1] = BLOCK_ID[top_block]
    blocks[:, 0, :] = BLOCK_ID['bedrock']

    rng = numpy.random.default_rng(seed + 1)

    def surface(x, z):
        return int(heights[x, z])

    # Scattered ground cover and odd surfaces.
    for name, count in (('torch', 10), ('short_grass', 40), ('snow', 12), ('carpet', 6)):
        for x, z in rng.integers(1, size - 1, size=(count, 2)):
            world.set_block((int(x), surface(x, z), int(z)), name)
    for name, count in (('mud', 8), ('soul_sand', 6), ('stone_slab', 6), ('glass', 4), ('command_block', 2)):
        for x, z in rng.integers(1, size - 1, size=(count, 2)):
            world.set_block((int(x), surface(x, z) - 1, int(z)), name)

    # A roofed shelter so part of the map stays dark.
    cx = cz = size // 2
    floor = surface(cx, cz)
    roof = floor + 4
    if roof < height:
        world.fill((cx - 5, roof, cz - 5), (cx + 5, roof, cz + 5), filler)
        world.fill((cx - 5, floor, cz - 5), (cx - 5, roof - 1, cz + 5), filler)
        world.fill((cx + 5, floor, cz - 5), (cx + 5, roof - 1, cz + 5), filler)
        world.set_block((cx + 3, surface(cx + 3, cz + 3), cz + 3), 'torch')

    world.relight()
    logutil.log("MAIN", f"built demo world size={size} height={height} seed={seed}")
    return world
