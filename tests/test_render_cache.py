import itertools
import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from blocks import FULL_BOX, SNOW_LAYER_BOX, TORCH_BOX
from draw import TextRenderer
from oracle import OVERWORLD, THE_NETHER
from render_cache import (
    CachedTarget,
    RenderTargetCache,
    ScanState,
    UpdateScheduler,
    label_offset_y,
    scan_offsets,
)
from settings import Settings
from util import Box
from world import VoxelWorld

METRICS = TextRenderer()


class RecordingOracle(object):
    """ Wraps a world and remembers every cell the classifier looked at. """

    def __init__(self, world):
        self.world = world
        self.dimension = world.dimension
        self.classified = []

    def block_at(self, position):
        x, y, z = position
        self.classified.append((x, y + 1, z))
        return self.world.block_at(position)

    def __getattr__(self, name):
        return getattr(self.world, name)


class SnapshotProbe(object):
    """ Samples the cache every time a light level is read mid-rebuild. """

    def __init__(self, world, cache):
        self.world = world
        self.dimension = world.dimension
        self.cache = cache
        self.seen = []

    def light_level(self, position, channel):
        self.seen.append(self.cache.snapshot())
        return self.world.light_level(position, channel)

    def __getattr__(self, name):
        return getattr(self.world, name)


def _empty_world(dimension=OVERWORLD):
    return VoxelWorld((41, 30, 41), origin=(-20, 50, -20), dimension=dimension)


def test_scan_offsets_bound():
    offsets = scan_offsets(16, 8)
    assert offsets
    for dx, dy, dz in offsets:
        assert abs(dx) <= 16 and abs(dz) <= 16 and abs(dy) <= 8
        assert dx * dx + dy * dy + dz * dz <= 384
    expected = [
        (dx, dy, dz)
        for dx, dz, dy in itertools.product(range(-16, 17), range(-16, 17), range(-8, 9))
        if dx * dx + dy * dy + dz * dz <= 16 * 16 * 1.5
    ]
    assert list(offsets) == expected


def test_scan_offsets_order_and_degenerate_radius():
    offsets = scan_offsets(2, 1)
    keys = [(dx, dz, dy) for dx, dy, dz in offsets]
    assert keys == sorted(keys)
    # (-2, *, -2) corners fall outside the 2 * 2 * 1.5 cutoff.
    assert offsets[0] == (-2, -1, -1)
    assert (0, 0, 0) in offsets
    assert scan_offsets(0, 5) == ((0, 0, 0),)
    assert scan_offsets(-3, -3) == ((0, 0, 0),)


def test_only_cells_inside_volume_are_classified():
    world = _empty_world()
    world.fill((-20, 60, -20), (20, 60, 20), 'stone')
    oracle = RecordingOracle(world)
    settings = Settings(horizontal_distance=16, vertical_distance=8)
    cache = RenderTargetCache()
    cache.rebuild(oracle, ScanState(reference=(0, 64, 0)), settings, METRICS)
    assert len(oracle.classified) == len(scan_offsets(16, 8))
    for x, y, z in oracle.classified:
        dx, dy, dz = x, y - 64, z
        assert abs(dx) <= 16 and abs(dz) <= 16 and abs(dy) <= 8
        assert dx * dx + dy * dy + dz * dz <= 384
    # Every open cell on the floor inside the volume gets a label.
    assert all(t.position[1] == 61 for t in cache.snapshot())
    assert len(cache) == sum(1 for dx, dy, dz in scan_offsets(16, 8) if dy == -3)


def test_label_offset_y():
    w = 6 / 32.0
    h = 9 / 32.0
    assert label_offset_y(None, w, h, 0.1) == 0.1
    assert label_offset_y(FULL_BOX, w, h, 0.1) == 0.1 + 1.0
    assert label_offset_y(TORCH_BOX, w, h, 0.1) == 0.1 + TORCH_BOX.length_y
    assert label_offset_y(SNOW_LAYER_BOX, w, h, 0.1) == 0.1 + SNOW_LAYER_BOX.length_y
    # A thin post in the corner stays clear of the label footprint.
    assert label_offset_y(Box(0.0, 0.0, 0.0, 0.1, 1.0, 0.1), w, h, 0.1) == 0.1
    # Shapes floating above the label height do not count either.
    assert label_offset_y(Box(0.0, 0.5, 0.0, 1.0, 1.0, 1.0), w, h, 0.1) == 0.1


def test_single_block_scenario():
    world = _empty_world()
    world.set_block((1, 63, 0), 'stone')
    world.set_light((1, 64, 0), block=0, sky=10)
    settings = Settings()
    cache = RenderTargetCache()
    scan = ScanState(reference=(0, 64, 0), camera_position=(0.5, 65.62, 0.5))
    targets = cache.rebuild(world, scan, settings, METRICS)
    assert targets == (
        CachedTarget((1, 64, 0), "0", settings.scale_normal, settings.color_warning, settings.offset_y_base),
    )
    assert cache.snapshot() is targets


def test_debug_labels_use_debug_scale():
    world = _empty_world(THE_NETHER)
    world.set_block((0, 63, 0), 'stone')
    world.set_block((0, 64, 0), 'torch')
    world.set_light((0, 64, 0), block=14, sky=0)
    settings = Settings()
    cache = RenderTargetCache()
    (target,) = cache.rebuild(world, ScanState(reference=(0, 64, 0), debug=True), settings, METRICS)
    assert target.label == "■14 ☀0"
    assert target.scale == settings.scale_debug
    assert target.color == settings.color_safe
    # The torch pokes into the label, so it is lifted by the torch height.
    assert target.offset_y == settings.offset_y_base + TORCH_BOX.length_y


def test_rebuild_replaces_snapshot_atomically():
    settings = Settings(horizontal_distance=4, vertical_distance=2)
    cache = RenderTargetCache()
    first = _empty_world()
    first.set_block((0, 63, 0), 'stone')
    before = cache.rebuild(first, ScanState(reference=(0, 64, 0)), settings, METRICS)
    assert len(before) == 1

    second = _empty_world()
    second.fill((-1, 63, -1), (1, 63, 1), 'stone')
    probe = SnapshotProbe(second, cache)
    after = cache.rebuild(probe, ScanState(reference=(0, 64, 0)), settings, METRICS)
    assert probe.seen
    assert all(seen is before for seen in probe.seen)
    assert len(after) == 9
    assert cache.snapshot() is after


def test_clear():
    world = _empty_world()
    world.set_block((0, 63, 0), 'stone')
    cache = RenderTargetCache()
    cache.rebuild(world, ScanState(reference=(0, 64, 0)), Settings(), METRICS)
    assert len(cache) == 1
    cache.clear()
    assert cache.snapshot() == ()


def test_scheduler_fires_once_per_interval():
    scheduler = UpdateScheduler(20)
    fired = [scheduler.advance() for _ in range(100)]
    assert fired.count(True) == 5
    assert [i + 1 for i, f in enumerate(fired) if f] == [20, 40, 60, 80, 100]


def test_scheduler_reset():
    scheduler = UpdateScheduler(20)
    for _ in range(7):
        scheduler.advance()
    scheduler.reset()
    assert not any(scheduler.advance() for _ in range(19))
    assert scheduler.advance()


def test_scheduler_clamps_interval():
    for interval in (0, -4):
        scheduler = UpdateScheduler(interval)
        assert scheduler.interval == 1
        assert all(scheduler.advance() for _ in range(5))


def test_scheduler_expire():
    scheduler = UpdateScheduler(20)
    scheduler.advance()
    scheduler.expire()
    assert scheduler.advance()
    assert not scheduler.advance()
