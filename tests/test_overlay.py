import os
import sys

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from camera import Camera
from draw import TextRenderer
from overlay import FrameContext, LightOverlay
from settings import Settings
from world import VoxelWorld

SETTINGS = Settings(horizontal_distance=2, vertical_distance=1, update_interval_frames=4)
# Cells at y=64 with dx*dx + dz*dz <= 2 * 2 * 1.5.
FLOOR_LABELS = 21


class RecordingRenderer(TextRenderer):

    def __init__(self):
        self.calls = []

    def draw(self, text, x, y, color, shadow, matrix, layer='normal'):
        self.calls.append((text, x, y, color, shadow, layer))


def _world():
    world = VoxelWorld((11, 8, 11), origin=(-5, 60, -5))
    world.fill((-5, 63, -5), (5, 63, 5), 'stone')
    return world


def _context(world, renderer, debug=False):
    camera = Camera((0.5, 65.62, 0.5), pitch=-30.0)
    return FrameContext(
        world=world,
        player_position=(0.5, 64.0, 0.5),
        camera=camera,
        text_renderer=renderer,
        debug=debug,
    )


def test_disabled_by_default():
    overlay = LightOverlay()
    assert not overlay.enabled
    assert overlay.on_render_frame(_context(_world(), RecordingRenderer())) == 0
    assert overlay.cache.rebuild_count == 0


def test_incomplete_context_is_skipped():
    overlay = LightOverlay(SETTINGS, enabled=True)
    renderer = RecordingRenderer()
    world = _world()
    partial = [
        FrameContext(),
        FrameContext(world=world, text_renderer=renderer),
        _context(world, renderer)._replace(camera=None),
        _context(world, renderer)._replace(text_renderer=None),
    ]
    for _ in range(10):
        for context in partial:
            assert overlay.on_render_frame(context) == 0
    assert overlay.cache.rebuild_count == 0
    assert overlay.scheduler.counter == 0
    assert renderer.calls == []


def test_disabled_frames_do_not_advance_schedule():
    overlay = LightOverlay(SETTINGS, enabled=False)
    renderer = RecordingRenderer()
    for _ in range(50):
        assert overlay.on_render_frame(_context(_world(), renderer)) == 0
    assert overlay.scheduler.counter == 0
    assert renderer.calls == []


def test_rebuilds_once_per_interval_and_draws_snapshot():
    overlay = LightOverlay(SETTINGS, enabled=True)
    renderer = RecordingRenderer()
    world = _world()
    context = _context(world, renderer)

    drawn = [overlay.on_render_frame(context) for _ in range(3)]
    assert drawn == [0, 0, 0]
    assert overlay.on_render_frame(context) == FLOOR_LABELS
    assert overlay.cache.rebuild_count == 1

    # Changes to the world show up only at the next rebuild. Glass blocks
    # the cell it sits in without becoming a surface for the cell above.
    world.set_block((0, 64, 0), 'glass')
    drawn = [overlay.on_render_frame(context) for _ in range(3)]
    assert drawn == [FLOOR_LABELS] * 3
    assert overlay.cache.rebuild_count == 1
    assert overlay.on_render_frame(context) == FLOOR_LABELS - 1
    assert overlay.cache.rebuild_count == 2
    assert (0, 64, 0) not in [t.position for t in overlay.cache]

    text, x, y, color, shadow, layer = renderer.calls[0]
    assert shadow is True
    assert layer == 'normal'
    assert x == -renderer.width(text) / 2.0
    assert y == -renderer.font_height / 2.0


def test_placed_block_moves_label_on_top():
    overlay = LightOverlay(SETTINGS, enabled=True)
    renderer = RecordingRenderer()
    world = _world()
    context = _context(world, renderer)
    overlay.scheduler.expire()
    assert overlay.on_render_frame(context) == FLOOR_LABELS

    world.set_block((0, 64, 0), 'stone')
    overlay.scheduler.expire()
    # The covered cell drops out and the cell on top of the new block joins.
    assert overlay.on_render_frame(context) == FLOOR_LABELS
    positions = set(t.position for t in overlay.cache)
    assert (0, 64, 0) not in positions
    assert (0, 65, 0) in positions


def test_toggle_applies_on_input_tick():
    overlay = LightOverlay(SETTINGS, enabled=False)
    renderer = RecordingRenderer()
    context = _context(_world(), renderer)

    overlay.request_toggle()
    assert not overlay.enabled
    assert overlay.on_render_frame(context) == 0

    overlay.on_input_tick()
    assert overlay.enabled
    # Turning on shows labels on the very next frame.
    assert overlay.on_render_frame(context) == FLOOR_LABELS

    # Two presses within one tick cancel out.
    overlay.request_toggle()
    overlay.request_toggle()
    overlay.on_input_tick()
    assert overlay.enabled

    overlay.request_toggle()
    overlay.on_input_tick()
    assert not overlay.enabled
    assert len(overlay.cache) == 0
    assert overlay.on_render_frame(context) == 0


def test_debug_mode_change_forces_rebuild():
    overlay = LightOverlay(SETTINGS, enabled=True)
    overlay.scheduler.expire()
    renderer = RecordingRenderer()
    world = _world()

    assert overlay.on_render_frame(_context(world, renderer)) == FLOOR_LABELS
    assert overlay.cache.rebuild_count == 1
    assert all(t.scale == SETTINGS.scale_normal for t in overlay.cache)

    assert overlay.on_render_frame(_context(world, renderer, debug=True)) == FLOOR_LABELS
    assert overlay.cache.rebuild_count == 2
    assert all(t.scale == SETTINGS.scale_debug for t in overlay.cache)
    assert all(t.label.startswith("■") for t in overlay.cache)


def test_apply_settings_takes_effect_next_frame():
    overlay = LightOverlay(SETTINGS, enabled=True)
    renderer = RecordingRenderer()
    context = _context(_world(), renderer)
    overlay.apply_settings(SETTINGS._replace(horizontal_distance=0, update_interval_frames=0))
    assert overlay.scheduler.interval == 1
    assert overlay.on_render_frame(context) == 1
