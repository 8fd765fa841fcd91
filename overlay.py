"""Light level overlay state and its two host entry points.

The host calls `on_input_tick()` once per input tick and
`on_render_frame(context)` once per rendered frame. Everything else lives on
the `LightOverlay` instance; there is no module-level state.
"""
from typing import NamedTuple, Optional

import config
import logutil
from draw import draw_targets
from render_cache import RenderTargetCache, ScanState, UpdateScheduler
from settings import Settings
from util import normalize


class FrameContext(NamedTuple):
    """ What the host can supply for one frame; any missing piece of world,
    player position, camera or text renderer skips the frame.

    """
    world: Optional[object] = None
    player_position: Optional[tuple] = None
    camera: Optional[object] = None
    text_renderer: Optional[object] = None
    debug: bool = False
    frustum: Optional[object] = None
    # Entity that raycasts pass through (usually the player).
    player: Optional[object] = None

    def is_complete(self):
        return (self.world is not None
                and self.player_position is not None
                and self.camera is not None
                and self.text_renderer is not None)


class LightOverlay(object):

    def __init__(self, settings=None, enabled=None):
        self.settings = Settings.from_config() if settings is None else settings.sanitized()
        self.enabled = config.OVERLAY_ENABLED_AT_START if enabled is None else bool(enabled)
        self.cache = RenderTargetCache()
        self.scheduler = UpdateScheduler(self.settings.update_interval_frames)
        self.debug = False
        self._pending_toggles = 0

    def request_toggle(self):
        """ Record a toggle key press; applied on the next input tick. """
        self._pending_toggles += 1

    def on_input_tick(self):
        while self._pending_toggles > 0:
            self._pending_toggles -= 1
            self.set_enabled(not self.enabled)

    def set_enabled(self, enabled):
        enabled = bool(enabled)
        if enabled == self.enabled:
            return
        self.enabled = enabled
        logutil.log("OVERLAY", f"light levels {'on' if enabled else 'off'}")
        if enabled:
            # Show labels on the first frame instead of waiting a full interval.
            self.scheduler.expire()
        else:
            self.cache.clear()
            self.scheduler.reset()

    def apply_settings(self, settings):
        self.settings = settings.sanitized()
        self.scheduler.interval = self.settings.update_interval_frames
        self.scheduler.expire()

    def rebuild(self, context):
        scan = ScanState(
            reference=normalize(context.player_position),
            camera_position=context.camera.position,
            debug=context.debug,
            frustum=context.frustum,
            ignoring=context.player,
        )
        return self.cache.rebuild(context.world, scan, self.settings, context.text_renderer)

    def on_render_frame(self, context):
        """ Advance the scheduler, rebuild when due and draw the current
        snapshot. Returns the number of labels drawn.

        """
        if not self.enabled:
            return 0
        if not context.is_complete():
            logutil.log("OVERLAY", "frame context incomplete, skipping", level="DEBUG")
            return 0
        if context.debug != self.debug:
            # Labels and scales differ between display modes.
            self.debug = context.debug
            self.scheduler.expire()
        if self.scheduler.advance():
            self.rebuild(context)
        return draw_targets(self.cache.snapshot(), context.camera, context.text_renderer)
