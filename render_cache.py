"""Label positions around the player, rebuilt every few frames.

Scanning the volume around the player and classifying every cell is far too
slow to do each frame, so `RenderTargetCache` keeps the resolved labels and
`UpdateScheduler` decides on which frames to redo the scan. Draw code only
ever sees a finished snapshot: a rebuild collects into a fresh list and
swaps the tuple in at the end.
"""
import math
import time
from functools import lru_cache
from typing import NamedTuple, Optional, Tuple

import numpy as np

import config
import logutil
from eligibility import is_eligible
from oracle import LIGHT_BLOCK, LIGHT_SKY
from palette import color_for, format_label

# Squared-distance cutoff as a multiple of horizontal_distance**2.
DISTANCE_CUTOFF_FACTOR = 1.5


class CachedTarget(NamedTuple):
    position: Tuple[int, int, int]
    label: str
    scale: float
    color: int
    # Added to position.y when placing the label.
    offset_y: float


class ScanState(NamedTuple):
    reference: Tuple[int, int, int]
    camera_position: Optional[Tuple[float, float, float]] = None
    debug: bool = False
    frustum: Optional[object] = None
    ignoring: Optional[object] = None


@lru_cache(maxsize=8)
def scan_offsets(horizontal, vertical):
    """ Offsets to visit around the reference position.

    Covers the box |dx|,|dz| <= horizontal, |dy| <= vertical, minus the
    cells whose squared distance exceeds horizontal**2 * 1.5. Order is dx
    outer, dz middle, dy inner.

    """
    h = max(int(horizontal), 0)
    v = max(int(vertical), 0)
    dx, dz, dy = np.meshgrid(
        np.arange(-h, h + 1),
        np.arange(-h, h + 1),
        np.arange(-v, v + 1),
        indexing='ij',
    )
    offsets = np.stack([dx.ravel(), dy.ravel(), dz.ravel()], axis=1)
    dist2 = (offsets * offsets).sum(axis=1)
    offsets = offsets[dist2 <= h * h * DISTANCE_CUTOFF_FACTOR]
    return tuple(tuple(o) for o in offsets.tolist())


def label_offset_y(visual_box, text_width, text_height, base):
    """ Vertical label offset above the cell floor.

    The label can turn to face any direction, so its footprint is taken as
    a square of half-size equal to its diagonal around the cell center.
    When the block in the cell pokes into that footprint the label is
    lifted by the block's height.

    """
    offset = base
    if visual_box is None:
        return offset
    reach = math.sqrt(text_width * text_width + text_height * text_height)
    overlapped = visual_box.intersects(
        0.5 - reach,
        0.0,
        0.5 - reach,
        0.5 + reach,
        text_height,
        0.5 + reach,
    )
    if overlapped:
        offset += visual_box.length_y
    return offset


def build_target(oracle, position, scan, settings, metrics):
    block_light = oracle.light_level(position, LIGHT_BLOCK)
    sky_light = oracle.light_level(position, LIGHT_SKY)
    color = color_for(oracle.dimension, block_light, sky_light, settings)
    label = format_label(block_light, sky_light, scan.debug)
    scale = settings.text_scale(scan.debug)
    text_width = metrics.width(label) * scale
    text_height = metrics.font_height * scale
    offset_y = label_offset_y(
        oracle.visual_bounding_box(position),
        text_width,
        text_height,
        settings.offset_y_base,
    )
    return CachedTarget(position, label, scale, color, offset_y)


def iter_targets(oracle, scan, settings, metrics):
    rx, ry, rz = scan.reference
    for dx, dy, dz in scan_offsets(settings.horizontal_distance, settings.vertical_distance):
        position = (rx + dx, ry + dy, rz + dz)
        if not is_eligible(
            oracle,
            position,
            settings,
            frustum=scan.frustum,
            camera_position=scan.camera_position,
            ignoring=scan.ignoring,
        ):
            continue
        yield build_target(oracle, position, scan, settings, metrics)


class RenderTargetCache(object):

    def __init__(self):
        self._targets = ()
        self.rebuild_count = 0
        self.last_rebuild_ms = 0.0

    def snapshot(self):
        """ The current targets; never a half-built set. """
        return self._targets

    def __len__(self):
        return len(self._targets)

    def __iter__(self):
        return iter(self._targets)

    def clear(self):
        self._targets = ()

    def rebuild(self, oracle, scan, settings, metrics):
        t0 = time.perf_counter()
        fresh = list(iter_targets(oracle, scan, settings, metrics))
        self._targets = tuple(fresh)
        self.last_rebuild_ms = (time.perf_counter() - t0) * 1000.0
        self.rebuild_count += 1
        every = max(1, getattr(config, 'LOG_OVERLAY_EVERY_N_REBUILDS', 30))
        if self.rebuild_count % every == 1 or every == 1:
            logutil.log(
                "OVERLAY",
                f"rebuild #{self.rebuild_count} ref={scan.reference} targets={len(fresh)} "
                f"ms={self.last_rebuild_ms:.2f}",
            )
        return self._targets


class UpdateScheduler(object):
    """ Fires once every `interval` calls to `advance()`. """

    def __init__(self, interval):
        self.interval = interval
        self.counter = 0

    @property
    def interval(self):
        return self._interval

    @interval.setter
    def interval(self, value):
        # A non-positive interval would never fire; treat it as every frame.
        self._interval = max(1, int(value))

    def advance(self):
        self.counter += 1
        if self.counter >= self._interval:
            self.counter = 0
            return True
        return False

    def reset(self):
        self.counter = 0

    def expire(self):
        """ Make the next `advance()` fire. """
        self.counter = self._interval - 1
