"""Overlay settings as an immutable value.

Loading and saving the settings document is the host's job; this module
only turns config constants or an already-parsed mapping into a `Settings`
and clamps values that would stall the overlay.
"""
from typing import NamedTuple, Tuple

import config
import logutil

OPAQUE = 0xFF000000


def parse_hex_color(value):
    """ Turn `RRGGBB` text (optionally prefixed with '#' or '0x') or an int
    into a fully opaque ARGB int.

    """
    if isinstance(value, bool):
        raise ValueError(f"invalid color {value!r}")
    if isinstance(value, int):
        rgb = value
    else:
        text = str(value).strip()
        if text.startswith('#'):
            text = text[1:]
        elif text[:2].lower() == '0x':
            text = text[2:]
        if not text or len(text) > 6:
            raise ValueError(f"invalid color {value!r}")
        try:
            rgb = int(text, 16)
        except ValueError:
            raise ValueError(f"invalid color {value!r}") from None
    if rgb < 0:
        raise ValueError(f"invalid color {value!r}")
    return OPAQUE | (rgb & 0xFFFFFF)


def format_hex_color(color):
    return '%06X' % (color & 0xFFFFFF)


class Settings(NamedTuple):
    horizontal_distance: int = config.RENDER_DISTANCE_HORIZONTAL
    vertical_distance: int = config.RENDER_DISTANCE_VERTICAL
    blacklist: Tuple[str, ...] = tuple(config.BLOCK_BLACKLIST)
    whitelist: Tuple[str, ...] = tuple(config.BLOCK_WHITELIST)
    color_safe: int = OPAQUE | config.TEXT_COLOR_SAFE
    color_warning: int = OPAQUE | config.TEXT_COLOR_WARNING
    color_danger: int = OPAQUE | config.TEXT_COLOR_DANGER
    color_neutral: int = OPAQUE | config.TEXT_COLOR_NEUTRAL
    scale_normal: float = config.TEXT_SCALE_NORMAL
    scale_debug: float = config.TEXT_SCALE_DEBUG
    offset_y_base: float = config.TEXT_OFFSET_Y_BASE
    update_interval_frames: int = config.CACHE_UPDATE_INTERVAL_FRAMES

    @classmethod
    def from_config(cls, module=config):
        defaults = cls()
        return cls(
            horizontal_distance=int(getattr(module, 'RENDER_DISTANCE_HORIZONTAL', defaults.horizontal_distance)),
            vertical_distance=int(getattr(module, 'RENDER_DISTANCE_VERTICAL', defaults.vertical_distance)),
            blacklist=tuple(getattr(module, 'BLOCK_BLACKLIST', defaults.blacklist)),
            whitelist=tuple(getattr(module, 'BLOCK_WHITELIST', defaults.whitelist)),
            color_safe=parse_hex_color(getattr(module, 'TEXT_COLOR_SAFE', defaults.color_safe)),
            color_warning=parse_hex_color(getattr(module, 'TEXT_COLOR_WARNING', defaults.color_warning)),
            color_danger=parse_hex_color(getattr(module, 'TEXT_COLOR_DANGER', defaults.color_danger)),
            color_neutral=parse_hex_color(getattr(module, 'TEXT_COLOR_NEUTRAL', defaults.color_neutral)),
            scale_normal=float(getattr(module, 'TEXT_SCALE_NORMAL', defaults.scale_normal)),
            scale_debug=float(getattr(module, 'TEXT_SCALE_DEBUG', defaults.scale_debug)),
            offset_y_base=float(getattr(module, 'TEXT_OFFSET_Y_BASE', defaults.offset_y_base)),
            update_interval_frames=int(getattr(module, 'CACHE_UPDATE_INTERVAL_FRAMES', defaults.update_interval_frames)),
        ).sanitized()

    @classmethod
    def from_dict(cls, data):
        """ Build settings from a mapping laid out like the settings document:

            render_distance: {horizontal, vertical}
            block: {blacklist, whitelist}
            text: {color: {safe, warning, danger, neutral},
                   scale: {normal, debug}, offset_y_base}
            cache: {update_interval_frames}

        Missing keys keep their defaults.

        """
        if not isinstance(data, dict):
            raise ValueError(f"settings must be a mapping, got {type(data).__name__}")
        defaults = cls()
        try:
            render_distance = data.get('render_distance') or {}
            block = data.get('block') or {}
            text = data.get('text') or {}
            color = text.get('color') or {}
            scale = text.get('scale') or {}
            cache = data.get('cache') or {}
            settings = cls(
                horizontal_distance=int(render_distance.get('horizontal', defaults.horizontal_distance)),
                vertical_distance=int(render_distance.get('vertical', defaults.vertical_distance)),
                blacklist=tuple(block.get('blacklist', defaults.blacklist)),
                whitelist=tuple(block.get('whitelist', defaults.whitelist)),
                color_safe=parse_hex_color(color.get('safe', defaults.color_safe)),
                color_warning=parse_hex_color(color.get('warning', defaults.color_warning)),
                color_danger=parse_hex_color(color.get('danger', defaults.color_danger)),
                color_neutral=parse_hex_color(color.get('neutral', defaults.color_neutral)),
                scale_normal=float(scale.get('normal', defaults.scale_normal)),
                scale_debug=float(scale.get('debug', defaults.scale_debug)),
                offset_y_base=float(text.get('offset_y_base', defaults.offset_y_base)),
                update_interval_frames=int(cache.get('update_interval_frames', defaults.update_interval_frames)),
            )
        except (TypeError, AttributeError) as e:
            raise ValueError(f"malformed settings: {e}") from e
        return settings.sanitized()

    def to_dict(self):
        return {
            'version': config.CONFIG_VERSION,
            'render_distance': {
                'horizontal': self.horizontal_distance,
                'vertical': self.vertical_distance,
            },
            'block': {
                'blacklist': list(self.blacklist),
                'whitelist': list(self.whitelist),
            },
            'text': {
                'color': {
                    'safe': format_hex_color(self.color_safe),
                    'warning': format_hex_color(self.color_warning),
                    'danger': format_hex_color(self.color_danger),
                    'neutral': format_hex_color(self.color_neutral),
                },
                'scale': {
                    'normal': self.scale_normal,
                    'debug': self.scale_debug,
                },
                'offset_y_base': self.offset_y_base,
            },
            'cache': {
                'update_interval_frames': self.update_interval_frames,
            },
        }

    def sanitized(self):
        """ Clamp degenerate values to the nearest usable ones. """
        defaults = Settings()
        changes = {}
        if self.horizontal_distance < 0:
            changes['horizontal_distance'] = 0
        if self.vertical_distance < 0:
            changes['vertical_distance'] = 0
        if self.update_interval_frames < 1:
            changes['update_interval_frames'] = 1
        if not self.scale_normal > 0:
            changes['scale_normal'] = defaults.scale_normal
        if not self.scale_debug > 0:
            changes['scale_debug'] = defaults.scale_debug
        if not changes:
            return self
        for name, value in changes.items():
            logutil.log("SETTINGS", f"{name}={getattr(self, name)!r} clamped to {value!r}", level="WARN")
        return self._replace(**changes)

    def text_scale(self, debug):
        return self.scale_debug if debug else self.scale_normal
