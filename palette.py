"""Safety category, color and label text for a light reading."""
from oracle import OVERWORLD, THE_NETHER, THE_END

SAFE = 'safe'        # mobs can't spawn
WARNING = 'warning'  # mobs can spawn at night
DANGER = 'danger'    # mobs can always spawn
NEUTRAL = 'neutral'  # dimension not supported

BLOCK_LIGHT_MARKER = '■'
SKY_LIGHT_MARKER = '☀'

# Block light above which nether mobs stop spawning.
NETHER_SAFE_BLOCK_LIGHT = 11
# Sky light above which overworld mobs only spawn at night.
OVERWORLD_DAYLIGHT_SKY_LIGHT = 7


def category_for(dimension, block_light, sky_light):
    if dimension == OVERWORLD:
        if block_light > 0:
            return SAFE
        if sky_light > OVERWORLD_DAYLIGHT_SKY_LIGHT:
            return WARNING
        return DANGER
    if dimension == THE_NETHER:
        if block_light > NETHER_SAFE_BLOCK_LIGHT:
            return SAFE
        return DANGER
    if dimension == THE_END:
        if block_light > 0:
            return SAFE
        return DANGER
    return NEUTRAL


def color_for_category(category, settings):
    return {
        SAFE: settings.color_safe,
        WARNING: settings.color_warning,
        DANGER: settings.color_danger,
        NEUTRAL: settings.color_neutral,
    }[category]


def color_for(dimension, block_light, sky_light, settings):
    return color_for_category(category_for(dimension, block_light, sky_light), settings)


def format_label(block_light, sky_light, debug=False):
    if debug:
        return f"{BLOCK_LIGHT_MARKER}{block_light} {SKY_LIGHT_MARKER}{sky_light}"
    return str(block_light)
