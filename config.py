import math

CONFIG_VERSION = 1

# Scan volume around the player (blocks).
RENDER_DISTANCE_HORIZONTAL = 16
RENDER_DISTANCE_VERTICAL = 4

# Blocks that never get a label above them.
BLOCK_BLACKLIST = (
    'air',
    'barrier',
    'bedrock',
    'chain_command_block',
    'command_block',
    'repeating_command_block',
)

# Non-full blocks below that still allow hostile spawns.
BLOCK_WHITELIST = (
    'mud',
    'slime_block',
    'soul_sand',
)

# Label colors (RRGGBB, alpha is forced opaque).
TEXT_COLOR_SAFE = 0x40FF40     # mobs can't spawn
TEXT_COLOR_WARNING = 0xFFFF40  # mobs can spawn at night
TEXT_COLOR_DANGER = 0xFF4040   # mobs can always spawn
TEXT_COLOR_NEUTRAL = 0xFFFFFF  # dimension not supported

TEXT_SCALE_NORMAL = 1.0 / 32.0
TEXT_SCALE_DEBUG = 1.0 / 48.0
TEXT_OFFSET_Y_BASE = 0.1

# Rebuild the label cache every N rendered frames.
CACHE_UPDATE_INTERVAL_FRAMES = 20

OVERLAY_ENABLED_AT_START = False

# Enable ANSI colors in logs.
LOG_COLOR = True

# Emit DEBUG level lines.
LOG_DEBUG = False

# Log main-loop timings and frame boundaries.
LOG_MAIN_LOOP = False

# Log overlay rebuild stats.
LOG_OVERLAY = True
LOG_OVERLAY_EVERY_N_REBUILDS = 30

# Demo host
TICKS_PER_SEC = 60
WALKING_SPEED = 5
FLYING_SPEED = 15

WORLD_SIZE = 64    # width and depth (x and z)
WORLD_HEIGHT = 96  # height of world (y)
WORLD_SEED = 1234

FOV = 65.0
NEAR_PLANE = 0.1
FAR_PLANE = 256.0

# Eye height above the feet, in blocks.
PLAYER_EYE_HEIGHT = 1.62

MOUSE_SENSITIVITY = 0.15
MAX_PITCH = math.degrees(math.pi / 2)
