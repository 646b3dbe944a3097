"""Application-wide constants.

Positions are percentages of the product-view container, angles in degrees.
"""

APP_NAME = "Mockup Placement Editor"
APP_VERSION = "0.1.0"

# Placement bounds
POSITION_MIN = 0.0
POSITION_MAX = 100.0
MIN_SCALE = 0.1
FULL_TURN_DEG = 360.0

# Default placement for newly added designs
DEFAULT_POSITION_X = 50.0
DEFAULT_POSITION_Y = 50.0
DEFAULT_SCALE = 1.0
DEFAULT_ROTATION = 0.0
NUDGE_STEP_PCT = 2.0  # per already-present layer, both axes
DUPLICATE_OFFSET_PCT = 4.0

# Product variants
DEFAULT_COLORS = ["white", "black", "red", "blue"]

# Transform history
MAX_HISTORY_LEVELS = 50

# Persistence
PLACEMENT_SCHEMA_VERSION = "1.0"
DB_FILENAME = "mockup_editor.db"

# Language used when nothing is configured
DEFAULT_LANGUAGE = "en"
