GRID_WIDTH = 6
GRID_HEIGHT = 10

# Rows filled at the start of every round (bottom-aligned).
INITIAL_ROWS = 4

BLOCK_MIN = 1
BLOCK_MAX = 9

# Oracle number range, inclusive on both ends.
TARGET_MIN = 10
TARGET_MAX = 25

POINTS_PER_BLOCK = 10

# Time mode: a row is forced in every TIME_MODE_LIMIT seconds without a match.
TIME_MODE_LIMIT = 10
COUNTDOWN_TICK_SECONDS = 1.0

HIGH_SCORE_KEY = "sumstack-highscore"

TUTORIAL_STEP_COUNT = 4

# Front-end window geometry
CELL_SIZE = 52
HUD_HEIGHT = 110
WINDOW_MARGIN = 20
