"""
settings.py — Default Configuration
====================================
Loaded into `app.config` by main.py, then overridden from the environment:

    STEPWISE_HISTORY_LIMIT=1000 STEPWISE_MAX_GRID=60 python main.py

(`Flask.config.from_prefixed_env` parses values as JSON, so numbers stay
numbers.)
"""

DEFAULTS = {
    "HISTORY_LIMIT": 500,        # undo depth per player
    "MAX_STEPS":     200_000,    # cap for run-to-end / recorder runs
    "DEFAULT_SPEED": "medium",   # key into SPEED_PRESETS
    "SUDOKU_BLANKS": 45,
    "MAX_GRID":      40,         # rows / cols ceiling for mazes and path grids
    "MAX_QUEENS":    12,
    "MAX_ARRAY":     64,
    "MAX_SESSIONS":  256,        # live players kept; least recently used evicted first
    "LOG_LEVEL":     "INFO",
}

ENV_PREFIX = "STEPWISE"
