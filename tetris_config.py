
CONFIG = {
    # Session
    "SEED": 0,
    "START_LEVEL": 1,

    # Engine timing (microseconds)
    "FRAME_PERIOD_US": 16_666,
    "LOCK_PERIOD_US": 500_000,
    "REPEAT_TRANSLATE_PERIOD_US": 30_000,
    "REPEAT_TRANSLATE_GRACE_US": 500_000,
    "MAX_LOCK_MOVES": 15,

    # Score message log
    "MAX_MESSAGES": 10,

    # Front-end
    "CELL_SIZE": 32,
    "TARGET_FPS": 60,
    "ELAPSED_CLAMP_US": 2 * 16_666,
}
