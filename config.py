# config.py
import os

# ======= Search policy =======
STOP_ON_FIRST_SOLUTION = int(os.getenv("PZ_STOP_ON_FIRST", "0")) != 0
USE_FLIPPED_TILES      = int(os.getenv("PZ_USE_FLIPPED", "0")) != 0

# "none" keeps every solution the search visits (board rotations/mirrors are
# reported separately); "board" keeps one representative per symmetry class.
SOLUTION_DEDUPE        = os.getenv("PZ_SOLUTION_DEDUPE", "none").strip().lower()

# ======= Reporting cadence =======
# Number of adjacency checks between progress callbacks.
PROGRESS_EVERY         = int(os.getenv("PZ_PROGRESS_EVERY", "250000"))

# ======= CP-SAT feasibility probe =======
CP_SAT_SECONDS         = float(os.getenv("PZ_CP_SAT_SECONDS", "30"))
WORKERS                = int(os.getenv("PZ_WORKERS", "1"))

# ======= Inputs / outputs =======
TILES_FILE             = os.getenv("PZ_TILES_FILE", "")
SOLUTIONS_OUT          = os.getenv("PZ_SOLUTIONS_OUT", "solutions.txt")


class CFG:
    STOP_ON_FIRST_SOLUTION = STOP_ON_FIRST_SOLUTION
    USE_FLIPPED_TILES      = USE_FLIPPED_TILES
    SOLUTION_DEDUPE        = SOLUTION_DEDUPE

    PROGRESS_EVERY = PROGRESS_EVERY

    CP_SAT_SECONDS = CP_SAT_SECONDS
    WORKERS        = WORKERS

    TILES_FILE    = TILES_FILE
    SOLUTIONS_OUT = SOLUTIONS_OUT


__all__ = ["CFG"]
