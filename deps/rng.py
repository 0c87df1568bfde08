import os
import random

# Load once at module import
DRILL_RANDOM_SEED = os.getenv("DRILL_RANDOM_SEED", "")

_shared = random.Random()


def get_rng() -> random.Random:
    """
    Random source for question generation.

    With DRILL_RANDOM_SEED set every request starts from the same seed, so
    identical requests get identical questions. Tests override this dependency.
    """
    if DRILL_RANDOM_SEED:
        return random.Random(int(DRILL_RANDOM_SEED))
    return _shared
