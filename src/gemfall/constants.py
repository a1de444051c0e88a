GRID_SIZE = 8
TOKEN_KIND_COUNT = 5

# A run must be at least this long to be removed.
MIN_RUN_LENGTH = 3

# Flat score per matched cell per cascade step (no combo multiplier).
POINTS_PER_TILE = 100

# Layout attempts made by respawn_board before giving up.
RESHUFFLE_MAX_ATTEMPTS = 200

# Default gem kinds, in the order they are handed out by default_token_kinds().
TOKEN_PALETTE = ('blue', 'green', 'purple', 'red', 'yellow')
