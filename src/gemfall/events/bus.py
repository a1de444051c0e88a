from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps lambdas and bound methods of unreferenced systems alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SESSION
# ============================================================================
EVENT_BOARD_INITIALIZED = "board_initialized"      # payload: board=BoardSnapshot
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: board=BoardSnapshot
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: col, row
EVENT_TILE_DESELECT = "tile_deselect"              # payload: None
EVENT_TILE_SELECTED = "tile_selected"              # payload: col, row
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev=(c,r)


# ============================================================================
# SWAP & MATCH MECHANICS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(c,r), dst=(c,r)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(c,r), dst=(c,r)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(c,r), dst=(c,r), reason=SwapRejection
EVENT_SWAP_RESOLVED = "swap_resolved"              # payload: outcome=SwapOutcome
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(c,r),...], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(c,r),...], types=[(c,r,str),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: falls=[FallEvent,...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[TileSpawn,...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, step=CascadeStep
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score_delta=int
