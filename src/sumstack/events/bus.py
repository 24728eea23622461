from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems nobody else references alive.
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
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float (seconds)
EVENT_COUNTDOWN_CHANGED = "countdown_changed"      # payload: time_left=int|None, limit=int, reason=str


# ============================================================================
# INPUT
# ============================================================================
EVENT_BLOCK_CLICK = "block_click"                  # payload: block_id=int


# ============================================================================
# GRID & SELECTION
# ============================================================================
EVENT_GRID_CHANGED = "grid_changed"                # payload: reason=str, block_ids=list[int]
EVENT_SELECTION_CHANGED = "selection_changed"      # payload: selected=list[int], reason=str
EVENT_TARGET_CHANGED = "target_changed"            # payload: target=int, previous=int|None


# ============================================================================
# ROUND RESOLUTION
# ============================================================================
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], block_ids=list[int], values=list[int], points=int, target=int
EVENT_OVERSHOOT = "overshoot"                      # payload: total=int, target=int, block_ids=list[int]
EVENT_SHAKE = "shake"                              # payload: reason=str


# ============================================================================
# ROW SPAWNING
# ============================================================================
EVENT_ROW_ADD_REQUEST = "row_add_request"          # payload: reason=str
EVENT_ROW_ADDED = "row_added"                      # payload: new_blocks=list[int], reason=str
EVENT_GRID_OVERFLOW = "grid_overflow"              # payload: positions=[(r,c),...], reason=str


# ============================================================================
# SCORE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_HIGH_SCORE_CHANGED = "high_score_changed"    # payload: high_score=int, previous=int


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_START_GAME_REQUEST = "start_game_request"        # payload: mode=GameMode|str
EVENT_RESTART_REQUEST = "restart_request"              # payload: None
EVENT_HOME_REQUEST = "home_request"                    # payload: None
EVENT_TUTORIAL_OPEN_REQUEST = "tutorial_open_request"  # payload: None
EVENT_TUTORIAL_CLOSE_REQUEST = "tutorial_close_request"  # payload: None
EVENT_TUTORIAL_STEP_REQUEST = "tutorial_step_request"  # payload: delta=int
EVENT_TUTORIAL_STEP_CHANGED = "tutorial_step_changed"  # payload: step=int, total=int
EVENT_ROUND_RESET = "round_reset"                      # payload: mode=GameMode
EVENT_SESSION_CLEARED = "session_cleared"              # payload: reason=str
EVENT_GAME_STATUS_CHANGED = "game_status_changed"      # payload: previous_status=GameStatus|None, new_status=GameStatus, mode=GameMode
EVENT_STATE_CHANGED = "state_changed"                  # payload: snapshot=GameSnapshot, cause=str
