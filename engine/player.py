"""
player.py — Step-by-Step Playback Driver
=========================================
The Player is the ONLY object the app talks to during a run.  It owns one
live Stepper, snapshots it before every forward step (enabling undo), and
exposes a play/pause/next/prev/speed API.

State machine:
    IDLE     →  start()            →  PAUSED
    PAUSED   →  play()             →  PLAYING
    PLAYING  →  pause()            →  PAUSED
    PLAYING  →  (stepper done)     →  FINISHED
    FINISHED →  prev_step()        →  PAUSED
    any      →  reset()            →  PAUSED   (same stepper, from the top)
    any      →  unload()           →  IDLE

Undo history is bounded: only the last `history_limit` steps can be
rewound.  `history_limit=0` disables snapshots entirely (used by Recorder).

Thread safety:
  Not thread-safe.  Each Player is driven from one request / event loop
  at a time.
"""

import logging
import time
from collections import deque
from enum import Enum
from typing import Callable, Deque, List, Optional

from steppers import Snapshot, StepEvent, Stepper

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------
class PlayerState(Enum):
    IDLE     = "idle"
    PAUSED   = "paused"
    PLAYING  = "playing"
    FINISHED = "finished"


# ---------------------------------------------------------------------------
# Speed presets (seconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS = {
    "slow":   1.0,    # teaching mode
    "medium": 0.4,
    "fast":   0.15,
    "turbo":  0.05,
}

MIN_SPEED = 0.02


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------
class Player:
    """
    Attributes:
        stepper : The live Stepper (None while IDLE).
        state   : Current PlayerState.
        events  : Events emitted so far, oldest first (undone ones removed).
        history : Snapshots taken before each undoable step.
        speed   : Seconds between auto-advance ticks.
        on_step : Optional callback(StepEvent) fired after every forward step.
    """

    def __init__(
        self,
        history_limit: int = 500,
        speed: float = SPEED_PRESETS["medium"],
        on_step: Optional[Callable[[StepEvent], None]] = None,
    ):
        self.stepper:  Optional[Stepper]   = None
        self.state:    PlayerState         = PlayerState.IDLE
        self.events:   List[StepEvent]     = []
        self.history:  Deque[Snapshot]     = deque(maxlen=max(0, history_limit))
        self.speed:    float               = max(MIN_SPEED, speed)
        self.on_step:  Optional[Callable[[StepEvent], None]] = on_step

        # for auto-play timing
        self._last_tick: float = 0.0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, stepper: Stepper) -> None:
        """Attach a freshly built stepper."""
        self.stepper = stepper
        self.events  = []
        self.history.clear()
        self.state   = PlayerState.FINISHED if stepper.is_done() else PlayerState.PAUSED
        logger.debug("player loaded %s", stepper.KEY)

    def reset(self) -> None:
        """Rewind the current stepper to its initial configuration."""
        if self.stepper is None:
            return
        self.stepper.reset()
        self.events = []
        self.history.clear()
        self.state  = PlayerState.PAUSED

    def unload(self) -> None:
        """Back to IDLE; start() must be called again."""
        self.stepper = None
        self.events  = []
        self.history.clear()
        self.state   = PlayerState.IDLE

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------
    def next_step(self) -> Optional[StepEvent]:
        """Advance one step.  Returns None when there is nothing left to do."""
        if self.stepper is None:
            return None
        if self.stepper.is_done():
            self.state = PlayerState.FINISHED
            return None

        if self.history.maxlen:
            self.history.append(self.stepper.snapshot())
        event = self.stepper.step()
        self.events.append(event)

        if self.stepper.is_done():
            self.state = PlayerState.FINISHED
        if self.on_step is not None:
            self.on_step(event)
        return event

    def prev_step(self) -> bool:
        """Undo one step.  Returns False when no snapshot is left."""
        if self.stepper is None or not self.history:
            return False
        self.stepper.restore(self.history.pop())
        if self.events:
            self.events.pop()
        if self.state in (PlayerState.FINISHED, PlayerState.PLAYING):
            self.state = PlayerState.PAUSED
        return True

    def jump_to_end(self, max_steps: Optional[int] = None) -> int:
        """Step until done (or `max_steps` steps).  Returns steps taken."""
        taken = 0
        while max_steps is None or taken < max_steps:
            if self.next_step() is None:
                break
            taken += 1
        if self.stepper is not None and not self.stepper.is_done():
            logger.warning("%s stopped after %d steps without finishing", self.stepper.KEY, taken)
            self.state = PlayerState.PAUSED
        return taken

    # ------------------------------------------------------------------
    # Play / Pause
    # ------------------------------------------------------------------
    def play(self) -> None:
        if self.state in (PlayerState.FINISHED, PlayerState.IDLE):
            return
        self.state      = PlayerState.PLAYING
        self._last_tick = time.monotonic()

    def pause(self) -> None:
        if self.state == PlayerState.PLAYING:
            self.state = PlayerState.PAUSED

    def toggle_play(self) -> None:
        if self.state == PlayerState.PLAYING:
            self.pause()
        else:
            self.play()

    # ------------------------------------------------------------------
    # Tick  (call this from your event loop / timer)
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> bool:
        """
        Call periodically.  If playing and enough time has elapsed,
        advances one step.  Returns True if a step was taken.
        """
        if self.state != PlayerState.PLAYING:
            return False
        now = time.monotonic() if now is None else now
        if now - self._last_tick < self.speed:
            return False
        self._last_tick = now
        return self.next_step() is not None

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------
    def set_speed(self, preset: str) -> None:
        self.speed = SPEED_PRESETS.get(preset, SPEED_PRESETS["medium"])

    def set_speed_value(self, seconds: float) -> None:
        self.speed = max(MIN_SPEED, seconds)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------
    @property
    def current_event(self) -> Optional[StepEvent]:
        return self.events[-1] if self.events else None

    @property
    def steps_taken(self) -> int:
        return self.stepper.steps_taken if self.stepper is not None else 0

    @property
    def can_undo(self) -> bool:
        return bool(self.history)

    @property
    def is_finished(self) -> bool:
        return self.state == PlayerState.FINISHED

    @property
    def is_playing(self) -> bool:
        return self.state == PlayerState.PLAYING
