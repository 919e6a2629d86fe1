"""
recorder.py — Run Recorder & Analytics
========================================
Runs one stepper to completion, keeps every StepEvent, and computes the
metrics used by the analytics panel and comparison mode.

Usage:
    rec = Recorder()
    rec.start("path_astar", grid=g, heuristic="octile")
    rec.run_to_completion()          # drives the stepper to DONE
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # JSON-safe dump for save / replay

Comparison mode:
    Two Recorders run on the SAME problem instance, then
    compare(rec1, rec2) → ComparisonResult.
"""

import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from engine.boundary import event_to_dict, to_jsonable
from engine.player import Player
from engine.settings import DEFAULTS
from steppers import StepEvent, StepperInfo, create, get_stepper


# ---------------------------------------------------------------------------
# Metrics dataclass — what the analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    key:           str            = ""
    label:         str            = ""
    total_steps:   int            = 0      # events emitted
    event_counts:  Dict[str, int] = field(default_factory=dict)
    final_event:   str            = ""     # kind name of the last event
    success:       bool           = False  # found / sorted / solved / path exists
    finished:      bool           = False  # False when the step cap cut the run short
    wall_time_ms:  float          = 0.0


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:          RunMetrics = field(default_factory=RunMetrics)
    right:         RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_steps:  str  = ""     # label with fewer steps, or "tie"
    same_outcome:  bool = True   # both succeeded or both failed


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        events  : Every StepEvent of the run, in order.
        metrics : RunMetrics (available after run_to_completion).
        player  : The underlying Player (history disabled).
    """

    def __init__(self):
        self.events:  List[StepEvent]      = []
        self.metrics: Optional[RunMetrics] = None
        self.player:  Optional[Player]     = None

        self._info:   Optional[StepperInfo] = None
        self._params: Dict[str, Any]        = {}

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, key: str, **params) -> None:
        """Build the stepper for this run."""
        info = get_stepper(key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {key}")

        self._info   = info
        self._params = params
        self.events  = []
        self.metrics = None

        self.player = Player(history_limit=0)
        self.player.start(create(key, **params))

    def run_to_completion(self, max_steps: int = DEFAULTS["MAX_STEPS"]) -> RunMetrics:
        """Step until DONE (or `max_steps`), record events, compute metrics."""
        if self.player is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.player.jump_to_end(max_steps)
        wall_ms = (time.monotonic() - started) * 1000

        self.events  = list(self.player.events)
        self.metrics = self._compute_metrics(wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "key":     self._info.key if self._info else "",
            "params":  to_jsonable(self._params),
            "metrics": asdict(self.metrics) if self.metrics else {},
            "events":  [event_to_dict(e) for e in self.events],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info    = self._info
        stepper = self.player.stepper
        last    = self.events[-1] if self.events else None
        counts  = Counter(e.kind.name for e in self.events)

        return RunMetrics(
            key=info.key if info else "",
            label=info.label if info else "",
            total_steps=len(self.events),
            event_counts=dict(counts),
            final_event=last.kind.name if last else "",
            success=bool(stepper.succeeded) if stepper.is_done() else False,
            finished=stepper.is_done(),
            wall_time_ms=round(wall_ms, 2),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def fewer(l_val, r_val, l_key, r_key):
        if l_val == r_val:
            return "tie"
        return l_key if l_val < r_val else r_key

    return ComparisonResult(
        left=l,
        right=r,
        winner_steps=fewer(l.total_steps, r.total_steps, l.label, r.label),
        same_outcome=l.success == r.success,
    )
