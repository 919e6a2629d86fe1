"""
base.py — Resumable Stepper Contract
=====================================
Every algorithm in this package is a Stepper: an explicit state machine
that the driver advances one micro-step at a time.

    stepper = BubbleSortStepper([5, 3, 8])
    while not stepper.is_done():
        snap  = stepper.snapshot()      # optional, for undo
        event = stepper.step()          # exactly one StepEvent
        ...
    stepper.restore(snap)               # rewinds one step

Subclass contract:
  - `_reset()`   rebuild all mutable state from the construction parameters.
  - `_advance()` perform one transition; return a StepEvent built with
                 `self._emit(...)`, or None for a silent bookkeeping
                 transition (step() keeps advancing until an event appears).
  - `_STATE`     names of every mutable attribute a snapshot must capture.
  - `_signature()` hashable description of the configuration; snapshots
                 are tagged with it so a foreign snapshot is rejected.

Randomness lives in `self._rng`, a random.Random re-seeded on every reset
and captured by snapshots, so restore() replays the exact same future.
"""

import copy
import logging
import random
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from steppers.errors import SnapshotMismatchError
from steppers.event import StepEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Snapshot — opaque deep copy of a stepper's mutable state
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Snapshot:
    """
    Attributes:
        origin : (stepper key, configuration signature) of the stepper it
                 was taken from.  restore() refuses any other origin.
        state  : {attribute_name: deep-copied value}.  Never aliased with a
                 live stepper.
    """

    origin: Tuple[Any, ...]
    state:  Dict[str, Any]


# ---------------------------------------------------------------------------
# Stepper
# ---------------------------------------------------------------------------
class Stepper(ABC):
    """
    Attributes:
        seed        : Seed for the stepper-owned random generator.
        done        : True once the terminal event has been emitted.
        steps_taken : Number of events emitted since the last reset.
    """

    KEY:        str       = ""
    PSEUDOCODE: List[str] = []

    _STATE: Tuple[str, ...] = ()
    _BASE_STATE: Tuple[str, ...] = ("done", "steps_taken", "_rng")

    def __init__(self, seed: Optional[int] = None):
        # drawn once so reset() replays the same run
        self.seed: int = seed if seed is not None else secrets.randbits(32)
        self.done: bool = False
        self.steps_taken: int = 0
        self._rng = random.Random(self.seed)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Back to the initial configuration, re-seeding randomness."""
        self.done        = False
        self.steps_taken = 0
        self._rng        = random.Random(self.seed)
        self._reset()
        logger.debug("%s reset (seed=%s)", self.KEY, self.seed)

    def step(self) -> Optional[StepEvent]:
        """Advance exactly one micro-step.  Returns None if already done."""
        if self.done:
            return None
        event = None
        while event is None:
            event = self._advance()
        if event.is_final:
            logger.debug("%s finished with %s after %d steps",
                         self.KEY, event.kind.name, self.steps_taken)
        return event

    def is_done(self) -> bool:
        return self.done

    @property
    def succeeded(self) -> bool:
        """Whether the finished run reached its goal.  Families override."""
        return self.done

    # ------------------------------------------------------------------
    # Snapshot / restore
    # ------------------------------------------------------------------
    @property
    def origin(self) -> Tuple[Any, ...]:
        return (self.KEY, self._signature())

    def snapshot(self) -> Snapshot:
        names = self._BASE_STATE + self._STATE
        state = copy.deepcopy({name: getattr(self, name) for name in names})
        return Snapshot(origin=self.origin, state=state)

    def restore(self, snapshot: Snapshot) -> None:
        if snapshot.origin != self.origin:
            raise SnapshotMismatchError(self.origin, snapshot.origin)
        for name, value in copy.deepcopy(snapshot.state).items():
            setattr(self, name, value)

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------
    @abstractmethod
    def _reset(self) -> None:
        ...

    @abstractmethod
    def _advance(self) -> Optional[StepEvent]:
        ...

    def _signature(self) -> Tuple[Any, ...]:
        return ()

    def _emit(
        self,
        kind: Enum,
        *where: Any,
        value: Any = None,
        line: int = 0,
        explanation: str = "",
        final: bool = False,
    ) -> StepEvent:
        """Build the event for the transition just performed."""
        event = StepEvent(
            kind=kind,
            step_number=self.steps_taken,
            where=tuple(where),
            value=value,
            pseudocode_line=line,
            explanation=explanation,
            is_final=final,
        )
        self.steps_taken += 1
        if final:
            self.done = True
        return event

    def __repr__(self) -> str:
        return f"{type(self).__name__}(steps={self.steps_taken}, done={self.done})"
