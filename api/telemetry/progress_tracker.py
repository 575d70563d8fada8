"""
Five-stage progress model for one operation run.

    input -> prepare -> remote -> store -> decode

The tracker is an explicit state machine driven by lifecycle events of the
real request (begin, stage transitions, failure). It has no timers: visual
pacing belongs to whoever renders the snapshot. Latency figures come from
Metrics, never from here.

Rules enforced:
- at most one stage is active at a time
- a stage may only become active once every stage to its left completed
- a stage may only complete (or fail) while it is active
- after a failure nothing further activates for that run
"""
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional


class StageStatus(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"
    ERROR = "error"


STAGE_IDS = ("input", "prepare", "remote", "store", "decode")

STAGE_LABELS = {
    "input": "Input Validation",
    "prepare": "Request Preparation",
    "remote": "Remote Execution",
    "store": "Store Processing",
    "decode": "Result Decoding",
}


class FlowSequenceError(ValueError):
    """A transition would break the left-to-right stage order"""
    pass


@dataclass
class FlowStage:
    id: str
    status: StageStatus = StageStatus.IDLE
    detail: Optional[str] = None

    @property
    def label(self) -> str:
        return STAGE_LABELS[self.id]

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            'id': self.id,
            'label': self.label,
            'status': self.status.value,
            'detail': self.detail,
        }


Listener = Callable[[List[Dict[str, Optional[str]]]], None]


class ProgressTracker:
    """State machine over the five fixed stages"""

    def __init__(self):
        self._stages = [FlowStage(stage_id) for stage_id in STAGE_IDS]
        self._listeners: List[Listener] = []
        self._failed = False
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> None:
        """Register a callback receiving a snapshot after every transition"""
        self._listeners.append(listener)

    def reset(self) -> None:
        """Set every stage idle and clear details"""
        with self._lock:
            for stage in self._stages:
                stage.status = StageStatus.IDLE
                stage.detail = None
            self._failed = False
        self._notify()

    def begin(self, detail: Optional[str] = None) -> None:
        """Start a run: implicit reset, then activate the input stage"""
        self.reset()
        self.advance("input", StageStatus.ACTIVE, detail)

    def advance(self, stage_id: str, status: StageStatus, detail: Optional[str] = None) -> None:
        """Transition exactly the named stage"""
        with self._lock:
            index = self._index_of(stage_id)
            stage = self._stages[index]
            self._check_transition(index, stage, status)
            stage.status = status
            stage.detail = detail
            if status is StageStatus.ERROR:
                self._failed = True
        self._notify()

    def fail(self, detail: str) -> Optional[str]:
        """Mark the active stage as errored; returns its id, or None if idle"""
        active = self.active_stage
        if active is None:
            return None
        self.advance(active, StageStatus.ERROR, detail)
        return active

    @property
    def active_stage(self) -> Optional[str]:
        with self._lock:
            for stage in self._stages:
                if stage.status is StageStatus.ACTIVE:
                    return stage.id
        return None

    @property
    def failed(self) -> bool:
        return self._failed

    @property
    def finished(self) -> bool:
        """True once the run failed or every stage completed"""
        with self._lock:
            return self._failed or all(
                s.status is StageStatus.COMPLETED for s in self._stages
            )

    def status_of(self, stage_id: str) -> StageStatus:
        return self._stages[self._index_of(stage_id)].status

    def snapshot(self) -> List[Dict[str, Optional[str]]]:
        """Ordered, serializable view of every stage"""
        with self._lock:
            return [stage.to_dict() for stage in self._stages]

    def _check_transition(self, index: int, stage: FlowStage, status: StageStatus) -> None:
        if self._failed:
            raise FlowSequenceError("Run already failed; reset before advancing")
        if status is StageStatus.ACTIVE:
            self._check_activation(index, stage)
        elif status in (StageStatus.COMPLETED, StageStatus.ERROR):
            if stage.status is not StageStatus.ACTIVE:
                raise FlowSequenceError(
                    f"Stage '{stage.id}' must be active before it can be {status.value}"
                )
        else:
            raise FlowSequenceError("Use reset() to return stages to idle")

    def _check_activation(self, index: int, stage: FlowStage) -> None:
        if stage.status is not StageStatus.IDLE:
            raise FlowSequenceError(f"Stage '{stage.id}' is already {stage.status.value}")
        for earlier in self._stages[:index]:
            if earlier.status is not StageStatus.COMPLETED:
                raise FlowSequenceError(
                    f"Stage '{stage.id}' cannot start before '{earlier.id}' completes"
                )

    def _index_of(self, stage_id: str) -> int:
        try:
            return STAGE_IDS.index(stage_id)
        except ValueError:
            raise FlowSequenceError(f"Unknown stage: {stage_id}") from None

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in self._listeners:
            listener(snapshot)
