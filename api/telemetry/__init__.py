"""Telemetry: staged progress, performance log and derived insights."""

from .progress_tracker import ProgressTracker, StageStatus, FlowSequenceError, STAGE_IDS
from .performance_log import PerformanceLog
from .insights import PerformanceInsights, summarize

__all__ = [
    'ProgressTracker',
    'StageStatus',
    'FlowSequenceError',
    'STAGE_IDS',
    'PerformanceLog',
    'PerformanceInsights',
    'summarize',
]
