"""Synchronization engine."""

from attendance_sync.core.engine.bootstrap import BootstrapSync
from attendance_sync.core.engine.consumer_loop import ConsumerLoop, LoopState
from attendance_sync.core.engine.decoder import decode_message
from attendance_sync.core.engine.dispatcher import ReconciliationDispatcher
from attendance_sync.core.engine.progress import BootstrapProgress, NullBootstrapProgress

__all__ = [
    "BootstrapProgress",
    "BootstrapSync",
    "ConsumerLoop",
    "LoopState",
    "NullBootstrapProgress",
    "ReconciliationDispatcher",
    "decode_message",
]
