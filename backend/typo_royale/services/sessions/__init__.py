"""Room sessions: registry, round scoring, timers and the coordinator.

This package holds the transport-free game logic; Socket.IO handlers in
``typo_royale.socketio_events`` only translate events into ``dispatch`` calls.
"""

from .coordinator import SessionCoordinator, advance_round
from .prompts import SentenceProvider
from .registry import RoomRegistry
from .scheduler import RoundAdvanceScheduler

__all__ = [
    'SessionCoordinator',
    'advance_round',
    'SentenceProvider',
    'RoomRegistry',
    'RoundAdvanceScheduler',
]
