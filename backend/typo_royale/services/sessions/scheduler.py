import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional, Tuple

Key = Tuple[str, int]


class RoundAdvanceScheduler:
    """Delayed round-advance tasks, at most one per (room_id, round).

    - Runs workers through ``socketio.start_background_task`` so it works
      under any Flask-SocketIO async mode
    - A cancelled or superseded task still wakes up, sees its token is no
      longer current and exits without touching the room
    - ``inline=True`` fires callbacks immediately (used under TESTING)
    """

    def __init__(self, socketio, delay: float, inline: bool = False, logger: Optional[logging.Logger] = None):
        self.socketio = socketio
        self.delay = max(0.0, float(delay))
        self.inline = inline
        self.logger = logger or logging.getLogger(__name__)
        self._tasks: Dict[Key, int] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def schedule(self, room_id: str, round_idx: int, callback: Callable[[], None]) -> bool:
        key = (room_id, round_idx)
        with self._lock:
            if key in self._tasks:
                self.logger.info(f"[timer-skip] room={room_id} round={round_idx} already scheduled")
                return False
            if not self.inline:
                token = next(self._tokens)
                self._tasks[key] = token

        if self.inline:
            self.logger.info(f"[timer-inline] room={room_id} round={round_idx}")
            callback()
            return True

        self.logger.info(f"[timer-set] room={room_id} round={round_idx} delay={self.delay}s")
        self.socketio.start_background_task(self._worker, key, token, callback)
        return True

    def cancel(self, room_id: str, round_idx: Optional[int] = None) -> int:
        with self._lock:
            keys = [k for k in self._tasks if k[0] == room_id and (round_idx is None or k[1] == round_idx)]
            for k in keys:
                del self._tasks[k]
        for k in keys:
            self.logger.info(f"[timer-cancel] room={k[0]} round={k[1]}")
        return len(keys)

    def pending(self, room_id: Optional[str] = None) -> List[Key]:
        with self._lock:
            return [k for k in self._tasks if room_id is None or k[0] == room_id]

    def _worker(self, key: Key, token: int, callback: Callable[[], None]) -> None:
        self.socketio.sleep(self.delay)
        with self._lock:
            if self._tasks.get(key) != token:
                self.logger.info(f"[timer-abort] room={key[0]} round={key[1]} cancelled or superseded")
                return
            del self._tasks[key]
        self.logger.info(f"[timer-fire] room={key[0]} round={key[1]}")
        callback()
