import logging
import threading
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Union

from typo_royale.models import RoundPhase, Room
from .registry import RoomRegistry
from .scoring import apply_submission, coerce_total_rounds, mark_submitted, reset_scores, scoreboard


@dataclass(frozen=True)
class Broadcast:
    event: str
    room_id: str
    payload: Any


@dataclass(frozen=True)
class Subscription:
    room_id: str
    player_id: str
    joined: bool = True


@dataclass(frozen=True)
class ScheduleAdvance:
    room_id: str
    round: int


@dataclass(frozen=True)
class CancelAdvance:
    room_id: str
    round: Optional[int] = None


Outbound = Union[Broadcast, Subscription, ScheduleAdvance, CancelAdvance]
Publisher = Callable[[str, Any, str], None]
Subscriber = Callable[[str, str, bool], None]


def advance_round(room: Room, pick_prompt: Callable[[], str]) -> List[Outbound]:
    """Start the next round, or finish the game when the last one is done."""
    if room.round < room.total_rounds:
        room.round += 1
        room.current_sentence = pick_prompt()
        room.submitted_count = 0
        room.phase = RoundPhase.IN_ROUND
        return [Broadcast('nextRound', room.id, room.prompt_payload())]
    room.phase = RoundPhase.FINISHED
    return [Broadcast('gameOver', room.id, scoreboard(room))]


def _room_id(payload: Dict[str, Any]) -> Optional[str]:
    value = payload.get('roomId')
    if value is None or value == '':
        return None
    return str(value)


class SessionCoordinator:
    """Protocol logic for rooms: one handler per inbound player action.

    Handlers take ``(player_id, payload)`` and return the outbound items to
    deliver, in order. They never raise on client input; a stale room id,
    a missing field or a non-host start is an expected race and yields no
    items. ``dispatch`` is the only entry point the transport uses.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        prompts: Callable[[], str],
        scheduler,
        publish: Publisher,
        subscribe: Optional[Subscriber] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry
        self.prompts = prompts
        self.scheduler = scheduler
        self.publish = publish
        self.subscribe = subscribe
        self.logger = logger or logging.getLogger(__name__)
        # Handlers run to completion; the lock keeps background timer
        # callbacks from interleaving with them under threaded async modes.
        self._lock = threading.RLock()
        self.handlers: Dict[str, Callable[[str, Dict[str, Any]], List[Outbound]]] = {
            'createRoom': self.create_room,
            'joinRoom': self.join_room,
            'leaveRoom': self.leave_room,
            'startGame': self.start_game,
            'submitScore': self.submit_score,
            'readyForNextRound': self.ready_for_next_round,
            'endGame': self.end_game,
            'disconnect': self.disconnect,
        }

    def dispatch(self, action: str, player_id: str, payload: Optional[Dict[str, Any]] = None) -> List[Outbound]:
        handler = self.handlers.get(action)
        if handler is None:
            self.logger.debug(f"[ignored] unknown action={action} sid={player_id}")
            return []
        with self._lock:
            items = handler(player_id, payload or {})
            self._deliver(items)
        return items

    # ---- delivery ----

    def _deliver(self, items: List[Outbound]) -> None:
        for item in items:
            if isinstance(item, Broadcast):
                self.publish(item.event, item.payload, item.room_id)
            elif isinstance(item, Subscription):
                if self.subscribe is not None:
                    self.subscribe(item.room_id, item.player_id, item.joined)
            elif isinstance(item, CancelAdvance):
                self.scheduler.cancel(item.room_id, item.round)
            elif isinstance(item, ScheduleAdvance):
                self.scheduler.schedule(
                    item.room_id, item.round, partial(self._fire_scheduled_advance, item.room_id, item.round)
                )

    def _fire_scheduled_advance(self, room_id: str, round_idx: int) -> None:
        with self._lock:
            room = self.registry.get(room_id)
            if room is None or room.round != round_idx or room.phase is not RoundPhase.ROUND_SETTLED:
                self.logger.info(f"[advance-abandoned] room={room_id} round={round_idx}")
                return
            self._deliver(self._advance(room))

    def _advance(self, room: Room) -> List[Outbound]:
        prev_round = room.round
        items = advance_round(room, self.prompts)
        if room.phase is RoundPhase.FINISHED:
            self.logger.info(f"[game-over] room={room.id} finished at round={prev_round}")
        else:
            self.logger.info(f"[next-round] room={room.id} advance round {prev_round} -> {room.round}")
        return items

    # ---- handlers ----

    def create_room(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        if not room_id:
            return []
        room = self.registry.get(room_id)
        if room is None:
            room = self.registry.ensure_room(room_id)
            self.logger.info(f"[room-created] room={room_id} host={player_id}")
        # Last creator wins
        room.host_id = player_id
        return []

    def join_room(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        name = payload.get('name')
        if not room_id or not name:
            return []
        room = self.registry.ensure_room(room_id)
        player = self.registry.add_player(room, player_id, str(name))
        self.logger.info(f"[join] room={room_id} player={player.name} sid={player_id}")
        return [
            Subscription(room_id, player_id),
            Broadcast('roomUpdate', room_id, room.roster()),
        ]

    def leave_room(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        room = self.registry.get(room_id) if room_id else None
        if room is None:
            return []
        removed = self.registry.remove_player(room, player_id)
        if removed is None:
            return []
        self.logger.info(f"[leave] room={room_id} player={removed.name}")
        return [Subscription(room_id, player_id, joined=False)] + self._after_departure(room, player_id)

    def start_game(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        room = self.registry.get(room_id) if room_id else None
        if room is None:
            return []
        if room.host_id and room.host_id != player_id:
            self.logger.info(f"[start-blocked] room={room_id} sid={player_id} is not host")
            return []
        room.total_rounds = coerce_total_rounds(payload.get('totalRounds'))
        room.round = 1
        reset_scores(room)
        room.current_sentence = self.prompts()
        room.phase = RoundPhase.IN_ROUND
        self.logger.info(f"[game-started] room={room_id} round={room.round} total={room.total_rounds}")
        return [
            CancelAdvance(room_id),
            Broadcast('gameStarted', room_id, room.prompt_payload()),
            Broadcast('scoreUpdate', room_id, scoreboard(room)),
        ]

    def submit_score(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        room = self.registry.get(room_id) if room_id else None
        if room is None or room.find_player(player_id) is None:
            return []
        score = payload.get('score')
        settled = apply_submission(room, player_id, score)
        self.logger.info(
            f"[score] room={room_id} sid={player_id} +{score} round={room.round} "
            f"submitted={room.submitted_count}/{len(room.players)}"
        )
        items: List[Outbound] = [Broadcast('scoreUpdate', room_id, scoreboard(room))]
        if settled:
            room.phase = RoundPhase.ROUND_SETTLED
            items.append(ScheduleAdvance(room_id, room.round))
        return items

    def ready_for_next_round(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        room = self.registry.get(room_id) if room_id else None
        if room is None:
            return []
        if room.phase is RoundPhase.ROUND_SETTLED:
            # Skip the scoreboard hold; the pending timer must not advance again
            return [CancelAdvance(room_id, room.round)] + self._advance(room)
        # Counts every call, including repeats from the same connection
        if mark_submitted(room):
            return self._advance(room)
        return [Broadcast('roomUpdate', room_id, room.roster())]

    def end_game(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        room_id = _room_id(payload)
        room = self.registry.get(room_id) if room_id else None
        if room is None:
            return []
        self.logger.info(f"[end-game] room={room_id} sid={player_id}")
        return [
            CancelAdvance(room_id),
            Broadcast('gameOver', room_id, scoreboard(room)),
        ]

    def disconnect(self, player_id: str, payload: Dict[str, Any]) -> List[Outbound]:
        items: List[Outbound] = []
        for room in self.registry.rooms_with_player(player_id):
            removed = self.registry.remove_player(room, player_id)
            if removed is None:
                continue
            self.logger.info(f"[player-left] room={room.id} player={removed.name}")
            items.extend(self._after_departure(room, player_id))
        return items

    def _after_departure(self, room: Room, player_id: str) -> List[Outbound]:
        if room.host_id == player_id:
            room.host_id = None
        if not room.players:
            self.registry.delete(room.id)
            self.logger.info(f"[room-deleted] room={room.id}")
            return [CancelAdvance(room.id)]
        return [Broadcast('roomUpdate', room.id, room.roster())]
