from flask import current_app, request
from flask_socketio import join_room, leave_room
from typing import Any, Dict, Tuple

from typo_royale import socketio

# Positional argument order for clients that emit e.g. ('joinRoom', roomId, name)
_POSITIONAL_FIELDS: Dict[str, Tuple[str, ...]] = {
    'createRoom': ('roomId',),
    'joinRoom': ('roomId', 'name'),
    'leaveRoom': ('roomId',),
    'startGame': ('roomId', 'totalRounds'),
    'submitScore': ('roomId', 'score'),
    'readyForNextRound': ('roomId',),
    'endGame': ('roomId',),
}


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(action: str, args: tuple) -> Dict[str, Any]:
    if len(args) == 1 and isinstance(args[0], dict):
        return dict(args[0])
    return dict(zip(_POSITIONAL_FIELDS.get(action, ()), args))


def _dispatch(action: str, args: tuple) -> None:
    coordinator = current_app.extensions['typo_royale']
    coordinator.dispatch(action, _get_sid(), _payload(action, args))


def handle_connect(auth=None):
    current_app.logger.info(f"[connect] sid={_get_sid()}")


def handle_disconnect(reason=None):
    current_app.logger.info(f"[disconnect] sid={_get_sid()} reason={reason}")
    _dispatch('disconnect', ())


def handle_create_room(*args):
    _dispatch('createRoom', args)


def handle_join_room(*args):
    _dispatch('joinRoom', args)


def handle_leave_room(*args):
    _dispatch('leaveRoom', args)


def handle_start_game(*args):
    _dispatch('startGame', args)


def handle_submit_score(*args):
    _dispatch('submitScore', args)


def handle_ready_for_next_round(*args):
    _dispatch('readyForNextRound', args)


def handle_end_game(*args):
    _dispatch('endGame', args)


def make_publisher(namespace: str):
    """Broadcast an event to every connection subscribed to a room."""

    def publish(event: str, payload: Any, room_id: str) -> None:
        # socketio.emit rather than flask_socketio.emit: timers publish too
        socketio.emit(event, payload, to=room_id, namespace=namespace)

    return publish


def make_subscriber(namespace: str):
    def subscribe(room_id: str, sid: str, joined: bool) -> None:
        if joined:
            join_room(room_id, sid=sid, namespace=namespace)
        else:
            leave_room(room_id, sid=sid, namespace=namespace)

    return subscribe


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the given namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('createRoom', handle_create_room, namespace=namespace)
    socketio.on_event('joinRoom', handle_join_room, namespace=namespace)
    socketio.on_event('leaveRoom', handle_leave_room, namespace=namespace)
    socketio.on_event('startGame', handle_start_game, namespace=namespace)
    socketio.on_event('submitScore', handle_submit_score, namespace=namespace)
    socketio.on_event('readyForNextRound', handle_ready_for_next_round, namespace=namespace)
    socketio.on_event('endGame', handle_end_game, namespace=namespace)
