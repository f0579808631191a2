import math
import re
from typing import Any

from typo_royale.models import Room, RoundPhase

# Phases in which the submitted count can still settle a round
_OPEN_PHASES = (RoundPhase.LOBBY, RoundPhase.IN_ROUND)

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def normalize_score(value: Any) -> float:
    """Return a submitted score delta that is safe to add to an accumulator.

    Anything that is not a finite real number (None, strings, NaN, +/-inf,
    booleans) counts as 0.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return value


def coerce_total_rounds(value: Any) -> int:
    """Parse a requested round count the lenient way clients send it.

    Integers pass through, floats are truncated and strings contribute their
    leading integer ("3 rounds" -> 3). Unparseable, zero or negative input
    yields 1.
    """
    parsed = 0
    if isinstance(value, bool):
        parsed = 0
    elif isinstance(value, int):
        parsed = value
    elif isinstance(value, float):
        parsed = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        parsed = int(match.group(1)) if match else 0
    return max(1, parsed or 1)


def apply_submission(room: Room, player_id: str, score: Any) -> bool:
    """Credit a player's score for the current round.

    Returns True when this submission settled the round, i.e. the submitted
    count just reached the number of players.
    """
    player = room.find_player(player_id)
    if player is None:
        return False
    player.score = (player.score or 0) + normalize_score(score)
    return mark_submitted(room)


def mark_submitted(room: Room) -> bool:
    """Count one submission; True when a lobby or in-round room is now settled."""
    room.submitted_count = min(room.submitted_count + 1, len(room.players))
    return room.phase in _OPEN_PHASES and room.is_settled


def reset_scores(room: Room) -> None:
    for p in room.players:
        p.score = 0
    room.submitted_count = 0


def scoreboard(room: Room):
    return room.roster()
