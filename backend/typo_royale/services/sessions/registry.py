from typing import Dict, Iterator, List, Optional

from typo_royale.models import Player, Room


class RoomRegistry:
    """In-memory table of live rooms, keyed by room id.

    Created by the application factory and handed to the coordinator; it is
    never persisted. Room counts are small, so players are found by a linear
    scan rather than a secondary index.
    """

    def __init__(self):
        self._rooms: Dict[str, Room] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id) -> bool:
        return room_id in self._rooms

    def __iter__(self) -> Iterator[Room]:
        return iter(list(self._rooms.values()))

    def ensure_room(self, room_id: str) -> Room:
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(id=room_id)
            self._rooms[room_id] = room
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def delete(self, room_id: str) -> None:
        self._rooms.pop(room_id, None)

    def clear(self) -> None:
        self._rooms.clear()

    def add_player(self, room: Room, player_id: str, name: str) -> Player:
        # Duplicate join from the same connection is a no-op
        existing = room.find_player(player_id)
        if existing is not None:
            return existing
        player = Player(id=player_id, name=name or player_id)
        room.players.append(player)
        return player

    def remove_player(self, room: Room, player_id: str) -> Optional[Player]:
        for idx, p in enumerate(room.players):
            if p.id == player_id:
                removed = room.players.pop(idx)
                room.submitted_count = min(room.submitted_count, len(room.players))
                return removed
        return None

    def rooms_with_player(self, player_id: str) -> List[Room]:
        return [room for room in self if room.find_player(player_id) is not None]
