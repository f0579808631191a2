from typo_royale.models import RoundPhase
from typo_royale.services.sessions import RoomRegistry


def test_ensure_room_creates_defaults_and_is_idempotent():
    registry = RoomRegistry()
    room = registry.ensure_room('R1')
    assert room.id == 'R1'
    assert room.players == []
    assert room.host_id is None
    assert room.round == 0
    assert room.total_rounds == 1
    assert room.current_sentence == ''
    assert room.submitted_count == 0
    assert room.phase is RoundPhase.LOBBY
    assert registry.ensure_room('R1') is room
    assert len(registry) == 1


def test_get_has_no_side_effects():
    registry = RoomRegistry()
    assert registry.get('missing') is None
    assert 'missing' not in registry
    assert len(registry) == 0


def test_delete_is_safe_on_absent_room():
    registry = RoomRegistry()
    registry.ensure_room('R1')
    registry.delete('R1')
    registry.delete('R1')
    assert registry.get('R1') is None


def test_add_player_skips_duplicate_identity():
    registry = RoomRegistry()
    room = registry.ensure_room('R1')
    first = registry.add_player(room, 'sid-1', 'Alice')
    again = registry.add_player(room, 'sid-1', 'Mallory')
    assert again is first
    assert [(p.id, p.name, p.score) for p in room.players] == [('sid-1', 'Alice', 0)]


def test_add_player_defaults_name_to_identity():
    registry = RoomRegistry()
    room = registry.ensure_room('R1')
    player = registry.add_player(room, 'sid-9', '')
    assert player.name == 'sid-9'


def test_remove_player_preserves_order_and_clamps_submissions():
    registry = RoomRegistry()
    room = registry.ensure_room('R1')
    for sid, name in (('a', 'Alice'), ('b', 'Bob'), ('c', 'Cara')):
        registry.add_player(room, sid, name)
    room.submitted_count = 3

    removed = registry.remove_player(room, 'b')
    assert removed.name == 'Bob'
    assert [p.id for p in room.players] == ['a', 'c']
    assert room.submitted_count == 2
    assert registry.remove_player(room, 'b') is None


def test_rooms_with_player_scans_all_rooms():
    registry = RoomRegistry()
    r1 = registry.ensure_room('R1')
    r2 = registry.ensure_room('R2')
    registry.ensure_room('R3')
    registry.add_player(r1, 'x', 'X')
    registry.add_player(r2, 'x', 'X')
    assert {r.id for r in registry.rooms_with_player('x')} == {'R1', 'R2'}
    assert registry.rooms_with_player('nobody') == []


def test_clear_drops_everything():
    registry = RoomRegistry()
    registry.ensure_room('R1')
    registry.ensure_room('R2')
    registry.clear()
    assert len(registry) == 0
    assert list(registry) == []
