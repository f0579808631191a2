from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class RoundPhase(str, Enum):
    LOBBY = 'lobby'
    IN_ROUND = 'in_round'
    ROUND_SETTLED = 'round_settled'  # everyone submitted, advance pending
    FINISHED = 'finished'


@dataclass
class Player:
    id: str
    name: str
    score: float = 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
        }


@dataclass
class Room:
    id: str
    players: List[Player] = field(default_factory=list)
    host_id: Optional[str] = None
    round: int = 0
    total_rounds: int = 1
    current_sentence: str = ''
    submitted_count: int = 0
    phase: RoundPhase = RoundPhase.LOBBY

    def find_player(self, player_id: str) -> Optional[Player]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    @property
    def is_settled(self) -> bool:
        return self.submitted_count >= len(self.players)

    def roster(self):
        return [p.to_dict() for p in self.players]

    def prompt_payload(self):
        return {
            'sentence': self.current_sentence,
            'round': self.round,
            'total': self.total_rounds,
        }
