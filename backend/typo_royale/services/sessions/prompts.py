import random
from typing import Optional, Sequence

DEFAULT_SENTENCES = (
    "The quick brown fox jumps over the lazy dog.",
    "Typing fast is a skill worth mastering.",
    "JavaScript powers interactive web experiences.",
    "Socket.IO enables real-time communication.",
    "Frontend and backend must work together.",
)


class SentenceProvider:
    """Hands out a random typing prompt for each round."""

    def __init__(self, sentences: Optional[Sequence[str]] = None, rng: Optional[random.Random] = None):
        corpus = tuple(sentences) if sentences is not None else DEFAULT_SENTENCES
        if not corpus:
            raise ValueError('sentence corpus must not be empty')
        self.sentences = corpus
        self._rng = rng or random.Random()

    def pick(self) -> str:
        return self._rng.choice(self.sentences)

    __call__ = pick
