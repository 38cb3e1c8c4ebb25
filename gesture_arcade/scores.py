"""
High-score storage.
"""
import logging
from typing import Dict

logger = logging.getLogger(__name__)


class MemoryScoreStore:
    """In-process key-value score store implementing ScoreStoreProto."""

    def __init__(self):
        self._scores: Dict[str, int] = {}

    def get(self, key: str) -> int:
        return self._scores.get(key, 0)

    def set(self, key: str, value: int) -> None:
        self._scores[key] = value


def record_high_score(store, key: str, score: int) -> bool:
    """Store ``score`` if it beats the current high score. Returns True on a new record."""
    if score <= store.get(key):
        return False
    store.set(key, score)
    logger.info("New high score for %s: %d", key, score)
    return True
