# review_cards/core/uniqueness.py
from __future__ import annotations

import hashlib
import re
import threading
from typing import List, Set

_NON_WORD = re.compile(r"[^A-Za-z0-9_\s]")
_SPACES = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, drop punctuation (anything outside ascii word chars/whitespace), squeeze spaces."""
    t = _NON_WORD.sub("", (text or "").lower())
    return _SPACES.sub(" ", t).strip()


def content_hash(text: str) -> str:
    return hashlib.blake2b(normalize(text).encode("utf-8"), digest_size=8).hexdigest()


def key_phrases(text: str) -> List[str]:
    """All consecutive 2- and 3-word phrases of the normalized text."""
    words = normalize(text).split(" ")
    words = [w for w in words if w]
    phrases: List[str] = []
    for i in range(len(words) - 1):
        phrases.append(f"{words[i]} {words[i + 1]}")
        if i < len(words) - 2:
            phrases.append(f"{words[i]} {words[i + 1]} {words[i + 2]}")
    return phrases


class UniquenessTracker:
    """
    Remembers accepted reviews so the same (or nearly the same) text is not handed out twice.

    A text is rejected when its whole-string hash was seen before, or when the share of
    its 2/3-word phrases already used by earlier reviews reaches `phrase_threshold`.
    With a threshold of 0 a single reused phrase is enough to reject.
    """

    def __init__(self, phrase_threshold: float = 0.5) -> None:
        self.phrase_threshold = phrase_threshold
        self._texts: Set[str] = set()
        self._phrases: Set[str] = set()
        self._accepted = 0
        self._lock = threading.Lock()

    def _phrase_hashes(self, text: str) -> Set[str]:
        return {content_hash(p) for p in key_phrases(text)}

    def phrase_overlap(self, text: str) -> float:
        phrases = self._phrase_hashes(text)
        if not phrases:
            return 0.0
        with self._lock:
            used = sum(1 for h in phrases if h in self._phrases)
        return used / len(phrases)

    def is_unique(self, text: str) -> bool:
        h = content_hash(text)
        phrases = self._phrase_hashes(text)
        with self._lock:
            if h in self._texts:
                return False
            if not phrases:
                return True
            used = sum(1 for p in phrases if p in self._phrases)
        if self.phrase_threshold <= 0:
            return used == 0
        return (used / len(phrases)) < self.phrase_threshold

    def mark_used(self, text: str) -> None:
        h = content_hash(text)
        phrases = self._phrase_hashes(text)
        with self._lock:
            if h not in self._texts:
                self._accepted += 1
            self._texts.add(h)
            self._phrases.update(phrases)

    def clear(self) -> None:
        with self._lock:
            self._texts.clear()
            self._phrases.clear()
            self._accepted = 0

    def stats(self) -> dict:
        with self._lock:
            return {
                "total_generated": self._accepted,
                "tracked_hashes": len(self._texts) + len(self._phrases),
            }
