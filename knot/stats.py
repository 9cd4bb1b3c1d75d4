"""Word count / reading time, and the lazy per-note content cache."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable

from knot.config import DEFAULT_WORDS_PER_MINUTE
from knot.models import NoteStats

log = logging.getLogger(__name__)


def compute_stats(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> NoteStats:
    """Count whitespace-delimited words and estimate reading minutes.

    Reading time is ``ceil(words / wpm)``: at least 1 minute for any
    non-empty text, 0 for empty text.
    """
    if words_per_minute <= 0:
        raise ValueError(f"words_per_minute must be positive, got {words_per_minute}")
    words = len(text.split())
    if words == 0:
        minutes = 1 if text else 0
    else:
        minutes = math.ceil(words / words_per_minute)
    return NoteStats(word_count=words, reading_minutes=minutes)


class NoteCache:
    """Content and stats of notes, loaded on first access and kept until invalidated.

    The cache is never assumed to mirror the disk: anything that may have
    changed a file out of band (the external editor) must call
    :meth:`invalidate` for that path.
    """

    def __init__(self, loader: Callable[[Path], str], words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> None:
        self._loader = loader
        self._wpm = words_per_minute
        self._entries: dict[Path, tuple[str, NoteStats]] = {}

    def __contains__(self, path: Path) -> bool:
        return path in self._entries

    def _load(self, path: Path) -> tuple[str, NoteStats]:
        entry = self._entries.get(path)
        if entry is None:
            text = self._loader(path)
            entry = (text, compute_stats(text, self._wpm))
            self._entries[path] = entry
            log.debug("Loaded %s (%d words)", path, entry[1].word_count)
        return entry

    def content(self, path: Path) -> str:
        return self._load(path)[0]

    def stats(self, path: Path) -> NoteStats:
        return self._load(path)[1]

    def invalidate(self, path: Path | None = None) -> None:
        """Forget one note, or everything when *path* is None."""
        if path is None:
            self._entries.clear()
        else:
            self._entries.pop(path, None)

    def recompute(self, path: Path) -> NoteStats:
        """Drop the cached entry for *path* and reload it now."""
        self.invalidate(path)
        return self.stats(path)
