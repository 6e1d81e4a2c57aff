from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import List, Optional, Sequence

from content_insights.io import append_jsonl, iter_jsonl
from content_insights.models import AnalysisResult, ArticleInput, SearchHistoryEntry

log = logging.getLogger("content_insights.history")

DEFAULT_LIMIT = 50


def _now_ms() -> int:
    return int(time.time() * 1000)


class HistoryStore:
    """
    Append-only JSONL store of past analysis runs.
    A missing file is an empty history.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _entries(self) -> List[SearchHistoryEntry]:
        if not self.path.exists():
            return []
        return [SearchHistoryEntry.model_validate(obj) for obj in iter_jsonl(self.path)]

    def add(
        self,
        keyword: str,
        articles: Sequence[ArticleInput],
        result: Optional[AnalysisResult] = None,
    ) -> SearchHistoryEntry:
        ts = _now_ms()
        last = self._entries()[-1:]
        # ids are millisecond timestamps; keep them unique for back-to-back runs
        entry_id = max(ts, last[0].id + 1) if last else ts

        entry = SearchHistoryEntry(
            id=entry_id,
            keyword=keyword,
            timestamp=ts,
            result_count=len(articles),
            articles=list(articles),
            result=result,
        )
        append_jsonl(self.path, entry.to_wire())
        log.info("Saved history entry %d for '%s'", entry.id, keyword)
        return entry

    def list(self, limit: int = DEFAULT_LIMIT) -> List[SearchHistoryEntry]:
        """Newest first."""
        entries = self._entries()
        entries.reverse()
        return entries[:limit]

    def get(self, entry_id: int) -> Optional[SearchHistoryEntry]:
        for entry in self._entries():
            if entry.id == entry_id:
                return entry
        return None

    def clear(self) -> int:
        count = len(self._entries())
        if self.path.exists():
            self.path.unlink()
        log.info("Cleared %d history entries", count)
        return count
