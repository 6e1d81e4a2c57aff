from __future__ import annotations

from collections import Counter
from typing import List, Sequence

from content_insights.models import ArticleSummary, WordCloudEntry

MAX_WORDS = 20
MAX_SIZE = 48
MIN_SIZE = 20
SIZE_STEP = 2


def word_size(rank: int) -> int:
    """Display size for the 0-based rank: linear decay, floored at MIN_SIZE."""
    return max(MIN_SIZE, MAX_SIZE - SIZE_STEP * rank)


def build_word_cloud(summaries: Sequence[ArticleSummary], limit: int = MAX_WORDS) -> List[WordCloudEntry]:
    """
    Count keywords across all summaries (exact, case-sensitive match)
    and return the `limit` most frequent ones.

    Ties keep first-seen order.
    """
    counts: Counter = Counter()
    for s in summaries:
        counts.update(k for k in s.keywords if k)

    return [
        WordCloudEntry(word=word, count=count, size=word_size(rank))
        for rank, (word, count) in enumerate(counts.most_common(limit))
    ]
