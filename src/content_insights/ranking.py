from __future__ import annotations

import logging
from typing import List, Sequence

from content_insights.models import TopicInsight

log = logging.getLogger("content_insights.ranking")

MAX_INSIGHTS = 10


def rank_insights(insights: Sequence[TopicInsight], limit: int = MAX_INSIGHTS) -> List[TopicInsight]:
    """
    Order insights by confidence (highest first) and keep the top `limit`.

    The sort is stable: equal confidences keep the model's order.
    Truncation happens after sorting, so the highest-confidence insights survive.
    """
    if not insights:
        log.warning("Model produced no insights")
        return []

    ranked = sorted(insights, key=lambda i: i.confidence, reverse=True)
    if len(ranked) > limit:
        log.info("Model produced %d insights, keeping top %d", len(ranked), limit)
        ranked = ranked[:limit]
    else:
        log.info("Model produced %d insights", len(ranked))
    return ranked
