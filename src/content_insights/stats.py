from __future__ import annotations

from typing import List, Sequence

from content_insights.models import ArticleHighlight, ArticleInput, Stats


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def compute_stats(articles: Sequence[ArticleInput]) -> Stats:
    """
    Totals and averages for the analyzed batch.
    avgEngagement is total likes over total reads, as a percentage string.
    """
    total = len(articles)
    if total == 0:
        return Stats(total_articles=0, avg_reads=0, avg_likes=0, avg_engagement="0%")

    total_reads = sum(a.reads for a in articles)
    total_likes = sum(a.likes for a in articles)

    if total_reads > 0:
        avg_engagement = f"{total_likes / total_reads * 100:.1f}%"
    else:
        avg_engagement = "0%"

    return Stats(
        total_articles=total,
        avg_reads=_round_half_up(total_reads / total),
        avg_likes=_round_half_up(total_likes / total),
        avg_engagement=avg_engagement,
    )


def _highlight(article: ArticleInput) -> ArticleHighlight:
    if article.reads > 0:
        engagement = f"{article.engagement_rate * 100:.0f}%"
    else:
        engagement = "0%"
    return ArticleHighlight(
        title=article.title,
        likes=article.likes,
        reads=article.reads,
        engagement=engagement,
        url=article.url,
    )


def top_liked(articles: Sequence[ArticleInput], limit: int = 5) -> List[ArticleHighlight]:
    """Most-liked articles first."""
    ranked = sorted(articles, key=lambda a: a.likes, reverse=True)
    return [_highlight(a) for a in ranked[:limit]]


def top_engagement(articles: Sequence[ArticleInput], limit: int = 5) -> List[ArticleHighlight]:
    """Highest likes/reads first; articles without reads are left out."""
    ranked = sorted(
        (a for a in articles if a.reads > 0),
        key=lambda a: a.engagement_rate,
        reverse=True,
    )
    return [_highlight(a) for a in ranked[:limit]]
