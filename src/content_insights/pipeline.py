from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

from content_insights.analyze import Completer, deep_analyze, generate_insights
from content_insights.models import AnalysisResult, ArticleInput, Stats, ValidationWarning
from content_insights.stats import compute_stats, top_engagement, top_liked
from content_insights.validation import WarningSink
from content_insights.wordcloud import build_word_cloud

log = logging.getLogger("content_insights.pipeline")


class AnalysisPipeline:
    """
    Runs deep analysis, then insight synthesis and the word cloud.

    All-or-nothing: any stage error propagates and no partial result
    is returned. Validation warnings never stop the run.
    """

    def __init__(
        self,
        client: Completer,
        on_warning: Optional[WarningSink] = None,
        top_n: int = 5,
    ) -> None:
        self._client = client
        self._on_warning = on_warning
        self._top_n = top_n

    def run(
        self,
        articles: Sequence[ArticleInput],
        stats: Optional[Stats] = None,
        keyword: str = "",
    ) -> AnalysisResult:
        warnings: List[ValidationWarning] = []

        def collect(w: ValidationWarning) -> None:
            warnings.append(w)
            if self._on_warning is not None:
                self._on_warning(w)

        if stats is None:
            stats = compute_stats(articles)

        summaries = deep_analyze(self._client, articles, on_warning=collect)

        if summaries:
            # Both only depend on the summaries.
            with ThreadPoolExecutor(max_workers=1) as pool:
                cloud_future = pool.submit(build_word_cloud, summaries)
                insights = generate_insights(self._client, summaries, stats, on_warning=collect)
                word_cloud = cloud_future.result()
        else:
            log.warning("Deep analysis produced no summaries; skipping insight synthesis")
            insights, word_cloud = [], []

        result = AnalysisResult(
            keyword=keyword,
            stats=stats,
            summaries=summaries,
            insights=insights,
            word_cloud=word_cloud,
            top_liked=top_liked(articles, self._top_n),
            top_engagement=top_engagement(articles, self._top_n),
            warnings=warnings,
        )
        log.info(
            "Analysis finished: %d summaries, %d insights, %d warnings",
            len(summaries),
            len(insights),
            len(warnings),
        )
        return result
