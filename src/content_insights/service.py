from __future__ import annotations

import logging
from typing import Optional, Sequence

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from content_insights.analyze import Completer
from content_insights.config import Settings
from content_insights.errors import UpstreamError
from content_insights.history import HistoryStore
from content_insights.llm_client import CompletionClient
from content_insights.models import AnalysisResult, ArticleInput
from content_insights.pipeline import AnalysisPipeline
from content_insights.validation import WarningSink

log = logging.getLogger("content_insights.service")

RETRY_WAIT = wait_exponential(multiplier=1, min=1, max=10)


def analyze_keyword(
    settings: Settings,
    keyword: str,
    articles: Sequence[ArticleInput],
    *,
    client: Optional[Completer] = None,
    history: Optional[HistoryStore] = None,
    limit: Optional[int] = None,
    on_warning: Optional[WarningSink] = None,
) -> AnalysisResult:
    """
    Analyze the first `limit` articles found for `keyword` and record the run.

    The whole pipeline is retried on upstream failures, up to
    settings.analysis_attempts times. Other errors fail immediately.
    """
    if not keyword or not keyword.strip():
        raise ValueError("Keyword must not be empty")

    limit = settings.max_articles if limit is None else limit
    batch = list(articles)[:limit]

    if client is None:
        client = CompletionClient(settings)
    pipeline = AnalysisPipeline(client, on_warning=on_warning, top_n=limit)

    retrying = Retrying(
        retry=retry_if_exception_type(UpstreamError),
        wait=RETRY_WAIT,
        stop=stop_after_attempt(settings.analysis_attempts),
        before_sleep=before_sleep_log(log, logging.WARNING),
        reraise=True,
    )
    result = retrying(pipeline.run, batch, keyword=keyword)

    if history is not None:
        history.add(keyword, batch, result)

    return result
