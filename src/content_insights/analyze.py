from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

from content_insights.errors import MalformedResponseError
from content_insights.llm_client import Message
from content_insights.llm_parser import extract_records, normalize_response
from content_insights.models import ArticleInput, ArticleSummary, Stats, TopicInsight
from content_insights.prompts import (
    DEEP_ANALYSIS_TEMPERATURE,
    INSIGHT_TEMPERATURE,
    build_deep_analysis_prompt,
    build_insight_prompt,
)
from content_insights.ranking import rank_insights
from content_insights.validation import (
    WarningSink,
    emit_warnings,
    project_insights,
    project_summaries,
    validate_insights,
    validate_summaries,
)

log = logging.getLogger("content_insights.analyze")


class Completer(Protocol):
    def complete(self, messages: Sequence[Message], temperature: float = ...) -> str: ...


def _complete_and_parse(client: Completer, messages: Sequence[Message], temperature: float, key: str):
    raw_text = client.complete(messages, temperature=temperature)
    try:
        payload = normalize_response(raw_text)
        records = extract_records(payload, key, raw_text=raw_text)
    except MalformedResponseError:
        log.error("Could not parse model output for '%s': %s", key, raw_text)
        raise
    return raw_text, records


def deep_analyze(
    client: Completer,
    articles: Sequence[ArticleInput],
    on_warning: Optional[WarningSink] = None,
) -> List[ArticleSummary]:
    """
    Phase 1: one structured summary per article.
    An empty batch returns [] without calling the model.
    """
    prompt = build_deep_analysis_prompt(articles)
    if prompt is None:
        return []

    log.info("Deep analysis of %d articles", len(articles))
    raw_text, records = _complete_and_parse(
        client, prompt.as_messages(), DEEP_ANALYSIS_TEMPERATURE, "summaries"
    )

    checked = validate_summaries(records)
    emit_warnings(checked.warnings, on_warning)

    summaries = project_summaries(checked.records, raw_text=raw_text)
    if len(summaries) != len(articles):
        log.warning("Model returned %d summaries for %d articles", len(summaries), len(articles))
    return summaries


def generate_insights(
    client: Completer,
    summaries: Sequence[ArticleSummary],
    stats: Stats,
    on_warning: Optional[WarningSink] = None,
) -> List[TopicInsight]:
    """
    Phase 2: synthesize topic insights from the phase-1 summaries,
    ranked by confidence and capped.
    No summaries returns [] without calling the model.
    """
    prompt = build_insight_prompt(summaries, stats)
    if prompt is None:
        return []

    log.info("Generating insights from %d summaries", len(summaries))
    raw_text, records = _complete_and_parse(
        client, prompt.as_messages(), INSIGHT_TEMPERATURE, "insights"
    )

    checked = validate_insights(records)
    emit_warnings(checked.warnings, on_warning)

    return rank_insights(project_insights(checked.records, raw_text=raw_text))
