from __future__ import annotations

import json
from typing import Any, List, NamedTuple, Optional, Sequence

from content_insights.models import ArticleInput, ArticleSummary, Stats

MAX_CONTENT_CHARS = 3000

DEEP_ANALYSIS_TEMPERATURE = 0.3
INSIGHT_TEMPERATURE = 0.4

# User-journey stages an insight must be classified into, in journey order.
JOURNEY_STAGES = ("awareness", "cognition", "research", "decision", "action", "outcome")

MARKET_POTENTIALS = ("high", "medium", "low")

CONFIDENCE_RANGE = (70, 95)


class PromptPair(NamedTuple):
    system: str
    user: str

    def as_messages(self) -> List[dict]:
        return [
            {"role": "system", "content": self.system},
            {"role": "user", "content": self.user},
        ]


DEEP_ANALYSIS_SYSTEM_PROMPT = (
    "You are a professional content analyst. You extract structured information "
    "from articles and you return ONLY valid JSON."
)

INSIGHT_SYSTEM_PROMPT = (
    "You are a senior content-strategy planner. You turn article analysis into "
    "commercially valuable topic insights and you return ONLY valid JSON."
)


def engagement_percent(likes: int, reads: int) -> str:
    """
    likes/reads as a percentage with one decimal place, "0" when there are no reads.
    """
    if reads <= 0:
        return "0"
    return f"{likes / reads * 100:.1f}"


def _dump(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, separators=(",", ":"))


def article_records(articles: Sequence[ArticleInput]) -> List[dict]:
    """
    Serialize articles for embedding in the deep-analysis prompt.
    Content beyond MAX_CONTENT_CHARS is dropped.
    """
    return [
        {
            "index": i,
            "title": a.title,
            "content": (a.content or "")[:MAX_CONTENT_CHARS],
            "likes": a.likes,
            "reads": a.reads,
            "engagement": engagement_percent(a.likes, a.reads),
        }
        for i, a in enumerate(articles, start=1)
    ]


def build_deep_analysis_prompt(articles: Sequence[ArticleInput]) -> Optional[PromptPair]:
    """
    Build the phase-1 prompt: one structured summary per article,
    keyed by the article's 1-based index.

    Returns None for an empty batch; there is nothing to ask the model.
    """
    if not articles:
        return None

    user = f"""
You are a senior content analyst. Perform a deep analysis of the following {len(articles)} articles and extract structured information.

Article data:
{_dump(article_records(articles))}

Return a JSON object with this exact structure, one entry per article:

{{
  "summaries": [
    {{
      "index": 1,
      "keyPoints": ["point 1", "point 2", "point 3"],
      "keywords": ["keyword 1", "keyword 2", "keyword 3", "keyword 4", "keyword 5", "keyword 6"],
      "highlights": ["highlight 1", "highlight 2"],
      "engagementAnalysis": "why the article performs the way it does (under 50 words)",
      "targetAudience": "a concrete audience, e.g. new graduates, young parents, founders",
      "scenario": "a concrete reading scenario, e.g. morning commute, before sleep, weekend",
      "painPoint": "the need it solves, e.g. lack of time, choice overload, missing skills",
      "contentAngle": "e.g. tutorial, experience sharing, trend analysis, product review",
      "emotionType": "e.g. motivating, comforting, rational, humorous",
      "writingStyle": "e.g. practical, story-driven, data-driven, opinionated"
    }}
  ]
}}

Rules:
- "index" must match the article's index in the input data
- targetAudience, scenario and painPoint are MANDATORY for every article
- keyPoints: 3-5 of the most valuable points
- keywords: at least 5, covering topic, audience, scenario and pain-point words
- highlights: 1-2 distinctive highlights
- engagementAnalysis: explain the engagement numbers
- Output ONLY JSON, no explanations
""".strip()

    return PromptPair(system=DEEP_ANALYSIS_SYSTEM_PROMPT, user=user)


def build_insight_prompt(summaries: Sequence[ArticleSummary], stats: Stats) -> Optional[PromptPair]:
    """
    Build the phase-2 prompt from the complete phase-1 output plus the
    aggregate statistics.

    Returns None when there are no summaries to synthesize from.
    """
    if not summaries:
        return None

    low, high = CONFIDENCE_RANGE
    stages = "/".join(JOURNEY_STAGES)
    stage_list = ", ".join(JOURNEY_STAGES)
    potentials = "/".join(MARKET_POTENTIALS)

    user = f"""
You are a top content-topic strategist. Based on the deep analysis of {len(summaries)} articles, generate commercially valuable topic insights.

Article analysis data:
{_dump([s.to_wire() for s in summaries])}

Statistics:
- Total articles: {stats.total_articles}
- Average reads: {stats.avg_reads}
- Average likes: {stats.avg_likes}
- Average engagement: {stats.avg_engagement}

Analyze every insight along three dimensions:

1. Decision stage: where the reader is in their journey.
   - awareness: just realised the problem exists, confused
   - cognition: actively learning concepts and basics
   - research: comparing options, struggling to choose
   - decision: about to act, needs concrete guidance and confidence
   - action: executing, hitting concrete problems
   - outcome: has first results, wants to optimise and show them

2. Audience and scene: a concrete audience drawn from the articles and a scene that fits it
   (e.g. "programmers working late who want to be more efficient").

3. Demand and pain point: the emotional pain, the realistic pain and what the reader expects
   to get from the content.

Return a JSON object with this exact structure:

{{
  "insights": [
    {{
      "title": "insight title, short and punchy",
      "description": "120-180 words: market analysis, reader value, feasibility",
      "confidence": 85,
      "evidence": ["article title 1", "article title 2"],
      "decisionStage": {{
        "stage": "{stages}",
        "reason": "why this stage, based on the articles"
      }},
      "audienceScene": {{
        "audience": "concrete audience",
        "scene": "matching scene",
        "reason": "why this audience and scene fit"
      }},
      "demandPainPoint": {{
        "emotionalPain": "emotional pain",
        "realisticPain": "realistic pain",
        "expectation": "what the reader expects",
        "reason": "root cause behind the need"
      }},
      "tags": ["tag 1", "tag 2", "tag 3"],
      "marketPotential": "{potentials}",
      "contentSaturation": 65,
      "recommendedFormat": "tutorial / experience sharing / case study",
      "keyDifferentiators": ["differentiator 1", "differentiator 2"]
    }}
  ]
}}

Rules:
- Generate 5-10 insights
- decisionStage.stage must be exactly one of: {stage_list}
- Every dimension needs a "reason" grounded in the articles
- confidence reflects the strength of the evidence, range {low}-{high}; it is the importance index
- evidence cites 2-3 relevant article titles
- Cover different journey stages and audiences
- Output ONLY JSON, no explanations
""".strip()

    return PromptPair(system=INSIGHT_SYSTEM_PROMPT, user=user)
