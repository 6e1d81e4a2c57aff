from __future__ import annotations

from typing import Any, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for records exchanged with the model and the dashboard.
    camelCase on the wire, snake_case in Python, immutable once built.
    Unknown keys returned by the model are kept, not dropped.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


def _as_str(v: Any) -> Any:
    if v is None:
        return ""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


def _as_str_list(v: Any) -> Any:
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    if isinstance(v, list):
        return [_as_str(x) for x in v if x is not None]
    return v


def as_score(v: Any) -> Optional[int]:
    """
    Integer score from what models actually send: 85, 85.0, "85", "85%".
    None when the value cannot be read as a number.
    """
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    try:
        if isinstance(v, float):
            return int(round(v))
        if isinstance(v, str):
            return int(round(float(v.strip().rstrip("%"))))
    except (ValueError, OverflowError):
        return None
    return None


# --- Inputs ---------------------------------------------------------------

class ArticleInput(BaseModel):
    """
    One article as supplied by the search collaborator.
    Accepts the provider's own field names (praise/read/short_link).
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    title: str = ""
    content: str = ""
    likes: int = Field(default=0, ge=0, validation_alias=AliasChoices("likes", "praise"))
    reads: int = Field(default=0, ge=0, validation_alias=AliasChoices("reads", "read"))
    url: str = ""

    @model_validator(mode="before")
    @classmethod
    def fill_url(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("url") and data.get("short_link"):
            data = {**data, "url": data["short_link"]}
        return data

    @field_validator("title", "content", "url", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return _as_str(v)

    @field_validator("likes", "reads", mode="before")
    @classmethod
    def none_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def engagement_rate(self) -> float:
        """likes / reads, 0.0 when the article has no reads."""
        if self.reads <= 0:
            return 0.0
        return self.likes / self.reads


class Stats(CamelModel):
    """Aggregate numbers passed verbatim into the insight prompt."""

    total_articles: int = 0
    avg_reads: int = 0
    avg_likes: int = 0
    avg_engagement: str = "0%"


# --- Phase 1 --------------------------------------------------------------

class ArticleSummary(CamelModel):
    """
    Per-article deep analysis. `index` is the 1-based position of the
    source article in the analyzed batch.
    """

    index: Optional[int] = None
    key_points: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list)
    highlights: List[str] = Field(default_factory=list)
    engagement_analysis: str = ""

    target_audience: str = ""
    scenario: str = ""
    pain_point: str = ""

    content_angle: str = ""
    emotion_type: str = ""
    writing_style: str = ""

    @field_validator("key_points", "keywords", "highlights", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_str_list(v)

    @field_validator(
        "engagement_analysis",
        "target_audience",
        "scenario",
        "pain_point",
        "content_angle",
        "emotion_type",
        "writing_style",
        mode="before",
    )
    @classmethod
    def coerce_strings(cls, v: Any) -> Any:
        return _as_str(v)

    @field_validator("index", mode="before")
    @classmethod
    def coerce_index(cls, v: Any) -> Any:
        return as_score(v)


# --- Phase 2 --------------------------------------------------------------

class DecisionStage(CamelModel):
    stage: str = ""
    reason: str = ""

    @field_validator("stage", "reason", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> Any:
        return _as_str(v)


class AudienceScene(CamelModel):
    audience: str = ""
    scene: str = ""
    reason: str = ""

    @field_validator("audience", "scene", "reason", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> Any:
        return _as_str(v)


class DemandPainPoint(CamelModel):
    emotional_pain: str = ""
    realistic_pain: str = ""
    expectation: str = ""
    reason: str = ""

    @field_validator("emotional_pain", "realistic_pain", "expectation", "reason", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> Any:
        return _as_str(v)


class TopicInsight(CamelModel):
    """
    One synthesized content-topic recommendation.
    `confidence` is the importance index used for ranking.
    """

    title: str = ""
    description: str = ""
    confidence: int = 0
    evidence: List[str] = Field(default_factory=list)

    decision_stage: DecisionStage = Field(default_factory=DecisionStage)
    audience_scene: AudienceScene = Field(default_factory=AudienceScene)
    demand_pain_point: DemandPainPoint = Field(default_factory=DemandPainPoint)

    tags: List[str] = Field(default_factory=list)
    market_potential: str = ""
    content_saturation: Optional[int] = None
    recommended_format: str = ""
    key_differentiators: List[str] = Field(default_factory=list)

    @field_validator("title", "description", "market_potential", "recommended_format", mode="before")
    @classmethod
    def coerce_strings(cls, v: Any) -> Any:
        return _as_str(v)

    @field_validator("evidence", "key_differentiators", mode="before")
    @classmethod
    def coerce_lists(cls, v: Any) -> Any:
        return _as_str_list(v)

    @field_validator("tags", mode="before")
    @classmethod
    def dedupe_tags(cls, v: Any) -> Any:
        v = _as_str_list(v)
        if not isinstance(v, list):
            return v
        seen: List[str] = []
        for t in v:
            if isinstance(t, str) and t not in seen:
                seen.append(t)
        return seen

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, v: Any) -> Any:
        score = as_score(v)
        return 0 if score is None else score

    @field_validator("content_saturation", mode="before")
    @classmethod
    def coerce_saturation(cls, v: Any) -> Any:
        return as_score(v)

    @field_validator("decision_stage", "audience_scene", "demand_pain_point", mode="before")
    @classmethod
    def default_sub_object(cls, v: Any, info: ValidationInfo) -> Any:
        # Flattened answers like "decisionStage": "research" are common.
        if isinstance(v, (dict, BaseModel)):
            return v
        if info.field_name == "decision_stage" and isinstance(v, str):
            return {"stage": v}
        return {}


# --- Derived --------------------------------------------------------------

class WordCloudEntry(CamelModel):
    word: str
    count: int = Field(..., ge=1)
    size: int


class ArticleHighlight(CamelModel):
    """Row of the top-liked / top-engagement tables."""

    title: str
    likes: int
    reads: int
    engagement: str
    url: str = ""


class ValidationWarning(CamelModel):
    """
    Advisory finding about one model-produced record.
    Never raised; collected and logged.
    """

    kind: str
    position: int = Field(..., description="1-based position of the record in the model output")
    missing_fields: List[str] = Field(default_factory=list)
    message: str


class AnalysisResult(CamelModel):
    keyword: str = ""
    stats: Stats = Field(default_factory=Stats)
    summaries: List[ArticleSummary] = Field(default_factory=list)
    insights: List[TopicInsight] = Field(default_factory=list)
    word_cloud: List[WordCloudEntry] = Field(default_factory=list)
    top_liked: List[ArticleHighlight] = Field(default_factory=list)
    top_engagement: List[ArticleHighlight] = Field(default_factory=list)
    warnings: List[ValidationWarning] = Field(default_factory=list)


class SearchHistoryEntry(CamelModel):
    """
    One persisted analysis run.
    """

    id: int
    keyword: str
    timestamp: int = Field(..., description="Unix epoch milliseconds")
    result_count: int = 0
    articles: List[ArticleInput] = Field(default_factory=list)
    result: Optional[AnalysisResult] = None
