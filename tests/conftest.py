from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

import pytest

from content_insights.config import Settings
from content_insights.models import ArticleInput


class FakeCompletionClient:
    """Returns queued responses in order and records every call."""

    def __init__(self, responses: Sequence[Any] = ()) -> None:
        self.responses: List[Any] = list(responses)
        self.calls: List[Dict[str, Any]] = []

    def complete(self, messages, temperature: float = 0.7) -> str:
        self.calls.append({"messages": list(messages), "temperature": temperature})
        if not self.responses:
            raise AssertionError("unexpected completion call")
        resp = self.responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp


def summary_record(index: int, keywords: Optional[List[str]] = None, **overrides: Any) -> Dict[str, Any]:
    rec: Dict[str, Any] = {
        "index": index,
        "keyPoints": [f"point {index}.1", f"point {index}.2", f"point {index}.3"],
        "keywords": keywords if keywords is not None else ["growth", "content", f"kw{index}", "audience", "habit"],
        "highlights": [f"highlight {index}"],
        "engagementAnalysis": "High likes relative to reads.",
        "targetAudience": "new graduates",
        "scenario": "morning commute",
        "painPoint": "lack of time",
        "contentAngle": "tutorial",
        "emotionType": "motivating",
        "writingStyle": "practical",
    }
    rec.update(overrides)
    return rec


def insight_record(title: str, confidence: Any = 80, /, **overrides: Any) -> Dict[str, Any]:
    rec: Dict[str, Any] = {
        "title": title,
        "description": f"Why {title} matters.",
        "confidence": confidence,
        "evidence": ["Article A", "Article B"],
        "decisionStage": {"stage": "research", "reason": "comparing options"},
        "audienceScene": {"audience": "young parents", "scene": "late evening", "reason": "fits"},
        "demandPainPoint": {
            "emotionalPain": "fear of falling behind",
            "realisticPain": "not enough time",
            "expectation": "a concrete plan",
            "reason": "described in the articles",
        },
        "tags": ["side hustle", "parents"],
        "marketPotential": "high",
        "contentSaturation": 60,
        "recommendedFormat": "case study",
        "keyDifferentiators": ["real numbers"],
    }
    rec.update(overrides)
    return rec


def as_response(key: str, records: List[Dict[str, Any]]) -> str:
    return json.dumps({key: records}, ensure_ascii=False)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        openai_api_key="test-key",
        openai_api_base="https://llm.test/v1",
        openai_model="gpt-4o-test",
        data_dir=tmp_path / "data",
    )


@pytest.fixture
def articles() -> List[ArticleInput]:
    return [
        ArticleInput(title="Morning routines", content="Wake up early.", likes=120, reads=1000, url="https://a.test/1"),
        ArticleInput(title="Side hustles", content="Start small.", likes=300, reads=1500, url="https://a.test/2"),
        ArticleInput(title="No readers yet", content="", likes=0, reads=0, url="https://a.test/3"),
    ]
