from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

from content_insights.errors import MalformedResponseError
from content_insights.models import ArticleSummary, TopicInsight, ValidationWarning, as_score
from content_insights.prompts import CONFIDENCE_RANGE, JOURNEY_STAGES, MARKET_POTENTIALS

log = logging.getLogger("content_insights.validation")

WarningSink = Callable[[ValidationWarning], None]

M = TypeVar("M", bound=BaseModel)

SUMMARY_REQUIRED_FIELDS = ("targetAudience", "scenario", "painPoint")

INSIGHT_REQUIRED_FIELDS = (
    "decisionStage.stage",
    "audienceScene.audience",
    "audienceScene.scene",
    "demandPainPoint.emotionalPain",
    "demandPainPoint.realisticPain",
    "demandPainPoint.expectation",
)

SUB_OBJECT_FIELDS = ("decisionStage", "audienceScene", "demandPainPoint")


class ValidationResult(NamedTuple):
    records: List[Dict[str, Any]]
    warnings: List[ValidationWarning]


def _lookup(record: Dict[str, Any], path: str) -> Any:
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def missing_fields(record: Dict[str, Any], required_fields: Sequence[str]) -> List[str]:
    """Dotted paths from `required_fields` that are absent or empty in `record`."""
    return [f for f in required_fields if _is_blank(_lookup(record, f))]


def validate_records(
    records: Sequence[Dict[str, Any]],
    required_fields: Sequence[str],
    kind: str = "record",
) -> ValidationResult:
    """
    Check every record for the required fields.

    Advisory only: records are returned as given, in the same order,
    and one warning is produced per incomplete record.
    """
    warnings: List[ValidationWarning] = []
    for pos, rec in enumerate(records, start=1):
        missing = missing_fields(rec, required_fields)
        if missing:
            warnings.append(
                ValidationWarning(
                    kind=kind,
                    position=pos,
                    missing_fields=missing,
                    message=f"{kind} {pos} is missing required fields: {', '.join(missing)}",
                )
            )
    return ValidationResult(records=list(records), warnings=warnings)


def validate_summaries(records: Sequence[Dict[str, Any]]) -> ValidationResult:
    return validate_records(records, SUMMARY_REQUIRED_FIELDS, kind="summary")


def _insight_value_warnings(pos: int, rec: Dict[str, Any]) -> List[ValidationWarning]:
    found: List[ValidationWarning] = []

    low, high = CONFIDENCE_RANGE
    raw_confidence = rec.get("confidence")
    confidence = as_score(raw_confidence)
    if confidence is not None:
        if not low <= confidence <= high:
            found.append(
                ValidationWarning(
                    kind="insight",
                    position=pos,
                    missing_fields=[],
                    message=f"insight {pos} confidence {confidence} is outside {low}-{high}",
                )
            )
    elif raw_confidence is not None:
        found.append(
            ValidationWarning(
                kind="insight",
                position=pos,
                missing_fields=[],
                message=f"insight {pos} confidence is not a number, ranked as 0: {raw_confidence!r}",
            )
        )

    saturation = rec.get("contentSaturation")
    if saturation is not None and as_score(saturation) is None:
        found.append(
            ValidationWarning(
                kind="insight",
                position=pos,
                missing_fields=[],
                message=f"insight {pos} content saturation is not a number, dropped: {saturation!r}",
            )
        )

    for key in SUB_OBJECT_FIELDS:
        value = rec.get(key)
        if value is not None and not isinstance(value, dict):
            found.append(
                ValidationWarning(
                    kind="insight",
                    position=pos,
                    missing_fields=[],
                    message=f"insight {pos} {key} is not an object: {value!r}",
                )
            )

    stage = _lookup(rec, "decisionStage.stage")
    if isinstance(stage, str) and stage.strip() and stage.strip().lower() not in JOURNEY_STAGES:
        found.append(
            ValidationWarning(
                kind="insight",
                position=pos,
                missing_fields=[],
                message=f"insight {pos} has unknown decision stage {stage!r}",
            )
        )

    potential = rec.get("marketPotential")
    if isinstance(potential, str) and potential.strip() and potential.strip().lower() not in MARKET_POTENTIALS:
        found.append(
            ValidationWarning(
                kind="insight",
                position=pos,
                missing_fields=[],
                message=f"insight {pos} has unknown market potential {potential!r}",
            )
        )

    return found


def validate_insights(records: Sequence[Dict[str, Any]]) -> ValidationResult:
    """
    Required-field check plus value checks (confidence range, journey
    stage, market potential). Out-of-range values are reported, never changed.
    """
    result = validate_records(records, INSIGHT_REQUIRED_FIELDS, kind="insight")
    warnings = list(result.warnings)
    for pos, rec in enumerate(result.records, start=1):
        warnings.extend(_insight_value_warnings(pos, rec))
    warnings.sort(key=lambda w: w.position)
    return ValidationResult(records=result.records, warnings=warnings)


def emit_warnings(warnings: Sequence[ValidationWarning], on_warning: Optional[WarningSink] = None) -> None:
    for w in warnings:
        log.warning(w.message)
        if on_warning is not None:
            on_warning(w)


def project(records: Sequence[Dict[str, Any]], model_cls: Type[M], raw_text: str = "") -> List[M]:
    """
    Build typed models from validated dicts.
    Missing fields, unreadable scores and flattened sub-objects fall back to
    defaults; other wrong types are a malformed response.
    """
    out: List[M] = []
    for pos, rec in enumerate(records, start=1):
        try:
            out.append(model_cls.model_validate(rec))
        except ValidationError as e:
            raise MalformedResponseError(
                f"{model_cls.__name__} {pos} has invalid values: {e.error_count()} error(s)",
                raw_text=raw_text,
            ) from e
    return out


def project_summaries(records: Sequence[Dict[str, Any]], raw_text: str = "") -> List[ArticleSummary]:
    return project(records, ArticleSummary, raw_text)


def project_insights(records: Sequence[Dict[str, Any]], raw_text: str = "") -> List[TopicInsight]:
    return project(records, TopicInsight, raw_text)
