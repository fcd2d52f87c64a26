"""Mapping between report models and the wire shape used by gateway consumers.

On the wire, a missing period score is the sentinel ``-1`` because numeric
sequences cannot carry null. Inside the package it is always ``None``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .errors import DataValidationError
from .models import AggregatedReport, GroupScore, ReportKind

NO_DATA = -1

# (collection key, group name key) per report kind
_WIRE_KEYS = {
    ReportKind.BY_CATEGORY: ("category_scores", "category"),
    ReportKind.BY_AGENT: ("agent_scores", "agent_name"),
}


def encode_period_scores(scores: List[Optional[int]]) -> List[int]:
    return [NO_DATA if score is None else score for score in scores]


def decode_period_scores(scores: List[Any]) -> List[Optional[int]]:
    decoded: List[Optional[int]] = []
    for score in scores:
        if score is None or score == NO_DATA:
            decoded.append(None)
        elif isinstance(score, (int, float)) and not isinstance(score, bool):
            decoded.append(int(score))
        else:
            raise DataValidationError(f"Invalid period score on the wire: {score!r}")
    return decoded


def encode_report(report: AggregatedReport) -> Dict[str, Any]:
    """Encode ``report`` as ``{"periods": ..., "<kind>_scores": [...]}``."""
    collection_key, name_key = _WIRE_KEYS[report.kind]
    return {
        "periods": list(report.periods),
        collection_key: [
            {
                name_key: group.name,
                "ratings_count": group.ratings_count,
                "period_scores": encode_period_scores(group.period_scores),
                "score": group.total_score,
            }
            for group in report.groups
        ],
    }


def encode_combined_report(report: AggregatedReport, overall_score: int) -> Dict[str, Any]:
    """Encode a category report together with the overall weighted score."""
    if report.kind is not ReportKind.BY_CATEGORY:
        raise ValueError("Combined reports are only defined for category reports.")

    payload = encode_report(report)
    payload["overall_score"] = overall_score
    return payload


def decode_report(payload: Any) -> AggregatedReport:
    """Decode a wire payload into an ``AggregatedReport``.

    The report kind is taken from whichever collection key is present.

    Raises:
        DataValidationError: If the payload does not have the report shape.
    """
    if not isinstance(payload, dict):
        raise DataValidationError(f"Report payload must be an object, got {type(payload).__name__}.")

    present = [kind for kind, (key, _) in _WIRE_KEYS.items() if key in payload]
    if len(present) != 1:
        raise DataValidationError(
            "Report payload must contain exactly one of 'category_scores' or 'agent_scores'."
        )

    kind = present[0]
    collection_key, name_key = _WIRE_KEYS[kind]
    periods = payload.get("periods") or []
    if not isinstance(periods, list):
        raise DataValidationError("Report payload 'periods' must be a list.")

    groups: List[GroupScore] = []
    for item in payload.get(collection_key) or []:
        try:
            groups.append(
                GroupScore(
                    name=str(item[name_key]),
                    ratings_count=int(item["ratings_count"]),
                    period_scores=decode_period_scores(list(item.get("period_scores") or [])),
                    total_score=int(item["score"]),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise DataValidationError(
                f"Report payload entry is missing required fields: {item!r}"
            ) from exc

    return AggregatedReport(kind=kind, periods=[str(period) for period in periods], groups=groups)
