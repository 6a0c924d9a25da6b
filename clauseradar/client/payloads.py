"""Validates raw service JSON and builds the risk model dataclasses."""

import math
from typing import Any

from clauseradar.client.exceptions import AnalysisPayloadError
from clauseradar.logging.logger import Log
from clauseradar.risk.models import (
    Clause,
    CounterOffer,
    DocumentAnalysis,
    Persona,
    RiskLevel,
    RiskSnapshot,
)
from clauseradar.risk.scoring import bucket

_VALID_LEVELS = frozenset(level.value for level in RiskLevel)


def is_processing_handle(data: dict[str, Any]) -> bool:
    """True when an upload answered with an accepted-for-processing handle."""
    return "clauses" not in data and "id" in data


def build_document_analysis(data: Any) -> DocumentAnalysis:
    """Validate a document analysis payload.

    Clauses referencing a category missing from ``risk_categories`` are kept
    and only logged.

    Raises:
        AnalysisPayloadError: on any shape violation.
    """
    if not isinstance(data, dict):
        raise AnalysisPayloadError("Document analysis must be an object")
    document_id = _require_str(data, "id", "document")
    risk_categories = _build_categories(data.get("risk_categories", {}))
    clauses = _build_clauses(data.get("clauses"))
    for clause in clauses:
        if clause.category not in risk_categories:
            Log.warning(
                f"Clause {clause.id} references unknown category '{clause.category}'",
                component="client",
            )
    return DocumentAnalysis(
        id=document_id,
        filename=_optional_str(data, "filename", "document"),
        overall_risk_score=_require_score(data.get("overall_risk_score"), "overall_risk_score"),
        risk_categories=risk_categories,
        clauses=tuple(clauses),
        status=_optional_str(data, "status", "document") or "completed",
    )


def build_risk_snapshot(data: Any, persona: Persona | None = None) -> RiskSnapshot:
    if not isinstance(data, dict):
        raise AnalysisPayloadError("Risk analysis must be an object")
    return RiskSnapshot(
        document_id=_optional_str(data, "id", "risk") or _optional_str(data, "document_id", "risk"),
        overall_risk_score=_require_score(data.get("overall_risk_score"), "overall_risk_score"),
        risk_categories=_build_categories(data.get("risk_categories", {})),
        persona=persona,
    )


def build_counter_offer(data: Any, clause_id: str) -> CounterOffer:
    if not isinstance(data, dict):
        raise AnalysisPayloadError("Counter offer must be an object")
    return CounterOffer(
        clause_id=_optional_str(data, "clause_id", "counter offer") or clause_id,
        suggested_text=_require_str(data, "suggested_text", "counter offer"),
        explanation=_optional_str(data, "explanation", "counter offer"),
    )


def _build_categories(raw: Any) -> dict[str, int]:
    if not isinstance(raw, dict):
        raise AnalysisPayloadError("'risk_categories' must be an object")
    return {
        str(name): _require_score(value, f"risk_categories[{name!r}]")
        for name, value in raw.items()
    }


def _build_clauses(raw: Any) -> list[Clause]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise AnalysisPayloadError("'clauses' must be a list")
    seen: set[str] = set()
    clauses: list[Clause] = []
    for index, item in enumerate(raw):
        clause = _build_clause(item, index)
        if clause.id in seen:
            raise AnalysisPayloadError(f"Duplicate clause id: {clause.id}")
        seen.add(clause.id)
        clauses.append(clause)
    return clauses


def _build_clause(raw: Any, index: int) -> Clause:
    where = f"clause at index {index}"
    if not isinstance(raw, dict):
        raise AnalysisPayloadError(f"{where.capitalize()} must be an object")
    risk_score = _require_score(raw.get("risk_score"), f"{where}: 'risk_score'")
    return Clause(
        id=_require_str(raw, "id", where),
        original_text=_optional_str(raw, "original_text", where),
        summary=_optional_str(raw, "summary", where),
        risk_level=_build_level(raw.get("risk_level"), risk_score, where),
        risk_score=risk_score,
        category=_optional_str(raw, "category", where),
        issues=_build_issues(raw.get("issues"), where),
    )


def _build_level(raw: Any, risk_score: int, where: str) -> RiskLevel:
    if raw is None:
        return bucket(risk_score)
    if raw not in _VALID_LEVELS:
        raise AnalysisPayloadError(
            f"{where}: 'risk_level' must be one of {sorted(_VALID_LEVELS)}, got {raw!r}"
        )
    return RiskLevel(raw)


def _build_issues(raw: Any, where: str) -> tuple[str, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list) or not all(isinstance(issue, str) for issue in raw):
        raise AnalysisPayloadError(f"{where}: 'issues' must be a list of strings")
    return tuple(raw)


def _require_score(raw: Any, name: str) -> int:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise AnalysisPayloadError(f"{name} must be a number")
    if not math.isfinite(raw):
        raise AnalysisPayloadError(f"{name} must be a finite number, got {raw!r}")
    return int(round(raw))


def _require_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not value or not isinstance(value, str):
        raise AnalysisPayloadError(f"{where}: '{key}' must be a non-empty string")
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise AnalysisPayloadError(f"{where}: '{key}' must be a string")
    return value
