"""Pure composition of an analysis into what the dashboard renders."""

from collections.abc import Mapping
from dataclasses import dataclass

from clauseradar.risk.models import CategoryPoint, Clause, DocumentAnalysis, Persona, RiskLevel
from clauseradar.risk.personas import persona_profile
from clauseradar.risk.scoring import (
    HIGH_RISK_LEVELS,
    aggregate_category_series,
    bucket,
    risk_color,
    risk_label,
)
from clauseradar.session.negotiation import IDLE_ENTRY, NegotiationEntry


@dataclass(frozen=True)
class ClauseView:
    clause: Clause
    negotiation: NegotiationEntry
    color: str


@dataclass(frozen=True)
class DashboardView:
    document_id: str
    filename: str
    persona: Persona
    persona_label: str
    overall_score: int
    overall_level: RiskLevel
    overall_label: str
    overall_color: str
    clause_count: int
    high_risk_count: int
    category_count: int
    category_series: tuple[CategoryPoint, ...]
    clauses: tuple[ClauseView, ...]
    refreshing: bool = False
    refresh_error: str | None = None
    exporting: bool = False


def rank_clauses(clauses: tuple[Clause, ...] | list[Clause]) -> list[Clause]:
    """Descending by risk score; equal scores keep their source order."""
    return sorted(clauses, key=lambda clause: -clause.risk_score)


def build_dashboard_view(
    analysis: DocumentAnalysis,
    persona: Persona,
    negotiations: Mapping[str, NegotiationEntry],
    *,
    refreshing: bool = False,
    refresh_error: str | None = None,
    exporting: bool = False,
) -> DashboardView:
    overall_level = bucket(analysis.overall_risk_score)
    return DashboardView(
        document_id=analysis.id,
        filename=analysis.filename,
        persona=persona,
        persona_label=persona_profile(persona).label,
        overall_score=analysis.overall_risk_score,
        overall_level=overall_level,
        overall_label=risk_label(overall_level),
        overall_color=risk_color(overall_level),
        clause_count=len(analysis.clauses),
        high_risk_count=sum(
            1 for clause in analysis.clauses if clause.risk_level in HIGH_RISK_LEVELS
        ),
        category_count=len(analysis.risk_categories),
        category_series=tuple(aggregate_category_series(analysis.risk_categories)),
        clauses=tuple(
            ClauseView(
                clause=clause,
                negotiation=negotiations.get(clause.id, IDLE_ENTRY),
                color=risk_color(clause.risk_level),
            )
            for clause in rank_clauses(analysis.clauses)
        ),
        refreshing=refreshing,
        refresh_error=refresh_error,
        exporting=exporting,
    )
