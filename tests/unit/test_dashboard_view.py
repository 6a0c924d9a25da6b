import dataclasses

from clauseradar.dashboard.view import build_dashboard_view, rank_clauses
from clauseradar.risk.models import Clause, DocumentAnalysis, Persona, RiskLevel
from clauseradar.session.negotiation import IDLE_ENTRY, NegotiationEntry, NegotiationStatus


def _clause(clause_id: str, score: int) -> Clause:
    return Clause(
        id=clause_id,
        original_text="text",
        summary="summary",
        risk_level=RiskLevel.MEDIUM,
        risk_score=score,
        category="Financial Risk",
    )


class TestRankClauses:
    def test_descending_by_score(self) -> None:
        clauses = [_clause("a", 30), _clause("b", 95), _clause("c", 65), _clause("d", 85)]

        ranked = rank_clauses(clauses)

        assert [c.risk_score for c in ranked] == [95, 85, 65, 30]

    def test_ties_keep_source_order(self) -> None:
        clauses = [_clause("first", 50), _clause("top", 90), _clause("second", 50)]

        ranked = rank_clauses(clauses)

        assert [c.id for c in ranked] == ["top", "first", "second"]

    def test_input_is_not_mutated(self) -> None:
        clauses = [_clause("a", 10), _clause("b", 20)]
        rank_clauses(clauses)
        assert [c.id for c in clauses] == ["a", "b"]


class TestBuildDashboardView:
    def test_summary_figures(self, sample_analysis: DocumentAnalysis) -> None:
        view = build_dashboard_view(sample_analysis, Persona.TENANT, {})

        assert view.document_id == "doc-123"
        assert view.filename == "lease-agreement.pdf"
        assert view.overall_score == 75
        assert view.overall_level is RiskLevel.HIGH
        assert view.overall_label == "High"
        assert view.overall_color == "risk-high"
        assert view.clause_count == 4
        assert view.high_risk_count == 2
        assert view.category_count == 4

    def test_clauses_ranked_with_colors(self, sample_analysis: DocumentAnalysis) -> None:
        view = build_dashboard_view(sample_analysis, Persona.TENANT, {})

        assert [c.clause.id for c in view.clauses] == [
            "clause-2",
            "clause-4",
            "clause-1",
            "clause-3",
        ]
        assert [c.color for c in view.clauses] == [
            "risk-critical",
            "risk-high",
            "risk-medium",
            "risk-low",
        ]

    def test_category_series(self, sample_analysis: DocumentAnalysis) -> None:
        view = build_dashboard_view(sample_analysis, Persona.TENANT, {})

        assert [(p.name, p.value, p.color) for p in view.category_series] == [
            ("Financial", 85, "risk-high"),
            ("Legal Compliance", 60, "risk-medium"),
            ("Termination", 80, "risk-low"),
            ("Liability", 70, "primary"),
        ]

    def test_negotiations_attached_per_clause(self, sample_analysis: DocumentAnalysis) -> None:
        requesting = NegotiationEntry(status=NegotiationStatus.REQUESTING)

        view = build_dashboard_view(
            sample_analysis, Persona.FREELANCER, {"clause-2": requesting}
        )

        by_id = {c.clause.id: c.negotiation for c in view.clauses}
        assert by_id["clause-2"] == requesting
        assert by_id["clause-1"] == IDLE_ENTRY
        assert view.persona_label == "Freelancer"

    def test_empty_analysis(self, sample_analysis: DocumentAnalysis) -> None:
        empty = dataclasses.replace(
            sample_analysis, clauses=(), risk_categories={}, overall_risk_score=0
        )

        view = build_dashboard_view(empty, Persona.SMB, {})

        assert view.clause_count == 0
        assert view.high_risk_count == 0
        assert view.category_series == ()
        assert view.overall_level is RiskLevel.LOW

    def test_refresh_flags_pass_through(self, sample_analysis: DocumentAnalysis) -> None:
        view = build_dashboard_view(
            sample_analysis,
            Persona.TENANT,
            {},
            refreshing=True,
            refresh_error="Server error occurred",
            exporting=True,
        )

        assert view.refreshing
        assert view.refresh_error == "Server error occurred"
        assert view.exporting
