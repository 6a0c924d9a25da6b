from dataclasses import dataclass, field
from enum import Enum


class RiskLevel(str, Enum):
    """Risk bucket for a clause or a whole document, ordered low to critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _RISK_RANKS[self]


_RISK_RANKS = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
}


class Persona(str, Enum):
    """Role the user reads the document as; the service reweights risk by it."""

    TENANT = "tenant"
    FREELANCER = "freelancer"
    SMB = "smb"


@dataclass(frozen=True)
class Clause:
    """One analyzed excerpt of the source document."""

    id: str
    original_text: str
    summary: str
    risk_level: RiskLevel
    risk_score: int
    category: str
    issues: tuple[str, ...] = ()


@dataclass(frozen=True)
class DocumentAnalysis:
    """Completed analysis of one uploaded document.

    ``risk_categories`` keeps the insertion order of the service response so
    charts render categories in a stable order.
    """

    id: str
    filename: str
    overall_risk_score: int
    risk_categories: dict[str, int] = field(default_factory=dict)
    clauses: tuple[Clause, ...] = ()
    status: str = "completed"

    def clause(self, clause_id: str) -> Clause | None:
        for clause in self.clauses:
            if clause.id == clause_id:
                return clause
        return None


@dataclass(frozen=True)
class RiskSnapshot:
    """Risk-only payload (overall score + categories) scoped to a persona."""

    document_id: str
    overall_risk_score: int
    risk_categories: dict[str, int] = field(default_factory=dict)
    persona: Persona | None = None


@dataclass(frozen=True)
class CounterOffer:
    """Suggested replacement language for one clause plus its rationale."""

    clause_id: str
    suggested_text: str
    explanation: str


@dataclass(frozen=True)
class CategoryPoint:
    """One point of the category chart series."""

    name: str
    value: int
    color: str
