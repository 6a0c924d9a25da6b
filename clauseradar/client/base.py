from abc import ABC, abstractmethod

from clauseradar.client.files import SelectedFile
from clauseradar.risk.models import CounterOffer, DocumentAnalysis, Persona, RiskSnapshot


class BaseAnalysisClient(ABC):
    """Contract for all analysis-service adapters.

    Every method raises only ``AnalysisError`` subclasses; transport
    exceptions never cross this boundary.
    """

    @abstractmethod
    async def upload(
        self,
        file: SelectedFile,
        persona: Persona | None = None,
    ) -> DocumentAnalysis:
        """Submit a document and wait for its completed analysis.

        May take tens of seconds. Never retried automatically; cancel by
        cancelling the awaiting task.

        Raises:
            AnalysisValidationError: if the file fails local checks.
            AnalysisNetworkError: if the service could not be reached or timed out.
            AnalysisServiceError: if the service rejected the upload.
        """

    @abstractmethod
    async def fetch_analysis(
        self,
        document_id: str,
        persona: Persona | None = None,
    ) -> DocumentAnalysis:
        """Read a document analysis. Idempotent."""

    @abstractmethod
    async def fetch_risk(
        self,
        document_id: str,
        persona: Persona | None = None,
    ) -> RiskSnapshot:
        """Read the persona-scoped risk summary of a document. Idempotent."""

    @abstractmethod
    async def request_counter_offer(self, clause_id: str) -> CounterOffer:
        """Ask the service to draft a counter-offer for one clause.

        Each call may produce different text; callers deduplicate concurrent
        requests for the same clause.
        """

    @abstractmethod
    async def export_report(self, document_id: str) -> bytes:
        """Download the rendered analysis report. Idempotent."""

    async def aclose(self) -> None:
        """Release transport resources."""
