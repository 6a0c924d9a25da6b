import asyncio
from dataclasses import dataclass

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.exceptions import describe_failure
from clauseradar.dashboard.view import DashboardView, build_dashboard_view
from clauseradar.logging.logger import Log
from clauseradar.risk.models import DocumentAnalysis, Persona
from clauseradar.risk.personas import persona_profile
from clauseradar.session.context import SessionContext
from clauseradar.session.negotiation import ClauseNegotiationTracker, NegotiationEntry
from clauseradar.session.notices import Notice, NoticeBoard, NoticeLevel


@dataclass(frozen=True)
class ReportExport:
    filename: str
    content: bytes


class AnalysisDashboard:
    """Owns the analysis on screen, the active persona and clause negotiations.

    Persona changes follow stale-while-revalidate: the current analysis stays
    visible until the re-fetch for the newest persona resolves.
    """

    def __init__(
        self,
        client: BaseAnalysisClient,
        analysis: DocumentAnalysis,
        *,
        context: SessionContext | None = None,
        persona: Persona = Persona.TENANT,
        notices: NoticeBoard | None = None,
    ) -> None:
        self._client = client
        self._context = context if context is not None else SessionContext()
        self._notices = notices if notices is not None else NoticeBoard()
        self._analysis = analysis
        self._persona = persona
        self._tracker = ClauseNegotiationTracker(client, analysis.id, self._notices)
        self._refresh_task: asyncio.Task[None] | None = None
        self._refresh_seq = 0
        self._refresh_error: str | None = None
        self._exporting = False
        self._closed = False
        self._context.open_document(analysis.id)

    @classmethod
    async def open(
        cls,
        client: BaseAnalysisClient,
        document_id: str,
        *,
        context: SessionContext | None = None,
        persona: Persona = Persona.TENANT,
        notices: NoticeBoard | None = None,
    ) -> "AnalysisDashboard":
        """Fetch a document by id and build its dashboard.

        Raises:
            AnalysisError: if the analysis cannot be fetched.
        """
        analysis = await client.fetch_analysis(document_id, persona)
        return cls(client, analysis, context=context, persona=persona, notices=notices)

    @property
    def analysis(self) -> DocumentAnalysis:
        return self._analysis

    @property
    def persona(self) -> Persona:
        return self._persona

    @property
    def tracker(self) -> ClauseNegotiationTracker:
        return self._tracker

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def refreshing(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def view(self) -> DashboardView:
        return build_dashboard_view(
            self._analysis,
            self._persona,
            self._tracker.snapshot(),
            refreshing=self.refreshing,
            refresh_error=self._refresh_error,
            exporting=self._exporting,
        )

    def negotiation(self, clause_id: str) -> NegotiationEntry:
        return self._tracker.entry(clause_id)

    def load(self, analysis: DocumentAnalysis) -> None:
        """Replace the analysis on screen; a different document resets negotiations."""
        self._refresh_seq += 1
        self._cancel_refresh()
        self._tracker.load_document(analysis.id)
        self._analysis = analysis
        self._refresh_error = None
        self._context.open_document(analysis.id)

    def change_persona(self, persona: Persona) -> asyncio.Task[None] | None:
        """Switch persona and re-fetch the analysis under it.

        Must be called inside a running loop. Returns the refresh task, or
        None when the persona is unchanged.
        """
        if self._closed or persona == self._persona:
            return None
        self._persona = persona
        self._refresh_error = None
        self._refresh_seq += 1
        self._cancel_refresh()
        self._refresh_task = asyncio.get_running_loop().create_task(
            self._refresh(self._refresh_seq, self._analysis.id, persona)
        )
        return self._refresh_task

    def request_counter_offer(self, clause_id: str) -> asyncio.Task[None] | None:
        if self._closed:
            return None
        if self._analysis.clause(clause_id) is None:
            Log.warning(f"Counter-offer requested for unknown clause {clause_id}", component="dashboard")
        return self._tracker.request(clause_id)

    async def export_report(self) -> ReportExport | None:
        """Download the report; None while another export is running or on failure."""
        if self._closed or self._exporting:
            return None
        self._exporting = True
        analysis = self._analysis
        try:
            content = await self._client.export_report(analysis.id)
        except Exception as exc:
            Log.error(f"Export of {analysis.id} failed: {exc!r}", component="dashboard")
            if not self._closed:
                self._notices.post(
                    Notice(
                        "Export Failed",
                        "Could not export the document analysis.",
                        NoticeLevel.ERROR,
                    )
                )
            return None
        finally:
            self._exporting = False
        if self._closed:
            Log.debug(f"Dropping export of {analysis.id} after close", component="dashboard")
            return None
        self._notices.post(
            Notice("Export Complete", "Document analysis has been exported to PDF.")
        )
        return ReportExport(filename=f"{analysis.filename}-analysis.pdf", content=content)

    def close(self) -> None:
        """Stop all in-flight work; late results are discarded."""
        self._closed = True
        self._cancel_refresh()
        self._tracker.reset()

    async def _refresh(self, seq: int, document_id: str, persona: Persona) -> None:
        label = persona_profile(persona).label.lower()
        try:
            analysis = await self._client.fetch_analysis(document_id, persona)
        except Exception as exc:
            if not self._is_latest(seq, document_id):
                return
            Log.error(f"Re-analysis for {label} failed: {exc!r}", component="dashboard")
            self._refresh_error = describe_failure(exc)
            self._notices.post(
                Notice(
                    "Perspective Update Failed",
                    f"Showing the previous analysis; {label} risk could not be loaded.",
                    NoticeLevel.ERROR,
                )
            )
            return
        if not self._is_latest(seq, document_id):
            Log.debug(f"Dropping stale re-analysis {seq}", component="dashboard")
            return
        self._analysis = analysis
        self._notices.post(
            Notice(
                "Perspective Updated",
                f"Risk analysis updated for {label} perspective.",
            )
        )

    def _is_latest(self, seq: int, document_id: str) -> bool:
        return not self._closed and seq == self._refresh_seq and document_id == self._analysis.id

    def _cancel_refresh(self) -> None:
        if self._refresh_task is not None and not self._refresh_task.done():
            self._refresh_task.cancel()
        self._refresh_task = None
