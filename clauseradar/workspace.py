import httpx

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.factory import AnalysisClientFactory
from clauseradar.config.settings import Settings
from clauseradar.dashboard.controller import AnalysisDashboard
from clauseradar.logging.logger import Log
from clauseradar.risk.models import DocumentAnalysis, Persona
from clauseradar.session.context import SessionContext
from clauseradar.session.notices import NoticeBoard
from clauseradar.session.scheduler import AsyncioScheduler, Scheduler
from clauseradar.session.upload_machine import UploadPolicy
from clauseradar.session.upload_session import UploadSession


class Workspace:
    """One user's upload-through-dashboard session, wired from settings.

    Selecting a new file starts a fresh upload session; a completed upload
    opens (or reloads) the dashboard for the new document.
    """

    def __init__(
        self,
        settings: Settings,
        client: BaseAnalysisClient,
        scheduler: Scheduler,
        context: SessionContext,
    ) -> None:
        self._settings = settings
        self._client = client
        self._scheduler = scheduler
        self._context = context
        self.notices = NoticeBoard()
        self.persona: Persona = settings.default_persona
        self.dashboard: AnalysisDashboard | None = None
        self.upload = self._new_upload_session()

    @property
    def context(self) -> SessionContext:
        return self._context

    @property
    def client(self) -> BaseAnalysisClient:
        return self._client

    def start_new_upload(self) -> UploadSession:
        """Discard the current upload session and dashboard, ready for a new file."""
        self.upload.close()
        if self.dashboard is not None:
            self.dashboard.close()
            self.dashboard = None
        self._context.close_document()
        self.upload = self._new_upload_session()
        return self.upload

    def change_persona(self, persona: Persona) -> None:
        """Use ``persona`` for the next upload and re-analyze the open document."""
        self.persona = persona
        if self.dashboard is not None:
            self.dashboard.change_persona(persona)

    async def open_document(self, document_id: str) -> AnalysisDashboard:
        """Land directly on the dashboard of an already analyzed document."""
        dashboard = await AnalysisDashboard.open(
            self._client,
            document_id,
            context=self._context,
            persona=self.persona,
            notices=self.notices,
        )
        self._replace_dashboard(dashboard)
        return dashboard

    async def aclose(self) -> None:
        self.upload.close()
        if self.dashboard is not None:
            self.dashboard.close()
        await self._client.aclose()

    def _new_upload_session(self) -> UploadSession:
        return UploadSession(
            self._client,
            self._scheduler,
            context=self._context,
            notices=self.notices,
            policy=UploadPolicy(
                progress_ceiling=self._settings.progress_ceiling,
                progress_step_fraction=self._settings.progress_step_fraction,
                handoff_delay_seconds=self._settings.handoff_delay_seconds,
            ),
            progress_interval_seconds=self._settings.progress_interval_seconds,
            max_upload_bytes=self._settings.max_upload_size_bytes,
            on_ready=self._on_analysis_ready,
        )

    def _on_analysis_ready(self, analysis: DocumentAnalysis) -> None:
        if self.dashboard is not None:
            self.dashboard.load(analysis)
            return
        self._replace_dashboard(
            AnalysisDashboard(
                self._client,
                analysis,
                context=self._context,
                persona=self.persona,
                notices=self.notices,
            )
        )

    def _replace_dashboard(self, dashboard: AnalysisDashboard) -> None:
        if self.dashboard is not None and self.dashboard is not dashboard:
            self.dashboard.close()
        self.dashboard = dashboard
        Log.info(f"Dashboard opened for {dashboard.analysis.id}", component="workspace")


def build_workspace(
    settings: Settings | None = None,
    *,
    scheduler: Scheduler | None = None,
    context: SessionContext | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Workspace:
    """Entry point: load settings -> configure logging -> build client and session."""
    settings = settings or Settings()
    Log.configure(settings.log_level)
    context = context if context is not None else SessionContext()
    client = AnalysisClientFactory.create(settings, context, transport=transport)
    return Workspace(settings, client, scheduler or AsyncioScheduler(), context)
