"""End-to-end session flows through ``build_workspace``.

The example provider runs without a network; the HTTP flow goes through
httpx.MockTransport so request shapes are checked as well.
"""

from typing import Any

import httpx
import pytest

from clauseradar.client.example_client import ExampleAnalysisClient
from clauseradar.client.exceptions import AnalysisValidationError
from clauseradar.client.files import SelectedFile
from clauseradar.config.settings import Settings
from clauseradar.risk.models import Persona, RiskLevel
from clauseradar.session.context import SessionContext
from clauseradar.session.negotiation import NegotiationStatus
from clauseradar.session.scheduler import VirtualScheduler
from clauseradar.session.upload_machine import UploadPhase
from clauseradar.workspace import build_workspace

MIB = 1024 * 1024


def _padded_pdf(content: bytes, size: int) -> SelectedFile:
    return SelectedFile(
        name="lease-agreement.pdf",
        content=content + b"\0" * (size - len(content)),
        content_type="application/pdf",
    )


class TestExampleWorkflow:
    @pytest.mark.asyncio
    async def test_upload_to_dashboard(self, sample_pdf_bytes: bytes) -> None:
        scheduler = VirtualScheduler()
        workspace = build_workspace(
            Settings(_env_file=None, analysis_provider="example"),
            scheduler=scheduler,
        )
        session = workspace.upload
        assert session.state.phase is UploadPhase.IDLE

        session.select_file(_padded_pdf(sample_pdf_bytes, 2 * MIB))
        assert session.state.phase is UploadPhase.FILE_SELECTED

        task = session.begin_upload(workspace.persona)
        assert session.state.phase is UploadPhase.UPLOADING
        assert task is not None
        await task

        assert session.state.phase is UploadPhase.SUCCEEDED
        assert session.state.progress == 100.0
        assert workspace.dashboard is None

        scheduler.advance(2.0)

        dashboard = workspace.dashboard
        assert dashboard is not None
        assert workspace.context.document_id == "doc-123"
        view = dashboard.view()
        assert view.filename == "lease-agreement.pdf"
        assert view.overall_score == 75
        assert view.overall_level is RiskLevel.HIGH
        assert (view.clause_count, view.high_risk_count, view.category_count) == (4, 2, 4)
        assert [c.clause.risk_score for c in view.clauses] == [95, 85, 65, 30]

        offer_task = dashboard.request_counter_offer("clause-2")
        assert offer_task is not None
        await offer_task
        entry = dashboard.negotiation("clause-2")
        assert entry.status is NegotiationStatus.READY
        assert entry.offer is not None
        assert entry.offer.suggested_text.startswith("The landlord may terminate this lease with 30 days")

        report = await dashboard.export_report()
        assert report is not None
        assert report.filename == "lease-agreement.pdf-analysis.pdf"
        assert report.content == ExampleAnalysisClient.REPORT

        titles = [n.title for n in workspace.notices.notices]
        assert titles == [
            "Document Uploaded Successfully!",
            "Counter-offer Generated",
            "Export Complete",
        ]
        await workspace.aclose()

    @pytest.mark.asyncio
    async def test_oversized_file_is_rejected(self, sample_pdf_bytes: bytes) -> None:
        workspace = build_workspace(
            Settings(_env_file=None, analysis_provider="example"),
            scheduler=VirtualScheduler(),
        )

        with pytest.raises(AnalysisValidationError, match="10 MB limit"):
            workspace.upload.select_file(_padded_pdf(sample_pdf_bytes, 11 * MIB))

        assert workspace.upload.state.phase is UploadPhase.IDLE
        assert workspace.notices.notices[-1].title == "File Rejected"
        await workspace.aclose()

    @pytest.mark.asyncio
    async def test_persona_change_and_new_upload(self, pdf_file: SelectedFile) -> None:
        scheduler = VirtualScheduler()
        workspace = build_workspace(
            Settings(_env_file=None, analysis_provider="example", default_persona="freelancer"),
            scheduler=scheduler,
        )
        assert workspace.persona is Persona.FREELANCER

        dashboard = await workspace.open_document("doc-777")
        assert workspace.context.document_id == "doc-777"

        workspace.change_persona(Persona.SMB)
        assert dashboard.persona is Persona.SMB
        assert dashboard.refreshing

        session = workspace.start_new_upload()
        assert workspace.dashboard is None
        assert workspace.context.document_id is None
        assert session.state.phase is UploadPhase.IDLE
        session.select_file(pdf_file)
        task = session.begin_upload(workspace.persona)
        assert task is not None
        await task
        scheduler.advance(2.0)

        assert workspace.dashboard is not None
        assert workspace.dashboard.persona is Persona.SMB
        await workspace.aclose()


class TestHttpWorkflow:
    @pytest.mark.asyncio
    async def test_polls_until_analysis_completes(
        self, pdf_file: SelectedFile, analysis_payload: dict[str, Any]
    ) -> None:
        seen: list[httpx.Request] = []
        polls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            path = request.url.path
            if path == "/api/upload/":
                return httpx.Response(202, json={"id": "doc-9", "status": "processing"})
            if path == "/api/documents/doc-9/":
                polls["count"] += 1
                if polls["count"] < 2:
                    return httpx.Response(200, json={"id": "doc-9", "status": "analyzing"})
                return httpx.Response(200, json={**analysis_payload, "id": "doc-9"})
            if path == "/api/counter_offer/clause-4/":
                return httpx.Response(
                    200,
                    json={"suggested_text": "Tenant is liable for damage beyond normal wear."},
                )
            if path == "/api/documents/doc-9/export/":
                return httpx.Response(200, content=b"%PDF-1.4 server report")
            return httpx.Response(404, json={"detail": "Not found"})

        context = SessionContext()
        context.sign_in("token-1")
        scheduler = VirtualScheduler()
        workspace = build_workspace(
            Settings(
                _env_file=None,
                analysis_provider="http",
                api_base_url="http://analysis.test/api/",
                upload_poll_interval_seconds=0,
            ),
            scheduler=scheduler,
            context=context,
            transport=httpx.MockTransport(handler),
        )

        workspace.upload.select_file(pdf_file)
        task = workspace.upload.begin_upload(Persona.TENANT)
        assert task is not None
        await task
        scheduler.advance(2.0)

        dashboard = workspace.dashboard
        assert dashboard is not None
        assert dashboard.analysis.id == "doc-9"
        assert context.document_id == "doc-9"
        assert polls["count"] == 2
        assert all(r.headers["Authorization"] == "Bearer token-1" for r in seen)
        assert seen[1].url.params["persona"] == "tenant"

        offer_task = dashboard.request_counter_offer("clause-4")
        assert offer_task is not None
        await offer_task
        offer = dashboard.negotiation("clause-4").offer
        assert offer is not None
        assert offer.clause_id == "clause-4"

        report = await dashboard.export_report()
        assert report is not None
        assert report.content == b"%PDF-1.4 server report"
        await workspace.aclose()

    @pytest.mark.asyncio
    async def test_server_error_fails_upload(self, pdf_file: SelectedFile) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"message": "Analysis backend unavailable"})

        workspace = build_workspace(
            Settings(_env_file=None, analysis_provider="http", api_base_url="http://analysis.test/api"),
            scheduler=VirtualScheduler(),
            transport=httpx.MockTransport(handler),
        )

        workspace.upload.select_file(pdf_file)
        task = workspace.upload.begin_upload()
        assert task is not None
        await task

        state = workspace.upload.state
        assert state.phase is UploadPhase.FAILED
        assert state.error == "Analysis backend unavailable"
        assert state.file == pdf_file
        await workspace.aclose()
