import copy
import io
from typing import Any

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from clauseradar.client.example_client import ExampleAnalysisClient
from clauseradar.client.files import SelectedFile
from clauseradar.client.payloads import build_document_analysis
from clauseradar.risk.models import DocumentAnalysis
from tests.fakes import FakeAnalysisClient


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page lease PDF."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Residential Lease Agreement")
    c.drawString(72, 700, "The landlord may terminate this lease at any time.")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def pdf_file(sample_pdf_bytes: bytes) -> SelectedFile:
    return SelectedFile(
        name="lease-agreement.pdf",
        content=sample_pdf_bytes,
        content_type="application/pdf",
    )


@pytest.fixture()
def analysis_payload() -> dict[str, Any]:
    """The lease-agreement analysis as the service returns it."""
    return copy.deepcopy(ExampleAnalysisClient.DOCUMENT_ANALYSIS)


@pytest.fixture()
def sample_analysis(analysis_payload: dict[str, Any]) -> DocumentAnalysis:
    return build_document_analysis(analysis_payload)


@pytest.fixture()
def fake_client(sample_analysis: DocumentAnalysis) -> FakeAnalysisClient:
    return FakeAnalysisClient(sample_analysis)
