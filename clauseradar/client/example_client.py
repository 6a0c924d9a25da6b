"""Example analysis client adapter.

Returns the fixed lease-agreement analysis the front end was designed
against. No network calls; useful for local development, demos and tests.
"""

import asyncio
import copy
from typing import Any, ClassVar

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.files import DEFAULT_MAX_UPLOAD_BYTES, SelectedFile, check_upload_file
from clauseradar.client.payloads import (
    build_counter_offer,
    build_document_analysis,
    build_risk_snapshot,
)
from clauseradar.logging.logger import Log
from clauseradar.risk.models import CounterOffer, DocumentAnalysis, Persona, RiskSnapshot


class ExampleAnalysisClient(BaseAnalysisClient):
    """Adapter serving canned responses after an optional simulated latency."""

    DOCUMENT_ANALYSIS: ClassVar[dict[str, Any]] = {
        "id": "doc-123",
        "filename": "lease-agreement.pdf",
        "status": "completed",
        "overall_risk_score": 75,
        "risk_categories": {
            "Financial Risk": 85,
            "Legal Compliance": 60,
            "Termination Risk": 80,
            "Liability Risk": 70,
        },
        "clauses": [
            {
                "id": "clause-1",
                "original_text": (
                    "The tenant shall pay rent in the amount of $2,500 per month, "
                    "due on the first day of each month without exception."
                ),
                "summary": (
                    "Monthly rent payment of $2,500 due on the 1st of each month "
                    "with no grace period."
                ),
                "risk_level": "medium",
                "risk_score": 65,
                "issues": ["No grace period for late payment", "High monthly amount"],
                "category": "Financial Risk",
            },
            {
                "id": "clause-2",
                "original_text": (
                    "The landlord may terminate this lease at any time with 24 hours "
                    "written notice for any reason."
                ),
                "summary": (
                    "Landlord can terminate lease with only 24 hours notice for any reason."
                ),
                "risk_level": "critical",
                "risk_score": 95,
                "issues": [
                    "Very short notice period",
                    "No cause required",
                    "Tenant has no protection",
                    "Potentially illegal in many jurisdictions",
                ],
                "category": "Termination Risk",
            },
            {
                "id": "clause-3",
                "original_text": (
                    "Tenant agrees to maintain the property in good condition and "
                    "repair any damages."
                ),
                "summary": "Tenant responsible for property maintenance and damage repairs.",
                "risk_level": "low",
                "risk_score": 30,
                "issues": ["Standard maintenance clause"],
                "category": "Legal Compliance",
            },
            {
                "id": "clause-4",
                "original_text": (
                    "Tenant shall be liable for all damages to the property, including "
                    "normal wear and tear, and shall pay triple damages for any breach "
                    "of this agreement."
                ),
                "summary": (
                    "Tenant liable for all damages including normal wear and tear, "
                    "with triple damage penalties."
                ),
                "risk_level": "high",
                "risk_score": 85,
                "issues": [
                    "Unreasonable liability for normal wear and tear",
                    "Excessive penalty clauses",
                    "May be unenforceable",
                ],
                "category": "Liability Risk",
            },
        ],
    }

    COUNTER_OFFER: ClassVar[dict[str, str]] = {
        "suggested_text": (
            "The landlord may terminate this lease with 30 days written notice for "
            "cause, including non-payment of rent or material breach of lease terms."
        ),
        "explanation": (
            "This revision provides more reasonable notice period and requires cause "
            "for termination, giving tenant better protection."
        ),
    }

    REPORT: ClassVar[bytes] = b"%PDF-1.4\n% Clause Radar example report\n%%EOF\n"

    def __init__(
        self,
        latency_seconds: float = 0.0,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ) -> None:
        self._latency = latency_seconds
        self._max_upload_bytes = max_upload_bytes

    async def upload(
        self,
        file: SelectedFile,
        persona: Persona | None = None,
    ) -> DocumentAnalysis:
        check_upload_file(file, self._max_upload_bytes)
        await self._simulate_latency()
        payload = copy.deepcopy(self.DOCUMENT_ANALYSIS)
        payload["filename"] = file.name
        Log.debug(f"Example upload of '{file.name}' as {persona}", component="client")
        return build_document_analysis(payload)

    async def fetch_analysis(
        self,
        document_id: str,
        persona: Persona | None = None,
    ) -> DocumentAnalysis:
        _ = persona
        await self._simulate_latency()
        payload = copy.deepcopy(self.DOCUMENT_ANALYSIS)
        payload["id"] = document_id
        return build_document_analysis(payload)

    async def fetch_risk(
        self,
        document_id: str,
        persona: Persona | None = None,
    ) -> RiskSnapshot:
        await self._simulate_latency()
        payload = copy.deepcopy(self.DOCUMENT_ANALYSIS)
        payload["id"] = document_id
        return build_risk_snapshot(payload, persona)

    async def request_counter_offer(self, clause_id: str) -> CounterOffer:
        await self._simulate_latency()
        return build_counter_offer(dict(self.COUNTER_OFFER), clause_id)

    async def export_report(self, document_id: str) -> bytes:
        _ = document_id
        await self._simulate_latency()
        return self.REPORT

    async def _simulate_latency(self) -> None:
        if self._latency > 0:
            await asyncio.sleep(self._latency)
