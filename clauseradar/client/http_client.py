import asyncio
from typing import Any

import httpx

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.exceptions import (
    AnalysisNetworkError,
    AnalysisPayloadError,
    AnalysisServiceError,
    AnalysisTimeoutError,
)
from clauseradar.client.files import DEFAULT_MAX_UPLOAD_BYTES, SelectedFile, check_upload_file
from clauseradar.client.payloads import (
    build_counter_offer,
    build_document_analysis,
    build_risk_snapshot,
    is_processing_handle,
)
from clauseradar.logging.logger import Log
from clauseradar.risk.models import CounterOffer, DocumentAnalysis, Persona, RiskSnapshot
from clauseradar.session.context import SessionContext

_DEFAULT_SERVER_MESSAGE = "Server error occurred"
_NETWORK_MESSAGE = "Network error - please check your connection"
_PENDING_STATUSES = frozenset({"pending", "queued", "processing", "analyzing"})


class HttpAnalysisClient(BaseAnalysisClient):
    """Analysis-service adapter built on httpx.AsyncClient."""

    def __init__(
        self,
        *,
        base_url: str,
        context: SessionContext,
        upload_timeout_seconds: float = 30,
        counter_offer_timeout_seconds: float = 15,
        request_timeout_seconds: float = 10,
        poll_interval_seconds: float = 2.0,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._context = context
        self._upload_timeout = upload_timeout_seconds
        self._counter_offer_timeout = counter_offer_timeout_seconds
        self._request_timeout = request_timeout_seconds
        self._poll_interval = poll_interval_seconds
        self._max_upload_bytes = max_upload_bytes
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            transport=transport,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(None),
        )

    async def aclose(self) -> None:
        await self._http.aclose()

    async def upload(
        self,
        file: SelectedFile,
        persona: Persona | None = None,
    ) -> DocumentAnalysis:
        check_upload_file(file, self._max_upload_bytes)
        Log.info(f"Uploading '{file.name}' ({file.size} bytes)", component="client")
        try:
            return await asyncio.wait_for(
                self._upload_and_wait(file, persona), self._upload_timeout
            )
        except asyncio.TimeoutError as exc:
            raise AnalysisTimeoutError(
                f"Analysis of '{file.name}' did not finish within {self._upload_timeout}s"
            ) from exc

    async def fetch_analysis(
        self,
        document_id: str,
        persona: Persona | None = None,
    ) -> DocumentAnalysis:
        response = await self._send(
            "GET",
            f"/documents/{document_id}/",
            timeout=self._request_timeout,
            params=_persona_params(persona),
        )
        return build_document_analysis(self._json(response))

    async def fetch_risk(
        self,
        document_id: str,
        persona: Persona | None = None,
    ) -> RiskSnapshot:
        response = await self._send(
            "GET",
            f"/documents/{document_id}/risk/",
            timeout=self._request_timeout,
            params=_persona_params(persona),
        )
        return build_risk_snapshot(self._json(response), persona)

    async def request_counter_offer(self, clause_id: str) -> CounterOffer:
        response = await self._send(
            "POST",
            f"/counter_offer/{clause_id}/",
            timeout=self._counter_offer_timeout,
        )
        return build_counter_offer(self._json(response), clause_id)

    async def export_report(self, document_id: str) -> bytes:
        response = await self._send(
            "GET",
            f"/documents/{document_id}/export/",
            timeout=self._request_timeout,
        )
        return response.content

    async def _upload_and_wait(
        self,
        file: SelectedFile,
        persona: Persona | None,
    ) -> DocumentAnalysis:
        response = await self._send(
            "POST",
            "/upload/",
            timeout=None,
            files={"document": (file.name, file.content, file.upload_content_type)},
            data=_persona_params(persona),
        )
        data = self._json(response)
        if not isinstance(data, dict):
            return build_document_analysis(data)

        polling = False
        while True:
            status = data.get("status")
            if status == "failed":
                raise AnalysisServiceError(
                    data.get("message") or f"Analysis of document {data.get('id')} failed",
                    response.status_code,
                )
            # an explicit final status ends polling even without clauses
            if not is_processing_handle(data) or (
                status is not None and status not in _PENDING_STATUSES
            ):
                return build_document_analysis(data)
            document_id = str(data["id"])
            if not polling:
                Log.info(f"Upload accepted as document {document_id}, polling", component="client")
                polling = True
            await asyncio.sleep(self._poll_interval)
            response = await self._send(
                "GET",
                f"/documents/{document_id}/",
                timeout=None,
                params=_persona_params(persona),
            )
            data = self._json(response)
            if not isinstance(data, dict):
                raise AnalysisPayloadError("Document analysis must be an object")

    async def _send(
        self,
        method: str,
        path: str,
        *,
        timeout: float | None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Issue one request, translating every transport failure."""
        try:
            request = self._http.request(
                method,
                path,
                headers=self._context.auth_headers(),
                **kwargs,
            )
            if timeout is None:
                response = await request
            else:
                response = await asyncio.wait_for(request, timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            Log.warning(f"{method} {path} timed out", component="client")
            raise AnalysisTimeoutError(f"{method} {path} timed out") from exc
        except httpx.HTTPError as exc:
            Log.warning(f"{method} {path} failed: {exc}", component="client")
            raise AnalysisNetworkError(_NETWORK_MESSAGE) from exc

        if response.is_error:
            message = _error_message(response)
            Log.warning(
                f"{method} {path} returned {response.status_code}: {message}",
                component="client",
            )
            raise AnalysisServiceError(message, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise AnalysisPayloadError(
                f"Invalid JSON response: {exc}", response.status_code
            ) from exc


def _persona_params(persona: Persona | None) -> dict[str, str]:
    return {"persona": persona.value} if persona is not None else {}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or _DEFAULT_SERVER_MESSAGE
    if isinstance(body, dict):
        for key in ("message", "detail", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return _DEFAULT_SERVER_MESSAGE
