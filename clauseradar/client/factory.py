import httpx

from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.example_client import ExampleAnalysisClient
from clauseradar.client.http_client import HttpAnalysisClient
from clauseradar.config.settings import Settings
from clauseradar.session.context import SessionContext


class AnalysisClientFactory:
    """Creates the configured analysis-service adapter."""

    PROVIDERS: tuple[str, ...] = ("http", "example")

    @classmethod
    def create(
        cls,
        settings: Settings,
        context: SessionContext,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> BaseAnalysisClient:
        provider = settings.analysis_provider.lower()
        if provider == "example":
            return ExampleAnalysisClient(
                latency_seconds=settings.example_latency_seconds,
                max_upload_bytes=settings.max_upload_size_bytes,
            )
        if provider == "http":
            return HttpAnalysisClient(
                base_url=settings.api_base_url,
                context=context,
                upload_timeout_seconds=settings.upload_timeout_seconds,
                counter_offer_timeout_seconds=settings.counter_offer_timeout_seconds,
                request_timeout_seconds=settings.request_timeout_seconds,
                poll_interval_seconds=settings.upload_poll_interval_seconds,
                max_upload_bytes=settings.max_upload_size_bytes,
                transport=transport,
            )
        raise ValueError(
            f"Unknown analysis provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
