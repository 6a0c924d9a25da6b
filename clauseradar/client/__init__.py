from clauseradar.client.base import BaseAnalysisClient
from clauseradar.client.example_client import ExampleAnalysisClient
from clauseradar.client.factory import AnalysisClientFactory
from clauseradar.client.http_client import HttpAnalysisClient

__all__ = [
    "AnalysisClientFactory",
    "BaseAnalysisClient",
    "ExampleAnalysisClient",
    "HttpAnalysisClient",
]
