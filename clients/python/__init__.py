"""Python client stubs for interacting with the readiness API."""

from .client import ReadinessClient, ApprovalRequest
from .async_client import AsyncReadinessClient

__all__ = ["ReadinessClient", "ApprovalRequest", "AsyncReadinessClient"]
