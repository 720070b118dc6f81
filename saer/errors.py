from __future__ import annotations

from typing import Optional


class DashboardError(Exception):
    """Base failure raised by fetchers and atomic dashboard batches."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"{source}: {detail}")
        self.source = source
        self.detail = detail


class TransportFailure(DashboardError):
    """Network or HTTP-level failure talking to the remote data service."""

    def __init__(self, source: str, detail: str, status_code: Optional[int] = None) -> None:
        super().__init__(source, detail)
        self.status_code = status_code


class DomainFailure(DashboardError):
    """The remote service answered, but with ``success: false`` or an unusable payload."""
