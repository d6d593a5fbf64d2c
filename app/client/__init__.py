"""HTTP client and optimistic in-memory workspaces for the PipeDesk API."""

from app.client.api import CRMClient
from app.client.workspace import DealWorkspace, FailedWrite, OptimisticCollection

__all__ = ["CRMClient", "DealWorkspace", "FailedWrite", "OptimisticCollection"]
