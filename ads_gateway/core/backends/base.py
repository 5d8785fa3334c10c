"""
Ads Backend Interface
=====================

Every value crossing this interface uses the Marketing API's own shape:
snake_case field names and monetary amounts in integer minor units.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class AdsBackend(ABC):
    """Campaign and insights operations used by the tool dispatcher."""

    name: str = "abstract"

    @abstractmethod
    async def list_campaigns(
        self, limit: int, statuses: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        """Return at most ``limit`` campaigns, optionally filtered by status."""

    @abstractmethod
    async def get_campaign(self, campaign_id: str) -> Dict[str, Any]:
        """Return one campaign record."""

    @abstractmethod
    async def create_campaign(self, fields: Dict[str, Any]) -> str:
        """Create a campaign and return its ID."""

    @abstractmethod
    async def update_campaign(self, campaign_id: str, fields: Dict[str, Any]) -> None:
        """Apply ``fields`` to an existing campaign."""

    @abstractmethod
    async def delete_campaign(self, campaign_id: str) -> None:
        """Delete a campaign."""

    @abstractmethod
    async def get_insights(
        self, campaign_id: Optional[str], date_preset: str, fields: List[str]
    ) -> List[Dict[str, Any]]:
        """Return insights rows for a campaign, or for the whole account."""

    async def close(self) -> None:
        """Release backend resources."""
