"""
Mock Ads Backend
================

In-memory stand-in for the Marketing API. Records are stored the way the SDK
returns them (string minor-unit budgets, ``+0000`` timestamps) so that the
reshaping path is identical for both backends.
"""

import itertools
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from ads_gateway.config.logging import get_logger
from ads_gateway.core.errors import NotFoundError

from .base import AdsBackend

logger = get_logger(__name__)

SDK_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

DATE_PRESET_DAYS = {
    "today": 1,
    "yesterday": 1,
    "last_3d": 3,
    "last_7d": 7,
    "last_14d": 14,
    "last_28d": 28,
    "last_30d": 30,
    "last_90d": 90,
}

SEED_CAMPAIGNS: List[Dict[str, Any]] = [
    {
        "name": "Spring Sale - Traffic",
        "status": "ACTIVE",
        "objective": "OUTCOME_TRAFFIC",
        "daily_budget": "5000",
    },
    {
        "name": "Brand Awareness Q2",
        "status": "ACTIVE",
        "objective": "OUTCOME_AWARENESS",
        "lifetime_budget": "250000",
    },
    {
        "name": "Retargeting - Cart Abandoners",
        "status": "PAUSED",
        "objective": "OUTCOME_SALES",
        "daily_budget": "2500",
    },
]


def _sdk_time(value: datetime) -> str:
    return value.strftime(SDK_TIME_FORMAT)


def _remaining(record: Dict[str, Any]) -> str:
    # No spend is simulated
    return record.get("daily_budget") or record.get("lifetime_budget") or "0"


class MockAdsBackend(AdsBackend):
    """Seeded, deterministic campaign store."""

    name = "mock"

    def __init__(self, seed: bool = True) -> None:
        self._ids = itertools.count(120200000000000001)
        self._campaigns: Dict[str, Dict[str, Any]] = {}
        self.logger = logger.bind(component="mock_backend")
        if seed:
            for fields in SEED_CAMPAIGNS:
                self._insert(dict(fields))

    def _insert(self, fields: Dict[str, Any]) -> str:
        campaign_id = str(next(self._ids))
        now = _sdk_time(datetime.now(timezone.utc))
        record: Dict[str, Any] = {
            "id": campaign_id,
            "name": fields.get("name"),
            "status": fields.get("status", "PAUSED"),
            "effective_status": fields.get("status", "PAUSED"),
            "objective": fields.get("objective"),
            "daily_budget": fields.get("daily_budget"),
            "lifetime_budget": fields.get("lifetime_budget"),
            "budget_remaining": "0",
            "special_ad_categories": list(fields.get("special_ad_categories", [])),
            "created_time": now,
            "updated_time": now,
            "start_time": now,
            "stop_time": None,
        }
        record["budget_remaining"] = _remaining(record)
        self._campaigns[campaign_id] = record
        return campaign_id

    def _require(self, campaign_id: str) -> Dict[str, Any]:
        record = self._campaigns.get(campaign_id)
        if record is None:
            raise NotFoundError(f"Campaign {campaign_id} not found")
        return record

    async def list_campaigns(
        self, limit: int, statuses: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        records = [
            dict(record)
            for record in self._campaigns.values()
            if not statuses or record["effective_status"] in statuses
        ]
        return records[:limit]

    async def get_campaign(self, campaign_id: str) -> Dict[str, Any]:
        return dict(self._require(campaign_id))

    async def create_campaign(self, fields: Dict[str, Any]) -> str:
        # The SDK serializes budgets as strings
        stored = {
            key: str(value) if key.endswith("_budget") and value is not None else value
            for key, value in fields.items()
        }
        campaign_id = self._insert(stored)
        self.logger.info("Mock campaign created", campaign_id=campaign_id)
        return campaign_id

    async def update_campaign(self, campaign_id: str, fields: Dict[str, Any]) -> None:
        record = self._require(campaign_id)
        for key, value in fields.items():
            record[key] = str(value) if key.endswith("_budget") else value
        if "status" in fields:
            record["effective_status"] = fields["status"]
        if "daily_budget" in fields or "lifetime_budget" in fields:
            record["budget_remaining"] = _remaining(record)
        record["updated_time"] = _sdk_time(datetime.now(timezone.utc))

    async def delete_campaign(self, campaign_id: str) -> None:
        self._require(campaign_id)
        del self._campaigns[campaign_id]

    async def get_insights(
        self, campaign_id: Optional[str], date_preset: str, fields: List[str]
    ) -> List[Dict[str, Any]]:
        if campaign_id is not None:
            campaigns = [self._require(campaign_id)]
        else:
            campaigns = list(self._campaigns.values())

        days = DATE_PRESET_DAYS.get(date_preset, 7)
        date_stop = date.today()
        date_start = date_stop - timedelta(days=days - 1)

        rows = []
        for campaign in campaigns:
            # Deterministic figures derived from the campaign ID
            seed = int(campaign["id"]) % 1000
            impressions = (seed + 1) * 1000 * days
            clicks = (seed + 1) * 25 * days
            spend = round((seed + 1) * 3.75 * days, 2)
            row = {
                "campaign_id": campaign["id"],
                "campaign_name": campaign["name"],
                "impressions": str(impressions),
                "clicks": str(clicks),
                "reach": str(int(impressions * 0.8)),
                "spend": f"{spend:.2f}",
                "cpc": f"{spend / clicks:.6f}",
                "cpm": f"{spend / impressions * 1000:.6f}",
                "ctr": f"{clicks / impressions * 100:.6f}",
                "date_start": date_start.isoformat(),
                "date_stop": date_stop.isoformat(),
            }
            rows.append({key: value for key, value in row.items() if key in fields})
        return rows
