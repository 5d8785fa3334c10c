"""
Live Ads Backend
================

Marketing API backend built on the facebook_business SDK. The SDK is blocking,
so every call runs in a worker thread and only the requesting coroutine waits
on it.
"""

import asyncio
import itertools
from typing import Any, Callable, Dict, List, Optional, TypeVar

from facebook_business.api import FacebookAdsApi
from facebook_business.adobjects.adaccount import AdAccount
from facebook_business.adobjects.campaign import Campaign
from facebook_business.exceptions import FacebookRequestError

from ads_gateway.config.logging import get_logger
from ads_gateway.config.settings import Settings
from ads_gateway.core.errors import UpstreamError
from ads_gateway.core.reshape import CAMPAIGN_DETAIL_FIELDS

from .base import AdsBackend

logger = get_logger(__name__)

T = TypeVar("T")


def _export(obj: Any) -> Dict[str, Any]:
    """Plain dict view of an SDK object."""
    if hasattr(obj, "export_all_data"):
        return obj.export_all_data()
    return dict(obj)


class LiveAdsBackend(AdsBackend):
    """Backend that talks to the Facebook Marketing API."""

    name = "live"

    def __init__(self, settings: Settings) -> None:
        self.logger = logger.bind(component="live_backend")
        self.account_id = settings.ad_account_id
        self.api = FacebookAdsApi.init(
            app_id=settings.facebook_app_id,
            app_secret=settings.facebook_app_secret,
            access_token=settings.facebook_access_token,
            api_version=settings.facebook_api_version,
        )
        self.logger.info("Facebook Ads API initialized", account_id=self.account_id)

    def _account(self) -> AdAccount:
        return AdAccount(self.account_id, api=self.api)

    def _campaign(self, campaign_id: str) -> Campaign:
        return Campaign(campaign_id, api=self.api)

    async def _call(self, operation: str, func: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(func)
        except FacebookRequestError as e:
            code = e.api_error_code()
            self.logger.error(
                "Facebook API request failed",
                operation=operation,
                api_error_code=code,
                api_error_message=e.api_error_message(),
                http_status=e.http_status(),
            )
            raise UpstreamError(
                e.api_error_message(), str(code) if code is not None else None
            ) from e

    async def list_campaigns(
        self, limit: int, statuses: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"limit": limit}
        if statuses:
            params["effective_status"] = statuses

        def fetch() -> List[Dict[str, Any]]:
            cursor = self._account().get_campaigns(
                fields=list(CAMPAIGN_DETAIL_FIELDS), params=params
            )
            # The cursor pages lazily; stop once enough rows are read
            return [_export(c) for c in itertools.islice(cursor, limit)]

        return await self._call("list_campaigns", fetch)

    async def get_campaign(self, campaign_id: str) -> Dict[str, Any]:
        def fetch() -> Dict[str, Any]:
            campaign = self._campaign(campaign_id).api_get(fields=list(CAMPAIGN_DETAIL_FIELDS))
            return _export(campaign)

        return await self._call("get_campaign", fetch)

    async def create_campaign(self, fields: Dict[str, Any]) -> str:
        def create() -> str:
            campaign = self._account().create_campaign(params=fields)
            return str(campaign["id"])

        campaign_id = await self._call("create_campaign", create)
        self.logger.info("Campaign created", campaign_id=campaign_id)
        return campaign_id

    async def update_campaign(self, campaign_id: str, fields: Dict[str, Any]) -> None:
        await self._call(
            "update_campaign", lambda: self._campaign(campaign_id).api_update(params=fields)
        )

    async def delete_campaign(self, campaign_id: str) -> None:
        await self._call("delete_campaign", lambda: self._campaign(campaign_id).api_delete())

    async def get_insights(
        self, campaign_id: Optional[str], date_preset: str, fields: List[str]
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"date_preset": date_preset}

        def fetch() -> List[Dict[str, Any]]:
            if campaign_id is not None:
                cursor = self._campaign(campaign_id).get_insights(fields=fields, params=params)
            else:
                cursor = self._account().get_insights(
                    fields=fields, params={**params, "level": "campaign"}
                )
            return [_export(row) for row in cursor]

        return await self._call("get_insights", fetch)
