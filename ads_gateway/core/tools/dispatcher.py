"""
Tool Dispatcher
===============

Looks up a tool by name, validates its parameters, performs the backend call
and reshapes the result for API callers.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from pydantic import ValidationError

from ads_gateway.config.logging import get_logger
from ads_gateway.core.backends.base import AdsBackend
from ads_gateway.core.currency import to_minor_units
from ads_gateway.core.errors import InvalidParamsError, ToolError, UnknownToolError, UpstreamError
from ads_gateway.core.reshape import (
    CAMPAIGN_DETAIL_FIELDS,
    CAMPAIGN_LIST_FIELDS,
    reshape_campaign,
    reshape_insight,
)

from .params import (
    CampaignIdParams,
    CreateCampaignParams,
    GetCampaignsParams,
    GetInsightsParams,
    ToolParams,
    UpdateCampaignParams,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """Registry entry for a tool."""

    name: str
    description: str
    params_model: Type[ToolParams]
    handler: str


TOOLS: Dict[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec("get_campaigns", "List campaigns", GetCampaignsParams, "_get_campaigns"),
        ToolSpec(
            "get_campaign_details", "Get one campaign", CampaignIdParams, "_get_campaign_details"
        ),
        ToolSpec("create_campaign", "Create a campaign", CreateCampaignParams, "_create_campaign"),
        ToolSpec("update_campaign", "Update a campaign", UpdateCampaignParams, "_update_campaign"),
        ToolSpec("delete_campaign", "Delete a campaign", CampaignIdParams, "_delete_campaign"),
        ToolSpec("get_insights", "Get performance insights", GetInsightsParams, "_get_insights"),
    )
}

TOOL_NAMES: List[str] = list(TOOLS)


def _budget_fields(params: Any) -> Dict[str, int]:
    fields = {}
    for name in ("daily_budget", "lifetime_budget"):
        value = getattr(params, name, None)
        if value is not None:
            fields[name] = to_minor_units(value)
    return fields


class ToolDispatcher:
    """Executes registered tools against an ads backend."""

    def __init__(self, backend: AdsBackend) -> None:
        self.backend = backend
        self.logger = logger.bind(component="tool_dispatcher", backend=backend.name)

    def describe(self) -> List[Dict[str, str]]:
        """Names and descriptions of the registered tools."""
        return [{"name": spec.name, "description": spec.description} for spec in TOOLS.values()]

    async def execute(self, name: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Execute a tool.

        Args:
            name: Registered tool name
            params: Tool parameters

        Returns:
            JSON-serializable tool result

        Raises:
            UnknownToolError: If the tool is not registered
            InvalidParamsError: If the parameters fail validation
            ToolError: For backend failures, UpstreamError unless more specific
        """
        spec = TOOLS.get(name)
        if spec is None:
            self.logger.warning("Unknown tool requested", tool=name)
            raise UnknownToolError(name)

        try:
            validated = spec.params_model.model_validate(params or {})
        except ValidationError as e:
            message = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'params'}: {err['msg']}"
                for err in e.errors()
            )
            raise InvalidParamsError(f"Invalid parameters for {name}: {message}") from e

        handler: Callable[[Any], Awaitable[Any]] = getattr(self, spec.handler)
        self.logger.info("Executing tool", tool=name)
        try:
            result = await handler(validated)
        except ToolError as e:
            self.logger.error("Tool failed", tool=name, error_code=e.code, error=e.message)
            raise
        except Exception as e:
            self.logger.error(
                "Tool failed with unexpected error", tool=name, error=str(e), exc_info=True
            )
            raise UpstreamError() from e

        self.logger.info("Tool completed", tool=name)
        return result

    async def _get_campaigns(self, params: GetCampaignsParams) -> List[Dict[str, Any]]:
        records = await self.backend.list_campaigns(params.limit, params.status)
        return [reshape_campaign(r, CAMPAIGN_LIST_FIELDS) for r in records[: params.limit]]

    async def _get_campaign_details(self, params: CampaignIdParams) -> Dict[str, Any]:
        record = await self.backend.get_campaign(params.campaign_id)
        return reshape_campaign(record, CAMPAIGN_DETAIL_FIELDS)

    async def _create_campaign(self, params: CreateCampaignParams) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            "name": params.name,
            "objective": params.objective,
            "status": params.status,
            "special_ad_categories": params.special_ad_categories,
        }
        fields.update(_budget_fields(params))
        campaign_id = await self.backend.create_campaign(fields)
        return {"id": campaign_id, "success": True}

    async def _update_campaign(self, params: UpdateCampaignParams) -> Dict[str, Any]:
        fields: Dict[str, Any] = {
            key: value
            for key, value in (("name", params.name), ("status", params.status))
            if value is not None
        }
        fields.update(_budget_fields(params))
        if not fields:
            raise InvalidParamsError("update_campaign requires at least one field to change")
        await self.backend.update_campaign(params.campaign_id, fields)
        return {"id": params.campaign_id, "success": True}

    async def _delete_campaign(self, params: CampaignIdParams) -> Dict[str, Any]:
        await self.backend.delete_campaign(params.campaign_id)
        return {"id": params.campaign_id, "success": True}

    async def _get_insights(self, params: GetInsightsParams) -> List[Dict[str, Any]]:
        rows = await self.backend.get_insights(
            params.campaign_id, params.date_preset, params.fields
        )
        return [reshape_insight(row, params.fields) for row in rows]
