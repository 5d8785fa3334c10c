"""
Response Reshaping
==================

Maps backend records (SDK field names, minor units) into the camelCase,
major-unit objects returned to API callers.
"""

from typing import Any, Dict, Iterable, Optional

from .currency import to_major_units

CAMPAIGN_LIST_FIELDS = (
    "id",
    "name",
    "status",
    "objective",
    "daily_budget",
    "lifetime_budget",
    "created_time",
    "start_time",
    "stop_time",
)

CAMPAIGN_DETAIL_FIELDS = CAMPAIGN_LIST_FIELDS + (
    "effective_status",
    "budget_remaining",
    "updated_time",
    "special_ad_categories",
)

MONETARY_FIELDS = frozenset({"daily_budget", "lifetime_budget", "budget_remaining"})

INSIGHT_FIELDS = (
    "campaign_id",
    "campaign_name",
    "impressions",
    "clicks",
    "spend",
    "cpc",
    "cpm",
    "ctr",
    "reach",
    "date_start",
    "date_stop",
)

INTEGER_INSIGHT_FIELDS = frozenset({"impressions", "clicks", "reach"})
DECIMAL_INSIGHT_FIELDS = frozenset({"spend", "cpc", "cpm", "ctr"})


def camel_case(name: str) -> str:
    """Convert a snake_case field name to camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def reshape_campaign(
    record: Dict[str, Any], fields: Iterable[str] = CAMPAIGN_LIST_FIELDS
) -> Dict[str, Any]:
    """Rename campaign fields and convert budgets to major units."""
    result: Dict[str, Any] = {}
    for field in fields:
        value = record.get(field)
        if field in MONETARY_FIELDS:
            value = to_major_units(value)
        result[camel_case(field)] = value
    return result


def _number(value: Any, cast: type) -> Optional[Any]:
    if value is None or value == "":
        return None
    return cast(float(value)) if cast is int else cast(value)


def reshape_insight(
    record: Dict[str, Any], fields: Iterable[str] = INSIGHT_FIELDS
) -> Dict[str, Any]:
    """Rename insight fields and coerce the SDK's numeric strings."""
    result: Dict[str, Any] = {}
    for field in fields:
        value = record.get(field)
        if field in INTEGER_INSIGHT_FIELDS:
            value = _number(value, int)
        elif field in DECIMAL_INSIGHT_FIELDS:
            value = _number(value, float)
        result[camel_case(field)] = value
    return result
