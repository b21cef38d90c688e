"""Dashboard Reporting Utilities"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from app.core.enrichment import (
    UNKNOWN_ITEM,
    UNKNOWN_ROLE,
    UNKNOWN_USER,
    Index,
    ResolutionRule,
    enrich_record,
)
from app.core.normalize import as_number, is_present
from app.models.dashboard import DashboardStats, RecentStockIn, RecentStockOut
from app.models.user import user_role

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
RECENT_LIMIT = 3

ITEM_NAME_RULE = ResolutionRule("item_id", "items", "item_name", fallback=UNKNOWN_ITEM, fallback_to_key=True)
USER_NAME_RULE = ResolutionRule("user_id", "users", "resolved_user_name", fallback="")
USER_ROLE_RULE = ResolutionRule("user_id", "users", "resolved_user_role", fallback="", display=user_role)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a backend timestamp into an aware UTC datetime.

    Accepts ISO-8601 strings (with or without ``Z``), plain dates and epoch
    milliseconds. Naive values are taken as UTC. Returns None when unparseable.
    """
    if isinstance(value, bool) or not is_present(value):
        return None

    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def in_month(value: Any, now: datetime) -> bool:
    timestamp = parse_timestamp(value)
    if timestamp is None:
        return False
    return timestamp.year == now.year and timestamp.month == now.month


def count_in_month(records: Iterable[Mapping[str, Any]], date_field: str, now: datetime) -> int:
    return sum(1 for record in records if in_month(record.get(date_field), now))


def most_recent(
    records: Sequence[Mapping[str, Any]],
    date_field: str,
    limit: int = RECENT_LIMIT,
) -> List[Mapping[str, Any]]:
    """Newest first; undated records sort as the epoch."""
    return sorted(
        records,
        key=lambda record: parse_timestamp(record.get(date_field)) or EPOCH,
        reverse=True,
    )[:limit]


def _optional_text(value: Any) -> Optional[str]:
    if not is_present(value):
        return None
    return value if isinstance(value, str) else str(value)


def recent_stock_in(records: Sequence[Mapping[str, Any]], indices: Mapping[str, Index]) -> List[RecentStockIn]:
    entries = []
    for position, record in enumerate(most_recent(records, "received_at")):
        enriched = enrich_record(record, indices, (ITEM_NAME_RULE,))
        entries.append(
            RecentStockIn(
                id=str(record.get("_id") or f"stock-in-{position}"),
                item_name=enriched["item_name"],
                quantity=as_number(record.get("quantity")),
                received_at=_optional_text(record.get("received_at")),
                supplier=_optional_text(record.get("supplier")),
            )
        )
    return entries


def recent_stock_out(records: Sequence[Mapping[str, Any]], indices: Mapping[str, Index]) -> List[RecentStockOut]:
    """Recipient name and role come from the record itself, then the users index."""
    entries = []
    rules = (ITEM_NAME_RULE, USER_NAME_RULE, USER_ROLE_RULE)
    for position, record in enumerate(most_recent(records, "issued_at")):
        enriched = enrich_record(record, indices, rules)
        entries.append(
            RecentStockOut(
                id=str(record.get("_id") or f"stock-out-{position}"),
                item_name=enriched["item_name"],
                quantity=as_number(record.get("quantity")),
                issued_at=_optional_text(record.get("issued_at")),
                user_name=_optional_text(record.get("user_name")) or enriched["resolved_user_name"] or UNKNOWN_USER,
                user_role=_optional_text(record.get("user_role")) or enriched["resolved_user_role"] or UNKNOWN_ROLE,
            )
        )
    return entries


def dashboard_stats(collections: Mapping[str, List[Dict[str, Any]]], now: datetime) -> DashboardStats:
    return DashboardStats(
        total_items=len(collections.get("items", [])),
        stock_in_count=count_in_month(collections.get("stock_in", []), "received_at", now),
        stock_out_count=count_in_month(collections.get("stock_out", []), "issued_at", now),
        dead_stock_count=len(collections.get("deadstock", [])),
        users_count=len(collections.get("users", [])),
        departments_count=len(collections.get("departments", [])),
    )
