from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, List, Mapping, Optional
from app.models.listing import ListingResponse, MutationResponse
from app.models.stock import ISSUE_TYPE_MANUAL, StockOutForm
from app.models.user import SessionUser, user_role
from app.core.backend import BackendClient, get_backend_client
from app.core.enrichment import UNKNOWN_ITEM, UNKNOWN_ROLE, UNKNOWN_USER, ResolutionRule, build_index
from app.core.filtering import CategoricalFilter
from app.core.forms import ensure_backend_online, lookup_user, records_from_response, submit_each
from app.core.listings import ListingSpec, build_listing
from app.core.normalize import as_number
from app.core.resources import CREATE_PATHS, DEPARTMENTS, ITEMS, OFFICES, STOCK_INS, STOCK_OUTS, USERS
from app.core.security import require_admin
from app.core.validation import validate_stock_out, validate_stock_out_fields
from app.core.view_state import reject_invalid, submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()


def has_stock(record: Mapping[str, Any]) -> bool:
    return as_number(record.get("quantity")) > 0


def _stock_out_summary(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "total_records": len(records),
        "total_quantity": sum(as_number(r.get("quantity")) for r in records),
        "manual_issues": sum(1 for r in records if r.get("issue_type") == ISSUE_TYPE_MANUAL),
    }


STOCK_OUT_LISTING = ListingSpec(
    title="stock out records",
    primary=STOCK_OUTS,
    lookups={
        "users": USERS,
        "items": ITEMS,
        "departments": DEPARTMENTS,
        "offices": OFFICES,
    },
    rules=(
        ResolutionRule("user_id", "users", "userName", fallback=UNKNOWN_USER),
        ResolutionRule("item_id", "items", "itemName", fallback=UNKNOWN_ITEM),
        ResolutionRule("department_id", "departments", "departmentName"),
        ResolutionRule("office_id", "offices", "officeName"),
        ResolutionRule("user_id", "users", "userRole", fallback=UNKNOWN_ROLE, display=user_role),
    ),
    search_fields=("userName", "itemName", "issue_by", "departmentName", "officeName"),
    filters=(
        CategoricalFilter("issue_type", "issue_type", "All Types"),
        CategoricalFilter("role", "userRole", "All Roles"),
    ),
    summarize=_stock_out_summary,
)

AVAILABLE_STOCK_LISTING = ListingSpec(
    title="available stock",
    primary=STOCK_INS,
    lookups={"items": ITEMS},
    rules=(ResolutionRule("item_id", "items", "itemName", fallback=UNKNOWN_ITEM, fallback_to_key=True),),
    search_fields=("itemName", "invoice_no"),
    include=has_stock,
)


@router.get("", response_model=ListingResponse)
async def list_stock_out(
    search: Optional[str] = Query(None),
    issue_type: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List issued stock with recipient, item and affiliation names"""
    return await build_listing(
        client, STOCK_OUT_LISTING, search, {"issue_type": issue_type, "role": role}
    )


@router.get("/available", response_model=ListingResponse)
async def available_stock(
    search: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Stock-in records that still have quantity left to issue"""
    return await build_listing(client, AVAILABLE_STOCK_LISTING, search)


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_out(
    stock_data: StockOutForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Issue stock to a teacher or staff member, one backend record per line"""
    reject_invalid("stock-out", validate_stock_out_fields(stock_data))
    recipient = await lookup_user(client, stock_data.user_id)
    stock_ins = await client.fetch_collection(STOCK_INS)
    if not stock_ins.ok:
        logger.warning(f"Available stock could not be loaded: {stock_ins.error}")
    available = build_index(r for r in stock_ins.records if has_stock(r))

    async def issue_lines():
        await ensure_backend_online(client, STOCK_INS[0].path)
        return await submit_each(
            client, CREATE_PATHS["stockouts"], stock_data.to_payloads(recipient, available)
        )

    submission = await submit_form(
        "stock-out", validate_stock_out(stock_data, recipient, available), issue_lines
    )

    created: List[Dict[str, Any]] = []
    for result in submission.result:
        created.extend(records_from_response(result))
    logger.info(f"Stock out issued by {current_user.email} to {stock_data.user_id}: {len(stock_data.items)} line(s)")
    return MutationResponse(
        status=submission.status,
        message=f"Stock out created successfully! ({len(stock_data.items)} item(s))",
        records=created,
    )
