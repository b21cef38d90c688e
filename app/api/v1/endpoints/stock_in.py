from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, List, Optional
from app.models.listing import ListingResponse, MutationResponse
from app.models.stock import StockInForm
from app.models.user import SessionUser
from app.core.backend import BackendClient, get_backend_client
from app.core.enrichment import UNKNOWN_SUPPLIER, UNKNOWN_USER, ResolutionRule
from app.core.filtering import CategoricalFilter
from app.core.forms import ensure_backend_online, lookup_user, records_from_response, submit_each
from app.core.listings import ListingSpec, build_listing
from app.core.normalize import as_number
from app.core.resources import CREATE_PATHS, DEPARTMENTS, OFFICES, STOCK_INS, SUPPLIERS, USERS
from app.core.security import require_admin
from app.core.validation import validate_stock_in, validate_stock_in_fields
from app.core.view_state import reject_invalid, submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _stock_in_summary(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "total_records": len(records),
        "total_quantity": sum(as_number(r.get("quantity")) for r in records),
        "total_value": sum(as_number(r.get("total_price")) for r in records),
    }


STOCK_IN_LISTING = ListingSpec(
    title="stock in records",
    primary=STOCK_INS,
    lookups={
        "suppliers": SUPPLIERS,
        "users": USERS,
        "departments": DEPARTMENTS,
        "offices": OFFICES,
    },
    rules=(
        ResolutionRule("supplier_id", "suppliers", "supplierName", fallback=UNKNOWN_SUPPLIER),
        ResolutionRule("user_id", "users", "receiverName", fallback=UNKNOWN_USER),
        ResolutionRule("department_id", "departments", "departmentName"),
        ResolutionRule("office_id", "offices", "officeName"),
    ),
    search_fields=("invoice_no", "supplierName", "receiverName", "departmentName", "officeName"),
    filters=(CategoricalFilter("supplier", "supplierName", "All Suppliers"),),
    lookup_options={"supplier": "suppliers"},
    summarize=_stock_in_summary,
)


@router.get("", response_model=ListingResponse)
async def list_stock_in(
    search: Optional[str] = Query(None),
    supplier: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List received stock with supplier, receiver and affiliation names"""
    return await build_listing(client, STOCK_IN_LISTING, search, {"supplier": supplier})


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_stock_in(
    stock_data: StockInForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Record received stock, one backend record per line"""
    reject_invalid("stock-in", validate_stock_in_fields(stock_data))
    receiver = await lookup_user(client, stock_data.user_id)

    async def record_lines():
        await ensure_backend_online(client, SUPPLIERS[0].path)
        return await submit_each(client, CREATE_PATHS["stockins"], stock_data.to_payloads(receiver))

    submission = await submit_form("stock-in", validate_stock_in(stock_data, receiver), record_lines)

    created: List[Dict[str, Any]] = []
    for result in submission.result:
        created.extend(records_from_response(result))
    logger.info(
        f"Stock in recorded by {current_user.email}: invoice {stock_data.invoice_number}, "
        f"{len(stock_data.items)} line(s)"
    )
    return MutationResponse(
        status=submission.status,
        message=f"Stock in created successfully! ({len(stock_data.items)} item(s))",
        records=created,
    )
