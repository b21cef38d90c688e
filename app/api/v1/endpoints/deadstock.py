from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, List, Optional
from app.models.deadstock import DEADSTOCK_REASONS, DeadstockForm
from app.models.listing import DeleteResponse, ListingResponse, MutationResponse
from app.models.user import SessionUser, user_role
from app.core.backend import BackendClient, get_backend_client
from app.core.enrichment import UNKNOWN_ITEM, UNKNOWN_ROLE, UNKNOWN_USER, ResolutionRule
from app.core.filtering import CategoricalFilter
from app.core.forms import delete_record, lookup_user, records_from_response
from app.core.listings import ListingSpec, build_listing
from app.core.normalize import as_number
from app.core.resources import CREATE_PATHS, DEADSTOCKS, ITEMS, USERS
from app.core.security import require_admin
from app.core.validation import validate_deadstock, validate_deadstock_fields
from app.core.view_state import reject_invalid, submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _deadstock_summary(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "total_records": len(records),
        "total_quantity": sum(as_number(r.get("quantity")) for r in records),
        "damaged": sum(1 for r in records if r.get("reason") == "Damaged"),
    }


DEADSTOCK_LISTING = ListingSpec(
    title="dead stock records",
    primary=DEADSTOCKS,
    lookups={"users": USERS, "items": ITEMS},
    rules=(
        ResolutionRule("user_id", "users", "userName", fallback=UNKNOWN_USER),
        ResolutionRule("item_id", "items", "itemName", fallback=UNKNOWN_ITEM),
        ResolutionRule("item_id", "items", "itemCategory", display="category"),
        ResolutionRule("user_id", "users", "userRole", fallback=UNKNOWN_ROLE, display=user_role),
    ),
    search_fields=("userName", "itemName", "reason", "itemCategory"),
    filters=(
        CategoricalFilter("reason", "reason", "All Reasons"),
        CategoricalFilter("role", "userRole", "All Roles"),
    ),
    fixed_options={"reason": DEADSTOCK_REASONS},
    summarize=_deadstock_summary,
)


@router.get("", response_model=ListingResponse)
async def list_deadstock(
    search: Optional[str] = Query(None),
    reason: Optional[str] = Query(None),
    role: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List dead stock reports"""
    return await build_listing(client, DEADSTOCK_LISTING, search, {"reason": reason, "role": role})


@router.get("/reasons", response_model=List[str])
async def deadstock_reasons(current_user: SessionUser = Depends(require_admin)):
    """Get the reasons an item can be written off for"""
    return list(DEADSTOCK_REASONS)


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_deadstock(
    deadstock_data: DeadstockForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Report dead stock"""
    reject_invalid("dead stock", validate_deadstock_fields(deadstock_data))
    reporter = await lookup_user(client, deadstock_data.user_id)
    submission = await submit_form(
        "dead stock",
        validate_deadstock(deadstock_data, reporter),
        lambda: client.submit("POST", CREATE_PATHS["deadstocks"], deadstock_data.to_payload()),
    )
    logger.info(
        f"Dead stock reported by {current_user.email}: item {deadstock_data.item_id}, "
        f"quantity {deadstock_data.quantity}, reason {deadstock_data.reason}"
    )
    return MutationResponse(
        status=submission.status,
        message="Dead stock record created successfully!",
        records=records_from_response(submission.result),
    )


@router.delete("/{deadstock_id}", response_model=DeleteResponse)
async def delete_deadstock(
    deadstock_id: str,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Delete a dead stock record"""
    result = await delete_record(client, "deadstocks", deadstock_id, "Dead stock record")
    logger.info(f"Dead stock record {deadstock_id} deleted by {current_user.email}")
    return result
