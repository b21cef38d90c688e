from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.models.listing import ListingResponse, MutationResponse
from app.models.supplier import SupplierForm
from app.models.user import SessionUser
from app.core.backend import BackendClient, get_backend_client
from app.core.forms import records_from_response
from app.core.listings import ListingSpec, build_listing
from app.core.resources import CREATE_PATHS, SUPPLIERS
from app.core.security import require_admin
from app.core.validation import validate_supplier
from app.core.view_state import submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()

SUPPLIERS_LISTING = ListingSpec(
    title="suppliers",
    primary=SUPPLIERS,
    search_fields=("name", "contactPerson", "email"),
)


@router.get("", response_model=ListingResponse)
async def list_suppliers(
    search: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List suppliers"""
    return await build_listing(client, SUPPLIERS_LISTING, search)


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(
    supplier_data: SupplierForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Create a new supplier"""
    submission = await submit_form(
        "supplier",
        validate_supplier(supplier_data),
        lambda: client.submit("POST", CREATE_PATHS["suppliers"], supplier_data.to_payload()),
    )
    logger.info(f"Supplier '{supplier_data.name}' created by {current_user.email}")
    return MutationResponse(
        status=submission.status,
        message="Supplier created successfully!",
        records=records_from_response(submission.result),
    )
