from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.models.department import SECTIONS, OfficeForm
from app.models.listing import DeleteResponse, ListingResponse, MutationResponse
from app.models.user import SessionUser
from app.core.backend import BackendClient, get_backend_client
from app.core.filtering import CategoricalFilter
from app.core.forms import delete_record, records_from_response
from app.core.listings import ListingSpec, build_listing
from app.core.resources import CREATE_PATHS, OFFICES
from app.core.security import require_admin
from app.core.validation import validate_office
from app.core.view_state import submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()

OFFICES_LISTING = ListingSpec(
    title="offices",
    primary=OFFICES,
    search_fields=("name", "code", "section"),
    filters=(CategoricalFilter("section", "section", "All Sections"),),
    fixed_options={"section": SECTIONS},
)


@router.get("", response_model=ListingResponse)
async def list_offices(
    search: Optional[str] = Query(None),
    section: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List offices grouped by section"""
    return await build_listing(client, OFFICES_LISTING, search, {"section": section})


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_office(
    office_data: OfficeForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Create a new office"""
    submission = await submit_form(
        "office",
        validate_office(office_data),
        lambda: client.submit("POST", CREATE_PATHS["offices"], office_data.to_payload()),
    )
    logger.info(f"Office '{office_data.name}' created by {current_user.email}")
    return MutationResponse(
        status=submission.status,
        message="Office created successfully!",
        records=records_from_response(submission.result),
    )


@router.delete("/{office_id}", response_model=DeleteResponse)
async def delete_office(
    office_id: str,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Delete an office"""
    result = await delete_record(client, "offices", office_id, "Office")
    logger.info(f"Office {office_id} deleted by {current_user.email}")
    return result
