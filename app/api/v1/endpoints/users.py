from fastapi import APIRouter, Depends, Query, status
from typing import Any, Dict, List, Optional
from app.models.listing import DeleteResponse, ListingResponse, MutationResponse
from app.models.user import SessionUser, UserForm, UserFormOptions, UserLookupResponse, user_role
from app.core.backend import BackendClient, get_backend_client
from app.core.enrichment import ResolutionRule
from app.core.filtering import CategoricalFilter
from app.core.forms import delete_record, lookup_user, records_from_response
from app.core.listings import ListingSpec, build_listing
from app.core.resources import CREATE_PATHS, DEPARTMENTS, OFFICES, STAFF, TEACHERS
from app.core.security import require_admin
from app.core.validation import is_blank, receiver_affiliation_error, validate_user
from app.core.view_state import submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()


def _with_phone(records: List[Dict[str, Any]]) -> int:
    return sum(1 for r in records if not is_blank(r.get("phone")))


def _teacher_summary(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"total": len(records), "with_phone": _with_phone(records)}


def _staff_summary(records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "total": len(records),
        "with_phone": _with_phone(records),
        "offices": len({r["officeName"] for r in records if r.get("officeName") != "N/A"}),
    }


TEACHERS_LISTING = ListingSpec(
    title="teachers",
    primary=TEACHERS,
    lookups={"departments": DEPARTMENTS},
    rules=(
        ResolutionRule("department_id", "departments", "departmentName"),
        ResolutionRule("department_id", "departments", "facultyName", display="faculty"),
    ),
    search_fields=("name", "email", "_id", "departmentName"),
    filters=(CategoricalFilter("department", "departmentName", "All Departments"),),
    lookup_options={"department": "departments"},
    summarize=_teacher_summary,
)

STAFF_LISTING = ListingSpec(
    title="staff",
    primary=STAFF,
    lookups={"offices": OFFICES},
    rules=(
        ResolutionRule("office_id", "offices", "officeName"),
        ResolutionRule("office_id", "offices", "officeSection", display="section"),
    ),
    search_fields=("name", "email", "_id", "officeName", "officeSection"),
    filters=(CategoricalFilter("office", "officeName", "All Offices"),),
    lookup_options={"office": "offices"},
    summarize=_staff_summary,
)


@router.get("/teachers", response_model=ListingResponse)
async def list_teachers(
    search: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List teachers with their department and faculty"""
    return await build_listing(client, TEACHERS_LISTING, search, {"department": department})


@router.get("/staff", response_model=ListingResponse)
async def list_staff(
    search: Optional[str] = Query(None),
    office: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List staff members with their office and section"""
    return await build_listing(client, STAFF_LISTING, search, {"office": office})


@router.get("/lookup/{user_id}", response_model=UserLookupResponse)
async def lookup(
    user_id: str,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Look up a user by ID before recording a stock movement"""
    user = await lookup_user(client, user_id)
    if user is None:
        return UserLookupResponse(found=False)

    return UserLookupResponse(
        found=True,
        user=user,
        role=user_role(user) or None,
        affiliation_error=receiver_affiliation_error(user),
    )


@router.get("/form-options", response_model=UserFormOptions)
async def form_options(
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Get department and office choices for the user form"""
    departments, offices = await client.fetch_collections(DEPARTMENTS, OFFICES)
    for result in (departments, offices):
        if not result.ok:
            logger.warning(f"Form options: {result.resource} unavailable: {result.error}")
    return UserFormOptions(departments=departments.records, offices=offices.records)


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Create a new teacher or staff account"""
    submission = await submit_form(
        "user",
        validate_user(user_data),
        lambda: client.submit("POST", CREATE_PATHS["users"], user_data.to_payload()),
    )
    logger.info(f"User {user_data.email} ({user_data.role}) created by {current_user.email}")
    return MutationResponse(
        status=submission.status,
        message="User created successfully!",
        records=records_from_response(submission.result),
    )


@router.delete("/{user_id}", response_model=DeleteResponse)
async def delete_user(
    user_id: str,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Delete a user"""
    result = await delete_record(client, "users", user_id, "User")
    logger.info(f"User {user_id} deleted by {current_user.email}")
    return result
