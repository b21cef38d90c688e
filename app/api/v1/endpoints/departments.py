from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.models.department import FACULTIES, DepartmentForm
from app.models.listing import DeleteResponse, ListingResponse, MutationResponse
from app.models.user import SessionUser
from app.core.backend import BackendClient, get_backend_client
from app.core.filtering import CategoricalFilter
from app.core.forms import delete_record, records_from_response
from app.core.listings import ListingSpec, build_listing
from app.core.resources import CREATE_PATHS, DEPARTMENTS
from app.core.security import require_admin
from app.core.validation import validate_department
from app.core.view_state import submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()

DEPARTMENTS_LISTING = ListingSpec(
    title="departments",
    primary=DEPARTMENTS,
    search_fields=("name", "code", "faculty"),
    filters=(CategoricalFilter("faculty", "faculty", "All Faculties"),),
    fixed_options={"faculty": FACULTIES},
)


@router.get("", response_model=ListingResponse)
async def list_departments(
    search: Optional[str] = Query(None),
    faculty: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List departments grouped by faculty"""
    return await build_listing(client, DEPARTMENTS_LISTING, search, {"faculty": faculty})


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_department(
    department_data: DepartmentForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Create a new department"""
    submission = await submit_form(
        "department",
        validate_department(department_data),
        lambda: client.submit("POST", CREATE_PATHS["departments"], department_data.to_payload()),
    )
    logger.info(f"Department '{department_data.code}' created by {current_user.email}")
    return MutationResponse(
        status=submission.status,
        message="Department created successfully!",
        records=records_from_response(submission.result),
    )


@router.delete("/{department_id}", response_model=DeleteResponse)
async def delete_department(
    department_id: str,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Delete a department"""
    result = await delete_record(client, "departments", department_id, "Department")
    logger.info(f"Department {department_id} deleted by {current_user.email}")
    return result
