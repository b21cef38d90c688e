from fastapi import APIRouter, Depends
from datetime import datetime, timezone
from app.models.dashboard import AdminDashboardResponse, UserDashboardResponse
from app.models.user import SessionUser, UserRole
from app.core.backend import BackendClient, get_backend_client
from app.core.enrichment import ResolutionRule, build_index, resolve
from app.core.reporting import dashboard_stats, recent_stock_in, recent_stock_out
from app.core.resources import DEADSTOCKS, DEPARTMENTS, ITEMS, OFFICES, STOCK_INS, STOCK_OUTS, USERS
from app.core.security import require_admin, require_portal_user
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()

DEFAULT_AFFILIATION = "Administrative Office"


def get_now() -> datetime:
    return datetime.now(timezone.utc)


@router.get("/admin", response_model=AdminDashboardResponse)
async def admin_dashboard(
    client: BackendClient = Depends(get_backend_client),
    now: datetime = Depends(get_now),
    current_user: SessionUser = Depends(require_admin),
):
    """Overall inventory system status"""
    names = ("items", "deadstock", "users", "departments", "stock_in", "stock_out")
    results = await client.fetch_collections(ITEMS, DEADSTOCKS, USERS, DEPARTMENTS, STOCK_INS, STOCK_OUTS)

    collections = {}
    warnings = []
    for name, result in zip(names, results):
        if not result.ok:
            logger.warning(f"Dashboard: {name} could not be loaded: {result.error}")
            warnings.append(f"Some data could not be loaded: {name}")
        collections[name] = result.records

    indices = {
        "items": build_index(collections["items"]),
        "users": build_index(collections["users"]),
    }

    return AdminDashboardResponse(
        stats=dashboard_stats(collections, now),
        recent_stock_in=recent_stock_in(collections["stock_in"], indices),
        recent_stock_out=recent_stock_out(collections["stock_out"], indices),
        warnings=warnings,
    )


@router.get("/user", response_model=UserDashboardResponse)
async def user_dashboard(
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_portal_user),
):
    """Landing page for teachers and staff"""
    if current_user.role == UserRole.TEACHER.value:
        heading, resource, rule = "Faculty", DEPARTMENTS, ResolutionRule("department_id", "affiliations", "name", fallback="")
    else:
        heading, resource, rule = "Staff", OFFICES, ResolutionRule("office_id", "affiliations", "name", fallback="")

    affiliation = ""
    if current_user.department_id or current_user.office_id:
        result = await client.fetch_collection(resource)
        affiliation = resolve(current_user.model_dump(), rule, {"affiliations": build_index(result.records)})

    return UserDashboardResponse(
        name=current_user.name,
        role=current_user.role,
        title=f"{heading} Dashboard - {affiliation or DEFAULT_AFFILIATION}",
    )
