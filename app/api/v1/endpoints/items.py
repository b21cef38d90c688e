from fastapi import APIRouter, Depends, Query, status
from typing import Optional
from app.models.item import ITEM_CATEGORIES, ItemForm, ItemOptions
from app.models.listing import ListingResponse, MutationResponse
from app.models.user import SessionUser
from app.core.backend import BackendClient, get_backend_client
from app.core.filtering import CategoricalFilter
from app.core.forms import records_from_response
from app.core.listings import ListingSpec, build_listing
from app.core.resources import CREATE_PATHS, ITEMS
from app.core.security import require_admin
from app.core.validation import validate_item
from app.core.view_state import submit_form
from app.core.logging_config import get_logger

logger = get_logger(__name__)
router = APIRouter()

ITEMS_LISTING = ListingSpec(
    title="items",
    primary=ITEMS,
    search_fields=("name", "description", "category"),
    filters=(CategoricalFilter("category", "category", "All Categories"),),
    fixed_options={"category": ITEM_CATEGORIES},
)


@router.get("", response_model=ListingResponse)
async def list_items(
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """List items with search and category filter"""
    return await build_listing(client, ITEMS_LISTING, search, {"category": category})


@router.get("/options", response_model=ItemOptions)
async def item_options(current_user: SessionUser = Depends(require_admin)):
    """Get the category and unit choices for the item form"""
    return ItemOptions()


@router.post("", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def create_item(
    item_data: ItemForm,
    client: BackendClient = Depends(get_backend_client),
    current_user: SessionUser = Depends(require_admin),
):
    """Create a new item"""
    submission = await submit_form(
        "item",
        validate_item(item_data),
        lambda: client.submit("POST", CREATE_PATHS["items"], item_data.to_payload()),
    )
    logger.info(f"Item '{item_data.name}' created by {current_user.email}")
    return MutationResponse(
        status=submission.status,
        message="Item created successfully!",
        records=records_from_response(submission.result),
    )
