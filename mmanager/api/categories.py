"""Category endpoints: list, add, delete and reorder."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mmanager.api.dependencies import get_db, get_owner_id, get_view_cache
from mmanager.core.models import ActionResult, CategoryIn, CategoryOrderIn, CategoryOut, View
from mmanager.services.category_service import CategoryService
from mmanager.services.view_cache import ViewCache

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=list[CategoryOut],
    summary="List categories",
    description="Return every category ordered by its position, then by name.",
)
def list_categories(
    db: Session = Depends(get_db),
    cache: ViewCache = Depends(get_view_cache),
) -> list[CategoryOut]:
    """List categories in display order."""
    return cache.get_or_load(
        View.CATEGORIES,
        "all",
        lambda: [CategoryOut.model_validate(c) for c in CategoryService(db).list_categories()],
    )


@router.post(
    "",
    status_code=201,
    response_model=ActionResult,
    summary="Add a category",
    description=(
        "Append a category after the current last position.\n\n"
        "**Response:**\n"
        "- 201 Created: `{ 'success': true, 'id': '<uuid>' }`.\n"
        "- 409 Conflict: A category with the same name already exists.\n"
        "- 422 Unprocessable Entity: The name is blank."
    ),
    responses={
        409: {
            "description": "Duplicate name.",
            "content": {
                "application/json": {
                    "example": {
                        "success": False,
                        "error": "conflict",
                        "message": 'Category "Food" already exists.',
                        "errors": {},
                    }
                }
            },
        },
    },
)
def add_category(
    payload: CategoryIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Add a category."""
    return cache.confirm(CategoryService(db).add_category(owner_id, payload))


@router.put(
    "/order",
    response_model=ActionResult,
    summary="Reorder categories",
    description=(
        "Persist a new category order. `ordered_ids` must list every category id; "
        "each category's position becomes its index in the list. All positions are written "
        "in one transaction."
    ),
)
def reorder_categories(
    payload: CategoryOrderIn,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Reorder categories."""
    return cache.confirm(CategoryService(db).reorder_categories(owner_id, payload.ordered_ids))


@router.delete(
    "/{category_id}",
    response_model=ActionResult,
    summary="Delete a category",
    description="Delete a category with its budgets and fixed costs. Its transactions become uncategorized.",
)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    owner_id: str | None = Depends(get_owner_id),
    cache: ViewCache = Depends(get_view_cache),
) -> ActionResult:
    """Delete a category."""
    return cache.confirm(CategoryService(db).delete_category(owner_id, category_id))
