"""/api/categories - System and user categories"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from budget_gateway.api.routes.schemas import CategoryCreate, CategoryResponse
from budget_gateway.api.dependencies import require_user_id
from budget_gateway.infrastructure.database.session import get_db
from budget_gateway.infrastructure.database.repositories import CategoryRepository

router = APIRouter()


@router.get("/categories", response_model=List[CategoryResponse])
def list_categories(
    type_filter: Optional[str] = Query(None, alias="type", description="income or outcome; 'both' categories always match"),
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    """Active system categories followed by the caller's own"""
    return CategoryRepository(db).list_visible(user_id, type_filter)


@router.post("/categories", response_model=CategoryResponse, status_code=201)
def create_category(
    request_body: CategoryCreate,
    user_id: int = Depends(require_user_id),
    db: Session = Depends(get_db),
):
    name = request_body.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required")

    category_repo = CategoryRepository(db)
    if category_repo.find_duplicate(name, user_id, request_body.type) is not None:
        raise HTTPException(status_code=409, detail="A category with this name already exists")

    category = category_repo.create_category(
        user_id=user_id,
        name=name,
        type_=request_body.type,
        icon=request_body.icon or "📌",
        color=request_body.color or "#94a3b8",
    )
    db.commit()
    return category
