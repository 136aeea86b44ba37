from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetsmart.domain.errors import FetchError, NotFoundError
from budgetsmart.domain.models import Category, User
from budgetsmart.domain.services.category_service import (
    create_category,
    delete_category,
    get_categories,
    update_category,
)
from budgetsmart.domain.services.user_service import get_current_user, get_db

router = APIRouter(prefix="/api/categories", tags=["categories"])


class CategoryRequest(BaseModel):
    name: str
    icon: str = ""
    color: int = 0


class CategoryResponse(BaseModel):
    id: str
    name: str
    icon: str
    color: int

    @staticmethod
    def from_domain(c: Category) -> "CategoryResponse":
        return CategoryResponse(id=c.id, name=c.name, icon=c.icon, color=c.color)


@router.get("", response_model=List[CategoryResponse])
def get_categories_endpoint(
    db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    try:
        categories = get_categories(db, current_user.id)
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to load categories: {e}")
    return [CategoryResponse.from_domain(c) for c in categories]


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category_endpoint(
    req: CategoryRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        category = create_category(db, current_user.id, req.name, req.icon, req.color)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CategoryResponse.from_domain(category)


@router.put("/{category_id}", response_model=CategoryResponse)
def update_category_endpoint(
    category_id: str,
    req: CategoryRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        category = update_category(
            db, current_user.id, category_id, req.name, req.icon, req.color
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CategoryResponse.from_domain(category)


@router.delete("/{category_id}")
def delete_category_endpoint(
    category_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        removed_budgets = delete_category(db, current_user.id, category_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FetchError as e:
        raise HTTPException(status_code=503, detail=f"Failed to delete category: {e}")
    return {"deleted": True, "budgets_deleted": removed_budgets}
