# shop/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop.api.deps import require_admin
from shop.data.database import get_db
from shop.data.models.user import UserModel
from shop.domain.schemas import CategoryIn, CategoryOut, MessageOut
from shop.services.category_service import CategoryService

router = APIRouter(prefix="/api/v1/category", tags=["categories"])


@router.post("/create-category", response_model=CategoryOut, status_code=201)
def create_category(
    payload: CategoryIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CategoryService(db).create_category(payload.name, admin.id)


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return CategoryService(db).list_all()


@router.get("/admin-categories", response_model=List[CategoryOut])
def admin_categories(admin: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return CategoryService(db).list_by_owner(admin.id)


@router.put("/update-category/{category_id}", response_model=CategoryOut)
def update_category(
    category_id: int,
    payload: CategoryIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return CategoryService(db).update_category(category_id, payload.name, admin.id)


@router.delete("/delete-category/{category_id}", response_model=MessageOut)
def delete_category(
    category_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    CategoryService(db).delete_category(category_id, admin.id)
    return {"message": "Category deleted successfully"}


@router.get("/single-category/{slug}", response_model=CategoryOut)
def single_category(slug: str, db: Session = Depends(get_db)):
    return CategoryService(db).get_by_slug(slug)
