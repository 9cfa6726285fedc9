# shop/api/routers/products.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shop.api.deps import require_admin, get_storage, product_form, photo_upload
from shop.data.database import get_db
from shop.data.models.user import UserModel
from shop.domain.schemas import (
    ProductFields,
    ProductOut,
    ProductListOut,
    PublicProductListOut,
    ProductFilterIn,
    AdminFilterIn,
    MessageOut,
)
from shop.services.product_service import ProductService
from shop.services.storage_client import StorageClient, PhotoUpload

router = APIRouter(prefix="/api/v1/product", tags=["products"])


def _listing(products) -> dict:
    return {"products": products, "total": len(products)}


@router.post("/create-product", response_model=ProductOut, status_code=201)
def create_product(
    fields: ProductFields = Depends(product_form),
    photo: PhotoUpload | None = Depends(photo_upload),
    admin: UserModel = Depends(require_admin),
    storage: StorageClient = Depends(get_storage),
    db: Session = Depends(get_db),
):
    return ProductService(db, storage).create_product(fields, photo, admin.id)


@router.put("/update-product/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    fields: ProductFields = Depends(product_form),
    photo: PhotoUpload | None = Depends(photo_upload),
    admin: UserModel = Depends(require_admin),
    storage: StorageClient = Depends(get_storage),
    db: Session = Depends(get_db),
):
    return ProductService(db, storage).update_product(product_id, fields, photo, admin.id)


@router.get("/get-product", response_model=ProductListOut)
def admin_products(admin: UserModel = Depends(require_admin), db: Session = Depends(get_db)):
    return _listing(ProductService(db).list_by_owner(admin.id))


@router.get("/get-product/{slug}", response_model=ProductOut)
def single_product(slug: str, db: Session = Depends(get_db)):
    return ProductService(db).get_by_slug(slug)


@router.delete("/delete/{product_id}", response_model=MessageOut)
def delete_product(
    product_id: int,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    ProductService(db).delete_product(product_id, admin.id)
    return {"message": "Product deleted successfully"}


@router.post("/product-filters", response_model=ProductListOut)
def filter_products(payload: ProductFilterIn, db: Session = Depends(get_db)):
    return _listing(ProductService(db).filter(payload.keyword, payload.checked, payload.radio))


@router.post("/admin-filter-products", response_model=ProductListOut)
def admin_filter_products(
    payload: AdminFilterIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return _listing(ProductService(db).admin_filter(admin.id, payload.keyword))


@router.get("/search/{keyword}", response_model=ProductListOut)
def search_products(keyword: str, db: Session = Depends(get_db)):
    return _listing(ProductService(db).search(keyword))


@router.get("/related-product/{product_id}/{category_id}", response_model=ProductListOut)
def related_products(product_id: int, category_id: int, db: Session = Depends(get_db)):
    return _listing(ProductService(db).related(product_id, category_id))


@router.get("/get-all-products", response_model=PublicProductListOut)
def all_products(db: Session = Depends(get_db)):
    return _listing(ProductService(db).list_all())
