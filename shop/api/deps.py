# shop/api/deps.py
from fastapi import Depends, Header, Form, File, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaError
from sqlalchemy.orm import Session

from shop.data.database import get_db
from shop.data.models.user import UserModel
from shop.domain.schemas import ProductFields
from shop.services.access_service import AccessService
from shop.services.storage_client import StorageClient, PhotoUpload


def get_storage() -> StorageClient:
    return StorageClient()


def get_current_user(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db),
) -> UserModel:
    return AccessService(db).authenticate(authorization)


def require_admin(
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserModel:
    return AccessService(db).require_admin(user)


def product_form(
    name: str | None = Form(None),
    description: str | None = Form(None),
    price: str | None = Form(None),
    category: str | None = Form(None),
    quantity: str | None = Form(None),
    shipping: str | None = Form(None),
) -> ProductFields:
    """Multipart fields -> ProductFields, validated once here."""
    try:
        return ProductFields(
            name=name,
            description=description,
            price=price or None,
            category=category or None,
            quantity=quantity or None,
            shipping=shipping or False,
        )
    except SchemaError as e:
        raise RequestValidationError(e.errors(include_url=False))


async def photo_upload(photo: UploadFile | None = File(None)) -> PhotoUpload | None:
    if photo is None or not photo.filename:
        return None
    content = await photo.read()
    return PhotoUpload(
        filename=photo.filename,
        content_type=photo.content_type or "application/octet-stream",
        content=content,
    )
