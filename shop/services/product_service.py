# shop/services/product_service.py
from decimal import Decimal

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from shop.data.models.product import ProductModel
from shop.repos.product_repo import ProductRepo, PUBLIC_LIMIT
from shop.repos.category_repo import CategoryRepo
from shop.domain.errors import ValidationError, NotFoundError, ConflictError
from shop.domain.schemas import ProductFields
from shop.services.storage_client import StorageClient, PhotoUpload
from shop.utils.slug import slugify, with_suffix
from shop.utils.settings import MAX_PHOTO_BYTES
from shop.utils.logging import get_logger

logger = get_logger(__name__)

#checked in this order, first missing one is reported
REQUIRED_FIELDS = (
    ("name", "Name"),
    ("description", "Description"),
    ("price", "Price"),
    ("category", "Category"),
    ("quantity", "Quantity"),
)

RELATED_LIMIT = 4


class ProductService:
    """
    Product catalog.
    commands (create, update, delete) are scoped to the owning admin,
    queries are public unless they take an owner_id.
    """

    def __init__(self, db: Session, storage: StorageClient | None = None):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)
        self.storage = storage or StorageClient()

    # ------------------------------------------------------------ commands

    def create_product(self, fields: ProductFields, photo: PhotoUpload | None, owner_id: int) -> ProductModel:
        self._validate(fields, photo)

        slug = self._unique_slug(fields.name)

        photo_url = None
        if photo:
            photo_url = self.storage.upload(photo)

        product = ProductModel(
            name=fields.name.strip(),
            slug=slug,
            description=fields.description,
            price=fields.price,
            category_id=fields.category,
            quantity=fields.quantity,
            shipping=fields.shipping,
            photo=photo_url,
            created_by=owner_id,
        )
        self.repo.add(product)
        self._commit_unique(photo_url)

        logger.info(f"Product {product.id} '{slug}' created by admin {owner_id}")
        return self.repo.refresh(product)

    def update_product(
        self,
        product_id: int,
        fields: ProductFields,
        photo: PhotoUpload | None,
        owner_id: int,
    ) -> ProductModel:
        self._validate(fields, photo)

        product = self.repo.get_owned(product_id, owner_id)
        if not product:
            raise NotFoundError("Product not found or you are not authorized to update this product")

        #slug is re-derived on every update, even when the name is unchanged
        product.slug = self._unique_slug(fields.name, exclude_id=product.id)
        product.name = fields.name.strip()
        product.description = fields.description
        product.price = fields.price
        product.category_id = fields.category
        product.quantity = fields.quantity
        product.shipping = fields.shipping

        photo_url = None
        if photo:
            photo_url = self.storage.upload(photo)
            product.photo = photo_url

        self._commit_unique(photo_url)

        logger.info(f"Product {product_id} updated by admin {owner_id}, slug '{product.slug}'")
        return self.repo.refresh(product)

    def delete_product(self, product_id: int, owner_id: int) -> None:
        product = self.repo.get_owned(product_id, owner_id)
        if not product:
            raise NotFoundError("Product not found or you are not authorized to delete this product")

        self.repo.delete(product)
        self.repo.commit()
        logger.info(f"Product {product_id} deleted by admin {owner_id}")

    # ------------------------------------------------------------ queries

    def list_by_owner(self, owner_id: int) -> list[ProductModel]:
        return self.repo.find(owner_id=owner_id)

    def list_all(self) -> list[ProductModel]:
        return self.repo.find(limit=PUBLIC_LIMIT)

    def get_by_slug(self, slug: str) -> ProductModel:
        product = self.repo.get_by_slug(slug)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def filter(
        self,
        keyword: str | None = None,
        category_ids: list[int] | None = None,
        price_range: list[Decimal] | None = None,
    ) -> list[ProductModel]:
        """
        keyword: case-insensitive substring of name or description
        category_ids: product category must be one of them
        price_range: [min, max], inclusive; anything but a pair is ignored
        """
        keyword = keyword.strip() if keyword else None
        bounds = None
        if price_range and len(price_range) == 2:
            bounds = (min(price_range), max(price_range))
        return self.repo.find(keyword=keyword, category_ids=category_ids or None, price_range=bounds)

    def admin_filter(self, owner_id: int, keyword: str | None = None) -> list[ProductModel]:
        keyword = keyword.strip() if keyword else None
        return self.repo.find(keyword=keyword, owner_id=owner_id)

    def search(self, keyword: str | None) -> list[ProductModel]:
        # blank keyword -> everything
        if not keyword or not keyword.strip():
            return self.repo.find()
        return self.repo.find(keyword=keyword.strip())

    def related(self, product_id: int, category_id: int, limit: int = RELATED_LIMIT) -> list[ProductModel]:
        return self.repo.related(product_id, category_id, limit)

    # ------------------------------------------------------------ helpers

    def _validate(self, fields: ProductFields, photo: PhotoUpload | None) -> None:
        for attr, label in REQUIRED_FIELDS:
            value = getattr(fields, attr)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationError(f"{label} is required")

        if photo and photo.size > MAX_PHOTO_BYTES:
            raise ValidationError("Photo should be less than 1MB")

        if not self.categories.get_category(fields.category):
            raise NotFoundError("Category not found")

    def _unique_slug(self, name: str, exclude_id: int | None = None) -> str:
        base = slugify(name)
        n = 0
        while self.repo.slug_taken(with_suffix(base, n), exclude_id=exclude_id):
            n += 1
        return with_suffix(base, n)

    def _commit_unique(self, photo_url: str | None = None):
        try:
            self.repo.commit()
        except IntegrityError as e:
            #two writers raced for the same slug
            self.repo.rollback()
            if photo_url:
                #the store has no delete call, the object is left behind
                logger.warning(f"Slug conflict after upload, orphaned photo {photo_url}")
            raise ConflictError("Product slug already taken, please retry") from e
