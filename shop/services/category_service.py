# shop/services/category_service.py
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from shop.data.models.category import CategoryModel
from shop.repos.category_repo import CategoryRepo
from shop.repos.product_repo import ProductRepo
from shop.domain.errors import ValidationError, NotFoundError, ConflictError
from shop.utils.slug import slugify
from shop.utils.logging import get_logger

logger = get_logger(__name__)


def _clean_name(name: str | None) -> str:
    if not name or not name.strip():
        raise ValidationError("Name is required")
    return name.strip()


class CategoryService:
    """
    Categories are owned by the admin who created them.
    Name and slug are unique across all owners; writes match on id and owner
    together, so a foreign category reads as "not found".
    """

    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)
        self.products = ProductRepo(db)

    def create_category(self, name: str | None, owner_id: int) -> CategoryModel:
        name = _clean_name(name)
        slug = slugify(name)

        if self.repo.exists(name, slug):
            raise ConflictError("Category already exists")

        category = CategoryModel(name=name, slug=slug, created_by=owner_id)
        self.repo.add(category)
        self._commit_unique()
        self.repo.refresh(category)

        logger.info(f"Category {category.id} '{slug}' created by admin {owner_id}")
        return category

    def update_category(self, category_id: int, name: str | None, owner_id: int) -> CategoryModel:
        name = _clean_name(name)

        category = self.repo.get_owned(category_id, owner_id)
        if not category:
            raise NotFoundError("Category not found or you are not authorized to update this category")

        category.name = name
        category.slug = slugify(name)
        self._commit_unique()
        self.repo.refresh(category)

        logger.info(f"Category {category_id} renamed to '{category.slug}' by admin {owner_id}")
        return category

    def delete_category(self, category_id: int, owner_id: int) -> None:
        category = self.repo.get_owned(category_id, owner_id)
        if not category:
            raise NotFoundError("Category not found or you are not authorized to delete this category")

        if self.products.count_in_category(category_id):
            raise ConflictError("Category still has products")

        self.repo.delete(category)
        self.repo.commit()
        logger.info(f"Category {category_id} deleted by admin {owner_id}")

    def list_all(self) -> list[CategoryModel]:
        return self.repo.list_all()

    def list_by_owner(self, owner_id: int) -> list[CategoryModel]:
        return self.repo.list_by_owner(owner_id)

    def get_by_slug(self, slug: str) -> CategoryModel:
        category = self.repo.get_by_slug(slug)
        if not category:
            raise NotFoundError("Category not found")
        return category

    def _commit_unique(self):
        try:
            self.repo.commit()
        except IntegrityError as e:
            self.repo.rollback()
            raise ConflictError("Category already exists") from e
