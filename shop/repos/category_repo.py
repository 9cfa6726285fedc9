# shop/repos/category_repo.py
from sqlalchemy.orm import Session
from sqlalchemy import select, or_

from shop.data.models.category import CategoryModel


class CategoryRepo:
    def __init__(self, db: Session):
        self.db = db

    def exists(self, name: str, slug: str) -> bool:
        found = self.db.execute(
            select(CategoryModel.id).where(
                or_(CategoryModel.name == name, CategoryModel.slug == slug)
            )
        ).first()
        return found is not None

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    #id and owner in one predicate: missing and foreign look the same
    def get_owned(self, category_id: int, owner_id: int) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(
                CategoryModel.id == category_id,
                CategoryModel.created_by == owner_id,
            )
        ).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> CategoryModel | None:
        return self.db.execute(
            select(CategoryModel).where(CategoryModel.slug == slug)
        ).scalar_one_or_none()

    def list_all(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.id)).scalars())

    def list_by_owner(self, owner_id: int) -> list[CategoryModel]:
        return list(
            self.db.execute(
                select(CategoryModel)
                .where(CategoryModel.created_by == owner_id)
                .order_by(CategoryModel.id)
            ).scalars()
        )

    def add(self, category: CategoryModel) -> None:
        self.db.add(category)

    def delete(self, category: CategoryModel) -> None:
        self.db.delete(category)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, category: CategoryModel) -> CategoryModel:
        self.db.refresh(category)
        return category
