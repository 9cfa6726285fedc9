# shop/repos/product_repo.py
from decimal import Decimal
from typing import Iterable

from sqlalchemy.orm import Session
from sqlalchemy import select, update, bindparam, or_, func

from shop.data.models.product import ProductModel

PUBLIC_LIMIT = 1000


def _keyword_clause(keyword: str):
    pattern = f"%{keyword.lower()}%"
    return or_(
        func.lower(ProductModel.name).like(pattern),
        func.lower(ProductModel.description).like(pattern),
    )


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids: Iterable[int]) -> dict[int, ProductModel]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        rows = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(ids))
        ).scalars()
        return {p.id: p for p in rows}

    def get_owned(self, product_id: int, owner_id: int) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(
                ProductModel.id == product_id,
                ProductModel.created_by == owner_id,
            )
        ).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> ProductModel | None:
        return self.db.execute(
            select(ProductModel).where(ProductModel.slug == slug)
        ).scalar_one_or_none()

    def slug_taken(self, slug: str, exclude_id: int | None = None) -> bool:
        stmt = select(ProductModel.id).where(ProductModel.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(ProductModel.id != exclude_id)
        return self.db.execute(stmt).first() is not None

    def count_in_category(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count(ProductModel.id)).where(ProductModel.category_id == category_id)
        ).scalar_one()

    def find(
        self,
        keyword: str | None = None,
        category_ids: list[int] | None = None,
        price_range: tuple[Decimal, Decimal] | None = None,
        owner_id: int | None = None,
        limit: int | None = None,
    ) -> list[ProductModel]:
        """Each filter is optional; the ones given are AND-combined."""
        stmt = select(ProductModel)
        if keyword:
            stmt = stmt.where(_keyword_clause(keyword))
        if category_ids:
            stmt = stmt.where(ProductModel.category_id.in_(category_ids))
        if price_range:
            low, high = price_range
            stmt = stmt.where(ProductModel.price >= low, ProductModel.price <= high)
        if owner_id is not None:
            stmt = stmt.where(ProductModel.created_by == owner_id)
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(self.db.execute(stmt).scalars().unique())

    def related(self, product_id: int, category_id: int, limit: int) -> list[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel)
                .where(
                    ProductModel.category_id == category_id,
                    ProductModel.id != product_id,
                )
                .order_by(ProductModel.id)
                .limit(limit)
            ).scalars().unique()
        )

    def decrement_stock(self, deltas: list[dict]) -> None:
        """
        Bulk write: one executemany of per-row delta updates.
        Each UPDATE is applied atomically by the database, so concurrent
        orders never overwrite each other's decrement.
        deltas: [{"product_id": ..., "delta": ...}, ...]
        """
        if not deltas:
            return
        table = ProductModel.__table__
        stmt = (
            update(table)
            .where(table.c.id == bindparam("product_id"))
            .values(quantity=table.c.quantity - bindparam("delta"))
        )
        self.db.connection().execute(stmt, deltas)

    def add(self, product: ProductModel) -> None:
        self.db.add(product)

    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()

    def refresh(self, product: ProductModel) -> ProductModel:
        self.db.refresh(product)
        return product
