# storefront/repos/catalog_repo.py
from sqlalchemy import select, func
from sqlalchemy.orm import Session, joinedload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # categories
    def list_categories(self) -> list[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name.asc())).scalars())

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    # products
    def list_products(self, category_name: str | None = None, newest_first: bool = False) -> list[ProductModel]:
        stmt = select(ProductModel).options(joinedload(ProductModel.category))
        if category_name:
            # case-insensitive match on the category name
            stmt = stmt.join(ProductModel.category).where(
                func.lower(CategoryModel.name) == category_name.lower()
            )
        if newest_first:
            stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        else:
            stmt = stmt.order_by(ProductModel.id)
        return list(self.db.execute(stmt).scalars())

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def count_products(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()
