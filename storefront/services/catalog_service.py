# storefront/services/catalog_service.py
from decimal import Decimal

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import (
    CategoryOut,
    ProductCreate,
    ProductWithCategoryOut,
)
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PLACEHOLDER_IMAGE = "/placeholder.jpg"


class CatalogService:
    def __init__(self, db: Session):
        self.repo = CatalogRepo(db)

    # queries

    def list_categories(self) -> list[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in self.repo.list_categories()]

    def list_products(self, category: str | None = None, newest_first: bool = False) -> list[ProductWithCategoryOut]:
        return [
            ProductWithCategoryOut.model_validate(p)
            for p in self.repo.list_products(category_name=category, newest_first=newest_first)
        ]

    def get_product(self, product_id: int) -> ProductWithCategoryOut:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return ProductWithCategoryOut.model_validate(product)

    # commands

    def create_product(self, payload: ProductCreate) -> ProductWithCategoryOut:
        self._require_category(payload.category_id)

        product = self.repo.create_product(
            ProductModel(
                name=payload.name,
                description=payload.description,
                price=payload.price,
                image_url=payload.image_url,
                category_id=payload.category_id,
            )
        )
        logger.info(f"Created product {product.id} in category {product.category_id}")
        return ProductWithCategoryOut.model_validate(product)

    def create_product_from_form(
        self,
        name: str | None,
        description: str | None,
        price: str | None,
        category_id: str | None,
        has_image: bool,
    ) -> ProductWithCategoryOut:
        fields = self._parse_form(name, description, price, category_id)
        return self.create_product(
            ProductCreate(**fields, image_url=PLACEHOLDER_IMAGE if has_image else "")
        )

    def update_product_from_form(
        self,
        product_id: int,
        name: str | None,
        description: str | None,
        price: str | None,
        category_id: str | None,
        has_image: bool,
    ) -> ProductWithCategoryOut:
        fields = self._parse_form(name, description, price, category_id)

        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")

        self._require_category(fields["category_id"])

        product.name = fields["name"]
        product.description = fields["description"]
        product.price = fields["price"]
        product.category_id = fields["category_id"]
        if has_image:
            product.image_url = PLACEHOLDER_IMAGE

        self.repo.save(product)
        logger.info(f"Updated product {product.id}")
        return ProductWithCategoryOut.model_validate(product)

    def delete_product(self, product_id: int) -> None:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        self.repo.delete_product(product)
        logger.info(f"Deleted product {product_id}")

    def count_products(self) -> int:
        return self.repo.count_products()

    def _require_category(self, category_id: int):
        if not self.repo.get_category(category_id):
            raise ValueError("Category not found")

    @staticmethod
    def _parse_form(name, description, price, category_id) -> dict:
        try:
            parsed_price = Decimal(price) if price else None
            parsed_category = int(category_id) if category_id else None
        except (ArithmeticError, ValueError):
            raise ValueError("Missing required fields")

        if not name or not description or not parsed_price or not parsed_category:
            raise ValueError("Missing required fields")

        if not parsed_price.is_finite() or parsed_price <= 0 or parsed_category <= 0:
            raise ValueError("Missing required fields")

        return {
            "name": name,
            "description": description,
            "price": parsed_price,
            "category_id": parsed_category,
        }
