from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain.errors import NotFoundError
from storefront.domain.schemas import CartOut, CartItemOut
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    One cart per user, created lazily on the first add.
    commands (add, update, remove) modify state, get is read only
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)

    # query
    def get_items(self, user_id: int) -> list[CartItemOut]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return []
        return [CartItemOut.model_validate(i) for i in self.repo.get_cart_items(cart.id)]

    # commands
    def add_product(self, user_id: int, product_id: int, quantity: int) -> CartOut:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        if not self.catalog.get_product(product_id):
            raise NotFoundError("Product not found")

        cart = self._find_or_create_cart(user_id)

        existing = self.repo.get_cart_item(cart.id, product_id)
        if existing:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing.quantity} -> {existing.quantity + quantity}"
            )
            existing.quantity += quantity
            self.repo.commit()
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
            )

        return self._cart_out(cart)

    def update_quantity(self, user_id: int, product_id: int, quantity: int) -> CartItemOut:
        if quantity <= 0:
            raise ValueError("Quantity must be greater than 0")

        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Cart item not found")

        item.quantity = quantity
        self.repo.commit()
        logger.info(f"Cart {cart.id}: product {product_id} quantity set to {quantity}")
        return CartItemOut.model_validate(item)

    def remove_product(self, user_id: int, product_id: int) -> None:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Cart item not found")

        self.repo.delete_cart_item(item)
        logger.info(f"Removed product {product_id} from cart {cart.id}")

    def _find_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart
        created = self.repo.create_cart(CartModel(user_id=user_id))
        logger.info(f"Created cart {created.id} for user {user_id}")
        return created

    def _cart_out(self, cart: CartModel) -> CartOut:
        return CartOut(
            id=cart.id,
            user_id=cart.user_id,
            items=[CartItemOut.model_validate(i) for i in self.repo.get_cart_items(cart.id)],
        )
