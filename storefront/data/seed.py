# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, Base, engine
from storefront.data.models import CategoryModel, ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CATEGORIES = ["Clothing", "Electronics", "Accessories"]

PRODUCTS = [
    ("Classic Cotton T-Shirt",
     "Comfortable 100% cotton t-shirt perfect for everyday wear. Available in multiple colors.",
     "29.99", "https://images.unsplash.com/photo-1521572163474-6864f9cf17ab?q=80&w=1000&auto=format&fit=crop",
     "Clothing"),
    ("Wireless Bluetooth Headphones",
     "High-quality wireless headphones with noise cancellation and 30-hour battery life.",
     "199.99", "https://images.unsplash.com/photo-1505740420928-5e560c06d30e?q=80&w=1000&auto=format&fit=crop",
     "Electronics"),
    ("Leather Wallet",
     "Premium genuine leather wallet with RFID blocking technology and multiple card slots.",
     "79.99", "https://images.unsplash.com/photo-1627123424574-724758594e93?q=80&w=1000&auto=format&fit=crop",
     "Accessories"),
    ("Denim Jacket",
     "Vintage-style denim jacket made from premium denim fabric. Perfect for layering.",
     "89.99", "https://images.unsplash.com/photo-1544966503-7cc5ac882d5f?q=80&w=1000&auto=format&fit=crop",
     "Clothing"),
    ("Smartphone",
     "Latest smartphone with advanced camera system, fast processor, and all-day battery.",
     "699.99", "https://images.unsplash.com/photo-1511707171634-5f897ff02aa9?q=80&w=1000&auto=format&fit=crop",
     "Electronics"),
    ("Sunglasses",
     "Stylish sunglasses with UV protection and polarized lenses for clear vision.",
     "149.99", "https://images.unsplash.com/photo-1572635196237-14b3f281503f?q=80&w=1000&auto=format&fit=crop",
     "Accessories"),
]


def seed(session_factory=SessionLocal):
    db = session_factory()
    try:
        # only seed an empty catalog
        if db.query(CategoryModel).first():
            return

        categories = {name: CategoryModel(name=name) for name in CATEGORIES}
        db.add_all(categories.values())

        for name, description, price, image_url, category in PRODUCTS:
            db.add(
                ProductModel(
                    name=name,
                    description=description,
                    price=Decimal(price),
                    image_url=image_url,
                    category=categories[category],
                )
            )
        db.commit()
        logger.info(f"Seeded {len(CATEGORIES)} categories and {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()
