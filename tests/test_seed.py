from storefront.data.models import CategoryModel, ProductModel
from storefront.data.seed import seed


def test_seeds_empty_catalog(session_factory, db):
    seed(session_factory)

    assert db.query(CategoryModel).count() == 3
    assert db.query(ProductModel).count() == 6
    wallet = db.query(ProductModel).filter_by(name="Leather Wallet").one()
    assert wallet.category.name == "Accessories"


def test_skips_populated_catalog(session_factory, db, catalog):
    seed(session_factory)

    assert db.query(ProductModel).count() == 2
