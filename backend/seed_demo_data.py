"""Seed a demo catalog: warehouse and outlets, categories, products, one batch.

Run from backend/:  python seed_demo_data.py
Safe to re-run; it stops if the warehouse already exists.
"""
from retailhub.db.init_db import init_db
from retailhub.db.session import SessionLocal
from retailhub.models.store import Store, STORE_TYPE_STORE, STORE_TYPE_WAREHOUSE
from retailhub.services import batch_service, catalog_service
from retailhub.services.category_service import CategoryTree
from retailhub.services.record_store import RecordStore


STORES = [
    ("Mohammadpur", "Road 3, Mohammadpur", STORE_TYPE_WAREHOUSE, False),
    ("Dhanmondi", "Satmasjid Road, Dhanmondi", STORE_TYPE_STORE, False),
    ("Gulshan", "Gulshan Avenue", STORE_TYPE_STORE, False),
    ("Online", None, STORE_TYPE_STORE, True),
]

PRODUCTS = [
    ("Classic Cotton Panjabi", ("Men", "Panjabi"), {"Size": ["M", "L", "XL"], "Color": "White"}),
    ("Slim Fit Denim", ("Men", "Jeans"), {"Size": ["30", "32", "34"]}),
    ("Printed Kurti", ("Women", "Kurti"), {"Size": ["S", "M"], "Color": "Blue"}),
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        stores = RecordStore(db, Store, "Store")
        if stores.find(type=STORE_TYPE_WAREHOUSE):
            print("Demo data already present, nothing to do.")
            return

        for name, address, store_type, is_online in STORES:
            stores.create(name=name, location=address, type=store_type, is_online=is_online)
        print(f"Created {len(STORES)} stores")

        catalog_service.create_field(db, "Size", "Text", "Multiple")
        catalog_service.create_field(db, "Color", "Text", "Single")

        tree = CategoryTree(db)
        category_ids = {}
        for _, (parent, child), _ in PRODUCTS:
            if parent not in category_ids:
                category_ids[parent] = tree.create(parent).id
            if (parent, child) not in category_ids:
                category_ids[(parent, child)] = tree.create(child, parent_id=category_ids[parent]).id

        for name, path, attributes in PRODUCTS:
            product = catalog_service.create_product(db, name, category_ids[path], attributes)
            batch = batch_service.create_batch(db, product.id, "450.00", "890.00", 12)
            print(f"{product.name}: batch {batch.base_code}, labels "
                  f"{batch_service.unit_code(batch.base_code, 1)} .. "
                  f"{batch_service.unit_code(batch.base_code, batch.quantity)}")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
