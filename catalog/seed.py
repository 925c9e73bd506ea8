"""Seed the catalog database with sample products."""
from .app import create_app
from .models import Product

PRODUCTS = [
    {"name": "Handwoven Basket", "price": 12.5, "category": "Home", "shopkeeper": "Amina Stores", "location": "Central Market"},
    {"name": "Clay Water Pot", "price": 8.0, "category": "Kitchen", "shopkeeper": "Potter's Corner", "location": "Old Town"},
    {"name": "Cotton Scarf", "price": 15.75, "category": "Clothing", "shopkeeper": "Loom House", "location": "Station Road"},
    {"name": "Spice Mix 250g", "price": 4.25, "category": "Grocery", "shopkeeper": "Masala Mart", "location": "Central Market"},
    {"name": "Brass Lamp", "price": 29.99, "category": "Decor", "shopkeeper": "Heritage Crafts", "location": "Museum Street"},
]


def seed(app=None):
    app = app or create_app()
    with app.app_context():
        repository = app.extensions["catalog_repository"]
        repository.ensure_available()
        if Product.query.first():
            print("Catalog already has data. Skipping seed.")
            return 0

        for p in PRODUCTS:
            repository.add(**p)

        print(f"Seeded {len(PRODUCTS)} products.")
        return len(PRODUCTS)


if __name__ == "__main__":
    seed()
