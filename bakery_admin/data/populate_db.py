import csv
import os

from ..utils.logger import get_logger
from .database import SessionLocal, create_tables
from .models import Product

logger = get_logger()

PRODUCTS_CSV_PATH = os.path.join(os.path.dirname(__file__), "raw", "products.csv")


def _as_bool(value: str) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes")


def populate_products(csv_path: str = PRODUCTS_CSV_PATH, db=None) -> int:
    """Seed the products table from a CSV file; returns the number of rows added.

    Does nothing when the table already holds products.
    """
    owns_session = db is None
    if owns_session:
        create_tables()
        db = SessionLocal()
    try:
        if db.query(Product).count() > 0:
            logger.info("Products table is not empty. Skipping population.")
            return 0

        added = 0
        with open(csv_path, mode="r", encoding="utf-8") as csvfile:
            for row in csv.DictReader(csvfile):
                quantity = int(row.get("quantity") or 0)
                db.add(Product(
                    name=row["name"].strip(),
                    category=row["category"].strip().lower(),
                    price=float(row["price"].replace("$", "")),
                    quantity=quantity,
                    in_stock=quantity > 0,
                    description=row.get("description", ""),
                    is_new=_as_bool(row.get("is_new", "")),
                    image_url=row.get("image_url", ""),
                    created_by="seed",
                    updated_by="seed",
                ))
                added += 1

        db.commit()
        logger.info("Populated the products table with %d products", added)
        return added
    except Exception:
        db.rollback()
        logger.exception("Error populating products table")
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    populate_products()
