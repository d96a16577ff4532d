"""Product catalog: list, filter and edit bakery items."""
from datetime import datetime
from typing import Dict, List, Optional

import requests
from sqlalchemy.orm import Session

from ..app.config import Config
from ..app.exceptions import NotFoundError, ValidationError
from ..data.models import Product, PRODUCT_CATEGORIES
from ..schemas.product_models import ProductIn
from ..utils.logger import get_logger

logger = get_logger()

CATEGORY_NAMES = {
    "cakes": "Cakes",
    "pastries": "Pastries",
    "breads": "Breads",
    "cookies": "Cookies",
    "beverages": "Beverages",
    "other": "Other",
}


def is_valid_image_url(url: str) -> bool:
    """HEAD the URL and check that it serves an image."""
    try:
        response = requests.head(url, allow_redirects=True, timeout=Config.IMAGE_CHECK_TIMEOUT)
    except requests.RequestException as e:
        logger.warning("Image URL check failed for %s: %s", url, e)
        return False
    content_type = response.headers.get("content-type", "")
    return response.ok and content_type.startswith("image/")


class ProductCatalog:
    def __init__(self, db: Session):
        self.db = db

    def list_products(self, category: str = "all", search: str = "") -> List[Product]:
        query = self.db.query(Product)
        if category and category != "all":
            query = query.filter(Product.category == category)
        products = query.order_by(Product.name).all()
        term = (search or "").strip().lower()
        if term:
            products = [p for p in products if term in p.name.lower()]
        return products

    def category_counts(self) -> Dict[str, int]:
        counts = {c: 0 for c in PRODUCT_CATEGORIES}
        for (category,) in self.db.query(Product.category).all():
            counts[category] = counts.get(category, 0) + 1
        return counts

    def get_product(self, product_id: int) -> Product:
        product = self.db.get(Product, product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def _validate(self, data: ProductIn) -> None:
        if not data.name or not data.name.strip():
            raise ValidationError("Product name is required", field="name")
        if not data.category:
            raise ValidationError("Category is required", field="category")
        if data.category not in PRODUCT_CATEGORIES:
            raise ValidationError(f"Unknown category '{data.category}'", field="category")
        if data.price is None or data.price <= 0:
            raise ValidationError("Valid price is required", field="price")
        if data.quantity < 0:
            raise ValidationError("Quantity cannot be negative", field="quantity")
        if data.image_url and Config.VALIDATE_IMAGE_URLS and not is_valid_image_url(data.image_url):
            raise ValidationError("Please provide a valid image URL", field="image_url")

    def _apply(self, product: Product, data: ProductIn, actor: Optional[str]) -> None:
        product.name = data.name.strip()
        product.category = data.category
        product.price = float(data.price)
        product.quantity = int(data.quantity)
        product.in_stock = product.quantity > 0
        product.description = (data.description or "").strip()
        product.is_new = bool(data.is_new)
        product.image_url = data.image_url or ""
        product.updated_at = datetime.now()
        product.updated_by = actor

    def add_product(self, data: ProductIn, actor: Optional[str] = None) -> Product:
        self._validate(data)
        product = Product(created_by=actor, created_at=datetime.now())
        self._apply(product, data, actor)
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        logger.info("Bakery item added: id=%s name=%s", product.id, product.name)
        return product

    def update_product(self, product_id: int, data: ProductIn, actor: Optional[str] = None) -> Product:
        product = self.get_product(product_id)
        self._validate(data)
        self._apply(product, data, actor)
        self.db.commit()
        self.db.refresh(product)
        logger.info("Bakery item updated: id=%s name=%s", product.id, product.name)
        return product

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.db.delete(product)
        self.db.commit()
        logger.info("Bakery item deleted: id=%s", product_id)
