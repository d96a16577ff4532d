from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...data.models import User
from ...schemas.io_models import MessageResponse
from ...schemas.product_models import Category, ProductIn, ProductListResponse, ProductOut
from ...services.catalog import CATEGORY_NAMES, ProductCatalog
from ..auth import require_admin

router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(require_admin)])


@router.get("", response_model=ProductListResponse)
def list_products(
    category: str = Query("all"),
    search: str = Query(""),
    db: Session = Depends(get_db),
):
    catalog = ProductCatalog(db)
    products = catalog.list_products(category=category, search=search)
    return ProductListResponse(
        items=[ProductOut.model_validate(p) for p in products],
        total=len(products),
        category_counts=catalog.category_counts(),
    )


@router.get("/categories", response_model=List[Category])
def list_categories(db: Session = Depends(get_db)):
    counts = ProductCatalog(db).category_counts()
    return [Category(id=key, name=name, count=counts.get(key, 0)) for key, name in CATEGORY_NAMES.items()]


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return ProductCatalog(db).get_product(product_id)


@router.post("", response_model=ProductOut, status_code=201)
def add_product(data: ProductIn, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return ProductCatalog(db).add_product(data, actor=admin.email)


@router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: int, data: ProductIn, db: Session = Depends(get_db),
                   admin: User = Depends(require_admin)):
    return ProductCatalog(db).update_product(product_id, data, actor=admin.email)


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    ProductCatalog(db).delete_product(product_id)
    return MessageResponse(message="Product deleted successfully")
