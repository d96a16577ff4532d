from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...schemas.customer_models import CustomerOut, CustomerUpdate
from ...services.customers import CustomerDirectory
from ..auth import require_admin

router = APIRouter(prefix="/customers", tags=["customers"], dependencies=[Depends(require_admin)])


@router.get("", response_model=List[CustomerOut])
def list_customers(search: str = Query(""), sort_by: str = Query("recent"), db: Session = Depends(get_db)):
    return CustomerDirectory(db).list_customers(search=search, sort_by=sort_by)


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    return CustomerDirectory(db).get_customer(customer_id)


@router.patch("/{customer_id}", response_model=CustomerOut)
def update_customer(customer_id: int, update: CustomerUpdate, db: Session = Depends(get_db)):
    return CustomerDirectory(db).update_customer(customer_id, update)
