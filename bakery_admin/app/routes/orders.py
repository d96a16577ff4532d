from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...data.database import get_db
from ...data.models import OrderStatus
from ...schemas.order_models import OrderCreate, OrderDetail, OrderListResponse, OrderOut, StatusInfo, StatusUpdate
from ...services.order_workflow import OrderService, next_statuses, progress_step, status_label
from ..auth import require_admin
from ..config import Config

router = APIRouter(prefix="/orders", tags=["orders"], dependencies=[Depends(require_admin)])


@router.get("", response_model=OrderListResponse)
def list_orders(
    status: str = Query("all"),
    search: str = Query(""),
    sort_by: str = Query("date"),
    sort_order: str = Query("desc"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=200),
    db: Session = Depends(get_db),
):
    """Orders table: status filter, search by id/customer/email, sort and load-more paging."""
    size = page_size or Config.ORDERS_PAGE_SIZE
    orders, total, has_more = OrderService(db).list_orders(
        status=status, search=search, sort_by=sort_by, sort_order=sort_order, page=page, page_size=size
    )
    return OrderListResponse(
        items=[OrderOut.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=size,
        has_more=has_more,
    )


@router.get("/statuses", response_model=List[StatusInfo])
def list_statuses():
    return [
        StatusInfo(
            value=s.value,
            label=status_label(s),
            next_statuses=[n.value for n in next_statuses(s)],
            step=progress_step(s),
        )
        for s in OrderStatus
    ]


@router.post("", response_model=OrderOut, status_code=201)
def create_order(data: OrderCreate, db: Session = Depends(get_db)):
    return OrderService(db).create_order(data)


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: str, db: Session = Depends(get_db)):
    return OrderService(db).order_detail(order_id)


@router.patch("/{order_id}/status", response_model=OrderDetail)
def update_status(order_id: str, update: StatusUpdate, db: Session = Depends(get_db)):
    service = OrderService(db)
    service.update_order_status(order_id, update.status)
    return service.order_detail(order_id)
