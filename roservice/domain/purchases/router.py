"""Purchase router - FastAPI endpoints for purchase entries (admin only)"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import PurchaseCreate, PurchaseResponse
from .service import PurchaseService

router = APIRouter(prefix="/purchases", tags=["Purchases"])


def get_purchase_service(db: Session = Depends(get_db)) -> PurchaseService:
    """Dependency injection for PurchaseService"""
    return PurchaseService(db)


@router.post("", response_model=PurchaseResponse, status_code=201)
async def record_purchase(
    data: PurchaseCreate,
    _admin: User = Depends(require_admin),
    service: PurchaseService = Depends(get_purchase_service),
):
    """Record a purchase and add its quantity to stock"""
    return service.record_purchase(data)


@router.get("", response_model=list[PurchaseResponse])
async def list_purchases(
    part_id: Optional[int] = Query(None),
    _admin: User = Depends(require_admin),
    service: PurchaseService = Depends(get_purchase_service),
):
    return service.list_purchases(part_id)
