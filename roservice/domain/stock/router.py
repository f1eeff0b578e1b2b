"""Stock router - FastAPI endpoints for spare-parts inventory (admin only)"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import User
from .schemas import (
    PartCreate,
    PartResponse,
    PartUpdate,
    PartWithLogsResponse,
    StockAdjustRequest,
    StockAdjustResponse,
    StockLogResponse,
)
from .service import StockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stock", tags=["Stock"])


def get_stock_service(db: Session = Depends(get_db)) -> StockService:
    """Dependency injection for StockService"""
    return StockService(db)


@router.get("", response_model=list[PartWithLogsResponse])
async def list_parts(
    _admin: User = Depends(require_admin),
    service: StockService = Depends(get_stock_service),
):
    """All parts with their stock logs"""
    return service.list_parts(include_logs=True)


@router.post("", response_model=PartResponse, status_code=201)
async def create_part(
    data: PartCreate,
    _admin: User = Depends(require_admin),
    service: StockService = Depends(get_stock_service),
):
    return service.create_part(data)


@router.patch("/{part_id}", response_model=PartResponse)
async def update_part(
    part_id: int,
    data: PartUpdate,
    _admin: User = Depends(require_admin),
    service: StockService = Depends(get_stock_service),
):
    return service.update_part(part_id, data)


@router.patch("/{part_id}/add", response_model=StockAdjustResponse)
async def adjust_stock(
    part_id: int,
    data: StockAdjustRequest,
    _admin: User = Depends(require_admin),
    service: StockService = Depends(get_stock_service),
):
    """Apply a signed quantity change to a part"""
    quantity = service.adjust_stock(part_id, data.quantity, data.reason)
    return StockAdjustResponse(message="Stock updated successfully", part_id=part_id, quantity=quantity)


@router.get("/{part_id}/logs", response_model=list[StockLogResponse])
async def get_stock_logs(
    part_id: int,
    _admin: User = Depends(require_admin),
    service: StockService = Depends(get_stock_service),
):
    return service.get_logs(part_id)
