# app/domains/stock/schemas.py

"""
'stock' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import Field
from sqlmodel import SQLModel

from app.domains.shared.schemas import NonNullableUpdate

from .models import MovementReason, MovementStatus, MovementType, ValuationMethod


class _Timestamps(SQLModel):
    id: int
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 1. warehouses 스키마
# =============================================================================
class WarehouseBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    address: Optional[str] = Field(None, max_length=255)
    is_default: bool = False


class WarehouseCreate(WarehouseBase):
    pass


class WarehouseUpdate(NonNullableUpdate):
    non_nullable_fields = ("name", "is_default")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    address: Optional[str] = Field(None, max_length=255)
    is_default: Optional[bool] = None


class WarehouseResponse(WarehouseBase, _Timestamps):
    pass


# =============================================================================
# 2. inventories 스키마
# =============================================================================
class InventorySettings(SQLModel):
    """재고 생성/수정 시 공통으로 받는 설정 값 (수량 필드 제외)"""
    minimum_quantity: Optional[float] = None
    maximum_quantity: Optional[float] = None
    safety_stock_level: Optional[float] = None
    economic_order_quantity: Optional[float] = None
    lead_time_in_days: Optional[int] = Field(None, ge=0)
    unit_cost: Optional[float] = Field(None, ge=0)
    valuation_method: Optional[ValuationMethod] = None
    back_orderable: Optional[bool] = None
    is_active: Optional[bool] = None
    stock_location: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class InventoryCreate(InventorySettings):
    """
    재고 생성 스키마. 상품은 SKU로 지정하며, 창고를 생략하면 기본 창고가 사용됩니다.
    수량 관련 값의 상세 검증은 서비스 계층에서 수행합니다.
    """
    sku: str = Field(..., description="상품 SKU")
    warehouse_id: Optional[int] = Field(None, gt=0)
    quantity: float = Field(..., description="초기 재고 수량")
    available_quantity: Optional[float] = None
    reserved_quantity: Optional[float] = None
    reorder_threshold: Optional[float] = None
    reorder_quantity: Optional[float] = None
    in_stock: Optional[bool] = None


class InventoryUpdate(NonNullableUpdate, InventorySettings):
    """재고 설정 수정 스키마. 수량/가용/예약 수량은 이 경로로 변경할 수 없습니다."""
    non_nullable_fields = (
        "safety_stock_level", "reorder_threshold", "reorder_quantity",
        "valuation_method", "back_orderable", "is_active",
    )

    reorder_threshold: Optional[float] = Field(None, ge=0)
    reorder_quantity: Optional[float] = Field(None, gt=0)


class InventoryQuantityUpdate(SQLModel):
    new_quantity: float = Field(..., ge=0, description="조정 후 재고 수량")


class InventoryResponse(_Timestamps):
    product_id: int
    warehouse_id: int
    quantity: float
    available_quantity: float
    reserved_quantity: float
    minimum_quantity: Optional[float] = None
    maximum_quantity: Optional[float] = None
    safety_stock_level: float
    economic_order_quantity: Optional[float] = None
    reorder_threshold: float
    reorder_quantity: float
    lead_time_in_days: Optional[int] = None
    unit_cost: Optional[float] = None
    total_value: Optional[float] = None
    valuation_method: ValuationMethod
    in_stock: bool
    back_orderable: bool
    is_active: bool
    stock_location: Optional[str] = None
    notes: Optional[str] = None
    last_stock_check: Optional[datetime] = None
    last_received_date: Optional[datetime] = None


class InventorySummary(SQLModel):
    total_items: int
    in_stock_items: int
    low_stock_items: int
    out_of_stock_items: int
    total_value: float


# =============================================================================
# 3. stock_movements 스키마
# =============================================================================
class MovementAction(str, Enum):
    APPROVE = "approve"
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"


class StockMovementCreate(SQLModel):
    """
    재고 이동 생성 스키마. reference는 서버에서 생성합니다.
    status가 COMPLETED이면 생성과 동시에 재고에 반영됩니다.
    """
    inventory_id: int = Field(..., gt=0)
    product_id: Optional[int] = Field(None, gt=0, description="생략 시 재고의 상품")
    quantity: float = Field(..., description="이동 수량 (0보다 커야 함)")
    movement_type: MovementType
    reason: Optional[MovementReason] = None
    status: Optional[MovementStatus] = None
    unit_cost: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    lot_number: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[datetime] = None
    batch_id: Optional[str] = Field(None, max_length=100)
    is_adjustment: Optional[bool] = None
    document_number: Optional[str] = Field(None, max_length=100)
    scheduled_at: Optional[datetime] = None
    source_warehouse_id: Optional[int] = Field(None, gt=0)
    destination_warehouse_id: Optional[int] = Field(None, gt=0)
    approved_by_id: Optional[int] = Field(None, gt=0)
    reference_type: Optional[str] = Field(None, max_length=50, description="외부 참조 유형 (예: ORDER)")
    reference_id: Optional[str] = Field(None, max_length=100)


class StockMovementUpdate(SQLModel):
    """아직 처리되지 않은(DRAFT/PLANNED) 이동의 부가 정보만 수정할 수 있습니다."""
    notes: Optional[str] = None
    lot_number: Optional[str] = Field(None, max_length=100)
    expiry_date: Optional[datetime] = None
    batch_id: Optional[str] = Field(None, max_length=100)
    document_number: Optional[str] = Field(None, max_length=100)
    scheduled_at: Optional[datetime] = None


class StockMovementResponse(_Timestamps):
    reference: str
    inventory_id: int
    product_id: int
    quantity: float
    unit_cost: Optional[float] = None
    total_value: Optional[float] = None
    movement_type: MovementType
    reason: MovementReason
    status: MovementStatus
    notes: Optional[str] = None
    lot_number: Optional[str] = None
    expiry_date: Optional[datetime] = None
    batch_id: Optional[str] = None
    is_adjustment: bool
    document_number: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    executed_at: Optional[datetime] = None
    source_warehouse_id: Optional[int] = None
    destination_warehouse_id: Optional[int] = None
    created_by_id: Optional[int] = None
    approved_by_id: Optional[int] = None
    executed_by_id: Optional[int] = None
    extra_data: Optional[Dict[str, Any]] = None


class StockMovementDetailResponse(StockMovementResponse):
    inventory: Optional[InventoryResponse] = None


class InventoryDetailResponse(InventoryResponse):
    """상품 재고 조회 시 최신순 재고 이동 이력을 함께 반환하는 스키마"""
    movements: List[StockMovementResponse] = []
