# app/domains/stock/models.py

"""
'stock' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

- `Warehouse`: 창고. is_default 창고는 창고를 지정하지 않은 작업에 사용됩니다.
- `Inventory`: (상품, 창고) 쌍마다 하나씩 존재하는 재고 레코드.
- `StockMovement`: 재고 변동 이력. COMPLETED 상태가 되는 시점에 재고에 반영됩니다.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, SQLModel

from app.domains.shared.models import TimestampMixin


class MovementType(str, Enum):
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"
    TRANSFER = "TRANSFER"
    ADJUSTMENT = "ADJUSTMENT"
    RETURN = "RETURN"


class MovementStatus(str, Enum):
    DRAFT = "DRAFT"
    PLANNED = "PLANNED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MovementReason(str, Enum):
    PURCHASE = "PURCHASE"
    SALE = "SALE"
    TRANSFER = "TRANSFER"
    ADJUSTMENT_INVENTORY = "ADJUSTMENT_INVENTORY"
    ADJUSTMENT_DAMAGE = "ADJUSTMENT_DAMAGE"
    ADJUSTMENT_EXPIRY = "ADJUSTMENT_EXPIRY"
    RETURN_FROM_CUSTOMER = "RETURN_FROM_CUSTOMER"
    RETURN_TO_SUPPLIER = "RETURN_TO_SUPPLIER"
    PRODUCTION = "PRODUCTION"
    CONSUMPTION = "CONSUMPTION"
    ORDER = "ORDER"
    PURCHASE_ORDER = "PURCHASE_ORDER"
    INVENTORY = "INVENTORY"
    OTHER = "OTHER"


class ValuationMethod(str, Enum):
    FIFO = "FIFO"
    LIFO = "LIFO"
    WAC = "WAC"
    FEFO = "FEFO"


def _nullable_fk(target: str) -> Any:
    return Field(
        default=None,
        sa_column=Column(Integer, ForeignKey(target, ondelete="SET NULL"), nullable=True),
    )


# =============================================================================
# 1. warehouses 테이블 모델
# =============================================================================
class WarehouseBase(SQLModel):
    name: str = Field(max_length=100, unique=True, description="창고명")
    description: Optional[str] = Field(default=None)
    address: Optional[str] = Field(default=None, max_length=255)
    is_default: bool = Field(default=False, description="기본 창고 여부")


class Warehouse(WarehouseBase, TimestampMixin, table=True):
    __tablename__ = "warehouses"

    id: Optional[int] = Field(default=None, primary_key=True)


# =============================================================================
# 2. inventories 테이블 모델
# =============================================================================
class InventoryBase(SQLModel):
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", description="상품 ID (FK)")
    warehouse_id: int = Field(foreign_key="warehouses.id", ondelete="CASCADE", description="창고 ID (FK)")
    quantity: float = Field(default=0, description="총 재고 수량")
    available_quantity: float = Field(default=0, description="가용 수량")
    reserved_quantity: float = Field(default=0, description="예약 수량")
    minimum_quantity: Optional[float] = Field(default=None)
    maximum_quantity: Optional[float] = Field(default=None)
    safety_stock_level: float = Field(default=0, description="안전 재고 수준")
    economic_order_quantity: Optional[float] = Field(default=None)
    reorder_threshold: float = Field(default=5, description="재주문 기준 수량")
    reorder_quantity: float = Field(default=10, description="재주문 수량")
    lead_time_in_days: Optional[int] = Field(default=None)
    unit_cost: Optional[float] = Field(default=None, description="단위 원가")
    total_value: Optional[float] = Field(default=None, description="재고 가치 (수량 x 단위 원가)")
    valuation_method: ValuationMethod = Field(default=ValuationMethod.WAC)
    in_stock: bool = Field(default=False)
    back_orderable: bool = Field(default=False, description="재고 부족 시 출고 허용 여부")
    is_active: bool = Field(default=True)
    stock_location: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = Field(default=None)
    last_stock_check: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP(timezone=True))
    last_received_date: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP(timezone=True))


class Inventory(InventoryBase, TimestampMixin, table=True):
    __tablename__ = "inventories"
    __table_args__ = (UniqueConstraint("product_id", "warehouse_id", name="uq_inventory_product_warehouse"),)

    id: Optional[int] = Field(default=None, primary_key=True)

    movements: List["StockMovement"] = Relationship(
        back_populates="inventory",
        sa_relationship_kwargs={
            "passive_deletes": True,
            "order_by": "StockMovement.created_at.desc()",
        },
    )


# =============================================================================
# 3. stock_movements 테이블 모델
# =============================================================================
class StockMovement(TimestampMixin, table=True):
    __tablename__ = "stock_movements"

    id: Optional[int] = Field(default=None, primary_key=True)
    reference: str = Field(max_length=60, unique=True, description="이동 참조번호 ([WH-]TYPE-YYYYMMDD-XXXX)")
    inventory_id: int = Field(foreign_key="inventories.id", ondelete="CASCADE", description="재고 ID (FK)")
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", description="상품 ID (FK)")
    quantity: float = Field(gt=0, description="이동 수량")
    unit_cost: Optional[float] = Field(default=None)
    total_value: Optional[float] = Field(default=None)
    movement_type: MovementType
    reason: MovementReason = Field(default=MovementReason.OTHER)
    status: MovementStatus = Field(default=MovementStatus.DRAFT)
    notes: Optional[str] = Field(default=None)
    lot_number: Optional[str] = Field(default=None, max_length=100)
    expiry_date: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP(timezone=True))
    batch_id: Optional[str] = Field(default=None, max_length=100)
    is_adjustment: bool = Field(default=False, description="True이면 ADJUSTMENT 수량을 절대값으로 취급")
    document_number: Optional[str] = Field(default=None, max_length=100)
    scheduled_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP(timezone=True))
    executed_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP(timezone=True))
    source_warehouse_id: Optional[int] = _nullable_fk("warehouses.id")
    destination_warehouse_id: Optional[int] = _nullable_fk("warehouses.id")
    created_by_id: Optional[int] = _nullable_fk("users.id")
    approved_by_id: Optional[int] = _nullable_fk("users.id")
    executed_by_id: Optional[int] = _nullable_fk("users.id")
    extra_data: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))

    inventory: Optional[Inventory] = Relationship(back_populates="movements")
