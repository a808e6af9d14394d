# app/domains/stock/services.py

"""
재고 이동 엔진 서비스 모듈입니다.

- 이동 참조번호 생성: `[WH-]TYPE-YYYYMMDD-XXXX`
- 이동 반영(apply): 유형별로 재고 수량/가용 수량을 갱신하고 이동을 COMPLETED로 표시합니다.
- 창고 간 이동(transfer): 출발 재고를 줄이고 도착 재고(없으면 생성)를 늘립니다.
- 생명주기: DRAFT/PLANNED -> (approve) -> PLANNED/IN_PROGRESS -> (complete) -> COMPLETED,
  COMPLETED가 아니면 언제든 취소(cancel)할 수 있습니다.
- `InventoryService`: 재고 생성(초기 입고 이동 포함), 상품별 재고 조회, 요약, 수량 조정, 설정 수정.

수량 검증은 재고와 이동 객체를 변경하기 전에 수행합니다.
"""

import logging
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.domains.goods import crud as goods_crud
from app.domains.usr import models as usr_models
from app.utils.dates import as_utc, utcnow
from . import models as stock_models
from . import schemas as stock_schemas

logger = logging.getLogger(__name__)

MovementType = stock_models.MovementType
MovementStatus = stock_models.MovementStatus
MovementReason = stock_models.MovementReason

MOVEMENT_TYPE_PREFIX = {
    MovementType.INCOMING: "IN",
    MovementType.OUTGOING: "OUT",
    MovementType.TRANSFER: "TRF",
    MovementType.ADJUSTMENT: "ADJ",
    MovementType.RETURN: "RET",
}

DEFAULT_WAREHOUSE_CODE = "WH"


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _fmt(value: float) -> str:
    # 5.0 -> "5", 2.5 -> "2.5"
    return f"{value:g}"


def _user_id(user: Optional[usr_models.User]) -> Optional[int]:
    return user.id if user is not None else None


# =============================================================================
# 1. 창고 조회 / 참조번호 / 계산 유틸리티
# =============================================================================
async def find_warehouse(db: AsyncSession, warehouse_id: Optional[int] = None) -> stock_models.Warehouse:
    """지정한 창고, 지정하지 않으면 기본(is_default) 창고를 반환합니다."""
    if warehouse_id is not None:
        warehouse = await db.get(stock_models.Warehouse, warehouse_id)
    else:
        result = await db.execute(
            select(stock_models.Warehouse)
            .where(stock_models.Warehouse.is_default == True)  # noqa: E712
            .order_by(stock_models.Warehouse.id)
        )
        warehouse = result.scalars().first()
    if warehouse is None:
        raise _not_found("Warehouse not found")
    return warehouse


def movement_type_prefix(movement_type: Any) -> str:
    return MOVEMENT_TYPE_PREFIX.get(movement_type, "UNK")


def warehouse_code(warehouse: Optional[stock_models.Warehouse]) -> str:
    """창고명 앞 두 글자(대문자)를 창고 코드로 사용합니다."""
    if warehouse is not None and isinstance(warehouse.name, str) and warehouse.name.strip():
        return warehouse.name[:2].upper()
    return DEFAULT_WAREHOUSE_CODE


async def generate_reference(
    db: AsyncSession,
    movement_type: Any,
    warehouse: Optional[stock_models.Warehouse] = None,
    *,
    today: Optional[datetime] = None,
) -> str:
    """
    재고 이동 참조번호를 생성합니다.

    형식: [WH-]TYPE-YYYYMMDD-XXXX
    - WH: 창고 코드 (창고가 주어진 경우에만)
    - TYPE: IN / OUT / TRF / ADJ / RET (알 수 없는 유형은 UNK)
    - XXXX: 같은 접두어를 가진 참조번호 마지막 구간의 최대값 + 1 (최소 4자리)

    생성 중 오류가 나면 `MOV-FALLBACK-<epoch ms 마지막 8자리>`를 반환합니다.
    """
    try:
        date_str = (today or utcnow()).strftime("%Y%m%d")
        pattern = f"{movement_type_prefix(movement_type)}-{date_str}"
        if warehouse is not None:
            pattern = f"{warehouse_code(warehouse)}-{pattern}"

        result = await db.execute(
            select(stock_models.StockMovement.reference)
            .where(stock_models.StockMovement.reference.startswith(f"{pattern}-"))
        )
        # 일련번호는 숫자로 비교합니다 (10000 > 9999).
        sequences = [
            int(last_part)
            for last_part in (reference.split("-")[-1] for reference in result.scalars())
            if last_part.isdigit()
        ]
        sequence = max(sequences, default=0) + 1
        return f"{pattern}-{sequence:04d}"
    except Exception:
        logger.exception("Failed to generate stock movement reference")
        return f"MOV-FALLBACK-{str(int(time.time() * 1000))[-8:]}"


def reason_from_type(movement_type: Any, reference_type: Optional[str] = None) -> MovementReason:
    """이동 유형(및 외부 참조 유형)으로 기본 사유를 결정합니다."""
    if movement_type == MovementType.INCOMING:
        return MovementReason.PURCHASE
    if movement_type == MovementType.OUTGOING:
        return MovementReason.SALE if reference_type == "ORDER" else MovementReason.CONSUMPTION
    if movement_type == MovementType.TRANSFER:
        return MovementReason.TRANSFER
    if movement_type == MovementType.ADJUSTMENT:
        return MovementReason.ADJUSTMENT_INVENTORY
    if movement_type == MovementType.RETURN:
        return MovementReason.RETURN_FROM_CUSTOMER
    return MovementReason.OTHER


def calculate_stock_value(quantity: float, unit_cost: Optional[float]) -> Optional[float]:
    if unit_cost is None:
        return None
    return quantity * unit_cost


def _ensure_available(inventory: stock_models.Inventory, quantity: float, label: str = "Insufficient inventory") -> None:
    if not inventory.back_orderable and inventory.available_quantity < quantity:
        raise _bad_request(
            f"{label}: available {_fmt(inventory.available_quantity)}, requested {_fmt(quantity)}"
        )


# =============================================================================
# 2. 재고 이동 생성 / 반영 / 창고 간 이동
# =============================================================================
async def create_stock_movement(
    db: AsyncSession,
    data: Union[stock_schemas.StockMovementCreate, Dict[str, Any]],
    user: Optional[usr_models.User] = None,
) -> stock_models.StockMovement:
    """
    재고 이동을 생성합니다. status가 COMPLETED이면 같은 트랜잭션에서 재고에 반영합니다.
    """
    values = data if isinstance(data, dict) else data.model_dump()

    inventory = await db.get(stock_models.Inventory, values.get("inventory_id"))
    if inventory is None:
        raise _not_found("Inventory not found")

    quantity = values.get("quantity")
    if quantity is None or quantity <= 0:
        raise _bad_request("Quantity must be a positive number")

    try:
        movement_type = MovementType(values.get("movement_type"))
    except ValueError:
        raise _bad_request(f"Invalid movement type: {values.get('movement_type')}")

    product_id = values.get("product_id") or inventory.product_id
    if product_id != inventory.product_id:
        raise _bad_request("Product does not match the inventory")

    warehouse = await db.get(stock_models.Warehouse, inventory.warehouse_id)
    reference = await generate_reference(db, movement_type, warehouse)
    unit_cost = values.get("unit_cost") if values.get("unit_cost") is not None else inventory.unit_cost

    reference_type = values.get("reference_type")
    extra_data = None
    if reference_type:
        extra_data = {"legacy": {"reference_type": reference_type, "reference_id": values.get("reference_id")}}

    movement = stock_models.StockMovement(
        reference=reference,
        inventory_id=inventory.id,
        product_id=product_id,
        quantity=quantity,
        unit_cost=unit_cost,
        total_value=calculate_stock_value(quantity, unit_cost),
        movement_type=movement_type,
        reason=MovementReason(values.get("reason") or reason_from_type(movement_type, reference_type)),
        status=MovementStatus(values.get("status") or MovementStatus.DRAFT),
        notes=values.get("notes"),
        lot_number=values.get("lot_number"),
        expiry_date=values.get("expiry_date"),
        batch_id=values.get("batch_id"),
        is_adjustment=bool(values.get("is_adjustment") or False),
        document_number=values.get("document_number") or reference,
        scheduled_at=values.get("scheduled_at"),
        source_warehouse_id=values.get("source_warehouse_id"),
        destination_warehouse_id=values.get("destination_warehouse_id"),
        created_by_id=_user_id(user),
        approved_by_id=values.get("approved_by_id"),
        extra_data=extra_data,
    )

    if movement.status == MovementStatus.COMPLETED:
        await apply_stock_movement(db, movement, inventory)

    db.add(movement)
    await db.commit()
    await db.refresh(movement)
    logger.info(
        "Stock movement %s created (type=%s, status=%s, qty=%s)",
        movement.reference, movement.movement_type.value, movement.status.value, _fmt(movement.quantity),
    )
    return movement


async def apply_stock_movement(
    db: AsyncSession,
    movement: stock_models.StockMovement,
    inventory: Optional[stock_models.Inventory] = None,
) -> stock_models.Inventory:
    """
    재고 이동을 재고에 반영하고 이동을 COMPLETED로 표시합니다. 커밋은 호출자가 수행합니다.

    - INCOMING / RETURN: 수량과 가용 수량 증가
    - OUTGOING: 재고 부족 검사 (back_orderable이면 생략) 후 감소
    - ADJUSTMENT: is_adjustment이면 절대 수량으로 설정, 아니면 증가
    - TRANSFER: 출발/도착 창고가 모두 있으면 `process_transfer`로 처리
    """
    if movement.status == MovementStatus.COMPLETED and movement.executed_at is not None:
        raise _bad_request("Stock movement already applied")

    if inventory is None:
        inventory = await db.get(stock_models.Inventory, movement.inventory_id)
        if inventory is None:
            raise _not_found("Inventory not found")

    if (
        movement.movement_type == MovementType.TRANSFER
        and movement.source_warehouse_id is not None
        and movement.destination_warehouse_id is not None
    ):
        return await process_transfer(db, movement, inventory)

    quantity = inventory.quantity
    available = inventory.available_quantity
    delta = movement.quantity

    if movement.movement_type in (MovementType.INCOMING, MovementType.RETURN):
        quantity += delta
        available += delta
    elif movement.movement_type == MovementType.OUTGOING:
        _ensure_available(inventory, delta)
        quantity -= delta
        available -= delta
    elif movement.movement_type == MovementType.ADJUSTMENT:
        if movement.is_adjustment:
            difference = delta - quantity
            quantity = delta
            available += difference
        else:
            quantity += delta
            available += delta

    now = utcnow()
    inventory.quantity = quantity
    inventory.available_quantity = available
    inventory.total_value = calculate_stock_value(quantity, inventory.unit_cost)
    inventory.in_stock = available > inventory.safety_stock_level
    inventory.last_stock_check = now
    db.add(inventory)

    movement.status = MovementStatus.COMPLETED
    movement.executed_at = now
    db.add(movement)
    return inventory


async def process_transfer(
    db: AsyncSession,
    movement: stock_models.StockMovement,
    source: stock_models.Inventory,
) -> stock_models.Inventory:
    """
    창고 간 재고 이동을 처리하고 도착 창고의 재고를 반환합니다. 커밋은 호출자가 수행합니다.
    도착 창고에 같은 상품의 재고가 없으면 출발 재고의 설정을 복사하여 새로 만듭니다.
    """
    if movement.movement_type != MovementType.TRANSFER:
        raise _bad_request("Only transfer movements can be processed as transfers")
    if movement.source_warehouse_id is None or movement.destination_warehouse_id is None:
        raise _bad_request("Transfer requires source and destination warehouses")
    if movement.destination_warehouse_id == source.warehouse_id:
        raise _bad_request("Source and destination warehouses must differ")

    _ensure_available(source, movement.quantity, label="Insufficient inventory for transfer")
    await find_warehouse(db, movement.destination_warehouse_id)

    result = await db.execute(
        select(stock_models.Inventory).where(
            stock_models.Inventory.product_id == movement.product_id,
            stock_models.Inventory.warehouse_id == movement.destination_warehouse_id,
        )
    )
    destination = result.scalars().first()
    if destination is None:
        destination = stock_models.Inventory(
            product_id=movement.product_id,
            warehouse_id=movement.destination_warehouse_id,
            quantity=0,
            available_quantity=0,
            reorder_threshold=source.reorder_threshold,
            reorder_quantity=source.reorder_quantity,
            unit_cost=source.unit_cost,
            valuation_method=source.valuation_method,
            in_stock=False,
            back_orderable=source.back_orderable,
        )
        logger.info(
            "Creating inventory for product %s in warehouse %s (transfer %s)",
            movement.product_id, movement.destination_warehouse_id, movement.reference,
        )

    now = utcnow()
    source.quantity -= movement.quantity
    source.available_quantity -= movement.quantity
    source.total_value = calculate_stock_value(source.quantity, source.unit_cost)
    source.in_stock = source.quantity > 0

    destination.quantity += movement.quantity
    destination.available_quantity += movement.quantity
    destination.total_value = calculate_stock_value(
        destination.quantity,
        destination.unit_cost if destination.unit_cost is not None else source.unit_cost,
    )
    destination.in_stock = True
    destination.last_received_date = now

    movement.status = MovementStatus.COMPLETED
    movement.executed_at = now
    db.add_all([source, destination, movement])
    return destination


# =============================================================================
# 3. 재고 이동 조회 / 생명주기
# =============================================================================
async def _get_movement(db: AsyncSession, movement_id: int) -> stock_models.StockMovement:
    movement = await db.get(stock_models.StockMovement, movement_id)
    if movement is None:
        raise _not_found("Stock movement not found")
    return movement


async def get_stock_movement(db: AsyncSession, movement_id: int) -> stock_models.StockMovement:
    """재고 정보를 함께 로드하여 재고 이동을 조회합니다."""
    result = await db.execute(
        select(stock_models.StockMovement)
        .options(selectinload(stock_models.StockMovement.inventory))
        .where(stock_models.StockMovement.id == movement_id)
        .execution_options(populate_existing=True)
    )
    movement = result.scalars().first()
    if movement is None:
        raise _not_found("Stock movement not found")
    return movement


async def get_recent_movements(db: AsyncSession, limit: int = 10) -> List[stock_models.StockMovement]:
    result = await db.execute(
        select(stock_models.StockMovement)
        .order_by(stock_models.StockMovement.created_at.desc(), stock_models.StockMovement.id.desc())
        .limit(limit)
    )
    return result.scalars().all()


async def _save(db: AsyncSession, movement: stock_models.StockMovement) -> stock_models.StockMovement:
    db.add(movement)
    await db.commit()
    await db.refresh(movement)
    return movement


async def cancel_stock_movement(
    db: AsyncSession, movement_id: int, user: usr_models.User
) -> stock_models.StockMovement:
    movement = await _get_movement(db, movement_id)
    if movement.status == MovementStatus.COMPLETED:
        raise _bad_request("Cannot cancel a completed movement")

    movement.status = MovementStatus.CANCELLED
    movement.notes = f"{movement.notes} | Cancelled by user." if movement.notes else "Cancelled by user."
    movement.executed_by_id = user.id
    logger.info("Stock movement %s cancelled by user %s", movement.reference, user.id)
    return await _save(db, movement)


async def start_processing_movement(
    db: AsyncSession, movement_id: int, user: usr_models.User
) -> stock_models.StockMovement:
    movement = await _get_movement(db, movement_id)
    if movement.status not in (MovementStatus.DRAFT, MovementStatus.PLANNED):
        raise _bad_request(f"Cannot start processing a movement with status: {movement.status.value}")

    movement.status = MovementStatus.IN_PROGRESS
    movement.executed_by_id = user.id
    return await _save(db, movement)


async def approve_stock_movement(
    db: AsyncSession, movement_id: int, user: usr_models.User
) -> stock_models.StockMovement:
    """
    DRAFT/PLANNED 이동을 승인합니다.
    예정 일시(scheduled_at)가 미래이면 PLANNED, 아니면 IN_PROGRESS가 됩니다.
    """
    movement = await _get_movement(db, movement_id)
    if movement.status not in (MovementStatus.DRAFT, MovementStatus.PLANNED):
        raise _bad_request(f"Cannot approve a movement with status: {movement.status.value}")

    scheduled_at = as_utc(movement.scheduled_at)
    movement.approved_by_id = user.id
    movement.status = (
        MovementStatus.PLANNED if scheduled_at is not None and scheduled_at > utcnow() else MovementStatus.IN_PROGRESS
    )
    return await _save(db, movement)


async def complete_stock_movement(
    db: AsyncSession, movement_id: int, user: usr_models.User
) -> stock_models.StockMovement:
    """IN_PROGRESS 이동을 완료하고 재고에 반영합니다."""
    movement = await _get_movement(db, movement_id)
    if movement.status != MovementStatus.IN_PROGRESS:
        raise _bad_request(f"Cannot complete a movement with status: {movement.status.value}")

    await apply_stock_movement(db, movement)
    movement.executed_by_id = user.id
    saved = await _save(db, movement)
    logger.info("Stock movement %s completed by user %s", saved.reference, user.id)
    return saved


MOVEMENT_ACTIONS = {
    stock_schemas.MovementAction.APPROVE: approve_stock_movement,
    stock_schemas.MovementAction.START: start_processing_movement,
    stock_schemas.MovementAction.COMPLETE: complete_stock_movement,
    stock_schemas.MovementAction.CANCEL: cancel_stock_movement,
}


async def process_movement(
    db: AsyncSession, movement_id: int, action: Any, user: usr_models.User
) -> stock_models.StockMovement:
    """action(approve / start / complete / cancel)에 맞는 생명주기 함수를 호출합니다."""
    handler = MOVEMENT_ACTIONS.get(action)
    if handler is None:
        raise _bad_request(f"Invalid action: {action}")
    return await handler(db, movement_id, user)


async def update_stock_movement(
    db: AsyncSession, movement_id: int, updates: Dict[str, Any]
) -> stock_models.StockMovement:
    movement = await _get_movement(db, movement_id)
    if movement.status not in (MovementStatus.DRAFT, MovementStatus.PLANNED):
        raise _bad_request(f"Cannot update a movement with status: {movement.status.value}")
    for key, value in updates.items():
        setattr(movement, key, value)
    return await _save(db, movement)


async def delete_stock_movement(db: AsyncSession, movement_id: int) -> None:
    movement = await _get_movement(db, movement_id)
    if movement.status == MovementStatus.COMPLETED:
        raise _bad_request("Cannot delete a completed movement")
    await db.delete(movement)
    await db.commit()


# =============================================================================
# 4. InventoryService
# =============================================================================
SETTING_FIELDS = (
    "minimum_quantity",
    "maximum_quantity",
    "safety_stock_level",
    "economic_order_quantity",
    "lead_time_in_days",
    "unit_cost",
    "valuation_method",
    "is_active",
    "stock_location",
    "notes",
)

QUANTITY_FIELDS = {"quantity", "available_quantity", "reserved_quantity"}


def validate_inventory_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
    """
    재고 생성 값을 검증하고 기본값을 채웁니다.

    - quantity는 필수이며 0 이상
    - reorder_threshold >= 0 (기본 5), reorder_quantity > 0 (기본 10)
    - available_quantity는 기본값이 quantity이며 quantity를 넘을 수 없음
    - reserved_quantity는 quantity를 넘을 수 없음
    - back_orderable이 아니면 available_quantity는 음수가 될 수 없음
    - in_stock 기본값은 quantity > 0
    """
    quantity = metadata.get("quantity")
    if quantity is None:
        raise _bad_request("Quantity is required")
    if quantity < 0:
        raise _bad_request("Quantity cannot be negative")

    reorder_threshold = metadata.get("reorder_threshold")
    if reorder_threshold is not None and reorder_threshold < 0:
        raise _bad_request("Reorder threshold must be a valid non-negative number")

    reorder_quantity = metadata.get("reorder_quantity")
    if reorder_quantity is not None and reorder_quantity <= 0:
        raise _bad_request("Reorder quantity must be a valid positive number")

    back_orderable = bool(metadata.get("back_orderable") or False)
    available = metadata.get("available_quantity")
    if available is None:
        available = quantity
    if available > quantity:
        raise _bad_request("Available quantity cannot exceed quantity")
    if not back_orderable and available < 0:
        raise _bad_request("Available quantity cannot be negative for non-backOrderable items")

    reserved = metadata.get("reserved_quantity") or 0
    if reserved > quantity:
        raise _bad_request("Reserved quantity cannot exceed quantity")

    in_stock = metadata.get("in_stock")
    normalized = {
        "quantity": quantity,
        "available_quantity": available,
        "reserved_quantity": reserved,
        "reorder_threshold": 5 if reorder_threshold is None else reorder_threshold,
        "reorder_quantity": 10 if reorder_quantity is None else reorder_quantity,
        "in_stock": quantity > 0 if in_stock is None else in_stock,
        "back_orderable": back_orderable,
    }
    normalized.update({k: metadata[k] for k in SETTING_FIELDS if metadata.get(k) is not None})
    return normalized


class InventoryService:
    """
    재고(Inventory) 레코드를 관리하는 서비스입니다.
    수량 변경은 항상 재고 이동(StockMovement) 기록을 함께 남깁니다.
    """
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_inventory(self, inventory_id: int) -> stock_models.Inventory:
        inventory = await self.db.get(stock_models.Inventory, inventory_id)
        if inventory is None:
            raise _not_found("Inventory not found")
        return inventory

    async def create_inventory_with_stock_movement(
        self,
        sku: str,
        metadata: Dict[str, Any],
        warehouse_id: Optional[int] = None,
        user: Optional[usr_models.User] = None,
    ) -> stock_models.Inventory:
        """
        SKU로 상품을 찾아 재고를 생성합니다. 초기 수량이 있으면 COMPLETED 입고 이동
        (사유 INVENTORY, 메모 "Initial stock")을 함께 기록합니다.
        """
        if not isinstance(sku, str) or not 3 <= len(sku) <= 100:
            raise _bad_request("SKU must be between 3 and 100 characters")

        product = await goods_crud.product.get_by_sku(self.db, sku=sku)
        if product is None:
            raise _not_found("Product not found")

        warehouse = await find_warehouse(self.db, warehouse_id)

        result = await self.db.execute(
            select(stock_models.Inventory).where(
                stock_models.Inventory.product_id == product.id,
                stock_models.Inventory.warehouse_id == warehouse.id,
            )
        )
        if result.scalars().first() is not None:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Inventory for this product already exists in the warehouse",
            )

        normalized = validate_inventory_metadata(metadata)
        total_value = calculate_stock_value(normalized["quantity"], normalized.get("unit_cost"))

        inventory = stock_models.Inventory(
            **normalized,
            total_value=total_value,
            product_id=product.id,
            warehouse_id=warehouse.id,
        )
        self.db.add(inventory)
        await self.db.flush()

        if inventory.quantity > 0:
            reference = await generate_reference(self.db, MovementType.INCOMING, warehouse)
            self.db.add(stock_models.StockMovement(
                reference=reference,
                inventory_id=inventory.id,
                product_id=product.id,
                quantity=inventory.quantity,
                unit_cost=inventory.unit_cost,
                total_value=total_value,
                movement_type=MovementType.INCOMING,
                reason=MovementReason.INVENTORY,
                status=MovementStatus.COMPLETED,
                notes="Initial stock",
                is_adjustment=False,
                document_number=reference,
                created_by_id=_user_id(user),
                executed_at=utcnow(),
                extra_data={"legacy": {"reference_type": "INVENTORY"}},
            ))

        await self.db.commit()
        await self.db.refresh(inventory)
        logger.info(
            "Inventory %s created for product %s in warehouse '%s' (qty=%s)",
            inventory.id, product.sku, warehouse.name, _fmt(inventory.quantity),
        )
        return inventory

    async def inventory(self, product_id: int) -> List[stock_models.Inventory]:
        """상품의 모든 창고 재고를 최신순 재고 이동 이력과 함께 조회합니다."""
        result = await self.db.execute(
            select(stock_models.Inventory)
            .options(selectinload(stock_models.Inventory.movements))
            .where(stock_models.Inventory.product_id == product_id)
            .order_by(stock_models.Inventory.id)
            .execution_options(populate_existing=True)
        )
        inventories = result.scalars().all()
        if not inventories:
            raise _not_found("Inventory not found for this product")
        return inventories

    async def get_inventory_summary(self, warehouse_id: Optional[int] = None) -> Dict[str, Any]:
        """전체(또는 특정 창고) 재고의 품목 수와 재고 가치 합계를 집계합니다."""
        Inventory = stock_models.Inventory

        async def _count(*conditions) -> int:
            statement = select(func.count()).select_from(Inventory)
            if warehouse_id is not None:
                statement = statement.where(Inventory.warehouse_id == warehouse_id)
            if conditions:
                statement = statement.where(*conditions)
            return (await self.db.execute(statement)).scalar_one()

        value_statement = select(func.coalesce(func.sum(Inventory.total_value), 0))
        if warehouse_id is not None:
            value_statement = value_statement.where(Inventory.warehouse_id == warehouse_id)

        return {
            "total_items": await _count(),
            "in_stock_items": await _count(Inventory.in_stock == True),  # noqa: E712
            "low_stock_items": await _count(
                Inventory.in_stock == True,  # noqa: E712
                Inventory.quantity <= Inventory.reorder_threshold,
            ),
            "out_of_stock_items": await _count(Inventory.in_stock == False),  # noqa: E712
            "total_value": float((await self.db.execute(value_statement)).scalar_one() or 0),
        }

    async def update_inventory_quantity(
        self, inventory_id: int, new_quantity: float, user: Optional[usr_models.User] = None
    ) -> stock_models.Inventory:
        """
        재고 수량을 새 값으로 조정합니다. 차이만큼 COMPLETED 입고/출고 이동
        (사유 ADJUSTMENT_INVENTORY)을 기록하며, 차이가 없으면 아무것도 하지 않습니다.
        """
        inventory = await self._get_inventory(inventory_id)
        if new_quantity < 0:
            raise _bad_request("Quantity cannot be negative")

        old_quantity = inventory.quantity
        difference = new_quantity - old_quantity
        if difference == 0:
            return inventory

        movement_type = MovementType.INCOMING if difference > 0 else MovementType.OUTGOING
        warehouse = await self.db.get(stock_models.Warehouse, inventory.warehouse_id)
        reference = await generate_reference(self.db, movement_type, warehouse)
        now = utcnow()

        inventory.quantity = new_quantity
        inventory.available_quantity += difference
        inventory.total_value = calculate_stock_value(new_quantity, inventory.unit_cost)
        inventory.in_stock = new_quantity > 0
        inventory.last_stock_check = now
        self.db.add(inventory)

        self.db.add(stock_models.StockMovement(
            reference=reference,
            inventory_id=inventory.id,
            product_id=inventory.product_id,
            quantity=abs(difference),
            unit_cost=inventory.unit_cost,
            total_value=calculate_stock_value(abs(difference), inventory.unit_cost),
            movement_type=movement_type,
            reason=MovementReason.ADJUSTMENT_INVENTORY,
            status=MovementStatus.COMPLETED,
            notes=f"Manual adjustment from {_fmt(old_quantity)} to {_fmt(new_quantity)}",
            is_adjustment=True,
            document_number=reference,
            created_by_id=_user_id(user),
            executed_by_id=_user_id(user),
            executed_at=now,
        ))

        await self.db.commit()
        await self.db.refresh(inventory)
        logger.info("Inventory %s adjusted from %s to %s", inventory.id, _fmt(old_quantity), _fmt(new_quantity))
        return inventory

    async def update_inventory(self, inventory_id: int, updates: Dict[str, Any]) -> stock_models.Inventory:
        """
        재고 설정을 수정합니다. 수량/가용/예약 수량은 변경할 수 없으며,
        total_value는 단가로 다시 계산하고 in_stock은 가용 수량이 안전 재고 수준과 0을 모두 넘는지로 다시 계산합니다.
        """
        protected = QUANTITY_FIELDS & updates.keys()
        if protected:
            raise _bad_request(f"Fields cannot be updated here: {', '.join(sorted(protected))}")

        inventory = await self._get_inventory(inventory_id)
        for key, value in updates.items():
            setattr(inventory, key, value)
        inventory.total_value = calculate_stock_value(inventory.quantity, inventory.unit_cost)
        inventory.in_stock = (
            inventory.available_quantity > inventory.safety_stock_level
            and inventory.available_quantity > 0
        )
        self.db.add(inventory)
        await self.db.commit()
        await self.db.refresh(inventory)
        return inventory
