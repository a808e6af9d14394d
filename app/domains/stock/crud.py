# app/domains/stock/crud.py

"""
'stock' 도메인의 CRUD 작업을 담당하는 모듈입니다.

재고 수량을 바꾸는 작업(이동 반영, 수량 조정)은 `services.py`에서 처리하며,
이 모듈은 창고 관리와 재고/이동의 단순 조회·삭제를 담당합니다.
"""

import logging
from typing import Any, Dict, Optional, Union

from sqlalchemy import update as sa_update
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, CRUDUniqueName
from . import models as stock_models
from . import schemas as stock_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. warehouses
# =============================================================================
class CRUDWarehouse(CRUDUniqueName):
    """
    창고 CRUD. 기본 창고(is_default)는 하나만 유지되도록,
    다른 창고를 기본으로 지정하면 기존 기본 창고의 플래그를 해제합니다.
    """
    label = "Warehouse"

    def __init__(self):
        super().__init__(model=stock_models.Warehouse)

    async def _clear_default(self, db: AsyncSession, exclude_id: Optional[int] = None) -> None:
        statement = sa_update(self.model).where(self.model.is_default == True)  # noqa: E712
        if exclude_id is not None:
            statement = statement.where(self.model.id != exclude_id)
        await db.execute(statement.values(is_default=False).execution_options(synchronize_session="fetch"))

    async def create(
        self, db: AsyncSession, *, obj_in: Union[stock_schemas.WarehouseCreate, Dict[str, Any]]
    ) -> stock_models.Warehouse:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        await self.ensure_unique(db, data["name"])
        if data.get("is_default"):
            await self._clear_default(db)
        warehouse = await super().create(db, obj_in=data)
        logger.info("Warehouse '%s' created (default=%s)", warehouse.name, warehouse.is_default)
        return warehouse

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if update_data.get("is_default"):
            await self._clear_default(db, exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


warehouse = CRUDWarehouse()


# =============================================================================
# 2. inventories / stock_movements
# =============================================================================
class CRUDInventory(CRUDBase[stock_models.Inventory, stock_schemas.InventoryCreate, stock_schemas.InventoryUpdate]):
    def __init__(self):
        super().__init__(model=stock_models.Inventory)


inventory = CRUDInventory()


class CRUDStockMovement(CRUDBase[stock_models.StockMovement, stock_schemas.StockMovementCreate, stock_schemas.StockMovementUpdate]):
    def __init__(self):
        super().__init__(model=stock_models.StockMovement)


stock_movement = CRUDStockMovement()
