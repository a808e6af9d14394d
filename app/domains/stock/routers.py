# app/domains/stock/routers.py

"""
'stock' 도메인 (창고, 재고, 재고 이동)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
모든 엔드포인트는 관리자(ADMIN) 프로필이 필요합니다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import and_
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.filters import generate_where_condition, generate_where_conditions
from app.core.responses import ApiResponse, Page, http200, http201, http204
from app.domains.usr import models as usr_models
from . import crud as stock_crud
from . import models as stock_models
from . import schemas as stock_schemas
from . import services as stock_services

router = APIRouter(
    tags=["Warehouse System (창고/재고 관리)"],
    dependencies=[Depends(deps.get_current_admin_user)],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. warehouses 엔드포인트
# =============================================================================
async def _get_warehouse_or_404(db: AsyncSession, warehouse_id: int) -> stock_models.Warehouse:
    warehouse = await stock_crud.warehouse.get(db, warehouse_id)
    if warehouse is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Warehouse not found")
    return warehouse


@router.get("/warehouses/", response_model=ApiResponse[Page[stock_schemas.WarehouseResponse]])
async def read_warehouses_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """창고 목록을 페이지 단위로 조회합니다. 필터: name, address"""
    where = generate_where_conditions(stock_models.Warehouse, params.filters, ["name", "address"])
    return http200(content=await stock_crud.warehouse.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/warehouses/list", response_model=ApiResponse[List[stock_schemas.WarehouseResponse]])
async def read_warehouses(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await stock_crud.warehouse.get_all(db))


@router.get("/warehouses/get/{warehouse_id}", response_model=ApiResponse[stock_schemas.WarehouseResponse])
async def read_warehouse(warehouse_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_warehouse_or_404(db, warehouse_id))


@router.post(
    "/warehouses/save",
    response_model=ApiResponse[stock_schemas.WarehouseResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_warehouse(warehouse_in: stock_schemas.WarehouseCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await stock_crud.warehouse.create(db, obj_in=warehouse_in))


@router.put("/warehouses/update/{warehouse_id}", response_model=ApiResponse[stock_schemas.WarehouseResponse])
async def update_warehouse(
    warehouse_id: int,
    warehouse_in: stock_schemas.WarehouseUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_warehouse_or_404(db, warehouse_id)
    return http200(content=await stock_crud.warehouse.update(db, db_obj=db_obj, obj_in=warehouse_in))


@router.delete("/warehouses/delete/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warehouse(warehouse_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_warehouse_or_404(db, warehouse_id)
    await stock_crud.warehouse.delete(db, id=warehouse_id)
    return http204()


# =============================================================================
# 2. inventory 엔드포인트
# =============================================================================
@router.get("/inventory/", response_model=ApiResponse[Page[stock_schemas.InventoryResponse]])
async def read_inventories_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """재고 목록을 페이지 단위로 조회합니다. 필터: stock_location, notes, product_id, warehouse_id"""
    where = generate_where_conditions(
        stock_models.Inventory, params.filters, ["stock_location", "notes", "product_id", "warehouse_id"]
    )
    return http200(content=await stock_crud.inventory.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/inventory/list", response_model=ApiResponse[List[stock_schemas.InventoryResponse]])
async def read_inventories(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await stock_crud.inventory.get_all(db))


@router.get("/inventory/summary", response_model=ApiResponse[stock_schemas.InventorySummary])
async def read_inventory_summary(
    warehouse_id: Optional[int] = Query(None, gt=0, description="창고 ID (생략 시 전체)"),
    db: AsyncSession = Depends(deps.get_db_session),
):
    summary = await stock_services.InventoryService(db).get_inventory_summary(warehouse_id=warehouse_id)
    return http200(content=summary)


@router.get("/inventory/get/{product_id}", response_model=ApiResponse[List[stock_schemas.InventoryDetailResponse]])
async def read_product_inventory(product_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """상품의 창고별 재고를 재고 이동 이력과 함께 조회합니다."""
    inventories = await stock_services.InventoryService(db).inventory(product_id)
    return http200(content=[stock_schemas.InventoryDetailResponse.model_validate(inv) for inv in inventories])


@router.post(
    "/inventory/save",
    response_model=ApiResponse[stock_schemas.InventoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_inventory(
    inventory_in: stock_schemas.InventoryCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """SKU로 상품을 지정하여 재고를 생성합니다. 초기 수량이 있으면 입고 이동이 함께 기록됩니다."""
    metadata = inventory_in.model_dump(exclude={"sku", "warehouse_id"})
    inventory = await stock_services.InventoryService(db).create_inventory_with_stock_movement(
        inventory_in.sku, metadata, warehouse_id=inventory_in.warehouse_id, user=current_admin_user
    )
    return http201(content=inventory)


@router.put("/inventory/update/{inventory_id}", response_model=ApiResponse[stock_schemas.InventoryResponse])
async def update_inventory(
    inventory_id: int,
    inventory_in: stock_schemas.InventoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    updates = inventory_in.model_dump(exclude_unset=True)
    return http200(content=await stock_services.InventoryService(db).update_inventory(inventory_id, updates))


@router.patch("/inventory/update-quantity/{inventory_id}", response_model=ApiResponse[stock_schemas.InventoryResponse])
async def update_inventory_quantity(
    inventory_id: int,
    body: stock_schemas.InventoryQuantityUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """재고 수량을 조정합니다. 차이만큼 조정 이동이 기록됩니다."""
    inventory = await stock_services.InventoryService(db).update_inventory_quantity(
        inventory_id, body.new_quantity, user=current_admin_user
    )
    return http200(content=inventory)


@router.delete("/inventory/delete/{inventory_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory(inventory_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    if await stock_crud.inventory.get(db, inventory_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Inventory not found")
    await stock_crud.inventory.delete(db, id=inventory_id)
    return http204()


# =============================================================================
# 3. stock-movements 엔드포인트
# =============================================================================
@router.get("/stock-movements/", response_model=ApiResponse[Page[stock_schemas.StockMovementResponse]])
async def read_movements_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """
    재고 이동 목록을 페이지 단위로 조회합니다.
    필터: reference, notes (부분 일치, OR) + status (일치, AND)
    """
    text_where = generate_where_conditions(stock_models.StockMovement, params.filters, ["reference", "notes"])
    status_where = generate_where_condition(stock_models.StockMovement, params.filters, "status")
    conditions = [c for c in (text_where, status_where) if c is not None]
    where = and_(*conditions) if conditions else None
    return http200(content=await stock_crud.stock_movement.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/stock-movements/list", response_model=ApiResponse[List[stock_schemas.StockMovementResponse]])
async def read_movements(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await stock_crud.stock_movement.get_all(db))


@router.get("/stock-movements/recent", response_model=ApiResponse[List[stock_schemas.StockMovementResponse]])
async def read_recent_movements(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(deps.get_db_session),
):
    return http200(content=await stock_services.get_recent_movements(db, limit=limit))


@router.get("/stock-movements/get/{movement_id}", response_model=ApiResponse[stock_schemas.StockMovementDetailResponse])
async def read_movement(movement_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    movement = await stock_services.get_stock_movement(db, movement_id)
    return http200(content=stock_schemas.StockMovementDetailResponse.model_validate(movement))


@router.post(
    "/stock-movements/save",
    response_model=ApiResponse[stock_schemas.StockMovementResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_movement(
    movement_in: stock_schemas.StockMovementCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """재고 이동을 생성합니다. status가 COMPLETED이면 즉시 재고에 반영됩니다."""
    movement = await stock_services.create_stock_movement(db, movement_in, user=current_admin_user)
    return http201(content=movement)


@router.put("/stock-movements/update/{movement_id}", response_model=ApiResponse[stock_schemas.StockMovementResponse])
async def update_movement(
    movement_id: int,
    movement_in: stock_schemas.StockMovementUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    updates = movement_in.model_dump(exclude_unset=True)
    return http200(content=await stock_services.update_stock_movement(db, movement_id, updates))


@router.delete("/stock-movements/delete/{movement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movement(movement_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await stock_services.delete_stock_movement(db, movement_id)
    return http204()


@router.post("/stock-movements/{movement_id}/{action}", response_model=ApiResponse[stock_schemas.StockMovementResponse])
async def run_movement_action(
    movement_id: int,
    action: stock_schemas.MovementAction,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    """재고 이동 생명주기 작업(approve / start / complete / cancel)을 수행합니다."""
    movement = await stock_services.process_movement(db, movement_id, action, current_admin_user)
    return http200(content=movement, message=f"Stock movement {action.value} succeeded")
