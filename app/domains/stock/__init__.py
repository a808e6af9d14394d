# app/domains/stock/__init__.py

"""
FastAPI 애플리케이션의 'stock' 도메인 패키지입니다.

'stock' 도메인은 창고(Warehouse), 상품별/창고별 재고(Inventory), 그리고 모든 재고 변동을
기록하는 재고 이동(StockMovement)을 관리합니다. 입고/출고/이동/조정/반품 이동을 재고에
반영하는 엔진과 이동의 승인/처리/완료/취소 생명주기를 포함합니다.

주요 서브모듈:
- `models.py`: warehouses, inventories, stock_movements 테이블의 SQLModel 정의.
- `schemas.py`: 요청/응답 Pydantic 모델.
- `crud.py`: 창고 CRUD 및 목록 조회 로직.
- `services.py`: 참조번호 생성, 재고 이동 반영, 창고 간 이동, 생명주기, InventoryService.
- `routers.py`: /admin/warehouse-system 하위의 API 엔드포인트 정의.
"""

__title__ = "Catalog Stock Domain"
__description__ = "Manages warehouses, inventories and the stock movement engine."
__version__ = "0.1.0"
__all__ = []
