# app/domains/goods/routers.py

"""
'goods' 도메인 (상품 카탈로그)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
모든 엔드포인트는 관리자(ADMIN) 프로필이 필요합니다.

리소스별 공통 경로:
- GET    /               페이지 목록 (page, page_size, filters)
- GET    /list           전체 목록
- GET    /get/{id}       단건 조회
- POST   /save           생성 (201)
- PUT    /update/{id}    수정
- DELETE /delete/{id}    삭제 (204)
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.filters import generate_where_conditions
from app.core.responses import ApiResponse, Page, http200, http201, http204
from app.domains.goods import crud as goods_crud
from app.domains.goods import models as goods_models
from app.domains.goods import schemas as goods_schemas

router = APIRouter(
    tags=["Goods Management (상품 카탈로그 관리)"],
    dependencies=[Depends(deps.get_current_admin_user)],
    responses={404: {"description": "Not found"}},
)


async def _get_or_404(db: AsyncSession, crud, id: int, label: str):
    obj = await crud.get(db, id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


# =============================================================================
# 1. origins 엔드포인트
# =============================================================================
@router.get("/origins/", response_model=ApiResponse[Page[goods_schemas.OriginResponse]])
async def read_origins_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """원산지 목록을 페이지 단위로 조회합니다. 필터: country"""
    where = generate_where_conditions(goods_models.Origin, params.filters, ["country"])
    return http200(content=await goods_crud.origin.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/origins/list", response_model=ApiResponse[List[goods_schemas.OriginResponse]])
async def read_origins(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.origin.get_all(db))


@router.get("/origins/get/{origin_id}", response_model=ApiResponse[goods_schemas.OriginResponse])
async def read_origin(origin_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.origin, origin_id, "Origin"))


@router.post("/origins/save", response_model=ApiResponse[goods_schemas.OriginResponse], status_code=status.HTTP_201_CREATED)
async def create_origin(origin_in: goods_schemas.OriginCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.origin.create(db, obj_in=origin_in))


@router.put("/origins/update/{origin_id}", response_model=ApiResponse[goods_schemas.OriginResponse])
async def update_origin(origin_id: int, origin_in: goods_schemas.OriginUpdate, db: AsyncSession = Depends(deps.get_db_session)):
    db_obj = await _get_or_404(db, goods_crud.origin, origin_id, "Origin")
    return http200(content=await goods_crud.origin.update(db, db_obj=db_obj, obj_in=origin_in))


@router.delete("/origins/delete/{origin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_origin(origin_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.origin, origin_id, "Origin")
    await goods_crud.origin.delete(db, id=origin_id)
    return http204()


# =============================================================================
# 2. product_categories 엔드포인트
# =============================================================================
@router.get("/categories/", response_model=ApiResponse[Page[goods_schemas.ProductCategoryResponse]])
async def read_categories_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """상품 카테고리 목록을 페이지 단위로 조회합니다. 필터: name"""
    where = generate_where_conditions(goods_models.ProductCategory, params.filters, ["name"])
    return http200(content=await goods_crud.product_category.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/categories/list", response_model=ApiResponse[List[goods_schemas.ProductCategoryResponse]])
async def read_categories(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.product_category.get_all(db))


@router.get("/categories/get/{category_id}", response_model=ApiResponse[goods_schemas.ProductCategoryResponse])
async def read_category(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.product_category, category_id, "Category"))


@router.post("/categories/save", response_model=ApiResponse[goods_schemas.ProductCategoryResponse], status_code=status.HTTP_201_CREATED)
async def create_category(category_in: goods_schemas.ProductCategoryCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.product_category.create(db, obj_in=category_in))


@router.put("/categories/update/{category_id}", response_model=ApiResponse[goods_schemas.ProductCategoryResponse])
async def update_category(
    category_id: int,
    category_in: goods_schemas.ProductCategoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, goods_crud.product_category, category_id, "Category")
    return http200(content=await goods_crud.product_category.update(db, db_obj=db_obj, obj_in=category_in))


@router.delete("/categories/delete/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.product_category, category_id, "Category")
    await goods_crud.product_category.delete(db, id=category_id)
    return http204()


# =============================================================================
# 3. product_subcategories 엔드포인트
# =============================================================================
@router.get("/subcategories/", response_model=ApiResponse[Page[goods_schemas.ProductSubcategoryResponse]])
async def read_subcategories_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """하위 카테고리 목록을 페이지 단위로 조회합니다. 필터: name, category_id"""
    where = generate_where_conditions(goods_models.ProductSubcategory, params.filters, ["name", "category_id"])
    return http200(content=await goods_crud.product_subcategory.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/subcategories/list", response_model=ApiResponse[List[goods_schemas.ProductSubcategoryResponse]])
async def read_subcategories(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.product_subcategory.get_all(db))


@router.get("/subcategories/get/{subcategory_id}", response_model=ApiResponse[goods_schemas.ProductSubcategoryResponse])
async def read_subcategory(subcategory_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.product_subcategory, subcategory_id, "Subcategory"))


@router.post("/subcategories/save", response_model=ApiResponse[goods_schemas.ProductSubcategoryResponse], status_code=status.HTTP_201_CREATED)
async def create_subcategory(subcategory_in: goods_schemas.ProductSubcategoryCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.product_subcategory.create(db, obj_in=subcategory_in))


@router.put("/subcategories/update/{subcategory_id}", response_model=ApiResponse[goods_schemas.ProductSubcategoryResponse])
async def update_subcategory(
    subcategory_id: int,
    subcategory_in: goods_schemas.ProductSubcategoryUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, goods_crud.product_subcategory, subcategory_id, "Subcategory")
    return http200(content=await goods_crud.product_subcategory.update(db, db_obj=db_obj, obj_in=subcategory_in))


@router.delete("/subcategories/delete/{subcategory_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subcategory(subcategory_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.product_subcategory, subcategory_id, "Subcategory")
    await goods_crud.product_subcategory.delete(db, id=subcategory_id)
    return http204()


# =============================================================================
# 4. suppliers 엔드포인트
# =============================================================================
@router.get("/suppliers/", response_model=ApiResponse[Page[goods_schemas.SupplierResponse]])
async def read_suppliers_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """공급업체 목록을 페이지 단위로 조회합니다. 필터: name, city, country"""
    where = generate_where_conditions(goods_models.Supplier, params.filters, ["name", "city", "country"])
    return http200(content=await goods_crud.supplier.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/suppliers/list", response_model=ApiResponse[List[goods_schemas.SupplierResponse]])
async def read_suppliers(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.supplier.get_all(db))


@router.get("/suppliers/get/{supplier_id}", response_model=ApiResponse[goods_schemas.SupplierResponse])
async def read_supplier(supplier_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.supplier, supplier_id, "Supplier"))


@router.post("/suppliers/save", response_model=ApiResponse[goods_schemas.SupplierResponse], status_code=status.HTTP_201_CREATED)
async def create_supplier(supplier_in: goods_schemas.SupplierCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.supplier.create(db, obj_in=supplier_in))


@router.put("/suppliers/update/{supplier_id}", response_model=ApiResponse[goods_schemas.SupplierResponse])
async def update_supplier(
    supplier_id: int,
    supplier_in: goods_schemas.SupplierUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, goods_crud.supplier, supplier_id, "Supplier")
    return http200(content=await goods_crud.supplier.update(db, db_obj=db_obj, obj_in=supplier_in))


@router.delete("/suppliers/delete/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(supplier_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.supplier, supplier_id, "Supplier")
    await goods_crud.supplier.delete(db, id=supplier_id)
    return http204()


# =============================================================================
# 5. margin_levels 엔드포인트
# =============================================================================
@router.get("/margins/", response_model=ApiResponse[Page[goods_schemas.MarginLevelResponse]])
async def read_margins_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(goods_models.MarginLevel, params.filters, ["name"])
    return http200(content=await goods_crud.margin_level.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/margins/list", response_model=ApiResponse[List[goods_schemas.MarginLevelResponse]])
async def read_margins(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.margin_level.get_all(db))


@router.get("/margins/get/{margin_id}", response_model=ApiResponse[goods_schemas.MarginLevelResponse])
async def read_margin(margin_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.margin_level, margin_id, "MarginLevel"))


@router.post("/margins/save", response_model=ApiResponse[goods_schemas.MarginLevelResponse], status_code=status.HTTP_201_CREATED)
async def create_margin(margin_in: goods_schemas.MarginLevelCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.margin_level.create(db, obj_in=margin_in))


@router.put("/margins/update/{margin_id}", response_model=ApiResponse[goods_schemas.MarginLevelResponse])
async def update_margin(
    margin_id: int,
    margin_in: goods_schemas.MarginLevelUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, goods_crud.margin_level, margin_id, "MarginLevel")
    return http200(content=await goods_crud.margin_level.update(db, db_obj=db_obj, obj_in=margin_in))


@router.delete("/margins/delete/{margin_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_margin(margin_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.margin_level, margin_id, "MarginLevel")
    await goods_crud.margin_level.delete(db, id=margin_id)
    return http204()


# =============================================================================
# 6. product_tags 엔드포인트
# =============================================================================
@router.get("/tags/", response_model=ApiResponse[Page[goods_schemas.ProductTagResponse]])
async def read_tags_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(goods_models.ProductTag, params.filters, ["name"])
    return http200(content=await goods_crud.product_tag.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/tags/list", response_model=ApiResponse[List[goods_schemas.ProductTagResponse]])
async def read_tags(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.product_tag.get_all(db))


@router.get("/tags/get/{tag_id}", response_model=ApiResponse[goods_schemas.ProductTagResponse])
async def read_tag(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.product_tag, tag_id, "Tag"))


@router.post("/tags/save", response_model=ApiResponse[goods_schemas.ProductTagResponse], status_code=status.HTTP_201_CREATED)
async def create_tag(tag_in: goods_schemas.ProductTagCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.product_tag.create(db, obj_in=tag_in))


@router.put("/tags/update/{tag_id}", response_model=ApiResponse[goods_schemas.ProductTagResponse])
async def update_tag(tag_id: int, tag_in: goods_schemas.ProductTagUpdate, db: AsyncSession = Depends(deps.get_db_session)):
    db_obj = await _get_or_404(db, goods_crud.product_tag, tag_id, "Tag")
    return http200(content=await goods_crud.product_tag.update(db, db_obj=db_obj, obj_in=tag_in))


@router.delete("/tags/delete/{tag_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag(tag_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.product_tag, tag_id, "Tag")
    await goods_crud.product_tag.delete(db, id=tag_id)
    return http204()


# =============================================================================
# 7. product_tag_links 엔드포인트
# =============================================================================
@router.get("/tag-links/", response_model=ApiResponse[Page[goods_schemas.ProductTagLinkResponse]])
async def read_tag_links_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(goods_models.ProductTagLink, params.filters, ["product_id", "tag_id"])
    return http200(content=await goods_crud.product_tag_link.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/tag-links/list", response_model=ApiResponse[List[goods_schemas.ProductTagLinkResponse]])
async def read_tag_links(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.product_tag_link.get_all(db))


@router.get("/tag-links/get/{link_id}", response_model=ApiResponse[goods_schemas.ProductTagLinkResponse])
async def read_tag_link(link_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_or_404(db, goods_crud.product_tag_link, link_id, "Tag link"))


@router.post("/tag-links/save", response_model=ApiResponse[goods_schemas.ProductTagLinkResponse], status_code=status.HTTP_201_CREATED)
async def create_tag_link(link_in: goods_schemas.ProductTagLinkCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await goods_crud.product_tag_link.create(db, obj_in=link_in))


@router.put("/tag-links/update/{link_id}", response_model=ApiResponse[goods_schemas.ProductTagLinkResponse])
async def update_tag_link(
    link_id: int,
    link_in: goods_schemas.ProductTagLinkUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, goods_crud.product_tag_link, link_id, "Tag link")
    return http200(content=await goods_crud.product_tag_link.update(db, db_obj=db_obj, obj_in=link_in))


@router.delete("/tag-links/delete/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tag_link(link_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.product_tag_link, link_id, "Tag link")
    await goods_crud.product_tag_link.delete(db, id=link_id)
    return http204()


# =============================================================================
# 8. products 엔드포인트
# =============================================================================
@router.get("/products/", response_model=ApiResponse[Page[goods_schemas.ProductResponse]])
async def read_products_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """상품 목록을 페이지 단위로 조회합니다. 필터: name, sku, description"""
    where = generate_where_conditions(goods_models.Product, params.filters, ["name", "sku", "description"])
    return http200(content=await goods_crud.product.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/products/list", response_model=ApiResponse[List[goods_schemas.ProductResponse]])
async def read_products(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await goods_crud.product.get_all(db))


@router.get("/products/get/{product_id}", response_model=ApiResponse[goods_schemas.ProductDetailResponse])
async def read_product(product_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    """상품 상세 정보를 태그 목록과 함께 조회합니다."""
    db_obj = await goods_crud.product.get_detail(db, product_id)
    if db_obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return http200(content=goods_schemas.ProductDetailResponse.model_validate(db_obj))


@router.post("/products/save", response_model=ApiResponse[goods_schemas.ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(product_in: goods_schemas.ProductCreate, db: AsyncSession = Depends(deps.get_db_session)):
    """상품을 생성합니다. SKU와 그램당 판매가는 서버에서 계산됩니다."""
    return http201(content=await goods_crud.product.create(db, obj_in=product_in))


@router.put("/products/update/{product_id}", response_model=ApiResponse[goods_schemas.ProductResponse])
async def update_product(
    product_id: int,
    product_in: goods_schemas.ProductUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_or_404(db, goods_crud.product, product_id, "Product")
    return http200(content=await goods_crud.product.update(db, db_obj=db_obj, obj_in=product_in))


@router.delete("/products/delete/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_or_404(db, goods_crud.product, product_id, "Product")
    await goods_crud.product.delete(db, id=product_id)
    return http204()
