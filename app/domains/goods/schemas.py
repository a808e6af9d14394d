# app/domains/goods/schemas.py

"""
'goods' 도메인 (상품 카탈로그)의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime
from pydantic import Field
from sqlmodel import SQLModel

from app.domains.shared.models import Visibility


class _Timestamps(SQLModel):
    id: int = Field(..., description="고유 ID")
    created_at: datetime = Field(..., description="레코드 생성 일시")
    updated_at: datetime = Field(..., description="레코드 마지막 업데이트 일시")


# =============================================================================
# 1. origins 스키마
# =============================================================================
class OriginBase(SQLModel):
    country: str = Field(..., min_length=1, max_length=100, description="원산지 국가명")


class OriginCreate(OriginBase):
    pass


class OriginUpdate(SQLModel):
    country: Optional[str] = Field(None, min_length=1, max_length=100)


class OriginResponse(OriginBase, _Timestamps):
    pass


# =============================================================================
# 2. product_categories / product_subcategories 스키마
# =============================================================================
class ProductCategoryBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100, description="카테고리명")
    description: Optional[str] = Field(None, max_length=1000)
    image_ref: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)


class ProductCategoryCreate(ProductCategoryBase):
    pass


class ProductCategoryUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    image_ref: Optional[str] = Field(None, max_length=255)
    image_url: Optional[str] = Field(None, max_length=500)


class ProductCategoryResponse(ProductCategoryBase, _Timestamps):
    slug: str = Field(..., description="카테고리 slug")


class ProductSubcategoryBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    category_id: int = Field(..., gt=0)


class ProductSubcategoryCreate(ProductSubcategoryBase):
    pass


class ProductSubcategoryUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    category_id: Optional[int] = Field(None, gt=0)


class ProductSubcategoryResponse(ProductSubcategoryBase, _Timestamps):
    pass


# =============================================================================
# 3. suppliers 스키마
# =============================================================================
class SupplierBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=150)
    address1: str = Field(..., min_length=1, max_length=255)
    address2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)
    image_ref: Optional[str] = Field(None, max_length=255)


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    address1: Optional[str] = Field(None, min_length=1, max_length=255)
    address2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, min_length=1, max_length=20)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    image_ref: Optional[str] = Field(None, max_length=255)


class SupplierResponse(SupplierBase, _Timestamps):
    pass


# =============================================================================
# 4. margin_levels 스키마
# =============================================================================
class MarginLevelBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    margin: float = Field(..., ge=0, le=1000, description="마진율 (%)")


class MarginLevelCreate(MarginLevelBase):
    pass


class MarginLevelUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    margin: Optional[float] = Field(None, ge=0, le=1000)


class MarginLevelResponse(MarginLevelBase, _Timestamps):
    pass


# =============================================================================
# 5. product_tags / product_tag_links 스키마
# =============================================================================
class ProductTagBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class ProductTagCreate(ProductTagBase):
    pass


class ProductTagUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)


class ProductTagResponse(ProductTagBase, _Timestamps):
    pass


class ProductTagLinkBase(SQLModel):
    product_id: int = Field(..., gt=0)
    tag_id: int = Field(..., gt=0)


class ProductTagLinkCreate(ProductTagLinkBase):
    pass


class ProductTagLinkUpdate(SQLModel):
    product_id: Optional[int] = Field(None, gt=0)
    tag_id: Optional[int] = Field(None, gt=0)


class ProductTagLinkResponse(ProductTagLinkBase, _Timestamps):
    pass


# =============================================================================
# 6. products 스키마
# =============================================================================
class ProductBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=255)
    is_gluten_free: bool = False
    is_gmo_free: bool = False
    description: Optional[str] = Field(None, max_length=1000)
    is_active: bool = False
    is_public: bool = False
    visibility: Visibility = Visibility.DRAFT
    minimum_stock_level: float = Field(0, ge=0)
    quantity: float = Field(0, ge=0)
    additional_cost: float = Field(0, ge=0)
    image_ref: Optional[str] = Field(None, max_length=255)
    cost_per_gram_whole: float = Field(..., ge=0)
    cost_per_gram_ground: float = Field(..., ge=0)
    origin_id: int = Field(..., gt=0)
    category_id: int = Field(..., gt=0)
    subcategory_id: Optional[int] = Field(None, gt=0)
    supplier_id: int = Field(..., gt=0)
    margin_level_id: int = Field(..., gt=0)


class ProductCreate(ProductBase):
    """상품 생성 스키마. SKU와 판매가는 서버에서 계산합니다."""
    pass


class ProductUpdate(SQLModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    is_gluten_free: Optional[bool] = None
    is_gmo_free: Optional[bool] = None
    description: Optional[str] = Field(None, max_length=1000)
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None
    visibility: Optional[Visibility] = None
    minimum_stock_level: Optional[float] = Field(None, ge=0)
    quantity: Optional[float] = Field(None, ge=0)
    additional_cost: Optional[float] = Field(None, ge=0)
    image_ref: Optional[str] = Field(None, max_length=255)
    cost_per_gram_whole: Optional[float] = Field(None, ge=0)
    cost_per_gram_ground: Optional[float] = Field(None, ge=0)
    origin_id: Optional[int] = Field(None, gt=0)
    category_id: Optional[int] = Field(None, gt=0)
    subcategory_id: Optional[int] = Field(None, gt=0)
    supplier_id: Optional[int] = Field(None, gt=0)
    margin_level_id: Optional[int] = Field(None, gt=0)


class ProductResponse(ProductBase, _Timestamps):
    sku: str
    price_per_gram_whole: float
    price_per_gram_ground: float


class ProductDetailResponse(ProductResponse):
    """상품 상세 조회 시 연결된 태그 목록을 함께 반환하는 스키마"""
    tags: List[ProductTagResponse] = []
