# app/domains/goods/models.py

"""
'goods' 도메인 (상품 카탈로그)의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

원산지(origins), 상품 카테고리/하위 카테고리, 공급업체(suppliers), 마진 등급(margin_levels),
상품 태그와 상품-태그 연결, 그리고 상품(products) 테이블에 대한 SQLModel 클래스를 포함합니다.
"""

from typing import Optional, List

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from app.domains.shared.models import TimestampMixin, Visibility


# =============================================================================
# 1. origins 테이블 모델
# =============================================================================
class OriginBase(SQLModel):
    country: str = Field(max_length=100, unique=True, description="원산지 국가명")


class Origin(OriginBase, TimestampMixin, table=True):
    __tablename__ = "origins"

    id: Optional[int] = Field(default=None, primary_key=True)


# =============================================================================
# 2. product_categories / product_subcategories 테이블 모델
# =============================================================================
class ProductCategoryBase(SQLModel):
    name: str = Field(max_length=100, unique=True, description="카테고리명")
    description: Optional[str] = Field(default=None, description="설명")
    image_ref: Optional[str] = Field(default=None, max_length=255, unique=True, description="이미지 참조 키")
    image_url: Optional[str] = Field(default=None, max_length=500, description="이미지 URL")


class ProductCategory(ProductCategoryBase, TimestampMixin, table=True):
    __tablename__ = "product_categories"

    id: Optional[int] = Field(default=None, primary_key=True)
    slug: str = Field(max_length=120, description="카테고리명으로 생성된 slug")


class ProductSubcategoryBase(SQLModel):
    name: str = Field(max_length=100, description="하위 카테고리명")
    description: Optional[str] = Field(default=None)
    category_id: int = Field(foreign_key="product_categories.id", ondelete="CASCADE", description="상위 카테고리 ID (FK)")


class ProductSubcategory(ProductSubcategoryBase, TimestampMixin, table=True):
    __tablename__ = "product_subcategories"
    __table_args__ = (UniqueConstraint("category_id", "name", name="uq_subcategory_category_name"),)

    id: Optional[int] = Field(default=None, primary_key=True)


# =============================================================================
# 3. suppliers 테이블 모델
# =============================================================================
class SupplierBase(SQLModel):
    name: str = Field(max_length=150, description="공급업체명")
    address1: str = Field(max_length=255)
    address2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    postal_code: str = Field(max_length=20)
    country: str = Field(max_length=100)
    image_ref: Optional[str] = Field(default=None, max_length=255)


class Supplier(SupplierBase, TimestampMixin, table=True):
    __tablename__ = "suppliers"
    __table_args__ = (
        UniqueConstraint("name", "country", "city", "address1", "postal_code", name="uq_supplier_address"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)


# =============================================================================
# 4. margin_levels 테이블 모델
# =============================================================================
class MarginLevelBase(SQLModel):
    name: str = Field(max_length=100, unique=True, description="마진 등급명")
    margin: float = Field(ge=0, description="마진율 (%)")


class MarginLevel(MarginLevelBase, TimestampMixin, table=True):
    __tablename__ = "margin_levels"

    id: Optional[int] = Field(default=None, primary_key=True)


# =============================================================================
# 5. product_tags / product_tag_links 테이블 모델
# =============================================================================
class ProductTagLinkBase(SQLModel):
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE")
    tag_id: int = Field(foreign_key="product_tags.id", ondelete="CASCADE")


class ProductTagLink(ProductTagLinkBase, TimestampMixin, table=True):
    """
    Product와 ProductTag의 다대다 관계를 위한 연결 테이블 모델.
    """
    __tablename__ = "product_tag_links"
    __table_args__ = (UniqueConstraint("product_id", "tag_id", name="uq_product_tag"),)

    id: Optional[int] = Field(default=None, primary_key=True)


class ProductTagBase(SQLModel):
    name: str = Field(max_length=100, unique=True, description="태그명")
    description: Optional[str] = Field(default=None)


class ProductTag(ProductTagBase, TimestampMixin, table=True):
    __tablename__ = "product_tags"

    id: Optional[int] = Field(default=None, primary_key=True)

    products: List["Product"] = Relationship(
        back_populates="tags",
        link_model=ProductTagLink,
        sa_relationship_kwargs={"passive_deletes": True},
    )


# =============================================================================
# 6. products 테이블 모델
# =============================================================================
class ProductBase(SQLModel):
    name: str = Field(max_length=255, unique=True, description="상품명")
    is_gluten_free: bool = Field(default=False, description="글루텐 프리 여부")
    is_gmo_free: bool = Field(default=False, description="Non-GMO 여부")
    description: Optional[str] = Field(default=None)
    is_active: bool = Field(default=False)
    is_public: bool = Field(default=False)
    visibility: Visibility = Field(default=Visibility.DRAFT)
    minimum_stock_level: float = Field(default=0, ge=0)
    quantity: float = Field(default=0, ge=0)
    additional_cost: float = Field(default=0, ge=0)
    image_ref: Optional[str] = Field(default=None, max_length=255)
    cost_per_gram_whole: float = Field(ge=0, description="통째 그램당 원가")
    cost_per_gram_ground: float = Field(ge=0, description="분쇄 그램당 원가")
    origin_id: int = Field(foreign_key="origins.id")
    category_id: int = Field(foreign_key="product_categories.id")
    subcategory_id: Optional[int] = Field(default=None, foreign_key="product_subcategories.id")
    supplier_id: int = Field(foreign_key="suppliers.id")
    margin_level_id: int = Field(foreign_key="margin_levels.id")


class Product(ProductBase, TimestampMixin, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    sku: str = Field(max_length=100, unique=True, description="재고 관리 코드 (자동 생성)")
    price_per_gram_whole: float = Field(default=0, description="통째 그램당 판매가 (원가 + 마진)")
    price_per_gram_ground: float = Field(default=0, description="분쇄 그램당 판매가 (원가 + 마진)")

    tags: List[ProductTag] = Relationship(
        back_populates="products",
        link_model=ProductTagLink,
        sa_relationship_kwargs={"passive_deletes": True},
    )
