# app/domains/goods/crud.py

"""
'goods' 도메인의 CRUD 작업을 담당하는 모듈입니다.

- 이름/국가 등 고유 값은 저장 전에 중복을 검사하여 409 Conflict를 반환합니다.
- 상품은 생성 시 SKU와 판매가를 계산하고, 원가나 마진 등급이 바뀌면 판매가를 다시 계산합니다.
"""

import logging
import random
from typing import Any, Dict, Optional, Union

from fastapi import HTTPException, status
from sqlalchemy.orm import selectinload
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, CRUDUniqueName
from app.utils.strings import extract_code, generate_slug
from . import models as goods_models
from . import schemas as goods_schemas

logger = logging.getLogger(__name__)


def _conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def _not_found(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


# =============================================================================
# 1. origins
# =============================================================================
class CRUDOrigin(CRUDUniqueName):
    unique_field = "country"
    label = "Origin"

    def __init__(self):
        super().__init__(model=goods_models.Origin)


origin = CRUDOrigin()


# =============================================================================
# 2. product_categories / product_subcategories
# =============================================================================
class CRUDProductCategory(CRUDUniqueName):
    label = "Category"

    def __init__(self):
        super().__init__(model=goods_models.ProductCategory)

    async def create(self, db: AsyncSession, *, obj_in: goods_schemas.ProductCategoryCreate) -> goods_models.ProductCategory:
        """카테고리를 생성하며 이름으로 slug를 만듭니다."""
        await self.ensure_unique(db, obj_in.name)
        if obj_in.image_ref and await self.get_by_attribute(db, attribute="image_ref", value=obj_in.image_ref):
            raise _conflict("Category with this image_ref already exists")
        db_obj = goods_models.ProductCategory.model_validate(obj_in, update={"slug": generate_slug(obj_in.name)})
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("name"):
            update_data["slug"] = generate_slug(update_data["name"])
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


product_category = CRUDProductCategory()


class CRUDProductSubcategory(CRUDBase[goods_models.ProductSubcategory, goods_schemas.ProductSubcategoryCreate, goods_schemas.ProductSubcategoryUpdate]):
    def __init__(self):
        super().__init__(model=goods_models.ProductSubcategory)

    async def _check(self, db: AsyncSession, *, category_id: int, name: str, exclude_id: Optional[int] = None) -> None:
        if not await db.get(goods_models.ProductCategory, category_id):
            raise _not_found("Category not found")
        result = await db.execute(
            select(self.model).where(self.model.category_id == category_id, self.model.name == name)
        )
        existing = result.scalars().first()
        if existing and existing.id != exclude_id:
            raise _conflict("Subcategory with this name already exists in the category")

    async def create(self, db: AsyncSession, *, obj_in: goods_schemas.ProductSubcategoryCreate) -> goods_models.ProductSubcategory:
        await self._check(db, category_id=obj_in.category_id, name=obj_in.name)
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        if "name" in update_data or "category_id" in update_data:
            await self._check(
                db,
                category_id=update_data.get("category_id") or db_obj.category_id,
                name=update_data.get("name") or db_obj.name,
                exclude_id=db_obj.id,
            )
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


product_subcategory = CRUDProductSubcategory()


# =============================================================================
# 3. suppliers
# =============================================================================
SUPPLIER_KEY = ("name", "country", "city", "address1", "postal_code")


class CRUDSupplier(CRUDBase[goods_models.Supplier, goods_schemas.SupplierCreate, goods_schemas.SupplierUpdate]):
    def __init__(self):
        super().__init__(model=goods_models.Supplier)

    async def _ensure_unique(self, db: AsyncSession, values: Dict[str, Any], exclude_id: Optional[int] = None) -> None:
        statement = select(self.model).where(*[getattr(self.model, k) == values[k] for k in SUPPLIER_KEY])
        existing = (await db.execute(statement)).scalars().first()
        if existing and existing.id != exclude_id:
            raise _conflict("Supplier with this name and address already exists")

    async def create(self, db: AsyncSession, *, obj_in: goods_schemas.SupplierCreate) -> goods_models.Supplier:
        await self._ensure_unique(db, obj_in.model_dump())
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        if any(k in update_data for k in SUPPLIER_KEY):
            merged = {k: update_data.get(k, getattr(db_obj, k)) for k in SUPPLIER_KEY}
            await self._ensure_unique(db, merged, exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


supplier = CRUDSupplier()


# =============================================================================
# 4. margin_levels / product_tags
# =============================================================================
class CRUDMarginLevel(CRUDUniqueName):
    label = "MarginLevel"

    def __init__(self):
        super().__init__(model=goods_models.MarginLevel)


margin_level = CRUDMarginLevel()


class CRUDProductTag(CRUDUniqueName):
    label = "Tag"

    def __init__(self):
        super().__init__(model=goods_models.ProductTag)


product_tag = CRUDProductTag()


class CRUDProductTagLink(CRUDBase[goods_models.ProductTagLink, goods_schemas.ProductTagLinkCreate, goods_schemas.ProductTagLinkUpdate]):
    def __init__(self):
        super().__init__(model=goods_models.ProductTagLink)

    async def _check(self, db: AsyncSession, *, product_id: int, tag_id: int, exclude_id: Optional[int] = None) -> None:
        if not await db.get(goods_models.Product, product_id):
            raise _not_found("Product not found")
        if not await db.get(goods_models.ProductTag, tag_id):
            raise _not_found("Tag not found")
        result = await db.execute(
            select(self.model).where(self.model.product_id == product_id, self.model.tag_id == tag_id)
        )
        existing = result.scalars().first()
        if existing and existing.id != exclude_id:
            raise _conflict("Product is already linked to this tag")

    async def create(self, db: AsyncSession, *, obj_in: goods_schemas.ProductTagLinkCreate) -> goods_models.ProductTagLink:
        await self._check(db, product_id=obj_in.product_id, tag_id=obj_in.tag_id)
        return await super().create(db, obj_in=obj_in)

    async def update(self, db: AsyncSession, *, db_obj, obj_in):
        update_data = obj_in.model_dump(exclude_unset=True)
        await self._check(
            db,
            product_id=update_data.get("product_id") or db_obj.product_id,
            tag_id=update_data.get("tag_id") or db_obj.tag_id,
            exclude_id=db_obj.id,
        )
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


product_tag_link = CRUDProductTagLink()


# =============================================================================
# 5. products
# =============================================================================
def calculate_price(cost: float, margin: float) -> float:
    """원가에 마진율(%)을 더한 판매가를 계산합니다."""
    return cost + cost * margin / 100


async def generate_sku(
    db: AsyncSession,
    *,
    category_name: Optional[str],
    origin_country: Optional[str],
    supplier_name: Optional[str],
    is_gluten_free: bool,
    is_gmo_free: bool,
) -> str:
    """
    CAT-OR-SUP-NNNN[-GF][-NM] 형식의 SKU를 생성합니다.

    NNNN은 같은 접두어를 가진 SKU 일련번호의 최대값에 1을 더한 값이며,
    생성된 SKU가 이미 존재하면 임의의 3자리 숫자를 덧붙입니다.
    """
    pattern = "-".join([
        extract_code(category_name, 3, "XXX"),
        extract_code(origin_country, 2, "XX"),
        extract_code(supplier_name, 3, "XXX"),
    ])

    result = await db.execute(
        select(goods_models.Product.sku).where(goods_models.Product.sku.startswith(f"{pattern}-"))
    )
    # 접두어 바로 뒤의 일련번호 구간만 읽습니다 (속성 플래그는 무시).
    numbers = [sku[len(pattern) + 1:].split("-")[0] for sku in result.scalars()]
    sequence = max((int(number) for number in numbers if number.isdigit()), default=0) + 1

    parts = [pattern, f"{sequence:04d}"]
    if is_gluten_free:
        parts.append("GF")
    if is_gmo_free:
        parts.append("NM")
    sku = "-".join(parts)

    exists = await db.execute(select(goods_models.Product.id).where(goods_models.Product.sku == sku))
    if exists.scalars().first() is not None:
        sku = f"{sku}-{random.randint(100, 999)}"
    return sku


class CRUDProduct(CRUDUniqueName):
    label = "Product"

    def __init__(self):
        super().__init__(model=goods_models.Product)

    async def _get_margin(self, db: AsyncSession, margin_level_id: int) -> goods_models.MarginLevel:
        margin = await db.get(goods_models.MarginLevel, margin_level_id)
        if not margin:
            raise _not_found("MarginLevel not found")
        return margin

    async def _get_required(self, db: AsyncSession, model, id: Optional[int], label: str):
        if id is None:
            return None
        obj = await db.get(model, id)
        if not obj:
            raise _not_found(f"{label} not found")
        return obj

    async def create(self, db: AsyncSession, *, obj_in: goods_schemas.ProductCreate) -> goods_models.Product:
        """
        상품을 생성합니다. 마진 등급으로 판매가를 계산하고 SKU를 생성합니다.
        """
        margin = await self._get_margin(db, obj_in.margin_level_id)
        category = await self._get_required(db, goods_models.ProductCategory, obj_in.category_id, "Category")
        origin_obj = await self._get_required(db, goods_models.Origin, obj_in.origin_id, "Origin")
        supplier_obj = await self._get_required(db, goods_models.Supplier, obj_in.supplier_id, "Supplier")
        await self._get_required(db, goods_models.ProductSubcategory, obj_in.subcategory_id, "Subcategory")
        await self.ensure_unique(db, obj_in.name)

        sku = await generate_sku(
            db,
            category_name=category.name,
            origin_country=origin_obj.country,
            supplier_name=supplier_obj.name,
            is_gluten_free=obj_in.is_gluten_free,
            is_gmo_free=obj_in.is_gmo_free,
        )
        db_obj = goods_models.Product.model_validate(obj_in, update={
            "sku": sku,
            "price_per_gram_whole": calculate_price(obj_in.cost_per_gram_whole, margin.margin),
            "price_per_gram_ground": calculate_price(obj_in.cost_per_gram_ground, margin.margin),
        })
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.info("Product '%s' created with SKU %s", db_obj.name, db_obj.sku)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: goods_models.Product,
        obj_in: Union[goods_schemas.ProductUpdate, Dict[str, Any]],
    ) -> goods_models.Product:
        """
        상품을 수정합니다. 원가 또는 마진 등급이 바뀌면 판매가를 다시 계산합니다.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if {"cost_per_gram_whole", "cost_per_gram_ground", "margin_level_id"} & update_data.keys():
            margin = await self._get_margin(db, update_data.get("margin_level_id") or db_obj.margin_level_id)
            cost_whole = update_data.get("cost_per_gram_whole", db_obj.cost_per_gram_whole)
            cost_ground = update_data.get("cost_per_gram_ground", db_obj.cost_per_gram_ground)
            update_data["price_per_gram_whole"] = calculate_price(cost_whole, margin.margin)
            update_data["price_per_gram_ground"] = calculate_price(cost_ground, margin.margin)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)

    async def get_detail(self, db: AsyncSession, id: int) -> Optional[goods_models.Product]:
        """태그 목록을 함께 로드하여 상품을 조회합니다."""
        result = await db.execute(
            select(self.model)
            .options(selectinload(self.model.tags))
            .where(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    async def get_by_sku(self, db: AsyncSession, *, sku: str) -> Optional[goods_models.Product]:
        return await self.get_by_attribute(db, attribute="sku", value=sku)


product = CRUDProduct()
