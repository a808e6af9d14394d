# app/domains/conversion/crud.py

"""
'conversion' 도메인의 CRUD 작업을 담당하는 모듈입니다.
"""

import logging
from typing import Any, Dict, Optional, Union

from fastapi import HTTPException, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase, CRUDUniqueName
from app.domains.goods.models import Product
from . import models as conversion_models
from . import schemas as conversion_schemas

logger = logging.getLogger(__name__)


# =============================================================================
# 1. units_of_measure
# =============================================================================
def standard_unit_name(uom_type: conversion_models.UOMType) -> str:
    """단위 유형에 대응하는 기본 표준 단위 이름을 반환합니다."""
    if uom_type == conversion_models.UOMType.WEIGHT:
        return conversion_models.STANDARD_WEIGHT_UNIT
    return conversion_models.STANDARD_VOLUME_UNIT


class CRUDUnitOfMeasure(CRUDUniqueName):
    label = "Unit of measure"

    def __init__(self):
        super().__init__(model=conversion_models.UnitOfMeasure)

    async def get_standard_unit(self, db: AsyncSession, uom_type: conversion_models.UOMType) -> conversion_models.UnitOfMeasure:
        name = standard_unit_name(uom_type)
        standard = await self.get_by_attribute(db, attribute="name", value=name)
        if not standard:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Standard unit '{name}' not found")
        return standard

    async def create(
        self, db: AsyncSession, *, obj_in: Union[conversion_schemas.UnitOfMeasureCreate, Dict[str, Any]]
    ) -> conversion_models.UnitOfMeasure:
        """
        측정 단위를 생성합니다.
        비표준 단위는 WEIGHT이면 'Gram', 그 외에는 'Tablespoon'에 연결됩니다.
        """
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        data["standard_unit_id"] = None
        if not data.get("is_standard"):
            standard = await self.get_standard_unit(db, data.get("type", conversion_models.UOMType.WEIGHT))
            data["standard_unit_id"] = standard.id
        return await super().create(db, obj_in=data)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: conversion_models.UnitOfMeasure,
        obj_in: Union[conversion_schemas.UnitOfMeasureUpdate, Dict[str, Any]],
    ) -> conversion_models.UnitOfMeasure:
        """
        측정 단위를 수정합니다. 유형이나 표준 여부가 바뀌면 표준 단위 연결을 다시 계산합니다.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        if "type" in update_data or "is_standard" in update_data:
            is_standard = update_data.get("is_standard", db_obj.is_standard)
            if is_standard:
                update_data["standard_unit_id"] = None
            else:
                standard = await self.get_standard_unit(db, update_data.get("type") or db_obj.type)
                if standard.id == db_obj.id:
                    raise HTTPException(
                        status_code=status.HTTP_400_BAD_REQUEST,
                        detail="A standard unit cannot reference itself",
                    )
                update_data["standard_unit_id"] = standard.id
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


unit_of_measure = CRUDUnitOfMeasure()


# =============================================================================
# 2. volume_conversions
# =============================================================================
def average_measure(measure1: float, measure2: float, measure3: float) -> float:
    return (measure1 + measure2 + measure3) / 3


class CRUDVolumeConversion(
    CRUDBase[
        conversion_models.VolumeConversion,
        conversion_schemas.VolumeConversionCreate,
        conversion_schemas.VolumeConversionUpdate,
    ]
):
    def __init__(self):
        super().__init__(model=conversion_models.VolumeConversion)

    async def _check_product(self, db: AsyncSession, product_id: int, exclude_id: Optional[int] = None) -> None:
        if not await db.get(Product, product_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
        existing = await self.get_by_attribute(db, attribute="product_id", value=product_id)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Volume conversion for this product already exists",
            )

    async def _check_unit(self, db: AsyncSession, std_vol_id: int) -> None:
        if not await db.get(conversion_models.UnitOfMeasure, std_vol_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit of measure not found")

    async def create(
        self, db: AsyncSession, *, obj_in: conversion_schemas.VolumeConversionCreate
    ) -> conversion_models.VolumeConversion:
        """
        부피 환산 정보를 생성합니다. 표준 부피 단위가 없으면 'Tablespoon'을 사용하며,
        평균 측정값은 세 측정값으로 계산됩니다.
        """
        await self._check_product(db, obj_in.product_id)
        data = obj_in.model_dump()
        if data.get("std_vol_id") is None:
            standard = await unit_of_measure.get_standard_unit(db, conversion_models.UOMType.VOLUME)
            data["std_vol_id"] = standard.id
        else:
            await self._check_unit(db, data["std_vol_id"])
        data["avg_measure"] = average_measure(data["measure1"], data["measure2"], data["measure3"])
        return await super().create(db, obj_in=data)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: conversion_models.VolumeConversion,
        obj_in: conversion_schemas.VolumeConversionUpdate,
    ) -> conversion_models.VolumeConversion:
        update_data = obj_in.model_dump(exclude_unset=True)
        if update_data.get("product_id") is not None and update_data["product_id"] != db_obj.product_id:
            await self._check_product(db, update_data["product_id"], exclude_id=db_obj.id)
        if update_data.get("std_vol_id") is not None:
            await self._check_unit(db, update_data["std_vol_id"])

        # 병합된 측정값으로 평균을 다시 계산
        measures = [
            update_data.get(key) if update_data.get(key) is not None else getattr(db_obj, key)
            for key in ("measure1", "measure2", "measure3")
        ]
        update_data["avg_measure"] = average_measure(*measures)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)


volume_conversion = CRUDVolumeConversion()
