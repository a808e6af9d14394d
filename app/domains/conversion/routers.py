# app/domains/conversion/routers.py

"""
'conversion' 도메인 (측정 단위, 부피 환산, 외부 레시피 가져오기)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
모든 엔드포인트는 관리자(ADMIN) 프로필이 필요합니다.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import HttpUrl
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.filters import generate_where_conditions
from app.core.responses import ApiResponse, Page, http200, http201, http204
from . import crud as conversion_crud
from . import models as conversion_models
from . import schemas as conversion_schemas
from . import services as conversion_services

router = APIRouter(
    tags=["Conversion Management (단위 및 환산 관리)"],
    dependencies=[Depends(deps.get_current_admin_user)],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. unit-of-measure 엔드포인트
# =============================================================================
async def _get_unit_or_404(db: AsyncSession, unit_id: int) -> conversion_models.UnitOfMeasure:
    unit = await conversion_crud.unit_of_measure.get(db, unit_id)
    if unit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unit of measure not found")
    return unit


@router.get("/unit-of-measure/", response_model=ApiResponse[Page[conversion_schemas.UnitOfMeasureResponse]])
async def read_units_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    """측정 단위 목록을 페이지 단위로 조회합니다. 필터: name, symbol"""
    where = generate_where_conditions(conversion_models.UnitOfMeasure, params.filters, ["name", "symbol"])
    return http200(content=await conversion_crud.unit_of_measure.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/unit-of-measure/list", response_model=ApiResponse[List[conversion_schemas.UnitOfMeasureResponse]])
async def read_units(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await conversion_crud.unit_of_measure.get_all(db))


@router.get("/unit-of-measure/get/{unit_id}", response_model=ApiResponse[conversion_schemas.UnitOfMeasureResponse])
async def read_unit(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_unit_or_404(db, unit_id))


@router.post(
    "/unit-of-measure/save",
    response_model=ApiResponse[conversion_schemas.UnitOfMeasureResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_unit(unit_in: conversion_schemas.UnitOfMeasureCreate, db: AsyncSession = Depends(deps.get_db_session)):
    return http201(content=await conversion_crud.unit_of_measure.create(db, obj_in=unit_in))


@router.put("/unit-of-measure/update/{unit_id}", response_model=ApiResponse[conversion_schemas.UnitOfMeasureResponse])
async def update_unit(
    unit_id: int,
    unit_in: conversion_schemas.UnitOfMeasureUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_unit_or_404(db, unit_id)
    return http200(content=await conversion_crud.unit_of_measure.update(db, db_obj=db_obj, obj_in=unit_in))


@router.delete("/unit-of-measure/delete/{unit_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_unit(unit_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_unit_or_404(db, unit_id)
    await conversion_crud.unit_of_measure.delete(db, id=unit_id)
    return http204()


# =============================================================================
# 2. volume 엔드포인트
# =============================================================================
async def _get_volume_or_404(db: AsyncSession, volume_id: int) -> conversion_models.VolumeConversion:
    volume = await conversion_crud.volume_conversion.get(db, volume_id)
    if volume is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Volume conversion not found")
    return volume


@router.get("/volume/", response_model=ApiResponse[Page[conversion_schemas.VolumeConversionResponse]])
async def read_volumes_page(params: deps.PageQuery = Depends(), db: AsyncSession = Depends(deps.get_db_session)):
    where = generate_where_conditions(conversion_models.VolumeConversion, params.filters, ["product_id"])
    return http200(content=await conversion_crud.volume_conversion.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/volume/list", response_model=ApiResponse[List[conversion_schemas.VolumeConversionResponse]])
async def read_volumes(db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await conversion_crud.volume_conversion.get_all(db))


@router.get("/volume/get/{volume_id}", response_model=ApiResponse[conversion_schemas.VolumeConversionResponse])
async def read_volume(volume_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    return http200(content=await _get_volume_or_404(db, volume_id))


@router.post(
    "/volume/save",
    response_model=ApiResponse[conversion_schemas.VolumeConversionResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_volume(volume_in: conversion_schemas.VolumeConversionCreate, db: AsyncSession = Depends(deps.get_db_session)):
    """부피 환산 정보를 생성합니다. avg_measure는 서버에서 계산됩니다."""
    return http201(content=await conversion_crud.volume_conversion.create(db, obj_in=volume_in))


@router.put("/volume/update/{volume_id}", response_model=ApiResponse[conversion_schemas.VolumeConversionResponse])
async def update_volume(
    volume_id: int,
    volume_in: conversion_schemas.VolumeConversionUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
):
    db_obj = await _get_volume_or_404(db, volume_id)
    return http200(content=await conversion_crud.volume_conversion.update(db, db_obj=db_obj, obj_in=volume_in))


@router.delete("/volume/delete/{volume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_volume(volume_id: int, db: AsyncSession = Depends(deps.get_db_session)):
    await _get_volume_or_404(db, volume_id)
    await conversion_crud.volume_conversion.delete(db, id=volume_id)
    return http204()


# =============================================================================
# 3. recipe (외부 레시피 가져오기) 엔드포인트
# =============================================================================
def get_recipe_import_service() -> conversion_services.RecipeImportService:
    return conversion_services.RecipeImportService()


@router.get("/recipe", response_model=ApiResponse[conversion_schemas.ImportedRecipe])
async def import_recipe(
    url: HttpUrl = Query(..., description="허용된 레시피 사이트의 레시피 페이지 URL"),
    service: conversion_services.RecipeImportService = Depends(get_recipe_import_service),
):
    """
    허용된 사이트(allrecipes.com, cooking.nytimes.com, simplyrecipes.com)의 레시피 페이지에서
    제목, 설명, 인분, 조리 시간, 재료, 조리 단계를 추출합니다. 결과는 저장하지 않습니다.
    """
    return http200(content=await service.extract_recipe_data(str(url)))
