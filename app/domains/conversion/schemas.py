# app/domains/conversion/schemas.py

"""
'conversion' 도메인의 Pydantic 스키마를 정의하는 모듈입니다.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field, model_validator
from sqlmodel import SQLModel

from app.domains.shared.schemas import NonNullableUpdate

from .models import UOMType


# =============================================================================
# 1. units_of_measure 스키마
# =============================================================================
class UnitOfMeasureBase(SQLModel):
    name: str = Field(..., min_length=1, max_length=100, description="단위명")
    symbol: Optional[str] = Field(None, max_length=20, description="단위 기호")
    type: UOMType = Field(UOMType.WEIGHT, description="단위 유형")
    factor: float = Field(1, gt=0, description="표준 단위 대비 환산 계수")
    is_standard: bool = Field(False, description="표준 단위 여부")


class UnitOfMeasureCreate(UnitOfMeasureBase):
    """
    측정 단위 생성 스키마.
    표준 단위가 아니면 서버가 유형에 맞는 표준 단위(Gram / Tablespoon)에 연결합니다.
    """
    pass


class UnitOfMeasureUpdate(NonNullableUpdate):
    non_nullable_fields = ("name", "type", "factor", "is_standard")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    symbol: Optional[str] = Field(None, max_length=20)
    type: Optional[UOMType] = None
    factor: Optional[float] = Field(None, gt=0)
    is_standard: Optional[bool] = None


class UnitOfMeasureResponse(UnitOfMeasureBase):
    id: int
    standard_unit_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 2. volume_conversions 스키마
# =============================================================================
class VolumeConversionBase(SQLModel):
    product_id: int = Field(..., gt=0, description="상품 ID")
    std_vol_id: Optional[int] = Field(None, gt=0, description="표준 부피 단위 ID (생략 시 Tablespoon)")
    measure1: float = Field(..., ge=0)
    measure2: float = Field(..., ge=0)
    measure3: float = Field(..., ge=0)


class VolumeConversionCreate(VolumeConversionBase):
    pass


class VolumeConversionUpdate(NonNullableUpdate):
    non_nullable_fields = ("product_id", "measure1", "measure2", "measure3")

    product_id: Optional[int] = Field(None, gt=0)
    std_vol_id: Optional[int] = Field(None, gt=0)
    measure1: Optional[float] = Field(None, ge=0)
    measure2: Optional[float] = Field(None, ge=0)
    measure3: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_not_empty(self):
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self


class VolumeConversionResponse(VolumeConversionBase):
    id: int
    avg_measure: float
    created_at: datetime
    updated_at: datetime


# =============================================================================
# 3. 레시피 가져오기 스키마
# =============================================================================
class ServingsRange(SQLModel):
    min: int
    max: int


class ImportedIngredient(SQLModel):
    quantity: Optional[float] = None
    unit: Optional[str] = None
    name: str


class ImportedRecipe(SQLModel):
    """외부 레시피 사이트에서 추출한 레시피. times는 분 단위, steps는 'Step N' 키를 사용합니다."""
    title: str
    description: str
    servings: Optional[ServingsRange] = None
    times: Dict[str, Optional[float]] = {}
    ingredients: List[ImportedIngredient] = []
    steps: Dict[str, str] = {}
