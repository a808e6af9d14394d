# app/domains/conversion/models.py

"""
'conversion' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import Column, ForeignKey, Integer
from sqlmodel import Field, SQLModel

from app.domains.shared.models import TimestampMixin


class UOMType(str, Enum):
    WEIGHT = "WEIGHT"
    VOLUME = "VOLUME"
    OTHER = "OTHER"


# 비표준 단위가 연결되는 기본 표준 단위 이름
STANDARD_WEIGHT_UNIT = "Gram"
STANDARD_VOLUME_UNIT = "Tablespoon"


# =============================================================================
# 1. units_of_measure 테이블 모델
# =============================================================================
class UnitOfMeasureBase(SQLModel):
    name: str = Field(max_length=100, unique=True, description="단위명 (예: Gram, Tablespoon)")
    symbol: Optional[str] = Field(default=None, max_length=20, description="단위 기호")
    type: UOMType = Field(default=UOMType.WEIGHT, description="단위 유형")
    factor: float = Field(default=1, gt=0, description="표준 단위 대비 환산 계수")
    is_standard: bool = Field(default=False, description="표준 단위 여부")


class UnitOfMeasure(UnitOfMeasureBase, TimestampMixin, table=True):
    __tablename__ = "units_of_measure"

    id: Optional[int] = Field(default=None, primary_key=True)
    standard_unit_id: Optional[int] = Field(
        default=None,
        sa_column=Column(Integer, ForeignKey("units_of_measure.id", ondelete="SET NULL"), nullable=True),
        description="연결된 표준 단위 ID (자기 참조 FK)",
    )


# =============================================================================
# 2. volume_conversions 테이블 모델
# =============================================================================
class VolumeConversionBase(SQLModel):
    """
    상품 한 단위 부피(표준 부피 단위 기준)의 무게를 세 번 측정한 값과 그 평균을 저장합니다.
    """
    product_id: int = Field(foreign_key="products.id", ondelete="CASCADE", unique=True, description="상품 ID (FK)")
    std_vol_id: Optional[int] = Field(default=None, foreign_key="units_of_measure.id", description="표준 부피 단위 ID (FK)")
    measure1: float = Field(ge=0, description="1차 측정값 (g)")
    measure2: float = Field(ge=0, description="2차 측정값 (g)")
    measure3: float = Field(ge=0, description="3차 측정값 (g)")


class VolumeConversion(VolumeConversionBase, TimestampMixin, table=True):
    __tablename__ = "volume_conversions"

    id: Optional[int] = Field(default=None, primary_key=True)
    avg_measure: float = Field(default=0, description="세 측정값의 평균 (자동 계산)")
