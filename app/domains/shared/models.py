# app/domains/shared/models.py

"""
여러 도메인의 ORM 모델이 공통으로 사용하는 믹스인과 Enum을 정의하는 모듈입니다.

- `TimestampMixin`: 모든 테이블에 created_at / updated_at 컬럼을 추가합니다.
- `Visibility`: 상품과 레시피의 노출 상태.
"""

from typing import Optional
from enum import Enum
from datetime import datetime, UTC

from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, SQLModel


class Visibility(str, Enum):
    """상품/레시피 노출 상태"""
    DRAFT = "DRAFT"
    VISIBLE = "VISIBLE"
    HIDDEN = "HIDDEN"
    ARCHIVED = "ARCHIVED"


class TimestampMixin(SQLModel):
    """
    레코드 생성/수정 일시 컬럼을 제공하는 믹스인입니다.
    sa_column 대신 sa_type/sa_column_kwargs를 사용하여 테이블마다 별도의 Column이 생성됩니다.
    updated_at은 수정 시 애플리케이션에서 값을 채우므로 커밋 후 다시 조회할 필요가 없습니다.
    """
    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=TIMESTAMP(timezone=True),
        sa_column_kwargs={"server_default": func.now(), "onupdate": lambda: datetime.now(UTC)},
        description="레코드 마지막 업데이트 일시"
    )
