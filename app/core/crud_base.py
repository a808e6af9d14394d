# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에서 동작합니다.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """ID를 기준으로 단일 레코드를 조회합니다."""
        return await db.get(self.model, id)

    async def get_multi(
        self, db: AsyncSession, *, skip: int = 0, limit: int = 100, **kwargs: Any
    ) -> List[ModelType]:
        """
        여러 레코드를 조회합니다. 필터링을 위한 키워드 인자를 지원합니다.
        """
        query = select(self.model).offset(skip).limit(limit)

        for field, value in kwargs.items():
            if hasattr(self.model, field):
                query = query.where(getattr(self.model, field) == value)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_all(self, db: AsyncSession) -> List[ModelType]:
        """페이징 없이 전체 레코드를 조회합니다 (list-all 엔드포인트)."""
        result = await db.execute(select(self.model).order_by(self.model.id))
        return result.scalars().all()

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_paginated(
        self,
        db: AsyncSession,
        *,
        page: int = 1,
        page_size: int = 10,
        where: Optional[ColumnElement] = None,
    ) -> Dict[str, Any]:
        """
        조건에 맞는 레코드를 최신 생성 순으로 페이지 단위 조회합니다.
        반환 형식: {"data": [...], "total": n, "page": p, "page_size": s}
        """
        count_query = select(func.count()).select_from(self.model)
        query = select(self.model)
        if where is not None:
            count_query = count_query.where(where)
            query = query.where(where)

        total = (await db.execute(count_query)).scalar_one()

        query = (
            query.order_by(self.model.created_at.desc(), self.model.id.desc())
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        result = await db.execute(query)
        return {
            "data": result.scalars().all(),
            "total": total,
            "page": page,
            "page_size": page_size,
        }

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.debug("Created %s id=%s", self.model.__name__, db_obj.id)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다. 전달된 필드만 반영됩니다.
        """
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.debug("Updated %s id=%s fields=%s", self.model.__name__, db_obj.id, list(update_data))
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제합니다.
        """
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await db.commit()
            logger.debug("Deleted %s id=%s", self.model.__name__, id)
        return db_obj


class CRUDUniqueName(CRUDBase[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    단일 고유 컬럼(기본값 name)을 가진 모델의 CRUD 클래스입니다.
    생성/수정 시 같은 값을 가진 다른 레코드가 있으면 409 Conflict를 발생시킵니다.
    """
    unique_field = "name"
    label = "Record"

    async def ensure_unique(self, db: AsyncSession, value: Any, exclude_id: Optional[int] = None) -> None:
        existing = await self.get_by_attribute(db, attribute=self.unique_field, value=value)
        if existing and existing.id != exclude_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"{self.label} with this {self.unique_field} already exists",
            )

    async def create(self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        value = obj_in.get(self.unique_field) if isinstance(obj_in, dict) else getattr(obj_in, self.unique_field)
        await self.ensure_unique(db, value)
        return await super().create(db, obj_in=obj_in)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
    ) -> ModelType:
        update_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        new_value = update_data.get(self.unique_field)
        if new_value is not None and new_value != getattr(db_obj, self.unique_field):
            await self.ensure_unique(db, new_value, exclude_id=db_obj.id)
        return await super().update(db, db_obj=db_obj, obj_in=update_data)
