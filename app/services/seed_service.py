# app/services/seed_service.py

"""
여러 도메인에 걸쳐 초기 데이터를 준비하는 서비스 모듈입니다.

- 표준 측정 단위 (Gram / Tablespoon): 비표준 단위와 부피 환산이 연결되는 대상
- 기본 창고: 창고를 지정하지 않은 재고 작업이 사용하는 창고
- 기본 사용자: 설정(DEFAULT_USER_*)으로 지정한 관리자 계정

모든 작업은 이름(또는 사용자명)으로 기존 레코드를 찾고, 없을 때만 생성합니다.
"""

import logging
from typing import Dict, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.security import get_password_hash
from app.domains.conversion import models as conversion_models
from app.domains.stock import models as stock_models
from app.domains.usr import crud as usr_crud
from app.domains.usr import models as usr_models

logger = logging.getLogger(__name__)

DEFAULT_UNITS = (
    {
        "name": conversion_models.STANDARD_WEIGHT_UNIT,
        "symbol": "g",
        "type": conversion_models.UOMType.WEIGHT,
    },
    {
        "name": conversion_models.STANDARD_VOLUME_UNIT,
        "symbol": "tbsp",
        "type": conversion_models.UOMType.VOLUME,
    },
)


class SeedService:
    """
    개발/테스트 환경의 초기 데이터를 생성하는 서비스 클래스입니다.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def seed_default_units(self) -> List[conversion_models.UnitOfMeasure]:
        units = []
        for unit_data in DEFAULT_UNITS:
            result = await self.db.execute(
                select(conversion_models.UnitOfMeasure).where(conversion_models.UnitOfMeasure.name == unit_data["name"])
            )
            unit = result.scalars().first()
            if unit is None:
                unit = conversion_models.UnitOfMeasure(**unit_data, factor=1, is_standard=True)
                self.db.add(unit)
                logger.info("Seeding standard unit '%s'", unit_data["name"])
            units.append(unit)
        await self.db.commit()
        return units

    async def seed_default_warehouse(self) -> stock_models.Warehouse:
        result = await self.db.execute(
            select(stock_models.Warehouse).where(stock_models.Warehouse.name == settings.DEFAULT_WAREHOUSE_NAME)
        )
        warehouse = result.scalars().first()
        if warehouse is None:
            # 다른 기본 창고가 이미 있으면 기본 창고 지정은 하지 않습니다.
            existing_default = await self.db.execute(
                select(stock_models.Warehouse).where(stock_models.Warehouse.is_default == True)  # noqa: E712
            )
            warehouse = stock_models.Warehouse(
                name=settings.DEFAULT_WAREHOUSE_NAME,
                is_default=existing_default.scalars().first() is None,
            )
            self.db.add(warehouse)
            await self.db.commit()
            await self.db.refresh(warehouse)
            logger.info("Seeding default warehouse '%s'", warehouse.name)
        return warehouse

    async def create_or_find_default_user(self) -> usr_models.User:
        user = await usr_crud.user.get_by_username(self.db, username=settings.DEFAULT_USER_NAME)
        if user is not None:
            return user

        profiles = [
            usr_models.UserProfile(p.strip()).value
            for p in settings.DEFAULT_USER_PROFILES.split(",")
            if p.strip()
        ]
        user = usr_models.User(
            username=settings.DEFAULT_USER_NAME,
            email=settings.DEFAULT_USER_EMAIL,
            password_hash=get_password_hash(settings.DEFAULT_USER_PASSWORD.get_secret_value()),
            profiles=profiles or [usr_models.UserProfile.ADMIN.value],
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        logger.info("Seeding default user '%s' (%s)", user.username, ", ".join(user.profiles))
        return user

    async def seed_all(self) -> Dict[str, object]:
        """표준 단위, 기본 사용자, 기본 창고를 순서대로 준비합니다."""
        units = await self.seed_default_units()
        user = await self.create_or_find_default_user()
        warehouse = await self.seed_default_warehouse()
        return {"units": units, "user": user, "warehouse": warehouse}
