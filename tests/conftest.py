# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable, List, Optional
from contextlib import asynccontextmanager

# 앱 설정이 로드되기 전에 테스트용 환경 변수를 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-catalog-admin")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app
from app.core import dependencies as deps
from app.core.database import get_session
from app.core.security import get_password_hash

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면 모든 모델 클래스가 임포트되어야 합니다.
from app.domains.models import *    # noqa: F401, F403

from app.domains.usr import models as usr_models
from app.domains.goods import models as goods_models
from app.domains.conversion import models as conversion_models
from app.domains.stock import models as stock_models


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 독립된 인메모리 SQLite 데이터베이스를 사용합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ADMIN_PASSWORD = "adminpass123"
USER_PASSWORD = "userpass123"


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 시작 시 모든 테이블을 생성하고, 종료 시 삭제합니다.
    StaticPool을 사용하여 하나의 인메모리 DB 연결을 공유합니다.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수마다 트랜잭션을 시작하고, 테스트 완료 후 롤백하여
    테스트 간의 격리를 보장하는 비동기 데이터베이스 세션을 제공합니다.
    """
    connection = await test_engine.connect()
    transaction = await connection.begin()
    session = AsyncSession(bind=connection, autoflush=False, expire_on_commit=False)

    try:
        yield session
    finally:
        await session.close()
        await transaction.rollback()
        await connection.close()


# --- 사용자 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    프로필과 속성을 지정하여 테스트 사용자를 생성하는 팩토리 함수를 반환합니다.
    """
    async def _create_user(
        username: str,
        password: str,
        profiles: Optional[List[usr_models.UserProfile]] = None,
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user = usr_models.User(
            username=username,
            password_hash=get_password_hash(password),
            email=f"{username}@catalog.io",
            profiles=[p.value for p in (profiles or [usr_models.UserProfile.CUSTOMER])],
            is_active=is_active,
            **kwargs,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable) -> usr_models.User:
    """관리자(ADMIN) 사용자를 생성합니다."""
    return await user_factory("sysadmin", ADMIN_PASSWORD, profiles=[usr_models.UserProfile.ADMIN], first_name="Admin")


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable) -> usr_models.User:
    """일반 고객(CUSTOMER) 사용자를 생성합니다."""
    return await user_factory("customer", USER_PASSWORD, first_name="Customer")


# --- 인증 클라이언트 픽스처 ---
# 로그인 API(/api/v1/auth/admin/sign-in)를 실제로 호출하고,
# 발급받은 access_token을 Authorization 헤더에 넣은 AsyncClient를 반환합니다.
@pytest_asyncio.fixture(scope="function")
def authorized_client_factory(
    db_session: AsyncSession,
) -> Callable[[usr_models.User, str], AsyncGenerator[AsyncClient, None]]:
    """
    특정 사용자로 로그인된 AsyncClient를 생성하는 팩토리 함수를 반환합니다.
    인증/권한 의존성은 오버라이드하지 않으므로 프로필 검사가 실제로 수행됩니다.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        def override_get_session():
            yield db_session

        original_overrides = main_app.dependency_overrides.copy()
        try:
            main_app.dependency_overrides.update({
                get_session: override_get_session,
                deps.get_db_session: override_get_session,
            })

            transport = ASGITransport(app=main_app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                login_data = {"username": user.username, "password": password}
                res = await client.post("/api/v1/auth/admin/sign-in", data=login_data)

                if res.status_code != 200:
                    pytest.fail(f"Login failed for {user.username}: {res.text}")

                tokens = res.json()["content"]["tokens"]
                client.headers["Authorization"] = f"Bearer {tokens['access_token']}"
                client.refresh_token = tokens["refresh_token"]
                yield client
        finally:
            main_app.dependency_overrides.clear()
            main_app.dependency_overrides.update(original_overrides)

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def admin_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_admin_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """관리자로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_admin_user, ADMIN_PASSWORD) as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def authorized_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """일반 사용자(CUSTOMER)로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_user, USER_PASSWORD) as client:
        yield client


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    인증되지 않은 사용자를 위한 AsyncClient 인스턴스를 생성하고,
    테스트용 비동기 DB 세션을 주입합니다.
    """
    def override_get_session_and_dependency():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_db_session] = override_get_session_and_dependency

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 도메인별 공통 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_margin(db_session: AsyncSession) -> goods_models.MarginLevel:
    margin = goods_models.MarginLevel(name="Standard", margin=50)
    db_session.add(margin)
    await db_session.commit()
    await db_session.refresh(margin)
    return margin


@pytest_asyncio.fixture(scope="function")
async def test_product(db_session: AsyncSession, test_margin: goods_models.MarginLevel) -> goods_models.Product:
    """카테고리/원산지/공급업체를 함께 생성하고 SKU가 지정된 테스트 상품을 반환합니다."""
    category = goods_models.ProductCategory(name="Pepper", slug="pepper")
    origin = goods_models.Origin(country="India")
    supplier = goods_models.Supplier(
        name="Spice Route", address1="1 Market St", city="Kochi", postal_code="682001", country="India"
    )
    db_session.add_all([category, origin, supplier])
    await db_session.commit()

    product = goods_models.Product(
        name="Black Pepper",
        sku="PEP-IN-SPI-0001",
        cost_per_gram_whole=0.1,
        cost_per_gram_ground=0.12,
        price_per_gram_whole=0.15,
        price_per_gram_ground=0.18,
        origin_id=origin.id,
        category_id=category.id,
        supplier_id=supplier.id,
        margin_level_id=test_margin.id,
    )
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product


@pytest_asyncio.fixture(scope="function")
async def test_warehouse(db_session: AsyncSession) -> stock_models.Warehouse:
    """기본(is_default) 창고를 생성합니다."""
    warehouse = stock_models.Warehouse(name="Main Warehouse", address="1 Depot Road", is_default=True)
    db_session.add(warehouse)
    await db_session.commit()
    await db_session.refresh(warehouse)
    return warehouse


@pytest_asyncio.fixture(scope="function")
async def standard_units(db_session: AsyncSession) -> List[conversion_models.UnitOfMeasure]:
    """무게/부피 표준 단위(Gram, Tablespoon)를 생성합니다."""
    gram = conversion_models.UnitOfMeasure(
        name=conversion_models.STANDARD_WEIGHT_UNIT, symbol="g",
        type=conversion_models.UOMType.WEIGHT, factor=1, is_standard=True,
    )
    tablespoon = conversion_models.UnitOfMeasure(
        name=conversion_models.STANDARD_VOLUME_UNIT, symbol="tbsp",
        type=conversion_models.UOMType.VOLUME, factor=1, is_standard=True,
    )
    db_session.add_all([gram, tablespoon])
    await db_session.commit()
    await db_session.refresh(gram)
    await db_session.refresh(tablespoon)
    return [gram, tablespoon]
