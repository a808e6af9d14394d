import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool, RedisSettings

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware

# 핵심 설정 및 데이터베이스 모듈 임포트
from app.core.config import settings
from app.core.database import engine, get_session
from app.core.exceptions import setup_exception_handlers
from app.core.logging_config import setup_logging

from app import API_PREFIX, ADMIN_PREFIX

# 모든 테이블 모델을 metadata에 등록
from app.domains import models  # noqa: F401

# 태스크 모듈 임포트
from app.core import tasks as core_tasks
from app.domains.usr import tasks as usr_tasks

# 도메인 라우터 임포트
from app.domains.usr.routers import auth_router, router as users_router
from app.domains.goods.routers import router as goods_router
from app.domains.recipes.routers import router as recipes_router
from app.domains.conversion.routers import router as conversion_router
from app.domains.stock.routers import router as stock_router

setup_logging()
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    usr_tasks.purge_stale_refresh_tokens_task,
]


# ARQ 워커 설정 클래스
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    jobs = [
        {
            'name': 'daily_db_health_check',
            'function': 'app.core.tasks.health_check_database_task',
            'cron': '0 0 * * *',
            'timeout': 300,
            'keep_result': 600,
        },
        {
            'name': 'daily_refresh_token_purge',
            'function': 'app.domains.usr.tasks.purge_stale_refresh_tokens_task',
            'cron': '0 1 * * *',  # 매일 01:00
            'timeout': 1800,
            'keep_result': 3600,
        },
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    Redis에 연결할 수 없으면 app.state.redis를 None으로 두고,
    백그라운드 작업은 요청 안에서 동기적으로 실행됩니다.
    """
    logger.info("FastAPI 애플리케이션 시작 중...")
    try:
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")
    except Exception as e:
        logger.warning("ARQ Redis 커넥션 풀을 생성하지 못했습니다 (동기 실행으로 대체): %s", e)
        app.state.redis = None

    yield  # 애플리케이션 실행

    logger.info("FastAPI 애플리케이션 종료 중...")
    try:
        if app.state.redis is not None:
            await app.state.redis.close()
            logger.info("ARQ Redis 연결 풀 종료 완료.")
        await engine.dispose()
        logger.info("데이터베이스 연결 풀 종료 완료.")
    except Exception as e:
        logger.error("애플리케이션 종료 중 오류 발생: %s", e)


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -- 전역 예외 처리기 등록 (응답 봉투 형식 통일) --
setup_exception_handlers(app)

# -- 도메인 라우터 포함 --
app.include_router(auth_router, prefix=f"{API_PREFIX}/auth/admin")
app.include_router(users_router, prefix=f"{ADMIN_PREFIX}/users")
app.include_router(goods_router, prefix=f"{ADMIN_PREFIX}/goods")
app.include_router(recipes_router, prefix=f"{ADMIN_PREFIX}/compositions")
app.include_router(conversion_router, prefix=f"{ADMIN_PREFIX}/conversion")
app.include_router(stock_router, prefix=f"{ADMIN_PREFIX}/warehouse-system")


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    """
    API의 루트 엔드포인트입니다.
    API의 시작점을 알리고 문서 링크를 제공합니다.
    """
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


# -- 헬스 체크 엔드포인트 --
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    try:
        result = await session.exec(select(1))
        if result.first():
            return {"status": "ok", "database_connection": "successful"}
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database health check failed: No result from test query"
        )
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Database connection error during health check: {e}"
        )


# -- Uvicorn 서버 직접 실행 (개발용) --
# if __name__ == "__main__":
#     import uvicorn
#     uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
