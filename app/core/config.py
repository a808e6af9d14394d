# app/core/config.py

from typing import List
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# 프로젝트의 루트 디렉토리 경로를 계산합니다.
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    애플리케이션의 모든 설정을 정의하는 Pydantic BaseSettings 모델입니다.
    환경 변수 및 .env 파일에서 값을 자동으로 로드합니다.
    """

    # --- Pydantic Settings 설정 ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # 프로젝트 루트의 .env 파일
        env_file_encoding='utf-8',
        extra='ignore',                      # 모델에 없는 변수는 무시
        case_sensitive=True                  # 환경 변수 이름 대소문자 구분
    )

    # --- 애플리케이션 기본 설정 ---
    APP_NAME: str = "Catalog Admin API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Admin backend for products, recipes, units of measure and warehouse stock"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and error messages")
    LOG_LEVEL: str = Field("INFO", description="Root log level (DEBUG, INFO, WARNING, ...)")

    # --- 데이터베이스 설정 ---
    DATABASE_URL: SecretStr = Field(..., description="Async database connection URL (postgresql+asyncpg / sqlite+aiosqlite)")

    # --- JWT (JSON Web Token) 설정 ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24, description="Access token expiration time in minutes")
    REFRESH_TOKEN_EXPIRE_MINUTES: int = Field(60 * 24, description="Refresh token expiration time in minutes")
    MAX_ACTIVE_SESSIONS: int = Field(2, description="Maximum number of concurrent token families per user")

    # --- CORS 설정 ---
    CORS_ALLOW_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # --- ARQ (Redis) 설정 ---
    REDIS_HOST: str = Field("localhost", description="Redis host for the ARQ worker pool")
    REDIS_PORT: int = Field(6379, description="Redis port for the ARQ worker pool")

    # --- 목록 조회 설정 ---
    DEFAULT_PAGE_SIZE: int = Field(10, description="Default page size for paginated list endpoints")

    # --- 레시피 가져오기 설정 ---
    RECIPE_IMPORT_TIMEOUT: float = Field(10.0, description="HTTP timeout in seconds when fetching recipe pages")
    RECIPE_IMPORT_USER_AGENT: str = Field(
        "Mozilla/5.0 (compatible; CatalogAdminBot/0.1)", description="User-Agent header sent to recipe sites"
    )

    # --- 초기 데이터(seed) 설정 ---
    DEFAULT_USER_NAME: str = Field("admin", description="Username of the seeded default user")
    DEFAULT_USER_EMAIL: str = Field("admin@catalog.io", description="Email of the seeded default user")
    DEFAULT_USER_PASSWORD: SecretStr = Field(SecretStr("change-me-now"), description="Password of the seeded default user")
    DEFAULT_USER_PROFILES: str = Field("ADMIN", description="Comma separated profiles of the seeded default user")
    DEFAULT_WAREHOUSE_NAME: str = Field("Main", description="Name of the seeded default warehouse")


settings = Settings()
