# app/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 사용자(users), 로그인 세션 단위의 토큰 패밀리(token_families),
그리고 회전(rotation)되는 리프레시 토큰(refresh_tokens) 테이블에 대한 SQLModel 클래스를 포함합니다.
"""

from typing import Optional, List
from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, ForeignKey
from sqlalchemy.types import TIMESTAMP
from sqlmodel import Field, Relationship, Column

from app.domains.shared.models import TimestampMixin


# =============================================================================
# 사용자 프로필(RBAC)과 토큰 상태 Enum
# =============================================================================
class UserProfile(str, Enum):
    """
    사용자 프로필을 정의하는 Enum 클래스입니다.
    한 사용자는 여러 프로필을 가질 수 있으며 DB에는 문자열 목록(JSON)으로 저장됩니다.
    """
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"
    PARTNER = "PARTNER"


class TokenStatus(str, Enum):
    ACTIVE = "ACTIVE"
    REVOKED = "REVOKED"


# =============================================================================
# 1. users 테이블 모델
# =============================================================================
class UserBase(TimestampMixin):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="사용자 고유 ID")
    username: str = Field(max_length=50, sa_column_kwargs={"unique": True}, description="로그인 사용자명")
    email: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="사용자 이메일")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")
    first_name: Optional[str] = Field(default=None, max_length=100, description="이름")
    last_name: Optional[str] = Field(default=None, max_length=100, description="성")
    profiles: List[str] = Field(
        default_factory=lambda: [UserProfile.CUSTOMER.value],
        sa_column=Column(JSON, nullable=False),
        description="사용자 프로필 목록 (예: [\"ADMIN\"])"
    )
    is_active: bool = Field(default=True, description="계정 활성 여부")
    email_verified_at: Optional[datetime] = Field(
        default=None, sa_type=TIMESTAMP(timezone=True), description="이메일 인증 일시"
    )


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"

    token_families: List["TokenFamily"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 2. token_families 테이블 모델
# =============================================================================
class TokenFamilyBase(TimestampMixin):
    """
    하나의 로그인 세션을 나타내는 토큰 패밀리입니다.
    같은 패밀리의 리프레시 토큰은 부모-자식 체인으로 연결됩니다.
    """
    id: Optional[int] = Field(default=None, primary_key=True, description="토큰 패밀리 고유 ID")
    family: str = Field(max_length=36, sa_column_kwargs={"unique": True}, description="패밀리 식별자 (uuid)")
    user_id: int = Field(
        sa_column=Column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        description="사용자 ID (FK)"
    )
    ip_address: Optional[str] = Field(default=None, max_length=100, description="접속 IP")
    user_agent: Optional[str] = Field(default=None, description="User-Agent 헤더")
    accept_lang: Optional[str] = Field(default=None, max_length=255, description="Accept-Language 헤더")
    device_type: Optional[str] = Field(default=None, max_length=50)
    device_brand: Optional[str] = Field(default=None, max_length=50)
    device_model: Optional[str] = Field(default=None, max_length=50)
    os_name: Optional[str] = Field(default=None, max_length=50)
    os_version: Optional[str] = Field(default=None, max_length=50)
    client_name: Optional[str] = Field(default=None, max_length=50)
    client_type: Optional[str] = Field(default=None, max_length=50)
    client_version: Optional[str] = Field(default=None, max_length=50)
    status: TokenStatus = Field(default=TokenStatus.ACTIVE, description="패밀리 상태")


class TokenFamily(TokenFamilyBase, table=True):
    __tablename__ = "token_families"

    user: Optional[User] = Relationship(back_populates="token_families")
    tokens: List["RefreshToken"] = Relationship(
        back_populates="family", sa_relationship_kwargs={"passive_deletes": True}
    )


# =============================================================================
# 3. refresh_tokens 테이블 모델
# =============================================================================
class RefreshTokenBase(TimestampMixin):
    id: Optional[int] = Field(default=None, primary_key=True, description="리프레시 토큰 고유 ID")
    token: str = Field(sa_column_kwargs={"unique": True}, description="발급된 JWT 문자열")
    expires_at: datetime = Field(sa_type=TIMESTAMP(timezone=True), description="만료 일시")
    status: TokenStatus = Field(default=TokenStatus.ACTIVE, description="토큰 상태")
    family_id: int = Field(
        sa_column=Column(ForeignKey("token_families.id", ondelete="CASCADE"), nullable=False),
        description="토큰 패밀리 ID (FK)"
    )
    parent_token_id: Optional[int] = Field(
        default=None,
        sa_column=Column(ForeignKey("refresh_tokens.id", ondelete="SET NULL")),
        description="회전 전 부모 토큰 ID (자기 참조 FK)"
    )


class RefreshToken(RefreshTokenBase, table=True):
    __tablename__ = "refresh_tokens"

    family: Optional[TokenFamily] = Relationship(back_populates="tokens")
