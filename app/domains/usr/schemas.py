# app/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 및 인증 세션 관리)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

from typing import Optional, List
from datetime import datetime
from sqlmodel import SQLModel, Field
from pydantic import BaseModel, EmailStr

from . import models as usr_models


# =============================================================================
# 1. 사용자 (User) 스키마
# =============================================================================
class UserBase(SQLModel):
    """사용자 정보의 기본 필드를 정의하는 스키마"""
    username: str = Field(..., min_length=3, max_length=50)
    email: EmailStr = Field(..., max_length=255)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profiles: List[usr_models.UserProfile] = Field(
        default_factory=lambda: [usr_models.UserProfile.CUSTOMER],
        description="사용자 프로필 목록"
    )
    is_active: bool = True


class UserCreate(UserBase):
    """사용자 생성을 위한 스키마"""
    password: str = Field(..., min_length=8)


class UserUpdate(SQLModel):
    """사용자 정보 수정을 위한 스키마"""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profiles: Optional[List[usr_models.UserProfile]] = None
    is_active: Optional[bool] = None


class UserRead(SQLModel):
    """
    사용자 정보 조회를 위한 기본 스키마.
    비밀번호 해시값 등 민감한 정보는 제외됩니다.
    """
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profiles: List[str] = []
    is_active: bool
    email_verified_at: Optional[datetime] = None
    created_at: datetime = Field(..., description="레코드 생성 일시")
    updated_at: datetime = Field(..., description="레코드 마지막 업데이트 일시")


# =============================================================================
# 2. 인증 토큰 (Token) 스키마
# =============================================================================
class TokenPair(BaseModel):
    """Access/Refresh 토큰 쌍"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class SignInResponse(BaseModel):
    """로그인 응답: 토큰 쌍과 사용자 정보"""
    tokens: TokenPair
    user: UserRead


class RefreshRequest(BaseModel):
    """토큰 재발급 / 로그아웃 요청 본문"""
    token: str = Field(..., min_length=1)


class TokenFamilyRead(SQLModel):
    """활성 세션(토큰 패밀리) 조회 스키마"""
    id: int
    family: str
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    accept_lang: Optional[str] = None
    device_type: Optional[str] = None
    device_brand: Optional[str] = None
    device_model: Optional[str] = None
    os_name: Optional[str] = None
    os_version: Optional[str] = None
    client_name: Optional[str] = None
    client_type: Optional[str] = None
    client_version: Optional[str] = None
    status: usr_models.TokenStatus
    created_at: datetime
