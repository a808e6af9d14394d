# app/domains/usr/routers.py

"""
'usr' 도메인 (관리자 인증 및 사용자 관리)과 관련된 API 엔드포인트를 정의하는 모듈입니다.

- `auth_router`: /auth/admin 하위의 로그인, 토큰 재발급, 로그아웃, 세션 조회.
- `router`: /admin/users 하위의 사용자 관리 (관리자 전용).
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.filters import generate_where_conditions
from app.core.responses import ApiResponse, Page, http200, http201, http204

# usr 도메인의 CRUD, 모델, 스키마, 서비스
from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas
from . import services as usr_services


auth_router = APIRouter(
    tags=["Admin Authentication (관리자 인증)"],
)

router = APIRouter(
    tags=["User Management (사용자 관리)"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. 인증 (Authentication) 엔드포인트
# =============================================================================
@auth_router.post("/sign-in", response_model=ApiResponse[usr_schemas.SignInResponse], summary="관리자 로그인")
async def sign_in(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
):
    """사용자명/비밀번호로 로그인하여 Access/Refresh 토큰 쌍을 발급받습니다."""
    result = await usr_services.sign_in(
        db,
        username=form_data.username,
        password=form_data.password,
        client_info=deps.get_client_info(request),
    )
    return http200(content=result, message="Successfully signed in")


@auth_router.post("/refresh", response_model=ApiResponse[usr_schemas.TokenPair], summary="토큰 재발급")
async def refresh_token(
    body: usr_schemas.RefreshRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    tokens = await usr_services.refresh(db, token=body.token)
    return http200(content=tokens, message="Token refreshed")


@auth_router.delete("/sign-out", response_model=ApiResponse[None], summary="현재 세션 로그아웃")
async def sign_out(
    body: usr_schemas.RefreshRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    await usr_services.logout(db, token=body.token)
    return http200(message="Successfully signed out")


@auth_router.delete("/close-all-sessions", response_model=ApiResponse[dict], summary="모든 세션 종료")
async def close_all_sessions(
    request: Request,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """현재 사용자의 모든 활성 세션을 폐기합니다."""
    arq_redis_pool = getattr(request.app.state, "redis", None)
    revoked = await usr_services.logout_all(db, user_id=current_user.id, arq_redis_pool=arq_redis_pool)
    return http200(content={"revoked_sessions": revoked}, message="All sessions closed")


@auth_router.get("/all-active-sessions", response_model=ApiResponse[List[usr_schemas.TokenFamilyRead]], summary="활성 세션 목록")
async def read_active_sessions(
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    sessions = await usr_services.get_active_sessions(db, user_id=current_user.id)
    return http200(content=sessions)


@auth_router.get("/me", response_model=ApiResponse[usr_schemas.UserRead], summary="현재 사용자 정보 조회")
async def read_users_me(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return http200(content=current_user)


# =============================================================================
# 2. 사용자 (User) 관리 엔드포인트
# =============================================================================
@router.get("/", response_model=ApiResponse[Page[usr_schemas.UserRead]], summary="사용자 목록 (페이지)")
async def read_users(
    params: deps.PageQuery = Depends(),
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    where = generate_where_conditions(
        usr_models.User, params.filters, ["username", "email", "first_name", "last_name"]
    )
    return http200(content=await usr_crud.user.get_paginated(db, page=params.page, page_size=params.page_size, where=where))


@router.get("/list", response_model=ApiResponse[List[usr_schemas.UserRead]], summary="사용자 전체 목록")
async def read_all_users(
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return http200(content=await usr_crud.user.get_all(db))


@router.get("/get/{user_id}", response_model=ApiResponse[usr_schemas.UserRead], summary="특정 사용자 조회")
async def read_user(
    user_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    user = await usr_crud.user.get(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return http200(content=user)


@router.post("/save", response_model=ApiResponse[usr_schemas.UserRead], status_code=status.HTTP_201_CREATED, summary="새 사용자 생성")
async def create_user(
    user_in: usr_schemas.UserCreate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return http201(content=await usr_crud.user.create(db, obj_in=user_in))


@router.put("/update/{user_id}", response_model=ApiResponse[usr_schemas.UserRead], summary="사용자 업데이트")
async def update_user(
    user_id: int,
    user_in: usr_schemas.UserUpdate,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    db_user = await usr_crud.user.get(db, user_id)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return http200(content=await usr_crud.user.update(db, db_obj=db_user, obj_in=user_in))


@router.delete("/delete/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="사용자 삭제")
async def delete_user(
    user_id: int,
    db: AsyncSession = Depends(deps.get_db_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    db_user = await usr_crud.user.get(db, user_id)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if db_user.id == current_admin_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete your own account")
    await usr_crud.user.delete(db, id=user_id)
    return http204()
