# app/domains/usr/services.py

"""
관리자 인증 세션 서비스 모듈입니다.

로그인 한 번이 하나의 토큰 패밀리(TokenFamily)를 만들고, 리프레시 토큰은
재발급될 때마다 같은 패밀리 안에서 부모-자식 체인으로 회전(rotation)합니다.
이미 사용(폐기)된 리프레시 토큰이 다시 제시되면 탈취로 간주하여 패밀리 전체를 폐기합니다.
"""

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from jose import JWTError
from sqlalchemy import update
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.security import create_access_token, create_refresh_token, decode_token
from app.utils.dates import as_utc, utcnow
from . import crud as usr_crud
from . import models as usr_models
from . import tasks as usr_tasks

logger = logging.getLogger(__name__)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _issue_access_token(user: usr_models.User) -> str:
    return create_access_token(data={
        "sub": user.username,
        "user_id": user.id,
        "email": user.email,
        "profiles": list(user.profiles or []),
    })


async def _issue_refresh_token(
    db: AsyncSession,
    *,
    user: usr_models.User,
    family: usr_models.TokenFamily,
    parent: Optional[usr_models.RefreshToken] = None,
) -> usr_models.RefreshToken:
    """리프레시 토큰을 발급하여 패밀리에 추가합니다. 커밋은 호출자가 수행합니다."""
    expires_delta = timedelta(minutes=settings.REFRESH_TOKEN_EXPIRE_MINUTES)
    token = create_refresh_token(
        data={"user_id": user.id, "profiles": list(user.profiles or [])},
        expires_delta=expires_delta,
    )
    refresh_token = usr_models.RefreshToken(
        token=token,
        expires_at=utcnow() + expires_delta,
        status=usr_models.TokenStatus.ACTIVE,
        family_id=family.id,
        parent_token_id=parent.id if parent else None,
    )
    db.add(refresh_token)
    await db.flush()
    return refresh_token


async def _revoke_family(db: AsyncSession, family: usr_models.TokenFamily) -> None:
    """패밀리와 그 안의 모든 활성 리프레시 토큰을 폐기합니다."""
    await db.execute(
        update(usr_models.RefreshToken)
        .where(
            usr_models.RefreshToken.family_id == family.id,
            usr_models.RefreshToken.status == usr_models.TokenStatus.ACTIVE,
        )
        .values(status=usr_models.TokenStatus.REVOKED)
    )
    family.status = usr_models.TokenStatus.REVOKED
    db.add(family)
    logger.info("Token family %s revoked (user_id=%s)", family.family, family.user_id)


async def get_active_sessions(db: AsyncSession, *, user_id: int) -> List[usr_models.TokenFamily]:
    """사용자의 활성 토큰 패밀리(로그인 세션)를 오래된 순으로 조회합니다."""
    statement = (
        select(usr_models.TokenFamily)
        .where(
            usr_models.TokenFamily.user_id == user_id,
            usr_models.TokenFamily.status == usr_models.TokenStatus.ACTIVE,
        )
        .order_by(usr_models.TokenFamily.created_at.asc(), usr_models.TokenFamily.id.asc())
    )
    result = await db.execute(statement)
    return result.scalars().all()


async def _create_token_family(
    db: AsyncSession, *, user: usr_models.User, client_info: Dict[str, Any]
) -> usr_models.TokenFamily:
    """
    새 로그인 세션을 만듭니다.
    활성 세션 수가 MAX_ACTIVE_SESSIONS 이상이면 가장 오래된 세션부터 폐기합니다.
    """
    active_families = await get_active_sessions(db, user_id=user.id)
    overflow = len(active_families) - settings.MAX_ACTIVE_SESSIONS + 1
    for family in active_families[:max(overflow, 0)]:
        await _revoke_family(db, family)

    family = usr_models.TokenFamily(
        family=str(uuid.uuid4()),
        user_id=user.id,
        status=usr_models.TokenStatus.ACTIVE,
        **client_info,
    )
    db.add(family)
    await db.flush()
    return family


async def sign_in(
    db: AsyncSession, *, username: str, password: str, client_info: Dict[str, Any]
) -> Dict[str, Any]:
    """
    사용자명/비밀번호로 로그인하고 토큰 쌍과 사용자 정보를 반환합니다.
    """
    user = await usr_crud.user.authenticate(db, username=username, password=password)
    if not user:
        raise _unauthorized("Username or password incorrect")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")

    family = await _create_token_family(db, user=user, client_info=client_info)
    refresh_token = await _issue_refresh_token(db, user=user, family=family)
    access_token = _issue_access_token(user)
    await db.commit()

    logger.info("User '%s' signed in (family=%s, ip=%s)", user.username, family.family, client_info.get("ip_address"))
    return {
        "tokens": {
            "access_token": access_token,
            "refresh_token": refresh_token.token,
            "token_type": "bearer",
        },
        "user": user,
    }


async def _get_refresh_token(db: AsyncSession, token: str) -> Optional[usr_models.RefreshToken]:
    result = await db.execute(
        select(usr_models.RefreshToken).where(usr_models.RefreshToken.token == token)
    )
    return result.scalars().first()


async def refresh(db: AsyncSession, *, token: str) -> Dict[str, str]:
    """
    리프레시 토큰을 회전시키고 새로운 토큰 쌍을 발급합니다.
    폐기되었거나 만료된 토큰이 제시되면 해당 패밀리 전체를 폐기합니다.
    """
    stored = await _get_refresh_token(db, token)
    if stored is None:
        raise _unauthorized("Token not found")

    family = await db.get(usr_models.TokenFamily, stored.family_id)
    if stored.status != usr_models.TokenStatus.ACTIVE or family.status != usr_models.TokenStatus.ACTIVE:
        logger.warning("Reuse of revoked refresh token detected (family=%s)", family.family)
        await _revoke_family(db, family)
        await db.commit()
        raise _unauthorized("Token is revoked or expired")

    if as_utc(stored.expires_at) <= utcnow():
        await _revoke_family(db, family)
        await db.commit()
        raise _unauthorized("Token expired")

    try:
        decode_token(token)
    except JWTError as e:
        logger.info("Refresh token rejected: %s", e)
        raise _unauthorized("Invalid refresh token")

    user = await db.get(usr_models.User, family.user_id)
    if user is None or not user.is_active:
        raise _unauthorized("Could not validate credentials")

    stored.status = usr_models.TokenStatus.REVOKED
    db.add(stored)
    new_token = await _issue_refresh_token(db, user=user, family=family, parent=stored)
    access_token = _issue_access_token(user)
    await db.commit()

    logger.info("Refresh token rotated for user '%s' (family=%s)", user.username, family.family)
    return {
        "access_token": access_token,
        "refresh_token": new_token.token,
        "token_type": "bearer",
    }


async def logout(db: AsyncSession, *, token: str) -> None:
    """
    제시된 리프레시 토큰과 그 자손 토큰들, 그리고 소속 패밀리를 폐기합니다.
    """
    stored = await _get_refresh_token(db, token)
    if stored is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Token not found")

    pending = [stored.id]
    while pending:
        await db.execute(
            update(usr_models.RefreshToken)
            .where(usr_models.RefreshToken.id.in_(pending))
            .values(status=usr_models.TokenStatus.REVOKED)
        )
        children = await db.execute(
            select(usr_models.RefreshToken.id).where(usr_models.RefreshToken.parent_token_id.in_(pending))
        )
        pending = children.scalars().all()

    family = await db.get(usr_models.TokenFamily, stored.family_id)
    await _revoke_family(db, family)
    await db.commit()


async def logout_all(db: AsyncSession, *, user_id: int, arq_redis_pool=None) -> int:
    """
    사용자의 모든 활성 세션을 폐기하고 오래된 토큰 정리 작업을 실행합니다.
    폐기한 세션 수를 반환합니다.
    """
    families = await get_active_sessions(db, user_id=user_id)
    for family in families:
        await _revoke_family(db, family)
    await db.commit()

    if arq_redis_pool:
        await arq_redis_pool.enqueue_job("purge_stale_refresh_tokens_task", user_id)
    else:
        logger.info("ARQ Redis pool not available, purging refresh tokens synchronously.")
        await usr_tasks.purge_stale_refresh_tokens_task({"db": db}, user_id)

    return len(families)
