# app/domains/usr/tasks.py

import logging
from typing import Any, Dict, Optional

from sqlalchemy import delete, exists, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.database import get_async_session_context
from app.utils.dates import utcnow
from app.domains.usr import models as usr_models

logger = logging.getLogger(__name__)


async def _purge(db: AsyncSession, user_id: Optional[int]) -> Dict[str, Any]:
    now = utcnow()
    token_query = delete(usr_models.RefreshToken).where(
        or_(
            usr_models.RefreshToken.status == usr_models.TokenStatus.REVOKED,
            usr_models.RefreshToken.expires_at < now,
        )
    )
    family_query = delete(usr_models.TokenFamily).where(
        usr_models.TokenFamily.status == usr_models.TokenStatus.REVOKED,
        ~exists().where(usr_models.RefreshToken.family_id == usr_models.TokenFamily.id),
    )
    if user_id is not None:
        token_query = token_query.where(
            usr_models.RefreshToken.family_id.in_(
                select(usr_models.TokenFamily.id).where(usr_models.TokenFamily.user_id == user_id)
            )
        )
        family_query = family_query.where(usr_models.TokenFamily.user_id == user_id)

    tokens_result = await db.execute(token_query.execution_options(synchronize_session="fetch"))
    families_result = await db.execute(family_query.execution_options(synchronize_session="fetch"))
    await db.commit()

    logger.info(
        "작업 완료! 리프레시 토큰 %d개, 토큰 패밀리 %d개 삭제됨 (user_id=%s).",
        tokens_result.rowcount, families_result.rowcount, user_id,
    )
    return {"status": "ok", "deleted_tokens": tokens_result.rowcount, "deleted_families": families_result.rowcount}


async def purge_stale_refresh_tokens_task(
    ctx: Dict[str, Any], user_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    폐기되었거나 만료된 리프레시 토큰과, 토큰이 남지 않은 폐기된 패밀리를 삭제합니다.
    user_id가 주어지면 해당 사용자의 데이터만 정리합니다.
    """
    logger.info("백그라운드 작업 시작: 리프레시 토큰 정리 (user_id=%s)", user_id)
    db: Optional[AsyncSession] = ctx.get("db")
    if db is not None:
        return await _purge(db, user_id)
    async with get_async_session_context() as session:
        return await _purge(session, user_id)
