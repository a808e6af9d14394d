# flake8: noqa
# scripts/manage.py

"""
Catalog Admin API 관리용 CLI 입니다. 프로젝트 루트에서 실행합니다.

    python -m scripts.manage init-db
    python -m scripts.manage seed
    python -m scripts.manage create-admin -e admin@example.com -u admin
    python -m scripts.manage change-password -u admin
"""

import asyncio
import typer

from app.core.database import AsyncSessionLocal, create_db_and_tables, engine
from app.core.logging_config import setup_logging
from app.core.security import get_password_hash
from app.domains.usr import crud as usr_crud
from app.domains.usr import schemas as usr_schemas
from app.domains.usr.models import UserProfile
from app.services.seed_service import SeedService

cli = typer.Typer(help="Catalog Admin API management commands")


async def _run_and_dispose(coro) -> None:
    try:
        await coro
    finally:
        await engine.dispose()


@cli.command("init-db")
def init_db():
    """
    등록된 모든 테이블을 생성합니다 (개발 환경용, 기존 테이블은 유지).
    """
    setup_logging()
    asyncio.run(_run_and_dispose(create_db_and_tables()))
    print("데이터베이스 테이블 준비 완료.")


@cli.command()
def seed():
    """
    표준 단위(Gram, Tablespoon), 기본 사용자, 기본 창고를 생성합니다.
    """
    setup_logging()

    async def run_seed():
        async with AsyncSessionLocal() as db:
            result = await SeedService(db).seed_all()
        print(f"기본 사용자: {result['user'].username}, 기본 창고: {result['warehouse'].name}")

    asyncio.run(_run_and_dispose(run_seed()))


async def create_admin_user(db, user_in: usr_schemas.UserCreate) -> None:
    """
    데이터베이스에 관리자 사용자를 생성하는 비동기 함수
    """
    if await usr_crud.user.get_by_email(db, email=user_in.email):
        print(f"오류: 이미 존재하는 이메일입니다: {user_in.email}")
        return
    if await usr_crud.user.get_by_username(db, username=user_in.username):
        print(f"오류: 이미 존재하는 사용자명입니다: {user_in.username}")
        return

    await usr_crud.user.create(db, obj_in=user_in)
    print(f"관리자 계정이 성공적으로 생성되었습니다: {user_in.email} ({user_in.username})")


@cli.command("create-admin")
def create_admin(
    email: str = typer.Option(
        ..., '--email', '-e',
        prompt="관리자 이메일을 입력하세요",
        help="생성할 관리자 계정의 이메일 주소입니다."
    ),
    username: str = typer.Option(
        ..., '--username', '-u',
        prompt="관리자 사용자명(ID)을 입력하세요",
        help="로그인 시 사용할 사용자명(ID)입니다."
    ),
    password: str = typer.Option(
        ..., '--password', '-p',
        prompt="관리자 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
        help="생성할 관리자 계정의 비밀번호입니다. (최소 8자 이상)"
    ),
    first_name: str = typer.Option(
        "Admin", '--name', '-n',
        help="관리자의 이름입니다."
    ),
):
    """
    ADMIN 프로필을 가진 새 관리자 계정을 생성합니다.
    """
    if len(password) < 8:
        print("오류: 비밀번호는 최소 8자 이상이어야 합니다.")
        raise typer.Abort()

    user_data = usr_schemas.UserCreate(
        email=email,
        username=username,
        password=password,
        first_name=first_name,
        profiles=[UserProfile.ADMIN],
    )

    async def run_creation():
        async with AsyncSessionLocal() as db:
            await create_admin_user(db, user_data)

    asyncio.run(_run_and_dispose(run_creation()))


@cli.command("change-password")
def change_password(
    username: str = typer.Option("admin", '--username', '-u', help="비밀번호를 변경할 사용자명입니다."),
    new_password: str = typer.Option(
        ..., '--password', '-p',
        prompt="새 비밀번호를 입력하세요",
        hide_input=True,
        confirmation_prompt=True,
    ),
):
    """
    사용자의 비밀번호를 변경합니다.
    """
    if len(new_password) < 8:
        print("오류: 비밀번호는 최소 8자 이상이어야 합니다.")
        raise typer.Abort()

    async def run_change():
        async with AsyncSessionLocal() as db:
            user = await usr_crud.user.get_by_username(db, username=username)
            if user is None:
                print(f"오류: 사용자를 찾을 수 없습니다: {username}")
                return
            user.password_hash = get_password_hash(new_password)
            db.add(user)
            await db.commit()
            print(f"'{username}' 사용자의 비밀번호가 변경되었습니다.")

    asyncio.run(_run_and_dispose(run_change()))


if __name__ == "__main__":
    cli()
